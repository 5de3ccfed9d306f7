import sys

from .main import main

sys.exit(0 if main() is not None else 1)
