"""Exploratory analysis and renewal models for motor insurance policies."""

__version__ = "0.1.0"
