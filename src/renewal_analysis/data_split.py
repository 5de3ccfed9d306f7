"""
Train/Test Split Module
Project: Motor Insurance Renewal Analysis
Purpose: Reproducible partitions of the clean policy table for model fitting and evaluation
"""
from __future__ import annotations

from typing import Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from . import config


def _check_fraction(train_fraction: float) -> None:
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be between 0 and 1 (exclusive), got {train_fraction}")


def random_split(data: pd.DataFrame, train_fraction: float = config.TRAIN_FRACTION,
                 seed: int = config.SEED) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Simple random permutation split.

    Row index labels are kept, so the two subsets can be checked for overlap and
    for covering the input exactly once. Same seed and same input -> same split.
    """
    _check_fraction(train_fraction)
    train, test = train_test_split(data, train_size=train_fraction, shuffle=True, random_state=seed)
    print(f"[SPLIT] random {train_fraction:.0%}/{1 - train_fraction:.0%}: "
          f"train={len(train)}, test={len(test)}")
    return train, test


def stratified_split(data: pd.DataFrame, train_fraction: float = config.STRATIFIED_TRAIN_FRACTION,
                     seed: int = config.SEED,
                     stratify_column: str = config.TARGET_COL) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split that keeps the share of each label level the same in both subsets."""
    _check_fraction(train_fraction)
    train, test = train_test_split(data, train_size=train_fraction, shuffle=True, random_state=seed,
                                   stratify=data[stratify_column])
    print(f"[SPLIT] stratified on {stratify_column} {train_fraction:.0%}/{1 - train_fraction:.0%}: "
          f"train={len(train)}, test={len(test)}")
    return train, test
