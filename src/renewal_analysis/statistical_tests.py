"""
Statistical Tests Module
Project: Motor Insurance Renewal Analysis
Purpose: Bivariate hypothesis tests between each candidate variable and the renewal outcome
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np
import pandas as pd
from scipy import stats

from . import config


@dataclass
class ChiSquareResult:
    """Pearson chi-squared test of independence between renewed and one categorical variable."""
    variable: str
    statistic: float
    p_value: float
    dof: int
    contingency: pd.DataFrame = field(repr=False)
    low_expected_counts: bool = False
    status: str = "success"


@dataclass
class TTestResult:
    """Welch two-sample t-test of one continuous variable grouped by renewed."""
    variable: str
    statistic: float
    dof: float
    p_value: float
    mean_no: float
    mean_yes: float
    status: str = "success"


def as_numeric(series: pd.Series) -> pd.Series:
    """Numeric view of a column; categorical buckets become their category codes."""
    if pd.api.types.is_numeric_dtype(series) and not isinstance(series.dtype, pd.CategoricalDtype):
        return series.astype(float)
    codes = series.astype('category').cat.codes.astype(float)
    return codes.where(codes >= 0)


class StatisticalTester:
    """Run chi-squared, Welch t-tests and correlations against the renewal label"""

    def __init__(self, target_column=config.TARGET_COL, alpha=config.ALPHA,
                 min_expected_count=config.MIN_EXPECTED_COUNT):
        self.target_column = target_column
        self.alpha = alpha
        self.min_expected_count = min_expected_count

    def chi_square_test(self, data: pd.DataFrame, column: str) -> ChiSquareResult:
        """
        Pearson chi-squared test of independence between renewed and `column`.

        No correction for multiple comparisons is applied across variables. When
        any expected cell count is below `min_expected_count` the p-value is
        unreliable; the result is flagged rather than rejected.
        """
        table = pd.crosstab(data[column], data[self.target_column])
        # Unobserved category levels would give zero expected frequencies
        table = table.loc[table.sum(axis=1) > 0, table.sum(axis=0) > 0]
        if table.shape[0] < 2 or table.shape[1] < 2:
            return ChiSquareResult(column, np.nan, np.nan, 0, table, status="insufficient_data")

        chi2, p, dof, expected = stats.chi2_contingency(table)
        low_expected = bool((expected < self.min_expected_count).any())
        if low_expected:
            print(f"[WARN] {column}: expected cell counts below {self.min_expected_count}, "
                  f"chi-squared p-value may be unreliable")
        return ChiSquareResult(column, float(chi2), float(p), int(dof), table, low_expected)

    def welch_t_test(self, data: pd.DataFrame, column: str) -> TTestResult:
        """
        Welch's t-test (unequal variances) of `column` for renewed = No vs Yes.
        """
        no_label, yes_label = config.TARGET_LABELS
        group_no = data.loc[data[self.target_column] == no_label, column].dropna().astype(float)
        group_yes = data.loc[data[self.target_column] == yes_label, column].dropna().astype(float)

        if len(group_no) < 2 or len(group_yes) < 2:
            return TTestResult(column, np.nan, np.nan, np.nan,
                               group_no.mean(), group_yes.mean(), status="insufficient_data")

        result = stats.ttest_ind(group_no, group_yes, equal_var=False)
        return TTestResult(
            variable=column,
            statistic=float(result.statistic),
            dof=float(result.df),
            p_value=float(result.pvalue),
            mean_no=float(group_no.mean()),
            mean_yes=float(group_yes.mean()),
        )

    def correlation_matrix(self, data: pd.DataFrame,
                           columns: Iterable[str] = tuple(config.CORRELATION_COLS)) -> pd.DataFrame:
        """Pearson correlation matrix across the continuous variables."""
        numeric = pd.DataFrame({col: as_numeric(data[col]) for col in columns})
        return numeric.corr(method='pearson')

    def run_categorical_tests(self, data: pd.DataFrame,
                              columns: Iterable[str] = tuple(config.CATEGORICAL_COLS)) -> pd.DataFrame:
        """Chi-squared test for every categorical variable, as one summary table."""
        print("\n[STATS] Chi-squared tests of independence with renewed")
        results: List[ChiSquareResult] = [self.chi_square_test(data, col) for col in columns]
        summary = pd.DataFrame({
            'variable': [r.variable for r in results],
            'chi2': [r.statistic for r in results],
            'dof': [r.dof for r in results],
            'p_value': [r.p_value for r in results],
            'low_expected_counts': [r.low_expected_counts for r in results],
            'status': [r.status for r in results],
        })
        summary['significant'] = summary['p_value'] < self.alpha
        print(summary.round(4).to_string(index=False))
        return summary

    def run_continuous_tests(self, data: pd.DataFrame,
                             columns: Iterable[str] = tuple(config.CONTINUOUS_COLS)) -> pd.DataFrame:
        """Welch t-test for every continuous variable, as one summary table."""
        print("\n[STATS] Welch two-sample t-tests by renewed")
        results: List[TTestResult] = [self.welch_t_test(data, col) for col in columns]
        summary = pd.DataFrame({
            'variable': [r.variable for r in results],
            't': [r.statistic for r in results],
            'dof': [r.dof for r in results],
            'p_value': [r.p_value for r in results],
            'mean_no': [r.mean_no for r in results],
            'mean_yes': [r.mean_yes for r in results],
            'status': [r.status for r in results],
        })
        summary['significant'] = summary['p_value'] < self.alpha
        print(summary.round(4).to_string(index=False))
        return summary
