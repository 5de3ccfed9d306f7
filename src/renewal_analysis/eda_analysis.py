"""
Exploratory Data Analysis (EDA) Module
Project: Motor Insurance Renewal Analysis
Purpose: Plots and group-wise summaries of policy variables against the renewal outcome
"""

from pathlib import Path

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

from . import config


class EDAAnalyzer:
    """
    Class to perform exploratory data analysis of renewal behaviour
    """

    def __init__(self, figsize=(10, 6), save_dir=None, target_column=config.TARGET_COL):
        """
        Initialize EDA Analyzer with basic matplotlib settings
        Args:
            figsize (tuple): Default figure size
            save_dir (str or Path): Write figures here as PNG; show them on screen if None
            target_column (str): Renewal label column
        """
        self.figsize = figsize
        self.save_dir = Path(save_dir) if save_dir is not None else None
        self.target_column = target_column
        plt.rcParams['figure.figsize'] = figsize
        plt.rcParams['font.size'] = 10
        if self.save_dir is not None:
            self.save_dir.mkdir(parents=True, exist_ok=True)

    def _finish(self, fig, name):
        """Save the figure under save_dir (or show it) and release it."""
        fig.tight_layout()
        if self.save_dir is None:
            plt.show()
            plt.close(fig)
            return None
        path = self.save_dir / f"{name}.png"
        fig.savefig(path, dpi=150)
        plt.close(fig)
        print(f"[SAVED] {path}")
        return path

    def _grid(self, n_plots, n_cols=2, height=4):
        n_cols = min(n_cols, n_plots)
        n_rows = (n_plots + n_cols - 1) // n_cols
        fig, axes = plt.subplots(n_rows, n_cols, figsize=(12, height * n_rows), squeeze=False)
        axes = axes.flatten()
        for ax in axes[n_plots:]:
            fig.delaxes(ax)
        return fig, axes[:n_plots]

    def basic_data_overview(self, data):
        """
        Basic overview: structure, statistical summary and label distribution
        """
        print("=" * 60)
        print("BASIC DATA OVERVIEW")
        print("=" * 60)

        print(f"Dataset shape: {data.shape}")
        print(f"\nBasic statistical summary:")
        print(data.describe().round(2))

        print(f"\nTarget variable '{self.target_column}' distribution:")
        counts = data[self.target_column].value_counts()
        percentages = data[self.target_column].value_counts(normalize=True) * 100
        for value, count in counts.items():
            print(f"  {value}: {count} ({percentages[value]:.1f}%)")

    def plot_density_by_target(self, data, columns=tuple(config.CONTINUOUS_COLS)):
        """
        Density of each continuous variable, one curve per renewal outcome
        """
        print(f"\n[EDA] Density plots for {len(columns)} continuous variables")
        fig, axes = self._grid(len(columns))
        for ax, col in zip(axes, columns):
            sns.kdeplot(data=data, x=col, hue=self.target_column, common_norm=False,
                        fill=True, alpha=0.3, ax=ax, warn_singular=False)
            ax.set_title(f'{col} by {self.target_column}')
        return self._finish(fig, 'density_by_renewed')

    def plot_categorical_by_target(self, data, columns=tuple(config.CATEGORICAL_COLS)):
        """
        Proportion of renewals within each level of each categorical variable
        """
        print(f"\n[EDA] Bar charts for {len(columns)} categorical variables")
        fig, axes = self._grid(len(columns))
        for ax, col in zip(axes, columns):
            shares = pd.crosstab(data[col], data[self.target_column], normalize='index')
            shares.plot.bar(stacked=True, ax=ax, rot=35)
            ax.set_title(f'{self.target_column} share by {col}')
            ax.set_ylabel('Proportion')
            ax.legend(title=self.target_column, fontsize=8)
        return self._finish(fig, 'categorical_by_renewed')

    def plot_boxplots_by_target(self, data, columns=tuple(config.CONTINUOUS_COLS)):
        """
        Boxplots of continuous variables split by renewal outcome
        """
        print(f"\n[EDA] Boxplots for {len(columns)} continuous variables")
        fig, axes = self._grid(len(columns))
        for ax, col in zip(axes, columns):
            sns.boxplot(data=data, x=self.target_column, y=col, ax=ax)
            ax.set_title(f'{col} by {self.target_column}')
        return self._finish(fig, 'boxplots_by_renewed')

    def plot_correlation_heatmap(self, corr):
        """
        Annotated heatmap of a correlation matrix
        """
        print(f"\n[EDA] Correlation matrix for {len(corr.columns)} variables:")
        print(corr.round(3))

        fig, ax = plt.subplots(figsize=(10, 8))
        sns.heatmap(corr, annot=True, fmt='.2f', cmap='coolwarm', vmin=-1, vmax=1,
                    annot_kws={'fontsize': 8}, ax=ax)
        ax.set_title('Correlation Matrix Heatmap')
        return self._finish(fig, 'correlation_heatmap')

    def renewal_rate_by_group(self, data, column):
        """
        Policies, renewals and renewal rate per level of `column`

        Over grouped_change_in_price this is the price elasticity view:
        how the renewal rate moves as the price change gets larger.
        """
        is_yes = (data[self.target_column] == config.POSITIVE_LABEL).astype(int)
        grouped = is_yes.groupby(data[column], observed=True).agg(['count', 'sum', 'mean'])
        grouped.columns = ['policies', 'renewals', 'renewal_rate']
        grouped['renewal_rate'] = grouped['renewal_rate'] * 100

        print(f"\n[EDA] Renewal rate (%) by {column}:")
        print(grouped.round(2))
        return grouped

    def group_means_by_target(self, data, columns=tuple(config.CONTINUOUS_COLS)):
        """
        Mean, std and count of each continuous variable per renewal outcome
        """
        print(f"\n[EDA] Continuous variables by {self.target_column}:")
        summary = data.groupby(self.target_column, observed=True)[list(columns)].agg(['mean', 'std', 'count'])
        print(summary.round(2))
        return summary

    def skewness_report(self, data, columns=tuple(config.CONTINUOUS_COLS)):
        """Highly skewed distributions are candidates for a log transform."""
        skew = data[list(columns)].skew(numeric_only=True).sort_values(ascending=False)
        print("[Insight] Distribution summary (top skew):")
        for col, val in skew.head(3).items():
            print(f"  - {col}: skew={val:.2f}{' (log-transform candidate)' if val > 1.0 else ''}")
        return skew
