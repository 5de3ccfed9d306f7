"""
Evaluation Module
Project: Motor Insurance Renewal Analysis
Purpose: Score fitted models on the holdout subset (confusion matrix, accuracy, ROC AUC)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.metrics import confusion_matrix, roc_auc_score, roc_curve

from . import config

_LABEL_CODES = {"yes": 1, "no": 0, "true": 1, "false": 0, "1": 1, "0": 0}


def to_binary_labels(values) -> np.ndarray:
    """Map Yes/No, True/False or 1/0 labels to a 0/1 integer array."""
    series = pd.Series(values)
    if pd.api.types.is_bool_dtype(series):
        out = series.astype(int)
    elif pd.api.types.is_numeric_dtype(series):
        if not series.isin([0, 1]).all():
            raise ValueError("Binary labels must be 0 or 1")
        out = series.astype(int)
    else:
        out = series.astype(str).str.strip().str.lower().map(_LABEL_CODES)
        if out.isnull().any():
            bad = sorted(series[out.isnull()].astype(str).unique())
            raise ValueError(f"Cannot interpret labels as binary: {bad}")
        out = out.astype(int)
    return out.to_numpy()


@dataclass(frozen=True)
class ConfusionCounts:
    """Counts of a binary confusion matrix (positive class = renewed)."""
    tn: int
    fp: int
    fn: int
    tp: int

    @property
    def total(self) -> int:
        return self.tn + self.fp + self.fn + self.tp

    @property
    def accuracy(self) -> float:
        return accuracy_from_confusion(self)

    def as_frame(self) -> pd.DataFrame:
        return pd.DataFrame([[self.tn, self.fp], [self.fn, self.tp]],
                            index=pd.Index(config.TARGET_LABELS, name='actual'),
                            columns=pd.Index(config.TARGET_LABELS, name='predicted'))


def confusion_counts(y_true, y_pred) -> ConfusionCounts:
    """Confusion matrix counts for 0/1 (or Yes/No) truth and predictions."""
    cm = confusion_matrix(to_binary_labels(y_true), to_binary_labels(y_pred), labels=[0, 1])
    tn, fp, fn, tp = (int(v) for v in cm.ravel())
    return ConfusionCounts(tn=tn, fp=fp, fn=fn, tp=tp)


def accuracy_from_confusion(counts: ConfusionCounts) -> float:
    """(true positives + true negatives) / total."""
    if counts.total == 0:
        raise ValueError("Accuracy is undefined for an empty confusion matrix")
    return (counts.tp + counts.tn) / counts.total


def is_probabilistic(scores: np.ndarray) -> bool:
    """Discrete 0/1 predictions are used as-is; anything else is a probability."""
    return not np.isin(scores, [0.0, 1.0]).all()


@dataclass
class EvaluationResult:
    model: str
    confusion: ConfusionCounts
    accuracy: float
    roc_auc: float
    fpr: np.ndarray = field(repr=False)
    tpr: np.ndarray = field(repr=False)


class ModelEvaluator:
    """Holdout metrics and plots for each fitted model"""

    def __init__(self, threshold=config.PROBABILITY_THRESHOLD, save_dir=None):
        self.threshold = threshold
        self.save_dir = Path(save_dir) if save_dir is not None else None
        if self.save_dir is not None:
            self.save_dir.mkdir(parents=True, exist_ok=True)

    def evaluate(self, name: str, y_true, scores) -> EvaluationResult:
        """
        Score one model on the holdout subset

        Args:
            name: Model label used in printouts and plots
            y_true: True renewal labels (Yes/No or 1/0)
            scores: P(renewed = Yes) per row, or discrete 0/1 / Yes/No predictions
        Returns:
            EvaluationResult with confusion counts, accuracy and ROC AUC
        """
        y = to_binary_labels(y_true)
        try:
            s = np.asarray(scores, dtype=float)
        except (TypeError, ValueError):
            s = to_binary_labels(scores).astype(float)

        if is_probabilistic(s):
            y_pred = (s >= self.threshold).astype(int)
        else:
            y_pred = s.astype(int)

        counts = confusion_counts(y, y_pred)
        if len(np.unique(y)) < 2:
            print(f"[WARN] {name}: only one class in the holdout labels, ROC AUC undefined")
            auc, fpr, tpr = np.nan, np.array([]), np.array([])
        else:
            auc = float(roc_auc_score(y, s))
            fpr, tpr, _ = roc_curve(y, s)

        result = EvaluationResult(name, counts, counts.accuracy, auc, fpr, tpr)
        print(f"\n[HOLD-OUT] {name}")
        print(counts.as_frame())
        print({"accuracy": round(result.accuracy, 4), "roc_auc": round(result.roc_auc, 4)})
        return result

    def _finish(self, fig, name):
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

    def plot_confusion_matrix(self, result: EvaluationResult):
        fig, ax = plt.subplots(figsize=(4, 4))
        sns.heatmap(result.confusion.as_frame(), annot=True, fmt='d', cbar=False, ax=ax)
        ax.set_title(f'Confusion Matrix - {result.model}')
        ax.set_xlabel('Predicted')
        ax.set_ylabel('Actual')
        slug = result.model.lower().replace(' ', '_')
        return self._finish(fig, f'cm_{slug}')

    def plot_roc_curves(self, results: Iterable[EvaluationResult]):
        fig, ax = plt.subplots(figsize=(5, 5))
        for result in results:
            if len(result.fpr):
                ax.plot(result.fpr, result.tpr, label=f'{result.model} AUC={result.roc_auc:.3f}')
        ax.plot([0, 1], [0, 1], 'k--', alpha=0.5)
        ax.set_xlabel('False positive rate')
        ax.set_ylabel('True positive rate')
        ax.set_title('ROC Curves (holdout)')
        ax.legend()
        return self._finish(fig, 'roc_curves')

    @staticmethod
    def summary_table(results: Iterable[EvaluationResult]) -> pd.DataFrame:
        """Accuracy/AUC table, one row per model."""
        results = list(results)
        return pd.DataFrame({
            'model': [r.model for r in results],
            'accuracy': [r.accuracy for r in results],
            'roc_auc': [r.roc_auc for r in results],
            'tp': [r.confusion.tp for r in results],
            'tn': [r.confusion.tn for r in results],
            'fp': [r.confusion.fp for r in results],
            'fn': [r.confusion.fn for r in results],
        })

    def write_metrics_summary(self, out_file, results: List[EvaluationResult], label_rate: float,
                              extra: Dict[str, str] = None) -> Path:
        """Plain-text metric report for the write-up."""
        out_file = Path(out_file)
        out_file.parent.mkdir(parents=True, exist_ok=True)
        with out_file.open("w", encoding="utf-8") as f:
            f.write("Renewal Models: Metric Summary\n")
            f.write("==============================\n\n")
            f.write(f"Renewal rate in the clean data: {label_rate:.4f}\n")
            f.write(f"Probability threshold for class predictions: {self.threshold}\n\n")
            f.write(self.summary_table(results).round(4).to_string(index=False))
            f.write("\n\nConfusion matrices (rows = actual, columns = predicted):\n")
            for result in results:
                f.write(f"\n{result.model}\n")
                f.write(result.confusion.as_frame().to_string())
                f.write("\n")
            for key, value in (extra or {}).items():
                f.write(f"\n{key}: {value}\n")
        print(f"[SAVED] {out_file}")
        return out_file
