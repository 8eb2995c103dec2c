"""Named scoring metrics used by cross-validation and best-learner selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    cohen_kappa_score,
    f1_score,
    hamming_loss,
    jaccard_score,
    matthews_corrcoef,
    mean_absolute_error,
    mean_squared_error,
    precision_score,
    r2_score,
    recall_score,
    zero_one_loss,
)

from ...exceptions import UnknownMetricError


@dataclass(frozen=True)
class Metric:
    """A pure ``(y_true, y_pred) -> float`` scorer and its optimisation direction."""

    name: str
    func: Callable[[Any, Any], float]
    greater_is_better: bool = True

    def __call__(self, y_true: Any, y_pred: Any) -> float:
        return float(self.func(_as_labels(y_true), _as_labels(y_pred)))

    def is_better(self, candidate: float, incumbent: float) -> bool:
        """Strict comparison; equal scores never replace the incumbent."""
        if self.greater_is_better:
            return candidate > incumbent
        return candidate < incumbent


def _as_labels(values: Any) -> np.ndarray:
    if isinstance(values, pd.DataFrame):
        values = values.iloc[:, 0]
    arr = np.asarray(values)
    # sklearn treats object arrays of non-strings as an "unknown" target type
    if arr.dtype == object:
        arr = pd.Series(arr).infer_objects().to_numpy()
    return arr


def _rmse(y_true: Any, y_pred: Any) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


# Label-averaged scores use the macro average so binary, multiclass and string
# labels all score without a positive-label setting.
_METRICS: Dict[str, Metric] = {
    m.name: m
    for m in [
        Metric("accuracy", accuracy_score),
        Metric("balanced_accuracy", balanced_accuracy_score),
        Metric("cohen_kappa", cohen_kappa_score),
        Metric("jaccard", lambda t, p: jaccard_score(t, p, average="macro", zero_division=0)),
        Metric("matthews_corrcoef", matthews_corrcoef),
        Metric("hamming_loss", hamming_loss, greater_is_better=False),
        Metric("zero_one_loss", zero_one_loss, greater_is_better=False),
        Metric("f1", lambda t, p: f1_score(t, p, average="macro", zero_division=0)),
        Metric("precision", lambda t, p: precision_score(t, p, average="macro", zero_division=0)),
        Metric("recall", lambda t, p: recall_score(t, p, average="macro", zero_division=0)),
        # Regression
        Metric("r2", r2_score),
        Metric("mean_squared_error", mean_squared_error, greater_is_better=False),
        Metric("mean_absolute_error", mean_absolute_error, greater_is_better=False),
        Metric("root_mean_squared_error", _rmse, greater_is_better=False),
    ]
}

_ALIASES: Dict[str, str] = {
    "accuracy_score": "accuracy",
    "balanced_accuracy_score": "balanced_accuracy",
    "cohen_kappa_score": "cohen_kappa",
    "kappa": "cohen_kappa",
    "jaccard_score": "jaccard",
    "matthews": "matthews_corrcoef",
    "mcc": "matthews_corrcoef",
    "f1_score": "f1",
    "precision_score": "precision",
    "recall_score": "recall",
    "r2_score": "r2",
    "mse": "mean_squared_error",
    "mae": "mean_absolute_error",
    "rmse": "root_mean_squared_error",
}


def get_metric(name: str) -> Metric:
    """Look up a metric by name or alias."""
    key = _ALIASES.get(name, name)
    try:
        return _METRICS[key]
    except KeyError:
        raise UnknownMetricError(name, available_metrics()) from None


def register_metric(name: str, func: Callable[[Any, Any], float], greater_is_better: bool = True) -> Metric:
    """Add (or replace) a named metric."""
    metric = Metric(name, func, greater_is_better)
    _METRICS[name] = metric
    return metric


def available_metrics() -> List[str]:
    return sorted(_METRICS)
