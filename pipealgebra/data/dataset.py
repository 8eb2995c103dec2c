from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from ..exceptions import ShapeMismatchError


@dataclass
class Fold:
    """Disjoint train/test row positions for one cross-validation fold."""

    index: int
    train_index: np.ndarray
    test_index: np.ndarray

    @property
    def train_size(self) -> int:
        return int(len(self.train_index))

    @property
    def test_size(self) -> int:
        return int(len(self.test_index))


def as_frame(data: Any) -> pd.DataFrame:
    """Coerce features to a DataFrame. Arrays get positional ``x0, x1, ...`` names."""
    if isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, pd.Series):
        return data.to_frame(name=data.name if data.name is not None else "x0")
    if isinstance(data, dict):
        return pd.DataFrame(data)

    arr = np.asarray(data)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ShapeMismatchError(
            f"Features must be 2-dimensional, got {arr.ndim} dimensions",
            {"ndim": int(arr.ndim)},
        )
    return pd.DataFrame(arr, columns=[f"x{i}" for i in range(arr.shape[1])])


def as_target(target: Any, features: pd.DataFrame) -> Optional[pd.Series]:
    """
    Align a target to the feature rows.

    Any 1-D array-like is accepted. The result shares the features' index so that
    row selection with ``iloc`` keeps both sides aligned.
    """
    if target is None:
        return None

    if isinstance(target, pd.DataFrame):
        if target.shape[1] != 1:
            raise ShapeMismatchError(
                f"Target must have a single column, got {target.shape[1]}",
                {"target_columns": list(target.columns)},
            )
        target = target.iloc[:, 0]

    name = target.name if isinstance(target, pd.Series) else "target"
    values = np.asarray(target)
    if values.ndim != 1:
        raise ShapeMismatchError(
            f"Target must be 1-dimensional, got {values.ndim} dimensions",
            {"ndim": int(values.ndim)},
        )

    check_alignment(features, values)
    return pd.Series(values, index=features.index, name=name)


def check_alignment(features: pd.DataFrame, target: Any) -> None:
    """Raise ShapeMismatchError unless features and target have equal row counts."""
    n_rows = features.shape[0]
    n_target = len(target)
    if n_rows != n_target:
        raise ShapeMismatchError(
            f"Feature rows ({n_rows}) and target length ({n_target}) differ",
            {"feature_rows": n_rows, "target_rows": n_target},
        )
