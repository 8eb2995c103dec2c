from typing import Any, Callable, Dict, List, Optional, Set

import numpy as np
import pandas as pd


def _is_binary_numeric(series: pd.Series) -> bool:
    """True for 0/1 indicator columns (missing values ignored)."""
    unique_vals = series.dropna().unique()
    if len(unique_vals) > 2:
        return False

    for val in unique_vals:
        if not (np.isclose(val, 0) or np.isclose(val, 1)):
            return False
    return True


def detect_numeric_columns(frame: pd.DataFrame) -> List[str]:
    """Columns with a numeric (non-boolean) dtype, in frame order."""
    detected: List[str] = []
    for column in frame.columns:
        dtype = frame[column].dtype
        if pd.api.types.is_bool_dtype(dtype):
            continue
        if pd.api.types.is_numeric_dtype(dtype):
            detected.append(column)
    return detected


def detect_categorical_columns(frame: pd.DataFrame) -> List[str]:
    """Columns holding strings, categories or booleans, in frame order."""
    return frame.select_dtypes(include=["object", "category", "bool", "string"]).columns.tolist()


def detect_low_cardinality_numeric(frame: pd.DataFrame, max_categories: int) -> List[str]:
    """
    Numeric columns that look categorical.

    1. Excludes non-numeric columns.
    2. Counts distinct non-missing values.
    3. Keeps columns with at most ``max_categories`` distinct values
       (binary 0/1 columns always qualify).
    """
    detected: List[str] = []
    for column in detect_numeric_columns(frame):
        valid = frame[column].dropna()
        if valid.empty:
            continue
        if _is_binary_numeric(valid) or valid.nunique() <= max_categories:
            detected.append(column)
    return detected


def resolve_columns(
    df: pd.DataFrame,
    config: Dict[str, Any],
    default_selection_func: Optional[Callable[[pd.DataFrame], List[str]]] = None,
) -> List[str]:
    """
    Columns a node should act on.

    An explicit ``config["columns"]`` wins (names absent from ``df`` are dropped).
    Otherwise ``default_selection_func`` picks them, and without one every column
    of ``df`` is used.
    """
    cols = config.get("columns")

    if cols:
        return [c for c in cols if c in df.columns]

    if default_selection_func:
        return [c for c in default_selection_func(df) if c in df.columns]

    return list(df.columns)


def make_unique_columns(columns: List[Any]) -> List[Any]:
    """
    Suffix repeated column names with ``_1``, ``_2``, ... in order of appearance.

    The first occurrence keeps its name. Generated names skip over names that are
    already taken.
    """
    seen: Set[Any] = set()
    counts: Dict[Any, int] = {}
    unique: List[Any] = []

    for col in columns:
        if col not in seen:
            seen.add(col)
            unique.append(col)
            continue

        n = counts.get(col, 0)
        candidate = f"{col}_{n + 1}"
        while candidate in seen or candidate in columns:
            n += 1
            candidate = f"{col}_{n + 1}"
        counts[col] = n + 1
        seen.add(candidate)
        unique.append(candidate)

    return unique


def merge_params(
    default_params: Dict[str, Any],
    config: Optional[Dict[str, Any]],
    reserved_keys: Set[str],
) -> Dict[str, Any]:
    """
    Estimator keyword arguments: defaults overridden by node config.

    Overrides come from ``config['params']`` when present, otherwise from the
    top-level config keys minus ``reserved_keys``.
    """
    params = dict(default_params)
    if not config:
        return params
    overrides = config.get("params") or {
        k: v for k, v in config.items() if k not in reserved_keys and k != "params"
    }
    params.update(overrides)
    return params
