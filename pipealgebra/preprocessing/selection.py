"""Column selectors: categorical / numeric feature filters and the cat-num discriminator."""

import logging
from typing import Any, Dict

import pandas as pd

from ..exceptions import ShapeMismatchError
from ..utils import (
    detect_categorical_columns,
    detect_low_cardinality_numeric,
    detect_numeric_columns,
    resolve_columns,
)
from .base import BaseApplier, BaseCalculator

logger = logging.getLogger(__name__)


class ColumnSelectorApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        cols = params.get("columns", [])
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise ShapeMismatchError(
                f"Selected columns missing from input: {missing}",
                {"missing_columns": missing},
            )
        return df[cols].copy()


# --- Categorical Feature Selector ---
class CategoricalSelectorCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = resolve_columns(df, config, detect_categorical_columns)
        if not cols:
            logger.warning("CategoricalSelector: no categorical columns found; output will be empty.")
        return {"type": "categorical_selector", "columns": cols}


class CategoricalSelectorApplier(ColumnSelectorApplier):
    pass


# --- Numeric Feature Selector ---
class NumericSelectorCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = resolve_columns(df, config, detect_numeric_columns)
        if not cols:
            logger.warning("NumericSelector: no numeric columns found; output will be empty.")
        return {"type": "numeric_selector", "columns": cols}


class NumericSelectorApplier(ColumnSelectorApplier):
    pass


# --- Cat/Num Discriminator ---
class CatNumDiscriminatorCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'max_categories': 24, 'columns': [...]}
        max_categories = config.get("max_categories", 24)
        cols = resolve_columns(
            df, config, lambda frame: detect_low_cardinality_numeric(frame, max_categories)
        )
        return {
            "type": "catnum_discriminator",
            "columns": cols,
            "max_categories": max_categories,
        }


class CatNumDiscriminatorApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        cols = [c for c in params.get("columns", []) if c in df.columns]
        if not cols:
            return df

        df_out = df.copy()
        for col in cols:
            series = df_out[col]
            # Keep missing values missing; everything else becomes a string label
            df_out[col] = series.where(series.isna(), series.astype(str)).astype(object)
        return df_out


# --- Passthrough ---
class PassthroughCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        return {"type": "passthrough", "columns": list(df.columns)}


class PassthroughApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        return df.copy()
