import logging
from typing import Any, Dict, List

import numpy as np
import pandas as pd
from sklearn.preprocessing import OneHotEncoder

from ..utils import detect_categorical_columns, resolve_columns
from .base import BaseApplier, BaseCalculator

logger = logging.getLogger(__name__)

_MISSING_TOKEN = "__missing__"


def _prepare_categories(frame: pd.DataFrame, include_missing: bool) -> pd.DataFrame:
    """Cast categorical columns to strings so fit and apply see identical labels."""
    prepared = frame.copy()
    if include_missing:
        prepared = prepared.fillna(_MISSING_TOKEN)
    for col in prepared.columns:
        prepared[col] = prepared[col].astype(str)
    return prepared


# --- OneHot Encoder ---
class OneHotEncoderCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = resolve_columns(df, config, detect_categorical_columns)

        if not cols:
            return {}

        # Config
        drop = "first" if config.get("drop_first", False) else None
        max_categories = config.get("max_categories")
        handle_unknown = "ignore" if config.get("handle_unknown", "ignore") == "ignore" else "error"
        drop_original = config.get("drop_original", True)
        include_missing = config.get("include_missing", True)

        df_fit = _prepare_categories(df[cols], include_missing)

        # sparse_output=False to return dense arrays for pandas
        encoder = OneHotEncoder(
            drop=drop,
            max_categories=max_categories,
            handle_unknown=handle_unknown,
            sparse_output=False,
            dtype=np.int8,
        )
        encoder.fit(df_fit)

        for i, col in enumerate(cols):
            n_cats = len(encoder.categories_[i])
            if drop == "first" and n_cats == 1:
                logger.warning(
                    f"OneHotEncoder: Column '{col}' has only 1 category ('{encoder.categories_[i][0]}') "
                    "and drop_first is enabled. It produces no encoded features."
                )

        feature_names: List[str] = encoder.get_feature_names_out(cols).tolist()
        return {
            "type": "onehot",
            "columns": cols,
            "encoder_object": encoder,
            "feature_names": feature_names,
            "categories_count": {col: len(encoder.categories_[i]) for i, col in enumerate(cols)},
            "drop_original": drop_original,
            "include_missing": include_missing,
        }


class OneHotEncoderApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        if not params or not params.get("columns"):
            return df

        cols = params["columns"]
        encoder = params["encoder_object"]
        feature_names = params["feature_names"]

        X_sub = _prepare_categories(df[cols], params.get("include_missing", True))
        encoded_df = pd.DataFrame(
            encoder.transform(X_sub),
            columns=feature_names,
            index=df.index,
        )

        X_out = df
        if params.get("drop_original", True):
            X_out = df.drop(columns=cols)

        return pd.concat([X_out, encoded_df], axis=1)
