from typing import Any, Dict, List, Optional, Type

import pandas as pd
from sklearn.base import TransformerMixin

from ..utils import detect_numeric_columns, merge_params, resolve_columns
from .base import BaseApplier, BaseCalculator, StatefulTransformer


class SklearnTransformerCalculator(BaseCalculator):
    """Fits a scikit-learn transformer on the resolved (numeric by default) columns."""

    def __init__(self, transformer_class: Type[TransformerMixin], default_params: Dict[str, Any]):
        self.transformer_class = transformer_class
        self.default_params = default_params

    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = resolve_columns(df, config, detect_numeric_columns)
        if not cols:
            return {}

        transformer = self.transformer_class(**merge_params(self.default_params, config, {"columns", "type"}))
        transformer.fit(df[cols])

        return {
            "type": self.transformer_class.__name__,
            "columns": cols,
            "transformer_object": transformer,
            "feature_names": _feature_names(transformer, df[cols]),
        }


class SklearnTransformerApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        if not params or not params.get("columns"):
            return df

        cols: List[Any] = params["columns"]
        feature_names: List[Any] = params["feature_names"]
        transformed = pd.DataFrame(
            params["transformer_object"].transform(df[cols]),
            columns=feature_names,
            index=df.index,
        )

        # Scalers/imputers keep column names: replace in place
        if feature_names == cols:
            df_out = df.copy()
            df_out[cols] = transformed
            return df_out

        # Projections (PCA, ICA, ...) replace the input columns with new features
        return pd.concat([df.drop(columns=cols), transformed], axis=1)


def _feature_names(transformer: Any, sample: pd.DataFrame) -> List[Any]:
    cols = list(sample.columns)
    if hasattr(transformer, "get_feature_names_out"):
        names = [str(n) for n in transformer.get_feature_names_out(cols)]
        # Preserve the original labels when the transformer keeps its inputs
        return cols if names == [str(c) for c in cols] else names
    n_out = transformer.transform(sample.iloc[:1]).shape[1]
    prefix = type(transformer).__name__.lower()
    return [f"{prefix}{i}" for i in range(n_out)]


def sklearn_transformer(
    name: str,
    transformer_class: Type[TransformerMixin],
    params: Optional[Dict[str, Any]] = None,
    columns: Optional[List[Any]] = None,
) -> StatefulTransformer:
    """Wrap any scikit-learn transformer class as an atomic pipeline node."""
    config: Dict[str, Any] = {}
    if columns:
        config["columns"] = list(columns)
    return StatefulTransformer(
        name=name,
        calculator=SklearnTransformerCalculator(transformer_class, params or {}),
        applier=SklearnTransformerApplier(),
        config=config,
    )
