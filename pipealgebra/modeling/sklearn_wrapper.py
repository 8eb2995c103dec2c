"""Adapters that turn scikit-learn estimators into learner nodes."""

from typing import Any, Dict, Optional, Type

import pandas as pd
from sklearn.base import BaseEstimator

from ..utils import merge_params
from .base import BaseModelApplier, BaseModelCalculator, StatefulEstimator

# Keys that configure the node rather than the estimator
_RESERVED_KEYS = {"type", "columns"}


class SklearnCalculator(BaseModelCalculator):
    def __init__(self, model_class: Type[BaseEstimator], default_params: Dict[str, Any], problem_type: str):
        self.model_class = model_class
        self.default_params = default_params
        self._problem_type = problem_type

    @property
    def problem_type(self) -> str:
        return self._problem_type

    def fit(self, X: pd.DataFrame, y: pd.Series, config: Dict[str, Any]) -> Any:
        model = self.model_class(**merge_params(self.default_params, config, _RESERVED_KEYS))
        model.fit(X, y)
        return model


class SklearnApplier(BaseModelApplier):
    def predict(self, df: pd.DataFrame, model_artifact: Any) -> pd.Series:
        return pd.Series(model_artifact.predict(df), index=df.index)

    def predict_proba(self, df: pd.DataFrame, model_artifact: Any) -> Optional[pd.DataFrame]:
        # Regressors and margin-only classifiers have no probabilities
        if not hasattr(model_artifact, "predict_proba"):
            return None
        return pd.DataFrame(
            model_artifact.predict_proba(df),
            columns=model_artifact.classes_,
            index=df.index,
        )


def sklearn_learner(
    name: str,
    model_class: Type[BaseEstimator],
    params: Optional[Dict[str, Any]] = None,
    problem_type: str = "classification",
    output: str = "predict",
) -> StatefulEstimator:
    """Wrap any scikit-learn estimator class as an atomic learner node."""
    return StatefulEstimator(
        name=name,
        calculator=SklearnCalculator(model_class, params or {}, problem_type),
        applier=SklearnApplier(),
        output=output,
    )
