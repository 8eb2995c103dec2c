import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from ..data.dataset import as_frame
from ..exceptions import NotFittedError, ShapeMismatchError
from ..nodes.base import Node

logger = logging.getLogger(__name__)


class BaseModelCalculator(ABC):
    @property
    @abstractmethod
    def problem_type(self) -> str:
        """'classification' or 'regression'."""
        pass

    @abstractmethod
    def fit(self, X: pd.DataFrame, y: pd.Series, config: Dict[str, Any]) -> Any:
        """Fit and return a model artifact; the node stores it as its state."""
        pass


class BaseModelApplier(ABC):
    @abstractmethod
    def predict(self, df: pd.DataFrame, model_artifact: Any) -> pd.Series:
        """One prediction per row, indexed like ``df``."""
        pass

    def predict_proba(self, df: pd.DataFrame, model_artifact: Any) -> Optional[pd.DataFrame]:
        """Class probabilities (one column per class), or None when unsupported."""
        return None


class StatefulEstimator(Node):
    """
    Atomic learner node.

    ``fit`` requires a target aligned with the features. ``transform`` returns the
    predictions as a one-column frame named after the node, so a learner can feed
    any downstream node. With ``output="proba"`` it returns one column per class
    (``<name>_<class>``) instead.

    Prediction uses the columns seen at fit, in fit order. Extra input columns
    are ignored; missing ones raise ShapeMismatchError.
    """

    def __init__(
        self,
        name: str,
        calculator: BaseModelCalculator,
        applier: BaseModelApplier,
        config: Optional[Dict[str, Any]] = None,
        output: str = "predict",
    ):
        super().__init__(name)
        if output not in ("predict", "proba"):
            raise ValueError(f"output must be 'predict' or 'proba', got '{output}'")
        self.calculator = calculator
        self.applier = applier
        self.config: Dict[str, Any] = dict(config or {})
        self.output = output
        self.model: Any = None

    @property
    def problem_type(self) -> str:
        return self.calculator.problem_type

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        if y is None:
            raise ShapeMismatchError(
                f"Learner '{self.name}' requires a target aligned with {X.shape[0]} feature rows",
                {"node": self.name, "feature_rows": X.shape[0], "target_rows": 0},
            )
        self.model = self.calculator.fit(X, y, self.config)

    def _features(self, X: pd.DataFrame) -> pd.DataFrame:
        return X[self.input_columns_]

    def predict(self, X: Any) -> pd.Series:
        """Label (or value) predictions named after the node, whatever the output mode."""
        if not self.is_fitted:
            raise NotFittedError(self.name)
        X = as_frame(X)
        self._check_columns(X)
        return self._predict(X)

    def _predict(self, X: pd.DataFrame) -> pd.Series:
        predictions = self.applier.predict(self._features(X), self.model)
        return pd.Series(pd.Series(predictions).to_numpy(), index=X.index, name=self.name)

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if self.output == "proba":
            proba = self.applier.predict_proba(self._features(X), self.model)
            if proba is not None:
                proba = proba.set_axis(X.index, axis=0)
                proba.columns = [f"{self.name}_{c}" for c in proba.columns]
                return proba
            logger.warning(f"Learner '{self.name}' has no predict_proba; returning class predictions.")

        return self._predict(X).to_frame()

    @property
    def is_fitted(self) -> bool:
        return super().is_fitted and self.model is not None

    def clone(self) -> "StatefulEstimator":
        return StatefulEstimator(
            name=self.name,
            calculator=self.calculator,
            applier=self.applier,
            config=copy.deepcopy(self.config),
            output=self.output,
        )

    @property
    def structure(self) -> Tuple[Any, ...]:
        return ("atomic", self.name, type(self.calculator).__name__)


def predict_labels(node: Node, X: pd.DataFrame) -> pd.Series:
    """
    One prediction per row from any node.

    Learners answer with labels even when built with ``output="proba"``. Other
    nodes must produce a single column.
    """
    if isinstance(node, StatefulEstimator):
        return node.predict(X)
    output = node.transform(X)
    if output.shape[1] != 1:
        raise ShapeMismatchError(
            f"Node '{node.name}' returns {output.shape[1]} columns; a single prediction column is required",
            {"node": node.name, "columns": list(output.columns)},
        )
    return output.iloc[:, 0].set_axis(X.index)
