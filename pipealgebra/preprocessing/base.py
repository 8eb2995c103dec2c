import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from ..nodes.base import Node


class BaseCalculator(ABC):
    @abstractmethod
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        """Learn parameters from ``df``. The returned dict is the node's only state."""
        pass


class BaseApplier(ABC):
    @abstractmethod
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        """Transform ``df`` with previously fitted ``params``; must not mutate either."""
        pass


class StatefulTransformer(Node):
    """
    Atomic node pairing a stateless Calculator (fit) with a stateless Applier
    (transform). The fitted parameters are the node's only state.
    """

    def __init__(
        self,
        name: str,
        calculator: BaseCalculator,
        applier: BaseApplier,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(name)
        self.calculator = calculator
        self.applier = applier
        self.config: Dict[str, Any] = dict(config or {})
        self.params: Optional[Dict[str, Any]] = None

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        # Targets are ignored by transformers
        self.params = self.calculator.fit(X, self.config)

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self.applier.apply(X, self.params or {})

    @property
    def is_fitted(self) -> bool:
        return super().is_fitted and self.params is not None

    def clone(self) -> "StatefulTransformer":
        return StatefulTransformer(
            name=self.name,
            calculator=self.calculator,
            applier=self.applier,
            config=copy.deepcopy(self.config),
        )

    @property
    def structure(self) -> Tuple[Any, ...]:
        return ("atomic", self.name, type(self.calculator).__name__)
