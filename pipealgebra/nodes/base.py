"""Node capability contract shared by transformers, learners and composites."""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

import pandas as pd

from ..data.dataset import as_frame, as_target
from ..exceptions import NotFittedError, ShapeMismatchError

logger = logging.getLogger(__name__)


class Node(ABC):
    """
    A pipeline element with a uniform fit/transform protocol.

    Every node, atomic or composite, accepts a DataFrame (plus an optional target
    for ``fit``) and returns a DataFrame from ``transform``. Learned state lives in
    atomic leaves only. ``clone`` returns an unfitted copy of the same shape.

    Nodes compose with Python operators: ``a | b`` chains sequentially and
    ``a + b`` combines in parallel. ``+`` binds tighter than ``|``, matching the
    ``|>`` / ``+`` expression grammar.
    """

    def __init__(self, name: str):
        self.name = name
        self.input_columns_: Optional[List[Any]] = None

    def fit(self, X: Any, y: Any = None) -> "Node":
        """Learn state from X (and y for learners). Refitting overwrites state."""
        X = as_frame(X)
        y = as_target(y, X)
        self.input_columns_ = None
        logger.debug(f"Fitting {type(self).__name__} '{self.name}' on {X.shape[0]}x{X.shape[1]}")
        self._fit(X, y)
        self.input_columns_ = list(X.columns)
        return self

    def transform(self, X: Any) -> pd.DataFrame:
        """Apply fitted state to X. Never mutates the node."""
        if not self.is_fitted:
            raise NotFittedError(self.name)
        X = as_frame(X)
        self._check_columns(X)
        return self._transform(X)

    def fit_transform(self, X: Any, y: Any = None) -> pd.DataFrame:
        return self.fit(X, y).transform(X)

    @property
    def is_fitted(self) -> bool:
        return self.input_columns_ is not None

    def _check_columns(self, X: pd.DataFrame) -> None:
        missing = [c for c in (self.input_columns_ or []) if c not in X.columns]
        if missing:
            raise ShapeMismatchError(
                f"Node '{self.name}' was fit with columns missing from the input: {missing}",
                {"node": self.name, "missing_columns": missing},
            )

    @abstractmethod
    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        pass

    @abstractmethod
    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        pass

    @abstractmethod
    def clone(self) -> "Node":
        """Return an unfitted node with the same structure and configuration."""
        pass

    @property
    @abstractmethod
    def structure(self) -> Tuple[Any, ...]:
        """Hashable description of operator shape and leaf bindings."""
        pass

    def __or__(self, other: "Node") -> "Node":
        from .composite import Sequential

        return Sequential(_flatten(Sequential, [self, other]))

    def __add__(self, other: "Node") -> "Node":
        from .composite import Parallel

        return Parallel(_flatten(Parallel, [self, other]))

    def __repr__(self) -> str:
        return self.name


def _flatten(kind: type, nodes: List[Node]) -> List[Node]:
    flat: List[Node] = []
    for node in nodes:
        if not isinstance(node, Node):
            raise TypeError(f"Cannot compose {type(node).__name__} with a Node")
        if type(node) is kind:
            flat.extend(node.children)  # type: ignore[attr-defined]
        else:
            flat.append(node)
    return flat
