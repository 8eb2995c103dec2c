"""Sequential and Parallel composition nodes."""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from ..exceptions import ShapeMismatchError
from ..utils import make_unique_columns
from .base import Node

logger = logging.getLogger(__name__)


class CompositeNode(Node):
    """A node that delegates fit/transform to two or more children."""

    kind = "composite"

    def __init__(self, children: Sequence[Node], name: Optional[str] = None):
        super().__init__(name or self.kind)
        children = list(children)
        if len(children) < 2:
            raise ValueError(f"{type(self).__name__} needs at least 2 children, got {len(children)}")
        for child in children:
            if not isinstance(child, Node):
                raise TypeError(f"{type(self).__name__} children must be Nodes, got {type(child).__name__}")
        self.children: List[Node] = children

    @property
    def is_fitted(self) -> bool:
        return super().is_fitted and all(c.is_fitted for c in self.children)

    def clone(self) -> "CompositeNode":
        return type(self)([c.clone() for c in self.children], name=self.name)

    @property
    def structure(self) -> Tuple[Any, ...]:
        return (self.kind, tuple(c.structure for c in self.children))

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self.children)
        return f"{type(self).__name__}([{inner}])"


class Sequential(CompositeNode):
    """
    Pipes each child's output into the next child (``a |> b |> c``).

    Fit walks the chain left to right: each child is fit on the previous child's
    output together with the original target, then transforms for its successor.
    """

    kind = "seq"

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        current = X
        last = len(self.children) - 1
        for i, child in enumerate(self.children):
            if i == last:
                child.fit(current, y)
            else:
                current = child.fit_transform(current, y)
                logger.debug(f"Sequential '{self.name}' step {i} ({child.name}) -> {current.shape}")

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        current = X
        for child in self.children:
            current = child.transform(current)
        return current


class Parallel(CompositeNode):
    """
    Feeds the same input to every child and concatenates outputs column-wise
    (``a + b + c``).

    Column order follows child order. Repeated column names get ``_1``, ``_2``
    suffixes. Every child must return the input's row count.
    """

    kind = "par"

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        for child in self.children:
            child.fit(X, y)

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        outputs = [child.transform(X) for child in self.children]
        n_rows = X.shape[0]

        row_counts = {child.name: out.shape[0] for child, out in zip(self.children, outputs)}
        if any(count != n_rows for count in row_counts.values()):
            raise ShapeMismatchError(
                f"Parallel '{self.name}' children returned differing row counts: {row_counts} "
                f"(input has {n_rows})",
                {"input_rows": n_rows, "child_rows": row_counts},
            )

        aligned = [out.set_axis(X.index, axis=0) for out in outputs]
        combined = pd.concat(aligned, axis=1)
        combined.columns = make_unique_columns(list(combined.columns))
        return combined
