"""Expression-driven pipelines."""

import logging
import time
from typing import Any, Optional, Tuple

import joblib
import pandas as pd

from .data.dataset import as_frame, check_alignment
from .exceptions import ShapeMismatchError
from .expression.compiler import ExpressionCompiler
from .modeling.cross_validation import CrossValidator
from .modeling.evaluation.schemas import CrossValidationResult
from .nodes.base import Node
from .registry import ComponentRegistry

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """
    Runs a compiled node tree.

    Inputs are coerced to DataFrames and checked (non-empty, target aligned with
    the features) before the tree sees them. Errors raised inside the tree are
    not caught here.
    """

    def __init__(self, node: Node):
        self.node = node

    def _validate(self, X: Any, y: Any = None) -> pd.DataFrame:
        X = as_frame(X)
        if X.shape[0] == 0:
            raise ShapeMismatchError("Input has no rows", {"rows": 0})
        if y is not None:
            check_alignment(X, y)
        return X

    def fit(self, X: Any, y: Any = None) -> Node:
        X = self._validate(X, y)
        logger.info(f"Fitting {self.node!r} on {X.shape[0]} rows x {X.shape[1]} columns")
        start = time.perf_counter()
        self.node.fit(X, y)
        logger.info(f"Fit completed in {time.perf_counter() - start:.3f}s")
        return self.node

    def transform(self, X: Any) -> pd.DataFrame:
        X = self._validate(X)
        start = time.perf_counter()
        output = self.node.transform(X)
        logger.debug(f"Transform of {X.shape[0]} rows took {time.perf_counter() - start:.3f}s -> {output.shape}")
        return output

    def fit_transform(self, X: Any, y: Any = None) -> pd.DataFrame:
        self.fit(X, y)
        return self.transform(X)

    def predict(self, X: Any) -> pd.Series:
        """First output column of the tree, as a Series."""
        return self.transform(X).iloc[:, 0]


class ExpressionPipeline:
    """
    An expression, its compiled tree and an executor.

    Example:
        >>> pipe = ExpressionPipeline("(catf |> ohe) + numf |> rf")
        >>> pipe.fit(X_train, y_train)
        >>> pipe.predict(X_test)
    """

    def __init__(self, expression: str, registry: Optional[ComponentRegistry] = None):
        self.expression = expression
        self.compiler = ExpressionCompiler(registry)
        self.node = self.compiler.compile(expression)
        self.executor = PipelineExecutor(self.node)

    def fit(self, X: Any, y: Any = None) -> "ExpressionPipeline":
        self.executor.fit(X, y)
        return self

    def transform(self, X: Any) -> pd.DataFrame:
        return self.executor.transform(X)

    def fit_transform(self, X: Any, y: Any = None) -> pd.DataFrame:
        return self.executor.fit_transform(X, y)

    def predict(self, X: Any) -> pd.Series:
        return self.executor.predict(X)

    def cross_validate(
        self,
        X: Any,
        y: Any,
        metric: Optional[str] = None,
        n_folds: Optional[int] = None,
        **kwargs: Any,
    ) -> CrossValidationResult:
        """Cross-validate clones of the compiled tree. The pipeline itself stays unfitted."""
        validator = CrossValidator(metric=metric, n_folds=n_folds, **kwargs)
        return validator.run(self.node, X, y, expression=self.expression)

    def explain(self) -> str:
        return self.compiler.explain(self.expression)

    @property
    def structure(self) -> Tuple[Any, ...]:
        return self.node.structure

    @property
    def is_fitted(self) -> bool:
        return self.node.is_fitted

    def save(self, path: str) -> None:
        """Save the pipeline (fitted state included) to a file."""
        joblib.dump(self, path)
        logger.info(f"Pipeline saved to {path}")

    @classmethod
    def load(cls, path: str) -> "ExpressionPipeline":
        """Load a pipeline saved with ``save``."""
        pipeline = joblib.load(path)
        if not isinstance(pipeline, cls):
            raise TypeError(f"{path} does not contain an {cls.__name__}")
        return pipeline

    def __repr__(self) -> str:
        return f"ExpressionPipeline({self.expression!r})"
