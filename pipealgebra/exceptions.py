"""Exceptions raised by pipeline compilation, execution and cross-validation."""

from typing import Any, Dict, List, Optional


class PipelineAlgebraError(Exception):
    """Base exception for pipealgebra operations."""

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class UnknownComponentError(PipelineAlgebraError):
    """Raised when an expression references a name missing from the registry."""

    def __init__(self, names: List[str], available: Optional[List[str]] = None):
        self.names = list(names)
        quoted = ", ".join(f"'{n}'" for n in self.names)
        super().__init__(
            f"Unknown component(s): {quoted}",
            {"names": self.names, "available": sorted(available or [])},
        )


class ExpressionSyntaxError(PipelineAlgebraError):
    """Raised when an expression cannot be parsed."""

    def __init__(self, message: str, expression: str, position: Optional[int] = None):
        self.expression = expression
        self.position = position
        detail: Dict[str, Any] = {"expression": expression}
        if position is not None:
            detail["position"] = position
            message = f"{message} at position {position}: {expression!r}"
        super().__init__(message, detail)


class ShapeMismatchError(PipelineAlgebraError):
    """Raised when rows or columns do not line up with what a node expects."""


class NotFittedError(PipelineAlgebraError):
    """Raised when transform is called on a node that has not been fit."""

    def __init__(self, node_name: str):
        super().__init__(
            f"Node '{node_name}' is not fitted. Call fit before transform.",
            {"node": node_name},
        )


class AllFoldsFailedError(PipelineAlgebraError):
    """Raised when every cross-validation fold failed."""

    def __init__(self, records: List[Any]):
        self.records = list(records)
        errors = [getattr(r, "error", None) for r in self.records]
        super().__init__(
            f"All {len(self.records)} cross-validation folds failed",
            {"errors": errors},
        )


class UnknownMetricError(PipelineAlgebraError):
    """Raised when a scoring metric name is not registered."""

    def __init__(self, name: str, available: List[str]):
        super().__init__(
            f"Unknown metric '{name}'",
            {"metric": name, "available": sorted(available)},
        )
