"""Compile pipeline expressions into executable node trees."""

import logging
from typing import List, Optional, Union

from ..exceptions import UnknownComponentError
from ..nodes import Node, Parallel, Sequential
from ..registry import ComponentRegistry, default_registry
from .parser import parse_expression
from .syntax import Expr, Identifier, ParExpr, SeqExpr, identifiers, render_constructors

logger = logging.getLogger(__name__)


class ExpressionCompiler:
    """
    Two-pass compiler: expression text -> AST -> Node tree.

    Compilation never fits anything. Every identifier is checked against the
    registry before any node is built, so a failed compile leaves nothing behind.
    """

    def __init__(self, registry: Optional[ComponentRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def parse(self, text: str) -> Expr:
        return parse_expression(text)

    def compile(self, expression: Union[str, Expr]) -> Node:
        expr = self.parse(expression) if isinstance(expression, str) else expression
        self._check_names(expr)
        node = self._build(expr)
        logger.debug(f"Compiled {render_constructors(expr)}")
        return node

    def explain(self, expression: Union[str, Expr]) -> str:
        """Explicit constructor form of the expression, without building it."""
        expr = self.parse(expression) if isinstance(expression, str) else expression
        return render_constructors(expr)

    def _check_names(self, expr: Expr) -> None:
        unknown: List[str] = []
        for ident in identifiers(expr):
            if ident.name not in self.registry and ident.name not in unknown:
                unknown.append(ident.name)
        if unknown:
            raise UnknownComponentError(unknown, self.registry.names())

    def _build(self, expr: Expr) -> Node:
        if isinstance(expr, Identifier):
            return self.registry.create(expr.name)
        children = [self._build(op) for op in expr.operands]
        if isinstance(expr, SeqExpr):
            return Sequential(children)
        if isinstance(expr, ParExpr):
            return Parallel(children)
        raise TypeError(f"Unsupported expression node: {type(expr).__name__}")


def compile_expression(text: str, registry: Optional[ComponentRegistry] = None) -> Node:
    return ExpressionCompiler(registry).compile(text)
