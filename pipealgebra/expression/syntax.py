"""
Expression AST.

The tree mirrors the source: an n-ary chain of one operator becomes one node,
and a parenthesised group stays a nested node of its own.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union


@dataclass(frozen=True)
class Identifier:
    name: str
    position: int = field(default=0, compare=False)


@dataclass(frozen=True)
class SeqExpr:
    operands: Tuple["Expr", ...]


@dataclass(frozen=True)
class ParExpr:
    operands: Tuple["Expr", ...]


Expr = Union[Identifier, SeqExpr, ParExpr]


def to_source(expr: Expr) -> str:
    """Render an AST back to expression text with the minimum parentheses."""
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, SeqExpr):
        parts = [
            f"({to_source(op)})" if isinstance(op, SeqExpr) else to_source(op)
            for op in expr.operands
        ]
        return " |> ".join(parts)
    # Anything compound inside a parallel group was parenthesised in the source
    parts = [to_source(op) if isinstance(op, Identifier) else f"({to_source(op)})" for op in expr.operands]
    return " + ".join(parts)


def render_constructors(expr: Expr) -> str:
    """Render the explicit constructor form, e.g. ``Sequential([Parallel([a, b]), c])``."""
    if isinstance(expr, Identifier):
        return expr.name
    kind = "Sequential" if isinstance(expr, SeqExpr) else "Parallel"
    inner = ", ".join(render_constructors(op) for op in expr.operands)
    return f"{kind}([{inner}])"


def identifiers(expr: Expr) -> List[Identifier]:
    """Leaf identifiers in source order (duplicates kept)."""
    if isinstance(expr, Identifier):
        return [expr]
    found: List[Identifier] = []
    for op in expr.operands:
        found.extend(identifiers(op))
    return found
