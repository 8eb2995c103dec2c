"""Lark grammar for pipeline expressions.

``+`` (parallel) binds tighter than ``|>`` (sequential); parentheses regroup.
"""

from functools import lru_cache

from lark import Lark

EXPRESSION_GRAMMAR = r"""
    ?start: seq

    ?seq: par ("|>" par)*
    ?par: atom ("+" atom)*

    ?atom: identifier
         | "(" seq ")"

    identifier: NAME

    NAME: /[A-Za-z_][A-Za-z0-9_]*/

    %import common.WS
    %ignore WS
"""


@lru_cache()
def get_parser() -> Lark:
    """Build the LALR parser once per process."""
    return Lark(EXPRESSION_GRAMMAR, parser="lalr")
