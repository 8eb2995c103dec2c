"""Parse expression text into the AST."""

import logging

from lark import Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ..exceptions import ExpressionSyntaxError
from .grammar import get_parser
from .syntax import Expr, Identifier, ParExpr, SeqExpr

logger = logging.getLogger(__name__)


class ExpressionTransformer(Transformer):
    """Turns the lark parse tree into AST dataclasses."""

    @v_args(inline=True)
    def identifier(self, token: Token) -> Identifier:
        return Identifier(str(token), token.start_pos)

    def seq(self, operands) -> SeqExpr:
        return SeqExpr(tuple(operands))

    def par(self, operands) -> ParExpr:
        return ParExpr(tuple(operands))


def _describe(error: UnexpectedInput, text: str):
    if isinstance(error, UnexpectedCharacters):
        return f"Unexpected character {text[error.pos_in_stream]!r}", error.pos_in_stream
    if isinstance(error, UnexpectedToken):
        if error.token.type == "$END":
            return "Unexpected end of expression", len(text)
        return f"Unexpected token {str(error.token)!r}", error.token.start_pos
    if isinstance(error, UnexpectedEOF):
        return "Unexpected end of expression", len(text)
    return "Invalid expression", getattr(error, "pos_in_stream", None)


def parse_expression(text: str) -> Expr:
    """
    Parse ``text`` into an AST.

    Raises:
        ExpressionSyntaxError: with the character offset of the first problem.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expression must be a string, got {type(text).__name__}")
    if not text.strip():
        raise ExpressionSyntaxError("Empty expression", text, 0)

    try:
        tree = get_parser().parse(text)
    except UnexpectedInput as e:
        message, position = _describe(e, text)
        raise ExpressionSyntaxError(message, text, position) from None

    expr = ExpressionTransformer().transform(tree)
    logger.debug(f"Parsed expression {text!r} -> {expr}")
    return expr
