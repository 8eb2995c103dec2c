from .compiler import ExpressionCompiler, compile_expression
from .parser import parse_expression
from .syntax import Identifier, ParExpr, SeqExpr, identifiers, render_constructors, to_source
