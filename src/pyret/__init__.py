from __future__ import annotations

from .api import evaluate, parse, run
from .errors import ErrorKind, EvalError, ParseError, PyretError
from .eval import Bool, Num, Value
from .format import dump_expr, expr_to_jsonable, format_expr
from .spans import Span
from .symbol import Interner, Symbol

__all__ = [
    "Bool",
    "ErrorKind",
    "EvalError",
    "Interner",
    "Num",
    "ParseError",
    "PyretError",
    "Span",
    "Symbol",
    "Value",
    "dump_expr",
    "evaluate",
    "expr_to_jsonable",
    "format_expr",
    "parse",
    "run",
]
