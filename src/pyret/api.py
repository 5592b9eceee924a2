from __future__ import annotations

import logging

from . import ast as A
from .eval import DEFAULT_MAX_DEPTH as DEFAULT_EVAL_DEPTH
from .eval import Evaluator, Value
from .parser import DEFAULT_MAX_DEPTH as DEFAULT_PARSE_DEPTH
from .parser import Parser
from .symbol import Interner


logger = logging.getLogger(__name__)


def parse(
    src: str,
    *,
    interner: Interner | None = None,
    max_depth: int = DEFAULT_PARSE_DEPTH,
) -> A.Expr:
    """Parse ``src`` as a single expression.

    Identifiers are interned into ``interner``; a fresh table is used when none
    is given. Raises :class:`~pyret.errors.ParseError` on the first fault.
    """
    return Parser(src, interner=interner, max_depth=max_depth).parse()


def evaluate(expr: A.Expr, *, max_depth: int = DEFAULT_EVAL_DEPTH) -> Value:
    """Evaluate ``expr``. Raises :class:`~pyret.errors.EvalError` on the first fault."""
    value = Evaluator(max_depth=max_depth).evaluate(expr)
    logger.debug("evaluated %s to %s", expr.span.format(), value)
    return value


def run(src: str) -> Value:
    return evaluate(parse(src))
