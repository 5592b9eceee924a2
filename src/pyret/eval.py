from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from . import ast as A
from .errors import ErrorKind, EvalError
from .spans import Span


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


@dataclass(frozen=True, slots=True)
class Num:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


Value = Union[Num, Bool]


def _type_name(v: Value) -> str:
    return "number" if isinstance(v, Num) else "bool"


def _div(l: int, r: int) -> int:
    # Truncate toward zero.
    q = abs(l) // abs(r)
    return q if (l < 0) == (r < 0) else -q


_ARITH: dict[A.BinOp, Callable[[int, int], int]] = {
    A.BinOp.ADD: lambda l, r: l + r,
    A.BinOp.SUB: lambda l, r: l - r,
    A.BinOp.MUL: lambda l, r: l * r,
    A.BinOp.DIV: _div,
}

_ORDER: dict[A.BinOp, Callable[[int, int], bool]] = {
    A.BinOp.GE: lambda l, r: l >= r,
    A.BinOp.GT: lambda l, r: l > r,
    A.BinOp.LE: lambda l, r: l <= r,
    A.BinOp.LT: lambda l, r: l < r,
}


class Evaluator:
    """Strict tree-walking evaluator.

    Operands are evaluated left to right and every fault raises
    :class:`EvalError` carrying the span of the offending node.
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth
        self.depth = 0

    def evaluate(self, expr: A.Expr) -> Value:
        if self.depth >= self.max_depth:
            raise EvalError(
                kind=ErrorKind.NESTING_TOO_DEEP,
                span=expr.span,
                message=f"expression nested more than {self.max_depth} levels deep",
            )
        self.depth += 1
        try:
            return self.eval_expr(expr)
        finally:
            self.depth -= 1

    def eval_expr(self, expr: A.Expr) -> Value:
        if isinstance(expr, A.Literal):
            if expr.kind == "bool":
                return Bool(bool(expr.value))
            return Num(int(expr.value))
        if isinstance(expr, A.Unary):
            return self.eval_unary(expr)
        if isinstance(expr, A.Binary):
            return self.eval_binary(expr)
        if isinstance(expr, A.Grouping):
            return self.evaluate(expr.expr)
        if isinstance(expr, A.If):
            return self.eval_if(expr)
        if isinstance(expr, A.BlockExpr):
            raise EvalError(
                kind=ErrorKind.UNIMPLEMENTED_FEATURE,
                span=expr.span,
                message="block expressions are not yet implemented",
                feature="block expressions",
            )
        raise TypeError(f"not an expression node: {type(expr)!r}")

    def eval_unary(self, expr: A.Unary) -> Value:
        v = self.evaluate(expr.operand)
        if not isinstance(v, Num):
            raise self.mismatch(expr.operand.span, "number", v, "can negate only numbers")
        return Num(self.checked(-v.value, expr.span))

    def eval_binary(self, expr: A.Binary) -> Value:
        # Left-deep chains like `1 + 2 + 3` are folded in a loop so their
        # length does not count toward the depth limit.
        spine = [expr]
        while isinstance(spine[-1].left, A.Binary):
            spine.append(spine[-1].left)

        acc = self.evaluate(spine[-1].left)
        for node in reversed(spine):
            acc = self.apply(node, acc, self.evaluate(node.right))
        return acc

    def apply(self, expr: A.Binary, l: Value, r: Value) -> Value:
        op = expr.op

        if op in (A.BinOp.EQ, A.BinOp.NE):
            if type(l) is not type(r):
                raise self.mismatch(
                    expr.right.span,
                    _type_name(l),
                    r,
                    f"cannot compare {_type_name(l)} with {_type_name(r)} using '{op.value}'",
                )
            same = l.value == r.value
            return Bool(same if op is A.BinOp.EQ else not same)

        for side, v in ((expr.left, l), (expr.right, r)):
            if not isinstance(v, Num):
                raise self.mismatch(
                    side.span, "number", v, f"operator '{op.value}' expects numbers, found {_type_name(v)}"
                )

        if op in _ORDER:
            return Bool(_ORDER[op](l.value, r.value))

        if op is A.BinOp.DIV and r.value == 0:
            raise EvalError(
                kind=ErrorKind.DIVISION_BY_ZERO,
                span=expr.span,
                message="division by zero",
            )
        return Num(self.checked(_ARITH[op](l.value, r.value), expr.span))

    def eval_if(self, expr: A.If) -> Value:
        cond = self.evaluate(expr.cond)
        if not isinstance(cond, Bool):
            raise self.mismatch(expr.cond.span, "bool", cond, "condition of 'if' must be a bool")
        logger.debug("if at %s took the %s branch", expr.span.format(), "then" if cond.value else "else")
        return self.evaluate(expr.then if cond.value else expr.else_)

    def checked(self, n: int, span: Span) -> int:
        if not I32_MIN <= n <= I32_MAX:
            raise EvalError(
                kind=ErrorKind.INTEGER_OVERFLOW,
                span=span,
                message=f"result {n} overflows a 32-bit signed integer",
            )
        return n

    def mismatch(self, span: Span, expected: str, found: Value, message: str) -> EvalError:
        return EvalError(
            kind=ErrorKind.TYPE_MISMATCH,
            span=span,
            message=message,
            expected=expected,
            found=_type_name(found),
        )
