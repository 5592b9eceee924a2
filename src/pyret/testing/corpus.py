from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from ..errors import ErrorKind
from ..eval import Bool, Num, Value


I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

Outcome = Union[Num, Bool, ErrorKind]

_TIERS: tuple[tuple[str, ...], ...] = (
    ("==", "!="),
    (">=", ">", "<=", "<"),
    ("+", "-"),
    ("*", "/"),
)

# Syntactic classes of generated fragments.
_PRIMARY = 0  # literal or parenthesized
_UNARY = 1
_COMPOUND = 2  # operator chain or `if`


@dataclass(frozen=True, slots=True)
class Case:
    """A generated expression and what evaluating it must produce.

    ``expected`` is a value, or the kind of error evaluation must raise.
    Generated sources always parse.
    """

    source: str
    expected: Outcome


class _Fault(Exception):
    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


# A fragment is its source, its syntactic class and a thunk computing its value.
# Thunks keep the oracle from running unselected `if` branches.
_Frag = tuple[str, int, Callable[[], Value]]


def generate_cases(*, seed: int, count: int, max_depth: int = 4) -> list[Case]:
    r = random.Random(seed)
    return [_case(r, max_depth) for _ in range(count)]


def generate_sources(*, seed: int, count: int, max_depth: int = 4) -> list[str]:
    return [c.source for c in generate_cases(seed=seed, count=count, max_depth=max_depth)]


def _case(r: random.Random, depth: int) -> Case:
    src, _, thunk = _expr(r, depth)
    try:
        expected: Outcome = thunk()
    except _Fault as f:
        expected = f.kind
    return Case(source=src, expected=expected)


def _expr(r: random.Random, depth: int) -> _Frag:
    if depth <= 0:
        return _literal(r)
    k = r.random()
    if k < 0.15:
        return _literal(r)
    if k < 0.25:
        return _unary(r, depth)
    if k < 0.35:
        return _if(r, depth)
    if k < 0.45:
        src, _, thunk = _expr(r, depth - 1)
        return f"({src})", _PRIMARY, thunk
    return _chain(r, depth)


def _literal(r: random.Random) -> _Frag:
    k = r.random()
    if k < 0.2:
        b = r.random() < 0.5
        return ("true" if b else "false"), _PRIMARY, (lambda: Bool(b))
    if k < 0.25:
        n = r.randint(I32_MAX // 2, I32_MAX)
    elif k < 0.35:
        n = 0
    else:
        n = r.randint(1, 20)
    return str(n), _PRIMARY, (lambda: Num(n))


def _wrap(frag: _Frag, allowed: int) -> _Frag:
    src, cls, thunk = frag
    if cls > allowed:
        return f"({src})", _PRIMARY, thunk
    return frag


def _unary(r: random.Random, depth: int) -> _Frag:
    src, _, thunk = _wrap(_expr(r, depth - 1), _PRIMARY)

    def run() -> Value:
        v = thunk()
        if not isinstance(v, Num):
            raise _Fault(ErrorKind.TYPE_MISMATCH)
        return Num(_checked(-v.value))

    return f"-{src}", _UNARY, run


def _if(r: random.Random, depth: int) -> _Frag:
    cond_src, _, cond = _cond(r, depth - 1)
    then_src, _, then = _expr(r, depth - 1)
    else_src, _, else_ = _expr(r, depth - 1)

    def run() -> Value:
        c = cond()
        if not isinstance(c, Bool):
            raise _Fault(ErrorKind.TYPE_MISMATCH)
        return then() if c.value else else_()

    return f"if {cond_src} {{ {then_src} }} else {{ {else_src} }}", _COMPOUND, run


def _cond(r: random.Random, depth: int) -> _Frag:
    # Mostly well-typed conditions; the rest exercise the type check.
    if r.random() < 0.85:
        a_src, _, a = _wrap(_expr(r, depth), _UNARY)
        b_src, _, b = _wrap(_expr(r, depth), _UNARY)
        op = r.choice(_TIERS[0] + _TIERS[1])
        return f"{a_src} {op} {b_src}", _COMPOUND, (lambda: _apply(op, a(), b()))
    return _expr(r, depth)


def _chain(r: random.Random, depth: int) -> _Frag:
    ops = r.choice(_TIERS)
    parts = [_wrap(_expr(r, depth - 1), _UNARY) for _ in range(r.randint(2, 4))]
    chosen = [r.choice(ops) for _ in parts[1:]]

    src = parts[0][0]
    for op, (s, _, _) in zip(chosen, parts[1:]):
        src += f" {op} {s}"

    def run() -> Value:
        acc = parts[0][2]()
        for op, (_, _, thunk) in zip(chosen, parts[1:]):
            acc = _apply(op, acc, thunk())
        return acc

    return src, _COMPOUND, run


def _apply(op: str, l: Value, r: Value) -> Value:
    if op in ("==", "!="):
        if type(l) is not type(r):
            raise _Fault(ErrorKind.TYPE_MISMATCH)
        return Bool((l.value == r.value) == (op == "=="))
    if not isinstance(l, Num) or not isinstance(r, Num):
        raise _Fault(ErrorKind.TYPE_MISMATCH)
    a, b = l.value, r.value
    if op == ">=":
        return Bool(a >= b)
    if op == ">":
        return Bool(a > b)
    if op == "<=":
        return Bool(a <= b)
    if op == "<":
        return Bool(a < b)
    if op == "+":
        return Num(_checked(a + b))
    if op == "-":
        return Num(_checked(a - b))
    if op == "*":
        return Num(_checked(a * b))
    if b == 0:
        raise _Fault(ErrorKind.DIVISION_BY_ZERO)
    # Exact for 32-bit operands.
    return Num(_checked(int(a / b)))


def _checked(n: int) -> int:
    if not I32_MIN <= n <= I32_MAX:
        raise _Fault(ErrorKind.INTEGER_OVERFLOW)
    return n
