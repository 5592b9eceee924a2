from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .spans import Span
from .symbol import Symbol


class BinOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "=="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="


class UnOp(str, Enum):
    NEG = "-"


@dataclass(frozen=True, slots=True)
class Node:
    span: Span


# ---- Expressions ----


@dataclass(frozen=True, slots=True)
class Literal(Node):
    kind: str  # "num" | "bool"
    value: int | bool


@dataclass(frozen=True, slots=True)
class Unary(Node):
    op: UnOp
    operand: Expr


@dataclass(frozen=True, slots=True)
class Binary(Node):
    op: BinOp
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Grouping(Node):
    expr: Expr


@dataclass(frozen=True, slots=True)
class If(Node):
    """``if cond { then } else { else_ }``; both branches are required."""

    cond: Expr
    then: Expr
    else_: Expr


@dataclass(frozen=True, slots=True)
class BlockExpr(Node):
    block: Block


Expr = Union[Literal, Unary, Binary, Grouping, If, BlockExpr]


# ---- Statements ----


@dataclass(frozen=True, slots=True)
class Let(Node):
    ident: Symbol
    type: Symbol | None = None
    init: Expr | None = None


@dataclass(frozen=True, slots=True)
class Assign(Node):
    ident: Symbol
    value: Expr


@dataclass(frozen=True, slots=True)
class ExprStmt(Node):
    """An expression followed by ``;``."""

    expr: Expr


@dataclass(frozen=True, slots=True)
class ExprWithoutSemi(Node):
    """The trailing expression of a block, not followed by ``;``."""

    expr: Expr


Stmt = Union[Let, Assign, ExprStmt, ExprWithoutSemi]


@dataclass(frozen=True, slots=True)
class Block(Node):
    stmts: tuple[Stmt, ...] = ()
