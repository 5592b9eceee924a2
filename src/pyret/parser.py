from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from . import ast as A
from .errors import ErrorKind, ParseError
from .lexer import Lexer
from .symbol import Interner, Symbol
from .tokens import Token, TokenKind


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

I32_MAX = 2**31 - 1

_EQUALITY: dict[TokenKind, A.BinOp] = {
    TokenKind.BANG_EQ: A.BinOp.NE,
    TokenKind.EQ_EQ: A.BinOp.EQ,
}
_COMPARISON: dict[TokenKind, A.BinOp] = {
    TokenKind.GT_EQ: A.BinOp.GE,
    TokenKind.GT: A.BinOp.GT,
    TokenKind.LT_EQ: A.BinOp.LE,
    TokenKind.LT: A.BinOp.LT,
}
_ADDITION: dict[TokenKind, A.BinOp] = {
    TokenKind.PLUS: A.BinOp.ADD,
    TokenKind.MINUS: A.BinOp.SUB,
}
_MULTIPLICATION: dict[TokenKind, A.BinOp] = {
    TokenKind.STAR: A.BinOp.MUL,
    TokenKind.SLASH: A.BinOp.DIV,
}


class Parser:
    """Recursive-descent parser with one token of lookahead.

    ``token`` is the lookahead, ``prev`` the token consumed last; literals and
    spans are read off ``prev``. Identifiers are interned into ``interner``.
    """

    def __init__(
        self,
        src: str,
        *,
        interner: Interner | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.lexer = Lexer(src)
        self.interner = interner if interner is not None else Interner()
        self.max_depth = max_depth
        self.depth = 0
        self.prev = Token.dummy()
        self.token = self.lexer.next_token()

    def parse(self) -> A.Expr:
        """Parse one expression spanning the entire input."""
        expr = self.parse_expr()
        if not self.check(TokenKind.EOF):
            raise self.unexpected("end of input")
        logger.debug("parsed expression spanning %s", expr.span.format())
        return expr

    def parse_expr(self) -> A.Expr:
        if self.eat(TokenKind.IF):
            return self.if_expr()
        return self.equality()

    def if_expr(self) -> A.Expr:
        lo = self.prev.span
        with self.nested():
            cond = self.parse_expr()
            then = self.braced_expr()
            self.expect(TokenKind.ELSE, "'else'")
            else_ = self.braced_expr()
        return A.If(span=lo.to(self.prev.span), cond=cond, then=then, else_=else_)

    def braced_expr(self) -> A.Expr:
        self.expect(TokenKind.LBRACE, "'{'")
        expr = self.parse_expr()
        self.expect(TokenKind.RBRACE, "'}'")
        return expr

    def equality(self) -> A.Expr:
        return self.binary_tier(self.comparison, _EQUALITY)

    def comparison(self) -> A.Expr:
        return self.binary_tier(self.addition, _COMPARISON)

    def addition(self) -> A.Expr:
        return self.binary_tier(self.multiplication, _ADDITION)

    def multiplication(self) -> A.Expr:
        return self.binary_tier(self.unary, _MULTIPLICATION)

    def binary_tier(self, operand: Callable[[], A.Expr], ops: dict[TokenKind, A.BinOp]) -> A.Expr:
        left = operand()
        while self.token.kind in ops:
            op = ops[self.token.kind]
            self.advance()
            right = operand()
            left = A.Binary(span=left.span.to(right.span), op=op, left=left, right=right)
        return left

    def unary(self) -> A.Expr:
        if self.eat(TokenKind.MINUS):
            lo = self.prev.span
            with self.nested():
                operand = self.primary()
            return A.Unary(span=lo.to(operand.span), op=A.UnOp.NEG, operand=operand)
        return self.primary()

    def primary(self) -> A.Expr:
        if self.eat(TokenKind.NUMBER):
            return self.number()
        if self.eat(TokenKind.TRUE):
            return A.Literal(span=self.prev.span, kind="bool", value=True)
        if self.eat(TokenKind.FALSE):
            return A.Literal(span=self.prev.span, kind="bool", value=False)
        if self.eat(TokenKind.LPAREN):
            lo = self.prev.span
            with self.nested():
                inner = self.parse_expr()
                self.expect(TokenKind.RPAREN, "')'")
            return A.Grouping(span=lo.to(self.prev.span), expr=inner)
        if self.eat(TokenKind.LBRACE):
            lo = self.prev.span
            with self.nested():
                stmts = self.block()
            span = lo.to(self.prev.span)
            return A.BlockExpr(span=span, block=A.Block(span=span, stmts=stmts))
        raise self.unexpected("expression")

    def number(self) -> A.Literal:
        span = self.prev.span
        text = self.lexer.lexeme(span)
        value = int(text)
        if value > I32_MAX:
            raise ParseError(
                kind=ErrorKind.INVALID_NUMBER,
                span=span,
                message=f"number literal {text} does not fit in a 32-bit signed integer",
                hint=f"the largest literal is {I32_MAX}",
            )
        return A.Literal(span=span, kind="num", value=value)

    def block(self) -> tuple[A.Stmt, ...]:
        """Statements up to and including the closing ``}``."""
        stmts: list[A.Stmt] = []
        while not self.eat(TokenKind.RBRACE):
            if self.check(TokenKind.EOF):
                raise self.unexpected("'}'")
            stmt = self.stmt()
            stmts.append(stmt)
            if isinstance(stmt, A.ExprWithoutSemi):
                self.expect(TokenKind.RBRACE, "'}'")
                break
        return tuple(stmts)

    def stmt(self) -> A.Stmt:
        if self.eat(TokenKind.LET):
            return self.let_stmt()
        if self.eat(TokenKind.IDENT):
            return self.assign_stmt()
        if self.check(TokenKind.FN) or self.check(TokenKind.RETURN):
            name = self.token.kind.value
            raise ParseError(
                kind=ErrorKind.UNIMPLEMENTED_FEATURE,
                span=self.token.span,
                message=f"'{name}' is not yet implemented",
                feature=name,
            )

        expr = self.parse_expr()
        if self.eat(TokenKind.SEMI):
            return A.ExprStmt(span=expr.span.to(self.prev.span), expr=expr)
        if self.check(TokenKind.RBRACE):
            return A.ExprWithoutSemi(span=expr.span, expr=expr)
        raise self.unexpected("';' or '}'")

    def let_stmt(self) -> A.Let:
        lo = self.prev.span
        ident = self.ident()
        type_ = None
        init = None
        if self.eat(TokenKind.COLON):
            type_ = self.ident()
        if self.eat(TokenKind.EQ):
            init = self.parse_expr()
        self.expect(TokenKind.SEMI, "';'")
        return A.Let(span=lo.to(self.prev.span), ident=ident, type=type_, init=init)

    def assign_stmt(self) -> A.Assign:
        lo = self.prev.span
        ident = self.interner.intern(self.lexer.lexeme(lo))
        self.expect(TokenKind.EQ, "'='")
        value = self.parse_expr()
        self.expect(TokenKind.SEMI, "';'")
        return A.Assign(span=lo.to(self.prev.span), ident=ident, value=value)

    def ident(self) -> Symbol:
        self.expect(TokenKind.IDENT, "identifier")
        return self.interner.intern(self.lexer.lexeme(self.prev.span))

    # ---- token plumbing ----

    @contextmanager
    def nested(self) -> Iterator[None]:
        if self.depth >= self.max_depth:
            raise ParseError(
                kind=ErrorKind.NESTING_TOO_DEEP,
                span=self.prev.span,
                message=f"expression nested more than {self.max_depth} levels deep",
            )
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def expect(self, kind: TokenKind, what: str) -> Token:
        if not self.eat(kind):
            raise self.unexpected(what)
        return self.prev

    def unexpected(self, what: str) -> ParseError:
        found = self.token.kind.describe()
        return ParseError(
            kind=ErrorKind.EXPECTED_BUT_FOUND,
            span=self.token.span,
            message=f"expected {what}, found {found}",
            expected=what,
            found=found,
        )

    def eat(self, kind: TokenKind) -> bool:
        if self.check(kind):
            self.advance()
            return True
        return False

    def check(self, kind: TokenKind) -> bool:
        return self.token.kind is kind

    def advance(self) -> None:
        self.prev, self.token = self.token, self.lexer.next_token()
