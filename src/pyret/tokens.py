from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class TokenKind(str, Enum):
    # Identifiers and literals
    IDENT = "IDENT"
    NUMBER = "NUMBER"

    # Operators
    PLUS = "+"
    MINUS = "-"
    ARROW = "->"
    STAR = "*"
    SLASH = "/"
    EQ = "="
    EQ_EQ = "=="
    BANG = "!"
    BANG_EQ = "!="
    GT = ">"
    GT_EQ = ">="
    LT = "<"
    LT_EQ = "<="
    AMP = "&"
    AMP_AMP = "&&"
    PIPE = "|"
    PIPE_PIPE = "||"

    # Delimiters
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    COLON = ":"
    SEMI = ";"

    # Keywords
    IF = "if"
    ELSE = "else"
    TRUE = "true"
    FALSE = "false"
    LET = "let"
    FN = "fn"
    RETURN = "return"

    EOF = "EOF"

    def describe(self) -> str:
        if self is TokenKind.EOF:
            return "end of input"
        if self is TokenKind.IDENT:
            return "identifier"
        if self is TokenKind.NUMBER:
            return "number"
        return f"'{self.value}'"


KEYWORDS: dict[str, TokenKind] = {
    k.value: k
    for k in (
        TokenKind.IF,
        TokenKind.ELSE,
        TokenKind.TRUE,
        TokenKind.FALSE,
        TokenKind.LET,
        TokenKind.FN,
        TokenKind.RETURN,
    )
}


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    span: Span

    @classmethod
    def dummy(cls) -> "Token":
        return cls(TokenKind.EOF, Span.dummy())

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.span.format()})"
