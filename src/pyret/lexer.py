from __future__ import annotations

from collections.abc import Iterator

from .errors import ErrorKind, ParseError
from .spans import Span
from .tokens import KEYWORDS, Token, TokenKind


_WHITESPACE = frozenset(b" \t\n\r\x0c")
_DIGITS = frozenset(b"0123456789")
_ALPHA = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_ALNUM = _ALPHA | _DIGITS | frozenset(b"_")

_SINGLE: dict[int, TokenKind] = {
    ord("+"): TokenKind.PLUS,
    ord("*"): TokenKind.STAR,
    ord("/"): TokenKind.SLASH,
    ord("("): TokenKind.LPAREN,
    ord(")"): TokenKind.RPAREN,
    ord("{"): TokenKind.LBRACE,
    ord("}"): TokenKind.RBRACE,
    ord(":"): TokenKind.COLON,
    ord(";"): TokenKind.SEMI,
}

# first byte -> (second byte, two-byte kind, one-byte kind)
_DOUBLE: dict[int, tuple[int, TokenKind, TokenKind]] = {
    ord("-"): (ord(">"), TokenKind.ARROW, TokenKind.MINUS),
    ord("="): (ord("="), TokenKind.EQ_EQ, TokenKind.EQ),
    ord("!"): (ord("="), TokenKind.BANG_EQ, TokenKind.BANG),
    ord(">"): (ord("="), TokenKind.GT_EQ, TokenKind.GT),
    ord("<"): (ord("="), TokenKind.LT_EQ, TokenKind.LT),
    ord("&"): (ord("&"), TokenKind.AMP_AMP, TokenKind.AMP),
    ord("|"): (ord("|"), TokenKind.PIPE_PIPE, TokenKind.PIPE),
}


class Lexer:
    """Pull-based scanner: each :meth:`next_token` call yields one token.

    Works on the UTF-8 bytes of the source so spans are byte offsets. Once the
    input is exhausted every further call returns an ``EOF`` token.
    """

    __slots__ = ("source", "start", "pos")

    def __init__(self, src: str) -> None:
        self.source = src.encode("utf-8", "surrogatepass")
        self.start = 0
        self.pos = 0

    def next_token(self) -> Token:
        while not self.eof():
            self.start = self.pos
            c = self.next_byte()

            if c in _WHITESPACE:
                continue

            kind = _SINGLE.get(c)
            if kind is not None:
                return self.token(kind)

            pair = _DOUBLE.get(c)
            if pair is not None:
                second, long_kind, short_kind = pair
                if self.peek_byte() == second:
                    self.advance()
                    return self.token(long_kind)
                return self.token(short_kind)

            if c in _ALPHA:
                return self.ident()
            if c in _DIGITS:
                return self.number()

            raise ParseError(
                kind=ErrorKind.UNEXPECTED_BYTE,
                span=self.span(),
                message=f"unexpected character {_show_byte(c)}",
                hint="only ASCII operators, digits and identifiers are allowed",
            )

        self.start = self.pos
        return self.token(TokenKind.EOF)

    def lexeme(self, span: Span) -> str:
        return self.source[span.lo : span.hi].decode("utf-8", "surrogatepass")

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind is TokenKind.EOF:
                return

    def ident(self) -> Token:
        self.eat_while(_ALNUM)
        kind = KEYWORDS.get(self.lexeme(self.span()), TokenKind.IDENT)
        return self.token(kind)

    def number(self) -> Token:
        self.eat_while(_DIGITS)
        return self.token(TokenKind.NUMBER)

    def token(self, kind: TokenKind) -> Token:
        return Token(kind, self.span())

    def eat_while(self, accept: frozenset[int]) -> None:
        while not self.eof() and self.peek_byte() in accept:
            self.advance()

    def span(self) -> Span:
        return Span(self.start, self.pos)

    def eof(self) -> bool:
        return self.pos >= len(self.source)

    def peek_byte(self) -> int:
        if self.eof():
            return 0
        return self.source[self.pos]

    def next_byte(self) -> int:
        c = self.peek_byte()
        self.advance()
        return c

    def advance(self) -> None:
        if not self.eof():
            self.pos += 1


def tokenize(src: str) -> list[Token]:
    """Scan all of ``src``; the result ends with exactly one ``EOF`` token."""
    return list(Lexer(src))


def _show_byte(c: int) -> str:
    if 0x20 <= c < 0x7F:
        return repr(chr(c))
    return f"0x{c:02x}"
