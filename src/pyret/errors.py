from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Position, Span


class ErrorKind(str, Enum):
    UNEXPECTED_BYTE = "unexpected-byte"
    EXPECTED_BUT_FOUND = "expected-but-found"
    UNIMPLEMENTED_FEATURE = "unimplemented-feature"
    TYPE_MISMATCH = "type-mismatch"
    DIVISION_BY_ZERO = "division-by-zero"
    INVALID_NUMBER = "invalid-number"
    INTEGER_OVERFLOW = "integer-overflow"
    NESTING_TOO_DEEP = "nesting-too-deep"


@dataclass(slots=True)
class PyretError(Exception):
    kind: ErrorKind
    span: Span
    message: str
    hint: str | None = None
    # EXPECTED_BUT_FOUND / TYPE_MISMATCH details
    expected: str | None = None
    found: str | None = None
    # UNIMPLEMENTED_FEATURE detail
    feature: str | None = None

    def __str__(self) -> str:
        base = f"{self.span.format()}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base

    def format(self, src: str, *, file: str = "<memory>") -> str:
        pos = Position.at(src, self.span.lo)
        base = f"{file}:{pos.line}:{pos.column}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base


@dataclass(slots=True)
class ParseError(PyretError):
    """Raised by the lexer and parser."""


@dataclass(slots=True)
class EvalError(PyretError):
    """Raised by the evaluator."""
