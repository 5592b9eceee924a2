from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """A concrete source position.

    Offsets are 0-based byte offsets; line/column are 1-based for user-facing messages.
    """

    offset: int
    line: int
    column: int

    @classmethod
    def at(cls, src: str, offset: int) -> "Position":
        data = src.encode("utf-8", "surrogatepass")
        offset = max(0, min(offset, len(data)))
        head = data[:offset]
        line = head.count(b"\n") + 1
        column = offset - (head.rfind(b"\n") + 1) + 1
        return cls(offset=offset, line=line, column=column)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open byte range [lo, hi) over the source."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo < 0 or self.hi < self.lo:
            raise ValueError(f"invalid span range: {self.lo}..{self.hi}")

    @classmethod
    def dummy(cls) -> "Span":
        return cls(0, 0)

    def to(self, other: Span) -> Span:
        """Smallest span enclosing both ``self`` and ``other``."""
        return Span(min(self.lo, other.lo), max(self.hi, other.hi))

    merge = to

    def text(self, src: str) -> str:
        return src.encode("utf-8", "surrogatepass")[self.lo : self.hi].decode("utf-8", "surrogatepass")

    def format(self) -> str:
        return f"{self.lo}..{self.hi}"
