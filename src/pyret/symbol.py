from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Symbol:
    """Opaque handle to a string held by an :class:`Interner`.

    Two symbols are equal exactly when their handles are; the text is never
    compared. A symbol is only meaningful for the interner that produced it.
    """

    id: int

    def __repr__(self) -> str:
        return f"Symbol({self.id})"


@dataclass(slots=True)
class Interner:
    """Deduplicating string table.

    Interned text is copied into a bump buffer. When the buffer runs out of
    room it is archived in ``_full`` and replaced by a larger one, so the
    views handed out earlier stay valid for the life of the interner.

    Not thread-safe: use one interner per thread of control.
    """

    _map: dict[str, Symbol] = field(default_factory=dict)
    _vec: list[memoryview] = field(default_factory=list)
    _buf: bytearray = field(default_factory=bytearray)
    _len: int = 0
    _full: list[bytearray] = field(default_factory=list)

    def intern(self, name: str) -> Symbol:
        sym = self._map.get(name)
        if sym is not None:
            return sym
        view = self._alloc(name.encode("utf-8"))
        sym = Symbol(len(self._map))
        self._map[name] = sym
        self._vec.append(view)
        return sym

    def lookup(self, sym: Symbol) -> str:
        try:
            view = self._vec[sym.id]
        except IndexError:
            raise KeyError(f"{sym!r} was not produced by this interner") from None
        return view.tobytes().decode("utf-8")

    def __len__(self) -> int:
        return len(self._vec)

    def __contains__(self, sym: object) -> bool:
        return isinstance(sym, Symbol) and 0 <= sym.id < len(self._vec)

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def _alloc(self, data: bytes) -> memoryview:
        cap = len(self._buf)
        if cap < self._len + len(data):
            new_cap = _next_power_of_two(max(cap, len(data)) + 1)
            self._full.append(self._buf)
            self._buf = bytearray(new_cap)
            self._len = 0

        start = self._len
        self._buf[start : start + len(data)] = data
        self._len += len(data)
        return memoryview(self._buf)[start : self._len]


def _next_power_of_two(n: int) -> int:
    return 1 << (n - 1).bit_length() if n > 1 else 1
