from __future__ import annotations

import sys

from pyret.lexer import Lexer


def main() -> None:
    src = sys.argv[1] if len(sys.argv) > 1 else sys.stdin.read()
    lx = Lexer(src)
    for i, tok in enumerate(lx):
        print(f"{i:>3}: {tok.kind.name:<10} {tok.span.format():<8} {lx.lexeme(tok.span)!r}")


if __name__ == "__main__":
    main()
