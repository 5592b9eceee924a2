from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .api import evaluate, parse
from .errors import PyretError
from .format import dump_expr, expr_to_jsonable
from .parser import DEFAULT_MAX_DEPTH
from .symbol import Interner


logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "1 * 2 * 3 - 4 / 5"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="pyret", description="Parse and evaluate a pyret expression")
    ap.add_argument("source", nargs="?", help=f"Expression to evaluate (default: {DEFAULT_SOURCE!r})")
    ap.add_argument("-f", "--file", help="Read the expression from a file")
    ap.add_argument("--json", action="store_true", help="Print the parsed AST as JSON")
    ap.add_argument("--no-ast", action="store_true", help="Only print the result")
    ap.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum expression nesting depth accepted by the parser",
    )
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (repeatable)")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    if args.file and args.source is not None:
        ap.error("give either SOURCE or --file, not both")
    if args.file:
        file = args.file
        try:
            src = Path(file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"{file}: {e.strerror or e}", file=sys.stderr)
            return 1
        except UnicodeDecodeError as e:
            print(f"{file}: not valid UTF-8 ({e.reason} at byte {e.start})", file=sys.stderr)
            return 1
    else:
        file = "<argv>" if args.source is not None else "<default>"
        src = args.source if args.source is not None else DEFAULT_SOURCE
    logger.info("evaluating %s (%d bytes)", file, len(src.encode("utf-8")))

    interner = Interner()
    try:
        expr = parse(src, interner=interner, max_depth=args.max_depth)
        if args.json:
            print(json.dumps(expr_to_jsonable(expr, interner), indent=2, sort_keys=True))
        elif not args.no_ast:
            print(dump_expr(expr, interner))
        value = evaluate(expr)
    except PyretError as e:
        print(e.format(src, file=file), file=sys.stderr)
        return 1

    print(f"{src.strip()} = {value}")
    return 0
