from __future__ import annotations

import argparse
import json
from pathlib import Path

from pyret.errors import ErrorKind
from pyret.testing import generate_cases


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="generate_corpus")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=1000)
    ap.add_argument("--max-depth", type=int, default=4)
    ap.add_argument("--out", default="tests/fixtures/generated_corpus")
    args = ap.parse_args(argv)

    out_dir = Path(args.out).resolve() / f"seed_{args.seed}_count_{args.count}"
    out_dir.mkdir(parents=True, exist_ok=True)

    expected: dict[str, str] = {}
    for i, case in enumerate(generate_cases(seed=args.seed, count=args.count, max_depth=args.max_depth)):
        name = f"case_{i:06d}.pyret"
        (out_dir / name).write_text(case.source + "\n", encoding="utf-8")
        outcome = case.expected
        expected[name] = outcome.value if isinstance(outcome, ErrorKind) else str(outcome)

    (out_dir / "expected.json").write_text(json.dumps(expected, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    print(str(out_dir))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
