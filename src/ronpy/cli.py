from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path

from .api import ParseOptions, parse_document
from .errors import ParseError


def _to_jsonable(obj):
    if is_dataclass(obj):
        return {k: _to_jsonable(v) for k, v in asdict(obj).items()}
    if isinstance(obj, (tuple, list)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    return obj


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="ronpy", description="Parse RON files and report errors")
    ap.add_argument("files", nargs="+", help="Files to parse")
    ap.add_argument("--max-depth", type=int, default=32, help="Maximum nesting depth")
    ap.add_argument("--tab-width", type=int, default=4, help="Tab width used in error reports")
    ap.add_argument("--json", action="store_true", help="Print parsed AST as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    options = ParseOptions(max_depth=args.max_depth, tab_width=args.tab_width)
    status = 0
    docs = {}
    for name in args.files:
        path = Path(name).resolve()
        src = path.read_text(encoding="utf-8")
        try:
            docs[str(path)] = parse_document(src, file=str(path), options=options)
        except ParseError as e:
            sys.stderr.write(e.render(src, tab_width=options.tab_width))
            status = 1

    if args.json:
        print(json.dumps({k: _to_jsonable(v) for k, v in docs.items()}, indent=2, sort_keys=True))
    else:
        for p in docs:
            print(p)
    return status


if __name__ == "__main__":
    raise SystemExit(main())
