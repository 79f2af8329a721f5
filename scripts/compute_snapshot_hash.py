from __future__ import annotations

import argparse
import hashlib

from ronpy import parse_document


def _generate(seed: int, count: int) -> list[str]:
    from ronpy.testing import generate_ron_sources

    return generate_ron_sources(seed=seed, count=count)


def main(argv: list[str] | None = None) -> int:
    from ronpy.testing import dump_ast

    ap = argparse.ArgumentParser(prog="compute_snapshot_hash")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=1000)
    args = ap.parse_args(argv)

    h = hashlib.sha256()
    for i, src in enumerate(_generate(args.seed, args.count)):
        doc = parse_document(src, file=f"snapshot:{args.seed}:{i}.ron")
        if doc.span.slice(src) != src:
            raise SystemExit(f"document span does not cover case {i}")
        h.update(dump_ast(doc).encode("utf-8"))
        h.update(b"\n---\n")

    print(h.hexdigest())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
