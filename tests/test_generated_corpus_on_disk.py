from __future__ import annotations

from pathlib import Path

from ronpy import ANY, from_file, parse_document, parse_file
from ronpy.testing import dump_ast, generate_corpus_files


def test_generated_corpus_on_disk_parses(tmp_path: Path) -> None:
    # Large enough to be meaningful, small enough to keep CI fast.
    seed = 1
    count = 200

    corpus_dir = tmp_path / "corpus"
    corpus_dir.mkdir(parents=True, exist_ok=True)

    files = generate_corpus_files(seed=seed, count=count)
    assert files[0][0] == "case_000000.ron"
    assert len({rel for rel, _ in files}) == count

    for rel, src in files:
        p = corpus_dir / rel
        p.write_text(src, encoding="utf-8")

        from_disk = parse_file(p)
        in_memory = parse_document(src, file=str(p.resolve())).value
        assert dump_ast(from_disk) == dump_ast(in_memory)
        assert from_disk.span.file == str(p.resolve())

        # every generated value is self-describing
        from_file(p, ANY)
