from __future__ import annotations

from .corpus import dump_ast, generate_corpus_files, generate_ron_sources

__all__ = ["dump_ast", "generate_corpus_files", "generate_ron_sources"]
