"""CLI entrypoint for fetching and indexing dictionary corpora."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from lexikon.config import CorpusSource, IndexSettings
from lexikon.search.indexer import DictionaryIndexer


def _parse_corpus_arg(raw_value: str) -> CorpusSource:
    corpus_id, separator, location = raw_value.partition("=")
    if not separator or not corpus_id.strip() or not location.strip():
        raise argparse.ArgumentTypeError(f"expected ID=DIRECTORY, got {raw_value!r}")
    return CorpusSource(corpus_id=corpus_id.strip(), local_path=Path(location.strip()).expanduser())


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Index TEI dictionary corpora into SQLite FTS5 storage")
    parser.add_argument("--db-path", default=None, help="SQLite database path (default: LEXIKON_DB_PATH)")
    parser.add_argument(
        "--corpus",
        action="append",
        type=_parse_corpus_arg,
        default=[],
        metavar="ID=DIRECTORY",
        help="Index a local corpus directory instead of the configured sources (repeatable)",
    )
    parser.add_argument("--refresh", action="store_true", help="Pull configured git sources before indexing")
    args = parser.parse_args(argv)

    try:
        settings = IndexSettings.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level,
    )

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    sources = args.corpus or list(settings.corpora)

    with DictionaryIndexer.from_db_path(db_path) as indexer:
        stats = indexer.index_sources(sources, refresh=args.refresh or settings.refresh_sources)

    print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))
    return 0 if stats.errors == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
