"""CLI entrypoint for accent-insensitive dictionary search."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from dotenv import load_dotenv

from lexikon.config import IndexSettings
from lexikon.search.query import search_entries
from lexikon.search.repository import EntryRepository


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Search indexed dictionary entries")
    parser.add_argument("--db-path", default=None, help="SQLite database path (default: LEXIKON_DB_PATH)")
    parser.add_argument("--query", required=True, help="Words to search for, with or without accents")
    parser.add_argument("--limit", type=int, default=10, help="Maximum number of results")
    parser.add_argument("--corpus", default=None, help="Restrict results to one corpus id")
    parser.add_argument("--phrase-mode", action="store_true", help="Treat the query as an exact phrase")
    args = parser.parse_args(argv)

    try:
        settings = IndexSettings.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    safe_limit = max(1, min(args.limit, 100))

    with EntryRepository(db_path) as repository:
        hits = search_entries(
            repository.connection,
            query=args.query,
            limit=args.limit,
            corpus_id=args.corpus,
            phrase_mode=args.phrase_mode,
        )

    payload = {
        "query": args.query,
        "corpus": args.corpus,
        "phrase_mode": args.phrase_mode,
        "limit": safe_limit,
        "results": [hit.to_dict() for hit in hits],
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
