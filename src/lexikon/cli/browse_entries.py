"""CLI entrypoint listing a corpus alphabetically from a given headword."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from dotenv import load_dotenv

from lexikon.config import IndexSettings
from lexikon.ingestion.sort_key import sort_key
from lexikon.search.repository import EntryRepository


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="List dictionary entries in alphabetical order")
    parser.add_argument("--db-path", default=None, help="SQLite database path (default: LEXIKON_DB_PATH)")
    parser.add_argument("--corpus", required=True, help="Corpus id to browse")
    parser.add_argument("--start", default="", help="Headword (or prefix) to start from")
    parser.add_argument("--limit", type=int, default=20, help="Number of entries to list")
    args = parser.parse_args(argv)

    if args.limit <= 0:
        parser.error("--limit must be positive")
    try:
        settings = IndexSettings.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    start_key = sort_key(args.start) if args.start else ""

    with EntryRepository(db_path) as repository:
        rows = repository.fetch_alphabetical(args.corpus, start_key=start_key, limit=args.limit)

    payload = {
        "corpus": args.corpus,
        "start": args.start,
        "results": [
            {"sequence": row.sequence, "headword": row.headword, "sort_key": row.sort_key}
            for row in rows
        ],
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
