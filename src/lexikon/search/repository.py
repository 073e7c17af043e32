"""Repository primitives for entry persistence."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import sqlite3

from lexikon.ingestion.models import DictionaryEntry
from lexikon.search.schema import apply_runtime_pragmas, ensure_schema, optimize_fts, rebuild_fts


@dataclass(slots=True)
class EntryRow:
    sequence: int
    corpus_id: str
    headword: str
    sort_key: str
    rich_text: str
    variants: str
    source_path: str | None


@dataclass(slots=True)
class CorpusRunRow:
    corpus_id: str
    files: int
    entries: int
    errors: int
    finished_at: str


_ENTRY_COLUMNS = "sequence, corpus_id, headword, sort_key, rich_text, variants, source_path"


def _entry_row(row: sqlite3.Row) -> EntryRow:
    return EntryRow(
        sequence=int(row["sequence"]),
        corpus_id=row["corpus_id"],
        headword=row["headword"],
        sort_key=row["sort_key"],
        rich_text=row["rich_text"],
        variants=row["variants"],
        source_path=row["source_path"],
    )


class EntryRepository:
    """Thin transactional layer over the SQLite entry schema."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._connection = sqlite3.connect(str(self._db_path))
        self._connection.row_factory = sqlite3.Row
        apply_runtime_pragmas(self._connection)
        ensure_schema(self._connection)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "EntryRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def clear_all(self) -> None:
        """Drop every stored entry and index document before a fresh run."""

        with self._connection:
            self._connection.execute("DELETE FROM entries")
            self._connection.execute("DELETE FROM entries_fts")
            self._connection.execute("DELETE FROM corpus_runs")

    def clear_corpus(self, corpus_id: str) -> None:
        """Drop one corpus's entries and index documents before its fresh pass."""

        with self._connection:
            self._connection.execute("DELETE FROM entries WHERE corpus_id = ?", (corpus_id,))
            self._connection.execute("DELETE FROM entries_fts WHERE corpus_id = ?", (corpus_id,))
            self._connection.execute("DELETE FROM corpus_runs WHERE corpus_id = ?", (corpus_id,))

    def max_sequence(self) -> int:
        row = self._connection.execute("SELECT MAX(sequence) AS value FROM entries").fetchone()
        if row is None or row["value"] is None:
            return 0
        return int(row["value"])

    def store_file_entries(self, entries: list[DictionaryEntry]) -> int:
        """Insert one file's entries in a single transaction."""

        with self._connection:
            self._connection.executemany(
                """
                INSERT INTO entries(
                    sequence,
                    corpus_id,
                    source_path,
                    headword,
                    sort_key,
                    rich_text,
                    variants
                )
                VALUES(?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        entry.sequence,
                        entry.corpus_id,
                        entry.source_path,
                        entry.headword,
                        entry.sort_key,
                        entry.rich_text,
                        entry.variants,
                    )
                    for entry in entries
                ],
            )
        return len(entries)

    def record_corpus_run(self, *, corpus_id: str, files: int, entries: int, errors: int) -> None:
        with self._connection:
            self._connection.execute(
                """
                INSERT INTO corpus_runs(corpus_id, files, entries, errors)
                VALUES(?, ?, ?, ?)
                ON CONFLICT(corpus_id) DO UPDATE SET
                    files=excluded.files,
                    entries=excluded.entries,
                    errors=excluded.errors,
                    finished_at=CURRENT_TIMESTAMP
                """,
                (corpus_id, files, entries, errors),
            )

    def list_corpus_runs(self) -> list[CorpusRunRow]:
        rows = self._connection.execute(
            "SELECT corpus_id, files, entries, errors, finished_at FROM corpus_runs ORDER BY corpus_id"
        ).fetchall()
        return [
            CorpusRunRow(
                corpus_id=row["corpus_id"],
                files=int(row["files"]),
                entries=int(row["entries"]),
                errors=int(row["errors"]),
                finished_at=row["finished_at"],
            )
            for row in rows
        ]

    def get_entry(self, sequence: int) -> EntryRow | None:
        row = self._connection.execute(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE sequence = ?",
            (sequence,),
        ).fetchone()
        if row is None:
            return None
        return _entry_row(row)

    def fetch_alphabetical(self, corpus_id: str, *, start_key: str = "", limit: int = 50) -> list[EntryRow]:
        """Entries of one corpus in sort-key order, from ``start_key`` onwards."""

        if limit <= 0:
            raise ValueError("limit must be positive")

        rows = self._connection.execute(
            f"""
            SELECT {_ENTRY_COLUMNS}
            FROM entries
            WHERE corpus_id = ? AND sort_key >= ?
            ORDER BY sort_key ASC, sequence ASC
            LIMIT ?
            """,
            (corpus_id, start_key, limit),
        ).fetchall()
        return [_entry_row(row) for row in rows]

    def count_entries(self, corpus_id: str | None = None) -> int:
        if corpus_id is None:
            row = self._connection.execute("SELECT COUNT(*) AS c FROM entries").fetchone()
        else:
            row = self._connection.execute(
                "SELECT COUNT(*) AS c FROM entries WHERE corpus_id = ?",
                (corpus_id,),
            ).fetchone()
        return int(row["c"])

    def run_maintenance(self, command: str) -> None:
        if command == "optimize":
            optimize_fts(self._connection)
            return
        if command == "rebuild":
            rebuild_fts(self._connection)
            return
        raise ValueError(f"Unsupported maintenance command: {command}")
