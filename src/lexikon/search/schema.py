"""SQLite schema and pragmas for dictionary entry storage and search."""

from __future__ import annotations

import sqlite3


PRAGMA_BUSY_TIMEOUT_MS = 5000


def apply_runtime_pragmas(connection: sqlite3.Connection) -> None:
    """Apply runtime pragmas recommended for local indexing throughput."""

    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute(f"PRAGMA busy_timeout={PRAGMA_BUSY_TIMEOUT_MS};")
    connection.execute("PRAGMA synchronous=NORMAL;")
    connection.execute("PRAGMA foreign_keys=ON;")


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create entry tables and the FTS index if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS entries (
            sequence INTEGER PRIMARY KEY,
            corpus_id TEXT NOT NULL,
            source_path TEXT,
            headword TEXT NOT NULL,
            sort_key TEXT NOT NULL,
            rich_text TEXT NOT NULL,
            variants TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE VIRTUAL TABLE IF NOT EXISTS entries_fts USING fts5(
            headword,
            plain_text,
            folded_headword,
            folded_text,
            corpus_id UNINDEXED,
            tokenize='unicode61 remove_diacritics 0'
        );

        CREATE TABLE IF NOT EXISTS corpus_runs (
            corpus_id TEXT PRIMARY KEY,
            files INTEGER NOT NULL,
            entries INTEGER NOT NULL,
            errors INTEGER NOT NULL,
            finished_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_entries_corpus_sort_key ON entries(corpus_id, sort_key);
        CREATE INDEX IF NOT EXISTS idx_entries_headword ON entries(headword);
        """
    )


def optimize_fts(connection: sqlite3.Connection) -> None:
    """Run FTS optimize maintenance command."""

    connection.execute("INSERT INTO entries_fts(entries_fts) VALUES ('optimize');")


def rebuild_fts(connection: sqlite3.Connection) -> None:
    """Run FTS rebuild maintenance command."""

    connection.execute("INSERT INTO entries_fts(entries_fts) VALUES ('rebuild');")
