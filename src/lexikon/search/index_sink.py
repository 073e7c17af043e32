"""Buffered writer feeding normalized entries into the FTS index."""

from __future__ import annotations

from dataclasses import dataclass
import sqlite3

from lexikon.ingestion.models import DictionaryEntry
from lexikon.search.tokenize import fold_text


@dataclass(slots=True)
class IndexDocument:
    """Projection of an entry that the full-text index needs."""

    sequence: int
    headword: str
    corpus_id: str
    plain_text: str

    @classmethod
    def from_entry(cls, entry: DictionaryEntry) -> "IndexDocument":
        return cls(
            sequence=entry.sequence,
            headword=entry.headword,
            corpus_id=entry.corpus_id,
            plain_text=entry.plain_text,
        )


class SearchIndexSink:
    """Buffers index documents; they become searchable after ``commit``."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._pending: list[IndexDocument] = []

    @property
    def pending(self) -> int:
        return len(self._pending)

    def add(self, entry: DictionaryEntry) -> None:
        self._pending.append(IndexDocument.from_entry(entry))

    def commit(self) -> int:
        """Write buffered documents in one transaction and return their count."""

        if not self._pending:
            return 0

        documents, self._pending = self._pending, []
        with self._connection:
            self._connection.executemany(
                """
                INSERT INTO entries_fts(
                    rowid,
                    headword,
                    plain_text,
                    folded_headword,
                    folded_text,
                    corpus_id
                )
                VALUES(?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        document.sequence,
                        document.headword,
                        document.plain_text,
                        fold_text(document.headword),
                        fold_text(document.plain_text),
                        document.corpus_id,
                    )
                    for document in documents
                ],
            )
        return len(documents)
