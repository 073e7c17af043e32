"""Canonical data structures shared by the entry extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class EntryCandidate:
    """One closed entry boundary that passed the length threshold."""

    headword: str
    rich_text: str
    plain_text: str
    variants: str = ""


@dataclass(slots=True)
class DictionaryEntry:
    """A normalized dictionary entry ready for storage and indexing."""

    sequence: int
    corpus_id: str
    headword: str
    sort_key: str
    rich_text: str
    plain_text: str
    variants: str = ""
    source_path: str | None = None


@dataclass(slots=True)
class MarkupError(Exception):
    """Malformed markup or unreadable source; fatal for one file only."""

    path: Path
    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.message} (path={self.path})"
        return f"{self.message} (path={self.path}, line={self.line}, column={self.column})"
