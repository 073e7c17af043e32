"""Corpus indexing orchestrator over the entry extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import time
from typing import Iterable

from lexikon.config import CorpusSource
from lexikon.ingestion.ingestor import CorpusIngestor, EntrySequence
from lexikon.ingestion.models import MarkupError
from lexikon.ingestion.transducer import MIN_ENTRY_CHARS
from lexikon.search.index_sink import SearchIndexSink
from lexikon.search.repository import EntryRepository
from lexikon.sources.fetcher import FetchError, SourceFetcher

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CorpusRunStats:
    corpus_id: str
    scanned: int = 0
    indexed: int = 0
    entries: int = 0
    skipped_headwordless: int = 0
    errors: int = 0
    error_details: list[dict[str, object]] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "corpus_id": self.corpus_id,
            "scanned": self.scanned,
            "indexed": self.indexed,
            "entries": self.entries,
            "skipped_headwordless": self.skipped_headwordless,
            "errors": self.errors,
            "error_details": self.error_details,
        }


@dataclass(slots=True)
class IndexRunStats:
    corpora: list[CorpusRunStats] = field(default_factory=list)
    source_errors: int = 0
    duration_ms: int = 0
    error_details: list[dict[str, str]] = field(default_factory=list)

    @property
    def entries(self) -> int:
        return sum(corpus.entries for corpus in self.corpora)

    @property
    def errors(self) -> int:
        return self.source_errors + sum(corpus.errors for corpus in self.corpora)

    def to_dict(self) -> dict[str, object]:
        return {
            "corpora": [corpus.to_dict() for corpus in self.corpora],
            "scanned": sum(corpus.scanned for corpus in self.corpora),
            "indexed": sum(corpus.indexed for corpus in self.corpora),
            "entries": self.entries,
            "errors": self.errors,
            "duration_ms": self.duration_ms,
            "error_details": self.error_details,
        }


def _collect_inputs(directory: Path, pattern: str) -> list[Path]:
    if directory.is_file():
        return [directory]
    if directory.is_dir():
        return sorted(
            path for path in directory.rglob(pattern) if path.is_file() and ".git" not in path.parts
        )
    return []


class DictionaryIndexer:
    """Runs fresh corpus passes into the entry store and the search index."""

    def __init__(
        self,
        repository: EntryRepository,
        *,
        fetcher: SourceFetcher | None = None,
        min_chars: int = MIN_ENTRY_CHARS,
    ) -> None:
        self._repository = repository
        self._sink = SearchIndexSink(repository.connection)
        self._fetcher = fetcher or SourceFetcher()
        self._min_chars = min_chars

    @classmethod
    def from_db_path(cls, db_path: str | Path, *, fetcher: SourceFetcher | None = None) -> "DictionaryIndexer":
        return cls(EntryRepository(db_path), fetcher=fetcher)

    @property
    def repository(self) -> EntryRepository:
        return self._repository

    def close(self) -> None:
        self._repository.close()

    def __enter__(self) -> "DictionaryIndexer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def index_corpus(
        self,
        corpus_id: str,
        directory: str | Path,
        *,
        pattern: str = "*.xml",
        sequence: EntrySequence | None = None,
    ) -> CorpusRunStats:
        """Replace everything stored for ``corpus_id`` with a fresh pass over ``directory``.

        Files are processed one at a time in path order; a malformed file is
        reported and skipped while the pass continues.
        """

        stats = CorpusRunStats(corpus_id=corpus_id)
        files = _collect_inputs(Path(directory), pattern)
        stats.scanned = len(files)

        if sequence is None:
            sequence = EntrySequence(self._repository.max_sequence() + 1)
        self._repository.clear_corpus(corpus_id)
        ingestor = CorpusIngestor(corpus_id, sequence=sequence, min_chars=self._min_chars)
        LOGGER.info("Indexing corpus %s: %d files from %s", corpus_id, len(files), directory)

        for file_path in files:
            try:
                result = ingestor.ingest_file(file_path)
            except MarkupError as exc:
                stats.errors += 1
                stats.error_details.append(
                    {
                        "source_path": str(file_path),
                        "error": exc.message,
                        "line": exc.line,
                        "column": exc.column,
                    }
                )
                LOGGER.warning("Skipping %s: %s", file_path, exc)
                continue

            self._repository.store_file_entries(result.entries)
            for entry in result.entries:
                self._sink.add(entry)
            self._sink.commit()

            stats.indexed += 1
            stats.entries += len(result.entries)
            stats.skipped_headwordless += result.skipped_headwordless
            LOGGER.info("Indexed %d entries from %s", len(result.entries), file_path)

        self._repository.record_corpus_run(
            corpus_id=corpus_id,
            files=stats.indexed,
            entries=stats.entries,
            errors=stats.errors,
        )
        return stats

    def index_sources(self, sources: Iterable[CorpusSource], *, refresh: bool = False) -> IndexRunStats:
        """Fetch and index every source; sequence numbers are unique across the run."""

        started = time.perf_counter()
        stats = IndexRunStats()
        sequence = EntrySequence(self._repository.max_sequence() + 1)

        for source in sources:
            try:
                directory = self._fetcher.ensure(source, refresh=refresh)
            except FetchError as exc:
                stats.source_errors += 1
                stats.error_details.append({"corpus_id": source.corpus_id, "error": str(exc)})
                LOGGER.error("Skipping corpus %s: %s", source.corpus_id, exc)
                continue

            stats.corpora.append(
                self.index_corpus(source.corpus_id, directory, pattern=source.pattern, sequence=sequence)
            )

        stats.duration_ms = int((time.perf_counter() - started) * 1000)
        return stats
