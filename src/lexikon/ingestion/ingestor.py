"""Per-corpus entry pipeline: transduce, disambiguate, key, number."""

from __future__ import annotations

from dataclasses import dataclass, field
import itertools
import logging
from pathlib import Path
import threading

from lexikon.ingestion.headwords import HeadwordRegistry
from lexikon.ingestion.models import DictionaryEntry
from lexikon.ingestion.sort_key import sort_key
from lexikon.ingestion.transducer import MIN_ENTRY_CHARS, transduce_file

LOGGER = logging.getLogger(__name__)


class EntrySequence:
    """Run-wide entry numbering, safe to share between worker threads."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


@dataclass(slots=True)
class FileIngestionResult:
    """Entries produced from one source file."""

    source_path: str
    entries: list[DictionaryEntry] = field(default_factory=list)
    skipped_headwordless: int = 0


class CorpusIngestor:
    """Turns the files of one corpus into numbered, disambiguated entries.

    One instance owns the headword registry of a single corpus pass, so a
    new pass needs a new ingestor (or an explicit fresh registry).
    """

    def __init__(
        self,
        corpus_id: str,
        *,
        sequence: EntrySequence,
        registry: HeadwordRegistry | None = None,
        min_chars: int = MIN_ENTRY_CHARS,
    ) -> None:
        if not corpus_id:
            raise ValueError("Corpus id cannot be empty")
        self._corpus_id = corpus_id
        self._sequence = sequence
        self._registry = registry if registry is not None else HeadwordRegistry()
        self._min_chars = min_chars

    @property
    def corpus_id(self) -> str:
        return self._corpus_id

    @property
    def registry(self) -> HeadwordRegistry:
        return self._registry

    def ingest_file(self, path: str | Path) -> FileIngestionResult:
        """Process one file; raises ``MarkupError`` without touching the registry."""

        source = Path(path)
        candidates = transduce_file(source, min_chars=self._min_chars)
        result = FileIngestionResult(source_path=str(source))

        for candidate in candidates:
            if not candidate.headword:
                result.skipped_headwordless += 1
                LOGGER.debug("Skipping entry without headword in %s", source)
                continue

            headword = self._registry.resolve(candidate.headword)
            result.entries.append(
                DictionaryEntry(
                    sequence=self._sequence.next(),
                    corpus_id=self._corpus_id,
                    headword=headword,
                    sort_key=sort_key(headword),
                    rich_text=candidate.rich_text,
                    plain_text=candidate.plain_text,
                    variants=candidate.variants,
                    source_path=str(source),
                )
            )

        return result
