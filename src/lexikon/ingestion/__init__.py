"""Entry extraction and lexicographic normalization."""

from .headwords import HeadwordRegistry
from .ingestor import CorpusIngestor, EntrySequence, FileIngestionResult
from .models import DictionaryEntry, EntryCandidate, MarkupError
from .sort_key import sort_key
from .transducer import EntryTransducer, iter_entry_candidates, transduce_bytes, transduce_file

__all__ = [
    "CorpusIngestor",
    "DictionaryEntry",
    "EntryCandidate",
    "EntrySequence",
    "EntryTransducer",
    "FileIngestionResult",
    "HeadwordRegistry",
    "MarkupError",
    "iter_entry_candidates",
    "sort_key",
    "transduce_bytes",
    "transduce_file",
]
