"""Entry storage, full-text indexing and search."""

from .index_sink import IndexDocument, SearchIndexSink
from .repository import EntryRepository, EntryRow

__all__ = ["EntryRepository", "EntryRow", "IndexDocument", "SearchIndexSink"]
