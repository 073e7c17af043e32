"""Corpus source acquisition."""

from .fetcher import FetchError, SourceFetcher

__all__ = ["FetchError", "SourceFetcher"]
