"""Diacritic-insensitive token stream used for both indexing and querying."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from razdel import tokenize
from razdel.substring import Substring

from lexikon.ingestion.normalization import strip_diacritics_into

_WORD_RE = re.compile(r"[^\W_]+")


class DiacriticFoldingFilter:
    """Rewrite each token's text to its lowercased, accent-free form.

    Wraps any iterable of ``razdel`` substrings; ``start``/``stop`` offsets
    are left untouched. Each instance owns its scratch buffer, so one filter
    per tokenizing context needs no locking.
    """

    def __init__(self, tokens: Iterable[Substring]) -> None:
        self._tokens = iter(tokens)
        self._scratch: list[str] = []

    def __iter__(self) -> "DiacriticFoldingFilter":
        return self

    def __next__(self) -> Substring:
        token = next(self._tokens)
        token.text = strip_diacritics_into(token.text.lower(), self._scratch)
        return token


def folded_tokens(text: str) -> Iterator[Substring]:
    """Tokenize ``text`` and fold every token."""

    return DiacriticFoldingFilter(tokenize(text))


def fold_terms(text: str) -> list[str]:
    """Folded words of ``text``.

    razdel keeps hyphenated and elided forms (``ἀντι-βαίνω``, ``ἐπ᾽``) as one
    token; only their word parts are kept, punctuation-only tokens vanish.
    """

    terms: list[str] = []
    for token in folded_tokens(text):
        terms.extend(_WORD_RE.findall(token.text))
    return terms


def fold_text(text: str) -> str:
    """Space-joined folded word tokens, as stored in the folded FTS columns."""

    return " ".join(fold_terms(text))
