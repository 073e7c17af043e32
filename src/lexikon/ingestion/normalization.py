"""Text normalization helpers shared by sort keys and search tokens."""

from __future__ import annotations

import unicodedata


def strip_diacritics_into(text: str, buffer: list[str]) -> str:
    """Strip diacritics from ``text`` using ``buffer`` as scratch space.

    Precomposed characters are decomposed (NFD), every combining mark is
    dropped (accents, breathings, diaeresis, iota subscript) and the
    remaining base letters are recomposed (NFC). ``buffer`` is cleared
    first and holds the base characters afterwards.
    """

    buffer.clear()
    buffer.extend(ch for ch in unicodedata.normalize("NFD", text) if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", "".join(buffer))


def strip_diacritics(text: str) -> str:
    """Reduce accented letters to their base letters."""

    return strip_diacritics_into(text, [])
