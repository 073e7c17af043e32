"""Collation keys for polytonic Greek (and Latin) headwords.

Plain code-point order puts accented letters, archaic letters and elision
marks in the wrong place, so headwords are reduced to a key that sorts
with ordinary string comparison:

1. exact-match overrides for archaic letter entries (returned as is),
2. lowercase,
3. strip diacritics,
4. drop elision apostrophes,
5. digamma to a placeholder after omega,
6. final sigma before a following word becomes medial,
7. every remaining final sigma becomes medial, so suffixes, hyphens
   and punctuation after a word do not change its position.

Keys are write-once: feeding a key back into :func:`sort_key` is not
supported because placeholders are not part of the override domain.
"""

from __future__ import annotations

import re

from lexikon.ingestion.normalization import strip_diacritics

# Placeholders start with "ωω" so they sort after every regular word;
# digamma ("δ") sorts before the koppa forms ("κ").
DIGAMMA_PLACEHOLDER = "ωωδ"

SORT_KEY_OVERRIDES: dict[str, str] = {
    "ϙ": "ωωκα",
    "ϟ": "ωωκβ",
    "ϙόππα": "ωωκγ",
}

# koronis, spacing psili, right single quote, modifier letter apostrophe
_ELISION_MARKS = str.maketrans("", "", "᾽᾿’ʼ")

_FINAL_SIGMA_BEFORE_WORD_RE = re.compile(r"ς(?= [^\W\d_])")


def sort_key(headword: str) -> str:
    """Return the collation key of ``headword``."""

    override = SORT_KEY_OVERRIDES.get(headword)
    if override is not None:
        return override

    key = headword.lower()
    key = strip_diacritics(key)
    key = key.translate(_ELISION_MARKS)
    key = key.replace("ϝ", DIGAMMA_PLACEHOLDER)
    key = _FINAL_SIGMA_BEFORE_WORD_RE.sub("σ", key)
    return key.replace("ς", "σ")
