from __future__ import annotations

import pytest

from lexikon.ingestion.headwords import HeadwordRegistry
from lexikon.ingestion.sort_key import DIGAMMA_PLACEHOLDER, SORT_KEY_OVERRIDES, sort_key


def test_sort_key_is_deterministic() -> None:
    for headword in ["λόγος", "Ἀθῆναι", "ϝάναξ", "ϙόππα", "ἀνὰ κράτος"]:
        assert sort_key(headword) == sort_key(headword)


@pytest.mark.parametrize(
    ("headword", "expected"),
    [
        ("λόγος", "λογοσ"),
        ("Ἀθῆναι", "αθηναι"),
        ("ᾠδή", "ωδη"),
        ("ῥήτωρ", "ρητωρ"),
        ("ἀΐδιος", "αιδιοσ"),
        ("ΛΟΓΟΣ", "λογοσ"),
        ("Roma", "roma"),
    ],
)
def test_general_pipeline_lowercases_and_strips_accents(headword: str, expected: str) -> None:
    assert sort_key(headword) == expected


def test_accented_and_unaccented_forms_share_a_key() -> None:
    assert sort_key("ἄνθρωπος") == sort_key("ανθρωπος")


def test_overrides_bypass_the_pipeline() -> None:
    for headword, placeholder in SORT_KEY_OVERRIDES.items():
        assert sort_key(headword) == placeholder

    assert sort_key("ϙόππα") == "ωωκγ"
    # only the exact literal is overridden
    assert sort_key("ϙοππα") == "ϙοππα"


def test_elision_marks_are_removed() -> None:
    assert sort_key("δʼ") == "δ"
    assert sort_key("ἀλλ’") == "αλλ"
    assert sort_key("κ᾽") == "κ"


def test_digamma_becomes_placeholder_in_any_case() -> None:
    assert sort_key("ϝάναξ") == DIGAMMA_PLACEHOLDER + "αναξ"
    assert sort_key("Ϝάναξ") == DIGAMMA_PLACEHOLDER + "αναξ"


def test_final_sigma_inside_multiword_headword_is_medial() -> None:
    assert sort_key("εἰς τόπον") == "εισ τοπον"
    assert sort_key("ἀνὰ κράτος") == "ανα κρατοσ"


def test_archaic_letters_sort_after_the_regular_alphabet() -> None:
    headwords = ["ϙ", "ϝάναξ", "ὦμος", "ἄλφα", "ϟ", "βῆτα", "ϙόππα"]

    ordered = sorted(headwords, key=sort_key)

    assert ordered == ["ἄλφα", "βῆτα", "ὦμος", "ϝάναξ", "ϙ", "ϟ", "ϙόππα"]


def test_disambiguated_headword_keys_include_the_suffix() -> None:
    assert sort_key("ὅρος2") == "οροσ2"
    assert sort_key("ὅρος2") == sort_key("ὅρος") + "2"


def test_duplicate_headwords_sort_in_document_order() -> None:
    registry = HeadwordRegistry()
    resolved = [registry.resolve(headword) for headword in ["ὅρος", "ὅρος", "ὅρος"]]

    assert sorted(reversed(resolved), key=sort_key) == ["ὅρος", "ὅρος2", "ὅρος3"]


@pytest.mark.parametrize(
    ("headword", "expected"),
    [
        ("ὅς-τις", "οσ-τισ"),
        ("ὅς, ἥ, ὅ", "οσ, η, ο"),
        ("ἐς.", "εσ."),
    ],
)
def test_final_sigma_before_punctuation_is_medial(headword: str, expected: str) -> None:
    assert sort_key(headword) == expected


def test_punctuated_headword_sorts_with_its_bare_form() -> None:
    assert sorted(["ὅσος", "ὅς-τις", "ὅς"], key=sort_key) == ["ὅς", "ὅς-τις", "ὅσος"]
