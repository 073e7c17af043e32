from __future__ import annotations

import pytest

from lexikon.ingestion.headwords import HeadwordRegistry


def test_duplicates_get_occurrence_suffix_in_document_order() -> None:
    registry = HeadwordRegistry()

    resolved = [registry.resolve(headword) for headword in ["foo", "bar", "foo", "foo"]]

    assert resolved == ["foo", "bar", "foo2", "foo3"]
    assert registry.count("foo") == 3
    assert registry.snapshot() == {"foo": 3, "bar": 1}


def test_suffix_is_appended_without_separator_to_greek_headwords() -> None:
    registry = HeadwordRegistry()

    assert [registry.resolve("λόγος") for _ in range(3)] == ["λόγος", "λόγος2", "λόγος3"]


def test_registries_are_independent_per_corpus() -> None:
    lsj = HeadwordRegistry()
    middle = HeadwordRegistry()

    assert lsj.resolve("ὅρος") == "ὅρος"
    assert lsj.resolve("ὅρος") == "ὅρος2"
    assert middle.resolve("ὅρος") == "ὅρος"
    assert len(middle) == 1


def test_empty_headword_is_rejected() -> None:
    registry = HeadwordRegistry()

    with pytest.raises(ValueError):
        registry.resolve("")
    assert len(registry) == 0
