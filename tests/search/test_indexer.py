from __future__ import annotations

import json
from pathlib import Path

import pytest

from lexikon.cli.browse_entries import main as browse_cli_main
from lexikon.cli.index_corpus import main as index_cli_main
from lexikon.cli.search_entries import main as search_cli_main
from lexikon.config import CorpusSource
from lexikon.search.indexer import DictionaryIndexer
from lexikon.sources.fetcher import FetchError, SourceFetcher


def _write_lexicon(path: Path, *entries: tuple[str, str, str]) -> None:
    body = "".join(
        f'<div2 id="{entry_id}"><head>{headword}</head><sense n="A" level="1">{sense}</sense></div2>'
        for entry_id, headword, sense in entries
    )
    path.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<TEI.2><text><body><div1 type="alphabetic letter"><head>Α</head>{body}</div1></body></text></TEI.2>',
        encoding="utf-8",
    )


@pytest.fixture()
def corpus_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "lsj"
    directory.mkdir()
    _write_lexicon(
        directory / "grc.lsj.perseus-eng1.xml",
        ("n1", "ἄβαξ", "slab, board for reckoning"),
        ("n2", "ὅρος", "boundary, landmark"),
    )
    _write_lexicon(
        directory / "grc.lsj.perseus-eng2.xml",
        ("n3", "ὅρος", "mountain, hill"),
        ("n4", "λόγος", "word, speech, reason"),
    )
    return directory


def test_corpus_pass_stores_and_indexes_entries(tmp_path: Path, corpus_dir: Path) -> None:
    with DictionaryIndexer.from_db_path(tmp_path / "lexikon.db") as indexer:
        stats = indexer.index_corpus("lsj", corpus_dir)
        rows = indexer.repository.fetch_alphabetical("lsj", limit=10)
        fts_count = indexer.repository.connection.execute("SELECT COUNT(*) AS c FROM entries_fts").fetchone()

    assert stats.scanned == 2
    assert stats.indexed == 2
    assert stats.entries == 4
    assert stats.errors == 0
    assert int(fts_count["c"]) == 4
    assert [row.headword for row in rows] == ["ἄβαξ", "λόγος", "ὅρος", "ὅρος2"]
    by_headword = {row.headword: row for row in rows}
    assert by_headword["ὅρος2"].sort_key == "οροσ2"
    assert by_headword["ὅρος2"].sequence > by_headword["ὅρος"].sequence
    assert by_headword["ἄβαξ"].rich_text.startswith('<div id="n1">')


def test_malformed_file_is_reported_and_skipped(tmp_path: Path, corpus_dir: Path) -> None:
    (corpus_dir / "grc.lsj.perseus-eng0.xml").write_text(
        '<text><div2 id="x"><head>ἀάατος</head> inviolable\n</text>',
        encoding="utf-8",
    )

    with DictionaryIndexer.from_db_path(tmp_path / "lexikon.db") as indexer:
        stats = indexer.index_corpus("lsj", corpus_dir)
        headwords = {row.headword for row in indexer.repository.fetch_alphabetical("lsj", limit=10)}

    assert stats.scanned == 3
    assert stats.indexed == 2
    assert stats.errors == 1
    assert stats.error_details[0]["source_path"].endswith("grc.lsj.perseus-eng0.xml")
    assert stats.error_details[0]["line"] == 2
    assert "ἀάατος" not in headwords
    assert headwords == {"ἄβαξ", "ὅρος", "ὅρος2", "λόγος"}


def test_fresh_pass_replaces_corpus_and_keeps_sequences_unique(tmp_path: Path, corpus_dir: Path) -> None:
    with DictionaryIndexer.from_db_path(tmp_path / "lexikon.db") as indexer:
        indexer.index_corpus("lsj", corpus_dir)
        first = {row.sequence for row in indexer.repository.fetch_alphabetical("lsj", limit=10)}

        second_stats = indexer.index_corpus("lsj", corpus_dir)
        second_rows = indexer.repository.fetch_alphabetical("lsj", limit=10)

    assert second_stats.entries == 4
    assert [row.headword for row in second_rows].count("ὅρος2") == 1
    assert first.isdisjoint({row.sequence for row in second_rows})


def test_corpora_disambiguate_independently(tmp_path: Path, corpus_dir: Path) -> None:
    other = tmp_path / "middle"
    other.mkdir()
    _write_lexicon(other / "middle.xml", ("m1", "ὅρος", "boundary, limit"))

    sources = [
        CorpusSource(corpus_id="lsj", local_path=corpus_dir),
        CorpusSource(corpus_id="middle", local_path=other),
    ]
    with DictionaryIndexer.from_db_path(tmp_path / "lexikon.db") as indexer:
        stats = indexer.index_sources(sources)
        middle_rows = indexer.repository.fetch_alphabetical("middle", limit=10)
        lsj_rows = indexer.repository.fetch_alphabetical("lsj", limit=10)

    assert stats.errors == 0
    assert stats.entries == 5
    assert [row.headword for row in middle_rows] == ["ὅρος"]
    sequences = [row.sequence for row in lsj_rows + middle_rows]
    assert len(set(sequences)) == 5


def test_unavailable_source_does_not_abort_the_run(tmp_path: Path, corpus_dir: Path) -> None:
    class _FailingFetcher(SourceFetcher):
        def ensure(self, source: CorpusSource, *, refresh: bool = False) -> Path:
            if source.corpus_id == "remote":
                raise FetchError(source.corpus_id, "git clone failed: network down")
            return super().ensure(source, refresh=refresh)

    sources = [
        CorpusSource(corpus_id="remote", local_path=tmp_path / "remote", repo_url="https://example.org/x.git"),
        CorpusSource(corpus_id="lsj", local_path=corpus_dir),
    ]
    with DictionaryIndexer.from_db_path(tmp_path / "lexikon.db", fetcher=_FailingFetcher()) as indexer:
        stats = indexer.index_sources(sources)

    payload = stats.to_dict()
    assert payload["errors"] == 1
    assert payload["entries"] == 4
    assert payload["error_details"] == [
        {"corpus_id": "remote", "error": "git clone failed: network down (corpus=remote)"}
    ]


def test_cli_round_trip_index_search_browse(tmp_path: Path, corpus_dir: Path, capsys, monkeypatch) -> None:
    monkeypatch.delenv("LEXIKON_CORPORA", raising=False)
    db_path = tmp_path / "lexikon.db"

    index_exit = index_cli_main(["--db-path", str(db_path), "--corpus", f"lsj={corpus_dir}"])
    index_payload = json.loads(capsys.readouterr().out)

    search_exit = search_cli_main(["--db-path", str(db_path), "--query", "λογος"])
    search_payload = json.loads(capsys.readouterr().out)

    browse_exit = browse_cli_main(["--db-path", str(db_path), "--corpus", "lsj", "--start", "Λ", "--limit", "2"])
    browse_payload = json.loads(capsys.readouterr().out)

    assert index_exit == 0
    assert index_payload["entries"] == 4
    assert index_payload["errors"] == 0
    assert index_payload["duration_ms"] >= 0

    assert search_exit == 0
    assert [result["headword"] for result in search_payload["results"]] == ["λόγος"]

    assert browse_exit == 0
    assert [result["headword"] for result in browse_payload["results"]] == ["λόγος", "ὅρος"]


def test_cli_browse_from_headword_includes_its_duplicates(tmp_path: Path, corpus_dir: Path, capsys) -> None:
    db_path = tmp_path / "lexikon.db"
    index_cli_main(["--db-path", str(db_path), "--corpus", f"lsj={corpus_dir}"])
    capsys.readouterr()

    exit_code = browse_cli_main(["--db-path", str(db_path), "--corpus", "lsj", "--start", "ὅρος"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert [result["headword"] for result in payload["results"]] == ["ὅρος", "ὅρος2"]


def test_cli_exit_code_reflects_file_failures(tmp_path: Path, corpus_dir: Path, capsys) -> None:
    (corpus_dir / "broken.xml").write_text("<text><div2 id='a'>", encoding="utf-8")

    exit_code = index_cli_main(["--db-path", str(tmp_path / "lexikon.db"), "--corpus", f"lsj={corpus_dir}"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["errors"] == 1
    assert payload["entries"] == 4
