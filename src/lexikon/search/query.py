"""FTS5 query builder and result mapping for dictionary search."""

from __future__ import annotations

from dataclasses import dataclass
import re
import sqlite3
import unicodedata

from razdel import tokenize

from lexikon.search.tokenize import fold_terms


_WORD_RE = re.compile(r"[^\W_]+")


@dataclass(slots=True)
class EntryHit:
    sequence: int
    corpus_id: str
    headword: str
    sort_key: str
    rank: float
    excerpt: str

    def to_dict(self) -> dict[str, str | int | float]:
        return {
            "sequence": self.sequence,
            "corpus_id": self.corpus_id,
            "headword": self.headword,
            "sort_key": self.sort_key,
            "rank": self.rank,
            "excerpt": self.excerpt,
        }


def _extract_terms(text: str) -> list[str]:
    terms: list[str] = []
    for token in tokenize(unicodedata.normalize("NFC", text).lower()):
        terms.extend(_WORD_RE.findall(token.text))
    return terms


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _columns_clause(columns: tuple[str, str], terms: list[str], *, phrase_mode: bool) -> str:
    column_filter = "{" + " ".join(columns) + "}"
    if phrase_mode:
        return f"{column_filter}:{_quoted(' '.join(terms))}"
    return " AND ".join(f"{column_filter}:{_quoted(term)}" for term in terms)


def build_match_expression(query: str, *, phrase_mode: bool = False) -> str:
    """Build an FTS5 MATCH expression for ``query``.

    The exact (accented) form is matched against ``headword``/``plain_text``
    and the folded form against ``folded_headword``/``folded_text``; either
    side matching is enough.
    """

    raw_terms = _extract_terms(query)
    folded_terms = fold_terms(query)

    if not raw_terms and not folded_terms:
        return ""

    expressions: list[str] = []
    if raw_terms:
        expressions.append(_columns_clause(("headword", "plain_text"), raw_terms, phrase_mode=phrase_mode))
    if folded_terms:
        expressions.append(
            _columns_clause(("folded_headword", "folded_text"), folded_terms, phrase_mode=phrase_mode)
        )
    return " OR ".join(f"({expression})" for expression in expressions)


def search_entries(
    connection: sqlite3.Connection,
    *,
    query: str,
    limit: int = 10,
    corpus_id: str | None = None,
    phrase_mode: bool = False,
) -> list[EntryHit]:
    match_expression = build_match_expression(query, phrase_mode=phrase_mode)
    if not match_expression:
        return []

    safe_limit = max(1, min(limit, 100))
    where_clauses = ["entries_fts MATCH ?"]
    params: list[object] = [match_expression]

    if corpus_id and corpus_id.strip():
        where_clauses.append("e.corpus_id = ?")
        params.append(corpus_id.strip())

    sql = f"""
        SELECT
            e.sequence AS sequence,
            e.corpus_id AS corpus_id,
            e.headword AS headword,
            e.sort_key AS sort_key,
            entries_fts.plain_text AS plain_text,
            bm25(entries_fts, 4.0, 1.0, 4.0, 1.0) AS rank,
            snippet(entries_fts, 1, '«', '»', ' … ', 24) AS excerpt
        FROM entries_fts
        JOIN entries e ON e.sequence = entries_fts.rowid
        WHERE {' AND '.join(where_clauses)}
        ORDER BY rank ASC, e.sort_key ASC
        LIMIT ?
    """
    params.append(safe_limit)
    rows = connection.execute(sql, tuple(params)).fetchall()

    return [
        EntryHit(
            sequence=int(row["sequence"]),
            corpus_id=row["corpus_id"],
            headword=row["headword"],
            sort_key=row["sort_key"],
            rank=float(row["rank"]),
            excerpt=row["excerpt"] or row["plain_text"],
        )
        for row in rows
    ]
