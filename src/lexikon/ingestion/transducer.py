"""Streaming TEI transducer that turns dictionary markup into entry candidates.

The transducer is an lxml parser *target*: lxml pushes ``start``/``end``/
``data`` events while bytes are fed through ``XMLParser.feed``, so a source
file is never materialized as a tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from html import escape
from pathlib import Path
from typing import BinaryIO, Iterator, Mapping

from lxml import etree

from lexikon.ingestion.models import EntryCandidate, MarkupError

MIN_ENTRY_CHARS = 6
_READ_CHUNK_BYTES = 64 * 1024

_BOUNDARY_TAGS = frozenset({"div1", "div2"})
_ID_ATTRIBUTES = ("id", "{http://www.w3.org/XML/1998/namespace}id")

# Inline wrappers: tag -> css class of the <span> emitted into rich text
_SPAN_CLASSES: dict[str, str] = {
    "head": "head",
    "orth": "orth",
    "author": "au",
    "quote": "qu",
    "foreign": "fo",
    "i": "tr",
    "title": "ti",
}


class Region(Enum):
    """Structural region the transducer is currently in."""

    OUTSIDE = "outside"
    TEXT_SECTION = "text-section"
    ENTRY = "entry"
    ENTRY_OUTSIDE_TEXT = "entry-outside-text"


@dataclass(slots=True)
class EntryBuffers:
    """Accumulation buffers owned by the boundary opened at ``owner_depth``."""

    owner_depth: int
    rich: list[str] = field(default_factory=list)
    plain: list[str] = field(default_factory=list)
    headword: list[str] = field(default_factory=list)
    variants: list[str] = field(default_factory=list)
    sense_count: int = 0
    open_wrappers: list[tuple[str, str]] = field(default_factory=list)


@dataclass(slots=True)
class ParserState:
    """Per-file transducer state; ``entry`` exists only inside an entry."""

    text_depth: int = 0
    boundary_depth: int = 0
    head_depth: int = 0
    orth_depth: int = 0
    entry: EntryBuffers | None = None

    @property
    def region(self) -> Region:
        if self.entry is not None:
            return Region.ENTRY if self.text_depth else Region.ENTRY_OUTSIDE_TEXT
        return Region.TEXT_SECTION if self.text_depth else Region.OUTSIDE


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _identifier(attrib: Mapping[str, str]) -> str | None:
    for name in _ID_ATTRIBUTES:
        value = attrib.get(name)
        if value:
            return value
    return None


class EntryTransducer:
    """lxml parser target emitting :class:`EntryCandidate` objects."""

    def __init__(self, *, min_chars: int = MIN_ENTRY_CHARS) -> None:
        self._min_chars = min_chars
        self._state = ParserState()
        self._ready: list[EntryCandidate] = []

    @property
    def state(self) -> ParserState:
        return self._state

    def drain(self) -> list[EntryCandidate]:
        """Return and forget candidates completed since the last drain."""

        ready, self._ready = self._ready, []
        return ready

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        name = _local_name(tag)
        state = self._state

        if name == "text":
            state.text_depth += 1
            return

        if name in _BOUNDARY_TAGS:
            state.boundary_depth += 1
            identifier = _identifier(attrib)
            if identifier is None:
                # grouping container (e.g. a letter heading), not an entry
                return
            state.entry = EntryBuffers(owner_depth=state.boundary_depth)
            state.entry.rich.append(f'<div id="{escape(identifier)}">')
            return

        if name == "head":
            state.head_depth += 1
        elif name == "orth":
            state.orth_depth += 1

        entry = state.entry
        if entry is None:
            return

        if name == "sense":
            self._open_sense(entry, attrib)
        elif name == "bibl":
            reference = (attrib.get("n") or "").strip()
            if reference:
                entry.rich.append(f'<a class="bibl" href="{escape(reference)}">')
            else:
                entry.rich.append('<a class="bibl">')
            entry.open_wrappers.append((name, "</a>"))
        elif name in _SPAN_CLASSES:
            entry.rich.append(f'<span class="{_SPAN_CLASSES[name]}">')
            entry.open_wrappers.append((name, "</span>"))

    def end(self, tag: str) -> None:
        name = _local_name(tag)
        state = self._state

        if name == "text":
            state.text_depth -= 1
            return

        if name in _BOUNDARY_TAGS:
            depth = state.boundary_depth
            state.boundary_depth -= 1
            entry = state.entry
            if entry is not None and entry.owner_depth == depth:
                entry.rich.append("</div>")
                self._close_entry(entry)
            return

        if name == "head":
            state.head_depth -= 1
        elif name == "orth":
            state.orth_depth -= 1

        entry = state.entry
        if entry is not None and entry.open_wrappers and entry.open_wrappers[-1][0] == name:
            _, closer = entry.open_wrappers.pop()
            entry.rich.append(closer)

    def data(self, text: str) -> None:
        state = self._state
        entry = state.entry
        if entry is None:
            return

        entry.plain.append(text)
        entry.rich.append(escape(text, quote=False))
        if state.head_depth:
            entry.headword.append(text)
        if state.orth_depth:
            entry.variants.append(text)

    def close(self) -> list[EntryCandidate]:
        return self.drain()

    def _open_sense(self, entry: EntryBuffers, attrib: Mapping[str, str]) -> None:
        entry.sense_count += 1
        entry.rich.append("<br/><br/>" if entry.sense_count == 1 else "<br/>")

        level = (attrib.get("level") or "").strip()
        css_class = f"sense level-{escape(level)}" if level else "sense"
        entry.rich.append(f'<div class="{css_class}">')

        label = (attrib.get("n") or "").strip()
        if label:
            entry.rich.append(f'<span class="sense-label">{escape(label, quote=False)}</span> ')
        entry.open_wrappers.append(("sense", "</div>"))

    def _close_entry(self, entry: EntryBuffers) -> None:
        state = self._state
        state.entry = None

        plain_text = "".join(entry.plain).strip()
        if not state.text_depth or len(plain_text) <= self._min_chars:
            return

        self._ready.append(
            EntryCandidate(
                headword="".join(entry.headword).strip(),
                rich_text="".join(entry.rich),
                plain_text=plain_text,
                variants="".join(entry.variants).strip(),
            )
        )


def _build_parser(transducer: EntryTransducer) -> etree.XMLParser:
    return etree.XMLParser(
        target=transducer,
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
    )


def iter_entry_candidates(
    stream: BinaryIO,
    *,
    min_chars: int = MIN_ENTRY_CHARS,
    chunk_size: int = _READ_CHUNK_BYTES,
) -> Iterator[EntryCandidate]:
    """Yield entry candidates while streaming markup bytes from ``stream``.

    Raises ``lxml.etree.XMLSyntaxError`` as soon as the markup turns out to
    be malformed; candidates yielded before that point belong to a file that
    must be considered failed.
    """

    transducer = EntryTransducer(min_chars=min_chars)
    parser = _build_parser(transducer)
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        parser.feed(chunk)
        yield from transducer.drain()
    yield from parser.close()


def transduce_bytes(payload: bytes, *, min_chars: int = MIN_ENTRY_CHARS) -> list[EntryCandidate]:
    """Transduce an in-memory markup document."""

    transducer = EntryTransducer(min_chars=min_chars)
    parser = _build_parser(transducer)
    parser.feed(payload)
    return parser.close()


def transduce_file(path: str | Path, *, min_chars: int = MIN_ENTRY_CHARS) -> list[EntryCandidate]:
    """Transduce one source file, all or nothing.

    Any syntax or read error is raised as :class:`MarkupError`; no candidate
    of a failing file is returned.
    """

    source = Path(path)
    try:
        with source.open("rb") as stream:
            return list(iter_entry_candidates(stream, min_chars=min_chars))
    except etree.XMLSyntaxError as exc:
        raise MarkupError(source, f"Malformed markup: {exc.msg}", exc.lineno, exc.offset) from exc
    except OSError as exc:
        raise MarkupError(source, f"Failed to read source file: {exc}") from exc
