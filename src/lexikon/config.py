"""Runtime configuration for corpus indexing."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Mapping


DEFAULT_DB_PATH = ".lexikon.db"
DEFAULT_DATA_DIR = "corpora"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CORPORA = "lsj=https://github.com/helmadik/LSJLogeion.git"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class CorpusSource:
    """One lexicon: a git remote cloned under the data dir, or a local directory."""

    corpus_id: str
    local_path: Path
    repo_url: str | None = None
    pattern: str = "*.xml"


def _is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://", "git@", "ssh://", "git://"))


def parse_corpora(raw_value: str, *, data_dir: Path) -> tuple[CorpusSource, ...]:
    """Parse ``id=url_or_path;id=url_or_path`` into corpus sources."""

    sources: list[CorpusSource] = []
    seen: set[str] = set()
    for item in raw_value.split(";"):
        item = item.strip()
        if not item:
            continue
        corpus_id, separator, location = item.partition("=")
        corpus_id = corpus_id.strip()
        location = location.strip()
        if not separator or not corpus_id or not location:
            raise ValueError(f"LEXIKON_CORPORA entry must look like id=location: {item!r}")
        if corpus_id in seen:
            raise ValueError(f"LEXIKON_CORPORA lists corpus {corpus_id!r} twice")
        seen.add(corpus_id)

        if _is_remote(location):
            sources.append(CorpusSource(corpus_id=corpus_id, local_path=data_dir / corpus_id, repo_url=location))
        else:
            sources.append(CorpusSource(corpus_id=corpus_id, local_path=Path(location).expanduser()))

    if not sources:
        raise ValueError("LEXIKON_CORPORA must name at least one corpus")
    return tuple(sources)


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw_value!r}")


@dataclass(frozen=True, slots=True)
class IndexSettings:
    """Validated settings for indexing and search commands."""

    db_path: Path
    data_dir: Path
    corpora: tuple[CorpusSource, ...] = field(default_factory=tuple)
    refresh_sources: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "IndexSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        db_path_raw = source.get("LEXIKON_DB_PATH", DEFAULT_DB_PATH).strip()
        if not db_path_raw:
            raise ValueError("LEXIKON_DB_PATH cannot be empty")

        data_dir_raw = source.get("LEXIKON_DATA_DIR", DEFAULT_DATA_DIR).strip()
        if not data_dir_raw:
            raise ValueError("LEXIKON_DATA_DIR cannot be empty")
        data_dir = Path(data_dir_raw).expanduser()

        log_level = source.get("LEXIKON_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"LEXIKON_LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}")

        refresh = _parse_bool(
            name="LEXIKON_REFRESH_SOURCES",
            raw_value=source.get("LEXIKON_REFRESH_SOURCES", "false"),
        )
        corpora = parse_corpora(source.get("LEXIKON_CORPORA", DEFAULT_CORPORA), data_dir=data_dir)

        return cls(
            db_path=Path(db_path_raw).expanduser(),
            data_dir=data_dir,
            corpora=corpora,
            refresh_sources=refresh,
            log_level=log_level,
        )
