"""Local copies of corpus repositories via the git command line."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import subprocess

from lexikon.config import CorpusSource

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchError(Exception):
    """A corpus could not be made available locally."""

    corpus_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (corpus={self.corpus_id})"


class SourceFetcher:
    """Clone missing corpora and optionally fast-forward existing ones."""

    def __init__(self, *, git_executable: str = "git", timeout_seconds: float = 600.0) -> None:
        self._git = git_executable
        self._timeout_seconds = timeout_seconds

    def ensure(self, source: CorpusSource, *, refresh: bool = False) -> Path:
        """Return a readable local directory for ``source``."""

        target = source.local_path
        if source.repo_url is None:
            if not target.is_dir():
                raise FetchError(source.corpus_id, f"Corpus directory does not exist: {target}")
            return target

        if not (target / ".git").is_dir():
            if target.exists() and any(target.iterdir()):
                raise FetchError(source.corpus_id, f"Refusing to clone into non-empty directory: {target}")
            LOGGER.info("Cloning %s into %s", source.repo_url, target)
            target.parent.mkdir(parents=True, exist_ok=True)
            self._run(source, "clone", ["clone", "--depth", "1", source.repo_url, str(target)])
        elif refresh:
            LOGGER.info("Refreshing %s", target)
            self._run(source, "pull", ["-C", str(target), "pull", "--ff-only"])

        return target

    def _run(self, source: CorpusSource, action: str, args: list[str]) -> None:
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        try:
            completed = subprocess.run(
                [self._git, *args],
                env=env,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise FetchError(source.corpus_id, f"git {action} failed: {exc}") from exc

        if completed.returncode != 0:
            stderr_lines = (completed.stderr or "").strip().splitlines()
            detail = stderr_lines[-1] if stderr_lines else f"exit code {completed.returncode}"
            raise FetchError(source.corpus_id, f"git {action} failed: {detail}")
