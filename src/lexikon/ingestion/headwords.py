"""Per-corpus headword disambiguation."""

from __future__ import annotations


class HeadwordRegistry:
    """Occurrence counts of raw headwords within one corpus pass.

    ``resolve`` must be called once per emitted entry, in document order;
    calling it out of order changes which duplicate gets which suffix.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._counts)

    def resolve(self, raw_headword: str) -> str:
        """Return ``raw_headword`` on first sight, else suffix the occurrence count."""

        if not raw_headword:
            raise ValueError("Headword cannot be empty")

        count = self._counts.get(raw_headword, 0) + 1
        self._counts[raw_headword] = count
        if count == 1:
            return raw_headword
        return f"{raw_headword}{count}"

    def count(self, raw_headword: str) -> int:
        return self._counts.get(raw_headword, 0)

    def snapshot(self) -> dict[str, int]:
        return dict(self._counts)
