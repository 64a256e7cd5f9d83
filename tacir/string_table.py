"""A table that interns strings met during lexical analysis."""

from __future__ import annotations

from typing import Iterator

__all__ = ["StringTable"]


class StringTable:
    """Keeps one shared copy of each distinct string."""

    def __init__(self) -> None:
        self._strings: dict[str, str] = {}

    def add(self, text: str) -> str:
        """Return the stored copy of `text`, storing it first if it is new."""
        return self._strings.setdefault(text, text)

    def __len__(self) -> int:
        return len(self._strings)

    def __contains__(self, text: object) -> bool:
        return text in self._strings

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings.values())