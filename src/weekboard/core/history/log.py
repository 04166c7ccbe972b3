"""Ordered, append-or-truncate history log."""

from __future__ import annotations

from typing import Generic, TypeVar

from .entry import HistoryEntry

S = TypeVar("S")


class HistoryLog(Generic[S]):
    """
    Sequence of :class:`HistoryEntry` that never shrinks below one entry.

    Entries are never replaced in place. The only mutations are ``append`` and
    ``truncate_after`` (suffix removal).
    """

    __slots__ = ("_entries",)

    def __init__(self, initial: HistoryEntry[S]) -> None:
        self._entries: list[HistoryEntry[S]] = [initial]

    def append(self, entry: HistoryEntry[S]) -> int:
        """Append ``entry`` and return its index."""
        self._entries.append(entry)
        return len(self._entries) - 1

    def truncate_after(self, index: int) -> int:
        """
        Keep entries ``[0, index]`` and drop the rest.

        Returns the number of discarded entries. Indices outside the log raise
        ``IndexError``; the engine checks bounds before calling.
        """
        if not 0 <= index < len(self._entries):
            raise IndexError(f"history index {index} out of range (size {len(self._entries)})")
        dropped = len(self._entries) - (index + 1)
        del self._entries[index + 1 :]
        return dropped

    def contains_index(self, index: int) -> bool:
        """Return ``True`` if ``index`` addresses an existing entry."""
        return 0 <= index < len(self._entries)

    def entries(self) -> tuple[HistoryEntry[S], ...]:
        """Return all entries as an immutable tuple."""
        return tuple(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry[S]:
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["HistoryLog"]
