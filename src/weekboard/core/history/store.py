"""Holder of the single live state value."""

from __future__ import annotations

from typing import Generic, TypeVar

S = TypeVar("S")


class StateStore(Generic[S]):
    """
    Owns the canonical live state.

    ``read()`` hands out a borrow: callers render from it but must not mutate
    it. ``replace()`` is reserved for :class:`~weekboard.core.history.engine.HistoryEngine`.
    """

    __slots__ = ("_state",)

    def __init__(self, state: S) -> None:
        self._state = state

    def read(self) -> S:
        """Return the live state (borrowed, read-only by contract)."""
        return self._state

    def replace(self, new_state: S) -> None:
        """Install ``new_state`` as the live state."""
        self._state = new_state


__all__ = ["StateStore"]
