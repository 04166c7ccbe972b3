"""
Versioned state engine: commit, preview, rollback and undo.

Every change to the live state goes through :meth:`HistoryEngine.commit`,
which records an independent snapshot of the result. Any recorded snapshot can
be inspected read-only (preview) or made the present again (rollback), which
discards every later entry.

Ordering
--------
For commit and rollback the engine always does, in this order:

1. persist the live state,
2. append to / truncate the history log,
3. move the cursor,
4. notify renderers.

Failed mutations
----------------
``commit`` runs the mutation against a deep copy of the live state and only
installs the copy when the mutation returns normally. If it raises, the
exception reaches the caller unchanged and nothing (state, log, cursor,
preview, storage) has changed.

Example
-------
>>> engine = HistoryEngine(codec, MemoryStore(), storage_key="demo")
>>> entry = engine.commit("rename", lambda s: setattr(s, "title", "new"))
>>> engine.undo()
True
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Generic, Protocol, TypeVar

from weekboard.core.persistence import KeyValueStore, read_first
from weekboard.core.settings import get_logger

from .codec import SnapshotCodec
from .entry import HistoryEntry, utc_timestamp
from .log import HistoryLog
from .store import StateStore

S = TypeVar("S")
S_contra = TypeVar("S_contra", contravariant=True)

Mutation = Callable[[S], None]

INITIAL_DESCRIPTION = "Initial state"

logger = get_logger("weekboard.history")


class Renderer(Protocol[S_contra]):
    """A view that redraws itself from the effective state."""

    def render(self, state: S_contra) -> None: ...


class HistoryEngine(Generic[S]):
    """
    Owns the live state, the history log, the cursor and the preview index.

    Parameters
    ----------
    codec : SnapshotCodec[S]
        Copies and (de)serializes state values.
    storage : KeyValueStore
        Persistence collaborator, written after every commit and rollback.
    storage_key : str
        Key the live state is written under.
    legacy_keys : Sequence[str]
        Older keys tried in order at startup when ``storage_key`` is empty.
    renderers : Iterable[Renderer[S]]
        Views notified after every state-affecting operation.
    """

    def __init__(
        self,
        codec: SnapshotCodec[S],
        storage: KeyValueStore,
        *,
        storage_key: str,
        legacy_keys: Sequence[str] = (),
        renderers: Iterable[Renderer[S]] = (),
    ) -> None:
        self._codec = codec
        self._storage = storage
        self._storage_key = storage_key
        self._renderers: list[Renderer[S]] = list(renderers)

        loaded_key, raw = read_first(storage, (storage_key, *legacy_keys))
        if loaded_key is not None and loaded_key != storage_key:
            logger.info("Migrating state from legacy key %r to %r", loaded_key, storage_key)
        state = codec.deserialize(raw)

        self._store: StateStore[S] = StateStore(state)
        self._log: HistoryLog[S] = HistoryLog(
            HistoryEntry(INITIAL_DESCRIPTION, codec.clone(state), utc_timestamp())
        )
        self._cursor = 0
        self._preview_index: int | None = None

    # ------------------------------- Read side ------------------------------

    def read(self) -> S:
        """Return the live state (a borrow; do not mutate it)."""
        return self._store.read()

    def effective_state(self) -> S:
        """Return the previewed snapshot while previewing, else the live state."""
        if self._preview_index is None:
            return self._store.read()
        return self._log[self._preview_index].snapshot

    @property
    def cursor(self) -> int:
        """Index of the entry the live state corresponds to."""
        return self._cursor

    @property
    def preview_index(self) -> int | None:
        return self._preview_index

    @property
    def is_previewing(self) -> bool:
        return self._preview_index is not None

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def entries(self) -> tuple[HistoryEntry[S], ...]:
        """Return the history log as an immutable tuple."""
        return self._log.entries()

    def __len__(self) -> int:
        return len(self._log)

    # ------------------------------- Renderers ------------------------------

    def subscribe(self, renderer: Renderer[S]) -> None:
        """Register ``renderer``; it is called after every state-affecting operation."""
        self._renderers.append(renderer)

    def unsubscribe(self, renderer: Renderer[S]) -> None:
        """Remove ``renderer`` if registered."""
        if renderer in self._renderers:
            self._renderers.remove(renderer)

    def _notify(self) -> None:
        state = self.effective_state()
        for renderer in tuple(self._renderers):
            renderer.render(state)

    def _persist(self) -> None:
        self._storage.write(self._storage_key, self._codec.serialize(self._store.read()))

    # ------------------------------- Commands -------------------------------

    def commit(self, description: str, mutation: Mutation[S]) -> HistoryEntry[S]:
        """
        Apply ``mutation`` to the live state and record the result.

        Parameters
        ----------
        description : str
            Label shown in history panels.
        mutation : Callable[[S], None]
            Changes the state in place. It receives a working copy; if it
            raises, the copy is discarded and the exception propagates.

        Returns
        -------
        HistoryEntry[S]
            The newly appended entry (now at the cursor).
        """
        working = self._codec.clone(self._store.read())
        try:
            mutation(working)
        except Exception:
            logger.warning("Mutation %r failed; live state left untouched", description)
            raise

        self._store.replace(working)
        self._persist()
        self._preview_index = None
        dropped = self._log.truncate_after(self._cursor)
        entry = HistoryEntry(description, self._codec.clone(working), utc_timestamp())
        self._cursor = self._log.append(entry)
        logger.debug(
            "Committed %r at index %d (discarded %d later entries)",
            description,
            self._cursor,
            dropped,
        )
        self._notify()
        return entry

    def enter_preview(self, index: int) -> bool:
        """
        Show the snapshot at ``index`` through :meth:`effective_state`.

        The live state, the cursor and the log are untouched. Out-of-range
        indices are ignored and return ``False``.
        """
        if not self._log.contains_index(index):
            logger.warning("Ignoring preview of index %d (history size %d)", index, len(self._log))
            return False
        self._preview_index = index
        self._notify()
        return True

    def exit_preview(self) -> None:
        """Stop previewing; the effective state is the live state again."""
        self._preview_index = None
        self._notify()

    def rollback(self, index: int) -> bool:
        """
        Make the entry at ``index`` the present, discarding every later entry.

        The live state becomes a fresh copy of that entry's snapshot, so later
        commits never write into recorded history. Out-of-range indices are
        ignored and return ``False``.
        """
        if not self._log.contains_index(index):
            logger.warning("Ignoring rollback to index %d (history size %d)", index, len(self._log))
            return False

        self._store.replace(self._codec.clone(self._log[index].snapshot))
        self._persist()
        dropped = self._log.truncate_after(index)
        self._cursor = index
        self._preview_index = None
        logger.debug("Rolled back to index %d (discarded %d entries)", index, dropped)
        self._notify()
        return True

    def undo(self) -> bool:
        """Roll back one entry; a no-op returning ``False`` at the first entry."""
        if self._cursor == 0:
            return False
        return self.rollback(self._cursor - 1)


__all__ = ["INITIAL_DESCRIPTION", "HistoryEngine", "Mutation", "Renderer"]
