"""Weekly planner domain built on the history engine.

``open_planner()`` wires the planner schema, its codec and a key-value store
into a :class:`~weekboard.core.history.HistoryEngine`:

    engine = open_planner(MemoryStore())
    engine.commit(*add_task(engine.read(), "Monday", "Gym"))
"""

from __future__ import annotations

from collections.abc import Iterable

from weekboard.core.history import HistoryEngine, ModelCodec, Renderer
from weekboard.core.persistence import FileStore, KeyValueStore
from weekboard.core.settings import load_settings

from .model import DAYS, PlannerState, upgrade_legacy_payload

LEGACY_STORAGE_KEYS: tuple[str, ...] = ("calendar-board-state-v1",)

PlannerEngine = HistoryEngine[PlannerState]


def planner_codec() -> ModelCodec[PlannerState]:
    """Return the codec for :class:`PlannerState` with v1 payload upgrades."""
    return ModelCodec(PlannerState, upgrade=upgrade_legacy_payload)


def open_planner(
    storage: KeyValueStore | None = None,
    *,
    storage_key: str | None = None,
    renderers: Iterable[Renderer[PlannerState]] = (),
) -> PlannerEngine:
    """
    Build a planner engine, loading the persisted state if there is one.

    Parameters
    ----------
    storage : KeyValueStore | None
        Persistence collaborator; defaults to a :class:`FileStore` under
        ``settings.state_dir``.
    storage_key : str | None
        Overrides ``settings.storage_key``.
    renderers : Iterable[Renderer[PlannerState]]
        Views to notify after each state-affecting operation.
    """
    cfg = load_settings()
    return HistoryEngine(
        planner_codec(),
        storage if storage is not None else FileStore(cfg.state_dir),
        storage_key=storage_key or cfg.storage_key,
        legacy_keys=LEGACY_STORAGE_KEYS,
        renderers=renderers,
    )


__all__ = ["DAYS", "LEGACY_STORAGE_KEYS", "PlannerEngine", "open_planner", "planner_codec"]
