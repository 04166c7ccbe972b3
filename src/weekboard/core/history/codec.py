"""
Snapshot codec: deep copies and the on-disk JSON format of a state value.

The engine never copies or parses state itself; it delegates to a codec so the
history machinery stays independent of the state schema.

- ``clone(state)``: a copy that shares no mutable substructure with ``state``.
- ``serialize(state)``: JSON text written to the key-value store.
- ``deserialize(raw)``: JSON text back to a state, never raising. Unparseable
  input yields ``default()``; partial or older payloads are merged over a fresh
  default and repaired node by node until they validate.

Repair strategy
---------------
Each pass collects every validation error and fixes them together, deepest
location first (and highest list index first within one list):

- a broken list item is dropped,
- a broken mapping value is reset to the default found at the same path, or
  removed when the default has nothing there,
- when the failing node does not exist (a missing required field), its parent
  is repaired instead.

Errors inside a node that is itself being repaired are skipped. Every pass
removes or resets at least one node, so the loop always terminates; a payload
that cannot be repaired falls back to ``default()``.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from weekboard.core.settings import get_logger

S = TypeVar("S")
M = TypeVar("M", bound=BaseModel)
Loc = tuple[int | str, ...]

logger = get_logger("weekboard.history.codec")

# Each pass fixes every error pydantic reports, so passes track nesting depth.
_MAX_REPAIR_PASSES = 32


class SnapshotCodec(Protocol[S]):
    """Contract the engine relies on for copying and persisting state."""

    def default(self) -> S: ...

    def clone(self, state: S) -> S: ...

    def serialize(self, state: S) -> str: ...

    def deserialize(self, raw: str | bytes | None) -> S: ...


def merge_defaults(defaults: Any, payload: Any) -> Any:
    """
    Deep-merge ``payload`` over ``defaults`` and return a new value.

    Only mappings are merged key by key; any other payload value (lists
    included) replaces the default wholesale. Neither argument is modified.
    """
    if isinstance(defaults, dict) and isinstance(payload, dict):
        merged = copy.deepcopy(defaults)
        for key, value in payload.items():
            merged[key] = merge_defaults(defaults[key], value) if key in defaults else value
        return merged
    return copy.deepcopy(payload)


def _lookup(tree: Any, loc: Loc) -> tuple[bool, Any]:
    """Follow ``loc`` through nested dicts/lists; return ``(found, value)``."""
    node = tree
    for key in loc:
        if isinstance(node, dict) and key in node:
            node = node[key]
        elif isinstance(node, list) and isinstance(key, int) and 0 <= key < len(node):
            node = node[key]
        else:
            return False, None
    return True, node


def _repair_target(payload: Any, loc: Loc) -> Loc | None:
    """Return ``loc`` or its nearest ancestor that exists in ``payload``."""
    while loc:
        found, parent = _lookup(payload, loc[:-1])
        last = loc[-1]
        if found and isinstance(parent, list) and isinstance(last, int) and 0 <= last < len(parent):
            return loc
        if found and isinstance(parent, dict) and last in parent:
            return loc
        loc = loc[:-1]
    return None


def _repair_node(payload: Any, defaults: Any, loc: Loc) -> None:
    """Drop the list item at ``loc``, or reset/remove the mapping value there."""
    _, parent = _lookup(payload, loc[:-1])
    last = loc[-1]
    if isinstance(parent, list):
        del parent[last]
        return
    has_default, fallback = _lookup(defaults, loc)
    if has_default and fallback != parent[last]:
        parent[last] = copy.deepcopy(fallback)
    else:
        del parent[last]


def _repair_order(loc: Loc) -> tuple[int, tuple[tuple[int, int | str], ...]]:
    # Deepest first; within one list, highest index first.
    return len(loc), tuple((0, p) if isinstance(p, int) else (1, str(p)) for p in loc)


def _repair_pass(payload: Any, defaults: Any, error_locs: list[Loc]) -> list[Loc]:
    """Repair every reported location in one sweep; return the repaired paths."""
    targets = {t for t in (_repair_target(payload, loc) for loc in error_locs) if t is not None}
    # A node inside a node that is itself repaired needs no separate fix.
    targets = {t for t in targets if not any(t[:i] in targets for i in range(1, len(t)))}
    ordered = sorted(targets, key=_repair_order, reverse=True)
    for loc in ordered:
        _repair_node(payload, defaults, loc)
    return ordered


class ModelCodec(Generic[M]):
    """
    :class:`SnapshotCodec` for a pydantic model whose fields all have defaults.

    Parameters
    ----------
    model_cls : type[M]
        The state model. ``model_cls()`` must build the default state.
    upgrade : Callable[[dict[str, Any]], dict[str, Any]] | None
        Optional hook applied to a raw payload before merging, used to rename
        legacy-shaped keys.
    """

    def __init__(
        self,
        model_cls: type[M],
        upgrade: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
    ) -> None:
        self.model_cls = model_cls
        self._upgrade = upgrade

    def default(self) -> M:
        return self.model_cls()

    def clone(self, state: M) -> M:
        return state.model_copy(deep=True)

    def serialize(self, state: M) -> str:
        return state.model_dump_json(by_alias=True)

    def deserialize(self, raw: str | bytes | None) -> M:
        """Parse ``raw`` into a state, repairing or defaulting instead of raising."""
        if not raw:
            return self.default()
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Discarding unparseable state payload: %s", exc)
            return self.default()
        if not isinstance(payload, dict):
            logger.warning(
                "Discarding state payload of type %s; expected an object",
                type(payload).__name__,
            )
            return self.default()

        if self._upgrade is not None:
            payload = self._upgrade(payload)
        defaults = self.default().model_dump(by_alias=True, mode="json")
        candidate = merge_defaults(defaults, payload)

        for _ in range(_MAX_REPAIR_PASSES):
            try:
                return self.model_cls.model_validate(candidate)
            except ValidationError as exc:
                repaired = _repair_pass(candidate, defaults, [tuple(e["loc"]) for e in exc.errors()])
                if not repaired:
                    break
                logger.warning(
                    "Repaired %d node(s) in state payload: %s",
                    len(repaired),
                    ", ".join(".".join(str(part) for part in loc) for loc in repaired[:10]),
                )
        logger.warning("State payload could not be repaired; using defaults")
        return self.default()


__all__ = ["ModelCodec", "SnapshotCodec", "merge_defaults"]
