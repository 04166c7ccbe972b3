"""Integration tests for the Weekboard HTTP API.

The app is built with an injected engine over a `MemoryStore`, so each test gets
an isolated history and nothing touches the filesystem.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from weekboard import __version__ as PKG_VERSION
from weekboard.api.app import create_app
from weekboard.core.history import HistoryEngine, ModelCodec
from weekboard.core.persistence import MemoryStore
from weekboard.planner import LEGACY_STORAGE_KEYS, open_planner
from weekboard.planner.model import PlannerState, upgrade_legacy_payload


@pytest.fixture  # type: ignore[misc]
def client() -> TestClient:
    engine = open_planner(MemoryStore(), storage_key="api-test")
    return TestClient(create_app(engine))


def _add(client: TestClient, title: str, day: str = "Monday") -> int:
    resp = client.post("/tasks", json={"day": day, "title": title})
    assert resp.status_code == 201, resp.text
    state = client.get("/state").json()["state"]
    return int(state["nextTaskId"]) - 1


def _monday(client: TestClient) -> list[str]:
    return [t["title"] for t in client.get("/state").json()["state"]["days"]["Monday"]]


def test_health_endpoint_contract(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["environment"] in {"dev", "test", "prod"}
    assert data["version"] == PKG_VERSION


def test_commit_rollback_commit_scenario(client: TestClient) -> None:
    """A, B, rollback(1), C: the log ends as [initial, A, C]."""
    _add(client, "A")
    _add(client, "B")
    history = client.get("/history").json()
    assert history["cursor"] == 2
    assert len(history["entries"]) == 3

    resp = client.post("/history/rollback/1")
    assert resp.json() == {
        "applied": True,
        "cursor": 1,
        "size": 2,
        "description": 'Added task "A" to Monday',
    }

    _add(client, "C")
    history = client.get("/history").json()
    assert [e["description"] for e in history["entries"]] == [
        "Initial state",
        'Added task "A" to Monday',
        'Added task "C" to Monday',
    ]
    assert [e["current"] for e in history["entries"]] == [False, False, True]
    assert _monday(client) == ["A", "C"]


def test_preview_redirects_state_reads(client: TestClient) -> None:
    _add(client, "A")
    resp = client.post("/history/preview/0")
    assert resp.json()["applied"] is True

    view = client.get("/state").json()
    assert view["previewing"] is True
    assert view["preview_index"] == 0
    assert view["cursor"] == 1
    assert view["state"]["days"]["Monday"] == []
    assert client.get("/history").json()["entries"][0]["previewed"] is True

    client.delete("/history/preview")
    view = client.get("/state").json()
    assert view["previewing"] is False
    assert _monday(client) == ["A"]


def test_out_of_range_indices_are_not_applied(client: TestClient) -> None:
    _add(client, "A")
    assert client.post("/history/preview/9").json()["applied"] is False
    resp = client.post("/history/rollback/9").json()
    assert (resp["applied"], resp["cursor"], resp["size"]) == (False, 1, 2)


def test_undo_until_first_entry(client: TestClient) -> None:
    _add(client, "A")
    assert client.post("/history/undo").json()["applied"] is True
    assert client.post("/history/undo").json()["applied"] is False
    assert _monday(client) == []


def test_rejected_command_returns_400_without_commit(client: TestClient) -> None:
    resp = client.delete("/tasks/404")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Bad Request", "detail": "task 404 does not exist"}

    resp = client.post("/tasks", json={"day": "Someday", "title": "x"})
    assert resp.status_code == 400
    assert len(client.get("/history").json()["entries"]) == 1


def test_request_validation_errors(client: TestClient) -> None:
    assert client.post("/tasks", json={"day": "Monday", "title": ""}).status_code == 422
    assert client.put("/sort", json={"mode": "shuffle"}).status_code == 422


def test_calendar_routes(client: TestClient) -> None:
    a = _add(client, "A")
    b = _add(client, "B", day="Tuesday")

    assert client.post(f"/tasks/{a}/pin").status_code == 200
    assert client.post(f"/tasks/{b}/move", json={"to_day": "Monday"}).status_code == 200
    assert client.put("/sort", json={"mode": "alpha"}).json()["description"] == (
        "Changed sort mode to alpha"
    )
    state = client.get("/state").json()["state"]
    assert state["sortMode"] == "alpha"
    assert [t["title"] for t in state["days"]["Monday"]] == ["A", "B"]

    client.post("/tasks/clear-unpinned")
    assert _monday(client) == ["A"]
    client.delete(f"/tasks/{a}")
    assert _monday(client) == []


def test_board_routes(client: TestClient) -> None:
    a = _add(client, "A")
    for _ in range(2):
        assert client.post(f"/boards/{a}/clouds").status_code == 201

    assert client.patch(f"/boards/{a}/clouds/1", json={"text": "hello"}).status_code == 200
    assert client.post(f"/boards/{a}/groups", json={"cloud_ids": [1, 2]}).status_code == 200
    assert client.post(f"/boards/{a}/zoom", json={"direction": "out"}).status_code == 200
    assert client.post(f"/boards/{a}/clouds/2/move", json={"dx": 9, "dy": 0}).status_code == 200

    board = client.get("/state").json()["state"]["boards"][str(a)]
    assert board["zoom"] == 0.9
    assert [c["x"] for c in board["clouds"]] == pytest.approx([60.0, 60.0])
    assert board["clouds"][0]["text"] == "hello"

    client.post(f"/boards/{a}/ungroup", json={"cloud_ids": [1, 2]})
    board = client.get("/state").json()["state"]["boards"][str(a)]
    assert [c["groupId"] for c in board["clouds"]] == [None, None]

    resp = client.post(f"/boards/{a}/groups", json={"cloud_ids": [1, 99]})
    assert resp.status_code == 400


class _SlowCodec(ModelCodec[PlannerState]):
    """Stretches each commit so overlapping requests would interleave."""

    def clone(self, state: PlannerState) -> PlannerState:
        time.sleep(0.001)
        return super().clone(state)


def test_concurrent_commits_are_serialised() -> None:
    engine = HistoryEngine(
        _SlowCodec(PlannerState, upgrade=upgrade_legacy_payload),
        MemoryStore(),
        storage_key="api-concurrency",
        legacy_keys=LEGACY_STORAGE_KEYS,
    )
    client = TestClient(create_app(engine))

    def post(i: int) -> int:
        return client.post("/tasks", json={"day": "Monday", "title": f"t{i}"}).status_code

    with ThreadPoolExecutor(max_workers=16) as pool:
        statuses = list(pool.map(post, range(40)))

    assert statuses == [201] * 40
    monday = engine.read().days["Monday"]
    assert len(monday) == 40
    assert len({t.id for t in monday}) == 40
    assert len(engine) == 41
    # Every recorded snapshot holds exactly the tasks committed up to it.
    assert [len(e.snapshot.days["Monday"]) for e in engine.entries()] == list(range(41))
