# tests/test_cli.py
"""
Tests for the Weekboard command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `--help` lists the commands.
2.  **Shell Session**: scripted input drives commits, preview, rollback and undo
    through one engine, and the live state is persisted under `--state-dir`.
3.  **Error Handling**: bad shell input prints an error and keeps the session alive.

We use `typer.testing.CliRunner` to invoke the app in-process.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from weekboard.cli import app


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Create a fresh CliRunner for each test."""
    return CliRunner()


def _stored(state_dir: Path) -> dict[str, Any]:
    return json.loads((state_dir / "weekboard-state-v2.json").read_text(encoding="utf-8"))


def _shell(runner: CliRunner, state_dir: Path, *lines: str) -> str:
    result = runner.invoke(
        app, ["shell", "--state-dir", str(state_dir)], input="\n".join(lines) + "\n"
    )
    assert result.exit_code == 0, f"CLI Failed with Output:\n{result.output}"
    return result.output


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    assert "Weekboard" in result.output
    for command in ("show", "shell", "serve"):
        assert command in result.output


def test_shell_commits_and_persists(runner: CliRunner, tmp_path: Path) -> None:
    output = _shell(runner, tmp_path, 'add monday "Dentist at 10"', "pin 1", "quit")
    assert "Dentist at 10" in output
    assert "History" in output

    monday = _stored(tmp_path)["days"]["Monday"]
    assert [(t["title"], t["pinned"]) for t in monday] == [("Dentist at 10", True)]


def test_shell_rollback_discards_later_entries(runner: CliRunner, tmp_path: Path) -> None:
    _shell(
        runner,
        tmp_path,
        "add monday A",
        "add monday B",
        "rollback 1",
        "add monday C",
        "quit",
    )
    monday = _stored(tmp_path)["days"]["Monday"]
    assert [t["title"] for t in monday] == ["A", "C"]


def test_shell_preview_does_not_change_persisted_state(runner: CliRunner, tmp_path: Path) -> None:
    output = _shell(runner, tmp_path, "add friday Review", "preview 0", "log")
    assert "Preview mode" in output
    assert "Initial state" in output
    assert [t["title"] for t in _stored(tmp_path)["days"]["Friday"]] == ["Review"]


def test_shell_undo_and_nothing_to_undo(runner: CliRunner, tmp_path: Path) -> None:
    output = _shell(runner, tmp_path, "add sunday Rest", "undo", "undo")
    assert "Nothing to undo." in output
    assert _stored(tmp_path)["days"]["Sunday"] == []


def test_shell_reports_bad_input_and_continues(runner: CliRunner, tmp_path: Path) -> None:
    output = _shell(
        runner,
        tmp_path,
        "frobnicate",
        "add someday X",
        "del 5",
        "add",
        "add tuesday Still works",
    )
    assert "Unknown command" in output
    assert "unknown day" in output
    assert "task 5 does not exist" in output
    assert "Usage" in output
    assert [t["title"] for t in _stored(tmp_path)["days"]["Tuesday"]] == ["Still works"]


def test_shell_board_commands(runner: CliRunner, tmp_path: Path) -> None:
    output = _shell(
        runner,
        tmp_path,
        "add monday Plan",
        "cloud 1",
        "cloud 1",
        'text 1 1 "first idea"',
        "group 1 1 2",
        "drag 1 2 10 5",
        "zoom 1 in",
    )
    assert "Board: Plan" in output
    board = _stored(tmp_path)["boards"]["1"]
    assert board["zoom"] == 1.1
    assert [(c["x"], c["y"], c["groupId"]) for c in board["clouds"]] == [
        (60.0, 55.0, 1),
        (60.0, 55.0, 1),
    ]
    assert board["clouds"][0]["text"] == "first idea"


def test_show_renders_persisted_week(runner: CliRunner, tmp_path: Path) -> None:
    _shell(runner, tmp_path, "add wednesday Swim")
    result = runner.invoke(app, ["show", "--state-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Swim" in result.output
    assert "Week (sorted by created)" in result.output
    assert "1 task" in result.output
