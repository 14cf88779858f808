from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("stash_finder.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_scan_records_and_persists_stash(tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from stash_finder.main import app

    state = tmp_path / "stashes.json"
    args = ["scan", "--x", "10", "--z=-3", "--state-file", str(state)]
    blocks = ["-b", "chest"] * 4 + ["-b", "furnace"]

    runner = typer_testing.CliRunner()
    first = runner.invoke(app, [*args, *blocks], catch_exceptions=False)
    second = runner.invoke(app, [*args, *(["-b", "chest"] * 6)], catch_exceptions=False)

    assert first.exit_code == 0
    assert "discovered" in first.stdout
    assert "duplicate" in second.stdout
    assert json.loads(state.read_text(encoding="utf-8")) == [{"pos": {"x": 10, "z": -3}, "storageCount": 5}]


def test_replay_then_list_and_clear(tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from stash_finder.main import app

    events = tmp_path / "scans.jsonl"
    events.write_text(
        "\n".join(
            [
                json.dumps({"x": 1, "z": 1, "blocks": ["chest"] * 4}),
                json.dumps({"x": 2, "z": 2, "blocks": ["barrel"] * 9}),
                json.dumps({"x": 1, "z": 1, "blocks": ["chest"] * 8}),
                json.dumps({"x": 3, "z": 3, "blocks": ["chest"]}),
            ]
        ),
        encoding="utf-8",
    )
    state = tmp_path / "stashes.json"
    runner = typer_testing.CliRunner()

    replayed = runner.invoke(app, ["replay", str(events), "--state-file", str(state)], catch_exceptions=False)

    assert replayed.exit_code == 0
    assert json.loads(state.read_text(encoding="utf-8")) == [
        {"pos": {"x": 2, "z": 2}, "storageCount": 9},
        {"pos": {"x": 1, "z": 1}, "storageCount": 4},
    ]

    listed = runner.invoke(app, ["list", "--state-file", str(state)], catch_exceptions=False)
    assert "40, 40" in listed.stdout

    cleared = runner.invoke(app, ["clear", "--state-file", str(state)], catch_exceptions=False)
    assert "Cleared stashes." in cleared.stdout
    assert json.loads(state.read_text(encoding="utf-8")) == []
