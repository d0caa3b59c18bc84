"""Tests for 'jai status'."""

import json
from argparse import Namespace

from jai.cli.status import status
from jai.focus import FocusContext


def _args(data_dir, json_mode=False, config_details=False):
    return Namespace(config=None, data_dir=str(data_dir), json=json_mode, config_details=config_details)


def _context(data_dir):
    return FocusContext.open(data_dir / "current.json")


def test_status_empty(seeded_dir, capsys):
    assert status(_args(seeded_dir)) == 0

    out = capsys.readouterr().out
    assert "Current Context:" in out
    assert "No context set" in out


def test_status_full_focus(seeded_dir, capsys):
    _context(seeded_dir).set_full("OBS-1", "OBS-2", "OBS-3")

    assert status(_args(seeded_dir)) == 0

    out = capsys.readouterr().out
    assert "Epic: Observability Refactor [OBS-1]" in out
    assert "Task: Add Jaeger exporter [OBS-2]" in out
    assert "Subtask: Write exporter config [OBS-3]" in out
    assert "Last Updated:" in out
    assert "*Subtask [OBS-3]" in out


def test_status_epic_only(seeded_dir, capsys):
    _context(seeded_dir).set_epic("OBS-1")

    assert status(_args(seeded_dir)) == 0
    assert "No Tasks" in capsys.readouterr().out


def test_status_unknown_ticket(seeded_dir, capsys):
    _context(seeded_dir).set_task("ABC-9")

    assert status(_args(seeded_dir)) == 0
    assert "Task: [ABC-9]" in capsys.readouterr().out


def test_status_json(seeded_dir, capsys):
    _context(seeded_dir).set_epic_and_task("OBS-1", "OBS-2")

    assert status(_args(seeded_dir, json_mode=True)) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["state"] == "epic+task"
    assert data["epic"]["title"] == "Observability Refactor"
    assert data["task"]["key"] == "OBS-2"
    assert data["subtask"] is None


def test_status_config_details(seeded_dir, monkeypatch, capsys):
    monkeypatch.setenv("JAI_JIRA_TOKEN", "abc")

    assert status(_args(seeded_dir, config_details=True)) == 0

    out = capsys.readouterr().out
    assert "Configuration:" in out
    assert f"data_dir: {seeded_dir}" in out
    assert "JAI_JIRA_TOKEN: set" in out
    assert "JAI_AI_TOKEN: not set" in out
