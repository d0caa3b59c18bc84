"""Tests for 'jai epic', 'jai task', 'jai subtask' and 'jai rekey'."""

import json
from argparse import Namespace
from io import StringIO

import pytest

from jai.cli.ticket import epic_add, rekey, subtask_add, task_add
from jai.focus import FocusContext
from jai.store import FileTicketStore


def _add_args(data_dir, title, key="", body="", json_mode=False):
    return Namespace(config=None, data_dir=str(data_dir), json=json_mode, title=title, key=key, body=body)


def _rekey_args(data_dir, old_key, new_key):
    return Namespace(config=None, data_dir=str(data_dir), json=False, old_key=old_key, new_key=new_key)


def _focus(data_dir):
    return FocusContext.open(data_dir / "current.json")


def _store(data_dir):
    return FileTicketStore(data_dir / "tickets")


def test_epic_add(data_dir, capsys):
    assert epic_add(_add_args(data_dir, "Platform work", key="PLAT-1", body="Consolidate.")) == 0

    out = capsys.readouterr().out
    assert "Added epic: Platform work [PLAT-1]" in out
    assert "Focus: Epic: PLAT-1" in out
    text = (data_dir / "tickets" / "PLAT-1.md").read_text()
    assert text.startswith("# epic: Platform work [PLAT-1]\nConsolidate.\n")
    assert _focus(data_dir).epic_key == "PLAT-1"


def test_epic_key_from_title(data_dir, capsys):
    assert epic_add(_add_args(data_dir, "Platform [PLAT-4]")) == 0
    ticket = _store(data_dir).find_by_key("PLAT-4")
    assert ticket.title == "Platform"


def test_epic_draft_goes_to_inbox(data_dir, capsys):
    assert epic_add(_add_args(data_dir, "Someday idea")) == 0

    out = capsys.readouterr().out
    assert "Drafted epic in inbox.md: Someday idea (no key, focus unchanged)" in out
    assert (data_dir / "tickets" / "inbox.md").read_text().startswith("# epic: Someday idea\n")
    assert _focus(data_dir).describe() == "No context set"


def test_epic_add_json(data_dir, capsys):
    assert epic_add(_add_args(data_dir, "Platform", key="PLAT-1", json_mode=True)) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["ticket"]["key"] == "PLAT-1"
    assert data["ticket"]["type"] == "epic"
    assert data["focus"]["epic_key"] == "PLAT-1"


def test_invalid_key(data_dir, capsys):
    with pytest.raises(SystemExit, match="1"):
        epic_add(_add_args(data_dir, "Platform", key="plat1"))
    assert "not a ticket key" in capsys.readouterr().err


def test_duplicate_key(seeded_dir, capsys):
    with pytest.raises(SystemExit, match="1"):
        epic_add(_add_args(seeded_dir, "Again", key="OBS-2"))
    assert "Ticket 'OBS-2' already exists." in capsys.readouterr().err


def test_body_from_stdin(data_dir, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", StringIO("From stdin.\n"))
    assert epic_add(_add_args(data_dir, "Platform", key="PLAT-1", body="-")) == 0
    assert _store(data_dir).find_by_key("PLAT-1").raw_content == "From stdin."


def test_task_under_focused_epic(seeded_dir, capsys):
    _focus(seeded_dir).set_epic("OBS-1")

    assert task_add(_add_args(seeded_dir, "Add metrics", key="OBS-9")) == 0

    keys = [t.key for t in _store(seeded_dir).load_one(seeded_dir / "tickets" / "OBS-1.md").tickets]
    assert keys == ["OBS-1", "OBS-2", "OBS-3", "OBS-9"]
    assert _store(seeded_dir).find_by_key("OBS-9").epic_key == "OBS-1"
    focus = _focus(seeded_dir)
    assert (focus.epic_key, focus.task_key) == ("OBS-1", "OBS-9")
    assert "Focus: Epic: OBS-1 → Task: OBS-9" in capsys.readouterr().out


def test_orphan_task(seeded_dir, capsys):
    assert task_add(_add_args(seeded_dir, "Renew certs", key="ORP-2")) == 0

    ticket = _store(seeded_dir).load_one(seeded_dir / "tickets" / "ORP-2.md").tickets[0]
    assert ticket.is_orphan
    focus = _focus(seeded_dir)
    assert focus.epic_key == ""
    assert focus.task_key == "ORP-2"


def test_subtask_requires_task(seeded_dir, capsys):
    with pytest.raises(SystemExit, match="1"):
        subtask_add(_add_args(seeded_dir, "Orphaned", key="OBS-10"))
    assert "No task focused" in capsys.readouterr().err


def test_subtask_under_focused_task(seeded_dir, capsys):
    _focus(seeded_dir).set_epic_and_task("OBS-1", "OBS-2")

    assert subtask_add(_add_args(seeded_dir, "Add sampler flag", key="OBS-10")) == 0

    subtask = _store(seeded_dir).find_by_key("OBS-10")
    assert subtask.parent_key == "OBS-2"
    assert subtask.epic_key == "OBS-1"
    assert _store(seeded_dir).locate("OBS-10") == seeded_dir / "tickets" / "OBS-1.md"
    assert _focus(seeded_dir).subtask_key == "OBS-10"


def test_rekey_moves_own_document(seeded_dir, capsys):
    _focus(seeded_dir).set_task("ORP-7")

    assert rekey(_rekey_args(seeded_dir, "ORP-7", "ORP-8")) == 0

    assert "Renamed ORP-7 to ORP-8 (ORP-8.md)" in capsys.readouterr().out
    assert not (seeded_dir / "tickets" / "ORP-7.md").exists()
    assert _store(seeded_dir).find_by_key("ORP-8").title == "Rotate credentials"
    assert _focus(seeded_dir).task_key == "ORP-8"


def test_rekey_nested_ticket(seeded_dir, capsys):
    assert rekey(_rekey_args(seeded_dir, "OBS-2", "OBS-20")) == 0

    assert "(OBS-1.md)" in capsys.readouterr().out
    assert _store(seeded_dir).find_by_key("OBS-3").parent_key == "OBS-20"


def test_rekey_conflict(seeded_dir, capsys):
    with pytest.raises(SystemExit, match="1"):
        rekey(_rekey_args(seeded_dir, "OBS-2", "ORP-7"))
    assert "already exists" in capsys.readouterr().err
