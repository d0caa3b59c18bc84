"""Shared fixtures for CLI tests."""

import pytest

from jai.models import Ticket, TicketType
from jai.parser import serialize_tickets


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    """Keep the real ~/.jai and $JAI_DATA_DIR out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("JAI_DATA_DIR", raising=False)
    monkeypatch.delenv("JAI_JIRA_TOKEN", raising=False)
    monkeypatch.delenv("JAI_AI_TOKEN", raising=False)
    return home


@pytest.fixture
def data_dir(tmp_path):
    """An empty data directory."""
    return tmp_path / "data"


@pytest.fixture
def seeded_dir(data_dir):
    """A data directory with one epic tree and one orphan task."""
    tickets = data_dir / "tickets"
    tickets.mkdir(parents=True)
    (tickets / "OBS-1.md").write_text(
        serialize_tickets(
            [
                Ticket(TicketType.EPIC, "Observability Refactor", key="OBS-1"),
                Ticket(TicketType.TASK, "Add Jaeger exporter", key="OBS-2", epic_key="OBS-1"),
                Ticket(
                    TicketType.SUBTASK,
                    "Write exporter config",
                    key="OBS-3",
                    parent_key="OBS-2",
                    epic_key="OBS-1",
                ),
            ]
        )
    )
    (tickets / "ORP-7.md").write_text(serialize_tickets([Ticket(TicketType.TASK, "Rotate credentials", key="ORP-7")]))
    return data_dir
