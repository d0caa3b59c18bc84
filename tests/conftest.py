"""Shared fixtures for library tests."""

import pytest

from jai.models import Ticket, TicketType
from jai.parser import serialize_tickets

EXAMPLE = """\
# epic: Observability Refactor [OBS-1]
Improve tracing coverage.

## task: Add Jaeger exporter [OBS-2]
Wire up the exporter.

---
*Metadata:*
- Key: OBS-2
- ParentKey: OBS-1
"""


@pytest.fixture
def example_text():
    return EXAMPLE


@pytest.fixture
def hierarchy():
    """One epic with a task and subtask, plus an orphan task."""
    return [
        Ticket(TicketType.EPIC, "Observability Refactor", key="OBS-1"),
        Ticket(TicketType.TASK, "Add Jaeger exporter", key="OBS-2", epic_key="OBS-1"),
        Ticket(TicketType.SUBTASK, "Write exporter config", key="OBS-3", parent_key="OBS-2", epic_key="OBS-1"),
        Ticket(TicketType.SPIKE, "Compare samplers", key="OBS-4", epic_key="OBS-1"),
        Ticket(TicketType.TASK, "Rotate credentials", key="ORP-7"),
    ]


@pytest.fixture
def tickets_dir(tmp_path, hierarchy):
    """A tickets directory with one document per top-level ticket."""
    directory = tmp_path / "tickets"
    directory.mkdir()
    (directory / "OBS-1.md").write_text(serialize_tickets(hierarchy[:4]))
    (directory / "ORP-7.md").write_text(serialize_tickets(hierarchy[4:]))
    return directory
