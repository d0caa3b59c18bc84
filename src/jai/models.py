"""Data models for jai tickets, documents and focus."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

_TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})?$")


class TicketType(str, Enum):
    """The kind of a ticket, which fixes its nesting depth."""

    EPIC = "epic"
    TASK = "task"
    SUBTASK = "subtask"
    SPIKE = "spike"

    @property
    def depth(self) -> int:
        if self is TicketType.EPIC:
            return 1
        if self is TicketType.SUBTASK:
            return 3
        return 2

    @property
    def is_task_like(self) -> bool:
        """Tasks and spikes share the middle level of the hierarchy."""
        return self in (TicketType.TASK, TicketType.SPIKE)


@dataclass
class Ticket:
    """One node in the epic -> task -> subtask hierarchy."""

    type: TicketType
    title: str = ""
    key: str = ""
    id: str = ""
    description: str = ""
    raw_content: str = ""
    enriched_content: str = ""
    status: str = ""
    priority: str = ""
    labels: list[str] = field(default_factory=list)
    parent_key: str = ""  # subtask -> owning task/spike
    epic_key: str = ""  # task/spike -> owning epic, empty for orphans
    line_number: int = 0

    @property
    def is_orphan(self) -> bool:
        return self.type.is_task_like and not self.epic_key


@dataclass
class Document:
    """A markdown file holding an ordered list of tickets."""

    path: Path | None = None
    tickets: list[Ticket] = field(default_factory=list)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> datetime:
    """Read an ISO 8601 timestamp, also accepting "Z" and 1-9 digit fractions.

    "2024-01-02T03:04:05.123456789Z" -> 2024-01-02 03:04:05.123456+00:00
    """
    match = _TIMESTAMP.match(value) if isinstance(value, str) else None
    if match:
        base, fraction, zone = match.groups()
        value = base
        if fraction:
            value += "." + fraction[:6].ljust(6, "0")
        if zone:
            value += "+00:00" if zone == "Z" else zone
    return datetime.fromisoformat(value)


@dataclass
class Focus:
    """The currently selected epic, task and subtask."""

    epic_key: str = ""
    epic_id: str = ""
    task_key: str = ""
    task_id: str = ""
    subtask_key: str = ""
    subtask_id: str = ""
    updated: datetime = field(default_factory=_now)

    def to_dict(self) -> dict:
        data = {
            name: value
            for name, value in (
                ("epic_key", self.epic_key),
                ("epic_id", self.epic_id),
                ("task_key", self.task_key),
                ("task_id", self.task_id),
                ("subtask_key", self.subtask_key),
                ("subtask_id", self.subtask_id),
            )
            if value
        }
        data["updated"] = self.updated.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Focus":
        updated = data.get("updated")
        return cls(
            epic_key=data.get("epic_key") or "",
            epic_id=data.get("epic_id") or "",
            task_key=data.get("task_key") or "",
            task_id=data.get("task_id") or "",
            subtask_key=data.get("subtask_key") or "",
            subtask_id=data.get("subtask_id") or "",
            updated=_parse_timestamp(updated) if updated else _now(),
        )
