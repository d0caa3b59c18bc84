"""Persisted epic/task/subtask focus with cascading resets."""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from jai.models import Focus, Ticket, TicketType

logger = logging.getLogger(__name__)

SEPARATOR = " → "


class FocusError(ValueError):
    """The focus file exists but cannot be read as a focus record."""


class FocusState(Enum):
    EMPTY = "empty"
    EPIC = "epic"
    EPIC_TASK = "epic+task"
    EPIC_TASK_SUBTASK = "epic+task+subtask"
    TASK = "task"
    TASK_SUBTASK = "task+subtask"


# (has_epic, has_task, has_subtask) -> state. A subtask without a task
# is not a reachable state, so it falls back to the coarser one.
_STATES = {
    (False, False, False): FocusState.EMPTY,
    (False, False, True): FocusState.EMPTY,
    (True, False, False): FocusState.EPIC,
    (True, False, True): FocusState.EPIC,
    (True, True, False): FocusState.EPIC_TASK,
    (True, True, True): FocusState.EPIC_TASK_SUBTASK,
    (False, True, False): FocusState.TASK,
    (False, True, True): FocusState.TASK_SUBTASK,
}


class FocusContext:
    """The focus record backed by a JSON file.

    Every transition saves before returning.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.focus = Focus()

    @classmethod
    def open(cls, path: str | Path) -> "FocusContext":
        """Create a context and load it from path."""
        context = cls(path)
        context.load()
        return context

    def load(self) -> Focus:
        """Read the focus file. A missing file gives an empty focus."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self.focus = Focus()
            return self.focus

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FocusError(f"failed to parse context file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise FocusError(f"failed to parse context file {self.path}: expected an object")
        try:
            self.focus = Focus.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise FocusError(f"failed to parse context file {self.path}: {exc}") from exc
        return self.focus

    def save(self) -> None:
        self.focus.updated = datetime.now(timezone.utc)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.focus.to_dict(), indent=2) + "\n", encoding="utf-8")

    def _set(self, **fields: str) -> Focus:
        for name, value in fields.items():
            setattr(self.focus, name, value)
        self.save()
        logger.debug("focus: %s", self.describe())
        return self.focus

    # --- Transitions ---

    def set_epic(self, key: str, id: str = "") -> Focus:
        """Focus an epic, dropping any task and subtask focus."""
        return self._set(epic_key=key, epic_id=id, task_key="", task_id="", subtask_key="", subtask_id="")

    def set_task(self, key: str, id: str = "") -> Focus:
        """Focus a task, dropping any subtask focus. The epic is kept."""
        return self._set(task_key=key, task_id=id, subtask_key="", subtask_id="")

    def set_subtask(self, key: str, id: str = "") -> Focus:
        return self._set(subtask_key=key, subtask_id=id)

    def set_epic_and_task(
        self,
        epic_key: str,
        task_key: str,
        epic_id: str = "",
        task_id: str = "",
    ) -> Focus:
        """Focus an epic and task together; the subtask is cleared."""
        return self._set(
            epic_key=epic_key,
            epic_id=epic_id,
            task_key=task_key,
            task_id=task_id,
            subtask_key="",
            subtask_id="",
        )

    def set_full(
        self,
        epic_key: str,
        task_key: str,
        subtask_key: str,
        epic_id: str = "",
        task_id: str = "",
        subtask_id: str = "",
    ) -> Focus:
        return self._set(
            epic_key=epic_key,
            epic_id=epic_id,
            task_key=task_key,
            task_id=task_id,
            subtask_key=subtask_key,
            subtask_id=subtask_id,
        )

    def clear(self) -> Focus:
        return self.set_full("", "", "")

    def focus_ticket(self, ticket: Ticket) -> Focus:
        """Focus a ticket along with the ancestors it references."""
        if ticket.type is TicketType.EPIC:
            return self.set_epic(ticket.key, ticket.id)
        if ticket.type.is_task_like:
            return self.set_epic_and_task(ticket.epic_key, ticket.key, task_id=ticket.id)
        return self.set_full(ticket.epic_key, ticket.parent_key, ticket.key, subtask_id=ticket.id)

    # --- Queries ---

    def has_epic(self) -> bool:
        return self.focus.epic_key != ""

    def has_task(self) -> bool:
        return self.focus.task_key != ""

    def has_subtask(self) -> bool:
        return self.focus.subtask_key != ""

    @property
    def state(self) -> FocusState:
        return _STATES[(self.has_epic(), self.has_task(), self.has_subtask())]

    @property
    def epic_key(self) -> str:
        return self.focus.epic_key

    @property
    def task_key(self) -> str:
        return self.focus.task_key

    @property
    def subtask_key(self) -> str:
        return self.focus.subtask_key

    def describe(self) -> str:
        """e.g. "Epic: OBS-1 → Task: OBS-2", deepest level last."""
        if not self.has_epic() and not self.has_task():
            return "No context set"
        parts = [
            f"{label}: {key}"
            for label, key in (
                ("Epic", self.focus.epic_key),
                ("Task", self.focus.task_key),
                ("Subtask", self.focus.subtask_key),
            )
            if key
        ]
        return SEPARATOR.join(parts)

    def __str__(self) -> str:
        return self.describe()
