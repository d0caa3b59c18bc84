"""Queries over a flat list of tickets: children, orphans and search."""

from jai.keys import same_key
from jai.models import Ticket, TicketType


def of_type(tickets: list[Ticket], *types: TicketType) -> list[Ticket]:
    """Tickets whose type is one of types."""
    return [t for t in tickets if t.type in types]


def epics(tickets: list[Ticket]) -> list[Ticket]:
    return of_type(tickets, TicketType.EPIC)


def tasks_for_epic(tickets: list[Ticket], epic_key: str) -> list[Ticket]:
    """Tasks and spikes owned by an epic."""
    return [t for t in tickets if t.type.is_task_like and same_key(t.epic_key, epic_key)]


def subtasks_for_task(tickets: list[Ticket], task_key: str) -> list[Ticket]:
    return [t for t in tickets if t.type is TicketType.SUBTASK and same_key(t.parent_key, task_key)]


def orphan_tasks(tickets: list[Ticket]) -> list[Ticket]:
    """Tasks and spikes with no owning epic."""
    return [t for t in tickets if t.is_orphan]


def find_by_key(tickets: list[Ticket], key: str) -> Ticket | None:
    """First ticket with key, or None."""
    for ticket in tickets:
        if same_key(ticket.key, key):
            return ticket
    return None


def search_tickets(tickets: list[Ticket], query: str) -> list[Ticket]:
    """Tickets whose title contains query, case-insensitively.

    Plain substring containment; callers take the first match.
    """
    needle = query.strip().lower()
    if not needle:
        return []
    return [t for t in tickets if needle in t.title.lower()]
