"""Rich renderables for ticket trees and lists."""

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from jai.focus import FocusContext
from jai.hierarchy import epics, find_by_key, orphan_tasks, subtasks_for_task, tasks_for_epic
from jai.keys import normalize_key, remove_key, same_key
from jai.models import Ticket, TicketType

TYPE_STYLES = {
    TicketType.EPIC: "bold #a259ec",
    TicketType.TASK: "bold #3b82f6",
    TicketType.SPIKE: "bold #f59e0b",
    TicketType.SUBTASK: "bold #60a5fa",
}
FOCUSED_STYLE = "bold #f4a259"
TITLE_STYLE = "bold bright_white"
DIM_STYLE = "dim"
MARK_STYLE = "bold #ffb300"

ORPHANS_LABEL = "Orphan Tasks"
ROOT_LABEL = "All Tickets"


def ticket_label(ticket: Ticket, focused: bool = False) -> Text:
    """Label such as 'Task [OBS-2]: Add exporter', starred when focused."""
    type_name = ticket.type.value.capitalize()
    key = normalize_key(ticket.key) if ticket.key else "no key"
    title = remove_key(ticket.title)

    label = Text()
    if focused:
        label.append("*", style=MARK_STYLE)
    label.append(type_name, style=TYPE_STYLES[ticket.type])
    label.append(f" [{key}]: ")
    label.append(title, style=FOCUSED_STYLE if focused else TITLE_STYLE)
    if not focused:
        label.stylize(DIM_STYLE)
    return label


def _deepest_focus(context: FocusContext | None) -> tuple[TicketType | None, str]:
    """The level and key that get the focus mark: only the deepest one."""
    if context is None:
        return None, ""
    if context.has_subtask():
        return TicketType.SUBTASK, context.subtask_key
    if context.has_task():
        return TicketType.TASK, context.task_key
    if context.has_epic():
        return TicketType.EPIC, context.epic_key
    return None, ""


def _is_focused(ticket: Ticket, context: FocusContext | None) -> bool:
    level, key = _deepest_focus(context)
    if level is None or not same_key(ticket.key, key):
        return False
    if level is TicketType.TASK:
        return ticket.type.is_task_like
    return ticket.type is level


def _task_branch(task: Ticket, tickets: list[Ticket], context: FocusContext | None) -> Tree:
    branch = Tree(ticket_label(task, _is_focused(task, context)))
    if task.key:
        for subtask in subtasks_for_task(tickets, task.key):
            branch.add(ticket_label(subtask, _is_focused(subtask, context)))
    return branch


def _epic_branch(epic: Ticket, tickets: list[Ticket], context: FocusContext | None) -> Tree:
    branch = Tree(ticket_label(epic, _is_focused(epic, context)))
    if epic.key:
        for task in tasks_for_epic(tickets, epic.key):
            branch.children.append(_task_branch(task, tickets, context))
    return branch


def build_tree(tickets: list[Ticket], context: FocusContext | None = None) -> Tree:
    """All epics with their tasks and subtasks, then orphan tasks."""
    tree = Tree(Text(ROOT_LABEL, style="bold"))
    for epic in epics(tickets):
        tree.children.append(_epic_branch(epic, tickets, context))
    orphans = orphan_tasks(tickets)
    if orphans:
        orphan_tree = tree.add(Text(ORPHANS_LABEL, style="bold"))
        for task in orphans:
            orphan_tree.children.append(_task_branch(task, tickets, context))
    return tree


def build_focus_tree(tickets: list[Ticket], context: FocusContext) -> Tree | None:
    """Tree rooted at the focused epic, or at the focused orphan task.

    None when nothing is focused or the focused ticket is not on disk.
    """
    if context.has_epic():
        epic = find_by_key(epics(tickets), context.epic_key)
        return _epic_branch(epic, tickets, context) if epic else None
    if context.has_task():
        task = find_by_key([t for t in tickets if t.type.is_task_like], context.task_key)
        return _task_branch(task, tickets, context) if task else None
    return None


def build_list(title: str, tickets: list[Ticket], context: FocusContext | None = None) -> Tree:
    """Flat list of tickets under a heading, with their references."""
    tree = Tree(Text(title, style="bold"))
    for ticket in tickets:
        label = ticket_label(ticket, _is_focused(ticket, context))
        refs = []
        if ticket.parent_key:
            refs.append(f"Task: {ticket.parent_key}")
        if ticket.epic_key:
            refs.append(f"Epic: {ticket.epic_key}")
        elif ticket.type.is_task_like:
            refs.append("Orphan")
        if refs:
            label.append(f" ({', '.join(refs)})")
        tree.add(label)
    return tree


def print_renderable(renderable) -> None:
    """Print a rich renderable to stdout."""
    Console(highlight=False).print(renderable)
