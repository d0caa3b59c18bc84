"""Handlers for 'jai epic', 'jai task', 'jai subtask' and 'jai rekey'."""

import sys

from jai.cli._common import (
    append_or_die,
    error,
    format_ticket,
    load_config_or_die,
    open_focus_or_die,
    open_store,
    output_result,
    ticket_to_dict,
)
from jai.keys import extract_key, is_key, remove_key
from jai.models import Ticket, TicketType


def _read_body(args) -> str:
    """--body text, or stdin when --body is '-'."""
    if args.body == "-":
        return sys.stdin.read()
    return args.body or ""


def _build_ticket(args, ticket_type: TicketType) -> Ticket:
    """Ticket from title/--key/--body. A key may also sit in the title."""
    if args.key and not is_key(args.key):
        error(f"'{args.key}' is not a ticket key (expected e.g. PROJ-123).", args.json)
    title = remove_key(args.title)
    if not title:
        error("Title must not be empty.", args.json)
    return Ticket(
        type=ticket_type,
        title=title,
        key=args.key or extract_key(args.title),
        raw_content=_read_body(args).strip(),
    )


def _check_unique(store, ticket: Ticket, json_mode: bool) -> None:
    if ticket.key and store.locate(ticket.key) is not None:
        error(f"Ticket '{ticket.key}' already exists.", json_mode)


def _report(ticket: Ticket, path, focus, json_mode: bool) -> int:
    kind = ticket.type.value
    if ticket.key:
        text = f"Added {kind}: {format_ticket(ticket)}\nFocus: {focus.describe()}"
    else:
        text = f"Drafted {kind} in {path.name}: {format_ticket(ticket)} (no key, focus unchanged)"
    data = {"ticket": ticket_to_dict(ticket), "path": str(path), "focus": focus.focus.to_dict()}
    output_result(data, text, json_mode)
    return 0


def epic_add(args) -> int:
    """Add an epic to its own document and focus it."""
    config = load_config_or_die(args)
    store = open_store(config)
    focus = open_focus_or_die(config, args.json)

    epic = _build_ticket(args, TicketType.EPIC)
    _check_unique(store, epic, args.json)

    path = store.path_for(epic.key)
    append_or_die(store, path, epic, args.json)
    if epic.key:
        focus.set_epic(epic.key, epic.id)

    return _report(epic, path, focus, args.json)


def task_add(args) -> int:
    """Add a task under the focused epic, or as an orphan."""
    config = load_config_or_die(args)
    store = open_store(config)
    focus = open_focus_or_die(config, args.json)

    task = _build_ticket(args, TicketType.TASK)
    _check_unique(store, task, args.json)

    if focus.has_epic():
        task.epic_key = focus.epic_key
        path = store.locate(focus.epic_key) or store.path_for(focus.epic_key)
    else:
        path = store.path_for(task.key)

    append_or_die(store, path, task, args.json)
    if task.key:
        focus.set_epic_and_task(task.epic_key, task.key, epic_id=focus.focus.epic_id)

    return _report(task, path, focus, args.json)


def subtask_add(args) -> int:
    """Add a subtask under the focused task."""
    config = load_config_or_die(args)
    store = open_store(config)
    focus = open_focus_or_die(config, args.json)

    if not focus.has_task():
        error("No task focused. Use 'jai focus <task>' first.", args.json)

    subtask = _build_ticket(args, TicketType.SUBTASK)
    _check_unique(store, subtask, args.json)
    subtask.parent_key = focus.task_key
    subtask.epic_key = focus.epic_key

    path = store.locate(focus.task_key) or store.path_for(focus.epic_key or focus.task_key)
    append_or_die(store, path, subtask, args.json)
    if subtask.key:
        focus.set_subtask(subtask.key, subtask.id)

    return _report(subtask, path, focus, args.json)


def rekey(args) -> int:
    """Replace a ticket key, following references and the file name."""
    for key in (args.old_key, args.new_key):
        if not is_key(key):
            error(f"'{key}' is not a ticket key (expected e.g. PROJ-123).", args.json)

    config = load_config_or_die(args)
    store = open_store(config)
    focus = open_focus_or_die(config, args.json)

    try:
        path = store.rename_key(args.old_key, args.new_key)
        if path == store.path_for(args.old_key):
            path = store.finalize_path(path, args.new_key)
    except (ValueError, OSError) as e:
        error(str(e), args.json)

    current = focus.focus
    keys = [current.epic_key, current.task_key, current.subtask_key]
    if args.old_key in keys:
        renamed = [args.new_key if k == args.old_key else k for k in keys]
        focus.set_full(
            *renamed,
            epic_id=current.epic_id,
            task_id=current.task_id,
            subtask_id=current.subtask_id,
        )

    output_result(
        {"old_key": args.old_key, "new_key": args.new_key, "path": str(path)},
        f"Renamed {args.old_key} to {args.new_key} ({path.name})",
        args.json,
    )
    return 0
