"""Handler for 'jai list'."""

from jai.cli._common import load_config_or_die, open_focus_or_die, open_store, output_json, ticket_to_dict
from jai.hierarchy import of_type, orphan_tasks
from jai.models import TicketType
from jai.render import build_list, build_tree, print_renderable

KINDS = ("epic", "task", "spike", "subtask", "orphan")

_HEADINGS = {
    "epic": "Epics",
    "task": "Tasks",
    "spike": "Spikes",
    "subtask": "Subtasks",
    "orphan": "Orphan Tasks",
}


def _select(tickets, kind: str | None):
    if kind is None:
        return tickets
    if kind == "orphan":
        return orphan_tasks(tickets)
    return of_type(tickets, TicketType(kind))


def list_tickets(args) -> int:
    """Show all tickets as a tree, or a flat list of one kind."""
    config = load_config_or_die(args)
    context = open_focus_or_die(config, args.json)
    tickets = open_store(config).load_all()
    selected = _select(tickets, args.kind)

    if args.json:
        output_json([ticket_to_dict(t) for t in selected])
        return 0

    if not tickets:
        print("No tickets found.")
        return 0

    if args.kind is None:
        print_renderable(build_tree(tickets, context))
    elif not selected:
        print(f"No {_HEADINGS[args.kind].lower()} found.")
    else:
        print_renderable(build_list(_HEADINGS[args.kind], selected, context))

    return 0
