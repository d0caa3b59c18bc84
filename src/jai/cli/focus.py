"""Handlers for 'jai focus' and 'jai unfocus'."""

import sys

from jai.cli._common import (
    error,
    format_ticket,
    load_config_or_die,
    open_focus_or_die,
    open_store,
    output_json,
    output_result,
    ticket_to_dict,
)
from jai.keys import is_key


def focus(args) -> int:
    """Show the focus, or focus a ticket by key or title search."""
    config = load_config_or_die(args)
    context = open_focus_or_die(config, args.json)

    if not args.query:
        if args.json:
            output_json({"focus": context.focus.to_dict(), "state": context.state.value})
        else:
            print(context.describe())
        return 0

    store = open_store(config)
    query = args.query.strip()

    if is_key(query):
        ticket = store.find_by_key(query)
        if ticket is None:
            # Not drafted locally yet; treat it as a task.
            context.set_task(query)
            output_result(
                {"focus": context.focus.to_dict(), "ticket": None},
                f"Focused on task: {query}",
                args.json,
            )
            return 0
    else:
        matches = store.search(query)
        if not matches:
            error(f"No tickets found matching '{query}'.", args.json)
        ticket = matches[0]
        if len(matches) > 1 and not args.json:
            print(f"Multiple matches found for '{query}':", file=sys.stderr)
            for i, match in enumerate(matches, start=1):
                print(f"  {i}. {format_ticket(match)} ({match.type.value})", file=sys.stderr)
            print(f"Using first match: {format_ticket(ticket)}", file=sys.stderr)

    context.focus_ticket(ticket)
    output_result(
        {"focus": context.focus.to_dict(), "ticket": ticket_to_dict(ticket)},
        f"Focused on {ticket.type.value}: {format_ticket(ticket)}",
        args.json,
    )
    return 0


def unfocus(args) -> int:
    """Clear the focus."""
    config = load_config_or_die(args)
    context = open_focus_or_die(config, args.json)
    context.clear()
    output_result({"focus": context.focus.to_dict()}, "Context cleared", args.json)
    return 0
