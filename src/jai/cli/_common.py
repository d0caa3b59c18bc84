"""Shared helpers for CLI command handlers."""

import json
import sys

from jai.config import Config, ConfigError, load_config
from jai.focus import FocusContext, FocusError
from jai.keys import remove_key
from jai.models import Document, Ticket
from jai.store import FileTicketStore


def load_config_or_die(args) -> Config:
    """Resolve config from --config/--data-dir. Exit 1 if unusable."""
    try:
        return load_config(args.config, args.data_dir)
    except ConfigError as e:
        error(str(e), args.json)


def open_store(config: Config) -> FileTicketStore:
    return FileTicketStore(config.tickets_dir)


def open_focus_or_die(config: Config, json_mode: bool) -> FocusContext:
    """Load the focus file. Exit 1 if it is corrupt."""
    try:
        return FocusContext.open(config.focus_path)
    except FocusError as e:
        error(str(e), json_mode)


def append_or_die(store: FileTicketStore, path, ticket: Ticket, json_mode: bool) -> Document:
    """Append a ticket to a document. Exit 1 on write failure."""
    try:
        return store.append(path, ticket)
    except OSError as e:
        error(f"failed to write {path}: {e}", json_mode)


def format_ticket(ticket: Ticket) -> str:
    """Title followed by [KEY], or just the title for drafts."""
    title = remove_key(ticket.title)
    return f"{title} [{ticket.key}]" if ticket.key else title


def ticket_to_dict(ticket: Ticket) -> dict:
    """JSON-friendly summary of a ticket."""
    return {
        "key": ticket.key,
        "type": ticket.type.value,
        "title": remove_key(ticket.title),
        "status": ticket.status,
        "priority": ticket.priority,
        "epic_key": ticket.epic_key,
        "parent_key": ticket.parent_key,
    }


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)
