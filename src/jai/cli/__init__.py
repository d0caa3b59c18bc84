"""CLI argument parser and dispatch for jai."""

import argparse

from jai.cli.focus import focus, unfocus
from jai.cli.init import init_data_dir
from jai.cli.listing import KINDS, list_tickets
from jai.cli.status import status
from jai.cli.ticket import epic_add, rekey, subtask_add, task_add


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="Config file (default: ~/.jai/config.yaml)")
    common.add_argument("--data-dir", dest="data_dir", default=None, help="Data directory (overrides config)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose logging on stderr")

    parser = argparse.ArgumentParser(
        prog="jai",
        description="Markdown-native epic/task/subtask drafting with focus tracking",
        parents=[common],
    )

    commands = parser.add_subparsers(dest="command")

    # --- init ---
    init_p = commands.add_parser("init", help="Create the data directory and config file", parents=[common])
    init_p.set_defaults(func=init_data_dir)

    # --- epic / task / subtask ---
    for name, func, help_text in (
        ("epic", epic_add, "Draft an epic and focus it"),
        ("task", task_add, "Draft a task under the focused epic"),
        ("subtask", subtask_add, "Draft a subtask under the focused task"),
    ):
        ticket_p = commands.add_parser(name, help=help_text, parents=[common])
        ticket_p.add_argument("title", help=f"{name.capitalize()} title")
        ticket_p.add_argument("--body", default="", help="Body text ('-' reads stdin)")
        ticket_p.add_argument("--key", default="", help="Ticket key, e.g. PROJ-123")
        ticket_p.set_defaults(func=func)

    # --- rekey ---
    rekey_p = commands.add_parser("rekey", help="Replace a ticket key", parents=[common])
    rekey_p.add_argument("old_key", help="Current key")
    rekey_p.add_argument("new_key", help="New key")
    rekey_p.set_defaults(func=rekey)

    # --- focus / unfocus ---
    focus_p = commands.add_parser("focus", help="Show or set the focused ticket", parents=[common])
    focus_p.add_argument("query", nargs="?", help="Ticket key or part of a title")
    focus_p.set_defaults(func=focus)

    unfocus_p = commands.add_parser("unfocus", help="Clear the focus", parents=[common])
    unfocus_p.set_defaults(func=unfocus)

    # --- status ---
    status_p = commands.add_parser("status", help="Show the focus and its tree", parents=[common])
    status_p.add_argument(
        "--show-config", dest="config_details", action="store_true", help="Also show configuration"
    )
    status_p.set_defaults(func=status)

    # --- list ---
    list_p = commands.add_parser("list", help="List tickets as a tree", parents=[common])
    list_p.add_argument("kind", nargs="?", choices=KINDS, help="Only list one kind of ticket")
    list_p.set_defaults(func=list_tickets)

    return parser
