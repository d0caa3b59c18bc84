"""Handler for 'jai status'."""

from jai.cli._common import format_ticket, load_config_or_die, open_focus_or_die, open_store, output_json, ticket_to_dict
from jai.config import token_status
from jai.hierarchy import find_by_key
from jai.render import build_focus_tree, print_renderable


def status(args) -> int:
    """Show the focus with resolved titles and the focus tree."""
    config = load_config_or_die(args)
    context = open_focus_or_die(config, args.json)
    tickets = open_store(config).load_all()
    current = context.focus

    levels = [
        ("Epic", current.epic_key),
        ("Task", current.task_key),
        ("Subtask", current.subtask_key),
    ]
    resolved = {label: find_by_key(tickets, key) if key else None for label, key in levels}

    if args.json:
        data = {
            "focus": current.to_dict(),
            "state": context.state.value,
            **{label.lower(): ticket_to_dict(t) if t else None for label, t in resolved.items()},
        }
        if args.config_details:
            data["config"] = _config_details(config)
        output_json(data)
        return 0

    print("Current Context:")
    if not context.has_epic() and not context.has_task():
        print("  No context set")
    else:
        for label, key in levels:
            if not key:
                continue
            ticket = resolved[label]
            print(f"  {label}: {format_ticket(ticket) if ticket else f'[{key}]'}")
        if not context.has_task():
            print("  No Tasks")
        print(f"  Last Updated: {current.updated.isoformat(timespec='seconds')}")

        tree = build_focus_tree(tickets, context)
        if tree is not None:
            print()
            print_renderable(tree)

    if args.config_details:
        print()
        print("Configuration:")
        for name, value in _config_details(config).items():
            print(f"  {name}: {value}")

    return 0


def _config_details(config) -> dict:
    details = {
        "config_file": str(config.path) if config.path else None,
        "data_dir": str(config.data_dir),
        "jira_url": config.jira["url"],
        "jira_project": config.jira["project"],
        "ai_provider": config.ai["provider"],
        "ai_model": config.ai["model"],
    }
    for name, present in token_status().items():
        details[name] = "set" if present else "not set"
    return details
