"""Handler for 'jai init'."""

from jai.cli._common import error, load_config_or_die, output_json
from jai.config import default_config_path, write_default_config


def init_data_dir(args) -> int:
    """Create the data directory layout and a starter config file."""
    config = load_config_or_die(args)

    created = []
    try:
        for directory in (config.data_dir, config.tickets_dir, config.templates_dir):
            if not directory.is_dir():
                directory.mkdir(parents=True)
                created.append(str(directory))
        config_path = config.path or default_config_path()
        config_written = write_default_config(config_path)
    except OSError as e:
        error(str(e), args.json)

    if args.json:
        output_json(
            {
                "data_dir": str(config.data_dir),
                "config": str(config_path),
                "created": created,
                "config_created": config_written,
            }
        )
        return 0

    if created or config_written:
        print(f"Initialized jai data directory at {config.data_dir}")
    else:
        print(f"Data directory already initialized at {config.data_dir}")
    if config_written:
        print(f"Config file: {config_path}")
        print("API tokens are read from JAI_JIRA_TOKEN and JAI_AI_TOKEN.")

    return 0
