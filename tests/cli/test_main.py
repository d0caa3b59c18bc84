"""Tests for CLI argument parsing."""

from jai.cli import build_parser
from jai.cli.focus import focus
from jai.cli.ticket import task_add


def test_common_options_after_command():
    args = build_parser().parse_args(["task", "Add exporter", "--key", "OBS-2", "--json", "--data-dir", "/tmp/jai"])
    assert args.func is task_add
    assert args.title == "Add exporter"
    assert args.key == "OBS-2"
    assert args.json is True
    assert args.data_dir == "/tmp/jai"


def test_focus_query_optional():
    args = build_parser().parse_args(["focus"])
    assert args.func is focus
    assert args.query is None


def test_status_show_config():
    args = build_parser().parse_args(["status", "--show-config"])
    assert args.config_details is True
