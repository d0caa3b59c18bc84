"""Configuration for jai, read once and passed to the store and focus."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "JAI_DATA_DIR"
TOKEN_ENVS = ("JAI_JIRA_TOKEN", "JAI_AI_TOKEN")

DEFAULTS: dict[str, dict[str, Any]] = {
    "jira": {
        "url": "",
        "username": "",
        "project": "",
        "epic_link_field": "",
    },
    "ai": {
        "provider": "openai",
        "model": "gpt-3.5-turbo",
        "max_tokens": 500,
        "prompt_template": "",
    },
    "general": {
        "data_dir": "",
        "review_before_create": False,
        "default_editor": "",
    },
}

# Tokens come from the environment only.
_SECRET_KEYS = {"token", "api_key"}


class ConfigError(ValueError):
    """The config file exists but is not usable."""


def default_config_path() -> Path:
    return Path.home() / ".jai" / "config.yaml"


def default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "jai"


@dataclass
class Config:
    """Resolved settings plus the data directory layout."""

    data_dir: Path
    path: Path | None = None
    jira: dict[str, Any] = field(default_factory=lambda: dict(DEFAULTS["jira"]))
    ai: dict[str, Any] = field(default_factory=lambda: dict(DEFAULTS["ai"]))
    general: dict[str, Any] = field(default_factory=lambda: dict(DEFAULTS["general"]))

    @property
    def tickets_dir(self) -> Path:
        return self.data_dir / "tickets"

    @property
    def templates_dir(self) -> Path:
        return self.data_dir / "templates"

    @property
    def focus_path(self) -> Path:
        return self.data_dir / "current.json"


def _coerce(default: Any, raw: Any) -> Any:
    """Type-coerce a config value to match its default's type."""
    if raw is None:
        return default
    if isinstance(default, bool):
        if isinstance(raw, str):
            return raw.strip().lower() in ("true", "yes", "y", "1")
        return bool(raw)
    if isinstance(default, int):
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ConfigError(f"expected a number, got {raw!r}") from None
    if isinstance(default, str):
        return str(raw)
    return raw


def _merge_section(name: str, raw: Any) -> dict[str, Any]:
    """Overlay one raw YAML section onto its defaults."""
    defaults = DEFAULTS[name]
    if raw is None:
        return dict(defaults)
    if not isinstance(raw, Mapping):
        raise ConfigError(f"section '{name}' must be a mapping")

    merged = dict(defaults)
    for key, value in raw.items():
        if key in _SECRET_KEYS:
            logger.warning("ignoring %s.%s in config file; set it in the environment", name, key)
            continue
        if key in defaults:
            try:
                merged[key] = _coerce(defaults[key], value)
            except ConfigError as exc:
                raise ConfigError(f"{name}.{key}: {exc}") from None
        else:
            merged[key] = value
    return merged


def read_config_file(path: Path) -> dict[str, Any]:
    """Read YAML config into a dict. Raises FileNotFoundError if missing."""
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    return data


def load_config(
    path: str | Path | None = None,
    data_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build a Config from defaults, the config file and the environment.

    An explicit path must exist; the default path is optional. data_dir
    wins over $JAI_DATA_DIR, which wins over general.data_dir.
    """
    environ = os.environ if environ is None else environ
    config_path = Path(path).expanduser() if path else default_config_path()

    try:
        raw = read_config_file(config_path)
    except FileNotFoundError:
        if path:
            raise ConfigError(f"config file {config_path} not found") from None
        raw = {}
        config_path = None

    sections = {name: _merge_section(name, raw.get(name)) for name in DEFAULTS}

    resolved = data_dir or environ.get(DATA_DIR_ENV) or sections["general"]["data_dir"]
    resolved_dir = Path(resolved).expanduser() if resolved else default_data_dir()

    return Config(
        data_dir=resolved_dir,
        path=config_path,
        jira=sections["jira"],
        ai=sections["ai"],
        general=sections["general"],
    )


def write_default_config(path: str | Path) -> bool:
    """Write a starter config file. Returns False if one already exists."""
    path = Path(path)
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(DEFAULTS, default_flow_style=False, sort_keys=False), encoding="utf-8")
    return True


def token_status(environ: Mapping[str, str] | None = None) -> dict[str, bool]:
    """Which token environment variables are set."""
    environ = os.environ if environ is None else environ
    return {name: bool(environ.get(name)) for name in TOKEN_ENVS}
