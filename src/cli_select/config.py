"""Stored dialog defaults.

Settings come from ``config.json`` in the config directory and can be
overridden per process with ``CLI_SELECT_<NAME>`` environment variables.
Every value is checked when it is read, so a bad glyph or key name is
reported against the file or variable it came from rather than later by the
dialog.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cli_select.errors import ConfigError
from cli_select.models import KeyEvent

logger = logging.getLogger("cli_select.config")

ENV_PREFIX = "CLI_SELECT_"
CONFIG_FILENAME = "config.json"

_loaded: Config | None = None


def clear_config_cache() -> None:
    """Forget the config loaded from the default directory."""
    global _loaded
    _loaded = None


def get_default_config_dir() -> Path:
    config_dir = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".config" / "cli-select"


def parse_flag(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off", ""):
        return False
    raise ValueError(f"expected yes or no, got {raw!r}")


def parse_glyph(raw: Any) -> str:
    if not isinstance(raw, str) or len(raw) != 1:
        raise ValueError(f"expected exactly one character, got {raw!r}")
    return raw


def parse_spacing(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"expected a whole number, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"expected a whole number, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"must be at least 1, got {value}")
    return value


def parse_keys(raw: Any) -> list[str]:
    """Accept ``"k,w"`` or ``["k", "w"]``; every name must be a known key."""
    if isinstance(raw, str):
        names = raw.split(",")
    elif isinstance(raw, list):
        names = [str(name) for name in raw]
    else:
        raise ValueError(f"expected comma-separated keys, got {raw!r}")
    keys = [name.strip() for name in names if name.strip()]
    for name in keys:
        KeyEvent.of(name)
    return keys


@dataclass(frozen=True)
class Setting:
    name: str
    default: Any
    description: str
    parse: Callable[[Any], Any]
    toggle: bool = False

    @property
    def env_var(self) -> str:
        return f"{ENV_PREFIX}{self.name.upper()}"


SETTINGS: dict[str, Setting] = {
    setting.name: setting
    for setting in (
        Setting(
            "underline_selected_item", False, "Underline the selected item", parse_flag, True
        ),
        Setting(
            "move_selected_item_forward",
            False,
            "Indent the selected item further than the others",
            parse_flag,
            True,
        ),
        Setting("pointer", ">", "Glyph in front of the selected item", parse_glyph),
        Setting("unselected_pointer", " ", "Glyph in front of the other items", parse_glyph),
        Setting(
            "forward_spacing",
            2,
            "Columns between pointer and selected item when moved forward",
            parse_spacing,
        ),
        Setting("extra_up_keys", [], "Extra keys that move up (e.g. k,w)", parse_keys),
        Setting("extra_down_keys", [], "Extra keys that move down (e.g. j,s)", parse_keys),
    )
}


class Config:
    """Effective dialog defaults for one config directory.

    Read values as attributes (``config.pointer``). ``set()`` checks the
    value, then writes it to the file; environment overrides are never
    written back.
    """

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or get_default_config_dir()
        self._stored: dict[str, Any] = {}
        self._values: dict[str, Any] = {
            name: setting.default for name, setting in SETTINGS.items()
        }

    @property
    def path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @classmethod
    def load(cls, config_dir: Path | None = None) -> Config:
        """Read file and environment; the default directory is read once.

        Raises:
            ConfigError: If a setting holds a value it cannot take.
        """
        global _loaded
        if config_dir is None and _loaded is not None:
            return _loaded

        config = cls(config_dir)
        config._read_file()
        config._read_env()
        if config_dir is None:
            _loaded = config
        return config

    def __getattr__(self, name: str) -> Any:
        if name in SETTINGS:
            return self._values[name]
        raise AttributeError(f"Config has no setting '{name}'")

    def set(self, name: str, value: Any) -> None:
        """Check ``value`` (typed, or text as typed on a command line) and save it.

        Raises:
            KeyError: If ``name`` is not a setting.
            ConfigError: If the value is not valid for it.
        """
        if name not in SETTINGS:
            raise KeyError(f"Unknown setting: {name}")
        parsed = self._parse(name, value, "value")
        self._stored[name] = parsed
        self._values[name] = parsed
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._stored, indent=2))

    def _parse(self, name: str, raw: Any, source: str) -> Any:
        try:
            return SETTINGS[name].parse(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid {source} for {name}: {e}") from e

    def _read_file(self) -> None:
        try:
            content = self.path.read_text()
        except FileNotFoundError:
            return
        if not content.strip():
            return
        try:
            stored = json.loads(content)
        except json.JSONDecodeError:
            # Rewritten on the next set()
            logger.warning("Ignoring unreadable config file %s", self.path)
            return
        if not isinstance(stored, dict):
            logger.warning("Ignoring config file %s: expected a JSON object", self.path)
            return

        for name, raw in stored.items():
            if name not in SETTINGS:
                logger.warning("Ignoring unknown setting %r in %s", name, self.path)
                continue
            self._values[name] = self._parse(name, raw, f"value in {self.path}")
            self._stored[name] = raw

    def _read_env(self) -> None:
        for name, setting in SETTINGS.items():
            raw = os.environ.get(setting.env_var)
            if raw is not None:
                self._values[name] = self._parse(name, raw, f"${setting.env_var}")
