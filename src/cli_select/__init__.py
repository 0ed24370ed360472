"""Interactive single-selection lists for the terminal."""

from .errors import (
    ConfigError,
    EmptyItemsError,
    EventSourceError,
    KeyBindingError,
    SelectError,
)
from .models import KeyCode, KeyEvent, KeyModifiers, SelectDialogKey
from .ui import Line, Select, SelectOptions, select

__all__ = [
    "ConfigError",
    "EmptyItemsError",
    "EventSourceError",
    "KeyBindingError",
    "KeyCode",
    "KeyEvent",
    "KeyModifiers",
    "Line",
    "Select",
    "SelectDialogKey",
    "SelectError",
    "SelectOptions",
    "select",
]
