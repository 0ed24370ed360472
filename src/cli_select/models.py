"""Data models for cli-select."""

from dataclasses import dataclass
from enum import Enum, Flag, auto

from cli_select.errors import KeyBindingError


class SelectDialogKey(Enum):
    """Direction passed to the selection-changed callback."""

    UP_KEY = "up"
    DOWN_KEY = "down"


class KeyModifiers(Flag):
    """Modifier keys held while a key was pressed."""

    NONE = 0
    SHIFT = auto()
    CONTROL = auto()
    ALT = auto()


class KeyCode:
    """Names for the non-printable keys.

    Printable keys are represented by the character itself (``"j"``).
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    INSERT = "insert"
    DELETE = "delete"
    ENTER = "enter"
    ESC = "esc"
    TAB = "tab"
    BACKTAB = "backtab"
    BACKSPACE = "backspace"

    @classmethod
    def names(cls) -> set[str]:
        """All named key codes."""
        return {value for name, value in vars(cls).items() if name.isupper()}


@dataclass(frozen=True)
class KeyEvent:
    """A single key press.

    Two events are equal only when both the code and the modifier set match,
    so ``KeyEvent("up")`` never matches Shift+Up.
    """

    code: str
    modifiers: KeyModifiers = KeyModifiers.NONE

    @classmethod
    def of(cls, key: "KeyEvent | str") -> "KeyEvent":
        """Coerce a key code or event into an event without modifiers.

        Raises:
            KeyBindingError: For a multi-character name that is not a KeyCode.
        """
        if isinstance(key, KeyEvent):
            return key
        if not isinstance(key, str) or not key:
            raise TypeError(f"Expected a key code or KeyEvent, got {key!r}")
        if len(key) > 1 and not key.startswith("\x1b") and key not in KeyCode.names():
            raise KeyBindingError(f"Unknown key name {key!r}; use a single character or a KeyCode")
        return cls(key)

    def __str__(self) -> str:
        parts = [flag.name.lower() for flag in KeyModifiers if flag and flag in self.modifiers]
        parts.append(self.code)
        return "+".join(parts)
