"""Key event source backed by readchar."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

import readchar

from cli_select.errors import EventSourceError
from cli_select.models import KeyCode, KeyEvent, KeyModifiers

try:
    import termios

    _READ_ERRORS: tuple[type[BaseException], ...] = (OSError, EOFError, ValueError, termios.error)
except ImportError:  # Windows has no termios
    _READ_ERRORS = (OSError, EOFError, ValueError)

logger = logging.getLogger("cli_select.keys")

# Raw sequences as readchar reports them on this platform
_NAMED_KEYS: dict[str, str] = {
    readchar.key.UP: KeyCode.UP,
    readchar.key.DOWN: KeyCode.DOWN,
    readchar.key.LEFT: KeyCode.LEFT,
    readchar.key.RIGHT: KeyCode.RIGHT,
    readchar.key.HOME: KeyCode.HOME,
    readchar.key.END: KeyCode.END,
    readchar.key.PAGE_UP: KeyCode.PAGE_UP,
    readchar.key.PAGE_DOWN: KeyCode.PAGE_DOWN,
    readchar.key.INSERT: KeyCode.INSERT,
    readchar.key.BACKSPACE: KeyCode.BACKSPACE,
    readchar.key.TAB: KeyCode.TAB,
    readchar.key.ESC: KeyCode.ESC,
    readchar.key.CR: KeyCode.ENTER,
    readchar.key.LF: KeyCode.ENTER,
    # Application-mode and alternate VT sequences
    "\x1bOA": KeyCode.UP,
    "\x1bOB": KeyCode.DOWN,
    "\x1bOC": KeyCode.RIGHT,
    "\x1bOD": KeyCode.LEFT,
    "\x1bOH": KeyCode.HOME,
    "\x1bOF": KeyCode.END,
    "\x1b[1~": KeyCode.HOME,
    "\x1b[4~": KeyCode.END,
    "\x1b[3~": KeyCode.DELETE,
    "\x1b[Z": KeyCode.BACKTAB,
    "\x08": KeyCode.BACKSPACE,
}

# xterm style modified keys: ESC [ 1 ; <modifier> <final>
_MODIFIED_KEY = re.compile(r"^\x1b\[1;(\d+)([ABCDHF])$")

_CSI_FINALS: dict[str, str] = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
}


def _xterm_modifiers(param: int) -> KeyModifiers:
    """Decode the xterm modifier parameter (1 + bitmask)."""
    bits = max(param - 1, 0)
    modifiers = KeyModifiers.NONE
    if bits & 1:
        modifiers |= KeyModifiers.SHIFT
    if bits & 2:
        modifiers |= KeyModifiers.ALT
    if bits & 4:
        modifiers |= KeyModifiers.CONTROL
    return modifiers


def decode_key(raw: str) -> KeyEvent:
    """Translate a raw key string from readchar into a KeyEvent.

    Unrecognized sequences come back unchanged as the event code, so they
    never match a binding.
    """
    if raw in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[raw])

    match = _MODIFIED_KEY.match(raw)
    if match:
        return KeyEvent(_CSI_FINALS[match.group(2)], _xterm_modifiers(int(match.group(1))))

    if len(raw) == 1:
        code = ord(raw)
        if 1 <= code <= 26:
            return KeyEvent(chr(ord("a") + code - 1), KeyModifiers.CONTROL)
        return KeyEvent(raw)

    # Alt+<char> arrives as ESC followed by the character
    if len(raw) == 2 and raw[0] == "\x1b" and raw[1].isprintable():
        return KeyEvent(raw[1], KeyModifiers.ALT)

    return KeyEvent(raw)


def read_key_event(reader: Callable[[], str] | None = None) -> KeyEvent:
    """Block until the next key press and return it decoded.

    Args:
        reader: Raw key reader, defaults to ``readchar.readkey``.

    Raises:
        EventSourceError: If the terminal cannot be read or input is exhausted.
    """
    read = reader or readchar.readkey
    try:
        raw = read()
    except _READ_ERRORS as e:
        logger.warning("Reading the next key failed: %s", e)
        raise EventSourceError(f"Cannot read key events: {e}") from e

    if not raw:
        logger.warning("Key source returned no data")
        raise EventSourceError("Cannot read key events: input closed")

    return decode_key(raw)
