"""Single-selection list dialog driven by readchar key events."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Generic, TextIO, TypeVar

from rich.control import Control

from cli_select.errors import EmptyItemsError, EventSourceError, KeyBindingError, SelectError
from cli_select.keys import read_key_event
from cli_select.models import KeyCode, KeyEvent, SelectDialogKey
from cli_select.ui.line import Line

if TYPE_CHECKING:
    from cli_select.config import Config

T = TypeVar("T")

KeyLike = KeyEvent | str
SelectionChange = Callable[[SelectDialogKey, Any], None]

logger = logging.getLogger("cli_select.select")

# Dialog defaults
DEFAULT_POINTER = ">"
DEFAULT_UNSELECTED_POINTER = " "
DEFAULT_FORWARD_SPACING = 2

# The line feed after each cursor-up drops the cursor back one row, so the
# climb is one row taller than the list. Text printed above the list is never
# touched, however many rows it takes.
REDRAW_EXTRA_ROWS = 1


def _check_glyph(name: str, glyph: str) -> None:
    if not isinstance(glyph, str) or len(glyph) != 1:
        raise SelectError(f"{name} must be exactly one character, got {glyph!r}")


@dataclass
class SelectOptions:
    """Everything a dialog can be configured with before it starts.

    Example:
        options = SelectOptions(pointer="◉", extra_up_keys=["k"], extra_down_keys=["j"])
        choice = Select(["a", "b"], options).start()
    """

    pointer: str = DEFAULT_POINTER
    unselected_pointer: str = DEFAULT_UNSELECTED_POINTER
    up_key: KeyLike = KeyCode.UP
    down_key: KeyLike = KeyCode.DOWN
    extra_up_keys: list[KeyLike] = field(default_factory=list)
    extra_down_keys: list[KeyLike] = field(default_factory=list)
    confirm_key: KeyLike = KeyCode.ENTER
    move_selected_item_forward: bool = False
    forward_spacing: int = DEFAULT_FORWARD_SPACING
    underline_selected_item: bool = False
    on_change: SelectionChange | None = None

    def __post_init__(self) -> None:
        self.validate()

    @property
    def confirm(self) -> KeyEvent:
        return KeyEvent.of(self.confirm_key)

    @property
    def up_keys(self) -> list[KeyEvent]:
        """Built-in up key followed by the extra ones."""
        return _unique([self.up_key, *self.extra_up_keys])

    @property
    def down_keys(self) -> list[KeyEvent]:
        """Built-in down key followed by the extra ones."""
        return _unique([self.down_key, *self.extra_down_keys])

    def validate(self) -> None:
        """Check glyphs, spacing and key bindings.

        Raises:
            KeyBindingError: If the confirm key is also an up or down key, or
                a key moves both up and down.
            SelectError: For any other invalid option.
        """
        _check_glyph("pointer", self.pointer)
        _check_glyph("unselected_pointer", self.unselected_pointer)
        if self.forward_spacing < 1:
            raise SelectError(f"forward_spacing must be at least 1, got {self.forward_spacing}")
        confirm = self.confirm
        up_keys = self.up_keys
        down_keys = self.down_keys
        for key in (*up_keys, *down_keys):
            if key == confirm:
                raise KeyBindingError(
                    f"Confirm key '{confirm}' cannot also be an up/down key: "
                    "the dialog could never be confirmed"
                )
        for key in up_keys:
            if key in down_keys:
                raise _both_directions_error(key)

    def copy(self) -> SelectOptions:
        """Copy with independent key lists."""
        return replace(
            self,
            extra_up_keys=list(self.extra_up_keys),
            extra_down_keys=list(self.extra_down_keys),
        )

    @classmethod
    def from_config(cls, config: Config, **overrides: Any) -> SelectOptions:
        """Build options from the persisted config; keyword overrides win."""
        values: dict[str, Any] = {
            "pointer": config.pointer,
            "unselected_pointer": config.unselected_pointer,
            "move_selected_item_forward": config.move_selected_item_forward,
            "forward_spacing": config.forward_spacing,
            "underline_selected_item": config.underline_selected_item,
            "extra_up_keys": list(config.extra_up_keys),
            "extra_down_keys": list(config.extra_down_keys),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _both_directions_error(key: KeyEvent) -> KeyBindingError:
    return KeyBindingError(
        f"Key '{key}' cannot be both an up and a down key: it would only ever move up"
    )


def _unique(keys: list[KeyLike]) -> list[KeyEvent]:
    events: list[KeyEvent] = []
    for key in keys:
        event = KeyEvent.of(key)
        if event not in events:
            events.append(event)
    return events


class Select(Generic[T]):
    """Prints a list of items and returns the one the user confirms.

    Keys are read in an endless loop. Up/down keys move the pointer, and
    pressing the confirm key (Enter by default) ends the loop and returns the
    highlighted item. Only the printed rows are redrawn, by moving the cursor
    back up over them.

    Example:
        Create the dialog with default settings::

            selected = Select(["item1", "item2", "item3"]).start()

        Customize it before starting::

            selected = (
                Select(items)
                .add_up_key("k")
                .add_down_key("j")
                .pointer("◉")
                .not_selected_pointer("○")
                .underline_selected_item()
                .start()
            )
    """

    def __init__(
        self,
        items: Sequence[T],
        options: SelectOptions | None = None,
        *,
        output: TextIO | None = None,
        event_source: Callable[[], KeyEvent] | None = None,
    ):
        """Initialize the dialog.

        Args:
            items: Items to choose from, shown with ``str(item)``.
            options: Dialog configuration. Defaults to ``SelectOptions()``.
            output: Stream the rows are written to. Defaults to stdout.
            event_source: Blocking callable returning the next KeyEvent.
                Defaults to reading the keyboard through readchar.
        """
        self.items = items
        self.options = options.copy() if options is not None else SelectOptions()
        self._output = output or sys.stdout
        self._read_event = event_source or read_key_event
        self.lines: list[Line] = []
        self.selected_item = 0
        self.item_count = 0
        self.longest_item_len = 0
        self.up_keys: list[KeyEvent] = []
        self.down_keys: list[KeyEvent] = []
        self._running = False

    @property
    def current(self) -> T:
        """Item under the pointer."""
        return self.items[self.selected_item]

    @property
    def running(self) -> bool:
        return self._running

    # --- Configuration ---

    def _ensure_not_running(self) -> None:
        if self._running:
            raise SelectError("Cannot reconfigure a select dialog while it is running")

    def _bindable(self, key: KeyLike, other_direction: list[KeyEvent]) -> KeyEvent:
        event = KeyEvent.of(key)
        if event == self.options.confirm:
            raise KeyBindingError(
                f"Confirm key '{event}' is not supported as an up/down key: "
                "the dialog could never be confirmed"
            )
        if event in other_direction:
            raise _both_directions_error(event)
        return event

    def pointer(self, pointer: str) -> Select[T]:
        """Set the glyph shown in front of the selected item."""
        self._ensure_not_running()
        _check_glyph("pointer", pointer)
        self.options.pointer = pointer
        return self

    def not_selected_pointer(self, pointer: str) -> Select[T]:
        """Set the glyph shown in front of every other item."""
        self._ensure_not_running()
        _check_glyph("unselected_pointer", pointer)
        self.options.unselected_pointer = pointer
        return self

    def set_up_key(self, key: KeyLike) -> Select[T]:
        """Replace the built-in up key (arrow up)."""
        self._ensure_not_running()
        self.options.up_key = self._bindable(key, self.options.down_keys)
        return self

    def set_down_key(self, key: KeyLike) -> Select[T]:
        """Replace the built-in down key (arrow down)."""
        self._ensure_not_running()
        self.options.down_key = self._bindable(key, self.options.up_keys)
        return self

    def add_up_key(self, key: KeyLike) -> Select[T]:
        self._ensure_not_running()
        self.options.extra_up_keys.append(self._bindable(key, self.options.down_keys))
        return self

    def add_down_key(self, key: KeyLike) -> Select[T]:
        self._ensure_not_running()
        self.options.extra_down_keys.append(self._bindable(key, self.options.up_keys))
        return self

    def move_selected_item_forward(self) -> Select[T]:
        """Indent the selected item further than the others."""
        self._ensure_not_running()
        self.options.move_selected_item_forward = True
        return self

    def underline_selected_item(self) -> Select[T]:
        self._ensure_not_running()
        self.options.underline_selected_item = True
        return self

    def on_change(self, callback: SelectionChange) -> Select[T]:
        """Call ``callback(direction, item)`` after every successful move."""
        self._ensure_not_running()
        self.options.on_change = callback
        return self

    # --- Rendering ---

    def _build_lines(self) -> None:
        """Create one Line per item and record item_count and longest_item_len."""
        lines: list[Line] = []
        self.longest_item_len = 0
        for item in self.items:
            line = Line(str(item), self.options.pointer)
            line.set_unselected_pointer(self.options.unselected_pointer)
            self.longest_item_len = max(self.longest_item_len, line.width())
            lines.append(line)
        self.lines = lines
        self.item_count = len(lines)

    def _println(self, text: str = "") -> None:
        self._output.write(f"{text}\n")

    def _move_n_lines_up(self, n: int) -> None:
        # The trailing line feed lands one row below where the cursor stopped
        self._println(str(Control.move(0, -n)))

    def _print_lines(self) -> None:
        for line in self.lines:
            line.reset_to_defaults()

        current = self.lines[self.selected_item]
        current.mark_selected()
        if self.options.underline_selected_item:
            current.set_decoration(True)
        if self.options.move_selected_item_forward:
            current.set_spacing(self.options.forward_spacing)

        for line in self.lines:
            self._println(line.render())
        self._output.flush()

    def _erase_printed_items(self) -> None:
        rows = self.item_count + REDRAW_EXTRA_ROWS
        self._move_n_lines_up(rows)
        for line in self.lines:
            self._println(" " * line.width())
        self._move_n_lines_up(rows)

    # --- Navigation ---

    def _move_up(self) -> bool:
        if self.selected_item == 0:
            logger.debug("Already at the first item, ignoring up key")
            return False
        self.selected_item -= 1
        self._erase_printed_items()
        self._print_lines()
        return True

    def _move_down(self) -> bool:
        if self.selected_item == self.item_count - 1:
            logger.debug("Already at the last item, ignoring down key")
            return False
        self.selected_item += 1
        self._erase_printed_items()
        self._print_lines()
        return True

    def _call_event_handler_if_supplied(self, key: SelectDialogKey) -> None:
        handler = self.options.on_change
        if handler is not None:
            handler(key, self.current)

    def _next_event(self) -> KeyEvent:
        try:
            return self._read_event()
        except EventSourceError:
            raise
        except (OSError, EOFError, StopIteration) as e:
            logger.warning("Key event source failed: %r", e)
            raise EventSourceError(f"Key event source failed: {e!r}") from e

    def start(self) -> T:
        """Show the dialog and block until the user confirms.

        Returns:
            The highlighted item at the moment the confirm key was pressed.

        Raises:
            EmptyItemsError: If there are no items.
            KeyBindingError: If the confirm key is bound to navigation.
            EventSourceError: If reading a key fails; the session is aborted.
        """
        if len(self.items) == 0:
            raise EmptyItemsError("Cannot start a select dialog without items: nothing can be highlighted")
        self.options.validate()

        confirm = self.options.confirm
        self.up_keys = self.options.up_keys
        self.down_keys = self.options.down_keys
        self.selected_item = 0

        self._build_lines()
        self._print_lines()
        logger.debug("Select dialog started with %d items", self.item_count)

        self._running = True
        try:
            while True:
                event = self._next_event()

                if event == confirm:
                    break
                if event in self.up_keys:
                    if self._move_up():
                        self._call_event_handler_if_supplied(SelectDialogKey.UP_KEY)
                elif event in self.down_keys:
                    if self._move_down():
                        self._call_event_handler_if_supplied(SelectDialogKey.DOWN_KEY)
                else:
                    logger.debug("Ignoring key %s", event)
        finally:
            self._running = False

        logger.debug("Confirmed item %d of %d", self.selected_item + 1, self.item_count)
        return self.current


def select(
    items: Sequence[T],
    *,
    output: TextIO | None = None,
    event_source: Callable[[], KeyEvent] | None = None,
    **options: Any,
) -> T:
    """Run a select dialog in one call.

    Keyword arguments other than ``output`` and ``event_source`` are
    ``SelectOptions`` fields.
    """
    return Select(items, SelectOptions(**options), output=output, event_source=event_source).start()
