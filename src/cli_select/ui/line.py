"""A single row of a select dialog."""

from rich.color import ColorSystem
from rich.style import Style

UNDERLINE = Style(underline=True)


class Line:
    """One list entry and the flags that decide how it is printed.

    The text is fixed at construction. Selection, spacing and decoration are
    reset before every redraw and re-applied to the current row only.
    """

    def __init__(self, text: str, selected_pointer: str):
        self.text = text
        self.selected_pointer = selected_pointer
        self.unselected_pointer = " "
        self.is_selected = False
        self.space = 1
        self.decorated = False

    def mark_selected(self) -> None:
        """Show the selected pointer on this line."""
        self.is_selected = True

    def set_unselected_pointer(self, glyph: str) -> None:
        self.unselected_pointer = glyph

    def set_decoration(self, on: bool) -> None:
        self.decorated = on

    def set_spacing(self, space: int) -> None:
        self.space = space

    def reset_to_defaults(self) -> None:
        """Undo every change made after creation."""
        self.is_selected = False
        self.space = 1
        self.decorated = False

    def render(self) -> str:
        """Return the row as printed, without a trailing newline."""
        pointer = self.selected_pointer if self.is_selected else self.unselected_pointer
        text = self.text
        if self.decorated:
            text = UNDERLINE.render(text, color_system=ColorSystem.STANDARD)
        return f"{pointer}{' ' * self.space}{text}"

    def width(self) -> int:
        """Visible columns the row occupies; escape codes take none."""
        return len(self.text) + self.space + 1

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        return self.width()

    def __repr__(self) -> str:
        return f"Line({self.text!r}, selected={self.is_selected})"
