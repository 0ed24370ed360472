"""UI module."""

from .line import Line
from .select import Select, SelectOptions, select

__all__ = [
    "Line",
    "Select",
    "SelectOptions",
    "select",
]
