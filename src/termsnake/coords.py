# coords.py
from typing import NamedTuple, Tuple

from .config import CANVAS_WIDTH, CANVAS_HEIGHT


class LogicalPosition(NamedTuple):
    """A cell of the logical grid."""
    x: int
    y: int


class DisplayPosition(NamedTuple):
    """A character cell of the terminal (column, row)."""
    col: int
    row: int


def canvas_origin(terminal_size: Tuple[int, int]) -> Tuple[int, int]:
    """Top-left corner of the border, clamped so it never goes negative."""
    width, height = terminal_size
    return (
        max(width // 2 - CANVAS_WIDTH // 2, 0),
        max(height // 2 - CANVAS_HEIGHT // 4, 0),
    )


def to_display(pos: Tuple[int, int], terminal_size: Tuple[int, int]) -> DisplayPosition:
    """
    Map a logical cell to the terminal cell where its glyph starts.
    Never cache the result: the terminal may be resized between frames.
    """
    left, top = canvas_origin(terminal_size)
    x, y = pos
    return DisplayPosition(left + x * 2 + 1, top + y + 1)
