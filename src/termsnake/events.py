# events.py
from dataclasses import dataclass, field
from typing import FrozenSet, Union

# ----- Key codes (non-character keys) -----
UP, DOWN, LEFT, RIGHT = "Up", "Down", "Left", "Right"
ESC, ENTER, BACKSPACE, TAB = "Esc", "Enter", "Backspace", "Tab"

ARROWS = (UP, DOWN, LEFT, RIGHT)

# ----- Modifiers -----
SHIFT, ALT, CTRL = "shift", "alt", "ctrl"


@dataclass(frozen=True)
class KeyEvent:
    code: str                                   # one of the names above or a single character
    modifiers: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class MouseEvent:
    kind: str                                   # "down", "up", "drag", "scroll_up", "scroll_down"
    button: int
    column: int
    row: int
    modifiers: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[KeyEvent, MouseEvent, ResizeEvent]
