# render.py
from functools import lru_cache
from importlib import resources
from typing import List, Optional, Protocol, Tuple

from .config import BORDER_STYLE, CANVAS_WIDTH, CANVAS_HEIGHT, SNAKE_GLYPH, QUIT_KEY, Config, CFG
from .coords import canvas_origin, to_display
from .game import Controller, Snake


class Display(Protocol):
    def size(self) -> Tuple[int, int]: ...
    def move_to(self, col: int, row: int) -> None: ...
    def print(self, text: str, style: Optional[str] = None) -> None: ...
    def clear(self) -> None: ...
    def flush(self) -> None: ...


@lru_cache(maxsize=1)
def logo_lines() -> List[str]:
    text = resources.files("termsnake").joinpath("logo.txt").read_text(encoding="utf-8")
    return text.rstrip("\n").split("\n")


# ---------- Frame ----------
def draw(display: Display, ctrl: Controller, config: Config = CFG) -> None:
    """One playing frame. Reads the controller, never changes it."""
    size = display.size()
    display.clear()

    draw_borders(display, size)
    draw_snake(display, ctrl.snake, size)
    draw_apple(display, ctrl, size)
    draw_hud(display, ctrl, size)

    if ctrl.last_event is None:
        show_logo(display, size)
    elif config.debug_events:
        _, lower = _vertical_borders(size)
        left, _ = canvas_origin(size)
        display.move_to(left, lower + 2)
        display.print("Got: ", "grey")
        display.print(repr(ctrl.last_event), "dark_grey")

    display.flush()


def _vertical_borders(size: Tuple[int, int]) -> Tuple[int, int]:
    _, height = size
    upper = max(height // 2 - CANVAS_HEIGHT // 4, 0)
    return upper, height // 2 + CANVAS_HEIGHT // 4


def draw_borders(display: Display, size: Tuple[int, int]) -> None:
    width, _ = size
    left, upper = canvas_origin(size)
    right = width // 2 + CANVAS_WIDTH // 2
    _, lower = _vertical_borders(size)
    vertical, horizontal, top_left, top_right, bottom_left, bottom_right = BORDER_STYLE

    for row in range(upper, lower + 1):
        display.move_to(left, row)
        display.print(vertical)
        display.move_to(right, row)
        display.print(vertical)

    edge = horizontal * (CANVAS_WIDTH - 1)
    display.move_to(left, upper)
    display.print(top_left + edge + top_right)
    display.move_to(left, lower)
    display.print(bottom_left + edge + bottom_right)


def draw_snake(display: Display, snake: Snake, size: Tuple[int, int]) -> None:
    for element in snake.elements:
        col, row = to_display(element, size)
        display.move_to(col, row)
        display.print(SNAKE_GLYPH, "red")


def draw_apple(display: Display, ctrl: Controller, size: Tuple[int, int]) -> None:
    if ctrl.apple is None:
        return
    col, row = to_display(ctrl.apple.position, size)
    display.move_to(col, row)
    display.print(ctrl.apple.kind)


def draw_hud(display: Display, ctrl: Controller, size: Tuple[int, int]) -> None:
    left, _ = canvas_origin(size)
    _, lower = _vertical_borders(size)
    display.move_to(left, lower + 1)
    display.print(f"Score: {ctrl.score}", "bold")


def show_logo(display: Display, size: Tuple[int, int]) -> None:
    width, height = size
    lines = logo_lines()
    line_len = max(len(line) for line in lines)
    col = max(width // 2 - line_len // 2, 0)
    top = max(height // 2 - 2, 0)
    for index, line in enumerate(lines):
        display.move_to(col, top + index)
        display.print(line, "dark_red")


# ---------- End screen ----------
def show_endscreen(display: Display, ctrl: Controller) -> None:
    size = display.size()
    width, height = size
    display.clear()
    show_logo(display, size)

    score_message = f"Your Score: {ctrl.score}"
    display.move_to(max(width // 2 - len(score_message) // 2, 0), height // 2 + 5)
    display.print(score_message)

    hint = f"Press {QUIT_KEY} to quit"
    display.move_to(max(width // 2 - len(hint) // 2, 0), height // 2 + 7)
    display.print(hint, "dark_grey")

    display.flush()
