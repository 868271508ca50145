# game.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .config import APPLES, GRID_W, GRID_H, START, QUIT_KEY
from .coords import LogicalPosition
from .events import Event, KeyEvent, MouseEvent, UP, DOWN, LEFT, RIGHT
from .input import EventQueue
from .logging_config import logger


# ---------- Direction ----------
class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    STOP = (0, 0)

KEY_TO_DIRECTION = {
    UP: Direction.UP,
    DOWN: Direction.DOWN,
    LEFT: Direction.LEFT,
    RIGHT: Direction.RIGHT,
}

def is_opposite(a: Direction, b: Direction) -> bool:
    if Direction.STOP in (a, b):
        return False
    return a.value[0] == -b.value[0] and a.value[1] == -b.value[1]

def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < GRID_W and 0 <= y < GRID_H


# ---------- Snake ----------
class Snake:
    """
    Body cells kept in a ring buffer, head first.

    Moving writes the new head into the slot just before the current head,
    which drops the old tail without touching the rest of the body.
    """

    def __init__(self, start: Tuple[int, int] = START, capacity: int = GRID_W * GRID_H + 1):
        self._cells = np.zeros((max(capacity, 1), 2), dtype=np.int64)
        self._cells[0] = start
        self._head = 0
        self._len = 1
        self.direction = Direction.STOP

    @classmethod
    def from_cells(cls, cells: Sequence[Tuple[int, int]],
                   direction: Direction = Direction.STOP) -> "Snake":
        assert cells, "A snake needs at least one cell."
        snake = cls(cells[0], capacity=max(GRID_W * GRID_H + 1, len(cells)))
        snake._cells[:len(cells)] = cells
        snake._len = len(cells)
        snake.direction = direction
        return snake

    def __len__(self) -> int:
        return self._len

    def _indices(self) -> np.ndarray:
        return (self._head + np.arange(self._len)) % len(self._cells)

    def cells(self) -> np.ndarray:
        """(len, 2) array of body cells, head first."""
        return self._cells[self._indices()]

    @property
    def elements(self) -> List[LogicalPosition]:
        return [LogicalPosition(int(x), int(y)) for x, y in self.cells()]

    @property
    def head(self) -> LogicalPosition:
        assert self._len > 0, "Snake always has at least one element."
        x, y = self._cells[self._head]
        return LogicalPosition(int(x), int(y))

    @property
    def tail(self) -> LogicalPosition:
        x, y = self._cells[(self._head + self._len - 1) % len(self._cells)]
        return LogicalPosition(int(x), int(y))

    def next_head(self) -> LogicalPosition:
        dx, dy = self.direction.value
        hx, hy = self.head
        return LogicalPosition(hx + dx, hy + dy)

    def move_to(self, cell: Tuple[int, int]) -> None:
        """Push `cell` as the new head; every other segment shifts one slot toward the tail."""
        self._head = (self._head - 1) % len(self._cells)
        self._cells[self._head] = cell

    def grow(self) -> None:
        """Duplicate the tail; the copy trails behind on the next move."""
        if self._len == len(self._cells):
            ordered = self.cells()
            self._cells = np.zeros((len(ordered) * 2, 2), dtype=np.int64)
            self._cells[:len(ordered)] = ordered
            self._head = 0
        tail = self.tail
        self._cells[(self._head + self._len) % len(self._cells)] = tail
        self._len += 1

    def hits_itself(self) -> bool:
        """Head against every segment from index 2 on; segment 1 always touches the head."""
        cells = self.cells()
        if len(cells) < 3:
            return False
        return bool(np.any(np.all(cells[2:] == cells[0], axis=1)))


# ---------- Apple ----------
@dataclass
class Apple:
    position: LogicalPosition
    kind: str

def spawn_apple(snake: Snake, rng: np.random.Generator) -> Optional[Apple]:
    """Uniform over the free cells; None when the snake fills the grid."""
    occupied = np.zeros((GRID_W, GRID_H), dtype=bool)
    cells = snake.cells()
    occupied[cells[:, 0], cells[:, 1]] = True
    free = np.argwhere(~occupied)
    if len(free) == 0:
        return None
    x, y = free[rng.integers(len(free))]
    kind = APPLES[rng.integers(len(APPLES))]
    return Apple(LogicalPosition(int(x), int(y)), kind)


# ---------- Controller ----------
@dataclass
class Controller:
    snake: Snake = field(default_factory=Snake)
    events: EventQueue = field(default_factory=EventQueue)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    apple: Optional[Apple] = None
    last_event: Optional[Event] = None
    score: int = 0
    should_close: bool = False
    lost: bool = False

def new_controller(seed: Optional[int] = None) -> Controller:
    return Controller(rng=np.random.default_rng(seed))


# ---------- Per-tick step ----------
def handle_events(ctrl: Controller) -> None:
    """Drain the input queue; remember the newest event, flag the quit key."""
    for event in ctrl.events.drain():
        if isinstance(event, KeyEvent):
            if event.code == QUIT_KEY:
                ctrl.should_close = True
            ctrl.last_event = event
        elif isinstance(event, MouseEvent):
            ctrl.last_event = event

def apply_direction(ctrl: Controller) -> None:
    event = ctrl.last_event
    if not isinstance(event, KeyEvent) or event.code not in KEY_TO_DIRECTION:
        return
    snake = ctrl.snake
    wanted = KEY_TO_DIRECTION[event.code]
    if wanted == snake.direction:
        return
    if is_opposite(wanted, snake.direction):
        logger.debug("Rejected reversal %s -> %s", snake.direction.name, wanted.name)
        return
    logger.debug("Direction %s -> %s", snake.direction.name, wanted.name)
    snake.direction = wanted

def advance(ctrl: Controller) -> None:
    snake = ctrl.snake
    if snake.direction == Direction.STOP:
        return
    nxt = snake.next_head()
    if not in_bounds(*nxt):
        lose(ctrl, f"hit the wall at {tuple(snake.head)} heading {snake.direction.name}")
        return
    snake.move_to(nxt)

def eat_apple(ctrl: Controller) -> bool:
    apple = ctrl.apple
    if apple is None or apple.position != ctrl.snake.head:
        return False
    ctrl.apple = None
    ctrl.score += 1
    ctrl.snake.grow()
    logger.info("Apple eaten at %s, score %d", tuple(apple.position), ctrl.score)
    return True

def respawn_apple(ctrl: Controller) -> None:
    if ctrl.apple is not None:
        return
    ctrl.apple = spawn_apple(ctrl.snake, ctrl.rng)
    if ctrl.apple is not None:
        logger.debug("Apple %s spawned at %s", ctrl.apple.kind, tuple(ctrl.apple.position))

def check_self_collision(ctrl: Controller) -> None:
    if ctrl.snake.hits_itself():
        lose(ctrl, f"bit itself at {tuple(ctrl.snake.head)}")

def lose(ctrl: Controller, reason: str) -> None:
    if not ctrl.lost:
        logger.info("Game over: %s, score %d, length %d", reason, ctrl.score, len(ctrl.snake))
    ctrl.lost = True

def continue_game(ctrl: Controller) -> None:
    """Advance the simulation by one tick."""
    apply_direction(ctrl)
    advance(ctrl)
    eat_apple(ctrl)
    respawn_apple(ctrl)
    check_self_collision(ctrl)
