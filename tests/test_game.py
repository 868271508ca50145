"""Tests for the snake state machine."""

import numpy as np
import pytest
from termsnake.config import GRID_H, GRID_W, START
from termsnake.coords import LogicalPosition
from termsnake.events import DOWN, LEFT, RIGHT, UP, KeyEvent, MouseEvent, ResizeEvent
from termsnake.game import (
    Apple,
    Direction,
    Snake,
    apply_direction,
    continue_game,
    eat_apple,
    handle_events,
    is_opposite,
    new_controller,
    spawn_apple,
)

FAR_APPLE = Apple(LogicalPosition(0, GRID_H - 1), "🍎")


def press(ctrl, *codes):
    for code in codes:
        ctrl.events.push(KeyEvent(code))
    handle_events(ctrl)


class TestSnake:
    """Test the ring-buffer snake body."""

    def test_starts_stopped_with_one_cell(self):
        """A new snake is one cell at the start position, not moving."""
        snake = Snake()

        assert snake.elements == [START]
        assert snake.direction == Direction.STOP
        assert len(snake) == 1

    def test_move_shifts_body(self):
        """Moving pushes a new head and drops the old tail."""
        snake = Snake.from_cells([(5, 5), (4, 5), (3, 5)], Direction.RIGHT)

        snake.move_to((6, 5))

        assert snake.elements == [(6, 5), (5, 5), (4, 5)]
        assert snake.head == (6, 5)
        assert snake.tail == (4, 5)

    def test_moves_wrap_around_the_buffer(self):
        """Many moves keep the body consistent with a plain list model."""
        snake = Snake.from_cells([(2, 2), (1, 2), (0, 2)], Direction.RIGHT)
        model = [(2, 2), (1, 2), (0, 2)]

        for step in range(3 * GRID_W * GRID_H):
            cell = (step % GRID_W, (step // GRID_W) % GRID_H)
            snake.move_to(cell)
            model = [cell] + model[:-1]

        assert snake.elements == model

    def test_grow_duplicates_tail(self):
        """Growing appends a copy of the tail cell."""
        snake = Snake.from_cells([(5, 5), (4, 5)])

        snake.grow()

        assert snake.elements == [(5, 5), (4, 5), (4, 5)]

    def test_grow_past_capacity(self):
        """The buffer expands when the body outgrows it."""
        snake = Snake((3, 3), capacity=2)
        for _ in range(3):
            snake.grow()

        assert len(snake) == 4
        snake.move_to((4, 3))
        assert snake.elements == [(4, 3), (3, 3), (3, 3), (3, 3)]

    def test_hits_itself_ignores_neck(self):
        """Overlap with segment 1 is not a collision."""
        snake = Snake.from_cells([(5, 5), (5, 5), (4, 5)])

        assert snake.hits_itself() is False

    def test_hits_itself_from_segment_two(self):
        """Overlap with segment 2 or later is a collision."""
        assert Snake.from_cells([(5, 5), (4, 5), (5, 5)]).hits_itself() is True
        assert Snake.from_cells([(5, 5), (5, 6), (6, 6), (6, 5), (5, 5)]).hits_itself() is True

    def test_from_cells_requires_a_cell(self):
        """An empty body is a programming error."""
        with pytest.raises(AssertionError):
            Snake.from_cells([])


class TestDirection:
    """Test steering and reversal rejection."""

    @pytest.mark.parametrize(
        ("current", "key"),
        [
            (Direction.UP, DOWN),
            (Direction.DOWN, UP),
            (Direction.LEFT, RIGHT),
            (Direction.RIGHT, LEFT),
        ],
    )
    def test_reversal_is_rejected(self, current, key):
        """Pressing the opposite arrow leaves the direction unchanged."""
        ctrl = new_controller(seed=0)
        ctrl.snake = Snake.from_cells([(5, 5), (5, 6)], current)

        press(ctrl, key)
        apply_direction(ctrl)

        assert ctrl.snake.direction == current

    @pytest.mark.parametrize(
        ("key", "expected"),
        [(UP, Direction.UP), (DOWN, Direction.DOWN), (LEFT, Direction.LEFT), (RIGHT, Direction.RIGHT)],
    )
    def test_any_arrow_starts_a_stopped_snake(self, key, expected):
        """From STOP every arrow is accepted."""
        ctrl = new_controller(seed=0)

        press(ctrl, key)
        apply_direction(ctrl)

        assert ctrl.snake.direction == expected

    def test_turn_is_accepted(self):
        """A perpendicular turn changes direction."""
        ctrl = new_controller(seed=0)
        ctrl.snake.direction = Direction.RIGHT

        press(ctrl, UP)
        apply_direction(ctrl)

        assert ctrl.snake.direction == Direction.UP

    def test_non_arrow_keys_do_not_steer(self):
        """Other keys are recorded but ignored for steering."""
        ctrl = new_controller(seed=0)
        ctrl.snake.direction = Direction.RIGHT

        press(ctrl, "x")
        apply_direction(ctrl)

        assert ctrl.snake.direction == Direction.RIGHT
        assert ctrl.last_event == KeyEvent("x")

    def test_is_opposite(self):
        """STOP is opposite to nothing."""
        assert is_opposite(Direction.UP, Direction.DOWN)
        assert not is_opposite(Direction.UP, Direction.LEFT)
        assert not is_opposite(Direction.STOP, Direction.STOP)


class TestHandleEvents:
    """Test draining the input queue."""

    def test_quit_key_requests_close(self):
        """'q' sets the close flag."""
        ctrl = new_controller(seed=0)

        press(ctrl, "q")

        assert ctrl.should_close is True

    def test_last_event_is_newest(self):
        """Events are drained oldest first, so the newest one is kept."""
        ctrl = new_controller(seed=0)

        press(ctrl, UP, LEFT)

        assert ctrl.last_event == KeyEvent(LEFT)
        assert len(ctrl.events) == 0

    def test_mouse_recorded_resize_ignored(self):
        """Mouse events are remembered, resize events are not."""
        ctrl = new_controller(seed=0)
        mouse = MouseEvent("down", 0, 3, 4)
        ctrl.events.push(mouse)
        ctrl.events.push(ResizeEvent(100, 50))

        handle_events(ctrl)

        assert ctrl.last_event == mouse
        assert ctrl.should_close is False

    def test_empty_queue_keeps_last_event(self):
        """Without new input the previous event stays in effect."""
        ctrl = new_controller(seed=0)
        press(ctrl, RIGHT)

        handle_events(ctrl)

        assert ctrl.last_event == KeyEvent(RIGHT)


class TestContinueGame:
    """Test the per-tick step."""

    def test_stopped_snake_does_not_move(self):
        """Before any arrow key the snake stays put."""
        ctrl = new_controller(seed=0)
        ctrl.apple = FAR_APPLE

        for _ in range(5):
            continue_game(ctrl)

        assert ctrl.snake.elements == [START]
        assert ctrl.lost is False

    def test_moving_right_for_five_ticks(self):
        """From (11, 10) five ticks to the right end at (16, 10)."""
        ctrl = new_controller(seed=0)
        ctrl.apple = FAR_APPLE
        press(ctrl, RIGHT)

        for _ in range(5):
            continue_game(ctrl)

        assert START == (11, 10)
        assert ctrl.snake.head == (16, 10)
        assert len(ctrl.snake) == 1
        assert ctrl.lost is False

    def test_eating_an_apple(self):
        """An apple on the next cell is eaten in one tick."""
        ctrl = new_controller(seed=0)
        ctrl.apple = Apple(LogicalPosition(12, 10), "🍏")
        press(ctrl, RIGHT)

        continue_game(ctrl)

        assert ctrl.score == 1
        assert len(ctrl.snake) == 2
        assert ctrl.snake.elements == [(12, 10), (12, 10)]
        assert ctrl.apple is not None
        assert ctrl.apple.position not in ctrl.snake.elements
        assert ctrl.lost is False

        ctrl.apple = FAR_APPLE
        continue_game(ctrl)

        assert ctrl.snake.elements == [(13, 10), (12, 10)]
        assert ctrl.lost is False

    def test_eat_apple_clears_apple(self):
        """Consuming the apple leaves no apple until the respawn step."""
        ctrl = new_controller(seed=0)
        ctrl.apple = Apple(LogicalPosition(*START), "🍎")

        assert eat_apple(ctrl) is True
        assert ctrl.apple is None
        assert ctrl.score == 1
        assert len(ctrl.snake) == 2

    def test_apple_elsewhere_is_not_eaten(self):
        """A distant apple is left alone."""
        ctrl = new_controller(seed=0)
        ctrl.apple = FAR_APPLE

        assert eat_apple(ctrl) is False
        assert ctrl.apple == FAR_APPLE
        assert ctrl.score == 0

    def test_apple_spawns_when_absent(self):
        """A tick without an apple places one inside the grid."""
        ctrl = new_controller(seed=3)

        continue_game(ctrl)

        assert ctrl.apple is not None
        x, y = ctrl.apple.position
        assert 0 <= x < GRID_W
        assert 0 <= y < GRID_H

    @pytest.mark.parametrize(
        ("head", "direction"),
        [
            ((0, 5), Direction.LEFT),
            ((GRID_W - 1, 5), Direction.RIGHT),
            ((5, 0), Direction.UP),
            ((5, GRID_H - 1), Direction.DOWN),
        ],
    )
    def test_wall_collision(self, head, direction):
        """Leaving the grid loses the game without moving the head."""
        ctrl = new_controller(seed=0)
        ctrl.apple = Apple(LogicalPosition(10, 10), "🍎")
        ctrl.snake = Snake.from_cells([head], direction)

        continue_game(ctrl)

        assert ctrl.lost is True
        assert ctrl.snake.head == head

    def test_tight_loop_bites_itself(self):
        """Turning into the fourth segment of a five-cell snake loses."""
        ctrl = new_controller(seed=0)
        ctrl.apple = FAR_APPLE
        ctrl.snake = Snake.from_cells(
            [(5, 5), (5, 6), (6, 6), (6, 5), (7, 5)],
            Direction.UP,
        )

        press(ctrl, RIGHT)
        continue_game(ctrl)

        assert ctrl.snake.head == (6, 5)
        assert ctrl.lost is True

    def test_following_the_tail_is_safe(self):
        """Moving into the cell the tail is leaving is not a collision."""
        ctrl = new_controller(seed=0)
        ctrl.apple = FAR_APPLE
        ctrl.snake = Snake.from_cells([(5, 5), (5, 6), (6, 6), (6, 5)], Direction.UP)

        press(ctrl, RIGHT)
        continue_game(ctrl)

        assert ctrl.snake.elements == [(6, 5), (5, 5), (5, 6), (6, 6)]
        assert ctrl.lost is False

    def test_snake_never_empty(self):
        """Random play keeps at least one segment on every tick."""
        ctrl = new_controller(seed=7)
        rng = np.random.default_rng(7)
        keys = [UP, DOWN, LEFT, RIGHT]

        for _ in range(500):
            press(ctrl, keys[rng.integers(4)])
            continue_game(ctrl)
            assert len(ctrl.snake) >= 1
            if ctrl.lost:
                break


class TestSpawnApple:
    """Test apple placement."""

    def test_seeded_spawn_is_reproducible(self):
        """The same seed gives the same apple."""
        snake = Snake()

        first = spawn_apple(snake, np.random.default_rng(42))
        second = spawn_apple(snake, np.random.default_rng(42))

        assert first == second

    def test_never_on_the_snake(self):
        """With one free cell left the apple goes there."""
        cells = [(x, y) for x in range(GRID_W) for y in range(GRID_H) if (x, y) != (0, 0)]
        snake = Snake.from_cells(cells)

        apple = spawn_apple(snake, np.random.default_rng(0))

        assert apple is not None
        assert apple.position == (0, 0)

    def test_full_grid_has_no_apple(self):
        """No free cell means no apple."""
        cells = [(x, y) for x in range(GRID_W) for y in range(GRID_H)]

        assert spawn_apple(Snake.from_cells(cells), np.random.default_rng(0)) is None
