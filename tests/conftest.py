"""Shared fakes for the display backend and the input source."""

import time
from collections import deque

import pytest


class FakeDisplay:
    """Records every drawing call instead of writing to a terminal."""

    def __init__(self, size=(100, 40)):
        self._size = size
        self.calls = []
        self.frames = 0

    def size(self):
        return self._size

    def move_to(self, col, row):
        self.calls.append(("move", col, row))

    def print(self, text, style=None):
        self.calls.append(("print", text, style))

    def clear(self):
        self.calls.append(("clear",))

    def flush(self):
        self.frames += 1
        self.calls.append(("flush",))

    def printed(self):
        return [call[1] for call in self.calls if call[0] == "print"]

    def text_at(self, col, row):
        """Texts printed right after moving to (col, row)."""
        found = []
        for before, after in zip(self.calls, self.calls[1:]):
            if before == ("move", col, row) and after[0] == "print":
                found.append(after[1])
        return found


class FakeSource:
    """Hands out a fixed list of events, then stays quiet."""

    def __init__(self, events=(), error=None):
        self.events = deque(events)
        self.error = error
        self.polls = 0

    def poll(self, timeout):
        self.polls += 1
        if self.error is not None and not self.events:
            raise self.error
        if self.events:
            return True
        time.sleep(min(timeout, 0.005))
        return False

    def read(self):
        return self.events.popleft()


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.002)
    return predicate()


@pytest.fixture
def fake_display():
    return FakeDisplay()


@pytest.fixture
def make_source():
    return FakeSource
