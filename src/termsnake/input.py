# input.py
import threading
from typing import List, Optional, Protocol

from .config import INPUT_POLL_MS
from .events import Event, KeyEvent, MouseEvent
from .logging_config import logger


class InputSource(Protocol):
    def poll(self, timeout: float) -> bool: ...
    def read(self) -> Event: ...


# ---------- Shared queue ----------
class EventQueue:
    """Raw input events handed from the input thread to the main loop."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: List[Event] = []

    def push(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)

    def drain(self) -> List[Event]:
        """Take every buffered event, oldest first, leaving the queue empty."""
        with self._lock:
            events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


def is_relevant(event: Event) -> bool:
    """Only key presses and mouse events reach the game; resizes are dropped."""
    return isinstance(event, (KeyEvent, MouseEvent))


# ---------- Capture thread ----------
class InputThread(threading.Thread):
    """
    Polls the input source with a bounded wait and appends relevant events to
    the shared queue. Never touches game state.

    A failure of the source stops the thread; the exception is kept in
    `error` so the main loop can fail fast, and `stop()` re-raises it if
    nobody has picked it up yet.
    """

    def __init__(self, source: InputSource, queue: EventQueue,
                 poll_ms: int = INPUT_POLL_MS) -> None:
        super().__init__(name="termsnake-input", daemon=True)
        self.source = source
        self.queue = queue
        self.poll_timeout = poll_ms / 1000
        self.error: Optional[BaseException] = None
        self._stop_requested = threading.Event()
        self._error_taken = False

    def run(self) -> None:
        logger.info("Input thread started (poll %.0f ms)", self.poll_timeout * 1000)
        try:
            while not self._stop_requested.is_set():
                if not self.source.poll(self.poll_timeout):
                    continue
                event = self.source.read()
                if is_relevant(event):
                    self.queue.push(event)
                else:
                    logger.debug("Ignoring input event %r", event)
        except Exception as exc:  # handed over to the owning thread
            logger.exception("Input thread failed")
            self.error = exc
        logger.info("Input thread stopped")

    def take_error(self) -> Optional[BaseException]:
        """Return the recorded failure once; later calls return None."""
        if self.error is None or self._error_taken:
            return None
        self._error_taken = True
        return self.error

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal termination, join, and surface any unreported failure."""
        self._stop_requested.set()
        if self.is_alive():
            self.join(timeout)
        error = self.take_error()
        if error is not None:
            raise error
