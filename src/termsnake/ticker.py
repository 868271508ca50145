# ticker.py
import threading
from typing import Iterator, Optional

from .config import TICKS_PER_SEC
from .logging_config import logger


class TickChannel:
    """
    Zero-capacity hand-off between the scheduler and the main loop.

    `try_send` only succeeds while a receiver is blocked in `recv`, and at most
    one delivered tick can be waiting to be picked up. Ticks offered while the
    receiver is busy are dropped, never queued.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._receivers = 0
        self._pending = False
        self._closed = False

    def try_send(self) -> bool:
        with self._cond:
            if self._closed or self._pending or self._receivers == 0:
                return False
            self._pending = True
            self._cond.notify()
            return True

    def recv(self, timeout: Optional[float] = None) -> bool:
        """Block until a tick arrives. False on close or timeout."""
        with self._cond:
            self._receivers += 1
            try:
                self._cond.wait_for(lambda: self._pending or self._closed, timeout)
                if self._pending:
                    self._pending = False
                    return True
                return False
            finally:
                self._receivers -= 1

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[None]:
        while self.recv():
            yield None


class TickScheduler(threading.Thread):
    """Offers one tick per interval on the channel until stopped."""

    def __init__(self, channel: TickChannel, ticks_per_sec: int = TICKS_PER_SEC) -> None:
        super().__init__(name="termsnake-ticker", daemon=True)
        self.channel = channel
        self.interval = 1 / ticks_per_sec
        self.delivered = 0
        self.skipped = 0
        self._stop_requested = threading.Event()

    def run(self) -> None:
        logger.info("Tick scheduler started (%.0f ms)", self.interval * 1000)
        # Event.wait doubles as the sleep so a stop request wakes us at once
        while not self._stop_requested.wait(self.interval):
            if self.channel.try_send():
                self.delivered += 1
            else:
                self.skipped += 1
                logger.debug("Tick skipped, main loop busy")
        logger.info("Tick scheduler stopped (%d delivered, %d skipped)",
                    self.delivered, self.skipped)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_requested.set()
        if self.is_alive():
            self.join(timeout)
