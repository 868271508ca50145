# terminal.py
"""ANSI terminal backend: buffered drawing, screen modes and keyboard input."""
import codecs
import os
import re
import select
import shutil
import sys
from collections import deque
from contextlib import contextmanager
from typing import Deque, Iterator, List, Optional, TextIO, Tuple

try:
    import termios
    import tty
except ImportError:  # pragma: no cover
    termios = None
    tty = None

from .errors import ERROR_INPUT_FAILED, ERROR_NOT_A_TTY, InputSourceError, TerminalUnavailableError
from .events import (
    ALT, BACKSPACE, CTRL, DOWN, ENTER, ESC, LEFT, RIGHT, SHIFT, TAB, UP,
    Event, KeyEvent, MouseEvent, ResizeEvent,
)
from .logging_config import logger

# ----- SGR colour codes -----
STYLES = {
    "red": "91",
    "dark_red": "31",
    "grey": "37",
    "dark_grey": "90",
    "bold": "1",
}

CSI = "\x1b["


# ---------- Output ----------
class Terminal:
    """
    Queues drawing commands and writes them in one go on `flush`, so a frame
    never shows half drawn.
    """

    def __init__(self, stream: Optional[TextIO] = None, fd: Optional[int] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.fd = fd if fd is not None else sys.stdin.fileno()
        self._buffer: List[str] = []
        self._saved_mode = None

    # drawing contract
    def size(self) -> Tuple[int, int]:
        columns, lines = shutil.get_terminal_size()
        return columns, lines

    def move_to(self, col: int, row: int) -> None:
        self._buffer.append(f"{CSI}{row + 1};{col + 1}H")

    def print(self, text: str, style: Optional[str] = None) -> None:
        if style is None:
            self._buffer.append(text)
        else:
            self._buffer.append(f"{CSI}{STYLES[style]}m{text}{CSI}0m")

    def clear(self) -> None:
        self._buffer.append(f"{CSI}2J")

    def flush(self) -> None:
        self.stream.write("".join(self._buffer))
        self.stream.flush()
        self._buffer.clear()

    # process-level modes, written immediately
    def _execute(self, sequence: str) -> None:
        self.stream.write(sequence)
        self.stream.flush()

    def enter_alternate_screen(self) -> None:
        self._execute(f"{CSI}?1049h")

    def leave_alternate_screen(self) -> None:
        self._execute(f"{CSI}?1049l")

    def hide_cursor(self) -> None:
        self._execute(f"{CSI}?25l")

    def show_cursor(self) -> None:
        self._execute(f"{CSI}?25h")

    def enable_mouse_capture(self) -> None:
        # button events, SGR encoding
        self._execute(f"{CSI}?1000h{CSI}?1006h")

    def disable_mouse_capture(self) -> None:
        self._execute(f"{CSI}?1006l{CSI}?1000l")

    def enable_raw_mode(self) -> None:
        if termios is None or tty is None:
            raise TerminalUnavailableError(ERROR_NOT_A_TTY)
        self._saved_mode = termios.tcgetattr(self.fd)
        tty.setraw(self.fd)

    def disable_raw_mode(self) -> None:
        if self._saved_mode is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None

    @contextmanager
    def session(self) -> Iterator["Terminal"]:
        """Raw mode, alternate screen, hidden cursor and mouse capture for the duration of the block."""
        if not (os.isatty(self.fd) and self.stream.isatty()):
            raise TerminalUnavailableError(ERROR_NOT_A_TTY)
        self.enable_raw_mode()
        try:
            self.enter_alternate_screen()
            self.hide_cursor()
            self.enable_mouse_capture()
            yield self
        finally:
            try:
                self.disable_mouse_capture()
                self.show_cursor()
                self.leave_alternate_screen()
            finally:
                self.disable_raw_mode()
                logger.info("Terminal restored")


# ---------- Input ----------
_MOUSE_RE = re.compile(r"<(\d+);(\d+);(\d+)")

_CSI_KEYS = {"A": UP, "B": DOWN, "C": RIGHT, "D": LEFT}


def _modifiers(bits: int) -> frozenset:
    mods = set()
    if bits & 1:
        mods.add(SHIFT)
    if bits & 2:
        mods.add(ALT)
    if bits & 4:
        mods.add(CTRL)
    return frozenset(mods)


def _modifier_bits(params: str) -> int:
    """Modifier bits from CSI parameters such as "1;5" or "1;5:1"; 0 if unreadable."""
    if ";" not in params:
        return 0
    field = params.rsplit(";", 1)[1].split(":", 1)[0]
    try:
        return max(int(field or 1) - 1, 0)
    except ValueError:
        return 0


def _parse_mouse(params: str, final: str) -> Optional[MouseEvent]:
    match = _MOUSE_RE.fullmatch(params)
    if match is None:
        return None
    code, col, row = (int(g) for g in match.groups())
    mods = _modifiers((code >> 2) & 0b111)
    if code & 64:
        kind = "scroll_down" if code & 1 else "scroll_up"
    elif code & 32:
        kind = "drag"
    else:
        kind = "down" if final == "M" else "up"
    return MouseEvent(kind, code & 0b11, col - 1, row - 1, mods)


def parse_input(text: str) -> Tuple[List[Event], str]:
    """
    Split raw terminal input into key and mouse events.

    Returns the events and any trailing escape sequence that is still
    incomplete; feed that back in front of the next read.
    """
    events: List[Event] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch == "\x1b":
            if i + 1 < n and text[i + 1] == "[":
                j = i + 2
                while j < n and not ("@" <= text[j] <= "~"):
                    j += 1
                if j >= n:
                    return events, text[i:]
                params, final = text[i + 2:j], text[j]
                if params.startswith("<") and final in "Mm":
                    mouse = _parse_mouse(params, final)
                    if mouse is not None:
                        events.append(mouse)
                elif final in _CSI_KEYS:
                    events.append(KeyEvent(_CSI_KEYS[final], _modifiers(_modifier_bits(params))))
                i = j + 1
            elif i + 1 < n and text[i + 1] == "O":
                if i + 2 >= n:
                    return events, text[i:]
                if text[i + 2] in _CSI_KEYS:
                    events.append(KeyEvent(_CSI_KEYS[text[i + 2]]))
                i += 3
            elif i + 1 < n:
                events.append(KeyEvent(text[i + 1], frozenset({ALT})))
                i += 2
            else:
                # a lone escape at the end of a read is the Esc key
                events.append(KeyEvent(ESC))
                i += 1
            continue
        if ch in "\r\n":
            events.append(KeyEvent(ENTER))
        elif ch == "\t":
            events.append(KeyEvent(TAB))
        elif ch == "\x7f":
            events.append(KeyEvent(BACKSPACE))
        elif ord(ch) < 32:
            events.append(KeyEvent(chr(ord(ch) + 96), frozenset({CTRL})))
        else:
            events.append(KeyEvent(ch))
        i += 1
    return events, ""


class TerminalInput:
    """Non-blocking reader over the terminal's stdin, plus resize detection."""

    def __init__(self, fd: Optional[int] = None):
        self.fd = fd if fd is not None else sys.stdin.fileno()
        self._pending: Deque[Event] = deque()
        self._partial = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._size = shutil.get_terminal_size()

    def _check_resize(self) -> None:
        size = shutil.get_terminal_size()
        if size != self._size:
            self._size = size
            self._pending.append(ResizeEvent(size.columns, size.lines))

    def poll(self, timeout: float) -> bool:
        """Wait up to `timeout` seconds for an event."""
        if self._pending:
            return True
        self._check_resize()
        if self._pending:
            return True
        try:
            readable, _, _ = select.select([self.fd], [], [], timeout)
            if not readable:
                return False
            data = os.read(self.fd, 1024)
        except OSError as exc:
            raise InputSourceError(ERROR_INPUT_FAILED.format(exc=exc)) from exc
        if not data:
            raise InputSourceError(ERROR_INPUT_FAILED.format(exc="end of input"))
        # sequences and multi-byte characters may be split across reads
        text = self._partial + self._decoder.decode(data)
        events, self._partial = parse_input(text)
        self._pending.extend(events)
        return bool(self._pending)

    def read(self) -> Event:
        """Next event; only valid after `poll` returned True."""
        return self._pending.popleft()
