"""Define errors and error messages for the termsnake package."""

ERROR_NOT_A_TTY = (
    "termsnake needs an interactive terminal: stdin and stdout must both be a TTY."
)
ERROR_INPUT_FAILED = "Reading from the input source failed: {exc}"


class TermsnakeError(Exception):
    """Base class for termsnake failures."""


class TerminalUnavailableError(TermsnakeError):
    """Raised when the process is not attached to a usable terminal."""


class InputSourceError(TermsnakeError):
    """Raised when polling or reading the input source fails."""
