"""Logging for the termsnake package.

The game owns the terminal while it runs, so records go to a file under
``logs/``. Nothing is configured on import; `main()` calls
`configure_logging` once at startup.
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s - %(message)s"

logger = logging.getLogger("termsnake")


def configure_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> Optional[Path]:
    """
    Attach a file handler to the package logger and return the log file path.
    Falls back to warnings on stderr when the directory is not writable.
    """
    log_dir = log_dir if log_dir is not None else Path.cwd() / "logs"
    logger.propagate = False
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"termsnake_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}.log"
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        logger.warning("Failed to initialize file logging in %s: %s. Falling back to stderr.", log_dir, exc)
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return log_file
