"""Logging setup for clio.

Records go to a JSON-lines file in the data directory; the terminal only
sees warnings and errors so log lines never mix with command output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

ROOT_LOGGER = "clio"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUPS = 3

logger = logging.getLogger(ROOT_LOGGER)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            entry.update(context)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Short coloured lines for stderr."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname.lower()
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"
        line = f"clio: {level}: {record.getMessage()}"
        context = getattr(record, "context", None)
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


def setup_logging(
    debug: bool = False,
    log_file: Path | None = None,
    *,
    use_color: bool | None = None,
) -> logging.Logger:
    """Configure the ``clio`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        debug: Record DEBUG messages in the log file (INFO otherwise).
        log_file: JSON-lines log file, rotated at about 1 MB.
        use_color: Colour stderr output. Defaults to whether stderr is a tty.

    Returns:
        The configured logger.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(file_level)
    logger.propagate = False

    if use_color is None:
        use_color = sys.stderr.isatty()
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.WARNING)
    console.setFormatter(ConsoleFormatter(use_color=use_color))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below ``clio`` (e.g. ``clio.store``)."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """Log ``message`` with structured key-value fields.

    The fields become top-level keys in the JSON log file.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"context": context}, stacklevel=2)
