import json
import logging
import sys
from datetime import datetime, timezone

from config import settings

ROOT_LOGGER = "asset_optimize"


class StructuredFormatter(logging.Formatter):
    """JSON formatter, one object per line.

    Fields:
    - severity: Python level name
    - message: Human-readable message
    - timestamp: ISO 8601 with timezone
    - context: Additional structured data (asset path, hashes, sizes)
    """

    SEVERITY_MAP = {
        "DEBUG": "DEBUG",
        "INFO": "INFO",
        "WARNING": "WARNING",
        "ERROR": "ERROR",
        "CRITICAL": "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "severity": self.SEVERITY_MAP.get(record.levelname, "DEFAULT"),
            "message": record.getMessage(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if record.exc_info and record.exc_info[0]:
            log_entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class ConsoleFormatter(logging.Formatter):
    """Plain progress lines for interactive use (``› message``)."""

    PREFIX = "› "

    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.PREFIX}{record.getMessage()}"
        if record.levelno >= logging.WARNING:
            line = f"{self.PREFIX}{record.levelname.lower()}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0]:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(log_format: str | None = None, level: str | None = None) -> logging.Logger:
    """Configure the ``asset_optimize`` logger.

    Call once at CLI startup (in main.py).
    """
    log_format = log_format or settings.log_format
    level = level or settings.log_level

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(ConsoleFormatter())

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.propagate = False

    # Suppress noisy library loggers
    logging.getLogger("PIL").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the 'asset_optimize' namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
