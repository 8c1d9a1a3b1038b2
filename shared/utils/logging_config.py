"""
Logging configuration shared by the API, the seed scripts and the tests.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

# Attributes every LogRecord has; anything else came in through `extra=`.
_RESERVED_RECORD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ContextFormatter(logging.Formatter):
    """Formatter that appends `extra` context as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_")
        }
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} | {pairs}"
        return message


_configured = False


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_to_console: bool = True) -> None:
    """
    Configure the root logger.

    Safe to call from several modules; only the first call installs handlers.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ...)
        log_file: Path of a rotating log file, or empty/None to disable file logging
        log_to_console: Whether to also log to stdout
    """
    global _configured
    if _configured:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
    formatter = ContextFormatter(LOG_FORMAT)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Azure SDK HTTP logging is very chatty at INFO
    logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)
    logging.getLogger("azure.identity").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)
