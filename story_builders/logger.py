"""
Logging setup for the bot and the offline harness.

Modules log through `logging.getLogger(__name__)`; this module only
configures the root handler once at process start.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

NOISY_LOGGERS = ("slack_bolt", "slack_sdk", "httpx", "httpcore", "urllib3", "anthropic", "openai")


class ConsoleFormatter(logging.Formatter):
    """Compact single-line console formatter."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        msg = f"[{timestamp}] [{record.levelname:7}] [{record.name}] {record.getMessage()}"
        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)
        return msg


def setup_logging(level: Optional[str] = "info") -> None:
    """
    Configure the root logger to write to stdout.

    Args:
        level: Log level name (debug, info, warning, error).
    """
    log_level = getattr(logging, (level or "info").upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
