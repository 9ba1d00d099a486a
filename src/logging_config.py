"""Configure application logging using the Python standard library.

This module sets up the root logger with a console handler and, when a
log directory is given, a rotating file handler.  Records are formatted
as JSON and carry the checkout context fields (``checkout_id``,
``customer``) plus anything passed in an ``extra`` dict.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone
from typing import Optional


class JsonFormatter(logging.Formatter):
    """Format log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        # Context fields injected by the checkout processor
        if hasattr(record, "checkout_id"):
            log_record["checkout_id"] = getattr(record, "checkout_id")
        if hasattr(record, "customer"):
            log_record["customer"] = getattr(record, "customer")
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            # Merge into top level rather than nesting under "extra"
            log_record.update(extra)
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> None:
    """Configure the root logger with JSON formatting.

    Args:
        log_dir: Directory where ``checkout.log`` is written.  Created if it
            does not exist.  When None only the console handler is installed.
        level: Logging level for the root logger.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    # Remove any default handlers (e.g. from basicConfig)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    formatter = JsonFormatter()
    # Console handler writes to stderr so receipts on stdout stay clean
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    if log_dir is None:
        return
    os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, "checkout.log"),
        maxBytes=5 * 1024 * 1024,  # 5 MB per log file
        backupCount=3,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    logger.addHandler(file_handler)
