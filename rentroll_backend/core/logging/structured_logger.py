"""
Structured JSON logging for the RentRoll backend.
"""

import logging
import sys
import traceback
from datetime import datetime
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from .middleware import get_request_id

SERVICE_NAME = "rentroll-backend"
SERVICE_VERSION = "1.0.0"

LOG_RECORD_FORMAT = "%(timestamp)s %(level)s %(request_id)s %(message)s"


class StructuredFormatter(JsonFormatter):
    """JSON formatter that adds standard fields for observability."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now().astimezone().isoformat()
        log_record["request_id"] = getattr(record, "request_id", None) or get_request_id()
        log_record["level"] = record.levelname
        log_record["logger_name"] = record.name
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno
        log_record["service"] = {"name": SERVICE_NAME, "version": SERVICE_VERSION}

        if record.exc_info:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        for field in ["msg", "args", "created", "msecs", "relativeCreated", "pathname"]:
            log_record.pop(field, None)


def build_formatter(use_json_format: bool, colored: bool = False) -> logging.Formatter:
    """Formatter shared by console and file handlers."""
    if use_json_format:
        return StructuredFormatter(fmt=LOG_RECORD_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    if colored:
        return logging.Formatter(
            "\033[1;32m%(asctime)s\033[0m | "
            "\033[1;34m%(levelname)s\033[0m | "
            "\033[1;33m%(name)s:%(lineno)d\033[0m | %(message)s"
        )
    return logging.Formatter(
        "%(asctime)s | %(levelname)s | %(request_id)s | %(name)s:%(lineno)d | %(message)s"
    )


def setup_structured_logging(
    log_level: str = "INFO", use_json_format: bool = True
) -> logging.Logger:
    """
    Set up console-only logging for the application.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR)
        use_json_format: Emit JSON lines instead of human-readable text

    Returns:
        Configured application logger
    """
    logger = logging.getLogger("rentroll_backend")
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(build_formatter(use_json_format, colored=True))
    logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    return logger
