"""Logging infrastructure for the RentRoll backend."""

from .file_logger import FileLogger
from .logger_config import get_logger, setup_logging, shutdown_logging
from .middleware import (
    RequestIdFilter,
    RequestLoggingMiddleware,
    get_request_id,
    set_request_id,
)

__all__ = [
    "FileLogger",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "RequestIdFilter",
    "RequestLoggingMiddleware",
    "get_request_id",
    "set_request_id",
]
