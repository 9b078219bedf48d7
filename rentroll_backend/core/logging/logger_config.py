"""
Central logging configuration for the RentRoll backend.
"""

import logging

from .file_logger import FileLogger, route_loggers_to_queue
from .middleware import RequestIdFilter
from .structured_logger import setup_structured_logging

APP_LOGGER_NAME = "rentroll_backend"


class LoggingConfig:
    """Holds the active logging setup so it can be shut down cleanly."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self._is_configured = False

    def setup(
        self,
        log_to_file: bool = True,
        log_level: str = "INFO",
        log_file_path: str = "logs/app.log",
        use_json_format: bool = True,
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
    ) -> logging.Logger:
        """
        Set up logging once per process.

        Args:
            log_to_file: Whether to enable queue-based file logging
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_file_path: Path to the log file
            use_json_format: Whether to use JSON formatting
            max_bytes: Maximum file size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured application logger
        """
        if self._is_configured:
            return get_logger()

        request_filter = RequestIdFilter()

        if log_to_file:
            self.file_logger = FileLogger(
                log_file_path=log_file_path,
                max_bytes=max_bytes,
                backup_count=backup_count,
                log_level=log_level,
                use_json_format=use_json_format,
            )
            self.file_logger.start()
            queue_handler = self.file_logger.queue_handler
            queue_handler.addFilter(request_filter)
            route_loggers_to_queue(queue_handler, getattr(logging, log_level.upper()))
        else:
            logger = setup_structured_logging(log_level, use_json_format)
            for handler in logger.handlers:
                handler.addFilter(request_filter)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging(settings) -> logging.Logger:
    """Configure logging from application settings."""
    return _logging_config.setup(
        log_to_file=settings.log_to_file,
        log_level=settings.log_level,
        log_file_path=settings.log_file_path,
        use_json_format=settings.log_format.lower() == "json",
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger namespaced under the application logger.

    Args:
        name: Optional module name; ``rentroll_backend.`` prefixes are not doubled

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger(APP_LOGGER_NAME)
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()
