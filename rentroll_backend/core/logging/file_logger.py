"""
Queue-based file logging with rotation.

Handlers run on a listener thread so request handlers never block on disk.
"""

import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler

from .structured_logger import build_formatter

# Third-party loggers routed through the application queue, with their levels.
EXTERNAL_LOGGERS = {
    "sqlalchemy": logging.WARNING,
    "alembic": logging.INFO,
    "asyncmy": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class FileLogger:
    """Queue-based file logger with rotation capabilities."""

    def __init__(
        self,
        log_file_path: str = "logs/app.log",
        max_bytes: int = 50 * 1024 * 1024,  # 50MB
        backup_count: int = 5,
        log_level: str = "INFO",
        use_json_format: bool = True,
    ):
        self.log_file_path = log_file_path
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.level = getattr(logging, log_level.upper())
        self.use_json_format = use_json_format
        self._log_queue: queue.Queue = queue.Queue()
        self._listener: QueueListener | None = None
        self._queue_handler: QueueHandler | None = None

        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    def build_handlers(self) -> list[logging.Handler]:
        """Console and rotating file handlers fed by the queue listener."""
        file_handler = RotatingFileHandler(
            self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count
        )
        file_handler.setLevel(self.level)
        file_handler.setFormatter(build_formatter(self.use_json_format))

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.level)
        console_handler.setFormatter(
            build_formatter(self.use_json_format, colored=True)
        )

        return [console_handler, file_handler]

    def start(self) -> None:
        """Start the queue listener thread."""
        self._listener = QueueListener(
            self._log_queue, *self.build_handlers(), respect_handler_level=True
        )
        self._listener.start()

    @property
    def queue_handler(self) -> QueueHandler:
        """Handler that producers attach to enqueue records."""
        if self._queue_handler is None:
            self._queue_handler = QueueHandler(self._log_queue)
            self._queue_handler.setLevel(self.level)
        return self._queue_handler

    def stop(self) -> None:
        """Flush pending records and stop the listener."""
        if self._listener:
            self._listener.stop()
            self._listener = None


def route_loggers_to_queue(queue_handler: QueueHandler, level: int) -> None:
    """Send the root, warnings and third-party loggers through ``queue_handler``."""
    for logger_name, logger_level in EXTERNAL_LOGGERS.items():
        ext_logger = logging.getLogger(logger_name)
        ext_logger.handlers.clear()
        ext_logger.addHandler(queue_handler)
        ext_logger.propagate = False
        ext_logger.setLevel(logger_level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.setLevel(level)

    logging.captureWarnings(True)
    warnings_logger = logging.getLogger("py.warnings")
    warnings_logger.handlers.clear()
    warnings_logger.addHandler(queue_handler)
    warnings_logger.propagate = False
    warnings_logger.setLevel(logging.WARNING)
