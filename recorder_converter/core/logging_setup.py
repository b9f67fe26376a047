"""Logging configuration for the converter application."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from PySide6 import QtCore
from rich.logging import RichHandler

from .config import app_data_dir, debug_enabled

FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


class LogBridge(QtCore.QObject):
    message = QtCore.Signal(str)


class QtLogHandler(logging.Handler):
    """Forwards formatted log records to the UI through a Qt signal.

    Records may arrive from pool threads; the signal hands them to the
    receiver's thread.
    """

    def __init__(self, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.bridge = LogBridge()
        self.setFormatter(logging.Formatter("%(asctime)s %(message)s", "%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.bridge.message.emit(self.format(record))
        except Exception:
            self.handleError(record)


def setup_logging(log_directory: Optional[Path] = None) -> Path:
    """Configure the root logger and return the log file path.

    The file log is always on (INFO, or DEBUG when ``DEBUG`` is set). The
    console only gets a rich handler in debug mode.
    """
    debug = debug_enabled()
    logs_dir = log_directory or (app_data_dir() / "logs")
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "recorder-converter.log"

    file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    if debug:
        root_logger.addHandler(RichHandler(level=logging.DEBUG, show_path=False, rich_tracebacks=True))

    root_logger.debug(f"(persistent log under {log_file})")
    return log_file
