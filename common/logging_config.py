# common/logging_config.py
# -*- coding: utf-8 -*-
"""
Logging configuration for the provisioner.

Console output is human-readable. Unattended runs can additionally write a
JSON-structured log file, one record per line, so a run can be audited after
the console window is gone.
"""

import json
import logging
import os
import socket
import sys
from datetime import datetime, timezone
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# LogRecord attributes that are not user-supplied "extra" fields.
_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON with a consistent structure:
    timestamp, level, service, logger, message, source location and any
    extra fields passed to the logging call.
    """

    def __init__(self, service_name: str = "provisioner"):
        super().__init__()
        self.service_name = service_name
        self.hostname = socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(
    service_name: str,
    log_level: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = False,
    log_file_path: Optional[str] = None,
    log_prefix: str = "",
) -> logging.Logger:
    """
    Set up logging for the provisioner.

    Args:
        service_name: Name of the top-level logger.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Falls back to the LOG_LEVEL environment variable, then INFO.
        enable_console: Whether to log to stdout.
        enable_file: Whether to write JSON records to log_file_path.
        log_file_path: Path to the log file (if file logging enabled).
        log_prefix: Text prepended to every console line.

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level = "INFO"

    console_format = f"{log_prefix} {CONSOLE_FORMAT}" if log_prefix else CONSOLE_FORMAT
    console_formatter = logging.Formatter(console_format, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if enable_file and log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter(service_name))
        root_logger.addHandler(file_handler)
        root_logger.setLevel(min(numeric_level, logging.DEBUG))

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": log_level.upper(),
            "console_enabled": enable_console,
            "file_enabled": bool(enable_file and log_file_path),
        },
    )
    return logger

