#!/usr/bin/env python3
"""
Logging configuration module for the Rust documentation bridge.

Provides structured JSON logging on stderr, with an optional rotating log file.
stdout is left alone because the stdio transport speaks MCP over it.
"""

import datetime
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LOG_LEVEL, get_logs_dir

LOGGER_NAME = "RustDocsServer"


class JsonFormatter(logging.Formatter):
    """Custom formatter to output logs in JSON format."""
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        # Add extra data if it exists
        if hasattr(record, 'extra_data'):
            log_record.update(record.extra_data)
        if record.exc_info:
            log_record['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def setup_logging(logs_dir: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Configures the structured JSON logger.

    Args:
        logs_dir: Directory to store rotating log files. If None, falls back to
            RUST_DOCS_LOG_DIR and, when that is unset too, logs to stderr only.
        level: Log level name. If None, uses LOG_LEVEL from the environment.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))

    # Prevent logging from propagating to the root logger
    logger.propagate = False

    # If handlers are already present, do nothing
    if logger.handlers:
        return logger

    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if logs_dir is None:
        logs_dir = get_logs_dir()

    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / f"{datetime.date.today()}.log"

        # Use RotatingFileHandler to prevent log files from growing too large
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger that shares the handlers installed by setup_logging."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
