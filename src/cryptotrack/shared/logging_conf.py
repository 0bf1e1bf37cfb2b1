# src/cryptotrack/shared/logging_conf.py
"""
Logging Configuration - Logging Setup

Centralized logging configuration for the whole application: one format,
stdout output and an optional rotating log file.

Files that USE this module:
- cryptotrack.app (setup_logging function for logging initialization)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level=logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    log_stdout: Optional[bool] = None,
) -> None:
    """
    Configure application-wide logging settings.

    Can output to stdout, file, or both. Supports log rotation for file logging.

    Args:
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files; the file is named cryptotrack.log
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)
        log_stdout: Log to stdout; when None, read CRYPTOTRACK_LOG_STDOUT (default true)
    """
    handlers = []

    if log_stdout is None:
        log_stdout = os.environ.get("CRYPTOTRACK_LOG_STDOUT", "true").lower() == "true"

    if log_stdout:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(stdout_handler)

    log_file_path = None
    if log_file or log_dir:
        if log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file_path = log_dir / "cryptotrack.log"
        else:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    if not handlers:
        handlers = [logging.StreamHandler(sys.stdout)]

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )

    # httpx logs every Telegram long-poll request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    if log_file_path:
        logger.info("Logging configured: file=%s, level=%s", log_file_path, level)
    else:
        logger.info("Logging configured: stdout, level=%s", level)
