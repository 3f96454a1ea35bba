"""Logging setup for the IssueHub server.

All components log under the ``issuehub`` logger tree; one rotating file plus
an optional console stream.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "issuehub.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers kept at WARNING unless we run in DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore")

_SECRET_PATTERNS = [
    (re.compile(r"ghp_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),
    (re.compile(r"gho_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),
    (re.compile(r"github_pat_[a-zA-Z0-9_]{82}"), "[GITHUB_TOKEN]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
]


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = True,
    log_file: str = DEFAULT_LOG_FILE,
) -> logging.Logger:
    """Configure the ``issuehub`` logger tree.

    Args:
        log_dir: Directory for the rotating log file. Falls back to
                 ISSUEHUB_LOG_DIR, then 'logs'.
        level: Log level name. Falls back to ISSUEHUB_LOG_LEVEL, then INFO.
        console: Also log to stderr.
        log_file: File name inside log_dir.

    Returns:
        The root ``issuehub`` logger.
    """
    log_dir = Path(log_dir or os.environ.get("ISSUEHUB_LOG_DIR", DEFAULT_LOG_DIR))
    log_dir.mkdir(parents=True, exist_ok=True)

    level = level or os.environ.get("ISSUEHUB_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("issuehub")
    logger.setLevel(log_level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = log_dir / log_file
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=DEFAULT_MAX_BYTES,
        backupCount=DEFAULT_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialized (level=%s, file=%s)", level.upper(), log_path)
    return logger


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Cut long command output down for a log line."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Mask GitHub tokens and bearer credentials in text bound for the log."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text
