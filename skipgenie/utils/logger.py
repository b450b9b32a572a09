"""
Logging utilities with security features.

This module provides logging setup with:
- Configurable log levels and output destinations
- Log rotation for file handlers
- Authorization token masking
- Structured log format
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def mask_token(token: Optional[str]) -> str:
    """
    Mask an authorization token for safe logging.

    Keeps the first four characters so tokens can be told apart.

    Examples:
        >>> mask_token("eyJhbGciOiJIUzI1NiJ9")
        'eyJh********'
        >>> mask_token("")
        '********'
    """
    if not token or len(token) <= 8:
        return "********"
    return token[:4] + "********"


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that masks authorization tokens in messages.

    Covers "Authorization: <token>", "Bearer <token>" and
    "token=<token>" style fragments.
    """

    _PATTERNS = [
        (re.compile(r'(authorization["\']?\s*[:=]\s*["\']?)(bearer\s+)?([^"\'\s,}]+)', re.IGNORECASE),
         r'\1\2********'),
        (re.compile(r'(bearer\s+)([^"\'\s,}]+)', re.IGNORECASE),
         r'\1********'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([^"\'\s,}]+)', re.IGNORECASE),
         r'\1********'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Mask sensitive data in the record.

        Returns:
            Always True (allows all records through after masking)
        """
        message = str(record.msg)
        for pattern, replacement in self._PATTERNS:
            message = pattern.sub(replacement, message)
        record.msg = message
        return True


def setup_logger(
    name: str = "skipgenie",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger instance.

    Args:
        name: Logger name (default: "skipgenie")
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file for file output

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logger()
        >>> logger.info("Projection started")

        >>> logger = setup_logger(
        ...     name="skipgenie",
        ...     level=logging.DEBUG,
        ...     log_file="output/logs/skipgenie.log"
        ... )
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(file_handler)

    return logger
