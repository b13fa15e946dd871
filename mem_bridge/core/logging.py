"""Secure logging for the memory bridge.

The bridge runs inside a host process it does not own, so configuration is
scoped to the ``mem_bridge`` logger and never touches the root logger.

Features:
    - Sensitive data masking (API keys, bearer tokens, passwords)
    - Optional JSON structured logging format
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

PACKAGE_LOGGER = "mem_bridge"

# Patterns to mask in logs
SENSITIVE_PATTERNS = [
    (re.compile(r'api[_-]?key["\']?\s*[:=]\s*["\']?[\w-]+', re.I), "api_key=***MASKED***"),
    (re.compile(r"sk-[a-zA-Z0-9]{20,}"), "***OPENAI_KEY***"),
    (re.compile(r"bearer\s+[\w.~+/-]+=*", re.I), "Bearer ***MASKED***"),
    (re.compile(r'password["\']?\s*[:=]\s*["\']?[^\s"\']+', re.I), "password=***MASKED***"),
]


def mask_sensitive(message: str) -> str:
    """Replace every sensitive pattern in *message*."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class SecureFormatter(logging.Formatter):
    """Formatter that masks sensitive data."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record and mask sensitive data.

        Args:
            record: The log record to format.

        Returns:
            Formatted log message with sensitive data masked.
        """
        return mask_sensitive(super().format(record))


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Args:
        mask: Mask sensitive data in the serialized record.
    """

    def __init__(self, mask: bool = True) -> None:
        super().__init__()
        self.mask = mask

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted log message, masked unless disabled.
        """
        log_data: dict[str, str] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        payload = json.dumps(log_data)
        return mask_sensitive(payload) if self.mask else payload


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    mask_sensitive: bool = True,
) -> logging.Logger:
    """Configure logging for the bridge package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_format: Use JSON format for structured logging.
        mask_sensitive: Mask sensitive data in logs.

    Returns:
        The configured package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())

    # Replace handlers from an earlier call
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    # Logs go to stderr; stdout belongs to stdin/stdout hook hosts
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level.upper())

    if json_format:
        formatter: logging.Formatter = JSONFormatter(mask=mask_sensitive)
    elif mask_sensitive:
        formatter = SecureFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False
    return package_logger
