"""
Structured JSON Logging Utilities for the Customer Data-Access Layer.

Every log line is a single compact JSON object written to standard output, so
that log aggregators can parse and filter it without regex-based scraping.
Each record is automatically enriched with the service name, the deployment
environment and the package version.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import UTC, datetime
from typing import Any

from . import SERVICE_NAME, __version__

_ENV = os.getenv("CUSTOMER_DATA_ENV", "local")
_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _normalize_level(level: str) -> str:
    """
    Ensures that a log level is a valid, uppercase string.

    Unknown levels fall back to `INFO`.
    """
    level_upper = level.upper()
    return level_upper if level_upper in _VALID_LEVELS else "INFO"


def log_event(level: str, msg: str, **fields: Any) -> None:
    """
    Emits a structured, single-line JSON log entry to standard output.

    Standard Fields Automatically Included:
    - `ts`: An ISO 8601 timestamp in UTC.
    - `service`: The name of this service ("customer-data").
    - `env`: The deployment environment.
    - `version`: The package version.
    - `level`: The normalized log severity.
    - `msg`: The primary, human-readable log message.

    Example Usage:
    ```python
    log_event("INFO", "customer_created", customer_id=1)
    ```

    Args:
        level: The severity level of the log (e.g., "INFO", "ERROR").
        msg: The primary log message, conventionally a snake_case event name.
        **fields: Extra key-value pairs added to the root of the JSON object.
            Values that are not JSON-serializable are rendered with `str()`.
    """
    record = {
        "ts": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
        "env": _ENV,
        "version": __version__,
        "level": _normalize_level(level),
        "msg": msg,
    }
    record.update(fields)
    print(json.dumps(record, separators=(",", ":"), default=str), file=sys.stdout, flush=True)
