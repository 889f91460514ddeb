"""Classification of MySQL driver errors for logs and span attributes.

Classification never changes control flow: the original exception is always
re-raised to the caller unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Server and client error numbers reported by PyMySQL in ``exc.args[0]``.
_MYSQL_ERRNO_CATEGORIES: dict[int, str] = {
    1064: "syntax",
    1054: "syntax",
    1146: "syntax",
    1149: "syntax",
    1062: "duplicate_key",
    1586: "duplicate_key",
    1451: "foreign_key",
    1452: "foreign_key",
    1044: "auth",
    1045: "auth",
    1142: "auth",
    1143: "auth",
    1205: "timeout",
    3024: "timeout",
    1213: "deadlock",
    1048: "data",
    1264: "data",
    1265: "data",
    1292: "data",
    1364: "data",
    1366: "data",
    1406: "data",
    2003: "connectivity",
    2006: "connectivity",
    2013: "connectivity",
    2055: "connectivity",
}

RECOVERY_HINTS: dict[str, str] = {
    "syntax": "Review SQL syntax; the statement may reference invalid identifiers",
    "duplicate_key": "A row with the same primary or unique key already exists",
    "foreign_key": "The row is referenced by, or references, a missing row",
    "auth": "Verify credentials and grants for the requested operation",
    "timeout": "The statement waited too long for a lock or exceeded its time limit",
    "deadlock": "The transaction was rolled back by the server; run the statement again",
    "data": "A value does not fit the column type or violates NOT NULL",
    "connectivity": "Check network configuration and server availability",
    "unknown": "Inspect error details for root cause",
}


@dataclass(frozen=True)
class ErrorClassification:
    """Structured classification of a driver exception."""

    category: str
    errno: Optional[int] = None

    @property
    def recovery_hint(self) -> str:
        return RECOVERY_HINTS.get(self.category, RECOVERY_HINTS["unknown"])


def mysql_errno(exc: BaseException) -> Optional[int]:
    """Return the MySQL error number carried by a PyMySQL exception, if any."""
    args = getattr(exc, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def classify_error_info(exc: BaseException) -> ErrorClassification:
    """Classify a driver exception by MySQL errno, then by type and message."""
    errno = mysql_errno(exc)
    if errno is not None and errno in _MYSQL_ERRNO_CATEGORIES:
        return ErrorClassification(_MYSQL_ERRNO_CATEGORIES[errno], errno)

    message = str(exc).lower()
    if isinstance(exc, TimeoutError) or "timed out" in message or "timeout" in message:
        return ErrorClassification("timeout", errno)
    if isinstance(exc, ConnectionError) or "can't connect" in message:
        return ErrorClassification("connectivity", errno)
    if "syntax" in message:
        return ErrorClassification("syntax", errno)
    if "duplicate entry" in message:
        return ErrorClassification("duplicate_key", errno)
    return ErrorClassification("unknown", errno)


def log_classified_error(operation: str, exc: BaseException) -> ErrorClassification:
    """Log a failed DAL operation with its classification and return it."""
    info = classify_error_info(exc)
    logger.warning(
        "dal_error_classified",
        extra={
            "event": "dal_error_classified",
            "provider": "mysql",
            "operation": operation,
            "error_category": info.category,
            "error_errno": info.errno,
            "error_type": exc.__class__.__name__,
            "recovery_hint": info.recovery_hint,
        },
    )
    return info
