# src/sheworks/db/time.py
"""Clock helpers shared by models and services."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp for JSON columns such as an order's status history."""
    return utcnow().isoformat()
