"""Timestamp coercion shared by the content and quiz models."""

from __future__ import annotations

from datetime import UTC, date, datetime, time


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC if *dt* is timezone-naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def parse_timestamp(value: object) -> datetime | None:
    """Normalize a header value into an aware UTC datetime.

    Accepts ``None``/empty strings (returns ``None``), ``datetime`` and
    ``date`` objects (PyYAML produces these for unquoted dates), and
    ISO-8601 strings such as ``2024-01-15`` or ``2024-01-15T10:00:00Z``.

    Raises:
        ValueError: If a string is not ISO-8601 or the type is unsupported.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return ensure_utc(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported timestamp value: {value!r}")
