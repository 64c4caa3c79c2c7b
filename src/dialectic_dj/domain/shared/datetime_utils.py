"""UTC timestamps as stored in SQLite and sent by the accounts service."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from ...domain.shared.messages import ErrorMessages


def utcnow() -> datetime:
    return datetime.now(UTC)


def expires_in(seconds: float) -> datetime:
    """Absolute expiry for a lifetime reported in seconds from now."""
    return utcnow() + timedelta(seconds=seconds)


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
    return dt.astimezone(UTC).isoformat()


def parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
    return parsed.astimezone(UTC)
