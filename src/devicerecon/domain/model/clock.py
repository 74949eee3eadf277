"""Time helpers shared by the domain and its adapters."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Return ``value`` in UTC, treating naive timestamps as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def isoformat_utc(value: datetime) -> str:
    """Render ``2026-01-31T23:59:59.123Z`` style timestamps used in audit notes."""

    rendered = ensure_aware(value).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")
