"""State transitions applied to reconciled records.

Every function returns a new record and leaves its input untouched. Reapplying a
transition only moves ``last_activity`` forward and appends another audit entry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from devicerecon.domain.model import SessionStatus, isoformat_utc

if TYPE_CHECKING:
    from datetime import datetime

    from devicerecon.domain.model import DeviceRecord


def cleanup_note(now: datetime) -> str:
    return f"Deactivated by cleanup job on {isoformat_utc(now)}"


def merge_note(winner_id: str, now: datetime) -> str:
    return f"Merged into device {winner_id} on {isoformat_utc(now)}"


def archive_note(now: datetime, retention_days: int) -> str:
    return f"Archived by retention job on {isoformat_utc(now)} ({retention_days}+ days inactive)"


def promote(record: DeviceRecord, *, now: datetime) -> DeviceRecord:
    """Make ``record`` the active survivor of its fingerprint group."""

    status = SessionStatus.ACTIVE if record.user_id else SessionStatus.LOGGED_OUT
    return record.copy(active=True, session_status=status, last_activity=now)


def absorb_user(winner: DeviceRecord, *, user_id: str | None, now: datetime) -> DeviceRecord:
    """Bind the user of a freshly registered duplicate onto ``winner`` and promote it."""

    if user_id is None:
        return promote(winner, now=now)
    return promote(winner.copy(user_id=user_id, session_start=now), now=now)


def deactivate(record: DeviceRecord, *, now: datetime, note: str | None = None) -> DeviceRecord:
    """Retire a duplicate while keeping the row for audit."""

    return record.copy(
        active=False,
        session_status=SessionStatus.LOGGED_OUT,
        user_id=None,
        session_start=None,
        last_activity=now,
        notes=record.with_note(note or cleanup_note(now), recorded_at=now),
    )


def can_archive(record: DeviceRecord) -> bool:
    return not record.active and record.session_status == SessionStatus.LOGGED_OUT


def archive(record: DeviceRecord, *, now: datetime, retention_days: int) -> DeviceRecord:
    """Move a long-inactive, logged-out record to the terminal archived state."""

    if not can_archive(record):
        raise ValueError(f"Device {record.id} cannot be archived from {record.session_status}")
    return record.copy(
        session_status=SessionStatus.ARCHIVED,
        notes=record.with_note(archive_note(now, retention_days), recorded_at=now),
    )
