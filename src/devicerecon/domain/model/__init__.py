"""Public domain model surface."""

from __future__ import annotations

from devicerecon.domain.model.clock import Clock, ensure_aware, isoformat_utc, utcnow
from devicerecon.domain.model.device import NOTE_SEPARATOR, AuditEntry, DeviceRecord
from devicerecon.domain.model.enums import MergeStrategy, SessionStatus

__all__ = [
    "NOTE_SEPARATOR",
    "AuditEntry",
    "Clock",
    "DeviceRecord",
    "MergeStrategy",
    "SessionStatus",
    "ensure_aware",
    "isoformat_utc",
    "utcnow",
]
