"""SQLAlchemy table metadata for device registrations."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from devicerecon.domain.model import AuditEntry, SessionStatus

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class AuditLogType(TypeDecorator[tuple[AuditEntry, ...]]):
    """Store audit entries as a JSON list; plain-text legacy notes load as one entry."""

    impl = Text
    cache_ok = True

    def process_bind_param(
        self, value: tuple[AuditEntry, ...] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if not value:
            return None
        payload = [
            {
                "message": entry.message,
                "recorded_at": entry.recorded_at.astimezone(UTC).isoformat()
                if entry.recorded_at
                else None,
            }
            for entry in value
        ]
        return json.dumps(payload, separators=(",", ":"))

    def process_result_value(self, value: str | None, dialect: Dialect) -> tuple[AuditEntry, ...]:
        _ = dialect
        if not value:
            return ()
        try:
            loaded = json.loads(value)
        except ValueError:
            return (AuditEntry(message=value),)
        if not isinstance(loaded, list):
            return (AuditEntry(message=value),)
        items = cast(list[Any], loaded)
        entries: list[AuditEntry] = []
        for item in items:
            if isinstance(item, str):
                entries.append(AuditEntry(message=item))
                continue
            if not isinstance(item, dict):
                log.warning("Ignoring malformed audit entry: %r", item)
                continue
            raw = cast(dict[str, Any], item)
            recorded_at = raw.get("recorded_at")
            entries.append(
                AuditEntry(
                    message=str(raw.get("message", "")),
                    recorded_at=datetime.fromisoformat(recorded_at) if recorded_at else None,
                )
            )
        return tuple(entries)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

device_table = Table(
    "device",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("fingerprint", String(255), nullable=True),
    Column("user_id", String(64), nullable=True),
    Column("active", Boolean, nullable=False, default=True),
    Column(
        "session_status",
        Enum(SessionStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SessionStatus.LOGGED_OUT,
    ),
    Column("last_activity", UTCDateTime, nullable=True),
    Column("last_used", UTCDateTime, nullable=True),
    Column("created", UTCDateTime, nullable=False),
    Column("session_start", UTCDateTime, nullable=True),
    Column("notes", AuditLogType, nullable=True),
    Index("ix_device_fingerprint_active", "fingerprint", "active"),
    Index("ix_device_active_last_activity", "active", "last_activity"),
)
