"""SQLAlchemy adapter package for devicerecon."""

from __future__ import annotations

from .mappings import AuditLogType, UTCDateTime, device_table, metadata
from .repositories import SqlAlchemyDeviceRepository

__all__ = [
    "AuditLogType",
    "SqlAlchemyDeviceRepository",
    "UTCDateTime",
    "device_table",
    "metadata",
]
