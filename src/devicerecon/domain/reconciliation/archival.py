"""Retention pass moving long-inactive records to the archived state.

This pass is independent of fingerprint grouping: each candidate is evaluated
and written on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from devicerecon.domain.model import ensure_aware, utcnow

from .cancellation import never_stop
from .persist import RecordWriter
from .transitions import archive, can_archive

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from devicerecon.domain.model import Clock, DeviceRecord
    from devicerecon.domain.ports import DeviceUnitOfWork

    from .cancellation import ShouldStop

log = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 90


@dataclass(slots=True)
class ArchivalReport:
    considered: int = 0
    archived: int = 0
    skipped: int = 0
    failures: int = 0
    cancelled: bool = False


def archival_cutoff(now: datetime, retention_days: int) -> datetime:
    if retention_days < 1:
        raise ValueError("Retention window must be at least one day")
    return now - timedelta(days=retention_days)


def is_archivable(record: DeviceRecord, *, cutoff: datetime) -> bool:
    if not can_archive(record) or record.last_activity is None:
        return False
    return ensure_aware(record.last_activity) < cutoff


@dataclass(slots=True)
class DeviceArchiver:
    """Archive inactive records whose last activity predates the retention window."""

    uow: DeviceUnitOfWork
    retention_days: int = DEFAULT_RETENTION_DAYS
    clock: Clock = utcnow

    def cutoff(self) -> datetime:
        return archival_cutoff(self.clock(), self.retention_days)

    def archive(
        self,
        records: Iterable[DeviceRecord],
        *,
        should_stop: ShouldStop = never_stop,
    ) -> ArchivalReport:
        now = self.clock()
        cutoff = archival_cutoff(now, self.retention_days)
        writer = RecordWriter(self.uow)
        report = ArchivalReport()

        for record in records:
            if should_stop():
                report.cancelled = True
                log.warning("Archival cancelled after %d records", report.considered)
                break
            report.considered += 1
            if not is_archivable(record, cutoff=cutoff):
                report.skipped += 1
                continue
            archived = archive(record, now=now, retention_days=self.retention_days)
            if writer.save(archived):
                report.archived += 1

        report.failures = writer.failures
        return report
