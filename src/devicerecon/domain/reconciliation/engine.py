"""Orchestrator for device reconciliation.

A pass is planned in memory first (grouping, primary selection, transitions)
and then written record by record. Cancellation is honoured between groups only,
so a group is never left half-applied by a cancelled pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devicerecon.domain.model import MergeStrategy, utcnow

from .cancellation import never_stop
from .grouping import short_fingerprint
from .persist import RecordWriter
from .plan import plan_reconciliation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devicerecon.domain.model import Clock, DeviceRecord
    from devicerecon.domain.ports import DeviceUnitOfWork

    from .cancellation import ShouldStop
    from .plan import GroupResolution, ReconciliationTrigger

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationReport:
    """Summary of one reconciliation pass, suitable for monitoring."""

    records_considered: int = 0
    fingerprints: int = 0
    duplicate_groups: int = 0
    deactivated: int = 0
    deleted: int = 0
    merged: int = 0
    failures: int = 0
    cancelled: bool = False
    aborted: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.aborted and self.failures == 0


@dataclass(slots=True)
class DeviceReconciler:
    """Run reconciliation passes against an open unit of work."""

    uow: DeviceUnitOfWork
    clock: Clock = utcnow
    merge_strategy: MergeStrategy = MergeStrategy.DEACTIVATE

    def reconcile(
        self,
        records: Sequence[DeviceRecord],
        trigger: ReconciliationTrigger,
        *,
        should_stop: ShouldStop = never_stop,
    ) -> ReconciliationReport:
        """Deduplicate ``records`` and persist the resulting transitions."""

        plan = plan_reconciliation(
            records,
            trigger,
            now=self.clock(),
            merge_strategy=self.merge_strategy,
        )
        report = ReconciliationReport(
            records_considered=plan.records_considered,
            fingerprints=plan.fingerprints,
            duplicate_groups=plan.duplicate_groups,
        )
        writer = RecordWriter(self.uow)

        for index, resolution in enumerate(plan.resolutions):
            if should_stop():
                report.cancelled = True
                log.warning(
                    "Reconciliation cancelled after %d of %d duplicate groups",
                    index,
                    plan.duplicate_groups,
                )
                break
            self._apply(resolution, writer=writer, report=report)

        report.failures = writer.failures
        return report

    def _apply(
        self,
        resolution: GroupResolution,
        *,
        writer: RecordWriter,
        report: ReconciliationReport,
    ) -> None:
        primary_saved = writer.save(resolution.primary)
        held_id: str | None = None
        if resolution.merged_from is not None:
            if primary_saved:
                report.merged += 1
            else:
                # the winner never received the user binding, keep the new record live
                held_id = resolution.merged_from
                writer.skip(held_id, reason=f"merge into {resolution.primary.id} was not saved")

        deactivated = sum(
            1 for loser in resolution.losers if loser.id != held_id and writer.save(loser)
        )
        deleted = sum(
            1
            for device_id in resolution.deleted_ids
            if device_id != held_id and writer.delete(device_id)
        )
        report.deactivated += deactivated
        report.deleted += deleted

        log.info(
            "Processed fingerprint %s: kept %s active, deactivated %d, deleted %d",
            short_fingerprint(resolution.fingerprint),
            resolution.primary.id,
            deactivated,
            deleted,
        )
