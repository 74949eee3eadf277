"""Application services for keeping the device registry free of duplicates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from devicerecon.domain.model import MergeStrategy, utcnow
from devicerecon.domain.ports import DeviceQuery, DeviceStoreError
from devicerecon.domain.reconciliation import (
    BatchSweep,
    DeviceArchiver,
    DeviceReconciler,
    ReconciliationError,
    ReconciliationReport,
    SingleInsert,
    compute_statistics,
    never_stop,
)
from devicerecon.domain.reconciliation.archival import DEFAULT_RETENTION_DAYS
from devicerecon.domain.reconciliation.grouping import short_fingerprint

DEFAULT_PAGE_SIZE = 500
DEFAULT_SIBLING_LIMIT = 50

if TYPE_CHECKING:
    from collections.abc import Callable

    from devicerecon.domain.model import Clock, DeviceRecord
    from devicerecon.domain.ports import DeviceRepository, DeviceUnitOfWork
    from devicerecon.domain.reconciliation import (
        ArchivalReport,
        DeviceStatistics,
        ShouldStop,
    )

    UnitOfWorkFactory = Callable[[], DeviceUnitOfWork]

log = logging.getLogger(__name__)


def load_devices(
    repository: DeviceRepository,
    criteria: DeviceQuery,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[DeviceRecord]:
    """Page through ``repository`` until a short page signals the end."""

    if page_size < 1:
        raise ValueError("Page size must be positive")
    collected: list[DeviceRecord] = []
    offset = criteria.offset
    while True:
        page = repository.query(criteria.page(offset, page_size))
        collected.extend(page)
        if len(page) < page_size:
            return collected
        offset += page_size


def run_cleanup_sweep(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    page_size: int = DEFAULT_PAGE_SIZE,
    clock: Clock = utcnow,
    should_stop: ShouldStop = never_stop,
) -> ReconciliationReport:
    """Deduplicate every fingerprinted device, keeping the most recent one active.

    ``StoreReadError`` propagates: nothing has been written when loading fails.
    """

    with unit_of_work_factory() as uow:
        records = load_devices(
            uow.repositories.devices,
            DeviceQuery(order_by_recency=True),
            page_size=page_size,
        )
        log.info("Found %d total devices to analyze", len(records))
        reconciler = DeviceReconciler(uow=uow, clock=clock)
        report = reconciler.reconcile(records, BatchSweep(), should_stop=should_stop)

    log.info(
        "Device cleanup finished: analyzed=%d, fingerprints=%d, duplicate_groups=%d, "
        "deactivated=%d, failures=%d, cancelled=%s",
        report.records_considered,
        report.fingerprints,
        report.duplicate_groups,
        report.deactivated,
        report.failures,
        report.cancelled,
    )
    return report


def handle_device_created(
    device_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    sibling_limit: int = DEFAULT_SIBLING_LIMIT,
    merge_strategy: MergeStrategy = MergeStrategy.DEACTIVATE,
    clock: Clock = utcnow,
) -> ReconciliationReport:
    """Reconcile a freshly registered device against records sharing its fingerprint.

    Never raises for store or reconciliation failures: the registration that
    triggered this call must still succeed, so errors are logged and reported as
    ``aborted``.
    """

    try:
        return _reconcile_new_device(
            device_id,
            unit_of_work_factory=unit_of_work_factory,
            sibling_limit=sibling_limit,
            merge_strategy=merge_strategy,
            clock=clock,
        )
    except (DeviceStoreError, ReconciliationError):
        log.exception("Duplicate check failed for new device %s", device_id)
        return ReconciliationReport(aborted=True)


def _reconcile_new_device(
    device_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    sibling_limit: int,
    merge_strategy: MergeStrategy,
    clock: Clock,
) -> ReconciliationReport:
    with unit_of_work_factory() as uow:
        repository = uow.repositories.devices
        new_record = repository.get(device_id)
        if new_record is None:
            log.warning("Device %s not found, skipping duplicate check", device_id)
            return ReconciliationReport(aborted=True)
        if not new_record.has_fingerprint or new_record.fingerprint is None:
            log.info("Device %s has no fingerprint, skipping duplicate check", device_id)
            return ReconciliationReport(records_considered=1)

        siblings = repository.query(
            DeviceQuery(
                fingerprint=new_record.fingerprint,
                exclude_id=device_id,
                order_by_recency=True,
                limit=sibling_limit,
            )
        )
        if not siblings:
            log.debug("No duplicates for fingerprint %s", short_fingerprint(new_record.fingerprint))
            return ReconciliationReport(records_considered=1, fingerprints=1)

        log.info(
            "Found %d duplicate device(s) for new device %s",
            len(siblings),
            device_id,
        )
        reconciler = DeviceReconciler(uow=uow, clock=clock, merge_strategy=merge_strategy)
        return reconciler.reconcile([new_record, *siblings], SingleInsert(device_id))


def archive_inactive_devices(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    page_size: int = DEFAULT_PAGE_SIZE,
    clock: Clock = utcnow,
    should_stop: ShouldStop = never_stop,
) -> ArchivalReport:
    """Archive logged-out devices inactive for longer than ``retention_days``."""

    with unit_of_work_factory() as uow:
        archiver = DeviceArchiver(uow=uow, retention_days=retention_days, clock=clock)
        candidates = load_devices(
            uow.repositories.devices,
            DeviceQuery(active=False, last_activity_before=archiver.cutoff()),
            page_size=page_size,
        )
        log.info(
            "Found %d inactive devices older than %d days",
            len(candidates),
            retention_days,
        )
        report = archiver.archive(candidates, should_stop=should_stop)

    log.info(
        "Archival finished: archived=%d, skipped=%d, failures=%d",
        report.archived,
        report.skipped,
        report.failures,
    )
    return report


def collect_device_statistics(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    page_size: int = DEFAULT_PAGE_SIZE,
    active_only: bool = False,
) -> DeviceStatistics:
    """Aggregate counts for monitoring; performs no writes."""

    criteria = DeviceQuery(active=True) if active_only else DeviceQuery()
    with unit_of_work_factory() as uow:
        records = load_devices(uow.repositories.devices, criteria, page_size=page_size)
    return compute_statistics(records)


def run_health_check(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> DeviceStatistics:
    """Report active duplicate groups, which should be zero after a sweep."""

    stats = collect_device_statistics(
        unit_of_work_factory=unit_of_work_factory,
        page_size=page_size,
        active_only=True,
    )
    if stats.has_active_duplicates:
        log.warning("ALERT: %d active duplicate groups detected", stats.active_duplicate_groups)
    else:
        log.info("No active duplicate groups detected")
    log.info(
        "Health status: %d active devices, %d unique fingerprints",
        stats.active,
        stats.fingerprints,
    )
    return stats
