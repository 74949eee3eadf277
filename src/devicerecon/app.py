"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from devicerecon.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyDeviceUnitOfWork,
    is_started,
    startup,
)
from devicerecon.config import get_reconciliation_config
from devicerecon.domain import maintenance
from devicerecon.domain.model import utcnow
from devicerecon.domain.ports import DeviceUnitOfWork
from devicerecon.domain.reconciliation import Deadline, never_stop

if TYPE_CHECKING:
    from devicerecon.config import ReconciliationConfig
    from devicerecon.domain.model import Clock
    from devicerecon.domain.reconciliation import (
        ArchivalReport,
        DeviceStatistics,
        ReconciliationReport,
        ShouldStop,
    )

UnitOfWorkFactory = Callable[[], DeviceUnitOfWork]


log = getLogger(__name__)


def _resolve(
    unit_of_work_factory: UnitOfWorkFactory | None,
    config: ReconciliationConfig | None,
) -> tuple[UnitOfWorkFactory, ReconciliationConfig]:
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyDeviceUnitOfWork
    return unit_of_work_factory, config or get_reconciliation_config()


def _sweep_deadline(config: ReconciliationConfig) -> ShouldStop:
    if config.sweep_timeout_seconds is None:
        return never_stop
    return Deadline(config.sweep_timeout_seconds)


def run_cleanup_sweep(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
    clock: Clock = utcnow,
) -> ReconciliationReport:
    """Run the daily duplicate sweep with the configured adapters."""

    effective_uow, effective_config = _resolve(unit_of_work_factory, config)
    log.info("Starting device cleanup sweep (page_size=%s)", effective_config.page_size)
    return maintenance.run_cleanup_sweep(
        unit_of_work_factory=effective_uow,
        page_size=effective_config.page_size,
        should_stop=_sweep_deadline(effective_config),
        clock=clock,
    )


def handle_device_created(
    device_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
    clock: Clock = utcnow,
) -> ReconciliationReport:
    """Reconcile a newly committed device registration."""

    effective_uow, effective_config = _resolve(unit_of_work_factory, config)
    return maintenance.handle_device_created(
        device_id,
        unit_of_work_factory=effective_uow,
        sibling_limit=effective_config.sibling_limit,
        merge_strategy=effective_config.merge_strategy,
        clock=clock,
    )


def archive_inactive_devices(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
    clock: Clock = utcnow,
) -> ArchivalReport:
    """Archive devices that stayed inactive past the retention window."""

    effective_uow, effective_config = _resolve(unit_of_work_factory, config)
    log.info("Starting archival pass (retention_days=%s)", effective_config.retention_days)
    return maintenance.archive_inactive_devices(
        unit_of_work_factory=effective_uow,
        retention_days=effective_config.retention_days,
        page_size=effective_config.page_size,
        should_stop=_sweep_deadline(effective_config),
        clock=clock,
    )


def collect_device_statistics(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> DeviceStatistics:
    effective_uow, effective_config = _resolve(unit_of_work_factory, config)
    return maintenance.collect_device_statistics(
        unit_of_work_factory=effective_uow,
        page_size=effective_config.page_size,
    )


def run_health_check(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> DeviceStatistics:
    effective_uow, effective_config = _resolve(unit_of_work_factory, config)
    return maintenance.run_health_check(
        unit_of_work_factory=effective_uow,
        page_size=effective_config.page_size,
    )
