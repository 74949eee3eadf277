"""Device-identity reconciliation.

Layered flow of one pass:
1) group records by fingerprint (records without one are left alone)
2) rank each duplicate group and pick the primary
3) compute primary / loser / merge transitions in memory
4) persist each mutated record on its own, isolating write failures
"""

from __future__ import annotations

from .archival import ArchivalReport, DeviceArchiver, archival_cutoff, is_archivable
from .cancellation import Deadline, ShouldStop, never_stop
from .engine import DeviceReconciler, ReconciliationReport
from .errors import MissingTriggerRecordError, ReconciliationError
from .grouping import FingerprintGroup, GroupingResult, group_by_fingerprint
from .plan import (
    BatchSweep,
    GroupResolution,
    ReconciliationPlan,
    ReconciliationTrigger,
    SingleInsert,
    plan_reconciliation,
)
from .selection import rank_by_recency, recency_key, select_primary
from .statistics import DeviceStatistics, compute_statistics

__all__ = [
    "ArchivalReport",
    "BatchSweep",
    "Deadline",
    "DeviceArchiver",
    "DeviceReconciler",
    "DeviceStatistics",
    "FingerprintGroup",
    "GroupResolution",
    "GroupingResult",
    "MissingTriggerRecordError",
    "ReconciliationError",
    "ReconciliationPlan",
    "ReconciliationReport",
    "ReconciliationTrigger",
    "ShouldStop",
    "SingleInsert",
    "archival_cutoff",
    "compute_statistics",
    "group_by_fingerprint",
    "is_archivable",
    "never_stop",
    "plan_reconciliation",
    "rank_by_recency",
    "recency_key",
    "select_primary",
]
