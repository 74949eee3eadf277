"""Pure planning stage: decide every mutation of a pass without touching storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devicerecon.domain.model import MergeStrategy, SessionStatus

from .errors import MissingTriggerRecordError
from .grouping import FingerprintGroup, group_by_fingerprint, short_fingerprint
from .selection import rank_by_recency
from .transitions import absorb_user, deactivate, merge_note, promote

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from devicerecon.domain.model import DeviceRecord

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchSweep:
    """Periodic pass over every record under consideration."""


@dataclass(frozen=True, slots=True)
class SingleInsert:
    """Reactive pass after ``device_id`` was registered."""

    device_id: str


type ReconciliationTrigger = BatchSweep | SingleInsert


@dataclass(frozen=True, slots=True)
class GroupResolution:
    """Post-transition records for one duplicate group, in write order."""

    fingerprint: str
    primary: DeviceRecord
    losers: tuple[DeviceRecord, ...] = ()
    deleted_ids: tuple[str, ...] = ()
    merged_from: str | None = None


@dataclass(slots=True)
class ReconciliationPlan:
    records_considered: int = 0
    fingerprints: int = 0
    resolutions: list[GroupResolution] = field(default_factory=list[GroupResolution])

    @property
    def duplicate_groups(self) -> int:
        return len(self.resolutions)


def plan_reconciliation(
    records: Sequence[DeviceRecord],
    trigger: ReconciliationTrigger,
    *,
    now: datetime,
    merge_strategy: MergeStrategy = MergeStrategy.DEACTIVATE,
) -> ReconciliationPlan:
    """Group ``records`` and compute the transitions for each duplicate group."""

    grouping = group_by_fingerprint(records)
    plan = ReconciliationPlan(records_considered=len(records), fingerprints=len(grouping.groups))

    if isinstance(trigger, SingleInsert):
        resolution = _resolve_insert(
            records,
            trigger.device_id,
            groups=grouping.groups,
            now=now,
            merge_strategy=merge_strategy,
        )
        if resolution is not None:
            plan.resolutions.append(resolution)
        return plan

    for group in grouping.duplicate_groups:
        resolution = _resolve_sweep_group(group, now=now)
        if resolution is not None:
            plan.resolutions.append(resolution)

    return plan


def _reconcilable(members: Sequence[DeviceRecord]) -> list[DeviceRecord]:
    return [record for record in members if record.session_status != SessionStatus.ARCHIVED]


def _resolve_sweep_group(group: FingerprintGroup, *, now: datetime) -> GroupResolution | None:
    members = _reconcilable(group.members)
    if len(members) < 2:
        return None
    primary, *losers = rank_by_recency(members)
    log.debug(
        "Fingerprint %s: keeping %s, deactivating %d",
        short_fingerprint(group.fingerprint),
        primary.id,
        len(losers),
    )
    return GroupResolution(
        fingerprint=group.fingerprint,
        primary=promote(primary, now=now),
        losers=tuple(deactivate(loser, now=now) for loser in losers),
    )


def _resolve_insert(
    records: Sequence[DeviceRecord],
    device_id: str,
    *,
    groups: dict[str, FingerprintGroup],
    now: datetime,
    merge_strategy: MergeStrategy,
) -> GroupResolution | None:
    new_record = next((record for record in records if record.id == device_id), None)
    if new_record is None:
        raise MissingTriggerRecordError(device_id)
    if not new_record.has_fingerprint or new_record.fingerprint is None:
        log.debug("Device %s has no fingerprint, skipping duplicate check", device_id)
        return None

    if new_record.session_status == SessionStatus.ARCHIVED:
        log.debug("Device %s is archived, skipping duplicate check", device_id)
        return None

    group = groups[new_record.fingerprint]
    members = _reconcilable(group.members)
    if len(members) < 2:
        return None

    winner, *others = rank_by_recency(members)
    if winner.id == new_record.id:
        return GroupResolution(
            fingerprint=group.fingerprint,
            primary=promote(winner, now=now),
            losers=tuple(deactivate(other, now=now) for other in others),
        )

    siblings = tuple(
        deactivate(other, now=now) for other in others if other.id != new_record.id
    )
    primary = absorb_user(winner, user_id=new_record.user_id, now=now)
    if merge_strategy == MergeStrategy.DELETE:
        return GroupResolution(
            fingerprint=group.fingerprint,
            primary=primary,
            losers=siblings,
            deleted_ids=(new_record.id,),
            merged_from=new_record.id,
        )
    merged = deactivate(new_record, now=now, note=merge_note(winner.id, now))
    return GroupResolution(
        fingerprint=group.fingerprint,
        primary=primary,
        losers=(merged, *siblings),
        merged_from=new_record.id,
    )
