"""Read-only aggregation over device records for monitoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from devicerecon.domain.model import SessionStatus

from .grouping import group_by_fingerprint

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devicerecon.domain.model import DeviceRecord


@dataclass(frozen=True, slots=True)
class DeviceStatistics:
    total: int
    active: int
    inactive: int
    archived: int
    fingerprints: int
    duplicate_groups: int
    active_duplicate_groups: int

    @property
    def has_active_duplicates(self) -> bool:
        """A non-zero value after a sweep points at a race or bug upstream."""
        return self.active_duplicate_groups > 0


def compute_statistics(records: Sequence[DeviceRecord]) -> DeviceStatistics:
    grouping = group_by_fingerprint(records)
    active_duplicates = sum(
        1
        for group in grouping.groups.values()
        if sum(1 for member in group.members if member.active) > 1
    )
    active = sum(1 for record in records if record.active)
    return DeviceStatistics(
        total=len(records),
        active=active,
        inactive=len(records) - active,
        archived=sum(1 for record in records if record.session_status == SessionStatus.ARCHIVED),
        fingerprints=len(grouping.groups),
        duplicate_groups=len(grouping.duplicate_groups),
        active_duplicate_groups=active_duplicates,
    )
