"""Fingerprint grouping.

Groups are derived per pass and never persisted. Records without a usable
fingerprint cannot be deduplicated and are reported separately so callers can
leave them untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from devicerecon.domain.model import DeviceRecord

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FingerprintGroup:
    """All records sharing one non-empty fingerprint."""

    fingerprint: str
    members: tuple[DeviceRecord, ...]

    @property
    def is_duplicate(self) -> bool:
        return len(self.members) > 1


@dataclass(slots=True)
class GroupingResult:
    groups: dict[str, FingerprintGroup] = field(default_factory=dict[str, FingerprintGroup])
    unfingerprinted: list[DeviceRecord] = field(default_factory=list["DeviceRecord"])

    @property
    def duplicate_groups(self) -> list[FingerprintGroup]:
        return [group for group in self.groups.values() if group.is_duplicate]


def short_fingerprint(fingerprint: str) -> str:
    return f"{fingerprint[:12]}..." if len(fingerprint) > 12 else fingerprint


def group_by_fingerprint(records: Iterable[DeviceRecord]) -> GroupingResult:
    """Bucket ``records`` by fingerprint, preserving first-seen order."""

    buckets: dict[str, list[DeviceRecord]] = {}
    unfingerprinted: list[DeviceRecord] = []
    for record in records:
        if not record.has_fingerprint or record.fingerprint is None:
            log.debug("Device %s has no fingerprint, skipping", record.id)
            unfingerprinted.append(record)
            continue
        buckets.setdefault(record.fingerprint, []).append(record)

    groups = {
        fingerprint: FingerprintGroup(fingerprint=fingerprint, members=tuple(members))
        for fingerprint, members in buckets.items()
    }
    return GroupingResult(groups=groups, unfingerprinted=unfingerprinted)
