"""Primary selection for duplicate groups."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from devicerecon.domain.model import DeviceRecord

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)
_MICROSECOND: Final[timedelta] = timedelta(microseconds=1)


def recency_key(record: DeviceRecord) -> tuple[int, int, str]:
    """Sort key placing the preferred survivor first.

    Newest effective activity wins; equal timestamps prefer the active record,
    then the lowest id.
    """

    micros = (record.effective_activity - _EPOCH) // _MICROSECOND
    return (-micros, 0 if record.active else 1, record.id)


def rank_by_recency(records: Iterable[DeviceRecord]) -> list[DeviceRecord]:
    return sorted(records, key=recency_key)


def select_primary(records: Iterable[DeviceRecord]) -> DeviceRecord:
    ranked = rank_by_recency(records)
    if not ranked:
        raise ValueError("Cannot select a primary from an empty group")
    return ranked[0]
