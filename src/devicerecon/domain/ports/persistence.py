"""Ports for persisting device registrations."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from devicerecon.domain.model import DeviceRecord


@dataclass(frozen=True, slots=True)
class DeviceQuery:
    """Filter, ordering and paging for :meth:`DeviceRepository.query`.

    ``None`` means "do not filter on this field". ``order_by_recency`` sorts by
    ``last_activity``, ``last_used`` and ``created``, newest first, then by id.
    """

    fingerprint: str | None = None
    exclude_id: str | None = None
    active: bool | None = None
    last_activity_before: datetime | None = None
    has_fingerprint: bool | None = None
    order_by_recency: bool = False
    limit: int | None = None
    offset: int = 0

    def page(self, offset: int, limit: int) -> DeviceQuery:
        return replace(self, offset=offset, limit=limit)


@runtime_checkable
class DeviceRepository(Protocol):
    """Persistence contract for device records.

    ``query``/``get`` raise ``StoreReadError``; ``save``/``delete`` raise
    ``StoreWriteError``.
    """

    def query(self, criteria: DeviceQuery) -> Sequence[DeviceRecord]: ...

    def get(self, device_id: str) -> DeviceRecord | None: ...

    def save(self, record: DeviceRecord) -> None: ...

    def delete(self, device_id: str) -> None: ...
