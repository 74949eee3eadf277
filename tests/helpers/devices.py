"""Reusable fakes and helpers for device reconciliation tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Literal

from devicerecon.domain.model import DeviceRecord, SessionStatus
from devicerecon.domain.ports import (
    DeviceQuery,
    DeviceRepositories,
    StoreReadError,
    StoreWriteError,
)
from devicerecon.domain.reconciliation import recency_key

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def make_device(
    device_id: str,
    *,
    fingerprint: str | None = "fp-1",
    user_id: str | None = None,
    active: bool = True,
    session_status: SessionStatus | None = None,
    created: datetime | None = None,
    last_activity: datetime | None = None,
    last_used: datetime | None = None,
    session_start: datetime | None = None,
) -> DeviceRecord:
    """Create a device record with sensible defaults for tests."""

    if session_status is None:
        if not active:
            session_status = SessionStatus.LOGGED_OUT
        else:
            session_status = SessionStatus.ACTIVE if user_id else SessionStatus.LOGGED_OUT
    return DeviceRecord(
        id=device_id,
        fingerprint=fingerprint,
        user_id=user_id,
        active=active,
        session_status=session_status,
        created=created or datetime(2026, 1, 1, tzinfo=UTC),
        last_activity=last_activity,
        last_used=last_used,
        session_start=session_start,
    )


class FixedClock:
    """Clock returning a fixed instant; ``advance`` moves it forward."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass(slots=True)
class _Pending:
    kind: Literal["save", "delete"]
    device_id: str
    record: DeviceRecord | None = None


class FakeDeviceRepository:
    """In-memory device repository; writes become visible on commit."""

    def __init__(
        self,
        initial: Iterable[DeviceRecord] | None = None,
        *,
        failing_ids: Iterable[str] = (),
        fail_reads: bool = False,
    ) -> None:
        self.items: dict[str, DeviceRecord] = {record.id: record for record in initial or ()}
        self.failing_ids = set(failing_ids)
        self.fail_reads = fail_reads
        self.pending: list[_Pending] = []
        self.saved: list[DeviceRecord] = []
        self.deleted: list[str] = []
        self.queries: list[DeviceQuery] = []

    def query(self, criteria: DeviceQuery) -> list[DeviceRecord]:
        self.queries.append(criteria)
        if self.fail_reads:
            raise StoreReadError("store offline")
        matches = [record for record in self.items.values() if _matches(record, criteria)]
        if criteria.order_by_recency:
            matches.sort(key=recency_key)
        else:
            matches.sort(key=lambda record: record.id)
        end = None if criteria.limit is None else criteria.offset + criteria.limit
        return [record.copy() for record in matches[criteria.offset : end]]

    def get(self, device_id: str) -> DeviceRecord | None:
        if self.fail_reads:
            raise StoreReadError("store offline")
        record = self.items.get(device_id)
        return record.copy() if record is not None else None

    def save(self, record: DeviceRecord) -> None:
        if record.id in self.failing_ids:
            raise StoreWriteError(f"cannot save {record.id}", device_id=record.id)
        self.pending.append(_Pending("save", record.id, record))

    def delete(self, device_id: str) -> None:
        if device_id in self.failing_ids:
            raise StoreWriteError(f"cannot delete {device_id}", device_id=device_id)
        self.pending.append(_Pending("delete", device_id))

    def flush_pending(self) -> None:
        for change in self.pending:
            if change.kind == "save" and change.record is not None:
                self.items[change.device_id] = change.record
                self.saved.append(change.record)
            else:
                self.items.pop(change.device_id, None)
                self.deleted.append(change.device_id)
        self.pending.clear()


def _matches(record: DeviceRecord, criteria: DeviceQuery) -> bool:
    if criteria.fingerprint is not None and record.fingerprint != criteria.fingerprint:
        return False
    if criteria.exclude_id is not None and record.id == criteria.exclude_id:
        return False
    if criteria.active is not None and record.active is not criteria.active:
        return False
    if criteria.last_activity_before is not None and (
        record.last_activity is None or record.last_activity >= criteria.last_activity_before
    ):
        return False
    return criteria.has_fingerprint is None or record.has_fingerprint is criteria.has_fingerprint


@dataclass(slots=True)
class FakeDeviceUnitOfWork:
    """Unit of work capturing commit/rollback interactions."""

    repository: FakeDeviceRepository
    commits: int = 0
    rollbacks: int = 0
    entered: int = 0
    _repositories: DeviceRepositories = field(init=False)

    def __post_init__(self) -> None:
        self._repositories = DeviceRepositories(devices=self.repository)

    @property
    def repositories(self) -> DeviceRepositories:
        return self._repositories

    def __enter__(self) -> FakeDeviceUnitOfWork:
        self.entered += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.repository.flush_pending()
        self.commits += 1

    def rollback(self) -> None:
        self.repository.pending.clear()
        self.rollbacks += 1


if TYPE_CHECKING:
    from devicerecon.domain.ports import DeviceRepository, DeviceUnitOfWork

    _check_repo: DeviceRepository = FakeDeviceRepository()
    _check_uow: DeviceUnitOfWork = FakeDeviceUnitOfWork(FakeDeviceRepository())
