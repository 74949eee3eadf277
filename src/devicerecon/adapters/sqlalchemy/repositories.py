"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from devicerecon.adapters.sqlalchemy.mappings import device_table
from devicerecon.domain.model import DeviceRecord, SessionStatus
from devicerecon.domain.ports import StoreReadError, StoreWriteError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from devicerecon.domain.ports import DeviceQuery


class SqlAlchemyDeviceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def query(self, criteria: DeviceQuery) -> list[DeviceRecord]:
        stmt = _apply_criteria(select(device_table), criteria)
        try:
            rows = self.session.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreReadError(f"Device query failed: {exc}") from exc
        return [_to_record(row) for row in rows]

    def get(self, device_id: str) -> DeviceRecord | None:
        stmt = select(device_table).where(device_table.c.id == device_id)
        try:
            row = self.session.execute(stmt).mappings().one_or_none()
        except SQLAlchemyError as exc:
            raise StoreReadError(f"Loading device {device_id} failed: {exc}") from exc
        return _to_record(row) if row is not None else None

    def save(self, record: DeviceRecord) -> None:
        values = _to_values(record)
        try:
            exists = self.session.execute(
                select(device_table.c.id).where(device_table.c.id == record.id)
            ).first()
            if exists is None:
                self.session.execute(insert(device_table).values(**values))
            else:
                self.session.execute(
                    update(device_table).where(device_table.c.id == record.id).values(**values)
                )
        except SQLAlchemyError as exc:
            raise StoreWriteError(
                f"Saving device {record.id} failed: {exc}", device_id=record.id
            ) from exc

    def delete(self, device_id: str) -> None:
        try:
            self.session.execute(delete(device_table).where(device_table.c.id == device_id))
        except SQLAlchemyError as exc:
            raise StoreWriteError(
                f"Deleting device {device_id} failed: {exc}", device_id=device_id
            ) from exc


def _apply_criteria(stmt: Select[Any], criteria: DeviceQuery) -> Select[Any]:
    columns = device_table.c
    if criteria.fingerprint is not None:
        stmt = stmt.where(columns.fingerprint == criteria.fingerprint)
    if criteria.exclude_id is not None:
        stmt = stmt.where(columns.id != criteria.exclude_id)
    if criteria.active is not None:
        stmt = stmt.where(columns.active == criteria.active)
    if criteria.last_activity_before is not None:
        stmt = stmt.where(columns.last_activity < criteria.last_activity_before)
    if criteria.has_fingerprint is True:
        stmt = stmt.where(columns.fingerprint.is_not(None), func.trim(columns.fingerprint) != "")
    elif criteria.has_fingerprint is False:
        stmt = stmt.where((columns.fingerprint.is_(None)) | (func.trim(columns.fingerprint) == ""))

    if criteria.order_by_recency:
        effective = func.coalesce(columns.last_activity, columns.last_used, columns.created)
        stmt = stmt.order_by(effective.desc(), columns.active.desc(), columns.id.asc())
    else:
        stmt = stmt.order_by(columns.id.asc())

    if criteria.offset:
        stmt = stmt.offset(criteria.offset)
    if criteria.limit is not None:
        stmt = stmt.limit(criteria.limit)
    return stmt


def _to_record(row: Mapping[str, Any]) -> DeviceRecord:
    return DeviceRecord(
        id=row["id"],
        fingerprint=row["fingerprint"],
        user_id=row["user_id"],
        active=bool(row["active"]),
        session_status=SessionStatus(row["session_status"]),
        last_activity=row["last_activity"],
        last_used=row["last_used"],
        created=row["created"],
        session_start=row["session_start"],
        notes=row["notes"] or (),
    )


def _to_values(record: DeviceRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "fingerprint": record.fingerprint,
        "user_id": record.user_id,
        "active": record.active,
        "session_status": SessionStatus(record.session_status),
        "last_activity": record.last_activity,
        "last_used": record.last_used,
        "created": record.created,
        "session_start": record.session_start,
        "notes": record.notes,
    }


if TYPE_CHECKING:
    from typing import cast

    from devicerecon.domain.ports import DeviceRepository

    _session_stub = cast("Session", object())
    _repo_check: DeviceRepository = SqlAlchemyDeviceRepository(_session_stub)
