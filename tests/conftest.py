from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from devicerecon.adapters.sqlalchemy.migrations import upgrade_head
from devicerecon.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyDeviceUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.devices import NOW, FakeDeviceRepository, FakeDeviceUnitOfWork, FixedClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def repository() -> FakeDeviceRepository:
    return FakeDeviceRepository()


@pytest.fixture
def unit_of_work(repository: FakeDeviceRepository) -> FakeDeviceUnitOfWork:
    return FakeDeviceUnitOfWork(repository)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyDeviceUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyDeviceUnitOfWork:
        return SqlAlchemyDeviceUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
