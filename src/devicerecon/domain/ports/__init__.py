"""Domain port definitions for adapters."""

from __future__ import annotations

from .errors import DeviceStoreError, StoreReadError, StoreWriteError
from .persistence import DeviceQuery, DeviceRepository
from .unit_of_work import (
    DeviceRepositories,
    DeviceUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DeviceQuery",
    "DeviceRepositories",
    "DeviceRepository",
    "DeviceStoreError",
    "DeviceUnitOfWork",
    "RepositoryCollection",
    "StoreReadError",
    "StoreWriteError",
    "UnitOfWork",
]
