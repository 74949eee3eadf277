"""Failures raised by record-store adapters."""

from __future__ import annotations


class DeviceStoreError(RuntimeError):
    """Base class for record-store failures."""


class StoreReadError(DeviceStoreError):
    """A query could not be served; nothing has been mutated."""


class StoreWriteError(DeviceStoreError):
    """Persisting or deleting a single record failed."""

    def __init__(self, message: str, *, device_id: str | None = None) -> None:
        self.device_id = device_id
        super().__init__(message)
