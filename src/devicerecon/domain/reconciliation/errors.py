"""Reconciliation error definitions."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Raised when a reconciliation pass cannot be planned."""


class MissingTriggerRecordError(ReconciliationError):
    """Raised when a single-insert trigger names a record absent from the batch."""

    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        super().__init__(f"Triggering device {device_id} is not part of the reconciliation batch")
