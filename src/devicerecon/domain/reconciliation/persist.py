"""Per-record persistence for reconciliation output.

The record store offers no multi-record transaction, so every write is committed
on its own. A failed write is rolled back, logged and counted; it never aborts
the remaining writes of the pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devicerecon.domain.ports import StoreWriteError

if TYPE_CHECKING:
    from collections.abc import Callable

    from devicerecon.domain.model import DeviceRecord
    from devicerecon.domain.ports import DeviceRepository, DeviceUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RecordWriter:
    """Commit single-record mutations through a unit of work."""

    uow: DeviceUnitOfWork
    failures: int = 0

    def save(self, record: DeviceRecord) -> bool:
        return self._write(lambda repo: repo.save(record), device_id=record.id, action="save")

    def delete(self, device_id: str) -> bool:
        return self._write(lambda repo: repo.delete(device_id), device_id=device_id, action="delete")

    def skip(self, device_id: str, *, reason: str) -> None:
        """Count a write that was withheld because an earlier write of its group failed."""

        self.failures += 1
        log.warning("Skipped device %s: %s", device_id, reason)

    def _write(
        self,
        operation: Callable[[DeviceRepository], None],
        *,
        device_id: str,
        action: str,
    ) -> bool:
        try:
            operation(self.uow.repositories.devices)
            self.uow.commit()
        except StoreWriteError as exc:
            self.uow.rollback()
            self.failures += 1
            log.warning("Failed to %s device %s: %s", action, device_id, exc)
            return False
        return True
