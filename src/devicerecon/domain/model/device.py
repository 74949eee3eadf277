"""Device registrations and their append-only audit trail."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from devicerecon.domain.model.clock import ensure_aware
from devicerecon.domain.model.enums import SessionStatus

if TYPE_CHECKING:
    from datetime import datetime

NOTE_SEPARATOR = "; "


@dataclass(frozen=True, slots=True)
class AuditEntry:
    """One line of a device's audit history.

    ``recorded_at`` is ``None`` for entries imported from legacy free-text notes.
    """

    message: str
    recorded_at: datetime | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False, kw_only=True)
class DeviceRecord:
    """A registered device/session binding.

    ``notes`` is only ever extended; use :meth:`with_note` rather than assigning it.
    """

    id: str
    created: datetime
    fingerprint: str | None = None
    user_id: str | None = None
    active: bool = True
    session_status: SessionStatus = SessionStatus.LOGGED_OUT
    last_activity: datetime | None = None
    last_used: datetime | None = None
    session_start: datetime | None = None
    notes: tuple[AuditEntry, ...] = field(default_factory=tuple)

    @property
    def has_fingerprint(self) -> bool:
        return bool(self.fingerprint and self.fingerprint.strip())

    @property
    def effective_activity(self) -> datetime:
        """``last_activity``, else ``last_used``, else ``created``."""

        if self.last_activity is not None:
            return ensure_aware(self.last_activity)
        if self.last_used is not None:
            return ensure_aware(self.last_used)
        return ensure_aware(self.created)

    @property
    def notes_text(self) -> str | None:
        if not self.notes:
            return None
        return NOTE_SEPARATOR.join(str(entry) for entry in self.notes)

    def with_note(self, message: str, *, recorded_at: datetime) -> tuple[AuditEntry, ...]:
        return (*self.notes, AuditEntry(message=message, recorded_at=recorded_at))

    def copy(self, **changes: Any) -> DeviceRecord:
        """Return a detached copy with ``changes`` applied; the original is left as-is."""

        return replace(self, **changes)
