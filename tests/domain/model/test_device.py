from __future__ import annotations

from datetime import UTC, datetime, timedelta

from devicerecon.domain.model import AuditEntry, SessionStatus, isoformat_utc
from tests.helpers.devices import NOW, make_device


def test_effective_activity_prefers_last_activity() -> None:
    record = make_device(
        "a",
        last_activity=NOW - timedelta(hours=1),
        last_used=NOW,
    )

    assert record.effective_activity == NOW - timedelta(hours=1)


def test_effective_activity_falls_back_to_last_used_then_created() -> None:
    used = make_device("a", last_used=NOW - timedelta(days=1))
    created_only = make_device("b", created=NOW - timedelta(days=3))

    assert used.effective_activity == NOW - timedelta(days=1)
    assert created_only.effective_activity == NOW - timedelta(days=3)


def test_effective_activity_treats_naive_timestamps_as_utc() -> None:
    naive = datetime(2026, 5, 1, 8, 30)  # noqa: DTZ001
    record = make_device("a", last_activity=naive)

    assert record.effective_activity == datetime(2026, 5, 1, 8, 30, tzinfo=UTC)


def test_blank_fingerprint_counts_as_missing() -> None:
    assert make_device("a", fingerprint=None).has_fingerprint is False
    assert make_device("b", fingerprint="   ").has_fingerprint is False
    assert make_device("c", fingerprint="abc").has_fingerprint is True


def test_with_note_appends_without_touching_existing_entries() -> None:
    record = make_device("a")
    first = record.copy(notes=record.with_note("first", recorded_at=NOW))

    second_notes = first.with_note("second", recorded_at=NOW + timedelta(minutes=1))

    assert record.notes == ()
    assert [entry.message for entry in first.notes] == ["first"]
    assert [entry.message for entry in second_notes] == ["first", "second"]


def test_notes_text_joins_entries_like_legacy_notes() -> None:
    record = make_device("a").copy(
        notes=(AuditEntry("imported"), AuditEntry("Deactivated", recorded_at=NOW))
    )

    assert record.notes_text == "imported; Deactivated"
    assert make_device("b").notes_text is None


def test_copy_leaves_original_untouched() -> None:
    record = make_device("a", user_id="u1")

    changed = record.copy(active=False, user_id=None, session_status=SessionStatus.LOGGED_OUT)

    assert record.active is True
    assert record.user_id == "u1"
    assert changed.active is False
    assert changed.id == record.id


def test_isoformat_utc_matches_audit_timestamp_format() -> None:
    value = datetime(2026, 10, 19, 12, 0, 5, 123456, tzinfo=UTC)

    assert isoformat_utc(value) == "2026-10-19T12:00:05.123Z"
