from __future__ import annotations

from devicerecon.domain.model import SessionStatus
from devicerecon.domain.reconciliation import compute_statistics
from tests.helpers.devices import make_device


def test_statistics_count_duplicates_and_active_duplicates() -> None:
    records = [
        make_device("a", fingerprint="F1"),
        make_device("b", fingerprint="F1"),
        make_device("c", fingerprint="F2"),
        make_device("d", fingerprint="F2", active=False),
        make_device("e", fingerprint="F3", active=False, session_status=SessionStatus.ARCHIVED),
        make_device("f", fingerprint=None),
    ]

    stats = compute_statistics(records)

    assert stats.total == 6
    assert stats.active == 4
    assert stats.inactive == 2
    assert stats.archived == 1
    assert stats.fingerprints == 3
    assert stats.duplicate_groups == 2
    assert stats.active_duplicate_groups == 1
    assert stats.has_active_duplicates is True


def test_statistics_for_empty_store() -> None:
    stats = compute_statistics([])

    assert stats.total == 0
    assert stats.duplicate_groups == 0
    assert stats.has_active_duplicates is False
