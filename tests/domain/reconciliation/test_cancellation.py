from __future__ import annotations

import pytest

from devicerecon.domain.reconciliation import Deadline, never_stop


class _FakeMonotonic:
    def __init__(self) -> None:
        self.value = 100.0

    def __call__(self) -> float:
        return self.value


def test_deadline_expires_after_timeout() -> None:
    monotonic = _FakeMonotonic()
    deadline = Deadline(5.0, monotonic=monotonic)

    assert deadline() is False
    assert deadline.remaining() == 5.0

    monotonic.value += 4.5
    assert deadline() is False

    monotonic.value += 0.5
    assert deadline() is True
    assert deadline.remaining() == 0.0


def test_deadline_rejects_non_positive_timeout() -> None:
    with pytest.raises(ValueError, match="positive"):
        Deadline(0)


def test_never_stop() -> None:
    assert never_stop() is False
