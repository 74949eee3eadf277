"""Cooperative cancellation checked between fingerprint groups."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

type ShouldStop = Callable[[], bool]


@dataclass(slots=True)
class Deadline:
    """Callable that turns true once ``timeout_seconds`` have elapsed."""

    timeout_seconds: float
    monotonic: Callable[[], float] = time.monotonic
    _started: float = field(init=False)

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("Deadline timeout must be positive")
        self._started = self.monotonic()

    def remaining(self) -> float:
        return max(0.0, self.timeout_seconds - (self.monotonic() - self._started))

    def __call__(self) -> bool:
        return self.remaining() <= 0.0


def never_stop() -> bool:
    return False
