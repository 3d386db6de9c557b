"""Clock boundary — the only place that reads the system clock."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Callable, Iterator

Clock = Callable[[], datetime]


def now() -> datetime:
    """Return the current instant in the local calendar."""
    return datetime.now()


class Ticker:
    """Yields the current instant once per *interval* seconds.

    Iteration stops after *count* ticks, or runs forever when *count* is
    ``None``.  The first tick is immediate.
    """

    def __init__(
        self,
        interval: float = 1.0,
        count: int | None = None,
        clock: Clock | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._count = count
        self._clock = clock
        self._sleep = sleep

    def __iter__(self) -> Iterator[datetime]:
        ticks = 0
        while self._count is None or ticks < self._count:
            if ticks:
                self._sleep(self._interval)
            ticks += 1
            yield self._clock() if self._clock is not None else now()
