from __future__ import annotations

import math
from typing import Optional

TICK_INTERVAL_MS = 100


class Countdown:
    """Remaining-time bookkeeping for a duration-bound session.

    Holds no timer of its own: whoever schedules ticks asks it how much
    time is left at ``now``. Once cancelled it reports nothing further.
    """

    def __init__(self, duration_seconds: float) -> None:
        self._limit_ms = int(round(duration_seconds * 1000))
        self._started_at: Optional[float] = None
        self._cancelled = False

    @property
    def limit_ms(self) -> int:
        """Total duration in milliseconds."""
        return self._limit_ms

    @property
    def active(self) -> bool:
        """True between ``start`` and ``cancel``."""
        return self._started_at is not None and not self._cancelled

    def start(self, started_at: float) -> None:
        if self._cancelled:
            return
        self._started_at = started_at

    def cancel(self) -> None:
        self._cancelled = True

    def remaining_ms(self, now: float) -> int:
        if self._started_at is None:
            return self._limit_ms
        return int(math.ceil(max(0.0, self._limit_ms - (now - self._started_at))))

    def seconds_left(self, now: float) -> int:
        """Remaining whole seconds, rounded up."""
        return int(math.ceil(self.remaining_ms(now) / 1000.0))

    def expired(self, now: float) -> bool:
        return self.active and self.remaining_ms(now) <= 0
