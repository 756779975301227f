from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_MINUTE = 60


class Clock(Protocol):
    def now(self) -> float:
        """Return the current instant in seconds."""


class RealClock:
    """Monotonic clock, so the end instant is never observed moving backwards."""

    def now(self) -> float:
        return time.monotonic()


@dataclass(frozen=True, slots=True)
class HMS:
    """Hours/minutes/seconds of a time magnitude (view data, never stored)."""

    overtime: bool
    h: int
    m: int
    s: int


def split_hms(total_s: float, *, overtime: bool = False) -> HMS:
    """Decompose a non-negative span into whole hours, minutes and seconds.

    Fractions of a second are truncated; negative input is clamped to zero.
    """

    total = int(total_s) if total_s > 0.0 else 0
    h = total // SECONDS_PER_HOUR
    total %= SECONDS_PER_HOUR
    m = total // SECONDS_PER_MINUTE
    s = total % SECONDS_PER_MINUTE
    return HMS(overtime=overtime, h=h, m=m, s=s)


class Timer:
    """Countdown that keeps counting upward ("overtime") past its end.

    - ``end_at == started_at + duration`` after construction, ``restart()`` and
      ``set_duration()``.
    - Time is entirely via injected Clock.
    """

    def __init__(self, duration_s: float, *, clock: Clock) -> None:
        duration_s = float(duration_s)
        if duration_s < 0.0:
            raise ValueError("duration_s must be >= 0")

        self._clock = clock
        self._duration_s = duration_s
        self._started_at = float(clock.now())
        self._end_at = self._started_at + self._duration_s

    @property
    def duration_s(self) -> float:
        return self._duration_s

    @property
    def started_at(self) -> float:
        return self._started_at

    @property
    def end_at(self) -> float:
        return self._end_at

    def restart(self) -> None:
        self._started_at = float(self._clock.now())
        self._update_end_at()
        logger.info("Countdown restarted (%.0fs)", self._duration_s)

    def set_duration(self, duration_s: float) -> None:
        """Replace the duration, keeping the original start instant.

        The end instant is rebased on ``started_at`` rather than on "now", so the
        time already elapsed still counts against the new duration.
        """

        duration_s = float(duration_s)
        if duration_s < 0.0:
            raise ValueError("duration_s must be >= 0")
        self._duration_s = duration_s
        self._update_end_at()

    def _update_end_at(self) -> None:
        self._end_at = self._started_at + self._duration_s

    def remaining_s(self) -> float:
        """Signed seconds until the end instant (negative once overtime)."""

        return self._end_at - float(self._clock.now())

    def until_end_hms(self) -> HMS:
        now = float(self._clock.now())
        if now >= self._end_at:
            return split_hms(now - self._end_at, overtime=True)
        return split_hms(self._end_at - now, overtime=False)
