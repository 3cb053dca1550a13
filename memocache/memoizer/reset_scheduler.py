"""
Lazy Reset Scheduler

Decides when the Memoizer must clear its whole store. There is no background
timer: the schedule is only consulted on calls, so an idle instance resets
on its next call.

The next fire time advances by exactly one interval from the previous
scheduled time, which keeps the cadence stable when checks happen late.
After an idle period spanning several intervals, consecutive calls fire
once per missed interval until the schedule catches up with the clock.
"""

import time
from collections.abc import Callable
from datetime import datetime, timedelta

from memocache.core.config.options import ResetOptions


class ResetScheduler:
    """Interval-based reset schedule."""

    def __init__(
        self,
        interval: float,
        first_reset: datetime | timedelta | float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the schedule.

        Args:
            interval: Seconds between resets (> 0)
            first_reset: Absolute datetime, offset timedelta or epoch seconds
                of the first reset; one interval from now when omitted
            clock: Wall clock returning epoch seconds
        """
        if interval <= 0:
            raise ValueError("Reset interval must be positive")

        self._interval = float(interval)
        self._clock = clock
        self._next_reset = self._first_fire_time(first_reset)

    @classmethod
    def from_options(cls, options: ResetOptions, clock: Callable[[], float] = time.time) -> "ResetScheduler":
        return cls(options.interval, options.first_reset, clock=clock)

    def _first_fire_time(self, first_reset: datetime | timedelta | float | None) -> float:
        if first_reset is None:
            return self._clock() + self._interval
        if isinstance(first_reset, datetime):
            return first_reset.timestamp()
        if isinstance(first_reset, timedelta):
            return self._clock() + first_reset.total_seconds()
        return float(first_reset)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def next_reset(self) -> float:
        """Epoch seconds of the next scheduled reset."""
        return self._next_reset

    def due(self) -> bool:
        """
        Check the schedule and advance it when it fires.

        Returns:
            True if a reset must happen now
        """
        if self._next_reset < self._clock():
            self._next_reset += self._interval
            return True
        return False
