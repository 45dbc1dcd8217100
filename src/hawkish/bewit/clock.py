"""Clock capability injected into the bewit validator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from hawkish.common.errors import ClockError


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""


class SystemClock(Clock):
    """Reads the real UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    A clock frozen at a seed instant, for tests and prototyping.

    The seed only moves when fast_forward() is called.
    """

    def __init__(self, seed: datetime | None = None):
        if seed is None:
            seed = datetime.now(timezone.utc)
        if seed.tzinfo is None:
            raise ClockError("FixedClock seed must be timezone-aware")
        self.seed = seed

    def now(self) -> datetime:
        return self.seed

    def fast_forward(self, duration: timedelta) -> None:
        """Advance the clock by a duration."""
        self.seed = self.seed + duration
