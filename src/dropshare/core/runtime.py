"""Clock and random source collaborators."""

import random
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the system time, always UTC-aware."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def default_random() -> random.Random:
    """Random source used when none is injected."""
    return random.SystemRandom()
