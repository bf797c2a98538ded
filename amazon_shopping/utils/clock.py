"""
Source of the current instant.
Injected into the client so request signing can be pinned in tests.
"""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def fixed_clock(instant: datetime) -> Clock:
    """Clock that always returns the same instant."""
    def clock() -> datetime:
        return instant
    return clock
