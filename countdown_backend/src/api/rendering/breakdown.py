from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


@dataclass(frozen=True)
class TimeBreakdown:
    """Whole units of time remaining. Only `days` may exceed its radix."""

    days: int
    hours: int
    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return (
            self.days * SECONDS_PER_DAY
            + self.hours * SECONDS_PER_HOUR
            + self.minutes * SECONDS_PER_MINUTE
            + self.seconds
        )


@dataclass(frozen=True)
class Expired:
    """The target instant is not in the future."""


EXPIRED = Expired()


# PUBLIC_INTERFACE
def compute_breakdown(target: datetime, now: datetime) -> Union[TimeBreakdown, Expired]:
    """
    Split the time between `now` and `target` into days, hours, minutes and seconds.

    Returns EXPIRED when target <= now. Otherwise the remaining duration is
    floored to whole seconds and decomposed with a fixed 24/60/60 radix.
    Both datetimes must be comparable (both aware or both naive).
    """
    if target <= now:
        return EXPIRED

    remaining = (target - now) // timedelta(seconds=1)
    days, remaining = divmod(remaining, SECONDS_PER_DAY)
    hours, remaining = divmod(remaining, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remaining, SECONDS_PER_MINUTE)
    return TimeBreakdown(days=days, hours=hours, minutes=minutes, seconds=seconds)
