"""
Clock sources. Anything that needs "now" takes a clock instead of reading
the system time directly.
"""

from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def system_clock(tz_name: str = "UTC") -> Clock:
    """
    Build a clock reading the system time in the given timezone.

    Args:
        tz_name: IANA timezone name used for "today" and the current year

    Returns:
        Zero-argument callable returning an aware datetime
    """
    zone = timezone.utc if tz_name.upper() == "UTC" else ZoneInfo(tz_name)

    def now() -> datetime:
        return datetime.now(zone)

    return now


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns ``moment``."""
    def now() -> datetime:
        return moment

    return now
