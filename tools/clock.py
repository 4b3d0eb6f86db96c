"""
Clock helpers shared by the schedule engine
"""

from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from config import settings


def current_instant(timezone: Optional[str] = None) -> datetime:
    """
    Naive wall-clock "now" in the configured zone.

    Dose records store naive dates and clock times, so the instant they
    are compared against is naive as well.
    """
    tz_name = timezone or settings.TIMEZONE
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    return datetime.now()


def ensure_time(val):
    """Ensure the provided value is a datetime.time.

    Accepts a time object or a string like 'HH:MM' or 'HH:MM:SS'.
    Raises TypeError if it cannot be converted.
    """
    if val is None:
        return None
    if isinstance(val, time):
        return val
    if isinstance(val, str):
        for fmt in ("%H:%M:%S", "%H:%M"):
            try:
                return datetime.strptime(val.strip(), fmt).time()
            except ValueError:
                continue
        raise TypeError(f"Cannot parse scheduled_time string: {val}")
    raise TypeError(f"Unsupported scheduled_time type: {type(val)}")


def format_clock_time(val) -> str:
    """Render a clock time as 'HH:MM:SS'"""
    return ensure_time(val).strftime("%H:%M:%S")
