"""
Duration Parser
Turns free-text prescription durations into a day count
"""

import logging
import re
from typing import Optional

from config import schedule_config


logger = logging.getLogger(__name__)


DEFAULT_DURATION_DAYS = schedule_config.DEFAULT_DURATION_DAYS

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(text: str) -> Optional[int]:
    """Integer at the start of the text, ignoring leading whitespace"""
    match = _LEADING_INT.match(text)
    if not match:
        return None
    return int(match.group(1))


def parse_duration_days(text: Optional[str]) -> int:
    """
    Convert a duration such as "5 days", "2 weeks", "1 month" or "10"
    into a positive number of days.

    Rules, in order:
        - contains "week": leading number (1 if none) x DAYS_PER_WEEK
        - contains "month": leading number (1 if none) x DAYS_PER_MONTH
        - leading number: used as a day count
        - anything else: DEFAULT_DURATION_DAYS

    Unparseable input never raises; it resolves to DEFAULT_DURATION_DAYS.
    A result that is not positive also resolves to the default.
    """
    lowered = (text or "").lower()
    count = _leading_int(lowered)

    if "week" in lowered:
        days = (count or 1) * schedule_config.DAYS_PER_WEEK
    elif "month" in lowered:
        days = (count or 1) * schedule_config.DAYS_PER_MONTH
    elif count is not None:
        days = count
    else:
        days = DEFAULT_DURATION_DAYS

    if days <= 0:
        logger.debug(f"Non-positive duration {text!r}, using {DEFAULT_DURATION_DAYS} days")
        return DEFAULT_DURATION_DAYS

    return days
