"""
Time Window Classifier.

Classifies a check-in attempt against the scheduled appointment time.

Admission window: from 1 hour before up to 15 minutes after the
scheduled time. Arrivals 15 minutes to 2 hours after are "late",
anything later is "expired".

Boundaries (diff = scheduled - now, in minutes):
    diff >  60           -> early
    -15  <= diff <= 60   -> valid
    -120 <= diff < -15   -> late
    diff < -120          -> expired
"""

import re
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from core.interfaces.validation_interface import TimeStatus


DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# strptime alone accepts "9:5" and "2025-8-15"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

EARLY_LIMIT_MINUTES = 60
GRACE_LIMIT_MINUTES = 15
LATE_LIMIT_MINUTES = 120

# Evaluated in order, first match wins; anything left over is expired.
_TIME_WINDOW_RULES: List[Tuple[Callable[[float], bool], str]] = [
    (lambda diff: diff > EARLY_LIMIT_MINUTES, TimeStatus.EARLY),
    (lambda diff: diff >= -GRACE_LIMIT_MINUTES, TimeStatus.VALID),
    (lambda diff: diff >= -LATE_LIMIT_MINUTES, TimeStatus.LATE),
]


def parseScheduledInstant(date: str, time: str) -> datetime:
    """
    Combine a scheduled date and time into a naive local datetime.

    Args:
        date: Calendar date (YYYY-MM-DD)
        time: 24-hour time (HH:MM)

    Returns:
        datetime: Scheduled instant

    Raises:
        ValueError: If either part is not zero-padded, does not parse,
            or is not a real date/time
    """
    date, time = date.strip(), time.strip()
    if not _DATE_PATTERN.match(date) or not _TIME_PATTERN.match(time):
        raise ValueError(f"Schedule must be YYYY-MM-DD HH:MM, got '{date} {time}'")
    parsedDate = datetime.strptime(date, DATE_FORMAT)
    parsedTime = datetime.strptime(time, TIME_FORMAT)
    return parsedDate.replace(hour=parsedTime.hour, minute=parsedTime.minute)


def minutesUntil(scheduled: datetime, now: datetime) -> float:
    """Signed minutes from now until the scheduled instant (negative = past)."""
    return (scheduled - now).total_seconds() / 60


def classifyMinutes(diffMinutes: float) -> str:
    """
    Classify a signed minute difference into a TimeStatus bucket.

    Args:
        diffMinutes: scheduled - now, in minutes

    Returns:
        str: One of TimeStatus values
    """
    for predicate, status in _TIME_WINDOW_RULES:
        if predicate(diffMinutes):
            return status
    return TimeStatus.EXPIRED


def classifyTimeWindow(
    date: str,
    time: str,
    now: Optional[datetime] = None
) -> str:
    """
    Classify a check-in attempt against the scheduled date and time.

    Args:
        date: Scheduled date (YYYY-MM-DD)
        time: Scheduled time (HH:MM)
        now: Current instant (defaults to local wall-clock time)

    Returns:
        str: One of TimeStatus values

    Raises:
        ValueError: If date/time cannot be parsed
    """
    scheduled = parseScheduledInstant(date, time)
    if now is None:
        now = datetime.now()
    return classifyMinutes(minutesUntil(scheduled, now))
