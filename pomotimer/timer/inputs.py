"""Parsing and formatting for the two timer input modes.

Duration mode takes a positive whole number of minutes; End Time mode takes
a 24-hour ``HH:MM`` wall-clock time.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from .errors import InvalidDuration, InvalidTime


DEFAULT_MINUTES = 25

_HHMM = re.compile(r"^([0-9]{1,2}):([0-9]{1,2})$")
_MINUTES = re.compile(r"^[0-9]+$")


def parse_duration_minutes(text: str) -> int:
    """Return the duration in seconds for a minutes string like ``"25"``."""
    text = (text or "").strip()
    if not _MINUTES.match(text):
        raise InvalidDuration()
    minutes = int(text)
    if minutes <= 0:
        raise InvalidDuration()
    return minutes * 60


def parse_end_time(text: str) -> tuple[int, int]:
    """Split ``"HH:MM"`` into ``(hour, minute)``."""
    match = _HHMM.match((text or "").strip())
    if match is None:
        raise InvalidTime()
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise InvalidTime()
    return hour, minute


def format_remaining(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m}:{s:02d}"


def local_now() -> datetime:
    """The current local time as an aware datetime (fixed UTC offset)."""
    return datetime.now().astimezone()


def default_end_time(now: datetime | None = None,
                     minutes: int = DEFAULT_MINUTES) -> str:
    """Pre-fill value for the End Time field: *minutes* from *now*."""
    future = (now or local_now()) + timedelta(minutes=minutes)
    return f"{future.hour:02d}:{future.minute:02d}"
