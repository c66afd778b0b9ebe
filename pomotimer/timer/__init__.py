"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    TimerEvent,
    DEFAULT_DURATION,
    FIVE_MINUTE_MARK,
    ONE_MINUTE_MARK,
)
from .errors import TimerError, InvalidDuration, InvalidTime, TimeInPast

__all__ = [
    "TimerEngine",
    "TimerState",
    "TimerEvent",
    "DEFAULT_DURATION",
    "FIVE_MINUTE_MARK",
    "ONE_MINUTE_MARK",
    "TimerError",
    "InvalidDuration",
    "InvalidTime",
    "TimeInPast",
]
