"""Countdown state machine for PomoTimer.

States
------
IDLE        No session.  ``target_end`` is ``None``.
RUNNING     Counting down towards ``target_end``.

Transitions
-----------
IDLE → RUNNING          start / start_at
RUNNING → RUNNING       start / start_at (current session dropped silently)
RUNNING → RUNNING       tick (may emit threshold events)
RUNNING → IDLE          tick with nothing left (emits COMPLETED)
RUNNING → IDLE          stop (no event)

Remaining time is always derived from the wall clock, never counted down,
so a session survives the process being suspended (laptop sleep).  The
engine itself has no timer: a tick source calls ``tick(now)`` about once a
second and turns the returned events into notifications.

Threshold windows
-----------------
Each warning fires when the remaining time is inside a one-second,
half-open window (``299 < r <= 300`` and ``59 < r <= 60``) and has not
fired yet this session.  If no tick lands inside a window (e.g. the
machine slept through it) that warning is skipped.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from .errors import InvalidDuration, TimeInPast
from .inputs import local_now, parse_end_time


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class TimerEvent(Enum):
    FIVE_MINUTE_WARNING = "five_minute_warning"
    ONE_MINUTE_WARNING = "one_minute_warning"
    COMPLETED = "completed"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_DURATION = 25 * 60

FIVE_MINUTE_MARK = 5 * 60
ONE_MINUTE_MARK = 60


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine:
    """A single countdown session with two one-shot warnings.

    Parameters
    ----------
    clock
        Returns the current local time.  Used whenever an operation is
        called without an explicit ``now``.  The default returns aware
        datetimes, so a session spanning a UTC offset change (DST) still
        ends after its real duration.
    """

    def __init__(self, clock: Callable[[], datetime] = local_now) -> None:
        self._clock = clock

        # ── session state ─────────────────────────────────────────────
        self._target_end: datetime | None = None
        self._total_duration: int = 0
        self._notified_five_minutes: bool = False
        self._notified_one_minute: bool = False

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        if self._target_end is None:
            return TimerState.IDLE
        return TimerState.RUNNING

    @property
    def is_running(self) -> bool:
        return self._target_end is not None

    @property
    def target_end(self) -> datetime | None:
        """When the current session completes, or ``None`` when idle."""
        return self._target_end

    @property
    def total_duration(self) -> int:
        """Seconds requested for the current session (0 when idle)."""
        return self._total_duration

    @property
    def notified_five_minutes(self) -> bool:
        return self._notified_five_minutes

    @property
    def notified_one_minute(self) -> bool:
        return self._notified_one_minute

    def remaining_seconds(self, now: datetime | None = None) -> int:
        """Whole seconds left, rounded up.  ``0`` when idle."""
        return math.ceil(self._remaining(now))

    def percent_complete(self, now: datetime | None = None) -> float:
        """0.0 → 1.0 progress through the current session."""
        if self._total_duration <= 0:
            return 0.0
        elapsed = self._total_duration - self._remaining(now)
        return max(0.0, min(1.0, elapsed / self._total_duration))

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, duration_seconds: int, now: datetime | None = None) -> None:
        """Start a session of *duration_seconds*.

        Raises :class:`InvalidDuration` for anything but a positive
        integer; the engine is untouched in that case.  A running session
        is replaced without any event.
        """
        if (
            isinstance(duration_seconds, bool)
            or not isinstance(duration_seconds, int)
            or duration_seconds <= 0
        ):
            raise InvalidDuration()

        now = now or self._clock()
        try:
            target_end = now + timedelta(seconds=duration_seconds)
        except OverflowError as exc:
            raise InvalidDuration() from exc
        self._target_end = target_end
        self._total_duration = duration_seconds
        self._notified_five_minutes = False
        self._notified_one_minute = False

    def start_at(self, hhmm: str, now: datetime | None = None) -> int:
        """Start a session ending at today's *hhmm* (24-hour ``HH:MM``).

        Returns the resolved duration in seconds.  Raises
        :class:`InvalidTime` for a malformed time and :class:`TimeInPast`
        unless the target is at least one second away.
        """
        hour, minute = parse_end_time(hhmm)
        now = now or self._clock()
        target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        duration = int((target - now).total_seconds())
        if duration <= 0:
            raise TimeInPast()
        self.start(duration, now)
        return duration

    def stop(self) -> None:
        """Cancel the session.  No event; no-op when already idle."""
        self._reset()

    def tick(self, now: datetime | None = None) -> list[TimerEvent]:
        """Advance to *now* and return the events that became due.

        Calling it again with the same *now* returns nothing new.
        """
        if self._target_end is None:
            return []

        remaining = self._remaining(now)
        events: list[TimerEvent] = []

        if (
            not self._notified_five_minutes
            and FIVE_MINUTE_MARK - 1 < remaining <= FIVE_MINUTE_MARK
        ):
            self._notified_five_minutes = True
            events.append(TimerEvent.FIVE_MINUTE_WARNING)

        if (
            not self._notified_one_minute
            and ONE_MINUTE_MARK - 1 < remaining <= ONE_MINUTE_MARK
        ):
            self._notified_one_minute = True
            events.append(TimerEvent.ONE_MINUTE_WARNING)

        if remaining <= 0:
            self._reset()
            events.append(TimerEvent.COMPLETED)

        return events

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _remaining(self, now: datetime | None = None) -> float:
        if self._target_end is None:
            return 0.0
        now = now or self._clock()
        return max(0.0, (self._target_end - now).total_seconds())

    def _reset(self) -> None:
        self._target_end = None
        self._total_duration = 0
        self._notified_five_minutes = False
        self._notified_one_minute = False
