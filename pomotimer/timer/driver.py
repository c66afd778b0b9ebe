"""Qt tick source for :class:`TimerEngine`.

The engine is a pure state machine; this object owns the 1 Hz ``QTimer``
that drives it on the main thread and turns its events into signals.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, Qt, pyqtSignal

from ..log import get_logger
from .engine import TimerEngine, TimerEvent, TimerState
from .inputs import local_now


TICK_INTERVAL_MS = 1000

log = get_logger(__name__)


class TimerDriver(QObject):
    """Drives one :class:`TimerEngine` from a repeating ``QTimer``.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted after every tick while a session is running.
    state_changed(new_state: TimerState)
        Emitted on start, stop and completion.
    five_minute_warning()
    one_minute_warning()
    completed()
        Emitted once per session, in that order when due on the same tick.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    five_minute_warning = pyqtSignal()
    one_minute_warning = pyqtSignal()
    completed = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self._engine = TimerEngine(clock=clock)

        # Coarse timers may be coalesced by a few hundred ms; the engine's
        # threshold windows tolerate that.
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.setTimerType(Qt.TimerType.CoarseTimer)
        self._qt_timer.timeout.connect(self._on_tick)

    # ── properties ────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def state(self) -> TimerState:
        return self._engine.state

    @property
    def is_running(self) -> bool:
        return self._engine.is_running

    def remaining_seconds(self) -> int:
        return self._engine.remaining_seconds(self._clock())

    def percent_complete(self) -> float:
        return self._engine.percent_complete(self._clock())

    # ── controls ──────────────────────────────────────────────────────

    def start(self, duration_seconds: int) -> None:
        """Start a session; errors from the engine propagate unchanged."""
        self._engine.start(duration_seconds, self._clock())
        log.info("Timer started for %d seconds", duration_seconds)
        self._begin()

    def start_at(self, hhmm: str) -> int:
        duration = self._engine.start_at(hhmm, self._clock())
        log.info("Timer started until %s (%d seconds)", hhmm, duration)
        self._begin()
        return duration

    def stop(self) -> None:
        was_running = self._engine.is_running
        self._qt_timer.stop()
        self._engine.stop()
        if was_running:
            log.info("Timer stopped")
            self.state_changed.emit(TimerState.IDLE)

    # ── internal ──────────────────────────────────────────────────────

    def _begin(self) -> None:
        # Restart so the first tick lands a full interval after start.
        self._qt_timer.start()
        self.state_changed.emit(TimerState.RUNNING)
        self.tick.emit(self.remaining_seconds())

    def _on_tick(self) -> None:
        now = self._clock()
        events = self._engine.tick(now)

        for event in events:
            if event == TimerEvent.FIVE_MINUTE_WARNING:
                self.five_minute_warning.emit()
            elif event == TimerEvent.ONE_MINUTE_WARNING:
                self.one_minute_warning.emit()
            elif event == TimerEvent.COMPLETED:
                self._qt_timer.stop()
                log.info("Timer completed")
                self.state_changed.emit(TimerState.IDLE)
                self.completed.emit()
                return

        if self._engine.is_running:
            self.tick.emit(self._engine.remaining_seconds(now))
