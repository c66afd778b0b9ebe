"""Tests for the Qt tick source wrapped around the timer engine."""

import pytest

from pomotimer.timer.driver import TICK_INTERVAL_MS
from pomotimer.timer.engine import TimerState
from pomotimer.timer.errors import InvalidDuration, TimeInPast

from helpers import SignalCollector


class TestControls:

    def test_start_runs_qt_timer(self, driver):
        driver.start(1500)
        assert driver.is_running
        assert driver._qt_timer.isActive()
        assert driver._qt_timer.interval() == TICK_INTERVAL_MS

    def test_start_emits_state_and_initial_tick(self, driver):
        states, ticks = SignalCollector(), SignalCollector()
        driver.state_changed.connect(states)
        driver.tick.connect(ticks)

        driver.start(1500)

        assert states.last == TimerState.RUNNING
        assert ticks.last == 1500

    def test_stop_halts_qt_timer(self, driver):
        states = SignalCollector()
        driver.state_changed.connect(states)
        driver.start(1500)
        driver.stop()
        assert driver.state == TimerState.IDLE
        assert not driver._qt_timer.isActive()
        assert states.last == TimerState.IDLE

    def test_stop_when_idle_emits_nothing(self, driver):
        states = SignalCollector()
        driver.state_changed.connect(states)
        driver.stop()
        assert len(states) == 0

    def test_invalid_duration_propagates(self, driver):
        with pytest.raises(InvalidDuration):
            driver.start(0)
        assert driver.state == TimerState.IDLE
        assert not driver._qt_timer.isActive()

    def test_start_at(self, driver):
        assert driver.start_at("09:30") == 30 * 60
        assert driver.remaining_seconds() == 30 * 60

    def test_start_at_in_past_propagates(self, driver):
        with pytest.raises(TimeInPast):
            driver.start_at("08:00")
        assert not driver._qt_timer.isActive()


class TestTicking:

    def test_tick_signal_carries_remaining(self, driver, clock):
        ticks = SignalCollector()
        driver.tick.connect(ticks)
        driver.start(1500)
        clock.advance(1)
        driver._on_tick()
        assert ticks.last == 1499

    def test_warnings_and_completion(self, driver, clock):
        five, one, done = SignalCollector(), SignalCollector(), SignalCollector()
        driver.five_minute_warning.connect(five)
        driver.one_minute_warning.connect(one)
        driver.completed.connect(done)

        driver.start(1500)
        for _ in range(1500):
            clock.advance(1)
            driver._on_tick()

        assert len(five) == 1
        assert len(one) == 1
        assert len(done) == 1
        assert driver.state == TimerState.IDLE
        assert not driver._qt_timer.isActive()

    def test_repeated_tick_same_time_fires_once(self, driver, clock):
        five = SignalCollector()
        driver.five_minute_warning.connect(five)
        driver.start(300)
        driver._on_tick()
        driver._on_tick()
        assert len(five) == 1

    def test_completion_emits_idle_before_completed(self, driver, clock):
        order = []
        driver.state_changed.connect(lambda s: order.append(s))
        driver.completed.connect(lambda: order.append("completed"))
        driver.start(5)
        clock.advance(5)
        driver._on_tick()
        assert order[-2:] == [TimerState.IDLE, "completed"]

    def test_no_tick_signal_after_completion(self, driver, clock):
        ticks = SignalCollector()
        driver.start(5)
        driver.tick.connect(ticks)
        clock.advance(5)
        driver._on_tick()
        assert len(ticks) == 0
        assert driver.remaining_seconds() == 0
