"""Tests for the PomoTimer countdown state machine.

Covers: start/stop transitions, rejected starts, wall-clock remaining time,
threshold windows and latches, completion, and End Time resolution.
"""

import pytest
from datetime import datetime, timedelta, timezone

from pomotimer.timer.engine import (
    TimerEngine, TimerState, TimerEvent, FIVE_MINUTE_MARK, ONE_MINUTE_MARK,
)
from pomotimer.timer.inputs import parse_duration_minutes
from pomotimer.timer.errors import (
    TimerError, InvalidDuration, InvalidTime, TimeInPast,
)


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state_is_idle(self, engine):
        assert engine.state == TimerState.IDLE
        assert engine.is_running is False
        assert engine.target_end is None
        assert engine.remaining_seconds() == 0

    def test_start_transitions_to_running(self, engine, clock):
        engine.start(1500)
        assert engine.state == TimerState.RUNNING
        assert engine.target_end == clock.at(1500)
        assert engine.total_duration == 1500

    def test_stop_goes_to_idle(self, engine):
        engine.start(1500)
        engine.stop()
        assert engine.state == TimerState.IDLE
        assert engine.target_end is None
        assert engine.remaining_seconds() == 0

    def test_stop_when_idle_is_noop(self, engine):
        engine.stop()
        assert engine.state == TimerState.IDLE

    def test_stop_mid_session_emits_nothing(self, engine, clock):
        engine.start(1500)
        engine.tick(clock.advance(600))
        engine.stop()
        assert engine.tick(clock.advance(900)) == []

    def test_restart_replaces_running_session(self, engine, clock):
        engine.start(1500)
        engine.tick(clock.advance(1200))  # five-minute warning latched
        assert engine.notified_five_minutes is True

        engine.start(600)
        assert engine.state == TimerState.RUNNING
        assert engine.total_duration == 600
        assert engine.remaining_seconds() == 600
        assert engine.notified_five_minutes is False
        assert engine.notified_one_minute is False


# ═══════════════════════════════════════════════════════════════════════════
#  REJECTED STARTS
# ═══════════════════════════════════════════════════════════════════════════


class TestInvalidDuration:

    @pytest.mark.parametrize("duration", [0, -5])
    def test_non_positive_duration_rejected(self, engine, duration):
        with pytest.raises(InvalidDuration):
            engine.start(duration)
        assert engine.state == TimerState.IDLE

    @pytest.mark.parametrize("duration", [1.5, "60", None, True])
    def test_non_integer_duration_rejected(self, engine, duration):
        with pytest.raises(InvalidDuration):
            engine.start(duration)
        assert engine.state == TimerState.IDLE

    def test_rejected_start_keeps_running_session(self, engine, clock):
        engine.start(1500)
        target = engine.target_end
        with pytest.raises(InvalidDuration):
            engine.start(0)
        assert engine.state == TimerState.RUNNING
        assert engine.target_end == target

    def test_out_of_range_duration_rejected(self, engine):
        with pytest.raises(InvalidDuration):
            engine.start(parse_duration_minutes("5000000000"))
        assert engine.state == TimerState.IDLE

    def test_out_of_range_duration_keeps_running_session(self, engine):
        engine.start(1500)
        target = engine.target_end
        with pytest.raises(InvalidDuration):
            engine.start(10 ** 15)
        assert engine.target_end == target

    def test_errors_share_a_base_class(self):
        for exc in (InvalidDuration, InvalidTime, TimeInPast):
            assert issubclass(exc, TimerError)

    def test_error_has_user_message(self):
        assert str(InvalidDuration()) == "Please enter a valid duration in minutes."


# ═══════════════════════════════════════════════════════════════════════════
#  REMAINING TIME
# ═══════════════════════════════════════════════════════════════════════════


class TestRemaining:

    @pytest.mark.parametrize("duration", [1, 59, 60, 300, 1500, 7200])
    def test_remaining_equals_duration_right_after_start(self, engine, duration):
        engine.start(duration)
        assert engine.remaining_seconds() == duration

    def test_remaining_follows_wall_clock(self, engine, clock):
        engine.start(1500)
        clock.advance(1199)
        assert engine.remaining_seconds() == 301

    def test_remaining_survives_missed_ticks(self, engine, clock):
        """A long gap (sleep) is reflected without any tick in between."""
        engine.start(1500)
        clock.advance(1000)
        assert engine.remaining_seconds() == 500

    def test_remaining_rounds_partial_seconds_up(self, engine, clock):
        engine.start(10)
        clock.advance(0.25)
        assert engine.remaining_seconds() == 10

    def test_remaining_never_negative(self, engine, clock):
        engine.start(10)
        clock.advance(60)
        assert engine.remaining_seconds() == 0

    def test_percent_complete(self, engine, clock):
        engine.start(100)
        assert engine.percent_complete() == pytest.approx(0.0)
        clock.advance(50)
        assert engine.percent_complete() == pytest.approx(0.5)

    def test_percent_complete_idle(self, engine):
        assert engine.percent_complete() == 0.0

    def test_default_clock_is_timezone_aware(self):
        engine = TimerEngine()
        engine.start(60)
        assert engine.target_end.tzinfo is not None
        assert 59 <= engine.remaining_seconds() <= 60

    def test_utc_offset_change_does_not_shift_completion(self):
        """Clocks falling back an hour mid-session (EDT to EST)."""
        edt = timezone(timedelta(hours=-4))
        est = timezone(timedelta(hours=-5))
        engine = TimerEngine()
        engine.start(3600, datetime(2026, 11, 1, 1, 30, tzinfo=edt))

        # One real hour later the local wall clock reads 01:30 again.
        later = datetime(2026, 11, 1, 1, 30, tzinfo=est)
        assert engine.remaining_seconds(later) == 0
        assert engine.tick(later) == [TimerEvent.COMPLETED]

    def test_utc_offset_change_keeps_warnings_on_time(self):
        edt = timezone(timedelta(hours=-4))
        est = timezone(timedelta(hours=-5))
        engine = TimerEngine()
        engine.start(3600, datetime(2026, 11, 1, 1, 30, tzinfo=edt))
        five_left = datetime(2026, 11, 1, 1, 25, tzinfo=est)
        assert engine.tick(five_left) == [TimerEvent.FIVE_MINUTE_WARNING]


# ═══════════════════════════════════════════════════════════════════════════
#  TICKS AND THRESHOLDS
# ═══════════════════════════════════════════════════════════════════════════


class TestThresholds:

    def test_tick_when_idle_returns_nothing(self, engine, clock):
        assert engine.tick(clock.now) == []

    def test_pomodoro_scenario(self, engine, clock):
        t0 = clock.now
        engine.start(1500, t0)

        assert engine.tick(t0 + timedelta(seconds=1199)) == []
        assert engine.remaining_seconds(t0 + timedelta(seconds=1199)) == 301

        assert engine.tick(t0 + timedelta(seconds=1200)) == [
            TimerEvent.FIVE_MINUTE_WARNING,
        ]
        assert engine.remaining_seconds(t0 + timedelta(seconds=1200)) == 300

        assert engine.tick(t0 + timedelta(seconds=1440)) == [
            TimerEvent.ONE_MINUTE_WARNING,
        ]
        assert engine.tick(t0 + timedelta(seconds=1499)) == []

        assert engine.tick(t0 + timedelta(seconds=1500)) == [TimerEvent.COMPLETED]
        assert engine.state == TimerState.IDLE

    def test_five_minute_warning_fires_once_across_window(self, engine, clock):
        engine.start(1500)
        target = engine.target_end
        events = []
        for offset in range(301, 294, -1):
            events += engine.tick(target - timedelta(seconds=offset))
        assert events == [TimerEvent.FIVE_MINUTE_WARNING]

    def test_sub_second_ticks_fire_once(self, engine):
        engine.start(1500)
        target = engine.target_end
        events = []
        for tenth in range(3010, 2940, -1):
            events += engine.tick(target - timedelta(seconds=tenth / 10))
        assert events == [TimerEvent.FIVE_MINUTE_WARNING]

    def test_same_now_twice_is_idempotent(self, engine, clock):
        engine.start(1500)
        now = engine.target_end - timedelta(seconds=FIVE_MINUTE_MARK)
        assert engine.tick(now) == [TimerEvent.FIVE_MINUTE_WARNING]
        assert engine.tick(now) == []

    def test_window_is_half_open(self, engine):
        engine.start(1500)
        target = engine.target_end
        # Exactly 299 s left is outside (299, 300]
        assert engine.tick(target - timedelta(seconds=299)) == []
        assert engine.notified_five_minutes is False

    def test_skipped_window_is_not_made_up(self, engine):
        """A tick that jumps over the window loses that warning."""
        engine.start(1500)
        target = engine.target_end
        assert engine.tick(target - timedelta(seconds=301)) == []
        assert engine.tick(target - timedelta(seconds=298)) == []
        assert engine.notified_five_minutes is False

    def test_one_minute_warning_fires_once(self, engine):
        engine.start(1500)
        target = engine.target_end
        events = []
        for offset in (61, 60.5, 60, 59.5, 59, 58):
            events += engine.tick(target - timedelta(seconds=offset))
        assert events == [TimerEvent.ONE_MINUTE_WARNING]

    def test_short_session_skips_five_minute_warning(self, engine):
        engine.start(ONE_MINUTE_MARK)
        assert engine.tick(engine.target_end - timedelta(seconds=60)) == [
            TimerEvent.ONE_MINUTE_WARNING,
        ]

    def test_latches_reset_by_new_session(self, engine):
        engine.start(300)
        assert engine.tick(engine.target_end - timedelta(seconds=300)) == [
            TimerEvent.FIVE_MINUTE_WARNING,
        ]
        engine.start(300)
        assert engine.tick(engine.target_end - timedelta(seconds=300)) == [
            TimerEvent.FIVE_MINUTE_WARNING,
        ]


# ═══════════════════════════════════════════════════════════════════════════
#  COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_completed_exactly_once(self, engine, clock):
        engine.start(10)
        assert engine.tick(clock.advance(10)) == [TimerEvent.COMPLETED]
        assert engine.tick(clock.advance(1)) == []
        assert engine.tick(clock.advance(1)) == []

    def test_completion_resets_state(self, engine, clock):
        engine.start(10)
        engine.tick(clock.advance(15))
        assert engine.state == TimerState.IDLE
        assert engine.remaining_seconds() == 0
        assert engine.total_duration == 0
        assert engine.notified_five_minutes is False
        assert engine.notified_one_minute is False

    def test_late_tick_still_completes(self, engine, clock):
        """Waking from sleep long after the end still completes."""
        engine.start(1500)
        assert engine.tick(clock.advance(5000)) == [TimerEvent.COMPLETED]


# ═══════════════════════════════════════════════════════════════════════════
#  END TIME
# ═══════════════════════════════════════════════════════════════════════════


class TestStartAt:

    def test_start_at_later_today(self, engine, clock):
        # clock starts at 09:00:00
        duration = engine.start_at("09:25")
        assert duration == 25 * 60
        assert engine.remaining_seconds() == 25 * 60
        assert engine.target_end == clock.now.replace(minute=25)

    def test_start_at_truncates_to_whole_seconds(self, engine):
        now = datetime(2026, 3, 2, 9, 0, 0, 500000)
        assert engine.start_at("09:01", now) == 59

    def test_current_minute_is_in_the_past(self, engine):
        now = datetime(2026, 3, 2, 9, 0, 0)
        with pytest.raises(TimeInPast):
            engine.start_at("09:00", now)
        assert engine.state == TimerState.IDLE

    def test_current_minute_with_seconds_elapsed(self, engine):
        now = datetime(2026, 3, 2, 9, 0, 42)
        with pytest.raises(TimeInPast):
            engine.start_at("09:00", now)

    def test_earlier_today_is_in_the_past(self, engine):
        with pytest.raises(TimeInPast):
            engine.start_at("08:30")

    def test_less_than_a_second_away_is_rejected(self, engine):
        now = datetime(2026, 3, 2, 9, 0, 59, 600000)
        with pytest.raises(TimeInPast):
            engine.start_at("09:01", now)

    @pytest.mark.parametrize("text", ["", "9", "24:00", "12:60", "ab:cd", "1230", "12:30:00"])
    def test_malformed_time(self, engine, text):
        with pytest.raises(InvalidTime):
            engine.start_at(text)
        assert engine.state == TimerState.IDLE

    def test_rejected_start_at_keeps_running_session(self, engine):
        engine.start(1500)
        target = engine.target_end
        with pytest.raises(TimeInPast):
            engine.start_at("08:00")
        assert engine.target_end == target

    def test_start_at_replaces_running_session(self, engine, clock):
        engine.start(1500)
        engine.start_at("10:00")
        assert engine.total_duration == 3600
