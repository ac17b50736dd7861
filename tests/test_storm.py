"""Tests for storm lifecycle."""

import math
import threading
from unittest.mock import patch

import pytest

from skycycle.events import EventKind
from skycycle.storm import StormController

from conftest import FakeClock


def make_controller(state, renderer, events, clock, low=10.0, high=10.0, rng=None, **kwargs):
    return StormController(
        state=state,
        renderer=renderer,
        thunder_interval_min=low,
        thunder_interval_max=high,
        events=events,
        clock=clock,
        rng=rng,
        **kwargs
    )


class TestStormController:
    """Tests for StormController.run_storm()."""

    def test_invalid_interval_range(self, state, renderer, events, fake_clock):
        with pytest.raises(ValueError, match="thunder_interval_min"):
            make_controller(state, renderer, events, fake_clock, low=20, high=5)

    def test_invalid_duration(self, state, renderer, events, fake_clock):
        controller = make_controller(state, renderer, events, fake_clock)
        with pytest.raises(ValueError):
            controller.run_storm(0)
        assert state.is_storm is False

    def test_thunder_count_exact_division(self, state, renderer, events, fake_clock):
        """120s storm with a fixed 10s interval should thunder 12 times."""
        controller = make_controller(state, renderer, events, fake_clock)

        count = controller.run_storm(120)

        assert count == 12
        assert renderer.play_thunder.call_count == 12
        assert state.thunder_count == 12

    @pytest.mark.parametrize("duration, interval", [(125, 10), (100, 30), (7, 2), (50, 50), (1, 5)])
    def test_thunder_count_floor_or_ceil(self, state, renderer, events, fake_clock, duration, interval):
        controller = make_controller(state, renderer, events, fake_clock, low=interval, high=interval)

        count = controller.run_storm(duration)

        assert count in (math.floor(duration / interval), math.ceil(duration / interval))

    def test_rain_started_once_with_duration(self, state, renderer, events, fake_clock):
        controller = make_controller(state, renderer, events, fake_clock)
        controller.run_storm(120)
        renderer.start_rain.assert_called_once_with(120)

    def test_is_storm_true_for_whole_storm(self, state, renderer, events, fake_clock):
        """is_storm should hold from the start notification to the end notification."""
        observed = []
        renderer.start_rain.side_effect = lambda d: observed.append(state.is_storm)
        renderer.play_thunder.side_effect = lambda: observed.append(state.is_storm)
        fake_clock.on_sleep = lambda c: observed.append(state.is_storm)

        controller = make_controller(state, renderer, events, fake_clock)
        controller.run_storm(60)

        assert observed and all(observed)
        assert state.is_storm is False
        assert state.storm_end_time is None

    def test_storm_end_time_set_while_running(self, state, renderer, events):
        fake_clock = FakeClock(start=1000.0)
        end_times = []
        renderer.play_thunder.side_effect = lambda: end_times.append(state.storm_end_time)

        controller = make_controller(state, renderer, events, fake_clock)
        controller.run_storm(30)

        assert end_times == [1030.0] * 3

    def test_notifications_order(self, state, renderer, events, fake_clock):
        controller = make_controller(state, renderer, events, fake_clock)
        controller.run_storm(30)

        kinds = [e.kind for e in events.recent()]
        assert kinds == [
            EventKind.STORM_STARTED,
            EventKind.THUNDER,
            EventKind.THUNDER,
            EventKind.THUNDER,
            EventKind.STORM_ENDED,
        ]
        assert state.storm_count == 1

    def test_final_wait_overshoots_end(self, state, renderer, events, fake_clock):
        """The last thunder wait is not cut at the storm end."""
        controller = make_controller(state, renderer, events, fake_clock, low=50, high=50)

        count = controller.run_storm(120)

        # Waits end at 50, 100, 150
        assert count == 3
        assert fake_clock.now() == 150
        assert fake_clock.now() - 120 <= 50

    def test_clamped_final_wait(self, state, renderer, events, fake_clock):
        """With clamping, the storm ends exactly on time without a late thunder."""
        controller = make_controller(
            state, renderer, events, fake_clock, low=50, high=50, clamp_final_wait=True
        )

        count = controller.run_storm(120)

        assert count == 2
        assert fake_clock.now() == 120
        assert fake_clock.sleeps == [50, 50, 20]

    def test_random_intervals_within_range(self, state, renderer, events, fake_clock, rng):
        controller = make_controller(state, renderer, events, fake_clock, low=2, high=5, rng=rng)

        controller.run_storm(120)

        assert len(fake_clock.sleeps) >= 24
        assert all(2 <= s <= 5 for s in fake_clock.sleeps)
        assert len(set(fake_clock.sleeps)) > 1

    def test_cancellation_resets_flags(self, state, renderer, events):
        fake_clock = FakeClock(stop_at=25.0)
        controller = make_controller(state, renderer, events, fake_clock)

        count = controller.run_storm(120, cancel_event=threading.Event())

        assert count == 2
        assert state.is_storm is False
        ended = events.recent(kind=EventKind.STORM_ENDED)[-1]
        assert ended.details["cancelled"] is True

    def test_rain_failure_does_not_stop_storm(self, state, renderer, events, fake_clock):
        renderer.start_rain.side_effect = RuntimeError("particles unavailable")
        controller = make_controller(state, renderer, events, fake_clock)

        count = controller.run_storm(30)

        assert count == 3
        assert state.is_storm is False

    def test_thunder_failure_does_not_stop_storm(self, state, renderer, events, fake_clock):
        renderer.play_thunder.side_effect = RuntimeError("audio unavailable")
        controller = make_controller(state, renderer, events, fake_clock)

        count = controller.run_storm(30)

        assert count == 3
        assert events.count(EventKind.THUNDER) == 3

    def test_failed_start_notification_clears_flags(self, state, renderer, events, fake_clock):
        """A storm that fails while starting must not leave is_storm set."""
        controller = make_controller(state, renderer, events, fake_clock)

        with patch.object(events, "record", side_effect=RuntimeError("event log unavailable")):
            with pytest.raises(RuntimeError):
                controller.run_storm(30)

        assert state.is_storm is False
        assert state.storm_end_time is None
        assert state.weather_allows_storm() is True
        renderer.start_rain.assert_not_called()

    def test_storm_runs_after_failed_start(self, state, renderer, events, fake_clock):
        controller = make_controller(state, renderer, events, fake_clock)

        with patch.object(events, "record", side_effect=RuntimeError("event log unavailable")):
            with pytest.raises(RuntimeError):
                controller.run_storm(30)

        assert controller.run_storm(30) == 3
        assert state.storm_count == 2
        assert state.is_storm is False

    def test_storm_outlives_day(self, state, renderer, events, fake_clock):
        """Night falling mid-storm should not end the storm early."""
        renderer.play_thunder.side_effect = lambda: state.update(is_day=False)
        controller = make_controller(state, renderer, events, fake_clock)

        count = controller.run_storm(120)

        assert count == 12
        assert state.is_day is False
        assert state.is_storm is False
