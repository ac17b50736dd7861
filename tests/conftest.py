"""Shared pytest fixtures for all tests."""

import random
import threading
from unittest.mock import MagicMock

import pytest

from skycycle.events import EventLog
from skycycle.renderer import RenderingAdapter
from skycycle.state import EnvironmentState


class FakeClock:
    """
    Virtual clock: sleep() advances time instantly.

    Args:
        start: Initial time
        stop_at: Set the cancel event once virtual time reaches this value
    """

    def __init__(self, start: float = 0.0, stop_at=None):
        self.current = start
        self.stop_at = stop_at
        self.sleeps = []
        self.on_sleep = None  # optional hook called after each advance

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float, cancel_event: threading.Event) -> bool:
        if cancel_event.is_set():
            return True

        seconds = max(0.0, seconds)
        self.sleeps.append(seconds)
        self.current += seconds

        if self.on_sleep:
            self.on_sleep(self)

        if self.stop_at is not None and self.current >= self.stop_at:
            cancel_event.set()
        return cancel_event.is_set()


@pytest.fixture
def fake_clock():
    """Virtual clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def state():
    """Fresh shared state (Day, no storm)."""
    return EnvironmentState()


@pytest.fixture
def events():
    return EventLog(max_events=500)


@pytest.fixture
def renderer():
    """Rendering adapter mock that records every call."""
    return MagicMock(spec=RenderingAdapter)


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture(autouse=True)
def cleanup_background_loops():
    """
    Auto-cleanup fixture for loop threads and renderer timers.

    Ensures every DayNightClock, WeatherScheduler and MockRenderer created
    during a test is stopped afterwards, even if the test fails before
    calling stop().
    """
    from skycycle.day_night import DayNightClock
    from skycycle.weather import WeatherScheduler
    from skycycle.mock_rendering import MockRenderer

    created = []
    originals = {}

    for cls in (DayNightClock, WeatherScheduler, MockRenderer):
        original_init = cls.__init__
        originals[cls] = original_init

        def tracked_init(self, *args, __original=original_init, **kwargs):
            __original(self, *args, **kwargs)
            created.append(self)

        cls.__init__ = tracked_init

    yield

    for instance in created:
        try:
            if isinstance(instance, MockRenderer):
                instance.cleanup()
            elif instance.thread is not None and instance.thread.is_alive():
                instance.stop()
        except Exception:
            pass  # Ignore cleanup errors

    for cls, original_init in originals.items():
        cls.__init__ = original_init
