"""
Day/night clock.

Features:
- Alternates Day and Night phases of configurable length
- Advances simulated time-of-day on a fixed tick
- Publishes a lighting profile to shared state and the renderer every tick
- Runs in a background thread, cancellable at every tick

Time mapping per phase (duration D seconds, tick offset k seconds):

    Day:   time_of_day = (k * 24 / D) % 24
    Night: time_of_day = (18 + k * 24 / D) % 24

Offsets run from 0 to D inclusive in steps of time_step, so each phase sweeps
a full 24 simulated hours. Night starts at 18:00 regardless of where Day ended.
"""

import math
import threading
from typing import Optional

from skycycle.events import EventKind, EventLog
from skycycle.lighting import compute_lighting_profile
from skycycle.lighting_math import HOURS_PER_DAY, wrap_hour
from skycycle.logger import get_logger
from skycycle.renderer import RenderingAdapter
from skycycle.state import EnvironmentState, Phase
from skycycle.timing import SimulationClock, system_clock

logger = get_logger("clock")

NIGHT_START_HOUR = 18.0

# Absorbs float error in duration / time_step (e.g. 0.3 / 0.1 = 2.9999999999999996)
_TICK_EPSILON = 1e-9


def tick_offsets(duration: float, time_step: float) -> list[float]:
    """
    Tick offsets in seconds for one phase: 0, step, 2*step, ... <= duration.

    A duration shorter than time_step yields a single tick at 0.
    """
    count = int(math.floor(duration / time_step + _TICK_EPSILON)) + 1
    return [i * time_step for i in range(count)]


def time_of_day_for(phase: Phase, offset: float, duration: float) -> float:
    """
    Simulated hour for a tick offset within a phase.

    Args:
        phase: Current phase
        offset: Seconds since the phase started
        duration: Phase duration in seconds (must be > 0)

    Returns:
        Hour in [0, 24)
    """
    hours_per_second = HOURS_PER_DAY / duration
    elapsed_hours = offset * hours_per_second
    if phase == Phase.DAY:
        return wrap_hour(elapsed_hours)
    return wrap_hour(NIGHT_START_HOUR + elapsed_hours)


class DayNightClock:
    """
    Owner of simulated time-of-day and the Day/Night phase.

    The only writer of is_day in the shared state.
    """

    def __init__(
        self,
        state: EnvironmentState,
        renderer: RenderingAdapter,
        day_length: float,
        night_length: float,
        time_step: float,
        events: Optional[EventLog] = None,
        clock: SimulationClock = system_clock,
        initial_phase: Phase = Phase.DAY,
    ):
        """
        Initialize the day/night clock.

        Args:
            state: Shared environment state
            renderer: Rendering adapter receiving a profile every tick
            day_length: Day phase duration (seconds)
            night_length: Night phase duration (seconds)
            time_step: Tick interval (seconds)
            events: Event log for phase-change notifications
            clock: Time source and suspension point
            initial_phase: Phase the clock starts in
        """
        if day_length <= 0 or night_length <= 0 or time_step <= 0:
            raise ValueError(
                f"Phase lengths and time step must be positive "
                f"(day={day_length}, night={night_length}, step={time_step})"
            )

        self.state = state
        self.renderer = renderer
        self.day_length = day_length
        self.night_length = night_length
        self.time_step = time_step
        self.events = events or EventLog()
        self.clock = clock
        self.phase = initial_phase

        self.cancel_event = threading.Event()
        self.thread: Optional[threading.Thread] = None

        logger.info(
            f"Day/night clock initialized (day={day_length}s, night={night_length}s, "
            f"step={time_step}s)"
        )

    def start(self):
        """Start the clock thread."""
        if self.thread and self.thread.is_alive():
            logger.warning("Day/night clock already running")
            return

        self.cancel_event.clear()
        self.thread = threading.Thread(
            target=self.run,
            args=(self.cancel_event,),
            name="DayNightClock",
            daemon=True
        )
        self.thread.start()
        logger.info("Day/night clock started")

    def stop(self, timeout: float = 2.0):
        """Cancel the clock thread and wait for it to exit."""
        self.cancel_event.set()
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("Day/night clock thread did not stop gracefully")
        logger.info("Day/night clock stopped")

    def duration_for(self, phase: Phase) -> float:
        return self.day_length if phase == Phase.DAY else self.night_length

    def run(self, cancel_event: threading.Event):
        """
        Main clock loop: run the current phase, flip, repeat until cancelled.
        """
        logger.info(f"Day/night loop started in {self.phase.value} phase")
        self.state.update(is_day=self.phase == Phase.DAY)

        while not cancel_event.is_set():
            try:
                completed = self.run_phase(self.phase, cancel_event)
                if not completed:
                    break
                self._flip_phase()
            except Exception as e:
                logger.error(f"Error in day/night loop ({self.phase.value} phase): {e}", exc_info=True)
                # Back off one tick before retrying
                if self.clock.sleep(self.time_step, cancel_event):
                    break

        logger.info("Day/night loop stopped")

    def run_phase(self, phase: Phase, cancel_event: threading.Event) -> bool:
        """
        Run every tick of one phase.

        Args:
            phase: Phase to run
            cancel_event: Stops the loop at the next suspension point

        Returns:
            True if the phase ran to completion, False if cancelled
        """
        duration = self.duration_for(phase)
        logger.debug(f"{phase.value} phase: {duration}s at {self.time_step}s per tick")

        for offset in tick_offsets(duration, self.time_step):
            if cancel_event.is_set():
                return False

            self.tick(phase, offset, duration)

            if self.clock.sleep(self.time_step, cancel_event):
                return False

        return True

    def tick(self, phase: Phase, offset: float, duration: float):
        """Advance time-of-day to the given offset and publish its lighting profile."""
        time_of_day = time_of_day_for(phase, offset, duration)
        profile = compute_lighting_profile(time_of_day)
        self.state.update(time_of_day=time_of_day, lighting_profile=profile)

        # Rendering failures must not stop the clock
        try:
            self.renderer.apply_lighting_profile(profile)
        except Exception as e:
            logger.error(f"Renderer failed to apply lighting at {profile.clock_string}: {e}", exc_info=True)

    def _flip_phase(self):
        old_phase = self.phase
        self.phase = old_phase.next()
        self.state.update(is_day=self.phase == Phase.DAY)
        self.state.increment("phase_changes")
        self.events.record(
            EventKind.PHASE_CHANGED,
            f"Phase changed: {old_phase.value} → {self.phase.value}",
            phase=self.phase.value,
        )
