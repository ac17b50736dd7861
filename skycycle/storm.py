"""
Storm lifecycle.

A storm is one blocking call to StormController.run_storm():

1. is_storm = True, "storm started"
2. renderer.start_rain(duration) (the renderer stops and releases the rain itself)
3. until the storm end time: wait a random thunder interval, then thunder
4. is_storm = False, "storm ended"

The thunder wait is drawn in full even when less time remains, so a storm can
run past its end time by up to thunder_interval_max. Pass clamp_final_wait=True
to cut the last wait at the end time instead.
"""

import random
import threading
from typing import Optional

from skycycle.events import EventKind, EventLog
from skycycle.logger import get_logger
from skycycle.renderer import RenderingAdapter
from skycycle.state import EnvironmentState
from skycycle.timing import SimulationClock, system_clock

logger = get_logger("storm")


class StormController:
    """Runs storms to completion. The only writer of is_storm."""

    def __init__(
        self,
        state: EnvironmentState,
        renderer: RenderingAdapter,
        thunder_interval_min: float,
        thunder_interval_max: float,
        events: Optional[EventLog] = None,
        clock: SimulationClock = system_clock,
        rng: Optional[random.Random] = None,
        clamp_final_wait: bool = False,
    ):
        """
        Initialize storm controller.

        Args:
            state: Shared environment state
            renderer: Rendering adapter for rain and thunder
            thunder_interval_min: Shortest wait between thunder events (seconds)
            thunder_interval_max: Longest wait between thunder events (seconds)
            events: Event log for storm notifications
            clock: Time source and suspension point
            rng: Random source (seeded in tests)
            clamp_final_wait: Cut the last thunder wait at the storm end time
        """
        if thunder_interval_min > thunder_interval_max:
            raise ValueError(
                f"thunder_interval_min ({thunder_interval_min}) must not exceed "
                f"thunder_interval_max ({thunder_interval_max})"
            )

        self.state = state
        self.renderer = renderer
        self.thunder_interval_min = thunder_interval_min
        self.thunder_interval_max = thunder_interval_max
        self.events = events or EventLog()
        self.clock = clock
        self.rng = rng or random.Random()
        self.clamp_final_wait = clamp_final_wait

    def next_thunder_interval(self) -> float:
        """Uniform random wait in [thunder_interval_min, thunder_interval_max]."""
        return self.rng.uniform(self.thunder_interval_min, self.thunder_interval_max)

    def run_storm(self, duration: float, cancel_event: Optional[threading.Event] = None) -> int:
        """
        Run one storm to completion (blocking).

        Args:
            duration: Nominal storm length in seconds
            cancel_event: Ends the thunder loop early at the next wait

        Returns:
            Number of thunder events emitted
        """
        if duration <= 0:
            raise ValueError(f"Storm duration must be positive, got {duration}")

        cancel_event = cancel_event or threading.Event()

        storm_end_time = self.clock.now() + duration
        self.state.update(is_storm=True, storm_end_time=storm_end_time)

        storm_number = None
        thunder_count = 0
        try:
            storm_number = self.state.increment("storm_count")
            self.events.record(
                EventKind.STORM_STARTED,
                f"Storm #{storm_number} started (duration={duration}s)",
                storm=storm_number,
                duration=duration,
            )

            try:
                self.renderer.start_rain(duration)
            except Exception as e:
                logger.error(f"Renderer failed to start rain: {e}", exc_info=True)

            thunder_count = self._thunder_loop(storm_number, storm_end_time, cancel_event)
        finally:
            # Flags are reset even if the loop was cancelled
            self.state.update(is_storm=False, storm_end_time=None)
            self.events.record(
                EventKind.STORM_ENDED,
                f"Storm #{storm_number} ended ({thunder_count} thunder events)",
                storm=storm_number,
                thunder_events=thunder_count,
                cancelled=cancel_event.is_set(),
            )

        return thunder_count

    def _thunder_loop(self, storm_number: int, storm_end_time: float, cancel_event: threading.Event) -> int:
        thunder_count = 0

        while self.clock.now() < storm_end_time:
            wait = self.next_thunder_interval()

            if self.clamp_final_wait:
                remaining = storm_end_time - self.clock.now()
                if wait >= remaining:
                    # Sit out the rest of the storm without a last thunder
                    self.clock.sleep(remaining, cancel_event)
                    break

            if self.clock.sleep(wait, cancel_event):
                logger.info(f"Storm #{storm_number} cancelled")
                break

            thunder_count += 1
            self._thunder(storm_number, thunder_count)

        return thunder_count

    def _thunder(self, storm_number: int, thunder_number: int):
        self.state.increment("thunder_count")
        try:
            self.renderer.play_thunder()
        except Exception as e:
            logger.error(f"Renderer failed to play thunder: {e}", exc_info=True)

        self.events.record(
            EventKind.THUNDER,
            f"Thunder! (storm #{storm_number}, strike {thunder_number})",
            storm=storm_number,
            strike=thunder_number,
        )
