"""
Simulation wiring.

Builds the shared state, renderer, day/night clock, storm controller and
weather scheduler from one validated SimulationConfig, and starts/stops the
two loops together.
"""

import random
from typing import Optional

from skycycle.day_night import DayNightClock
from skycycle.events import EventLog
from skycycle.logger import get_logger
from skycycle.mock_rendering import MockRenderer
from skycycle.renderer import RenderingAdapter
from skycycle.simulation_config import SimulationConfig, validate_simulation_config
from skycycle.state import EnvironmentState
from skycycle.storm import StormController
from skycycle.timing import SimulationClock, system_clock
from skycycle.weather import WeatherScheduler

logger = get_logger("simulation")


class EnvironmentSimulation:
    """Day/night clock and weather scheduler sharing one EnvironmentState."""

    def __init__(
        self,
        config: SimulationConfig,
        renderer: Optional[RenderingAdapter] = None,
        clock: SimulationClock = system_clock,
    ):
        """
        Validate configuration and build all components.

        Args:
            config: Simulation parameters
            renderer: Rendering adapter (default: MockRenderer)
            clock: Time source shared by both loops

        Raises:
            ValueError: If configuration is invalid
        """
        validate_simulation_config(config)

        self.config = config
        self.clock = clock
        self.state = EnvironmentState()
        self.events = EventLog(max_events=config.event_log_size)
        self.renderer = renderer or MockRenderer(
            rain_grace_period=config.rain_grace_period,
            thunder_release_delay=config.thunder_release_delay,
        )

        # One seeded source per loop keeps weather reproducible
        seed_source = random.Random(config.random_seed)
        storm_rng = random.Random(seed_source.random())
        weather_rng = random.Random(seed_source.random())

        self.day_night = DayNightClock(
            state=self.state,
            renderer=self.renderer,
            day_length=config.day_length,
            night_length=config.night_length,
            time_step=config.time_step,
            events=self.events,
            clock=clock,
        )
        self.storm_controller = StormController(
            state=self.state,
            renderer=self.renderer,
            thunder_interval_min=config.thunder_interval_min,
            thunder_interval_max=config.thunder_interval_max,
            events=self.events,
            clock=clock,
            rng=storm_rng,
            clamp_final_wait=config.clamp_thunder_to_storm_end,
        )
        self.weather = WeatherScheduler(
            state=self.state,
            storm_controller=self.storm_controller,
            check_interval=config.weather_check_interval,
            storm_probability=config.storm_probability,
            storm_duration=config.storm_duration,
            clock=clock,
            rng=weather_rng,
        )

        self.running = False

    def start(self):
        """Start both loops."""
        if self.running:
            logger.warning("Simulation already running")
            return

        logger.info(
            f"Starting simulation (day={self.config.day_length}s, night={self.config.night_length}s, "
            f"check={self.config.weather_check_interval}s, p={self.config.storm_probability})"
        )
        self.state.reset()
        self.day_night.start()
        self.weather.start()
        self.running = True

    def stop(self):
        """Cancel both loops and release renderer resources."""
        logger.info("Stopping simulation...")

        self.weather.stop()
        self.day_night.stop()

        try:
            self.renderer.cleanup()
        except Exception as e:
            logger.error(f"Renderer cleanup failed: {e}", exc_info=True)

        self.running = False
        logger.info("Simulation stopped")

    def get_status(self) -> dict:
        """State snapshot plus loop status."""
        status = self.state.get_snapshot()
        status.update({
            "running": self.running,
            "weather_checks": self.weather.checks,
            "storm_pending": self.weather.storm_pending,
        })
        return status
