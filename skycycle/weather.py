"""
Periodic weather checks.

Features:
- Every check interval, rolls for a storm when it is day and clear
- Runs the storm synchronously, so storms from one scheduler never overlap
- Manual storm requests (still gated on day and clear)
- Runs in a background thread, cancellable at every wait
"""

import random
import threading
from typing import Optional

from skycycle.logger import get_logger
from skycycle.state import EnvironmentState
from skycycle.storm import StormController
from skycycle.timing import SimulationClock, system_clock

logger = get_logger("weather")


class WeatherScheduler:
    """
    Decides when storms start.

    Reads is_day and is_storm; never writes either.
    """

    def __init__(
        self,
        state: EnvironmentState,
        storm_controller: StormController,
        check_interval: float,
        storm_probability: float,
        storm_duration: float,
        clock: SimulationClock = system_clock,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize weather scheduler.

        Args:
            state: Shared environment state
            storm_controller: Controller that runs approved storms
            check_interval: Seconds between weather checks
            storm_probability: Chance of a storm per eligible check (0.0-1.0)
            storm_duration: Storm length in seconds
            clock: Time source and suspension point
            rng: Random source (seeded in tests)
        """
        if check_interval <= 0 or storm_duration <= 0:
            raise ValueError(
                f"Check interval and storm duration must be positive "
                f"(interval={check_interval}, duration={storm_duration})"
            )
        if not 0.0 <= storm_probability <= 1.0:
            raise ValueError(f"Storm probability must be within [0, 1], got {storm_probability}")

        self.state = state
        self.storm_controller = storm_controller
        self.check_interval = check_interval
        self.storm_probability = storm_probability
        self.storm_duration = storm_duration
        self.clock = clock
        self.rng = rng or random.Random()

        self.lock = threading.Lock()
        self.checks = 0
        self.storm_running = False
        self._requested_duration: Optional[float] = None
        self._storm_requested = False

        self.cancel_event = threading.Event()
        self.thread: Optional[threading.Thread] = None

        logger.info(
            f"Weather scheduler initialized (interval={check_interval}s, "
            f"probability={storm_probability}, storm_duration={storm_duration}s)"
        )

    def start(self):
        """Start the scheduler thread."""
        if self.thread and self.thread.is_alive():
            logger.warning("Weather scheduler already running")
            return

        self.cancel_event.clear()
        self.thread = threading.Thread(
            target=self.run,
            args=(self.cancel_event,),
            name="WeatherScheduler",
            daemon=True
        )
        self.thread.start()
        logger.info("Weather scheduler started")

    def stop(self, timeout: float = 2.0):
        """Cancel the scheduler (and any running storm) and wait for it to exit."""
        self.cancel_event.set()
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("Weather scheduler thread did not stop gracefully")
        logger.info("Weather scheduler stopped")

    def request_storm(self, duration: Optional[float] = None):
        """
        Ask for a storm at the next check, skipping the probability roll.

        The request waits until it is day and no storm is running.

        Args:
            duration: Storm length override in seconds (None = configured duration)
        """
        if duration is not None and duration <= 0:
            raise ValueError(f"Storm duration must be positive, got {duration}")

        with self.lock:
            self._storm_requested = True
            self._requested_duration = duration
        logger.info(f"Storm requested (duration={duration or self.storm_duration}s)")

    @property
    def storm_pending(self) -> bool:
        with self.lock:
            return self._storm_requested

    def run(self, cancel_event: threading.Event):
        """
        Main scheduler loop: wait one check interval, then check.
        """
        logger.info("Weather loop started")

        while not self.clock.sleep(self.check_interval, cancel_event):
            try:
                self.check_once(cancel_event)
            except Exception as e:
                logger.error(f"Error in weather check: {e}", exc_info=True)

        logger.info("Weather loop stopped")

    def check_once(self, cancel_event: Optional[threading.Event] = None) -> bool:
        """
        Run one weather check.

        Returns:
            True if a storm was started (and has finished by the time this returns)
        """
        with self.lock:
            self.checks += 1
            requested = self._storm_requested

        if not self.state.weather_allows_storm():
            logger.debug("Weather check skipped (night or storm active)")
            return False

        if requested:
            with self.lock:
                duration = self._requested_duration or self.storm_duration
                self._storm_requested = False
                self._requested_duration = None
            logger.info("Starting requested storm")
        else:
            roll = self.rng.random()
            if roll >= self.storm_probability:
                logger.debug(f"No storm (roll={roll:.3f}, probability={self.storm_probability})")
                return False
            duration = self.storm_duration
            logger.debug(f"Storm approved (roll={roll:.3f}, probability={self.storm_probability})")

        self._run_storm(duration, cancel_event)
        return True

    def _run_storm(self, duration: float, cancel_event: Optional[threading.Event]):
        with self.lock:
            if self.storm_running:
                # A second caller raced past the is_storm gate
                raise RuntimeError("Storm already running from this scheduler")
            self.storm_running = True

        try:
            self.storm_controller.run_storm(duration, cancel_event)
        finally:
            with self.lock:
                self.storm_running = False
