"""
Time source and suspension point for the simulation loops.

Every wait in the simulation goes through SimulationClock.sleep(), which
returns early when the loop's cancel event is set. Tests swap in a clock that
advances virtual time instantly.
"""

import threading
import time


class SimulationClock:
    """Monotonic clock with cancellable sleep."""

    def now(self) -> float:
        """Current time in seconds (monotonic, arbitrary origin)."""
        return time.monotonic()

    def sleep(self, seconds: float, cancel_event: threading.Event) -> bool:
        """
        Wait for the given number of seconds or until cancel_event is set.

        Args:
            seconds: Time to wait; negative values are treated as zero
            cancel_event: Event that interrupts the wait

        Returns:
            True if the wait was cancelled
        """
        if cancel_event.is_set():
            return True
        return cancel_event.wait(timeout=max(0.0, seconds))


# Shared default instance
system_clock = SimulationClock()
