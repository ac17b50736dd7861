"""
Shared environment state for the day/night clock and weather loops.

The clock writes is_day, the storm controller writes is_storm, and the weather
scheduler reads both. Each loop runs on its own thread, so every read and
write goes through the internal lock.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Any
from datetime import datetime
from enum import Enum
import threading

from skycycle.lighting import LightingProfile


class Phase(str, Enum):
    """Half of the day/night cycle."""
    DAY = "DAY"
    NIGHT = "NIGHT"

    def next(self) -> "Phase":
        return Phase.NIGHT if self == Phase.DAY else Phase.DAY


@dataclass
class EnvironmentState:
    """
    Coordination surface shared by the simulation loops.

    Thread-safe via internal lock. All updates should use the update() method.
    """

    # Day/night cycle
    is_day: bool = True
    time_of_day: float = 0.0
    lighting_profile: Optional[LightingProfile] = None

    # Weather (storm_end_time is on the simulation clock, None when clear)
    is_storm: bool = False
    storm_end_time: Optional[float] = None

    # Counters
    phase_changes: int = 0
    storm_count: int = 0
    thunder_count: int = 0

    # Last update timestamp
    last_updated: datetime = field(default_factory=datetime.now)

    # Thread-safe access lock
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def phase(self) -> Phase:
        with self._lock:
            return Phase.DAY if self.is_day else Phase.NIGHT

    def update(self, **kwargs) -> None:
        """
        Thread-safe state update.

        Args:
            **kwargs: State attributes to update; unknown and private names are ignored

        Example:
            environment_state.update(is_storm=True, storm_end_time=now + 120)
        """
        with self._lock:
            names = {f.name for f in fields(self) if not f.name.startswith('_')}
            for key, value in kwargs.items():
                if key in names:
                    setattr(self, key, value)
            self.last_updated = datetime.now()

    def increment(self, counter: str, amount: int = 1) -> int:
        """
        Atomically add to one of the counters.

        Returns:
            New counter value
        """
        if counter not in ("phase_changes", "storm_count", "thunder_count"):
            raise ValueError(f"Unknown counter '{counter}'")

        with self._lock:
            value = getattr(self, counter) + amount
            setattr(self, counter, value)
            self.last_updated = datetime.now()
            return value

    def weather_allows_storm(self) -> bool:
        """True when it is day and no storm is running (read under one lock)."""
        with self._lock:
            return self.is_day and not self.is_storm

    def reset(self) -> None:
        """Return to the startup state: Day, no storm, counters cleared."""
        with self._lock:
            self.is_day = True
            self.time_of_day = 0.0
            self.lighting_profile = None
            self.is_storm = False
            self.storm_end_time = None
            self.phase_changes = 0
            self.storm_count = 0
            self.thunder_count = 0
            self.last_updated = datetime.now()

    def get_snapshot(self) -> dict[str, Any]:
        """
        Get thread-safe snapshot of current state.

        Returns:
            dict: Current state as dictionary (for the API and logging)
        """
        with self._lock:
            return {
                "phase": Phase.DAY.value if self.is_day else Phase.NIGHT.value,
                "is_day": self.is_day,
                "is_storm": self.is_storm,
                "time_of_day": self.time_of_day,
                "storm_end_time": self.storm_end_time,
                "lighting": self.lighting_profile.to_dict() if self.lighting_profile else None,
                "phase_changes": self.phase_changes,
                "storm_count": self.storm_count,
                "thunder_count": self.thunder_count,
                "last_updated": self.last_updated.isoformat(),
            }
