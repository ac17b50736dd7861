"""
Validated simulation parameters.

Field constraints catch single-value problems (non-positive durations,
probability outside [0, 1]). Cross-field rules live in
validate_simulation_config(). Both raise ValueError, and both run before any
loop starts.
"""

from typing import Optional
from pydantic import BaseModel, Field


class SimulationConfig(BaseModel):
    """Startup constants for the day/night clock and weather loops."""
    day_length: float = Field(600.0, gt=0, description="Seconds per Day phase")
    night_length: float = Field(300.0, gt=0, description="Seconds per Night phase")
    time_step: float = Field(1.0, gt=0, description="Clock tick interval in seconds")

    weather_check_interval: float = Field(60.0, gt=0, description="Seconds between weather checks")
    storm_probability: float = Field(0.3, ge=0.0, le=1.0, description="Storm chance per eligible check")
    storm_duration: float = Field(120.0, gt=0, description="Storm duration in seconds")
    thunder_interval_min: float = Field(5.0, gt=0, description="Shortest wait between thunder events")
    thunder_interval_max: float = Field(15.0, gt=0, description="Longest wait between thunder events")
    clamp_thunder_to_storm_end: bool = False

    rain_grace_period: float = Field(3.0, ge=0, description="Seconds between disabling rain and release")
    thunder_release_delay: float = Field(10.0, ge=0, description="Seconds before a thunder sound is released")

    event_log_size: int = Field(200, ge=1, description="Number of recent events kept in memory")
    random_seed: Optional[int] = None

    class Config:
        frozen = True


def validate_simulation_config(config: SimulationConfig) -> None:
    """
    Validate cross-field rules.

    Raises:
        ValueError: If configuration is invalid

    Checks:
        - thunder_interval_min <= thunder_interval_max
    """
    if config.thunder_interval_min > config.thunder_interval_max:
        raise ValueError(
            f"thunder_interval_min ({config.thunder_interval_min}) must not exceed "
            f"thunder_interval_max ({config.thunder_interval_max})"
        )

    # Pydantic already validates positivity and the probability range
    # via Field constraints, so no need to check here
