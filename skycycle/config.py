"""
Configuration management with environment variable support.

All settings can be overridden via environment variables.
Automatically loads .env file if present.
"""

import os
from pathlib import Path
from typing import Literal, Optional
from dotenv import load_dotenv

# Load .env file from project root (one level up from skycycle/)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Logging configuration
LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv("LOG_LEVEL", "INFO")

# Day/night cycle configuration
DAY_LENGTH: float = float(os.getenv("DAY_LENGTH", "600"))  # seconds per Day phase
NIGHT_LENGTH: float = float(os.getenv("NIGHT_LENGTH", "300"))  # seconds per Night phase
TIME_STEP: float = float(os.getenv("TIME_STEP", "1.0"))  # clock tick interval

# Weather configuration
WEATHER_CHECK_INTERVAL: float = float(os.getenv("WEATHER_CHECK_INTERVAL", "60"))
STORM_PROBABILITY: float = float(os.getenv("STORM_PROBABILITY", "0.3"))
STORM_DURATION: float = float(os.getenv("STORM_DURATION", "120"))
THUNDER_INTERVAL_MIN: float = float(os.getenv("THUNDER_INTERVAL_MIN", "5"))
THUNDER_INTERVAL_MAX: float = float(os.getenv("THUNDER_INTERVAL_MAX", "15"))
# Shorten the last thunder wait so a storm never runs past its end time
CLAMP_THUNDER_TO_STORM_END: bool = os.getenv("CLAMP_THUNDER_TO_STORM_END", "false").lower() == "true"

# Rendering collaborator cleanup delays
RAIN_GRACE_PERIOD: float = float(os.getenv("RAIN_GRACE_PERIOD", "3"))
THUNDER_RELEASE_DELAY: float = float(os.getenv("THUNDER_RELEASE_DELAY", "10"))

# Observability
EVENT_LOG_SIZE: int = int(os.getenv("EVENT_LOG_SIZE", "200"))

# Optional seed for reproducible weather (empty = system randomness)
_seed = os.getenv("RANDOM_SEED", "")
RANDOM_SEED: Optional[int] = int(_seed) if _seed.strip() else None


def load_simulation_config():
    """
    Build validated SimulationConfig from the environment constants above.

    Returns:
        SimulationConfig instance

    Raises:
        ValueError: If any value is out of range
    """
    from skycycle.simulation_config import SimulationConfig, validate_simulation_config

    config = SimulationConfig(
        day_length=DAY_LENGTH,
        night_length=NIGHT_LENGTH,
        time_step=TIME_STEP,
        weather_check_interval=WEATHER_CHECK_INTERVAL,
        storm_probability=STORM_PROBABILITY,
        storm_duration=STORM_DURATION,
        thunder_interval_min=THUNDER_INTERVAL_MIN,
        thunder_interval_max=THUNDER_INTERVAL_MAX,
        rain_grace_period=RAIN_GRACE_PERIOD,
        thunder_release_delay=THUNDER_RELEASE_DELAY,
        clamp_thunder_to_storm_end=CLAMP_THUNDER_TO_STORM_END,
        event_log_size=EVENT_LOG_SIZE,
        random_seed=RANDOM_SEED,
    )
    validate_simulation_config(config)
    return config
