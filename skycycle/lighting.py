"""
Time-of-day to lighting profile mapping.

The day is split into five periods. Night and full day are flat; dawn and
dusk ramp brightness linearly over two hours:

    [0, 6)    night   brightness 1
    [6, 8)    dawn    brightness clamp((t - 6) / 2 * 4, 1, 4)
    [8, 18)   day     brightness 4
    [18, 20)  dusk    brightness clamp(4 - (t - 18) / 2 * 3, 1, 4)
    [20, 24)  night   brightness 1

Colors are constant within each period. Everything here is pure: the same
hour always gives the same profile.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any

from skycycle.lighting_math import clamp, lerp, wrap_hour

RGB = tuple[int, int, int]

MIN_BRIGHTNESS = 1.0
MAX_BRIGHTNESS = 4.0

NIGHT_COLOR: RGB = (20, 20, 40)
DAWN_COLOR: RGB = (40, 40, 60)
DAY_AMBIENT: RGB = (100, 100, 120)
DAY_OUTDOOR_AMBIENT: RGB = (120, 120, 140)
DUSK_COLOR: RGB = (80, 60, 80)

# (start hour, end hour, period name, ambient, outdoor ambient)
LIGHTING_PERIODS = (
    (0.0, 6.0, "night", NIGHT_COLOR, NIGHT_COLOR),
    (6.0, 8.0, "dawn", DAWN_COLOR, DAWN_COLOR),
    (8.0, 18.0, "day", DAY_AMBIENT, DAY_OUTDOOR_AMBIENT),
    (18.0, 20.0, "dusk", DUSK_COLOR, DUSK_COLOR),
    (20.0, 24.0, "night", NIGHT_COLOR, NIGHT_COLOR),
)


@dataclass(frozen=True)
class LightingProfile:
    """Derived lighting parameters for one instant of simulated time."""
    brightness: float
    ambient_color: RGB
    outdoor_ambient_color: RGB
    clock_string: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["ambient_color"] = list(self.ambient_color)
        data["outdoor_ambient_color"] = list(self.outdoor_ambient_color)
        return data


def format_clock_string(time_of_day: float) -> str:
    """
    Format hour value as HH:MM:00.

    Seconds are always 00; minutes are truncated, not rounded.

    Example:
        format_clock_string(7.5)  # "07:30:00"
    """
    t = wrap_hour(time_of_day)
    hours = int(math.floor(t))
    minutes = int(math.floor((t % 1) * 60))
    return f"{hours:02d}:{minutes:02d}:00"


def period_for(time_of_day: float) -> str:
    """Return the period name ("night", "dawn", "day", "dusk") for an hour."""
    return _find_period(wrap_hour(time_of_day))[2]


def brightness_for(time_of_day: float) -> float:
    """Brightness in [1, 4] for an hour."""
    t = wrap_hour(time_of_day)
    start, end, name, _, _ = _find_period(t)

    if name == "dawn":
        raw = lerp(0.0, MAX_BRIGHTNESS, (t - start) / (end - start))
    elif name == "dusk":
        raw = lerp(MAX_BRIGHTNESS, MIN_BRIGHTNESS, (t - start) / (end - start))
    elif name == "day":
        raw = MAX_BRIGHTNESS
    else:
        raw = MIN_BRIGHTNESS

    return clamp(raw, MIN_BRIGHTNESS, MAX_BRIGHTNESS)


def compute_lighting_profile(time_of_day: float) -> LightingProfile:
    """
    Map a time-of-day to its lighting profile.

    Args:
        time_of_day: Simulated hour; values outside [0, 24) are wrapped

    Returns:
        LightingProfile snapshot
    """
    t = wrap_hour(time_of_day)
    _, _, _, ambient, outdoor = _find_period(t)

    return LightingProfile(
        brightness=brightness_for(t),
        ambient_color=ambient,
        outdoor_ambient_color=outdoor,
        clock_string=format_clock_string(t),
    )


def _find_period(t: float):
    for period in LIGHTING_PERIODS:
        if period[0] <= t < period[1]:
            return period
    # wrap_hour keeps t below 24, so only NaN ends up here
    raise ValueError(f"Time of day out of range: {t}")
