"""
Mathematical helpers for time-of-day lighting ramps.
"""

HOURS_PER_DAY = 24.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation."""
    return a + (b - a) * t


def wrap_hour(hour: float) -> float:
    """Wrap an hour value into [0, 24)."""
    wrapped = hour % HOURS_PER_DAY
    # -1e-18 % 24 rounds to 24.0
    return 0.0 if wrapped >= HOURS_PER_DAY else wrapped
