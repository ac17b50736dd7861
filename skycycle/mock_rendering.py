"""
Mock rendering adapter for running the simulation without a graphics engine.

Features:
- Logs lighting updates, rain and thunder instead of drawing them
- Tracks live rain effects and thunder sounds for inspection
- Deferred cleanup with threading.Timer, same contract as a real adapter:
  rain stops emitting after its duration, then is released after a grace period;
  thunder is released after a fixed delay
"""

import itertools
import threading
from dataclasses import dataclass, field
from typing import Optional, List, Dict

from skycycle.lighting import LightingProfile
from skycycle.logger import get_logger
from skycycle.renderer import RenderingAdapter

logger = get_logger("render")

_resource_ids = itertools.count(1)


@dataclass
class MockRainEffect:
    """Simulated rain particle emitter."""
    effect_id: int
    duration: float
    emitting: bool = True
    released: bool = False
    timer: Optional[threading.Timer] = field(default=None, repr=False)


@dataclass
class MockThunderSound:
    """Simulated one-shot thunder sound."""
    sound_id: int
    released: bool = False
    timer: Optional[threading.Timer] = field(default=None, repr=False)


class MockRenderer(RenderingAdapter):
    """
    Logging renderer.

    Drop-in stand-in for an engine adapter.
    """

    def __init__(self, rain_grace_period: float = 3.0, thunder_release_delay: float = 10.0):
        """
        Initialize mock renderer.

        Args:
            rain_grace_period: Seconds between disabling rain emission and releasing the effect
            thunder_release_delay: Seconds before a thunder sound is released
        """
        self.rain_grace_period = rain_grace_period
        self.thunder_release_delay = thunder_release_delay
        self.lock = threading.Lock()

        self.last_profile: Optional[LightingProfile] = None
        self.profiles_applied = 0
        self.rain_effects: Dict[int, MockRainEffect] = {}
        self.thunder_sounds: Dict[int, MockThunderSound] = {}

        logger.info(
            f"[MOCK] Renderer ready (rain_grace={rain_grace_period}s, "
            f"thunder_release={thunder_release_delay}s)"
        )

    # ------------------------------------------------------------------
    # Lighting
    # ------------------------------------------------------------------

    def apply_lighting_profile(self, profile: LightingProfile) -> None:
        with self.lock:
            self.last_profile = profile
            self.profiles_applied += 1
        logger.debug(
            f"[MOCK] Lighting {profile.clock_string}: brightness={profile.brightness:.2f}, "
            f"ambient={profile.ambient_color}, outdoor={profile.outdoor_ambient_color}"
        )

    # ------------------------------------------------------------------
    # Rain
    # ------------------------------------------------------------------

    def start_rain(self, duration_seconds: float) -> None:
        effect = MockRainEffect(effect_id=next(_resource_ids), duration=duration_seconds)

        # Timer callbacks take the lock, so they run only after registration
        with self.lock:
            self.rain_effects[effect.effect_id] = effect
            effect.timer = self._schedule(duration_seconds, self._stop_rain, effect)

        logger.info(f"[MOCK] Rain #{effect.effect_id} started ({duration_seconds}s)")

    def _stop_rain(self, effect: MockRainEffect):
        """Disable emission, then release after the grace period."""
        with self.lock:
            if effect.released:
                return
            effect.emitting = False
            effect.timer = self._schedule(self.rain_grace_period, self._release_rain, effect)
        logger.info(f"[MOCK] Rain #{effect.effect_id} stopped emitting")

    def _release_rain(self, effect: MockRainEffect):
        with self.lock:
            effect.released = True
            effect.timer = None
            self.rain_effects.pop(effect.effect_id, None)
        logger.info(f"[MOCK] Rain #{effect.effect_id} released")

    # ------------------------------------------------------------------
    # Thunder
    # ------------------------------------------------------------------

    def play_thunder(self) -> None:
        sound = MockThunderSound(sound_id=next(_resource_ids))

        with self.lock:
            self.thunder_sounds[sound.sound_id] = sound
            sound.timer = self._schedule(self.thunder_release_delay, self._release_thunder, sound)

        logger.info(f"[MOCK] Thunder #{sound.sound_id} played")

    def _release_thunder(self, sound: MockThunderSound):
        with self.lock:
            sound.released = True
            sound.timer = None
            self.thunder_sounds.pop(sound.sound_id, None)
        logger.debug(f"[MOCK] Thunder #{sound.sound_id} released")

    # ------------------------------------------------------------------
    # Inspection and cleanup
    # ------------------------------------------------------------------

    def active_rain(self) -> List[MockRainEffect]:
        """Rain effects not yet released (emitting or in grace period)."""
        with self.lock:
            return list(self.rain_effects.values())

    def active_thunder(self) -> List[MockThunderSound]:
        with self.lock:
            return list(self.thunder_sounds.values())

    def cleanup(self) -> None:
        """Cancel pending timers and release every live resource."""
        with self.lock:
            resources = list(self.rain_effects.values()) + list(self.thunder_sounds.values())
            for resource in resources:
                if resource.timer:
                    resource.timer.cancel()
                    resource.timer = None
                resource.released = True
            for effect in self.rain_effects.values():
                effect.emitting = False
            self.rain_effects.clear()
            self.thunder_sounds.clear()

        logger.info(f"[MOCK] Renderer cleaned up ({len(resources)} resources released)")

    @staticmethod
    def _schedule(delay: float, callback, resource) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay), callback, args=(resource,))
        timer.daemon = True
        timer.start()
        return timer
