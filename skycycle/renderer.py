"""
Rendering collaborator interface.

The simulation core only produces numbers and signals; an adapter turns them
into lights, particles and sounds. Adapters own their resources:

- start_rain(duration) must stop emitting after `duration` seconds, then
  release the effect after a grace period
- play_thunder() must release the sound after a fixed delay

The core never waits on either cleanup.
"""

from skycycle.lighting import LightingProfile


class RenderingAdapter:
    """Base class for rendering adapters."""

    def apply_lighting_profile(self, profile: LightingProfile) -> None:
        """Apply brightness and ambient colors. Called on every clock tick."""
        raise NotImplementedError

    def start_rain(self, duration_seconds: float) -> None:
        """Start a rain effect that stops by itself after duration_seconds."""
        raise NotImplementedError

    def play_thunder(self) -> None:
        """Play a one-shot thunder sound."""
        raise NotImplementedError

    def cleanup(self) -> None:
        """Release every live resource (shutdown)."""
