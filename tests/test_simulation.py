"""Tests for simulation wiring."""

import time

import pytest

from skycycle.events import EventKind
from skycycle.mock_rendering import MockRenderer
from skycycle.simulation import EnvironmentSimulation
from skycycle.simulation_config import SimulationConfig


@pytest.fixture
def fast_config():
    """Sub-second phases and storms."""
    return SimulationConfig(
        day_length=0.4,
        night_length=0.2,
        time_step=0.01,
        weather_check_interval=0.05,
        storm_probability=1.0,
        storm_duration=0.1,
        thunder_interval_min=0.02,
        thunder_interval_max=0.02,
        rain_grace_period=0.01,
        thunder_release_delay=0.01,
        random_seed=7,
    )


class TestEnvironmentSimulation:
    """Tests for EnvironmentSimulation."""

    def test_invalid_config_rejected_before_start(self, renderer):
        config = SimulationConfig(thunder_interval_min=20, thunder_interval_max=5)
        with pytest.raises(ValueError):
            EnvironmentSimulation(config, renderer=renderer)

    def test_default_renderer(self):
        simulation = EnvironmentSimulation(SimulationConfig(rain_grace_period=1.5))
        assert isinstance(simulation.renderer, MockRenderer)
        assert simulation.renderer.rain_grace_period == 1.5

    def test_components_share_state(self, renderer):
        simulation = EnvironmentSimulation(SimulationConfig(), renderer=renderer)
        assert simulation.day_night.state is simulation.state
        assert simulation.storm_controller.state is simulation.state
        assert simulation.weather.state is simulation.state
        assert simulation.weather.storm_controller is simulation.storm_controller

    def test_seeded_weather_is_reproducible(self, renderer):
        first = EnvironmentSimulation(SimulationConfig(random_seed=99), renderer=renderer)
        second = EnvironmentSimulation(SimulationConfig(random_seed=99), renderer=renderer)
        assert first.weather.rng.random() == second.weather.rng.random()
        assert first.storm_controller.next_thunder_interval() == second.storm_controller.next_thunder_interval()

    def test_status_before_start(self, renderer):
        simulation = EnvironmentSimulation(SimulationConfig(), renderer=renderer)
        status = simulation.get_status()
        assert status["running"] is False
        assert status["is_day"] is True
        assert status["is_storm"] is False
        assert status["storm_pending"] is False

    def test_runs_cycle_and_storms(self, fast_config):
        """Both loops should run concurrently until stopped."""
        simulation = EnvironmentSimulation(fast_config)

        simulation.start()
        time.sleep(1.5)
        simulation.stop()

        assert simulation.running is False
        assert not simulation.day_night.thread.is_alive()
        assert not simulation.weather.thread.is_alive()
        assert simulation.state.phase_changes >= 1
        assert simulation.state.storm_count >= 1
        assert simulation.events.count(EventKind.STORM_STARTED) >= 1
        assert simulation.renderer.profiles_applied > 0
        assert simulation.state.is_storm is False

    def test_restart(self, fast_config, renderer):
        simulation = EnvironmentSimulation(fast_config, renderer=renderer)

        simulation.start()
        time.sleep(0.1)
        simulation.stop()
        simulation.start()
        time.sleep(0.1)
        simulation.stop()

        assert not simulation.day_night.thread.is_alive()
        renderer.cleanup.assert_called()
