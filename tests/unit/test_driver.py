"""Unit tests for TickDriver."""

import numpy as np
import pytest

from wgsim.core import SimulatorConfig, WeightedGraphSimulator
from wgsim.presentation.driver import TickDriver


@pytest.fixture
def sim(rng, triangle_graph):
    return WeightedGraphSimulator(SimulatorConfig(radius=1.0), graph=triangle_graph, rng=rng)


class TestTickDriver:
    """Tests for frame handling."""

    def test_stopped_driver_does_nothing(self, sim):
        driver = TickDriver(sim)
        assert not driver.is_running
        assert driver.frame(1.0) == 0.0
        assert sim.current_tick == 0

    def test_first_frame_only_records_timestamp(self, sim):
        driver = TickDriver(sim)
        driver.start()
        assert driver.frame(10.0) == 0.0
        assert sim.current_tick == 0

    def test_frame_advances_by_elapsed_time(self, sim):
        driver = TickDriver(sim)
        driver.start()
        driver.frame(10.0)
        delta = driver.frame(10.02)

        assert delta == pytest.approx(0.02)
        assert sim.current_tick == 1
        assert sim.elapsed == pytest.approx(0.02)
        assert driver.frames == 1

    def test_integration_steps(self, sim):
        driver = TickDriver(sim, integration_steps=3)
        driver.start()
        driver.frame(0.0)
        driver.frame(0.03)
        assert sim.current_tick == 3
        assert sim.elapsed == pytest.approx(0.03)

    def test_long_gap_capped(self, sim):
        driver = TickDriver(sim, max_delta=0.05)
        driver.start()
        driver.frame(0.0)
        assert driver.frame(5.0) == pytest.approx(0.05)
        assert sim.elapsed == pytest.approx(0.05)

    def test_no_cap(self, sim):
        driver = TickDriver(sim, max_delta=None)
        driver.start()
        driver.frame(0.0)
        assert driver.frame(0.5) == pytest.approx(0.5)

    def test_clock_going_backwards(self, sim):
        driver = TickDriver(sim)
        driver.start()
        driver.frame(1.0)
        assert driver.frame(0.5) == 0.0
        assert all(np.all(np.isfinite(p)) for p in sim.positions.values())

    def test_stop_resets_timestamp(self, sim):
        driver = TickDriver(sim)
        driver.start()
        driver.frame(0.0)
        driver.frame(0.016)
        driver.stop()
        assert not driver.is_running

        driver.start()
        assert driver.frame(100.0) == 0.0
        assert sim.current_tick == 1

    def test_on_update_called(self, sim):
        calls = []
        driver = TickDriver(sim, on_update=lambda: calls.append(sim.current_tick))
        driver.start()
        driver.frame(0.0)
        driver.frame(0.016)
        driver.frame(0.032)
        assert calls == [1, 2]

    def test_invalid_integration_steps(self, sim):
        with pytest.raises(ValueError):
            TickDriver(sim, integration_steps=0)
        driver = TickDriver(sim)
        with pytest.raises(ValueError):
            driver.integration_steps = -1
