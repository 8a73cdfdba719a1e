"""Unit tests for visibility culling."""

import pytest

from wgsim.core import SimulatorConfig, WeightedGraphSimulator
from wgsim.presentation.visibility import apply_visibility, is_visible

RANGES = {1: None, 2: (0.0, 1.0), 3: (1.0, 3.0), 4: (2.5, 10.0)}


@pytest.fixture
def sim(rng, triangle_graph):
    return WeightedGraphSimulator(SimulatorConfig(radius=2.0), graph=triangle_graph, rng=rng)


class TestIsVisible:
    """Tests for is_visible."""

    def test_no_range_always_visible(self):
        assert is_visible(None, 1e9)

    def test_inclusive_bounds(self):
        assert is_visible((1.0, 2.0), 1.0)
        assert is_visible((1.0, 2.0), 2.0)
        assert not is_visible((1.0, 2.0), 2.5)


class TestApplyVisibility:
    """Tests for apply_visibility."""

    def test_hidden_nodes_disabled(self, sim):
        hidden = apply_visibility(sim, RANGES.get)
        assert hidden == {2, 4}
        assert sim.passive_nodes == {2, 4}

    def test_zoom_changes_visibility(self, sim):
        apply_visibility(sim, RANGES.get)
        sim.radius = 3.0
        hidden = apply_visibility(sim, RANGES.get)
        assert hidden == {2}
        assert sim.passive_nodes == {2}

    def test_keep_force_on_hidden(self, sim):
        sim.disable_force(3)
        hidden = apply_visibility(sim, RANGES.get, disable_hidden=False)
        assert hidden == {2, 4}
        assert sim.passive_nodes == frozenset()

    def test_hidden_nodes_keep_state(self, sim):
        before = sim.positions
        apply_visibility(sim, RANGES.get)
        assert set(sim.positions) == set(before)
