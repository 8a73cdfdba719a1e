"""Unit tests for pinning, passive nodes and center control."""

import numpy as np
import pytest

from wgsim.core import Graph, SimulatorConfig, WeightedGraphSimulator


@pytest.fixture
def sim(rng, triangle_graph):
    return WeightedGraphSimulator(SimulatorConfig(radius=1.0), graph=triangle_graph, rng=rng)


class TestPinning:
    """Tests for begin/move/end interaction."""

    def test_pinned_node_untouched_by_update(self, sim):
        sim.begin_interaction(1)
        sim.move_interacted(1, [4.0, 4.0])
        position = sim.position(1)
        velocity = sim.velocity(1)

        for _ in range(50):
            sim.update(0.016)

        assert np.array_equal(sim.position(1), position)
        assert np.array_equal(sim.velocity(1), velocity)

    def test_others_still_move(self, sim):
        sim.begin_interaction(1)
        before = sim.positions
        sim.update(0.016)
        assert not np.array_equal(sim.position(2), before[2])

    def test_move_overwrites_position(self, sim):
        sim.begin_interaction(2)
        sim.move_interacted(2, [1.5, -0.5])
        assert np.array_equal(sim.position(2), [1.5, -0.5])

    def test_end_keeps_velocity(self, sim):
        sim.update(0.016)
        sim.begin_interaction(3)
        velocity = sim.velocity(3)
        sim.end_interaction(3)
        assert 3 not in sim.interacted_nodes
        assert np.array_equal(sim.velocity(3), velocity)

    def test_end_with_release_velocity(self, sim):
        sim.begin_interaction(3)
        sim.end_interaction(3, release_velocity=[2.0, -1.0])
        assert np.array_equal(sim.velocity(3), [2.0, -1.0])

    def test_released_node_moves_again(self, sim):
        sim.begin_interaction(1)
        sim.update(0.016)
        sim.end_interaction(1, release_velocity=[5.0, 0.0])
        before = sim.position(1)
        sim.update(0.016)
        assert not np.array_equal(sim.position(1), before)

    def test_idempotent(self, sim):
        sim.begin_interaction(1)
        sim.begin_interaction(1)
        assert sim.interacted_nodes == {1}
        sim.end_interaction(1)
        sim.end_interaction(1)
        assert sim.interacted_nodes == frozenset()

    def test_unknown_ids_ignored(self, sim):
        sim.begin_interaction(99)
        sim.move_interacted(99, [1.0, 1.0])
        sim.end_interaction(99, release_velocity=[1.0, 1.0])
        sim.disable_force(99)
        sim.enable_force(99)
        assert sim.interacted_nodes == frozenset()
        assert sim.passive_nodes == frozenset()
        assert sim.position(99) is None

    def test_drag_ending_after_removal(self, sim):
        sim.begin_interaction(4)
        sim.graph = Graph(frozenset({1, 2, 3}), sim.graph.edges)
        sim.move_interacted(4, [0.0, 0.0])
        sim.end_interaction(4, release_velocity=[1.0, 0.0])
        assert sim.position(4) is None
        assert 4 not in sim.interacted_nodes

    def test_wrong_vector_length_raises(self, sim):
        with pytest.raises(ValueError):
            sim.move_interacted(1, [1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            sim.end_interaction(1, release_velocity=[1.0])


class TestPassiveNodes:
    """Tests for disable/enable force."""

    def test_flags(self, sim):
        sim.disable_force(2)
        sim.disable_force(2)
        assert sim.passive_nodes == {2}
        sim.enable_force(2)
        assert sim.passive_nodes == frozenset()

    def test_passive_node_exerts_no_force(self, rng, place):
        sim = WeightedGraphSimulator(SimulatorConfig(radius=1.0, damping=2.0), rng=rng)
        sim.set_graph({1, 2}, [({1, 2}, 1.0)])
        place(sim, 1, [2.0, 0.0])
        place(sim, 2, [5.0, 5.0])
        sim.begin_interaction(2)
        sim.disable_force(2)

        sim.update(0.1)

        # Only the center pull acts on node 1: (-2, 0) · 0.3 / (2 + 1), damped
        # by 0.8, then half of it is removed as drift (node 2 is at rest)
        assert np.allclose(sim.velocity(1), [-0.08, 0.0])

    def test_passive_node_still_moves(self, sim):
        sim.disable_force(3)
        before = sim.position(3)
        sim.update(0.016)
        assert not np.array_equal(sim.position(3), before)


class TestCenter:
    """Tests for set_center and the inertial center."""

    def test_set_center_stops_drift(self, sim):
        sim.set_center([1.0, 1.0], inertial_velocity=[3.0, 0.0])
        sim.set_center([2.0, 2.0])
        assert np.array_equal(sim.center, [2.0, 2.0])
        assert np.array_equal(sim.center_velocity, [0.0, 0.0])

    def test_inertial_center_moves_and_decays(self, sim):
        sim.set_center([0.0, 0.0], inertial_velocity=[1.0, 0.0])
        sim.update(0.1)
        assert np.allclose(sim.center, [0.1, 0.0])
        assert np.allclose(sim.center_velocity, [0.8, 0.0])

    def test_graph_follows_center(self, sim):
        sim.set_center([10.0, -5.0])
        sim.update(0.016)
        centroid = np.mean(list(sim.positions.values()), axis=0)
        assert np.allclose(centroid, [10.0, -5.0])

    def test_inertial_center_drags_graph(self, sim):
        sim.set_center([0.0, 0.0], inertial_velocity=[2.0, 0.0])
        for _ in range(100):
            sim.update(0.016)
        centroid = np.mean(list(sim.positions.values()), axis=0)
        assert centroid[0] > 0.5
        assert np.allclose(centroid, sim.center)

    def test_center_without_nodes_still_drifts(self):
        sim = WeightedGraphSimulator(center=[0.0, 0.0])
        sim.set_center([0.0, 0.0], inertial_velocity=[0.0, 1.0])
        sim.update(0.1)
        assert np.allclose(sim.center, [0.0, 0.1])

    def test_wrong_dimensions_raise(self, sim):
        with pytest.raises(ValueError):
            sim.set_center([1.0])
        with pytest.raises(ValueError):
            sim.set_center([1.0, 1.0], inertial_velocity=[1.0, 1.0, 1.0])
