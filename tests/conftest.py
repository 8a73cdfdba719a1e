"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def planar_config():
    """2D configuration with unit rest distance."""
    from wgsim.core import SimulatorConfig
    return SimulatorConfig(
        dimensions=2,
        damping=2.0,
        radius=1.0,
        collision_radius=0.3,
    )


@pytest.fixture
def triangle_graph():
    """Three nodes joined pairwise plus one unconnected node."""
    from wgsim.core import Graph
    return Graph.from_edges(
        [({1, 2}, 1.0), ({2, 3}, 0.5), ({1, 3}, 0.2)],
        nodes={1, 2, 3, 4},
    )


@pytest.fixture
def random_graph(rng):
    """Twenty nodes with random weighted edges, including one hyper-relation."""
    from wgsim.core import Graph
    nodes = list(range(20))
    edges = []
    for _ in range(30):
        a, b = rng.choice(nodes, size=2, replace=False)
        edges.append(({int(a), int(b)}, float(rng.random())))
    edges.append(({0, 5, 10, 15}, 0.7))
    return Graph.from_edges(edges, nodes=nodes)


@pytest.fixture
def place():
    """Put a node at an exact position with an exact velocity."""

    def _place(sim, node, position, velocity=None):
        sim.begin_interaction(node)
        sim.move_interacted(node, position)
        if velocity is None:
            velocity = np.zeros(sim.dimensions)
        sim.end_interaction(node, release_velocity=velocity)

    return _place
