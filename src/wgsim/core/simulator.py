"""
WeightedGraphSimulator: real-time force-directed layout integrator.

Each tick runs four phases in a fixed order:

    A. Relational velocities: pairwise forces + pull toward the center + damping
    B. Drift removal: subtract the mean velocity of all nodes
    C. Position integration: p += v·dt
    D. Recentering: move the center by its own (damped) velocity, then
       translate the node cloud so its centroid lands on the center

Interacted nodes (under user control) are never moved by the integrator.
Passive nodes are moved but exert no pairwise force.

The simulator is NOT thread safe. Ticks, graph assignment and interaction
calls must be serialized by the host.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from wgsim.core.forces import (
    center_velocity_delta,
    damping_factor,
    relational_velocity_delta,
)
from wgsim.core.graph import Edge, Graph, WeightPolicy
from wgsim.core.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass
class SimulatorConfig:
    """Configuration for the layout integrator."""

    dimensions: int = 2
    damping: float = 2.0  # Velocity decay per second
    radius: float = 2.0  # Rest distance of connected nodes
    collision_radius: float = 0.5  # Hard minimum separation

    # Force constants
    k_collision: float = 10.0
    k_spring: float = 20.0
    k_center: float = 3.0

    weight_policy: WeightPolicy = "last"  # Combination of overlapping edges
    clamp_damping: bool = True  # Keep 1 - damping·dt within [0, 1]

    def __post_init__(self):
        if self.dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, got {self.dimensions}")
        if self.damping < 0:
            raise ValueError(f"damping must be >= 0, got {self.damping}")
        if self.radius <= 0:
            raise ValueError(f"radius must be > 0, got {self.radius}")
        if self.collision_radius < 0:
            raise ValueError(f"collision_radius must be >= 0, got {self.collision_radius}")
        if self.weight_policy not in ("last", "max", "sum"):
            raise ValueError(f"Unknown weight policy: {self.weight_policy!r}")


@dataclass
class _WeightMatrixCache:
    order: tuple[int, ...] = ()
    matrix: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))


class WeightedGraphSimulator:
    """
    Stateful layout of a weighted graph.

    Usage:
        sim = WeightedGraphSimulator(SimulatorConfig(dimensions=2), center=[0, 0])
        sim.graph = Graph.from_edges([({1, 2}, 1.0)])
        for _ in range(100):
            sim.update(1 / 60)
        sim.positions  # {1: array([...]), 2: array([...])}
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        graph: Graph | None = None,
        center: Sequence[float] | None = None,
        rng: np.random.Generator | None = None,
    ):
        """
        Create a simulator.

        Args:
            config: Simulation parameters (defaults to 2D)
            graph: Initial graph (empty if None)
            center: Point the graph gravitates toward; length must equal
                    config.dimensions (origin if None)
            rng: Random source for initial node placement
        """
        self.config = config if config is not None else SimulatorConfig()
        dims = self.config.dimensions

        if center is None:
            center = np.zeros(dims)
        self._center = self._vector(center, "center")
        self._center_velocity = np.zeros(dims, dtype=np.float64)

        self.state = SimulationState(dims, rng=rng, weight_policy=self.config.weight_policy)
        self._weights = _WeightMatrixCache()

        self.current_tick = 0
        self.elapsed = 0.0

        if graph is not None:
            self.graph = graph

    # ═══════════════════════════════════════════════════════════════
    # CONFIGURATION ACCESSORS
    # ═══════════════════════════════════════════════════════════════

    @property
    def dimensions(self) -> int:
        return self.config.dimensions

    @property
    def radius(self) -> float:
        return self.config.radius

    @radius.setter
    def radius(self, value: float):
        if value <= 0:
            raise ValueError(f"radius must be > 0, got {value}")
        self.config.radius = float(value)

    @property
    def collision_radius(self) -> float:
        return self.config.collision_radius

    @collision_radius.setter
    def collision_radius(self, value: float):
        if value < 0:
            raise ValueError(f"collision_radius must be >= 0, got {value}")
        self.config.collision_radius = float(value)

    @property
    def damping(self) -> float:
        return self.config.damping

    @damping.setter
    def damping(self, value: float):
        if value < 0:
            raise ValueError(f"damping must be >= 0, got {value}")
        self.config.damping = float(value)

    @property
    def center(self) -> np.ndarray:
        """Current center point (copy)."""
        return self._center.copy()

    @center.setter
    def center(self, value: Sequence[float]):
        self._center = self._vector(value, "center")

    @property
    def center_velocity(self) -> np.ndarray:
        """Current drift of the center point (copy)."""
        return self._center_velocity.copy()

    @center_velocity.setter
    def center_velocity(self, value: Sequence[float]):
        self._center_velocity = self._vector(value, "center_velocity")

    # ═══════════════════════════════════════════════════════════════
    # GRAPH ASSIGNMENT
    # ═══════════════════════════════════════════════════════════════

    @property
    def graph(self) -> Graph:
        return self.state.graph

    @graph.setter
    def graph(self, graph: Graph):
        self._assign(graph)

    def set_graph(
        self,
        nodes: Iterable[int],
        edges: Iterable[Edge | tuple[Iterable[int], float]],
    ) -> tuple[set[int], set[int]]:
        """
        Replace the active graph.

        Args:
            nodes: Node ids
            edges: Edge objects or (member ids, weight) tuples

        Returns:
            (added ids, removed ids)
        """
        edge_list = tuple(
            e if isinstance(e, Edge) else Edge(frozenset(e[0]), e[1]) for e in edges
        )
        return self._assign(Graph(frozenset(nodes), edge_list))

    def _assign(self, graph: Graph) -> tuple[set[int], set[int]]:
        added, removed = self.state.reconcile(
            graph, self._center, self.config.radius, self.config.weight_policy
        )
        self._weights = _WeightMatrixCache()
        return added, removed

    # ═══════════════════════════════════════════════════════════════
    # OUTBOUND SNAPSHOTS
    # ═══════════════════════════════════════════════════════════════

    @property
    def node_ids(self) -> list[int]:
        return list(self.state.nodes)

    @property
    def positions(self) -> dict[int, np.ndarray]:
        """Snapshot node id → position (copies)."""
        return {node: s.position.copy() for node, s in self.state.nodes.items()}

    @property
    def velocities(self) -> dict[int, np.ndarray]:
        """Snapshot node id → velocity (copies)."""
        return {node: s.velocity.copy() for node, s in self.state.nodes.items()}

    def position(self, node: int) -> np.ndarray | None:
        """Position of node, or None if the node does not exist."""
        s = self.state.nodes.get(node)
        return None if s is None else s.position.copy()

    def velocity(self, node: int) -> np.ndarray | None:
        """Velocity of node, or None if the node does not exist."""
        s = self.state.nodes.get(node)
        return None if s is None else s.velocity.copy()

    def weight(self, a: int, b: int) -> float:
        return self.state.weight(a, b)

    @property
    def interacted_nodes(self) -> frozenset[int]:
        return frozenset(self.state.interacted)

    @property
    def passive_nodes(self) -> frozenset[int]:
        return frozenset(self.state.passive)

    # ═══════════════════════════════════════════════════════════════
    # INTERACTION CONTROLLER
    # ═══════════════════════════════════════════════════════════════

    def begin_interaction(self, node: int) -> None:
        """Hand control of node's position to the caller."""
        if node in self.state.nodes:
            self.state.interacted.add(node)

    def move_interacted(self, node: int, position: Sequence[float]) -> None:
        """Overwrite node's position. Unknown ids are ignored."""
        target = self._vector(position, "position")
        s = self.state.nodes.get(node)
        if s is not None:
            s.position[:] = target

    def end_interaction(
        self,
        node: int,
        release_velocity: Sequence[float] | None = None,
    ) -> None:
        """
        Return node to free integration.

        Args:
            node: Node id
            release_velocity: Optional "throw" velocity; the current velocity
                              is kept when omitted
        """
        velocity = None if release_velocity is None else self._vector(release_velocity, "release_velocity")
        self.state.interacted.discard(node)
        s = self.state.nodes.get(node)
        if s is not None and velocity is not None:
            s.velocity[:] = velocity

    def disable_force(self, node: int) -> None:
        """Stop node from exerting pairwise force (it still moves)."""
        if node in self.state.nodes:
            self.state.passive.add(node)

    def enable_force(self, node: int) -> None:
        self.state.passive.discard(node)

    def set_center(
        self,
        point: Sequence[float],
        inertial_velocity: Sequence[float] | None = None,
    ) -> None:
        """
        Relocate the center.

        Without inertial_velocity the center stops; with it, the center keeps
        drifting and slows down through damping.
        """
        center = self._vector(point, "center")
        if inertial_velocity is None:
            velocity = np.zeros(self.dimensions, dtype=np.float64)
        else:
            velocity = self._vector(inertial_velocity, "inertial_velocity")
        self._center = center
        self._center_velocity = velocity

    # ═══════════════════════════════════════════════════════════════
    # INTEGRATOR
    # ═══════════════════════════════════════════════════════════════

    def update(self, delta_time: float, substeps: int = 1) -> None:
        """
        Advance the simulation by delta_time seconds.

        Args:
            delta_time: Elapsed time; large values are accepted as-is
            substeps: Number of equal integration steps to split delta_time into
        """
        if substeps < 1:
            raise ValueError(f"substeps must be >= 1, got {substeps}")

        dt = float(delta_time) / substeps
        for _ in range(substeps):
            self._tick(dt)

    def run(self, n_ticks: int, delta_time: float = 1 / 60) -> dict:
        """Run n_ticks fixed-size ticks and summarize the result."""
        for _ in range(n_ticks):
            self._tick(delta_time)

        positions = np.array([s.position for s in self.state.nodes.values()])
        velocities = np.array([s.velocity for s in self.state.nodes.values()])
        n = len(self.state.nodes)

        return {
            "n_ticks": n_ticks,
            "current_tick": self.current_tick,
            "elapsed": self.elapsed,
            "n_nodes": n,
            "mean_speed": float(np.linalg.norm(velocities, axis=1).mean()) if n else 0.0,
            "max_speed": float(np.linalg.norm(velocities, axis=1).max()) if n else 0.0,
            "centroid": positions.mean(axis=0) if n else self.center,
        }

    def _tick(self, dt: float):
        """One integration step over all nodes."""
        self.current_tick += 1
        self.elapsed += dt

        node_ids = self.node_ids
        if not node_ids:
            self._advance_center(dt)
            return

        positions, velocities = self.state.stack(node_ids)
        interacted, passive = self.state.masks(node_ids)
        movable = ~interacted

        velocities = self._update_relational_velocities(
            node_ids, positions, velocities, movable, ~passive, dt
        )
        self._remove_global_drift(velocities, movable)
        self._apply_velocities(positions, velocities, movable, dt)
        self._recenter_graph(positions, movable, dt)

        for i in np.flatnonzero(movable):
            s = self.state.nodes[node_ids[i]]
            s.position[:] = positions[i]
            s.velocity[:] = velocities[i]

    def _update_relational_velocities(
        self,
        node_ids: list[int],
        positions: np.ndarray,
        velocities: np.ndarray,
        movable: np.ndarray,
        active: np.ndarray,
        dt: float,
    ) -> np.ndarray:
        """Phase A. Reads the position snapshot only."""
        cfg = self.config

        delta = relational_velocity_delta(
            positions,
            self._weight_matrix(node_ids),
            movable,
            active,
            dt,
            cfg.radius,
            cfg.collision_radius,
            cfg.k_collision,
            cfg.k_spring,
        )
        delta += center_velocity_delta(positions, self._center, cfg.k_center * dt / cfg.radius)

        factor = damping_factor(cfg.damping, dt, cfg.clamp_damping)
        if cfg.clamp_damping and cfg.damping * dt > 1.0:
            logger.debug("Damping clamped at tick %d (damping=%.3g, dt=%.3g)", self.current_tick, cfg.damping, dt)
        return np.where(movable[:, None], (velocities + delta) * factor, velocities)

    def _remove_global_drift(self, velocities: np.ndarray, movable: np.ndarray):
        """Phase B. Mean over every node, subtracted from movable ones."""
        drift = velocities.sum(axis=0) / max(1, velocities.shape[0])
        velocities[movable] -= drift

    def _apply_velocities(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        movable: np.ndarray,
        dt: float,
    ):
        """Phase C."""
        positions[movable] += velocities[movable] * dt

    def _recenter_graph(self, positions: np.ndarray, movable: np.ndarray, dt: float):
        """Phase D. Translate the cloud so its centroid follows the center."""
        self._advance_center(dt)

        centroid = positions.sum(axis=0) / max(1, positions.shape[0])
        positions[movable] += self._center - centroid

    def _advance_center(self, dt: float):
        cfg = self.config
        self._center = self._center + self._center_velocity * dt
        self._center_velocity = self._center_velocity * damping_factor(cfg.damping, dt, cfg.clamp_damping)

    def _weight_matrix(self, node_ids: list[int]) -> np.ndarray:
        order = tuple(node_ids)
        if order != self._weights.order:
            self._weights = _WeightMatrixCache(order, self.state.weight_matrix(node_ids))
        return self._weights.matrix

    def _vector(self, value: Sequence[float], name: str) -> np.ndarray:
        vector = np.array(value, dtype=np.float64).reshape(-1)
        if vector.shape[0] != self.config.dimensions:
            raise ValueError(
                f"Dimensionality of {name} ({vector.shape[0]}) must match "
                f"number of dimensions ({self.config.dimensions})"
            )
        return vector
