"""
SimulationState: per-node position/velocity store.

The store knows NOTHING about forces. It only knows:
- Which node ids currently exist and their position/velocity vectors
- The weight cache of the active graph
- Which nodes are interacted (driven externally) or passive (exert no force)
- Where to place a node the first time it appears

Reconciliation against a new graph never touches nodes that stay present.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from wgsim.core.graph import Graph, WeightPolicy, build_weight_cache

logger = logging.getLogger(__name__)

# Number of existing positions averaged to place a new node
PLACEMENT_SAMPLES = 4
# Resampling attempts when a sampled position lands on an existing node
PLACEMENT_ATTEMPTS = 8


@dataclass
class NodeState:
    """Position and velocity of one node. Both arrays are owned by the node."""

    position: np.ndarray
    velocity: np.ndarray


class SimulationState:
    """
    Node states for the currently assigned graph.

    IMPORTANT: arrays stored here are updated in place by the integrator.
    Callers that need a stable snapshot must copy.
    """

    def __init__(
        self,
        dimensions: int,
        rng: np.random.Generator | None = None,
        weight_policy: WeightPolicy = "last",
    ):
        if dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, got {dimensions}")

        self.dimensions = dimensions
        self.rng = rng if rng is not None else np.random.default_rng()
        self.weight_policy = weight_policy

        self.graph = Graph.empty()
        self.nodes: dict[int, NodeState] = {}
        self.weights: dict[int, dict[int, float]] = {}

        # Node ids whose position is owned by an external controller
        self.interacted: set[int] = set()
        # Node ids that exert no pairwise force on others
        self.passive: set[int] = set()

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self.nodes

    def weight(self, a: int, b: int) -> float:
        """Cached weight between a and b (0 when unconnected)."""
        return self.weights.get(a, {}).get(b, 0.0)

    def reconcile(
        self,
        graph: Graph,
        center: Sequence[float],
        radius: float,
        weight_policy: WeightPolicy | None = None,
    ) -> tuple[set[int], set[int]]:
        """
        Make the node set match a newly assigned graph.

        Steps:
            1. Rebuild the weight cache from the new edges
            2. Drop state (and flags) of ids missing from the new graph
            3. Create state for new ids, ascending, with zero velocity

        Args:
            graph: The new graph snapshot
            center: Current simulation center (used for initial placement)
            radius: Current rest distance (used for initial placement)
            weight_policy: Replaces the stored policy for this and later
                           assignments when given

        Returns:
            (added ids, removed ids)
        """
        policy = self.weight_policy if weight_policy is None else weight_policy
        self.weights = build_weight_cache(graph.edges, policy)
        self.weight_policy = policy
        self.graph = graph

        removed = set(self.nodes) - graph.nodes
        for node in removed:
            del self.nodes[node]
        self.interacted -= removed
        self.passive -= removed

        added = sorted(graph.nodes - set(self.nodes))
        for node in added:
            self.nodes[node] = NodeState(
                position=self.initial_position(center, radius),
                velocity=np.zeros(self.dimensions, dtype=np.float64),
            )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Reconciled graph: %d nodes (%d added, %d removed), %d weighted pairs",
                len(self.nodes),
                len(added),
                len(removed),
                sum(len(row) for row in self.weights.values()),
            )

        return set(added), removed

    def initial_position(self, center: Sequence[float], radius: float) -> np.ndarray:
        """
        Starting position for a new node that does not sit on an existing one.

        Coincident nodes feel no force from each other and would move as one,
        so occupied samples are redrawn and finally jittered.
        """
        for _ in range(PLACEMENT_ATTEMPTS):
            candidate = self._sample_position(center, radius)
            if not self._is_occupied(candidate):
                return candidate

        logger.debug("No free placement after %d attempts, jittering", PLACEMENT_ATTEMPTS)
        return candidate + self.rng.normal(scale=1e-3 * max(radius, 1e-6), size=self.dimensions)

    def _is_occupied(self, point: np.ndarray) -> bool:
        return any(np.array_equal(s.position, point) for s in self.nodes.values())

    def _sample_position(self, center: Sequence[float], radius: float) -> np.ndarray:
        """
        Sample a starting position for a node that just appeared.

        - With enough existing nodes: mean of a few random existing positions,
          so new nodes appear inside the existing mass
        - 2D: random point on a circle of radius·sqrt(n) around the center
        - Otherwise: uniform in the unit cube
        """
        count = len(self.nodes)

        if count >= PLACEMENT_SAMPLES:
            states = list(self.nodes.values())
            picks = np.sort(self.rng.choice(count, size=PLACEMENT_SAMPLES, replace=False))
            return np.mean([states[i].position for i in picks], axis=0)

        if self.dimensions == 2:
            angle = self.rng.random() * 2.0 * np.pi
            distance = radius * np.sqrt(count)
            return np.array(
                [
                    np.cos(angle) * distance + center[0],
                    np.sin(angle) * distance + center[1],
                ],
                dtype=np.float64,
            )

        return self.rng.random(self.dimensions)

    def stack(self, node_ids: Sequence[int]) -> tuple[np.ndarray, np.ndarray]:
        """Copy positions and velocities of node_ids into [n, dimensions] arrays."""
        shape = (len(node_ids), self.dimensions)
        positions = np.empty(shape, dtype=np.float64)
        velocities = np.empty(shape, dtype=np.float64)
        for i, node in enumerate(node_ids):
            state = self.nodes[node]
            positions[i] = state.position
            velocities[i] = state.velocity
        return positions, velocities

    def masks(self, node_ids: Sequence[int]) -> tuple[np.ndarray, np.ndarray]:
        """Boolean (interacted, passive) masks aligned with node_ids."""
        interacted = np.fromiter((n in self.interacted for n in node_ids), dtype=bool, count=len(node_ids))
        passive = np.fromiter((n in self.passive for n in node_ids), dtype=bool, count=len(node_ids))
        return interacted, passive

    def weight_matrix(self, node_ids: Sequence[int]) -> np.ndarray:
        """Dense [n, n] weight matrix aligned with node_ids."""
        n = len(node_ids)
        index = {node: i for i, node in enumerate(node_ids)}
        matrix = np.zeros((n, n), dtype=np.float64)
        for a, row in self.weights.items():
            i = index.get(a)
            if i is None:
                continue
            for b, w in row.items():
                j = index.get(b)
                if j is not None:
                    matrix[i, j] = w
        return matrix
