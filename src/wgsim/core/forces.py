"""
Force kernels for the layout integrator.

All kernels are vectorised over a [n, dimensions] position snapshot and
return velocity increments; they never mutate their inputs.

Pair acceleration (n feels m, along the unnormalised vector p_m - p_n):

    d < collision_radius : (-1/d² + 1/collision_radius²) · k_collision
    weight == 0          : -(1/d²) · radius
    otherwise            : ((d - radius) / d) · (0.3·w + 0.2) · k_spring

Positive values pull n toward m, negative values push it away.
"""

from __future__ import annotations

import numpy as np
from scipy.spatial.distance import cdist


def pair_acceleration(
    distance: np.ndarray,
    weight: np.ndarray,
    radius: float,
    collision_radius: float,
    k_collision: float = 10.0,
    k_spring: float = 20.0,
) -> np.ndarray:
    """
    Scalar acceleration factor for each pair.

    Args:
        distance: Pair distances (any shape)
        weight: Pair weights, same shape as distance
        radius: Rest distance of connected pairs
        collision_radius: Separation below which pairs repel hard

    Returns:
        Factors to multiply with (p_m - p_n). Coincident pairs (d == 0) get 0.
    """
    distance = np.asarray(distance, dtype=np.float64)
    weight = np.asarray(weight, dtype=np.float64)

    # collision_radius == 0 disables the collision branch
    floor = 1.0 / collision_radius**2 if collision_radius > 0 else 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        inv_sq = 1.0 / distance**2
        collision = (-inv_sq + floor) * k_collision
        repulsion = -inv_sq * radius
        strength = weight * 0.3 + 0.2
        spring = (distance - radius) / distance * strength * k_spring

        acceleration = np.where(
            distance < collision_radius,
            collision,
            np.where(weight == 0, repulsion, spring),
        )

    return np.where(distance > 0, acceleration, 0.0)


def relational_velocity_delta(
    positions: np.ndarray,
    weights: np.ndarray,
    movable: np.ndarray,
    active: np.ndarray,
    delta_time: float,
    radius: float,
    collision_radius: float,
    k_collision: float = 10.0,
    k_spring: float = 20.0,
) -> np.ndarray:
    """
    Velocity change from all pairwise interactions during one tick.

    Every node reads the same position snapshot, so the result does not
    depend on node order.

    Args:
        positions: [n, d] position snapshot
        weights: [n, n] weight matrix (weights[i, j] = weight(i, j))
        movable: [n] bool, rows that receive force (not interacted)
        active: [n] bool, columns that exert force (not passive)
        delta_time: Tick length in seconds

    Returns:
        [n, d] velocity increments (zero rows for non-movable nodes)
    """
    n = positions.shape[0]
    if n == 0:
        return np.zeros_like(positions)

    distance = cdist(positions, positions)
    acceleration = pair_acceleration(
        distance, weights, radius, collision_radius, k_collision, k_spring
    )

    mask = np.logical_and.outer(movable, active)
    np.fill_diagonal(mask, False)
    acceleration = np.where(mask, acceleration, 0.0)

    # Σ_m a_nm (p_m - p_n) = A·P - (Σ_m a_nm) p_n
    delta = acceleration @ positions - acceleration.sum(axis=1)[:, None] * positions
    return delta * delta_time


def center_velocity_delta(
    positions: np.ndarray,
    center: np.ndarray,
    factor: float,
) -> np.ndarray:
    """
    Pull toward the center, attenuated by 1 / (distance + 1).

    Args:
        positions: [n, d] positions
        center: [d] center point
        factor: Overall scale (k_center · dt / radius)
    """
    direction = center[None, :] - positions
    distance = np.linalg.norm(direction, axis=1)
    return direction * (factor / (distance + 1.0))[:, None]


def damping_factor(damping: float, delta_time: float, clamp: bool = True) -> float:
    """
    Velocity multiplier 1 - damping·dt.

    With clamp=True the factor stays in [0, 1] so large steps stop motion
    instead of reversing it.
    """
    factor = 1.0 - damping * delta_time
    if clamp:
        return min(1.0, max(0.0, factor))
    return factor
