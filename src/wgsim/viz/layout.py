"""
2D visualization of a layout.

Provides:
- Snapshot plots: nodes at their current positions, edges between them
- Trajectory plots: how nodes moved over a run
- Live animation driven by a TickDriver

The simulator never imports this module; it only reads position snapshots.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.axes import Axes
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure

from wgsim.presentation.driver import TickDriver

if TYPE_CHECKING:
    from wgsim.core.simulator import WeightedGraphSimulator


NODE_COLOR = "#3a5da8"
INTERACTED_COLOR = "#d1495b"
PASSIVE_COLOR = "#b0b0b0"
EDGE_COLOR = "#7a7a7a"


def edge_segments(simulator: "WeightedGraphSimulator") -> tuple[np.ndarray, np.ndarray]:
    """
    Line segments for every drawable edge pair.

    Pairs whose endpoints have no state are skipped.

    Returns:
        (segments [m, 2, 2], weights [m])
    """
    positions = simulator.positions
    segments = []
    weights = []
    for a, b, w in simulator.graph.edge_pairs():
        if a in positions and b in positions:
            segments.append((positions[a][:2], positions[b][:2]))
            weights.append(w)
    return np.array(segments, dtype=np.float64).reshape(-1, 2, 2), np.array(weights)


def node_colors(simulator: "WeightedGraphSimulator") -> list[str]:
    """Color per node (in node_ids order) showing interacted/passive flags."""
    interacted = simulator.interacted_nodes
    passive = simulator.passive_nodes
    colors = []
    for node in simulator.node_ids:
        if node in interacted:
            colors.append(INTERACTED_COLOR)
        elif node in passive:
            colors.append(PASSIVE_COLOR)
        else:
            colors.append(NODE_COLOR)
    return colors


def plot_layout(
    simulator: "WeightedGraphSimulator",
    title: str = "Layout",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 8),
    labels: bool = True,
    node_size: float = 120.0,
    show_center: bool = True,
) -> tuple[Figure, Axes]:
    """
    Plot the current 2D layout.

    Edge line width scales with edge weight. Only the first two coordinates
    are drawn for higher-dimensional simulations.

    Args:
        simulator: Simulator to draw
        title: Plot title
        ax: Existing axes (creates new if None)
        labels: Annotate nodes with their ids
        node_size: Marker area
        show_center: Mark the simulation center

    Returns:
        (fig, ax) tuple
    """
    if simulator.dimensions < 2:
        raise ValueError("plot_layout needs at least 2 dimensions")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    segments, weights = edge_segments(simulator)
    if len(segments):
        lines = LineCollection(
            segments,
            colors=EDGE_COLOR,
            linewidths=0.5 + 1.5 * np.clip(weights, 0.0, 1.0),
            zorder=1,
        )
        ax.add_collection(lines)

    positions = simulator.positions
    node_ids = simulator.node_ids
    if node_ids:
        points = np.array([positions[n][:2] for n in node_ids])
        ax.scatter(
            points[:, 0], points[:, 1],
            s=node_size, c=node_colors(simulator),
            edgecolors="white", linewidths=1.0, zorder=2,
        )
        if labels:
            for node, (x, y) in zip(node_ids, points):
                ax.annotate(str(node), (x, y), ha="center", va="center", fontsize=7, color="white", zorder=3)

    if show_center:
        cx, cy = simulator.center[:2]
        ax.scatter([cx], [cy], marker="+", color="black", s=80, zorder=3, label="Center")

    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_aspect("equal", adjustable="datalim")
    ax.autoscale_view()

    return fig, ax


def record_trajectories(
    simulator: "WeightedGraphSimulator",
    n_ticks: int,
    delta_time: float = 1 / 60,
) -> dict[int, np.ndarray]:
    """
    Run the simulator and record positions after every tick.

    Nodes added or removed during recording are not handled; record on a
    fixed graph.

    Returns:
        node id → [n_ticks + 1, dimensions] array (initial position first)
    """
    history = {node: [p] for node, p in simulator.positions.items()}
    for _ in range(n_ticks):
        simulator.update(delta_time)
        for node, p in simulator.positions.items():
            history.setdefault(node, []).append(p)
    return {node: np.array(points) for node, points in history.items()}


def plot_trajectories(
    trajectories: dict[int, np.ndarray],
    title: str = "Node Trajectories",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 8),
    show_start: bool = True,
    show_end: bool = True,
) -> tuple[Figure, Axes]:
    """Plot recorded node paths (first two coordinates)."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    colors = plt.cm.tab10.colors
    for i, (node, path) in enumerate(sorted(trajectories.items())):
        color = colors[i % len(colors)]
        ax.plot(path[:, 0], path[:, 1], color=color, linewidth=1.2, label=str(node))
        if show_start:
            ax.scatter([path[0, 0]], [path[0, 1]], color=color, marker="o", s=30)
        if show_end:
            ax.scatter([path[-1, 0]], [path[-1, 1]], color=color, marker="x", s=40)

    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_aspect("equal", adjustable="datalim")
    if 0 < len(trajectories) <= 10:
        ax.legend(loc="upper right", fontsize=8)

    return fig, ax


def animate_layout(
    simulator: "WeightedGraphSimulator",
    frames: int = 300,
    delta_time: float = 1 / 30,
    integration_steps: int = 1,
    figsize: tuple[float, float] = (8, 8),
    limits: tuple[float, float] | None = None,
) -> FuncAnimation:
    """
    Live animation of the layout.

    Each animation frame advances a TickDriver by delta_time and redraws.

    Args:
        simulator: Simulator to animate
        frames: Number of frames
        delta_time: Simulated seconds per frame
        integration_steps: Sub-steps per frame
        limits: Symmetric axis half-width around the center, e.g. (-5, 5);
                autoscaled if None
    """
    fig, ax = plt.subplots(figsize=figsize)
    driver = TickDriver(simulator, integration_steps=integration_steps, max_delta=None)
    driver.start()
    driver.frame(0.0)

    def draw(frame: int):
        driver.frame((frame + 1) * delta_time)
        ax.clear()
        plot_layout(simulator, title=f"Layout, tick {simulator.current_tick}", ax=ax, labels=False)
        if limits is not None:
            ax.set_xlim(*limits)
            ax.set_ylim(*limits)
        return ax.collections

    return FuncAnimation(fig, draw, frames=frames, interval=delta_time * 1000, blit=False)


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
