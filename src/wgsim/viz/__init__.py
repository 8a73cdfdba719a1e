"""
Visualization utilities.

- Layout snapshots (nodes, weighted edges, center)
- Node trajectories over a run
- Live animation
"""

from wgsim.viz.layout import (
    edge_segments,
    node_colors,
    plot_layout,
    record_trajectories,
    plot_trajectories,
    animate_layout,
    save_figure,
)

__all__ = [
    "edge_segments",
    "node_colors",
    "plot_layout",
    "record_trajectories",
    "plot_trajectories",
    "animate_layout",
    "save_figure",
]
