"""
Visibility culling: hidden nodes stop pushing visible ones around.

A renderer can hide nodes depending on the current zoom level (the
simulator's radius). Hidden nodes keep their state and keep moving, but
with force disabled they no longer disturb the visible part of the layout.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from wgsim.core.simulator import WeightedGraphSimulator

VisibleRange = Callable[[int], "tuple[float, float] | None"]


def is_visible(visible_range: tuple[float, float] | None, radius: float) -> bool:
    """A node is visible when radius lies in its [low, high] range (None = always)."""
    if visible_range is None:
        return True
    low, high = visible_range
    return low <= radius <= high


def apply_visibility(
    simulator: "WeightedGraphSimulator",
    visible_range: VisibleRange,
    disable_hidden: bool = True,
) -> set[int]:
    """
    Enable or disable force per node from its visible radius range.

    Args:
        simulator: Simulator whose nodes to update
        visible_range: node id → (low, high) radius range, or None
        disable_hidden: If False, every node keeps exerting force

    Returns:
        Ids of the hidden nodes
    """
    radius = simulator.radius
    hidden = set()

    for node in simulator.node_ids:
        visible = is_visible(visible_range(node), radius)
        if not visible:
            hidden.add(node)

        if visible or not disable_hidden:
            simulator.enable_force(node)
        else:
            simulator.disable_force(node)

    return hidden
