"""
Core layout primitives.

This layer knows NOTHING about screens, gestures or clocks.
It only knows:
- Graph snapshots and the weight cache derived from them
- Per-node position/velocity state, reconciled on graph assignment
- The four-phase force integrator
- Which nodes are under user control or exert no force
"""

from wgsim.core.graph import Edge, Graph, WeightPolicy, build_weight_cache
from wgsim.core.state import NodeState, SimulationState
from wgsim.core.forces import (
    pair_acceleration,
    relational_velocity_delta,
    center_velocity_delta,
    damping_factor,
)
from wgsim.core.simulator import SimulatorConfig, WeightedGraphSimulator

__all__ = [
    "Edge",
    "Graph",
    "WeightPolicy",
    "build_weight_cache",
    "NodeState",
    "SimulationState",
    "pair_acceleration",
    "relational_velocity_delta",
    "center_velocity_delta",
    "damping_factor",
    "SimulatorConfig",
    "WeightedGraphSimulator",
]
