"""
wgsim: Weighted Graph Force-Directed Layout Simulator

A real-time layout engine for weighted (hyper)graphs.

Core concepts:
- Connected nodes are pulled toward a rest distance by springs
- Unconnected nodes push each other apart, weakly
- Nodes closer than the collision radius repel hard
- Everything is pulled toward a center point that can itself drift
- Graph edits keep the state of nodes that remain present

The integrator is continuous and approximate: it relaxes the layout a
little on every tick rather than solving for a global optimum.
"""

__version__ = "0.1.0"
