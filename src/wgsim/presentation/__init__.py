"""
Presentation-side collaborators of the simulator.

These sit between a host UI and the core:
- TickDriver: turns frame timestamps into update(dt) calls
- apply_visibility: disables force on nodes a renderer hides
"""

from wgsim.presentation.driver import TickDriver
from wgsim.presentation.visibility import apply_visibility

__all__ = [
    "TickDriver",
    "apply_visibility",
]
