"""
TickDriver: feeds frame timestamps from a clock into the simulator.

The host calls frame(timestamp) once per rendered frame (a display link,
a matplotlib animation callback, a game loop). The driver:
1. Ignores frames while stopped
2. Uses the first frame after start() only to record the timestamp
3. Caps the elapsed time so a stalled host does not blow up the layout
4. Splits the step into integration_steps equal sub-steps
5. Calls on_update after the simulator has moved
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from wgsim.core.simulator import WeightedGraphSimulator

logger = logging.getLogger(__name__)


class TickDriver:
    """Single caller of WeightedGraphSimulator.update."""

    def __init__(
        self,
        simulator: "WeightedGraphSimulator",
        integration_steps: int = 1,
        max_delta: float | None = 0.1,
        on_update: Callable[[], None] | None = None,
    ):
        """
        Args:
            simulator: Simulator to drive
            integration_steps: Sub-steps per frame (> 0)
            max_delta: Longest frame gap passed on, in seconds (None = no cap)
            on_update: Called after every frame that advanced the simulation
        """
        self.simulator = simulator
        self.integration_steps = integration_steps
        self.max_delta = max_delta
        self.on_update = on_update

        self._last_timestamp: float | None = None
        self._running = False
        self.frames = 0

    @property
    def integration_steps(self) -> int:
        return self._integration_steps

    @integration_steps.setter
    def integration_steps(self, value: int):
        if value <= 0:
            raise ValueError(f"The number of integration steps must be greater than zero, got {value}")
        self._integration_steps = value

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        """Stop driving; the next start() begins with a fresh timestamp."""
        self._running = False
        self._last_timestamp = None

    def frame(self, timestamp: float) -> float:
        """
        Advance the simulation to timestamp.

        Args:
            timestamp: Monotonic clock reading in seconds

        Returns:
            The delta actually integrated (0 if nothing happened)
        """
        if not self._running:
            return 0.0

        last = self._last_timestamp
        self._last_timestamp = timestamp
        if last is None:
            return 0.0

        delta = max(0.0, timestamp - last)
        if self.max_delta is not None and delta > self.max_delta:
            logger.debug("Frame gap %.3fs capped to %.3fs", delta, self.max_delta)
            delta = self.max_delta

        self.simulator.update(delta, substeps=self.integration_steps)
        self.frames += 1

        if self.on_update is not None:
            self.on_update()
        return delta
