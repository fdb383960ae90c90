"""Base interface for the ordered phases of a simulation step."""

from __future__ import annotations

from abc import ABC, abstractmethod

from metabolab.core.state import SimulationState


class SimulationProcess(ABC):
    """One phase of the per-step update.

    The engine calls :meth:`step` for every registered process in a fixed
    order. ``snapshot`` holds the molecule concentrations taken at the start
    of the step; processes read rates and regulators from it, never from
    values mutated earlier in the same step.
    """

    name: str = "unnamed"

    @abstractmethod
    def step(self, state: SimulationState, snapshot: dict[str, float], dt: float) -> None:
        """Advance this phase by dt (seconds), mutating ``state``."""
        ...

    def initialize(self, state: SimulationState) -> None:
        """Optional one-time setup after a network is loaded."""
