"""Cell energetics phase: heat/energy aggregation and energy coupling."""
from __future__ import annotations

import logging

from metabolab.core.process import SimulationProcess
from metabolab.core.state import SimulationState

logger = logging.getLogger(__name__)


class CellEnergetics(SimulationProcess):
    """Aggregates reaction work and heat into the Cell, then runs couplings.

    Survival checking (thermal runaway / insufficient metabolism) only kills
    the cell when ``death_on_thermal_extremes`` is enabled.
    """

    name = "energetics"

    def __init__(self, death_on_thermal_extremes: bool = False) -> None:
        self.death_on_thermal_extremes = death_on_thermal_extremes

    def step(self, state: SimulationState, snapshot: dict[str, float], dt: float) -> None:
        reactions = state.reactions
        state.cell.update_heat(dt, reactions)
        state.cell.update_energy(dt, reactions)
        state.cell.check_survival(self.death_on_thermal_extremes)
        self._apply_couplings(state, dt)

    def _apply_couplings(self, state: SimulationState, dt: float) -> None:
        if not state.couplings:
            return
        for reaction in state.reactions:
            reaction.coupling_energy = 0.0
        for coupling in state.couplings:
            transferred = coupling.apply_coupling(
                state.reaction_index.get(coupling.source_id),
                state.reaction_index.get(coupling.sink_id),
                dt,
            )
            if transferred:
                logger.debug(
                    "Coupling %s transferred %.3f kJ/mol to %s",
                    coupling.id, transferred, coupling.sink_id,
                )
