"""Metabolism phase: reaction rates and stoichiometric updates.

Every enzyme evaluates its reactions against the step snapshot, then the
net rates are applied to the molecule pool through the sparse
stoichiometric matrix (explicit Euler, dC = S @ v * dt).
"""
from __future__ import annotations

import logging

from metabolab.core.process import SimulationProcess
from metabolab.core.state import SimulationState

logger = logging.getLogger(__name__)


class Metabolism(SimulationProcess):
    """Michaelis-Menten kinetics with thermodynamic gating."""

    name = "metabolism"

    def step(self, state: SimulationState, snapshot: dict[str, float], dt: float) -> None:
        for enzyme in state.enzymes:
            enzyme.update_reaction_rates(snapshot)

        if state.stoichiometry.num_reactions == 0:
            return

        deltas = state.stoichiometry.compute_flux(state.net_rate_vector()) * dt
        for mid, delta in zip(state.stoichiometry.molecule_ids, deltas):
            if delta == 0.0:
                continue
            molecule = state.molecules[mid]
            if molecule.locked:
                continue
            molecule.concentration = snapshot[mid] + float(delta)
