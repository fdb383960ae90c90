"""Gene expression and enzyme turnover phase."""
from __future__ import annotations

import logging

from metabolab.core.process import SimulationProcess
from metabolab.core.state import SimulationState

logger = logging.getLogger(__name__)


class GeneExpression(SimulationProcess):
    """Degrades enzymes first-order, then adds gene-driven synthesis.

    Degradation acts on the pre-step enzyme concentration; regulator
    occupancies are read from the step snapshot.
    """

    name = "expression"

    def step(self, state: SimulationState, snapshot: dict[str, float], dt: float) -> None:
        synthesis: dict[str, float] = {}
        for gene in state.genes:
            amount = gene.synthesis_amount(dt, snapshot)
            if amount <= 0:
                continue
            if gene.enzyme_id not in state.enzyme_index:
                continue
            synthesis[gene.enzyme_id] = synthesis.get(gene.enzyme_id, 0.0) + amount

        for enzyme in state.enzymes:
            enzyme.apply_degradation(dt, snapshot)
            amount = synthesis.get(enzyme.id)
            if amount:
                enzyme.synthesize(amount)

        if synthesis:
            logger.debug("Synthesized enzymes at t=%.3f: %s", state.time, synthesis)
