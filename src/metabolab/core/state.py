"""Simulation state owned by the engine.

Holds the molecule pool as an explicit map from species id to Molecule,
together with the enzyme, gene and coupling lists, the Cell and the
stoichiometric matrix built at load time.
"""
from __future__ import annotations

import logging

import numpy as np

from metabolab.core.cell import Cell
from metabolab.core.coupling import EnergyCoupling
from metabolab.core.enzyme import Enzyme
from metabolab.core.molecule import Molecule
from metabolab.core.network import Network
from metabolab.core.reaction import Reaction
from metabolab.core.regulation import Gene
from metabolab.core.stoichiometry import StoichiometricMatrix

logger = logging.getLogger(__name__)


class SimulationState:
    """Complete mutable state at a point in time."""

    def __init__(
        self,
        molecules: dict[str, Molecule],
        enzymes: list[Enzyme],
        genes: list[Gene],
        couplings: list[EnergyCoupling],
        cell: Cell,
        *,
        time: float = 0.0,
    ):
        self.time = time
        self.step_count = 0
        self.molecules = molecules
        self.enzymes = enzymes
        self.genes = genes
        self.couplings = couplings
        self.cell = cell

        self.enzyme_index: dict[str, Enzyme] = {e.id: e for e in enzymes}
        self.gene_index: dict[str, Gene] = {g.id: g for g in genes}
        self.reaction_index: dict[str, Reaction] = {
            r.id: r for e in enzymes for r in e.reactions
        }
        self.stoichiometry = StoichiometricMatrix.from_reactions(
            list(self.reaction_index.values()), list(molecules),
        )

    @classmethod
    def from_network(cls, network: Network, cell: Cell | None = None) -> SimulationState:
        """Create an independent state from a deep copy of the network."""
        network = network.model_copy(deep=True)
        molecules: dict[str, Molecule] = {}
        for molecule in network.molecules:
            if molecule.id in molecules:
                logger.warning("Duplicate molecule %s; keeping the last definition", molecule.id)
            molecule.record_initial()
            molecules[molecule.id] = molecule
        for enzyme in network.enzymes:
            for reaction in enzyme.reactions:
                reaction.reset_runtime()
        for gene in network.genes:
            gene.reset_runtime()
        for coupling in network.couplings:
            coupling.reset_runtime()

        state = cls(
            molecules=molecules,
            enzymes=list(network.enzymes),
            genes=list(network.genes),
            couplings=list(network.couplings),
            cell=cell or Cell(),
        )
        state.log_dangling_references()
        return state

    @property
    def reactions(self) -> list[Reaction]:
        return list(self.reaction_index.values())

    def concentrations(self) -> dict[str, float]:
        """Snapshot of every molecule concentration."""
        return {mid: m.concentration for mid, m in self.molecules.items()}

    def enzyme_concentrations(self) -> dict[str, float]:
        return {e.id: e.concentration for e in self.enzymes}

    def net_rate_vector(self) -> np.ndarray:
        """Net rates ordered like the stoichiometric matrix columns."""
        return np.array(
            [self.reaction_index[rid].net_rate for rid in self.stoichiometry.reaction_ids],
            dtype=np.float64,
        )

    def log_dangling_references(self) -> None:
        """Warn about references that will contribute nothing to the dynamics."""
        for reaction in self.reaction_index.values():
            missing = sorted(s for s in reaction.species if s not in self.molecules)
            if missing:
                logger.warning(
                    "Reaction %s references unknown molecules %s; treated as zero",
                    reaction.id, ", ".join(missing),
                )
        for gene in self.genes:
            if gene.enzyme_id not in self.enzyme_index:
                logger.warning("Gene %s produces unknown enzyme %s", gene.id, gene.enzyme_id)
        for coupling in self.couplings:
            for rid in (coupling.source_id, coupling.sink_id):
                if rid not in self.reaction_index:
                    logger.warning("Coupling %s references unknown reaction %s", coupling.id, rid)

    def has_numerical_issue(self) -> bool:
        """Check for NaN or Inf in concentrations."""
        values = np.fromiter(
            (m.concentration for m in self.molecules.values()), dtype=np.float64,
        )
        enzymes = np.fromiter((e.concentration for e in self.enzymes), dtype=np.float64)
        return bool(np.any(~np.isfinite(values)) or np.any(~np.isfinite(enzymes)))

    def clamp(self) -> int:
        """Force every concentration finite and >= 0; returns non-finite repairs."""
        repaired = 0
        for molecule in self.molecules.values():
            if not np.isfinite(molecule.concentration):
                molecule.concentration = 0.0
                repaired += 1
            elif molecule.concentration < 0:
                molecule.concentration = 0.0
        for enzyme in self.enzymes:
            if not np.isfinite(enzyme.concentration):
                enzyme.concentration = 0.0
                repaired += 1
            elif enzyme.concentration < 0:
                enzyme.concentration = 0.0
        return repaired

    def restore_initial(self) -> None:
        """Restore every recorded initial value and clear runtime state."""
        self.time = 0.0
        self.step_count = 0
        for molecule in self.molecules.values():
            molecule.restore_initial()
        for enzyme in self.enzymes:
            enzyme.restore_initial()
        for gene in self.genes:
            gene.reset_runtime()
        for coupling in self.couplings:
            coupling.reset_runtime()
        self.cell.reset()

    def snapshot(self) -> dict:
        """Create a snapshot dict for recording."""
        return {
            "time": self.time,
            "step": self.step_count,
            "concentrations": self.concentrations(),
            "enzyme_concentrations": self.enzyme_concentrations(),
            "net_rates": {rid: r.net_rate for rid, r in self.reaction_index.items()},
            "expression_rates": {g.id: g.expression_rate for g in self.genes},
            "heat": self.cell.heat,
            "usable_energy": self.cell.usable_energy,
            "alive": self.cell.alive,
        }
