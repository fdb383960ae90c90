"""Sparse stoichiometric matrix (molecules x reactions).

Uses scipy.sparse CSR format; S[i, j] is the coefficient of molecule i in
reaction j, negative when consumed and positive when produced.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy import sparse

from metabolab.core.reaction import Reaction


class StoichiometricMatrix:
    """Maps a vector of net reaction rates to concentration derivatives."""

    def __init__(
        self,
        molecule_ids: list[str],
        reaction_ids: list[str],
        matrix: sparse.coo_matrix | None = None,
    ):
        self.molecule_ids = molecule_ids
        self.reaction_ids = reaction_ids
        self._mol_index = {mid: i for i, mid in enumerate(molecule_ids)}

        if matrix is not None:
            self.matrix = matrix.tocsr()
        else:
            self.matrix = sparse.csr_matrix((len(molecule_ids), len(reaction_ids)))

    @property
    def num_molecules(self) -> int:
        return len(self.molecule_ids)

    @property
    def num_reactions(self) -> int:
        return len(self.reaction_ids)

    @classmethod
    def from_reactions(
        cls,
        reactions: Sequence[Reaction],
        molecule_ids: Sequence[str],
    ) -> StoichiometricMatrix:
        """Build from reactions; species absent from ``molecule_ids`` are skipped."""
        met_ids = list(molecule_ids)
        rxn_ids = [r.id for r in reactions]
        met_index = {mid: i for i, mid in enumerate(met_ids)}

        rows: list[int] = []
        cols: list[int] = []
        vals: list[float] = []

        for j, rxn in enumerate(reactions):
            for species, coeff in rxn.substrates.items():
                mi = met_index.get(species)
                if mi is not None:
                    rows.append(mi)
                    cols.append(j)
                    vals.append(-abs(coeff))

            for species, coeff in rxn.products.items():
                mi = met_index.get(species)
                if mi is not None:
                    rows.append(mi)
                    cols.append(j)
                    vals.append(abs(coeff))

        coo = sparse.coo_matrix(
            (vals, (rows, cols)),
            shape=(len(met_ids), len(rxn_ids)),
        )
        return cls(met_ids, rxn_ids, coo)

    def index_of(self, molecule_id: str) -> int | None:
        return self._mol_index.get(molecule_id)

    def compute_flux(self, rates: np.ndarray) -> np.ndarray:
        """dC/dt = S @ v"""
        if self.num_reactions == 0:
            return np.zeros(self.num_molecules, dtype=np.float64)
        return np.asarray(self.matrix @ rates).flatten()

    def to_dense(self) -> np.ndarray:
        return self.matrix.toarray()
