"""Reaction kinetics and thermodynamics.

A reaction converts substrates into products with Michaelis-Menten kinetics
bounded by the limiting substrate, gated and damped by the instantaneous
Gibbs free energy:

    dG = dG0 + RT * ln(Q),   Q = prod([P]^v) / prod([S]^v)

The reverse maximal rate follows the Haldane relationship
Vmax_rev = Vmax / Keq, with Keq = exp(-dG0 / RT).

Reactions without substrates are *sources* and reactions without products are
*sinks*; both bypass the thermodynamic gating.
"""

from __future__ import annotations

import math
from typing import Mapping

from pydantic import BaseModel, Field, model_validator

from metabolab.core.kinetics import (
    CONCENTRATION_FLOOR,
    DEFAULT_TEMPERATURE,
    FORWARD_CUTOFF,
    KEQ_FLOOR,
    REVERSE_CUTOFF,
    equilibrium_constant,
    rt,
    saturation,
)


class Reaction(BaseModel):
    """A stoichiometric transform catalysed by a single enzyme."""

    id: str
    name: str = ""
    substrates: dict[str, float] = Field(default_factory=dict)
    products: dict[str, float] = Field(default_factory=dict)
    vmax: float = Field(default=1.0, ge=0.0)
    km: float = 0.1
    efficiency: float = Field(default=1.0, ge=0.0, le=1.0)
    delta_g0: float = 0.0
    temperature: float = DEFAULT_TEMPERATURE
    irreversible: bool = False
    enzyme_id: str | None = None

    # Runtime state, refreshed by evaluate()
    forward_rate: float = 0.0
    reverse_rate: float = 0.0
    net_rate: float = 0.0
    delta_g: float = 0.0
    keq: float = 1.0
    useful_work_rate: float = 0.0
    heat_rate: float = 0.0
    coupling_energy: float = 0.0

    @model_validator(mode="after")
    def _check_participants(self) -> Reaction:
        if not self.substrates and not self.products:
            raise ValueError(f"Reaction {self.id} has neither substrates nor products")
        self.keq = self.equilibrium_constant()
        return self

    @property
    def is_source(self) -> bool:
        return not self.substrates and bool(self.products)

    @property
    def is_sink(self) -> bool:
        return bool(self.substrates) and not self.products

    @property
    def species(self) -> set[str]:
        return set(self.substrates) | set(self.products)

    # --- Thermodynamics ---

    def actual_free_energy(self, concentrations: Mapping[str, float]) -> float:
        """Instantaneous dG (kJ/mol) for the given concentrations."""
        if self.is_source or self.is_sink:
            return self.delta_g0

        ln_q = 0.0
        for species, coeff in self.products.items():
            conc = max(concentrations.get(species, 0.0), CONCENTRATION_FLOOR)
            ln_q += coeff * math.log(conc)
        for species, coeff in self.substrates.items():
            conc = max(concentrations.get(species, 0.0), CONCENTRATION_FLOOR)
            ln_q -= coeff * math.log(conc)
        return self.delta_g0 + rt(self.temperature) * ln_q

    def effective_free_energy(self, concentrations: Mapping[str, float]) -> float:
        """dG after subtracting energy supplied by a coupled reaction."""
        return self.actual_free_energy(concentrations) - self.coupling_energy

    def equilibrium_constant(self) -> float:
        return equilibrium_constant(self.delta_g0, self.temperature)

    # --- Kinetics ---

    def _limiting_saturation(
        self,
        participants: Mapping[str, float],
        concentrations: Mapping[str, float],
        km_overrides: Mapping[str, float] | None,
    ) -> float:
        # Bounded by the slowest participant
        limiting = 1.0
        for species in participants:
            conc = concentrations.get(species, 0.0)
            if conc <= 0:
                return 0.0
            km = km_overrides.get(species, self.km) if km_overrides else self.km
            limiting = min(limiting, saturation(conc, km))
        return limiting

    def compute_forward_rate(
        self,
        concentrations: Mapping[str, float],
        enzyme_concentration: float,
        *,
        vmax_factor: float = 1.0,
        km_overrides: Mapping[str, float] | None = None,
        cutoff: float = FORWARD_CUTOFF,
    ) -> float:
        """Forward rate (mM/s)."""
        if enzyme_concentration <= 0:
            return 0.0

        capacity = self.vmax * vmax_factor * enzyme_concentration * self.efficiency
        if self.is_source:
            return max(0.0, capacity)

        limiting = self._limiting_saturation(self.substrates, concentrations, km_overrides)
        if limiting <= 0:
            return 0.0
        rate = capacity * limiting
        if self.is_sink:
            return max(0.0, rate)

        dg = self.effective_free_energy(concentrations)
        if dg > cutoff:
            return 0.0
        if dg > 0:
            rate *= math.exp(-dg / rt(self.temperature))
        return max(0.0, rate)

    def compute_reverse_rate(
        self,
        concentrations: Mapping[str, float],
        enzyme_concentration: float,
        *,
        vmax_factor: float = 1.0,
        km_overrides: Mapping[str, float] | None = None,
        cutoff: float = REVERSE_CUTOFF,
    ) -> float:
        """Reverse rate (mM/s); zero for irreversible, source and sink reactions."""
        if self.irreversible or self.is_source or self.is_sink or enzyme_concentration <= 0:
            return 0.0

        dg = self.effective_free_energy(concentrations)
        if dg < -cutoff:
            return 0.0

        vmax_reverse = self.vmax * vmax_factor / max(self.equilibrium_constant(), KEQ_FLOOR)
        limiting = self._limiting_saturation(self.products, concentrations, km_overrides)
        rate = vmax_reverse * enzyme_concentration * limiting * self.efficiency
        if dg < 0:
            rate *= math.exp(dg / rt(self.temperature))
        return max(0.0, rate)

    def partition_energy(self, net_rate: float, delta_g: float | None = None) -> tuple[float, float]:
        """Split the free-energy flux into (useful work, heat) rates."""
        dg = self.delta_g if delta_g is None else delta_g
        if dg < 0:
            released = -dg * net_rate
            return released * self.efficiency, released * (1.0 - self.efficiency)
        useful = -dg * net_rate
        return useful, abs(useful) * (1.0 - self.efficiency)

    def evaluate(
        self,
        concentrations: Mapping[str, float],
        enzyme_concentration: float,
        *,
        vmax_factor: float = 1.0,
        km_overrides: Mapping[str, float] | None = None,
        forward_cutoff: float = FORWARD_CUTOFF,
    ) -> float:
        """Refresh every runtime field from one snapshot and return the net rate."""
        self.delta_g = self.actual_free_energy(concentrations)
        self.keq = self.equilibrium_constant()
        self.forward_rate = self.compute_forward_rate(
            concentrations,
            enzyme_concentration,
            vmax_factor=vmax_factor,
            km_overrides=km_overrides,
            cutoff=forward_cutoff,
        )
        self.reverse_rate = self.compute_reverse_rate(
            concentrations,
            enzyme_concentration,
            vmax_factor=vmax_factor,
            km_overrides=km_overrides,
        )
        self.net_rate = self.forward_rate - self.reverse_rate
        self.useful_work_rate, self.heat_rate = self.partition_energy(
            self.net_rate, self.delta_g - self.coupling_energy,
        )
        return self.net_rate

    def reset_runtime(self) -> None:
        self.forward_rate = 0.0
        self.reverse_rate = 0.0
        self.net_rate = 0.0
        self.delta_g = 0.0
        self.useful_work_rate = 0.0
        self.heat_rate = 0.0
        self.coupling_energy = 0.0
        self.keq = self.equilibrium_constant()

    def state_summary(self) -> dict[str, float | str | None]:
        """Read-only view of the runtime state."""
        return {
            "id": self.id,
            "enzyme_id": self.enzyme_id,
            "forward_rate": self.forward_rate,
            "reverse_rate": self.reverse_rate,
            "net_rate": self.net_rate,
            "delta_g": self.delta_g,
            "keq": self.keq,
            "useful_work_rate": self.useful_work_rate,
            "heat_rate": self.heat_rate,
        }


# --- Plain factories ---

def conversion(
    id: str,
    substrates: Mapping[str, float] | str,
    products: Mapping[str, float] | str,
    **params: float | str | bool,
) -> Reaction:
    """Build a substrate -> product reaction; bare species names get coefficient 1."""
    return Reaction(
        id=id,
        substrates=_as_stoichiometry(substrates),
        products=_as_stoichiometry(products),
        **params,
    )


def source(id: str, products: Mapping[str, float] | str, **params: float | str | bool) -> Reaction:
    """Build a reaction producing species from nothing."""
    return Reaction(id=id, products=_as_stoichiometry(products), **params)


def sink(id: str, substrates: Mapping[str, float] | str, **params: float | str | bool) -> Reaction:
    """Build a reaction removing species from the pool."""
    return Reaction(id=id, substrates=_as_stoichiometry(substrates), **params)


def _as_stoichiometry(participants: Mapping[str, float] | str) -> dict[str, float]:
    if isinstance(participants, str):
        return {participants: 1.0}
    return dict(participants)
