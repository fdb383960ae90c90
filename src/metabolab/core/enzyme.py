"""Enzymes: catalysis, extended regulation and turnover.

``Enzyme`` is the basic variant: it owns reactions and degrades first-order
with k = ln2 / half_life. ``ExtendedEnzyme`` shares the same rate contract and
adds per-species Km values, competitive/non-competitive inhibition, allosteric
modulation and regulated creation/degradation.
"""

from __future__ import annotations

import math
from typing import Literal, Mapping

from pydantic import BaseModel, Field, model_validator

from metabolab.core.kinetics import (
    EXTENDED_FORWARD_CUTOFF,
    FORWARD_CUTOFF,
    inhibition_factor,
    occupancy,
    positive,
)
from metabolab.core.reaction import Reaction


class AllostericSite(BaseModel):
    """Binding parameters of a non-catalytic regulator.

    ``fold`` is the maximal fold change for activators and the minimal
    remaining activity fraction for inhibitors.
    """

    kd: float = 1.0
    fold: float = Field(default=2.0, ge=0.0)


class Enzyme(BaseModel):
    """Basic enzyme with first-order degradation."""

    variant: Literal["basic"] = "basic"
    id: str
    name: str = ""
    concentration: float = Field(default=0.0, ge=0.0)
    initial_concentration: float | None = Field(default=None, ge=0.0)
    reactions: list[Reaction] = Field(default_factory=list)
    half_life: float = 3600.0  # seconds
    degradable: bool = True
    locked: bool = False
    active: bool = True

    forward_cutoff: float = FORWARD_CUTOFF

    @model_validator(mode="after")
    def _bind_reactions(self) -> Enzyme:
        for reaction in self.reactions:
            reaction.enzyme_id = self.id
        if self.initial_concentration is None:
            self.initial_concentration = self.concentration
        return self

    @property
    def degradation_rate(self) -> float:
        """First-order rate constant (1/s)."""
        return math.log(2) / positive(self.half_life)

    @property
    def catalytic_concentration(self) -> float:
        return self.concentration if self.active else 0.0

    def add_reaction(self, reaction: Reaction) -> None:
        reaction.enzyme_id = self.id
        self.reactions.append(reaction)

    # --- Catalysis ---

    def kinetic_modifiers(
        self,
        reaction: Reaction,
        concentrations: Mapping[str, float],
    ) -> tuple[float, dict[str, float] | None]:
        """Return (Vmax factor, apparent Km per species) for a reaction."""
        return 1.0, None

    def update_reaction_rates(self, concentrations: Mapping[str, float]) -> None:
        """Evaluate every owned reaction against the same snapshot."""
        enzyme_conc = self.catalytic_concentration
        for reaction in self.reactions:
            vmax_factor, km_overrides = self.kinetic_modifiers(reaction, concentrations)
            reaction.evaluate(
                concentrations,
                enzyme_conc,
                vmax_factor=vmax_factor,
                km_overrides=km_overrides,
                forward_cutoff=self.forward_cutoff,
            )

    # --- Turnover ---

    def synthesize(self, amount: float) -> None:
        """Add newly expressed enzyme (mM)."""
        if self.locked or amount <= 0:
            return
        self.concentration += amount

    def apply_degradation(self, dt: float, concentrations: Mapping[str, float] | None = None) -> float:
        """Remove first-order degraded enzyme; returns the amount removed."""
        if self.locked or not self.degradable or self.concentration <= 0:
            return 0.0
        amount = min(self.degradation_rate * self.concentration * dt, self.concentration)
        self.concentration = max(0.0, self.concentration - amount)
        return amount

    def restore_initial(self) -> None:
        if self.initial_concentration is not None:
            self.concentration = self.initial_concentration
        for reaction in self.reactions:
            reaction.reset_runtime()


class ExtendedEnzyme(Enzyme):
    """Enzyme with inhibition, allostery and regulated turnover."""

    variant: Literal["extended"] = "extended"  # type: ignore[assignment]

    km_by_species: dict[str, float] = Field(default_factory=dict)
    competitive_inhibitors: dict[str, float] = Field(default_factory=dict)
    noncompetitive_inhibitors: dict[str, float] = Field(default_factory=dict)
    allosteric_activators: dict[str, AllostericSite] = Field(default_factory=dict)
    allosteric_inhibitors: dict[str, AllostericSite] = Field(default_factory=dict)

    creation_rate: float = Field(default=0.0, ge=0.0)  # mM/s
    creation_activators: dict[str, AllostericSite] = Field(default_factory=dict)
    creation_inhibitors: dict[str, AllostericSite] = Field(default_factory=dict)
    degradation_activators: dict[str, AllostericSite] = Field(default_factory=dict)
    degradation_inhibitors: dict[str, AllostericSite] = Field(default_factory=dict)

    forward_cutoff: float = EXTENDED_FORWARD_CUTOFF

    def allosteric_factor(self, concentrations: Mapping[str, float]) -> float:
        factor = 1.0
        for species, site in self.allosteric_activators.items():
            occ = occupancy(concentrations.get(species, 0.0), site.kd)
            factor *= 1.0 + (site.fold - 1.0) * occ
        for species, site in self.allosteric_inhibitors.items():
            occ = occupancy(concentrations.get(species, 0.0), site.kd)
            factor *= 1.0 - (1.0 - site.fold) * occ
        return max(0.0, factor)

    def kinetic_modifiers(
        self,
        reaction: Reaction,
        concentrations: Mapping[str, float],
    ) -> tuple[float, dict[str, float] | None]:
        competitive = inhibition_factor(concentrations, self.competitive_inhibitors)
        noncompetitive = inhibition_factor(concentrations, self.noncompetitive_inhibitors)

        km_overrides = {
            species: positive(self.km_by_species.get(species, reaction.km)) * competitive
            for species in reaction.species
        }
        vmax_factor = self.allosteric_factor(concentrations) / noncompetitive
        return vmax_factor, km_overrides

    def _regulated_rate(
        self,
        base: float,
        activators: Mapping[str, AllostericSite],
        inhibitors: Mapping[str, AllostericSite],
        concentrations: Mapping[str, float],
    ) -> float:
        rate = base
        for species, site in activators.items():
            rate += base * (site.fold - 1.0) * occupancy(concentrations.get(species, 0.0), site.kd)
        for species, site in inhibitors.items():
            rate -= base * (1.0 - site.fold) * occupancy(concentrations.get(species, 0.0), site.kd)
        return max(0.0, rate)

    def creation_flux(self, concentrations: Mapping[str, float]) -> float:
        return self._regulated_rate(
            self.creation_rate, self.creation_activators, self.creation_inhibitors, concentrations,
        )

    def degradation_flux(self, concentrations: Mapping[str, float]) -> float:
        if not self.degradable:
            return 0.0
        return self._regulated_rate(
            self.degradation_rate * self.concentration,
            self.degradation_activators,
            self.degradation_inhibitors,
            concentrations,
        )

    def apply_degradation(self, dt: float, concentrations: Mapping[str, float] | None = None) -> float:
        """Integrate regulated creation minus degradation; returns net removal."""
        if self.locked:
            return 0.0
        conc = concentrations or {}
        creation = self.creation_flux(conc)
        degradation = self.degradation_flux(conc) if self.concentration > 0 else 0.0
        previous = self.concentration
        self.concentration = max(0.0, self.concentration + (creation - degradation) * dt)
        return previous - self.concentration
