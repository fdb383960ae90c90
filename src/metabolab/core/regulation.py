"""Gene expression control through Hill-kinetics regulatory elements."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from pydantic import BaseModel, Field, field_validator

from metabolab.core.kinetics import hill as hill_occupancy, positive

HILL_MIN = 0.1
HILL_MAX = 4.0


class RegulationType(str, Enum):
    ACTIVATOR = "activator"
    REPRESSOR = "repressor"


class RegulatoryElement(BaseModel):
    """Activator or repressor binding a target species with Hill kinetics."""

    kind: RegulationType
    target: str
    kd: float = 1.0
    max_fold: float = Field(default=2.0, ge=0.0)
    hill: float = 1.0

    @field_validator("hill")
    @classmethod
    def _clamp_hill(cls, value: float) -> float:
        return min(HILL_MAX, max(HILL_MIN, value))

    def occupancy(self, concentrations: Mapping[str, float]) -> float:
        conc = concentrations.get(self.target)
        if conc is None:
            return 0.0
        return hill_occupancy(conc, positive(self.kd), self.hill)

    def effect(self, concentrations: Mapping[str, float]) -> float:
        """Multiplicative effect on expression; 1.0 means no effect."""
        if self.target not in concentrations:
            return 1.0
        boost = 1.0 + (self.max_fold - 1.0) * self.occupancy(concentrations)
        if self.kind == RegulationType.ACTIVATOR:
            return boost
        return 1.0 / boost if boost > 0 else 1.0


class Gene(BaseModel):
    """Gene controlling the synthesis rate of one enzyme (mM/s)."""

    id: str
    name: str = ""
    enzyme_id: str
    basal_rate: float = Field(default=0.0, ge=0.0)
    max_rate: float = Field(default=1.0, ge=0.0)
    active: bool = True
    activators: list[RegulatoryElement] = Field(default_factory=list)
    repressors: list[RegulatoryElement] = Field(default_factory=list)

    # Runtime state
    expression_rate: float = 0.0
    activation_fold: float = 1.0
    repression_fold: float = 1.0

    def compute_expression(self, concentrations: Mapping[str, float]) -> float:
        """Expression rate from basal rate and multiplicative regulator effects."""
        if not self.active:
            self.activation_fold = 1.0
            self.repression_fold = 1.0
            self.expression_rate = 0.0
            return 0.0

        activation = 1.0
        for element in self.activators:
            activation *= element.effect(concentrations)
        repression = 1.0
        for element in self.repressors:
            repression *= element.effect(concentrations)

        self.activation_fold = activation
        self.repression_fold = repression
        rate = self.basal_rate * activation * repression
        self.expression_rate = min(self.max_rate, max(0.0, rate))
        return self.expression_rate

    def synthesis_amount(self, dt: float, concentrations: Mapping[str, float]) -> float:
        return self.compute_expression(concentrations) * dt

    def reset_runtime(self) -> None:
        self.expression_rate = 0.0
        self.activation_fold = 1.0
        self.repression_fold = 1.0
