"""Cell-level heat and usable-energy bookkeeping."""

from __future__ import annotations

import logging
from typing import Iterable

from pydantic import BaseModel, Field

from metabolab.core.reaction import Reaction

logger = logging.getLogger(__name__)

THERMAL_RUNAWAY = "thermal runaway"
INSUFFICIENT_METABOLISM = "insufficient metabolism"


class Cell(BaseModel):
    """Aggregates the work and heat output of every reaction."""

    heat: float = Field(default=0.0, ge=0.0)
    usable_energy: float = Field(default=0.0, ge=0.0)
    total_generated: float = 0.0
    total_consumed: float = 0.0
    total_heat: float = 0.0
    alive: bool = True
    death_reason: str | None = None

    dissipation_rate: float = Field(default=0.1, ge=0.0)  # 1/s
    max_heat: float = 1000.0
    min_heat: float = 0.0

    def update_heat(self, dt: float, reactions: Iterable[Reaction]) -> None:
        generated = sum(r.heat_rate for r in reactions) * dt
        self.total_heat += generated
        self.heat += generated
        self.heat -= self.heat * self.dissipation_rate * dt
        self.heat = max(0.0, self.heat)

    def update_energy(self, dt: float, reactions: Iterable[Reaction]) -> None:
        work = 0.0
        for reaction in reactions:
            work += reaction.useful_work_rate
            if reaction.net_rate <= 0:
                continue
            if reaction.useful_work_rate > 0:
                self.total_generated += reaction.useful_work_rate * dt
            elif reaction.useful_work_rate < 0:
                self.total_consumed += -reaction.useful_work_rate * dt
        self.usable_energy = max(0.0, self.usable_energy + work * dt)

    def check_survival(self, enabled: bool = False) -> bool:
        """Return whether the cell is alive; death only when checking is enabled."""
        if not enabled or not self.alive:
            return self.alive
        if self.heat > self.max_heat:
            self._die(THERMAL_RUNAWAY)
        elif self.heat < self.min_heat:
            self._die(INSUFFICIENT_METABOLISM)
        return self.alive

    def _die(self, reason: str) -> None:
        self.alive = False
        self.death_reason = reason
        logger.warning("Cell died: %s (heat=%.3f)", reason, self.heat)

    def reset(self) -> None:
        self.heat = 0.0
        self.usable_energy = 0.0
        self.total_generated = 0.0
        self.total_consumed = 0.0
        self.total_heat = 0.0
        self.alive = True
        self.death_reason = None

    def summary(self) -> dict[str, float | bool | str | None]:
        return {
            "heat": self.heat,
            "usable_energy": self.usable_energy,
            "total_generated": self.total_generated,
            "total_consumed": self.total_consumed,
            "total_heat": self.total_heat,
            "alive": self.alive,
            "death_reason": self.death_reason,
        }
