"""Molecule species held in the simulation pool."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Compartment(str, Enum):
    CYTOPLASM = "cytoplasm"
    EXTRACELLULAR = "extracellular"


class Molecule(BaseModel):
    """A concentration-bearing species (mM)."""

    id: str
    name: str = ""
    concentration: float = Field(default=0.0, ge=0.0)
    initial_concentration: float | None = Field(default=None, ge=0.0)
    compartment: Compartment = Compartment.CYTOPLASM
    locked: bool = False

    def record_initial(self) -> None:
        """Remember the current concentration as the reset target."""
        if self.initial_concentration is None:
            self.initial_concentration = self.concentration

    def restore_initial(self) -> None:
        if self.initial_concentration is not None:
            self.concentration = self.initial_concentration
