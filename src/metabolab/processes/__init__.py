"""Ordered phase implementations of the simulation step."""

from metabolab.processes.energetics import CellEnergetics
from metabolab.processes.expression import GeneExpression
from metabolab.processes.metabolism import Metabolism

__all__ = [
    "CellEnergetics",
    "GeneExpression",
    "Metabolism",
]
