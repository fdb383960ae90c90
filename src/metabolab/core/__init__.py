"""Core simulation types and the step engine."""

from metabolab.core.cell import Cell
from metabolab.core.coupling import EnergyCoupling
from metabolab.core.enzyme import AllostericSite, Enzyme, ExtendedEnzyme
from metabolab.core.molecule import Compartment, Molecule
from metabolab.core.network import Network
from metabolab.core.reaction import Reaction, conversion, sink, source
from metabolab.core.regulation import Gene, RegulationType, RegulatoryElement
from metabolab.core.simulation import Simulation

__all__ = [
    "AllostericSite",
    "Cell",
    "Compartment",
    "EnergyCoupling",
    "Enzyme",
    "ExtendedEnzyme",
    "Gene",
    "Molecule",
    "Network",
    "Reaction",
    "RegulationType",
    "RegulatoryElement",
    "Simulation",
    "conversion",
    "sink",
    "source",
]
