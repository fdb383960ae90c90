"""MetaboLab: enzyme-network simulation engine with thermodynamic gating."""

from metabolab.config import AppConfig, CellConfig, SimulationConfig
from metabolab.core import (
    AllostericSite,
    Cell,
    EnergyCoupling,
    Enzyme,
    ExtendedEnzyme,
    Gene,
    Molecule,
    Network,
    Reaction,
    RegulatoryElement,
    Simulation,
)

__version__ = "0.1.0"

__all__ = [
    "AllostericSite",
    "AppConfig",
    "Cell",
    "CellConfig",
    "EnergyCoupling",
    "Enzyme",
    "ExtendedEnzyme",
    "Gene",
    "Molecule",
    "Network",
    "Reaction",
    "RegulatoryElement",
    "Simulation",
    "SimulationConfig",
]
