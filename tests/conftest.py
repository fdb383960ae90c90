"""Shared test fixtures for MetaboLab tests."""

from __future__ import annotations

import pytest

from metabolab.config import AppConfig, CellConfig, SimulationConfig
from metabolab.core.enzyme import Enzyme
from metabolab.core.molecule import Molecule
from metabolab.core.network import Network
from metabolab.core.reaction import conversion, sink, source
from metabolab.core.regulation import Gene, RegulationType, RegulatoryElement


@pytest.fixture
def app_config() -> AppConfig:
    """Short runs with one history record per simulated second."""
    return AppConfig(
        simulation=SimulationConfig(dt=0.1, total_time=5.0, output_interval=1.0),
        cell=CellConfig(),
    )


@pytest.fixture
def simple_network() -> Network:
    """A -> B catalysed by a single stable enzyme."""
    return Network(
        name="simple",
        molecules=[
            Molecule(id="A", concentration=10.0),
            Molecule(id="B", concentration=0.0),
        ],
        enzymes=[
            Enzyme(
                id="E1",
                concentration=1.0,
                degradable=False,
                reactions=[conversion("R1", "A", "B", vmax=1.0, km=0.1, delta_g0=-20.0)],
            ),
        ],
    )


@pytest.fixture
def source_network() -> Network:
    """Constant production of P at Vmax * [E] * efficiency = 0.8 mM/s."""
    return Network(
        name="source",
        molecules=[Molecule(id="P", concentration=0.0)],
        enzymes=[
            Enzyme(
                id="E_src",
                concentration=2.0,
                degradable=False,
                reactions=[source("R_src", "P", vmax=0.5, efficiency=0.8)],
            ),
        ],
    )


@pytest.fixture
def feedback_network() -> Network:
    """Substrate -> Intermediate -> Product, with Product repressing E1 expression."""
    return Network(
        name="feedback",
        molecules=[
            Molecule(id="S", concentration=100.0),
            Molecule(id="I", concentration=0.0),
            Molecule(id="P", concentration=0.0),
        ],
        enzymes=[
            Enzyme(
                id="E1",
                concentration=0.1,
                half_life=100.0,
                reactions=[conversion("R1", "S", "I", vmax=2.0, delta_g0=-20.0)],
            ),
            Enzyme(
                id="E2",
                concentration=1.0,
                degradable=False,
                reactions=[conversion("R2", "I", "P", vmax=1.0, delta_g0=-20.0)],
            ),
            Enzyme(
                id="E3",
                concentration=1.0,
                degradable=False,
                reactions=[sink("R_out", "P", vmax=0.05)],
            ),
        ],
        genes=[
            Gene(
                id="g1",
                enzyme_id="E1",
                basal_rate=0.01,
                repressors=[
                    RegulatoryElement(
                        kind=RegulationType.REPRESSOR, target="P", kd=0.5, max_fold=10.0, hill=2.0,
                    ),
                ],
            ),
        ],
    )
