"""Tests for the simulation engine."""

from __future__ import annotations

import logging
import math

import pytest

from metabolab.config import AppConfig, CellConfig, SimulationConfig
from metabolab.core.coupling import EnergyCoupling
from metabolab.core.enzyme import Enzyme
from metabolab.core.molecule import Molecule
from metabolab.core.network import Network
from metabolab.core.reaction import conversion
from metabolab.core.simulation import Simulation
from metabolab.exceptions import (
    EnzymeNotFoundError,
    GeneNotFoundError,
    MetaboLabError,
    MoleculeNotFoundError,
    ReactionNotFoundError,
)


def test_empty_simulation_steps(app_config) -> None:
    sim = Simulation(config=app_config)
    assert sim.step() == {}
    assert sim.time == pytest.approx(0.1)


def test_conversion_conserves_mass(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    final = sim.run(10.0)
    assert final["A"] < 10.0
    assert final["B"] > 0.0
    assert final["A"] + final["B"] == pytest.approx(10.0)
    assert sim.time == pytest.approx(10.0)


def test_source_produces_at_capacity(source_network, app_config) -> None:
    sim = Simulation(source_network, config=app_config)
    sim.run(10.0)
    assert sim.get_concentration("P") == pytest.approx(8.0)


def test_concentrations_never_negative(app_config) -> None:
    network = Network(
        molecules=[Molecule(id="A", concentration=0.01), Molecule(id="B")],
        enzymes=[
            Enzyme(
                id="E1",
                concentration=1.0,
                degradable=False,
                reactions=[conversion("R1", "A", "B", vmax=100.0, delta_g0=-20.0, irreversible=True)],
            ),
        ],
    )
    sim = Simulation(network, config=app_config)
    for _ in range(5):
        conc = sim.step()
        assert all(value >= 0.0 for value in conc.values())
    assert sim.get_concentration("A") == 0.0


def test_load_copies_network(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.run(1.0)
    assert simple_network.molecules[0].concentration == 10.0
    assert simple_network.enzymes[0].reactions[0].net_rate == 0.0


def test_reset_restores_initial_state(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.set_concentration("B", 3.0)
    sim.run(2.0)
    sim.reset()
    assert sim.time == 0.0
    assert sim.get_concentrations() == {"A": 10.0, "B": 0.0}
    assert len(sim.get_history()) == 1
    assert sim.get_cell_state()["heat"] == 0.0
    assert sim.get_reaction_state("R1")["net_rate"] == 0.0


def test_history_and_time_series(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.run()
    history = sim.get_history()
    assert len(history) == 6
    times, values = sim.time_series("A")
    assert times[0] == 0.0
    assert times[-1] == pytest.approx(5.0)
    assert values[0] == 10.0
    assert values[-1] < values[0]


def test_history_disabled(simple_network) -> None:
    config = AppConfig(simulation=SimulationConfig(record_history=False))
    sim = Simulation(simple_network, config=config)
    sim.run(1.0)
    assert sim.get_history() == []


def test_lock_molecule(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.lock_molecule("A")
    sim.run(1.0)
    assert sim.get_concentration("A") == 10.0
    assert sim.get_concentration("B") > 0.0
    sim.unlock_molecule("A")
    sim.run(1.0)
    assert sim.get_concentration("A") < 10.0


def test_deactivated_enzyme_is_idle(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.deactivate_enzyme("E1")
    sim.run(1.0)
    assert sim.get_concentration("A") == 10.0
    sim.activate_enzyme("E1")
    sim.step()
    assert sim.get_concentration("A") < 10.0


def test_enzyme_mutators(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.set_enzyme_concentration("E1", -1.0)
    assert sim.get_enzyme_concentration("E1") == 0.0
    sim.run(1.0)
    assert sim.get_concentration("A") == 10.0
    sim.lock_enzyme("E1")
    sim.unlock_enzyme("E1")
    assert sim.get_enzyme_concentrations() == {"E1": 0.0}


def test_unknown_ids_raise(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    with pytest.raises(MoleculeNotFoundError):
        sim.set_concentration("nope", 1.0)
    with pytest.raises(KeyError):
        sim.get_concentration("nope")
    with pytest.raises(EnzymeNotFoundError):
        sim.lock_enzyme("nope")
    with pytest.raises(GeneNotFoundError):
        sim.disable_gene("nope")
    with pytest.raises(ReactionNotFoundError):
        sim.get_reaction_state("nope")
    with pytest.raises(MetaboLabError):
        sim.time_series("nope")


def test_callbacks_and_stop(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    seen: list[float] = []

    def on_step(time, state):
        seen.append(time)
        if len(seen) == 3:
            sim.stop()

    sim.on_step(on_step)
    sim.run(10.0)
    assert len(seen) == 3
    assert sim.time == pytest.approx(0.3)


def test_cell_survives_by_default(simple_network) -> None:
    simple_network.enzymes[0].reactions[0].efficiency = 0.5
    config = AppConfig(cell=CellConfig(max_heat=0.001))
    sim = Simulation(simple_network, config=config)
    assert sim.death_on_thermal_extremes is False
    sim.run(1.0)
    assert sim.get_cell_state()["alive"] is True
    assert sim.get_cell_state()["heat"] > 0.001


def test_death_on_thermal_extremes(simple_network) -> None:
    simple_network.enzymes[0].reactions[0].efficiency = 0.5
    config = AppConfig(cell=CellConfig(max_heat=0.001))
    sim = Simulation(simple_network, config=config)
    sim.set_death_on_thermal_extremes(True)
    sim.run(1.0)
    cell = sim.get_cell_state()
    assert cell["alive"] is False
    assert cell["death_reason"] == "thermal runaway"
    assert sim.time == pytest.approx(0.1)

    before = sim.get_concentrations()
    sim.step()
    assert sim.get_concentrations() == before
    assert sim.time == pytest.approx(0.1)


def test_product_feedback_represses_expression(feedback_network, app_config) -> None:
    sim = Simulation(feedback_network, config=app_config)
    sim.run(20.0)
    gene = sim.state.gene_index["g1"]
    assert sim.get_concentration("P") > 0.0
    assert gene.expression_rate < 0.01
    assert gene.repression_fold < 1.0


def test_disabled_gene_lets_enzyme_decay(feedback_network, app_config) -> None:
    sim = Simulation(feedback_network, config=app_config)
    sim.disable_gene("g1")
    sim.run(10.0)
    assert sim.get_enzyme_concentration("E1") < 0.1
    sim.enable_gene("g1")


def _coupled_network(with_coupling: bool) -> Network:
    return Network(
        molecules=[
            Molecule(id="X", concentration=10.0),
            Molecule(id="Y", concentration=1.0),
            Molecule(id="A", concentration=1.0),
            Molecule(id="B", concentration=1.0),
        ],
        enzymes=[
            Enzyme(
                id="E_src",
                concentration=1.0,
                degradable=False,
                reactions=[conversion("R_src", "X", "Y", vmax=0.01, delta_g0=-40.0, irreversible=True)],
            ),
            Enzyme(
                id="E_sink",
                concentration=1.0,
                degradable=False,
                reactions=[conversion("R_sink", "A", "B", delta_g0=15.0, irreversible=True)],
            ),
        ],
        couplings=(
            [EnergyCoupling(id="c1", source_id="R_src", sink_id="R_sink", efficiency=0.5)]
            if with_coupling else []
        ),
    )


def test_coupling_drives_endergonic_reaction(app_config) -> None:
    uncoupled = Simulation(_coupled_network(False), config=app_config)
    uncoupled.run(1.0)
    assert uncoupled.get_concentration("B") == 1.0

    coupled = Simulation(_coupled_network(True), config=app_config)
    coupled.run(1.0)
    assert coupled.get_concentration("B") > 1.0
    assert coupled.get_state()["couplings"]["c1"] > 0.0


def test_get_state(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.step()
    state = sim.get_state()
    assert state["step"] == 1
    assert set(state["reactions"]) == {"R1"}
    assert state["reactions"]["R1"]["net_rate"] > 0.0
    assert "usable_energy" in state["cell"]


def test_repression_lowers_product(feedback_network, app_config) -> None:
    unrepressed = feedback_network.model_copy(deep=True)
    unrepressed.genes[0].repressors = []

    repressed_sim = Simulation(feedback_network, config=app_config)
    free_sim = Simulation(unrepressed, config=app_config)
    repressed_sim.run(20.0)
    free_sim.run(20.0)
    assert repressed_sim.get_concentration("P") < free_sim.get_concentration("P")
    assert repressed_sim.get_enzyme_concentration("E1") < free_sim.get_enzyme_concentration("E1")


def test_non_positive_timestep_rejected(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    with pytest.raises(ValueError):
        sim.step(0.0)
    with pytest.raises(ValueError):
        sim.run(1.0, dt=-0.1)
    assert sim.time == 0.0
    assert sim.get_concentration("A") == 10.0


def test_explicit_timestep_used(simple_network, app_config) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.step(0.5)
    assert sim.time == pytest.approx(0.5)


def test_non_finite_concentration_repaired(simple_network, app_config, caplog) -> None:
    sim = Simulation(simple_network, config=app_config)
    sim.state.molecules["A"].concentration = float("nan")
    with caplog.at_level(logging.WARNING, logger="metabolab.core.simulation"):
        conc = sim.step()
    assert conc["A"] == 0.0
    assert all(math.isfinite(value) and value >= 0.0 for value in conc.values())
    assert "non-finite" in caplog.text
