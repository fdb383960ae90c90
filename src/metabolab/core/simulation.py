"""Simulation engine: bulk loading, the ordered step loop and mutators."""

from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

from metabolab.config import AppConfig, config as default_config
from metabolab.core.cell import Cell
from metabolab.core.enzyme import Enzyme
from metabolab.core.molecule import Molecule
from metabolab.core.network import Network
from metabolab.core.process import SimulationProcess
from metabolab.core.regulation import Gene
from metabolab.core.state import SimulationState
from metabolab.exceptions import (
    EnzymeNotFoundError,
    GeneNotFoundError,
    MoleculeNotFoundError,
    ReactionNotFoundError,
)
from metabolab.processes import CellEnergetics, GeneExpression, Metabolism

logger = logging.getLogger(__name__)

StepCallback = Callable[[float, SimulationState], None]


class Simulation:
    """Top-level simulation interface.

    Owns the state and advances it one fixed timestep at a time through
    three ordered phases (metabolism, expression, energetics) followed by a
    non-negativity clamp. All external mutation happens between steps.
    """

    def __init__(
        self,
        network: Network | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.config = config or default_config
        self._energetics = CellEnergetics(self.config.simulation.death_on_thermal_extremes)
        self._processes: list[SimulationProcess] = [
            Metabolism(),
            GeneExpression(),
            self._energetics,
        ]
        self._state = SimulationState({}, [], [], [], self._new_cell())
        self._history: list[dict[str, Any]] = []
        self._callbacks: list[StepCallback] = []
        self._running = False
        if network is not None:
            self.load(network)

    # --- Lifecycle ---

    def load(self, network: Network) -> None:
        """Atomically replace every molecule, enzyme, gene and coupling."""
        state = SimulationState.from_network(network, cell=self._new_cell())
        self._state = state
        self._history = []
        self._running = False
        for proc in self._processes:
            proc.initialize(state)
        self._record_snapshot()
        logger.info(
            "Loaded network %s: %d molecules, %d enzymes, %d reactions, %d genes",
            network.name,
            len(state.molecules),
            len(state.enzymes),
            len(state.reaction_index),
            len(state.genes),
        )

    def reset(self) -> None:
        """Restore recorded initial concentrations and clear histories."""
        self._state.restore_initial()
        self._history = []
        self._running = False
        self._record_snapshot()
        logger.info("Simulation reset")

    def on_step(self, callback: StepCallback) -> None:
        """Register a callback invoked after each step with (time, state)."""
        self._callbacks.append(callback)

    def step(self, dt: float | None = None) -> dict[str, float]:
        """Advance the simulation by one time step; returns concentrations."""
        dt = self._resolve_dt(dt)
        state = self._state
        if not state.cell.alive:
            logger.warning("Cell is dead (%s); step skipped", state.cell.death_reason)
            return state.concentrations()

        snapshot = state.concentrations()
        for proc in self._processes:
            proc.step(state, snapshot, dt)

        if state.has_numerical_issue():
            repaired = state.clamp()
            logger.warning("Reset %d non-finite concentrations at t=%.3f", repaired, state.time)
        else:
            state.clamp()

        state.time += dt
        state.step_count += 1

        interval = max(1, round(self.config.simulation.output_interval / dt))
        if state.step_count % interval == 0:
            self._record_snapshot()

        for cb in self._callbacks:
            cb(state.time, state)

        return state.concentrations()

    def run(self, duration: float | None = None, dt: float | None = None) -> dict[str, float]:
        """Run for ``duration`` seconds (default: configured total_time)."""
        dt = self._resolve_dt(dt)
        duration = self.config.simulation.total_time if duration is None else duration
        steps = int(round(duration / dt))

        logger.info("Starting simulation: %.1fs, dt=%.3fs, %d steps", duration, dt, steps)
        self._running = True
        for i in range(steps):
            if not self._running:
                logger.info("Simulation stopped at step %d (t=%.3f)", i, self.time)
                break
            if not self._state.cell.alive:
                logger.info("Simulation ended by cell death at t=%.3f", self.time)
                break
            self.step(dt)

        self._running = False
        logger.info("Simulation complete at t=%.3f", self.time)
        return self.get_concentrations()

    def stop(self) -> None:
        """Stop a running simulation after the current step."""
        self._running = False

    # --- Read-only access ---

    @property
    def time(self) -> float:
        return self._state.time

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def death_on_thermal_extremes(self) -> bool:
        return self._energetics.death_on_thermal_extremes

    def get_concentrations(self) -> dict[str, float]:
        return self._state.concentrations()

    def get_enzyme_concentrations(self) -> dict[str, float]:
        return self._state.enzyme_concentrations()

    def get_reaction_states(self) -> dict[str, dict[str, Any]]:
        """Rates, dG, Keq, work and heat of every reaction."""
        return {rid: r.state_summary() for rid, r in self._state.reaction_index.items()}

    def get_reaction_state(self, reaction_id: str) -> dict[str, Any]:
        reaction = self._state.reaction_index.get(reaction_id)
        if reaction is None:
            raise ReactionNotFoundError(reaction_id)
        return reaction.state_summary()

    def get_cell_state(self) -> dict[str, Any]:
        return self._state.cell.summary()

    def get_state(self) -> dict[str, Any]:
        """Return a snapshot of the full state."""
        return {
            **self._state.snapshot(),
            "reactions": self.get_reaction_states(),
            "cell": self.get_cell_state(),
            "couplings": {c.id: c.total_transferred for c in self._state.couplings},
        }

    def get_history(self) -> list[dict[str, Any]]:
        """Return recorded state history."""
        return list(self._history)

    def time_series(self, molecule_id: str) -> tuple[np.ndarray, np.ndarray]:
        """Return (times, concentrations) of one molecule from the history."""
        if molecule_id not in self._state.molecules:
            raise MoleculeNotFoundError(molecule_id)
        times = np.array([h["time"] for h in self._history], dtype=np.float64)
        values = np.array(
            [h["concentrations"].get(molecule_id, 0.0) for h in self._history],
            dtype=np.float64,
        )
        return times, values

    # --- Mutators (between steps only) ---

    def get_concentration(self, molecule_id: str) -> float:
        return self._molecule(molecule_id).concentration

    def set_concentration(self, molecule_id: str, value: float) -> None:
        self._molecule(molecule_id).concentration = max(0.0, float(value))

    def lock_molecule(self, molecule_id: str) -> None:
        self._molecule(molecule_id).locked = True

    def unlock_molecule(self, molecule_id: str) -> None:
        self._molecule(molecule_id).locked = False

    def get_enzyme_concentration(self, enzyme_id: str) -> float:
        return self._enzyme(enzyme_id).concentration

    def set_enzyme_concentration(self, enzyme_id: str, value: float) -> None:
        self._enzyme(enzyme_id).concentration = max(0.0, float(value))

    def lock_enzyme(self, enzyme_id: str) -> None:
        self._enzyme(enzyme_id).locked = True

    def unlock_enzyme(self, enzyme_id: str) -> None:
        self._enzyme(enzyme_id).locked = False

    def activate_enzyme(self, enzyme_id: str) -> None:
        self._enzyme(enzyme_id).active = True

    def deactivate_enzyme(self, enzyme_id: str) -> None:
        self._enzyme(enzyme_id).active = False

    def enable_gene(self, gene_id: str) -> None:
        self._gene(gene_id).active = True

    def disable_gene(self, gene_id: str) -> None:
        self._gene(gene_id).active = False

    def set_death_on_thermal_extremes(self, enabled: bool) -> None:
        self._energetics.death_on_thermal_extremes = enabled
        logger.info("Death on thermal extremes %s", "enabled" if enabled else "disabled")

    # --- Private methods ---

    def _resolve_dt(self, dt: float | None) -> float:
        if dt is None:
            return self.config.simulation.dt
        if not dt > 0:
            raise ValueError(f"Timestep must be positive, got {dt}")
        return dt

    def _new_cell(self) -> Cell:
        cell_config = self.config.cell
        return Cell(
            dissipation_rate=cell_config.dissipation_rate,
            max_heat=cell_config.max_heat,
            min_heat=cell_config.min_heat,
        )

    def _molecule(self, molecule_id: str) -> Molecule:
        try:
            return self._state.molecules[molecule_id]
        except KeyError:
            raise MoleculeNotFoundError(molecule_id) from None

    def _enzyme(self, enzyme_id: str) -> Enzyme:
        try:
            return self._state.enzyme_index[enzyme_id]
        except KeyError:
            raise EnzymeNotFoundError(enzyme_id) from None

    def _gene(self, gene_id: str) -> Gene:
        try:
            return self._state.gene_index[gene_id]
        except KeyError:
            raise GeneNotFoundError(gene_id) from None

    def _record_snapshot(self) -> None:
        if self.config.simulation.record_history:
            self._history.append(self._state.snapshot())
