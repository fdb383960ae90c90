"""MetaboLab command-line interface (Typer)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from metabolab.exceptions import NetworkLoadError

app = typer.Typer(
    name="metabolab",
    help="MetaboLab: enzyme-network simulation engine.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def _load(network_path: Path):
    from metabolab.io import load_network

    try:
        return load_network(network_path)
    except NetworkLoadError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def run(
    network: Path = typer.Argument(..., help="Path to network JSON/YAML"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="Simulated seconds"),
    dt: Optional[float] = typer.Option(None, "--dt", help="Timestep in seconds"),
    death: Optional[bool] = typer.Option(
        None, "--death/--no-death", help="Kill the cell on thermal extremes",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write history JSON here"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Run a network simulation and print the final state."""
    from metabolab.config import config
    from metabolab.core.simulation import Simulation

    sim_config = config.model_copy(deep=True)
    if dt is not None:
        sim_config.simulation.dt = dt
    if death is not None:
        sim_config.simulation.death_on_thermal_extremes = death
    logging.basicConfig(
        level=(log_level or sim_config.simulation.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    net = _load(network)
    sim = Simulation(net, config=sim_config)

    console.print(f"Running [cyan]{net.name}[/cyan]")
    final = sim.run(duration)

    table = Table(title=f"Concentrations at t={sim.time:.2f}s")
    table.add_column("Molecule", style="cyan")
    table.add_column("mM", justify="right")
    for mid, value in sorted(final.items()):
        table.add_row(mid, f"{value:.4f}")
    console.print(table)

    cell = sim.get_cell_state()
    status = "[green]alive[/green]" if cell["alive"] else f"[red]dead ({cell['death_reason']})[/red]"
    console.print(f"Cell: {status}")
    console.print(f"  Heat: {cell['heat']:.3f}")
    console.print(f"  Usable energy: {cell['usable_energy']:.3f}")
    console.print(f"  Generated / consumed: {cell['total_generated']:.3f} / {cell['total_consumed']:.3f}")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump(sim.get_history(), f, indent=2)
        console.print(f"History written to {output}")


@app.command()
def info(
    network: Path = typer.Argument(..., help="Path to network JSON/YAML"),
) -> None:
    """Summarize a network definition."""
    net = _load(network)
    summary = net.summary()

    console.print(f"[bold]{summary['name']}[/bold]")
    for key in ("num_molecules", "num_enzymes", "num_reactions", "num_genes", "num_couplings"):
        console.print(f"  {key.removeprefix('num_').capitalize()}: {summary[key]}")

    table = Table(title="Reactions")
    table.add_column("ID", style="cyan")
    table.add_column("Enzyme")
    table.add_column("dG0", justify="right")
    table.add_column("Keq", justify="right")
    table.add_column("Type")
    for rxn in net.iter_reactions():
        kind = "source" if rxn.is_source else "sink" if rxn.is_sink else "conversion"
        if rxn.irreversible:
            kind += " (irreversible)"
        table.add_row(
            rxn.id,
            rxn.enzyme_id or "-",
            f"{rxn.delta_g0:.2f}",
            f"{rxn.equilibrium_constant():.3g}",
            kind,
        )
    console.print(table)


if __name__ == "__main__":
    app()
