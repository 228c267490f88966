"""CLI commands for parameter sweeps."""

from __future__ import annotations

import click
import numpy as np
from rich.console import Console
from rich.table import Table

from srm_pro.analysis.sweep import parameter_sweep
from srm_pro.cli.grain_cmd import build_grain_config, grain_options
from srm_pro.core.grain import GrainBallisticsSolver, GrainCalibration, PressureSolverPolicy
from srm_pro.utils.units import length_to_si


@click.group("sweep")
def sweep() -> None:
    """Sweep one design variable and tabulate the response."""


@sweep.command("grain-throat")
@grain_options(throat=False)
@click.option("--start", type=float, required=True, help="First throat diameter [mm].")
@click.option("--stop", type=float, required=True, help="Last throat diameter [mm].")
@click.option("--steps", type=int, default=10, show_default=True, help="Number of points.")
@click.pass_context
def grain_throat(
    ctx: click.Context,
    geometry: str,
    outer: float,
    core: float,
    length: float,
    segments: int,
    density: float,
    burn_coeff: float,
    exponent: float,
    policy: str,
    start: float,
    stop: float,
    steps: int,
) -> None:
    """Sweep the throat diameter of a grain design.

    Example: srm sweep grain-throat --start 10 --stop 16 --steps 7
    """
    console: Console = ctx.obj.get("console", Console())

    if steps < 2:
        console.print("[red]Error:[/red] --steps must be at least 2.")
        raise SystemExit(1)

    config = build_grain_config(
        console, geometry, outer, core, length, segments, density, burn_coeff, exponent, start
    )
    solver = GrainBallisticsSolver(GrainCalibration(policy=PressureSolverPolicy(policy)))
    throats_mm = np.linspace(start, stop, steps)
    result = parameter_sweep(
        solver, config, "throat_diameter", [length_to_si(t, "mm") for t in throats_mm]
    )

    console.print(f"\n[bold]SRM Pro — Throat Sweep ({geometry})[/bold]\n")
    table = Table(title=f"Throat diameter {start:g} → {stop:g} mm")
    table.add_column("Throat [mm]", justify="right", style="cyan")
    table.add_column("Kn", justify="right")
    table.add_column("Pc [MPa]", justify="right")
    table.add_column("Thrust [N]", justify="right")
    table.add_column("Burn Time [s]", justify="right")
    table.add_column("Class", justify="center")

    for t_mm, point in zip(throats_mm, result.points):
        if not point.ok:
            table.add_row(f"{t_mm:.2f}", "[red]rejected[/red]", "", "", "", "")
            continue
        res = point.result
        pc = f"{res.chamber_pressure / 1e6:.2f}"
        if not res.converged:
            pc = f"[yellow]{pc}*[/yellow]"
        table.add_row(
            f"{t_mm:.2f}",
            f"{res.kn:.1f}",
            pc,
            f"{res.thrust:.1f}",
            f"{res.burn_time:.2f}",
            res.impulse_class,
        )
    console.print(table)

    if result.n_failed:
        console.print(f"\n[yellow]Warning:[/yellow] {result.n_failed} point(s) rejected")
    if any(p.ok and not p.result.converged for p in result.points):
        console.print("[dim]* chamber pressure not converged[/dim]")
