"""CLI command for motor requirements sizing."""

from __future__ import annotations

import click
from rich.console import Console

from srm_pro.cli.output import report_validation, results_table, save_json
from srm_pro.core.errors import InvalidInputError
from srm_pro.core.motor import (
    MotorCalibration,
    MotorRequirementsConfig,
    MotorRequirementsSolver,
)
from srm_pro.utils.units import length_to_si
from srm_pro.utils.validation import validate_flight_design


@click.command("motor")
@click.option("--apogee", type=float, default=None, help="Target apogee [m].")
@click.option("--thrust", type=float, default=None, help="Target average thrust [N].")
@click.option("--mass", type=float, default=1.5, show_default=True, help="Rocket mass without motor [kg].")
@click.option("--diameter", type=float, default=76.2, show_default=True, help="Body diameter [mm].")
@click.option("--cd", type=float, default=0.75, show_default=True, help="Drag coefficient.")
@click.option("--burn-time", type=float, default=2.5, show_default=True, help="Assumed burn time [s].")
@click.option("--isp", type=float, default=100.0, show_default=True, help="Assumed specific impulse [s].")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file path (JSON).")
@click.pass_context
def motor(
    ctx: click.Context,
    apogee: float | None,
    thrust: float | None,
    mass: float,
    diameter: float,
    cd: float,
    burn_time: float,
    isp: float,
    output: str | None,
) -> None:
    """Estimate motor requirements from a target apogee or average thrust."""
    console: Console = ctx.obj.get("console", Console())

    if (apogee is None) == (thrust is None):
        console.print("[red]Error:[/red] Provide exactly one of --apogee or --thrust.")
        raise SystemExit(1)

    D = length_to_si(diameter, "mm")
    report_validation(console, validate_flight_design({
        "apogee": apogee,
        "avg_thrust": thrust,
        "rocket_mass": mass,
        "diameter": D,
        "drag_coeff": cd,
        "burn_time": burn_time,
    }))

    config = MotorRequirementsConfig(
        rocket_mass=mass, diameter=D, drag_coeff=cd, apogee=apogee, avg_thrust=thrust
    )
    solver = MotorRequirementsSolver(MotorCalibration(burn_time=burn_time, specific_impulse=isp))
    try:
        res = solver.solve(config)
    except InvalidInputError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    console.print(f"\n[bold]SRM Pro — Motor Requirements (by {res.mode})[/bold]\n")
    table = results_table("Motor Requirements")
    table.add_row("Average Thrust", f"{res.thrust:.2f}", "N")
    table.add_row("Burn Time", f"{res.burn_time:.2f}", "s")
    table.add_row("Total Impulse", f"{res.total_impulse:.2f}", "N·s")
    table.add_row("Propellant Mass", f"{res.propellant_mass * 1e3:.1f}", "g")
    table.add_row("Motor Mass", f"{res.motor_mass * 1e3:.1f}", "g")
    table.add_row("Thrust/Weight", f"{res.thrust_to_weight:.2f}", "—")
    console.print(table)

    if res.warning:
        console.print(f"\n[yellow]Warning:[/yellow] {res.warning}")

    if output:
        save_json(output, config, res)
        console.print(f"\n[dim]Saved to {output}[/dim]")
