"""CLI command for grain ballistics."""

from __future__ import annotations

import click
from rich.console import Console

from srm_pro.cli.output import report_validation, results_table, save_json
from srm_pro.core.errors import InvalidInputError
from srm_pro.core.grain import (
    GrainBallisticsSolver,
    GrainCalibration,
    GrainConfig,
    GrainGeometry,
    PressureSolverPolicy,
)
from srm_pro.utils.units import length_to_si, velocity_to_si
from srm_pro.utils.validation import validate_grain_design

GEOMETRY_CHOICES = [g.value for g in GrainGeometry]
POLICY_CHOICES = [p.value for p in PressureSolverPolicy]


def grain_options(throat: bool = True):
    """Attach the grain/propellant options shared by grain commands.

    Args:
        throat: Also attach ``--throat``. Commands that vary the throat
            themselves pass False.
    """
    options = [
        click.option("--geometry", type=click.Choice(GEOMETRY_CHOICES), default="bates",
                     show_default=True, help="Grain cross-section."),
        click.option("--outer", type=float, default=76.2, show_default=True,
                     help="Grain outer diameter [mm]."),
        click.option("--core", type=float, default=25.4, show_default=True,
                     help="Core diameter [mm]."),
        click.option("--length", type=float, default=100.0, show_default=True,
                     help="Segment length [mm]."),
        click.option("--segments", type=int, default=4, show_default=True,
                     help="Number of segments."),
        click.option("--density", type=float, default=1800.0, show_default=True,
                     help="Propellant density [kg/m³]."),
        click.option("--burn-coeff", type=float, default=8.26, show_default=True,
                     help="Burn-rate coefficient [mm/s at 1 MPa]."),
        click.option("--exponent", type=float, default=0.319, show_default=True,
                     help="Pressure exponent."),
    ]
    if throat:
        options.append(click.option("--throat", type=float, default=12.7, show_default=True,
                                    help="Throat diameter [mm]."))
    options.append(click.option("--policy", type=click.Choice(POLICY_CHOICES), default="bracketed",
                                show_default=True, help="Chamber-pressure solve policy."))

    def decorator(func):
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


def build_grain_config(
    console: Console,
    geometry: str,
    outer: float,
    core: float,
    length: float,
    segments: int,
    density: float,
    burn_coeff: float,
    exponent: float,
    throat: float,
) -> GrainConfig:
    """Convert user units to SI, validate at the edge and build the config."""
    design = {
        "outer_diameter": length_to_si(outer, "mm"),
        "core_diameter": length_to_si(core, "mm"),
        "length": length_to_si(length, "mm"),
        "segment_count": segments,
        "propellant_density": density,
        "burn_rate_coefficient": velocity_to_si(burn_coeff, "mm/s"),
        "pressure_exponent": exponent,
        "throat_diameter": length_to_si(throat, "mm"),
    }
    report_validation(console, validate_grain_design(design))
    return GrainConfig(geometry=GrainGeometry(geometry), **design)


@click.command("grain")
@grain_options()
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file path (JSON).")
@click.pass_context
def grain(
    ctx: click.Context,
    geometry: str,
    outer: float,
    core: float,
    length: float,
    segments: int,
    density: float,
    burn_coeff: float,
    exponent: float,
    throat: float,
    policy: str,
    output: str | None,
) -> None:
    """Compute initial grain performance and chamber pressure."""
    console: Console = ctx.obj.get("console", Console())

    config = build_grain_config(
        console, geometry, outer, core, length, segments, density, burn_coeff, exponent, throat
    )
    solver = GrainBallisticsSolver(GrainCalibration(policy=PressureSolverPolicy(policy)))
    try:
        res = solver.solve(config)
    except InvalidInputError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    console.print(f"\n[bold]SRM Pro — Grain Ballistics ({geometry})[/bold]\n")
    table = results_table("Grain Performance")
    table.add_row("Burning Area", f"{res.burning_area * 1e4:.2f}", "cm²")
    table.add_row("Kn", f"{res.kn:.1f}", "—")
    table.add_row("Burn Rate", f"{res.burn_rate * 1e3:.3f}", "mm/s")
    table.add_row("Mass Flow Rate", f"{res.mass_flow_rate * 1e3:.2f}", "g/s")
    table.add_row("Chamber Pressure", f"{res.chamber_pressure / 1e6:.2f}", "MPa")
    table.add_row("Thrust", f"{res.thrust:.2f}", "N")
    table.add_row("Burn Time", f"{res.burn_time:.2f}", "s")
    table.add_row("Web Thickness", f"{res.web_thickness * 1e3:.2f}", "mm")
    table.add_row("Specific Impulse", f"{res.specific_impulse:.1f}", "s")
    table.add_row("Total Impulse", f"{res.total_impulse:.1f}", "N·s")
    table.add_row("Impulse Class", res.impulse_class, "—")
    table.add_row("Burn Profile", res.burn_profile, "—")
    console.print(table)

    if not res.converged:
        console.print(
            f"\n[yellow]Warning:[/yellow] chamber pressure not converged after "
            f"{res.iterations} iterations (mismatch {res.mismatch:.1%})"
        )

    if output:
        save_json(
            output, config, res,
            total_impulse=res.total_impulse, impulse_class=res.impulse_class,
        )
        console.print(f"\n[dim]Saved to {output}[/dim]")
