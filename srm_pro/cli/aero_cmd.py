"""CLI command for stability, drag and apogee estimation."""

from __future__ import annotations

import click
from rich.console import Console

from srm_pro.cli.output import report_validation, results_table, save_json
from srm_pro.core.aero import AeroConfig, AerodynamicsSolver, NoseShape, StabilityStatus
from srm_pro.core.errors import InvalidInputError
from srm_pro.utils.units import angle_to_si, length_to_si
from srm_pro.utils.validation import validate_flight_design

_STATUS_STYLE = {
    StabilityStatus.STABLE: "green",
    StabilityStatus.MARGINAL: "yellow",
    StabilityStatus.UNSTABLE: "red",
}


@click.command("aero")
@click.option("--diameter", type=float, default=76.2, show_default=True, help="Body diameter [mm].")
@click.option("--body-length", type=float, default=800.0, show_default=True, help="Body tube length [mm].")
@click.option("--nose-length", type=float, default=200.0, show_default=True, help="Nose cone length [mm].")
@click.option("--nose", type=click.Choice([s.value for s in NoseShape]), default="ogive",
              show_default=True, help="Nose cone shape.")
@click.option("--dry-mass", type=float, default=1.5, show_default=True, help="Dry (burnout) mass [kg].")
@click.option("--propellant-mass", type=float, default=0.5, show_default=True, help="Propellant mass [kg].")
@click.option("--cg", type=float, default=450.0, show_default=True, help="CG position from nose tip [mm].")
@click.option("--fins", type=int, default=3, show_default=True, help="Number of fins.")
@click.option("--root-chord", type=float, default=120.0, show_default=True, help="Fin root chord [mm].")
@click.option("--tip-chord", type=float, default=60.0, show_default=True, help="Fin tip chord [mm].")
@click.option("--span", type=float, default=100.0, show_default=True, help="Fin span [mm].")
@click.option("--sweep", type=float, default=30.0, show_default=True, help="Leading-edge sweep [deg].")
@click.option("--thrust", type=float, default=100.0, show_default=True, help="Average thrust [N].")
@click.option("--burn-time", type=float, default=2.5, show_default=True, help="Burn time [s].")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file path (JSON).")
@click.pass_context
def aero(
    ctx: click.Context,
    diameter: float,
    body_length: float,
    nose_length: float,
    nose: str,
    dry_mass: float,
    propellant_mass: float,
    cg: float,
    fins: int,
    root_chord: float,
    tip_chord: float,
    span: float,
    sweep: float,
    thrust: float,
    burn_time: float,
    output: str | None,
) -> None:
    """Check static stability and estimate drag and apogee."""
    console: Console = ctx.obj.get("console", Console())

    config = AeroConfig(
        body_diameter=length_to_si(diameter, "mm"),
        body_length=length_to_si(body_length, "mm"),
        nose_length=length_to_si(nose_length, "mm"),
        nose_shape=NoseShape(nose),
        dry_mass=dry_mass,
        propellant_mass=propellant_mass,
        cg_position=length_to_si(cg, "mm"),
        fin_count=fins,
        fin_root_chord=length_to_si(root_chord, "mm"),
        fin_tip_chord=length_to_si(tip_chord, "mm"),
        fin_span=length_to_si(span, "mm"),
        fin_sweep=angle_to_si(sweep, "degree"),
        avg_thrust=thrust,
        burn_time=burn_time,
    )
    report_validation(console, validate_flight_design({
        "diameter": config.body_diameter,
        "body_length": config.body_length,
        "nose_length": config.nose_length,
        "dry_mass": dry_mass,
        "avg_thrust": thrust,
        "burn_time": burn_time,
        "cg_position": config.cg_position,
        "fin_count": fins,
    }))

    try:
        res = AerodynamicsSolver().solve(config)
    except InvalidInputError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    console.print("\n[bold]SRM Pro — Aerodynamics & Stability[/bold]\n")

    stability = results_table("Stability")
    stability.add_row("Center of Pressure", f"{res.center_of_pressure * 1e3:.1f}", "mm")
    stability.add_row("Center of Gravity", f"{res.center_of_gravity * 1e3:.1f}", "mm")
    stability.add_row("Static Margin", f"{res.stability_margin:.2f}", "cal")
    stability.add_row("Fin CNα", f"{res.fin_normal_force:.2f}", "1/rad")
    stability.add_row("Fin Sweep Length", f"{res.fin_sweep_length * 1e3:.1f}", "mm")
    console.print(stability)

    style = _STATUS_STYLE[res.stability_status]
    console.print(f"Stability: [{style}]{res.stability_status.value}[/{style}]")
    for line in res.advice:
        console.print(f"[yellow]Advice:[/yellow] {line}")

    drag = results_table("Drag")
    drag.add_row("Nose Cd", f"{res.nose_cd:.3f}", "—")
    drag.add_row("Body Cd", f"{res.body_cd:.3f}", "—")
    drag.add_row("Fin Cd", f"{res.fin_cd:.3f}", "—")
    drag.add_row("Total Cd", f"{res.total_cd:.3f}", "—")
    console.print(drag)

    flight = results_table("Flight")
    flight.add_row("Apogee", f"{res.apogee:.1f}", "m")
    flight.add_row("Max Velocity", f"{res.max_velocity:.1f}", "m/s")
    flight.add_row("Burnout Altitude", f"{res.burnout_altitude:.1f}", "m")
    flight.add_row("Coast Time", f"{res.coast_time:.2f}", "s")
    flight.add_row("Time to Apogee", f"{res.time_to_apogee:.2f}", "s")
    console.print(flight)

    recs = results_table("Recommendations")
    recs.add_row("Nose Cone", res.recommended_nose, "—")
    recs.add_row("Fin Span", f"{res.recommended_fin_span * 1e3:.1f}", "mm")
    recs.add_row("Fin Area (each)", f"{res.recommended_fin_area * 1e4:.1f}", "cm²")
    console.print(recs)

    if output:
        save_json(output, config, res)
        console.print(f"\n[dim]Saved to {output}[/dim]")
