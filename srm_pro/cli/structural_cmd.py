"""CLI command for case, closure and nozzle structural sizing."""

from __future__ import annotations

import click
from rich.console import Console

from srm_pro.cli.output import report_validation, results_table, save_json
from srm_pro.core.errors import InvalidInputError
from srm_pro.core.materials import Material
from srm_pro.core.structural import CaseStatus, StructuralAnalyzer, StructuralConfig
from srm_pro.utils.units import length_to_si, pressure_to_si
from srm_pro.utils.validation import validate_case_design

_STATUS_STYLE = {
    CaseStatus.SAFE: "green",
    CaseStatus.ACCEPTABLE: "yellow",
    CaseStatus.UNSAFE: "red",
}


def _material(console: Console, material_id: str | None) -> Material | None:
    if material_id is None:
        return None
    try:
        return Material(material_id)
    except KeyError as exc:
        console.print(f"[red]Error:[/red] {exc.args[0]}")
        raise SystemExit(1)


@click.command("structural")
@click.option("--thickness", type=float, default=3.175, show_default=True, help="Case wall thickness [mm].")
@click.option("--outer", type=float, default=76.2, show_default=True, help="Case outer diameter [mm].")
@click.option("--pressure", type=float, default=7.0, show_default=True, help="Max chamber pressure [MPa].")
@click.option("--case-yield", type=float, default=150.0, show_default=True, help="Case yield strength [MPa].")
@click.option("--case-material", type=str, default=None, help="Case material id (overrides --case-yield).")
@click.option("--fs", "target_fs", type=float, default=2.0, show_default=True, help="Target safety factor.")
@click.option("--bulkhead-yield", type=float, default=205.0, show_default=True, help="Bulkhead yield strength [MPa].")
@click.option("--bulkhead-material", type=str, default=None, help="Bulkhead material id (overrides --bulkhead-yield).")
@click.option("--radial-thickness", type=float, default=7.0, show_default=True, help="Bulkhead radial thickness [mm].")
@click.option("--screw", type=float, default=9.03, show_default=True, help="Screw minor diameter [mm].")
@click.option("--hole", type=float, default=10.0, show_default=True, help="Screw hole diameter [mm].")
@click.option("--screw-shear", type=float, default=207.0, show_default=True, help="Screw shear strength [MPa].")
@click.option("--screw-material", type=str, default=None, help="Screw material id (overrides --screw-shear).")
@click.option("--throat", type=float, default=12.7, show_default=True, help="Nozzle throat diameter [mm].")
@click.option("--expansion", type=float, default=6.0, show_default=True, help="Nozzle expansion ratio Ae/At.")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file path (JSON).")
@click.pass_context
def structural(
    ctx: click.Context,
    thickness: float,
    outer: float,
    pressure: float,
    case_yield: float,
    case_material: str | None,
    target_fs: float,
    bulkhead_yield: float,
    bulkhead_material: str | None,
    radial_thickness: float,
    screw: float,
    hole: float,
    screw_shear: float,
    screw_material: str | None,
    throat: float,
    expansion: float,
    output: str | None,
) -> None:
    """Size the motor case, bulkhead, retaining screws and nozzle."""
    console: Console = ctx.obj.get("console", Console())

    case_mat = _material(console, case_material)
    bulkhead_mat = _material(console, bulkhead_material)
    screw_mat = _material(console, screw_material)

    design = {
        "thickness": length_to_si(thickness, "mm"),
        "outer_diameter": length_to_si(outer, "mm"),
        "max_pressure": pressure_to_si(pressure, "MPa"),
        "yield_strength": case_mat.yield_strength if case_mat else pressure_to_si(case_yield, "MPa"),
        "target_safety_factor": target_fs,
        "throat_diameter": length_to_si(throat, "mm"),
        "expansion_ratio": expansion,
    }
    report_validation(console, validate_case_design(design))

    config = StructuralConfig(
        case_thickness=design["thickness"],
        case_outer_diameter=design["outer_diameter"],
        max_pressure=design["max_pressure"],
        case_yield_strength=design["yield_strength"],
        target_safety_factor=target_fs,
        bulkhead_yield_strength=(
            bulkhead_mat.yield_strength if bulkhead_mat else pressure_to_si(bulkhead_yield, "MPa")
        ),
        bulkhead_radial_thickness=length_to_si(radial_thickness, "mm"),
        screw_diameter=length_to_si(screw, "mm"),
        hole_diameter=length_to_si(hole, "mm"),
        screw_shear_strength=(
            screw_mat.shear_strength if screw_mat else pressure_to_si(screw_shear, "MPa")
        ),
        throat_diameter=design["throat_diameter"],
        expansion_ratio=expansion,
    )
    try:
        res = StructuralAnalyzer().solve(config)
    except InvalidInputError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    console.print("\n[bold]SRM Pro — Structural Sizing[/bold]\n")

    case = results_table("Motor Case")
    case.add_row("Internal Diameter", f"{res.internal_diameter * 1e3:.2f}", "mm")
    case.add_row("Tangential Stress", f"{res.tangential_stress / 1e6:.2f}", "MPa")
    case.add_row("Radial Stress", f"{res.radial_stress / 1e6:.2f}", "MPa")
    case.add_row("Longitudinal Stress", f"{res.longitudinal_stress / 1e6:.2f}", "MPa")
    case.add_row("Von Mises Stress", f"{res.von_mises_stress / 1e6:.2f}", "MPa")
    case.add_row("Safety Factor", f"{res.safety_factor:.2f}", "—")
    console.print(case)

    style = _STATUS_STYLE[res.case_status]
    console.print(f"Case status: [{style}]{res.case_status.value}[/{style}]\n")

    closures = results_table("Closures")
    closures.add_row("Bulkhead Thickness", f"{res.bulkhead_thickness * 1e3:.2f}", "mm")
    closures.add_row("Screw Count", str(res.screw_count), "—")
    closures.add_row("Force per Screw", f"{res.screw_force:.1f}", "N")
    closures.add_row("Screw Shear Stress", f"{res.screw_shear_stress / 1e6:.2f}", "MPa")
    closures.add_row("Screw Safety Factor", f"{res.screw_safety_factor:.2f}", "—")
    closures.add_row("Case Bearing Stress", f"{res.case_bearing_stress / 1e6:.2f}", "MPa")
    closures.add_row("Case Bearing SF", f"{res.case_bearing_safety_factor:.2f}", "—")
    closures.add_row("Bulkhead Bearing Stress", f"{res.bulkhead_bearing_stress / 1e6:.2f}", "MPa")
    closures.add_row("Bulkhead Bearing SF", f"{res.bulkhead_bearing_safety_factor:.2f}", "—")
    console.print(closures)

    nozzle = results_table("Nozzle")
    nozzle.add_row("Throat Area", f"{res.throat_area * 1e6:.2f}", "mm²")
    nozzle.add_row("Exit Area", f"{res.exit_area * 1e6:.2f}", "mm²")
    nozzle.add_row("Exit Diameter", f"{res.exit_diameter * 1e3:.2f}", "mm")
    nozzle.add_row("Expansion Ratio", f"{res.expansion_ratio:.2f}", "—")
    console.print(nozzle)

    if output:
        save_json(output, config, res)
        console.print(f"\n[dim]Saved to {output}[/dim]")
