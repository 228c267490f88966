"""CLI commands for reference data."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from srm_pro.core.materials import get_material_info, list_materials


@click.group("info")
def info() -> None:
    """Show reference data."""


@info.command("materials")
@click.pass_context
def materials(ctx: click.Context) -> None:
    """List structural materials available to the structural command."""
    console: Console = ctx.obj.get("console", Console())

    table = Table(title="Structural Materials")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    table.add_column("ρ [kg/m³]", justify="right")
    table.add_column("Yield [MPa]", justify="right")
    table.add_column("UTS [MPa]", justify="right")
    table.add_column("Shear [MPa]", justify="right")

    for mat_id in list_materials():
        rec = get_material_info(mat_id)
        table.add_row(
            mat_id,
            rec["name"],
            rec["category"],
            f"{rec['density']:.0f}",
            f"{rec['yield_strength']:.0f}",
            f"{rec.get('ultimate_tensile', 0.0):.0f}",
            f"{rec['shear_strength']:.0f}",
        )
    console.print(table)
