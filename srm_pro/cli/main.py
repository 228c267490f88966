"""SRM Pro command-line interface.

Entry point for the ``srm`` CLI tool.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console

from srm_pro import __app_name__, __version__

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name=__app_name__)
@click.option("--verbose", "-v", is_flag=True, help="Log solver details.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """SRM Pro — Solid Rocket Motor sizing and analysis.

    Preliminary design of amateur solid motors: motor requirements, grain
    ballistics, structural sizing and flight stability.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["console"] = console


# Import and register sub-commands
from srm_pro.cli.motor_cmd import motor  # noqa: E402
from srm_pro.cli.grain_cmd import grain  # noqa: E402
from srm_pro.cli.structural_cmd import structural  # noqa: E402
from srm_pro.cli.aero_cmd import aero  # noqa: E402
from srm_pro.cli.sweep_cmd import sweep  # noqa: E402
from srm_pro.cli.info_cmd import info  # noqa: E402

cli.add_command(motor)
cli.add_command(grain)
cli.add_command(structural)
cli.add_command(aero)
cli.add_command(sweep)
cli.add_command(info)


def main() -> None:
    """Convenience wrapper for entry-point scripts."""
    cli()
