"""SRM Pro command-line interface package.

Supports ``python -m srm_pro.cli`` as an alternative to the ``srm`` entry point.
"""

from srm_pro.cli.main import cli, main

__all__ = ["cli", "main"]
