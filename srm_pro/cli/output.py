"""Shared rendering and export helpers for CLI commands."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np
from rich.console import Console
from rich.table import Table

from srm_pro.utils.validation import ValidationResult


class _ResultEncoder(json.JSONEncoder):
    """JSON encoder that handles enums and numpy types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        return super().default(obj)


def results_table(title: str) -> Table:
    table = Table(title=title)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Unit", style="dim")
    return table


def report_validation(console: Console, result: ValidationResult) -> None:
    """Print edge-validation findings; exit with status 1 on errors."""
    for msg in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {msg.message}")
    if not result.is_valid:
        for msg in result.errors:
            console.print(f"[red]Error:[/red] {msg.message}")
        raise SystemExit(1)


def save_json(path: str | Path, config: Any, result: Any, **extra: Any) -> None:
    """Write ``{"config": ..., "result": ...}`` (SI units) to *path*."""
    data = {"config": asdict(config), "result": asdict(result)}
    data["result"].update(extra)
    with open(path, "w") as f:
        json.dump(data, f, indent=2, cls=_ResultEncoder)
