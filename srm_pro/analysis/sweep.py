"""Parameter sweeps over SRM Pro solvers.

Every solver is a pure function of its configuration, so candidate
configurations are evaluated concurrently on a thread pool with no locking.
Configurations the engine rejects are recorded per point instead of
aborting the sweep.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Protocol, Sequence

import numpy as np

from srm_pro.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


class Solver(Protocol):
    def solve(self, config: Any) -> Any: ...


@dataclass(frozen=True)
class SweepPoint:
    """One evaluated configuration."""

    value: float
    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SweepResult:
    """All points of a one-parameter sweep, in input order."""

    parameter: str
    points: list[SweepPoint] = field(default_factory=list)

    @property
    def inputs(self) -> np.ndarray:
        return np.array([p.value for p in self.points], dtype=float)

    @property
    def n_failed(self) -> int:
        return sum(1 for p in self.points if not p.ok)

    def values(self, attr: str) -> np.ndarray:
        """Extract a numeric result attribute; failed points give NaN."""
        return np.array(
            [getattr(p.result, attr) if p.ok else np.nan for p in self.points],
            dtype=float,
        )


def check_field(config: Any, name: str) -> None:
    """Raise ValueError unless *name* is a field of the config dataclass."""
    names = {f.name for f in fields(config)}
    if name not in names:
        raise ValueError(
            f"{type(config).__name__} has no field '{name}'. Available: {sorted(names)}"
        )


def evaluate_configs(
    solver: Solver,
    configs: Iterable[Any],
    max_workers: int | None = None,
) -> list[tuple[Any, str | None]]:
    """Solve many configurations concurrently.

    Returns:
        One ``(result, error)`` pair per configuration, in input order.
        ``error`` is the rejection message when the engine raised
        InvalidInputError, otherwise None.
    """

    def run(config: Any) -> tuple[Any, str | None]:
        try:
            return solver.solve(config), None
        except InvalidInputError as exc:
            logger.debug("Configuration rejected: %s", exc)
            return None, str(exc)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(run, configs))


def parameter_sweep(
    solver: Solver,
    base_config: Any,
    parameter: str,
    values: Sequence[float],
    max_workers: int | None = None,
) -> SweepResult:
    """Evaluate *solver* with one config field stepped through *values*.

    Args:
        solver: Any SRM Pro solver (object with ``solve(config)``).
        base_config: Frozen config dataclass providing all other fields.
        parameter: Name of the field to vary.
        values: Values to assign to *parameter*.
        max_workers: Thread-pool size (None lets the executor decide).

    Raises:
        ValueError: If *parameter* is not a field of *base_config*.
    """
    check_field(base_config, parameter)
    configs = [replace(base_config, **{parameter: v}) for v in values]
    outcomes = evaluate_configs(solver, configs, max_workers)

    points = [
        SweepPoint(value=float(v), result=res, error=err)
        for v, (res, err) in zip(values, outcomes)
    ]
    result = SweepResult(parameter=parameter, points=points)
    if result.n_failed:
        logger.warning(
            "%d of %d sweep points on '%s' were rejected", result.n_failed, len(points), parameter
        )
    return result
