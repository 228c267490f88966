"""Monte Carlo dispersion analysis for SRM Pro.

Propagates manufacturing and propellant uncertainty (burn-rate coefficient,
throat diameter, dry mass, ...) through any solver and summarises the spread
of its outputs:

- Normal, uniform and triangular input distributions
- Mean, standard deviation, median, 5th/95th percentiles, min/max
- Pearson correlation between each input and each output
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

import numpy as np

from srm_pro.analysis.sweep import Solver, check_field, evaluate_configs

logger = logging.getLogger(__name__)


class Distribution(Enum):
    """Supported probability distributions for uncertain parameters."""

    NORMAL = "normal"
    UNIFORM = "uniform"
    TRIANGULAR = "triangular"


@dataclass
class UncertainParameter:
    """An uncertain config field.

    Args:
        name: Config field name.
        nominal: Best-estimate value.
        distribution: Probability distribution type.
        std: Standard deviation (normal).
        lower: Lower bound (uniform/triangular).
        upper: Upper bound (uniform/triangular).
        mode: Mode (triangular; defaults to nominal).
    """

    name: str
    nominal: float
    distribution: Distribution = Distribution.NORMAL
    std: float = 0.0
    lower: float = 0.0
    upper: float = 0.0
    mode: float | None = None

    def sample(self, rng: np.random.Generator, n: int) -> np.ndarray:
        """Generate n samples from this parameter's distribution."""
        if self.distribution == Distribution.NORMAL:
            return rng.normal(self.nominal, self.std, size=n)
        if self.distribution == Distribution.UNIFORM:
            return rng.uniform(self.lower, self.upper, size=n)
        if self.distribution == Distribution.TRIANGULAR:
            mode = self.mode if self.mode is not None else self.nominal
            return rng.triangular(self.lower, mode, self.upper, size=n)
        raise ValueError(f"Unknown distribution: {self.distribution}")


@dataclass
class OutputStatistics:
    """Statistical summary of one output quantity."""

    name: str
    mean: float = 0.0
    std: float = 0.0
    median: float = 0.0
    p05: float = 0.0
    p95: float = 0.0
    min_val: float = 0.0
    max_val: float = 0.0

    @classmethod
    def from_samples(cls, name: str, data: np.ndarray) -> OutputStatistics:
        return cls(
            name=name,
            mean=float(np.mean(data)),
            std=float(np.std(data, ddof=1)) if len(data) > 1 else 0.0,
            median=float(np.median(data)),
            p05=float(np.percentile(data, 5)),
            p95=float(np.percentile(data, 95)),
            min_val=float(np.min(data)),
            max_val=float(np.max(data)),
        )


@dataclass
class DispersionResult:
    """Outcome of a Monte Carlo run."""

    n_samples: int = 0
    n_failed: int = 0
    output_statistics: dict[str, OutputStatistics] = field(default_factory=dict)
    correlations: dict[str, dict[str, float]] = field(default_factory=dict)


class DispersionAnalysis:
    """Monte Carlo propagation of config uncertainty through a solver.

    Usage::

        mc = DispersionAnalysis(GrainBallisticsSolver(), grain_config)
        mc.add_parameter(UncertainParameter(
            "burn_rate_coefficient", 8.26e-3, Distribution.NORMAL, std=0.3e-3
        ))
        mc.add_output("chamber_pressure")
        mc.add_output("total_impulse")
        result = mc.run(n_samples=500, seed=1)
    """

    def __init__(self, solver: Solver, base_config: Any):
        self.solver = solver
        self.base_config = base_config
        self._parameters: list[UncertainParameter] = []
        self._output_keys: list[str] = []

    def add_parameter(self, param: UncertainParameter) -> None:
        """Register an uncertain field.

        Raises:
            ValueError: If the config has no such field, or the field is an
                integer count (segments, fins) that cannot be sampled.
        """
        check_field(self.base_config, param.name)
        if isinstance(getattr(self.base_config, param.name), int):
            raise ValueError(
                f"'{param.name}' is an integer field and cannot be sampled continuously"
            )
        self._parameters.append(param)

    def add_output(self, key: str) -> None:
        self._output_keys.append(key)

    @property
    def parameters(self) -> list[UncertainParameter]:
        return self._parameters

    @property
    def output_keys(self) -> list[str]:
        return self._output_keys

    def run(
        self,
        n_samples: int = 500,
        seed: int | None = None,
        max_workers: int | None = None,
    ) -> DispersionResult:
        """Sample the uncertain fields, solve every sample and summarise.

        Samples the engine rejects are counted in ``n_failed`` and left out
        of the statistics.

        Raises:
            ValueError: If no parameters or outputs are defined, *n_samples*
                is below 1, or an output is not an attribute of the result.
        """
        if not self._parameters:
            raise ValueError("No uncertain parameters defined")
        if not self._output_keys:
            raise ValueError("No outputs defined")
        if n_samples < 1:
            raise ValueError(f"n_samples must be at least 1, got {n_samples}")

        rng = np.random.default_rng(seed)
        inputs = {p.name: p.sample(rng, n_samples) for p in self._parameters}

        configs = [
            replace(self.base_config, **{name: float(arr[i]) for name, arr in inputs.items()})
            for i in range(n_samples)
        ]
        # Solve one sample first so a misspelt output fails before the full run
        outcomes = evaluate_configs(self.solver, configs[:1], max_workers)
        checked = outcomes[0][1] is None
        if checked:
            self._check_outputs(outcomes[0][0])
        outcomes += evaluate_configs(self.solver, configs[1:], max_workers)
        if not checked:
            first_ok = next((res for res, err in outcomes if err is None), None)
            if first_ok is not None:
                self._check_outputs(first_ok)

        outputs = {
            key: np.array(
                [getattr(res, key) if err is None else np.nan for res, err in outcomes],
                dtype=float,
            )
            for key in self._output_keys
        }
        n_failed = sum(1 for _, err in outcomes if err is not None)
        if n_failed:
            logger.warning("%d of %d Monte Carlo samples were rejected", n_failed, n_samples)

        stats: dict[str, OutputStatistics] = {}
        for key, data in outputs.items():
            valid = data[~np.isnan(data)]
            if len(valid) > 0:
                stats[key] = OutputStatistics.from_samples(key, valid)

        return DispersionResult(
            n_samples=n_samples,
            n_failed=n_failed,
            output_statistics=stats,
            correlations=self._correlations(inputs, outputs),
        )

    def _check_outputs(self, result: Any) -> None:
        missing = [key for key in self._output_keys if not hasattr(result, key)]
        if missing:
            raise ValueError(
                f"{type(result).__name__} has no output(s) {missing}"
            )

    def _correlations(
        self,
        inputs: dict[str, np.ndarray],
        outputs: dict[str, np.ndarray],
    ) -> dict[str, dict[str, float]]:
        """Pearson correlation of every input with every output."""
        table: dict[str, dict[str, float]] = {}
        for name, x in inputs.items():
            row: dict[str, float] = {}
            for key, y in outputs.items():
                valid = ~np.isnan(y)
                if valid.sum() < 3 or np.std(x[valid]) == 0 or np.std(y[valid]) == 0:
                    row[key] = 0.0
                    continue
                row[key] = float(np.corrcoef(x[valid], y[valid])[0, 1])
            table[name] = row
        return table
