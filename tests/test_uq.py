"""Tests for the Monte Carlo dispersion module."""

import threading
from dataclasses import dataclass

import numpy as np
import pytest

from srm_pro.analysis.uq import (
    DispersionAnalysis,
    Distribution,
    OutputStatistics,
    UncertainParameter,
)
from srm_pro.core.errors import InvalidInputError
from srm_pro.core.grain import GrainBallisticsSolver, GrainConfig, GrainGeometry


@dataclass(frozen=True)
class _LinearConfig:
    x: float = 5.0
    z: float = 3.0
    count: int = 4


@dataclass(frozen=True)
class _LinearResult:
    y: float
    y2: float


class _LinearSolver:
    """y = 2*x + 3*z; rejects x > limit."""

    def __init__(self, limit: float = np.inf):
        self.limit = limit

    def solve(self, config: _LinearConfig) -> _LinearResult:
        if config.x > self.limit:
            raise InvalidInputError("x out of range")
        return _LinearResult(y=2.0 * config.x + 3.0 * config.z, y2=config.x**2)


class _CountingSolver(_LinearSolver):
    def __init__(self):
        super().__init__()
        self.calls = 0
        self._lock = threading.Lock()

    def solve(self, config: _LinearConfig) -> _LinearResult:
        with self._lock:
            self.calls += 1
        return super().solve(config)


def _analysis(solver=None) -> DispersionAnalysis:
    mc = DispersionAnalysis(solver or _LinearSolver(), _LinearConfig())
    mc.add_parameter(UncertainParameter("x", 5.0, Distribution.NORMAL, std=1.0))
    mc.add_parameter(UncertainParameter("z", 3.0, Distribution.NORMAL, std=0.5))
    mc.add_output("y")
    return mc


class TestUncertainParameter:
    """Test parameter sampling."""

    def test_normal_sampling(self):
        p = UncertainParameter("x", 10.0, Distribution.NORMAL, std=1.0)
        rng = np.random.default_rng(42)
        samples = p.sample(rng, 1000)

        assert len(samples) == 1000
        assert abs(np.mean(samples) - 10.0) < 0.2
        assert abs(np.std(samples) - 1.0) < 0.2

    def test_uniform_sampling(self):
        p = UncertainParameter("x", 5.0, Distribution.UNIFORM, lower=0.0, upper=10.0)
        rng = np.random.default_rng(42)
        samples = p.sample(rng, 1000)

        assert np.all(samples >= 0.0)
        assert np.all(samples <= 10.0)
        assert abs(np.mean(samples) - 5.0) < 0.5

    def test_triangular_sampling(self):
        p = UncertainParameter(
            "x", 5.0, Distribution.TRIANGULAR, lower=0.0, upper=10.0, mode=5.0
        )
        rng = np.random.default_rng(42)
        samples = p.sample(rng, 1000)

        assert np.all(samples >= 0.0)
        assert np.all(samples <= 10.0)

    def test_triangular_mode_defaults_to_nominal(self):
        p = UncertainParameter("x", 2.0, Distribution.TRIANGULAR, lower=0.0, upper=10.0)
        samples = p.sample(np.random.default_rng(1), 5000)
        # Mean of triangular(a, c, b) is (a + b + c) / 3
        assert np.mean(samples) == pytest.approx(4.0, abs=0.2)


class TestOutputStatistics:
    """Test statistics computation."""

    def test_from_samples(self):
        data = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        stats = OutputStatistics.from_samples("test", data)

        assert stats.name == "test"
        assert stats.mean == pytest.approx(3.0)
        assert stats.median == pytest.approx(3.0)
        assert stats.min_val == 1.0
        assert stats.max_val == 5.0

    def test_percentiles(self):
        rng = np.random.default_rng(42)
        data = rng.normal(0.0, 1.0, size=10000)
        stats = OutputStatistics.from_samples("test", data)

        # ~±1.645 sigma
        assert stats.p05 == pytest.approx(-1.645, abs=0.1)
        assert stats.p95 == pytest.approx(1.645, abs=0.1)

    def test_single_sample(self):
        stats = OutputStatistics.from_samples("test", np.array([2.0]))
        assert stats.std == 0.0


class TestDispersionAnalysis:
    """Test the Monte Carlo engine."""

    def test_basic_run(self):
        result = _analysis().run(n_samples=500, seed=42)

        assert result.n_samples == 500
        assert result.n_failed == 0
        # y = 2*x + 3*z → E[y] = 2*5 + 3*3 = 19
        assert abs(result.output_statistics["y"].mean - 19.0) < 1.0

    def test_variance_propagation(self):
        """Var(y) = 4*Var(x) + 9*Var(z) for y = 2x + 3z independent."""
        result = _analysis().run(n_samples=5000, seed=42)

        expected_std = np.sqrt(4.0 * 1.0 + 9.0 * 0.25)
        assert abs(result.output_statistics["y"].std - expected_std) < 0.3

    def test_correlations(self):
        result = _analysis().run(n_samples=2000, seed=42)

        assert result.correlations["x"]["y"] > 0.3
        assert result.correlations["z"]["y"] > 0.3

    def test_zero_spread_correlation(self):
        mc = DispersionAnalysis(_LinearSolver(), _LinearConfig())
        mc.add_parameter(UncertainParameter("x", 5.0, Distribution.NORMAL, std=0.0))
        mc.add_output("y")
        result = mc.run(n_samples=50, seed=1)
        assert result.correlations["x"]["y"] == 0.0
        assert result.output_statistics["y"].std == 0.0

    def test_failed_samples_counted(self):
        result = _analysis(_LinearSolver(limit=6.0)).run(n_samples=500, seed=42)

        assert result.n_failed > 0
        assert "y" in result.output_statistics
        assert result.output_statistics["y"].max_val <= 2 * 6.0 + 3 * 5.0

    def test_reproducibility(self):
        mc = _analysis()
        r1 = mc.run(n_samples=100, seed=99)
        r2 = mc.run(n_samples=100, seed=99)

        assert r1.output_statistics["y"].mean == pytest.approx(r2.output_statistics["y"].mean)

    def test_multiple_outputs(self):
        mc = _analysis()
        mc.add_output("y2")
        result = mc.run(n_samples=500, seed=42)

        assert "y" in result.output_statistics
        assert "y2" in result.output_statistics

    def test_unknown_parameter(self):
        mc = DispersionAnalysis(_LinearSolver(), _LinearConfig())
        with pytest.raises(ValueError):
            mc.add_parameter(UncertainParameter("w", 1.0, std=0.1))

    def test_integer_field_rejected(self):
        mc = DispersionAnalysis(_LinearSolver(), _LinearConfig())
        with pytest.raises(ValueError, match="count"):
            mc.add_parameter(UncertainParameter("count", 4.0, std=0.5))
        assert mc.parameters == []

    def test_unknown_output_fails_after_one_solve(self):
        solver = _CountingSolver()
        mc = DispersionAnalysis(solver, _LinearConfig())
        mc.add_parameter(UncertainParameter("x", 5.0, std=1.0))
        mc.add_output("thrust")
        with pytest.raises(ValueError, match="thrust"):
            mc.run(n_samples=200, seed=1)
        assert solver.calls == 1

    def test_unknown_output_with_rejected_samples(self):
        mc = DispersionAnalysis(_LinearSolver(limit=5.0), _LinearConfig())
        mc.add_parameter(UncertainParameter("x", 5.0, Distribution.UNIFORM, lower=4.0, upper=6.0))
        mc.add_output("thrust")
        with pytest.raises(ValueError, match="thrust"):
            mc.run(n_samples=50, seed=1)

    def test_requires_samples(self):
        with pytest.raises(ValueError):
            _analysis().run(n_samples=0)

    def test_requires_parameters(self):
        mc = DispersionAnalysis(_LinearSolver(), _LinearConfig())
        mc.add_output("y")
        with pytest.raises(ValueError):
            mc.run(n_samples=10)

    def test_requires_outputs(self):
        mc = DispersionAnalysis(_LinearSolver(), _LinearConfig())
        mc.add_parameter(UncertainParameter("x", 5.0, std=1.0))
        with pytest.raises(ValueError):
            mc.run(n_samples=10)


class TestGrainDispersion:
    def test_burn_rate_drives_pressure(self):
        config = GrainConfig(
            geometry=GrainGeometry.BATES,
            outer_diameter=0.0762,
            core_diameter=0.0254,
            length=0.1,
            propellant_density=1800.0,
            burn_rate_coefficient=8.26e-3,
            pressure_exponent=0.319,
            throat_diameter=0.0127,
            segment_count=4,
        )
        mc = DispersionAnalysis(GrainBallisticsSolver(), config)
        mc.add_parameter(UncertainParameter(
            "burn_rate_coefficient", 8.26e-3, Distribution.NORMAL, std=0.3e-3
        ))
        mc.add_output("chamber_pressure")
        mc.add_output("total_impulse")
        result = mc.run(n_samples=200, seed=3)

        assert result.n_failed == 0
        stats = result.output_statistics["chamber_pressure"]
        assert stats.p05 < 16.3e6 < stats.p95
        assert result.correlations["burn_rate_coefficient"]["chamber_pressure"] > 0.9
