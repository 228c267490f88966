"""Tests for the grain ballistics module."""

import math
from dataclasses import replace

import pytest

from srm_pro.core.errors import InvalidGeometryError, InvalidInputError
from srm_pro.core.grain import (
    GrainBallisticsSolver,
    GrainCalibration,
    GrainConfig,
    GrainGeometry,
    PressureSolverPolicy,
    burning_area,
    choked_flow_coefficient,
    classify_impulse,
)


@pytest.fixture
def bates():
    """Four 100 mm BATES segments, 76.2/25.4 mm, KNSB, 12.7 mm throat."""
    return GrainConfig(
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


@pytest.fixture
def solver():
    return GrainBallisticsSolver()


class TestBurningArea:
    def test_bates(self, bates):
        r_o, r_c, L = 0.0381, 0.0127, 0.1
        expected = 4 * (2 * math.pi * r_c * L + 2 * math.pi * (r_o**2 - r_c**2))
        assert burning_area(bates) == pytest.approx(expected)
        assert burning_area(bates) == pytest.approx(0.06435, rel=1e-3)

    def test_bates_scales_with_segments(self, bates):
        one = burning_area(replace(bates, segment_count=1))
        assert burning_area(bates) == pytest.approx(4 * one)

    def test_hollow_cylinder(self, bates):
        cfg = replace(bates, geometry=GrainGeometry.HOLLOW_CYLINDER)
        assert burning_area(cfg) == pytest.approx(0.040026, rel=1e-3)

    def test_star(self, bates):
        cfg = replace(bates, geometry=GrainGeometry.STAR)
        core = 2 * math.pi * 0.0127 * 0.1
        assert burning_area(cfg) == pytest.approx(2.5 * core)

    def test_finocyl(self, bates):
        cfg = replace(bates, geometry=GrainGeometry.FINOCYL)
        assert burning_area(cfg) == pytest.approx(0.029316, rel=1e-3)

    @pytest.mark.parametrize(
        "geometry",
        [GrainGeometry.HOLLOW_CYLINDER, GrainGeometry.STAR, GrainGeometry.FINOCYL],
    )
    def test_segment_count_ignored(self, bates, geometry):
        one = replace(bates, geometry=geometry, segment_count=1)
        many = replace(bates, geometry=geometry, segment_count=6)
        assert burning_area(one) == pytest.approx(burning_area(many))

    def test_star_factor_calibration(self, bates):
        cfg = replace(bates, geometry=GrainGeometry.STAR)
        doubled = burning_area(cfg, GrainCalibration(star_area_factor=5.0))
        assert doubled == pytest.approx(2 * burning_area(cfg))


class TestImpulseClass:
    @pytest.mark.parametrize(
        "impulse, letter",
        [(0.0, "H"), (159.9, "H"), (160.0, "I"), (319.0, "I"), (320.0, "J"),
         (640.0, "K"), (1279.0, "K"), (1280.0, "L+"), (5000.0, "L+")],
    )
    def test_boundaries(self, impulse, letter):
        assert classify_impulse(impulse) == letter


class TestChokedFlow:
    def test_knsb_coefficient(self):
        cal = GrainCalibration()
        c = choked_flow_coefficient(cal.gamma, cal.gas_constant, cal.chamber_temperature)
        assert c == pytest.approx(1.1288e-3, rel=1e-3)

    def test_gas_constant(self):
        assert GrainCalibration().gas_constant == pytest.approx(197.96, rel=1e-3)


class TestBracketedSolve:
    """Default policy: Brent's method on the log mass-flow ratio."""

    def test_bates_scenario(self, solver, bates):
        res = solver.solve(bates)

        assert res.converged
        assert res.kn == pytest.approx(508, rel=1e-2)
        assert res.chamber_pressure / 1e6 == pytest.approx(16.3, rel=1e-2)
        assert res.burn_rate * 1e3 == pytest.approx(20.1, rel=1e-2)
        assert res.burn_time == pytest.approx(1.26, rel=1e-2)
        assert res.thrust == pytest.approx(3100, rel=1e-2)
        assert res.web_thickness == pytest.approx(0.0254)
        assert res.impulse_class == "L+"
        assert res.burn_profile == "neutral-progressive"

    @pytest.mark.parametrize("geometry", list(GrainGeometry))
    def test_positive_web_and_burn_time(self, solver, bates, geometry):
        res = solver.solve(replace(bates, geometry=geometry))
        assert res.web_thickness > 0
        assert res.burn_time > 0
        assert res.converged
        assert res.iterations <= 20

    def test_deterministic(self, solver, bates):
        assert solver.solve(bates) == solver.solve(bates)

    def test_mass_balance_at_solution(self, solver, bates):
        res = solver.solve(bates)
        cal = solver.calibration
        c = choked_flow_coefficient(cal.gamma, cal.gas_constant, cal.chamber_temperature)
        throat_flow = res.throat_area * res.chamber_pressure * c
        assert res.mass_flow_rate == pytest.approx(throat_flow, rel=1e-6)
        assert res.mismatch < 1e-6

    def test_derived_quantities(self, solver, bates):
        res = solver.solve(bates)
        assert res.thrust == pytest.approx(1.5 * res.throat_area * res.chamber_pressure)
        assert res.burn_time == pytest.approx(res.web_thickness / res.burn_rate)
        assert res.total_impulse == pytest.approx(res.thrust * res.burn_time)
        assert res.specific_impulse == pytest.approx(
            res.thrust / (res.mass_flow_rate * 9.80665)
        )

    def test_larger_throat_lowers_pressure(self, solver, bates):
        small = solver.solve(bates)
        large = solver.solve(replace(bates, throat_diameter=0.02))
        assert large.kn < small.kn
        assert large.chamber_pressure < small.chamber_pressure

    def test_zero_exponent(self, solver, bates):
        res = solver.solve(replace(bates, pressure_exponent=0.0))
        assert res.converged
        assert res.burn_rate == pytest.approx(8.26e-3)

    def test_regressive_profile(self, solver, bates):
        res = solver.solve(replace(bates, geometry=GrainGeometry.HOLLOW_CYLINDER))
        assert res.burn_profile == "regressive"


class TestProportionalSolve:
    """Legacy fixed-gain iteration."""

    def test_bates_does_not_converge(self, bates):
        solver = GrainBallisticsSolver(GrainCalibration(policy=PressureSolverPolicy.PROPORTIONAL))
        res = solver.solve(bates)

        assert not res.converged
        assert res.iterations == 20
        assert 5e6 < res.chamber_pressure < 8e6

    def test_non_convergence_logged(self, bates, caplog):
        solver = GrainBallisticsSolver(GrainCalibration(policy=PressureSolverPolicy.PROPORTIONAL))
        with caplog.at_level("WARNING", logger="srm_pro.core.grain"):
            solver.solve(bates)
        assert "not converged" in caplog.text

    def test_converges_near_start(self, bates):
        # A gain large enough to close the gap quickly
        cal = GrainCalibration(policy=PressureSolverPolicy.PROPORTIONAL, pressure_gain=5e6,
                               max_iterations=200)
        res = GrainBallisticsSolver(cal).solve(bates)
        bracketed = GrainBallisticsSolver().solve(bates)
        assert res.converged
        assert res.chamber_pressure == pytest.approx(bracketed.chamber_pressure, rel=0.05)


class TestInvalidInputs:
    def test_core_wider_than_grain(self, solver, bates):
        with pytest.raises(InvalidGeometryError):
            solver.solve(replace(bates, core_diameter=0.08))

    def test_core_equal_to_grain(self, solver, bates):
        with pytest.raises(InvalidGeometryError):
            solver.solve(replace(bates, core_diameter=0.0762))

    def test_geometry_error_is_input_error(self, solver, bates):
        with pytest.raises(InvalidInputError):
            solver.solve(replace(bates, core_diameter=0.1))

    @pytest.mark.parametrize(
        "field", ["outer_diameter", "length", "propellant_density", "burn_rate_coefficient",
                  "throat_diameter"],
    )
    def test_non_positive(self, solver, bates, field):
        with pytest.raises(InvalidInputError):
            solver.solve(replace(bates, **{field: 0.0}))

    @pytest.mark.parametrize("n", [-0.1, 1.0, 1.5, math.nan])
    def test_exponent_domain(self, solver, bates, n):
        with pytest.raises(InvalidInputError):
            solver.solve(replace(bates, pressure_exponent=n))

    def test_zero_segments(self, solver, bates):
        with pytest.raises(InvalidInputError):
            solver.solve(replace(bates, segment_count=0))

    def test_vanishing_throat(self, solver, bates):
        with pytest.raises(InvalidInputError):
            solver.solve(replace(bates, throat_diameter=1e-6))

    def test_throat_too_small_for_bracket(self, solver, bates):
        with pytest.raises(InvalidInputError):
            solver.solve(replace(bates, throat_diameter=1e-4))
