"""Tests for the motor requirements module."""

import math

import pytest

from srm_pro.core.errors import InvalidInputError
from srm_pro.core.motor import (
    WARN_HEAVY_MOTOR,
    WARN_HIGH_THRUST,
    WARN_PROPELLANT_FRACTION,
    WARN_THRUST_TO_WEIGHT,
    MotorCalibration,
    MotorRequirementsConfig,
    MotorRequirementsSolver,
)


@pytest.fixture
def solver():
    return MotorRequirementsSolver()


class TestApogeeMode:
    """Sizing from a target apogee."""

    def test_small_rocket(self, solver):
        cfg = MotorRequirementsConfig.from_apogee(300.0, 1.5, 0.0762, 0.75)
        res = solver.solve(cfg)

        assert res.mode == "apogee"
        assert res.total_impulse == pytest.approx(136.6, rel=1e-3)
        assert res.thrust == pytest.approx(res.total_impulse / 2.5)
        assert res.burn_time == 2.5
        assert res.warning is None

    def test_impulse_formula(self, solver):
        M, D, Cd, h = 2.0, 0.1, 0.5, 500.0
        res = solver.solve(MotorRequirementsConfig.from_apogee(h, M, D, Cd))

        k = 0.5 * 1.2 * Cd * math.pi * (D / 2) ** 2
        expected = M * math.sqrt(2 * 9.8 * h * (1 + k * h / M))
        assert res.total_impulse == pytest.approx(expected)

    def test_zero_drag_is_ballistic(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_apogee(100.0, 1.0, 0.05, 0.0))
        assert res.total_impulse == pytest.approx(math.sqrt(2 * 9.8 * 100.0))

    def test_mass_chain(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_apogee(300.0, 1.5, 0.0762, 0.75))
        assert res.propellant_mass == pytest.approx(res.total_impulse / (100.0 * 9.8))
        assert res.motor_mass == pytest.approx(res.propellant_mass * 1.3)
        assert res.thrust_to_weight == pytest.approx(
            res.thrust / ((1.5 + res.motor_mass) * 9.8)
        )

    def test_impulse_grows_with_apogee(self, solver):
        low = solver.solve(MotorRequirementsConfig.from_apogee(200.0, 1.5, 0.0762, 0.75))
        high = solver.solve(MotorRequirementsConfig.from_apogee(800.0, 1.5, 0.0762, 0.75))
        assert high.total_impulse > low.total_impulse

    def test_heavy_motor_warning(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_apogee(3000.0, 0.5, 0.0762, 0.75))
        assert res.motor_mass / 0.5 > 0.8
        assert res.warning == WARN_HEAVY_MOTOR


class TestThrustMode:
    """Sizing from a chosen average thrust."""

    def test_impulse_from_thrust(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_thrust(100.0, 1.5, 0.0762, 0.75))
        assert res.mode == "thrust"
        assert res.total_impulse == pytest.approx(250.0)
        assert res.propellant_mass == pytest.approx(250.0 / 980.0)

    def test_high_thrust_warning(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_thrust(600.0, 1.5, 0.0762, 0.75))
        assert res.warning == WARN_HIGH_THRUST

    def test_low_thrust_to_weight_warning(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_thrust(10.0, 1.5, 0.0762, 0.75))
        assert res.thrust_to_weight < 1.2
        assert res.warning == WARN_THRUST_TO_WEIGHT


class TestAdvisoryPriority:
    def test_default_propellant_fraction(self, solver):
        res = solver.solve(MotorRequirementsConfig.from_thrust(100.0, 1.5, 0.0762, 0.75))
        assert res.propellant_mass / res.motor_mass == pytest.approx(1 / 1.3)

    def test_propellant_fraction_outranks_thrust_to_weight(self):
        solver = MotorRequirementsSolver(MotorCalibration(casing_mass_factor=1.05))
        res = solver.solve(MotorRequirementsConfig.from_apogee(10.0, 10.0, 0.0762, 0.75))
        assert res.thrust_to_weight < 1.2
        assert res.warning == WARN_PROPELLANT_FRACTION


class TestCalibration:
    def test_custom_burn_time_and_isp(self):
        solver = MotorRequirementsSolver(MotorCalibration(burn_time=1.0, specific_impulse=150.0))
        res = solver.solve(MotorRequirementsConfig.from_thrust(200.0, 1.5, 0.0762, 0.75))
        assert res.total_impulse == pytest.approx(200.0)
        assert res.propellant_mass == pytest.approx(200.0 / (150.0 * 9.8))

    def test_zero_isp_rejected(self):
        solver = MotorRequirementsSolver(MotorCalibration(specific_impulse=0.0))
        with pytest.raises(InvalidInputError):
            solver.solve(MotorRequirementsConfig.from_thrust(100.0, 1.5, 0.0762, 0.75))


class TestInvalidInputs:
    def test_both_targets(self, solver):
        cfg = MotorRequirementsConfig(1.5, 0.0762, 0.75, apogee=300.0, avg_thrust=100.0)
        with pytest.raises(InvalidInputError):
            solver.solve(cfg)

    def test_no_target(self, solver):
        with pytest.raises(InvalidInputError):
            solver.solve(MotorRequirementsConfig(1.5, 0.0762, 0.75))

    @pytest.mark.parametrize("mass", [0.0, -1.0, math.nan, math.inf])
    def test_bad_mass(self, solver, mass):
        with pytest.raises(InvalidInputError):
            solver.solve(MotorRequirementsConfig.from_apogee(300.0, mass, 0.0762, 0.75))

    def test_negative_apogee(self, solver):
        with pytest.raises(InvalidInputError):
            solver.solve(MotorRequirementsConfig.from_apogee(-10.0, 1.5, 0.0762, 0.75))

    def test_negative_drag(self, solver):
        with pytest.raises(InvalidInputError):
            solver.solve(MotorRequirementsConfig.from_apogee(300.0, 1.5, 0.0762, -0.1))

    def test_error_is_value_error(self, solver):
        with pytest.raises(ValueError):
            solver.solve(MotorRequirementsConfig.from_thrust(0.0, 1.5, 0.0762, 0.75))
