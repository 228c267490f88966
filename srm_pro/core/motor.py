"""Motor requirements sizing for SRM Pro.

Estimates the motor a rocket needs, either from a target apogee or from a
chosen average thrust, using single-shot energy and impulse correlations
calibrated for amateur sugar-propellant motors.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from srm_pro.core.errors import InvalidInputError
from srm_pro.utils.constants import G_DESIGN, PI, RHO_AIR_DESIGN
from srm_pro.utils.validation import require_non_negative, require_positive

logger = logging.getLogger(__name__)

# Advisory messages, in priority order
WARN_PROPELLANT_FRACTION = (
    "Propellant/motor mass ratio above 90%: the casing would be structurally weak."
)
WARN_THRUST_TO_WEIGHT = (
    "Thrust-to-weight ratio below 1.2: insufficient liftoff margin."
)
WARN_HEAVY_MOTOR = (
    "Motor mass above 80% of the rocket mass: consider a lower target apogee."
)
WARN_HIGH_THRUST = (
    "Thrust above 500 N is unusual for amateur motors: check structural requirements."
)

MAX_PROPELLANT_FRACTION = 0.9
MIN_THRUST_TO_WEIGHT = 1.2
MAX_MOTOR_MASS_FRACTION = 0.8
MAX_AMATEUR_THRUST = 500.0  # N


@dataclass(frozen=True)
class MotorCalibration:
    """Empirical constants behind the sizing correlations."""

    burn_time: float = 2.5  # s, nominal burn time
    specific_impulse: float = 100.0  # s, typical of KNSB/KNDX
    casing_mass_factor: float = 1.3  # motor mass / propellant mass
    air_density: float = RHO_AIR_DESIGN  # kg/m³
    gravity: float = G_DESIGN  # m/s²


@dataclass(frozen=True)
class MotorRequirementsConfig:
    """Rocket parameters plus exactly one driving target.

    Set ``apogee`` [m] to size from altitude, or ``avg_thrust`` [N] to size
    from a chosen thrust level.
    """

    rocket_mass: float  # kg, rocket without motor
    diameter: float  # m
    drag_coeff: float
    apogee: float | None = None  # m
    avg_thrust: float | None = None  # N

    @classmethod
    def from_apogee(
        cls, apogee: float, rocket_mass: float, diameter: float, drag_coeff: float
    ) -> MotorRequirementsConfig:
        return cls(rocket_mass=rocket_mass, diameter=diameter, drag_coeff=drag_coeff, apogee=apogee)

    @classmethod
    def from_thrust(
        cls, avg_thrust: float, rocket_mass: float, diameter: float, drag_coeff: float
    ) -> MotorRequirementsConfig:
        return cls(
            rocket_mass=rocket_mass, diameter=diameter, drag_coeff=drag_coeff, avg_thrust=avg_thrust
        )


@dataclass(frozen=True)
class MotorRequirementsResult:
    """Required motor performance and mass estimate."""

    mode: str  # "apogee" or "thrust"
    thrust: float  # N, average
    burn_time: float  # s
    total_impulse: float  # N·s
    propellant_mass: float  # kg
    motor_mass: float  # kg
    thrust_to_weight: float
    warning: str | None = None


class MotorRequirementsSolver:
    """Size a motor from a target apogee or a target average thrust.

    Args:
        calibration: Empirical constants; defaults reproduce the standard
            amateur-motor assumptions (2.5 s burn, Isp 100 s, 30 % casing).
    """

    def __init__(self, calibration: MotorCalibration | None = None):
        self.calibration = calibration or MotorCalibration()

    def solve(self, config: MotorRequirementsConfig) -> MotorRequirementsResult:
        """Compute motor requirements for *config*.

        Raises:
            InvalidInputError: If a field is non-finite or out of domain, or
                if not exactly one of ``apogee`` / ``avg_thrust`` is set.
        """
        cal = self.calibration
        M = require_positive("rocket_mass", config.rocket_mass)
        D = require_positive("diameter", config.diameter)
        Cd = require_non_negative("drag_coeff", config.drag_coeff)

        if (config.apogee is None) == (config.avg_thrust is None):
            raise InvalidInputError("Provide exactly one of apogee or avg_thrust")

        g = require_positive("gravity", cal.gravity)
        t_burn = require_positive("burn_time", cal.burn_time)
        isp = require_positive("specific_impulse", cal.specific_impulse)
        casing = require_positive("casing_mass_factor", cal.casing_mass_factor)

        if config.apogee is not None:
            mode = "apogee"
            h = require_positive("apogee", config.apogee)
            A = PI * (D / 2.0) ** 2
            k = 0.5 * cal.air_density * Cd * A
            # Energy estimate with a drag correction term
            impulse = M * math.sqrt(2.0 * g * h * (1.0 + k * h / M))
            thrust = impulse / t_burn
        else:
            mode = "thrust"
            thrust = require_positive("avg_thrust", config.avg_thrust)
            impulse = thrust * t_burn

        m_prop = impulse / (isp * g)
        m_motor = m_prop * casing
        tw_ratio = thrust / ((M + m_motor) * g)

        warning = self._advisory(mode, thrust, M, m_prop, m_motor, tw_ratio)
        if warning:
            logger.debug("Motor sizing advisory: %s", warning)

        logger.debug(
            "Motor requirements (%s): I=%.1f N·s, F=%.1f N, T/W=%.2f",
            mode, impulse, thrust, tw_ratio,
        )
        return MotorRequirementsResult(
            mode=mode,
            thrust=thrust,
            burn_time=t_burn,
            total_impulse=impulse,
            propellant_mass=m_prop,
            motor_mass=m_motor,
            thrust_to_weight=tw_ratio,
            warning=warning,
        )

    @staticmethod
    def _advisory(
        mode: str,
        thrust: float,
        rocket_mass: float,
        m_prop: float,
        m_motor: float,
        tw_ratio: float,
    ) -> str | None:
        """Return the highest-priority advisory, or None."""
        if m_prop / m_motor > MAX_PROPELLANT_FRACTION:
            return WARN_PROPELLANT_FRACTION
        if tw_ratio < MIN_THRUST_TO_WEIGHT:
            return WARN_THRUST_TO_WEIGHT
        if mode == "apogee" and m_motor / rocket_mass > MAX_MOTOR_MASS_FRACTION:
            return WARN_HEAVY_MOTOR
        if mode == "thrust" and thrust > MAX_AMATEUR_THRUST:
            return WARN_HIGH_THRUST
        return None
