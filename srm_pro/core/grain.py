"""Propellant grain ballistics for SRM Pro.

Computes the initial burning surface of a cored grain, balances the
propellant gas generation rate against choked nozzle flow to find the
equilibrium chamber pressure, and derives burn rate, mass flow, thrust,
burn time and web thickness.

Burn rate follows Saint-Robert's law with pressure in MPa:

    r = a · (Pc / 1 MPa)^n

Nozzle mass flow uses the isentropic choked-flow relation for fixed
combustion-gas properties (KNSB-like by default):

    ṁ = At · Pc · sqrt(γ / (R·Tc)) · (2/(γ+1))^((γ+1)/(2(γ−1)))
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from scipy.optimize import brentq

from srm_pro.core.errors import InvalidGeometryError, InvalidInputError
from srm_pro.utils.constants import G_0, MPA_TO_PA, PI, R_UNIVERSAL
from srm_pro.utils.validation import require_finite, require_positive

logger = logging.getLogger(__name__)

# Smallest throat the solver will accept [m²] (~0.035 mm diameter)
MIN_THROAT_AREA = 1.0e-9

# Search window for the bracketed pressure solve [Pa]
_P_BRACKET_LOW = 1.0e2
_P_BRACKET_HIGH = 1.0e9

# Total-impulse class boundaries [N·s]
_IMPULSE_LIMITS = (160.0, 320.0, 640.0, 1280.0)
_IMPULSE_CLASSES = ("H", "I", "J", "K", "L+")


class GrainGeometry(Enum):
    """Supported grain cross-sections."""

    BATES = "bates"
    HOLLOW_CYLINDER = "hollow_cylinder"
    STAR = "star"
    FINOCYL = "finocyl"


class PressureSolverPolicy(Enum):
    """How the chamber-pressure equilibrium is found.

    PROPORTIONAL: the legacy fixed-gain correction ``P += Δṁ · gain``,
        started at ``initial_pressure``. Kept for output compatibility;
        it converges slowly (or not at all) at high Kn.
    BRACKETED: Brent's method on the log of the mass-flow ratio, which is
        linear in log-pressure and therefore converges in a few steps.
    """

    PROPORTIONAL = "proportional"
    BRACKETED = "bracketed"


@dataclass(frozen=True)
class GrainCalibration:
    """Combustion-gas properties and empirical constants."""

    gamma: float = 1.133  # ratio of specific heats
    chamber_temperature: float = 1600.0  # K
    molar_mass: float = 0.042  # kg/mol
    thrust_coefficient: float = 1.5
    star_area_factor: float = 2.5  # 5-point star vs. plain core
    finocyl_fin_count: int = 6
    finocyl_depth_fraction: float = 0.7  # slot depth / radial wall
    policy: PressureSolverPolicy = PressureSolverPolicy.BRACKETED
    initial_pressure: float = 5.0e6  # Pa
    pressure_gain: float = 1.0e5  # Pa per kg/s of mismatch
    max_iterations: int = 20
    tolerance: float = 0.01  # relative mass-flow mismatch

    @property
    def gas_constant(self) -> float:
        """Specific gas constant of the combustion products [J/(kg·K)]."""
        return R_UNIVERSAL / self.molar_mass


@dataclass(frozen=True)
class GrainConfig:
    """Grain, propellant and throat definition (SI units)."""

    geometry: GrainGeometry
    outer_diameter: float  # m
    core_diameter: float  # m
    length: float  # m, per segment
    propellant_density: float  # kg/m³
    burn_rate_coefficient: float  # m/s at 1 MPa
    pressure_exponent: float
    throat_diameter: float  # m
    segment_count: int = 1


@dataclass(frozen=True)
class PressureSolution:
    """Outcome of the chamber-pressure equilibrium search."""

    pressure: float  # Pa
    iterations: int
    converged: bool
    mismatch: float  # |ṁ_gen − ṁ_throat| / ṁ_gen


@dataclass(frozen=True)
class GrainResult:
    """Initial-surface grain performance."""

    burning_area: float  # m²
    throat_area: float  # m²
    kn: float  # burning area / throat area
    burn_rate: float  # m/s
    mass_flow_rate: float  # kg/s
    chamber_pressure: float  # Pa
    thrust: float  # N
    burn_time: float  # s
    web_thickness: float  # m
    specific_impulse: float  # s, delivered
    burn_profile: str
    converged: bool
    iterations: int
    mismatch: float

    @property
    def total_impulse(self) -> float:
        """Total impulse estimate [N·s]."""
        return self.thrust * self.burn_time

    @property
    def impulse_class(self) -> str:
        return classify_impulse(self.total_impulse)


def classify_impulse(total_impulse: float) -> str:
    """Bucket a total impulse [N·s] into a motor letter class."""
    return _IMPULSE_CLASSES[bisect_right(_IMPULSE_LIMITS, total_impulse)]


# --- Burning surface by geometry ---


def _core_surface(r_core: float, length: float) -> float:
    return 2.0 * PI * r_core * length


def _bates_area(r_outer: float, r_core: float, length: float, segments: int,
                cal: GrainCalibration) -> float:
    """Core cylinder plus both end faces of every segment."""
    core = _core_surface(r_core, length) * segments
    ends = PI * (r_outer**2 - r_core**2) * 2.0 * segments
    return core + ends


def _hollow_cylinder_area(r_outer: float, r_core: float, length: float, segments: int,
                          cal: GrainCalibration) -> float:
    """Inner and outer cylinders plus both end annuli, all burning."""
    inner = _core_surface(r_core, length)
    outer = 2.0 * PI * r_outer * length
    ends = 2.0 * PI * (r_outer**2 - r_core**2)
    return inner + outer + ends


def _star_area(r_outer: float, r_core: float, length: float, segments: int,
               cal: GrainCalibration) -> float:
    return _core_surface(r_core, length) * cal.star_area_factor


def _finocyl_area(r_outer: float, r_core: float, length: float, segments: int,
                  cal: GrainCalibration) -> float:
    """Core cylinder plus both walls of each radial fin slot."""
    fin_depth = (r_outer - r_core) * cal.finocyl_depth_fraction
    fins = cal.finocyl_fin_count * 2.0 * fin_depth * length
    return _core_surface(r_core, length) + fins


_AreaFunction = Callable[[float, float, float, int, GrainCalibration], float]

_BURNING_AREA: dict[GrainGeometry, _AreaFunction] = {
    GrainGeometry.BATES: _bates_area,
    GrainGeometry.HOLLOW_CYLINDER: _hollow_cylinder_area,
    GrainGeometry.STAR: _star_area,
    GrainGeometry.FINOCYL: _finocyl_area,
}

_BURN_PROFILE: dict[GrainGeometry, str] = {
    GrainGeometry.BATES: "neutral-progressive",
    GrainGeometry.HOLLOW_CYLINDER: "regressive",
    GrainGeometry.STAR: "progressive",
    GrainGeometry.FINOCYL: "progressive",
}


def burning_area(config: GrainConfig, calibration: GrainCalibration | None = None) -> float:
    """Initial burning surface area [m²] of the grain."""
    cal = calibration or GrainCalibration()
    return _BURNING_AREA[config.geometry](
        config.outer_diameter / 2.0,
        config.core_diameter / 2.0,
        config.length,
        config.segment_count,
        cal,
    )


def choked_flow_coefficient(gamma: float, gas_constant: float, chamber_temperature: float) -> float:
    """Mass flow per unit throat area per unit chamber pressure [s/m].

    ṁ = coefficient · At · Pc
    """
    exponent = (gamma + 1.0) / (2.0 * (gamma - 1.0))
    return math.sqrt(gamma / (gas_constant * chamber_temperature)) * (2.0 / (gamma + 1.0)) ** exponent


# --- Chamber pressure ---


def _solve_proportional(
    generation: Callable[[float], float],
    throat_flow: Callable[[float], float],
    cal: GrainCalibration,
) -> PressureSolution:
    P = cal.initial_pressure
    mismatch = math.inf
    iterations = 0
    converged = False

    for iterations in range(1, cal.max_iterations + 1):
        m_gen = generation(P)
        error = m_gen - throat_flow(P)
        P += error * cal.pressure_gain
        if not math.isfinite(P) or P <= 0:
            raise InvalidInputError(
                "Chamber pressure iteration diverged; "
                "the throat is too large for this burning area"
            )
        mismatch = abs(error / m_gen)
        if mismatch < cal.tolerance:
            converged = True
            break

    return PressureSolution(P, iterations, converged, mismatch)


def _solve_bracketed(
    generation: Callable[[float], float],
    throat_flow: Callable[[float], float],
    cal: GrainCalibration,
) -> PressureSolution:
    def log_ratio(log_p: float) -> float:
        P = math.exp(log_p)
        return math.log(generation(P)) - math.log(throat_flow(P))

    lo, hi = math.log(_P_BRACKET_LOW), math.log(_P_BRACKET_HIGH)
    if log_ratio(lo) <= 0:
        raise InvalidInputError(
            f"No chamber pressure above {_P_BRACKET_LOW:.0f} Pa sustains the burn; "
            "the throat is too large for this burning area"
        )
    if log_ratio(hi) >= 0:
        raise InvalidInputError(
            f"Equilibrium chamber pressure exceeds {_P_BRACKET_HIGH / 1e6:.0f} MPa; "
            "the throat is too small for this burning area"
        )

    log_p, info = brentq(
        log_ratio, lo, hi,
        xtol=1e-12, maxiter=cal.max_iterations, full_output=True, disp=False,
    )
    P = math.exp(log_p)
    m_gen = generation(P)
    mismatch = abs(m_gen - throat_flow(P)) / m_gen
    return PressureSolution(P, info.iterations, info.converged and mismatch < cal.tolerance, mismatch)


_PRESSURE_SOLVERS = {
    PressureSolverPolicy.PROPORTIONAL: _solve_proportional,
    PressureSolverPolicy.BRACKETED: _solve_bracketed,
}


class GrainBallisticsSolver:
    """Initial-surface ballistics for a cored grain and a fixed throat.

    Args:
        calibration: Combustion-gas constants, geometry multipliers and the
            pressure-solve policy. Defaults model a KNSB-class propellant.
    """

    def __init__(self, calibration: GrainCalibration | None = None):
        self.calibration = calibration or GrainCalibration()

    def solve(self, config: GrainConfig) -> GrainResult:
        """Compute grain performance for *config*.

        Raises:
            InvalidGeometryError: If the core is not narrower than the grain.
            InvalidInputError: On non-positive inputs, a pressure exponent
                outside [0, 1), a vanishing throat or a pressure solve that
                leaves the physical domain.
        """
        cal = self.calibration
        D_outer = require_positive("outer_diameter", config.outer_diameter)
        D_core = require_positive("core_diameter", config.core_diameter)
        L = require_positive("length", config.length)
        rho = require_positive("propellant_density", config.propellant_density)
        a = require_positive("burn_rate_coefficient", config.burn_rate_coefficient)
        n = require_finite("pressure_exponent", config.pressure_exponent)
        D_throat = require_positive("throat_diameter", config.throat_diameter)

        if D_core >= D_outer:
            raise InvalidGeometryError(
                f"Core diameter ({D_core * 1e3:.2f} mm) must be smaller than "
                f"outer diameter ({D_outer * 1e3:.2f} mm)"
            )
        if config.segment_count < 1:
            raise InvalidInputError(f"segment_count must be >= 1, got {config.segment_count}")
        if not 0.0 <= n < 1.0:
            raise InvalidInputError(f"pressure_exponent must lie in [0, 1), got {n}")

        Ab = burning_area(config, cal)
        At = PI * (D_throat / 2.0) ** 2
        if At < MIN_THROAT_AREA:
            raise InvalidInputError(f"Throat area {At:.3e} m² is too small to evaluate")

        flow_coeff = choked_flow_coefficient(cal.gamma, cal.gas_constant, cal.chamber_temperature)

        def generation(P: float) -> float:
            return rho * Ab * a * (P / MPA_TO_PA) ** n

        def throat_flow(P: float) -> float:
            return At * P * flow_coeff

        solution = _PRESSURE_SOLVERS[cal.policy](generation, throat_flow, cal)
        if not solution.converged:
            logger.warning(
                "Chamber pressure not converged after %d iterations (%s, mismatch %.1f%%), "
                "using last estimate",
                solution.iterations, cal.policy.value, 100.0 * solution.mismatch,
            )

        Pc = solution.pressure
        r_burn = a * (Pc / MPA_TO_PA) ** n
        mdot = rho * Ab * r_burn
        if mdot <= 0 or r_burn <= 0:
            raise InvalidInputError("Propellant mass flow vanished; check burn-rate inputs")

        thrust = cal.thrust_coefficient * At * Pc
        web = (D_outer - D_core) / 2.0
        burn_time = web / r_burn

        logger.debug(
            "Grain %s: Ab=%.4e m², Kn=%.0f, Pc=%.2f MPa after %d iterations",
            config.geometry.value, Ab, Ab / At, Pc / MPA_TO_PA, solution.iterations,
        )
        return GrainResult(
            burning_area=Ab,
            throat_area=At,
            kn=Ab / At,
            burn_rate=r_burn,
            mass_flow_rate=mdot,
            chamber_pressure=Pc,
            thrust=thrust,
            burn_time=burn_time,
            web_thickness=web,
            specific_impulse=thrust / (mdot * G_0),
            burn_profile=_BURN_PROFILE[config.geometry],
            converged=solution.converged,
            iterations=solution.iterations,
            mismatch=solution.mismatch,
        )
