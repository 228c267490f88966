"""Structural sizing of the motor case, closures and nozzle for SRM Pro.

- Case: thick-wall (Lamé) cylinder stresses combined by von Mises.
- Bulkhead: clamped circular plate under uniform pressure.
- Retaining screws: radial screws in single shear, plus bearing checks on
  the case wall and the bulkhead.
- Nozzle: throat and exit areas from the expansion ratio.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from srm_pro.core.errors import InvalidInputError
from srm_pro.utils.constants import PI
from srm_pro.utils.validation import require_positive

logger = logging.getLogger(__name__)


class CaseStatus(Enum):
    SAFE = "safe"
    ACCEPTABLE = "acceptable"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class StructuralCalibration:
    """Design conventions for closures."""

    screw_spacing: float = 0.025  # m, circumferential pitch of radial screws
    acceptable_fraction: float = 0.8  # of the target safety factor


@dataclass(frozen=True)
class StructuralConfig:
    """Case, closure and nozzle inputs (SI units)."""

    # Case
    case_thickness: float  # m
    case_outer_diameter: float  # m
    max_pressure: float  # Pa
    case_yield_strength: float  # Pa
    target_safety_factor: float

    # Bulkhead
    bulkhead_yield_strength: float  # Pa
    bulkhead_radial_thickness: float  # m, screw engagement depth

    # Screws
    screw_diameter: float  # m, minor diameter in shear
    hole_diameter: float  # m, clearance hole in the case
    screw_shear_strength: float  # Pa

    # Nozzle
    throat_diameter: float  # m
    expansion_ratio: float  # Ae/At


@dataclass(frozen=True)
class StructuralResult:
    """Stresses, safety factors and derived dimensions."""

    # Case
    internal_diameter: float  # m
    tangential_stress: float  # Pa
    radial_stress: float  # Pa
    longitudinal_stress: float  # Pa
    von_mises_stress: float  # Pa
    safety_factor: float
    case_status: CaseStatus

    # Bulkhead
    bulkhead_thickness: float  # m

    # Screws
    screw_count: int
    screw_force: float  # N, per screw
    screw_shear_stress: float  # Pa
    screw_safety_factor: float
    case_bearing_stress: float  # Pa
    case_bearing_safety_factor: float
    bulkhead_bearing_stress: float  # Pa
    bulkhead_bearing_safety_factor: float

    # Nozzle
    throat_area: float  # m²
    exit_area: float  # m²
    exit_diameter: float  # m
    expansion_ratio: float


# --- Case ---


def lame_stresses(pressure: float, r_int: float, r_ext: float) -> tuple[float, float, float]:
    """Principal stresses at the bore of a closed thick-walled cylinder.

    Returns:
        (tangential, radial, longitudinal) stresses [Pa].
    """
    denom = r_ext**2 - r_int**2
    sigma_t = pressure * (r_int**2 + r_ext**2) / denom
    sigma_r = -pressure
    sigma_l = pressure * r_int**2 / denom
    return sigma_t, sigma_r, sigma_l


def von_mises(s1: float, s2: float, s3: float) -> float:
    """Von Mises equivalent stress from three principal stresses."""
    return math.sqrt(0.5 * ((s1 - s2) ** 2 + (s2 - s3) ** 2 + (s3 - s1) ** 2))


def classify_case(safety_factor: float, target: float, acceptable_fraction: float = 0.8) -> CaseStatus:
    """Grade a case safety factor against the target."""
    if safety_factor >= target:
        return CaseStatus.SAFE
    if safety_factor >= target * acceptable_fraction:
        return CaseStatus.ACCEPTABLE
    return CaseStatus.UNSAFE


# --- Closures ---


def bulkhead_thickness(r_int: float, pressure: float, safety_factor: float, yield_strength: float) -> float:
    """Required thickness of a clamped circular plate [m].

    e = (r/2) · sqrt(3 · P · FS / σy)
    """
    return (r_int / 2.0) * math.sqrt(3.0 * pressure * safety_factor / yield_strength)


def screw_count(internal_diameter: float, spacing: float) -> int:
    """Number of radial screws at the given circumferential pitch (rounded up)."""
    return max(1, math.ceil(PI * internal_diameter / spacing))


class StructuralAnalyzer:
    """Case, bulkhead, screw and nozzle sizing.

    Args:
        calibration: Screw pitch and the acceptable safety-factor band.
    """

    def __init__(self, calibration: StructuralCalibration | None = None):
        self.calibration = calibration or StructuralCalibration()

    def solve(self, config: StructuralConfig) -> StructuralResult:
        """Analyse *config*.

        Raises:
            InvalidInputError: On non-positive inputs, when the wall
                thickness leaves no bore, or on an expansion ratio below 1.
        """
        cal = self.calibration
        e = require_positive("case_thickness", config.case_thickness)
        D_ext = require_positive("case_outer_diameter", config.case_outer_diameter)
        P = require_positive("max_pressure", config.max_pressure)
        sy_case = require_positive("case_yield_strength", config.case_yield_strength)
        fs_target = require_positive("target_safety_factor", config.target_safety_factor)
        sy_bulkhead = require_positive("bulkhead_yield_strength", config.bulkhead_yield_strength)
        e_radial = require_positive("bulkhead_radial_thickness", config.bulkhead_radial_thickness)
        d_screw = require_positive("screw_diameter", config.screw_diameter)
        d_hole = require_positive("hole_diameter", config.hole_diameter)
        tau_screw = require_positive("screw_shear_strength", config.screw_shear_strength)
        D_throat = require_positive("throat_diameter", config.throat_diameter)
        epsilon = require_positive("expansion_ratio", config.expansion_ratio)
        spacing = require_positive("screw_spacing", cal.screw_spacing)

        if D_ext <= 2.0 * e:
            raise InvalidInputError(
                f"Case outer diameter ({D_ext * 1e3:.2f} mm) must exceed twice "
                f"the wall thickness ({e * 1e3:.2f} mm)"
            )
        if epsilon < 1.0:
            raise InvalidInputError(f"expansion_ratio must be >= 1, got {epsilon}")

        # Case
        D_int = D_ext - 2.0 * e
        r_int = D_int / 2.0
        r_ext = D_ext / 2.0
        sigma_t, sigma_r, sigma_l = lame_stresses(P, r_int, r_ext)
        sigma_vm = von_mises(sigma_t, sigma_r, sigma_l)
        fs_case = sy_case / sigma_vm
        status = classify_case(fs_case, fs_target, cal.acceptable_fraction)

        # Bulkhead
        e_bulkhead = bulkhead_thickness(r_int, P, fs_target, sy_bulkhead)

        # Screws
        F_total = P * PI * r_int**2
        n_screws = screw_count(D_int, spacing)
        F_screw = F_total / n_screws
        tau = F_screw / (PI * (d_screw / 2.0) ** 2)
        bearing_case = F_screw / (d_hole * e)
        bearing_bulkhead = F_screw / (d_screw * e_radial)

        # Nozzle
        A_throat = PI * (D_throat / 2.0) ** 2
        A_exit = A_throat * epsilon
        D_exit = math.sqrt(4.0 * A_exit / PI)

        logger.debug(
            "Case %.1f/%.1f mm at %.1f MPa: σvm=%.1f MPa, FS=%.2f (%s), %d screws",
            D_ext * 1e3, e * 1e3, P / 1e6, sigma_vm / 1e6, fs_case, status.value, n_screws,
        )
        return StructuralResult(
            internal_diameter=D_int,
            tangential_stress=sigma_t,
            radial_stress=sigma_r,
            longitudinal_stress=sigma_l,
            von_mises_stress=sigma_vm,
            safety_factor=fs_case,
            case_status=status,
            bulkhead_thickness=e_bulkhead,
            screw_count=n_screws,
            screw_force=F_screw,
            screw_shear_stress=tau,
            screw_safety_factor=tau_screw / tau,
            case_bearing_stress=bearing_case,
            case_bearing_safety_factor=sy_case / bearing_case,
            bulkhead_bearing_stress=bearing_bulkhead,
            bulkhead_bearing_safety_factor=sy_bulkhead / bearing_bulkhead,
            throat_area=A_throat,
            exit_area=A_exit,
            exit_diameter=D_exit,
            expansion_ratio=epsilon,
        )
