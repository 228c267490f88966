"""Aerodynamics, stability and apogee estimation for SRM Pro.

Stability follows the Barrowman method for a nose / cylindrical body / fin
set configuration. Drag is a per-component build-up of fixed coefficients.
The flight is a vertical point-mass ascent with quadratic drag, solved in
closed form for a constant-thrust boost followed by an unpowered coast.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from srm_pro.core.errors import InvalidInputError
from srm_pro.utils.constants import G_DESIGN, PI, RHO_AIR_DESIGN
from srm_pro.utils.validation import require_finite, require_non_negative, require_positive

logger = logging.getLogger(__name__)

# Stability margin bands [calibers]
STABLE_MIN = 1.0
STABLE_MAX = 2.0
MARGINAL_MIN = 0.5
MARGINAL_MAX = 3.0

ADVICE_UNDERSTABLE = "Increase fin area or move the CG forward"
ADVICE_OVERSTABLE = "Reduce fin area or move the CG aft"


class NoseShape(Enum):
    CONICAL = "conical"
    OGIVE = "ogive"
    PARABOLIC = "parabolic"
    ELLIPTICAL = "elliptical"


class StabilityStatus(Enum):
    STABLE = "stable"
    MARGINAL = "marginal"
    UNSTABLE = "unstable"


# Subsonic pressure-drag coefficient by nose shape
NOSE_DRAG: dict[NoseShape, float] = {
    NoseShape.CONICAL: 0.6,
    NoseShape.OGIVE: 0.5,
    NoseShape.PARABOLIC: 0.45,
    NoseShape.ELLIPTICAL: 0.4,
}


@dataclass(frozen=True)
class AeroCalibration:
    """Empirical coefficients and thresholds."""

    nose_cp_fraction: float = 0.466  # of nose length
    nose_normal_force: float = 2.0  # CNα per radian
    body_skin_friction: float = 0.03
    body_base_drag: float = 0.12
    fin_drag_factor: float = 0.02  # per unit fin-area / reference-area
    air_density: float = RHO_AIR_DESIGN  # kg/m³
    gravity: float = G_DESIGN  # m/s²
    high_apogee: float = 2000.0  # m, above this, suggest a low-drag nose
    low_apogee: float = 500.0  # m, below this, a conical nose is enough
    recommended_fin_span: float = 1.3  # calibers
    recommended_fin_area: float = 0.15  # × diameter², per fin


@dataclass(frozen=True)
class AeroConfig:
    """Airframe, mass and motor description (SI units, positions from nose tip)."""

    body_diameter: float  # m
    body_length: float  # m, cylindrical section, aft of the nose
    nose_length: float  # m
    nose_shape: NoseShape
    dry_mass: float  # kg
    propellant_mass: float  # kg
    cg_position: float  # m
    fin_count: int
    fin_root_chord: float  # m
    fin_tip_chord: float  # m
    fin_span: float  # m
    fin_sweep: float  # rad, leading-edge sweep angle
    avg_thrust: float  # N
    burn_time: float  # s


@dataclass(frozen=True)
class TrajectoryEstimate:
    """Closed-form boost/coast flight summary."""

    burnout_velocity: float  # m/s
    burnout_altitude: float  # m
    coast_altitude: float  # m, gained after burnout
    coast_time: float  # s

    @property
    def apogee(self) -> float:
        return self.burnout_altitude + self.coast_altitude


@dataclass(frozen=True)
class AeroResult:
    """Stability, drag and flight predictions."""

    # Stability
    center_of_pressure: float  # m
    center_of_gravity: float  # m
    stability_margin: float  # calibers
    stability_status: StabilityStatus
    fin_normal_force: float  # CNα of the fin set
    fin_sweep_length: float  # m, leading-edge offset of the fin tip

    # Drag
    nose_cd: float
    body_cd: float
    fin_cd: float
    total_cd: float

    # Flight
    apogee: float  # m
    max_velocity: float  # m/s
    time_to_apogee: float  # s
    burnout_altitude: float  # m
    coast_time: float  # s

    # Recommendations
    recommended_nose: str
    recommended_fin_span: float  # m
    recommended_fin_area: float  # m² per fin
    advice: tuple[str, ...] = field(default_factory=tuple)


# --- Stability ---


def fin_normal_force(fin_count: int, root_chord: float, tip_chord: float,
                     span: float, diameter: float) -> float:
    """Normal-force coefficient slope of a trapezoidal fin set.

    Returns 0 for a fin set with no fins or no planform area.
    """
    chord_sum = root_chord + tip_chord
    if fin_count == 0 or span == 0 or chord_sum == 0:
        return 0.0
    return (4.0 * fin_count * (span / diameter) ** 2) / (
        1.0 + math.sqrt(1.0 + (2.0 * root_chord / chord_sum) ** 2)
    )


def fin_center_of_pressure(leading_edge: float, root_chord: float, tip_chord: float) -> float:
    """Axial CP of a trapezoidal fin whose root leading edge sits at *leading_edge*."""
    chord_sum = root_chord + tip_chord
    if chord_sum == 0:
        return leading_edge
    return (
        leading_edge
        + (root_chord / 3.0) * ((root_chord + 2.0 * tip_chord) / chord_sum)
        + (chord_sum - root_chord * tip_chord / chord_sum) / 6.0
    )


def classify_stability(margin: float) -> StabilityStatus:
    """Grade a static margin [calibers]; the stable band is inclusive."""
    if STABLE_MIN <= margin <= STABLE_MAX:
        return StabilityStatus.STABLE
    if MARGINAL_MIN < margin < MARGINAL_MAX:
        return StabilityStatus.MARGINAL
    return StabilityStatus.UNSTABLE


# --- Trajectory ---


def boost_coast_trajectory(
    thrust: float,
    burn_time: float,
    launch_mass: float,
    burnout_mass: float,
    drag_constant: float,
    gravity: float = G_DESIGN,
) -> TrajectoryEstimate:
    """Vertical ascent with quadratic drag ``D = k·v²`` in closed form.

    The boost uses the launch mass throughout; the coast uses the burnout
    mass.

    Raises:
        InvalidInputError: If thrust does not exceed the launch weight.
    """
    k = drag_constant
    net_force = thrust - launch_mass * gravity
    if net_force <= 0:
        raise InvalidInputError(
            f"Thrust {thrust:.1f} N does not exceed liftoff weight "
            f"{launch_mass * gravity:.1f} N"
        )

    # Boost: v(t) = q · tanh(u), y(t) = (M/k) · ln cosh(u), u = x·t/2
    q = math.sqrt(net_force / k)
    x = 2.0 * k * q / launch_mass
    u = 0.5 * x * burn_time
    v_burnout = q * math.tanh(u)
    # ln cosh(u) without overflow, and finite once tanh(u) rounds to 1
    y_burnout = (launch_mass / k) * (u + math.log1p(math.exp(-2.0 * u)) - math.log(2.0))

    # Coast
    weight = burnout_mass * gravity
    y_coast = (burnout_mass / (2.0 * k)) * math.log1p(k * v_burnout**2 / weight)
    t_coast = math.sqrt(burnout_mass / (gravity * k)) * math.atan(v_burnout * math.sqrt(k / weight))

    return TrajectoryEstimate(
        burnout_velocity=v_burnout,
        burnout_altitude=y_burnout,
        coast_altitude=y_coast,
        coast_time=t_coast,
    )


class AerodynamicsSolver:
    """Barrowman stability, drag build-up and apogee estimate.

    Args:
        calibration: Empirical coefficients and recommendation thresholds.
    """

    def __init__(self, calibration: AeroCalibration | None = None):
        self.calibration = calibration or AeroCalibration()

    def solve(self, config: AeroConfig) -> AeroResult:
        """Evaluate *config*.

        Raises:
            InvalidInputError: On non-positive airframe/mass/motor inputs,
                negative fin inputs, or thrust below liftoff weight.
        """
        cal = self.calibration
        D = require_positive("body_diameter", config.body_diameter)
        L_body = require_positive("body_length", config.body_length)
        L_nose = require_positive("nose_length", config.nose_length)
        M_dry = require_positive("dry_mass", config.dry_mass)
        M_prop = require_non_negative("propellant_mass", config.propellant_mass)
        CG = require_positive("cg_position", config.cg_position)
        C_r = require_non_negative("fin_root_chord", config.fin_root_chord)
        C_t = require_non_negative("fin_tip_chord", config.fin_tip_chord)
        S = require_non_negative("fin_span", config.fin_span)
        sweep = require_finite("fin_sweep", config.fin_sweep)
        F_avg = require_positive("avg_thrust", config.avg_thrust)
        t_burn = require_positive("burn_time", config.burn_time)

        N_fins = config.fin_count
        if N_fins < 0:
            raise InvalidInputError(f"fin_count must not be negative, got {N_fins}")
        if not 0.0 <= sweep < PI / 2.0:
            raise InvalidInputError(f"fin_sweep must lie in [0, 90) degrees, got {math.degrees(sweep):.1f}")

        # --- Stability (Barrowman) ---
        cp_nose = cal.nose_cp_fraction * L_nose
        cna_nose = cal.nose_normal_force

        # The cylindrical body carries no normal force at small angles
        cp_body = L_nose + L_body / 2.0
        cna_body = 0.0

        cna_fins = fin_normal_force(N_fins, C_r, C_t, S, D)
        cp_fins = fin_center_of_pressure(L_nose + L_body, C_r, C_t)

        cna_total = cna_nose + cna_body + cna_fins
        CP = (cna_nose * cp_nose + cna_body * cp_body + cna_fins * cp_fins) / cna_total
        margin = (CP - CG) / D
        status = classify_stability(margin)

        advice: list[str] = []
        if margin < STABLE_MIN:
            advice.append(ADVICE_UNDERSTABLE)
        elif margin > STABLE_MAX:
            advice.append(ADVICE_OVERSTABLE)

        # --- Drag ---
        ref_area = PI * (D / 2.0) ** 2
        cd_nose = NOSE_DRAG[config.nose_shape]
        cd_body = cal.body_skin_friction + cal.body_base_drag
        fin_area = N_fins * 0.5 * (C_r + C_t) * S
        cd_fins = cal.fin_drag_factor * (fin_area / ref_area)
        cd_total = cd_nose + cd_body + cd_fins

        # --- Flight ---
        k = 0.5 * cal.air_density * cd_total * ref_area
        if k <= 0:
            raise InvalidInputError("Drag constant must be positive")
        flight = boost_coast_trajectory(
            F_avg, t_burn, M_dry + M_prop, M_dry, k, cal.gravity
        )
        apogee = flight.apogee

        # --- Recommendations ---
        if apogee > cal.high_apogee:
            nose = "Von Kármán (low drag)"
        elif apogee < cal.low_apogee:
            nose = "Conical (simple)"
        else:
            nose = "Ogive"

        logger.debug(
            "Aero: CP=%.1f mm, CG=%.1f mm, SM=%.2f cal (%s), Cd=%.3f, apogee=%.0f m",
            CP * 1e3, CG * 1e3, margin, status.value, cd_total, apogee,
        )
        return AeroResult(
            center_of_pressure=CP,
            center_of_gravity=CG,
            stability_margin=margin,
            stability_status=status,
            fin_normal_force=cna_fins,
            fin_sweep_length=S * math.tan(sweep),
            nose_cd=cd_nose,
            body_cd=cd_body,
            fin_cd=cd_fins,
            total_cd=cd_total,
            apogee=apogee,
            max_velocity=flight.burnout_velocity,
            time_to_apogee=t_burn + flight.coast_time,
            burnout_altitude=flight.burnout_altitude,
            coast_time=flight.coast_time,
            recommended_nose=nose,
            recommended_fin_span=cal.recommended_fin_span * D,
            recommended_fin_area=cal.recommended_fin_area * D**2,
            advice=tuple(advice),
        )
