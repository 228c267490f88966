"""Design rule checking and input validation for SRM Pro.

Two layers live here:

- ``require_*`` guards, used inside the solvers, which raise
  :class:`~srm_pro.core.errors.InvalidInputError` on the first bad field.
- ``validate_*`` checks, used at the edge, which collect every finding into a
  :class:`ValidationResult` so a front end can report them all at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from srm_pro.core.errors import InvalidInputError


class Severity(Enum):
    """Severity level for validation messages."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding."""

    severity: Severity
    parameter: str
    message: str
    value: Any = None
    limit: Any = None


@dataclass
class ValidationResult:
    """Aggregated validation result."""

    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not any(m.severity == Severity.ERROR for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.severity == Severity.WARNING for m in self.messages)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    def add(self, severity: Severity, parameter: str, message: str, **kwargs: Any) -> None:
        self.messages.append(
            ValidationMessage(severity=severity, parameter=parameter, message=message, **kwargs)
        )

    def error(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.ERROR, parameter, message, **kwargs)

    def warning(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.WARNING, parameter, message, **kwargs)

    def info(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.INFO, parameter, message, **kwargs)

    def merge(self, other: ValidationResult) -> None:
        self.messages.extend(other.messages)


# --- Engine guards ---


def require_finite(name: str, value: float) -> float:
    """Return *value* as float, raising InvalidInputError if it is NaN or infinite."""
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    return number


def require_positive(name: str, value: float) -> float:
    """Return *value* if finite and strictly positive, else raise InvalidInputError."""
    number = require_finite(name, value)
    if number <= 0:
        raise InvalidInputError(f"{name} must be positive, got {value}")
    return number


def require_non_negative(name: str, value: float) -> float:
    """Return *value* if finite and >= 0, else raise InvalidInputError."""
    number = require_finite(name, value)
    if number < 0:
        raise InvalidInputError(f"{name} must not be negative, got {value}")
    return number


# --- Common validators ---


def validate_positive(name: str, value: float, result: ValidationResult) -> None:
    """Validate that a value is finite and strictly positive."""
    if not math.isfinite(value):
        result.error(name, f"{name} must be finite, got {value}")
    elif value <= 0:
        result.error(name, f"{name} must be positive, got {value}")


def validate_range(
    name: str,
    value: float,
    low: float,
    high: float,
    result: ValidationResult,
    severity: Severity = Severity.ERROR,
) -> None:
    """Validate that a value falls within [low, high]."""
    if value < low or value > high:
        result.add(severity, name, f"{name} = {value} is outside [{low}, {high}]")


def validate_grain_design(design: dict) -> ValidationResult:
    """Run edge checks on a grain design dictionary (SI units)."""
    result = ValidationResult()

    for key in ("outer_diameter", "core_diameter", "length", "propellant_density",
                "burn_rate_coefficient", "throat_diameter"):
        value = design.get(key)
        if value is not None:
            validate_positive(key, value, result)

    od = design.get("outer_diameter")
    cd = design.get("core_diameter")
    if od is not None and cd is not None and cd >= od:
        result.error("core_diameter", "Core diameter must be smaller than outer diameter")

    segments = design.get("segment_count")
    if segments is not None and segments < 1:
        result.error("segment_count", "At least one grain segment is required")

    n = design.get("pressure_exponent")
    if n is not None:
        validate_range("pressure_exponent", n, 0.0, 0.99, result)
        if n > 0.7:
            result.warning(
                "pressure_exponent",
                f"Pressure exponent {n:.2f} gives a very pressure-sensitive burn",
            )

    dt = design.get("throat_diameter")
    if dt is not None and od is not None and dt >= od:
        result.warning("throat_diameter", "Throat is as wide as the grain; expect very low Kn")

    return result


def validate_case_design(design: dict) -> ValidationResult:
    """Run edge checks on a motor case / closure design dictionary (SI units)."""
    result = ValidationResult()

    for key in ("thickness", "outer_diameter", "max_pressure", "yield_strength",
                "target_safety_factor", "throat_diameter", "expansion_ratio"):
        value = design.get(key)
        if value is not None:
            validate_positive(key, value, result)

    e = design.get("thickness")
    od = design.get("outer_diameter")
    if e is not None and od is not None and od <= 2.0 * e:
        result.error("thickness", "Wall thickness leaves no bore (outer diameter <= 2 x wall)")

    pc = design.get("max_pressure")
    if pc is not None and pc > 15e6:
        result.warning("max_pressure", f"Max pressure {pc / 1e6:.1f} MPa is very high for amateur motors")

    eps = design.get("expansion_ratio")
    if eps is not None and 0 < eps < 1.0:
        result.error("expansion_ratio", "Expansion ratio must be >= 1.0")

    return result


def validate_flight_design(design: dict) -> ValidationResult:
    """Run edge checks on a rocket / flight design dictionary (SI units)."""
    result = ValidationResult()

    for key in ("diameter", "rocket_mass", "body_length", "nose_length",
                "dry_mass", "avg_thrust", "burn_time", "apogee"):
        value = design.get(key)
        if value is not None:
            validate_positive(key, value, result)

    cd = design.get("drag_coeff")
    if cd is not None:
        validate_range("drag_coeff", cd, 0.0, 2.0, result)

    cg = design.get("cg_position")
    length = None
    if design.get("body_length") is not None and design.get("nose_length") is not None:
        length = design["body_length"] + design["nose_length"]
    if cg is not None and length is not None and not 0 < cg < length:
        result.warning("cg_position", "CG lies outside the airframe")

    fins = design.get("fin_count")
    if fins is not None and fins < 0:
        result.error("fin_count", "Fin count must not be negative")
    elif fins is not None and 0 < fins < 3:
        result.warning("fin_count", f"{fins} fins cannot stabilise a rocket in both planes")

    return result
