"""Unit conversion utilities for SRM Pro.

The engine works in SI base units only. These helpers, built on pint, are
what the presentation layer uses to move user-facing values (mm, MPa, g,
degrees) across that boundary.
"""

from __future__ import annotations

from functools import lru_cache

import pint

# Module-level unit registry (singleton)
_ureg = pint.UnitRegistry()
_ureg.formatter.default_format = "~P"  # short pretty format


def get_unit_registry() -> pint.UnitRegistry:
    """Return the shared pint UnitRegistry instance."""
    return _ureg


Q_ = _ureg.Quantity


# --- Convenience conversion functions ---


def length_to_si(value: float, unit: str) -> float:
    """Convert length to meters.

    Args:
        value: Numeric length value.
        unit: Source unit string (e.g. "mm", "inch", "cm").

    Returns:
        Length in m.
    """
    return Q_(value, unit).to("m").magnitude


def length_from_si(value_m: float, unit: str) -> float:
    """Convert length from meters to target unit."""
    return Q_(value_m, "m").to(unit).magnitude


def area_from_si(value_m2: float, unit: str) -> float:
    """Convert area from square meters to target unit."""
    return Q_(value_m2, "m**2").to(unit).magnitude


def pressure_to_si(value: float, unit: str) -> float:
    """Convert pressure value to Pascals.

    Args:
        value: Numeric pressure value.
        unit: Source unit string (e.g. "MPa", "bar", "psi").

    Returns:
        Pressure in Pa.
    """
    return Q_(value, unit).to("Pa").magnitude


def pressure_from_si(value_pa: float, unit: str) -> float:
    """Convert pressure from Pascals to target unit."""
    return Q_(value_pa, "Pa").to(unit).magnitude


def mass_to_si(value: float, unit: str) -> float:
    """Convert mass to kilograms."""
    return Q_(value, unit).to("kg").magnitude


def force_to_si(value: float, unit: str) -> float:
    """Convert force to Newtons."""
    return Q_(value, unit).to("N").magnitude


def velocity_to_si(value: float, unit: str) -> float:
    """Convert velocity (or a burn-rate coefficient) to m/s."""
    return Q_(value, unit).to("m/s").magnitude


def velocity_from_si(value_ms: float, unit: str) -> float:
    """Convert velocity from m/s to target unit."""
    return Q_(value_ms, "m/s").to(unit).magnitude


def angle_to_si(value: float, unit: str) -> float:
    """Convert angle to radians."""
    return Q_(value, unit).to("radian").magnitude


@lru_cache(maxsize=256)
def convert(value: float, from_unit: str, to_unit: str) -> float:
    """General-purpose unit conversion.

    Args:
        value: Numeric value in *from_unit*.
        from_unit: Source unit string.
        to_unit: Target unit string.

    Returns:
        Converted numeric value.
    """
    return Q_(value, from_unit).to(to_unit).magnitude
