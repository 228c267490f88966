"""Utility modules for SRM Pro."""

from srm_pro.utils.constants import G_0, G_DESIGN, R_UNIVERSAL, RHO_AIR_DESIGN
from srm_pro.utils.units import convert, get_unit_registry

__all__ = ["G_0", "G_DESIGN", "R_UNIVERSAL", "RHO_AIR_DESIGN", "convert", "get_unit_registry"]
