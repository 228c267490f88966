"""Structural material database for SRM Pro.

Loads room-temperature strength data for common case, bulkhead and fastener
materials from the bundled JSON table. Strengths are stored in MPa and
exposed in Pa.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from srm_pro.utils.constants import MPA_TO_PA

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_MATERIALS_DB_PATH = _DATA_DIR / "materials.json"


@lru_cache(maxsize=1)
def _load_materials_db() -> dict[str, Any]:
    if not _MATERIALS_DB_PATH.exists():
        logger.warning("Materials database not found at %s", _MATERIALS_DB_PATH)
        return {}
    with open(_MATERIALS_DB_PATH) as f:
        return json.load(f)


def list_materials() -> list[str]:
    """Return all material identifiers in the database."""
    return list(_load_materials_db().keys())


def get_material_info(material_id: str) -> dict[str, Any]:
    """Return the raw material record.

    Raises:
        KeyError: If material_id is not in the database.
    """
    db = _load_materials_db()
    for key, val in db.items():
        if key.lower() == material_id.lower():
            return val
    raise KeyError(f"Material '{material_id}' not found. Available: {list(db.keys())}")


class Material:
    """Room-temperature strength properties of a structural material.

    Args:
        material_id: Identifier matching a key in materials.json.
    """

    def __init__(self, material_id: str):
        info = get_material_info(material_id)
        self.material_id = material_id
        self.name: str = info["name"]
        self.category: str = info["category"]
        self.density: float = info["density"]  # kg/m³
        self.yield_strength: float = info["yield_strength"] * MPA_TO_PA  # Pa
        self.ultimate_tensile: float = info.get("ultimate_tensile", 0.0) * MPA_TO_PA  # Pa
        self.shear_strength: float = info["shear_strength"] * MPA_TO_PA  # Pa

    def __repr__(self) -> str:
        return f"Material('{self.material_id}': {self.name})"
