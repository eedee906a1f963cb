"""Shared utilities for the P-M interaction engine.

Provides:
- Material table loading from the bundled YAML file
- Section property helpers for rectangular sections
- Unit conversion helpers (kgf/cm base units to tonf/m reporting units)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


# ---------------------------------------------------------------------------
# Material table loading
# ---------------------------------------------------------------------------

_TABLES_PATH = Path(__file__).resolve().parent / "data" / "material_tables.yaml"

_material_tables_cache: dict[str, Any] | None = None


def load_material_tables() -> dict[str, Any]:
    """Load the material constants table from ``data/material_tables.yaml``.

    The result is cached so that repeated calls do not re-read from disk.

    Returns
    -------
    dict
        Parsed YAML content keyed by table name (``steel``, ``concrete``,
        ``beta1``, ``bar_areas``).

    Raises
    ------
    FileNotFoundError
        If the YAML file is missing from the installed package.
    """
    global _material_tables_cache
    if _material_tables_cache is not None:
        return _material_tables_cache

    if not _TABLES_PATH.exists():
        raise FileNotFoundError(
            f"material_tables.yaml not found at {_TABLES_PATH}"
        )
    with open(_TABLES_PATH, encoding="utf-8") as fh:
        _material_tables_cache = yaml.safe_load(fh)
    return _material_tables_cache


def _clear_material_tables_cache() -> None:
    """Reset the internal cache (useful in tests)."""
    global _material_tables_cache
    _material_tables_cache = None


def bar_area(designation: str) -> float:
    """Nominal area of a bar designation such as ``"D19"``, cm^2.

    Raises
    ------
    KeyError
        If the designation is not in the bar table.
    """
    areas: dict[str, float] = load_material_tables()["bar_areas"]
    key = designation.strip().upper()
    if key not in areas:
        raise KeyError(
            f"Bar size '{designation}' not recognised.  "
            f"Available: {list(areas.keys())}"
        )
    return float(areas[key])


# ---------------------------------------------------------------------------
# Section properties -- rectangular
# ---------------------------------------------------------------------------

def rectangular_area(width: float, depth: float) -> float:
    """Gross cross-sectional area of a rectangle.

    Parameters
    ----------
    width : float
        Width (b) in consistent units.
    depth : float
        Depth (h) in consistent units.

    Returns
    -------
    float
        Area in ``width`` units squared.
    """
    return width * depth


def reinforcement_ratio(steel_area: float, gross_area: float) -> float:
    """Longitudinal reinforcement ratio ``Ast / Ag``."""
    return steel_area / gross_area


# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------

_KGF_PER_TONF: float = 1_000.0
_KGF_CM_PER_TONF_M: float = 100_000.0


def kgf_to_tonf(kgf: float) -> float:
    """Convert kilogram-force to metric tonne-force."""
    return kgf / _KGF_PER_TONF


def kgf_cm_to_tonf_m(kgf_cm: float) -> float:
    """Convert a moment in kgf.cm to tonf.m."""
    return kgf_cm / _KGF_CM_PER_TONF_M
