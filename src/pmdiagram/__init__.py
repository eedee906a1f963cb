"""Nominal P-M interaction diagrams for rectangular reinforced concrete columns."""

from loguru import logger

from .interaction import (
    RATIO_LADDER,
    CapacityPoint,
    InteractionDiagram,
    balanced_point,
    check_utilisation,
    compute_diagram,
    find_peak_moment,
    solve_point,
)
from .models import InputError, SectionInputs
from .section import DegenerateGeometryError, ReinforcementLayer, SectionModel, build_section

__version__ = "0.1.0"

logger.disable("pmdiagram")

__all__ = [
    "RATIO_LADDER",
    "CapacityPoint",
    "DegenerateGeometryError",
    "InputError",
    "InteractionDiagram",
    "ReinforcementLayer",
    "SectionInputs",
    "SectionModel",
    "balanced_point",
    "build_section",
    "check_utilisation",
    "compute_diagram",
    "find_peak_moment",
    "solve_point",
]
