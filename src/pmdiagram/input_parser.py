"""Parse and validate YAML input for the P-M interaction diagram.

Reads a column YAML file, checks that every required section and field is
present, applies defaults for optional fields, resolves bar designations to
areas and returns a validated :class:`~pmdiagram.models.SectionInputs`
together with any factored load cases to check.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from .models import InputError, SectionInputs
from .section import DegenerateGeometryError, check_geometry
from .utils import bar_area, load_material_tables


# ---------------------------------------------------------------------------
# Schema definitions
# ---------------------------------------------------------------------------
# Each leaf entry is a tuple:
#   (type, required, default)
# Range checks on engine parameters belong to SectionInputs; the schema only
# checks presence and type.

SCHEMA: dict[str, dict[str, tuple]] = {
    "project": {
        "name":      (str, False, "Column"),
        "column_id": (str, False, ""),
        "designer":  (str, False, ""),
    },
    "materials": {
        "fc": (float, True, None),
        "fy": (float, True, None),
    },
    "section": {
        "b":     (float, True, None),
        "h":     (float, True, None),
        "cover": (float, True, None),
    },
    "reinforcement": {
        "bar_size": (str,   False, None),
        "bar_area": (float, False, None),
        "nx":       (int,   True,  None),
        "ny":       (int,   True,  None),
    },
}

_LOAD_SCHEMA: dict[str, tuple] = {
    "name": (str,   False, ""),
    "Pu":   (float, True,  None),
    "Mu":   (float, True,  None),
}


@dataclass(frozen=True)
class LoadCase:
    """A factored load combination to check against the diagram.

    Attributes
    ----------
    name : str
    Pu : float
        Axial force, tonf (compression positive).
    Mu : float
        Bending moment, tonf.m.
    """

    name: str
    Pu: float
    Mu: float


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _coerce(value: Any, expected_type: type) -> Any:
    """Attempt to coerce *value* to *expected_type*.

    YAML reads ``30`` as ``int`` where a ``float`` is expected.  Ints are
    promoted to floats when the schema says ``float`` and whole floats such
    as ``3.0`` are accepted as ints; booleans are never accepted as numbers.
    """
    if isinstance(value, bool) and expected_type is not bool:
        raise InputError(f"Expected {expected_type.__name__}, got bool {value!r}")
    if expected_type is float and isinstance(value, (int, float)):
        return float(value)
    if expected_type is int and isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, expected_type):
        return value
    raise InputError(
        f"Expected type {expected_type.__name__}, got "
        f"{type(value).__name__} for value {value!r}"
    )


def _validate_section(
    data: dict[str, Any],
    schema: dict[str, tuple],
    section_path: str,
    errors: list[str],
) -> dict[str, Any]:
    """Validate *data* against a flat field *schema*.

    Returns a new mapping with defaults filled and types coerced.  Appends
    human-readable messages to *errors* for every problem found.
    """
    validated: dict[str, Any] = {}
    for field, (ftype, required, default) in schema.items():
        path_str = f"{section_path}.{field}"
        if field not in data or data[field] is None:
            if required and default is None:
                errors.append(f"Missing required field: {path_str}")
                continue
            validated[field] = default
            continue

        raw = data[field]
        try:
            coerced = _coerce(raw, ftype)
        except InputError:
            errors.append(
                f"{path_str}: expected {ftype.__name__}, "
                f"got {type(raw).__name__} ({raw!r})"
            )
            continue

        validated[field] = coerced

    return validated


def _resolve_bar_area(reinf: dict[str, Any], errors: list[str]) -> float | None:
    """Bar area from either ``bar_area`` or a ``bar_size`` designation."""
    size = reinf.get("bar_size")
    area = reinf.get("bar_area")
    if size is not None and area is not None:
        errors.append("reinforcement: give either bar_size or bar_area, not both")
        return None
    if area is not None:
        return area
    if size is None:
        errors.append("Missing required field: reinforcement.bar_size or reinforcement.bar_area")
        return None
    try:
        return bar_area(size)
    except KeyError:
        available = list(load_material_tables()["bar_areas"].keys())
        errors.append(f"reinforcement.bar_size: '{size}' is not one of {available}")
        return None


def _validate_loads(raw_loads: Any, errors: list[str]) -> list[LoadCase]:
    if raw_loads is None:
        return []
    if not isinstance(raw_loads, list):
        errors.append("Section 'loads' must be a list of {name, Pu, Mu} mappings")
        return []
    loads: list[LoadCase] = []
    for i, entry in enumerate(raw_loads):
        path = f"loads[{i}]"
        if not isinstance(entry, dict):
            errors.append(f"{path}: must be a mapping")
            continue
        item = _validate_section(entry, _LOAD_SCHEMA, path, errors)
        if "Pu" in item and "Mu" in item:
            loads.append(LoadCase(name=item["name"] or f"LC{i + 1}", Pu=item["Pu"], Mu=item["Mu"]))
    return loads


_FIELD_PATHS: dict[str, str] = {
    "fc": "materials.fc",
    "fy": "materials.fy",
    "b": "section.b",
    "h": "section.h",
    "cover": "section.cover",
    "bar_area": "reinforcement.bar_area",
    "nx": "reinforcement.nx",
    "ny": "reinforcement.ny",
}


def _build_inputs(
    config: dict[str, Any],
    area: float | None,
    errors: list[str],
) -> SectionInputs | None:
    """Validate the engine parameters with :class:`SectionInputs`.

    Range violations are reported against their YAML paths.  Fields already
    reported as missing or mistyped are not reported again.
    """
    values = {
        field: config.get(path.split(".")[0], {}).get(field)
        for field, path in _FIELD_PATHS.items()
    }
    values["bar_area"] = area
    values = {k: v for k, v in values.items() if v is not None}
    try:
        return SectionInputs.model_validate(values)
    except ValidationError as exc:
        for err in exc.errors():
            if err["type"] == "missing":
                continue
            field = str(err["loc"][0]) if err["loc"] else ""
            errors.append(f"{_FIELD_PATHS.get(field, field)}: {err['msg']}")
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_config(raw: Any) -> dict[str, Any]:
    """Validate an already-loaded YAML mapping.

    Returns
    -------
    dict
        ``{"project": dict, "inputs": SectionInputs, "loads": list[LoadCase]}``

    Raises
    ------
    InputError
        If validation fails (the message lists every problem found).
    """
    if not isinstance(raw, dict):
        raise InputError("YAML root must be a mapping (dict)")

    errors: list[str] = []
    config: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # 1. Validate sections (flat fields)
    # ------------------------------------------------------------------
    for section_name, field_schema in SCHEMA.items():
        section_data = raw.get(section_name)
        if section_data is None:
            has_required = any(
                req and default is None
                for (_, req, default) in field_schema.values()
            )
            if has_required:
                errors.append(f"Missing required section: {section_name}")
            config[section_name] = {
                field: default
                for field, (_, _, default) in field_schema.items()
            }
            continue

        if not isinstance(section_data, dict):
            errors.append(f"Section '{section_name}' must be a mapping")
            continue

        config[section_name] = _validate_section(
            section_data, field_schema, section_name, errors
        )

    # ------------------------------------------------------------------
    # 2. Bar area and loads
    # ------------------------------------------------------------------
    area = None
    if "reinforcement" in config:
        area = _resolve_bar_area(config["reinforcement"], errors)
    loads = _validate_loads(raw.get("loads"), errors)

    # ------------------------------------------------------------------
    # 3. Engine parameter set and cross-field checks
    # ------------------------------------------------------------------
    inputs = _build_inputs(config, area, errors)
    if inputs is not None:
        try:
            check_geometry(inputs)
        except DegenerateGeometryError as exc:
            errors.append(f"section.{exc}")

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------
    if errors:
        bullet_list = "\n  - ".join(errors)
        raise InputError(
            f"Input validation failed with {len(errors)} error(s):\n"
            f"  - {bullet_list}"
        )

    logger.debug("Validated input for '{}' with {} load case(s)", config["project"]["name"], len(loads))
    return {"project": config["project"], "inputs": inputs, "loads": loads}


def parse_input(yaml_path: str | Path) -> dict[str, Any]:
    """Read and validate a column YAML file.

    Parameters
    ----------
    yaml_path:
        Filesystem path to the YAML input file.

    Returns
    -------
    dict
        See :func:`parse_config`.

    Raises
    ------
    FileNotFoundError
        If *yaml_path* does not exist.
    InputError
        If validation fails (the message lists every problem found).
    """
    path = Path(yaml_path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {yaml_path}")

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return parse_config(raw)


# ---------------------------------------------------------------------------
# Template generator
# ---------------------------------------------------------------------------

_TEMPLATE_YAML = """\
# RC Column P-M Interaction Input File
# =====================================
# Units: kgf, cm.  Loads in tonf and tonf-m.

project:
  name: "COLUMN-C1"
  column_id: "C1"
  designer: "Design Engineer"

materials:
  fc: 280                       # kgf/cm2 - concrete compressive strength
  fy: 4200                      # kgf/cm2 - steel yield strength

section:
  b: 30                         # cm - width
  h: 50                         # cm - total depth (bending direction)
  cover: 4                      # cm - to bar centre

reinforcement:
  bar_size: "D19"               # Options: D10 | D13 | D16 | D19 | D22 | D25 | D29 | D32 | D36
  # bar_area: 2.85              # cm2 - use instead of bar_size
  nx: 3                         # bars along top and bottom faces
  ny: 3                         # bar rows along the depth, faces included (>= 2)

loads:                          # optional factored loads to check (nominal, no phi)
  - name: "1.2D+1.6L"
    Pu: 150.0                   # tonf
    Mu: 12.0                    # tonf-m
"""


def generate_template() -> str:
    """Return a complete sample YAML input template as a string."""
    return _TEMPLATE_YAML
