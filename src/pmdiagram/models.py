"""
Input data model for the P-M interaction engine using Pydantic for validation.

All quantities use the engine's base units: stresses in kgf/cm^2, lengths in
cm and areas in cm^2.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator


class InputError(ValueError):
    """Raised when the section parameters are missing, non-numeric or
    violate an invariant."""


class SectionInputs(BaseModel):
    """Flat parameter set describing a rectangular RC column section.

    Reinforcement is a bar grid: ``nx`` bars along the top and bottom faces
    and ``ny`` bar rows counted along the depth (top and bottom rows
    included, so the sides carry ``ny - 2`` intermediate rows of two bars).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    fc: float = Field(..., gt=0, allow_inf_nan=False, description="Concrete strength, kgf/cm2")
    fy: float = Field(..., gt=0, allow_inf_nan=False, description="Steel yield strength, kgf/cm2")
    b: float = Field(..., gt=0, allow_inf_nan=False, description="Section width, cm")
    h: float = Field(..., gt=0, allow_inf_nan=False, description="Section total depth, cm")
    cover: float = Field(..., gt=0, allow_inf_nan=False, description="Cover to bar centre, cm")
    bar_area: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("bar_area", "barArea"),
        description="Area of one bar, cm2",
    )
    nx: int = Field(..., ge=1, description="Bars along the top and bottom faces")
    ny: int = Field(..., ge=2, description="Bar rows along the depth, faces included")

    @field_validator("*", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("Input should be a number, not a boolean")
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SectionInputs":
        """Validate a plain mapping, raising :class:`InputError` on failure.

        The error message lists every violated field, one per line.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            problems = []
            for err in exc.errors():
                loc = ".".join(str(part) for part in err["loc"]) or "section"
                problems.append(f"{loc}: {err['msg']}")
            bullet_list = "\n  - ".join(problems)
            raise InputError(
                f"Invalid section input ({len(problems)} error(s)):\n"
                f"  - {bullet_list}"
            ) from exc

    def as_dict(self) -> dict[str, float | int]:
        """Plain ``dict`` of the parameter set, in field order."""
        return self.model_dump()
