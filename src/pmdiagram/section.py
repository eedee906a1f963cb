"""Section model builder for rectangular RC columns.

Converts the bar grid of a :class:`~pmdiagram.models.SectionInputs` into
discrete reinforcement layers measured from the extreme compression fibre
(the top face), and derives the gross area, total steel area and the
stress-block factor ``beta1``.

Layer layout
------------
* Top layer at ``cover`` with ``nx`` bars.
* Bottom layer at ``h - cover`` with ``nx`` bars.
* ``ny - 2`` side layers of two bars each (one per side face) at
  ``cover + i * s`` for ``i = 1 .. ny - 2``, where
  ``s = (h - 2 * cover) / (ny - 1)``.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .materials import compute_beta1
from .models import InputError, SectionInputs
from .utils import rectangular_area

_SIDE_BARS_PER_LAYER: int = 2


class DegenerateGeometryError(InputError):
    """Raised when the cover leaves no room between the top and bottom bars."""


@dataclass(frozen=True)
class ReinforcementLayer:
    """A row of bars at one depth.

    Attributes
    ----------
    depth : float
        Distance from the extreme compression fibre, cm.
    area : float
        Total steel area of the row, cm^2.
    """

    depth: float
    area: float


@dataclass(frozen=True)
class SectionModel:
    """Discrete section model consumed by the interaction sweep.

    Attributes
    ----------
    layers : tuple[ReinforcementLayer, ...]
        Top layer, bottom layer, then side layers from top to bottom.
    Ag : float
        Gross area ``b * h``, cm^2.
    Ast : float
        Total reinforcement area, cm^2.
    beta1 : float
        Stress-block depth factor for the concrete strength.
    b : float
        Section width, cm.
    h : float
        Section depth, cm.
    fc : float
        Concrete strength, kgf/cm^2.
    fy : float
        Steel yield strength, kgf/cm^2.
    """

    layers: tuple[ReinforcementLayer, ...]
    Ag: float
    Ast: float
    beta1: float
    b: float
    h: float
    fc: float
    fy: float

    @property
    def max_depth(self) -> float:
        """Depth of the layer furthest from the compression face."""
        return max(layer.depth for layer in self.layers)


def side_layer_spacing(h: float, cover: float, ny: int) -> float:
    """Spacing of the bar rows along the depth, ``(h - 2 cover) / (ny - 1)``."""
    return (h - 2.0 * cover) / (ny - 1)


def check_geometry(inputs: SectionInputs) -> None:
    """Raise :class:`DegenerateGeometryError` unless ``h > 2 * cover``."""
    if inputs.h <= 2.0 * inputs.cover:
        raise DegenerateGeometryError(
            f"cover: {inputs.cover} leaves no room for reinforcement in a "
            f"section of depth h={inputs.h} (need h > 2 * cover)"
        )


def build_section(inputs: SectionInputs) -> SectionModel:
    """Build the :class:`SectionModel` for a validated parameter set.

    Raises
    ------
    DegenerateGeometryError
        If the cover is at least half the section depth.
    """
    check_geometry(inputs)

    face_area = inputs.nx * inputs.bar_area
    layers = [
        ReinforcementLayer(depth=inputs.cover, area=face_area),
        ReinforcementLayer(depth=inputs.h - inputs.cover, area=face_area),
    ]

    if inputs.ny > 2:
        spacing = side_layer_spacing(inputs.h, inputs.cover, inputs.ny)
        for i in range(1, inputs.ny - 1):
            layers.append(
                ReinforcementLayer(
                    depth=inputs.cover + i * spacing,
                    area=_SIDE_BARS_PER_LAYER * inputs.bar_area,
                )
            )

    Ag = rectangular_area(inputs.b, inputs.h)
    Ast = sum(layer.area for layer in layers)
    beta1 = compute_beta1(inputs.fc)

    logger.debug(
        "Section {}x{} cm: {} layers, Ag={:.1f} cm2, Ast={:.2f} cm2, beta1={:.3f}",
        inputs.b, inputs.h, len(layers), Ag, Ast, beta1,
    )

    return SectionModel(
        layers=tuple(layers),
        Ag=Ag,
        Ast=Ast,
        beta1=beta1,
        b=inputs.b,
        h=inputs.h,
        fc=inputs.fc,
        fy=inputs.fy,
    )
