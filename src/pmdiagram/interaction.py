"""Nominal P-M interaction diagrams for rectangular RC columns.

Constructs the axial force -- bending moment capacity envelope of a
rectangular reinforced concrete section by strain compatibility with an
equivalent rectangular concrete stress block.

Method
------
For a neutral-axis depth ``c`` measured from the extreme compression fibre:

* stress block depth ``a = min(beta1 * c, h)``
* concrete force ``Cc = 0.85 * fc * b * a`` acting at ``a / 2``
* steel strain at depth ``d``: ``eps_s = eps_cu * (c - d) / c``
* steel stress ``fs = clip(Es * eps_s, -fy, +fy)``, compression positive

Forces are summed into ``Pn`` and their moments about the geometric
mid-depth ``h / 2`` into ``Mn``.

The diagram is traced over a fixed ladder of ``c / h`` ratios, bracketed by
the pure compression point ``Po`` and the pure tension point ``Pt``:

.. code-block:: text

    [Po, c/h = 2.0, 1.5, ..., 0.05, Pt]

Units convention
----------------
All internal calculations use **cm** and **kgf**.  Output forces are in
**tonf** and moments in **tonf.m**:

    - Force: ``kgf -> tonf``  (divide by 1000)
    - Moment: ``kgf.cm -> tonf.m``  (divide by 1e5)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np
from loguru import logger
from scipy.optimize import minimize_scalar

from .materials import MaterialModel, get_material_model
from .models import SectionInputs
from .section import SectionModel, build_section
from .utils import kgf_cm_to_tonf_m, kgf_to_tonf


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Neutral-axis depth ratios c/h, strictly descending: compression controlled
# first, tension controlled last.
RATIO_LADDER: tuple[float, ...] = (
    2.0, 1.5, 1.2, 1.1, 1.0,
    0.9, 0.8, 0.7, 0.6, 0.55, 0.5, 0.45, 0.4, 0.35, 0.3, 0.25, 0.2, 0.15, 0.1, 0.05,
)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CapacityPoint:
    """A single point on the P-M interaction diagram.

    Attributes
    ----------
    M : float
        Bending moment about the section mid-depth, **tonf.m**.
    P : float
        Axial force in **tonf**.  Positive denotes compression.
    """

    M: float
    P: float


@dataclass
class InteractionDiagram:
    """Nominal P-M interaction envelope for a rectangular RC section.

    Attributes
    ----------
    points : list[CapacityPoint]
        ``[pure compression, sweep over RATIO_LADDER..., pure tension]``.
    Po : float
        Pure axial compression capacity, tonf.
    Mo_approx : float
        Largest moment among the swept points, tonf.m.  This is only as
        good as the ratio ladder; see :func:`find_peak_moment`.
    """

    points: list[CapacityPoint]
    Po: float
    Mo_approx: float

    @property
    def Pt(self) -> float:
        """Pure axial tension capacity, tonf (negative)."""
        return self.points[-1].P

    @property
    def swept(self) -> list[CapacityPoint]:
        """The points produced by the ratio ladder, without the two axial ends."""
        return self.points[1:-1]


def point_labels() -> list[str]:
    """Row labels for the diagram points, in emitted order."""
    return (
        ["Pure compression"]
        + [f"c/h = {r:.2f}" for r in RATIO_LADDER]
        + ["Pure tension"]
    )


# ---------------------------------------------------------------------------
# Material responses
# ---------------------------------------------------------------------------

def stress_block_depth(c: float, beta1: float, h: float) -> float:
    """Equivalent stress block depth ``beta1 * c``, capped at the section depth."""
    return min(beta1 * c, h)


def steel_stress(strain: float, fy: float, Es: float) -> float:
    """Reinforcing steel stress from the elastic-perfectly-plastic model.

    Parameters
    ----------
    strain : float
        Steel strain, positive in compression.
    fy : float
        Yield strength, kgf/cm^2.
    Es : float
        Elastic modulus, kgf/cm^2.

    Returns
    -------
    float
        Stress in kgf/cm^2, within ``[-fy, +fy]``.  Positive denotes
        compression.
    """
    sigma = Es * strain
    if sigma > fy:
        return fy
    if sigma < -fy:
        return -fy
    return sigma


def layer_stresses(
    c: float,
    section: SectionModel,
    material: MaterialModel,
) -> np.ndarray:
    """Stress in every reinforcement layer for neutral-axis depth ``c``.

    Returns
    -------
    np.ndarray
        Stresses in kgf/cm^2 (compression positive), in the order of
        ``section.layers``.

    Raises
    ------
    ValueError
        If ``c`` is not strictly positive.
    """
    if not c > 0.0:
        raise ValueError(f"Neutral-axis depth must be positive, got c={c!r}")
    depths = np.array([layer.depth for layer in section.layers])
    strains = material.epsilon_cu * (c - depths) / c
    return np.clip(material.Es * strains, -section.fy, section.fy)


# ---------------------------------------------------------------------------
# Single-point solver
# ---------------------------------------------------------------------------

def _solve_base_units(
    c: float,
    section: SectionModel,
    material: MaterialModel,
) -> tuple[float, float]:
    """Return ``(Mn, Pn)`` in kgf.cm and kgf for neutral-axis depth ``c``."""
    h = section.h
    centroid = h / 2.0

    # Concrete
    a = stress_block_depth(c, section.beta1, h)
    C_c = material.stress_block_factor * section.fc * section.b * a
    M_c = C_c * (centroid - a / 2.0)

    # Steel
    fs = layer_stresses(c, section, material)
    depths = np.array([layer.depth for layer in section.layers])
    areas = np.array([layer.area for layer in section.layers])
    F_s = fs * areas
    M_s = F_s * (centroid - depths)

    Pn = C_c + float(F_s.sum())
    Mn = M_c + float(M_s.sum())
    return Mn, Pn


def solve_point(
    c: float,
    section: SectionModel,
    material: MaterialModel | None = None,
) -> CapacityPoint:
    """Capacity point for a fixed neutral-axis depth.

    Parameters
    ----------
    c : float
        Neutral-axis depth from the extreme compression fibre, cm.  Must be
        strictly positive; values above ``h`` put the whole section in
        compression.
    section : SectionModel
        Output of :func:`~pmdiagram.section.build_section`.
    material : MaterialModel, optional
        Defaults to :func:`~pmdiagram.materials.get_material_model`.

    Returns
    -------
    CapacityPoint
        ``(Mn, Pn)`` in tonf.m and tonf.

    Raises
    ------
    ValueError
        If ``c <= 0``.
    """
    if material is None:
        material = get_material_model()
    Mn, Pn = _solve_base_units(c, section, material)
    return CapacityPoint(M=kgf_cm_to_tonf_m(Mn), P=kgf_to_tonf(Pn))


# ---------------------------------------------------------------------------
# Axial limits
# ---------------------------------------------------------------------------

def pure_compression(section: SectionModel, material: MaterialModel) -> float:
    """``Po = 0.85 fc (Ag - Ast) + fy Ast`` in kgf."""
    concrete = material.stress_block_factor * section.fc * (section.Ag - section.Ast)
    return concrete + section.fy * section.Ast


def pure_tension(section: SectionModel) -> float:
    """``Pt = -fy Ast`` in kgf."""
    return -section.fy * section.Ast


# ---------------------------------------------------------------------------
# Diagram
# ---------------------------------------------------------------------------

def _as_inputs(inputs: SectionInputs | Mapping[str, Any]) -> SectionInputs:
    if isinstance(inputs, SectionInputs):
        return inputs
    return SectionInputs.from_mapping(inputs)


def compute_diagram(inputs: SectionInputs | Mapping[str, Any]) -> InteractionDiagram:
    """Generate the nominal P-M interaction diagram of a section.

    Parameters
    ----------
    inputs : SectionInputs or mapping
        Section parameters.  A mapping is validated first.

    Returns
    -------
    InteractionDiagram
        ``len(RATIO_LADDER) + 2`` points from pure compression to pure
        tension.

    Raises
    ------
    InputError
        If the parameters are invalid (including
        :class:`~pmdiagram.section.DegenerateGeometryError`).
    """
    inputs = _as_inputs(inputs)
    section = build_section(inputs)
    material = get_material_model()

    Po = kgf_to_tonf(pure_compression(section, material))
    points: list[CapacityPoint] = [CapacityPoint(M=0.0, P=Po)]

    max_M = 0.0
    for ratio in RATIO_LADDER:
        c = ratio * inputs.h
        pt = solve_point(c, section, material)
        logger.debug("c/h={:.2f} c={:.2f} cm -> M={:.3f} tonf.m, P={:.3f} tonf", ratio, c, pt.M, pt.P)
        points.append(pt)
        if pt.M > max_M:
            max_M = pt.M

    Pt = kgf_to_tonf(pure_tension(section))
    points.append(CapacityPoint(M=0.0, P=Pt))

    logger.info("Interaction diagram: Po={:.1f} tonf, Pt={:.1f} tonf, Mo~{:.1f} tonf.m", Po, Pt, max_M)

    return InteractionDiagram(points=points, Po=Po, Mo_approx=max_M)


# ---------------------------------------------------------------------------
# Characteristic points
# ---------------------------------------------------------------------------

def balanced_depth(section: SectionModel, material: MaterialModel) -> float:
    """Neutral-axis depth at which the deepest layer just reaches yield."""
    eps_y = material.yield_strain(section.fy)
    return material.epsilon_cu / (material.epsilon_cu + eps_y) * section.max_depth


def balanced_point(inputs: SectionInputs | Mapping[str, Any]) -> CapacityPoint:
    """Capacity point at the balanced strain condition.

    Concrete reaches ``epsilon_cu`` while the layer furthest from the
    compression face reaches the yield strain ``fy / Es`` in tension.
    """
    inputs = _as_inputs(inputs)
    section = build_section(inputs)
    material = get_material_model()
    return solve_point(balanced_depth(section, material), section, material)


def find_peak_moment(
    inputs: SectionInputs | Mapping[str, Any],
    tol: float = 1e-4,
) -> tuple[float, CapacityPoint]:
    """Refine the maximum moment by a bounded scalar search over ``c``.

    The search is bracketed by the ladder neighbours of the best swept
    point.  The returned moment is never below ``Mo_approx``.

    Parameters
    ----------
    inputs : SectionInputs or mapping
    tol : float, optional
        Absolute tolerance on ``c`` for the search, as a fraction of ``h``.

    Returns
    -------
    tuple[float, CapacityPoint]
        Neutral-axis depth (cm) and the capacity point at the peak.
    """
    inputs = _as_inputs(inputs)
    section = build_section(inputs)
    material = get_material_model()
    h = inputs.h

    depths = np.array(RATIO_LADDER) * h
    moments = np.array([solve_point(c, section, material).M for c in depths])
    best = int(np.argmax(moments))

    hi = depths[max(best - 1, 0)]
    lo = depths[min(best + 1, len(depths) - 1)]

    def _neg_moment(c: float) -> float:
        return -_solve_base_units(c, section, material)[0]

    res = minimize_scalar(
        _neg_moment,
        bounds=(lo, hi),
        method="bounded",
        options={"xatol": tol * h},
    )

    c_peak = float(res.x)
    peak = solve_point(c_peak, section, material)
    if peak.M < moments[best]:
        c_peak = float(depths[best])
        peak = solve_point(c_peak, section, material)

    logger.debug("Peak moment {:.3f} tonf.m at c={:.2f} cm", peak.M, c_peak)
    return c_peak, peak


# ---------------------------------------------------------------------------
# Utilisation checks
# ---------------------------------------------------------------------------

def moment_capacity_at_P(diagram: InteractionDiagram, P: float) -> float:
    """Interpolate the moment capacity of a diagram at a given axial force.

    Scans consecutive segments of the curve in their traced order and
    returns the largest moment found at ``P``.

    Parameters
    ----------
    diagram : InteractionDiagram
    P : float
        Axial force, tonf (positive = compression).

    Returns
    -------
    float
        Moment capacity in tonf.m.  Returns 0.0 if ``P`` is outside the
        range of the diagram.
    """
    pts = diagram.points
    M_capacity = 0.0

    for i in range(len(pts) - 1):
        P1, M1 = pts[i].P, pts[i].M
        P2, M2 = pts[i + 1].P, pts[i + 1].M

        if (P1 <= P <= P2) or (P2 <= P <= P1):
            dP = P2 - P1
            if abs(dP) < 1e-12:
                M_interp = max(M1, M2)
            else:
                t = (P - P1) / dP
                M_interp = M1 + t * (M2 - M1)
            M_capacity = max(M_capacity, M_interp)

    return M_capacity


def check_utilisation(diagram: InteractionDiagram, P: float, M: float) -> float:
    """Utilisation ratio of a load point against the nominal envelope.

    Computes ``|M| / M_capacity(P)``.  Less than 1.0 means the load point
    lies inside the envelope.

    Parameters
    ----------
    diagram : InteractionDiagram
    P : float
        Applied axial force, **tonf** (positive = compression).
    M : float
        Applied bending moment, **tonf.m** (absolute value used).

    Returns
    -------
    float
        Utilisation ratio.  ``inf`` when ``P`` lies outside ``[Pt, Po]`` or
        a moment is applied where the capacity is zero; ``0.0`` for a zero
        moment at either axial limit.
    """
    M = abs(M)
    if P < diagram.Pt - 1e-9 or P > diagram.Po + 1e-9:
        return float("inf")

    M_capacity = moment_capacity_at_P(diagram, P)
    if M_capacity < 1e-12:
        if M < 1e-9:
            return 0.0
        return float("inf")

    return M / M_capacity
