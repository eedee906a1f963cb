"""Engineering diagrams for the P-M interaction tool.

Generates matplotlib figures for the interaction envelope and the column
cross-section.  Each public function returns a ``matplotlib.figure.Figure``
that the caller can save, embed in a report or pass to ``st.pyplot()``.

Colour conventions (matching typical design-report style):
    - Concrete: light gray fill (#d9d9d9), black outline
    - Rebar: red filled circles (#e74c3c)
    - Capacity envelope: blue
    - Dimension lines: black, thin
"""

from __future__ import annotations

import math
from typing import Any, Sequence

import matplotlib
matplotlib.use("Agg")          # non-interactive backend for CLI and Streamlit
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from .models import SectionInputs
from .section import SectionModel


# ── Colours ──────────────────────────────────────────────────────────────────

_CONCRETE = "#d9d9d9"
_REBAR    = "#e74c3c"
_ENVELOPE = "#3b82f6"
_DIM      = "#333333"


# ── Helpers ──────────────────────────────────────────────────────────────────

def _add_dim_h(ax, y, x0, x1, text, offset=0.6, fontsize=8):
    """Draw a horizontal dimension line with arrows and a label."""
    ax.annotate(
        "", xy=(x1, y), xytext=(x0, y),
        arrowprops=dict(arrowstyle="<->", color=_DIM, lw=0.8),
    )
    ax.text((x0 + x1) / 2, y + offset, text, ha="center", va="bottom",
            fontsize=fontsize, color=_DIM)


def _add_dim_v(ax, x, y0, y1, text, offset=0.6, fontsize=8):
    """Draw a vertical dimension line with arrows and a label."""
    ax.annotate(
        "", xy=(x, y1), xytext=(x, y0),
        arrowprops=dict(arrowstyle="<->", color=_DIM, lw=0.8),
    )
    ax.text(x + offset, (y0 + y1) / 2, text, ha="left", va="center",
            fontsize=fontsize, color=_DIM, rotation=90)


# ═══════════════════════════════════════════════════════════════════════════════
# 1. P-M Interaction Diagram
# ═══════════════════════════════════════════════════════════════════════════════

def draw_pm_diagram(
    diagram,
    demands: Sequence[Any] = (),
    peak=None,
    title: str = "RC Column P-M Interaction Diagram",
) -> plt.Figure:
    """Plot the nominal P-M capacity curve with optional demand points.

    Parameters
    ----------
    diagram : InteractionDiagram
        Has ``.points`` (list of CapacityPoint with .M and .P), plus ``Po``
        and ``Mo_approx``.
    demands : sequence of LoadCase
        Factored load points (``name``, ``Pu``, ``Mu``) to overlay.
    peak : CapacityPoint, optional
        Refined peak-moment point to mark.
    title : str
    """
    fig, ax = plt.subplots(figsize=(8, 6))

    points = diagram.points if diagram is not None else []
    if not points:
        ax.text(0.5, 0.5, "No interaction points", transform=ax.transAxes,
                ha="center", va="center", fontsize=12)
        ax.set_title(title)
        return fig

    # Capacity curve
    Ms = [pt.M for pt in points]
    Ps = [pt.P for pt in points]
    ax.plot(Ms, Ps, "-o", color=_ENVELOPE, linewidth=2.0, markersize=3,
            label="Nominal strength (Mn, Pn)", zorder=2)
    ax.fill_betweenx(Ps, 0, Ms, alpha=0.08, color=_ENVELOPE)

    # Key points
    M_ref = max(max(Ms), 1e-6)
    ax.plot(0, diagram.Po, "bs", markersize=6, zorder=4)
    ax.text(M_ref * 0.03, diagram.Po, f"Po = {diagram.Po:.1f} tonf",
            fontsize=7, va="bottom")
    ax.plot(0, diagram.Pt, "bs", markersize=6, zorder=4)
    ax.text(M_ref * 0.03, diagram.Pt, f"Pt = {diagram.Pt:.1f} tonf",
            fontsize=7, va="top")

    if peak is not None:
        ax.plot(peak.M, peak.P, "b^", markersize=7, zorder=4)
        ax.text(peak.M + M_ref * 0.02, peak.P,
                f"Mmax = {peak.M:.1f} tonf-m", fontsize=7, va="center")

    # Demand points
    for i, lc in enumerate(demands):
        M_abs = abs(lc.Mu)
        ax.plot(M_abs, lc.Pu, "ro", markersize=7, zorder=5,
                label="Factored (Pu, Mu)" if i == 0 else None)
        ax.text(M_abs + M_ref * 0.02, lc.Pu, lc.name,
                fontsize=7, color="red", va="center")

    ax.set_xlabel("Moment Mn (tonf-m)", fontsize=9)
    ax.set_ylabel("Axial Force Pn (tonf)", fontsize=9)
    ax.set_title(title, fontsize=11, fontweight="bold")
    ax.legend(loc="upper right", fontsize=8)
    ax.grid(True, alpha=0.3)
    ax.axhline(0, color="gray", linewidth=0.5)
    ax.axvline(0, color="gray", linewidth=0.5)

    all_M = Ms + [abs(lc.Mu) for lc in demands]
    all_P = Ps + [lc.Pu for lc in demands]
    p_range = (max(all_P) - min(all_P)) or 1.0
    ax.set_xlim(-max(all_M) * 0.05 - 0.1, max(all_M) * 1.2 + 0.1)
    ax.set_ylim(min(all_P) - p_range * 0.08, max(all_P) + p_range * 0.08)

    fig.tight_layout()
    return fig


# ═══════════════════════════════════════════════════════════════════════════════
# 2. Rectangular Cross-Section with Rebar
# ═══════════════════════════════════════════════════════════════════════════════

def draw_section(inputs: SectionInputs, section: SectionModel) -> plt.Figure:
    """Rectangular cross-section with the bar grid and dimensions.

    The compression face is drawn at the top, matching the depth convention
    of the reinforcement layers.
    """
    fig, ax = plt.subplots(figsize=(5, 6))
    b, h, cover = inputs.b, inputs.h, inputs.cover

    ax.add_patch(mpatches.Rectangle((0, 0), b, h, facecolor=_CONCRETE,
                                    edgecolor="black", linewidth=1.5, zorder=1))

    bar_r = max(math.sqrt(inputs.bar_area / math.pi), min(b, h) * 0.015)
    for i, layer in enumerate(section.layers):
        y = h - layer.depth
        if i < 2:  # top and bottom faces
            if inputs.nx == 1:
                xs = [b / 2]
            else:
                step = (b - 2 * cover) / (inputs.nx - 1)
                xs = [cover + j * step for j in range(inputs.nx)]
        else:
            xs = [cover, b - cover]
        for x in xs:
            ax.add_patch(mpatches.Circle((x, y), bar_r, facecolor=_REBAR,
                                         edgecolor="black", linewidth=0.4, zorder=3))

    # Compression face marker
    ax.plot([0, b], [h, h], color=_ENVELOPE, linewidth=3, zorder=2)
    ax.text(b / 2, h + h * 0.1, "compression face", ha="center",
            fontsize=7, color=_ENVELOPE)

    _add_dim_h(ax, -h * 0.08, 0, b, f"b = {b:g} cm")
    _add_dim_v(ax, b + b * 0.08, 0, h, f"h = {h:g} cm")

    n_bars = 2 * inputs.nx + 2 * max(inputs.ny - 2, 0)
    ax.text(b / 2, -h * 0.2,
            f"{n_bars} bars, As = {section.Ast:.2f} cm²\ncover = {cover:g} cm",
            ha="center", va="top", fontsize=7.5, color=_DIM,
            bbox=dict(boxstyle="round,pad=0.3", facecolor="white", edgecolor="#ccc"))

    margin = max(b, h) * 0.3
    ax.set_xlim(-margin, b + margin)
    ax.set_ylim(-h * 0.45, h + h * 0.2)
    ax.set_aspect("equal")
    ax.set_title("Column Cross Section", fontsize=10, fontweight="bold")
    ax.axis("off")
    fig.tight_layout()
    return fig
