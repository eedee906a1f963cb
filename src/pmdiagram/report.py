"""
PDF report generator for the P-M interaction diagram.

Produces a short calculation report using reportlab: inputs, section model,
summary values, the diagram figure, the point table and load checks.
"""

from __future__ import annotations

import io
from typing import Any, List

import matplotlib.pyplot as plt
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .diagrams import draw_pm_diagram, draw_section
from .interaction import point_labels
from .utils import reinforcement_ratio


# ── colours ──────────────────────────────────────────────────────────────
_DARK_BLUE = colors.HexColor("#003366")
_MID_BLUE = colors.HexColor("#336699")
_HEADER_BG = colors.HexColor("#003366")
_HEADER_FG = colors.white
_ROW_EVEN = colors.HexColor("#F2F2F2")
_ROW_ODD = colors.white
_GREEN = colors.HexColor("#C6EFCE")
_YELLOW = colors.HexColor("#FFEB9C")
_RED = colors.HexColor("#FFC7CE")

PAGE_W, PAGE_H = A4
_USABLE_W = PAGE_W - 40 * mm  # 20 mm each side


# ── styles ───────────────────────────────────────────────────────────────

def _build_styles() -> dict:
    ss = getSampleStyleSheet()
    custom: dict = {"Normal": ss["Normal"]}
    custom["Title"] = ParagraphStyle(
        "Title", parent=ss["Normal"], fontSize=18, leading=22,
        textColor=_DARK_BLUE, alignment=TA_CENTER, spaceAfter=6 * mm,
        fontName="Helvetica-Bold",
    )
    custom["H1"] = ParagraphStyle(
        "H1", parent=ss["Normal"], fontSize=14, leading=18,
        textColor=_DARK_BLUE, spaceBefore=6 * mm, spaceAfter=3 * mm,
        fontName="Helvetica-Bold",
    )
    custom["Small"] = ParagraphStyle(
        "Small", parent=ss["Normal"], fontSize=8, leading=10,
        textColor=_MID_BLUE,
    )
    return custom


# ── table helper ─────────────────────────────────────────────────────────

def _tbl(data: list[list], col_widths=None, font_size: int = 9) -> Table:
    """Build a styled Table with alternating row colours."""
    if col_widths is None:
        n_cols = max(len(r) for r in data)
        col_widths = [_USABLE_W / n_cols] * n_cols

    t = Table(data, colWidths=col_widths, repeatRows=1)
    style_cmds = [
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), _HEADER_FG),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("ALIGN", (0, 0), (0, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]
    for i in range(1, len(data)):
        bg = _ROW_EVEN if i % 2 == 0 else _ROW_ODD
        style_cmds.append(("BACKGROUND", (0, i), (-1, i), bg))
    t.setStyle(TableStyle(style_cmds))
    return t


def _util_color(val: float) -> colors.Color:
    if val > 1.0:
        return _RED
    if val > 0.9:
        return _YELLOW
    return _GREEN


def _fnum(val, dp: int = 1, unit: str = "") -> str:
    """Format a number for a table cell."""
    if val is None:
        return "N/A"
    return f"{float(val):.{dp}f} {unit}".strip()


def _figure_image(fig, width: float) -> Image:
    """Render a matplotlib figure into a reportlab Image of the given width."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=150)
    buf.seek(0)
    fig_w, fig_h = fig.get_size_inches()
    plt.close(fig)
    return Image(buf, width=width, height=width * fig_h / fig_w)


# ── page footer ──────────────────────────────────────────────────────────

def _footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.drawString(20 * mm, 12 * mm, "RC Column P-M Interaction - nominal strength")
    canvas.drawRightString(PAGE_W - 20 * mm, 12 * mm, f"Page {doc.page}")
    canvas.restoreState()


# ── public API ───────────────────────────────────────────────────────────

def generate_report(output_path: str, config: dict, results: dict) -> None:
    """
    Generate the PDF calculation report.

    Args:
        output_path: Path to output PDF file.
        config: Parsed input dict (``project``, ``inputs``, ``loads``).
        results: Dict with ``section``, ``diagram`` and optionally ``peak``,
            ``balanced``, ``checks`` (list of ``(LoadCase, utilisation)``).
    """
    styles = _build_styles()
    story: List[Any] = []

    proj = config.get("project", {})
    inputs = config["inputs"]
    section = results["section"]
    diagram = results["diagram"]
    peak = results.get("peak")
    balanced = results.get("balanced")
    checks = results.get("checks", [])

    # ── 1. Inputs and section model ──
    story.append(Paragraph("RC COLUMN P-M INTERACTION", styles["Title"]))
    story.append(Paragraph(
        f"{proj.get('name', '')} &nbsp; {proj.get('column_id', '')}", styles["Small"]))
    story.append(Paragraph("1. Input Parameters", styles["H1"]))
    story.append(_tbl([
        ["Parameter", "Value", "Unit"],
        ["Concrete strength fc", _fnum(inputs.fc, 1), "kgf/cm²"],
        ["Steel yield strength fy", _fnum(inputs.fy, 1), "kgf/cm²"],
        ["Width b", _fnum(inputs.b, 1), "cm"],
        ["Depth h", _fnum(inputs.h, 1), "cm"],
        ["Cover", _fnum(inputs.cover, 1), "cm"],
        ["Bar area", _fnum(inputs.bar_area, 3), "cm²"],
        ["Bars per face nx", str(inputs.nx), "-"],
        ["Bar rows ny", str(inputs.ny), "-"],
    ]))

    story.append(Paragraph("2. Section Model", styles["H1"]))
    layer_rows = [["Layer", "Depth (cm)", "Area (cm²)"]]
    for i, layer in enumerate(section.layers, 1):
        layer_rows.append([str(i), _fnum(layer.depth, 2), _fnum(layer.area, 3)])
    story.append(_tbl(layer_rows))
    story.append(Spacer(1, 3 * mm))
    story.append(_tbl([
        ["Property", "Value"],
        ["Ag (cm²)", _fnum(section.Ag, 1)],
        ["Ast (cm²)", _fnum(section.Ast, 2)],
        ["Ast / Ag", f"{reinforcement_ratio(section.Ast, section.Ag):.2%}"],
        ["beta1", _fnum(section.beta1, 3)],
    ]))
    story.append(PageBreak())

    # ── 2. Summary and diagram ──
    story.append(Paragraph("3. Interaction Diagram", styles["H1"]))
    summary = [
        ["Quantity", "Value"],
        ["Po (tonf)", _fnum(diagram.Po, 1)],
        ["Pt (tonf)", _fnum(diagram.Pt, 1)],
        ["Mo approx. (tonf-m)", _fnum(diagram.Mo_approx, 1)],
    ]
    if peak is not None:
        summary.append(["Mmax refined (tonf-m)", _fnum(peak.M, 2)])
        summary.append(["P at Mmax (tonf)", _fnum(peak.P, 1)])
    if balanced is not None:
        summary.append(["Balanced Mb (tonf-m)", _fnum(balanced.M, 2)])
        summary.append(["Balanced Pb (tonf)", _fnum(balanced.P, 1)])
    story.append(_tbl(summary))
    story.append(Spacer(1, 4 * mm))

    loads = [lc for lc, _ in checks]
    story.append(_figure_image(draw_pm_diagram(diagram, loads, peak), _USABLE_W))
    story.append(PageBreak())

    point_rows = [["Point", "Mn (tonf-m)", "Pn (tonf)"]]
    for label, pt in zip(point_labels(), diagram.points):
        point_rows.append([label, _fnum(pt.M, 2), _fnum(pt.P, 2)])
    story.append(_tbl(point_rows, font_size=8))

    # ── 3. Load checks ──
    if checks:
        story.append(Paragraph("4. Factored Load Checks (nominal)", styles["H1"]))
        rows = [["Load case", "Pu (tonf)", "Mu (tonf-m)", "Util.", "Status"]]
        for lc, util in checks:
            rows.append([
                lc.name, _fnum(lc.Pu, 1), _fnum(lc.Mu, 1),
                "inf" if util == float("inf") else f"{util:.1%}",
                "OK" if util <= 1.0 else "NOT OK",
            ])
        t = _tbl(rows)
        for i, (_, util) in enumerate(checks, 1):
            t.setStyle(TableStyle([("BACKGROUND", (3, i), (4, i), _util_color(util))]))
        story.append(t)

    story.append(PageBreak())
    story.append(Paragraph("Cross Section", styles["H1"]))
    story.append(_figure_image(draw_section(inputs, section), _USABLE_W * 0.6))

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=25 * mm,
        bottomMargin=25 * mm,
    )
    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
