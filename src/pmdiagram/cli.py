"""Command-line interface for the RC column P-M interaction tool.

Usage::

    pm-diagram run <input_yaml> [-o output_dir] [--plot] [--pdf] [--refine]
    pm-diagram check <input_yaml>
    pm-diagram template
    pm-diagram validate <input_yaml>
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

import click
import yaml
from loguru import logger

from .input_parser import generate_template, parse_input
from .interaction import (
    balanced_point,
    check_utilisation,
    compute_diagram,
    find_peak_moment,
    point_labels,
)
from .logging_utils import configure_logging
from .models import InputError
from .section import build_section


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="pmdiagram")
@click.option("-v", "--verbose", is_flag=True, help="Log every swept point to stderr.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a debug log to this file.",
)
def main(verbose: bool, log_file: Path | None) -> None:
    """RC Column P-M Interaction Diagram - nominal strength."""
    configure_logging(verbose=verbose, log_file=log_file)


def _load(input_file: str) -> dict:
    """Parse INPUT_FILE or exit with the validation report."""
    try:
        return parse_input(input_file)
    except (InputError, yaml.YAMLError) as exc:
        click.secho(f"Error parsing input: {exc}", fg="red", err=True)
        raise SystemExit(1) from exc


def _format_util(util: float) -> str:
    return "inf" if util == float("inf") else f"{util:.3f}"


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option(
    "-o", "--output",
    default="./output",
    show_default=True,
    help="Output directory for results.",
)
@click.option("--plot/--no-plot", default=True, show_default=True, help="Save the diagram as PNG.")
@click.option("--pdf/--no-pdf", default=False, show_default=True, help="Write a PDF report.")
@click.option("--refine", is_flag=True, help="Refine the peak moment by searching over c.")
def run(input_file: str, output: str, plot: bool, pdf: bool, refine: bool) -> None:
    """Compute the interaction diagram for INPUT_FILE."""
    input_path = Path(input_file)
    output_dir = Path(output)

    # ------------------------------------------------------------------
    # 1. Parse input
    # ------------------------------------------------------------------
    click.echo(f"Reading input file: {input_path}")
    config = _load(input_file)
    project = config["project"]
    inputs = config["inputs"]
    loads = config["loads"]
    output_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # 2. Section model and diagram
    # ------------------------------------------------------------------
    section = build_section(inputs)
    click.echo(f"  Section: {inputs.b:g} x {inputs.h:g} cm, {len(section.layers)} steel layers")
    click.echo(f"  Ag = {section.Ag:.1f} cm2, Ast = {section.Ast:.2f} cm2, beta1 = {section.beta1:.3f}")

    diagram = compute_diagram(inputs)
    balanced = balanced_point(inputs)
    peak = None
    c_peak = None
    if refine:
        c_peak, peak = find_peak_moment(inputs)

    checks = [(lc, check_utilisation(diagram, lc.Pu, lc.Mu)) for lc in loads]

    # ------------------------------------------------------------------
    # Console summary
    # ------------------------------------------------------------------
    click.echo("")
    click.secho("=" * 60, bold=True)
    click.secho("  P-M INTERACTION SUMMARY (nominal)", bold=True)
    click.secho("=" * 60, bold=True)
    click.echo(f"\n  Project       : {project.get('name', 'N/A')}")
    click.echo(f"  Column ID     : {project.get('column_id') or 'N/A'}")
    click.echo(f"\n  Po            : {diagram.Po:10.1f} tonf")
    click.echo(f"  Pt            : {diagram.Pt:10.1f} tonf")
    click.echo(f"  Mo (approx.)  : {diagram.Mo_approx:10.1f} tonf-m")
    click.echo(f"  Balanced      : M = {balanced.M:.1f} tonf-m, P = {balanced.P:.1f} tonf")
    if peak is not None:
        click.echo(f"  Mmax refined  : {peak.M:10.2f} tonf-m at c = {c_peak:.2f} cm (P = {peak.P:.1f} tonf)")

    click.echo("\n  --- Points ---")
    click.echo(f"  {'Point':<18}{'Mn (tonf-m)':>14}{'Pn (tonf)':>14}")
    for label, pt in zip(point_labels(), diagram.points):
        click.echo(f"  {label:<18}{pt.M:>14.2f}{pt.P:>14.2f}")

    if checks:
        click.echo("\n  --- Load checks ---")
        for lc, util in checks:
            colour = "green" if util <= 1.0 else "red"
            click.echo(f"  {lc.name:<24}: Pu={lc.Pu:8.1f}  Mu={lc.Mu:7.1f}  util=", nl=False)
            click.secho(_format_util(util), fg=colour)

    click.secho("\n" + "=" * 60, bold=True)

    # ------------------------------------------------------------------
    # Save results
    # ------------------------------------------------------------------
    results_file = output_dir / "diagram.json"
    payload = {
        "project": project,
        "inputs": inputs.as_dict(),
        "Po": diagram.Po,
        "Pt": diagram.Pt,
        "Mo_approx": diagram.Mo_approx,
        "points": [asdict(pt) for pt in diagram.points],
        "balanced": asdict(balanced),
        "peak": asdict(peak) if peak is not None else None,
        "checks": [
            {"name": lc.name, "Pu": lc.Pu, "Mu": lc.Mu, "utilisation": _format_util(util)}
            for lc, util in checks
        ],
    }
    with open(results_file, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    click.echo(f"\nResults saved to {results_file.resolve()}")

    # ------------------------------------------------------------------
    # Figures and report
    # ------------------------------------------------------------------
    if plot:
        import matplotlib.pyplot as plt

        from .diagrams import draw_pm_diagram

        png_path = output_dir / "diagram.png"
        fig = draw_pm_diagram(diagram, loads, peak,
                              title=f"P-M Interaction - {project.get('name', '')}")
        fig.savefig(png_path, dpi=150)
        plt.close(fig)
        click.echo(f"Diagram saved to {png_path.resolve()}")

    if pdf:
        from .report import generate_report

        pdf_path = output_dir / f"{project.get('name', 'report')}.pdf"
        try:
            generate_report(
                str(pdf_path), config,
                {"section": section, "diagram": diagram, "peak": peak,
                 "balanced": balanced, "checks": checks},
            )
        except OSError as exc:
            click.secho(f"  Report error: {exc}", fg="red", err=True)
            raise SystemExit(1) from exc
        click.secho(f"Report saved to {pdf_path.resolve()}", fg="green")


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True))
def check(input_file: str) -> None:
    """Check the factored loads of INPUT_FILE against the diagram.

    Exits with status 2 when any load case lies outside the envelope.
    """
    config = _load(input_file)
    loads = config["loads"]
    if not loads:
        click.secho("No load cases in input file.", fg="yellow")
        return

    diagram = compute_diagram(config["inputs"])
    failed = 0
    for lc in loads:
        util = check_utilisation(diagram, lc.Pu, lc.Mu)
        ok = util <= 1.0
        if not ok:
            failed += 1
        click.echo(f"  {lc.name:<24}: util = ", nl=False)
        click.secho(f"{_format_util(util)}  {'OK' if ok else 'NOT OK'}",
                    fg="green" if ok else "red")
        logger.debug("{}: Pu={} Mu={} util={}", lc.name, lc.Pu, lc.Mu, util)

    if failed:
        click.secho(f"\n{failed} of {len(loads)} load case(s) outside the envelope.", fg="red")
        raise SystemExit(2)
    click.secho(f"\nAll {len(loads)} load case(s) within the envelope.", fg="green")


# ---------------------------------------------------------------------------
# template
# ---------------------------------------------------------------------------

@main.command()
def template() -> None:
    """Print a sample input YAML to stdout."""
    click.echo(generate_template())


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True))
def validate(input_file: str) -> None:
    """Validate an input YAML file without computing the diagram."""
    input_path = Path(input_file)
    click.echo(f"Validating: {input_path}")

    try:
        parse_input(input_path)
    except yaml.YAMLError as exc:
        click.secho(f"YAML syntax error:\n  {exc}", fg="red", err=True)
        raise SystemExit(1) from exc
    except InputError as exc:
        click.secho(f"\n{exc}", fg="yellow")
        raise SystemExit(1) from exc

    click.secho("\nInput file is valid.", fg="green")


# ---------------------------------------------------------------------------
# Allow ``python -m pmdiagram.cli``
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
