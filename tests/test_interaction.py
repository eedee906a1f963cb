"""Tests for the interaction sweep engine.

Reference values for the sample column are hand calculations:

* Po = (0.85 * 280 * (1500 - 22.8) + 4200 * 22.8) / 1000 = 447.3336 tonf
* Pt = -4200 * 22.8 / 1000 = -95.76 tonf
* c/h = 2.0: whole block, top and side bars yielded, bottom bar at 3304.8
* c/h = 0.5: side row on the neutral axis, face rows yielded both ways
"""

import math

import numpy as np
import pytest

from pmdiagram.interaction import (
    RATIO_LADDER,
    balanced_point,
    check_utilisation,
    compute_diagram,
    find_peak_moment,
    layer_stresses,
    moment_capacity_at_P,
    point_labels,
    solve_point,
    steel_stress,
    stress_block_depth,
)
from pmdiagram.materials import get_material_model
from pmdiagram.models import InputError
from pmdiagram.section import DegenerateGeometryError, build_section


@pytest.fixture(scope="module")
def diagram(sample_inputs):
    return compute_diagram(sample_inputs)


@pytest.fixture(scope="module")
def section(sample_inputs):
    return build_section(sample_inputs)


class TestDiagramShape:
    """Point count, ordering and the axial end points."""

    def test_point_count(self, diagram):
        assert len(diagram.points) == len(RATIO_LADDER) + 2 == 22

    def test_pure_compression_first(self, diagram):
        first = diagram.points[0]
        assert first.M == 0.0
        assert first.P == pytest.approx(447.3336)
        assert diagram.Po == first.P

    def test_pure_tension_last(self, diagram):
        last = diagram.points[-1]
        assert last.M == 0.0
        assert last.P == pytest.approx(-95.76)
        assert diagram.Pt == last.P

    def test_axial_force_non_increasing(self, diagram):
        forces = [pt.P for pt in diagram.points]
        assert all(p1 >= p2 for p1, p2 in zip(forces, forces[1:]))

    def test_swept_moments_non_negative(self, diagram):
        assert all(pt.M >= 0.0 for pt in diagram.swept)

    def test_ladder_strictly_descending(self):
        assert all(r1 > r2 for r1, r2 in zip(RATIO_LADDER, RATIO_LADDER[1:]))
        assert len(RATIO_LADDER) == 20

    def test_mo_approx_is_swept_maximum(self, diagram):
        assert diagram.Mo_approx == max(pt.M for pt in diagram.swept)

    def test_labels_match_points(self, diagram):
        labels = point_labels()
        assert len(labels) == len(diagram.points)
        assert labels[0] == "Pure compression"
        assert labels[1] == "c/h = 2.00"
        assert labels[-1] == "Pure tension"


class TestReferenceValues:
    """Swept points against hand calculations."""

    def test_deep_neutral_axis(self, diagram):
        pt = diagram.points[1]
        assert pt.M == pytest.approx(1.6073316)
        assert pt.P == pytest.approx(445.10604)

    def test_mid_depth_neutral_axis(self, diagram):
        pt = diagram.points[1 + RATIO_LADDER.index(0.5)]
        assert pt.M == pytest.approx(36.89266875)
        assert pt.P == pytest.approx(151.725)

    def test_solve_point_matches_sweep(self, diagram, section):
        assert solve_point(25.0, section) == diagram.points[1 + RATIO_LADDER.index(0.5)]

    def test_high_strength_concrete(self, sample_params):
        result = compute_diagram(dict(sample_params, fc=350.0))
        expected_po = (0.85 * 350.0 * (1500.0 - 22.8) + 4200.0 * 22.8) / 1000.0
        assert result.Po == pytest.approx(expected_po)


class TestMaterialResponse:
    """Stress block cap and steel stress bounds."""

    def test_stress_block_capped_at_depth(self):
        assert stress_block_depth(100.0, 0.85, 50.0) == 50.0
        assert stress_block_depth(20.0, 0.85, 50.0) == pytest.approx(17.0)

    @pytest.mark.parametrize("strain,expected", [
        (0.001, 2040.0),
        (0.01, 4200.0),
        (-0.01, -4200.0),
        (0.0, 0.0),
    ])
    def test_steel_stress(self, strain, expected):
        assert steel_stress(strain, 4200.0, 2.04e6) == pytest.approx(expected)

    def test_layer_stresses_bounded(self, sample_inputs, section):
        material = get_material_model()
        for ratio in RATIO_LADDER:
            fs = layer_stresses(ratio * sample_inputs.h, section, material)
            assert np.all(np.abs(fs) <= sample_inputs.fy + 1e-9)

    def test_vanishing_depth_approaches_pure_tension(self, section, diagram):
        assert solve_point(1e-6, section).P == pytest.approx(diagram.Pt, abs=1e-4)

    @pytest.mark.parametrize("c", [0.0, -5.0])
    def test_non_positive_depth_rejected(self, section, c):
        with pytest.raises(ValueError):
            solve_point(c, section)


class TestComputeDiagram:
    """Input handling and determinism."""

    def test_idempotent(self, sample_inputs, diagram):
        assert compute_diagram(sample_inputs) == diagram

    def test_accepts_mapping(self, sample_params, diagram):
        assert compute_diagram(sample_params) == diagram

    def test_invalid_mapping(self, sample_params):
        with pytest.raises(InputError, match="ny"):
            compute_diagram(dict(sample_params, ny=1))

    def test_degenerate_geometry(self, sample_params):
        with pytest.raises(DegenerateGeometryError):
            compute_diagram(dict(sample_params, cover=25.0))

    def test_more_side_rows_add_axial_capacity(self, sample_params, diagram):
        denser = compute_diagram(dict(sample_params, ny=5))
        assert denser.Po > diagram.Po
        assert denser.Pt < diagram.Pt


class TestCharacteristicPoints:
    """Balanced point and refined peak moment."""

    def test_balanced_point_between_ladder_neighbours(self, sample_params, diagram):
        bal = balanced_point(sample_params)
        c_b = 0.003 / (0.003 + 4200.0 / 2.04e6) * 46.0
        assert 0.5 < c_b / 50.0 < 0.55
        i = 1 + RATIO_LADDER.index(0.55)
        assert diagram.points[i + 1].P < bal.P < diagram.points[i].P

    def test_peak_not_below_ladder_maximum(self, sample_inputs, diagram):
        c_peak, peak = find_peak_moment(sample_inputs)
        assert peak.M >= diagram.Mo_approx
        assert 0.0 < c_peak < sample_inputs.h


class TestUtilisation:
    """Load points checked against the envelope."""

    def test_inside(self, diagram):
        assert check_utilisation(diagram, 150.0, 12.0) < 1.0

    def test_outside(self, diagram):
        assert check_utilisation(diagram, 40.0, 60.0) > 1.0

    def test_sign_of_moment_ignored(self, diagram):
        assert check_utilisation(diagram, 150.0, -12.0) == check_utilisation(diagram, 150.0, 12.0)

    def test_beyond_pure_compression(self, diagram):
        assert math.isinf(check_utilisation(diagram, diagram.Po + 1.0, 0.0))

    def test_beyond_pure_tension(self, diagram):
        assert math.isinf(check_utilisation(diagram, diagram.Pt - 1.0, 0.0))

    def test_zero_moment_at_axial_limit(self, diagram):
        assert check_utilisation(diagram, diagram.Po, 0.0) == 0.0

    def test_moment_at_axial_limit(self, diagram):
        assert math.isinf(check_utilisation(diagram, diagram.Po, 1.0))

    def test_between_po_and_first_swept_point(self, sample_params):
        # With fy = 2800 every layer yields at c/h = 2.0 and the first swept
        # point sits above Po.
        weak = compute_diagram(dict(sample_params, fy=2800.0))
        first = weak.points[1]
        assert first.P > weak.Po
        assert math.isinf(check_utilisation(weak, (weak.Po + first.P) / 2.0, 0.1))

    def test_at_po_when_first_point_above(self, sample_params):
        weak = compute_diagram(dict(sample_params, fy=2800.0))
        assert math.isfinite(check_utilisation(weak, weak.Po - 1.0, 0.1))

    def test_capacity_at_swept_point(self, diagram):
        pt = diagram.points[1 + RATIO_LADDER.index(0.5)]
        assert moment_capacity_at_P(diagram, pt.P) >= pt.M - 1e-9
