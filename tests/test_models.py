"""Tests for input validation and the material model."""

import math

import pytest
from pydantic import ValidationError

from pmdiagram.materials import compute_beta1, get_material_model
from pmdiagram.models import InputError, SectionInputs
from pmdiagram.utils import (
    _clear_material_tables_cache,
    bar_area,
    kgf_cm_to_tonf_m,
    kgf_to_tonf,
    load_material_tables,
    reinforcement_ratio,
)


class TestSectionInputs:
    """Validation of the flat parameter set."""

    def test_valid_mapping(self, sample_params):
        inputs = SectionInputs.from_mapping(sample_params)
        assert inputs.h == 50.0
        assert inputs.nx == 3

    def test_camel_case_bar_area_accepted(self, sample_params):
        params = dict(sample_params)
        params["barArea"] = params.pop("bar_area")
        assert SectionInputs.from_mapping(params).bar_area == pytest.approx(2.85)

    def test_ints_promoted_to_float(self, sample_params):
        params = dict(sample_params, b=30, h=50)
        inputs = SectionInputs.from_mapping(params)
        assert isinstance(inputs.b, float)

    @pytest.mark.parametrize("field,value", [
        ("fc", 0.0),
        ("fy", -4200.0),
        ("b", math.nan),
        ("h", math.inf),
        ("cover", 0.0),
        ("bar_area", -1.0),
        ("nx", 0),
        ("ny", 1),
        ("fc", "strong"),
        ("nx", True),
    ])
    def test_invalid_field_named_in_error(self, sample_params, field, value):
        params = dict(sample_params, **{field: value})
        with pytest.raises(InputError, match=field):
            SectionInputs.from_mapping(params)

    def test_missing_field(self, sample_params):
        params = dict(sample_params)
        del params["cover"]
        with pytest.raises(InputError, match="cover"):
            SectionInputs.from_mapping(params)

    def test_all_problems_reported(self, sample_params):
        params = dict(sample_params, fc=-1.0, ny=1)
        with pytest.raises(InputError, match=r"2 error\(s\)"):
            SectionInputs.from_mapping(params)

    def test_input_error_is_value_error(self, sample_params):
        with pytest.raises(ValueError):
            SectionInputs.from_mapping(dict(sample_params, h=-50.0))

    def test_frozen(self, sample_inputs):
        with pytest.raises(ValidationError):
            sample_inputs.h = 60.0


class TestMaterials:
    """Material constants and the beta1 law."""

    def test_steel_modulus(self):
        assert get_material_model().Es == pytest.approx(2.04e6)

    def test_ultimate_strain(self):
        assert get_material_model().epsilon_cu == pytest.approx(0.003)

    def test_yield_strain(self):
        assert get_material_model().yield_strain(4200.0) == pytest.approx(4200.0 / 2.04e6)

    @pytest.mark.parametrize("fc,expected", [
        (210.0, 0.85),
        (280.0, 0.85),
        (350.0, 0.80),
        (420.0, 0.75),
        (560.0, 0.65),
        (700.0, 0.65),
    ])
    def test_beta1(self, fc, expected):
        assert compute_beta1(fc) == pytest.approx(expected)


class TestUtils:
    """Bar table lookup and unit conversion."""

    def test_bar_area_lookup(self):
        assert bar_area("D19") == pytest.approx(2.865)

    def test_bar_area_case_insensitive(self):
        assert bar_area(" d25 ") == pytest.approx(5.067)

    def test_unknown_bar_size(self):
        with pytest.raises(KeyError, match="D99"):
            bar_area("D99")

    def test_force_conversion(self):
        assert kgf_to_tonf(95760.0) == pytest.approx(95.76)

    def test_moment_conversion(self):
        assert kgf_cm_to_tonf_m(3689266.875) == pytest.approx(36.89266875)

    def test_reinforcement_ratio(self):
        assert reinforcement_ratio(22.8, 1500.0) == pytest.approx(0.0152)

    def test_tables_cached(self):
        assert load_material_tables() is load_material_tables()

    def test_cache_reset_reloads(self):
        before = load_material_tables()
        _clear_material_tables_cache()
        after = load_material_tables()
        assert after is not before
        assert after == before
