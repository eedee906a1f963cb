"""Tests for YAML input parsing and validation."""

import copy

import pytest
import yaml

from pmdiagram.input_parser import LoadCase, generate_template, parse_config, parse_input
from pmdiagram.models import InputError

BASE = {
    "project": {"name": "T-1"},
    "materials": {"fc": 280, "fy": 4200},
    "section": {"b": 30, "h": 50, "cover": 4},
    "reinforcement": {"bar_area": 2.85, "nx": 3, "ny": 3},
}


def _with(**sections):
    raw = copy.deepcopy(BASE)
    for name, fields in sections.items():
        if fields is None:
            raw.pop(name)
        else:
            raw[name] = fields
    return raw


class TestSampleFile:
    """The bundled sample input."""

    def test_parses(self, sample_input_path, sample_inputs):
        config = parse_input(sample_input_path)
        assert config["inputs"] == sample_inputs
        assert config["project"]["name"] == "SAMPLE-C1"

    def test_loads(self, sample_input_path):
        loads = parse_input(sample_input_path)["loads"]
        assert loads == [
            LoadCase("1.2D+1.6L", 150.0, 12.0),
            LoadCase("0.9D+1.0E", 40.0, 60.0),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_input(tmp_path / "nope.yaml")


class TestParseConfig:
    """Defaults, bar resolution and error collection."""

    def test_defaults(self):
        config = parse_config(_with(project=None))
        assert config["project"]["name"] == "Column"
        assert config["loads"] == []

    def test_bar_size_resolved(self):
        config = parse_config(_with(reinforcement={"bar_size": "D22", "nx": 2, "ny": 2}))
        assert config["inputs"].bar_area == pytest.approx(3.871)

    def test_unknown_bar_size(self):
        with pytest.raises(InputError, match="reinforcement.bar_size"):
            parse_config(_with(reinforcement={"bar_size": "D99", "nx": 2, "ny": 2}))

    def test_bar_size_and_area_conflict(self):
        with pytest.raises(InputError, match="not both"):
            parse_config(_with(reinforcement={"bar_size": "D22", "bar_area": 3.9, "nx": 2, "ny": 2}))

    def test_bar_area_required(self):
        with pytest.raises(InputError, match="bar_size or reinforcement.bar_area"):
            parse_config(_with(reinforcement={"nx": 2, "ny": 2}))

    def test_missing_section(self):
        with pytest.raises(InputError, match="Missing required section: materials"):
            parse_config(_with(materials=None))

    def test_every_error_listed(self):
        raw = _with(
            materials={"fc": -280, "fy": "high"},
            reinforcement={"bar_area": 2.85, "nx": 3, "ny": 1},
        )
        with pytest.raises(InputError) as excinfo:
            parse_config(raw)
        message = str(excinfo.value)
        assert "3 error(s)" in message
        assert "materials.fc" in message
        assert "materials.fy" in message
        assert "reinforcement.ny" in message

    def test_whole_float_counts_accepted(self):
        config = parse_config(_with(reinforcement={"bar_area": 2.85, "nx": 3.0, "ny": 3.0}))
        assert config["inputs"].nx == 3
        assert config["inputs"].ny == 3

    def test_fractional_count_rejected(self):
        with pytest.raises(InputError, match="reinforcement.nx"):
            parse_config(_with(reinforcement={"bar_area": 2.85, "nx": 3.5, "ny": 3}))

    def test_range_checked_by_section_inputs(self):
        with pytest.raises(InputError, match="reinforcement.ny: Input should be greater than or equal to 2"):
            parse_config(_with(reinforcement={"bar_area": 2.85, "nx": 3, "ny": 1}))

    def test_negative_bar_area(self):
        with pytest.raises(InputError, match="reinforcement.bar_area: Input should be greater than 0"):
            parse_config(_with(reinforcement={"bar_area": -2.85, "nx": 3, "ny": 3}))

    def test_missing_field_reported_once(self):
        raw = _with(section={"b": 30, "h": 50})
        with pytest.raises(InputError, match=r"1 error\(s\)"):
            parse_config(raw)

    def test_boolean_rejected(self):
        with pytest.raises(InputError, match="section.h"):
            parse_config(_with(section={"b": 30, "h": True, "cover": 4}))

    def test_degenerate_geometry(self):
        with pytest.raises(InputError, match="section.cover"):
            parse_config(_with(section={"b": 30, "h": 8, "cover": 4}))

    def test_root_must_be_mapping(self):
        with pytest.raises(InputError, match="mapping"):
            parse_config(["not", "a", "mapping"])

    def test_load_name_defaulted(self):
        config = parse_config(_with(loads=[{"Pu": 10, "Mu": 2}]))
        assert config["loads"] == [LoadCase("LC1", 10.0, 2.0)]

    def test_load_missing_moment(self):
        with pytest.raises(InputError, match=r"loads\[0\].Mu"):
            parse_config(_with(loads=[{"name": "A", "Pu": 10}]))


class TestTemplate:
    """The generated template is itself a valid input."""

    def test_template_parses(self):
        config = parse_config(yaml.safe_load(generate_template()))
        assert config["inputs"].bar_area == pytest.approx(2.865)
        assert len(config["loads"]) == 1
