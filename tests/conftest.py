"""Shared fixtures for the P-M interaction tests."""

from pathlib import Path

import pytest

from pmdiagram.models import SectionInputs

SAMPLE_INPUT = Path(__file__).parent.parent / "config" / "sample_input.yaml"

# 30 x 50 cm column, fc = 280, fy = 4200, 3 bars per face of 2.85 cm2, one
# side row of two bars at mid-depth.
SAMPLE_PARAMS = {
    "fc": 280.0,
    "fy": 4200.0,
    "b": 30.0,
    "h": 50.0,
    "cover": 4.0,
    "bar_area": 2.85,
    "nx": 3,
    "ny": 3,
}


@pytest.fixture(scope="module")
def sample_params():
    return dict(SAMPLE_PARAMS)


@pytest.fixture(scope="module")
def sample_inputs():
    return SectionInputs.from_mapping(SAMPLE_PARAMS)


@pytest.fixture(scope="module")
def sample_input_path():
    return SAMPLE_INPUT
