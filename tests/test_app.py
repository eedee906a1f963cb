"""Tests for the Streamlit page."""

from pathlib import Path

import matplotlib.pyplot as plt
import pytest
from streamlit.testing.v1 import AppTest

APP = Path(__file__).parent.parent / "app.py"


@pytest.fixture
def app():
    plt.close("all")
    at = AppTest.from_file(str(APP), default_timeout=60)
    at.run()
    return at


def test_renders_without_error(app):
    assert not app.exception
    assert app.metric[0].value == "447.3 tonf"


def test_reruns_release_figures(app):
    for _ in range(3):
        app.run()
    assert not app.exception
    assert plt.get_fignums() == []


def test_invalid_geometry_reported(app):
    app.number_input[4].set_value(30.0).run()
    assert not app.exception
    assert "cover" in app.error[0].value
