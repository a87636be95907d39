from pathlib import Path

import pytest

testing = pytest.importorskip("streamlit.testing.v1")

APP = Path(__file__).resolve().parent.parent / "qbloch" / "app.py"


def simulate(qasm):
    at = testing.AppTest.from_file(str(APP), default_timeout=60)
    at.run()
    at.text_area[0].input(qasm)
    at.button[0].click()
    at.run()
    return at


def test_gateless_circuit_has_no_step_slider():
    at = simulate("qreg q[2];")
    assert not at.exception
    assert "Step" not in [s.label for s in at.slider]
    assert "Done." in [s.value for s in at.success]


def test_bell_circuit_shows_step_slider():
    at = simulate("qreg q[2]; h q[0]; cx q[0],q[1];")
    assert not at.exception
    step = next(s for s in at.slider if s.label == "Step")
    assert (step.min, step.max, step.value) == (0, 2, 2)


def test_parse_error_is_reported():
    at = simulate("qreg q[0];")
    assert not at.exception
    assert any("Register size" in e.value for e in at.error)
