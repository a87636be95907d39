"""Tests for the Complex value type."""

import math

import numpy as np
import pytest

from qbloch.complex_math import Complex, format_matrix


class TestArithmetic:
    def test_add_sub(self):
        a = Complex(1, 2)
        b = Complex(3, -1)
        assert a + b == Complex(4, 1)
        assert a - b == Complex(-2, 3)

    def test_mul_matches_builtin(self):
        a, b = Complex(1.5, -2), Complex(-0.5, 3)
        assert complex(a * b) == pytest.approx(complex(1.5, -2) * complex(-0.5, 3))

    def test_div_matches_builtin(self):
        a, b = Complex(1.5, -2), Complex(-0.5, 3)
        assert complex(a / b) == pytest.approx(complex(1.5, -2) / complex(-0.5, 3))

    def test_mixed_operands(self):
        assert Complex(1, 1) + 1 == Complex(2, 1)
        assert 2 * Complex(1, -1) == Complex(2, -2)
        assert 1j * Complex(1, 0) == Complex(0, 1)

    def test_values_are_immutable(self):
        a = Complex(1, 2)
        with pytest.raises(AttributeError):
            a.real = 5


class TestDivisionByZero:
    """Zero divisors propagate non-finite values instead of raising."""

    def test_nonzero_numerator_is_not_finite(self):
        r = Complex(1, 2) / Complex(0, 0)
        assert not r.is_finite()
        assert math.isnan(r.real)

    def test_zero_over_zero_is_nan(self):
        r = Complex(0, 0) / 0
        assert math.isnan(r.real) and math.isnan(r.imag)

    def test_reverse_division_by_zero(self):
        assert not (1 / Complex(0, 0)).is_finite()


class TestPolar:
    def test_abs_and_arg(self):
        z = Complex(3, 4)
        assert abs(z) == pytest.approx(5.0)
        assert Complex(0, 1).arg() == pytest.approx(math.pi / 2)

    def test_conj(self):
        assert Complex(1, 2).conj() == Complex(1, -2)

    def test_from_polar(self):
        z = Complex.from_polar(2.0, math.pi / 2)
        assert z.real == pytest.approx(0.0, abs=1e-12)
        assert z.imag == pytest.approx(2.0)

    def test_pow_uses_polar_form(self):
        z = Complex(1, 1) ** 2
        assert complex(z) == pytest.approx(2j)
        half = Complex(-4, 0) ** 0.5
        assert complex(half) == pytest.approx(2j)

    def test_exp_euler(self):
        z = Complex(0, math.pi).exp()
        assert complex(z) == pytest.approx(-1 + 0j)

    def test_zero_to_negative_power_is_not_an_error(self):
        z = Complex(0, 0) ** -1
        assert not z.is_finite()


class TestFormatting:
    def test_str(self):
        assert str(Complex(0.5, 0)) == "0.5000"
        assert str(Complex(0, -1)) == "-1.0000i"
        assert str(Complex(0.5, -0.25)) == "0.5000 - 0.2500i"

    def test_format_matrix(self):
        text = format_matrix(np.array([[1, 0], [0, 1j]]))
        assert text.splitlines() == ["[1.0000, 0.0000]", "[0.0000, 1.0000i]"]
