from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np


Number = Union["Complex", complex, float, int]


def _ieee_div(num: float, den: float) -> float:
    # float division by an exact zero gives inf/nan instead of raising
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))


@dataclass(frozen=True)
class Complex:
    """Immutable complex value. Every operation returns a new value."""

    real: float = 0.0
    imag: float = 0.0

    @classmethod
    def from_polar(cls, magnitude: float, phase: float) -> "Complex":
        return cls(magnitude * math.cos(phase), magnitude * math.sin(phase))

    @classmethod
    def coerce(cls, value: Number) -> "Complex":
        if isinstance(value, Complex):
            return value
        value = complex(value)
        return cls(value.real, value.imag)

    def __add__(self, other: Number) -> "Complex":
        other = Complex.coerce(other)
        return Complex(self.real + other.real, self.imag + other.imag)

    __radd__ = __add__

    def __sub__(self, other: Number) -> "Complex":
        other = Complex.coerce(other)
        return Complex(self.real - other.real, self.imag - other.imag)

    def __rsub__(self, other: Number) -> "Complex":
        return Complex.coerce(other) - self

    def __mul__(self, other: Number) -> "Complex":
        other = Complex.coerce(other)
        return Complex(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real,
        )

    __rmul__ = __mul__

    def __truediv__(self, other: Number) -> "Complex":
        """Divide by ``other``.

        A zero divisor does not raise: the components follow IEEE float
        semantics and come out non-finite (``nan``).
        """
        other = Complex.coerce(other)
        denom = other.real * other.real + other.imag * other.imag
        return Complex(
            _ieee_div(self.real * other.real + self.imag * other.imag, denom),
            _ieee_div(self.imag * other.real - self.real * other.imag, denom),
        )

    def __rtruediv__(self, other: Number) -> "Complex":
        return Complex.coerce(other) / self

    def __neg__(self) -> "Complex":
        return Complex(-self.real, -self.imag)

    def __abs__(self) -> float:
        return math.hypot(self.real, self.imag)

    def __pow__(self, n: float) -> "Complex":
        r = abs(self)
        with np.errstate(divide="ignore"):
            new_r = float(np.power(np.float64(r), n))
        return Complex.from_polar(new_r, n * self.arg())

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    def conj(self) -> "Complex":
        return Complex(self.real, -self.imag)

    def arg(self) -> float:
        return math.atan2(self.imag, self.real)

    def exp(self) -> "Complex":
        return Complex.from_polar(math.exp(self.real), self.imag)

    def is_finite(self) -> bool:
        return math.isfinite(self.real) and math.isfinite(self.imag)

    def __str__(self) -> str:
        if self.imag == 0:
            return f"{self.real:.4f}"
        if self.real == 0:
            return f"{self.imag:.4f}i"
        sign = "+" if self.imag > 0 else "-"
        return f"{self.real:.4f} {sign} {abs(self.imag):.4f}i"


def format_matrix(matrix) -> str:
    """Render a complex matrix row by row with four-decimal entries."""
    rows = []
    for row in np.asarray(matrix, dtype=complex):
        rows.append("[" + ", ".join(str(Complex.coerce(x)) for x in row) + "]")
    return "\n".join(rows)
