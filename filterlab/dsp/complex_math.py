"""Minimal immutable complex-number value type.

Used for pole/zero bookkeeping and pointwise evaluation of rational transfer
functions. Division refuses denominators whose squared magnitude is below a
threshold so that callers evaluating close to a pole have to decide
explicitly how to handle it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core import NEAR_POLE_THRESHOLD

NEAR_ZERO_THRESHOLD = NEAR_POLE_THRESHOLD


class DivisionByNearZero(ZeroDivisionError):
    """Raised when dividing by a complex number too close to zero."""

    def __init__(self, denominator: "Complex", threshold: float):
        self.denominator = denominator
        self.threshold = threshold
        super().__init__(
            f"|denominator|^2 = {denominator.norm_squared():.3e} is below {threshold:.1e}"
        )


@dataclass(frozen=True)
class Complex:
    """A complex number ``re + j·im``."""

    re: float
    im: float = 0.0

    @classmethod
    def from_builtin(cls, value: complex) -> "Complex":
        value = complex(value)
        return cls(value.real, value.imag)

    def to_complex(self) -> complex:
        return complex(self.re, self.im)

    def norm_squared(self) -> float:
        return self.re * self.re + self.im * self.im

    def __add__(self, other: "Complex") -> "Complex":
        return add(self, other)

    def __sub__(self, other: "Complex") -> "Complex":
        return subtract(self, other)

    def __mul__(self, other: "Complex") -> "Complex":
        return multiply(self, other)

    def __truediv__(self, other: "Complex") -> "Complex":
        return divide(self, other)

    def __neg__(self) -> "Complex":
        return Complex(-self.re, -self.im)

    def __abs__(self) -> float:
        return magnitude(self)


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)


def add(a: Complex, b: Complex) -> Complex:
    return Complex(a.re + b.re, a.im + b.im)


def subtract(a: Complex, b: Complex) -> Complex:
    return Complex(a.re - b.re, a.im - b.im)


def multiply(a: Complex, b: Complex) -> Complex:
    return Complex(a.re * b.re - a.im * b.im, a.re * b.im + a.im * b.re)


def divide(a: Complex, b: Complex, threshold: float = NEAR_ZERO_THRESHOLD) -> Complex:
    """Compute ``a / b``.

    Args:
        a: Numerator.
        b: Denominator.
        threshold: Smallest admissible ``|b|²``.

    Returns:
        The quotient.

    Raises:
        DivisionByNearZero: If ``|b|² < threshold``.
    """
    denominator = b.norm_squared()
    if denominator < threshold or denominator == 0.0:
        raise DivisionByNearZero(b, threshold)
    return Complex(
        (a.re * b.re + a.im * b.im) / denominator,
        (a.im * b.re - a.re * b.im) / denominator,
    )


def magnitude(a: Complex) -> float:
    return math.hypot(a.re, a.im)


def phase(a: Complex) -> float:
    """Argument of ``a`` in (-π, π]."""
    angle = math.atan2(a.im, a.re)
    # atan2(-0.0, x<0) gives -π
    return math.pi if angle == -math.pi else angle


def conjugate(a: Complex) -> Complex:
    return Complex(a.re, -a.im)


def from_polar(radius: float, angle: float) -> Complex:
    return Complex(radius * math.cos(angle), radius * math.sin(angle))


__all__ = [
    "Complex",
    "DivisionByNearZero",
    "NEAR_ZERO_THRESHOLD",
    "ZERO",
    "ONE",
    "add",
    "subtract",
    "multiply",
    "divide",
    "magnitude",
    "phase",
    "conjugate",
    "from_polar",
]
