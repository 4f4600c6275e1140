"""Tests for dsp.complex_math module."""

import math

import pytest

from filterlab.dsp.complex_math import (
    ONE,
    ZERO,
    Complex,
    DivisionByNearZero,
    conjugate,
    divide,
    from_polar,
    magnitude,
    multiply,
    phase,
)


def test_arithmetic_operators():
    a = Complex(1.0, 2.0)
    b = Complex(3.0, -1.0)
    assert a + b == Complex(4.0, 1.0)
    assert a - b == Complex(-2.0, 3.0)
    assert a * b == Complex(5.0, 5.0)
    assert -a == Complex(-1.0, -2.0)
    assert a + ZERO == a
    assert multiply(a, ONE) == a


def test_division_matches_builtin_complex():
    a = Complex(1.0, 2.0)
    b = Complex(3.0, -1.0)
    expected = complex(1.0, 2.0) / complex(3.0, -1.0)
    q = a / b
    assert q.re == pytest.approx(expected.real)
    assert q.im == pytest.approx(expected.imag)


def test_divide_near_zero_raises():
    with pytest.raises(DivisionByNearZero, match="below"):
        divide(ONE, Complex(0.01, 0.01))


def test_divide_near_zero_is_zero_division_error():
    with pytest.raises(ZeroDivisionError):
        ONE / ZERO


def test_divide_threshold_override():
    q = divide(ONE, Complex(0.01, 0.0), threshold=0.0)
    assert q.re == pytest.approx(100.0)


def test_magnitude_and_phase():
    z = Complex(3.0, 4.0)
    assert magnitude(z) == 5.0
    assert abs(z) == 5.0
    assert phase(Complex(0.0, 1.0)) == pytest.approx(math.pi / 2)
    assert phase(Complex(-1.0, -0.0)) == math.pi


def test_conjugate_and_polar():
    z = from_polar(2.0, math.pi / 3)
    assert magnitude(z) == pytest.approx(2.0)
    assert phase(z) == pytest.approx(math.pi / 3)
    assert conjugate(z) == Complex(z.re, -z.im)


def test_builtin_round_trip():
    z = Complex.from_builtin(1 - 2j)
    assert z == Complex(1.0, -2.0)
    assert z.to_complex() == 1 - 2j


def test_complex_is_immutable():
    z = Complex(1.0, 0.0)
    with pytest.raises(AttributeError):
        z.re = 2.0
