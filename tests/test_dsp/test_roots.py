"""Tests for dsp.roots module."""

import numpy as np
import pytest

from filterlab.dsp.complex_math import Complex
from filterlab.dsp.roots import RootSet, extract_roots, placeholder_roots, strip_leading_zeros


def test_strip_leading_zeros():
    np.testing.assert_array_equal(strip_leading_zeros([0.0, 0.0, 1.0, 0.0]), [1.0, 0.0])
    assert len(strip_leading_zeros([0.0, 0.0])) == 0


@pytest.mark.parametrize("coeffs", [[], [3.0], [0.0, 0.0, 2.0]])
def test_constant_has_no_roots(coeffs):
    result = extract_roots(coeffs)
    assert result == RootSet(())
    assert not result.approximate


def test_linear_root():
    result = extract_roots([2.0, -1.0])
    assert result.roots == (Complex(0.5, 0.0),)
    assert not result.approximate


def test_quadratic_real_roots():
    result = extract_roots([1.0, -3.0, 2.0])
    assert sorted(r.re for r in result.roots) == pytest.approx([1.0, 2.0])
    assert all(r.im == 0.0 for r in result.roots)


def test_quadratic_conjugate_pair():
    # z^2 - z + 0.5 has roots 0.5 +/- 0.5j
    result = extract_roots([1.0, -1.0, 0.5])
    assert result.roots == (Complex(0.5, 0.5), Complex(0.5, -0.5))


def test_leading_zero_lowers_degree():
    result = extract_roots([0.0, 1.0, -0.25])
    assert len(result) == 1
    assert result.roots[0].re == pytest.approx(0.25)


def test_high_degree_uses_placeholders():
    result = extract_roots([1.0, 0.0, 0.0, 0.0, -0.1])
    assert result.approximate
    assert len(result) == 4
    np.testing.assert_allclose(np.abs(result.as_array()), 0.8)


def test_placeholder_radius_configurable():
    roots = placeholder_roots(3, radius=0.5)
    np.testing.assert_allclose([abs(r) for r in roots], 0.5)
    assert roots[0].re == pytest.approx(0.5)


def test_companion_matches_numpy():
    coeffs = np.poly([0.9, 0.5 + 0.3j, 0.5 - 0.3j, -0.2]).real
    result = extract_roots(coeffs, method="companion")
    assert not result.approximate
    np.testing.assert_allclose(
        np.sort_complex(result.as_array()), np.sort_complex(np.roots(coeffs)), atol=1e-12
    )


def test_unknown_method():
    with pytest.raises(ValueError, match="Unknown root method"):
        extract_roots([1.0, 2.0], method="newton")
