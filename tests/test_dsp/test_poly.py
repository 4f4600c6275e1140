"""Tests for dsp.poly module."""

import numpy as np
import pytest

from filterlab.dsp.poly import add, convolve, poly_from_roots, root_factors


def test_convolve_simple():
    np.testing.assert_array_equal(convolve([1, 2], [1, 3]), [1.0, 5.0, 6.0])


def test_convolve_length():
    assert len(convolve(np.ones(4), np.ones(3))) == 6


def test_convolve_empty_raises():
    with pytest.raises(ValueError, match="empty"):
        convolve([], [1.0])


def test_add_pads_shorter():
    np.testing.assert_array_equal(add([1.0, 2.0, 3.0], [1.0]), [2.0, 2.0, 3.0])
    np.testing.assert_array_equal(add([1.0], [0.0, 4.0]), [1.0, 4.0])


def test_root_factors_real_and_pair():
    factors = root_factors([0.5, 0.3 + 0.4j, 0.3 - 0.4j])
    assert len(factors) == 2
    np.testing.assert_allclose(factors[0], [1.0, -0.5])
    np.testing.assert_allclose(factors[1], [1.0, -0.6, 0.25])


def test_root_factors_unpaired_raises():
    with pytest.raises(ValueError, match="no conjugate partner"):
        root_factors([0.3 + 0.4j])


def test_poly_from_roots_matches_numpy(rng):
    pairs = rng.uniform(-0.9, 0.9, size=3) + 1j * rng.uniform(0.1, 0.9, size=3)
    roots = np.concatenate([pairs, pairs.conj(), [0.2, -0.7]])
    coeffs = poly_from_roots(roots)
    assert coeffs.dtype == float
    np.testing.assert_allclose(coeffs, np.real(np.poly(roots)), atol=1e-12)


def test_poly_from_no_roots():
    np.testing.assert_array_equal(poly_from_roots([]), [1.0])
