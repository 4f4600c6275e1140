"""Tests for dsp.windows module."""

import numpy as np
import pytest

from filterlab.dsp.windows import (
    bessel_i0,
    blackman,
    get_window,
    hamming,
    hann,
    kaiser,
    rectangular,
    window_array,
)

scipy_windows = pytest.importorskip("scipy.signal.windows")


@pytest.mark.parametrize(
    "ours, name",
    [(hamming, "hamming"), (hann, "hann"), (blackman, "blackman"), (rectangular, "boxcar")],
)
def test_matches_scipy_symmetric_windows(ours, name):
    for M in (2, 5, 32, 101):
        expected = scipy_windows.get_window(name, M, fftbins=False)
        np.testing.assert_allclose(ours(M), expected, atol=1e-12)


def test_kaiser_matches_scipy():
    w = kaiser(51, beta=6.0)
    np.testing.assert_allclose(w, scipy_windows.kaiser(51, 6.0, sym=True), atol=1e-9)


def test_bessel_i0_series():
    scipy_special = pytest.importorskip("scipy.special")
    x = np.array([0.0, 0.5, 2.0, 4.0, 8.0])
    np.testing.assert_allclose(bessel_i0(x), scipy_special.i0(x), rtol=1e-9)
    assert bessel_i0(0.0) == 1.0


@pytest.mark.parametrize("kind", ["rectangular", "hamming", "hanning", "blackman", "kaiser"])
def test_windows_symmetric_and_bounded(kind):
    w = window_array(kind, 33)
    assert len(w) == 33
    np.testing.assert_array_equal(w, w[::-1])
    assert np.all(w >= 0.0)
    assert np.all(w <= 1.0)
    assert w[16] == pytest.approx(1.0)


@pytest.mark.parametrize("kind", ["rectangular", "hamming", "hann", "blackman", "kaiser"])
def test_length_one_is_unity(kind):
    assert get_window(kind)(0, 1) == 1.0
    np.testing.assert_array_equal(window_array(kind, 1), [1.0])


def test_callable_agrees_with_array():
    fn = get_window("kaiser", beta=5.0)
    w = window_array("kaiser", 21, beta=5.0)
    np.testing.assert_allclose([fn(i, 21) for i in range(21)], w)


def test_hamming_end_points():
    fn = get_window("hamming")
    assert fn(0, 11) == pytest.approx(0.08)
    assert fn(10, 11) == pytest.approx(0.08)


def test_kaiser_zero_beta_is_rectangular():
    np.testing.assert_allclose(kaiser(15, beta=0.0), np.ones(15))


class TestWindowErrors:
    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Invalid window"):
            get_window("tukey")

    def test_negative_beta(self):
        with pytest.raises(ValueError, match="Kaiser beta"):
            get_window("kaiser", beta=-1.0)

    def test_non_positive_length(self):
        with pytest.raises(ValueError):
            hamming(0)
        with pytest.raises(ValueError):
            get_window("hamming")(0, 0)
