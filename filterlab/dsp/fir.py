"""Windowed-sinc FIR design.

The ideal (brick-wall) impulse responses are built from sinc kernels centred
on the middle tap. :func:`ideal_impulse_response` always tapers them with a
Hamming window to tame Gibbs ringing; :func:`fir_window_design` lets the
caller pick the window. Both go through :func:`ideal_kernel`, so the two
designers cannot drift apart.

Cutoffs are normalized to Nyquist: ``wc = 1`` means π rad/sample, and the
ideal lowpass is h[n] = wc·sinc(wc·n).
"""

from typing import Optional, Tuple, Union

import numpy as np

from ..core import (
    BESSEL_TERMS,
    BESSEL_TOLERANCE,
    FilterType,
    InvalidSpecificationError,
    WindowKind,
    check_band_edges,
    coerce_enum,
    force_odd,
)
from .windows import hamming, window_array


def sinc(x):
    """sin(πx)/(πx), with the removable singularity sinc(0) = 1."""
    return np.sinc(x)


def centered_indices(length: int) -> np.ndarray:
    """Sample offsets n = i - (L-1)/2 for an odd length L."""
    if length <= 0:
        raise InvalidSpecificationError(f"Impulse length must be positive, got {length}")
    if length % 2 == 0:
        raise ValueError(f"Centered indices need an odd length, got {length}")
    half = (length - 1) // 2
    return np.arange(-half, half + 1, dtype=int)


def ideal_kernel(
    filter_type: Union[FilterType, str],
    cutoff1: float,
    cutoff2: Optional[float],
    n: np.ndarray,
) -> np.ndarray:
    """Untapered ideal impulse response evaluated at offsets ``n``.

    - lowpass:  wc·sinc(wc·n)
    - highpass: δ[n] - wc·sinc(wc·n)
    - bandpass: wc2·sinc(wc2·n) - wc1·sinc(wc1·n)
    - bandstop: δ[n] - wc2·sinc(wc2·n) + wc1·sinc(wc1·n)

    Args:
        filter_type: Band shape.
        cutoff1: Cutoff (lower edge for two-edge types), normalized to Nyquist.
        cutoff2: Upper edge for bandpass/bandstop.
        n: Integer sample offsets from the centre tap.

    Returns:
        Kernel samples, same shape as ``n``.
    """
    filter_type = coerce_enum(FilterType, filter_type, "filter type")
    # Kernels are even in n; |n| keeps the taps bit-for-bit symmetric
    n = np.abs(np.asarray(n, dtype=float))
    delta = (n == 0).astype(float)

    low = cutoff1 * sinc(cutoff1 * n)
    if filter_type is FilterType.LOWPASS:
        return low
    if filter_type is FilterType.HIGHPASS:
        return delta - low

    high = cutoff2 * sinc(cutoff2 * n)
    if filter_type is FilterType.BANDPASS:
        return high - low
    return delta - high + low


def _prepare(filter_type, cutoff1, cutoff2, length) -> Tuple[FilterType, int, np.ndarray]:
    filter_type = coerce_enum(FilterType, filter_type, "filter type")
    check_band_edges(filter_type, cutoff1, cutoff2)
    if length <= 0:
        raise InvalidSpecificationError(f"Impulse length must be positive, got {length}")
    length = force_odd(int(length))
    return filter_type, length, centered_indices(length)


def ideal_impulse_response(
    filter_type: Union[FilterType, str],
    cutoff1: float,
    cutoff2: Optional[float] = None,
    length: int = 101,
) -> Tuple[np.ndarray, np.ndarray]:
    """Ideal filter impulse response smoothed by a fixed Hamming taper.

    Args:
        filter_type: "lowpass", "highpass", "bandpass" or "bandstop".
        cutoff1: Cutoff / lower band edge in (0, 1).
        cutoff2: Upper band edge in (cutoff1, 1), two-edge types only.
        length: Desired number of taps; even values become length + 1.

    Returns:
        Tuple (h, n) of tap values and their offsets from the centre tap.

    Raises:
        InvalidSpecificationError: If the band edges or length are invalid.
    """
    filter_type, length, n = _prepare(filter_type, cutoff1, cutoff2, length)
    h = ideal_kernel(filter_type, cutoff1, cutoff2, n) * hamming(length)
    return h, n


def fir_window_design(
    filter_type: Union[FilterType, str],
    cutoff1: float,
    cutoff2: Optional[float] = None,
    length: int = 101,
    window: Union[WindowKind, str] = WindowKind.HAMMING,
    beta: Optional[float] = None,
    bessel_terms: int = BESSEL_TERMS,
    bessel_tolerance: float = BESSEL_TOLERANCE,
) -> Tuple[np.ndarray, np.ndarray]:
    """Design an FIR filter with the window method.

    Identical to :func:`ideal_impulse_response` except that the taper is the
    caller's choice of window.

    Args:
        filter_type: "lowpass", "highpass", "bandpass" or "bandstop".
        cutoff1: Cutoff / lower band edge in (0, 1).
        cutoff2: Upper band edge in (cutoff1, 1), two-edge types only.
        length: Desired number of taps; even values become length + 1.
        window: "rectangular", "hamming", "hanning", "blackman" or "kaiser".
        beta: Kaiser shape parameter (default 4.0).
        bessel_terms: Series terms for the Kaiser window's I0.
        bessel_tolerance: Early-exit threshold for the I0 series.

    Returns:
        Tuple (h, n) of tap values and their offsets from the centre tap.

    Raises:
        InvalidSpecificationError: If the band edges or length are invalid.
        ValueError: If the window is unknown.
    """
    filter_type, length, n = _prepare(filter_type, cutoff1, cutoff2, length)
    taper = window_array(window, length, beta=beta, terms=bessel_terms, tolerance=bessel_tolerance)
    h = ideal_kernel(filter_type, cutoff1, cutoff2, n) * taper
    return h, n
