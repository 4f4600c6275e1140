"""Window functions for FIR design.

Implements the rectangular, Hamming, Hanning, Blackman and Kaiser tapers in
their symmetric form. Each window is available two ways:

- :func:`get_window` returns a callable ``(index, length) -> float``, the
  per-sample contract used by the filter designers.
- The array generators (:func:`hamming`, :func:`kaiser`, ...) return the full
  length-``M`` window as a numpy array.

Both share the same formulas, so they agree sample for sample. Samples are
evaluated on the folded index min(n, L-1-n), which makes every window exactly
symmetric.
"""

from typing import Callable, Optional, Union

import numpy as np

from ..core import BESSEL_TERMS, BESSEL_TOLERANCE, WindowKind, coerce_enum

WindowFunction = Callable[[int, int], float]

DEFAULT_KAISER_BETA = 4.0


def bessel_i0(
    x: Union[float, np.ndarray],
    terms: int = BESSEL_TERMS,
    tolerance: float = BESSEL_TOLERANCE,
) -> Union[float, np.ndarray]:
    """Approximate the zeroth-order modified Bessel function of the first kind.

    Uses the truncated power series I0(x) = Σ ((x/2)^k / k!)², stopping after
    ``terms`` terms or as soon as every new term drops below ``tolerance``.
    This is an approximation, accurate enough for window shaping but not a
    substitute for a library Bessel implementation at large arguments.

    Args:
        x: Argument(s).
        terms: Maximum number of series terms after the leading 1.
        tolerance: Early-exit threshold on the term magnitude.

    Returns:
        I0(x) with the same shape as ``x``.
    """
    x = np.asarray(x, dtype=float)
    total = np.ones_like(x)
    term = np.ones_like(x)
    quarter_x2 = x * x / 4.0
    for k in range(1, terms + 1):
        term = term * quarter_x2 / (k * k)
        total = total + term
        if np.all(term < tolerance):
            break
    return total if total.ndim else float(total)


def _folded(n: np.ndarray, length: int) -> np.ndarray:
    return np.minimum(n, (length - 1) - n)


def _rectangular(n: np.ndarray, length: int) -> np.ndarray:
    return np.ones_like(n, dtype=float)


def _hamming(n: np.ndarray, length: int) -> np.ndarray:
    return 0.54 - 0.46 * np.cos(2.0 * np.pi * n / (length - 1))


def _hanning(n: np.ndarray, length: int) -> np.ndarray:
    return 0.5 * (1.0 - np.cos(2.0 * np.pi * n / (length - 1)))


def _blackman(n: np.ndarray, length: int) -> np.ndarray:
    w = (
        0.42
        - 0.5 * np.cos(2.0 * np.pi * n / (length - 1))
        + 0.08 * np.cos(4.0 * np.pi * n / (length - 1))
    )
    # The end points evaluate to -1.4e-17 in floating point
    return np.maximum(w, 0.0)


def _kaiser_formula(beta: float, terms: int, tolerance: float):
    denominator = bessel_i0(beta, terms, tolerance)

    def _kaiser(n: np.ndarray, length: int) -> np.ndarray:
        alpha = (length - 1) / 2.0
        ratio = (n - alpha) / alpha
        # Clip guards indices just outside [0, L-1] from a negative sqrt
        arg = beta * np.sqrt(np.clip(1.0 - ratio * ratio, 0.0, None))
        return bessel_i0(arg, terms, tolerance) / denominator

    return _kaiser


def _formula(
    kind: Union[WindowKind, str],
    beta: Optional[float],
    terms: int,
    tolerance: float,
):
    kind = coerce_enum(WindowKind, kind, "window")
    if kind is WindowKind.KAISER:
        beta = DEFAULT_KAISER_BETA if beta is None else float(beta)
        if not np.isfinite(beta) or beta < 0:
            raise ValueError(f"Kaiser beta must be finite and non-negative, got {beta}")
        return _kaiser_formula(beta, terms, tolerance)
    return {
        WindowKind.RECTANGULAR: _rectangular,
        WindowKind.HAMMING: _hamming,
        WindowKind.HANNING: _hanning,
        WindowKind.BLACKMAN: _blackman,
    }[kind]


def get_window(
    kind: Union[WindowKind, str],
    beta: Optional[float] = None,
    terms: int = BESSEL_TERMS,
    tolerance: float = BESSEL_TOLERANCE,
) -> WindowFunction:
    """Return the per-sample window ``w(index, length)``.

    Args:
        kind: Window kind (enum member or name; "hann" is accepted for
            "hanning").
        beta: Kaiser shape parameter; ignored for other windows. Defaults
            to 4.0.
        terms: Bessel series terms (Kaiser only).
        tolerance: Bessel series early-exit threshold (Kaiser only).

    Returns:
        Callable mapping a sample index in [0, length-1] to a weight in [0, 1].

    Raises:
        ValueError: If the kind is unknown or beta is invalid.
    """
    formula = _formula(kind, beta, terms, tolerance)

    def window(index: int, length: int) -> float:
        if length <= 0:
            raise ValueError(f"Window length must be positive, got {length}")
        if length == 1:
            return 1.0
        return float(formula(_folded(np.asarray(index, dtype=float), length), length))

    return window


def window_array(
    kind: Union[WindowKind, str],
    M: int,
    beta: Optional[float] = None,
    terms: int = BESSEL_TERMS,
    tolerance: float = BESSEL_TOLERANCE,
) -> np.ndarray:
    """Generate a full symmetric window of length ``M``.

    Args:
        kind: Window kind.
        M: Window length (must be positive integer).
        beta: Kaiser shape parameter.
        terms: Bessel series terms (Kaiser only).
        tolerance: Bessel series early-exit threshold (Kaiser only).

    Returns:
        Window array of length M, dtype float64.

    Raises:
        ValueError: If M <= 0 or the kind is unknown.
    """
    if M <= 0:
        raise ValueError(f"Window length M must be positive, got {M}")
    formula = _formula(kind, beta, terms, tolerance)
    if M == 1:
        return np.array([1.0], dtype=float)
    return np.asarray(formula(_folded(np.arange(M, dtype=float), M), M), dtype=float)


def rectangular(M: int) -> np.ndarray:
    """Rectangular (boxcar) window: w[n] = 1.0 for all n."""
    return window_array(WindowKind.RECTANGULAR, M)


def hamming(M: int) -> np.ndarray:
    """Hamming window: w[n] = 0.54 - 0.46 * cos(2πn/(M-1))."""
    return window_array(WindowKind.HAMMING, M)


def hann(M: int) -> np.ndarray:
    """Hann (Hanning) window: w[n] = 0.5 * (1 - cos(2πn/(M-1)))."""
    return window_array(WindowKind.HANNING, M)


def blackman(M: int) -> np.ndarray:
    """Blackman window.

    w[n] = 0.42 - 0.5*cos(2πn/(M-1)) + 0.08*cos(4πn/(M-1))
    """
    return window_array(WindowKind.BLACKMAN, M)


def kaiser(M: int, beta: float = DEFAULT_KAISER_BETA) -> np.ndarray:
    """Kaiser window: w[n] = I0(β·sqrt(1 - ((n-α)/α)²)) / I0(β), α = (M-1)/2.

    I0 is evaluated with the truncated series of :func:`bessel_i0`.
    """
    return window_array(WindowKind.KAISER, M, beta=beta)
