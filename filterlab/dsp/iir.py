"""IIR filter design via analog prototypes and the bilinear transform.

Design proceeds in the classical order:

1. a normalized analog lowpass prototype (cutoff 1 rad/s) is laid out as
   zeros and poles for the chosen family (Butterworth, Chebyshev I,
   Chebyshev II, or an approximate elliptic blend);
2. the digital cutoff is pre-warped, ``wc = tan(π·cutoff/2)``, and the
   prototype is frequency-scaled (lowpass) or reflected through
   ``s -> wc/s`` (highpass);
3. each analog root is mapped to the z-plane with ``z = (1+s)/(1-s)``;
   zeros at infinity land on ``z = -1``;
4. the roots are expanded into real ``(b, a)`` coefficients and the gain is
   fixed at the passband reference frequency.

Bandpass and bandstop filters are composed from two single-band designs by
default (cascade / parallel connection). This is an approximation of true
multi-band synthesis; ``multiband="transform"`` applies the analog
lowpass-to-bandpass/bandstop transformation instead.
"""

from typing import Callable, Optional, Tuple, Union

import numpy as np

from ..core import (
    IMPULSE_HORIZON,
    MAX_ORDER,
    FilterType,
    IIRMethod,
    InvalidSpecificationError,
    check_band_edges,
    coerce_enum,
)
from ..logging import get_logger
from .poly import add, convolve, poly_from_roots
from .utils import check_1d_array

logger = get_logger(__name__)

# Prototype zeros beyond this magnitude are treated as zeros at infinity
_INFINITE_ZERO = 1e10

Prototype = Tuple[np.ndarray, np.ndarray]


def prewarp(cutoff: float) -> float:
    """Analog frequency matching a normalized digital cutoff under the bilinear map."""
    return float(np.tan(np.pi * cutoff / 2.0))


def _theta(order: int) -> np.ndarray:
    k = np.arange(order, dtype=float)
    return np.pi * (2 * k + 1) / (2 * order)


def _chebyshev_poles(order: int, epsilon: float) -> np.ndarray:
    """Left-half-plane poles on the Chebyshev ellipse for ripple factor epsilon."""
    v = np.arcsinh(1.0 / epsilon) / order
    theta = _theta(order)
    return -np.sinh(v) * np.sin(theta) + 1j * np.cosh(v) * np.cos(theta)


def _stopband_zeros(order: int) -> np.ndarray:
    with np.errstate(divide="ignore"):
        zeros = 1j / np.cos(_theta(order))
    # cos(π/2) is 6e-17, not 0, so the middle zero of an odd order is huge
    return zeros[np.abs(zeros) < _INFINITE_ZERO]


def butterworth_prototype(order: int) -> Prototype:
    """Compute normalized analog Butterworth zeros and poles.

    Poles are uniformly spaced on the left half of the unit circle:
    s_k = exp(j * pi * (2k + n + 1) / (2n)), k = 0..n-1. No finite zeros.
    """
    k = np.arange(order, dtype=float)
    angles = np.pi * (2 * k + order + 1) / (2 * order)
    return np.array([], dtype=complex), np.exp(1j * angles)


def chebyshev1_prototype(order: int, rp: float) -> Prototype:
    """Compute normalized analog Chebyshev Type I zeros and poles.

    epsilon = sqrt(10^(rp/10) - 1), v = asinh(1/epsilon)/n and
    s_k = -sinh(v) sin(theta_k) + j cosh(v) cos(theta_k),
    theta_k = pi(2k+1)/(2n). Ripple of ``rp`` dB appears in the passband.
    """
    epsilon = np.sqrt(10 ** (rp / 10.0) - 1.0)
    return np.array([], dtype=complex), _chebyshev_poles(order, epsilon)


def chebyshev2_prototype(order: int, rs: float) -> Prototype:
    """Compute normalized analog Chebyshev Type II zeros and poles.

    epsilon = 1/sqrt(10^(rs/10) - 1). Zeros sit on the imaginary axis at
    j/cos(theta_k); poles are the reciprocals of the Chebyshev-ellipse poles.
    The unit frequency is the stopband edge and the ripple appears in the
    stopband, which is held ``rs`` dB down.
    """
    epsilon = 1.0 / np.sqrt(10 ** (rs / 10.0) - 1.0)
    return _stopband_zeros(order), 1.0 / _chebyshev_poles(order, epsilon)


def elliptic_prototype(order: int, rp: float) -> Prototype:
    """Approximate elliptic prototype.

    Not a solution of the elliptic-integral design equations: the zeros are
    placed Chebyshev II style at j/cos(theta_k) and the poles are the
    Chebyshev I poles for ``rp`` scaled by the empirical factor
    0.5 * (1 + sqrt(1 + epsilon^2)). Good enough to show the equiripple
    character in both bands, not for matching reference tables.
    """
    epsilon = np.sqrt(10 ** (rp / 10.0) - 1.0)
    factor = 0.5 * (1.0 + np.sqrt(1.0 + epsilon**2))
    return _stopband_zeros(order), _chebyshev_poles(order, epsilon) * factor


def analog_prototype(
    method: Union[IIRMethod, str], order: int, rp: float = 1.0, rs: float = 40.0
) -> Prototype:
    """Dispatch to the prototype of the requested family."""
    method = coerce_enum(IIRMethod, method, "IIR method")
    builders: dict[IIRMethod, Callable[[], Prototype]] = {
        IIRMethod.BUTTERWORTH: lambda: butterworth_prototype(order),
        IIRMethod.CHEBYSHEV1: lambda: chebyshev1_prototype(order, rp),
        IIRMethod.CHEBYSHEV2: lambda: chebyshev2_prototype(order, rs),
        IIRMethod.ELLIPTIC: lambda: elliptic_prototype(order, rp),
    }
    return builders[method]()


def lowpass_to_lowpass(zeros: np.ndarray, poles: np.ndarray, wc: float) -> Prototype:
    """Scale a unit-cutoff prototype to cutoff ``wc``: s -> s/wc."""
    return zeros * wc, poles * wc


def lowpass_to_highpass(zeros: np.ndarray, poles: np.ndarray, wc: float) -> Prototype:
    """Reflect a unit-cutoff prototype into a highpass at ``wc``: s -> wc/s.

    Zeros at infinity of the prototype become zeros at the origin.
    """
    degree = len(poles) - len(zeros)
    hp_zeros = np.concatenate([wc / zeros, np.zeros(degree, dtype=complex)])
    return hp_zeros, wc / poles


def lowpass_to_bandpass(zeros: np.ndarray, poles: np.ndarray, wo: float, bw: float) -> Prototype:
    """Analog lowpass-to-bandpass transformation s -> (s^2 + wo^2)/(s*bw)."""
    degree = len(poles) - len(zeros)

    def _split(roots: np.ndarray) -> np.ndarray:
        scaled = roots * bw / 2.0
        root = np.sqrt(scaled**2 - wo**2 + 0j)
        return np.concatenate([scaled + root, scaled - root])

    bp_zeros = np.concatenate([_split(zeros), np.zeros(degree, dtype=complex)])
    return bp_zeros, _split(poles)


def lowpass_to_bandstop(zeros: np.ndarray, poles: np.ndarray, wo: float, bw: float) -> Prototype:
    """Analog lowpass-to-bandstop transformation s -> s*bw/(s^2 + wo^2)."""
    degree = len(poles) - len(zeros)

    def _split(roots: np.ndarray) -> np.ndarray:
        scaled = (bw / 2.0) / roots
        root = np.sqrt(scaled**2 - wo**2 + 0j)
        return np.concatenate([scaled + root, scaled - root])

    notch = np.concatenate(
        [np.full(degree, 1j * wo, dtype=complex), np.full(degree, -1j * wo, dtype=complex)]
    )
    return np.concatenate([_split(zeros), notch]), _split(poles)


def bilinear_transform(zeros: np.ndarray, poles: np.ndarray) -> Prototype:
    """Map analog zeros and poles to the z-plane with z = (1 + s)/(1 - s).

    The analog frequencies are assumed pre-warped. Zeros at infinity are
    placed at z = -1 so numerator and denominator have equal degree.
    """
    degree = len(poles) - len(zeros)
    z_zeros = (1.0 + zeros) / (1.0 - zeros)
    z_poles = (1.0 + poles) / (1.0 - poles)
    z_zeros = np.concatenate([z_zeros, -np.ones(degree, dtype=complex)])
    return z_zeros, z_poles


def evaluate_transfer(b: np.ndarray, a: np.ndarray, z: complex) -> complex:
    """Evaluate sum(b_i z^-i) / sum(a_i z^-i) at a single point."""
    powers = z ** -np.arange(max(len(b), len(a)))
    return complex(np.dot(b, powers[: len(b)]) / np.dot(a, powers[: len(a)]))


def normalize_coefficients(b: np.ndarray, a: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Divide both coefficient arrays by a[0] so that a[0] == 1."""
    b = check_1d_array(b)
    a = check_1d_array(a)
    if abs(a[0]) < 1e-10:
        raise ValueError("Denominator leading coefficient is zero")
    return b / a[0], a / a[0]


def _set_gain(b: np.ndarray, a: np.ndarray, z_ref: complex, target: float) -> np.ndarray:
    h = evaluate_transfer(b, a, z_ref)
    if abs(h.imag) <= 1e-9 * abs(h):
        return b * (target / h.real)
    return b * (target / abs(h))


def _passband_gain(method: IIRMethod, order: int, rp: float) -> float:
    # Even-order equiripple passbands start at the bottom of the ripple
    if method in (IIRMethod.CHEBYSHEV1, IIRMethod.ELLIPTIC) and order % 2 == 0:
        return 10 ** (-rp / 20.0)
    return 1.0


def _check_design_args(order: int, rp: float, rs: float) -> None:
    if not isinstance(order, (int, np.integer)) or isinstance(order, bool):
        raise InvalidSpecificationError(f"Order must be an integer, got {type(order)}")
    if order <= 0:
        raise InvalidSpecificationError(f"Order must be positive, got {order}")
    if order > MAX_ORDER:
        raise InvalidSpecificationError(f"Order too large (>{MAX_ORDER}), got {order}")
    if not np.isfinite(rp) or rp <= 0:
        raise InvalidSpecificationError(f"Passband ripple must be positive and finite, got {rp}")
    if not np.isfinite(rs) or rs <= 0:
        raise InvalidSpecificationError(
            f"Stopband attenuation must be positive and finite, got {rs}"
        )


def _to_coefficients(
    z_zeros: np.ndarray,
    z_poles: np.ndarray,
    z_ref: complex,
    target: float,
) -> Tuple[np.ndarray, np.ndarray]:
    b = poly_from_roots(z_zeros)
    a = poly_from_roots(z_poles)
    b, a = normalize_coefficients(b, a)
    return _set_gain(b, a, z_ref, target), a


def single_band_zpk(
    filter_type: Union[FilterType, str],
    order: int,
    cutoff: float,
    method: Union[IIRMethod, str] = IIRMethod.BUTTERWORTH,
    rp: float = 1.0,
    rs: float = 40.0,
) -> Prototype:
    """Digital zeros and poles of a lowpass or highpass design.

    Args:
        filter_type: "lowpass" or "highpass".
        order: Filter order.
        cutoff: Normalized cutoff in (0, 1).
        method: Prototype family.
        rp: Passband ripple in dB (Chebyshev I, elliptic).
        rs: Stopband attenuation in dB (Chebyshev II).

    Returns:
        Tuple (zeros, poles) in the z-plane, ``order`` of each.
    """
    filter_type = coerce_enum(FilterType, filter_type, "filter type")
    if filter_type.is_two_edge:
        raise InvalidSpecificationError(f"{filter_type.value} is not a single-band type")
    check_band_edges(filter_type, cutoff)
    _check_design_args(order, rp, rs)

    zeros, poles = analog_prototype(method, order, rp, rs)
    wc = prewarp(cutoff)
    if filter_type is FilterType.LOWPASS:
        zeros, poles = lowpass_to_lowpass(zeros, poles, wc)
    else:
        zeros, poles = lowpass_to_highpass(zeros, poles, wc)
    return bilinear_transform(zeros, poles)


def design_single_band(
    filter_type: Union[FilterType, str],
    order: int,
    cutoff: float,
    method: Union[IIRMethod, str] = IIRMethod.BUTTERWORTH,
    rp: float = 1.0,
    rs: float = 40.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Design a lowpass or highpass IIR filter.

    The gain is fixed at DC (lowpass) or Nyquist (highpass): unity, or the
    bottom of the ripple band for even-order Chebyshev I / elliptic designs.

    Returns:
        Tuple (b, a) with a[0] == 1, each of length order + 1.
    """
    filter_type = coerce_enum(FilterType, filter_type, "filter type")
    method = coerce_enum(IIRMethod, method, "IIR method")
    z_zeros, z_poles = single_band_zpk(filter_type, order, cutoff, method, rp, rs)
    z_ref = 1.0 if filter_type is FilterType.LOWPASS else -1.0
    logger.debug(
        "Designed %s %s, order %d, cutoff %.4f", method.value, filter_type.value, order, cutoff
    )
    return _to_coefficients(z_zeros, z_poles, z_ref, _passband_gain(method, order, rp))


def _composite_two_band(
    filter_type: FilterType,
    order: int,
    cutoff1: float,
    cutoff2: float,
    method: IIRMethod,
    rp: float,
    rs: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Both sections use the requested prototype family, Chebyshev and elliptic included."""
    if filter_type is FilterType.BANDPASS:
        # Cascade: lowpass at the upper edge times highpass at the lower edge
        b_lp, a_lp = design_single_band(FilterType.LOWPASS, order, cutoff2, method, rp, rs)
        b_hp, a_hp = design_single_band(FilterType.HIGHPASS, order, cutoff1, method, rp, rs)
        b = convolve(b_lp, b_hp)
    else:
        # Parallel: lowpass below the stopband plus highpass above it
        b_lp, a_lp = design_single_band(FilterType.LOWPASS, order, cutoff1, method, rp, rs)
        b_hp, a_hp = design_single_band(FilterType.HIGHPASS, order, cutoff2, method, rp, rs)
        b = add(convolve(b_lp, a_hp), convolve(b_hp, a_lp))
    a = convolve(a_lp, a_hp)
    logger.debug("Composed %s from lowpass/highpass pair (approximation)", filter_type.value)
    return normalize_coefficients(b, a)


def two_band_zpk(
    filter_type: Union[FilterType, str],
    order: int,
    cutoff1: float,
    cutoff2: float,
    method: Union[IIRMethod, str] = IIRMethod.BUTTERWORTH,
    rp: float = 1.0,
    rs: float = 40.0,
) -> Prototype:
    """Digital zeros and poles of a transformed bandpass/bandstop design.

    Returns:
        Tuple (zeros, poles), ``2 * order`` of each.
    """
    filter_type = coerce_enum(FilterType, filter_type, "filter type")
    if not filter_type.is_two_edge:
        raise InvalidSpecificationError(f"{filter_type.value} is not a two-edge type")
    check_band_edges(filter_type, cutoff1, cutoff2)
    _check_design_args(order, rp, rs)

    zeros, poles = analog_prototype(method, order, rp, rs)
    w1, w2 = prewarp(cutoff1), prewarp(cutoff2)
    wo, bw = np.sqrt(w1 * w2), w2 - w1
    if filter_type is FilterType.BANDPASS:
        zeros, poles = lowpass_to_bandpass(zeros, poles, wo, bw)
    else:
        zeros, poles = lowpass_to_bandstop(zeros, poles, wo, bw)
    return bilinear_transform(zeros, poles)


def _transformed_two_band(
    filter_type: FilterType,
    order: int,
    cutoff1: float,
    cutoff2: float,
    method: IIRMethod,
    rp: float,
    rs: float,
) -> Tuple[np.ndarray, np.ndarray]:
    z_zeros, z_poles = two_band_zpk(filter_type, order, cutoff1, cutoff2, method, rp, rs)
    if filter_type is FilterType.BANDPASS:
        # The prototype's DC maps to the geometric centre of the band
        wo = np.sqrt(prewarp(cutoff1) * prewarp(cutoff2))
        z_ref = complex(np.exp(2j * np.arctan(wo)))
    else:
        z_ref = 1.0
    return _to_coefficients(z_zeros, z_poles, z_ref, _passband_gain(method, order, rp))


def design_iir(
    filter_type: Union[FilterType, str],
    order: int,
    cutoff1: float,
    cutoff2: Optional[float] = None,
    method: Union[IIRMethod, str] = IIRMethod.BUTTERWORTH,
    rp: float = 1.0,
    rs: float = 40.0,
    multiband: str = "composite",
) -> Tuple[np.ndarray, np.ndarray]:
    """Design an IIR filter of any band shape.

    Args:
        filter_type: "lowpass", "highpass", "bandpass" or "bandstop".
        order: Prototype order.
        cutoff1: Cutoff / lower band edge, normalized to Nyquist.
        cutoff2: Upper band edge for bandpass/bandstop.
        method: "butterworth", "chebyshev1", "chebyshev2" or "elliptic".
        rp: Passband ripple in dB.
        rs: Stopband attenuation in dB.
        multiband: "composite" (cascade/parallel of single-band designs) or
            "transform" (analog band transformation).

    Returns:
        Tuple (b, a) with a[0] == 1.

    Raises:
        InvalidSpecificationError: If parameters are invalid.
        ValueError: If ``multiband`` is unknown.
    """
    filter_type = coerce_enum(FilterType, filter_type, "filter type")
    method = coerce_enum(IIRMethod, method, "IIR method")

    if not filter_type.is_two_edge:
        return design_single_band(filter_type, order, cutoff1, method, rp, rs)

    check_band_edges(filter_type, cutoff1, cutoff2)
    if multiband == "composite":
        return _composite_two_band(filter_type, order, cutoff1, cutoff2, method, rp, rs)
    if multiband == "transform":
        return _transformed_two_band(filter_type, order, cutoff1, cutoff2, method, rp, rs)
    raise ValueError(f"Unknown multiband method: {multiband}")


def lfilter(b: np.ndarray, a: np.ndarray, x: np.ndarray) -> np.ndarray:
    """Filter signal using direct form difference equation.

    y[n] = sum(b[i]*x[n-i]) - sum(a[j]*y[n-j]) for j >= 1, after scaling
    both coefficient arrays by 1/a[0].

    Args:
        b: Numerator coefficients.
        a: Denominator coefficients.
        x: Input signal (1D array).

    Returns:
        Filtered signal.
    """
    b, a = normalize_coefficients(b, a)
    x = check_1d_array(x)

    # Initialize buffers
    x_buf = np.zeros(len(b), dtype=float)
    y_buf = np.zeros(len(a) - 1, dtype=float)
    y = np.zeros_like(x)

    for n in range(len(x)):
        # Shift input buffer
        x_buf = np.roll(x_buf, 1)
        x_buf[0] = x[n]

        y_n = np.dot(b, x_buf)
        if len(y_buf) > 0:
            y_n -= np.dot(a[1:], y_buf)

        y[n] = y_n

        # Shift output buffer
        if len(y_buf) > 0:
            y_buf = np.roll(y_buf, 1)
            y_buf[0] = y_n

    return y


def impulse_response(
    b: np.ndarray, a: np.ndarray, horizon: int = IMPULSE_HORIZON
) -> Tuple[np.ndarray, np.ndarray]:
    """Drive the difference equation with a unit impulse.

    Args:
        b: Numerator coefficients.
        a: Denominator coefficients.
        horizon: Number of output samples.

    Returns:
        Tuple (h, n) with n = 0..horizon-1.
    """
    if horizon <= 0:
        raise ValueError(f"horizon must be positive, got {horizon}")
    impulse = np.zeros(horizon, dtype=float)
    impulse[0] = 1.0
    return lfilter(b, a, impulse), np.arange(horizon, dtype=int)
