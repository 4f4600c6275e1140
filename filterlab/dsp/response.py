"""Frequency-response and group-delay evaluation.

Responses are sampled on the grid ω_k = kπ/(K-1), k = 0..K-1, and reported
against the normalized frequency ω/π in [0, 1].

Two evaluators exist. :func:`response_from_impulse` sums an impulse response
directly (a DFT on a non-uniform index set). :func:`evaluate_rational`
evaluates B(e^{jω})/A(e^{jω}) pointwise; when the denominator is within the
near-pole threshold of zero it substitutes a unit denominator and reports
the substitution, which keeps the output finite at the cost of accuracy
right at a pole.
"""

from typing import Sequence, Tuple

import numpy as np

from ..core import GROUP_DELAY_STEP, NEAR_POLE_THRESHOLD, NUM_FREQUENCIES, FrequencyResponse
from ..logging import get_logger
from . import complex_math
from .complex_math import ONE, Complex, DivisionByNearZero
from .utils import check_1d_array, design_frequency_grid, unwrap_phase, wrap_phase

logger = get_logger(__name__)


def _polynomial_at(coeffs: np.ndarray, omega: float) -> Complex:
    k = np.arange(len(coeffs))
    return Complex.from_builtin(np.sum(coeffs * np.exp(-1j * omega * k)))


def evaluate_rational(
    b,
    a,
    omega: float,
    threshold: float = NEAR_POLE_THRESHOLD,
) -> Tuple[Complex, bool]:
    """Evaluate H(e^{jω}) = Σ b_k e^{-jωk} / Σ a_k e^{-jωk}.

    Args:
        b: Numerator coefficients.
        a: Denominator coefficients.
        omega: Angular frequency in rad/sample.
        threshold: Near-pole threshold on |A(e^{jω})|².

    Returns:
        Tuple (value, substituted). ``substituted`` is True when the
        denominator was replaced by 1 because it was too close to zero.
    """
    b = check_1d_array(b)
    a = check_1d_array(a)
    numerator = _polynomial_at(b, omega)
    denominator = _polynomial_at(a, omega)
    try:
        return complex_math.divide(numerator, denominator, threshold), False
    except DivisionByNearZero as exc:
        logger.debug("Near-pole evaluation at omega=%.6f: %s", omega, exc)
        return complex_math.divide(numerator, ONE), True


def _pack(omegas: np.ndarray, values: np.ndarray) -> FrequencyResponse:
    return FrequencyResponse(
        frequencies=omegas / np.pi,
        magnitude=np.abs(values),
        phase=wrap_phase(np.angle(values)),
    )


def response_from_impulse(h, n, num_frequencies: int = NUM_FREQUENCIES) -> FrequencyResponse:
    """Frequency response of an impulse response by direct summation.

    H(e^{jω}) = Σ h[n] e^{-jωn}, evaluated for every grid frequency at once.

    Args:
        h: Impulse response samples.
        n: Sample index of each entry of ``h`` (may be negative).
        num_frequencies: Grid size K.

    Returns:
        FrequencyResponse over the normalized grid.
    """
    h = check_1d_array(h)
    n = check_1d_array(n)
    if h.shape != n.shape:
        raise ValueError(f"h and n must have the same length, got {h.size} and {n.size}")
    omegas = design_frequency_grid(num_frequencies)
    values = np.exp(-1j * np.outer(omegas, n)) @ h
    return _pack(omegas, values)


def response_from_coefficients(
    b,
    a,
    num_frequencies: int = NUM_FREQUENCIES,
    threshold: float = NEAR_POLE_THRESHOLD,
) -> Tuple[FrequencyResponse, int]:
    """Frequency response of B/A through the guarded rational evaluator.

    Returns:
        Tuple (response, substitutions) where ``substitutions`` counts grid
        points at which the near-pole substitution was applied.
    """
    omegas = design_frequency_grid(num_frequencies)
    values = np.empty(len(omegas), dtype=complex)
    substitutions = 0
    for i, omega in enumerate(omegas):
        value, substituted = evaluate_rational(b, a, omega, threshold)
        values[i] = value.to_complex()
        substitutions += substituted
    if substitutions:
        logger.debug("Substituted %d near-pole denominators", substitutions)
    return _pack(omegas, values), substitutions


def group_delay(
    b,
    a,
    omegas: Sequence[float],
    step: float = GROUP_DELAY_STEP,
    threshold: float = NEAR_POLE_THRESHOLD,
    start: int = 0,
) -> Tuple[np.ndarray, int, int]:
    """Group delay τ(ω) = -dφ/dω by central differences.

    The phase is evaluated at ω-δ, ω and ω+δ, the three samples are
    unwrapped, and τ(ω) = -(φ(ω+δ) - φ(ω-δ)) / (2δ).

    A zero of B on the unit circle flips the phase by π between ω-δ and
    ω+δ, which the difference would report as a delay of about π/(2δ).
    Where |B(e^{jω})|² is below ``threshold`` times the numerator energy the
    middle sample is skipped, and if the outer samples still differ by more
    than π/2 the point is reported as 0 and counted instead.

    Args:
        b: Numerator coefficients.
        a: Denominator coefficients.
        omegas: Angular frequencies in rad/sample.
        step: Half-width δ of the difference.
        threshold: Near-pole threshold forwarded to the rational evaluator,
            reused relative to sum(b²) for the zero test.
        start: Sample index of ``b[0]``; a centred tap sequence of length L
            uses -(L-1)/2 so the delay matches its zero-phase response.

    Returns:
        Tuple (delays in samples, near-pole substitutions, zero crossings).
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    b = check_1d_array(b)
    energy = float(np.dot(b, b))
    delays = np.empty(len(omegas), dtype=float)
    substitutions = 0
    crossings = 0
    for i, omega in enumerate(omegas):
        phases = []
        for point in (omega - step, omega, omega + step):
            value, substituted = evaluate_rational(b, a, point, threshold)
            substitutions += substituted
            phases.append(complex_math.phase(value))
        if _polynomial_at(b, omega).norm_squared() < threshold * energy:
            # Phase at a zero of B is noise; unwrap the outer samples only
            lower, upper = unwrap_phase([phases[0], phases[2]])
            if abs(upper - lower) > np.pi / 2:
                delays[i] = 0.0
                crossings += 1
                continue
        else:
            lower, _, upper = unwrap_phase(phases)
        delays[i] = -(upper - lower) / (2.0 * step) + start
    if crossings:
        logger.debug("Group delay zeroed at %d unit-circle zero crossings", crossings)
    return delays, substitutions, crossings


__all__ = [
    "evaluate_rational",
    "response_from_impulse",
    "response_from_coefficients",
    "group_delay",
]
