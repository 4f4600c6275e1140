"""Minimum-order estimates for IIR designs.

Given a passband edge, a stopband edge and the tolerated ripple and
attenuation, these formulas return the smallest prototype order that meets
the template. Edges are pre-warped with tan(π·f/2) first so the estimate
holds for the bilinear design in :mod:`filterlab.dsp.iir`. The elliptic
formula is a rough selectivity heuristic, not the elliptic-integral
expression, and tends to overestimate.
"""

import math
from typing import Union

from ..core import IIRMethod, coerce_enum
from .iir import prewarp

MIN_ORDER = 2


def _check_edge(value: float, name: str) -> None:
    if not math.isfinite(value) or not 0.0 < value < 1.0:
        raise ValueError(f"{name} must lie in (0, 1), got {value}")


def transition_width(passband_edge: float, stopband_edge: float) -> float:
    """Width of the transition band in normalized frequency."""
    return abs(stopband_edge - passband_edge)


def discrimination(passband_ripple_db: float, stopband_attenuation_db: float) -> float:
    """D = (10^(rs/10) - 1) / (10^(rp/10) - 1)."""
    if passband_ripple_db <= 0 or stopband_attenuation_db <= 0:
        raise ValueError(
            "Ripple and attenuation must be positive, got "
            f"rp={passband_ripple_db}, rs={stopband_attenuation_db}"
        )
    return (10 ** (stopband_attenuation_db / 10.0) - 1.0) / (
        10 ** (passband_ripple_db / 10.0) - 1.0
    )


def estimate_order(
    method: Union[IIRMethod, str],
    passband_edge: float,
    stopband_edge: float,
    passband_ripple_db: float = 1.0,
    stopband_attenuation_db: float = 40.0,
) -> int:
    """Estimate the minimum IIR order for a lowpass or highpass template.

    The template direction is inferred from the edges: a stopband edge above
    the passband edge describes a lowpass, below it a highpass.

    Args:
        method: Prototype family.
        passband_edge: Normalized passband edge in (0, 1).
        stopband_edge: Normalized stopband edge in (0, 1).
        passband_ripple_db: Maximum passband ripple in dB.
        stopband_attenuation_db: Minimum stopband attenuation in dB.

    Returns:
        Order, never below 2.

    Raises:
        ValueError: If an edge is outside (0, 1), the edges coincide, or the
            ripple/attenuation is not positive.
    """
    method = coerce_enum(IIRMethod, method, "IIR method")
    _check_edge(passband_edge, "passband_edge")
    _check_edge(stopband_edge, "stopband_edge")
    if passband_edge == stopband_edge:
        raise ValueError(f"Passband and stopband edges must differ, got {passband_edge}")

    d = discrimination(passband_ripple_db, stopband_attenuation_db)
    if d <= 1.0:
        # Attenuation no deeper than the ripple: any order meets it
        return MIN_ORDER
    wp, ws = prewarp(passband_edge), prewarp(stopband_edge)
    selectivity = max(wp, ws) / min(wp, ws)

    if method is IIRMethod.BUTTERWORTH:
        order = math.log10(d) / (2.0 * math.log10(selectivity))
    elif method is IIRMethod.ELLIPTIC:
        order = math.log10(16.0 * math.sqrt(d)) / math.log10(selectivity)
    else:
        order = math.acosh(math.sqrt(d)) / math.acosh(selectivity)

    return max(MIN_ORDER, math.ceil(order))


__all__ = ["MIN_ORDER", "transition_width", "discrimination", "estimate_order"]
