"""Single entry point turning a filter specification into plottable data.

:func:`compute` dispatches on the implementation technique:

- ideal / fir: a symmetric odd-length tap sequence centred on n = 0, its
  frequency response by direct summation and, on request, its group delay.
- iir: coefficients from the analog-prototype designer, 100 samples of
  impulse response, the frequency response, poles, zeros and group delay.

Every call is independent and stateless. Non-finite output samples never
reach the caller; they are zeroed and counted in :class:`QualityFlags`.
"""

from typing import Optional, Tuple

import numpy as np

from .core import (
    DEFAULT_CONFIG,
    DesignConfig,
    FilterResult,
    FilterSpecification,
    FrequencyResponse,
    Implementation,
    QualityFlags,
)
from .dsp.fir import fir_window_design, ideal_impulse_response
from .dsp.iir import design_iir, impulse_response
from .dsp.response import group_delay, response_from_coefficients, response_from_impulse
from .dsp.roots import extract_roots
from .dsp.utils import design_frequency_grid
from .logging import get_logger

logger = get_logger(__name__)


def _tap_design(spec: FilterSpecification, config: DesignConfig) -> Tuple[np.ndarray, np.ndarray]:
    if spec.implementation is Implementation.IDEAL:
        return ideal_impulse_response(spec.type, spec.cutoff1, spec.cutoff2, spec.impulse_length)
    return fir_window_design(
        spec.type,
        spec.cutoff1,
        spec.cutoff2,
        spec.impulse_length,
        window=spec.window,
        beta=spec.kaiser_beta,
        bessel_terms=config.bessel_terms,
        bessel_tolerance=config.bessel_tolerance,
    )


def design_coefficients(
    spec: FilterSpecification, config: DesignConfig = DEFAULT_CONFIG
) -> Tuple[np.ndarray, np.ndarray]:
    """Transfer function ``(b, a)`` of the filter, without any analysis.

    For ideal and FIR designs ``b`` is the causal tap sequence and ``a`` is
    ``[1.0]``; for IIR designs ``a[0] == 1``.
    """
    spec.validate()
    if spec.implementation is Implementation.IIR:
        return design_iir(
            spec.type,
            spec.order,
            spec.cutoff1,
            spec.cutoff2,
            method=spec.method,
            rp=spec.passband_ripple_db,
            rs=spec.stopband_attenuation_db,
            multiband=config.multiband,
        )
    h, _ = _tap_design(spec, config)
    return h, np.ones(1)


def _sanitize(values: np.ndarray, label: str) -> Tuple[np.ndarray, int]:
    bad = ~np.isfinite(values)
    count = int(np.count_nonzero(bad))
    if count:
        logger.warning("Replaced %d non-finite %s values with 0", count, label)
        values = np.where(bad, 0.0, values)
    return values, count


def _freeze(values: np.ndarray, dtype=float) -> np.ndarray:
    values = np.array(values, dtype=dtype)
    values.flags.writeable = False
    return values


def compute(
    spec: FilterSpecification,
    config: DesignConfig = DEFAULT_CONFIG,
    *,
    with_group_delay: Optional[bool] = None,
) -> FilterResult:
    """Design a filter and analyse it.

    Args:
        spec: What to design.
        config: Numerical parameters of the pipeline.
        with_group_delay: Compute the group delay. Defaults to True for IIR
            designs and False for ideal/FIR designs, whose centred taps
            are zero-phase and so have zero delay in the passband.

    Returns:
        FilterResult with read-only arrays.

    Raises:
        InvalidSpecificationError: If the specification is invalid.
    """
    spec.validate()
    is_iir = spec.implementation is Implementation.IIR
    if with_group_delay is None:
        with_group_delay = is_iir
    logger.debug(
        "Computing %s %s filter, cutoffs %s",
        spec.implementation.value,
        spec.type.value,
        spec.cutoffs,
    )

    substitutions = 0
    roots_approximate = False
    poles: tuple = ()
    zeros: tuple = ()

    with np.errstate(over="ignore", invalid="ignore"):
        if is_iir:
            b, a = design_coefficients(spec, config)
            h, n = impulse_response(b, a, config.impulse_horizon)
        else:
            h, n = _tap_design(spec, config)
            b, a = h, np.ones(1)
        h, replaced = _sanitize(h, "impulse response")

        if is_iir and config.iir_response == "coefficients":
            response, substitutions = response_from_coefficients(
                b, a, config.num_frequencies, config.near_pole_threshold
            )
        else:
            response = response_from_impulse(h, n, config.num_frequencies)

        if is_iir:
            pole_set = extract_roots(a, config.root_method, config.placeholder_radius)
            zero_set = extract_roots(b, config.root_method, config.placeholder_radius)
            poles, zeros = pole_set.roots, zero_set.roots
            roots_approximate = pole_set.approximate or zero_set.approximate
            if roots_approximate:
                logger.info(
                    "Order %d is above the closed-form root solver; poles/zeros are placeholders",
                    spec.order,
                )

        delay = np.zeros(0)
        crossings = 0
        if with_group_delay:
            omegas = design_frequency_grid(config.num_frequencies)
            # Same index set as the reported phase; centred taps start at -(L-1)/2
            delay, delay_substitutions, crossings = group_delay(
                b,
                a,
                omegas,
                config.group_delay_step,
                config.near_pole_threshold,
                start=int(n[0]),
            )
            substitutions += delay_substitutions

    if substitutions:
        logger.debug("Near-pole substitutions: %d", substitutions)

    magnitude, count = _sanitize(response.magnitude, "magnitude")
    replaced += count
    phase, count = _sanitize(response.phase, "phase")
    replaced += count
    delay, count = _sanitize(delay, "group delay")
    replaced += count

    return FilterResult(
        impulse_response=_freeze(h),
        time_indices=_freeze(n, dtype=int),
        frequency_response=FrequencyResponse(
            frequencies=_freeze(response.frequencies),
            magnitude=_freeze(magnitude),
            phase=_freeze(phase),
        ),
        poles=poles,
        zeros=zeros,
        group_delay=_freeze(delay),
        coefficients=(_freeze(b), _freeze(a)),
        flags=QualityFlags(
            roots_approximate=roots_approximate,
            near_pole_substitutions=substitutions,
            non_finite_replaced=replaced,
            delay_zero_crossings=crossings,
        ),
    )


__all__ = ["compute", "design_coefficients"]
