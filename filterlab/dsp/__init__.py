"""Digital filter design and analysis primitives.

This package provides the numerical building blocks behind
:func:`filterlab.compute`:
- An immutable complex value type with guarded division
- Window functions (rectangular, Hamming, Hanning, Blackman, Kaiser)
- Ideal and windowed-sinc FIR design
- IIR design (Butterworth, Chebyshev I/II, approximate elliptic)
- Root extraction, frequency response and group delay
- Minimum-order estimation

All functions are deterministic and NumPy-first.
"""

from .complex_math import Complex, DivisionByNearZero
from .fir import centered_indices, fir_window_design, ideal_impulse_response, ideal_kernel, sinc
from .iir import (
    analog_prototype,
    bilinear_transform,
    design_iir,
    design_single_band,
    impulse_response,
    lfilter,
    prewarp,
    single_band_zpk,
    two_band_zpk,
)
from .order import estimate_order, transition_width
from .poly import add, convolve, poly_from_roots
from .response import (
    evaluate_rational,
    group_delay,
    response_from_coefficients,
    response_from_impulse,
)
from .roots import RootSet, extract_roots
from .utils import check_1d_array, design_frequency_grid, unwrap_phase, wrap_phase
from .windows import bessel_i0, blackman, get_window, hamming, hann, kaiser, rectangular, window_array

__all__ = [
    # Utils
    "check_1d_array",
    "design_frequency_grid",
    "wrap_phase",
    "unwrap_phase",
    # Complex arithmetic
    "Complex",
    "DivisionByNearZero",
    # Polynomials
    "convolve",
    "add",
    "poly_from_roots",
    # Windows
    "get_window",
    "window_array",
    "bessel_i0",
    "rectangular",
    "hamming",
    "hann",
    "blackman",
    "kaiser",
    # FIR
    "sinc",
    "centered_indices",
    "ideal_kernel",
    "ideal_impulse_response",
    "fir_window_design",
    # IIR
    "prewarp",
    "analog_prototype",
    "bilinear_transform",
    "single_band_zpk",
    "two_band_zpk",
    "design_single_band",
    "design_iir",
    "lfilter",
    "impulse_response",
    # Analysis
    "RootSet",
    "extract_roots",
    "evaluate_rational",
    "response_from_impulse",
    "response_from_coefficients",
    "group_delay",
    # Order estimation
    "estimate_order",
    "transition_width",
]
