"""
Specification, configuration and result containers for filter design.

A computation starts from an immutable :class:`FilterSpecification` and ends
with a :class:`FilterResult`. Both are created fresh for every request; the
engine keeps no state between calls, so structurally equal specifications
always yield identical results and can be memoized by the caller.

Frequencies are normalized so that ``1.0`` corresponds to π radians/sample
(the Nyquist frequency).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal, Optional, Type, TypeVar

import numpy as np

if TYPE_CHECKING:
    from filterlab.dsp.complex_math import Complex

# Named numerical constants (defaults of DesignConfig)
NUM_FREQUENCIES = 512
IMPULSE_HORIZON = 100
BESSEL_TERMS = 20
BESSEL_TOLERANCE = 1e-10
NEAR_POLE_THRESHOLD = 1e-3
GROUP_DELAY_STEP = 1e-3
PLACEHOLDER_RADIUS = 0.8
MAX_ORDER = 50
DEFAULT_IMPULSE_LENGTH = 101


class InvalidSpecificationError(ValueError):
    """Raised when a filter specification is structurally invalid."""


class FilterType(Enum):
    """Band shape of the filter."""

    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"
    BANDSTOP = "bandstop"

    @property
    def is_two_edge(self) -> bool:
        return self in (FilterType.BANDPASS, FilterType.BANDSTOP)


class Implementation(Enum):
    """Design technique used to realise the filter."""

    IDEAL = "ideal"
    FIR = "fir"
    IIR = "iir"


class WindowKind(Enum):
    """Tapering windows available to the FIR designer."""

    RECTANGULAR = "rectangular"
    HAMMING = "hamming"
    HANNING = "hanning"
    BLACKMAN = "blackman"
    KAISER = "kaiser"


class IIRMethod(Enum):
    """Analog prototype families for IIR design."""

    BUTTERWORTH = "butterworth"
    CHEBYSHEV1 = "chebyshev1"
    CHEBYSHEV2 = "chebyshev2"
    ELLIPTIC = "elliptic"


_ALIASES = {
    "hann": "hanning",
    "low": "lowpass",
    "high": "highpass",
    "cheby1": "chebyshev1",
    "cheby2": "chebyshev2",
    "butter": "butterworth",
    "ellip": "elliptic",
}

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value, name: str) -> E:
    """Return ``value`` as a member of ``enum_cls``.

    Accepts enum members or their (case-insensitive) string values.

    Raises:
        InvalidSpecificationError: If the value names no member.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return enum_cls(key)
        except ValueError:
            pass
    valid = ", ".join(member.value for member in enum_cls)
    raise InvalidSpecificationError(f"Invalid {name} {value!r}. Must be one of: {valid}")


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _check_cutoff(value, name: str) -> None:
    if value is None:
        raise InvalidSpecificationError(f"{name} is required")
    if not math.isfinite(value):
        raise InvalidSpecificationError(f"{name} must be finite, got {value}")
    if not 0.0 < value < 1.0:
        raise InvalidSpecificationError(
            f"{name} must lie in (0, 1) (normalized to Nyquist), got {value}"
        )


def check_band_edges(filter_type: FilterType, cutoff1, cutoff2=None) -> None:
    """Validate normalized band edges for ``filter_type``.

    Raises:
        InvalidSpecificationError: If a required edge is missing, outside
            (0, 1), or the edges are not strictly increasing.
    """
    _check_cutoff(cutoff1, "cutoff1")
    if filter_type.is_two_edge:
        _check_cutoff(cutoff2, "cutoff2")
        if cutoff1 >= cutoff2:
            raise InvalidSpecificationError(
                f"cutoff1 must be < cutoff2 for {filter_type.value}, "
                f"got ({cutoff1}, {cutoff2})"
            )


def force_odd(length: int) -> int:
    """Bump an even tap count to the next odd number."""
    return length if length % 2 == 1 else length + 1


@dataclass(frozen=True)
class FilterSpecification:
    """
    Abstract description of the filter to synthesize.

    Attributes:
        type: Band shape (lowpass, highpass, bandpass, bandstop).
        implementation: ideal, fir or iir.
        cutoff1: Normalized cutoff (lower band edge for two-edge types).
        cutoff2: Upper band edge, required for bandpass/bandstop.
        impulse_length: Number of taps for ideal/FIR designs. Even values are
            bumped to the next odd number so the response has a centre tap.
        window: FIR taper.
        kaiser_beta: Kaiser window shape parameter (FIR with Kaiser only).
        order: IIR filter order.
        method: IIR prototype family.
        passband_ripple_db: Passband ripple for Chebyshev I / elliptic.
        stopband_attenuation_db: Stopband attenuation for Chebyshev II.
    """

    type: FilterType
    implementation: Implementation
    cutoff1: float
    cutoff2: Optional[float] = None
    impulse_length: int = DEFAULT_IMPULSE_LENGTH
    window: WindowKind = WindowKind.HAMMING
    kaiser_beta: float = 4.0
    order: int = 4
    method: IIRMethod = IIRMethod.BUTTERWORTH
    passband_ripple_db: float = 1.0
    stopband_attenuation_db: float = 40.0

    def __post_init__(self) -> None:
        """Coerce enum fields and validate the specification."""
        object.__setattr__(self, "type", coerce_enum(FilterType, self.type, "filter type"))
        object.__setattr__(
            self,
            "implementation",
            coerce_enum(Implementation, self.implementation, "implementation"),
        )
        object.__setattr__(self, "window", coerce_enum(WindowKind, self.window, "window"))
        object.__setattr__(self, "method", coerce_enum(IIRMethod, self.method, "IIR method"))
        self.validate()

    def validate(self) -> None:
        """Check structural constraints; raises InvalidSpecificationError."""
        check_band_edges(self.type, self.cutoff1, self.cutoff2)

        if not _is_int(self.impulse_length):
            raise InvalidSpecificationError(
                f"impulse_length must be an integer, got {type(self.impulse_length).__name__}"
            )
        if self.impulse_length <= 0:
            raise InvalidSpecificationError(
                f"impulse_length must be positive, got {self.impulse_length}"
            )
        if not math.isfinite(self.kaiser_beta) or self.kaiser_beta < 0:
            raise InvalidSpecificationError(
                f"kaiser_beta must be finite and non-negative, got {self.kaiser_beta}"
            )

        if not _is_int(self.order):
            raise InvalidSpecificationError(
                f"Order must be an integer, got {type(self.order).__name__}"
            )
        if self.order <= 0:
            raise InvalidSpecificationError(f"Order must be positive, got {self.order}")
        if self.order > MAX_ORDER:
            raise InvalidSpecificationError(f"Order too large (>{MAX_ORDER}), got {self.order}")
        for name in ("passband_ripple_db", "stopband_attenuation_db"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidSpecificationError(f"{name} must be positive and finite, got {value}")

    @property
    def effective_length(self) -> int:
        """Tap count actually used: ``impulse_length`` forced to be odd."""
        return force_odd(self.impulse_length)

    @property
    def cutoffs(self) -> tuple[float, ...]:
        """Band edges relevant to ``type`` (one or two values)."""
        if self.type.is_two_edge:
            return (self.cutoff1, self.cutoff2)
        return (self.cutoff1,)


RootMethod = Literal["simplified", "companion"]
MultibandMethod = Literal["composite", "transform"]
IIRResponseSource = Literal["impulse", "coefficients"]


@dataclass(frozen=True)
class DesignConfig:
    """
    Numerical knobs of the design and analysis pipeline.

    Args:
        num_frequencies: Points in the [0, π] frequency grid.
        impulse_horizon: Samples of IIR impulse response to compute.
        bessel_terms: Series terms of the Kaiser window's I0 approximation.
        bessel_tolerance: Early-exit threshold for the I0 series.
        near_pole_threshold: |denominator|² below which rational evaluation
            substitutes a unit denominator.
        group_delay_step: Half-width δ (rad) of the central difference.
        placeholder_radius: Radius of the placeholder root circle.
        root_method: "simplified" (exact up to degree 2, placeholder above)
            or "companion" (eigenvalues of the companion matrix).
        multiband: "composite" (cascade/parallel of single-band designs) or
            "transform" (analog lowpass-to-bandpass/bandstop transform).
        iir_response: Whether the IIR frequency response comes from the
            impulse response ("impulse") or from the coefficients.
    """

    num_frequencies: int = NUM_FREQUENCIES
    impulse_horizon: int = IMPULSE_HORIZON
    bessel_terms: int = BESSEL_TERMS
    bessel_tolerance: float = BESSEL_TOLERANCE
    near_pole_threshold: float = NEAR_POLE_THRESHOLD
    group_delay_step: float = GROUP_DELAY_STEP
    placeholder_radius: float = PLACEHOLDER_RADIUS
    root_method: RootMethod = "simplified"
    multiband: MultibandMethod = "composite"
    iir_response: IIRResponseSource = "impulse"

    def __post_init__(self) -> None:
        """Validate DesignConfig parameters."""
        if self.num_frequencies < 2:
            raise ValueError(f"num_frequencies must be >= 2, got {self.num_frequencies}")
        if self.impulse_horizon < 1:
            raise ValueError(f"impulse_horizon must be >= 1, got {self.impulse_horizon}")
        if self.bessel_terms < 1:
            raise ValueError(f"bessel_terms must be >= 1, got {self.bessel_terms}")
        if self.near_pole_threshold < 0:
            raise ValueError(
                f"near_pole_threshold must be non-negative, got {self.near_pole_threshold}"
            )
        if not self.group_delay_step > 0:
            raise ValueError(f"group_delay_step must be positive, got {self.group_delay_step}")
        if self.root_method not in ("simplified", "companion"):
            raise ValueError(f"Unknown root_method: {self.root_method}")
        if self.multiband not in ("composite", "transform"):
            raise ValueError(f"Unknown multiband method: {self.multiband}")
        if self.iir_response not in ("impulse", "coefficients"):
            raise ValueError(f"Unknown iir_response source: {self.iir_response}")


DEFAULT_CONFIG = DesignConfig()


@dataclass(frozen=True, eq=False)
class FrequencyResponse:
    """
    Sampled frequency response.

    Attributes:
        frequencies: Normalized frequencies ω/π in [0, 1].
        magnitude: |H(e^{jω})|.
        phase: arg H(e^{jω}) in (-π, π].
    """

    frequencies: np.ndarray
    magnitude: np.ndarray
    phase: np.ndarray


@dataclass(frozen=True)
class QualityFlags:
    """
    Approximations taken while producing a result.

    Attributes:
        roots_approximate: Poles/zeros came from the placeholder path and are
            not numerically meaningful.
        near_pole_substitutions: Rational evaluations whose denominator was
            replaced because it fell below the near-pole threshold.
        non_finite_replaced: Output samples that were NaN/Inf and got zeroed.
        delay_zero_crossings: Group-delay samples reported as 0 because the
            difference stencil straddled a zero on the unit circle.
    """

    roots_approximate: bool = False
    near_pole_substitutions: int = 0
    non_finite_replaced: int = 0
    delay_zero_crossings: int = 0


@dataclass(frozen=True, eq=False)
class FilterResult:
    """
    Everything the presentation layer needs to plot a filter.

    Attributes:
        impulse_response: h[n].
        time_indices: n for every sample of ``impulse_response``.
        frequency_response: Magnitude and phase over the normalized grid.
        poles: z-plane poles (empty for ideal/FIR designs).
        zeros: z-plane zeros (empty for ideal/FIR designs).
        group_delay: Samples of -dφ/dω on the frequency grid, or empty.
        coefficients: ``(b, a)`` of the realised transfer function.
        flags: Approximations taken along the way.
    """

    impulse_response: np.ndarray
    time_indices: np.ndarray
    frequency_response: FrequencyResponse
    poles: tuple[Complex, ...] = ()
    zeros: tuple[Complex, ...] = ()
    group_delay: np.ndarray = field(default_factory=lambda: np.zeros(0))
    coefficients: tuple[np.ndarray, np.ndarray] = field(
        default_factory=lambda: (np.zeros(0), np.ones(1))
    )
    flags: QualityFlags = QualityFlags()


__all__ = [
    "NUM_FREQUENCIES",
    "IMPULSE_HORIZON",
    "BESSEL_TERMS",
    "BESSEL_TOLERANCE",
    "NEAR_POLE_THRESHOLD",
    "GROUP_DELAY_STEP",
    "PLACEHOLDER_RADIUS",
    "MAX_ORDER",
    "InvalidSpecificationError",
    "FilterType",
    "Implementation",
    "WindowKind",
    "IIRMethod",
    "coerce_enum",
    "check_band_edges",
    "force_odd",
    "FilterSpecification",
    "DesignConfig",
    "DEFAULT_CONFIG",
    "FrequencyResponse",
    "QualityFlags",
    "FilterResult",
]
