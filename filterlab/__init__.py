"""filterlab - digital filter synthesis and analysis.

Turn a :class:`FilterSpecification` into impulse response, frequency
response, poles/zeros and group delay with :func:`compute`.
"""

__version__ = "0.1.0"

# Specification, configuration and results
from .core import (
    DEFAULT_CONFIG,
    DesignConfig,
    FilterResult,
    FilterSpecification,
    FilterType,
    FrequencyResponse,
    IIRMethod,
    Implementation,
    InvalidSpecificationError,
    QualityFlags,
    WindowKind,
)

# Design and analysis primitives
from .dsp import (
    Complex,
    DivisionByNearZero,
    RootSet,
    design_iir,
    estimate_order,
    extract_roots,
    fir_window_design,
    get_window,
    group_delay,
    ideal_impulse_response,
    response_from_impulse,
    transition_width,
)

# Entry point
from .engine import compute, design_coefficients

# Logging
from .logging import configure_logging, get_logger, set_log_level

__all__ = [
    "__version__",
    # Core
    "FilterType",
    "Implementation",
    "WindowKind",
    "IIRMethod",
    "FilterSpecification",
    "DesignConfig",
    "DEFAULT_CONFIG",
    "FrequencyResponse",
    "QualityFlags",
    "FilterResult",
    "InvalidSpecificationError",
    # DSP
    "Complex",
    "DivisionByNearZero",
    "RootSet",
    "get_window",
    "ideal_impulse_response",
    "fir_window_design",
    "design_iir",
    "extract_roots",
    "response_from_impulse",
    "group_delay",
    "estimate_order",
    "transition_width",
    # Engine
    "compute",
    "design_coefficients",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
