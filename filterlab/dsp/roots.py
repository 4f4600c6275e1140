"""Polynomial root extraction for pole/zero reporting.

Two strategies are available:

- ``"simplified"``: closed-form roots for linear and quadratic polynomials.
  Anything of higher degree gets placeholder roots spread evenly on a circle
  and the result is marked approximate. Those placeholders carry no
  numerical meaning and must not be used for stability analysis.
- ``"companion"``: eigenvalues of the companion matrix (``numpy.roots``),
  valid for every degree.

Coefficients are given highest power first.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..core import PLACEHOLDER_RADIUS
from ..logging import get_logger
from .complex_math import Complex, from_polar
from .utils import check_1d_array

logger = get_logger(__name__)


@dataclass(frozen=True)
class RootSet:
    """Roots of a polynomial and whether they are only placeholders."""

    roots: Tuple[Complex, ...]
    approximate: bool = False

    def __len__(self) -> int:
        return len(self.roots)

    def as_array(self) -> np.ndarray:
        """Roots as a numpy complex array."""
        return np.array([r.to_complex() for r in self.roots], dtype=complex)


def strip_leading_zeros(coeffs) -> np.ndarray:
    """Drop exactly-zero leading coefficients."""
    coeffs = check_1d_array(coeffs)
    nonzero = np.flatnonzero(coeffs)
    if nonzero.size == 0:
        return coeffs[:0]
    return coeffs[nonzero[0] :]


def _linear_root(coeffs: np.ndarray) -> Tuple[Complex, ...]:
    return (Complex(-coeffs[1] / coeffs[0], 0.0),)


def _quadratic_roots(coeffs: np.ndarray) -> Tuple[Complex, ...]:
    a, b, c = (float(v) for v in coeffs)
    disc = b * b - 4.0 * a * c
    if disc >= 0:
        root = math.sqrt(disc)
        return (Complex((-b + root) / (2 * a)), Complex((-b - root) / (2 * a)))
    root = math.sqrt(-disc)
    re = -b / (2 * a)
    im = root / (2 * a)
    return (Complex(re, im), Complex(re, -im))


def placeholder_roots(degree: int, radius: float = PLACEHOLDER_RADIUS) -> Tuple[Complex, ...]:
    """``degree`` points evenly spaced on a circle of ``radius``."""
    return tuple(from_polar(radius, 2.0 * math.pi * k / degree) for k in range(degree))


def extract_roots(
    coeffs,
    method: str = "simplified",
    placeholder_radius: float = PLACEHOLDER_RADIUS,
) -> RootSet:
    """Find the roots of a polynomial.

    Args:
        coeffs: Polynomial coefficients, highest power first.
        method: "simplified" or "companion".
        placeholder_radius: Circle radius for placeholder roots.

    Returns:
        RootSet with ``len(coeffs) - 1`` roots (after stripping leading
        zeros), flagged approximate when placeholders were used.

    Raises:
        ValueError: If ``method`` is unknown.
    """
    if method not in ("simplified", "companion"):
        raise ValueError(f"Unknown root method: {method}")

    coeffs = strip_leading_zeros(coeffs)
    degree = len(coeffs) - 1
    if degree <= 0:
        return RootSet(())

    if method == "companion":
        return RootSet(tuple(Complex.from_builtin(r) for r in np.roots(coeffs)))

    if degree == 1:
        return RootSet(_linear_root(coeffs))
    if degree == 2:
        return RootSet(_quadratic_roots(coeffs))

    logger.debug("Degree %d polynomial: using placeholder roots", degree)
    return RootSet(placeholder_roots(degree, placeholder_radius), approximate=True)


__all__ = ["RootSet", "strip_leading_zeros", "placeholder_roots", "extract_roots"]
