"""Polynomial algebra on coefficient arrays.

Polynomials are stored highest power first, which for transfer functions in
z^-1 means ``c[i]`` multiplies z^-i. Multiplication is convolution of the
coefficient sequences; addition aligns both sequences at index 0.
"""

from typing import Iterable, Sequence

import numpy as np

from .utils import check_1d_array


def convolve(a, b) -> np.ndarray:
    """Multiply two polynomials.

    Computes c[n] = sum_k a[k] * b[n-k] using the direct O(N*M) method.

    Args:
        a: First coefficient sequence (1D).
        b: Second coefficient sequence (1D).

    Returns:
        Coefficients of the product, length len(a) + len(b) - 1.

    Example:
        >>> convolve([1, 2], [1, 3])
        array([1., 5., 6.])
    """
    a = check_1d_array(a)
    b = check_1d_array(b)
    if a.size == 0 or b.size == 0:
        raise ValueError("Cannot convolve an empty coefficient sequence")
    return np.convolve(a, b, mode="full")


def add(a, b) -> np.ndarray:
    """Add two coefficient sequences element-wise, zero-padding the shorter."""
    a = check_1d_array(a)
    b = check_1d_array(b)
    result = np.zeros(max(a.size, b.size), dtype=float)
    result[: a.size] += a
    result[: b.size] += b
    return result


def _real_factor(root: complex) -> np.ndarray:
    return np.array([1.0, -root.real])


def _quadratic_factor(root: complex) -> np.ndarray:
    return np.array([1.0, -2.0 * root.real, root.real**2 + root.imag**2])


def root_factors(roots: Iterable[complex], atol: float = 1e-8) -> list[np.ndarray]:
    """Group roots into real first- and second-order factors.

    Real roots give ``(1, -r)``; each complex root is matched with its
    conjugate and the pair gives ``(1, -2 Re r, |r|^2)``.

    Args:
        roots: Roots of a real polynomial.
        atol: Tolerance for treating a root as real and for conjugate matching.

    Returns:
        List of real factor polynomials.

    Raises:
        ValueError: If a complex root has no conjugate partner.
    """
    remaining = [complex(r) for r in roots]
    factors: list[np.ndarray] = []
    while remaining:
        root = remaining.pop(0)
        if abs(root.imag) <= atol:
            factors.append(_real_factor(root))
            continue
        # Closest candidate, so clustered roots pair with their own conjugate
        distances = [abs(cand - root.conjugate()) for cand in remaining]
        partner = int(np.argmin(distances)) if distances else None
        if partner is None or not np.isclose(remaining[partner], root.conjugate(), atol=atol):
            raise ValueError(f"Complex root {root} has no conjugate partner")
        remaining.pop(partner)
        factors.append(_quadratic_factor(root))
    return factors


def poly_from_roots(roots: Sequence[complex], atol: float = 1e-8) -> np.ndarray:
    """Expand ``prod (z - r)`` into real coefficients via repeated convolution.

    Args:
        roots: Roots closed under conjugation.
        atol: See :func:`root_factors`.

    Returns:
        Monic coefficient array of length len(roots) + 1.
    """
    coeffs = np.array([1.0])
    for factor in root_factors(roots, atol=atol):
        coeffs = convolve(coeffs, factor)
    return coeffs


__all__ = ["convolve", "add", "root_factors", "poly_from_roots"]
