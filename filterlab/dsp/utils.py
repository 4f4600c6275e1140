"""Utility functions for signal processing.

Provides helper routines for input validation, the normalized frequency
grid and phase bookkeeping.
"""

import math
from typing import Sequence

import numpy as np


def check_1d_array(x) -> np.ndarray:
    """Validate and cast input to 1D float64 array.

    Args:
        x: Input array-like object.

    Returns:
        1D float64 numpy array.

    Raises:
        ValueError: If input is not 1D, contains NaN, or contains Inf.
    """
    arr = np.asarray(x, dtype=float)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    elif arr.ndim > 1:
        raise ValueError(f"Expected 1D array, got {arr.ndim}D array")
    if np.any(np.isnan(arr)):
        raise ValueError("Input contains NaN values")
    if np.any(np.isinf(arr)):
        raise ValueError("Input contains Inf values")
    return arr


def design_frequency_grid(num_points: int) -> np.ndarray:
    """Generate the analysis grid ω_k = kπ/(K-1), k = 0..K-1.

    Args:
        num_points: Number of grid points K (at least 2).

    Returns:
        Angular frequencies in rad/sample from 0 to π inclusive.
    """
    if num_points < 2:
        raise ValueError(f"num_points must be >= 2, got {num_points}")
    return np.arange(num_points, dtype=float) * np.pi / (num_points - 1)


def wrap_phase(phase: np.ndarray) -> np.ndarray:
    """Map angles into (-π, π]."""
    wrapped = np.angle(np.exp(1j * np.asarray(phase, dtype=float)))
    return np.where(wrapped <= -np.pi, np.pi, wrapped)


def unwrap_phase(phases: Sequence[float]) -> list[float]:
    """Remove 2π jumps from a phase sequence.

    Each sample after the first is shifted by multiples of 2π until its
    difference to the previous (already unwrapped) sample lies in (-π, π].

    Args:
        phases: Phase samples in radians.

    Returns:
        Unwrapped phase samples.
    """
    unwrapped: list[float] = []
    for value in phases:
        if unwrapped:
            previous = unwrapped[-1]
            while value - previous > math.pi:
                value -= 2.0 * math.pi
            while value - previous <= -math.pi:
                value += 2.0 * math.pi
        unwrapped.append(value)
    return unwrapped
