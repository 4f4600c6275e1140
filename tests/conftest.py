"""Pytest configuration and shared fixtures for filterlab tests.

This module provides:
- A deterministic numpy RNG fixture
- Small specification factories used across test modules
"""

import os

import numpy as np
import pytest

from filterlab import FilterSpecification


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function")
def lowpass_iir() -> FilterSpecification:
    """Order-4 Butterworth lowpass at 0.3."""
    return FilterSpecification(type="lowpass", implementation="iir", cutoff1=0.3, order=4)


@pytest.fixture(scope="function")
def lowpass_fir() -> FilterSpecification:
    """51-tap Hamming lowpass at 0.25."""
    return FilterSpecification(
        type="lowpass", implementation="fir", cutoff1=0.25, impulse_length=51
    )
