"""Pytest configuration and fixtures for iso-contour tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


@pytest.fixture
def square_blob():
    """4x4 field with a 2x2 block above 0.5 in the middle."""
    return np.array(
        [
            [0.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 1.0, 0.0],
            [0.0, 1.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
        ]
    )


@pytest.fixture
def ring_field():
    """7x7 field: ring of ones around a single zero sample at (3, 3)."""
    field = np.zeros((7, 7))
    field[1:6, 1:6] = 1.0
    field[3, 3] = 0.0
    return field


@pytest.fixture
def disk_field():
    """41x41 field whose level -10 is a circle of radius 10 around (20, 20)."""
    yy, xx = np.mgrid[0:41, 0:41]
    return -np.hypot(xx - 20.0, yy - 20.0)


@pytest.fixture
def random_field():
    rng = np.random.default_rng(42)
    return rng.random((24, 31))
