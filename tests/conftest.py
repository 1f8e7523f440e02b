import numpy as np
import pytest

from motologo.runlength import PixelGrid


def distinct_row(count):
    """``count`` pixels where no two neighbours are equal."""
    i = np.arange(count)
    return PixelGrid(count, 1, np.stack([i & 0xFF, (i >> 8) & 0xFF, np.full(count, 7)], axis=1))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sample_grid(rng):
    # few colours, so the scan sees both raw and repeat runs
    palette = np.array([(255, 0, 0), (0, 255, 0), (0, 0, 255)], dtype=np.uint8)
    return PixelGrid(17, 9, palette[rng.integers(0, 3, 17 * 9)])
