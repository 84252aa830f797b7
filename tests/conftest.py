import numpy as np
import pytest


@pytest.fixture
def rgb_image():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(32, 48, 3), dtype=np.uint8)


@pytest.fixture
def rgba_image(rgb_image):
    rng = np.random.default_rng(99)
    alpha = rng.integers(0, 256, size=rgb_image.shape[:2] + (1,), dtype=np.uint8)
    return np.concatenate([rgb_image, alpha], axis=2)


@pytest.fixture
def primaries_image():
    """Red, green / blue, white."""
    return np.array(
        [[[255, 0, 0], [0, 255, 0]], [[0, 0, 255], [255, 255, 255]]],
        dtype=np.uint8,
    )


@pytest.fixture
def rgb_grid():
    """Every combination of levels 0, 15, ..., 255 as a column of pixels."""
    levels = np.arange(0, 256, 15)
    r, g, b = np.meshgrid(levels, levels, levels, indexing="ij")
    return np.stack([r, g, b], axis=-1).reshape(-1, 1, 3).astype(np.uint8)


@pytest.fixture(scope="session")
def rgb_dense_grid():
    """Every combination of levels 0, 3, ..., 255: about 636k pixels."""
    levels = np.arange(0, 256, 3)
    r, g, b = np.meshgrid(levels, levels, levels, indexing="ij")
    return np.stack([r, g, b], axis=-1).reshape(-1, 1, 3).astype(np.uint8)
