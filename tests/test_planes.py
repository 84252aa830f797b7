import numpy as np
import pytest

from processing import planes
from processing.errors import InvalidImageError


def test_split_planes_copies_each_channel(rgb_image):
    parts = planes.split_planes(rgb_image)
    assert len(parts) == 3
    for idx, plane in enumerate(parts):
        assert plane.shape == rgb_image.shape[:2]
        assert np.array_equal(plane, rgb_image[..., idx])
    parts[0][:] = 0
    assert rgb_image[..., 0].any()


def test_split_skips_alpha(rgba_image):
    assert len(planes.split_planes(rgba_image)) == 3
    assert np.array_equal(planes.alpha_plane(rgba_image), rgba_image[..., 3])


def test_split_gray_yields_one_plane():
    gray = np.arange(12, dtype=np.uint8).reshape(3, 4)
    parts = planes.split_planes(gray)
    assert len(parts) == 1
    assert np.array_equal(parts[0], gray)
    assert planes.alpha_plane(gray) is None


def test_recombine_inverts_split(rgb_image, rgba_image):
    assert np.array_equal(planes.recombine(planes.split_planes(rgb_image)), rgb_image)
    rebuilt = planes.recombine(planes.split_planes(rgba_image), planes.alpha_plane(rgba_image))
    assert np.array_equal(rebuilt, rgba_image)


def test_recombine_rejects_mismatched_planes():
    with pytest.raises(InvalidImageError):
        planes.recombine([np.zeros((2, 2), np.uint8), np.zeros((2, 3), np.uint8)])
    with pytest.raises(InvalidImageError):
        planes.recombine([])


def test_replace_plane_touches_one_channel(rgba_image):
    flat = np.zeros(rgba_image.shape[:2], dtype=np.uint8)
    out = planes.replace_plane(rgba_image, 1, flat)
    assert not out[..., 1].any()
    assert np.array_equal(out[..., [0, 2, 3]], rgba_image[..., [0, 2, 3]])
    with pytest.raises(InvalidImageError):
        planes.replace_plane(rgba_image, 3, flat)
