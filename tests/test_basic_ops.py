import numpy as np
import pytest

from processing import basic_ops
from processing.errors import EmptyImageError, InvalidThresholdError


def test_primaries_luma_and_average(primaries_image):
    gray = basic_ops.rgb_to_grayscale(primaries_image)
    assert gray.dtype == np.uint8
    assert gray.tolist() == [[76, 150], [29, 255]]
    # (76 + 150 + 29 + 255) // 4
    assert basic_ops.average_level(gray) == 127


def test_primaries_default_threshold(primaries_image):
    binary, level, note = basic_ops.grayscale_to_binary(primaries_image)
    assert level == 127
    assert binary.tolist() == [[0, 255], [0, 255]]
    assert "127" in note and "mean" in note


def test_binarize_is_strictly_greater():
    gray = np.array([[99, 100, 101]], dtype=np.uint8)
    assert basic_ops.binarize(gray, 100).tolist() == [[0, 0, 255]]


def test_binarize_outputs_only_black_and_white(rgb_image):
    gray = basic_ops.to_luma(rgb_image)
    for level in (0, 64, 200, 255):
        values = set(np.unique(basic_ops.binarize(gray, level)).tolist())
        assert values <= {0, 255}
    assert not basic_ops.binarize(gray, 255).any()


@pytest.mark.parametrize("level", [-1, 256, 1.5, "10", True])
def test_binarize_rejects_bad_levels(level):
    with pytest.raises(InvalidThresholdError):
        basic_ops.binarize(np.zeros((2, 2), dtype=np.uint8), level)


def test_manual_threshold_is_reported(rgb_image):
    _, level, note = basic_ops.grayscale_to_binary(rgb_image, threshold=10)
    assert level == 10
    assert "manual" in note


def test_average_truncates():
    assert basic_ops.average_level(np.array([[1, 2]], dtype=np.uint8)) == 1


def test_average_of_large_image_does_not_overflow():
    img = np.full((1024, 1024), 255, dtype=np.uint8)
    assert basic_ops.average_level(img) == 255


def test_empty_image_is_rejected():
    with pytest.raises(EmptyImageError):
        basic_ops.average_level(np.zeros((0, 4), dtype=np.uint8))
    with pytest.raises(EmptyImageError):
        basic_ops.grayscale_to_binary(np.zeros((0, 4, 3), dtype=np.uint8))


def test_grayscale_ignores_alpha(rgb_image, rgba_image):
    assert np.array_equal(basic_ops.rgb_to_grayscale(rgba_image), basic_ops.rgb_to_grayscale(rgb_image))


def test_grayscale_of_gray_is_a_copy():
    gray = np.arange(16, dtype=np.uint8).reshape(4, 4)
    out = basic_ops.ensure_grayscale(gray)
    out[0, 0] = 99
    assert gray[0, 0] == 0
