import numpy as np
import pytest

from processing import histogram
from processing.errors import EmptyImageError, InvalidImageError


def test_counts_are_conserved(rgb_image, rgba_image):
    for img in (rgb_image, rgba_image):
        hist = histogram.build(img)
        pixels = img.shape[0] * img.shape[1]
        assert hist.pixel_count == pixels
        assert len(hist.channels) == img.shape[2]
        for counts in hist.channels + [hist.luma]:
            assert counts.shape == (256,)
            assert int(counts.sum()) == pixels


def test_channel_counts_match_numpy(rgb_image):
    hist = histogram.build(rgb_image)
    expected, _ = np.histogram(rgb_image[..., 2], bins=256, range=(0, 256))
    assert np.array_equal(hist.channels[2], expected)


def test_all_black_image():
    img = np.zeros((5, 7, 3), dtype=np.uint8)
    hist = histogram.build(img)
    for counts in hist.channels + [hist.luma]:
        assert counts[0] == 35
        assert not counts[1:].any()
    table = histogram.build_map(hist.luma)
    assert table[0] == 255
    assert np.all(table == 255)


def test_row_bands_match_single_pass():
    rng = np.random.default_rng(7)
    img = rng.integers(0, 256, size=(300, 40, 3), dtype=np.uint8)
    serial = histogram.build(img, workers=1)
    banded = histogram.build(img, workers=4)
    for a, b in zip(serial.channels + [serial.luma], banded.channels + [banded.luma]):
        assert np.array_equal(a, b)


def test_empty_image_is_rejected():
    with pytest.raises(EmptyImageError):
        histogram.build(np.zeros((0, 3, 3), dtype=np.uint8))
    with pytest.raises(EmptyImageError):
        histogram.build_map(np.zeros(256, dtype=np.int64))


def test_map_uses_midpoint_rounding():
    hist = np.zeros(256, dtype=np.int64)
    hist[0] = 2
    hist[255] = 2
    table = histogram.build_map(hist)
    # (2 * 255 + 2) // 4
    assert table[0] == 128
    assert np.all(table[1:255] == 128)
    assert table[255] == 255


def test_map_is_monotonic(rgb_image):
    table = histogram.build_map(histogram.build(rgb_image).luma)
    assert table.dtype == np.uint8
    assert np.all(np.diff(table.astype(int)) >= 0)
    assert table[255] == 255


def test_equalized_cdf_follows_a_linear_ramp():
    rng = np.random.default_rng(3)
    plane = rng.integers(100, 141, size=(64, 64), dtype=np.uint8)
    out, table = histogram.equalize(plane)
    assert np.array_equal(out, table[plane])
    assert out.max() == 255
    assert out.min() < 20

    counts = np.bincount(out.ravel(), minlength=256)
    cdf = np.cumsum(counts) / out.size
    assert np.all(np.diff(cdf) >= 0)
    for level in np.unique(out):
        assert abs(cdf[level] - level / 255.0) <= 0.5 / 255.0 + 1e-12


def test_apply_map_needs_single_channel(rgb_image):
    table = np.arange(256, dtype=np.uint8)
    with pytest.raises(InvalidImageError):
        histogram.apply_map(rgb_image, table)
    with pytest.raises(InvalidImageError):
        histogram.apply_map(rgb_image[..., 0].copy(), table[:10])


def test_identity_map_leaves_plane_alone(rgb_image):
    plane = rgb_image[..., 1].copy()
    assert np.array_equal(histogram.apply_map(plane, np.arange(256, dtype=np.uint8)), plane)


def test_goodness_messages():
    assert histogram.histogram_goodness(np.zeros(256)) == "Empty histogram."
    narrow = np.zeros(256)
    narrow[10:20] = 5
    assert "dark tones" in histogram.histogram_goodness(narrow)
