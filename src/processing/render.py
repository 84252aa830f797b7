import cv2
import numpy as np

from .config import HISTOGRAM_BINS, HISTOGRAM_CANVAS_SIZE
from .errors import InvalidScaleError
from .histogram import HistogramSet

BAND_COUNT = 4
BAND_HEIGHT = HISTOGRAM_CANVAS_SIZE // BAND_COUNT
BIN_WIDTH = HISTOGRAM_CANVAS_SIZE // HISTOGRAM_BINS

# R, G, B, luma, top to bottom
BAND_COLORS = ((230, 57, 70), (42, 157, 80), (49, 110, 206), (220, 220, 220))


def _bands(histograms: HistogramSet):
    if len(histograms.channels) >= 3:
        return list(histograms.channels[:3]) + [histograms.luma]
    # single-channel images only fill the luma band
    return [None, None, None, histograms.luma]


def band_max(histograms: HistogramSet) -> int:
    """Tallest bin among the drawn bands; alpha is never drawn so it never sets the scale."""
    return max(int(counts.max()) for counts in _bands(histograms) if counts is not None)


def common_scale(*histograms: HistogramSet) -> int:
    """Tallest drawn bin over every histogram given."""
    return max(band_max(h) for h in histograms)


def _draw_band(canvas, counts, band, scale, color):
    bottom = (band + 1) * BAND_HEIGHT - 1
    heights = np.minimum(np.rint(counts * BAND_HEIGHT / scale), BAND_HEIGHT).astype(int)
    for level, height in enumerate(heights):
        if height <= 0:
            continue
        x = level * BIN_WIDTH
        cv2.rectangle(canvas, (x, bottom - height + 1), (x + BIN_WIDTH - 1, bottom), color, thickness=-1)


def render_histogram(histograms: HistogramSet, scale=None):
    """Draw the R, G, B and luma histograms as four stacked bands; returns (canvas, scale)."""
    if scale is None:
        scale = band_max(histograms)
    if scale <= 0:
        raise InvalidScaleError(f"Histogram scale must be positive, got {scale}")
    canvas = np.zeros((HISTOGRAM_CANVAS_SIZE, HISTOGRAM_CANVAS_SIZE, 3), dtype=np.uint8)
    for band, counts in enumerate(_bands(histograms)):
        if counts is not None:
            _draw_band(canvas, np.asarray(counts, dtype=np.float64), band, scale, BAND_COLORS[band])
    return canvas, int(scale)
