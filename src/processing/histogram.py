from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np

from . import basic_ops, io_utils
from .config import APP_CONFIG, HISTOGRAM_BINS
from .errors import EmptyImageError, InvalidImageError
from .logging_config import get_logger

logger = get_logger(__name__)

# below this many rows the thread pool costs more than it saves
MIN_ROWS_PER_BAND = 64


@dataclass(frozen=True)
class HistogramSet:
    """Per-channel 256-bin counts plus the luma histogram of the same pixels."""

    channels: List[np.ndarray]
    luma: np.ndarray
    pixel_count: int


def _count(img):
    """Counts for one band of rows: one array per channel, then luma."""
    counts = []
    if img.ndim == 2:
        counts.append(np.bincount(img.ravel(), minlength=HISTOGRAM_BINS))
    else:
        for idx in range(img.shape[2]):
            counts.append(np.bincount(img[..., idx].ravel(), minlength=HISTOGRAM_BINS))
    luma = basic_ops.rgb_to_grayscale(img)
    counts.append(np.bincount(luma.ravel(), minlength=HISTOGRAM_BINS))
    return [c.astype(np.int64) for c in counts]


def build(img, workers: Optional[int] = None) -> HistogramSet:
    """Histogram every channel of ``img``; rows are counted in bands when workers > 1."""
    io_utils.validate_image(img)
    if img.size == 0:
        raise EmptyImageError("Cannot build a histogram of an image with no pixels.")
    workers = APP_CONFIG.histogram_workers if workers is None else max(1, int(workers))
    rows = img.shape[0]
    bands = min(workers, max(1, rows // MIN_ROWS_PER_BAND))

    if bands <= 1:
        totals = _count(img)
    else:
        edges = np.linspace(0, rows, bands + 1, dtype=int)
        chunks = [img[start:stop] for start, stop in zip(edges[:-1], edges[1:])]
        with ThreadPoolExecutor(max_workers=bands) as pool:
            partials = list(pool.map(_count, chunks))
        totals = [np.sum(parts, axis=0) for parts in zip(*partials)]
        logger.debug("Counted %d rows in %d bands", rows, bands)

    h, w = img.shape[:2]
    return HistogramSet(channels=totals[:-1], luma=totals[-1], pixel_count=h * w)


def build_map(hist):
    """Equalization table from the cumulative distribution, integer arithmetic only."""
    hist = np.asarray(hist, dtype=np.int64)
    if hist.shape != (HISTOGRAM_BINS,):
        raise InvalidImageError(f"Expected {HISTOGRAM_BINS} bins, got shape {hist.shape}")
    total = int(hist.sum())
    if total <= 0:
        raise EmptyImageError("Cannot equalize an empty histogram.")
    cdf = np.cumsum(hist)
    table = (cdf * 255 + total // 2) // total
    return table.astype(np.uint8)


def apply_map(plane, table):
    """Replace each sample of a single-channel image by ``table[sample]``."""
    io_utils.validate_image(plane, channels=(1,))
    table = np.asarray(table, dtype=np.uint8)
    if table.shape != (HISTOGRAM_BINS,):
        raise InvalidImageError(f"Expected a {HISTOGRAM_BINS}-entry table, got shape {table.shape}")
    if plane.size == 0:
        return plane.copy()
    return cv2.LUT(plane, table)


def equalize(plane):
    """Equalize a single-channel image; returns (image, table)."""
    io_utils.validate_image(plane, channels=(1,))
    table = build_map(np.bincount(plane.ravel(), minlength=HISTOGRAM_BINS))
    return apply_map(plane, table), table


def histogram_goodness(hist):
    """Heuristic with a short justification about contrast/brightness spread."""
    hist = np.asarray(hist, dtype=np.float64)
    total = np.sum(hist)
    if total == 0:
        return "Empty histogram."
    spread = np.count_nonzero(hist) / 256.0
    low_mass = float(np.sum(hist[:64])) / total
    high_mass = float(np.sum(hist[192:])) / total
    p = hist / total
    entropy = -np.sum(p * np.log2(p + 1e-9))
    if spread > 0.7 and 0.1 < low_mass < 0.5 and 0.1 < high_mass < 0.5:
        return f"Histogram is well-distributed (spread={spread:.2f}, entropy={entropy:.2f}); contrast looks good."
    if spread > 0.4:
        return f"Histogram is moderately spread (spread={spread:.2f}); contrast is acceptable."
    if low_mass > 0.6:
        return f"Histogram is concentrated in dark tones (low_mass={low_mass:.2f}); image may be underexposed."
    if high_mass > 0.6:
        return f"Histogram is concentrated in bright tones (high_mass={high_mass:.2f}); image may be overexposed."
    return f"Histogram is narrow (spread={spread:.2f}, entropy={entropy:.2f}); consider equalization to improve contrast."
