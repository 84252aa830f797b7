import numpy as np
import cv2

from . import io_utils
from .errors import EmptyImageError, InvalidThresholdError


def rgb_to_grayscale(img):
    """Return uint8 luma (0.299R + 0.587G + 0.114B); pass through a copy if already 2D."""
    io_utils.validate_image(img)
    if img.ndim == 2:
        return img.copy()
    if img.size == 0:
        return np.zeros(img.shape[:2], dtype=np.uint8)
    return cv2.cvtColor(np.ascontiguousarray(img[..., :3]), cv2.COLOR_RGB2GRAY)


to_luma = rgb_to_grayscale


def ensure_grayscale(img):
    """Wrapper to always produce a single-channel uint8 image."""
    return rgb_to_grayscale(img)


def average_level(gray):
    """Truncated integer mean of all gray samples."""
    gray = ensure_grayscale(gray)
    if gray.size == 0:
        raise EmptyImageError("Cannot average an image with no pixels.")
    total = int(gray.sum(dtype=np.int64))
    return total // gray.size


def check_level(level):
    if isinstance(level, bool) or not isinstance(level, (int, np.integer)):
        raise InvalidThresholdError(f"Threshold must be an integer, got {level!r}")
    if not 0 <= level <= 255:
        raise InvalidThresholdError(f"Threshold must be within 0..255, got {level}")
    return int(level)


def binarize(gray, level):
    """255 where a sample is strictly above ``level``, 0 elsewhere."""
    gray = ensure_grayscale(gray)
    level = check_level(level)
    if gray.size == 0:
        return gray
    # THRESH_BINARY keeps the strict > rule
    _, binary = cv2.threshold(gray, level, 255, cv2.THRESH_BINARY)
    return binary


def grayscale_to_binary(img, threshold=None):
    """Binary image using the given level or the mean gray level, plus an Otsu comparison note."""
    gray = ensure_grayscale(img)
    if gray.size == 0:
        raise EmptyImageError("Cannot binarize an image with no pixels.")
    t = average_level(gray) if threshold is None else check_level(threshold)
    binary = binarize(gray, t)
    otsu_t, _ = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    diff = abs(t - float(otsu_t))
    source = "mean" if threshold is None else "manual"
    if diff < 5:
        eval_note = f"Threshold {t} ({source}) looks optimal (Otsu={otsu_t:.0f}, diff={diff:.1f})."
    else:
        eval_note = f"Threshold {t} ({source}) likely suboptimal (Otsu={otsu_t:.0f}, diff={diff:.1f}); consider Otsu."
    return binary, t, eval_note
