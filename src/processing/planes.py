import numpy as np

from . import io_utils
from .errors import InvalidImageError


def split_planes(img):
    """One independent single-channel copy per non-alpha channel."""
    io_utils.validate_image(img)
    if img.ndim == 2:
        return [img.copy()]
    return [np.ascontiguousarray(img[..., idx]).copy() for idx in range(min(img.shape[2], 3))]


def alpha_plane(img):
    """Copy of the alpha channel, or None when the image has none."""
    if img.ndim == 3 and img.shape[2] == 4:
        return img[..., 3].copy()
    return None


def recombine(planes, alpha=None):
    """Write each plane into its channel of a freshly allocated image."""
    if not planes:
        raise InvalidImageError("Need at least one plane to recombine.")
    layers = list(planes) + ([alpha] if alpha is not None else [])
    shape = layers[0].shape
    for plane in layers:
        io_utils.validate_image(plane, channels=(1,))
        if plane.shape != shape:
            raise InvalidImageError(f"Plane shape {plane.shape} does not match {shape}")
    out = np.empty(shape + (len(layers),), dtype=np.uint8)
    for idx, plane in enumerate(layers):
        out[..., idx] = plane
    return out


def replace_plane(img, index, plane):
    """Copy of ``img`` with channel ``index`` swapped for ``plane``."""
    planes = split_planes(img)
    if not 0 <= index < len(planes):
        raise InvalidImageError(f"Channel index {index} out of range for {len(planes)} planes")
    planes[index] = plane
    out = recombine(planes, alpha_plane(img))
    return out[..., 0] if img.ndim == 2 else out
