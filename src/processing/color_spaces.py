"""Forward/inverse conversions between RGB and the HSV, HSL, HSI and YUV spaces.

Every conversion works on float arrays shaped ``(..., 3)`` with components in
[0, 1] (u and v of YUV in [-0.5, 0.5]). ``encode`` and ``decode`` wrap them for
8-bit images: the three coordinates are stored one per channel, quantized to
0..255, and an alpha channel, if present, is carried over untouched.
"""
from enum import Enum
from typing import Tuple

import numpy as np

from . import io_utils
from .errors import InvalidImageError, UnknownColorSpaceError

PixelSample = Tuple[int, ...]

TWO_PI = 2.0 * np.pi
THIRD_TURN = TWO_PI / 3.0


class ColorSpace(Enum):
    RGB = "rgb"
    HSV = "hsv"
    HSL = "hsl"
    HSI = "hsi"
    YUV = "yuv"

    @classmethod
    def parse(cls, name) -> "ColorSpace":
        """Case-sensitive lookup; unknown names are an error, never a default."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownColorSpaceError(name) from None

    @property
    def channel_names(self) -> Tuple[str, str, str]:
        return tuple(self.value.upper())

    @property
    def luminance_index(self):
        """Channel carrying brightness, or None when every channel does (RGB)."""
        if self is ColorSpace.RGB:
            return None
        if self is ColorSpace.YUV:
            return 0
        return 2


def _split(rgb):
    return rgb[..., 0], rgb[..., 1], rgb[..., 2]


def _hue(r, g, b, mx, d):
    """60-degree sector hue in [0, 1); 0 for achromatic pixels."""
    safe = np.where(d > 0, d, 1.0)
    h = np.select(
        [mx == r, mx == g],
        [(g - b) / safe + np.where(g < b, 6.0, 0.0), (b - r) / safe + 2.0],
        default=(r - g) / safe + 4.0,
    )
    return np.where(d > 0, h / 6.0, 0.0)


def _from_sector(h, c, m):
    """Rebuild RGB from hue, chroma and offset using the six 60-degree sectors."""
    h6 = h * 6.0
    x = c * (1.0 - np.abs(h6 % 2.0 - 1.0))
    sector = np.floor(h6).astype(np.int64) % 6
    zero = np.zeros_like(c)
    r = np.choose(sector, [c, x, zero, zero, x, c])
    g = np.choose(sector, [x, c, c, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, c, c, x])
    return np.stack([r + m, g + m, b + m], axis=-1)


def rgb_to_hsv(rgb):
    r, g, b = _split(rgb)
    mx = rgb.max(axis=-1)
    d = mx - rgb.min(axis=-1)
    s = np.where(mx > 0, d / np.where(mx > 0, mx, 1.0), 0.0)
    return np.stack([_hue(r, g, b, mx, d), s, mx], axis=-1)


def hsv_to_rgb(hsv):
    h, s, v = _split(hsv)
    c = v * s
    return _from_sector(h, c, v - c)


def rgb_to_hsl(rgb):
    r, g, b = _split(rgb)
    mx = rgb.max(axis=-1)
    mn = rgb.min(axis=-1)
    d = mx - mn
    l = (mx + mn) / 2.0
    span = 1.0 - np.abs(2.0 * l - 1.0)
    # span is 0 exactly when l is 0 or 1, and then d is 0 as well
    s = np.where((d > 0) & (span > 0), d / np.where(span > 0, span, 1.0), 0.0)
    return np.stack([_hue(r, g, b, mx, d), s, l], axis=-1)


def hsl_to_rgb(hsl):
    h, s, l = _split(hsl)
    c = (1.0 - np.abs(2.0 * l - 1.0)) * s
    return _from_sector(h, c, l - c / 2.0)


def rgb_to_hsi(rgb):
    """HSI with the arc-cosine hue: acos of the symmetric difference ratio."""
    r, g, b = _split(rgb)
    mn = rgb.min(axis=-1)
    d = rgb.max(axis=-1) - mn
    i = (r + g + b) / 3.0
    chromatic = (d > 0) & (i > 0)
    s = np.where(chromatic, 1.0 - mn / np.where(i > 0, i, 1.0), 0.0)

    num = 0.5 * ((r - g) + (r - b))
    den = np.sqrt(np.maximum((r - g) ** 2 + (r - b) * (g - b), 0.0))
    theta = np.arccos(np.clip(num / np.where(den > 0, den, 1.0), -1.0, 1.0))
    h = np.where(b > g, TWO_PI - theta, theta) / TWO_PI
    h = np.where(chromatic & (den > 0), h, 0.0)
    return np.stack([h, s, i], axis=-1)


def hsi_to_rgb(hsi):
    """Inverse of rgb_to_hsi over the sectors [0, 120), [120, 240), [240, 360]."""
    h, s, i = _split(hsi)
    angle = h * TWO_PI
    sector = np.minimum(np.floor(angle / THIRD_TURN), 2).astype(np.int64)
    local = angle - sector * THIRD_TURN
    low = i * (1.0 - s)
    high = i * (1.0 + s * np.cos(local) / np.cos(np.pi / 3.0 - local))
    rest = 3.0 * i - (low + high)
    r = np.choose(sector, [high, low, rest])
    g = np.choose(sector, [rest, high, low])
    b = np.choose(sector, [low, rest, high])
    return np.stack([r, g, b], axis=-1)


YUV_MATRIX = np.array(
    [
        [0.299, 0.587, 0.114],
        [-0.169, -0.331, 0.5],
        [0.5, -0.419, -0.081],
    ]
)
YUV_INVERSE = np.linalg.inv(YUV_MATRIX)


def rgb_to_yuv(rgb):
    return rgb @ YUV_MATRIX.T


def yuv_to_rgb(yuv):
    return yuv @ YUV_INVERSE.T


_CODECS = {
    ColorSpace.HSV: (rgb_to_hsv, hsv_to_rgb),
    ColorSpace.HSL: (rgb_to_hsl, hsl_to_rgb),
    ColorSpace.HSI: (rgb_to_hsi, hsi_to_rgb),
    ColorSpace.YUV: (rgb_to_yuv, yuv_to_rgb),
}

# YUV stores u and v centered on 128
_OFFSETS = {ColorSpace.YUV: np.array([0.0, 128.0, 128.0])}
_NO_OFFSET = np.zeros(3)


def _quantize(values, offset):
    scaled = np.rint(values * 255.0 + offset)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def _dequantize(samples, offset):
    return (samples.astype(np.float64) - offset) / 255.0


def _color_parts(img):
    io_utils.validate_image(img)
    if img.ndim != 3:
        raise InvalidImageError("Color-space conversion needs a 3 or 4 channel image")
    alpha = img[..., 3:] if img.shape[2] == 4 else None
    return img[..., :3], alpha


def _attach_alpha(color, alpha):
    if alpha is None:
        return color
    return np.concatenate([color, alpha], axis=-1)


def encode(img: np.ndarray, space) -> np.ndarray:
    """RGB(A) image to the quantized representation of ``space``."""
    space = ColorSpace.parse(space)
    color, alpha = _color_parts(img)
    if space is ColorSpace.RGB:
        return img.copy()
    forward, _ = _CODECS[space]
    coords = forward(color.astype(np.float64) / 255.0)
    return _attach_alpha(_quantize(coords, _OFFSETS.get(space, _NO_OFFSET)), alpha)


def decode(img: np.ndarray, space) -> np.ndarray:
    """Quantized ``space`` image back to RGB(A)."""
    space = ColorSpace.parse(space)
    color, alpha = _color_parts(img)
    if space is ColorSpace.RGB:
        return img.copy()
    _, inverse = _CODECS[space]
    rgb = inverse(_dequantize(color, _OFFSETS.get(space, _NO_OFFSET)))
    return _attach_alpha(_quantize(rgb, _NO_OFFSET), alpha)


def _as_image(pixel: PixelSample) -> np.ndarray:
    if len(pixel) not in (3, 4):
        raise InvalidImageError(f"A pixel needs 3 or 4 channels, got {len(pixel)}")
    if any(isinstance(v, bool) or not isinstance(v, (int, np.integer)) for v in pixel):
        raise InvalidImageError(f"Pixel channels must be integers, got {tuple(pixel)!r}")
    values = np.asarray(pixel, dtype=np.int64)
    if np.any(values < 0) or np.any(values > 255):
        raise InvalidImageError(f"Pixel channels must be within 0..255, got {tuple(pixel)}")
    return values.astype(np.uint8).reshape(1, 1, len(pixel))


def convert_pixel(pixel: PixelSample, space) -> PixelSample:
    """Encode a single RGB(A) pixel."""
    return tuple(int(v) for v in encode(_as_image(pixel), space)[0, 0])


def restore_pixel(pixel: PixelSample, space) -> PixelSample:
    """Decode a single encoded pixel back to RGB(A)."""
    return tuple(int(v) for v in decode(_as_image(pixel), space)[0, 0])
