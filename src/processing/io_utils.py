import cv2
import numpy as np

from .errors import InvalidImageError


def load_image(path: str) -> np.ndarray:
    """Load image from disk as RGB(A) or gray uint8 array."""
    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise InvalidImageError(f"Unable to read image at {path}")
    return from_bgr(ensure_uint8(img))


def save_image(path: str, img: np.ndarray) -> None:
    """Write an RGB(A) or gray uint8 array to disk."""
    if not cv2.imwrite(path, to_bgr(ensure_uint8(img))):
        raise InvalidImageError(f"Unable to write image to {path}")


def from_bgr(img: np.ndarray) -> np.ndarray:
    """OpenCV channel order to RGB(A); gray passes through."""
    if img.ndim == 2:
        return img
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def to_bgr(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
    return cv2.cvtColor(img, cv2.COLOR_RGB2BGR)


def ensure_uint8(img: np.ndarray) -> np.ndarray:
    """Clip and convert to uint8; 16-bit input is scaled down to 8 bits."""
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.uint16:
        return (img >> 8).astype(np.uint8)
    clipped = np.clip(img, 0, 255)
    return np.rint(clipped).astype(np.uint8)


def validate_image(img, channels=(1, 3, 4)) -> np.ndarray:
    """Check layout of a pixel buffer: (H, W) or (H, W, C) uint8."""
    if not isinstance(img, np.ndarray):
        raise InvalidImageError(f"Expected a numpy array, got {type(img).__name__}")
    if img.dtype != np.uint8:
        raise InvalidImageError(f"Expected 8-bit samples, got {img.dtype}")
    if img.ndim == 2:
        count = 1
    elif img.ndim == 3:
        count = img.shape[2]
    else:
        raise InvalidImageError(f"Expected a 2D or 3D array, got shape {img.shape}")
    if count not in channels:
        raise InvalidImageError(f"Unsupported channel count {count}; expected one of {tuple(channels)}")
    return img


def channel_count(img: np.ndarray) -> int:
    return 1 if img.ndim == 2 else img.shape[2]


def info(img: np.ndarray) -> dict:
    """Return basic image info."""
    h, w = img.shape[:2]
    dtype = str(img.dtype)
    return {"width": w, "height": h, "channels": channel_count(img), "dtype": dtype}
