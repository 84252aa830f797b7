"""Composite operations that turn one decoded image into an ordered list of stages.

Front ends display the stages in list order and surface ``notes`` to the user.
"""
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional

import numpy as np

from . import basic_ops, color_spaces, histogram, io_utils, planes, render
from .color_spaces import ColorSpace
from .errors import InvalidScaleError, InvalidThresholdError, UnknownActionError
from .logging_config import get_logger

logger = get_logger(__name__)

TARGETS = ("gray", "full")
ACTIONS = ("gray", "binary", "convert", "equalize", "histogram")


class Stage(NamedTuple):
    title: str
    image: np.ndarray


@dataclass
class PipelineResult:
    stages: List[Stage]
    notes: List[str] = field(default_factory=list)
    extra: Dict = field(default_factory=dict)

    @property
    def final(self) -> np.ndarray:
        return self.stages[-1].image


# ---------- Parameters ---------- #
def parse_threshold(raw) -> Optional[int]:
    """None, "" and "auto" select the mean level; anything else must be an integer 0..255."""
    if raw is None or (isinstance(raw, str) and raw.strip().lower() in ("", "auto")):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        raise InvalidThresholdError(f"Invalid threshold: {raw!r}") from None
    if not value.is_integer():
        raise InvalidThresholdError(f"Threshold must be a whole number, got {raw!r}")
    return basic_ops.check_level(int(value))


def parse_scale(raw) -> Optional[int]:
    """None, "" and "auto" scale to the tallest bin; anything else must be a positive integer."""
    if raw is None or (isinstance(raw, str) and raw.strip().lower() in ("", "auto")):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        raise InvalidScaleError(f"Invalid histogram scale: {raw!r}") from None
    if isinstance(raw, bool) or not value.is_integer() or value <= 0:
        raise InvalidScaleError(f"Histogram scale must be a positive whole number, got {raw!r}")
    return int(value)


def parse_target(raw, notes=None) -> str:
    """Equalization target; unknown values fall back to grayscale with a note."""
    if raw in (None, ""):
        return "gray"
    if raw in TARGETS:
        return raw
    message = f"Unknown equalization target {raw!r}; using 'gray'."
    logger.warning(message)
    if notes is not None:
        notes.append(message)
    return "gray"


# ---------- Operations ---------- #
def gray(img) -> PipelineResult:
    return PipelineResult([Stage("Original", img), Stage("Grayscale", basic_ops.rgb_to_grayscale(img))])


def binary(img, threshold=None) -> PipelineResult:
    gray_img = basic_ops.rgb_to_grayscale(img)
    out, level, note = basic_ops.grayscale_to_binary(gray_img, threshold=threshold)
    mode = "manual" if threshold is not None else "mean"
    if threshold is None:
        logger.info("Auto threshold level: %d", level)
    stages = [Stage("Original", img), Stage("Grayscale", gray_img), Stage(f"Binary (t={level})", out)]
    notes = [f"Threshold level: {level} ({mode})", note]
    return PipelineResult(stages, notes, {"threshold": level, "threshold_mode": mode, "threshold_eval": note})


def _color_input(img):
    """Color-space operations need RGB(A); gray input is promoted."""
    io_utils.validate_image(img)
    if img.ndim == 2:
        return np.repeat(img[..., None], 3, axis=2)
    return img


def convert(img, space) -> PipelineResult:
    space = ColorSpace.parse(space)
    rgb = _color_input(img)
    encoded = color_spaces.encode(rgb, space)
    names = space.channel_names
    stages = [Stage("Original", img), Stage(space.value.upper(), encoded)]
    stages += [Stage(f"{space.value.upper()} {names[idx]}", plane) for idx, plane in enumerate(planes.split_planes(encoded))]
    stages.append(Stage("Restored RGB", color_spaces.decode(encoded, space)))
    return PipelineResult(stages, extra={"space": space.value})


def _histogram_stages(before, after):
    hist_before = histogram.build(before)
    hist_after = histogram.build(after)
    scale = render.common_scale(hist_before, hist_after)
    canvas_before, _ = render.render_histogram(hist_before, scale)
    canvas_after, _ = render.render_histogram(hist_after, scale)
    stages = [Stage("Histogram (before)", canvas_before), Stage("Histogram (after)", canvas_after)]
    return stages, scale, hist_after


def equalize(img, space="rgb", target="gray") -> PipelineResult:
    space = ColorSpace.parse(space)
    notes = []
    target = parse_target(target, notes)

    if target == "gray":
        gray_img = basic_ops.rgb_to_grayscale(img)
        equalized, _ = histogram.equalize(gray_img)
        hist_stages, scale, hist_after = _histogram_stages(gray_img, equalized)
        stages = [Stage("Original", img), Stage("Grayscale", gray_img), Stage("Equalized", equalized)] + hist_stages
    else:
        rgb = _color_input(img)
        encoded = color_spaces.encode(rgb, space)
        parts = planes.split_planes(encoded)
        index = space.luminance_index
        targets = range(len(parts)) if index is None else [index]
        for idx in targets:
            parts[idx], _ = histogram.equalize(parts[idx])
        equalized = planes.recombine(parts, planes.alpha_plane(encoded))
        restored = color_spaces.decode(equalized, space)
        hist_stages, scale, hist_after = _histogram_stages(rgb, restored)
        label = space.value.upper()
        stages = [Stage("Original", img), Stage(label, encoded), Stage(f"{label} equalized", equalized), Stage("Restored RGB", restored)]
        stages += hist_stages

    notes.append(histogram.histogram_goodness(hist_after.luma))
    extra = {"space": space.value, "target": target, "histogram_scale": scale, "histogram": hist_after.luma.tolist()}
    return PipelineResult(stages, notes, extra)


def histogram_view(img, scale=None) -> PipelineResult:
    hist = histogram.build(img)
    canvas, used = render.render_histogram(hist, scale)
    assessment = histogram.histogram_goodness(hist.luma)
    extra = {
        "histogram": hist.luma.tolist(),
        "channels": [h.tolist() for h in hist.channels],
        "histogram_scale": used,
        "assessment": assessment,
    }
    return PipelineResult([Stage("Original", img), Stage("Histogram", canvas)], [assessment], extra)


def run(action: str, img, params: Optional[dict] = None) -> PipelineResult:
    """Apply the requested operation with raw (string) parameters."""
    params = params or {}
    io_utils.validate_image(img)
    act = (action or "").lower()
    if act == "gray":
        return gray(img)
    if act == "binary":
        return binary(img, parse_threshold(params.get("threshold")))
    if act == "convert":
        return convert(img, params.get("space"))
    if act == "equalize":
        return equalize(img, params.get("space", "rgb"), params.get("target"))
    if act == "histogram":
        return histogram_view(img, parse_scale(params.get("scale")))
    raise UnknownActionError(action)
