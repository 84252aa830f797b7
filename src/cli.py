"""imgproc command line.

Runs one pipeline operation on an image file and writes every stage as a
numbered PNG, in display order.
"""
import argparse
import os
import re
import sys
from typing import List, Optional

from processing import io_utils, pipeline
from processing.config import APP_CONFIG
from processing.errors import UnknownColorSpaceError
from processing.logging_config import get_logger, setup_logging

logger = get_logger("cli")

SPACE_CHOICES = ("rgb", "hsv", "hsl", "hsi", "yuv")


def _slug(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", title.lower()).strip("_")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="imgproc", description="An image processing tool")
    parser.add_argument("--log-level", default=APP_CONFIG.log_level, help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add(name, help_text):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("image", help="Input image path")
        cmd.add_argument("-o", "--output-dir", default=".", help="Directory for the stage PNGs")
        return cmd

    add("gray", "convert to grayscale image")
    cmd = add("binary", "binarize the grayscale image")
    cmd.add_argument("-t", "--threshold", default=None, help="Level 0..255 (default: mean gray level)")
    cmd = add("convert", "encode into a color space, split its planes and decode back")
    # validated by ColorSpace.parse so unknown names get the same error as the API
    cmd.add_argument("-s", "--space", required=True, help=f"One of {', '.join(SPACE_CHOICES)}")
    cmd = add("equalize", "histogram equalization")
    cmd.add_argument("-s", "--space", default="rgb", help=f"One of {', '.join(SPACE_CHOICES)}")
    cmd.add_argument("--target", default="gray", help="gray (luma only) or full (equalize and recombine)")
    cmd = add("histogram", "render the R, G, B and luma histograms")
    cmd.add_argument("--scale", default=None, help="Fixed bin count for full band height")
    return parser


def _params(args) -> dict:
    return {key: getattr(args, key) for key in ("threshold", "space", "target", "scale") if hasattr(args, key)}


def write_stages(result, image_path: str, output_dir: str) -> List[str]:
    os.makedirs(output_dir, exist_ok=True)
    stem = os.path.splitext(os.path.basename(image_path))[0]
    paths = []
    for idx, stage in enumerate(result.stages):
        path = os.path.join(output_dir, f"{stem}_{idx:02d}_{_slug(stage.title)}.png")
        io_utils.save_image(path, stage.image)
        paths.append(path)
    return paths


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        img = io_utils.load_image(args.image)
        result = pipeline.run(args.command, img, _params(args))
        paths = write_stages(result, args.image, args.output_dir)
    except UnknownColorSpaceError as exc:
        logger.error("Unrecognized color space %r", exc.name)
        return 2
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    for note in result.notes:
        logger.info(note)
    for path in paths:
        logger.info("Wrote %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
