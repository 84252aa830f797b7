import os

import numpy as np

import cli
from processing import io_utils


def _write(tmp_path, img):
    path = str(tmp_path / "sample.png")
    io_utils.save_image(path, img)
    return path


def test_convert_writes_every_stage(tmp_path, rgb_image):
    src = _write(tmp_path, rgb_image)
    out = tmp_path / "out"
    assert cli.main(["convert", src, "--space", "hsv", "-o", str(out)]) == 0
    assert sorted(os.listdir(out)) == [
        "sample_00_original.png",
        "sample_01_hsv.png",
        "sample_02_hsv_h.png",
        "sample_03_hsv_s.png",
        "sample_04_hsv_v.png",
        "sample_05_restored_rgb.png",
    ]
    assert np.array_equal(io_utils.load_image(str(out / "sample_00_original.png")), rgb_image)


def test_gray_and_binary(tmp_path, primaries_image):
    src = _write(tmp_path, primaries_image)
    assert cli.main(["gray", src, "-o", str(tmp_path / "g")]) == 0
    assert len(os.listdir(tmp_path / "g")) == 2
    assert cli.main(["binary", src, "-o", str(tmp_path / "b")]) == 0
    binary = io_utils.load_image(str(tmp_path / "b" / "sample_02_binary_t_127.png"))
    assert binary.tolist() == [[0, 255], [0, 255]]


def test_invalid_parameters_exit_with_error(tmp_path, rgb_image):
    src = _write(tmp_path, rgb_image)
    assert cli.main(["convert", src, "--space", "HSV", "-o", str(tmp_path)]) == 2
    assert cli.main(["binary", src, "--threshold", "abc", "-o", str(tmp_path)]) == 2
    assert cli.main(["gray", str(tmp_path / "missing.png"), "-o", str(tmp_path)]) == 2
