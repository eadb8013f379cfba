"""
Speckle cleanup on binarized rasters.

Behavior under test:
- An isolated black pixel inside a white field becomes white.
- A solid 3x3 black block survives (its pixels have black neighbors).
- Border pixels are never modified.
- Decisions come from the pre-pass snapshot: a diagonal pair survives.
- Gray pixels follow the same rule: with at most one black cell around
  them they become white, next to two or more they stay.
"""
from __future__ import annotations

import numpy as np

from inkpress.imaging.speckle import remove_speckles
from utils.fakes import solid_raster


def test_isolated_black_pixel_is_removed():
    buf = solid_raster(5, 5, 255)
    buf[2, 2, :3] = 0

    cleared = remove_speckles(buf)

    assert cleared == 1
    assert np.all(buf[:, :, :3] == 255)


def test_solid_black_block_is_preserved():
    buf = solid_raster(7, 7, 255)
    buf[2:5, 2:5, :3] = 0

    cleared = remove_speckles(buf)

    assert cleared == 0
    assert np.all(buf[2:5, 2:5, :3] == 0)
    assert buf[3, 3, 0] == 0


def test_border_pixels_are_never_modified():
    buf = solid_raster(5, 5, 255)
    buf[0, 2, :3] = 0
    buf[4, 4, :3] = 0
    buf[2, 0, :3] = 0
    before = buf.copy()

    remove_speckles(buf)

    assert np.array_equal(buf, before)


def test_pixels_touching_each_other_keep_each_other():
    buf = solid_raster(6, 6, 255)
    buf[2, 2, :3] = 0
    buf[3, 3, :3] = 0

    cleared = remove_speckles(buf)

    assert cleared == 0
    assert buf[2, 2, 0] == 0 and buf[3, 3, 0] == 0


def test_lone_gray_pixel_becomes_white():
    buf = solid_raster(5, 5, 255)
    buf[2, 2, :3] = 128

    cleared = remove_speckles(buf)

    assert cleared == 1
    assert tuple(buf[2, 2, :3]) == (255, 255, 255)


def test_gray_pixel_next_to_one_black_pixel_becomes_white():
    buf = solid_raster(6, 6, 255)
    buf[2, 2, :3] = 0
    buf[2, 3, :3] = 128

    remove_speckles(buf)

    # the black pixel has no black neighbor either, so both are cleared
    assert buf[2, 2, 0] == 255
    assert buf[2, 3, 0] == 255


def test_gray_pixel_between_ink_is_kept():
    buf = solid_raster(5, 5, 255)
    buf[2, 1, :3] = 0
    buf[2, 3, :3] = 0
    buf[2, 2, :3] = 128

    remove_speckles(buf)

    assert buf[2, 2, 0] == 128


def test_alpha_untouched_and_tiny_rasters_ignored():
    buf = solid_raster(5, 5, 255)
    buf[2, 2] = (0, 0, 0, 10)

    remove_speckles(buf)

    assert tuple(buf[2, 2]) == (255, 255, 255, 10)

    tiny = solid_raster(2, 2, 0)
    assert remove_speckles(tiny) == 0
    assert np.all(tiny[:, :, :3] == 0)
