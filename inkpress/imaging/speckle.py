"""
Speckle removal for binarized rasters.

Every interior pixel whose 3x3 neighborhood (itself included) holds at most
one black pixel is forced to white. That clears isolated black specks and
stray mid-ramp gray pixels with no ink next to them. Decisions are made on a
snapshot taken before any write, so clearing one pixel never changes the
verdict for its neighbors. The 1-pixel border is never touched. Single pass.
"""

from __future__ import annotations

import numpy as np

from .raster import Raster, ensure_raster

BLACK = 0
WHITE = 255


def remove_speckles(buf: Raster) -> int:
    """Whiten isolated interior pixels in place; return how many changed.

    Expects a binarized raster (R == G == B), so only the red channel is read.
    """
    buf = ensure_raster(buf)
    h, w = buf.shape[:2]
    if h < 3 or w < 3:
        return 0
    # comparison allocates a new array: this is the read-only snapshot
    black = buf[:, :, 0] == BLACK
    counts = np.zeros((h - 2, w - 2), dtype=np.uint8)
    for dy in range(3):
        for dx in range(3):
            counts += black[dy : dy + h - 2, dx : dx + w - 2]
    interior = buf[1:-1, 1:-1]
    changed = (counts <= 1) & np.any(interior[:, :, :3] != WHITE, axis=2)
    interior[changed, :3] = WHITE
    return int(changed.sum())


__all__ = ["remove_speckles"]
