"""
Raster buffers and the lossless PNG codec used between pipeline stages.

Intent:
    A page travels through the binarization stages as one owned, row-major
    RGBA pixel buffer (`numpy.uint8`, shape (height, width, 4)). Each stage
    receives the buffer, mutates it in place and hands it on. Encoding to PNG
    happens only at the end of the chain.

Design:
    - Rasters are plain numpy arrays; helpers here validate their shape.
    - PageImage mirrors what downstream assemblers need: dimensions + bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

import numpy as np
from PIL import Image

from inkpress.errors import InvalidInputError

CHANNELS = 4

Raster = np.ndarray


class RasterShapeError(InvalidInputError):
    """Buffer is not a non-empty (height, width, 4) uint8 array."""


@dataclass
class PageImage:
    width: int
    height: int
    data: bytes  # PNG-encoded
    mode: str = "RGBA"


def new_raster(width: int, height: int, *, fill: tuple[int, int, int, int] = (255, 255, 255, 255)) -> Raster:
    """Allocate a raster filled with a single RGBA color (white by default)."""
    if width <= 0 or height <= 0:
        raise RasterShapeError(f"raster dimensions must be positive, got {width}x{height}")
    buf = np.empty((height, width, CHANNELS), dtype=np.uint8)
    buf[:, :] = fill
    return buf


def ensure_raster(buf: Raster) -> Raster:
    """Return `buf` unchanged if it is a usable raster, else raise RasterShapeError."""
    if not isinstance(buf, np.ndarray) or buf.dtype != np.uint8:
        raise RasterShapeError("raster must be a numpy uint8 array")
    if buf.ndim != 3 or buf.shape[2] != CHANNELS:
        raise RasterShapeError(f"raster must have shape (height, width, 4), got {buf.shape}")
    if buf.shape[0] == 0 or buf.shape[1] == 0:
        raise RasterShapeError("raster has zero pixels")
    return buf


def raster_from_pil(img: Image.Image) -> Raster:
    """Copy a Pillow image into a fresh RGBA raster."""
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    # np.array copies, so the raster never aliases Pillow's internal buffer
    return ensure_raster(np.array(img, dtype=np.uint8))


def raster_to_pil(buf: Raster) -> Image.Image:
    return Image.fromarray(ensure_raster(buf))


def encode_png(buf: Raster) -> PageImage:
    """Encode a raster losslessly as PNG."""
    img = raster_to_pil(buf)
    out = BytesIO()
    img.save(out, format="PNG")
    return PageImage(width=img.width, height=img.height, data=out.getvalue())


def decode_png(data: bytes) -> Raster:
    """Decode PNG (or any Pillow-readable) bytes back into a raster."""
    with Image.open(BytesIO(data)) as img:
        img.load()
        return raster_from_pil(img)


__all__ = [
    "CHANNELS",
    "Raster",
    "RasterShapeError",
    "PageImage",
    "new_raster",
    "ensure_raster",
    "raster_from_pil",
    "raster_to_pil",
    "encode_png",
    "decode_png",
]
