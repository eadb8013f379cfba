"""
Page pipeline orchestration.

This module provides a thin, framework-agnostic use case that turns one
rasterized page into an encoded black-and-white image.

Design goals:
- Pure computation; callers provide the raster and handle storage.
- Delegate the math to image_preprocess and speckle; this module only
  sequences the stages and shapes the output ("full" page or "preview" crop).
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Literal, Tuple

from PIL import Image

from inkpress.errors import InvalidInputError

from .image_preprocess import binarize
from .raster import PageImage, Raster, encode_png, ensure_raster, raster_from_pil, raster_to_pil
from .speckle import remove_speckles

LOG = logging.getLogger(__name__)

Mode = Literal["full", "preview"]

PREVIEW_AREA_RATIO = 0.4
PREVIEW_ASPECT = 1.6
PREVIEW_ZOOM = 1.25


@dataclass(frozen=True)
class CropBox:
    left: int
    top: int
    width: int
    height: int

    def as_pil_box(self) -> Tuple[int, int, int, int]:
        return (self.left, self.top, self.left + self.width, self.top + self.height)


def preview_crop_box(
    width: int,
    height: int,
    *,
    area_ratio: float = PREVIEW_AREA_RATIO,
    aspect: float = PREVIEW_ASPECT,
) -> CropBox:
    """Centered crop covering `area_ratio` of the page at `aspect` (w/h).

    Pages narrower than `aspect` bind on width, wider pages bind on height;
    the crop is clamped into the page and never smaller than 1x1.

    On extreme page shapes the clamp wins over the area ratio: the crop keeps
    the target aspect and shrinks to fit, so a 10x200 strip gets a 10x6 crop
    (about 3% of the page, not 40%).
    """
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"cannot crop an empty page ({width}x{height})")
    area = area_ratio * width * height
    if width / height < aspect:
        crop_w = min(width, max(1, round(math.sqrt(area * aspect))))
        crop_h = min(height, max(1, round(crop_w / aspect)))
    else:
        crop_h = min(height, max(1, round(math.sqrt(area / aspect))))
        crop_w = min(width, max(1, round(crop_h * aspect)))
    return CropBox(
        left=(width - crop_w) // 2,
        top=(height - crop_h) // 2,
        width=crop_w,
        height=crop_h,
    )


def zoom_nearest(img: Image.Image, factor: float = PREVIEW_ZOOM) -> Image.Image:
    """Magnify without smoothing so individual pixels stay visible."""
    size = (max(1, round(img.width * factor)), max(1, round(img.height * factor)))
    return img.resize(size, Image.Resampling.NEAREST)


def preview_image(buf: Raster) -> PageImage:
    """Crop the processed page to the preview window and encode it."""
    h, w = buf.shape[:2]
    box = preview_crop_box(w, h)
    crop = raster_to_pil(buf).crop(box.as_pil_box())
    zoomed = zoom_nearest(crop)
    return encode_png(raster_from_pil(zoomed))


def process_page(buf: Raster, *, threshold_bias: int = 0, mode: Mode = "full") -> PageImage:
    """Binarize one rasterized page and return it encoded as PNG.

    Intent:
        Run luminance, Otsu, contrast, soft binarization and speckle cleanup
        on the raster (in place), then encode either the whole page or the
        zoomed preview crop.

    Parameters:
        buf: RGBA raster owned by this call; it is mutated.
        threshold_bias: signed offset added to the Otsu threshold.
        mode: "full" for the complete page, "preview" for the crop only.

    Raises:
        InvalidInputError for an empty/misshaped raster or an unknown mode.
    """
    if mode not in ("full", "preview"):
        raise InvalidInputError(f"unknown pipeline mode: {mode!r}")
    buf = ensure_raster(buf)
    stats = binarize(buf, threshold_bias=threshold_bias)
    cleared = remove_speckles(buf)
    LOG.debug(
        "inkpress.pipeline.page mode=%s size=%sx%s threshold=%s specks=%s",
        mode,
        buf.shape[1],
        buf.shape[0],
        stats.threshold,
        cleared,
    )
    if mode == "preview":
        return preview_image(buf)
    return encode_png(buf)


__all__ = [
    "PREVIEW_AREA_RATIO",
    "PREVIEW_ASPECT",
    "PREVIEW_ZOOM",
    "CropBox",
    "preview_crop_box",
    "zoom_nearest",
    "preview_image",
    "process_page",
]
