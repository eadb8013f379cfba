"""
Document assembly adapter (Pillow multi-page PDF).

Intent:
    Collect the binarized page PNGs in call order and write them into one
    PDF. Pages are stored as 8-bit grayscale since the pipeline output has
    R == G == B; the physical page size follows from the render resolution so
    a page rendered at 400 DPI comes out at its original size.

Design:
    - Keep the bytes until finalize(); decoding happens once, in page order.
    - The container format itself is Pillow's concern, not ours.
"""

from __future__ import annotations

from io import BytesIO
import logging
from typing import List

from PIL import Image

from inkpress.imaging.raster import PageImage

from .ports import AssemblyError, DEFAULT_RESOLUTION

LOG = logging.getLogger(__name__)


class PillowPdfAssembler:
    """DocumentAssembler that renders appended pages into a PDF."""

    def __init__(self, *, resolution: int = DEFAULT_RESOLUTION) -> None:
        if resolution <= 0:
            raise AssemblyError(f"resolution must be positive, got {resolution}")
        self._resolution = resolution
        self._pages: List[bytes] = []

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def append_page(self, page: PageImage) -> None:
        if not page.data:
            raise AssemblyError("page image has no data")
        self._pages.append(page.data)

    def finalize(self) -> bytes:
        """Write all appended pages, in order, into a single PDF."""
        if not self._pages:
            raise AssemblyError("no pages to assemble")

        images: List[Image.Image] = []
        try:
            for idx, data in enumerate(self._pages, start=1):
                try:
                    with Image.open(BytesIO(data)) as im:
                        images.append(im.convert("L"))
                except Exception as exc:
                    raise AssemblyError(f"decode_failed page={idx}") from exc

            out = BytesIO()
            first, rest = images[0], images[1:]
            first.save(
                out,
                format="PDF",
                save_all=True,
                append_images=rest,
                resolution=float(self._resolution),
            )
        finally:
            for im in images:
                im.close()
        data = out.getvalue()
        LOG.debug("inkpress.assemble.pdf pages=%s bytes=%s", len(images), len(data))
        return data


__all__ = ["PillowPdfAssembler"]
