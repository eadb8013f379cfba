from __future__ import annotations

from io import BytesIO
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from inkpress.imaging.raster import PageImage, Raster, new_raster


def solid_raster(width: int, height: int, gray: int) -> Raster:
    """Opaque raster where every pixel has R == G == B == gray."""
    return new_raster(width, height, fill=(gray, gray, gray, 255))


def text_like_raster(width: int = 60, height: int = 40) -> Raster:
    """Light page with a few dark bars, roughly like a line of print."""
    buf = solid_raster(width, height, 235)
    for top in range(5, height - 5, 10):
        buf[top : top + 3, 5 : width - 5, :3] = 20
    return buf


def decode(page: PageImage) -> np.ndarray:
    with Image.open(BytesIO(page.data)) as im:
        im.load()
        return np.array(im)


class FakeRasterizer:
    """In-memory PageRasterizer.

    `factory(page_number, resolution)` builds each raster; `fail_on` lists
    (page, resolution) pairs that raise `error` instead.
    """

    def __init__(
        self,
        pages: int,
        *,
        factory: Optional[Callable[[int, int], Raster]] = None,
        fail_on: Optional[List[Tuple[int, int]]] = None,
        error: Exception | None = None,
    ) -> None:
        self.pages = pages
        self.factory = factory or (lambda _page, _res: text_like_raster())
        self.fail_on = set(fail_on or [])
        self.error = error or RuntimeError("boom")
        self.calls: List[Dict[str, int]] = []

    def page_count(self) -> int:
        return self.pages

    def rasterize(self, *, page_number: int, resolution: int) -> Raster:
        self.calls.append({"page_number": page_number, "resolution": resolution})
        if (page_number, resolution) in self.fail_on:
            raise self.error
        return self.factory(page_number, resolution)


class RecordingAssembler:
    """DocumentAssembler that remembers pages and returns a marker document."""

    def __init__(self) -> None:
        self.pages: List[PageImage] = []
        self.finalized = False

    def append_page(self, page: PageImage) -> None:
        self.pages.append(page)

    def finalize(self) -> bytes:
        self.finalized = True
        return f"doc:{len(self.pages)}".encode()
