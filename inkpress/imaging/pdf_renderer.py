"""
PDF rasterization adapter backed by pypdfium2.

Intent:
- Give the conversion use cases a page-at-a-time rasterizer for PDF bytes.
- Keep memory bounded: the document is opened once, pages are rendered on
  demand and released immediately.

Note:
- pypdfium2 is imported lazily so tests can substitute a fake module via
  `sys.modules`. A missing dependency surfaces as PdfRenderError.
- `resolution` is a DPI value; pdfium renders at 72 DPI per unit of scale.
"""

from __future__ import annotations

import logging
from typing import Optional

from inkpress.errors import InvalidInputError, RasterizationError

from .raster import Raster, raster_from_pil

LOG = logging.getLogger(__name__)

PDF_BASE_DPI = 72.0
DEFAULT_PAGE_LIMIT = 500


class PdfRenderError(RasterizationError):
    pass


def _import_pdfium():
    try:
        import pypdfium2 as pdfium  # type: ignore
        return pdfium
    except ImportError as exc:  # pragma: no cover - surfaced in tests via mocking
        raise PdfRenderError("pypdfium2 is required for PDF rendering") from exc


def dpi_to_scale(resolution: int) -> float:
    """Convert a DPI value into pdfium's render scale factor."""
    if resolution <= 0:
        raise InvalidInputError(f"resolution must be positive, got {resolution}")
    return float(resolution) / PDF_BASE_DPI


class PdfRasterizer:
    """Render pages of one PDF document to RGBA rasters.

    Parameters:
        pdf_bytes: the complete PDF file.
        page_limit: cap on pages exposed via `page_count()`.
        include_annotations: draw form fields/annotations as pdfium does.

    Raises PdfRenderError when the document cannot be opened or a page fails
    to render.
    """

    def __init__(
        self,
        pdf_bytes: bytes,
        *,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        include_annotations: bool = True,
    ) -> None:
        pdfium = _import_pdfium()
        try:
            self._doc = pdfium.PdfDocument(pdf_bytes)
        except Exception as exc:
            raise PdfRenderError("failed_to_open_pdf") from exc
        self._total_pages = len(self._doc)
        self._page_limit = page_limit
        self._include_annotations = include_annotations

    def page_count(self) -> int:
        return min(self._page_limit, self._total_pages)

    def rasterize(self, *, page_number: int, resolution: int) -> Raster:
        """Render 1-based `page_number` at `resolution` DPI."""
        if not 1 <= page_number <= self.page_count():
            raise InvalidInputError(f"page {page_number} outside 1..{self.page_count()}")
        scale = dpi_to_scale(resolution)
        page = None
        bitmap = None
        try:
            page = self._doc[page_number - 1]
            bitmap = page.render(scale=scale, draw_annots=bool(self._include_annotations))
            raster = raster_from_pil(bitmap.to_pil())
        except Exception as exc:
            raise PdfRenderError(f"render_failed_on_page_{page_number}") from exc
        finally:
            for handle in (bitmap, page):
                close = getattr(handle, "close", None)
                if callable(close):
                    close()
        LOG.debug(
            "inkpress.render.page page=%s dpi=%s size=%sx%s",
            page_number,
            resolution,
            raster.shape[1],
            raster.shape[0],
        )
        return raster

    def close(self) -> None:
        close = getattr(self._doc, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "PdfRasterizer":
        return self

    def __exit__(self, *_exc_info: object) -> Optional[bool]:
        self.close()
        return None


__all__ = ["PdfRenderError", "PdfRasterizer", "dpi_to_scale", "PDF_BASE_DPI", "DEFAULT_PAGE_LIMIT"]
