"""
Full-document conversion use case.

Intent:
    Rasterize every page of a document at the chosen settings, binarize it
    with the page pipeline, append the encoded page to a document assembler
    and report progress after each page. On success the assembled document
    is returned; on failure or cancellation nothing partial is exposed.

Parameters:
    - rasterizer: PageRasterizer bound to the source document.
    - assembler: DocumentAssembler that receives pages in ascending order.
    - on_progress: optional callback, called once per completed page.
    - should_cancel: optional callable polled before each page.

Expected behavior:
    - Pages are processed strictly one at a time, 1..N.
    - Rasterizer/assembler failures abort the conversion (RasterizationError /
      AssemblyError, original exception chained).
    - Cancellation only happens at page boundaries (ConversionCancelled).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from inkpress.imaging.pipeline import Mode, process_page
from inkpress.imaging.raster import PageImage, Raster

from .ports import (
    AssemblyError,
    ConversionCancelled,
    ConversionProgress,
    ConversionSettings,
    DocumentAssembler,
    InvalidInputError,
    PageRasterizer,
    ProgressCallback,
    RasterizationError,
)

LOG = logging.getLogger(__name__)


def rasterize_page(rasterizer: PageRasterizer, *, page_number: int, resolution: int) -> Raster:
    """Call the rasterizer, mapping unexpected failures to RasterizationError."""
    try:
        return rasterizer.rasterize(page_number=page_number, resolution=resolution)
    except (RasterizationError, InvalidInputError):
        raise
    except Exception as exc:
        raise RasterizationError(f"rasterize_failed page={page_number} resolution={resolution}") from exc


def render_page(
    rasterizer: PageRasterizer,
    *,
    page_number: int,
    settings: ConversionSettings,
    mode: Mode = "full",
) -> PageImage:
    """Rasterize one page and run the page pipeline on it."""
    raster = rasterize_page(rasterizer, page_number=page_number, resolution=settings.resolution)
    return process_page(raster, threshold_bias=settings.threshold_bias, mode=mode)


class DocumentConverter:
    """Convert a whole document page by page at fixed settings."""

    def __init__(
        self,
        *,
        rasterizer: PageRasterizer,
        assembler: DocumentAssembler,
        settings: Optional[ConversionSettings] = None,
    ) -> None:
        self._rasterizer = rasterizer
        self._assembler = assembler
        self._settings = settings or ConversionSettings()

    @property
    def settings(self) -> ConversionSettings:
        return self._settings

    def run(
        self,
        *,
        on_progress: Optional[ProgressCallback] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> bytes:
        """Convert pages 1..N and return the assembled document bytes."""
        total = self._rasterizer.page_count()
        if total <= 0:
            raise InvalidInputError("document has no pages")
        LOG.info(
            "inkpress.convert.start pages=%s resolution=%s bias=%s",
            total,
            self._settings.resolution,
            self._settings.threshold_bias,
        )

        for page_number in range(1, total + 1):
            if should_cancel is not None and should_cancel():
                LOG.info("inkpress.convert.cancelled completed=%s total=%s", page_number - 1, total)
                raise ConversionCancelled(f"cancelled after {page_number - 1} of {total} pages")

            page = render_page(self._rasterizer, page_number=page_number, settings=self._settings)
            try:
                self._assembler.append_page(page)
            except AssemblyError:
                raise
            except Exception as exc:
                raise AssemblyError(f"append_failed page={page_number}") from exc

            progress = ConversionProgress(pages_completed=page_number, pages_total=total)
            LOG.info("inkpress.convert.page_done page=%s total=%s", page_number, total)
            if on_progress is not None:
                on_progress(progress)

        try:
            document = self._assembler.finalize()
        except AssemblyError:
            raise
        except Exception as exc:
            raise AssemblyError("finalize_failed") from exc
        LOG.info("inkpress.convert.done pages=%s bytes=%s", total, len(document))
        return document


def convert_document(
    rasterizer: PageRasterizer,
    assembler: DocumentAssembler,
    settings: Optional[ConversionSettings] = None,
    *,
    on_progress: Optional[ProgressCallback] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> bytes:
    """Functional shorthand for `DocumentConverter(...).run(...)`."""
    converter = DocumentConverter(rasterizer=rasterizer, assembler=assembler, settings=settings)
    return converter.run(on_progress=on_progress, should_cancel=should_cancel)


__all__ = ["DocumentConverter", "convert_document", "render_page", "rasterize_page"]
