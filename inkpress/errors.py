"""
Error taxonomy shared by the imaging stages and the conversion use cases.

Design:
    - InvalidInputError: caller supplied something unusable; raised before any
      processing starts (bad page number, empty raster, zero-page document).
    - RasterizationError: the rasterization collaborator failed for a page.
    - AssemblyError: the document assembler rejected a page or finalize().
    - ConversionCancelled: caller asked to stop between pages.

Degenerate pages (uniform color, no valid Otsu split) are not errors; the
stages recover locally.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all inkpress failures surfaced to callers."""


class InvalidInputError(ConversionError, ValueError):
    """Input rejected before any work was performed."""


class RasterizationError(ConversionError):
    """Page rasterization failed; aborts the enclosing batch."""


class AssemblyError(ConversionError):
    """Document assembly failed; aborts the enclosing conversion."""


class ConversionCancelled(ConversionError):
    """Conversion stopped at a page boundary on caller request."""


__all__ = [
    "ConversionError",
    "InvalidInputError",
    "RasterizationError",
    "AssemblyError",
    "ConversionCancelled",
]
