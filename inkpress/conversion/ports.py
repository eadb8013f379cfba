"""
Ports for the conversion use cases: value types, protocols, and errors.

Intent:
    Provide framework-agnostic contracts between the preview/conversion use
    cases and their collaborators (rasterizer, document assembler, progress
    sink). Concrete adapters live elsewhere; tests supply simple fakes.

Design:
    - Value types: ConversionSettings, PreviewCandidate, ConversionProgress
    - Protocols: PageRasterizer, DocumentAssembler
    - Error taxonomy re-exported from inkpress.errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from inkpress.errors import (
    AssemblyError,
    ConversionCancelled,
    ConversionError,
    InvalidInputError,
    RasterizationError,
)
from inkpress.imaging.raster import PageImage, Raster

DEFAULT_RESOLUTION = 400
DEFAULT_THRESHOLD_BIAS = 0


# ----------------------------- Value types ----------------------------------


@dataclass(frozen=True)
class ConversionSettings:
    """Resolution (DPI) and signed Otsu bias for one pipeline invocation."""

    resolution: int = DEFAULT_RESOLUTION
    threshold_bias: int = DEFAULT_THRESHOLD_BIAS

    def __post_init__(self) -> None:
        if not isinstance(self.resolution, int) or self.resolution <= 0:
            raise InvalidInputError(f"resolution must be a positive integer, got {self.resolution!r}")
        if not isinstance(self.threshold_bias, int):
            raise InvalidInputError(f"threshold_bias must be an integer, got {self.threshold_bias!r}")


@dataclass
class PreviewCandidate:
    resolution: int
    threshold_bias: int
    image: PageImage

    @property
    def settings(self) -> ConversionSettings:
        return ConversionSettings(resolution=self.resolution, threshold_bias=self.threshold_bias)


@dataclass(frozen=True)
class ConversionProgress:
    pages_completed: int
    pages_total: int

    @property
    def fraction(self) -> float:
        if self.pages_total <= 0:
            return 0.0
        return self.pages_completed / self.pages_total


ProgressCallback = Callable[[ConversionProgress], None]


# ----------------------------- Protocols ------------------------------------


class PageRasterizer(Protocol):
    """Renders pages of one source document to RGBA rasters."""

    def page_count(self) -> int:
        ...

    def rasterize(self, *, page_number: int, resolution: int) -> Raster:
        ...


class DocumentAssembler(Protocol):
    """Collects encoded pages in call order and produces one document."""

    def append_page(self, page: PageImage) -> None:
        ...

    def finalize(self) -> bytes:
        ...


__all__ = [
    "DEFAULT_RESOLUTION",
    "DEFAULT_THRESHOLD_BIAS",
    # Values
    "ConversionSettings",
    "PreviewCandidate",
    "ConversionProgress",
    "ProgressCallback",
    # Protocols
    "PageRasterizer",
    "DocumentAssembler",
    # Errors
    "ConversionError",
    "InvalidInputError",
    "RasterizationError",
    "AssemblyError",
    "ConversionCancelled",
]
