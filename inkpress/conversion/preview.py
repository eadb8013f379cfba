"""
Preview matrix use case.

Intent:
    Let a user compare nearby settings before a full conversion. Around the
    current (resolution, bias) a 3x3 grid is built: resolution +/- 100 (non
    positive values dropped) by bias +/- 25. Each cell rasterizes the target
    page and runs the page pipeline in preview mode.

Expected behavior:
    - Page number outside 1..page_count raises InvalidInputError before any
      rasterization.
    - Cells are produced resolution-major, bias-minor; no deduplication.
    - Any failing cell aborts the whole batch; no partial set is returned.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .converter import render_page
from .ports import (
    ConversionSettings,
    InvalidInputError,
    PageRasterizer,
    PreviewCandidate,
)

LOG = logging.getLogger(__name__)

RESOLUTION_STEP = 100
BIAS_STEP = 25


def preview_resolutions(resolution: int, step: int = RESOLUTION_STEP) -> List[int]:
    return [r for r in (resolution - step, resolution, resolution + step) if r > 0]


def preview_biases(threshold_bias: int, step: int = BIAS_STEP) -> List[int]:
    return [threshold_bias - step, threshold_bias, threshold_bias + step]


def preview_grid(settings: ConversionSettings) -> List[ConversionSettings]:
    """All grid cells in iteration order (outer resolution, inner bias)."""
    return [
        ConversionSettings(resolution=resolution, threshold_bias=bias)
        for resolution in preview_resolutions(settings.resolution)
        for bias in preview_biases(settings.threshold_bias)
    ]


def generate_preview_matrix(
    rasterizer: PageRasterizer,
    *,
    page_number: int,
    settings: Optional[ConversionSettings] = None,
) -> List[PreviewCandidate]:
    """Render the preview grid for one page.

    Raises:
        InvalidInputError: page number out of range.
        RasterizationError: any cell failed to rasterize (whole batch aborted).
    """
    settings = settings or ConversionSettings()
    page_count = rasterizer.page_count()
    if not 1 <= page_number <= page_count:
        raise InvalidInputError(f"preview page {page_number} outside 1..{page_count}")

    cells = preview_grid(settings)
    LOG.info(
        "inkpress.preview.start page=%s cells=%s resolution=%s bias=%s",
        page_number,
        len(cells),
        settings.resolution,
        settings.threshold_bias,
    )
    candidates: List[PreviewCandidate] = []
    for cell in cells:
        image = render_page(rasterizer, page_number=page_number, settings=cell, mode="preview")
        candidates.append(
            PreviewCandidate(resolution=cell.resolution, threshold_bias=cell.threshold_bias, image=image)
        )
    LOG.info("inkpress.preview.done page=%s candidates=%s", page_number, len(candidates))
    return candidates


__all__ = [
    "RESOLUTION_STEP",
    "BIAS_STEP",
    "preview_resolutions",
    "preview_biases",
    "preview_grid",
    "generate_preview_matrix",
]
