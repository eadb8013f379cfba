"""
Binarization stages for rendered document pages.

Pipeline (one page, strictly in this order):
- Luminance from RGB with relative-luminance weights (alpha ignored).
- 256-bin histogram of the raw luminance plus its min/max.
- Otsu threshold on that histogram, shifted by the caller's bias.
- Contrast stretch of the luminance to [0, 255] using the observed min/max.
- Soft binarization: linear ramp of width 2*SOFTNESS around the threshold.

Design:
- Vectorized with numpy; the raster is mutated in place and returned.
- The threshold comes from raw luminance statistics but is applied to the
  stretched values. Keep that ordering; changing it shifts every threshold.
- Degenerate pages never raise: Otsu falls back to DEFAULT_THRESHOLD and a
  page with zero luminance range is passed through without stretching.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List

import numpy as np

from .raster import Raster, ensure_raster

LOG = logging.getLogger(__name__)

LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)
HISTOGRAM_BINS = 256
DEFAULT_THRESHOLD = 128
SOFTNESS = 18


@dataclass
class Histogram:
    counts: List[int]
    total: int
    min_luminance: float
    max_luminance: float


@dataclass(frozen=True)
class BinarizeStats:
    """Diagnostics for one binarized page (used for logging and tests)."""

    otsu_threshold: int
    threshold: int
    min_luminance: float
    max_luminance: float


def luminance(buf: Raster) -> np.ndarray:
    """Per-pixel luminance as float64, clipped to [0, 255]."""
    buf = ensure_raster(buf)
    r, g, b = LUMA_WEIGHTS
    lum = r * buf[:, :, 0] + g * buf[:, :, 1] + b * buf[:, :, 2]
    # the weights sum to 1.0 only up to float rounding
    return np.clip(lum, 0.0, 255.0)


def build_histogram(lum: np.ndarray) -> Histogram:
    buckets = np.clip(lum.astype(np.int64), 0, HISTOGRAM_BINS - 1)
    counts = np.bincount(buckets.ravel(), minlength=HISTOGRAM_BINS)
    return Histogram(
        counts=[int(c) for c in counts],
        total=int(lum.size),
        min_luminance=float(lum.min()),
        max_luminance=float(lum.max()),
    )


def otsu_threshold(hist: Histogram) -> int:
    """Split that maximizes between-class variance, or DEFAULT_THRESHOLD.

    Background is every bucket <= t, foreground every bucket > t. Splits with
    an empty class are not candidates. When several splits tie for the
    maximum (an empty gap between two populations), the midpoint of the first
    and last tied split is returned.
    """
    counts = hist.counts
    total = hist.total
    sum_total = sum(i * c for i, c in enumerate(counts))
    sum_b = 0.0
    w_b = 0
    best = -1.0
    first = last = None
    for t in range(HISTOGRAM_BINS):
        w_b += counts[t]
        sum_b += t * counts[t]
        if w_b == 0:
            continue
        w_f = total - w_b
        if w_f == 0:
            break
        m_b = sum_b / w_b
        m_f = (sum_total - sum_b) / w_f
        between = w_b * w_f * ((m_b - m_f) ** 2)
        if between > best:
            best = between
            first = last = t
        elif between == best:
            last = t
    if first is None:
        return DEFAULT_THRESHOLD
    return (first + last) // 2


def normalize_contrast(lum: np.ndarray, min_luminance: float, max_luminance: float) -> np.ndarray:
    """Stretch luminance so [min, max] maps onto [0, 255]."""
    span = max_luminance - min_luminance
    if span == 0:
        # uniform page: nothing to stretch
        return np.clip(lum, 0.0, 255.0)
    out = (lum - min_luminance) * (255.0 / max(1.0, span))
    return np.clip(out, 0.0, 255.0, out=out)


def soft_binarize(values: np.ndarray, threshold: float, softness: int = SOFTNESS) -> np.ndarray:
    """Map normalized luminance to output intensity (uint8).

    Above threshold+softness is white, below threshold-softness is black,
    the band in between is a linear ramp rounded half-to-even.
    """
    low = threshold - softness
    high = threshold + softness
    ramp = np.rint((values - low) / (2 * softness) * 255.0)
    out = np.where(values > high, 255.0, np.where(values < low, 0.0, ramp))
    return np.clip(out, 0, 255).astype(np.uint8)


def binarize(buf: Raster, *, threshold_bias: int = 0) -> BinarizeStats:
    """Run luminance → Otsu → contrast → soft binarization on `buf` in place.

    R, G and B all receive the computed intensity; alpha is left untouched.
    The effective threshold is `otsu + threshold_bias` and is not clamped.
    """
    lum = luminance(buf)
    hist = build_histogram(lum)
    otsu = otsu_threshold(hist)
    threshold = otsu + threshold_bias
    stretched = normalize_contrast(lum, hist.min_luminance, hist.max_luminance)
    intensity = soft_binarize(stretched, threshold)
    buf[:, :, :3] = intensity[:, :, np.newaxis]
    LOG.debug(
        "inkpress.binarize otsu=%s bias=%s min=%.1f max=%.1f",
        otsu,
        threshold_bias,
        hist.min_luminance,
        hist.max_luminance,
    )
    return BinarizeStats(
        otsu_threshold=otsu,
        threshold=threshold,
        min_luminance=hist.min_luminance,
        max_luminance=hist.max_luminance,
    )


__all__ = [
    "LUMA_WEIGHTS",
    "DEFAULT_THRESHOLD",
    "SOFTNESS",
    "Histogram",
    "BinarizeStats",
    "luminance",
    "build_histogram",
    "otsu_threshold",
    "normalize_contrast",
    "soft_binarize",
    "binarize",
]
