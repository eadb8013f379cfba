"""
Conversion configuration parsing and validation.

Intent:
    Provide a single place to read the environment variables that seed the
    conversion defaults (resolution, threshold bias, preview page, page cap).

Why:
    Centralising configuration keeps validation and defaults explicit and lets
    tests exercise config behaviour without running a conversion. Command-line
    flags override these values.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from inkpress.conversion.ports import DEFAULT_RESOLUTION, DEFAULT_THRESHOLD_BIAS, ConversionSettings
from inkpress.imaging.pdf_renderer import DEFAULT_PAGE_LIMIT


@dataclass(frozen=True)
class ConversionConfig:
    resolution: int
    threshold_bias: int
    preview_page: int
    page_limit: int
    log_level: str

    def settings(self) -> ConversionSettings:
        return ConversionSettings(resolution=self.resolution, threshold_bias=self.threshold_bias)


def _int_env(name: str, default: int, *, minimum: int, maximum: Optional[int] = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")
    if value < minimum or (maximum is not None and value > maximum):
        upper = "" if maximum is None else str(maximum)
        raise ValueError(f"{name} out of range ({minimum}..{upper}), got: {value}")
    return value


def load_conversion_config() -> ConversionConfig:
    """
    Parse and validate conversion configuration from environment variables.

    Behavior:
        - `INKPRESS_RESOLUTION` render DPI, 1..2400 (default 400).
        - `INKPRESS_THRESHOLD_BIAS` signed Otsu offset, -255..255 (default 0).
        - `INKPRESS_PREVIEW_PAGE` 1-based preview page (default 1).
        - `INKPRESS_PAGE_LIMIT` maximum pages rendered per document (default 500).
        - `LOG_LEVEL` logging level name (default INFO).
    """
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO"
    return ConversionConfig(
        resolution=_int_env("INKPRESS_RESOLUTION", DEFAULT_RESOLUTION, minimum=1, maximum=2400),
        threshold_bias=_int_env("INKPRESS_THRESHOLD_BIAS", DEFAULT_THRESHOLD_BIAS, minimum=-255, maximum=255),
        preview_page=_int_env("INKPRESS_PREVIEW_PAGE", 1, minimum=1),
        page_limit=_int_env("INKPRESS_PAGE_LIMIT", DEFAULT_PAGE_LIMIT, minimum=1),
        log_level=level,
    )


__all__ = ["ConversionConfig", "load_conversion_config"]
