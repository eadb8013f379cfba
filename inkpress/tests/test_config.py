"""
Conversion configuration: defaults, env overrides and validation.
"""
from __future__ import annotations

import pytest

from inkpress.config import load_conversion_config
from inkpress.conversion.ports import ConversionSettings


def test_defaults_without_env():
    cfg = load_conversion_config()

    assert cfg.resolution == 400
    assert cfg.threshold_bias == 0
    assert cfg.preview_page == 1
    assert cfg.page_limit == 500
    assert cfg.log_level == "INFO"
    assert cfg.settings() == ConversionSettings(resolution=400, threshold_bias=0)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("INKPRESS_RESOLUTION", "300")
    monkeypatch.setenv("INKPRESS_THRESHOLD_BIAS", "-20")
    monkeypatch.setenv("INKPRESS_PREVIEW_PAGE", "3")
    monkeypatch.setenv("INKPRESS_PAGE_LIMIT", "12")
    monkeypatch.setenv("LOG_LEVEL", " debug ")

    cfg = load_conversion_config()

    assert (cfg.resolution, cfg.threshold_bias, cfg.preview_page, cfg.page_limit) == (300, -20, 3, 12)
    assert cfg.log_level == "DEBUG"


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("INKPRESS_RESOLUTION", "  ")

    assert load_conversion_config().resolution == 400


@pytest.mark.parametrize(
    "name,value",
    [
        ("INKPRESS_RESOLUTION", "abc"),
        ("INKPRESS_RESOLUTION", "0"),
        ("INKPRESS_RESOLUTION", "5000"),
        ("INKPRESS_THRESHOLD_BIAS", "300"),
        ("INKPRESS_PREVIEW_PAGE", "0"),
        ("INKPRESS_PAGE_LIMIT", "-1"),
    ],
)
def test_invalid_values_raise_with_variable_name(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        load_conversion_config()
