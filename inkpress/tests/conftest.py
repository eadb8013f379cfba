"""
Pytest configuration for inkpress tests.

Why: tests run from a source checkout as well as from an installed package,
and a developer's shell may export INKPRESS_* overrides that would change
config defaults mid-suite.
"""
import sys
from pathlib import Path

import pytest

# Ensure the package and test helpers are importable without installation
REPO_ROOT = Path(__file__).resolve().parents[2]
TESTS_DIR = REPO_ROOT / "inkpress" / "tests"
for p in (str(REPO_ROOT), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture(autouse=True)
def _clear_inkpress_env(monkeypatch: pytest.MonkeyPatch):
    """Drop env-driven config so every test starts from documented defaults."""
    for var in (
        "INKPRESS_RESOLUTION",
        "INKPRESS_THRESHOLD_BIAS",
        "INKPRESS_PREVIEW_PAGE",
        "INKPRESS_PAGE_LIMIT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    yield
