"""
Smoke test: verify that the package is installable and importable.

It should pass only if the project is installed (e.g., `pip install -e .`)
and packaging configuration includes the package code.
"""

from __future__ import annotations

import importlib
from importlib import metadata

PACKAGE_NAME = "chart_engine"
DIST_NAME = "chart-aggregation-engine"

SUBMODULES = (
    "chart_engine.analytics.aggregation",
    "chart_engine.viz.chart_view",
    "chart_engine.viz.render_cache",
    "chart_engine.reports.summary_generator",
    "chart_engine.cli.render",
)


def test_import_package() -> None:
    """Package and its main entry modules import after installation."""
    assert importlib.import_module(PACKAGE_NAME) is not None
    for name in SUBMODULES:
        assert importlib.import_module(name) is not None


def test_distribution_version_available() -> None:
    """Distribution metadata is available (proves the package is installed)."""
    version = metadata.version(DIST_NAME)
    assert isinstance(version, str)
    assert version.strip() != ""
