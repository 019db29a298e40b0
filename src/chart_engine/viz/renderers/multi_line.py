"""Multi-line charts: one colored line per series, drawn like a simple line."""

from __future__ import annotations

from chart_engine.core.constants import ChartKind
from chart_engine.viz.renderers.line import LineRenderer


class MultiLineRenderer(LineRenderer):
    kind = ChartKind.MULTI_LINE
