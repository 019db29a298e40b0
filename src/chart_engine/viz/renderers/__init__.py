from __future__ import annotations

from chart_engine.core.constants import ChartKind
from chart_engine.viz.renderers.area import AreaRenderer
from chart_engine.viz.renderers.bar import BarRenderer, MultiBarRenderer
from chart_engine.viz.renderers.base import ChartTypeRenderer, Mark, RenderContext
from chart_engine.viz.renderers.line import LineRenderer
from chart_engine.viz.renderers.multi_line import MultiLineRenderer
from chart_engine.viz.renderers.pie import PieRenderer
from chart_engine.viz.renderers.scatter import ScatterRenderer
from chart_engine.viz.renderers.stacked_bar import StackedBarRenderer

RENDERERS: dict[ChartKind, ChartTypeRenderer] = {
    ChartKind.SINGLE_BAR: BarRenderer(),
    ChartKind.MULTI_BAR: MultiBarRenderer(),
    ChartKind.STACKED_BAR: StackedBarRenderer(),
    ChartKind.SIMPLE_LINE: LineRenderer(),
    ChartKind.MULTI_LINE: MultiLineRenderer(),
    ChartKind.AREA: AreaRenderer(),
    ChartKind.PIE: PieRenderer(),
    ChartKind.SCATTER: ScatterRenderer(),
}


def renderer_for(kind: ChartKind) -> ChartTypeRenderer:
    return RENDERERS.get(kind, RENDERERS[ChartKind.SINGLE_BAR])


__all__ = ["RENDERERS", "ChartTypeRenderer", "Mark", "RenderContext", "renderer_for"]
