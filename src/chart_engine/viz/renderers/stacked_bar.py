"""Stacked bars: datasets stacked in order inside each category band."""

from __future__ import annotations

from matplotlib.colors import to_rgba
from matplotlib.patches import Rectangle

from chart_engine.core.constants import ChartKind
from chart_engine.viz.animation import item_delay
from chart_engine.viz.labels import stacked_label_anchor
from chart_engine.viz.renderers.base import ChartTypeRenderer, Mark, RenderContext, glass_colors

GROW_MS = 600.0
CATEGORY_STEP_MS = 80.0
DATASET_STEP_MS = 20.0


class StackedBarRenderer(ChartTypeRenderer):
    kind = ChartKind.STACKED_BAR

    def _segments(self, ctx: RenderContext):
        x_scale, y_scale = ctx.scales.x, ctx.scales.y
        for i, segs in enumerate(ctx.scales.stacks):
            for seg in segs:
                top = y_scale(seg.y1)
                yield i, seg, x_scale.position(i), top, x_scale.bandwidth, y_scale(seg.y0) - top

    def _delay(self, ctx: RenderContext, category_index: int, dataset_index: int) -> float:
        """Category stagger capped over the whole chart; datasets offset within one category step."""
        step = item_delay(len(ctx.data.labels), CATEGORY_STEP_MS)
        offset = item_delay(len(ctx.data.datasets), DATASET_STEP_MS, CATEGORY_STEP_MS)
        return category_index * step + dataset_index * offset

    def draw_marks(self, ctx: RenderContext) -> None:
        edge_width = ctx.edge_width
        for i, seg, x, y, w, h in self._segments(ctx):
            color = ctx.color(i, seg.dataset_index)
            fill, edge = glass_colors(color)
            rect = Rectangle((x, y), w, h, facecolor=fill, edgecolor=edge, linewidth=edge_width, zorder=2)
            ctx.ax.add_patch(rect)
            base = ctx.scales.y(seg.y0)

            def grow(t: float, rect=rect, base=base, h=h) -> None:
                rect.set_y(base - h * t)
                rect.set_height(h * t)

            ctx.transition(GROW_MS, self._delay(ctx, i, seg.dataset_index), grow)

            def enter(rect=rect, color=color) -> None:
                rect.set_facecolor(to_rgba(rect.get_facecolor(), 0.3))
                rect.set_edgecolor(to_rgba(color, 1.0))
                rect.set_linewidth(ctx.hover_edge_width)

            def leave(rect=rect, fill=fill, edge=edge) -> None:
                rect.set_facecolor(fill)
                rect.set_edgecolor(edge)
                rect.set_linewidth(edge_width)

            ds = ctx.data.datasets[seg.dataset_index]
            tooltip = (ctx.data.labels[i], f"{ds.label}: {ctx.fmt(seg.value)}")
            ctx.add_mark(Mark("segment", rect, i, seg.dataset_index, seg.value, tooltip), enter, leave)

    def draw_labels(self, ctx: RenderContext) -> None:
        position = ctx.config.data_labels_position
        for i, seg, x, y, w, h in self._segments(ctx):
            anchor = stacked_label_anchor(position, x + w / 2.0, y, h, ctx.fmt(seg.value), ctx.config, index=i)
            if anchor is None:
                continue
            delay = self._delay(ctx, i, seg.dataset_index) + 300.0
            self.draw_label(ctx, anchor, delay, color=self.label_color(ctx, seg.value))
