"""Grouped bars: one band per category, one bar per dataset inside the band."""

from __future__ import annotations

from matplotlib.colors import to_rgba
from matplotlib.patches import Rectangle

from chart_engine.core.constants import ChartKind
from chart_engine.viz.animation import item_delay
from chart_engine.viz.labels import bar_label_anchor
from chart_engine.viz.renderers.base import ChartTypeRenderer, Mark, RenderContext, glass_colors
from chart_engine.viz.scales import BandScale

GROW_MS = 600.0
HOVER_FILL_ALPHA = 0.3


class BarRenderer(ChartTypeRenderer):
    kind = ChartKind.SINGLE_BAR

    def _geometry(self, ctx: RenderContext, label_index: int, series_index: int, value: float):
        x_scale: BandScale = ctx.scales.x
        bar_width = x_scale.bandwidth / max(1, len(ctx.data.datasets))
        x = x_scale.position(label_index) + series_index * bar_width
        y = ctx.scales.y(value)
        return x, y, bar_width, ctx.plot_height - y

    def draw_marks(self, ctx: RenderContext) -> None:
        delay = item_delay(len(ctx.data.labels))
        edge_width = ctx.edge_width
        for s, ds in enumerate(ctx.data.datasets):
            for i, value in enumerate(ds.values()):
                x, y, w, h = self._geometry(ctx, i, s, value)
                color = ctx.color(i, s)
                fill, edge = glass_colors(color)
                rect = Rectangle((x, y), w, h, facecolor=fill, edgecolor=edge, linewidth=edge_width, zorder=2)
                ctx.ax.add_patch(rect)

                def grow(t: float, rect=rect, y=y, h=h) -> None:
                    rect.set_y(ctx.plot_height - h * t)
                    rect.set_height(h * t)

                ctx.transition(GROW_MS, i * delay, grow)

                def enter(rect=rect, color=color) -> None:
                    rect.set_facecolor(to_rgba(rect.get_facecolor(), HOVER_FILL_ALPHA))
                    rect.set_edgecolor(to_rgba(color, 1.0))
                    rect.set_linewidth(ctx.hover_edge_width)

                def leave(rect=rect, fill=fill, edge=edge) -> None:
                    rect.set_facecolor(fill)
                    rect.set_edgecolor(edge)
                    rect.set_linewidth(edge_width)

                tooltip = (ctx.data.labels[i], f"{ds.label or 'Value'}: {ctx.fmt(value)}")
                ctx.add_mark(Mark("bar", rect, i, s, value, tooltip), enter, leave)

    def draw_labels(self, ctx: RenderContext) -> None:
        delay = item_delay(len(ctx.data.labels))
        position = ctx.config.data_labels_position
        for s, ds in enumerate(ctx.data.datasets):
            for i, value in enumerate(ds.values()):
                x, y, w, h = self._geometry(ctx, i, s, value)
                anchor = bar_label_anchor(
                    position, x + w / 2.0, w, y, h, ctx.plot_height, ctx.fmt(value), ctx.config, index=i
                )
                self.draw_label(ctx, anchor, i * delay + 300.0, color=self.label_color(ctx, value))


class MultiBarRenderer(BarRenderer):
    kind = ChartKind.MULTI_BAR
