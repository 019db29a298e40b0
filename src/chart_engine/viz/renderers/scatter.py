"""Scatter plots on two linear scales with zero reference lines."""

from __future__ import annotations

from matplotlib.patches import Circle

from chart_engine.core.constants import ChartKind
from chart_engine.viz.animation import item_delay
from chart_engine.viz.labels import point_label_anchor, scatter_label_text
from chart_engine.viz.renderers.base import GRID_COLOR, ChartTypeRenderer, Mark, RenderContext
from chart_engine.viz.scales import LinearScale

GROW_MS = 600.0
POINT_STEP_MS = 80.0
POINT_RADIUS = 4.0
POINT_HOVER_RADIUS = 6.0
POINT_ALPHA = 0.8
ZERO_LINE_COLOR = "#9ca3af"


class ScatterRenderer(ChartTypeRenderer):
    kind = ChartKind.SCATTER

    def draw_grid(self, ctx: RenderContext) -> None:
        super().draw_grid(ctx)
        x = ctx.scales.x
        if isinstance(x, LinearScale):
            for t in x.ticks(5):
                ctx.ax.axvline(x(t), color=GRID_COLOR, linewidth=ctx.pt(1), zorder=0)

    def draw_zero_lines(self, ctx: RenderContext) -> None:
        style = {"color": ZERO_LINE_COLOR, "linewidth": ctx.pt(1.5), "alpha": 0.7, "zorder": 1}
        if ctx.scales.zero_y:
            ctx.ax.axhline(ctx.scales.y(0.0), **style)
        if ctx.scales.zero_x:
            ctx.ax.axvline(ctx.scales.x(0.0), **style)

    def draw_marks(self, ctx: RenderContext) -> None:
        self.draw_zero_lines(ctx)
        for s, ds in enumerate(ctx.data.datasets):
            color = ctx.color(s, s)
            delay = item_delay(len(ds.points()), POINT_STEP_MS)
            for i, p in enumerate(ds.points()):
                dot = Circle(
                    (ctx.scales.x(p.x), ctx.scales.y(p.y)),
                    POINT_RADIUS,
                    facecolor=color,
                    edgecolor="white",
                    linewidth=ctx.pt(1),
                    alpha=POINT_ALPHA,
                    zorder=3,
                )
                ctx.ax.add_patch(dot)

                def grow(t: float, dot=dot) -> None:
                    dot.set_radius(POINT_RADIUS * t)

                ctx.transition(GROW_MS, i * delay, grow)

                tooltip = (ds.label or "Series", f"X: {ctx.fmt(p.x)}", f"Y: {ctx.fmt(p.y)}")
                ctx.add_mark(
                    Mark("point", dot, i, s, p.y, tooltip),
                    lambda dot=dot: dot.set_radius(POINT_HOVER_RADIUS),
                    lambda dot=dot: dot.set_radius(POINT_RADIUS),
                )

    def draw_labels(self, ctx: RenderContext) -> None:
        position = ctx.config.data_labels_position
        for s, ds in enumerate(ctx.data.datasets):
            delay = item_delay(len(ds.points()), POINT_STEP_MS)
            for i, p in enumerate(ds.points()):
                text = scatter_label_text(p.x, p.y, ds.label, ctx.config)
                anchor = point_label_anchor(
                    position, ctx.scales.x(p.x), ctx.scales.y(p.y), text, ctx.config, allow_sides=True, index=i
                )
                self.draw_label(ctx, anchor, i * delay + 600.0)
