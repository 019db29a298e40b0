"""Pie charts: one wedge per category of the first dataset, clockwise from 12 o'clock."""

from __future__ import annotations

import math

from matplotlib.colors import to_rgba
from matplotlib.patches import Wedge

from chart_engine.core.constants import ChartKind, LabelPosition
from chart_engine.viz.animation import item_delay
from chart_engine.viz.labels import percentage_text, pie_label_anchors, pie_label_parts
from chart_engine.viz.renderers.base import ChartTypeRenderer, Mark, RenderContext, glass_colors

GROW_MS = 800.0
SLICE_STEP_MS = 100.0
RADIUS_FRACTION = 0.4025
MIN_RADIUS = 20.0
OUTSIDE_LABEL_COLOR = "#374151"
INSIDE_LABEL_COLOR = "#1f2937"


def slice_angles(values: list[float]) -> list[tuple[float, float]]:
    """(start, end) radians per value, negatives counted as zero."""
    clean = [max(0.0, v) for v in values]
    total = sum(clean)
    angles: list[tuple[float, float]] = []
    start = 0.0
    for v in clean:
        end = start + (v / total * 2.0 * math.pi if total else 0.0)
        angles.append((start, end))
        start = end
    return angles


class PieRenderer(ChartTypeRenderer):
    kind = ChartKind.PIE
    cartesian = False

    def radius(self, ctx: RenderContext) -> float:
        return max(MIN_RADIUS, min(ctx.plot_width, ctx.plot_height) * RADIUS_FRACTION)

    def center(self, ctx: RenderContext) -> tuple[float, float]:
        return ctx.plot_width / 2.0, ctx.plot_height / 2.0

    def _values(self, ctx: RenderContext) -> list[float]:
        return ctx.data.datasets[0].values() if ctx.data.datasets else []

    def draw_marks(self, ctx: RenderContext) -> None:
        values = self._values(ctx)
        total = sum(max(0.0, v) for v in values)
        radius = self.radius(ctx)
        cx, cy = self.center(ctx)
        edge_width = ctx.edge_width
        delay = item_delay(len(values), SLICE_STEP_MS)
        for i, ((start, end), value) in enumerate(zip(slice_angles(values), values)):
            if end <= start:
                continue
            # y grows downward, so increasing data angles run clockwise on screen
            theta1, theta2 = math.degrees(start) - 90.0, math.degrees(end) - 90.0
            color = ctx.colors[i % len(ctx.colors)] if ctx.colors else ctx.color(i, 0)
            fill, edge = glass_colors(color)
            wedge = Wedge((cx, cy), radius, theta1, theta2, facecolor=fill, edgecolor=edge, linewidth=edge_width, zorder=2)
            ctx.ax.add_patch(wedge)

            def grow(t: float, wedge=wedge) -> None:
                wedge.set_radius(radius * t)

            ctx.transition(GROW_MS, i * delay, grow)

            def enter(wedge=wedge, color=color) -> None:
                wedge.set_facecolor(to_rgba(wedge.get_facecolor(), 0.3))
                wedge.set_edgecolor(to_rgba(color, 1.0))
                wedge.set_linewidth(ctx.hover_edge_width)

            def leave(wedge=wedge, fill=fill, edge=edge) -> None:
                wedge.set_facecolor(fill)
                wedge.set_edgecolor(edge)
                wedge.set_linewidth(edge_width)

            tooltip = (ctx.data.labels[i], ctx.fmt(value), percentage_text(max(0.0, value), total))
            ctx.add_mark(Mark("slice", wedge, i, 0, value, tooltip), enter, leave)

    def draw_labels(self, ctx: RenderContext) -> None:
        values = self._values(ctx)
        if not values:
            return
        total = sum(max(0.0, v) for v in values)
        series_name = ctx.data.datasets[0].label
        parts = [
            pie_label_parts(label, value, total, series_name, ctx.config)
            for label, value in zip(ctx.data.labels, values)
        ]
        anchors = pie_label_anchors(slice_angles(values), parts, self.radius(ctx), ctx.config)
        outside = ctx.config.data_labels_position == LabelPosition.OUTSIDE
        default = OUTSIDE_LABEL_COLOR if outside else INSIDE_LABEL_COLOR
        delay = item_delay(len(values), SLICE_STEP_MS)
        for anchor in anchors:
            if values[anchor.index] <= 0:
                continue
            self.draw_label(
                ctx,
                anchor,
                anchor.index * delay + 600.0,
                400.0,
                color=self.label_color(ctx, default=default),
                origin=self.center(ctx),
            )
