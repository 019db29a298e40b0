"""Line charts: a progressively drawn path per dataset plus point markers."""

from __future__ import annotations

import math
from collections.abc import Sequence

from matplotlib.patches import Circle

from chart_engine.core.constants import ChartKind
from chart_engine.viz.animation import ease_cubic_in_out, item_delay
from chart_engine.viz.labels import line_label_text, point_label_anchor
from chart_engine.viz.renderers.base import ChartTypeRenderer, Mark, RenderContext

DRAW_MS = 1200.0
POINT_DELAY_MS = 800.0
POINT_STEP_MS = 100.0
POINT_GROW_MS = 600.0
POINT_RADIUS = 4.0
POINT_HOVER_RADIUS = 6.0
LINE_WIDTH = 2.0
LINE_ALPHA = 0.9


def partial_path(xs: Sequence[float], ys: Sequence[float], fraction: float) -> tuple[list[float], list[float]]:
    """Leading `fraction` of a polyline, measured along its length."""
    if len(xs) < 2 or fraction >= 1.0:
        return list(xs), list(ys)
    seg = [math.hypot(xs[i + 1] - xs[i], ys[i + 1] - ys[i]) for i in range(len(xs) - 1)]
    target = sum(seg) * max(0.0, fraction)
    out_x, out_y = [xs[0]], [ys[0]]
    for i, length in enumerate(seg):
        if target >= length:
            target -= length
            out_x.append(xs[i + 1])
            out_y.append(ys[i + 1])
            continue
        if length > 0:
            k = target / length
            out_x.append(xs[i] + (xs[i + 1] - xs[i]) * k)
            out_y.append(ys[i] + (ys[i + 1] - ys[i]) * k)
        break
    return out_x, out_y


class LineRenderer(ChartTypeRenderer):
    kind = ChartKind.SIMPLE_LINE

    def _coords(self, ctx: RenderContext, values: Sequence[float]) -> tuple[list[float], list[float]]:
        x_scale, y_scale = ctx.scales.x, ctx.scales.y
        return [x_scale.position(i) for i in range(len(values))], [y_scale(v) for v in values]

    def draw_marks(self, ctx: RenderContext) -> None:
        for s, ds in enumerate(ctx.data.datasets):
            values = ds.values()
            xs, ys = self._coords(ctx, values)
            color = ctx.color(s, s)
            (line,) = ctx.ax.plot(
                xs, ys, color=color, linewidth=ctx.pt(LINE_WIDTH), alpha=LINE_ALPHA, solid_capstyle="round", zorder=2
            )
            ctx.marks.append(Mark("line", line, 0, s, 0.0, (ds.label,)))

            def draw(t: float, line=line, xs=xs, ys=ys) -> None:
                line.set_data(*partial_path(xs, ys, t))

            ctx.transition(DRAW_MS, 0.0, draw, ease_cubic_in_out)
            self._draw_points(ctx, s, ds.label, values, xs, ys, color)

    def _draw_points(self, ctx, series, series_label, values, xs, ys, color) -> None:
        delay = item_delay(len(values), POINT_STEP_MS)
        for i, (value, x, y) in enumerate(zip(values, xs, ys)):
            dot = Circle(
                (x, y), POINT_RADIUS, facecolor=color, edgecolor="white", linewidth=ctx.pt(2), zorder=3
            )
            ctx.ax.add_patch(dot)

            def grow(t: float, dot=dot) -> None:
                dot.set_radius(POINT_RADIUS * t)

            ctx.transition(POINT_GROW_MS, POINT_DELAY_MS + i * delay, grow)

            tooltip = (series_label or "Series", f"{ctx.data.labels[i]}: {ctx.fmt(value)}")
            ctx.add_mark(
                Mark("point", dot, i, series, value, tooltip),
                lambda dot=dot: dot.set_radius(POINT_HOVER_RADIUS),
                lambda dot=dot: dot.set_radius(POINT_RADIUS),
            )

    def draw_labels(self, ctx: RenderContext) -> None:
        max_value = ctx.data.max_value()
        position = ctx.config.data_labels_position
        for s, ds in enumerate(ctx.data.datasets):
            values = ds.values()
            xs, ys = self._coords(ctx, values)
            delay = item_delay(len(values), POINT_STEP_MS)
            for i, (value, x, y) in enumerate(zip(values, xs, ys)):
                text = line_label_text(ctx.data.labels[i], value, ds.label, max_value, ctx.config)
                anchor = point_label_anchor(position, x, y, text, ctx.config, allow_sides=True, index=i)
                self.draw_label(ctx, anchor, DRAW_MS + i * delay, 400.0, color=self.label_color(ctx, value))
