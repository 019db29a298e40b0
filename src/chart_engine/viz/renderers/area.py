"""Area charts: filled region between each series and the baseline."""

from __future__ import annotations

from matplotlib.patches import Polygon

from chart_engine.core.constants import ChartKind
from chart_engine.viz.animation import item_delay
from chart_engine.viz.labels import point_label_anchor
from chart_engine.viz.renderers.base import ChartTypeRenderer, Mark, RenderContext

RISE_MS = 1200.0
SERIES_STEP_MS = 200.0
FILL_ALPHA = 0.6


def area_outline(xs: list[float], ys: list[float], baseline: float) -> list[tuple[float, float]]:
    return [(xs[0], baseline), *zip(xs, ys), (xs[-1], baseline)]


class AreaRenderer(ChartTypeRenderer):
    kind = ChartKind.AREA

    def _coords(self, ctx: RenderContext, values: list[float]) -> tuple[list[float], list[float]]:
        return [ctx.scales.x.position(i) for i in range(len(values))], [ctx.scales.y(v) for v in values]

    def draw_marks(self, ctx: RenderContext) -> None:
        baseline = ctx.plot_height
        delay = item_delay(len(ctx.data.datasets), SERIES_STEP_MS)
        for s, ds in enumerate(ctx.data.datasets):
            values = ds.values()
            if not values:
                continue
            xs, ys = self._coords(ctx, values)
            color = ctx.colors[s % len(ctx.colors)] if ctx.colors else ctx.color(0, s)
            poly = Polygon(
                area_outline(xs, ys, baseline),
                closed=True,
                facecolor=color,
                edgecolor=color,
                alpha=FILL_ALPHA,
                linewidth=ctx.pt(1),
                zorder=2,
            )
            ctx.ax.add_patch(poly)

            def rise(t: float, poly=poly, xs=xs, ys=ys) -> None:
                poly.set_xy(area_outline(xs, [baseline + (y - baseline) * t for y in ys], baseline))

            ctx.transition(RISE_MS, s * delay, rise)

            total = sum(values)
            tooltip = (ds.label or "Series", f"Total: {ctx.fmt(total)}")
            ctx.add_mark(
                Mark("area", poly, 0, s, total, tooltip),
                lambda poly=poly: poly.set_alpha(0.8),
                lambda poly=poly: poly.set_alpha(FILL_ALPHA),
            )

    def draw_labels(self, ctx: RenderContext) -> None:
        position = ctx.config.data_labels_position
        delay = item_delay(len(ctx.data.datasets), SERIES_STEP_MS)
        for s, ds in enumerate(ctx.data.datasets):
            values = ds.values()
            xs, ys = self._coords(ctx, values)
            for i, (value, x, y) in enumerate(zip(values, xs, ys)):
                anchor = point_label_anchor(position, x, y, ctx.fmt(value), ctx.config, allow_sides=False, index=i)
                self.draw_label(ctx, anchor, s * delay + 600.0, color=self.label_color(ctx, value))
