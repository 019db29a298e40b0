"""Render pipeline facade: configuration + chart data -> one matplotlib figure."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle
from matplotlib.transforms import Affine2D

from chart_engine.analytics.templates import chart_kind_for
from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    RENDER_DPI,
    TITLE_BAND_HEIGHT,
    ChartKind,
    SizeClass,
    VerticalAnchor,
)
from chart_engine.core.errors import RenderFailure
from chart_engine.core.types import ChartData
from chart_engine.viz.animation import AnimationScheduler
from chart_engine.viz.colors import color_item_count, resolve_colors, uses_per_category_colors
from chart_engine.viz.interaction import HoverController
from chart_engine.viz.labels import LabelAnchor
from chart_engine.viz.layout import LayoutPlan, plan_layout
from chart_engine.viz.legend import ICON_GAP, LegendLayout, layout_legend, legend_items, legend_visible
from chart_engine.viz.number_format import apply_detected_decimals
from chart_engine.viz.renderers import Mark, RenderContext, renderer_for
from chart_engine.viz.renderers.base import px_to_pt
from chart_engine.viz.scales import Scales, build_scales

logger = logging.getLogger(__name__)

TITLE_COLOR = "#1f2937"
LEGEND_TEXT_COLOR = "#374151"
PLACEHOLDER_COLOR = "#9ca3af"
PLACEHOLDER_TEXT = "No data"
TITLE_SIDE_PAD = 20.0

_SCALE_FACTOR = {SizeClass.FULL: 1.0, SizeClass.PREVIEW: 0.9, SizeClass.COMPACT: 0.75}


@dataclass
class RenderedChart:
    """What one render pass produced; geometry is in figure pixels with a top-left origin."""

    figure: Figure
    kind: ChartKind | None
    data: ChartData | None
    colors: list[str] = field(default_factory=list)
    layout: LayoutPlan | None = None
    scales: Scales | None = None
    marks: list[Mark] = field(default_factory=list)
    labels: list[LabelAnchor] = field(default_factory=list)
    legend: LegendLayout | None = None
    placeholder: bool = False

    def marks_of(self, kind: str) -> list[Mark]:
        return [m for m in self.marks if m.kind == kind]


def _pixel_axes(ax: Axes, width: float, height: float) -> None:
    ax.set_xlim(0.0, width)
    ax.set_ylim(height, 0.0)
    ax.axis("off")


class ChartView:
    """
    One chart surface that is fully rebuilt on every render.

    Pending enter transitions are cancelled before each render; `save_png`
    completes them first so the file shows the final frame.
    """

    def __init__(self, width: int = DEFAULT_CANVAS_WIDTH, height: int = DEFAULT_CANVAS_HEIGHT, dpi: int = RENDER_DPI) -> None:
        self.width = width
        self.height = height
        self.dpi = dpi
        self.scheduler = AnimationScheduler()
        self.figure: Figure | None = None
        self.hover: HoverController | None = None
        self.rendered: RenderedChart | None = None

    def close(self) -> None:
        if self.hover is not None:
            self.hover.disconnect()
            self.hover = None
        if self.figure is not None:
            plt.close(self.figure)
            self.figure = None

    def render(
        self,
        config: ChartConfiguration,
        data: ChartData | None,
        width: int | None = None,
        height: int | None = None,
        animate: bool = True,
    ) -> RenderedChart:
        self.scheduler.cancel_all()
        self.close()
        width = int(width or self.width)
        height = int(height or self.height)

        fig = plt.figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
        fig.patch.set_facecolor("white")
        self.figure = fig

        if data is None or data.is_empty:
            self.rendered = self._placeholder(fig, width, height)
            return self.rendered

        try:
            self.rendered = self._draw(fig, config, data, width, height, animate and config.animation)
        except RenderFailure:
            logger.exception("Rendering %s failed; showing placeholder", config.template_id)
            self.scheduler.cancel_all()
            if self.hover is not None:
                self.hover.disconnect()
                self.hover = None
            fig.clear()
            self.rendered = self._placeholder(fig, width, height)
        return self.rendered

    def save_png(self, path: str | Path) -> Path:
        if self.figure is None:
            raise RuntimeError("Nothing rendered yet")
        self.scheduler.complete_all()
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(out, dpi=self.dpi, facecolor=self.figure.get_facecolor())
        return out

    # Pipeline ---------------------------------------------------------------

    def _placeholder(self, fig: Figure, width: int, height: int) -> RenderedChart:
        overlay = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        _pixel_axes(overlay, width, height)
        overlay.text(
            width / 2.0,
            height / 2.0,
            PLACEHOLDER_TEXT,
            ha="center",
            va="center",
            fontsize=px_to_pt(14, self.dpi),
            color=PLACEHOLDER_COLOR,
        )
        return RenderedChart(figure=fig, kind=None, data=None, placeholder=True)

    def _draw(
        self,
        fig: Figure,
        config: ChartConfiguration,
        data: ChartData,
        width: int,
        height: int,
        animate: bool,
    ) -> RenderedChart:
        try:
            return self._compose(fig, config, data, width, height, animate)
        except Exception as e:
            raise RenderFailure(f"Failed to draw chart '{config.template_id}': {e}") from e

    def _compose(
        self,
        fig: Figure,
        config: ChartConfiguration,
        data: ChartData,
        width: int,
        height: int,
        animate: bool,
    ) -> RenderedChart:
        kind = chart_kind_for(config.template_id)
        config = apply_detected_decimals(config, data)

        title_at_bottom = config.title_vertical_position == VerticalAnchor.BOTTOM
        surface_height = max(1, height - TITLE_BAND_HEIGHT)
        surface_top = 0.0 if title_at_bottom else float(TITLE_BAND_HEIGHT)

        layout = plan_layout(width, surface_height, config.template_id, config.padding_horizontal, config.padding_vertical)
        scale_factor = _SCALE_FACTOR[layout.size_class]
        scales = build_scales(kind, data, layout.plot_width, layout.plot_height, config)
        per_category = uses_per_category_colors(config, data)
        colors = resolve_colors(config, color_item_count(config, data))

        overlay = fig.add_axes((0.0, 0.0, 1.0, 1.0), zorder=3)
        _pixel_axes(overlay, width, height)
        overlay.patch.set_alpha(0.0)

        left = layout.margins.left + config.chart_offset_x
        top = surface_top + layout.margins.top + config.chart_offset_y
        ax = fig.add_axes(
            (
                left / width,
                1.0 - (top + layout.plot_height) / height,
                layout.plot_width / width,
                layout.plot_height / height,
            ),
            zorder=1,
        )

        self.hover = HoverController(fig, overlay)
        ctx = RenderContext(
            figure=fig,
            ax=ax,
            overlay=overlay,
            data=data,
            config=config,
            layout=layout,
            scales=scales,
            colors=colors,
            per_category=per_category,
            animate=animate,
            scheduler=self.scheduler,
            hover=self.hover,
            scale_factor=scale_factor,
        )
        renderer_for(kind).render(ctx)

        self._draw_title(overlay, config, layout, width, height, title_at_bottom)
        legend = None
        if legend_visible(config, data):
            items = legend_items(config, data, colors)
            legend = layout_legend(items, config, width, surface_height, scale=scale_factor)
            self._draw_legend(overlay, legend, surface_top)

        self.hover.connect()
        if animate:
            self.scheduler.start(fig.canvas)
        logger.debug("Rendered %s with %d marks", kind.value, len(ctx.marks))
        return RenderedChart(
            figure=fig,
            kind=kind,
            data=data,
            colors=colors,
            layout=layout,
            scales=scales,
            marks=ctx.marks,
            labels=ctx.labels,
            legend=legend,
        )

    def _draw_title(
        self,
        overlay: Axes,
        config: ChartConfiguration,
        layout: LayoutPlan,
        width: int,
        height: int,
        at_bottom: bool,
    ) -> None:
        if not config.title:
            return
        size = px_to_pt(config.title_font_size or layout.title_font_size, self.dpi)
        style = {"fontsize": size, "fontweight": "bold", "color": TITLE_COLOR, "va": "center"}

        custom = config.title_custom_position
        if custom is not None:
            overlay.text(
                custom.x + config.title_offset_x,
                custom.y + config.title_offset_y,
                config.title,
                ha="center",
                rotation=-custom.rotation,
                **style,
            )
            return

        anchor = config.title_horizontal_position or config.title_position
        horizontal = anchor.value if anchor is not None else "center"
        if horizontal == "left":
            x, ha = TITLE_SIDE_PAD, "left"
        elif horizontal == "right":
            x, ha = width - TITLE_SIDE_PAD, "right"
        else:
            x, ha = width / 2.0, "center"
        band_mid = height - TITLE_BAND_HEIGHT / 2.0 if at_bottom else TITLE_BAND_HEIGHT / 2.0
        overlay.text(x + config.title_offset_x, band_mid + config.title_offset_y, config.title, ha=ha, **style)

    def _draw_legend(self, overlay: Axes, legend: LegendLayout, surface_top: float) -> None:
        transform = (
            Affine2D().rotate_deg(legend.rotation).translate(legend.origin_x, legend.origin_y + surface_top)
            + overlay.transData
        )
        font = px_to_pt(legend.font_size, self.dpi)
        for placed in legend.placed:
            overlay.add_patch(
                Rectangle(
                    (placed.x, placed.y),
                    legend.icon_size,
                    legend.icon_size,
                    facecolor=placed.item.color,
                    edgecolor="none",
                    transform=transform,
                    clip_on=False,
                )
            )
            overlay.text(
                placed.x + legend.icon_size + ICON_GAP,
                placed.y + legend.icon_size / 2.0,
                placed.item.label,
                ha="left",
                va="center",
                fontsize=font,
                color=LEGEND_TEXT_COLOR,
                transform=transform,
                clip_on=False,
                rotation=-legend.rotation,
            )
