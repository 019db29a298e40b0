"""Shared render context and drawing helpers for the per-chart-type renderers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from matplotlib.artist import Artist
from matplotlib.axes import Axes
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.text import Text

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import ChartKind
from chart_engine.core.types import ChartData
from chart_engine.viz.animation import AnimationScheduler, Easing, Update, ease_cubic_out
from chart_engine.viz.colors import brighter
from chart_engine.viz.interaction import HoverController, HoverTarget
from chart_engine.viz.labels import LabelAnchor
from chart_engine.viz.layout import LayoutPlan, scaled_font_size
from chart_engine.viz.number_format import format_number, negative_color
from chart_engine.viz.scales import BandScale, LinearScale, PointScale, Scales

GRID_COLOR = "#e5e7eb"
AXIS_COLOR = "#6b7280"
AXIS_TEXT_COLOR = "#374151"
DATA_LABEL_COLOR = "#374151"
DEFAULT_DATA_LABEL_FONT_SIZE = 11.0
GLASS_FILL_ALPHA = 0.2
GLASS_EDGE_ALPHA = 0.8
HOVER_GLOW_PX = 0.5
LABEL_FADE_MS = 300.0


def px_to_pt(px: float, dpi: float) -> float:
    """Font sizes and line widths are given in pixels; matplotlib wants points."""
    return px * 72.0 / dpi


@dataclass
class Mark:
    """One drawn data mark with the indices it represents."""

    kind: str
    artist: Artist
    index: int
    series: int = 0
    value: float = 0.0
    tooltip: tuple[str, ...] = ()


@dataclass
class RenderContext:
    """
    Everything a renderer needs for one pass.

    `ax` is mapped 1 unit = 1 px over the plot area with y growing downward;
    `overlay` covers the whole figure in the same pixel convention.
    """

    figure: Figure
    ax: Axes
    overlay: Axes
    data: ChartData
    config: ChartConfiguration
    layout: LayoutPlan
    scales: Scales
    colors: list[str]
    per_category: bool
    animate: bool
    scheduler: AnimationScheduler
    hover: HoverController
    scale_factor: float = 1.0
    marks: list[Mark] = field(default_factory=list)
    labels: list[LabelAnchor] = field(default_factory=list)

    @property
    def dpi(self) -> float:
        return float(self.figure.dpi)

    @property
    def plot_width(self) -> float:
        return self.layout.plot_width

    @property
    def plot_height(self) -> float:
        return self.layout.plot_height

    def pt(self, px: float) -> float:
        return px_to_pt(px, self.dpi)

    @property
    def edge_width(self) -> float:
        return self.pt(self.layout.glow_width)

    @property
    def hover_edge_width(self) -> float:
        return self.pt(self.layout.glow_width + HOVER_GLOW_PX)

    def color(self, category_index: int, series_index: int) -> str:
        if not self.colors:
            return "#6366f1"
        i = category_index if self.per_category else series_index
        return self.colors[i % len(self.colors)]

    def fmt(self, value: float) -> str:
        return format_number(value, self.config.number_format)

    def transition(self, duration_ms: float, delay_ms: float, update: Update, ease: Easing = ease_cubic_out) -> None:
        """Schedule `update` when animating, otherwise jump straight to the final state."""
        if self.animate:
            self.scheduler.schedule(duration_ms, delay_ms, update, ease)
        else:
            update(1.0)

    def add_mark(self, mark: Mark, on_enter=None, on_leave=None) -> Mark:
        self.marks.append(mark)
        self.hover.add(HoverTarget(mark.artist, mark.tooltip, on_enter, on_leave))
        return mark


def glass_colors(color: str) -> tuple[tuple[float, ...], tuple[float, ...]]:
    """Translucent brightened fill plus a stronger outline in the base color."""
    return to_rgba(brighter(color, 1.5), GLASS_FILL_ALPHA), to_rgba(color, GLASS_EDGE_ALPHA)


class ChartTypeRenderer:
    """
    Draws one chart kind into a prepared RenderContext.

    Subclasses implement `draw_marks` and, where the chart has them,
    `draw_labels`. Axes and grid are drawn here for every cartesian kind.
    """

    kind: ChartKind = ChartKind.SINGLE_BAR
    cartesian: bool = True

    def render(self, ctx: RenderContext) -> None:
        ax = ctx.ax
        ax.set_xlim(0.0, ctx.plot_width)
        ax.set_ylim(ctx.plot_height, 0.0)
        ax.set_facecolor("none")
        if self.cartesian:
            if ctx.config.show_grid:
                self.draw_grid(ctx)
            self.draw_axes(ctx)
            self.draw_axis_labels(ctx)
        else:
            ax.axis("off")
        self.draw_marks(ctx)
        if ctx.config.show_data_labels:
            self.draw_labels(ctx)

    def draw_marks(self, ctx: RenderContext) -> None:
        raise NotImplementedError

    def draw_labels(self, ctx: RenderContext) -> None:
        return None

    # Axes -------------------------------------------------------------------

    def draw_grid(self, ctx: RenderContext) -> None:
        y = ctx.scales.y
        if isinstance(y, LinearScale):
            for t in y.ticks(5):
                ctx.ax.axhline(y(t), color=GRID_COLOR, linewidth=ctx.pt(1), zorder=0)

    def x_ticks(self, ctx: RenderContext) -> tuple[list[float], list[str]]:
        x = ctx.scales.x
        if isinstance(x, (BandScale, PointScale)):
            return [x.center(i) for i in range(len(x.labels))], list(x.labels)
        if isinstance(x, LinearScale):
            ticks = x.ticks(5)
            return [x(t) for t in ticks], [ctx.fmt(t) for t in ticks]
        return [], []

    def y_ticks(self, ctx: RenderContext) -> tuple[list[float], list[str]]:
        y = ctx.scales.y
        if not isinstance(y, LinearScale):
            return [], []
        ticks = y.ticks(5)
        return [y(t) for t in ticks], [ctx.fmt(t) for t in ticks]

    def draw_axes(self, ctx: RenderContext) -> None:
        ax, config = ctx.ax, ctx.config
        for side in ("top", "right"):
            ax.spines[side].set_visible(False)
        for side in ("bottom", "left"):
            ax.spines[side].set_color(AXIS_COLOR)
            ax.spines[side].set_linewidth(ctx.pt(1))

        x_pos, x_text = self.x_ticks(ctx)
        y_pos, y_text = self.y_ticks(ctx)
        ax.set_xticks(x_pos, x_text)
        ax.set_yticks(y_pos, y_text)

        x_font = scaled_font_size(config.x_axis_font_size, ctx.layout.axis_font_size, ctx.plot_width, ctx.scale_factor)
        y_font = scaled_font_size(config.y_axis_font_size, ctx.layout.axis_font_size, ctx.plot_width, ctx.scale_factor)
        ax.tick_params(
            axis="x",
            labelsize=ctx.pt(x_font),
            colors=AXIS_TEXT_COLOR,
            length=ctx.pt(6) if config.show_x_axis_ticks else 0,
            pad=ctx.pt(3 + config.x_axis_offset_y),
            labelrotation=-45 if config.rotate_x_axis_labels else 0,
        )
        ax.tick_params(
            axis="y",
            labelsize=ctx.pt(y_font),
            colors=AXIS_TEXT_COLOR,
            length=ctx.pt(6) if config.show_y_axis_ticks else 0,
            pad=ctx.pt(3 - config.y_axis_offset_x),
            labelrotation=-45 if config.rotate_y_axis_labels else 0,
        )
        if config.rotate_x_axis_labels:
            for text in ax.get_xticklabels():
                text.set_horizontalalignment("left")

    def draw_axis_labels(self, ctx: RenderContext) -> None:
        ax, config = ctx.ax, ctx.config
        x_text = config.x_axis_label or config.x_axis_field
        y_text = config.y_axis_label or config.primary_y_field
        if x_text:
            size = scaled_font_size(
                config.x_axis_label_font_size, ctx.layout.axis_font_size, ctx.plot_width, ctx.scale_factor
            )
            ax.text(
                ctx.plot_width / 2.0 + config.x_axis_label_offset_x,
                ctx.plot_height + 35.0 + config.x_axis_label_offset_y,
                x_text,
                ha="center",
                va="center",
                fontsize=ctx.pt(size),
                color=AXIS_TEXT_COLOR,
                clip_on=False,
            )
        if y_text:
            size = scaled_font_size(
                config.y_axis_label_font_size, ctx.layout.axis_font_size, ctx.plot_width, ctx.scale_factor
            )
            ax.text(
                -ctx.layout.margins.left * 0.75 + config.y_axis_label_offset_x,
                ctx.plot_height / 2.0 + config.y_axis_label_offset_y,
                y_text,
                ha="center",
                va="center",
                rotation=90,
                fontsize=ctx.pt(size),
                color=AXIS_TEXT_COLOR,
                clip_on=False,
            )

    # Labels -----------------------------------------------------------------

    def label_font_size(self, ctx: RenderContext) -> float:
        return float(round((ctx.config.data_labels_font_size or DEFAULT_DATA_LABEL_FONT_SIZE) * ctx.scale_factor))

    def label_color(self, ctx: RenderContext, value: float | None = None, default: str = DATA_LABEL_COLOR) -> str:
        if value is not None:
            red = negative_color(value, ctx.config.number_format)
            if red is not None:
                return red
        return ctx.config.data_labels_color or default

    def draw_label(
        self,
        ctx: RenderContext,
        anchor: LabelAnchor,
        delay_ms: float,
        duration_ms: float = LABEL_FADE_MS,
        color: str | None = None,
        origin: tuple[float, float] = (0.0, 0.0),
    ) -> list[Text]:
        """Draw an anchored label (one text per line) and fade it in."""
        size = ctx.pt(self.label_font_size(ctx))
        texts: list[Text] = []
        offsets: Sequence[float] = anchor.line_offsets if len(anchor.line_offsets) == len(anchor.lines) else (0.0,) * len(anchor.lines)
        for line, dy in zip(anchor.lines, offsets):
            texts.append(
                ctx.ax.text(
                    origin[0] + anchor.x,
                    origin[1] + anchor.y + dy,
                    line,
                    ha=anchor.ha,
                    va=anchor.va,
                    fontsize=size,
                    fontweight="semibold",
                    color=color or self.label_color(ctx),
                    clip_on=False,
                    zorder=5,
                )
            )
        ctx.labels.append(anchor)

        def fade(t: float) -> None:
            for text in texts:
                text.set_alpha(t)

        ctx.transition(duration_ms, delay_ms, fade)
        return texts
