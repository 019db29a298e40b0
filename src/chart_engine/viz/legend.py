"""Legend items, text measurement and row/column layout."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.font_manager import FontProperties

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import LegendMapping
from chart_engine.core.types import ChartData
from chart_engine.viz.colors import uses_per_category_colors
from chart_engine.viz.layout import scaled_font_size

logger = logging.getLogger(__name__)

ICON_GAP = 8.0
ITEM_GAP = 28.0
DEFAULT_LEGEND_FONT_SIZE = 11.0
# Width per character when the text probe is unavailable
APPROX_CHAR_WIDTH = 0.55


@dataclass(frozen=True)
class LegendItem:
    label: str
    color: str
    text_width: float = 0.0


@dataclass(frozen=True)
class LegendRow:
    items: tuple[LegendItem, ...]
    width: float


@dataclass(frozen=True)
class PlacedLegendItem:
    """Icon top-left corner relative to the legend origin; text starts at icon + gap."""

    item: LegendItem
    x: float
    y: float


@dataclass(frozen=True)
class LegendLayout:
    origin_x: float
    origin_y: float
    rotation: float
    horizontal: bool
    placed: tuple[PlacedLegendItem, ...]
    rows: tuple[LegendRow, ...]
    icon_size: float
    font_size: float
    line_height: float
    height: float


class TextMeasurer:
    """
    Off-screen Agg probe for text widths in pixels.

    Use as a context manager; the probe is torn down on exit even when a
    measurement fails. Failed measurements fall back to a per-character estimate.
    """

    def __init__(self, font_size: float, family: str | None = None) -> None:
        self.font_size = font_size
        self._font = FontProperties(size=font_size, family=family) if family else FontProperties(size=font_size)
        self._cache: dict[str, float] = {}
        self._figure: Figure | None = None
        self._canvas: FigureCanvasAgg | None = None

    def __enter__(self) -> "TextMeasurer":
        # at 72 dpi one point is one pixel, so font_size is in px
        self._figure = Figure(dpi=72)
        self._canvas = FigureCanvasAgg(self._figure)
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        if self._figure is not None:
            self._figure.clear()
        self._figure = None
        self._canvas = None

    def approximate(self, text: str) -> float:
        return len(text) * self.font_size * APPROX_CHAR_WIDTH

    def width(self, text: str) -> float:
        if text in self._cache:
            return self._cache[text]
        if self._canvas is None or not text:
            value = self.approximate(text)
        else:
            try:
                renderer = self._canvas.get_renderer()
                value, _, _ = renderer.get_text_width_height_descent(text, self._font, ismath=False)
            except (RuntimeError, ValueError) as e:
                logger.debug("Text probe failed for %r: %s", text, e)
                value = self.approximate(text)
        self._cache[text] = float(value)
        return float(value)


def legend_shows_categories(config: ChartConfiguration, data: ChartData) -> bool:
    if config.legend_mapping == LegendMapping.CATEGORIES:
        return True
    return config.legend_mapping is None and uses_per_category_colors(config, data)


def legend_items(config: ChartConfiguration, data: ChartData, colors: Sequence[str]) -> list[LegendItem]:
    """Category labels or dataset labels, each paired with its color."""
    if not colors:
        return []
    if legend_shows_categories(config, data):
        names = list(data.labels)
    else:
        names = [ds.label for ds in data.datasets]
    return [LegendItem(label=name, color=colors[i % len(colors)]) for i, name in enumerate(names)]


def legend_visible(config: ChartConfiguration, data: ChartData | None) -> bool:
    return data is not None and (config.show_legend or len(data.datasets) > 1)


def legend_anchors(config: ChartConfiguration) -> tuple[str, str]:
    vertical = config.legend_vertical_position.value if config.legend_vertical_position else "top"
    if config.legend_horizontal_position is not None:
        horizontal = config.legend_horizontal_position.value
    else:
        horizontal = config.legend_position or "right"
    return vertical, horizontal


def wrap_rows(items: Sequence[LegendItem], icon_size: float, max_row_width: float) -> list[LegendRow]:
    """Greedy rows: an item moves to a new row when it would push the row past the max width."""
    rows: list[LegendRow] = []
    current: list[LegendItem] = []
    width = 0.0
    for item in items:
        content = icon_size + ICON_GAP + item.text_width
        projected = content if not current else width + ITEM_GAP + content
        if current and projected > max_row_width:
            rows.append(LegendRow(tuple(current), width))
            current, width = [], 0.0
        if current:
            width += ITEM_GAP
        width += content
        current.append(item)
    if current:
        rows.append(LegendRow(tuple(current), width))
    return rows


def _single_row(items: Sequence[LegendItem], icon_size: float) -> LegendRow:
    width = sum(icon_size + ICON_GAP + it.text_width + (ITEM_GAP if i > 0 else 0.0) for i, it in enumerate(items))
    return LegendRow(tuple(items), width)


def _row_start(horizontal: str, row_width: float) -> float:
    if horizontal == "left":
        return 0.0
    if horizontal == "right":
        return -row_width
    return -row_width / 2.0


def _place_rows(rows: Sequence[LegendRow], horizontal: str, icon_size: float, line_height: float) -> list[PlacedLegendItem]:
    placed: list[PlacedLegendItem] = []
    for r, row in enumerate(rows):
        x = _row_start(horizontal, row.width)
        for item in row.items:
            placed.append(PlacedLegendItem(item, x, r * line_height))
            x += icon_size + ICON_GAP + item.text_width + ITEM_GAP
    return placed


def _place_column(items: Sequence[LegendItem], horizontal: str, icon_size: float, line_height: float) -> list[PlacedLegendItem]:
    placed: list[PlacedLegendItem] = []
    for i, item in enumerate(items):
        row_width = icon_size + ICON_GAP + item.text_width
        if horizontal == "center":
            x = -row_width / 2.0
        elif horizontal == "right":
            x = -row_width
        else:
            x = 0.0
        placed.append(PlacedLegendItem(item, x, i * line_height))
    return placed


def layout_legend(
    items: Sequence[LegendItem],
    config: ChartConfiguration,
    canvas_width: float,
    canvas_height: float,
    measurer: TextMeasurer | None = None,
    scale: float = 1.0,
) -> LegendLayout:
    """
    Position legend entries on a canvas.

    Top/bottom legends centered horizontally wrap into rows; every other
    anchor stacks one entry per line. A custom position replaces the anchor.
    """
    icon_size = max(12.0 * scale, 10.0)
    font_size = scaled_font_size(config.legend_font_size, DEFAULT_LEGEND_FONT_SIZE, canvas_width, scale)
    line_height = font_size + 12.0

    if measurer is None:
        with TextMeasurer(font_size) as probe:
            measured = [replace(it, text_width=probe.width(it.label or "")) for it in items]
    else:
        measured = [replace(it, text_width=measurer.width(it.label or "")) for it in items]

    vertical, horizontal = legend_anchors(config)
    rows: list[LegendRow] = []
    custom = config.legend_custom_position

    if custom is not None:
        rotation = custom.rotation
        is_horizontal = abs(rotation % 180) < 90
        origin_x, origin_y = custom.x, custom.y
        if is_horizontal:
            rows = [_single_row(measured, icon_size)]
        height = max(line_height, len(measured) * line_height) if not is_horizontal else line_height
    else:
        rotation = 0.0
        is_horizontal = vertical in ("top", "bottom") and horizontal == "center"
        if is_horizontal:
            max_row_width = max(160.0, min(canvas_width - 80.0, 540.0 * scale))
            rows = wrap_rows(measured, icon_size, max_row_width) or [_single_row(measured, icon_size)]
            height = len(rows) * line_height
        else:
            height = max(line_height, len(measured) * line_height)

        pad = max(20.0, min(30.0, canvas_width * 0.03))
        if horizontal == "left":
            origin_x = pad
        elif horizontal == "center":
            origin_x = canvas_width / 2.0
        else:
            origin_x = canvas_width - pad

        if vertical == "top":
            origin_y = pad
        elif vertical == "center":
            origin_y = canvas_height / 2.0 - height / 2.0
        else:
            origin_y = canvas_height - height - pad

        origin_x += config.legend_offset_x
        origin_y += config.legend_offset_y

    if is_horizontal:
        placed = _place_rows(rows, horizontal, icon_size, line_height)
    else:
        placed = _place_column(measured, horizontal, icon_size, line_height)

    return LegendLayout(
        origin_x=origin_x,
        origin_y=origin_y,
        rotation=rotation,
        horizontal=is_horizontal,
        placed=tuple(placed),
        rows=tuple(rows),
        icon_size=icon_size,
        font_size=font_size,
        line_height=line_height,
        height=height,
    )
