"""Data-label placement rules and text composition per chart family."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import (
    MIN_SEGMENT_LABEL_HEIGHT,
    MULTILINE_LABEL_LINE_HEIGHT,
    PIE_LABEL_LINE_HEIGHT,
    LabelPosition,
)
from chart_engine.viz.number_format import format_number

# text-anchor -> matplotlib horizontal alignment
_START = "left"
_MIDDLE = "center"
_END = "right"


@dataclass(frozen=True)
class LabelAnchor:
    """
    Where a data label sits, in plot pixels (y grows downward).

    `y` is the text baseline unless `va` says otherwise; multi-line labels
    put line i at `y + line_offsets[i]`.
    """

    x: float
    y: float
    lines: tuple[str, ...]
    ha: str = _MIDDLE
    va: str = "baseline"
    line_offsets: tuple[float, ...] = (0.0,)
    index: int = 0

    @property
    def text(self) -> str:
        return " ".join(self.lines)


def with_offset(x: float, y: float, config: ChartConfiguration) -> tuple[float, float]:
    return x + config.data_labels_offset_x, y + config.data_labels_offset_y


def stacked_line_offsets(count: int, line_height: float = MULTILINE_LABEL_LINE_HEIGHT) -> tuple[float, ...]:
    """Baselines for `count` lines centered vertically on the anchor."""
    if count <= 1:
        return (0.0,)
    start = -(count - 1) * line_height / 2.0
    return tuple(start + i * line_height for i in range(count))


# Bars -----------------------------------------------------------------------

def bar_label_anchor(
    position: LabelPosition | None,
    center_x: float,
    bar_width: float,
    bar_y: float,
    bar_height: float,
    plot_height: float,
    text: str,
    config: ChartConfiguration,
    index: int = 0,
) -> LabelAnchor:
    if position == LabelPosition.LEFT:
        x, ha = center_x - bar_width / 2.0 - 5.0, _END
    elif position == LabelPosition.RIGHT:
        x, ha = center_x + bar_width / 2.0 + 5.0, _START
    else:
        x, ha = center_x, _MIDDLE

    if position == LabelPosition.INSIDE_TOP or position == LabelPosition.INSIDE:
        y = bar_y + 15.0
    elif position == LabelPosition.CENTER:
        y = bar_y + bar_height / 2.0 + 4.0
    elif position == LabelPosition.INSIDE_BOTTOM:
        y = bar_y + bar_height - 8.0
    elif position == LabelPosition.BOTTOM:
        y = plot_height + 15.0
    else:
        # top, legacy "outside", left/right and unset all sit above the bar
        y = bar_y - 8.0

    x, y = with_offset(x, y, config)
    return LabelAnchor(x=x, y=y, lines=(text,), ha=ha, index=index)


def stacked_label_anchor(
    position: LabelPosition | None,
    center_x: float,
    segment_y: float,
    segment_height: float,
    text: str,
    config: ChartConfiguration,
    index: int = 0,
) -> LabelAnchor | None:
    """Label for one stacked segment, or None when the segment is too short to hold it."""
    if segment_height <= MIN_SEGMENT_LABEL_HEIGHT:
        return None
    if position == LabelPosition.TOP:
        y = segment_y - 8.0
    elif position == LabelPosition.INSIDE_TOP:
        y = segment_y + 15.0
    elif position == LabelPosition.INSIDE_BOTTOM:
        y = segment_y + segment_height - 8.0
    else:
        y = segment_y + segment_height / 2.0 + 4.0
    x, y = with_offset(center_x, y, config)
    return LabelAnchor(x=x, y=y, lines=(text,), index=index)


# Points (line, area, scatter) -----------------------------------------------

def point_label_anchor(
    position: LabelPosition | None,
    point_x: float,
    point_y: float,
    text: str,
    config: ChartConfiguration,
    allow_sides: bool = True,
    index: int = 0,
) -> LabelAnchor:
    x, ha = point_x, _MIDDLE
    if allow_sides and position == LabelPosition.LEFT:
        x, ha = point_x - 15.0, _END
    elif allow_sides and position == LabelPosition.RIGHT:
        x, ha = point_x + 15.0, _START

    if position == LabelPosition.INSIDE_TOP:
        y = point_y - 8.0
    elif position == LabelPosition.CENTER:
        y = point_y + 4.0
    elif position == LabelPosition.INSIDE_BOTTOM:
        y = point_y + 15.0
    elif allow_sides and position in (LabelPosition.LEFT, LabelPosition.RIGHT):
        y = point_y + 4.0
    else:
        y = point_y - 15.0

    x, y = with_offset(x, y, config)
    return LabelAnchor(x=x, y=y, lines=(text,), ha=ha, index=index)


# Pie ------------------------------------------------------------------------

def arc_centroid(start_angle: float, end_angle: float, radius: float) -> tuple[float, float]:
    """
    Midpoint of an arc at `radius`; angles are clockwise from 12 o'clock,
    the result is in y-down pixel space relative to the pie center.
    """
    a = (start_angle + end_angle) / 2.0 - math.pi / 2.0
    return math.cos(a) * radius, math.sin(a) * radius


def pie_label_radius(position: LabelPosition | None, radius: float) -> float:
    if position == LabelPosition.OUTSIDE:
        return radius * 1.2
    if position == LabelPosition.INSIDE:
        return radius * 0.8
    if position == LabelPosition.BOTTOM:
        return radius * 0.3
    return radius / 2.0


def de_overlap(anchors: Sequence[LabelAnchor], min_gap: float = PIE_LABEL_LINE_HEIGHT) -> list[LabelAnchor]:
    """
    Sort labels top to bottom and push any label that starts less than `min_gap`
    below its (already placed) predecessor down to exactly `min_gap` below it.
    """
    ordered = sorted(anchors, key=lambda a: a.y)
    out: list[LabelAnchor] = []
    for anchor in ordered:
        if out and anchor.y < out[-1].y + min_gap:
            anchor = replace(anchor, y=out[-1].y + min_gap)
        out.append(anchor)
    return out


def pie_label_anchors(
    angles: Sequence[tuple[float, float]],
    parts: Sequence[Sequence[str]],
    radius: float,
    config: ChartConfiguration,
) -> list[LabelAnchor]:
    """Anchors for every slice; outside labels are spread apart vertically."""
    position = config.data_labels_position
    r = pie_label_radius(position, radius)
    anchors: list[LabelAnchor] = []
    for i, ((start, end), lines) in enumerate(zip(angles, parts)):
        cx, cy = arc_centroid(start, end, r)
        x, y = with_offset(cx, cy, config)
        lines = tuple(lines)
        anchors.append(
            LabelAnchor(
                x=x,
                y=y,
                lines=lines,
                va="center" if len(lines) <= 1 else "baseline",
                line_offsets=stacked_line_offsets(len(lines)),
                index=i,
            )
        )
    if position == LabelPosition.OUTSIDE:
        return de_overlap(anchors)
    return anchors


# Text composition -----------------------------------------------------------

def percentage_text(value: float, total: float) -> str:
    pct = (value / total) * 100.0 if total else 0.0
    return f"{pct:.1f}%"


def pie_label_parts(
    category: str,
    value: float,
    total: float,
    series_name: str,
    config: ChartConfiguration,
) -> list[str]:
    pct = percentage_text(value, total)
    comps = config.data_labels_components
    if comps is None:
        if config.data_labels_position == LabelPosition.OUTSIDE:
            return [f"{category} ({pct})"]
        if config.data_labels_position == LabelPosition.CENTER:
            return [pct]
        return [category]

    explicit = (
        comps.show_category is not None
        or comps.show_value
        or comps.show_percentage
        or comps.show_series_name
    )
    if not explicit:
        return [category]

    parts: list[str] = []
    if comps.show_category is not False:
        parts.append(category)
    if comps.show_value:
        parts.append(format_number(value, config.number_format))
    if comps.show_percentage:
        parts.append(pct)
    if comps.show_series_name:
        parts.append(series_name or "Series")
    return parts


def line_label_text(
    category: str,
    value: float,
    series_name: str,
    max_value: float,
    config: ChartConfiguration,
) -> str:
    """Value by default; percentage is relative to the largest value on the chart."""
    comps = config.data_labels_components
    if comps is None or not (
        comps.show_category or comps.show_value or comps.show_percentage or comps.show_series_name
    ):
        return format_number(value, config.number_format)

    parts: list[str] = []
    if comps.show_category:
        parts.append(category)
    if comps.show_series_name:
        parts.append(series_name or "Series")
    if comps.show_value:
        parts.append(format_number(value, config.number_format))
    if comps.show_percentage:
        parts.append(percentage_text(value, max_value or 1.0))
    return " ".join(parts)


def scatter_label_text(x: float, y: float, series_name: str, config: ChartConfiguration) -> str:
    coords = f"({format_number(x, config.number_format)}, {format_number(y, config.number_format)})"
    comps = config.data_labels_components
    if comps is None or not (
        comps.show_category
        or comps.show_value
        or comps.show_percentage
        or comps.show_series_name
        or comps.show_coordinates
    ):
        return coords

    parts: list[str] = []
    if comps.show_coordinates:
        parts.append(coords)
    if comps.show_series_name:
        parts.append(series_name or "Series")
    return " ".join(parts)
