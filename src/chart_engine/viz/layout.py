"""Margins, plot area and size-dependent defaults for one drawing surface."""

from __future__ import annotations

import math
from dataclasses import dataclass

from chart_engine.core.constants import SizeClass, SizeThresholds

_THRESHOLDS = SizeThresholds()

# Below this plot width default font sizes shrink by 15%
FONT_SCALE_WIDTH = 450
FONT_SCALE_FACTOR = 0.85

# Glass outline width (px) of bars, segments and slices per size class
_GLOW_WIDTH = {SizeClass.FULL: 2.0, SizeClass.PREVIEW: 1.5, SizeClass.COMPACT: 1.0}


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class LayoutPlan:
    width: float
    height: float
    margins: Margins
    plot_width: float
    plot_height: float
    size_class: SizeClass

    @property
    def is_compact(self) -> bool:
        return self.size_class == SizeClass.COMPACT

    @property
    def is_preview(self) -> bool:
        return self.size_class in (SizeClass.COMPACT, SizeClass.PREVIEW)

    @property
    def axis_font_size(self) -> float:
        return 9.0 if self.is_preview else 12.0

    @property
    def title_font_size(self) -> float:
        return 12.0 if self.is_compact else 18.0

    @property
    def glow_width(self) -> float:
        return _GLOW_WIDTH[self.size_class]


def size_class_for(width: float, height: float, thresholds: SizeThresholds = _THRESHOLDS) -> SizeClass:
    if width <= thresholds.compact_width or height <= thresholds.compact_height:
        return SizeClass.COMPACT
    if width <= thresholds.preview_width or height <= thresholds.preview_height:
        return SizeClass.PREVIEW
    return SizeClass.FULL


def _radial_margins(compact: bool, pad_h: float | None, pad_v: float | None) -> Margins:
    horizontal = max(20.0, (pad_h or (5.0 if compact else 16.0)) + 12.0)
    vertical = max(16.0, (pad_v or (4.0 if compact else 12.0)) + 8.0)
    return Margins(top=vertical, right=horizontal, bottom=vertical, left=horizontal)


def _cartesian_margins(compact: bool, pad_h: float | None, pad_v: float | None) -> Margins:
    base = 15.0 if compact else 60.0
    extra = 8.0 if compact else 30.0
    horizontal = base + (pad_h or (5.0 if compact else 20.0))
    vertical = (20.0 if compact else 35.0) + (pad_v or (5.0 if compact else 10.0))
    side = horizontal + math.floor(extra / 2)
    # extra bottom space holds the x-axis tick labels
    return Margins(top=vertical, right=side, bottom=vertical + extra, left=side)


def plan_layout(
    width: float,
    height: float,
    template_id: str,
    padding_horizontal: float | None = None,
    padding_vertical: float | None = None,
) -> LayoutPlan:
    """
    Margins and plot size for a drawing surface of `width` x `height` px.

    Pie charts get symmetric radial margins; every other chart gets equal
    left/right margins and extra space below. A padding of 0 counts as unset.
    """
    size_class = size_class_for(width, height)
    compact = size_class == SizeClass.COMPACT
    if template_id == "pie-chart":
        margins = _radial_margins(compact, padding_horizontal, padding_vertical)
    else:
        margins = _cartesian_margins(compact, padding_horizontal, padding_vertical)

    return LayoutPlan(
        width=float(width),
        height=float(height),
        margins=margins,
        plot_width=max(1.0, width - margins.left - margins.right),
        plot_height=max(1.0, height - margins.top - margins.bottom),
        size_class=size_class,
    )


def scaled_font_size(configured: float | None, default: float, plot_width: float, scale: float = 1.0) -> float:
    """Configured size (or default), shrunk for narrow plots and multiplied by `scale`."""
    factor = FONT_SCALE_FACTOR if plot_width <= FONT_SCALE_WIDTH else 1.0
    return float(round((configured or default) * factor * scale))
