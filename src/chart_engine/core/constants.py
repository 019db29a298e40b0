"""Constants and enums for chart kinds, aggregation methods and positioning."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet


class ColumnType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


class Aggregation(str, Enum):
    SUM = "sum"
    AVERAGE = "average"
    COUNT = "count"
    MIN = "min"
    MAX = "max"
    NONE = "none"


class ChartKind(str, Enum):
    """Recipe types; each one maps to exactly one renderer."""

    SINGLE_BAR = "single-bar"
    MULTI_BAR = "multi-bar"
    STACKED_BAR = "stacked-bar"
    SIMPLE_LINE = "simple-line"
    MULTI_LINE = "multi-line"
    AREA = "area"
    PIE = "pie"
    SCATTER = "scatter"


class ColorMode(str, Enum):
    SCHEME = "scheme"
    INDIVIDUAL = "individual"
    SINGLE = "single"


class LegendMapping(str, Enum):
    CATEGORIES = "categories"
    SERIES = "series"


class VerticalAnchor(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class HorizontalAnchor(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class LabelPosition(str, Enum):
    TOP = "top"
    CENTER = "center"
    INSIDE_TOP = "inside-top"
    INSIDE_BOTTOM = "inside-bottom"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    # pie-specific (also accepted as legacy aliases on bars)
    INSIDE = "inside"
    OUTSIDE = "outside"


class DisplayUnit(str, Enum):
    NONE = "none"
    HUNDREDS = "hundreds"
    THOUSANDS = "thousands"
    MILLIONS = "millions"
    BILLIONS = "billions"


class NegativeStyle(str, Enum):
    MINUS = "minus"
    PARENTHESES = "parentheses"
    RED = "red"


class SizeClass(str, Enum):
    COMPACT = "compact"
    PREVIEW = "preview"
    FULL = "full"


class SlicerFilterType(str, Enum):
    DROPDOWN = "dropdown"
    MULTI_SELECT = "multi-select"
    DATE_RANGE = "date-range"


# Aggregated values are rounded to this many decimals before leaving the engine
MAX_DECIMALS: int = 3

# Labels used when a grouping key is blank
UNKNOWN_LABEL: str = "Unknown"
DEFAULT_SERIES_LABEL: str = "Default"

DEFAULT_SINGLE_COLOR: str = "#6366f1"
DEFAULT_COLOR_SCHEME: str = "modern"
DYNAMIC_SCHEME: str = "dynamic"

DEFAULT_CANVAS_WIDTH: int = 600
DEFAULT_CANVAS_HEIGHT: int = 400
# Space above (or below) the plotting surface reserved for the title band
TITLE_BAND_HEIGHT: int = 50
RENDER_DPI: int = 100

# Enter-animation budget
ANIMATION_MAX_DELAY_MS: float = 800.0
ANIMATION_STEP_MS: float = 80.0
ANIMATION_FRAME_MS: int = 16

# Stacked-bar segments at or below this height (px) get no data label
MIN_SEGMENT_LABEL_HEIGHT: float = 20.0

# Pie outside-label de-overlap
PIE_LABEL_LINE_HEIGHT: float = 16.0
MULTILINE_LABEL_LINE_HEIGHT: float = 14.0

BAR_CHART_KINDS: FrozenSet[ChartKind] = frozenset(
    {ChartKind.SINGLE_BAR, ChartKind.MULTI_BAR, ChartKind.STACKED_BAR}
)
LINE_CHART_KINDS: FrozenSet[ChartKind] = frozenset(
    {ChartKind.SIMPLE_LINE, ChartKind.MULTI_LINE, ChartKind.AREA}
)


@dataclass(frozen=True)
class SizeThresholds:
    """Canvas-size limits for the compact/preview size classes."""

    compact_width: int = 350
    compact_height: int = 200
    preview_width: int = 550
    preview_height: int = 350
