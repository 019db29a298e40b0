"""Color schemes and the ordered rule table that assigns colors to chart items."""

from __future__ import annotations

import colorsys
from collections.abc import Callable
from dataclasses import dataclass

from matplotlib.colors import to_hex, to_rgb

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import (
    DEFAULT_COLOR_SCHEME,
    DEFAULT_SINGLE_COLOR,
    DYNAMIC_SCHEME,
    ColorMode,
    LegendMapping,
)
from chart_engine.core.types import ChartData

COLOR_SCHEMES: dict[str, tuple[str, ...]] = {
    "modern": ("#6366f1", "#0ea5e9", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899", "#84cc16"),
    "vibrant": ("#ff4757", "#00d2d3", "#3742fa", "#ffa502", "#2ed573", "#5f27cd", "#ff6b6b", "#4834d4"),
    "professional": ("#1e40af", "#065f46", "#b91c1c", "#7c2d12", "#0f766e", "#6b21a8", "#be185d", "#365314"),
    "glass": ("#3b82f6", "#06b6d4", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899", "#84cc16"),
    "neon": ("#ff0080", "#00ff80", "#0080ff", "#ff8000", "#8000ff", "#00ffff", "#ffff00", "#ff4080"),
    "pastel": ("#a5b4fc", "#7dd3fc", "#86efac", "#fde68a", "#fca5a5", "#c4b5fd", "#f9a8d4", "#bef264"),
    "dark": ("#475569", "#64748b", "#78716c", "#6b7280", "#71717a", "#737373", "#525252", "#404040"),
}

# Templates whose single dataset is colored per category unless told otherwise
_PER_CATEGORY_TEMPLATES = frozenset({"simple-bar", "pie-chart", "area-chart"})


def scheme_names() -> list[str]:
    return [*COLOR_SCHEMES, DYNAMIC_SCHEME]


def palette(scheme: str) -> tuple[str, ...]:
    """Fixed palette for a scheme name; unknown names fall back to the default scheme."""
    return COLOR_SCHEMES.get(scheme, COLOR_SCHEMES[DEFAULT_COLOR_SCHEME])


def dynamic_color(index: int, count: int) -> str:
    """Evenly spaced hue for item `index` of `count`, with alternating saturation/lightness."""
    n = max(count, 1)
    hue = (index * 360.0 / n) % 360.0
    saturation = 65 + (index % 3) * 10
    lightness = 45 + (index % 2) * 10
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, lightness / 100.0, saturation / 100.0)
    return to_hex((r, g, b))


def dynamic_colors(count: int) -> list[str]:
    return [dynamic_color(i, count) for i in range(count)]


def _scheme_color(scheme: str, index: int, count: int) -> str:
    if scheme == DYNAMIC_SCHEME:
        return dynamic_color(index, count)
    colors = palette(scheme)
    return colors[index % len(colors)]


@dataclass(frozen=True)
class ColorRule:
    name: str
    applies: Callable[[ChartConfiguration], bool]
    color_at: Callable[[ChartConfiguration, int, int], str]


def _single(config: ChartConfiguration, index: int, count: int) -> str:
    return config.single_color or DEFAULT_SINGLE_COLOR


def _individual(config: ChartConfiguration, index: int, count: int) -> str:
    if index < len(config.custom_colors) and config.custom_colors[index]:
        return config.custom_colors[index]
    return _scheme_color(config.color_scheme, index, count)


def _scheme(config: ChartConfiguration, index: int, count: int) -> str:
    return _scheme_color(config.color_scheme, index, count)


# Evaluated in order; the first rule that applies colors every item
COLOR_RULES: tuple[ColorRule, ...] = (
    ColorRule(
        "series-single",
        lambda c: c.legend_mapping == LegendMapping.SERIES and c.color_mode == ColorMode.SINGLE,
        _single,
    ),
    ColorRule("single", lambda c: c.color_mode == ColorMode.SINGLE, _single),
    ColorRule("individual", lambda c: c.color_mode == ColorMode.INDIVIDUAL, _individual),
    ColorRule("scheme", lambda c: True, _scheme),
)


def matching_rule(config: ChartConfiguration) -> ColorRule:
    for rule in COLOR_RULES:
        if rule.applies(config):
            return rule
    return COLOR_RULES[-1]


def resolve_colors(config: ChartConfiguration, item_count: int) -> list[str]:
    """Ordered hex colors, one per legend item (category or dataset)."""
    if item_count <= 0:
        return []
    rule = matching_rule(config)
    return [rule.color_at(config, i, item_count) for i in range(item_count)]


def uses_per_category_colors(config: ChartConfiguration, data: ChartData | None) -> bool:
    """Whether colors map onto category labels rather than datasets."""
    if config.legend_mapping == LegendMapping.CATEGORIES:
        return True
    if config.legend_mapping is not None:
        return False
    if data is None or len(data.datasets) != 1:
        return False
    return config.template_id in _PER_CATEGORY_TEMPLATES and (
        config.color_scheme == DYNAMIC_SCHEME or config.color_mode == ColorMode.INDIVIDUAL
    )


def color_item_count(config: ChartConfiguration, data: ChartData | None) -> int:
    if data is None:
        return 0
    if uses_per_category_colors(config, data):
        return len(data.labels)
    return len(data.datasets)


def brighter(color: str, k: float = 1.0) -> str:
    """Lighten by scaling each channel by (1/0.7)**k, clipped to white."""
    factor = (1.0 / 0.7) ** k
    r, g, b = to_rgb(color)
    return to_hex((min(1.0, r * factor), min(1.0, g * factor), min(1.0, b * factor)))
