"""Chart template registry: recipe type, required fields and default configuration."""

from __future__ import annotations

from dataclasses import dataclass

from chart_engine.core.config_model import ChartConfiguration, DataLabelComponents
from chart_engine.core.constants import (
    Aggregation,
    ChartKind,
    ColorMode,
    HorizontalAnchor,
    LabelPosition,
    LegendMapping,
    VerticalAnchor,
)
from chart_engine.core.errors import InvalidReference


@dataclass(frozen=True)
class RequiredFields:
    x_axis: bool = False
    y_axis: bool = False
    category: bool = False
    value: bool = False
    series: bool = False

    def names(self) -> list[str]:
        """camelCase names of the configuration fields that must be set."""
        out: list[str] = []
        if self.x_axis:
            out.append("xAxisField")
        if self.y_axis:
            out.append("yAxisField")
        if self.category:
            out.append("categoryField")
        if self.value:
            out.append("valueField")
        if self.series:
            out.append("seriesField")
        return out


@dataclass(frozen=True)
class ChartTemplate:
    id: str
    name: str
    description: str
    category: str  # bar | line | area | pie | scatter
    kind: ChartKind
    required: RequiredFields
    color_scheme: str = "modern"
    show_legend: bool = False
    show_grid: bool = True
    animation: bool = True


_XY = RequiredFields(x_axis=True, y_axis=True)
_XY_SERIES = RequiredFields(x_axis=True, y_axis=True, series=True)

TEMPLATES: tuple[ChartTemplate, ...] = (
    ChartTemplate(
        id="simple-bar",
        name="Simple Bar Chart",
        description="Basic vertical bar chart for comparing values across categories",
        category="bar",
        kind=ChartKind.SINGLE_BAR,
        required=_XY,
    ),
    ChartTemplate(
        id="multi-series-bar",
        name="Multi-Series Bar Chart",
        description="Compare multiple data series across categories",
        category="bar",
        kind=ChartKind.MULTI_BAR,
        required=_XY_SERIES,
        color_scheme="vibrant",
        show_legend=True,
    ),
    ChartTemplate(
        id="stacked-bar",
        name="Stacked Bar Chart",
        description="Show parts of a whole with stacked bars",
        category="bar",
        kind=ChartKind.STACKED_BAR,
        required=_XY_SERIES,
        color_scheme="vibrant",
        show_legend=True,
    ),
    ChartTemplate(
        id="simple-line",
        name="Simple Line Chart",
        description="Show trends over time or continuous data",
        category="line",
        kind=ChartKind.SIMPLE_LINE,
        required=_XY,
    ),
    ChartTemplate(
        id="multi-line",
        name="Multi-Line Chart",
        description="Compare trends across multiple data series",
        category="line",
        kind=ChartKind.MULTI_LINE,
        required=_XY_SERIES,
        color_scheme="vibrant",
        show_legend=True,
    ),
    ChartTemplate(
        id="area-chart",
        name="Area Chart",
        description="Show data trends with filled areas",
        category="area",
        kind=ChartKind.AREA,
        required=_XY,
    ),
    ChartTemplate(
        id="pie-chart",
        name="Pie Chart",
        description="Show proportions and percentages of a whole",
        category="pie",
        kind=ChartKind.PIE,
        required=RequiredFields(category=True, value=True),
        color_scheme="vibrant",
        show_legend=True,
        show_grid=False,
    ),
    ChartTemplate(
        id="scatter-plot",
        name="Scatter Plot",
        description="Show relationships between two numerical variables",
        category="scatter",
        kind=ChartKind.SCATTER,
        required=_XY,
    ),
)

_BY_ID = {t.id: t for t in TEMPLATES}

# Data-label parts switched on when a template is first selected
_DEFAULT_LABEL_COMPONENTS = {
    "bar": DataLabelComponents(show_value=True),
    "pie": DataLabelComponents(show_percentage=True),
    "line": DataLabelComponents(show_value=True),
    "scatter": DataLabelComponents(show_coordinates=True),
}


def list_templates() -> list[ChartTemplate]:
    return list(TEMPLATES)


def get_template(template_id: str) -> ChartTemplate:
    try:
        return _BY_ID[template_id]
    except KeyError as e:
        raise InvalidReference(f"Unknown chart template: {template_id}") from e


def find_template(template_id: str) -> ChartTemplate | None:
    return _BY_ID.get(template_id)


def chart_kind_for(template_id: str) -> ChartKind:
    """Recipe type for a template id; unknown ids render as a single-series bar chart."""
    template = find_template(template_id)
    return template.kind if template else ChartKind.SINGLE_BAR


def is_configuration_complete(config: ChartConfiguration) -> bool:
    template = find_template(config.template_id)
    if template is None:
        return False

    req = template.required
    if req.x_axis and not config.x_axis_field:
        return False
    if req.y_axis and not config.y_fields:
        return False
    if req.category and not config.category_field:
        return False
    if req.value and not config.value_field:
        return False
    if req.series and not config.series_field:
        return False
    return True


def default_configuration(template_id: str, title: str = "") -> ChartConfiguration:
    """Starting configuration a chart builder uses when a template is picked."""
    template = get_template(template_id)
    is_pie = template.kind == ChartKind.PIE
    return ChartConfiguration(
        template_id=template.id,
        title=title,
        color_scheme=template.color_scheme,
        color_mode=ColorMode.SCHEME,
        show_legend=template.show_legend,
        show_grid=template.show_grid,
        animation=template.animation,
        aggregation=Aggregation.SUM,
        legend_mapping=LegendMapping.CATEGORIES,
        title_position=HorizontalAnchor.CENTER,
        legend_vertical_position=VerticalAnchor.TOP,
        legend_horizontal_position=HorizontalAnchor.CENTER,
        legend_position="right",
        data_labels_position=LabelPosition.OUTSIDE if is_pie else LabelPosition.TOP,
        data_labels_components=_DEFAULT_LABEL_COMPONENTS.get(template.category),
    )
