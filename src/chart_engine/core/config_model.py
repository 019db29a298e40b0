"""Declarative chart configuration (the persisted camelCase JSON shape)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from chart_engine.core.constants import (
    Aggregation,
    ColorMode,
    DisplayUnit,
    HorizontalAnchor,
    LabelPosition,
    LegendMapping,
    NegativeStyle,
    VerticalAnchor,
)
from chart_engine.core.errors import ConfigError


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class CustomPosition(_CamelModel):
    """Free placement override for the title or legend, in canvas pixels."""

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0


class DataLabelComponents(_CamelModel):
    show_category: bool | None = None
    show_value: bool | None = None
    show_percentage: bool | None = None
    show_series_name: bool | None = None
    show_coordinates: bool | None = None


class NumberFormat(_CamelModel):
    prefix: str = ""
    suffix: str = ""
    decimals: int | None = None
    decimals_manually_set: bool = False
    thousands: bool = False
    display_unit: DisplayUnit = DisplayUnit.NONE
    display_unit_label: bool = False
    negative_numbers: NegativeStyle = NegativeStyle.MINUS


class ChartConfiguration(_CamelModel):
    """
    One chart's declarative description.

    Field names are snake_case in Python and camelCase in the serialized form
    (`templateId`, `xAxisField`, ...). Instances are immutable; use
    `updated(...)` to derive a modified copy.
    """

    template_id: str
    title: str = ""
    table_id: str | None = None

    # Field mappings
    x_axis_field: str | None = None
    y_axis_field: str | list[str] | None = None
    category_field: str | None = None
    value_field: str | None = None
    series_field: str | None = None
    aggregation: Aggregation = Aggregation.SUM
    applied_slicers: list[str] = Field(default_factory=list)

    # Colors
    color_scheme: str = "modern"
    color_mode: ColorMode | None = None
    custom_colors: list[str] = Field(default_factory=list)
    single_color: str | None = None

    show_legend: bool = False
    show_grid: bool = True
    animation: bool = True

    # Title placement
    title_position: HorizontalAnchor | None = None
    title_vertical_position: VerticalAnchor | None = None
    title_horizontal_position: HorizontalAnchor | None = None
    title_custom_position: CustomPosition | None = None
    title_offset_x: float = 0.0
    title_offset_y: float = 0.0

    # Legend placement
    legend_position: str | None = None
    legend_vertical_position: VerticalAnchor | None = None
    legend_horizontal_position: HorizontalAnchor | None = None
    legend_mapping: LegendMapping | None = None
    legend_custom_position: CustomPosition | None = None
    legend_offset_x: float = 0.0
    legend_offset_y: float = 0.0

    # Data labels
    show_data_labels: bool = False
    data_labels_position: LabelPosition | None = None
    data_labels_color: str | None = None
    data_labels_offset_x: float = 0.0
    data_labels_offset_y: float = 0.0
    data_labels_components: DataLabelComponents | None = None

    padding_horizontal: float | None = None
    padding_vertical: float | None = None
    number_format: NumberFormat | None = None

    # Font sizes (px)
    title_font_size: float | None = None
    legend_font_size: float | None = None
    data_labels_font_size: float | None = None
    x_axis_font_size: float | None = None
    y_axis_font_size: float | None = None
    x_axis_label_font_size: float | None = None
    y_axis_label_font_size: float | None = None

    # Axes
    x_axis_label: str | None = None
    y_axis_label: str | None = None
    x_axis_label_offset_x: float = 0.0
    x_axis_label_offset_y: float = 0.0
    y_axis_label_offset_x: float = 0.0
    y_axis_label_offset_y: float = 0.0
    x_axis_offset_x: float = 0.0
    x_axis_offset_y: float = 0.0
    y_axis_offset_x: float = 0.0
    y_axis_offset_y: float = 0.0
    show_x_axis_ticks: bool = True
    show_y_axis_ticks: bool = True
    rotate_x_axis_labels: bool = False
    rotate_y_axis_labels: bool = False
    x_axis_min: float | None = None
    x_axis_max: float | None = None
    y_axis_min: float | None = None
    y_axis_max: float | None = None

    chart_offset_x: float = 0.0
    chart_offset_y: float = 0.0

    @property
    def y_fields(self) -> list[str]:
        """`yAxisField` normalized to an ordered list (empty when unset)."""
        if self.y_axis_field is None:
            return []
        if isinstance(self.y_axis_field, str):
            return [self.y_axis_field] if self.y_axis_field else []
        return [f for f in self.y_axis_field if f]

    @property
    def primary_y_field(self) -> str | None:
        fields = self.y_fields
        return fields[0] if fields else None

    def updated(self, **changes: Any) -> "ChartConfiguration":
        return self.model_copy(update=changes)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


def chart_configuration_from_dict(payload: dict[str, Any]) -> ChartConfiguration:
    try:
        return ChartConfiguration.model_validate(payload)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid chart configuration: {e}") from e


def load_chart_configuration(path: str) -> ChartConfiguration:
    """
    Load a chart configuration from a YAML or JSON file.

    Raises ConfigError when the file is missing, unparsable or fails validation.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse config file: {path}") from e

    if not isinstance(payload, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return chart_configuration_from_dict(payload)
