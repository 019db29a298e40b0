from __future__ import annotations

import json
from pathlib import Path

import pytest

from chart_engine.analytics.templates import (
    chart_kind_for,
    default_configuration,
    get_template,
    is_configuration_complete,
    list_templates,
)
from chart_engine.core.config_model import ChartConfiguration, load_chart_configuration
from chart_engine.core.constants import ChartKind, LabelPosition, LegendMapping
from chart_engine.core.errors import ConfigError, InvalidReference


def test_registry_has_one_template_per_recipe() -> None:
    ids = [t.id for t in list_templates()]
    assert ids == [
        "simple-bar",
        "multi-series-bar",
        "stacked-bar",
        "simple-line",
        "multi-line",
        "area-chart",
        "pie-chart",
        "scatter-plot",
    ]
    assert get_template("pie-chart").required.names() == ["categoryField", "valueField"]


def test_unknown_template() -> None:
    with pytest.raises(InvalidReference):
        get_template("radar")
    assert chart_kind_for("radar") == ChartKind.SINGLE_BAR


def test_completeness_follows_required_fields() -> None:
    assert is_configuration_complete(ChartConfiguration(template_id="simple-line", x_axis_field="d", y_axis_field="v"))
    assert not is_configuration_complete(
        ChartConfiguration(template_id="multi-line", x_axis_field="d", y_axis_field="v")
    )
    assert not is_configuration_complete(ChartConfiguration(template_id="simple-bar", y_axis_field=[]))


def test_default_configuration_for_pie() -> None:
    cfg = default_configuration("pie-chart", title="Share")
    assert cfg.title == "Share"
    assert cfg.show_legend is True
    assert cfg.legend_mapping == LegendMapping.CATEGORIES
    assert cfg.data_labels_position == LabelPosition.OUTSIDE


def test_camel_case_payload_round_trip() -> None:
    cfg = ChartConfiguration.model_validate(
        {
            "templateId": "simple-bar",
            "xAxisField": "region",
            "yAxisField": "sales",
            "numberFormat": {"decimals": 1, "thousands": True},
            "unknownKey": 1,
        }
    )
    assert cfg.x_axis_field == "region"
    assert cfg.number_format.decimals == 1
    payload = json.loads(cfg.to_json())
    assert payload["xAxisField"] == "region"
    assert "unknownKey" not in payload


def test_load_chart_configuration_yaml_and_errors(tmp_path: Path) -> None:
    good = tmp_path / "chart.yaml"
    good.write_text("templateId: pie-chart\ncategoryField: product\nvalueField: sales\n", encoding="utf-8")
    cfg = load_chart_configuration(str(good))
    assert cfg.template_id == "pie-chart"

    with pytest.raises(ConfigError):
        load_chart_configuration(str(tmp_path / "missing.yaml"))

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_chart_configuration(str(bad))

    invalid = tmp_path / "invalid.yaml"
    invalid.write_text("title: no template id\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_chart_configuration(str(invalid))
