from __future__ import annotations

import pandas as pd
import pytest

from chart_engine.analytics import aggregation
from chart_engine.analytics.aggregation import aggregate, build_chart_data, category_label, round_value
from chart_engine.analytics.sample_data import sample_chart_data
from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import Aggregation
from chart_engine.core.errors import InvalidReference, RenderFailure, ValidationError
from chart_engine.core.types import ChartData, Point


def test_sum_groups_by_x_in_first_seen_order() -> None:
    rows = [{"a": "x", "b": 10}, {"a": "x", "b": 20}, {"a": "y", "b": 5}]
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="a", y_axis_field="b")

    data = aggregate(rows, cfg)

    assert data is not None
    assert data.labels == ("x", "y")
    assert data.datasets[0].label == "b"
    assert data.datasets[0].values() == [30.0, 5.0]


def test_count_ignores_value_contents(sales_rows) -> None:
    cfg = ChartConfiguration(
        template_id="simple-bar", x_axis_field="region", y_axis_field="sales", aggregation=Aggregation.COUNT
    )
    data = aggregate(sales_rows, cfg)
    assert data.datasets[0].values() == [2.0, 1.0, 1.0]


def test_average_min_max(sales_frame) -> None:
    base = dict(template_id="simple-bar", x_axis_field="region", y_axis_field="sales")
    avg = aggregate(sales_frame, ChartConfiguration(**base, aggregation=Aggregation.AVERAGE))
    lo = aggregate(sales_frame, ChartConfiguration(**base, aggregation=Aggregation.MIN))
    hi = aggregate(sales_frame, ChartConfiguration(**base, aggregation=Aggregation.MAX))

    assert avg.datasets[0].values() == [15.0, 5.0, 7.5]
    assert lo.datasets[0].values()[0] == 10.0
    assert hi.datasets[0].values()[0] == 20.0


def test_none_keeps_first_value_in_row_order(sales_rows) -> None:
    cfg = ChartConfiguration(
        template_id="simple-bar", x_axis_field="region", y_axis_field="sales", aggregation=Aggregation.NONE
    )
    data = aggregate(sales_rows, cfg)
    assert data.datasets[0].values()[0] == 10.0


def test_empty_rows_give_none() -> None:
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="a", y_axis_field="b")
    assert aggregate([], cfg) is None


def test_incomplete_pie_gets_sample_data() -> None:
    cfg = ChartConfiguration(template_id="pie-chart", category_field="region")
    data = aggregate([{"region": "North", "sales": 1}], cfg)

    assert data is not None
    assert len(data.labels) == 4
    assert len(data.datasets) == 1


def test_unknown_field_gives_none_and_strict_raises(sales_rows) -> None:
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="region", y_axis_field="missing")

    assert aggregate(sales_rows, cfg) is None
    try:
        build_chart_data(sales_rows, cfg)
    except InvalidReference:
        pass
    else:
        raise AssertionError("expected InvalidReference")


def test_multi_y_fields_give_one_dataset_each(sales_rows) -> None:
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="region", y_axis_field=["sales", "units"])
    data = aggregate(sales_rows, cfg)

    assert [ds.label for ds in data.datasets] == ["sales", "units"]
    assert data.is_rectangular()


def test_series_field_fills_gaps_with_zero(sales_rows) -> None:
    cfg = ChartConfiguration(
        template_id="multi-series-bar", x_axis_field="region", y_axis_field="sales", series_field="product"
    )
    data = aggregate(sales_rows, cfg)

    assert data.labels == ("North", "South", "West")
    by_series = {ds.label: ds.values() for ds in data.datasets}
    assert by_series == {"A": [10.0, 5.0, 0.0], "B": [20.0, 0.0, 7.5]}
    assert data.is_rectangular()


def test_scatter_has_one_point_per_row(sales_rows) -> None:
    cfg = ChartConfiguration(template_id="scatter-plot", x_axis_field="units", y_axis_field="sales")
    data = aggregate(sales_rows, cfg)

    points = data.datasets[0].points()
    assert len(points) == len(sales_rows)
    assert points[0] == Point(1.0, 10.0)


def test_pie_groups_by_category(sales_frame) -> None:
    cfg = ChartConfiguration(template_id="pie-chart", category_field="product", value_field="sales")
    data = aggregate(sales_frame, cfg)

    assert data.labels == ("A", "B")
    assert data.datasets[0].values() == [15.0, 27.5]


def test_blank_category_becomes_unknown_and_values_coerce() -> None:
    frame = pd.DataFrame({"k": ["a", None, ""], "v": ["1.5", "oops", 2]})
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="k", y_axis_field="v")
    data = aggregate(frame, cfg)

    assert data.labels == ("a", "Unknown")
    assert data.datasets[0].values() == [1.5, 2.0]


def test_round_value_and_category_label() -> None:
    assert round_value(0.1 + 0.2) == 0.3
    assert round_value(1.0005) == 1.001
    assert round_value(float("nan")) == 0.0
    assert category_label(2024.0) == "2024"
    assert category_label(0) == "0"


def test_grouping_failure_raises_render_failure_and_degrades_to_sample(monkeypatch, sales_rows) -> None:
    def broken(frame, config, kind):
        raise ValueError("cannot reduce")

    monkeypatch.setattr(aggregation, "_build", broken)
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="region", y_axis_field="sales")

    with pytest.raises(RenderFailure):
        build_chart_data(sales_rows, cfg)
    assert aggregate(sales_rows, cfg) == sample_chart_data("simple-bar")


def test_chart_data_payload_round_trip(sales_rows) -> None:
    bar_cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="region", y_axis_field="sales")
    scatter_cfg = ChartConfiguration(template_id="scatter-plot", x_axis_field="units", y_axis_field="sales")
    bars = aggregate(sales_rows, bar_cfg)
    points = aggregate(sales_rows, scatter_cfg)

    for data in (bars, points):
        assert data is not None
        assert ChartData.from_dict(data.to_dict()) == data
    assert points.to_dict()["datasets"][0]["data"][0] == {"x": 1.0, "y": 10.0}

    with pytest.raises(ValidationError):
        ChartData.from_dict({"labels": ["a"], "datasets": [{"label": "v", "data": [{"x": 1}]}]})
