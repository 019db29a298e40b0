from __future__ import annotations

from pathlib import Path

import pytest

from chart_engine.analytics.aggregation import aggregate_source
from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import SlicerFilterType
from chart_engine.core.errors import DataSourceError, InvalidReference
from chart_engine.data.source import (
    DataSource,
    DataTable,
    DateRange,
    Slicer,
    apply_slicers,
    load_csv_table,
)


def test_slicers_filter_and_unknown_ids_are_ignored(sales_frame) -> None:
    slicers = [Slicer(id="s1", name="Region", column_name="region", selected_values=("North",))]
    out = apply_slicers(sales_frame, ["s1", "missing"], slicers)
    assert list(out["region"].unique()) == ["North"]

    inactive = [Slicer(id="s2", name="Region", column_name="region")]
    assert len(apply_slicers(sales_frame, ["s2"], inactive)) == len(sales_frame)


def test_date_range_slicer_is_inclusive(sales_frame) -> None:
    slicer = Slicer(
        id="d",
        name="Days",
        column_name="day",
        filter_type=SlicerFilterType.DATE_RANGE,
        selected_values=("2024-01-01", "2024-01-02"),
    )
    out = apply_slicers(sales_frame, ["d"], [slicer])
    assert list(out["day"]) == ["2024-01-01", "2024-01-02"]


def test_data_source_aggregates_filtered_rows(sales_rows) -> None:
    source = DataSource(
        main=DataTable.from_records(sales_rows),
        slicers=[Slicer(id="s1", name="Product", column_name="product", selected_values=("A",))],
        date_ranges=[DateRange(id="jan", name="January", start_date="2024-01-01", end_date="2024-01-31")],
    )
    cfg = ChartConfiguration(
        template_id="simple-bar", x_axis_field="region", y_axis_field="sales", applied_slicers=["s1"]
    )

    data = aggregate_source(source, cfg, date_range_ids=["jan", "nope"])
    assert data.labels == ("North", "South")
    assert data.datasets[0].values() == [10.0, 5.0]


def test_unknown_table_is_reported(sales_rows) -> None:
    source = DataSource(main=DataTable.from_records(sales_rows))
    with pytest.raises(InvalidReference):
        source.resolve_table("other")
    cfg = ChartConfiguration(template_id="simple-bar", x_axis_field="region", y_axis_field="sales", table_id="other")
    assert aggregate_source(source, cfg) is None


def test_load_csv_table(tmp_path: Path) -> None:
    csv = tmp_path / "rows.csv"
    csv.write_text("region,sales\nNorth,1\nSouth,2\n", encoding="utf-8")
    table = load_csv_table(str(csv))
    assert table.id == "main"
    assert [c.name for c in table.columns] == ["region", "sales"]

    with pytest.raises(DataSourceError):
        load_csv_table(str(tmp_path / "missing.csv"))
