"""Deterministic placeholder data shown while a chart is not fully configured."""

from __future__ import annotations

from chart_engine.core.types import ChartData, Dataset, Point

_QUARTERS = ("Q1", "Q2", "Q3", "Q4")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun")

_SERIES_SAMPLE = (
    ("Series A", (20, 25, 30, 22)),
    ("Series B", (15, 18, 12, 25)),
    ("Series C", (10, 12, 18, 15)),
)

_SCATTER_POINTS = ((10, 15), (25, 28), (18, 12), (35, 32), (22, 20), (30, 25))


def sample_chart_data(template_id: str) -> ChartData:
    """Placeholder for a template id; unknown ids get the simple-bar sample."""
    if template_id == "pie-chart":
        return ChartData.build(
            ["Product A", "Product B", "Product C", "Product D"],
            [("Sales", [35, 25, 20, 20])],
        )

    if template_id in ("simple-line", "area-chart"):
        return ChartData.build(_MONTHS, [("Revenue", [12, 19, 15, 25, 22, 30])])

    if template_id == "scatter-plot":
        points = tuple(Point(float(x), float(y)) for x, y in _SCATTER_POINTS)
        return ChartData(
            labels=tuple(f"Point {i + 1}" for i in range(len(points))),
            datasets=(Dataset(label="Data Points", data=points),),
        )

    if template_id in ("multi-series-bar", "stacked-bar", "multi-line"):
        return ChartData.build(_QUARTERS, _SERIES_SAMPLE)

    return ChartData.build(
        ["Category 1", "Category 2", "Category 3", "Category 4"],
        [("Value", [45, 32, 28, 38])],
    )
