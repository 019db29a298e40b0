from __future__ import annotations

import pytest

from chart_engine.analytics.sample_data import sample_chart_data
from chart_engine.analytics.templates import list_templates


@pytest.mark.parametrize("template", [t.id for t in list_templates()])
def test_sample_data_is_rectangular(template: str) -> None:
    data = sample_chart_data(template)
    assert not data.is_empty
    assert data.is_rectangular()


def test_sample_shapes() -> None:
    assert sample_chart_data("pie-chart").labels == ("Product A", "Product B", "Product C", "Product D")
    assert len(sample_chart_data("stacked-bar").datasets) == 3
    assert sample_chart_data("scatter-plot").is_point_data
    assert sample_chart_data("unknown") == sample_chart_data("simple-bar")
