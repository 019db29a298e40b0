from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from chart_engine.core.config_model import ChartConfiguration  # noqa: E402


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def sales_rows() -> list[dict]:
    return [
        {"region": "North", "product": "A", "sales": 10, "units": 1, "day": "2024-01-01"},
        {"region": "North", "product": "B", "sales": 20, "units": 2, "day": "2024-01-02"},
        {"region": "South", "product": "A", "sales": 5, "units": 3, "day": "2024-01-03"},
        {"region": "West", "product": "B", "sales": 7.5, "units": 4, "day": "2024-02-01"},
    ]


@pytest.fixture
def sales_frame(sales_rows) -> pd.DataFrame:
    return pd.DataFrame(sales_rows)


@pytest.fixture
def bar_config() -> ChartConfiguration:
    return ChartConfiguration(template_id="simple-bar", x_axis_field="region", y_axis_field="sales", title="Sales")
