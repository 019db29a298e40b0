from __future__ import annotations

import pandas as pd

from chart_engine.core.constants import ColumnType
from chart_engine.data.schema import (
    category_fields,
    infer_column_types,
    is_blank,
    looks_like_date,
    value_fields,
)


def test_infer_column_types_from_records() -> None:
    rows = [
        {"name": "a", "amount": 1, "flag": True, "day": "2024-01-01"},
        {"name": "b", "amount": 2.5, "flag": False, "day": "01/02/2024"},
        {"name": "b", "amount": None, "flag": True, "day": ""},
    ]
    cols = {c.name: c for c in infer_column_types(rows)}

    assert cols["name"].type == ColumnType.STRING
    assert not cols["name"].unique
    assert cols["amount"].type == ColumnType.NUMBER
    assert cols["amount"].nullable
    assert cols["flag"].type == ColumnType.BOOLEAN
    assert cols["day"].type == ColumnType.DATE


def test_infer_from_dataframe_and_field_roles() -> None:
    frame = pd.DataFrame({"region": ["N", "S"], "sales": [1.0, 2.0], "empty": [None, None]})
    cols = infer_column_types(frame)

    assert value_fields(cols) == ["sales"]
    assert category_fields(cols) == ["region", "empty"]
    assert infer_column_types([]) == []


def test_blank_and_date_helpers() -> None:
    assert is_blank(None) and is_blank("") and is_blank(float("nan"))
    assert not is_blank(0)
    assert looks_like_date("2024/01/31")
    assert not looks_like_date("January")
