"""Column types and field-role helpers."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from numbers import Number
from typing import Any

import numpy as np
import pandas as pd

from chart_engine.core.constants import ColumnType

# Only the leading rows are inspected when typing columns
INFERENCE_SAMPLE_SIZE = 100

_DATE_PATTERNS = (
    re.compile(r"^\d{4}-\d{2}-\d{2}$"),  # YYYY-MM-DD
    re.compile(r"^\d{2}/\d{2}/\d{4}$"),  # MM/DD/YYYY
    re.compile(r"^\d{2}-\d{2}-\d{4}$"),  # MM-DD-YYYY
    re.compile(r"^\d{4}/\d{2}/\d{2}$"),  # YYYY/MM/DD
    re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"),  # M/D/YYYY
)


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    type: ColumnType
    nullable: bool = False
    unique: bool = False


def is_blank(value: Any) -> bool:
    """None, NaN/NaT and the empty string count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def looks_like_date(value: str) -> bool:
    return any(p.match(value) for p in _DATE_PATTERNS)


def _value_type(value: Any) -> ColumnType:
    # bool is a Number subclass, so test it first
    if isinstance(value, (bool, np.bool_)):
        return ColumnType.BOOLEAN
    if isinstance(value, Number):
        return ColumnType.NUMBER
    if isinstance(value, (date, datetime, pd.Timestamp)):
        return ColumnType.DATE
    if isinstance(value, str) and looks_like_date(value.strip()):
        return ColumnType.DATE
    return ColumnType.STRING


def _records(rows: pd.DataFrame | Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    if isinstance(rows, pd.DataFrame):
        return rows.head(INFERENCE_SAMPLE_SIZE).to_dict(orient="records")
    return list(rows[:INFERENCE_SAMPLE_SIZE])


def infer_column_types(rows: pd.DataFrame | Sequence[Mapping[str, Any]]) -> list[ColumnInfo]:
    """
    Infer ColumnInfo for every column seen in the first 100 rows.

    Rules:
    - only numbers → number; only booleans → boolean
    - date-like values, optionally mixed with plain strings → date
    - anything else (including an all-blank column) → string
    """
    sample = _records(rows)
    if not sample:
        return []

    names: list[str] = []
    for row in sample:
        for key in row:
            if key not in names:
                names.append(key)

    out: list[ColumnInfo] = []
    for name in names:
        values = [row.get(name) for row in sample]
        present = [v for v in values if not is_blank(v)]
        if not present:
            out.append(ColumnInfo(name=name, type=ColumnType.STRING, nullable=True, unique=False))
            continue

        kinds = {_value_type(v) for v in present}
        if kinds == {ColumnType.NUMBER}:
            primary = ColumnType.NUMBER
        elif kinds == {ColumnType.BOOLEAN}:
            primary = ColumnType.BOOLEAN
        elif ColumnType.DATE in kinds and kinds <= {ColumnType.DATE, ColumnType.STRING}:
            primary = ColumnType.DATE
        else:
            primary = ColumnType.STRING

        try:
            unique = len(set(present)) == len(present)
        except TypeError:
            unique = False

        out.append(
            ColumnInfo(
                name=name,
                type=primary,
                nullable=len(present) < len(sample),
                unique=unique,
            )
        )
    return out


def value_fields(columns: Iterable[ColumnInfo]) -> list[str]:
    """Columns offered for value axes (numeric only)."""
    return [c.name for c in columns if c.type == ColumnType.NUMBER]


def category_fields(columns: Iterable[ColumnInfo]) -> list[str]:
    """Columns offered for category/series axes."""
    return [
        c.name
        for c in columns
        if c.type in (ColumnType.STRING, ColumnType.DATE, ColumnType.BOOLEAN)
    ]


def column_names(columns: Iterable[ColumnInfo]) -> set[str]:
    return {c.name for c in columns}
