"""Tables, slicers and date ranges that feed the aggregation engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import ColumnType, SlicerFilterType
from chart_engine.core.errors import DataSourceError, InvalidReference
from chart_engine.data.schema import ColumnInfo, infer_column_types

logger = logging.getLogger(__name__)

MAIN_TABLE_ID = "main"


@dataclass(frozen=True)
class DataTable:
    id: str
    name: str
    frame: pd.DataFrame
    columns: tuple[ColumnInfo, ...] = ()

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, table_id: str = MAIN_TABLE_ID, name: str = "") -> "DataTable":
        return cls(
            id=table_id,
            name=name or table_id,
            frame=frame,
            columns=tuple(infer_column_types(frame)),
        )

    @classmethod
    def from_records(
        cls, rows: Sequence[Mapping[str, Any]], table_id: str = MAIN_TABLE_ID, name: str = ""
    ) -> "DataTable":
        return cls.from_frame(pd.DataFrame(list(rows)), table_id=table_id, name=name)

    def date_columns(self) -> list[str]:
        out = [c.name for c in self.columns if c.type == ColumnType.DATE]
        for name in self.frame.columns:
            if pd.api.types.is_datetime64_any_dtype(self.frame[name]) and name not in out:
                out.append(name)
        return out


@dataclass(frozen=True)
class Slicer:
    """A column filter that charts opt into via `appliedSlicers`."""

    id: str
    name: str
    column_name: str
    filter_type: SlicerFilterType = SlicerFilterType.MULTI_SELECT
    selected_values: tuple[Any, ...] = ()
    table_id: str | None = None

    @property
    def is_active(self) -> bool:
        return len(self.selected_values) > 0


@dataclass(frozen=True)
class DateRange:
    id: str
    name: str
    start_date: str
    end_date: str


def _to_datetime(s: pd.Series) -> pd.Series:
    return pd.to_datetime(s, errors="coerce", format="mixed")


def _slicer_mask(frame: pd.DataFrame, slicer: Slicer) -> pd.Series:
    if slicer.column_name not in frame.columns:
        raise InvalidReference(f"Slicer column not found: {slicer.column_name}")

    col = frame[slicer.column_name]
    present = col.notna()

    if slicer.filter_type == SlicerFilterType.DATE_RANGE and len(slicer.selected_values) == 2:
        start, end = (pd.Timestamp(v) for v in slicer.selected_values)
        parsed = _to_datetime(col)
        return present & (parsed >= start) & (parsed <= end)

    return present & col.isin(list(slicer.selected_values))


def apply_slicers(
    frame: pd.DataFrame, applied_ids: Sequence[str], slicers: Sequence[Slicer]
) -> pd.DataFrame:
    """
    Keep rows that pass every active applied slicer.

    Unknown slicer ids are logged and skipped; slicers without selected values
    do not filter. A row whose sliced cell is missing never passes.
    """
    if not applied_ids:
        return frame

    by_id = {s.id: s for s in slicers}
    active: list[Slicer] = []
    for sid in applied_ids:
        slicer = by_id.get(sid)
        if slicer is None:
            logger.warning("Ignoring unknown slicer id: %s", sid)
            continue
        if slicer.is_active:
            active.append(slicer)

    if not active:
        return frame

    mask = pd.Series(True, index=frame.index)
    for slicer in active:
        try:
            mask &= _slicer_mask(frame, slicer)
        except InvalidReference as e:
            logger.warning("Ignoring slicer %s: %s", slicer.id, e)
    return frame[mask]


def apply_date_ranges(
    frame: pd.DataFrame, date_columns: Sequence[str], ranges: Sequence[DateRange]
) -> pd.DataFrame:
    """Keep rows where any date column falls inside any of the ranges (inclusive)."""
    if not ranges or frame.empty:
        return frame

    parsed = {name: _to_datetime(frame[name]) for name in date_columns if name in frame.columns}
    mask = pd.Series(False, index=frame.index)
    for rng in ranges:
        start = pd.Timestamp(rng.start_date)
        end = pd.Timestamp(rng.end_date)
        for values in parsed.values():
            mask |= (values >= start) & (values <= end)
    return frame[mask]


@dataclass
class DataSource:
    """
    Everything a chart can read from: the main table, extra tables,
    slicers and named date ranges.
    """

    main: DataTable
    tables: dict[str, DataTable] = field(default_factory=dict)
    slicers: list[Slicer] = field(default_factory=list)
    date_ranges: list[DateRange] = field(default_factory=list)

    def resolve_table(self, table_id: str | None) -> DataTable:
        if not table_id or table_id == MAIN_TABLE_ID:
            return self.main
        table = self.tables.get(table_id)
        if table is None:
            raise InvalidReference(f"Table not found: {table_id}")
        return table

    def resolve_date_ranges(self, range_ids: Sequence[str]) -> list[DateRange]:
        by_id = {r.id: r for r in self.date_ranges}
        out: list[DateRange] = []
        for rid in range_ids:
            rng = by_id.get(rid)
            if rng is None:
                logger.warning("Ignoring unknown date range id: %s", rid)
                continue
            out.append(rng)
        return out

    def filtered_rows(
        self, config: ChartConfiguration, date_range_ids: Sequence[str] = ()
    ) -> tuple[pd.DataFrame, tuple[ColumnInfo, ...]]:
        """
        Rows a chart aggregates over: its table, narrowed by the selected
        date ranges and then by the chart's applied slicers.
        """
        table = self.resolve_table(config.table_id)
        frame = apply_date_ranges(
            table.frame, table.date_columns(), self.resolve_date_ranges(date_range_ids)
        )
        frame = apply_slicers(frame, config.applied_slicers, self.slicers)
        return frame, table.columns


def load_csv_table(csv_path: str, table_id: str = MAIN_TABLE_ID) -> DataTable:
    try:
        frame = pd.read_csv(csv_path)
    except Exception as e:
        raise DataSourceError(f"Failed to read CSV: {csv_path}") from e
    return DataTable.from_frame(frame, table_id=table_id, name=table_id)
