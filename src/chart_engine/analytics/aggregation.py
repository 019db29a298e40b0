"""Turn raw rows plus a chart configuration into chart-ready ChartData."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

import pandas as pd

from chart_engine.analytics.sample_data import sample_chart_data
from chart_engine.analytics.templates import chart_kind_for, is_configuration_complete
from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import (
    DEFAULT_SERIES_LABEL,
    MAX_DECIMALS,
    UNKNOWN_LABEL,
    Aggregation,
    ChartKind,
)
from chart_engine.core.errors import (
    ConfigurationIncomplete,
    EmptyResult,
    InvalidReference,
    RenderFailure,
)
from chart_engine.core.types import ChartData, Dataset, Point, Scalar
from chart_engine.data.schema import ColumnInfo, is_blank
from chart_engine.data.source import DataSource

logger = logging.getLogger(__name__)

Rows = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]

# pandas reducers per aggregation; "none" keeps the first value in row order
_AGG_MAP = {
    Aggregation.SUM: "sum",
    Aggregation.AVERAGE: "mean",
    Aggregation.COUNT: "size",
    Aggregation.MIN: "min",
    Aggregation.MAX: "max",
    Aggregation.NONE: "first",
}

_SERIES_KINDS = frozenset({ChartKind.MULTI_BAR, ChartKind.STACKED_BAR, ChartKind.MULTI_LINE})

_X = "__x"
_S = "__series"
_V = "__value"

_QUANTUM = Decimal(1).scaleb(-MAX_DECIMALS)


def round_value(value: Any) -> float:
    """Round half-up to MAX_DECIMALS; NaN and non-numbers become 0."""
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    if f != f or f in (float("inf"), float("-inf")):
        return 0.0
    return float(Decimal(repr(f)).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def category_label(value: Any, fallback: str = UNKNOWN_LABEL) -> str:
    if is_blank(value):
        return fallback
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def numeric_values(s: pd.Series) -> pd.Series:
    """Number-or-zero coercion for a value column."""
    if pd.api.types.is_bool_dtype(s):
        return s.astype(float)
    return pd.to_numeric(s, errors="coerce").fillna(0.0).astype(float)


def _as_frame(rows: Rows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    return pd.DataFrame(list(rows))


def _reduce(frame: pd.DataFrame, keys: list[str], agg: Aggregation) -> pd.Series:
    grouped = frame.groupby(keys, sort=False)[_V]
    if agg == Aggregation.COUNT:
        return grouped.size().astype(float)
    return grouped.agg(_AGG_MAP[agg])


def _required_fields(config: ChartConfiguration, kind: ChartKind) -> list[str]:
    if kind == ChartKind.PIE:
        return [config.category_field or "", config.value_field or ""]
    if kind == ChartKind.SCATTER:
        return [config.x_axis_field or "", config.primary_y_field or ""]

    fields = [config.x_axis_field or ""]
    if config.series_field and kind in _SERIES_KINDS:
        fields += [config.primary_y_field or "", config.series_field]
    else:
        fields += config.y_fields
    return fields


def _check_fields(config: ChartConfiguration, kind: ChartKind, available: set[str]) -> None:
    missing = [f for f in _required_fields(config, kind) if f not in available]
    if missing:
        raise InvalidReference(f"Configured fields not found in data: {missing}")


def _pie(frame: pd.DataFrame, config: ChartConfiguration) -> ChartData:
    assert config.category_field and config.value_field
    work = pd.DataFrame(
        {
            _X: frame[config.category_field].map(category_label),
            _V: numeric_values(frame[config.value_field]),
        }
    )
    reduced = _reduce(work, [_X], config.aggregation)
    return ChartData(
        labels=tuple(str(k) for k in reduced.index),
        datasets=(
            Dataset(
                label=config.value_field,
                data=tuple(Scalar(round_value(v)) for v in reduced.to_numpy()),
            ),
        ),
    )


def _scatter(frame: pd.DataFrame, config: ChartConfiguration) -> ChartData:
    assert config.x_axis_field and config.primary_y_field
    xs = numeric_values(frame[config.x_axis_field]).to_numpy()
    ys = numeric_values(frame[config.primary_y_field]).to_numpy()
    points = tuple(Point(round_value(x), round_value(y)) for x, y in zip(xs, ys))
    return ChartData(
        labels=tuple(f"Point {i + 1}" for i in range(len(points))),
        datasets=(Dataset(label="Data Points", data=points),),
    )


def _single_series(frame: pd.DataFrame, config: ChartConfiguration) -> ChartData:
    """One dataset per y field, grouped by the x field."""
    assert config.x_axis_field
    x = frame[config.x_axis_field].map(category_label)
    labels = [str(v) for v in pd.unique(x)]

    datasets: list[Dataset] = []
    for y_field in config.y_fields:
        work = pd.DataFrame({_X: x, _V: numeric_values(frame[y_field])})
        reduced = _reduce(work, [_X], config.aggregation).reindex(labels, fill_value=0.0)
        datasets.append(
            Dataset(label=y_field, data=tuple(Scalar(round_value(v)) for v in reduced.to_numpy()))
        )
    return ChartData(labels=tuple(labels), datasets=tuple(datasets))


def _multi_series(frame: pd.DataFrame, config: ChartConfiguration) -> ChartData:
    """One dataset per distinct series value over every x label; gaps are 0."""
    assert config.x_axis_field and config.series_field and config.primary_y_field
    work = pd.DataFrame(
        {
            _X: frame[config.x_axis_field].map(category_label),
            _S: frame[config.series_field].map(lambda v: category_label(v, DEFAULT_SERIES_LABEL)),
            _V: numeric_values(frame[config.primary_y_field]),
        }
    )
    labels = [str(v) for v in pd.unique(work[_X])]
    series = [str(v) for v in pd.unique(work[_S])]

    table = (
        _reduce(work, [_S, _X], config.aggregation)
        .unstack(_X)
        .reindex(index=series, columns=labels)
        .fillna(0.0)
    )
    datasets = tuple(
        Dataset(label=name, data=tuple(Scalar(round_value(v)) for v in table.loc[name].to_numpy()))
        for name in series
    )
    return ChartData(labels=tuple(labels), datasets=datasets)


def _build(frame: pd.DataFrame, config: ChartConfiguration, kind: ChartKind) -> ChartData:
    if kind == ChartKind.PIE:
        return _pie(frame, config)
    if kind == ChartKind.SCATTER:
        return _scatter(frame, config)
    if config.series_field and kind in _SERIES_KINDS:
        return _multi_series(frame, config)
    return _single_series(frame, config)


def build_chart_data(
    rows: Rows, config: ChartConfiguration, columns: Iterable[ColumnInfo] | None = None
) -> ChartData:
    """
    Strict aggregation: raises instead of degrading.

    Raises:
    - ConfigurationIncomplete when a field the template needs is unset
    - EmptyResult when there are no rows
    - InvalidReference when a configured field is not among the columns
    - RenderFailure when the rows cannot be grouped or reduced
    """
    if not is_configuration_complete(config):
        raise ConfigurationIncomplete(f"Configuration for '{config.template_id}' is incomplete")

    try:
        frame = _as_frame(rows)
    except (TypeError, ValueError) as e:
        raise RenderFailure(f"Rows cannot be read as a table: {e}") from e
    if frame.empty:
        raise EmptyResult("No rows to aggregate")

    available = {c.name for c in columns} if columns is not None else set(frame.columns)
    available &= set(frame.columns)
    kind = chart_kind_for(config.template_id)
    _check_fields(config, kind, available)
    try:
        return _build(frame, config, kind)
    except Exception as e:
        raise RenderFailure(f"Aggregation failed for '{config.template_id}': {e}") from e


def aggregate(
    rows: Rows, config: ChartConfiguration, columns: Iterable[ColumnInfo] | None = None
) -> ChartData | None:
    """
    Aggregate rows for a chart, never raising.

    Incomplete configurations and unexpected failures yield the template's
    sample data; no rows or a dangling field reference yield None.
    """
    try:
        return build_chart_data(rows, config, columns)
    except ConfigurationIncomplete:
        return sample_chart_data(config.template_id)
    except EmptyResult:
        return None
    except InvalidReference as e:
        logger.warning("Chart '%s': %s", config.title or config.template_id, e)
        return None
    except RenderFailure:
        logger.exception("Failed to aggregate chart data for template %s", config.template_id)
        return sample_chart_data(config.template_id)


def aggregate_source(
    source: DataSource, config: ChartConfiguration, date_range_ids: Sequence[str] = ()
) -> ChartData | None:
    """Resolve the chart's table, date ranges and slicers, then aggregate."""
    if not is_configuration_complete(config):
        return sample_chart_data(config.template_id)
    try:
        frame, columns = source.filtered_rows(config, date_range_ids)
    except InvalidReference as e:
        logger.warning("Chart '%s': %s", config.title or config.template_id, e)
        return None
    return aggregate(frame, config, columns or None)
