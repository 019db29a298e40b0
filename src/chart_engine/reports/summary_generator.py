"""Analysis payload for a chart and a deterministic text summary (no LLM)."""

from __future__ import annotations

from typing import Any

import pandas as pd

from chart_engine.analytics.templates import chart_kind_for
from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import ChartKind
from chart_engine.core.types import ChartData
from chart_engine.viz.labels import percentage_text
from chart_engine.viz.number_format import format_number


def _chart_family(config: ChartConfiguration) -> str:
    kind = chart_kind_for(config.template_id)
    if kind == ChartKind.PIE:
        return "pie"
    if kind == ChartKind.SCATTER:
        return "scatter"
    if kind in (ChartKind.SIMPLE_LINE, ChartKind.MULTI_LINE, ChartKind.AREA):
        return "trend"
    return "bar"


def long_frame(chart_data: ChartData) -> pd.DataFrame:
    """One row per (category, series) value; scatter rows carry x and y."""
    rows: list[dict[str, Any]] = []
    for ds in chart_data.datasets:
        if ds.is_point_series:
            for p in ds.points():
                rows.append({"series": ds.label, "x": p.x, "y": p.y})
            continue
        for label, value in zip(chart_data.labels, ds.values()):
            rows.append({"category": label, "series": ds.label, "value": value})
    return pd.DataFrame(rows)


def chart_summary_rows(chart_data: ChartData, config: ChartConfiguration) -> dict[str, Any]:
    """
    Structured payload an analysis collaborator receives.

    `dataPreview` pairs each label with the first dataset's value (0 when missing).
    """
    first = chart_data.datasets[0].values() if chart_data.datasets else []
    return {
        "chartType": config.template_id,
        "title": config.title,
        "labels": list(chart_data.labels),
        "datasets": [{"label": ds.label, "data": ds.values()} for ds in chart_data.datasets],
        "dataPreview": [
            {"category": label, "value": first[i] if i < len(first) else 0}
            for i, label in enumerate(chart_data.labels)
        ],
        "totalDataPoints": sum(len(ds) for ds in chart_data.datasets),
    }


def _fmt(value: float, config: ChartConfiguration) -> str:
    return format_number(value, config.number_format)


def _trend_note(frame: pd.DataFrame, config: ChartConfiguration) -> list[str]:
    lines: list[str] = []
    for series, grp in frame.groupby("series", sort=False):
        if len(grp) < 2:
            lines.append(f"- {series}: Not enough points for a trend")
            continue
        start = float(grp["value"].iloc[0])
        end = float(grp["value"].iloc[-1])
        direction = "flat"
        if end > start:
            direction = "up"
        elif end < start:
            direction = "down"
        peak = grp.loc[grp["value"].idxmax()]
        lines.append(
            f"- {series}: {direction} ({_fmt(start, config)} → {_fmt(end, config)}), "
            f"peak {_fmt(float(peak['value']), config)} at {peak['category']}"
        )
    return lines


def generate_chart_summary(chart_data: ChartData | None, config: ChartConfiguration, top_n: int = 3) -> str:
    """
    Deterministic summary grounded only in the aggregated chart data.

    Bar and pie charts list the largest categories (pie with shares),
    line and area charts describe each series' direction, scatter charts
    report the ranges and the x/y correlation.
    """
    lines: list[str] = []
    title = config.title or "Chart"
    lines.append(f"{title} Summary")
    lines.append("=" * (len(title) + 8))

    if chart_data is None or chart_data.is_empty:
        lines.append("No data to summarize (the chart is empty after filtering).")
        return "\n".join(lines)

    frame = long_frame(chart_data)
    family = _chart_family(config)

    if family == "scatter" and "x" in frame.columns:
        lines.append(f"Points: {len(frame)}")
        lines.append(f"X range: {_fmt(float(frame['x'].min()), config)} to {_fmt(float(frame['x'].max()), config)}")
        lines.append(f"Y range: {_fmt(float(frame['y'].min()), config)} to {_fmt(float(frame['y'].max()), config)}")
        if len(frame) >= 2 and frame["x"].nunique() > 1 and frame["y"].nunique() > 1:
            lines.append(f"Correlation (x, y): {frame['x'].corr(frame['y']):.2f}")
        else:
            lines.append("Correlation (x, y): Not available")
        return "\n".join(lines)

    if family == "trend":
        lines.append("Series trends:")
        lines.extend(_trend_note(frame, config))
        return "\n".join(lines)

    totals = frame.groupby("category", sort=False)["value"].sum()
    grand_total = float(totals.clip(lower=0).sum()) if family == "pie" else float(totals.sum())
    lines.append(f"Total: {_fmt(float(totals.sum()), config)} across {len(totals)} categories")
    lines.append("")
    lines.append(f"Top {top_n} categories:")
    for category, value in totals.sort_values(ascending=False).head(top_n).items():
        if family == "pie":
            lines.append(f"- {category}: {_fmt(float(value), config)} ({percentage_text(max(0.0, float(value)), grand_total)})")
        else:
            lines.append(f"- {category}: {_fmt(float(value), config)}")
    smallest = totals.idxmin()
    lines.append("")
    lines.append(f"Smallest: {smallest} ({_fmt(float(totals[smallest]), config)})")
    if len(chart_data.datasets) > 1:
        per_series = frame.groupby("series", sort=False)["value"].sum()
        leader = per_series.idxmax()
        lines.append(f"Largest series: {leader} ({_fmt(float(per_series[leader]), config)})")
    return "\n".join(lines)
