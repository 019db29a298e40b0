from __future__ import annotations

from chart_engine.core.config_model import ChartConfiguration, CustomPosition
from chart_engine.core.constants import HorizontalAnchor, LegendMapping, VerticalAnchor
from chart_engine.core.types import ChartData
from chart_engine.viz.legend import (
    LegendItem,
    TextMeasurer,
    layout_legend,
    legend_items,
    legend_visible,
    wrap_rows,
)


class FixedMeasurer:
    def __init__(self, width: float) -> None:
        self.value = width

    def width(self, text: str) -> float:
        return self.value


def _top_center() -> ChartConfiguration:
    return ChartConfiguration(
        template_id="multi-series-bar",
        legend_vertical_position=VerticalAnchor.TOP,
        legend_horizontal_position=HorizontalAnchor.CENTER,
    )


def test_twenty_labels_wrap_into_centered_rows() -> None:
    items = [LegendItem(label=f"Series {i}", color="#000000") for i in range(20)]
    layout = layout_legend(items, _top_center(), 600, 400, measurer=FixedMeasurer(60.0))

    assert layout.horizontal
    assert len(layout.rows) > 1
    max_row = max(160.0, min(600 - 80.0, 540.0))
    assert all(row.width <= max_row for row in layout.rows)
    assert sum(len(row.items) for row in layout.rows) == 20
    # each row starts half its width left of the centered origin
    first_row = layout.rows[0]
    assert layout.placed[0].x == -first_row.width / 2.0


def test_side_anchor_stacks_one_item_per_line() -> None:
    cfg = ChartConfiguration(template_id="simple-bar", legend_position="right")
    items = [LegendItem("a", "#111111"), LegendItem("b", "#222222")]
    layout = layout_legend(items, cfg, 600, 400, measurer=FixedMeasurer(30.0))

    assert not layout.horizontal
    assert [p.y for p in layout.placed] == [0.0, layout.line_height]
    assert layout.origin_x == 600 - 20.0


def test_custom_position_and_offsets() -> None:
    cfg = ChartConfiguration(
        template_id="simple-bar", legend_custom_position=CustomPosition(x=100, y=50, rotation=90)
    )
    layout = layout_legend([LegendItem("a", "#111111")], cfg, 600, 400, measurer=FixedMeasurer(30.0))
    assert (layout.origin_x, layout.origin_y, layout.rotation) == (100, 50, 90)
    assert not layout.horizontal

    shifted = _top_center().updated(legend_offset_x=10, legend_offset_y=5)
    base = layout_legend([LegendItem("a", "#111111")], _top_center(), 600, 400, measurer=FixedMeasurer(30.0))
    moved = layout_legend([LegendItem("a", "#111111")], shifted, 600, 400, measurer=FixedMeasurer(30.0))
    assert (moved.origin_x - base.origin_x, moved.origin_y - base.origin_y) == (10, 5)


def test_wrap_rows_greedy() -> None:
    items = [LegendItem("x", "#000", text_width=40.0) for _ in range(3)]
    rows = wrap_rows(items, icon_size=12.0, max_row_width=160.0)
    assert [len(r.items) for r in rows] == [2, 1]


def test_items_and_visibility() -> None:
    data = ChartData.build(["a", "b"], [("s1", [1, 2]), ("s2", [3, 4])])
    cats = ChartConfiguration(template_id="simple-bar", legend_mapping=LegendMapping.CATEGORIES)
    series = ChartConfiguration(template_id="simple-bar", legend_mapping=LegendMapping.SERIES)
    assert [i.label for i in legend_items(cats, data, ["#1", "#2"])] == ["a", "b"]
    assert [i.label for i in legend_items(series, data, ["#1", "#2"])] == ["s1", "s2"]
    assert legend_visible(series, data)
    assert not legend_visible(series, ChartData.build(["a"], [("s1", [1])]))
    assert not legend_visible(series, None)


def test_text_measurer_measures_and_falls_back() -> None:
    with TextMeasurer(12.0) as measurer:
        short = measurer.width("ab")
        long = measurer.width("abcdefghij")
    assert 0 < short < long
    closed = TextMeasurer(10.0)
    assert closed.width("abcd") == closed.approximate("abcd")
