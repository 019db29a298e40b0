from __future__ import annotations

import math

import pytest

from chart_engine.core.config_model import ChartConfiguration, DataLabelComponents
from chart_engine.core.constants import LabelPosition
from chart_engine.viz.labels import (
    LabelAnchor,
    arc_centroid,
    bar_label_anchor,
    de_overlap,
    line_label_text,
    pie_label_anchors,
    pie_label_parts,
    point_label_anchor,
    scatter_label_text,
    stacked_label_anchor,
    stacked_line_offsets,
)

CFG = ChartConfiguration(template_id="simple-bar")


def test_bar_top_and_offsets() -> None:
    anchor = bar_label_anchor(LabelPosition.TOP, 50, 20, 100, 80, 180, "10", CFG)
    assert (anchor.x, anchor.y, anchor.ha) == (50, 92, "center")

    shifted = CFG.updated(data_labels_offset_x=5, data_labels_offset_y=-3)
    anchor = bar_label_anchor(LabelPosition.CENTER, 50, 20, 100, 80, 180, "10", shifted)
    assert (anchor.x, anchor.y) == (55, 141)


def test_bar_sides_and_bottom() -> None:
    left = bar_label_anchor(LabelPosition.LEFT, 50, 20, 100, 80, 180, "10", CFG)
    right = bar_label_anchor(LabelPosition.RIGHT, 50, 20, 100, 80, 180, "10", CFG)
    bottom = bar_label_anchor(LabelPosition.BOTTOM, 50, 20, 100, 80, 180, "10", CFG)
    assert (left.x, left.ha) == (35, "right")
    assert (right.x, right.ha) == (65, "left")
    assert bottom.y == 195


def test_short_stacked_segments_get_no_label() -> None:
    assert stacked_label_anchor(None, 10, 50, 20, "5", CFG) is None
    anchor = stacked_label_anchor(None, 10, 50, 40, "5", CFG)
    assert anchor is not None and anchor.y == 74


def test_point_sides_only_when_allowed() -> None:
    with_sides = point_label_anchor(LabelPosition.RIGHT, 100, 100, "x", CFG, allow_sides=True)
    without = point_label_anchor(LabelPosition.RIGHT, 100, 100, "x", CFG, allow_sides=False)
    assert (with_sides.x, with_sides.y, with_sides.ha) == (115, 104, "left")
    assert (without.x, without.y, without.ha) == (100, 85, "center")


def test_arc_centroid_starts_at_twelve_oclock() -> None:
    x, y = arc_centroid(0.0, 0.0, 10.0)
    assert x == pytest.approx(0.0)
    assert y == pytest.approx(-10.0)
    x, y = arc_centroid(0.0, math.pi, 10.0)
    assert x == pytest.approx(10.0)


def test_de_overlap_pushes_close_labels_down() -> None:
    anchors = [LabelAnchor(0, 10, ("a",)), LabelAnchor(0, 5, ("b",)), LabelAnchor(0, 100, ("c",))]
    out = de_overlap(anchors)
    assert [a.y for a in out] == [5, 21, 100]
    assert [a.lines[0] for a in out] == ["b", "a", "c"]


def test_de_overlap_cascades_through_pushed_labels() -> None:
    anchors = [LabelAnchor(0, y, (str(y),)) for y in (15, 0, 10, 5)]
    out = de_overlap(anchors)

    ys = [a.y for a in out]
    assert ys == [0, 16, 32, 48]
    assert [a.lines[0] for a in out] == ["0", "5", "10", "15"]
    assert all(later - earlier >= 16 for earlier, later in zip(ys, ys[1:]))


def test_pie_outside_labels_are_spread() -> None:
    cfg = ChartConfiguration(template_id="pie-chart", data_labels_position=LabelPosition.OUTSIDE)
    angles = [(0.0, 0.1), (0.1, 0.2), (0.2, 6.0)]
    parts = [["a"], ["b"], ["c"]]
    anchors = pie_label_anchors(angles, parts, 100.0, cfg)
    ys = [a.y for a in anchors]
    assert all(later - earlier >= 16 - 1e-9 for earlier, later in zip(ys, ys[1:]))


def test_pie_label_parts_defaults_and_components() -> None:
    outside = ChartConfiguration(template_id="pie-chart", data_labels_position=LabelPosition.OUTSIDE)
    center = outside.updated(data_labels_position=LabelPosition.CENTER)
    assert pie_label_parts("A", 25, 100, "Sales", outside) == ["A (25.0%)"]
    assert pie_label_parts("A", 25, 100, "Sales", center) == ["25.0%"]

    comps = outside.updated(
        data_labels_components=DataLabelComponents(show_category=False, show_value=True, show_percentage=True)
    )
    assert pie_label_parts("A", 25, 100, "Sales", comps) == ["25", "25.0%"]
    assert stacked_line_offsets(2) == (-7.0, 7.0)


def test_line_and_scatter_text() -> None:
    assert line_label_text("Jan", 10, "Rev", 20, CFG) == "10"
    comps = CFG.updated(data_labels_components=DataLabelComponents(show_category=True, show_percentage=True))
    assert line_label_text("Jan", 10, "Rev", 20, comps) == "Jan 50.0%"
    assert scatter_label_text(1, 2.5, "pts", CFG) == "(1, 2.5)"
