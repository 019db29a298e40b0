from __future__ import annotations

import pytest

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.types import ChartData, Dataset, Point
from chart_engine.viz.chart_view import ChartView


def _many_categories(series: int, count: int = 200) -> ChartData:
    labels = [f"c{i}" for i in range(count)]
    return ChartData.build(labels, [(f"s{s}", [i % 7 + 1 for i in range(count)]) for s in range(series)])


def _many_points(count: int = 200) -> ChartData:
    points = tuple(Point(float(i), float(i % 11)) for i in range(count))
    return ChartData(labels=tuple(f"Point {i + 1}" for i in range(count)), datasets=(Dataset("pts", points),))


# Latest start (ms) any enter transition may have, labels included:
# fixed phase offset of the variant plus the 800 ms stagger cap.
CASES = [
    ("simple-bar", _many_categories(1), 300 + 800),
    ("multi-series-bar", _many_categories(3), 300 + 800),
    ("stacked-bar", _many_categories(3), 300 + 800 + 80),
    ("simple-line", _many_categories(1), 1200 + 800),
    ("multi-line", _many_categories(3), 1200 + 800),
    ("area-chart", _many_categories(40, count=20), 600 + 800),
    ("pie-chart", _many_categories(1, count=40), 600 + 800),
    ("scatter-plot", _many_points(), 600 + 800),
]


@pytest.mark.parametrize("template, data, bound", CASES, ids=[c[0] for c in CASES])
def test_enter_stagger_is_capped_for_every_variant(template: str, data: ChartData, bound: float) -> None:
    cfg = ChartConfiguration(template_id=template, show_data_labels=True)
    view = ChartView(width=800, height=500)

    rendered = view.render(cfg, data)

    assert not rendered.placeholder
    delays = [t.delay_ms for t in view.scheduler.transitions]
    assert delays
    assert max(delays) <= bound
    view.close()


def test_pie_slices_start_within_cap() -> None:
    data = _many_categories(1, count=40)
    view = ChartView(width=800, height=500)
    view.render(ChartConfiguration(template_id="pie-chart"), data)

    assert max(t.delay_ms for t in view.scheduler.transitions) < 800
    view.close()


def test_outline_width_follows_size_class() -> None:
    data = ChartData.build(["a", "b"], [("v", [3, 4])])
    cfg = ChartConfiguration(template_id="simple-bar")

    full = ChartView(width=800, height=500).render(cfg, data, animate=False)
    compact = ChartView(width=300, height=200).render(cfg, data, animate=False)

    assert full.layout.glow_width > compact.layout.glow_width
    full_bar = full.marks_of("bar")[0].artist
    compact_bar = compact.marks_of("bar")[0].artist
    assert full_bar.get_linewidth() > compact_bar.get_linewidth()


def test_hover_widens_outline_from_size_class_base() -> None:
    data = ChartData.build(["a", "b"], [("share", [1, 3])])
    view = ChartView(width=300, height=200)
    rendered = view.render(ChartConfiguration(template_id="pie-chart"), data, animate=False)

    wedge = rendered.marks_of("slice")[0].artist
    base = wedge.get_linewidth()
    target = next(t for t in view.hover.targets if t.artist is wedge)
    target.on_enter()
    assert wedge.get_linewidth() > base
    target.on_leave()
    assert wedge.get_linewidth() == base
    view.close()
