from __future__ import annotations

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.types import ChartData
from chart_engine.viz.render_cache import RenderCache, fingerprint

PNG_MAGIC = b"\x89PNG"


def test_thumbnail_is_cached_until_invalidated() -> None:
    cache = RenderCache()
    cfg = ChartConfiguration(template_id="simple-bar", title="Thumb")
    data = ChartData.build(["a", "b"], [("v", [1, 2])])

    first = cache.thumbnail("chart-1", cfg, data)
    assert first.png.startswith(PNG_MAGIC)
    assert cache.thumbnail("chart-1", cfg, data) is first
    assert "chart-1" in cache

    assert cache.invalidate("chart-1")
    assert not cache.invalidate("chart-1")
    assert cache.get("chart-1") is None


def test_changed_configuration_misses() -> None:
    cache = RenderCache()
    cfg = ChartConfiguration(template_id="simple-bar")
    data = ChartData.build(["a"], [("v", [1])])
    entry = cache.thumbnail("c", cfg, data)

    changed = cfg.updated(title="New title")
    assert fingerprint(changed, data) != entry.fingerprint
    assert cache.get("c", fingerprint(changed, data)) is None
    assert cache.get("c", entry.fingerprint) is entry

    cache.clear()
    assert len(cache) == 0
