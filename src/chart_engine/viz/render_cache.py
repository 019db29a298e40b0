"""PNG thumbnails of rendered charts, keyed by chart id with manual invalidation."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.types import ChartData
from chart_engine.core.utils_hash import sha256_payload
from chart_engine.viz.chart_view import ChartView

logger = logging.getLogger(__name__)


def fingerprint(config: ChartConfiguration, data: ChartData | None) -> str:
    payload = {
        "config": config.model_dump(mode="json", by_alias=True, exclude_none=True),
        "data": data.to_dict() if data is not None else None,
    }
    return sha256_payload(payload)


@dataclass(frozen=True)
class CachedRender:
    chart_id: str
    fingerprint: str
    png: bytes
    width: int
    height: int


class RenderCache:
    """
    Holds one thumbnail per chart id.

    Entries are never evicted on their own; callers invalidate a chart when
    its configuration or data changes. `get` also misses when the stored
    fingerprint no longer matches the one supplied.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CachedRender] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, chart_id: object) -> bool:
        return chart_id in self._entries

    def put(self, chart_id: str, entry: CachedRender) -> None:
        self._entries[chart_id] = entry

    def get(self, chart_id: str, expected_fingerprint: str | None = None) -> CachedRender | None:
        entry = self._entries.get(chart_id)
        if entry is None:
            return None
        if expected_fingerprint is not None and entry.fingerprint != expected_fingerprint:
            logger.debug("Stale thumbnail for %s", chart_id)
            return None
        logger.debug("Thumbnail cache hit for %s", chart_id)
        return entry

    def invalidate(self, chart_id: str) -> bool:
        return self._entries.pop(chart_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def thumbnail(
        self,
        chart_id: str,
        config: ChartConfiguration,
        data: ChartData | None,
        width: int = 300,
        height: int = 200,
    ) -> CachedRender:
        """Cached PNG for the chart, rendering (without animation) on a miss."""
        key = fingerprint(config, data)
        cached = self.get(chart_id, key)
        if cached is not None:
            return cached

        view = ChartView(width=width, height=height)
        try:
            view.render(config, data, animate=False)
            buf = io.BytesIO()
            view.figure.savefig(buf, format="png", dpi=view.dpi)
        finally:
            view.close()

        entry = CachedRender(chart_id=chart_id, fingerprint=key, png=buf.getvalue(), width=width, height=height)
        self.put(chart_id, entry)
        return entry
