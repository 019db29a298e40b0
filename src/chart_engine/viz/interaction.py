"""Hover highlighting and tooltips for drawn marks."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from matplotlib.artist import Artist
from matplotlib.axes import Axes
from matplotlib.backend_bases import MouseEvent
from matplotlib.figure import Figure

logger = logging.getLogger(__name__)

TOOLTIP_BACKGROUND = "#1f2937"
TOOLTIP_BORDER = "#374151"
TOOLTIP_TEXT = "#ffffff"


@dataclass
class HoverTarget:
    """A mark plus what hovering it does: highlight, restore, and the tooltip text."""

    artist: Artist
    tooltip: Sequence[str]
    on_enter: Callable[[], None] | None = None
    on_leave: Callable[[], None] | None = None


class HoverController:
    """
    Tracks the mark under the pointer on one figure.

    Only one target is active at a time; moving off every mark hides the tooltip.
    """

    def __init__(self, figure: Figure, overlay: Axes) -> None:
        self.figure = figure
        self.overlay = overlay
        self.targets: list[HoverTarget] = []
        self.active: HoverTarget | None = None
        self._cid: int | None = None
        self._tooltip = overlay.annotate(
            "",
            xy=(0, 0),
            xycoords="figure pixels",
            xytext=(10, -10),
            textcoords="offset pixels",
            va="top",
            fontsize=9,
            color=TOOLTIP_TEXT,
            bbox={"boxstyle": "round,pad=0.5", "fc": TOOLTIP_BACKGROUND, "ec": TOOLTIP_BORDER},
            zorder=100,
        )
        self._tooltip.set_visible(False)

    def add(self, target: HoverTarget) -> HoverTarget:
        self.targets.append(target)
        return target

    def connect(self) -> None:
        if self._cid is None:
            self._cid = self.figure.canvas.mpl_connect("motion_notify_event", self.on_motion)

    def disconnect(self) -> None:
        if self._cid is not None:
            self.figure.canvas.mpl_disconnect(self._cid)
        self._cid = None

    def hit(self, event: MouseEvent) -> HoverTarget | None:
        # later marks are drawn on top, so search from the end
        for target in reversed(self.targets):
            contains, _ = target.artist.contains(event)
            if contains:
                return target
        return None

    def on_motion(self, event: MouseEvent) -> None:
        target = self.hit(event)
        if target is not self.active:
            if self.active is not None and self.active.on_leave is not None:
                self.active.on_leave()
            if target is not None and target.on_enter is not None:
                target.on_enter()
            self.active = target

        if target is None:
            changed = self._tooltip.get_visible()
            self._tooltip.set_visible(False)
        else:
            self._tooltip.xy = (event.x, event.y)
            self._tooltip.set_text("\n".join(target.tooltip))
            self._tooltip.set_visible(True)
            changed = True

        if changed:
            self.figure.canvas.draw_idle()

    @property
    def tooltip_text(self) -> str | None:
        return self._tooltip.get_text() if self._tooltip.get_visible() else None
