"""Enter transitions driven by the figure canvas timer."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from chart_engine.core.constants import (
    ANIMATION_FRAME_MS,
    ANIMATION_MAX_DELAY_MS,
    ANIMATION_STEP_MS,
)

logger = logging.getLogger(__name__)

Easing = Callable[[float], float]
Update = Callable[[float], None]


def ease_cubic_out(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def ease_cubic_in_out(t: float) -> float:
    if t < 0.5:
        return 4.0 * t**3
    return 1.0 - ((-2.0 * t + 2.0) ** 3) / 2.0


def item_delay(count: int, step: float = ANIMATION_STEP_MS, max_delay: float = ANIMATION_MAX_DELAY_MS) -> float:
    """Per-item stagger so a whole series starts within `max_delay` ms."""
    if count <= 0:
        return step
    return min(step, max_delay / count)


@dataclass
class Transition:
    """
    One scheduled property animation.

    `update` receives the eased progress in [0, 1]; it is always called with
    1.0 exactly once when the transition finishes or is completed early.
    """

    duration_ms: float
    delay_ms: float
    update: Update
    ease: Easing = ease_cubic_out
    cancelled: bool = False
    finished: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def complete(self) -> None:
        if self.cancelled or self.finished:
            return
        self.update(1.0)
        self.finished = True

    def step(self, elapsed_ms: float) -> None:
        if self.cancelled or self.finished:
            return
        if elapsed_ms < self.delay_ms:
            return
        if self.duration_ms <= 0:
            self.complete()
            return
        t = min(1.0, (elapsed_ms - self.delay_ms) / self.duration_ms)
        if t >= 1.0:
            self.complete()
        else:
            self.update(self.ease(t))

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.finished)


@dataclass
class AnimationScheduler:
    """
    Cancellable transitions for one chart view.

    Renderers call `schedule`; the view calls `start(canvas)` after drawing,
    `cancel_all()` before every re-render and `complete_all()` when the
    final frame is needed immediately (e.g. saving a PNG).
    """

    frame_ms: int = ANIMATION_FRAME_MS
    transitions: list[Transition] = field(default_factory=list)
    _timer: object | None = field(default=None, init=False, repr=False)
    _started_at: float = field(default=0.0, init=False, repr=False)
    _canvas: object | None = field(default=None, init=False, repr=False)

    def schedule(
        self,
        duration_ms: float,
        delay_ms: float,
        update: Update,
        ease: Easing = ease_cubic_out,
    ) -> Transition:
        update(0.0)
        transition = Transition(duration_ms=duration_ms, delay_ms=delay_ms, update=update, ease=ease)
        self.transitions.append(transition)
        return transition

    @property
    def pending(self) -> list[Transition]:
        return [t for t in self.transitions if t.pending]

    def start(self, canvas) -> None:
        """Begin ticking on the canvas timer; a no-op when nothing is pending."""
        if not self.pending:
            return
        self._canvas = canvas
        self._started_at = time.monotonic()
        timer = canvas.new_timer(interval=self.frame_ms)
        timer.add_callback(self._tick)
        self._timer = timer
        timer.start()

    def _tick(self) -> None:
        elapsed = (time.monotonic() - self._started_at) * 1000.0
        for transition in self.transitions:
            transition.step(elapsed)
        if self._canvas is not None:
            self._canvas.draw_idle()
        if not self.pending:
            self._stop_timer()

    def advance(self, elapsed_ms: float) -> None:
        """Move every transition to `elapsed_ms` after start without a timer."""
        for transition in self.transitions:
            transition.step(elapsed_ms)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
        self._timer = None

    def cancel_all(self) -> None:
        cancelled = len(self.pending)
        for transition in self.transitions:
            transition.cancel()
        self._stop_timer()
        self.transitions.clear()
        if cancelled:
            logger.debug("Cancelled %d pending transitions", cancelled)

    def complete_all(self) -> None:
        for transition in self.transitions:
            transition.complete()
        self._stop_timer()
