"""Band, point and linear scales mapping data onto plot pixels."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from matplotlib.ticker import MaxNLocator

from chart_engine.core.config_model import ChartConfiguration
from chart_engine.core.constants import ChartKind
from chart_engine.core.types import ChartData

BAND_PADDING = 0.2
VALUE_HEADROOM = 1.1
SCATTER_DOMAIN_PAD = 0.1
DEFAULT_TICK_COUNT = 5


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2.0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> list[float]:
        """Round tick values inside the domain, roughly `count` of them."""
        lo, hi = sorted(self.domain)
        if lo == hi:
            return [lo]
        locator = MaxNLocator(nbins=count, steps=[1, 2, 5, 10])
        return [float(t) for t in locator.tick_values(lo, hi) if lo - 1e-9 <= t <= hi + 1e-9]

    def contains_zero(self) -> bool:
        lo, hi = sorted(self.domain)
        return lo <= 0.0 <= hi


@dataclass(frozen=True)
class BandScale:
    """Evenly spaced bands with equal inner/outer padding, centered in the range."""

    labels: tuple[str, ...]
    range: tuple[float, float]
    padding: float = BAND_PADDING

    @property
    def step(self) -> float:
        r0, r1 = self.range
        n = len(self.labels)
        return (r1 - r0) / max(1.0, n - self.padding + self.padding * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1.0 - self.padding)

    def _start(self) -> float:
        r0, r1 = self.range
        n = len(self.labels)
        return r0 + (r1 - r0 - self.step * (n - self.padding)) * 0.5

    def position(self, index: int) -> float:
        """Left edge of band `index`."""
        return self._start() + self.step * index

    def __call__(self, label: str) -> float:
        return self.position(self.labels.index(label))

    def center(self, index: int) -> float:
        return self.position(index) + self.bandwidth / 2.0


@dataclass(frozen=True)
class PointScale:
    """Labels at evenly spaced points; first and last sit on the range edges."""

    labels: tuple[str, ...]
    range: tuple[float, float]

    @property
    def step(self) -> float:
        r0, r1 = self.range
        return (r1 - r0) / max(1, len(self.labels) - 1)

    def position(self, index: int) -> float:
        r0, r1 = self.range
        n = len(self.labels)
        start = r0 + (r1 - r0 - self.step * (n - 1)) * 0.5
        return start + self.step * index

    def __call__(self, label: str) -> float:
        return self.position(self.labels.index(label))

    def center(self, index: int) -> float:
        return self.position(index)


@dataclass(frozen=True)
class StackSegment:
    dataset_index: int
    value: float
    y0: float
    y1: float


@dataclass(frozen=True)
class Scales:
    x: BandScale | PointScale | LinearScale | None
    y: LinearScale | None
    stacks: tuple[tuple[StackSegment, ...], ...] = field(default_factory=tuple)
    zero_x: bool = False
    zero_y: bool = False


def stack_segments(data: ChartData) -> tuple[tuple[StackSegment, ...], ...]:
    """Cumulative [y0, y1) offsets per label, datasets stacked in order."""
    out: list[tuple[StackSegment, ...]] = []
    for label_index in range(len(data.labels)):
        cumulative = 0.0
        segs: list[StackSegment] = []
        for ds_index, ds in enumerate(data.datasets):
            values = ds.values()
            value = values[label_index] if label_index < len(values) else 0.0
            segs.append(StackSegment(ds_index, value, cumulative, cumulative + value))
            cumulative += value
        out.append(tuple(segs))
    return tuple(out)


def _value_scale(max_value: float, plot_height: float, config: ChartConfiguration) -> LinearScale:
    lo = config.y_axis_min if config.y_axis_min is not None else 0.0
    hi = config.y_axis_max if config.y_axis_max is not None else max_value * VALUE_HEADROOM
    return LinearScale(domain=(lo, hi), range=(plot_height, 0.0))


def _padded(values: Sequence[float], lo_override: float | None, hi_override: float | None) -> tuple[float, float]:
    lo = min(values) if values else 0.0
    hi = max(values) if values else 0.0
    pad = (hi - lo) * SCATTER_DOMAIN_PAD
    return (
        lo_override if lo_override is not None else lo - pad,
        hi_override if hi_override is not None else hi + pad,
    )


def build_scales(
    kind: ChartKind,
    data: ChartData,
    plot_width: float,
    plot_height: float,
    config: ChartConfiguration,
) -> Scales:
    """
    Scales for one chart kind.

    Bars get a band x scale, line and area a point x scale, both with a
    value y scale over [0, max * 1.1]. Scatter gets two padded linear scales.
    Pie charts need no scales.
    """
    if kind == ChartKind.PIE:
        return Scales(x=None, y=None)

    if kind == ChartKind.SCATTER:
        points = [p for ds in data.datasets for p in ds.points()]
        x = LinearScale(
            domain=_padded([p.x for p in points], config.x_axis_min, config.x_axis_max),
            range=(0.0, plot_width),
        )
        y = LinearScale(
            domain=_padded([p.y for p in points], config.y_axis_min, config.y_axis_max),
            range=(plot_height, 0.0),
        )
        return Scales(x=x, y=y, zero_x=x.contains_zero(), zero_y=y.contains_zero())

    if kind == ChartKind.STACKED_BAR:
        stacks = stack_segments(data)
        top = max((seg.y1 for segs in stacks for seg in segs), default=0.0)
        return Scales(
            x=BandScale(labels=data.labels, range=(0.0, plot_width)),
            y=_value_scale(top, plot_height, config),
            stacks=stacks,
        )

    y = _value_scale(data.max_value(), plot_height, config)
    if kind in (ChartKind.SINGLE_BAR, ChartKind.MULTI_BAR):
        return Scales(x=BandScale(labels=data.labels, range=(0.0, plot_width)), y=y)
    return Scales(x=PointScale(labels=data.labels, range=(0.0, plot_width)), y=y)
