"""Chart-ready data: labels plus datasets of scalar or (x, y) points."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from chart_engine.core.errors import ValidationError


@dataclass(frozen=True)
class Scalar:
    """One value per label (bar/line/area/pie)."""

    value: float

    @property
    def y(self) -> float:
        return self.value


@dataclass(frozen=True)
class Point:
    """One (x, y) pair per source row (scatter)."""

    x: float
    y: float


DataPoint = Union[Scalar, Point]


@dataclass(frozen=True)
class Dataset:
    """One named series within a chart."""

    label: str
    data: tuple[DataPoint, ...] = field(default_factory=tuple)

    @property
    def is_point_series(self) -> bool:
        return any(isinstance(p, Point) for p in self.data)

    def values(self) -> list[float]:
        """Scalar values, or the y component of points."""
        return [p.value if isinstance(p, Scalar) else p.y for p in self.data]

    def points(self) -> list[Point]:
        """Points; scalar entries are placed at their positional index."""
        return [p if isinstance(p, Point) else Point(float(i), p.value) for i, p in enumerate(self.data)]

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ChartData:
    """
    Normalized {labels, datasets} pair consumed by every renderer.

    Every dataset has one entry per label, except scatter data where each
    dataset carries one point per source row and labels are positional only.
    """

    labels: tuple[str, ...]
    datasets: tuple[Dataset, ...]

    @classmethod
    def build(cls, labels: Iterable[str], datasets: Iterable[tuple[str, Sequence[float]]]) -> "ChartData":
        """Convenience constructor from plain label/value lists."""
        return cls(
            labels=tuple(str(label) for label in labels),
            datasets=tuple(
                Dataset(label=str(name), data=tuple(Scalar(float(v)) for v in values))
                for name, values in datasets
            ),
        )

    @property
    def is_empty(self) -> bool:
        return not self.labels and not any(len(ds) for ds in self.datasets)

    @property
    def is_point_data(self) -> bool:
        return any(ds.is_point_series for ds in self.datasets)

    def is_rectangular(self) -> bool:
        """Every scalar dataset has exactly one value per label."""
        return all(ds.is_point_series or len(ds) == len(self.labels) for ds in self.datasets)

    def max_value(self) -> float:
        values = [v for ds in self.datasets for v in ds.values()]
        return max(values) if values else 0.0

    def to_dict(self) -> dict[str, Any]:
        """JSON payload shape: numbers for scalars, {x, y} objects for points."""
        datasets: list[dict[str, Any]] = []
        for ds in self.datasets:
            payload: list[Any] = []
            for p in ds.data:
                if isinstance(p, Point):
                    payload.append({"x": p.x, "y": p.y})
                else:
                    payload.append(p.value)
            datasets.append({"label": ds.label, "data": payload})
        return {"labels": list(self.labels), "datasets": datasets}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ChartData":
        try:
            labels = tuple(str(x) for x in payload.get("labels") or [])
            datasets: list[Dataset] = []
            for raw in payload.get("datasets") or []:
                points: list[DataPoint] = []
                for item in raw.get("data") or []:
                    if isinstance(item, Mapping):
                        points.append(Point(float(item["x"]), float(item["y"])))
                    else:
                        points.append(Scalar(float(item)))
                datasets.append(Dataset(label=str(raw.get("label", "")), data=tuple(points)))
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed chart data payload: {e}") from e
        return cls(labels=labels, datasets=tuple(datasets))
