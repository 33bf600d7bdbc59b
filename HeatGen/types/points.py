from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class HeatPoint:
    """
    A single weighted sample in projected-plane coordinates.
    """

    position: Tuple[float, float]
    weight: float = 1.0

    def __post_init__(self):
        x, y = self.position
        object.__setattr__(self, "position", (float(x), float(y)))
        object.__setattr__(self, "weight", float(self.weight))

        if not (np.isfinite(self.position[0]) and np.isfinite(self.position[1])):
            raise ValueError(f"Non-finite position: {self.position}")
        if not np.isfinite(self.weight) or self.weight < 0:
            raise ValueError(f"Weight must be finite and non-negative, got {self.weight}")


@dataclass(frozen=True)
class MapRect:
    """
    Axis-aligned rectangle in projected-plane units.

    `contains_array` is half-open on the max edges (tile queries), while
    `encloses_array` is closed (bounding checks).
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rect size must be non-negative, got {self.width}x{self.height}"
            )

    @property
    def origin(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, point) -> bool:
        px, py = point
        return self.x <= px < self.max_x and self.y <= py < self.max_y

    def contains_array(self, positions: np.ndarray) -> np.ndarray:
        xs = positions[:, 0]
        ys = positions[:, 1]
        return (xs >= self.x) & (xs < self.max_x) & (ys >= self.y) & (ys < self.max_y)

    def encloses_array(self, positions: np.ndarray) -> np.ndarray:
        xs = positions[:, 0]
        ys = positions[:, 1]
        return (xs >= self.x) & (xs <= self.max_x) & (ys >= self.y) & (ys <= self.max_y)

    def expanded(self, dx: float, dy: Optional[float] = None) -> "MapRect":
        if dy is None:
            dy = dx
        return MapRect(
            self.x - dx,
            self.y - dy,
            self.width + 2.0 * dx,
            self.height + 2.0 * dy,
        )

    def padded(self, margin: float) -> "MapRect":
        return self.expanded(margin, margin)


# The region calculator hands out plain rects
BoundingRegion = MapRect


@dataclass(frozen=True)
class ZoomStatistics:
    global_max: float
    coarse_bucket_max: float


class PointSet:
    """
    Immutable, non-empty, ordered set of weighted points.

    Stored column-wise as read-only numpy arrays:
        positions : (N, 2) float64
        weights   : (N,)   float64
    """

    def __init__(self, points: Iterable):
        positions = []
        weights = []

        for p in points:
            if isinstance(p, HeatPoint):
                hp = p
            elif len(p) == 2 and np.ndim(p[0]) == 1:
                hp = HeatPoint(tuple(p[0]), p[1])
            elif len(p) == 2:
                hp = HeatPoint(tuple(p))
            elif len(p) == 3:
                hp = HeatPoint((p[0], p[1]), p[2])
            else:
                raise ValueError(
                    f"Unsupported point {p!r}; expected HeatPoint, (x, y), "
                    "((x, y), weight) or (x, y, weight)"
                )
            positions.append(hp.position)
            weights.append(hp.weight)

        self._init_arrays(
            np.asarray(positions, dtype=np.float64).reshape(-1, 2),
            np.asarray(weights, dtype=np.float64),
        )

    @classmethod
    def from_arrays(cls, positions, weights=None) -> "PointSet":
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        if weights is None:
            weights = np.ones(positions.shape[0], dtype=np.float64)
        weights = np.asarray(weights, dtype=np.float64).reshape(-1)

        if positions.shape[0] != weights.shape[0]:
            raise ValueError(
                f"Got {positions.shape[0]} positions but {weights.shape[0]} weights"
            )
        if not np.all(np.isfinite(positions)):
            raise ValueError("Positions must be finite")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            raise ValueError("Weights must be finite and non-negative")

        obj = cls.__new__(cls)
        obj._init_arrays(positions.copy(), weights.copy())
        return obj

    def _init_arrays(self, positions: np.ndarray, weights: np.ndarray):
        if positions.shape[0] == 0:
            raise ValueError("PointSet requires at least one point")

        positions.setflags(write=False)
        weights.setflags(write=False)
        self._positions = positions
        self._weights = weights

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    def __len__(self) -> int:
        return self._positions.shape[0]

    def __iter__(self) -> Iterator[HeatPoint]:
        for (x, y), w in zip(self._positions, self._weights):
            yield HeatPoint((x, y), w)

    def __getitem__(self, i: int) -> HeatPoint:
        x, y = self._positions[i]
        return HeatPoint((x, y), self._weights[i])

    def subset(self, indices: Sequence[int]) -> "PointSet":
        idx = np.asarray(indices, dtype=np.intp)
        return PointSet.from_arrays(self._positions[idx], self._weights[idx])

    def permuted(self, seed: Optional[int] = None) -> "PointSet":
        rng = np.random.default_rng(seed)
        return self.subset(rng.permutation(len(self)))

    def __repr__(self) -> str:
        return f"PointSet(n={len(self)}, total_weight={float(self._weights.sum()):.4f})"
