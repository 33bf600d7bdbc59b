import warnings

import numpy as np

from HeatGen.types.points import MapRect, PointSet, ZoomStatistics


def compute_bounding_region(points: PointSet, margin: float = 0.0) -> MapRect:
    """
    Axis-aligned bounding rect of every point position, optionally padded
    symmetrically by `margin` plane units.
    """
    if len(points) == 0:
        raise ValueError("Cannot compute the region of an empty point set")
    if margin < 0:
        raise ValueError(f"margin must be non-negative, got {margin}")

    pos = points.positions
    min_xy = pos.min(axis=0)
    max_xy = pos.max(axis=0)

    region = MapRect(
        float(min_xy[0]),
        float(min_xy[1]),
        float(max_xy[0] - min_xy[0]),
        float(max_xy[1] - min_xy[1]),
    )

    if margin > 0:
        region = region.padded(margin)

    return region


def compute_center(region: MapRect):
    return region.center


def compute_zoom_statistics(
    points: PointSet,
    world_size: float = 2 ** 28,
    coarse_grid: int = 256,
) -> ZoomStatistics:
    """
    global_max        : largest single weight
    coarse_bucket_max : largest summed weight of any cell when the whole
                        projected world [0, world_size)^2 is bucketed into
                        coarse_grid x coarse_grid cells (zoom level 0)
    """
    if world_size <= 0:
        raise ValueError(f"world_size must be positive, got {world_size}")
    if coarse_grid <= 0:
        raise ValueError(f"coarse_grid must be positive, got {coarse_grid}")

    weights = points.weights
    cell = world_size / coarse_grid

    cols = np.floor(points.positions[:, 0] / cell).astype(np.int64)
    rows = np.floor(points.positions[:, 1] / cell).astype(np.int64)

    outside = (cols < 0) | (cols >= coarse_grid) | (rows < 0) | (rows >= coarse_grid)
    if np.any(outside):
        warnings.warn(
            f"{int(outside.sum())} point(s) lie outside the projected world; "
            "clamping them into the edge buckets"
        )
        cols = np.clip(cols, 0, coarse_grid - 1)
        rows = np.clip(rows, 0, coarse_grid - 1)

    buckets = np.zeros(coarse_grid * coarse_grid, dtype=np.float64)
    np.add.at(buckets, rows * coarse_grid + cols, weights)

    return ZoomStatistics(
        global_max=float(weights.max()),
        coarse_bucket_max=float(buckets.max()),
    )
