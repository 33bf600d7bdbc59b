from dataclasses import dataclass


@dataclass
class AggregatorConfig:
    tile_size: int = 256


import numpy as np
from typing import Optional

from HeatGen.decoder.kernel import KernelMatrix
from HeatGen.types.points import MapRect, PointSet
from HeatGen.utils.projection import PlaneProjection
from HeatGen.utils.spatial_index import PointIndex, linear_scan_rect


class DensityAggregator:
    """
    Splats every in-range point's kernel footprint into a fixed-size
    (tile_size, tile_size) density grid. Rows are y, columns are x.

    The aggregator holds no per-request state; each call allocates its
    own grid, so one instance can serve concurrent tile requests.
    """

    def __init__(self, kernel: KernelMatrix, config: AggregatorConfig, projection=None):
        if int(config.tile_size) <= 0:
            raise ValueError(f"tile_size must be positive, got {config.tile_size}")
        self.kernel = kernel
        self.config = config
        self.projection = projection if projection is not None else PlaneProjection()

    # ---------------------------------------------------------
    # Query
    # ---------------------------------------------------------

    def padded_viewport(self, viewport: MapRect, zoom_scale: float) -> MapRect:
        return viewport.padded(self.kernel.radius / zoom_scale)

    def select_points(
        self,
        points: PointSet,
        viewport: MapRect,
        zoom_scale: float,
        index: Optional[PointIndex] = None,
    ) -> np.ndarray:
        """
        Indices of points with weight > 0 inside the padded viewport.
        """
        padded = self.padded_viewport(viewport, zoom_scale)

        if index is not None:
            idx = index.query_rect(padded)
        else:
            idx = linear_scan_rect(points, padded)

        return idx[points.weights[idx] > 0]

    # ---------------------------------------------------------
    # Aggregate
    # ---------------------------------------------------------

    def aggregate(
        self,
        points: PointSet,
        viewport: MapRect,
        zoom_scale: float,
        index: Optional[PointIndex] = None,
    ) -> np.ndarray:
        if zoom_scale <= 0:
            raise ValueError(f"zoom_scale must be positive, got {zoom_scale}")

        T = int(self.config.tile_size)

        # The grid is exactly one tile; a viewport of any other pixel size
        # would leave cells partially fed or drop in-view points.
        cols_px = round(viewport.width * zoom_scale)
        rows_px = round(viewport.height * zoom_scale)
        if cols_px != T or rows_px != T:
            raise ValueError(
                f"Viewport {viewport.width}x{viewport.height} at zoom_scale {zoom_scale} "
                f"covers {cols_px}x{rows_px} pixels, expected a {T}x{T} tile"
            )

        R = self.kernel.radius
        K = self.kernel.values

        grid = np.zeros((T, T), dtype=np.float64)

        idx = self.select_points(points, viewport, zoom_scale, index)
        if idx.size == 0:
            return grid

        screen = self.projection.projected_to_screen(
            points.positions[idx], viewport, zoom_scale
        )
        cols = np.floor(screen[:, 0]).astype(np.int64)
        rows = np.floor(screen[:, 1]).astype(np.int64)
        weights = points.weights[idx]

        # Footprint of pixel p spans [p - R, p + R); anything outside
        # [-R, T + R] cannot touch the tile.
        keep = (cols >= -R) & (cols <= T + R) & (rows >= -R) & (rows <= T + R)
        if not np.any(keep):
            return grid
        cols, rows, weights = cols[keep], rows[keep], weights[keep]

        # Coincident pixels are summed first and splatted once.
        span = T + 2 * R + 1
        flat = (rows + R) * span + (cols + R)
        uniq, inverse = np.unique(flat, return_inverse=True)
        summed = np.zeros(uniq.shape[0], dtype=np.float64)
        np.add.at(summed, inverse, weights)

        # Accumulate on a canvas with a 2R border so every footprint is a
        # plain slice, then crop the tile out of it.
        canvas = np.zeros((T + 4 * R, T + 4 * R), dtype=np.float64)
        for key, w in zip(uniq, summed):
            r = int(key // span) - R
            c = int(key % span) - R
            canvas[r + R:r + 3 * R, c + R:c + 3 * R] += K * w

        grid[:, :] = canvas[2 * R:2 * R + T, 2 * R:2 * R + T]
        return grid
