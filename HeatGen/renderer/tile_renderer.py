from dataclasses import dataclass, field

from HeatGen.decoder.color_mapper import ColorMapperConfig
from HeatGen.decoder.zoom_normalizer import ZoomNormalizerConfig


@dataclass
class TileRendererConfig:
    tile_size: int = 256
    lower_threshold: float = 0.0
    normalizer: ZoomNormalizerConfig = field(default_factory=ZoomNormalizerConfig)
    colors: ColorMapperConfig = field(default_factory=ColorMapperConfig)


import numpy as np
from concurrent.futures import ThreadPoolExecutor
from typing import List, NamedTuple, Optional, Sequence, Tuple

from HeatGen.decoder.base import BaseTileRasterizer
from HeatGen.decoder.color_mapper import ColorMapper
from HeatGen.decoder.density_aggregator import AggregatorConfig, DensityAggregator
from HeatGen.decoder.kernel import KernelMatrix
from HeatGen.decoder.zoom_normalizer import ZoomNormalizer
from HeatGen.types.points import MapRect, PointSet, ZoomStatistics
from HeatGen.utils.spatial_index import PointIndex


class TileCell(NamedTuple):
    rect: MapRect
    color: Tuple[float, float, float]
    alpha: float


class TileRequest(NamedTuple):
    viewport: MapRect
    zoom_scale: float


class TileRenderer(BaseTileRasterizer):
    """
    viewport -> padded query -> density grid -> threshold -> normalize
    -> colorize -> one filled rect per surviving grid cell.

    Nothing is drawn here; callers get back what to draw and where.
    Every request is independent, so tiles may be rendered from several
    threads against the same renderer and point set.
    """

    def __init__(self, kernel: KernelMatrix, config: TileRendererConfig, projection=None):
        super().__init__(config.tile_size)
        self.cfg = config
        self.kernel = kernel

        self.aggregator = DensityAggregator(
            kernel, AggregatorConfig(tile_size=self.tile_size), projection=projection
        )
        self.projection = self.aggregator.projection
        self.normalizer = ZoomNormalizer(config.normalizer)
        self.color_mapper = ColorMapper(config.colors)

    # ---------------------------------------------------------
    # Shared pipeline
    # ---------------------------------------------------------

    def shade(
        self,
        points: PointSet,
        stats: ZoomStatistics,
        viewport: MapRect,
        zoom_scale: float,
        index: Optional[PointIndex] = None,
    ):
        """
        Returns (mask, rgb, alpha) over the whole grid; rgb and alpha are
        only meaningful where mask is set.
        """
        raw = self.aggregator.aggregate(points, viewport, zoom_scale, index)
        mask = raw > self.cfg.lower_threshold

        normalized = self.normalizer.normalize(raw, zoom_scale, stats)
        rgb = self.color_mapper.colorize_array(normalized)
        alpha = self.color_mapper.alpha_for(normalized)
        return mask, rgb, alpha

    # ---------------------------------------------------------
    # Render
    # ---------------------------------------------------------

    def render(
        self,
        points: PointSet,
        stats: ZoomStatistics,
        viewport: MapRect,
        zoom_scale: float,
        index: Optional[PointIndex] = None,
    ) -> List[TileCell]:
        mask, rgb, alpha = self.shade(points, stats, viewport, zoom_scale, index)

        rows, cols = np.nonzero(mask)
        if rows.size == 0:
            return []

        corners = self.projection.screen_to_projected(
            np.stack([cols, rows], axis=1), viewport, zoom_scale
        )
        side = 1.0 / zoom_scale

        cells = []
        for (x, y), r, c in zip(corners, rows, cols):
            red, green, blue = rgb[r, c]
            cells.append(TileCell(
                rect=MapRect(float(x), float(y), side, side),
                color=(float(red), float(green), float(blue)),
                alpha=float(alpha[r, c]),
            ))
        return cells

    def render_rgba(
        self,
        points: PointSet,
        stats: ZoomStatistics,
        viewport: MapRect,
        zoom_scale: float,
        index: Optional[PointIndex] = None,
    ) -> np.ndarray:
        """
        Same cells as `render`, rasterized into a (tile, tile, 4) float32
        image; skipped cells keep the background colour.
        """
        mask, rgb, alpha = self.shade(points, stats, viewport, zoom_scale, index)

        image = np.empty((self.tile_size, self.tile_size, 4), dtype=np.float32)
        image[...] = self.background_color
        image[mask, :3] = rgb[mask]
        image[mask, 3] = alpha[mask]
        return np.clip(image, 0.0, 1.0)

    def render_tiles(
        self,
        points: PointSet,
        stats: ZoomStatistics,
        requests: Sequence[TileRequest],
        index: Optional[PointIndex] = None,
        max_workers: Optional[int] = None,
        as_rgba: bool = False,
    ) -> list:
        """
        Renders independent tiles on a thread pool; results keep the
        order of `requests`.
        """
        fn = self.render_rgba if as_rgba else self.render

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [
                pool.submit(fn, points, stats, req.viewport, req.zoom_scale, index)
                for req in requests
            ]
            return [f.result() for f in futures]
