from dataclasses import dataclass, field

from HeatGen.decoder.kernel import KernelConfig
from HeatGen.renderer.tile_renderer import TileRendererConfig


@dataclass
class HeatMapConfig:
    kernel: KernelConfig = field(default_factory=KernelConfig)
    renderer: TileRendererConfig = field(default_factory=TileRendererConfig)

    # bounding region padding, plane units
    region_margin: float = 0.0

    # zoom-level-0 world used for the coarse bucket statistic
    world_size: float = 2 ** 28
    coarse_grid: int = 256

    verbose: bool = False


import numpy as np
from typing import Iterable, List, Optional, Sequence, Tuple

from HeatGen.decoder.kernel import KernelBuilder, KernelMatrix
from HeatGen.renderer.tile_renderer import TileCell, TileRenderer, TileRequest
from HeatGen.types.points import MapRect, PointSet, ZoomStatistics
from HeatGen.utils.region import (
    compute_bounding_region,
    compute_center,
    compute_zoom_statistics,
)
from HeatGen.utils.spatial_index import PointIndex


class HeatModel:
    """
    Owns an immutable point set and everything derived from it once:
    bounding region, zoom statistics and a spatial index. Tile renders
    only read from it.

    A KernelMatrix may be shared between models; one is built from the
    config when none is passed.
    """

    def __init__(
        self,
        points,
        config: Optional[HeatMapConfig] = None,
        kernel: Optional[KernelMatrix] = None,
        projection=None,
    ):
        self.config = config if config is not None else HeatMapConfig()
        cfg = self.config

        self.points = points if isinstance(points, PointSet) else PointSet(points)

        if kernel is None:
            kernel = KernelBuilder(cfg.kernel).build()
        elif kernel.radius != cfg.kernel.radius:
            raise ValueError(
                f"Kernel radius {kernel.radius} does not match configured radius {cfg.kernel.radius}"
            )
        self.kernel = kernel
        self.projection = projection

        self.region = compute_bounding_region(self.points, margin=cfg.region_margin)
        self.zoom_statistics = compute_zoom_statistics(
            self.points, world_size=cfg.world_size, coarse_grid=cfg.coarse_grid
        )
        self.index = PointIndex(self.points)
        self.renderer = TileRenderer(kernel, cfg.renderer, projection=projection)

        if cfg.verbose:
            stats = self.zoom_statistics
            print(
                f"HeatModel: {len(self.points)} points | region={self.region} | "
                f"global_max={stats.global_max:.4f} coarse_max={stats.coarse_bucket_max:.4f}"
            )

    # ---------------------------------------------------------
    # Framing
    # ---------------------------------------------------------

    def bounding_region(self) -> MapRect:
        return self.region

    def center(self) -> Tuple[float, float]:
        return compute_center(self.region)

    def center_coordinate(self) -> Tuple[float, float]:
        """
        Geographic (latitude, longitude) of the region center.
        """
        if self.projection is None or not hasattr(self.projection, "to_geographic"):
            raise ValueError("center_coordinate() needs a projection with to_geographic()")
        return self.projection.to_geographic(*self.center())

    @property
    def tile_size(self) -> int:
        return self.renderer.tile_size

    # ---------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------

    def scale_factor(self, zoom_scale: float) -> float:
        return self.renderer.normalizer.scale_factor(zoom_scale, self.zoom_statistics)

    def density_grid(self, viewport: MapRect, zoom_scale: float) -> np.ndarray:
        return self.renderer.aggregator.aggregate(
            self.points, viewport, zoom_scale, self.index
        )

    def render_tile(
        self,
        viewport: MapRect,
        zoom_scale: float,
        tile_size: Optional[int] = None,
    ) -> List[TileCell]:
        renderer = self._renderer_for(tile_size)
        return renderer.render(
            self.points, self.zoom_statistics, viewport, zoom_scale, self.index
        )

    def render_rgba(
        self,
        viewport: MapRect,
        zoom_scale: float,
        tile_size: Optional[int] = None,
    ) -> np.ndarray:
        renderer = self._renderer_for(tile_size)
        return renderer.render_rgba(
            self.points, self.zoom_statistics, viewport, zoom_scale, self.index
        )

    def render_tiles(
        self,
        requests: Sequence[TileRequest],
        max_workers: Optional[int] = None,
        as_rgba: bool = False,
    ) -> list:
        return self.renderer.render_tiles(
            self.points,
            self.zoom_statistics,
            requests,
            index=self.index,
            max_workers=max_workers,
            as_rgba=as_rgba,
        )

    def _renderer_for(self, tile_size: Optional[int]) -> TileRenderer:
        if tile_size is None or int(tile_size) == self.renderer.tile_size:
            return self.renderer
        cfg = self.config.renderer
        return TileRenderer(
            self.kernel,
            TileRendererConfig(
                tile_size=int(tile_size),
                lower_threshold=cfg.lower_threshold,
                normalizer=cfg.normalizer,
                colors=cfg.colors,
            ),
            projection=self.projection,
        )


def new_heat_model(points: Iterable, **kwargs) -> HeatModel:
    return HeatModel(points, **kwargs)
