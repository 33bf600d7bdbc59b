from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class TileMosaicConfig:
    show_tile_grid: bool = True
    show_points: bool = False
    figsize: Tuple[float, float] = (8.0, 8.0)
    title: str = "Heat map tiles"
    max_workers: Optional[int] = None


import math
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from HeatGen.renderer.tile_renderer import TileRequest
from HeatGen.types.points import MapRect


class TileMosaicVisualizer:
    """
    Renders every tile covering a region at one zoom scale and lays the
    tiles out side by side, the way a map widget would request them.
    """

    def __init__(self, config: TileMosaicConfig):
        self.cfg = config

    def tile_requests(self, region: MapRect, zoom_scale: float, tile_size: int):
        """
        Tiles of `tile_size / zoom_scale` plane units aligned on a grid
        anchored at the world origin. Returns (requests, n_cols, n_rows).
        """
        span = tile_size / zoom_scale

        c0 = math.floor(region.x / span)
        r0 = math.floor(region.y / span)
        c1 = max(c0 + 1, math.ceil(region.max_x / span))
        r1 = max(r0 + 1, math.ceil(region.max_y / span))

        requests = []
        for r in range(r0, r1):
            for c in range(c0, c1):
                requests.append(TileRequest(MapRect(c * span, r * span, span, span), zoom_scale))

        return requests, c1 - c0, r1 - r0

    def mosaic(self, model, region: MapRect, zoom_scale: float) -> np.ndarray:
        T = model.tile_size
        requests, n_cols, n_rows = self.tile_requests(region, zoom_scale, T)

        tiles = model.render_tiles(requests, max_workers=self.cfg.max_workers, as_rgba=True)

        image = np.zeros((n_rows * T, n_cols * T, 4), dtype=np.float32)
        for i, tile in enumerate(tiles):
            r, c = divmod(i, n_cols)
            image[r * T:(r + 1) * T, c * T:(c + 1) * T] = tile
        return image

    def visualize(self, model, region: Optional[MapRect] = None, zoom_scale: float = 1.0):
        if region is None:
            region = model.bounding_region()

        T = model.tile_size
        requests, n_cols, n_rows = self.tile_requests(region, zoom_scale, T)
        image = self.mosaic(model, region, zoom_scale)

        fig, ax = plt.subplots(figsize=self.cfg.figsize)
        ax.imshow(image, interpolation="nearest")

        if self.cfg.show_tile_grid:
            for i in range(n_rows * n_cols):
                r, c = divmod(i, n_cols)
                ax.add_patch(Rectangle(
                    (c * T - 0.5, r * T - 0.5), T, T,
                    fill=False, edgecolor="gray", linewidth=0.5, linestyle="--",
                ))

        if self.cfg.show_points:
            origin = requests[0].viewport.origin
            px = (model.points.positions[:, 0] - origin[0]) * zoom_scale
            py = (model.points.positions[:, 1] - origin[1]) * zoom_scale
            ax.scatter(px, py, s=1, c="black", alpha=0.5)

        ax.set_xlim(-0.5, n_cols * T - 0.5)
        ax.set_ylim(n_rows * T - 0.5, -0.5)
        ax.set_title(f"{self.cfg.title} (zoom scale {zoom_scale:g})")
        ax.axis("off")
        return fig
