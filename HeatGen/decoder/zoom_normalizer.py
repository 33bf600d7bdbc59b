from dataclasses import dataclass


@dataclass
class ZoomNormalizerConfig:
    shape_exponent: float = 4.0
    max_zoom_levels: int = 20


import math
import numpy as np

from HeatGen.types.points import ZoomStatistics


def zoom_level(zoom_scale: float) -> float:
    """
    log2(1 / zoom_scale), floored at 0 (zoom_scale = 1 is one screen
    pixel per plane unit).
    """
    if zoom_scale <= 0:
        raise ValueError(f"zoom_scale must be positive, got {zoom_scale}")
    return max(0.0, math.log2(1.0 / zoom_scale))


def scale_factor(
    zoom_scale: float,
    stats: ZoomStatistics,
    max_zoom_levels: int = 20,
    shape_exponent: float = 4.0,
) -> float:
    """
    Divisor applied to raw density before colouring.

    Stays near the single-point maximum while zoom_level is small, then
    climbs steeply toward the coarse-bucket maximum as zoom_level reaches
    max_zoom_levels. Never drops below stats.global_max.
    """
    if max_zoom_levels < 2:
        raise ValueError(f"max_zoom_levels must be >= 2, got {max_zoom_levels}")

    level = zoom_level(zoom_scale)
    p = shape_exponent

    slope = (stats.coarse_bucket_max - stats.global_max) / (max_zoom_levels - 1)
    x = level ** p / float(max_zoom_levels) ** (p - 1)

    factor = (x - 1.0) * slope + stats.global_max
    if factor < stats.global_max:
        factor = stats.global_max
    return factor


class ZoomNormalizer:

    def __init__(self, config: ZoomNormalizerConfig):
        if config.max_zoom_levels < 2:
            raise ValueError(
                f"max_zoom_levels must be >= 2, got {config.max_zoom_levels}"
            )
        if config.shape_exponent <= 0:
            raise ValueError(
                f"shape_exponent must be positive, got {config.shape_exponent}"
            )
        self.config = config

    def scale_factor(self, zoom_scale: float, stats: ZoomStatistics) -> float:
        return scale_factor(
            zoom_scale,
            stats,
            max_zoom_levels=self.config.max_zoom_levels,
            shape_exponent=self.config.shape_exponent,
        )

    def normalize(self, grid: np.ndarray, zoom_scale: float, stats: ZoomStatistics) -> np.ndarray:
        factor = self.scale_factor(zoom_scale, stats)
        if factor <= 0:
            # Every weight in the set is zero; nothing will be drawn anyway.
            return np.zeros_like(grid, dtype=np.float64)
        return np.asarray(grid, dtype=np.float64) / factor
