import math
from typing import Protocol, Tuple

import numpy as np

from HeatGen.types.points import MapRect


class Projection(Protocol):
    """
    Narrow interface to the host map widget's tiling math.

    Screen coordinates are tile pixels relative to the viewport origin.
    """

    def projected_to_screen(self, positions, viewport: MapRect, zoom_scale: float): ...

    def screen_to_projected(self, screen_points, viewport: MapRect, zoom_scale: float): ...


class PlaneProjection:
    """
    Affine mapping between the projected plane and a tile's pixel grid:
        screen = (position - viewport.origin) * zoom_scale
    """

    def projected_to_screen(self, positions, viewport: MapRect, zoom_scale: float):
        pos = np.asarray(positions, dtype=np.float64)
        origin = np.array(viewport.origin, dtype=np.float64)
        return (pos - origin) * zoom_scale

    def screen_to_projected(self, screen_points, viewport: MapRect, zoom_scale: float):
        pts = np.asarray(screen_points, dtype=np.float64)
        origin = np.array(viewport.origin, dtype=np.float64)
        return pts / zoom_scale + origin


class WebMercatorProjection(PlaneProjection):
    """
    Spherical Web-Mercator over a square world of `world_size` plane units,
    origin at the north-west corner (x grows east, y grows south).
    """

    MAX_LATITUDE = 85.05112878

    def __init__(self, world_size: float = 2 ** 28):
        if world_size <= 0:
            raise ValueError(f"world_size must be positive, got {world_size}")
        self.world_size = float(world_size)

    def from_geographic(self, latitude: float, longitude: float) -> Tuple[float, float]:
        lat = max(-self.MAX_LATITUDE, min(self.MAX_LATITUDE, latitude))
        x = (longitude + 180.0) / 360.0 * self.world_size

        sin_lat = math.sin(math.radians(lat))
        y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * self.world_size
        return (x, y)

    def to_geographic(self, x: float, y: float) -> Tuple[float, float]:
        longitude = x / self.world_size * 360.0 - 180.0
        n = math.pi - 2.0 * math.pi * y / self.world_size
        latitude = math.degrees(math.atan(math.sinh(n)))
        return (latitude, longitude)
