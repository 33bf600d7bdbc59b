from abc import ABC, abstractmethod
import numpy as np


class BaseTileRasterizer(ABC):
    """
    Base class for everything that turns points into a square tile.

    Subclasses must implement the `render` method.
    """

    def __init__(self, tile_size: int, background_color=(0.0, 0.0, 0.0, 0.0)):
        if int(tile_size) <= 0:
            raise ValueError(f"tile_size must be positive, got {tile_size}")
        self.tile_size = int(tile_size)
        self.background_color = np.array(background_color, dtype=np.float32)

    @abstractmethod
    def render(self, *args, **kwargs):
        raise NotImplementedError("Rasterizer must implement render()")
