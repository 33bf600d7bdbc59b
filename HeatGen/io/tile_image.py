import os

import numpy as np
from PIL import Image


def to_uint8(rgba: np.ndarray) -> np.ndarray:
    return (np.clip(rgba, 0.0, 1.0) * 255).round().astype(np.uint8)


def to_pil_image(rgba: np.ndarray) -> Image.Image:
    """
    (H, W, 4) float image in [0, 1] -> PIL RGBA image.
    """
    arr = np.asarray(rgba)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) array, got shape {arr.shape}")
    return Image.fromarray(to_uint8(arr))


def save_tile_png(rgba: np.ndarray, path: str) -> str:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    to_pil_image(rgba).save(path)
    return path
