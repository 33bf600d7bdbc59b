from dataclasses import dataclass


@dataclass
class ColorMapperConfig:
    scheme: str = "ramp"          # "ramp" | "jet"
    alpha_mode: str = "fixed"     # "fixed" | "density"
    alpha: float = 0.8
    max_alpha: float = 0.8
    use_sqrt: bool = True


import numpy as np
from typing import Tuple


# (threshold on sqrt(density), rgb). An input picks the last entry whose
# threshold it strictly exceeds; anything <= 0 gets the first entry.
HEAT_RAMP = (
    (0.00, (0.86, 0.89, 0.94)),   # pale gray-blue
    (0.02, (0.72, 0.82, 0.96)),
    (0.05, (0.55, 0.72, 0.98)),
    (0.09, (0.38, 0.80, 0.95)),
    (0.14, (0.35, 0.85, 0.70)),
    (0.20, (0.55, 0.90, 0.40)),
    (0.27, (0.85, 0.95, 0.30)),
    (0.35, (1.00, 0.90, 0.20)),   # yellow
    (0.43, (1.00, 0.72, 0.15)),
    (0.52, (1.00, 0.55, 0.10)),   # orange
    (0.60, (0.97, 0.30, 0.10)),
    (0.69, (0.88, 0.10, 0.15)),   # red
    (0.77, (0.62, 0.05, 0.45)),   # violet
)

RAMP_THRESHOLDS = np.array([t for t, _ in HEAT_RAMP], dtype=np.float64)
RAMP_COLORS = np.array([c for _, c in HEAT_RAMP], dtype=np.float64)

SCHEMES = ("ramp", "jet")
ALPHA_MODES = ("fixed", "density")


def ramp_index(adjusted):
    """
    Index into HEAT_RAMP for each (post-sqrt) value.
    """
    a = np.asarray(adjusted, dtype=np.float64)
    idx = np.searchsorted(RAMP_THRESHOLDS, a, side="left") - 1
    return np.clip(idx, 0, len(HEAT_RAMP) - 1)


def jet(values) -> np.ndarray:
    """
    Piecewise-linear MATLAB-style jet map on [0, 1]; <= 0 maps to black.
    """
    v = np.asarray(values, dtype=np.float64)
    r = np.zeros_like(v)
    g = np.zeros_like(v)
    b = np.zeros_like(v)

    m = (v > 0) & (v < 0.125)
    b[m] = 4 * (v[m] + 0.125)

    m = (v >= 0.125) & (v < 0.375)
    g[m] = 4 * (v[m] - 0.125)
    b[m] = 1.0

    m = (v >= 0.375) & (v < 0.625)
    r[m] = 4 * (v[m] - 0.375)
    g[m] = 1.0
    b[m] = 1 - 4 * (v[m] - 0.375)

    m = (v >= 0.625) & (v < 0.875)
    r[m] = 1.0
    g[m] = 1 - 4 * (v[m] - 0.625)

    m = v >= 0.875
    r[m] = np.maximum(1 - 4 * (v[m] - 0.875), 0.5)

    return np.stack([r, g, b], axis=-1)


class ColorMapper:
    """
    Normalized density -> RGB in [0, 1], plus an alpha policy.

    Pure: identical inputs always give identical outputs.
    """

    def __init__(self, config: ColorMapperConfig):
        if config.scheme not in SCHEMES:
            raise ValueError(f"Unknown colour scheme '{config.scheme}', expected one of {SCHEMES}")
        if config.alpha_mode not in ALPHA_MODES:
            raise ValueError(f"Unknown alpha mode '{config.alpha_mode}', expected one of {ALPHA_MODES}")
        for name in ("alpha", "max_alpha"):
            value = getattr(config, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")
        self.config = config

    def adjust(self, values) -> np.ndarray:
        v = np.maximum(np.asarray(values, dtype=np.float64), 0.0)
        if self.config.use_sqrt:
            v = np.sqrt(v)
        return v

    def colorize_array(self, values) -> np.ndarray:
        """
        (...,) normalized densities -> (..., 3) float64 RGB.
        """
        adjusted = self.adjust(values)
        if self.config.scheme == "jet":
            return jet(adjusted)
        return RAMP_COLORS[ramp_index(adjusted)]

    def colorize(self, value: float) -> Tuple[float, float, float]:
        r, g, b = self.colorize_array(np.array([value]))[0]
        return (float(r), float(g), float(b))

    def alpha_for(self, values) -> np.ndarray:
        v = np.asarray(values, dtype=np.float64)
        if self.config.alpha_mode == "density":
            return np.clip(v, 0.0, self.config.max_alpha)
        return np.full(v.shape, self.config.alpha, dtype=np.float64)
