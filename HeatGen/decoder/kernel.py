from dataclasses import dataclass


@dataclass
class KernelConfig:
    radius: int = 48
    decay_divisor: float = 10.0
    normalize_peak: bool = True


import numpy as np


@dataclass(frozen=True, eq=False)
class KernelMatrix:
    """
    Read-only (2R, 2R) radial decay weights. Cell (R, R) is the
    zero-distance contribution; everything at distance >= R is 0.
    """

    values: np.ndarray
    radius: int

    @property
    def size(self) -> int:
        return 2 * self.radius

    @property
    def center_value(self) -> float:
        return float(self.values[self.radius, self.radius])

    @property
    def total(self) -> float:
        return float(self.values.sum())


def build_kernel(
    radius: int,
    decay_divisor: float = 10.0,
    normalize_peak: bool = True,
) -> KernelMatrix:
    """
    w(d) = 2^(-d/divisor) - 2^(-R/divisor), floored at zero for d >= R.

    With normalize_peak the matrix is rescaled so w(0) == 1.0.
    """
    radius = int(radius)
    if radius <= 0:
        raise ValueError(f"Kernel radius must be positive, got {radius}")
    if decay_divisor <= 0:
        raise ValueError(f"decay_divisor must be positive, got {decay_divisor}")

    offsets = np.arange(2 * radius, dtype=np.float64) - radius
    dx, dy = np.meshgrid(offsets, offsets)
    d = np.sqrt(dx * dx + dy * dy)

    floor = 2.0 ** (-radius / decay_divisor)
    w = 2.0 ** (-d / decay_divisor) - floor
    w[d >= radius] = 0.0
    w = np.maximum(w, 0.0)

    if normalize_peak:
        w /= 1.0 - floor

    w.setflags(write=False)
    return KernelMatrix(values=w, radius=radius)


class KernelBuilder:

    def __init__(self, config: KernelConfig):
        if int(config.radius) <= 0:
            raise ValueError(f"Kernel radius must be positive, got {config.radius}")
        self.config = config

    def build(self) -> KernelMatrix:
        return build_kernel(
            self.config.radius,
            decay_divisor=self.config.decay_divisor,
            normalize_peak=self.config.normalize_peak,
        )
