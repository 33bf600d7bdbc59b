import numpy as np
from scipy.spatial import KDTree

from HeatGen.types.points import MapRect, PointSet


def linear_scan_rect(points: PointSet, rect: MapRect) -> np.ndarray:
    """
    Reference O(N) query: indices of points inside the half-open rect.
    """
    return np.flatnonzero(rect.contains_array(points.positions))


class PointIndex:
    """
    Read-only kd-tree over point positions, built once per point set.

    Rect queries go through a Chebyshev (p=inf) ball around the rect center
    and are then filtered exactly, so the result matches `linear_scan_rect`.
    """

    def __init__(self, points: PointSet, leafsize: int = 32):
        self.points = points
        self.tree = KDTree(points.positions, leafsize=leafsize)

    def query_rect(self, rect: MapRect) -> np.ndarray:
        cx, cy = rect.center
        half = max(rect.width, rect.height) / 2.0

        candidates = self.tree.query_ball_point([cx, cy], r=half, p=np.inf)
        if len(candidates) == 0:
            return np.empty(0, dtype=np.intp)

        candidates = np.asarray(candidates, dtype=np.intp)
        inside = rect.contains_array(self.points.positions[candidates])
        return np.sort(candidates[inside])
