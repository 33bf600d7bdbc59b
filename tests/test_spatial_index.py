import numpy as np

from HeatGen.types.points import MapRect, PointSet
from HeatGen.utils.spatial_index import PointIndex, linear_scan_rect


def test_index_matches_linear_scan():
    rng = np.random.default_rng(11)
    ps = PointSet.from_arrays(rng.uniform(0.0, 100.0, size=(2000, 2)))
    index = PointIndex(ps)

    for _ in range(25):
        x, y = rng.uniform(-20.0, 100.0, size=2)
        w, h = rng.uniform(0.0, 60.0, size=2)
        rect = MapRect(x, y, w, h)

        np.testing.assert_array_equal(index.query_rect(rect), linear_scan_rect(ps, rect))


def test_index_respects_half_open_edges():
    ps = PointSet([(0.0, 0.0), (10.0, 0.0), (5.0, 5.0)])
    index = PointIndex(ps)

    np.testing.assert_array_equal(index.query_rect(MapRect(0.0, 0.0, 10.0, 10.0)), [0, 2])


def test_index_empty_result():
    ps = PointSet([(0.0, 0.0)])
    result = PointIndex(ps).query_rect(MapRect(50.0, 50.0, 1.0, 1.0))

    assert result.size == 0
