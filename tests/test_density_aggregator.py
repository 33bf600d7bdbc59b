import numpy as np
import pytest

from HeatGen.decoder.density_aggregator import AggregatorConfig, DensityAggregator
from HeatGen.types.points import MapRect, PointSet
from HeatGen.utils.spatial_index import PointIndex


TILE = MapRect(0.0, 0.0, 256.0, 256.0)


@pytest.fixture
def aggregator(kernel):
    return DensityAggregator(kernel, AggregatorConfig(tile_size=256))


def distance_field(px, py, size=256):
    ys, xs = np.mgrid[0:size, 0:size]
    return np.sqrt((xs - px) ** 2 + (ys - py) ** 2)


def test_two_point_scenario(aggregator, kernel, two_points):
    grid = aggregator.aggregate(two_points, TILE, 1.0)
    R = kernel.radius
    bleed = kernel.values[R - 10, R - 10]

    assert grid.shape == (256, 256)
    assert grid[0, 0] == pytest.approx(kernel.center_value + bleed)
    assert grid[10, 10] == pytest.approx(kernel.center_value + bleed)
    assert grid.max() == pytest.approx(kernel.center_value + bleed)
    assert np.unravel_index(np.argmax(grid), grid.shape) in {(0, 0), (10, 10)}

    # bleed inside the footprint
    assert grid[47, 0] > 0
    assert grid[10, 57] > 0

    far = (distance_field(0, 0) >= R) & (distance_field(10, 10) >= R)
    assert np.all(grid[far] == 0.0)
    assert np.all(grid[~far] > 0.0)


def test_order_independent(aggregator, uniform_points):
    viewport = MapRect(300.0, 300.0, 256.0, 256.0)

    a = aggregator.aggregate(uniform_points, viewport, 1.0)
    b = aggregator.aggregate(uniform_points.permuted(seed=5), viewport, 1.0)

    np.testing.assert_allclose(a, b, rtol=1e-12, atol=1e-12)


def test_empty_viewport_is_all_zero(aggregator, two_points):
    grid = aggregator.aggregate(two_points, MapRect(5000.0, 5000.0, 256.0, 256.0), 1.0)

    assert grid.shape == (256, 256)
    assert not grid.any()


def test_zero_weight_points_are_skipped(aggregator):
    ps = PointSet([((50.0, 50.0), 0.0)])

    assert not aggregator.aggregate(ps, TILE, 1.0).any()


def test_padding_picks_up_points_outside_tile(aggregator, kernel):
    ps = PointSet([((-10.0, 100.0), 1.0)])
    grid = aggregator.aggregate(ps, TILE, 1.0)

    assert grid[100, 0] == pytest.approx(kernel.values[kernel.radius, kernel.radius + 10])
    assert grid[100, 37] > 0
    assert grid[100, 38] == 0.0


def test_adjacent_tiles_have_no_seam(aggregator):
    ps = PointSet([((255.0, 128.0), 1.0)])
    left = aggregator.aggregate(ps, TILE, 1.0)
    right = aggregator.aggregate(ps, MapRect(256.0, 0.0, 256.0, 256.0), 1.0)

    stitched = np.concatenate([left, right], axis=1)
    row = stitched[128]
    # symmetric falloff across the tile boundary, peak on column 255
    assert np.argmax(row) == 255
    assert row[254] == pytest.approx(row[256])


def test_index_and_linear_scan_agree(aggregator, uniform_points):
    index = PointIndex(uniform_points)
    viewport = MapRect(100.0, 600.0, 512.0, 512.0)

    a = aggregator.aggregate(uniform_points, viewport, 0.5)
    b = aggregator.aggregate(uniform_points, viewport, 0.5, index=index)

    np.testing.assert_array_equal(a, b)


def test_weights_scale_density(aggregator, kernel):
    ps = PointSet([((20.0, 30.0), 2.5)])
    grid = aggregator.aggregate(ps, TILE, 1.0)

    assert grid[30, 20] == pytest.approx(2.5 * kernel.center_value)


def test_zoom_scale_only_changes_screen_mapping(aggregator, kernel, uniform_points):
    near = aggregator.aggregate(uniform_points, MapRect(-524.0, -524.0, 2048.0, 2048.0), 0.125)
    far = aggregator.aggregate(uniform_points, MapRect(-1548.0, -1548.0, 4096.0, 4096.0), 0.0625)

    expected = uniform_points.weights.sum() * kernel.total
    assert near.sum() == pytest.approx(expected, rel=1e-9)
    assert far.sum() == pytest.approx(expected, rel=1e-9)

    assert np.count_nonzero(far) < np.count_nonzero(near)
    # coarser zoom piles the same weight onto fewer pixels
    assert far.max() > near.max()


def test_rejects_bad_arguments(kernel, two_points):
    with pytest.raises(ValueError):
        DensityAggregator(kernel, AggregatorConfig(tile_size=0))

    aggregator = DensityAggregator(kernel, AggregatorConfig(tile_size=64))
    with pytest.raises(ValueError):
        aggregator.aggregate(two_points, TILE, 0.0)


@pytest.mark.parametrize("viewport", [
    MapRect(0.0, 0.0, 100.0, 100.0),
    MapRect(0.0, 0.0, 512.0, 512.0),
    MapRect(0.0, 0.0, 256.0, 128.0),
])
def test_viewport_must_match_tile_size(aggregator, viewport):
    ps = PointSet([((200.0, 50.0), 1.0), ((20.0, 50.0), 1.0)])

    with pytest.raises(ValueError):
        aggregator.aggregate(ps, viewport, 1.0)


def test_viewport_matching_tile_at_zoom_is_accepted(aggregator):
    ps = PointSet([((400.0, 100.0), 1.0)])
    grid = aggregator.aggregate(ps, MapRect(0.0, 0.0, 512.0, 512.0), 0.5)

    assert grid[50, 200] == 1.0
