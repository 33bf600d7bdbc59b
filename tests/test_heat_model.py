import numpy as np
import pytest

from HeatGen.decoder.kernel import KernelConfig, build_kernel
from HeatGen.renderer.tile_renderer import TileRequest
from HeatGen.types.heat_model import HeatMapConfig, HeatModel, new_heat_model
from HeatGen.types.points import MapRect
from HeatGen.utils.projection import WebMercatorProjection


def test_empty_input_fails():
    with pytest.raises(ValueError):
        new_heat_model([])


def test_bounding_region_and_stats(two_points):
    model = HeatModel(two_points)

    assert model.bounding_region() == MapRect(0.0, 0.0, 10.0, 10.0)
    assert model.center() == (5.0, 5.0)
    assert model.zoom_statistics.global_max == 1.0
    assert model.zoom_statistics.coarse_bucket_max == 2.0


def test_region_margin():
    model = HeatModel([(100.0, 100.0)], config=HeatMapConfig(region_margin=8.0))

    assert model.bounding_region() == MapRect(92.0, 92.0, 16.0, 16.0)


def test_kernel_can_be_shared(two_points, kernel):
    a = HeatModel(two_points, kernel=kernel)
    b = HeatModel([((50.0, 50.0), 3.0)], kernel=kernel)

    assert a.kernel is b.kernel


def test_kernel_radius_mismatch_fails(two_points):
    with pytest.raises(ValueError):
        HeatModel(two_points, kernel=build_kernel(16))


def test_render_tile(two_points):
    model = HeatModel(two_points)
    cells = model.render_tile(MapRect(0.0, 0.0, 256.0, 256.0), 1.0)
    grid = model.density_grid(MapRect(0.0, 0.0, 256.0, 256.0), 1.0)

    assert len(cells) == np.count_nonzero(grid)
    assert model.render_tile(MapRect(1e6, 1e6, 256.0, 256.0), 1.0) == []


def test_render_tile_with_other_tile_size(two_points):
    model = HeatModel(two_points)
    image = model.render_rgba(MapRect(0.0, 0.0, 64.0, 64.0), 1.0, tile_size=64)

    assert image.shape == (64, 64, 4)
    with pytest.raises(ValueError):
        model.render_tile(MapRect(0.0, 0.0, 64.0, 64.0), 1.0, tile_size=0)


def test_small_kernel_config(two_points):
    model = HeatModel(two_points, config=HeatMapConfig(kernel=KernelConfig(radius=4)))
    grid = model.density_grid(MapRect(0.0, 0.0, 256.0, 256.0), 1.0)

    assert model.kernel.radius == 4
    assert grid[0, 0] == 1.0
    assert grid[5, 5] == 0.0


def test_scale_factor_uses_statistics(two_points):
    model = HeatModel(two_points)

    assert model.scale_factor(1.0) == 1.0
    assert model.scale_factor(2.0 ** -20) == pytest.approx(2.0)


def test_render_tiles(uniform_points):
    model = HeatModel(uniform_points)
    requests = [TileRequest(MapRect(0.0, 0.0, 2048.0, 2048.0), 0.125)]
    (cells,) = model.render_tiles(requests)

    assert len(cells) > 0


def test_center_coordinate_needs_geographic_projection(two_points):
    with pytest.raises(ValueError):
        HeatModel(two_points).center_coordinate()


def test_center_coordinate():
    projection = WebMercatorProjection()
    points = [projection.from_geographic(48.0, 10.0), projection.from_geographic(52.0, 14.0)]
    model = HeatModel(points, projection=projection)

    lat, lon = model.center_coordinate()
    assert lon == pytest.approx(12.0)
    assert 48.0 < lat < 52.0


def test_verbose_prints_summary(two_points, capsys):
    HeatModel(two_points, config=HeatMapConfig(verbose=True))

    assert "HeatModel: 2 points" in capsys.readouterr().out


def test_render_tile_rejects_mismatched_viewport():
    model = HeatModel([((400.0, 50.0), 1.0)])

    with pytest.raises(ValueError):
        model.render_tile(MapRect(0.0, 0.0, 512.0, 512.0), 1.0)
    with pytest.raises(ValueError):
        model.density_grid(MapRect(0.0, 0.0, 100.0, 100.0), 1.0)

    assert len(model.render_tile(MapRect(0.0, 0.0, 512.0, 512.0), 0.5)) > 0


def test_center_uses_region_center():
    model = HeatModel([(0.0, 0.0), (4.0, 10.0)], config=HeatMapConfig(region_margin=1.0))

    assert model.center() == (2.0, 5.0)
