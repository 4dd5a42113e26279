import numpy as np
import pytest

from oamap import geometry
from oamap.config import RenderConfig
from oamap.errors import CoordinateOutOfBoundsError


GRID = RenderConfig(canvas_size=16384, x_offset=75000, y_offset=1000, scale=45)


def test_square_scenario():
    pts = [(75000, 1000), (75045, 1000), (75045, 1045), (75000, 1045)]
    expected = [(0, 16384), (1, 16384), (1, 16383), (0, 16383)]
    assert [geometry.world_to_pixel(x, y, GRID) for x, y in pts] == expected
    assert geometry.project_coords(pts, GRID).tolist() == [list(p) for p in expected]


def test_x_step_of_one_scale_is_one_pixel():
    x0, y0 = 123456.7, 234567.8
    a = geometry.world_to_pixel(x0, y0, GRID)
    b = geometry.world_to_pixel(x0 + GRID.scale, y0, GRID)
    assert b[0] - a[0] == 1
    assert b[1] == a[1]


def test_projection_is_floor_not_truncation():
    # left of the origin floors towards -inf
    assert geometry.world_to_pixel(74999.0, 1000.0, GRID) == (-1, 16384)
    assert geometry.world_to_pixel(75044.9, 1044.9, GRID) == (0, 16384)


def test_scalar_and_vector_agree():
    rng = np.random.default_rng(0)
    pts = np.column_stack([rng.uniform(75000, 800000, 200), rng.uniform(1000, 700000, 200)])
    vec = geometry.project_coords(pts, GRID)
    scalar = np.array([geometry.world_to_pixel(x, y, GRID) for x, y in pts])
    assert np.array_equal(vec, scalar)


def test_project_coords_empty():
    assert geometry.project_coords([], GRID).shape == (0, 2)


def test_pixel_to_world_roundtrip():
    for px, py in [(0, 0), (1, 16384), (100, 250), (16384, 1)]:
        x, y = geometry.pixel_to_world(px, py, GRID)
        assert geometry.world_to_pixel(x, y, GRID) == (px, py)


def test_pixel_transform_origin():
    t = geometry.pixel_transform(GRID)
    assert t * (0, 16384) == (75000.0, 1000.0)


def test_check_bounds_accepts_edges():
    geometry.check_bounds([(0, 0), (16384, 16384), (0, 16384)], GRID)


@pytest.mark.parametrize('pixel, axis, bound', [
    ((16385, 5), 'x', 'max'),
    ((5, 16385), 'y', 'max'),
    ((-1, 5), 'x', 'min'),
    ((5, -1), 'y', 'min'),
    ((16385, 16385), 'x', 'max'),
])
def test_check_bounds_reports_axis(pixel, axis, bound):
    with pytest.raises(CoordinateOutOfBoundsError) as exc:
        geometry.check_bounds([(1, 1), pixel], GRID, world=[(0.0, 0.0), (9.0, 9.0)])
    err = exc.value
    assert err.pixel == pixel
    assert (err.axis, err.bound) == (axis, bound)
    assert err.world == (9.0, 9.0)
