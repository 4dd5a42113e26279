import pytest
from PIL import Image

from oamap.areas import Area, AreaRegistry
from oamap.config import RenderConfig
from oamap.errors import CoordinateOutOfBoundsError
from oamap.rendering import MapRenderer
from oamap.shapes import decompose_rings
from oamap.tests.fixtures.dataset_fixture import area_properties, square

CFG = RenderConfig(canvas_size=32, x_offset=0.0, y_offset=0.0, scale=1.0, progress_interval=1)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 0, 0)


def area(code, *rings):
    return Area.from_record(area_properties(code), decompose_rings(list(rings)))


def is_blank(canvas):
    return canvas.getcolors() == [(canvas.width * canvas.height, WHITE)]


def test_exterior_vertices_drawn_black():
    reg = AreaRegistry([area('A', square(2.0, 2.0, 8.0))])
    renderer = MapRenderer(CFG)
    canvas = renderer.draw(reg, renderer.new_canvas())
    for px in [(2, 30), (10, 30), (10, 22), (2, 22)]:
        assert canvas.getpixel(px) == BLACK
    # vertices only, no edges between them
    assert canvas.getpixel((6, 30)) == WHITE
    assert canvas.getpixel((6, 26)) == WHITE


def test_hole_vertices_use_interior_colour():
    hole = square(4.0, 4.0, 2.0)
    reg = AreaRegistry([area('A', hole, square(2.0, 2.0, 8.0))])
    renderer = MapRenderer(CFG)
    canvas = renderer.draw(reg, renderer.new_canvas())
    assert canvas.getpixel((4, 28)) == RED
    assert canvas.getpixel((6, 26)) == RED
    assert canvas.getpixel((2, 30)) == BLACK


def test_vertex_on_far_edge_is_accepted():
    reg = AreaRegistry([area('A', [(0.0, 0.0), (32.0, 0.0), (32.0, 32.0), (0.0, 32.0), (0.0, 0.0)])])
    renderer = MapRenderer(CFG)
    canvas = renderer.draw(reg, renderer.new_canvas())
    assert canvas.getpixel((0, 31)) == WHITE
    assert canvas.getpixel((0, 0)) == BLACK


def test_out_of_bounds_aborts_before_drawing():
    bad_hole = square(30.0, 30.0, 5.0)
    reg = AreaRegistry([area('A', bad_hole, square(2.0, 2.0, 8.0))])
    renderer = MapRenderer(CFG)
    canvas = renderer.new_canvas()
    flushed = []
    with pytest.raises(CoordinateOutOfBoundsError) as exc:
        renderer.draw(reg, canvas, sink=flushed.append)
    assert exc.value.axis == 'x' and exc.value.bound == 'max'
    assert exc.value.world == (35.0, 30.0)
    assert is_blank(canvas)
    assert flushed == []


def test_below_origin_overflows_y_max():
    reg = AreaRegistry([area('A', square(2.0, -3.0, 8.0))])
    renderer = MapRenderer(CFG)
    with pytest.raises(CoordinateOutOfBoundsError) as exc:
        renderer.draw(reg, renderer.new_canvas())
    assert (exc.value.axis, exc.value.bound) == ('y', 'max')


def test_skip_mode_draws_remaining_areas():
    reg = AreaRegistry([area('bad', square(-10.0, 2.0, 5.0)), area('ok', square(2.0, 2.0, 8.0))])
    renderer = MapRenderer(CFG)
    flushed = []
    canvas = renderer.draw(reg, renderer.new_canvas(), sink=flushed.append, on_error='skip')
    assert canvas.getpixel((2, 30)) == BLACK
    assert flushed == [canvas]


def test_sink_called_once_after_all_areas():
    reg = AreaRegistry([area(str(i), square(i * 3.0, 1.0, 2.0)) for i in range(5)])
    renderer = MapRenderer(CFG)
    calls = []
    renderer.draw(reg, renderer.new_canvas(), sink=lambda img: calls.append(img.getpixel((12, 31))))
    # last area's vertex is already on the canvas when flushed
    assert calls == [BLACK]


def test_labels_drawn_and_cached():
    cfg = CFG.replace(canvas_size=64, label_font_size=10)
    reg = AreaRegistry([area('A', square(10.0, 10.0, 40.0))])
    renderer = MapRenderer(cfg)
    plain = renderer.draw(reg, renderer.new_canvas())
    assert not reg[0].has_centroid
    labelled = renderer.draw_with_labels(reg, renderer.new_canvas())
    assert reg[0].has_centroid
    assert list(plain.getdata()) != list(labelled.getdata())
    assert any(r > g + 50 for r, g, b in labelled.getdata())


def test_labels_without_caching_leave_areas_untouched():
    cfg = CFG.replace(canvas_size=64, label_font_size=10)
    reg = AreaRegistry([area('A', square(10.0, 10.0, 40.0))])
    renderer = MapRenderer(cfg)
    renderer.draw(reg, renderer.new_canvas(), show_labels=True, cache_centroids=False)
    assert not reg[0].has_centroid


def test_render_to_file_writes_png(tmp_path):
    reg = AreaRegistry([area('A', square(2.0, 2.0, 8.0))])
    out = MapRenderer(CFG).render_to_file(reg, tmp_path / 'grid.png')
    with Image.open(out) as img:
        assert img.format == 'PNG'
        assert img.size == (32, 32)
        assert img.convert('RGB').getpixel((2, 30)) == BLACK
