import pygame
import pytest

from colorcorner.engine.buffer import PixelBuffer
from colorcorner.engine.stroke import StrokeRasterizer, draw_dab, interpolate

BLACK = (0, 0, 0)
WHITE = (255, 255, 255, 255)


def test_interpolate_spaces_points_two_units_apart():
    points = interpolate((0, 0), (10, 0))
    assert len(points) == 5
    assert points[0] == (2.0, 0.0)
    assert points[-1] == (10, 0)


def test_interpolate_short_moves_still_reach_end():
    assert interpolate((3, 3), (3, 3)) == [(3, 3)]
    assert interpolate((0, 0), (1, 1)) == [(1, 1)]


def test_tap_with_diameter_one_paints_single_pixel():
    buffer = PixelBuffer(10, 10)
    rasterizer = StrokeRasterizer(buffer)
    rasterizer.begin((5, 5), 1, BLACK)

    assert buffer.read_pixel(5, 5) == (0, 0, 0, 255)
    assert buffer.read_pixel(4, 5) == WHITE
    assert buffer.read_pixel(6, 5) == WHITE
    assert buffer.read_pixel(5, 4) == WHITE


def test_fast_move_leaves_no_gap():
    buffer = PixelBuffer(60, 20)
    rasterizer = StrokeRasterizer(buffer)
    rasterizer.begin((10, 10), 4, BLACK)
    dabs = rasterizer.extend((50, 10))

    assert dabs == 20
    for x in range(10, 51):
        assert buffer.read_pixel(x, 10) == (0, 0, 0, 255)
    assert buffer.read_pixel(5, 10) == WHITE


def test_overlapping_dabs_do_not_accumulate():
    buffer = PixelBuffer(30, 30)
    color = (10, 20, 30)
    rasterizer = StrokeRasterizer(buffer)
    rasterizer.begin((5, 15), 6, color)
    rasterizer.extend((25, 15))
    rasterizer.extend((5, 15))

    for x in range(30):
        for y in range(30):
            assert buffer.read_pixel(x, y) in {WHITE, (10, 20, 30, 255)}


def test_end_is_idempotent():
    buffer = PixelBuffer(10, 10)
    rasterizer = StrokeRasterizer(buffer)
    assert rasterizer.end() is None

    rasterizer.begin((1, 1), 2, BLACK)
    stroke = rasterizer.end()
    assert stroke is not None
    assert stroke.points == [(1, 1)]
    assert rasterizer.end() is None
    assert not rasterizer.active


def test_extend_without_stroke_paints_nothing():
    buffer = PixelBuffer(10, 10)
    before = buffer.snapshot()
    assert StrokeRasterizer(buffer).extend((5, 5)) == 0
    assert buffer.snapshot() == before


def test_dabs_outside_surface_are_clipped():
    buffer = PixelBuffer(10, 10)
    rasterizer = StrokeRasterizer(buffer)
    rasterizer.begin((-5, -5), 1, BLACK)
    rasterizer.extend((-1, 0))
    assert buffer.read_pixel(0, 0) in {WHITE, (0, 0, 0, 255)}
    assert rasterizer.anchor == (-1, 0)


@pytest.mark.parametrize("diameter", [1, 2, 3, 4, 5, 6])
def test_dab_spans_exactly_its_diameter(diameter):
    surface = pygame.Surface((21, 21), pygame.SRCALPHA, 32)
    surface.fill(WHITE)
    draw_dab(surface, BLACK, (10, 10), diameter)

    painted = [(x, y) for y in range(21) for x in range(21) if surface.get_at((x, y)) != WHITE]
    xs = {x for x, _ in painted}
    ys = {y for _, y in painted}
    assert max(xs) - min(xs) + 1 == diameter
    assert max(ys) - min(ys) + 1 == diameter
    assert sum(1 for x, y in painted if y == 10) == diameter


def test_thin_diagonal_stroke_has_no_gaps():
    buffer = PixelBuffer(31, 31)
    rasterizer = StrokeRasterizer(buffer)
    rasterizer.begin((0, 0), 1, BLACK)
    rasterizer.extend((30, 30))

    gaps = [i for i in range(31) if buffer.read_pixel(i, i) != (0, 0, 0, 255)]
    assert gaps == []
