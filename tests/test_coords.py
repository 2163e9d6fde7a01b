import pygame
import pytest

from colorcorner.engine.coords import fit_rect, map_to_raster


def test_map_to_raster_identity_at_origin():
    assert map_to_raster((12, 34), (0, 0, 100, 100), (100, 100)) == (12, 34)


def test_map_to_raster_removes_offset_and_scales_axes_independently():
    x, y = map_to_raster((60, 30), pygame.Rect(10, 10, 100, 40), (200, 20))
    assert x == pytest.approx(100.0)
    assert y == pytest.approx(10.0)


def test_map_to_raster_keeps_fractions():
    x, y = map_to_raster((1, 1), (0, 0, 4, 4), (2, 2))
    assert (x, y) == (0.5, 0.5)


def test_map_to_raster_rejects_missing_position():
    with pytest.raises(ValueError):
        map_to_raster(None, (0, 0, 10, 10), (10, 10))


def test_map_to_raster_rejects_empty_display_rect():
    with pytest.raises(ValueError):
        map_to_raster((1, 1), (0, 0, 0, 10), (10, 10))


def test_fit_rect_preserves_aspect_and_centres():
    rect = fit_rect((200, 100), pygame.Rect(0, 0, 100, 100))
    assert rect.size == (100, 50)
    assert rect.center == (50, 50)
