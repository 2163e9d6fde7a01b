from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Union

import pygame


RasterPoint = Tuple[float, float]
RectLike = Union[pygame.Rect, Sequence[int]]


def map_to_raster(
    position: Optional[Sequence[float]],
    display_rect: RectLike,
    raster_size: Tuple[int, int],
) -> RasterPoint:
    """Convert a screen position into raster coordinates.

    ``display_rect`` is where the raster is drawn on screen. Its size may
    differ from ``raster_size``; horizontal and vertical scale are applied
    independently. The result is not clamped to the raster.
    """
    if position is None:
        raise ValueError("no pointer position to map")
    rect = pygame.Rect(display_rect)
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(f"display rect has no area: {rect}")
    raster_w, raster_h = raster_size
    x = (position[0] - rect.left) * raster_w / rect.width
    y = (position[1] - rect.top) * raster_h / rect.height
    return (x, y)


def fit_rect(size: Tuple[int, int], bounds: pygame.Rect) -> pygame.Rect:
    """Largest rect with the aspect ratio of ``size`` centred inside ``bounds``."""
    width, height = size
    scale = min(bounds.width / width, bounds.height / height)
    target = pygame.Rect(0, 0, max(1, int(width * scale)), max(1, int(height * scale)))
    target.center = bounds.center
    return target


def round_half_up(value: float) -> int:
    """Nearest integer with .5 going up, unlike the built-in ``round``."""
    return math.floor(value + 0.5)
