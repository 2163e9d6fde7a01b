from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pygame

from colorcorner.engine.buffer import PixelBuffer
from colorcorner.engine.coords import round_half_up


Color = Tuple[int, int, int]
Point = Tuple[float, float]

# Max distance, in raster units, between two interpolated dabs.
DAB_SPACING = 2


@dataclass
class Stroke:
    size: int
    color: Color
    points: List[Point] = field(default_factory=list)


def interpolate(start: Point, end: Point) -> List[Point]:
    """Evenly spaced points from just after ``start`` up to and including ``end``."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    distance = math.hypot(dx, dy)
    steps = max(int(distance // DAB_SPACING), 1)
    return [
        (start[0] + dx * idx / steps, start[1] + dy * idx / steps)
        for idx in range(1, steps + 1)
    ]


def _pixel(point: Point) -> Tuple[int, int]:
    return (round_half_up(point[0]), round_half_up(point[1]))


def draw_dab(surface: pygame.Surface, color: Color, center: Point, diameter: int) -> None:
    """Opaque disc whose bounding box is exactly ``diameter`` pixels wide.

    Rows are written with ``Surface.fill`` so nothing is blended and the
    surface clips partial dabs.
    """
    diameter = max(1, int(diameter))
    x, y = _pixel(center)
    rgba = (color[0], color[1], color[2], 255)
    left = x - diameter // 2
    top = y - diameter // 2
    radius = diameter / 2
    cx = left + radius
    cy = top + radius
    for row in range(top, top + diameter):
        dy = row + 0.5 - cy
        half = math.sqrt(max(0.0, radius * radius - dy * dy))
        start = math.ceil(cx - half - 0.5)
        stop = math.floor(cx + half - 0.5)
        if stop >= start:
            surface.fill(rgba, pygame.Rect(start, row, stop - start + 1, 1))


def draw_join(surface: pygame.Surface, color: Color, start: Point, end: Point) -> None:
    pygame.draw.line(surface, (color[0], color[1], color[2], 255), _pixel(start), _pixel(end))


class StrokeRasterizer:
    """Paints freehand strokes as chains of opaque circular dabs."""

    def __init__(self, buffer: PixelBuffer) -> None:
        self.buffer = buffer
        self.stroke: Optional[Stroke] = None

    @property
    def active(self) -> bool:
        return self.stroke is not None

    @property
    def anchor(self) -> Optional[Point]:
        if self.stroke is None:
            return None
        return self.stroke.points[-1]

    def begin(self, point: Point, size: int, color: Color) -> Stroke:
        self.stroke = Stroke(size=size, color=color, points=[point])
        draw_dab(self.buffer.surface, color, point, size)
        return self.stroke

    def extend(self, point: Point) -> int:
        if self.stroke is None:
            return 0
        previous = self.stroke.points[-1]
        dabs = interpolate(previous, point)
        surface = self.buffer.surface
        for dab in dabs:
            if self.stroke.size <= 1:
                # Single-pixel dabs two units apart would leave holes.
                draw_join(surface, self.stroke.color, previous, dab)
            else:
                draw_dab(surface, self.stroke.color, dab, self.stroke.size)
            previous = dab
        self.stroke.points.append(point)
        return len(dabs)

    def end(self) -> Optional[Stroke]:
        stroke, self.stroke = self.stroke, None
        return stroke
