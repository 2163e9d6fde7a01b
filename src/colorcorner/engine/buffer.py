from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import pygame

from colorcorner.engine.coords import fit_rect
from colorcorner.engine.errors import OutOfBoundsError, SurfaceInitError


logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)


@dataclass(frozen=True)
class Snapshot:
    width: int
    height: int
    data: bytes

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


def _create_surface(width: int, height: int) -> pygame.Surface:
    if width <= 0 or height <= 0:
        raise SurfaceInitError(f"cannot allocate a {width}x{height} surface")
    try:
        return pygame.Surface((width, height), pygame.SRCALPHA, 32)
    except pygame.error as exc:
        raise SurfaceInitError(str(exc)) from exc


def _as_rgba(color: Sequence[int]) -> RGBA:
    if len(color) == 3:
        return (color[0], color[1], color[2], 255)
    return (color[0], color[1], color[2], color[3])


class PixelBuffer:
    """RGBA raster owned by one editing session.

    The backing surface is replaced wholesale by ``restore`` and
    ``write_bytes``, so callers always go through ``self.surface`` rather
    than keeping their own reference.
    """

    def __init__(self, width: int, height: int, background: RGBA = WHITE) -> None:
        self.background = background
        self.surface = _create_surface(width, height)
        self.surface.fill(background)

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    @property
    def size(self) -> Tuple[int, int]:
        return self.surface.get_size()

    def initialize(self, width: int, height: int) -> None:
        self.surface = _create_surface(width, height)
        self.surface.fill(self.background)

    def clear(self) -> None:
        self.surface.fill(self.background)

    def load_image(self, image: pygame.Surface) -> None:
        self.surface.fill(TRANSPARENT)
        image_w, image_h = image.get_size()
        if image_w == 0 or image_h == 0:
            logger.warning("Ignoring empty %dx%d image", image_w, image_h)
            return
        target_rect = fit_rect((image_w, image_h), self.surface.get_rect())
        target = target_rect.size
        if image.get_bitsize() in (24, 32):
            scaled = pygame.transform.smoothscale(image, target)
        else:
            scaled = pygame.transform.scale(image, target)
        self.surface.blit(scaled, target_rect.topleft)
        logger.debug("Loaded %dx%d image into %dx%d buffer", image_w, image_h, self.width, self.height)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.contains(x, y):
            raise OutOfBoundsError(x, y, self.size)

    def read_pixel(self, x: int, y: int) -> RGBA:
        self._check_bounds(x, y)
        r, g, b, a = self.surface.get_at((x, y))
        return (r, g, b, a)

    def write_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        self._check_bounds(x, y)
        self.surface.set_at((x, y), _as_rgba(color))

    def read_bytes(self) -> bytes:
        return pygame.image.tobytes(self.surface, "RGBA")

    def write_bytes(self, data: bytes) -> None:
        expected = self.width * self.height * 4
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes of RGBA data, got {len(data)}")
        self.surface = pygame.image.frombytes(data, self.size, "RGBA")

    def snapshot(self) -> Snapshot:
        return Snapshot(self.width, self.height, self.read_bytes())

    def restore(self, snapshot: Snapshot) -> None:
        if snapshot.size != self.size:
            raise ValueError(f"snapshot is {snapshot.size}, buffer is {self.size}")
        self.surface = pygame.image.frombytes(snapshot.data, snapshot.size, "RGBA")

    def to_encoded_image(self, namehint: str = "export.png") -> bytes:
        stream = io.BytesIO()
        pygame.image.save(self.surface, stream, namehint)
        return stream.getvalue()
