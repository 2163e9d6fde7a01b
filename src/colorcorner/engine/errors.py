from __future__ import annotations

from typing import Tuple


class EditorError(Exception):
    """Base class for raster editing failures."""


class OutOfBoundsError(EditorError, IndexError):
    def __init__(self, x: int, y: int, size: Tuple[int, int]) -> None:
        self.x = x
        self.y = y
        self.size = size
        super().__init__(f"pixel ({x}, {y}) outside {size[0]}x{size[1]} buffer")


class InvalidColorError(EditorError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"expected a #RRGGBB color, got {value!r}")


class SurfaceInitError(EditorError):
    """The raster surface could not be allocated. Fatal to the session."""
