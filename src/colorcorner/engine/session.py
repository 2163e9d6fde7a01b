from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import pygame

from colorcorner.config import DEFAULT_CONFIG
from colorcorner.engine.buffer import PixelBuffer
from colorcorner.engine.color import Color, parse_hex_color
from colorcorner.engine.coords import RasterPoint, RectLike, map_to_raster, round_half_up
from colorcorner.engine.errors import InvalidColorError, OutOfBoundsError
from colorcorner.engine.fill import flood_fill
from colorcorner.engine.history import Clock, History
from colorcorner.engine.notify import ChangeNotifier
from colorcorner.engine.stroke import StrokeRasterizer


logger = logging.getLogger(__name__)

TOOLS = ("brush", "fill")
MIN_BRUSH_SIZE = 1
MAX_BRUSH_SIZE = 50
MIN_TOLERANCE = 0
MAX_TOLERANCE = 100


@dataclass
class ToolState:
    tool: str = "brush"
    color: Color = (0, 0, 0)
    brush_size: int = 5
    # Used directly as the per-channel threshold on the 0-255 scale.
    tolerance: int = 30
    last_point: Optional[RasterPoint] = None


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def _save_surface_atomic(surface: pygame.Surface, path: Path) -> None:
    # Keep a .png suffix so pygame writes a PNG-encoded file.
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    pygame.image.save(surface, str(tmp_path))
    os.replace(tmp_path, path)


def _export_path(directory: Path, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H%M%S")
    path = directory / f"{stamp}.png"
    counter = 1
    while path.exists():
        path = directory / f"{stamp}_{counter}.png"
        counter += 1
    return path


class EditorSession:
    """One image being colored: buffer, tools, and undo history.

    Screen positions passed to the pointer handlers are mapped through
    ``display_rect``, which defaults to the raster drawn 1:1 at the origin.
    Snapshots are committed when a stroke ends and after a fill that
    changed pixels.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        config: Optional[Dict[str, Any]] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        editor = dict(DEFAULT_CONFIG["editor"])
        editor.update((config or {}).get("editor", {}))

        self.buffer = PixelBuffer(width, height)
        self.notifier = ChangeNotifier()
        self.history = History(
            self.buffer,
            self.notifier,
            max_history=int(editor["max_history"]),
            debounce_seconds=float(editor["debounce_ms"]) / 1000.0,
            clock=clock,
        )
        self.rasterizer = StrokeRasterizer(self.buffer)
        self.tool_state = ToolState(
            brush_size=_clamp(int(editor["brush_size"]), MIN_BRUSH_SIZE, MAX_BRUSH_SIZE),
            tolerance=_clamp(int(editor["tolerance"]), MIN_TOLERANCE, MAX_TOLERANCE),
        )
        self.set_color(editor["color"])
        self.display_rect = pygame.Rect(0, 0, width, height)
        self.history.commit()

    # --- seeding ---

    def load_image(self, image: pygame.Surface) -> None:
        self.rasterizer.end()
        self.buffer.load_image(image)
        self.history.reset()
        self.history.commit()

    def new_image(self, size: Optional[Tuple[int, int]] = None) -> None:
        self.rasterizer.end()
        if size is not None and tuple(size) != self.buffer.size:
            self.buffer.initialize(*size)
        else:
            self.buffer.clear()
        self.history.reset()
        self.history.commit()

    def set_display_rect(self, rect: RectLike) -> None:
        self.display_rect = pygame.Rect(rect)

    # --- tool configuration ---

    def set_tool(self, tool: str) -> bool:
        if tool not in TOOLS:
            logger.warning("Unknown tool %r", tool)
            return False
        if tool != self.tool_state.tool:
            self._finish_stroke()
        self.tool_state.tool = tool
        return True

    def set_color(self, value: str) -> bool:
        try:
            self.tool_state.color = parse_hex_color(value)
        except InvalidColorError as exc:
            logger.warning("Keeping previous color: %s", exc)
            return False
        return True

    def set_brush_size(self, size: int) -> None:
        self.tool_state.brush_size = _clamp(int(size), MIN_BRUSH_SIZE, MAX_BRUSH_SIZE)

    def set_tolerance(self, tolerance: int) -> None:
        self.tool_state.tolerance = _clamp(int(tolerance), MIN_TOLERANCE, MAX_TOLERANCE)

    # --- gestures ---

    def _to_raster(self, position: Optional[Sequence[float]]) -> RasterPoint:
        return map_to_raster(position, self.display_rect, self.buffer.size)

    def pointer_down(self, position: Sequence[float]) -> None:
        point = self._to_raster(position)
        self.tool_state.last_point = point
        if self.tool_state.tool == "fill":
            self.fill_at(round_half_up(point[0]), round_half_up(point[1]))
            return
        self.rasterizer.begin(point, self.tool_state.brush_size, self.tool_state.color)
        self.history.touch()

    def pointer_move(self, position: Sequence[float]) -> None:
        if not self.rasterizer.active:
            return
        point = self._to_raster(position)
        self.tool_state.last_point = point
        self.rasterizer.extend(point)
        self.history.touch()

    def pointer_up(self, position: Optional[Sequence[float]] = None) -> None:
        if position is not None and self.rasterizer.active:
            self.pointer_move(position)
        self._finish_stroke()

    def _finish_stroke(self) -> bool:
        stroke = self.rasterizer.end()
        if stroke is None:
            return False
        return self.history.commit()

    def fill_at(self, x: int, y: int) -> int:
        state = self.tool_state
        try:
            filled = flood_fill(self.buffer, x, y, state.color, state.tolerance)
        except OutOfBoundsError as exc:
            logger.warning("Ignoring fill: %s", exc)
            return 0
        if filled:
            self.history.commit()
        return filled

    # --- history ---

    def undo(self) -> bool:
        self._finish_stroke()
        return self.history.undo()

    def redo(self) -> bool:
        self._finish_stroke()
        return self.history.redo()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def poll(self, now: Optional[float] = None) -> bool:
        return self.history.poll(now)

    # --- export ---

    def export_image(self) -> bytes:
        self._finish_stroke()
        self.history.flush()
        return self.buffer.to_encoded_image()

    def save_export(self, directory: Path, now: Optional[datetime] = None) -> Path:
        self._finish_stroke()
        self.history.flush()
        directory.mkdir(parents=True, exist_ok=True)
        path = _export_path(directory, now)
        _save_surface_atomic(self.buffer.surface, path)
        logger.info("Exported canvas to %s", path)
        return path
