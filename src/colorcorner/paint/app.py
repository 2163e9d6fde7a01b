from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pygame

from colorcorner.config import load_config
from colorcorner.engine.buffer import Snapshot
from colorcorner.engine.color import parse_hex_color, to_hex
from colorcorner.engine.errors import InvalidColorError
from colorcorner.engine.session import EditorSession
from colorcorner.paths import ensure_directories, get_data_root
from colorcorner.ui.common import (
    Button,
    Color,
    Point,
    create_window,
    history_shortcut,
    is_pointer_motion,
    is_primary_pointer_event,
    load_image,
    pointer_event_pos,
)


logger = logging.getLogger(__name__)

PANEL_WIDTH = 220
MARGIN = 16
ROW_GAP = 8
BUTTON_H = 36
SELECTED_BORDER = (200, 60, 60)
MENU_BG = (238, 234, 226)
ACTION_FILL = (245, 245, 245)


def _coerce_palette(values: Sequence[object]) -> List[Color]:
    palette: List[Color] = []
    for value in values:
        try:
            palette.append(parse_hex_color(value))
        except InvalidColorError as exc:
            logger.warning("Skipping palette entry: %s", exc)
    return palette


def _row_rects(left: int, top: int, width: int, count: int, height: int = BUTTON_H) -> List[pygame.Rect]:
    if count <= 0:
        return []
    gap = 4
    cell_w = max(1, (width - gap * (count - 1)) // count)
    return [pygame.Rect(left + idx * (cell_w + gap), top, cell_w, height) for idx in range(count)]


class ColoringApp:
    def __init__(
        self,
        image_path: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        screen: Optional[pygame.Surface] = None,
        screen_rect: Optional[pygame.Rect] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.data_root = get_data_root(self.config)
        self.export_dir = ensure_directories(self.data_root)["exports"]

        if screen is None:
            window = self.config.get("window", {})
            self.screen, self.screen_rect = create_window(
                (int(window.get("width", 1280)), int(window.get("height", 800))),
                fullscreen=bool(window.get("fullscreen", False)),
            )
        else:
            self.screen = screen
            self.screen_rect = screen_rect or screen.get_rect()
        self.clock = clock or pygame.time.Clock()
        self.font = pygame.font.SysFont("sans", 18)

        self.controls_rect = pygame.Rect(
            MARGIN,
            MARGIN,
            PANEL_WIDTH,
            self.screen_rect.height - 2 * MARGIN,
        )
        self.canvas_rect = pygame.Rect(
            self.controls_rect.right + MARGIN,
            MARGIN,
            self.screen_rect.width - PANEL_WIDTH - 3 * MARGIN,
            self.screen_rect.height - 2 * MARGIN,
        )

        self.session = EditorSession(self.canvas_rect.width, self.canvas_rect.height, config=self.config)
        self.session.set_display_rect(self.canvas_rect)
        self.can_undo = False
        self.can_redo = False
        self.unsaved = False
        self.session.notifier.on_history_availability(self._on_history_availability)
        self.session.notifier.on_buffer_changed(self._on_buffer_changed)

        editor = self.config.get("editor", {})
        self.palette = _coerce_palette(editor.get("palette", []))
        self.brush_sizes = [int(size) for size in editor.get("brush_sizes", [])]
        self.tolerances = [int(value) for value in editor.get("tolerances", [])]

        self.tool_buttons: Dict[str, Button] = {}
        self.size_buttons: Dict[int, Button] = {}
        self.tolerance_buttons: Dict[int, Button] = {}
        self.palette_buttons: List[Button] = []
        self.action_buttons: Dict[str, Button] = {}
        self._build_ui()

        self.pointer_down = False
        if image_path is not None:
            self.open_image(image_path)

    def _build_ui(self) -> None:
        left = self.controls_rect.left + 10
        inner_w = self.controls_rect.width - 20
        top = self.controls_rect.top + 10

        for tool, rect in zip(("brush", "fill"), _row_rects(left, top, inner_w, 2)):
            self.tool_buttons[tool] = Button(rect=rect, label=tool.title(), fill=ACTION_FILL)
        top += BUTTON_H + ROW_GAP

        for size, rect in zip(self.brush_sizes, _row_rects(left, top, inner_w, len(self.brush_sizes))):
            self.size_buttons[size] = Button(rect=rect, label=str(size), fill=ACTION_FILL)
        top += BUTTON_H + ROW_GAP

        for value, rect in zip(self.tolerances, _row_rects(left, top, inner_w, len(self.tolerances))):
            self.tolerance_buttons[value] = Button(rect=rect, label=f"{value}%", fill=ACTION_FILL)
        top += BUTTON_H + ROW_GAP

        actions_h = 2 * BUTTON_H + ROW_GAP
        actions_top = self.controls_rect.bottom - 10 - actions_h
        columns = 4
        rows = max(1, (len(self.palette) + columns - 1) // columns)
        swatch_h = max(14, min(40, (actions_top - ROW_GAP - top - 4 * (rows - 1)) // rows))
        for idx, color in enumerate(self.palette):
            row, col = divmod(idx, columns)
            rect = _row_rects(left, top + row * (swatch_h + 4), inner_w, columns, swatch_h)[col]
            self.palette_buttons.append(Button(rect=rect, fill=color))

        first = _row_rects(left, actions_top, inner_w, 2)
        second = _row_rects(left, actions_top + BUTTON_H + ROW_GAP, inner_w, 2)
        for key, rect in zip(("undo", "redo", "new", "save"), first + second):
            self.action_buttons[key] = Button(rect=rect, label=key.title(), fill=ACTION_FILL)
        self._sync_history_buttons()

    def _on_history_availability(self, can_undo: bool, can_redo: bool) -> None:
        self.can_undo = can_undo
        self.can_redo = can_redo
        self._sync_history_buttons()

    def _on_buffer_changed(self, snapshot: Snapshot) -> None:
        self.unsaved = self.can_undo or self.can_redo
        logger.debug("Canvas settled at %dx%d", snapshot.width, snapshot.height)
        pygame.display.set_caption("Color Corner *" if self.unsaved else "Color Corner")

    def _sync_history_buttons(self) -> None:
        if "undo" in self.action_buttons:
            self.action_buttons["undo"].enabled = self.can_undo
            self.action_buttons["redo"].enabled = self.can_redo

    def open_image(self, path: Path) -> bool:
        image = load_image(path)
        if image is None:
            logger.warning("Could not load image %s", path)
            return False
        self.session.load_image(image)
        logger.info("Loaded %s", path)
        return True

    def save(self) -> Path:
        path = self.session.save_export(self.export_dir)
        self.unsaved = False
        pygame.display.set_caption("Color Corner")
        return path

    def _handle_panel_click(self, pos: Point) -> None:
        for tool, button in self.tool_buttons.items():
            if button.hit(pos):
                self.session.set_tool(tool)
                return
        for size, button in self.size_buttons.items():
            if button.hit(pos):
                self.session.set_brush_size(size)
                return
        for value, button in self.tolerance_buttons.items():
            if button.hit(pos):
                self.session.set_tolerance(value)
                return
        for idx, button in enumerate(self.palette_buttons):
            if button.hit(pos):
                self.session.set_color(to_hex(self.palette[idx]))
                return
        if self.action_buttons["undo"].hit(pos):
            self.session.undo()
        elif self.action_buttons["redo"].hit(pos):
            self.session.redo()
        elif self.action_buttons["new"].hit(pos):
            self.session.new_image()
        elif self.action_buttons["save"].hit(pos):
            self.save()

    def _handle_pointer_down(self, pos: Point) -> None:
        if self.canvas_rect.collidepoint(pos):
            self.session.pointer_down(pos)
            return
        self._handle_panel_click(pos)

    def _render(self) -> None:
        self.screen.fill((252, 248, 240))
        pygame.draw.rect(self.screen, MENU_BG, self.controls_rect)
        pygame.draw.rect(self.screen, (255, 255, 255), self.canvas_rect)
        self.screen.blit(self.session.buffer.surface, self.canvas_rect.topleft)
        pygame.draw.rect(self.screen, (200, 200, 200), self.canvas_rect, width=2)

        state = self.session.tool_state
        for tool, button in self.tool_buttons.items():
            button.draw(self.screen, self.font)
            if tool == state.tool:
                pygame.draw.rect(self.screen, SELECTED_BORDER, button.rect, width=3, border_radius=8)
        for size, button in self.size_buttons.items():
            button.draw(self.screen, self.font)
            if size == state.brush_size:
                pygame.draw.rect(self.screen, SELECTED_BORDER, button.rect, width=3, border_radius=8)
        for value, button in self.tolerance_buttons.items():
            button.draw(self.screen, self.font)
            if value == state.tolerance:
                pygame.draw.rect(self.screen, SELECTED_BORDER, button.rect, width=3, border_radius=8)
        for idx, button in enumerate(self.palette_buttons):
            button.draw(self.screen)
            if self.palette[idx] == state.color:
                pygame.draw.rect(self.screen, SELECTED_BORDER, button.rect, width=3)
        for button in self.action_buttons.values():
            button.draw(self.screen, self.font)

        pygame.display.flip()

    def run(self, *, quit_on_exit: bool = True) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    shortcut = history_shortcut(event)
                    if shortcut == "undo":
                        self.session.undo()
                    elif shortcut == "redo":
                        self.session.redo()
                elif is_primary_pointer_event(event, is_down=True):
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    self.pointer_down = True
                    self._handle_pointer_down(pos)
                elif is_pointer_motion(event):
                    if not self.pointer_down:
                        continue
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    self.session.pointer_move(pos)
                elif is_primary_pointer_event(event, is_down=False):
                    self.pointer_down = False
                    self.session.pointer_up(pointer_event_pos(event, self.screen_rect))

            self.session.poll()
            self._render()
            self.clock.tick(60)

        self.session.history.flush()
        if quit_on_exit:
            pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    config = load_config()
    logging.basicConfig(
        level=str(config.get("log_level", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    image_path = Path(args[0]).expanduser() if args else None
    try:
        ColoringApp(image_path, config=config).run(quit_on_exit=True)
    except Exception:
        logger.exception("Color Corner stopped unexpectedly")
        pygame.quit()
        raise


if __name__ == "__main__":
    main()
