from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import pygame


Color = Tuple[int, int, int]
Point = Tuple[int, int]

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERMOTION = getattr(pygame, "FINGERMOTION", None)
FINGERUP = getattr(pygame, "FINGERUP", None)
FINGER_EVENTS = {event for event in (FINGERDOWN, FINGERMOTION, FINGERUP) if event is not None}


@dataclass
class Button:
    rect: pygame.Rect
    label: str = ""
    fill: Optional[Color] = None
    border_color: Optional[Color] = (30, 30, 30)
    border_width: int = 0
    enabled: bool = True

    def draw(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        if self.fill is not None:
            pygame.draw.rect(surface, self.fill, self.rect, border_radius=8)
        if self.border_color is not None and self.border_width > 0:
            pygame.draw.rect(
                surface,
                self.border_color,
                self.rect,
                width=self.border_width,
                border_radius=8,
            )
        if self.label and font is not None:
            text_color = (20, 20, 20) if self.enabled else (160, 160, 160)
            text = font.render(self.label, True, text_color)
            text_rect = text.get_rect(center=self.rect.center)
            surface.blit(text, text_rect)

    def hit(self, pos: Tuple[int, int]) -> bool:
        return self.enabled and self.rect.collidepoint(pos)


def create_window(size: Tuple[int, int], *, fullscreen: bool = False) -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    if fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode(size)
    pygame.display.set_caption("Color Corner")
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


def load_image(path: Path) -> Optional[pygame.Surface]:
    if not path.exists():
        return None
    try:
        return pygame.image.load(str(path))
    except (pygame.error, OSError):
        return None


def is_primary_pointer_event(event: pygame.event.Event, *, is_down: bool) -> bool:
    expected_type = pygame.MOUSEBUTTONDOWN if is_down else pygame.MOUSEBUTTONUP
    if event.type == expected_type:
        # Some touch stacks can emit emulated mouse events with button 0.
        button = getattr(event, "button", 1)
        if button in {0, 1}:
            return True
        return bool(getattr(event, "touch", False))
    finger_type = FINGERDOWN if is_down else FINGERUP
    return finger_type is not None and event.type == finger_type


def is_pointer_motion(event: pygame.event.Event) -> bool:
    return event.type == pygame.MOUSEMOTION or (FINGERMOTION is not None and event.type == FINGERMOTION)


def pointer_event_pos(event: pygame.event.Event, screen_rect: pygame.Rect) -> Optional[Point]:
    if hasattr(event, "pos"):
        return event.pos
    if event.type in FINGER_EVENTS:
        return (
            int(event.x * screen_rect.width),
            int(event.y * screen_rect.height),
        )
    return None


def history_shortcut(event: pygame.event.Event) -> Optional[str]:
    """``"undo"`` for Ctrl/Cmd+Z, ``"redo"`` for Ctrl/Cmd+Shift+Z, else None."""
    if event.type != pygame.KEYDOWN or event.key != pygame.K_z:
        return None
    mods = event.mod
    if not mods & (pygame.KMOD_CTRL | pygame.KMOD_META):
        return None
    return "redo" if mods & pygame.KMOD_SHIFT else "undo"
