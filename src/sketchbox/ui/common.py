from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import pygame


Color = Tuple[int, int, int]
Point = Tuple[int, int]

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERUP = getattr(pygame, "FINGERUP", None)


def create_window(size: Tuple[int, int], title: str = "sketchbox") -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    screen = pygame.display.set_mode(size, pygame.RESIZABLE)
    pygame.display.set_caption(title)
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


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


def modifier_flags(mods: int) -> Tuple[bool, bool]:
    """``(shift, ctrl)`` held in a pygame modifier mask."""
    return bool(mods & pygame.KMOD_SHIFT), bool(mods & pygame.KMOD_CTRL)


def argb_to_rgb(argb: int) -> Color:
    return ((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF)


def draw_dashed_rect(
    surface: pygame.Surface,
    color: Color,
    rect: pygame.Rect,
    *,
    width: int = 2,
    dash: int = 6,
) -> None:
    corners = [rect.topleft, rect.topright, rect.bottomright, rect.bottomleft]
    for start, end in zip(corners, corners[1:] + corners[:1]):
        _draw_dashed_line(surface, color, start, end, width=width, dash=dash)


def _draw_dashed_line(
    surface: pygame.Surface,
    color: Color,
    start: Point,
    end: Point,
    *,
    width: int,
    dash: int,
) -> None:
    length = math.hypot(end[0] - start[0], end[1] - start[1])
    if length < 1:
        return
    steps = max(1, int(length / dash))
    for idx in range(0, steps, 2):
        t0 = idx / steps
        t1 = min(1.0, (idx + 1) / steps)
        a = (start[0] + (end[0] - start[0]) * t0, start[1] + (end[1] - start[1]) * t0)
        b = (start[0] + (end[0] - start[0]) * t1, start[1] + (end[1] - start[1]) * t1)
        pygame.draw.line(surface, color, a, b, width)


def draw_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    center: Point,
    color: Color,
    background: Optional[Color] = None,
) -> None:
    rendered = font.render(text, True, color, background)
    surface.blit(rendered, rendered.get_rect(center=center))


def wedge_points(center: Point, inner: float, outer: float, start_deg: float, end_deg: float, steps: int = 12) -> Sequence[Tuple[float, float]]:
    """Polygon approximating a ring segment; angles grow towards screen up."""
    outer_arc = []
    inner_arc = []
    for idx in range(steps + 1):
        angle = math.radians(start_deg + (end_deg - start_deg) * idx / steps)
        outer_arc.append((center[0] + outer * math.cos(angle), center[1] - outer * math.sin(angle)))
        inner_arc.append((center[0] + inner * math.cos(angle), center[1] - inner * math.sin(angle)))
    return outer_arc + inner_arc[::-1]
