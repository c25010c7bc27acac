from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pygame

from sketchbox.config import load_config
from sketchbox.paint.radial import Icon
from sketchbox.paint.session import EditSession, InputMode, MouseButton
from sketchbox.paths import default_output_path
from sketchbox.ui.common import (
    argb_to_rgb,
    create_window,
    draw_dashed_rect,
    draw_label,
    is_primary_pointer_event,
    modifier_flags,
    wedge_points,
)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

Color = Tuple[int, int, int]

WINDOW_BG: Color = (24, 24, 24)
STATUS_BG: Color = (40, 40, 40)
STATUS_FG: Color = (230, 230, 230)
SELECTION_COLOR: Color = (255, 255, 255)
DRAG_COLOR: Color = (255, 0, 0)
MENU_BG: Color = (238, 234, 226)
MENU_FOCUS: Color = (200, 60, 60)
MENU_LINE: Color = (90, 90, 90)
MAX_WINDOW = (1000, 1000)
ICON_SIZE = 28


def _color_text(argb: int, digit: Optional[int] = None) -> str:
    """Hex form of ``argb``; ``digit`` brackets the ``rrggbb`` digit being typed."""
    text = f"{argb:08X}"
    if digit is None:
        return f"#{text}"
    index = 2 + digit
    return f"#{text[:index]}[{text[index]}]{text[index + 1:]}"


def draw_icon(surface: pygame.Surface, icon: Icon, center: Tuple[int, int], size: int, color: Color) -> None:
    rect = pygame.Rect(0, 0, size, size)
    rect.center = center
    left, top, right, bottom = rect.left, rect.top, rect.right, rect.bottom
    cx, cy = rect.center
    if icon is Icon.SELECT:
        draw_dashed_rect(surface, color, rect.inflate(-4, -4), dash=4)
    elif icon is Icon.PENCIL:
        pygame.draw.line(surface, color, (left + 4, bottom - 4), (right - 4, top + 4), 4)
        pygame.draw.polygon(surface, color, [(left + 2, bottom - 2), (left + 8, bottom - 4), (left + 4, bottom - 8)])
    elif icon is Icon.FILL:
        bucket = [(left + 6, top + 8), (right - 6, top + 8), (right - 9, bottom - 3), (left + 9, bottom - 3)]
        pygame.draw.polygon(surface, color, bucket, 2)
        pygame.draw.circle(surface, color, (right - 3, cy + 4), 3)
    elif icon is Icon.PICKER:
        pygame.draw.line(surface, color, (left + 5, bottom - 5), (cx + 3, cy - 3), 3)
        pygame.draw.circle(surface, color, (right - 7, top + 7), 5)
    elif icon is Icon.BRUSH:
        pygame.draw.line(surface, color, (right - 4, top + 4), (cx, cy), 3)
        pygame.draw.ellipse(surface, color, pygame.Rect(left + 3, cy - 2, size // 2, size // 3))
    elif icon is Icon.FIGURE:
        pygame.draw.circle(surface, color, (left + size // 3, top + size // 3), size // 4, 2)
        pygame.draw.rect(surface, color, pygame.Rect(cx - 2, cy - 2, size // 2 - 2, size // 2 - 2), 2)
    elif icon is Icon.CIRCLE:
        pygame.draw.circle(surface, color, center, size // 2 - 2, 2)
    elif icon is Icon.RECTANGLE:
        pygame.draw.rect(surface, color, rect.inflate(-4, -8), 2)
    elif icon is Icon.TRIANGLE:
        pygame.draw.polygon(surface, color, [(cx, top + 3), (right - 3, bottom - 3), (left + 3, bottom - 3)], 2)
    elif icon is Icon.TOGGLE_FILL:
        pygame.draw.rect(surface, color, pygame.Rect(left + 2, top + 2, size // 2, size // 2), 2)
        pygame.draw.rect(surface, color, pygame.Rect(cx, cy, size // 2 - 2, size // 2 - 2))


class PaintApp:
    def __init__(self, session: EditSession) -> None:
        self.session = session
        canvas_w = min(MAX_WINDOW[0], session.buffer.width)
        canvas_h = min(MAX_WINDOW[1], session.buffer.height)
        self.screen, self.screen_rect = create_window((canvas_w, canvas_h + 24), "sketchbox")
        self.font = pygame.font.SysFont("monospace", 14)
        self.status_height = self.font.get_height() + 8
        self.clock = pygame.time.Clock()
        self._scaled: Optional[pygame.Surface] = None

    def _modifiers(self) -> Tuple[bool, bool]:
        return modifier_flags(pygame.key.get_mods())

    def _pointer_button(self, event: pygame.event.Event, *, is_down: bool) -> Optional[int]:
        if is_primary_pointer_event(event, is_down=is_down):
            return MouseButton.PRIMARY
        button = getattr(event, "button", None)
        # Wheel clicks arrive again as MOUSEWHEEL.
        if button in (MouseButton.MIDDLE, MouseButton.SECONDARY):
            return button
        return None

    def _handle_event(self, event: pygame.event.Event) -> bool:
        session = self.session
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            shift, ctrl = modifier_flags(event.mod)
            return session.handle_key(pygame.key.name(event.key), ctrl=ctrl, shift=shift)
        if event.type == pygame.VIDEORESIZE:
            self.screen_rect = self.screen.get_rect()
            session.mark_dirty()
        elif event.type == pygame.MOUSEBUTTONDOWN:
            button = self._pointer_button(event, is_down=True)
            if button is not None:
                shift, ctrl = self._modifiers()
                session.press(event.pos[0], event.pos[1], button, shift=shift, ctrl=ctrl)
        elif event.type == pygame.MOUSEBUTTONUP:
            button = self._pointer_button(event, is_down=False)
            if button is not None:
                shift, ctrl = self._modifiers()
                session.release(event.pos[0], event.pos[1], button, shift=shift, ctrl=ctrl)
        elif event.type == pygame.MOUSEMOTION:
            shift, ctrl = self._modifiers()
            session.motion(event.pos[0], event.pos[1], shift=shift, ctrl=ctrl)
        elif event.type == pygame.MOUSEWHEEL and event.y:
            shift, ctrl = self._modifiers()
            session.wheel(1 if event.y > 0 else -1, shift=shift, ctrl=ctrl)
        return True

    # --- drawing ---

    def _canvas_surface(self) -> pygame.Surface:
        session = self.session
        if self._scaled is None or session.dirty:
            factor = session.viewport.factor
            surface = session.buffer.surface
            if factor == 1:
                self._scaled = surface
            else:
                size = (
                    max(1, int(surface.get_width() * factor)),
                    max(1, int(surface.get_height() * factor)),
                )
                self._scaled = pygame.transform.scale(surface, size)
        return self._scaled

    def _draw_canvas(self) -> None:
        viewport = self.session.viewport
        self.screen.blit(self._canvas_surface(), (viewport.scroll_x, viewport.scroll_y))

    def _draw_selection(self) -> None:
        session = self.session
        selection = session.tool.selection
        if selection is None:
            return
        area = selection.area()
        if area is None:
            return
        x, y, width, height = area
        color = SELECTION_COLOR
        if selection.dragging:
            x += selection.drag_to[0] - selection.drag_from[0]
            y += selection.drag_to[1] - selection.drag_from[1]
            color = DRAG_COLOR
        left, top = session.viewport.to_screen(x, y)
        right, bottom = session.viewport.to_screen(x + width, y + height)
        draw_dashed_rect(self.screen, color, pygame.Rect(left, top, right - left, bottom - top))

    def _draw_radial_menu(self) -> None:
        menu = self.session.radial
        if not menu.active or not menu.items:
            return
        center = menu.center
        focused = menu.hit_test(pygame.mouse.get_pos())
        segment = 360.0 / len(menu.items)
        for index, item in enumerate(menu.items):
            start = index * segment
            end = start + segment
            fill = MENU_FOCUS if index == focused else MENU_BG
            pygame.draw.polygon(
                self.screen,
                fill,
                wedge_points(center, menu.inner_radius, menu.outer_radius, start, end),
            )
            angle = math.radians(start)
            pygame.draw.line(
                self.screen,
                MENU_LINE,
                (center[0] + menu.inner_radius * math.cos(angle), center[1] - menu.inner_radius * math.sin(angle)),
                (center[0] + menu.outer_radius * math.cos(angle), center[1] - menu.outer_radius * math.sin(angle)),
                2,
            )
            middle = math.radians(start + segment / 2)
            radius = (menu.inner_radius + menu.outer_radius) / 2
            label_pos = (
                int(center[0] + radius * math.cos(middle)),
                int(center[1] - radius * math.sin(middle)),
            )
            icon_pos = (label_pos[0], label_pos[1] - ICON_SIZE // 2)
            draw_icon(self.screen, item.icon, icon_pos, ICON_SIZE, MENU_LINE)
            text_pos = (label_pos[0], label_pos[1] + ICON_SIZE // 2 + 4)
            draw_label(self.screen, self.font, item.label, text_pos, (20, 20, 20))
        pygame.draw.circle(self.screen, MENU_LINE, center, int(menu.outer_radius), 2)
        pygame.draw.circle(self.screen, MENU_LINE, center, int(menu.inner_radius), 2)

    def _status_text(self) -> str:
        session = self.session
        tool = session.tool
        shared = tool.shared
        digit = session.input.current_digit if session.input.mode is InputMode.COLOR else None
        parts = [
            f"[{session.current_context + 1}]",
            session.input.mode.value,
            f"{tool.name:<7}",
            f"w:{shared.line_width}",
            f"col:{shared.current + 1}/{len(shared.palette)} {_color_text(shared.color, digit)}",
            f"{session.buffer.width}x{session.buffer.height}",
            f"zoom:{session.viewport.zoom}",
        ]
        if tool.figure is not None and tool.figure.filled:
            parts.insert(3, "filled")
        if session.message:
            parts.append(session.message)
        return "  ".join(parts)

    def _draw_status(self) -> None:
        rect = pygame.Rect(
            0,
            self.screen_rect.height - self.status_height,
            self.screen_rect.width,
            self.status_height,
        )
        pygame.draw.rect(self.screen, STATUS_BG, rect)
        swatch = pygame.Rect(rect.left + 4, rect.top + 4, rect.height - 8, rect.height - 8)
        pygame.draw.rect(self.screen, argb_to_rgb(self.session.tool.shared.color), swatch)
        text = self.font.render(self._status_text(), True, STATUS_FG)
        self.screen.blit(text, (swatch.right + 6, rect.top + (rect.height - text.get_height()) // 2))

    def _draw(self) -> None:
        self.screen.fill(WINDOW_BG)
        self._draw_canvas()
        self._draw_selection()
        self._draw_radial_menu()
        self._draw_status()
        self.session.dirty = False
        pygame.display.flip()

    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if not self._handle_event(event):
                    running = False
                    break
            self._draw()
            self.clock.tick(60)

        pygame.quit()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sketchbox-paint",
        description="Simple raster paint program.",
        add_help=False,
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="Image to open; also the default output file.",
    )
    parser.add_argument("-i", "--input", help="Image to open.")
    parser.add_argument("-o", "--output", help="File written by Ctrl+S.")
    parser.add_argument("-w", "--width", type=int, help="Canvas width for a new image.")
    parser.add_argument("-h", "--height", type=int, help="Canvas height for a new image.")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--help", action="help", help="Show this help message and exit.")
    return parser


def _apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    paint = dict(config.get("paint", {}))
    if args.width is not None:
        paint["width"] = args.width
    if args.height is not None:
        paint["height"] = args.height
    merged = dict(config)
    merged["paint"] = paint
    return merged


def build_session(argv: Optional[Sequence[str]] = None) -> EditSession:
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    for name, value in (("width", args.width), ("height", args.height)):
        if value is not None and value <= 0:
            parser.error(f"{name} must be positive")

    config = _apply_overrides(load_config(), args)
    session = EditSession(config)

    input_path = args.input or args.file
    if input_path:
        if not session.load(input_path):
            parser.error(f"failed to read input file {input_path}")
    output: List[Optional[str]] = [args.output, args.file, args.input]
    chosen = next((value for value in output if value), None)
    session.output_path = Path(chosen) if chosen else default_output_path(config)
    logger.debug("output file: %s", session.output_path)
    return session


def main(argv: Optional[Sequence[str]] = None) -> None:
    session = build_session(argv)
    try:
        PaintApp(session).run()
    except Exception:
        logger.exception("paint session crashed")
        pygame.quit()
        raise


if __name__ == "__main__":
    main()
