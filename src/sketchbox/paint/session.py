from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from sketchbox.config import DEFAULT_CONFIG, paint_setting
from sketchbox.paint import codec
from sketchbox.paint.history import History
from sketchbox.paint.pixels import PixelBuffer, Point
from sketchbox.paint.radial import RadialMenu
from sketchbox.paint.tools import ToolContext, ToolKind, ToolSharedData, handlers_for

logger = logging.getLogger(__name__)

ZOOM_SPEED = 1.2
SCROLL_STEP = 10
RESIZE_STEP = 5
RESIZE_STEP_LARGE = 25
COLOR_DIGITS = 6
HEX_DIGITS = "0123456789abcdef"

OwnershipHook = Callable[[str, bool], None]


class MouseButton(IntEnum):
    PRIMARY = 1
    MIDDLE = 2
    SECONDARY = 3
    SCROLL_UP = 4
    SCROLL_DOWN = 5


@dataclass(frozen=True)
class PointerEvent:
    pos: Point
    button: int = MouseButton.PRIMARY
    shift: bool = False
    ctrl: bool = False

    @property
    def is_primary(self) -> bool:
        return self.button == MouseButton.PRIMARY


class InputMode(Enum):
    INTERACT = "INT"
    COLOR = "COL"


@dataclass
class InputState:
    prev_screen: Point = (0, 0)
    holding_button: Optional[int] = None
    is_holding: bool = False
    is_dragging: bool = False
    last_drag_time: Optional[float] = None
    mode: InputMode = InputMode.INTERACT
    # Digit of the active color being typed, 0..5 over rrggbb.
    current_digit: int = 0

    @property
    def holding_primary(self) -> bool:
        return self.holding_button == MouseButton.PRIMARY


@dataclass
class Viewport:
    zoom: int = 0
    scroll_x: int = 0
    scroll_y: int = 0
    min_zoom: int = -10
    max_zoom: int = 10

    @property
    def factor(self) -> float:
        return ZOOM_SPEED ** self.zoom

    def to_canvas(self, x: int, y: int) -> Point:
        factor = self.factor
        return (int((x - self.scroll_x) / factor), int((y - self.scroll_y) / factor))

    def to_screen(self, x: int, y: int) -> Point:
        factor = self.factor
        return (int(x * factor + self.scroll_x), int(y * factor + self.scroll_y))

    def change_zoom(self, cursor: Point, delta: int) -> None:
        old = self.factor
        self.zoom = max(self.min_zoom, min(self.max_zoom, self.zoom + delta))
        # Keep the canvas point under the cursor where it is.
        ratio = self.factor / old - 1
        self.scroll_x += int((self.scroll_x - cursor[0]) * ratio)
        self.scroll_y += int((self.scroll_y - cursor[1]) * ratio)

    def scroll_by(self, dx: int, dy: int) -> None:
        self.scroll_x += dx
        self.scroll_y += dy


def _coerce_int(value: object, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_color(value: object, default: int) -> int:
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if text.lower().startswith("0x"):
            text = text[2:]
        try:
            parsed = int(text, 16)
        except ValueError:
            return default
        return parsed | 0xFF000000 if len(text) <= 6 else parsed
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        channels = [max(0, min(255, _coerce_int(part, 0))) for part in value]
        alpha = channels[3] if len(channels) == 4 else 0xFF
        return (alpha << 24) | (channels[0] << 16) | (channels[1] << 8) | channels[2]
    return _coerce_int(value, default) & 0xFFFFFFFF


def _log_ownership(selection: str, owned: bool) -> None:
    logger.debug("%s selection %s", selection, "owned" if owned else "released")


class EditSession:
    """One editing session: canvas, tools, history and the radial menu.

    Pointer coordinates handed to ``press``/``release``/``motion`` are screen
    coordinates; they are mapped through the viewport before reaching tools.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        buffer: Optional[PixelBuffer] = None,
        clock: Callable[[], float] = time.monotonic,
        ownership_hook: Optional[OwnershipHook] = None,
    ) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG
        self.background = _coerce_color(self._setting("background"), 0xFFAA0000)
        if buffer is None:
            width = max(1, _coerce_int(self._setting("width"), 500))
            height = max(1, _coerce_int(self._setting("height"), 800))
            buffer = PixelBuffer(width, height, self.background)
        self.buffer = buffer

        depth = _coerce_int(self._setting("history_depth"), 0)
        self.history = History(max_depth=depth)
        self.radial = RadialMenu(
            inner_radius=_coerce_int(self._setting("radial_inner_radius"), 40),
            outer_radius=_coerce_int(self._setting("radial_outer_radius"), 225),
        )
        self.viewport = Viewport(
            min_zoom=_coerce_int(self._setting("min_zoom"), -10),
            max_zoom=_coerce_int(self._setting("max_zoom"), 10),
        )
        self.input = InputState()
        self.clock = clock
        self.drag_period = max(0, _coerce_int(self._setting("drag_period_ms"), 10)) / 1000.0
        self.ownership_hook = ownership_hook or _log_ownership

        palette = [_coerce_color(color, 0xFF000000) for color in self._setting("palette") or []]
        max_colors = max(1, _coerce_int(self._setting("max_colors"), 9))
        palette = palette[:max_colors] or [0xFF000000]
        line_width = max(0, _coerce_int(self._setting("line_width"), 5))
        count = max(1, _coerce_int(self._setting("tool_contexts"), 3))
        self.tool_contexts: List[ToolContext] = [
            ToolContext(
                shared=ToolSharedData(
                    palette=list(palette),
                    line_width=line_width,
                    max_colors=max_colors,
                ),
                kind=ToolKind.PENCIL,
            )
            for _ in range(count)
        ]
        self.current_context = 0

        self.png_compression = _coerce_int(self._setting("png_compression"), 4)
        self.jpeg_quality = _coerce_int(self._setting("jpeg_quality"), 90)
        self.image_type = codec.ImageType.PNG
        self.input_path: Optional[Path] = None
        self.output_path: Optional[Path] = None
        self.clipboard: Optional[PixelBuffer] = None
        self.dirty = True
        self.message = ""

    def _setting(self, key: str) -> Any:
        return paint_setting(self.config, key)

    # --- tool state ---

    @property
    def tool(self) -> ToolContext:
        return self.tool_contexts[self.current_context]

    @property
    def tool_kind(self) -> ToolKind:
        return self.tool.kind

    def set_tool(self, kind: ToolKind) -> None:
        self.tool.set_tool(kind)
        self.mark_dirty()

    def select_context(self, index: int) -> bool:
        if not 0 <= index < len(self.tool_contexts):
            return False
        self.current_context = index
        self.mark_dirty()
        return True

    def set_active_color(self, argb: int) -> None:
        self.tool.shared.set_color(argb & 0xFFFFFFFF)
        self.mark_dirty()

    def set_line_width(self, width: int) -> bool:
        if width < 0:
            logger.debug("rejected negative line width %d", width)
            return False
        self.tool.shared.line_width = width
        self.mark_dirty()
        return True

    def cycle_color(self, delta: int) -> None:
        self.tool.shared.cycle(delta)
        self.mark_dirty()

    def swap_previous_color(self) -> None:
        self.tool.shared.swap_previous()
        self.mark_dirty()

    def add_color(self, argb: int = 0xFF000000) -> bool:
        added = self.tool.shared.add_color(argb)
        if added:
            self.mark_dirty()
        return added

    # --- pointer input ---

    def _event(self, x: int, y: int, button: int, shift: bool, ctrl: bool) -> PointerEvent:
        return PointerEvent(
            pos=self.viewport.to_canvas(x, y),
            button=button,
            shift=shift,
            ctrl=ctrl,
        )

    def press(self, x: int, y: int, button: int = MouseButton.PRIMARY, *, shift: bool = False, ctrl: bool = False) -> None:
        event = self._event(x, y, button, shift, ctrl)
        if button == MouseButton.PRIMARY and self.tool.kind is not ToolKind.PICKER:
            self.history.begin_new_action(self.buffer)
        handlers = handlers_for(self.tool.kind)
        if handlers.on_press is not None:
            handlers.on_press(self, event)
            self.mark_dirty()
        if button == MouseButton.SECONDARY:
            self.radial.activate((x, y), self.tool)
            self.mark_dirty()
        self.input.holding_button = button
        self.input.is_holding = True
        self.input.prev_screen = (x, y)

    def release(self, x: int, y: int, button: int = MouseButton.PRIMARY, *, shift: bool = False, ctrl: bool = False) -> None:
        if button == MouseButton.SECONDARY:
            if self.radial.active and self.radial.deactivate((x, y), self.tool):
                logger.debug("radial menu selected, tool is now %s", self.tool.name)
            self.mark_dirty()
            self._end_hold()
            return

        if button in (MouseButton.SCROLL_UP, MouseButton.SCROLL_DOWN):
            self.wheel(1 if button == MouseButton.SCROLL_UP else -1, shift=shift, ctrl=ctrl)

        handlers = handlers_for(self.tool.kind)
        if handlers.on_release is not None:
            handlers.on_release(self, self._event(x, y, button, shift, ctrl))
            self.mark_dirty()
        self._end_hold()

    def motion(self, x: int, y: int, *, shift: bool = False, ctrl: bool = False) -> None:
        state = self.input
        if state.is_holding:
            state.is_dragging = True
            handlers = handlers_for(self.tool.kind)
            if handlers.on_drag is not None and self._drag_due():
                button = state.holding_button or MouseButton.PRIMARY
                handlers.on_drag(self, self._event(x, y, button, shift, ctrl))
                self.mark_dirty()
            if state.holding_button == MouseButton.MIDDLE:
                self.viewport.scroll_by(x - state.prev_screen[0], y - state.prev_screen[1])
                self.mark_dirty()
        if self.radial.active:
            self.mark_dirty()
        state.prev_screen = (x, y)

    def wheel(self, sign: int, *, shift: bool = False, ctrl: bool = False) -> None:
        if ctrl:
            self.viewport.change_zoom(self.input.prev_screen, sign)
        elif shift:
            self.viewport.scroll_by(-sign * SCROLL_STEP, 0)
        else:
            self.viewport.scroll_by(0, sign * SCROLL_STEP)
        self.mark_dirty()

    def _drag_due(self) -> bool:
        now = self.clock()
        last = self.input.last_drag_time
        if last is not None and now - last < self.drag_period:
            return False
        self.input.last_drag_time = now
        return True

    def _end_hold(self) -> None:
        self.input.is_holding = False
        self.input.is_dragging = False
        self.input.last_drag_time = None

    # --- history ---

    def undo(self) -> bool:
        return self._move_history(forward=True)

    def redo(self) -> bool:
        return self._move_history(forward=False)

    def _move_history(self, *, forward: bool) -> bool:
        moved = self.history.move(self.buffer, forward=forward)
        if moved:
            self.mark_dirty()
        else:
            logger.debug("can't %s: history is empty", "undo" if forward else "redo")
            self.notify("nothing to " + ("undo" if forward else "redo"))
        return moved

    # --- canvas ---

    def mark_dirty(self) -> None:
        self.dirty = True

    def notify(self, message: str) -> None:
        self.message = message
        self.mark_dirty()

    def resize(self, width: int, height: int) -> bool:
        if width <= 0 or height <= 0:
            logger.debug("resize: invalid canvas size %dx%d", width, height)
            return False
        self.buffer.assign(self.buffer.resized(width, height, self.background))
        self.mark_dirty()
        return True

    def resize_by(self, dx: int, dy: int) -> bool:
        return self.resize(self.buffer.width + dx, self.buffer.height + dy)

    def zoom(self, delta: int, cursor: Optional[Point] = None) -> None:
        self.viewport.change_zoom(cursor or self.input.prev_screen, delta)
        self.mark_dirty()

    # --- selection and clipboard ---

    def selection_bounds(self) -> Optional[Tuple[int, int, int, int]]:
        selection = self.tool.selection
        if selection is None:
            return None
        return selection.area()

    def claim_selection(self, owned: bool) -> None:
        self.ownership_hook("primary", owned)

    def copy_selection(self) -> bool:
        bounds = self.selection_bounds()
        if bounds is None:
            logger.debug("copy without selection")
            self.notify("nothing selected")
            return False
        self.clipboard = self.buffer.crop(*bounds)
        if self.clipboard is None:
            return False
        self.ownership_hook("clipboard", True)
        self.notify("selection copied")
        return True

    def selection_bytes(self, rgba: bool = False) -> Optional[bytes]:
        if self.clipboard is None:
            return None
        return self.clipboard.to_bytes("RGBA" if rgba else "RGB")

    def selection_png(self) -> Optional[bytes]:
        if self.clipboard is None:
            return None
        return codec.encode(self.clipboard, codec.ImageType.PNG, png_compression=self.png_compression)

    # --- files ---

    def load(self, path: Union[str, Path]) -> bool:
        loaded = codec.load(path)
        if loaded is None:
            return False
        self.buffer.assign(loaded)
        self.image_type = codec.sniff_image_type(path)
        if self.image_type is codec.ImageType.UNKNOWN:
            self.image_type = codec.ImageType.PNG
        self.input_path = Path(path)
        self.history.clear()
        for context in self.tool_contexts:
            if context.selection is not None:
                context.selection.clear()
        self.mark_dirty()
        return True

    def save(
        self,
        path: Optional[Union[str, Path]] = None,
        image_type: Optional[codec.ImageType] = None,
    ) -> bool:
        target = Path(path) if path is not None else self.output_path
        if target is None:
            logger.warning("no output file set")
            self.notify("no output file set")
            return False
        if image_type is None:
            image_type = codec.type_from_suffix(target)
            if image_type is codec.ImageType.UNKNOWN:
                image_type = self.image_type
        saved = codec.save(
            self.buffer,
            target,
            image_type,
            png_compression=self.png_compression,
            jpeg_quality=self.jpeg_quality,
        )
        if saved:
            logger.debug("file saved to %s", target)
            self.notify(f"saved {target.name}")
        else:
            self.notify("failed to save image")
        return saved

    # --- keyboard ---

    def set_input_mode(self, mode: InputMode) -> None:
        self.input.mode = mode
        self.input.current_digit = 0
        self.mark_dirty()

    def move_color_digit(self, step: int) -> None:
        self.input.current_digit = (self.input.current_digit + step) % COLOR_DIGITS
        self.mark_dirty()

    def type_color_digit(self, value: int) -> None:
        """Overwrite the selected ``rrggbb`` digit of the active color."""
        shift = (COLOR_DIGITS - 1 - self.input.current_digit) * 4
        shared = self.tool.shared
        shared.set_color((shared.color & ~(0xF << shift)) | (value << shift))
        self.move_color_digit(1)

    def handle_key(self, key: str, *, ctrl: bool = False, shift: bool = False) -> bool:
        """Apply a key binding; returns False when the session should end."""
        if key == "escape":
            self.set_input_mode(InputMode.INTERACT)
        elif self.input.mode is InputMode.COLOR:
            self._handle_color_key(key, ctrl)
        else:
            self._handle_interact_key(key, ctrl, shift)

        if key == "q" and not ctrl:
            return False
        if key in {"up", "down"} and not ctrl:
            self.cycle_color(1 if key == "up" else -1)
        elif ctrl and key == "s":
            self.save()
        return True

    def _handle_color_key(self, key: str, ctrl: bool) -> None:
        if ctrl:
            if key == "up":
                self.add_color()
        elif key in {"left", "right"}:
            self.move_color_digit(1 if key == "right" else -1)
        elif len(key) == 1 and key.lower() in HEX_DIGITS:
            self.type_color_digit(HEX_DIGITS.index(key.lower()))

    def _handle_interact_key(self, key: str, ctrl: bool, shift: bool) -> None:
        if ctrl and key == "z":
            self._move_history(forward=not shift)
        elif ctrl and key == "c":
            self.copy_selection()
        elif ctrl and key in {"=", "+"}:
            self.zoom(1)
        elif ctrl and key == "-":
            self.zoom(-1)
        elif ctrl and key in {"left", "right", "up", "down"}:
            step = RESIZE_STEP_LARGE if shift else RESIZE_STEP
            dx = {"left": -step, "right": step}.get(key, 0)
            dy = {"down": -step, "up": step}.get(key, 0)
            self.resize_by(dx, dy)
        elif ctrl:
            return
        elif key == "c":
            self.set_input_mode(InputMode.COLOR)
        elif key == "x":
            self.swap_previous_color()
        elif len(key) == 1 and key.isdigit() and key != "0":
            self.select_context(int(key) - 1)
