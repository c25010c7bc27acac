from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Union

from sketchbox.paint import raster
from sketchbox.paint.pixels import Point

if TYPE_CHECKING:
    from sketchbox.paint.session import EditSession, PointerEvent

logger = logging.getLogger(__name__)

DEFAULT_PALETTE = (0xFF000000, 0xFFFFFFFF)
DEFAULT_LINE_WIDTH = 5
MAX_COLORS = 9


class ToolKind(Enum):
    SELECTION = "select"
    PENCIL = "pencil"
    FILL = "fill"
    PICKER = "picker"
    BRUSH = "brush"
    FIGURE = "figure"


class FigureShape(Enum):
    CIRCLE = "cir"
    RECTANGLE = "rct"
    TRIANGLE = "tri"


@dataclass
class ToolSharedData:
    palette: List[int] = field(default_factory=lambda: list(DEFAULT_PALETTE))
    current: int = 0
    previous: int = 0
    line_width: int = DEFAULT_LINE_WIDTH
    anchor: Optional[Point] = None
    max_colors: int = MAX_COLORS

    @property
    def color(self) -> int:
        return self.palette[self.current]

    def set_color(self, argb: int) -> None:
        self.palette[self.current] = argb

    def select(self, index: int) -> None:
        self.previous = self.current
        self.current = index % len(self.palette)

    def cycle(self, delta: int) -> None:
        self.select(self.current + delta)

    def swap_previous(self) -> None:
        self.select(self.previous)

    def add_color(self, argb: int = 0xFF000000) -> bool:
        if len(self.palette) >= self.max_colors:
            return False
        self.palette.append(argb)
        self.select(len(self.palette) - 1)
        return True


@dataclass
class SelectionState:
    begin: Optional[Point] = None
    end: Optional[Point] = None
    drag_from: Optional[Point] = None
    drag_to: Optional[Point] = None

    @property
    def present(self) -> bool:
        if self.begin is None or self.end is None:
            return False
        return self.begin[0] != self.end[0] and self.begin[1] != self.end[1]

    @property
    def dragging(self) -> bool:
        return self.drag_from is not None

    def area(self) -> Optional[Tuple[int, int, int, int]]:
        """Normalized ``(x, y, width, height)`` of a present selection."""
        if not self.present:
            return None
        x = min(self.begin[0], self.end[0])
        y = min(self.begin[1], self.end[1])
        return (
            x,
            y,
            max(self.begin[0], self.end[0]) - x,
            max(self.begin[1], self.end[1]) - y,
        )

    def contains(self, point: Point) -> bool:
        area = self.area()
        if area is None:
            return False
        x, y, width, height = area
        return x < point[0] < x + width and y < point[1] < y + height

    def clear(self) -> None:
        self.begin = self.end = self.drag_from = self.drag_to = None


@dataclass
class FigureState:
    shape: FigureShape = FigureShape.CIRCLE
    filled: bool = False
    preview: Optional[Point] = None


VariantState = Union[SelectionState, FigureState, None]


def _initial_state(kind: ToolKind) -> VariantState:
    if kind is ToolKind.SELECTION:
        return SelectionState()
    if kind is ToolKind.FIGURE:
        return FigureState()
    return None


@dataclass
class ToolContext:
    shared: ToolSharedData = field(default_factory=ToolSharedData)
    kind: ToolKind = ToolKind.PENCIL
    state: VariantState = None

    def __post_init__(self) -> None:
        if self.state is None:
            self.state = _initial_state(self.kind)

    def set_tool(self, kind: ToolKind) -> None:
        logger.debug("tool switched to %s", kind.value)
        self.kind = kind
        self.state = _initial_state(kind)

    @property
    def selection(self) -> Optional[SelectionState]:
        return self.state if isinstance(self.state, SelectionState) else None

    @property
    def figure(self) -> Optional[FigureState]:
        return self.state if isinstance(self.state, FigureState) else None

    @property
    def name(self) -> str:
        if self.kind is ToolKind.FIGURE:
            return f"fig:{self.figure.shape.value}"
        return self.kind.value


Handler = Callable[["EditSession", "PointerEvent"], None]


@dataclass(frozen=True)
class ToolHandlers:
    on_press: Optional[Handler] = None
    on_release: Optional[Handler] = None
    on_drag: Optional[Handler] = None


# --- stamps ---


def pencil_stamp(session: EditSession, point: Point) -> None:
    shared = session.tool.shared
    width = shared.line_width
    raster.filled_rect(
        session.buffer,
        (point[0] - width // 2, point[1] - width // 2),
        (width, width),
        shared.color,
    )


def brush_stamp(session: EditSession, point: Point) -> None:
    shared = session.tool.shared
    raster.circle_stamp(session.buffer, point, shared.line_width, shared.color, raster.soft_alpha)


_STAMPS: Dict[ToolKind, Callable[["EditSession", Point], None]] = {
    ToolKind.PENCIL: pencil_stamp,
    ToolKind.BRUSH: brush_stamp,
}


def _stamp_for(session: EditSession) -> Callable[[Point], None]:
    stamp = _STAMPS[session.tool.kind]
    return lambda point: stamp(session, point)


# --- figures ---


def draw_figure(session: EditSession, pointer: Point, anchor: Point) -> None:
    tool = session.tool
    figure = tool.figure
    if figure is None:
        return
    buffer = session.buffer
    color = tool.shared.color
    dx = pointer[0] - anchor[0]
    dy = pointer[1] - anchor[1]
    if figure.shape is FigureShape.CIRCLE:
        center = (int((pointer[0] + anchor[0]) / 2), int((pointer[1] + anchor[1]) / 2))
        diameter = int((dx * dx + dy * dy) ** 0.5)
        alpha_fn = raster.hard_fill_alpha if figure.filled else raster.hard_outline_alpha
        raster.circle_stamp(buffer, center, diameter, color, alpha_fn)
    elif figure.shape is FigureShape.RECTANGLE:
        if figure.filled:
            raster.filled_rect(buffer, anchor, (dx, dy), color)
        else:
            raster.rect_outline(buffer, anchor, (dx, dy), color, tool.shared.line_width)
    elif figure.filled:
        raster.filled_triangle(buffer, anchor, (dx, dy), color)
    else:
        raster.triangle_outline(anchor, (dx, dy), lambda point: pencil_stamp(session, point))


# --- handlers ---


def drawer_on_press(session: EditSession, event: PointerEvent) -> None:
    if not event.is_primary:
        return
    if not event.shift:
        session.tool.shared.anchor = event.pos


def drawer_on_release(session: EditSession, event: PointerEvent) -> None:
    if not event.is_primary:
        return
    shared = session.tool.shared
    if not session.input.is_dragging:
        if event.shift and shared.anchor is not None:
            raster.line(shared.anchor, event.pos, _stamp_for(session))
        else:
            _stamp_for(session)(event.pos)
    shared.anchor = event.pos


def drawer_on_drag(session: EditSession, event: PointerEvent) -> None:
    if not session.input.holding_primary:
        return
    shared = session.tool.shared
    start = shared.anchor if shared.anchor is not None else event.pos
    raster.line(start, event.pos, _stamp_for(session))
    shared.anchor = event.pos


def figure_on_release(session: EditSession, event: PointerEvent) -> None:
    if not event.is_primary:
        return
    tool = session.tool
    anchor = tool.shared.anchor
    if anchor is None:
        return
    figure = tool.figure
    # A throttled drag may have previewed an earlier point; drop that preview.
    if figure.preview is not None and figure.preview != event.pos:
        session.history.restore_peek(session.buffer)
    draw_figure(session, event.pos, anchor)
    figure.preview = None


def figure_on_drag(session: EditSession, event: PointerEvent) -> None:
    if not session.input.holding_primary:
        return
    tool = session.tool
    anchor = tool.shared.anchor
    if anchor is None:
        return
    session.history.restore_peek(session.buffer)
    draw_figure(session, event.pos, anchor)
    tool.figure.preview = event.pos


def fill_on_release(session: EditSession, event: PointerEvent) -> None:
    if not session.input.holding_primary:
        return
    raster.flood_fill(session.buffer, session.tool.shared.color, event.pos[0], event.pos[1])


def picker_on_release(session: EditSession, event: PointerEvent) -> None:
    if not event.is_primary:
        return
    x, y = event.pos
    buffer = session.buffer
    if 0 < x < buffer.width and 0 < y < buffer.height:
        session.tool.shared.set_color(buffer.get(x, y))


def _clamp_to_canvas(session: EditSession, point: Point) -> Point:
    buffer = session.buffer
    return (
        max(0, min(buffer.width, point[0])),
        max(0, min(buffer.height, point[1])),
    )


def selection_on_press(session: EditSession, event: PointerEvent) -> None:
    if not event.is_primary:
        return
    selection = session.tool.selection
    if selection.present and selection.contains(event.pos):
        selection.drag_from = event.pos
        selection.drag_to = event.pos
    else:
        selection.begin = _clamp_to_canvas(session, event.pos)
        selection.end = None


def selection_on_release(session: EditSession, event: PointerEvent) -> None:
    if not event.is_primary:
        return
    selection = session.tool.selection
    if selection.dragging:
        selection.drag_to = event.pos
        area = selection.area()
        if area is not None:
            x, y, width, height = area
            move_x = selection.drag_to[0] - selection.drag_from[0]
            move_y = selection.drag_to[1] - selection.drag_from[1]
            raster.copy_region(
                session.buffer,
                (x, y),
                (width, height),
                (x + move_x, y + move_y),
                not event.shift,
                session.background,
            )
    elif session.input.is_dragging:
        if selection.present:
            session.claim_selection(True)
        return
    selection.clear()
    session.claim_selection(False)


def selection_on_drag(session: EditSession, event: PointerEvent) -> None:
    if not session.input.holding_primary:
        return
    selection = session.tool.selection
    if selection.dragging:
        selection.drag_to = event.pos
    elif session.input.is_holding:
        selection.end = _clamp_to_canvas(session, event.pos)


_DRAWER = ToolHandlers(on_press=drawer_on_press, on_release=drawer_on_release, on_drag=drawer_on_drag)

HANDLERS: Dict[ToolKind, ToolHandlers] = {
    ToolKind.SELECTION: ToolHandlers(
        on_press=selection_on_press,
        on_release=selection_on_release,
        on_drag=selection_on_drag,
    ),
    ToolKind.PENCIL: _DRAWER,
    ToolKind.BRUSH: _DRAWER,
    ToolKind.FILL: ToolHandlers(on_release=fill_on_release),
    ToolKind.PICKER: ToolHandlers(on_release=picker_on_release),
    ToolKind.FIGURE: ToolHandlers(
        on_press=drawer_on_press,
        on_release=figure_on_release,
        on_drag=figure_on_drag,
    ),
}


def handlers_for(kind: ToolKind) -> ToolHandlers:
    return HANDLERS[kind]
