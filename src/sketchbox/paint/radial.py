from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from sketchbox.paint.pixels import Point
from sketchbox.paint.tools import FigureShape, ToolContext, ToolKind

INNER_RADIUS = 40
OUTER_RADIUS = 225


class Icon(Enum):
    SELECT = "select"
    PENCIL = "pencil"
    FILL = "fill"
    PICKER = "picker"
    BRUSH = "brush"
    FIGURE = "figure"
    CIRCLE = "circle"
    RECTANGLE = "rect"
    TRIANGLE = "triangle"
    TOGGLE_FILL = "toggle-fill"


@dataclass(frozen=True)
class MenuItem:
    icon: Icon
    on_select: Callable[[ToolContext], None]
    label: str = ""


def _switch_to(kind: ToolKind) -> Callable[[ToolContext], None]:
    def _select(tool: ToolContext) -> None:
        tool.set_tool(kind)
    return _select


def _set_shape(shape: FigureShape) -> Callable[[ToolContext], None]:
    def _select(tool: ToolContext) -> None:
        if tool.figure is not None:
            tool.figure.shape = shape
    return _select


def _toggle_fill(tool: ToolContext) -> None:
    if tool.figure is not None:
        tool.figure.filled = not tool.figure.filled


TOOL_ITEMS = (
    MenuItem(Icon.SELECT, _switch_to(ToolKind.SELECTION), "select"),
    MenuItem(Icon.PENCIL, _switch_to(ToolKind.PENCIL), "pencil"),
    MenuItem(Icon.FILL, _switch_to(ToolKind.FILL), "fill"),
    MenuItem(Icon.PICKER, _switch_to(ToolKind.PICKER), "picker"),
    MenuItem(Icon.BRUSH, _switch_to(ToolKind.BRUSH), "brush"),
    MenuItem(Icon.FIGURE, _switch_to(ToolKind.FIGURE), "figure"),
)

FIGURE_ITEMS = (
    MenuItem(Icon.CIRCLE, _set_shape(FigureShape.CIRCLE), "circle"),
    MenuItem(Icon.RECTANGLE, _set_shape(FigureShape.RECTANGLE), "rect"),
    MenuItem(Icon.TRIANGLE, _set_shape(FigureShape.TRIANGLE), "triangle"),
    MenuItem(Icon.TOGGLE_FILL, _toggle_fill, "fill"),
    MenuItem(Icon.PENCIL, _switch_to(ToolKind.PENCIL), "pencil"),
)


def polar_angle(dx: int, dy: int) -> float:
    """Degrees in ``[0, 360)``, 0 along +x and growing towards screen up."""
    angle = math.degrees(math.atan2(-dy, dx))
    return angle % 360.0


@dataclass
class RadialMenu:
    inner_radius: float = INNER_RADIUS
    outer_radius: float = OUTER_RADIUS
    active: bool = False
    center: Point = (0, 0)
    items: List[MenuItem] = field(default_factory=list)

    def activate(self, center: Point, tool: ToolContext) -> None:
        source = FIGURE_ITEMS if tool.kind is ToolKind.FIGURE else TOOL_ITEMS
        self.items = list(source)
        self.center = center
        self.active = True

    def hit_test(self, pointer: Point) -> Optional[int]:
        if not self.active or not self.items:
            return None
        dx = pointer[0] - self.center[0]
        dy = pointer[1] - self.center[1]
        if dx == 0 and dy == 0:
            return None
        radius = math.hypot(dx, dy)
        if radius < self.inner_radius or radius > self.outer_radius:
            return None
        segment = 360.0 / len(self.items)
        index = int(polar_angle(dx, dy) // segment)
        return min(index, len(self.items) - 1)

    def deactivate(self, pointer: Point, tool: ToolContext) -> bool:
        index = self.hit_test(pointer)
        selected = self.items[index] if index is not None else None
        self.active = False
        self.items = []
        if selected is None:
            return False
        selected.on_select(tool)
        return True
