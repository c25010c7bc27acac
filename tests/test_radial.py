import math

from sketchbox.paint.radial import FIGURE_ITEMS, TOOL_ITEMS, RadialMenu, polar_angle
from sketchbox.paint.tools import FigureShape, ToolContext, ToolKind


def _at(center, degrees, radius=100):
    angle = math.radians(degrees)
    return (
        int(round(center[0] + radius * math.cos(angle))),
        int(round(center[1] - radius * math.sin(angle))),
    )


def test_polar_angle_grows_counter_clockwise_on_screen():
    assert polar_angle(10, 0) == 0
    assert polar_angle(0, -10) == 90
    assert polar_angle(-10, 0) == 180
    assert polar_angle(0, 10) == 270
    assert 359 < polar_angle(100, 1) < 360


def test_inactive_menu_hits_nothing():
    menu = RadialMenu()
    assert menu.hit_test((500, 500)) is None


def test_hit_test_ignores_center_and_rings():
    menu = RadialMenu()
    menu.activate((300, 300), ToolContext())
    assert menu.hit_test((300, 300)) is None
    assert menu.hit_test((310, 300)) is None
    assert menu.hit_test((300 + 300, 300)) is None


def test_hit_test_maps_angles_to_items():
    center = (300, 300)
    menu = RadialMenu()
    menu.activate(center, ToolContext())
    assert menu.items == list(TOOL_ITEMS)
    assert menu.hit_test(_at(center, 0)) == 0
    assert menu.hit_test(_at(center, 90)) == 1
    assert menu.hit_test(_at(center, 180)) == 3
    assert menu.hit_test(_at(center, 270)) == 4
    assert menu.hit_test((center[0] + 100, center[1] + 1)) == len(TOOL_ITEMS) - 1


def test_figure_tool_gets_figure_items():
    tool = ToolContext(kind=ToolKind.FIGURE)
    menu = RadialMenu()
    menu.activate((0, 0), tool)
    assert menu.items == list(FIGURE_ITEMS)


def test_deactivate_runs_selected_item():
    tool = ToolContext(kind=ToolKind.FIGURE)
    menu = RadialMenu()
    center = (300, 300)

    menu.activate(center, tool)
    assert menu.deactivate(_at(center, 90), tool)
    assert tool.figure.shape is FigureShape.RECTANGLE
    assert not menu.active

    menu.activate(center, tool)
    assert menu.deactivate(_at(center, 250), tool)
    assert tool.figure.filled

    menu.activate(center, tool)
    menu.deactivate(_at(center, 300), tool)
    assert tool.kind is ToolKind.PENCIL


def test_deactivate_outside_menu_does_nothing():
    tool = ToolContext()
    menu = RadialMenu()
    menu.activate((300, 300), tool)
    assert not menu.deactivate((300, 300), tool)
    assert tool.kind is ToolKind.PENCIL
    assert not menu.active
    assert menu.items == []
