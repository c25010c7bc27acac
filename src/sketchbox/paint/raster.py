from __future__ import annotations

import math
from collections import deque
from typing import Callable, Iterator, List, Tuple

import pygame

from sketchbox.paint.pixels import PixelBuffer, Point, argb_to_color, blend


Stamp = Callable[[Point], None]
# (radius, offset of the pixel from the circle center) -> coverage 0..255
AlphaFn = Callable[[float, Tuple[float, float]], int]

_NEIGHBOURS = ((1, 0), (0, 1), (0, -1), (-1, 0))


def brush_ease(value: float) -> float:
    return value if value == 1.0 else 1 - math.pow(2, -10 * value)


def soft_alpha(radius: float, offset: Tuple[float, float]) -> int:
    if radius <= 0:
        return 0xFF
    distance = math.hypot(offset[0], offset[1])
    return int((1.0 - brush_ease(distance / radius)) * 0xFF)


def hard_fill_alpha(radius: float, offset: Tuple[float, float]) -> int:
    return 0xFF


def hard_outline_alpha(radius: float, offset: Tuple[float, float]) -> int:
    if radius <= 0:
        return 0xFF
    distance = math.hypot(offset[0], offset[1])
    # Border thickness is a fixed share of the radius, not the line width.
    return 0xFF if distance / radius > 0.9 else 0


def _bresenham(start: Point, end: Point) -> Iterator[Point]:
    x, y = start
    dx = abs(end[0] - x)
    sx = 1 if x < end[0] else -1
    dy = -abs(end[1] - y)
    sy = 1 if y < end[1] else -1
    error = dx + dy
    while True:
        yield (x, y)
        if (x, y) == end:
            return
        e2 = 2 * error
        if e2 >= dy:
            if x == end[0]:
                return
            error += dy
            x += sx
        if e2 <= dx:
            if y == end[1]:
                return
            error += dx
            y += sy


def line_points(start: Point, end: Point) -> List[Point]:
    # Walk in a canonical direction so A->B and B->A cover the same pixels.
    if end < start:
        points = list(_bresenham(end, start))
        points.reverse()
        return points
    return list(_bresenham(start, end))


def line(start: Point, end: Point, stamp: Stamp) -> None:
    for point in line_points(start, end):
        stamp(point)


def _span(origin: int, extent: int) -> Tuple[int, int]:
    if extent < 0:
        return origin + extent, -extent
    return origin, extent


def filled_rect(buffer: PixelBuffer, corner: Point, dims: Point, color: int) -> None:
    x, width = _span(corner[0], dims[0])
    y, height = _span(corner[1], dims[1])
    buffer.fill_rect(x, y, width, height, color)


def rect_outline(buffer: PixelBuffer, corner: Point, dims: Point, color: int, width: int) -> None:
    cap_x = width if dims[0] < 0 else 0
    cap_y = width if dims[1] < 0 else 0
    near = (corner[0] - cap_x, corner[1] - cap_y)
    far = (corner[0] + dims[0] + cap_x, corner[1] + dims[1] + cap_y)
    filled_rect(buffer, near, (dims[0] + cap_x, width), color)
    filled_rect(buffer, near, (width, dims[1] + cap_y), color)
    filled_rect(buffer, far, (-dims[0] - cap_x, -width), color)
    filled_rect(buffer, far, (-width, -dims[1] - cap_y), color)
    if dims[0] < 0 and dims[1] < 0:
        filled_rect(buffer, near, (width, width), color)
        filled_rect(buffer, far, (-width, -width), color)


def filled_triangle(buffer: PixelBuffer, corner: Point, dims: Point, color: int) -> None:
    """Right triangle with its legs along ``dims``, not a general polygon."""
    columns = abs(dims[0])
    rows = abs(dims[1])
    step_x = 1 if dims[0] > 0 else -1
    step_y = 1 if dims[1] > 0 else -1
    for i in range(columns):
        height = int(round(rows * (i / columns)))
        x = corner[0] + step_x * i
        for j in range(height):
            buffer.set(x, corner[1] + step_y * j, color)


def triangle_outline(corner: Point, dims: Point, stamp: Stamp) -> None:
    apex = (corner[0] + int(dims[0] / 2), corner[1])
    left = (corner[0], corner[1] + dims[1])
    right = (corner[0] + dims[0], corner[1] + dims[1])
    line(apex, left, stamp)
    line(left, right, stamp)
    line(apex, right, stamp)


def circle_stamp(
    buffer: PixelBuffer,
    center: Point,
    diameter: int,
    color: int,
    alpha_fn: AlphaFn,
) -> None:
    if diameter <= 0:
        return
    if diameter == 1:
        buffer.set(center[0], center[1], color)
        return
    radius = diameter / 2.0
    radius_sq = radius * radius
    left = center[0] - int(radius)
    top = center[1] - int(radius)
    for dx in range(diameter):
        for dy in range(diameter):
            ox = dx - radius
            oy = dy - radius
            if ox * ox + oy * oy > radius_sq:
                continue
            x = left + dx
            y = top + dy
            background = buffer.get(x, y)
            if background is None:
                continue
            buffer.set(x, y, blend(color, background, alpha_fn(radius, (ox, oy))))


def flood_fill(buffer: PixelBuffer, color: int, x: int, y: int) -> int:
    """Recolor the 4-connected region around ``(x, y)``; returns pixels changed."""
    if not buffer.contains(x, y):
        return 0
    surface = buffer.surface
    width, height = surface.get_size()
    red_mask, green_mask, blue_mask, _ = surface.get_masks()
    rgb_mask = red_mask | green_mask | blue_mask
    replacement = surface.map_rgb(argb_to_color(color))
    pixels = pygame.PixelArray(surface)
    try:
        boundary = pixels[x, y] & rgb_mask
        if boundary == replacement & rgb_mask:
            return 0
        pixels[x, y] = replacement
        queue = deque([(x, y)])
        filled = 1
        while queue:
            cx, cy = queue.popleft()
            for step_x, step_y in _NEIGHBOURS:
                nx = cx + step_x
                ny = cy + step_y
                if nx < 0 or ny < 0 or nx >= width or ny >= height:
                    continue
                if pixels[nx, ny] & rgb_mask != boundary:
                    continue
                pixels[nx, ny] = replacement
                queue.append((nx, ny))
                filled += 1
    finally:
        pixels.close()
    return filled


def copy_region(
    buffer: PixelBuffer,
    source: Point,
    dims: Point,
    dest: Point,
    clear_source: bool,
    background: int,
) -> None:
    x, width = _span(source[0], dims[0])
    y, height = _span(source[1], dims[1])
    area = pygame.Rect(x, y, width, height).clip(buffer.surface.get_rect())
    if area.width <= 0 or area.height <= 0:
        return
    # Stage the whole source first: source and destination may overlap.
    staged = buffer.surface.subsurface(area).copy()
    if clear_source:
        buffer.fill_rect(area.x, area.y, area.width, area.height, background)
    offset_x = dest[0] - source[0]
    offset_y = dest[1] - source[1]
    buffer.surface.blit(staged, (area.x + offset_x, area.y + offset_y))
