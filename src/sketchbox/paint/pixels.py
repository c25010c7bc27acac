from __future__ import annotations

from typing import Optional, Tuple

import pygame


Point = Tuple[int, int]

OPAQUE = 0xFF000000


def argb_to_color(argb: int) -> pygame.Color:
    return pygame.Color(
        (argb >> 16) & 0xFF,
        (argb >> 8) & 0xFF,
        argb & 0xFF,
        (argb >> 24) & 0xFF,
    )


def color_to_argb(color: pygame.Color) -> int:
    return (color.a << 24) | (color.r << 16) | (color.g << 8) | color.b


def blend(fg: int, bg: int, alpha: int) -> int:
    """Composite ``fg`` over ``bg`` with coverage ``alpha`` in [0, 255].

    The result is always opaque; the canvas has no transparency.
    """
    alpha = max(0, min(255, int(alpha)))
    a = alpha + 1
    inv = 256 - alpha
    red = (a * ((fg >> 16) & 0xFF) + inv * ((bg >> 16) & 0xFF)) >> 8
    green = (a * ((fg >> 8) & 0xFF) + inv * ((bg >> 8) & 0xFF)) >> 8
    blue = (a * (fg & 0xFF) + inv * (bg & 0xFF)) >> 8
    return OPAQUE | (red << 16) | (green << 8) | blue


def _new_surface(width: int, height: int) -> pygame.Surface:
    # 32 bits without SRCALPHA: pixels always read back with alpha 255.
    return pygame.Surface((width, height), 0, 32)


class PixelBuffer:
    """Canvas raster backed by a 32-bit pygame surface.

    Coordinates outside ``[0, width) x [0, height)`` are ignored by every
    mutating call, so drawing code never has to clamp its writes.
    """

    def __init__(self, width: int, height: int, background: int = OPAQUE) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        self._surface = _new_surface(width, height)
        self._surface.fill(argb_to_color(background))

    @classmethod
    def from_surface(cls, surface: pygame.Surface) -> "PixelBuffer":
        width, height = surface.get_size()
        buffer = cls.__new__(cls)
        buffer._surface = _new_surface(width, height)
        buffer._surface.blit(surface, (0, 0))
        return buffer

    @property
    def surface(self) -> pygame.Surface:
        return self._surface

    @property
    def width(self) -> int:
        return self._surface.get_width()

    @property
    def height(self) -> int:
        return self._surface.get_height()

    @property
    def size(self) -> Tuple[int, int]:
        return self._surface.get_size()

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[int]:
        if not self.contains(x, y):
            return None
        return color_to_argb(self._surface.get_at((x, y)))

    def set(self, x: int, y: int, color: int) -> bool:
        if not self.contains(x, y):
            return False
        self._surface.set_at((x, y), argb_to_color(color))
        return True

    def fill(self, color: int) -> None:
        self._surface.fill(argb_to_color(color))

    def fill_rect(self, x: int, y: int, width: int, height: int, color: int) -> None:
        if width <= 0 or height <= 0:
            return
        # Surface.fill clips the rectangle to the surface.
        self._surface.fill(argb_to_color(color), pygame.Rect(x, y, width, height))

    def clone(self) -> "PixelBuffer":
        buffer = PixelBuffer.__new__(PixelBuffer)
        buffer._surface = self._surface.copy()
        return buffer

    def assign(self, other: "PixelBuffer") -> None:
        """Replace this buffer's pixels (and size) with a copy of ``other``."""
        self._surface = other._surface.copy()

    def resized(self, width: int, height: int, background: int) -> "PixelBuffer":
        buffer = PixelBuffer(width, height, background)
        buffer._surface.blit(self._surface, (0, 0))
        return buffer

    def crop(self, x: int, y: int, width: int, height: int) -> Optional["PixelBuffer"]:
        rect = pygame.Rect(x, y, width, height).clip(self._surface.get_rect())
        if rect.width <= 0 or rect.height <= 0:
            return None
        buffer = PixelBuffer.__new__(PixelBuffer)
        buffer._surface = self._surface.subsurface(rect).copy()
        return buffer

    def to_bytes(self, fmt: str = "ARGB") -> bytes:
        """Raw row-major pixel bytes, e.g. ``ARGB``, ``RGBA`` or ``RGB``."""
        return pygame.image.tobytes(self._surface, fmt)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and self.to_bytes() == other.to_bytes()

    __hash__ = None  # type: ignore[assignment]
