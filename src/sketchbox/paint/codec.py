from __future__ import annotations

import io
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import pygame
from PIL import Image

from sketchbox.paint.pixels import PixelBuffer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"


class ImageType(Enum):
    PNG = "png"
    JPEG = "jpg"
    UNKNOWN = "unknown"


def sniff_bytes(header: bytes) -> ImageType:
    if header.startswith(JPEG_MAGIC):
        return ImageType.JPEG
    if header.startswith(PNG_MAGIC):
        return ImageType.PNG
    return ImageType.UNKNOWN


def sniff_image_type(path: Optional[PathLike]) -> ImageType:
    if not path:
        return ImageType.UNKNOWN
    try:
        with open(path, "rb") as handle:
            header = handle.read(len(PNG_MAGIC))
    except OSError:
        return ImageType.UNKNOWN
    return sniff_bytes(header)


def type_from_suffix(path: PathLike) -> ImageType:
    suffix = Path(path).suffix.lower()
    if suffix == ".png":
        return ImageType.PNG
    if suffix in {".jpg", ".jpeg"}:
        return ImageType.JPEG
    return ImageType.UNKNOWN


def to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.frombytes("RGB", buffer.size, buffer.to_bytes("RGB"))


def encode(
    buffer: PixelBuffer,
    image_type: ImageType,
    *,
    png_compression: int = 4,
    jpeg_quality: int = 90,
) -> bytes:
    if image_type is ImageType.UNKNOWN:
        raise ValueError("cannot encode an unknown image type")
    image = to_image(buffer)
    out = io.BytesIO()
    if image_type is ImageType.PNG:
        image.save(out, format="PNG", compress_level=max(0, min(9, png_compression)))
    else:
        image.save(out, format="JPEG", quality=max(1, min(100, jpeg_quality)))
    return out.getvalue()


def save(
    buffer: PixelBuffer,
    path: PathLike,
    image_type: ImageType,
    *,
    png_compression: int = 4,
    jpeg_quality: int = 90,
) -> bool:
    if image_type is ImageType.UNKNOWN:
        logger.warning("refusing to save %s: unknown image type", path)
        return False
    path = Path(path)
    data = encode(buffer, image_type, png_compression=png_compression, jpeg_quality=jpeg_quality)
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    try:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
    except OSError:
        logger.warning("failed to save image to %s", path, exc_info=True)
        return False
    return True


def _composite(image: Image.Image, background: Optional[int]) -> Image.Image:
    rgba = image.convert("RGBA")
    if background is None:
        return rgba.convert("RGB")
    fill = (
        (background >> 16) & 0xFF,
        (background >> 8) & 0xFF,
        background & 0xFF,
        0xFF,
    )
    base = Image.new("RGBA", rgba.size, fill)
    return Image.alpha_composite(base, rgba).convert("RGB")


def decode(data: bytes, background: Optional[int] = None) -> Optional[PixelBuffer]:
    """Decode PNG/JPEG bytes; transparent pixels are composited over ``background``."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            rgb = _composite(image, background)
    except (OSError, ValueError):
        logger.warning("failed to decode image data", exc_info=True)
        return None
    surface = pygame.image.frombytes(rgb.tobytes(), rgb.size, "RGB")
    return PixelBuffer.from_surface(surface)


def load(path: PathLike, background: Optional[int] = None) -> Optional[PixelBuffer]:
    try:
        data = Path(path).read_bytes()
    except OSError:
        logger.warning("failed to read %s", path, exc_info=True)
        return None
    return decode(data, background)
