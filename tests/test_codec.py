import io

import pytest
from PIL import Image

from sketchbox.paint import codec
from sketchbox.paint.codec import ImageType
from sketchbox.paint.pixels import PixelBuffer

WHITE = 0xFFFFFFFF
RED = 0xFFFF0000
GREEN = 0xFF00FF00


def test_sniff_bytes():
    assert codec.sniff_bytes(b"\x89PNG\r\n\x1a\n....") is ImageType.PNG
    assert codec.sniff_bytes(b"\xff\xd8\xff\xe0") is ImageType.JPEG
    assert codec.sniff_bytes(b"GIF89a") is ImageType.UNKNOWN
    assert codec.sniff_bytes(b"") is ImageType.UNKNOWN


def test_sniff_image_type_handles_missing_files(tmp_path):
    assert codec.sniff_image_type(None) is ImageType.UNKNOWN
    assert codec.sniff_image_type(tmp_path / "nope.png") is ImageType.UNKNOWN


def test_type_from_suffix():
    assert codec.type_from_suffix("a.PNG") is ImageType.PNG
    assert codec.type_from_suffix("a.jpeg") is ImageType.JPEG
    assert codec.type_from_suffix("a.jpg") is ImageType.JPEG
    assert codec.type_from_suffix("a.bmp") is ImageType.UNKNOWN


def test_png_round_trip_is_lossless(tmp_path):
    buffer = PixelBuffer(6, 4, WHITE)
    buffer.set(2, 3, RED)
    buffer.set(5, 0, 0xFF123456)
    path = tmp_path / "image.png"

    assert codec.save(buffer, path, ImageType.PNG, png_compression=9)
    assert codec.sniff_image_type(path) is ImageType.PNG
    assert codec.load(path) == buffer
    assert not (tmp_path / ".image.tmp.png").exists()


def test_jpeg_save_keeps_size(tmp_path):
    buffer = PixelBuffer(8, 8, RED)
    path = tmp_path / "image.jpg"
    assert codec.save(buffer, path, ImageType.JPEG, jpeg_quality=95)
    assert codec.sniff_image_type(path) is ImageType.JPEG
    loaded = codec.load(path)
    assert loaded.size == (8, 8)
    assert (loaded.get(4, 4) >> 16) & 0xFF > 0xF0


def test_save_unknown_type_writes_nothing(tmp_path):
    buffer = PixelBuffer(2, 2, WHITE)
    path = tmp_path / "image.bmp"
    assert not codec.save(buffer, path, ImageType.UNKNOWN)
    assert not path.exists()


def test_save_into_missing_directory_fails(tmp_path):
    buffer = PixelBuffer(2, 2, WHITE)
    assert not codec.save(buffer, tmp_path / "missing" / "a.png", ImageType.PNG)


def test_decode_garbage_returns_none():
    assert codec.decode(b"not-an-image") is None


def test_load_missing_file_returns_none(tmp_path):
    assert codec.load(tmp_path / "missing.png") is None


def _rgba_png():
    image = Image.new("RGBA", (2, 1), (0, 0, 0, 0))
    image.putpixel((1, 0), (255, 0, 0, 255))
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


def test_decode_composites_transparency_over_background():
    buffer = codec.decode(_rgba_png(), background=GREEN)
    assert buffer.get(0, 0) == GREEN
    assert buffer.get(1, 0) == RED


def test_decode_without_background_drops_alpha():
    buffer = codec.decode(_rgba_png())
    assert buffer.get(0, 0) == 0xFF000000
    assert buffer.get(1, 0) == RED


def test_encode_rejects_unknown_type():
    buffer = PixelBuffer(1, 1, WHITE)
    with pytest.raises(ValueError):
        codec.encode(buffer, ImageType.UNKNOWN)
