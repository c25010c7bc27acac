from sketchbox.paint import raster
from sketchbox.paint.pixels import PixelBuffer

WHITE = 0xFFFFFFFF
BLACK = 0xFF000000
RED = 0xFFFF0000


def _colored(buffer, color):
    return {
        (x, y)
        for x in range(buffer.width)
        for y in range(buffer.height)
        if buffer.get(x, y) == color
    }


def test_line_includes_both_endpoints():
    assert raster.line_points((0, 0), (3, 0)) == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert raster.line_points((0, 0), (3, 3)) == [(0, 0), (1, 1), (2, 2), (3, 3)]
    assert raster.line_points((4, 4), (4, 4)) == [(4, 4)]


def test_line_covers_same_pixels_in_both_directions():
    pairs = [((0, 0), (7, 3)), ((2, 9), (5, 0)), ((-3, 4), (6, -2)), ((1, 1), (1, 8))]
    for start, end in pairs:
        forward = raster.line_points(start, end)
        backward = raster.line_points(end, start)
        assert set(forward) == set(backward)
        assert forward[0] == start and forward[-1] == end
        assert backward[0] == end and backward[-1] == start


def test_line_calls_stamp_per_point():
    seen = []
    raster.line((0, 0), (2, 0), seen.append)
    assert seen == [(0, 0), (1, 0), (2, 0)]


def test_flood_fill_whole_canvas():
    buffer = PixelBuffer(5, 5, WHITE)
    assert raster.flood_fill(buffer, BLACK, 2, 2) == 25
    assert len(_colored(buffer, BLACK)) == 25


def test_flood_fill_same_color_is_noop():
    buffer = PixelBuffer(5, 5, WHITE)
    before = buffer.clone()
    assert raster.flood_fill(buffer, WHITE, 0, 0) == 0
    assert buffer == before


def test_flood_fill_outside_canvas_is_noop():
    buffer = PixelBuffer(5, 5, WHITE)
    assert raster.flood_fill(buffer, BLACK, 5, 0) == 0
    assert raster.flood_fill(buffer, BLACK, -1, 2) == 0
    assert _colored(buffer, BLACK) == set()


def test_flood_fill_stops_at_boundary():
    buffer = PixelBuffer(5, 5, WHITE)
    for y in range(5):
        buffer.set(2, y, BLACK)
    assert raster.flood_fill(buffer, RED, 0, 0) == 10
    assert _colored(buffer, RED) == {(x, y) for x in range(2) for y in range(5)}
    assert buffer.get(4, 4) == WHITE


def test_flood_fill_is_four_connected():
    buffer = PixelBuffer(3, 3, BLACK)
    buffer.set(0, 0, WHITE)
    buffer.set(1, 1, WHITE)
    assert raster.flood_fill(buffer, RED, 0, 0) == 1
    assert buffer.get(1, 1) == WHITE


def test_filled_rect_with_negative_dims():
    buffer = PixelBuffer(6, 6, WHITE)
    raster.filled_rect(buffer, (4, 4), (-2, -2), BLACK)
    assert _colored(buffer, BLACK) == {(2, 2), (2, 3), (3, 2), (3, 3)}


def test_rect_outline_leaves_interior():
    buffer = PixelBuffer(8, 8, WHITE)
    raster.rect_outline(buffer, (1, 1), (6, 6), BLACK, 1)
    for corner in [(1, 1), (6, 1), (1, 6), (6, 6)]:
        assert buffer.get(*corner) == BLACK
    assert buffer.get(3, 3) == WHITE
    assert buffer.get(7, 7) == WHITE
    assert buffer.get(0, 0) == WHITE


def test_filled_triangle_grows_per_column():
    buffer = PixelBuffer(6, 6, WHITE)
    raster.filled_triangle(buffer, (0, 0), (4, 4), BLACK)
    assert buffer.get(0, 0) == WHITE
    assert buffer.get(1, 0) == BLACK
    assert buffer.get(1, 1) == WHITE
    assert {(3, 0), (3, 1), (3, 2)} <= _colored(buffer, BLACK)
    assert buffer.get(3, 3) == WHITE


def test_triangle_outline_apex_and_base():
    seen = set()
    raster.triangle_outline((0, 0), (4, 4), seen.add)
    assert (2, 0) in seen
    assert (0, 4) in seen and (4, 4) in seen
    assert {(x, 4) for x in range(5)} <= seen


def test_circle_stamp_sizes():
    buffer = PixelBuffer(10, 10, WHITE)
    raster.circle_stamp(buffer, (5, 5), 0, BLACK, raster.hard_fill_alpha)
    assert _colored(buffer, BLACK) == set()
    raster.circle_stamp(buffer, (5, 5), 1, BLACK, raster.hard_fill_alpha)
    assert _colored(buffer, BLACK) == {(5, 5)}


def test_hard_circle_fills_center_not_corners():
    buffer = PixelBuffer(12, 12, WHITE)
    raster.circle_stamp(buffer, (6, 6), 6, BLACK, raster.hard_fill_alpha)
    assert buffer.get(6, 6) == BLACK
    assert buffer.get(3, 3) == WHITE
    assert buffer.get(0, 0) == WHITE


def test_outline_circle_keeps_center():
    buffer = PixelBuffer(20, 20, WHITE)
    raster.circle_stamp(buffer, (10, 10), 10, BLACK, raster.hard_outline_alpha)
    assert buffer.get(10, 10) == WHITE
    assert len(_colored(buffer, BLACK)) > 0


def test_circle_stamp_clips_at_edges():
    buffer = PixelBuffer(4, 4, WHITE)
    raster.circle_stamp(buffer, (0, 0), 6, BLACK, raster.hard_fill_alpha)
    assert buffer.get(0, 0) == BLACK


def test_soft_alpha_fades_out():
    assert raster.soft_alpha(5.0, (0.0, 0.0)) == 0xFF
    assert raster.soft_alpha(5.0, (5.0, 0.0)) == 0
    assert raster.soft_alpha(5.0, (1.0, 0.0)) < 0xFF


def test_copy_region_moves_and_clears_source():
    buffer = PixelBuffer(10, 10, WHITE)
    buffer.fill_rect(1, 1, 2, 2, RED)
    raster.copy_region(buffer, (1, 1), (2, 2), (5, 5), True, WHITE)
    assert _colored(buffer, RED) == {(5, 5), (5, 6), (6, 5), (6, 6)}


def test_copy_region_keeps_source_when_not_clearing():
    buffer = PixelBuffer(10, 10, WHITE)
    buffer.fill_rect(1, 1, 2, 2, RED)
    raster.copy_region(buffer, (1, 1), (2, 2), (5, 5), False, WHITE)
    assert buffer.get(1, 1) == RED
    assert buffer.get(6, 6) == RED


def test_copy_region_overlapping_does_not_smear():
    buffer = PixelBuffer(6, 1, WHITE)
    colors = [0xFF000010, 0xFF000020, 0xFF000030, 0xFF000040]
    for x, color in enumerate(colors):
        buffer.set(x, 0, color)
    raster.copy_region(buffer, (0, 0), (4, 1), (1, 0), False, WHITE)
    assert [buffer.get(x, 0) for x in range(1, 5)] == colors


def test_copy_region_outside_canvas_is_noop():
    buffer = PixelBuffer(4, 4, WHITE)
    before = buffer.clone()
    raster.copy_region(buffer, (10, 10), (2, 2), (0, 0), True, BLACK)
    assert buffer == before


def _pattern(x, y):
    return 0xFF100000 | (x << 8) | y


def test_copy_region_overlapping_move_clears_only_uncovered_source():
    buffer = PixelBuffer(8, 6, WHITE)
    for x in range(8):
        for y in range(6):
            buffer.set(x, y, _pattern(x, y))
    before = buffer.clone()

    raster.copy_region(buffer, (1, 1), (3, 3), (3, 1), True, WHITE)

    for x in range(8):
        for y in range(6):
            if 3 <= x <= 5 and 1 <= y <= 3:
                expected = _pattern(x - 2, y)
            elif 1 <= x <= 2 and 1 <= y <= 3:
                expected = WHITE
            else:
                expected = before.get(x, y)
            assert buffer.get(x, y) == expected, (x, y)
