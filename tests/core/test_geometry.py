import pytest
from gridtrace.core.geometry import (
    BoundingBox,
    Line,
    Rect,
    clamp,
    col_line,
    col_lines,
    row_rect,
    row_rects,
    span_box,
)


@pytest.mark.parametrize(
    "start, end",
    [
        ((100, 100), (300, 250)),
        ((300, 250), (100, 100)),
        ((300, 100), (100, 250)),
        ((100, 250), (300, 100)),
    ],
)
def test_span_box_any_direction(start, end):
    assert span_box(start, end) == BoundingBox(100, 100, 200, 150)


def test_clamp():
    assert clamp(0, 1, 250) == 1
    assert clamp(300, 1, 250) == 250
    assert clamp(7, 1, 250) == 7


def test_rows_are_bottom_up():
    box = BoundingBox(0, 0, 200, 100)
    assert row_rect(box, 4, 0) == Rect(0, 75, 200, 25)
    assert row_rect(box, 4, 3) == Rect(0, 0, 200, 25)


def test_rows_tile_the_box():
    box = BoundingBox(10, 20, 90, 60)
    rects = row_rects(box, 3)
    assert len(rects) == 3
    assert sum(r.height for r in rects) == pytest.approx(60)
    assert min(r.y for r in rects) == pytest.approx(0)


def test_columns_are_right_to_left():
    box = BoundingBox(0, 0, 200, 100)
    assert col_line(box, 4, 0) == Line(200, -10, 200, 110)
    assert col_line(box, 4, 1).x0 == pytest.approx(150)
    assert col_line(box, 4, 4).x0 == pytest.approx(0)


def test_column_count_includes_both_borders():
    box = BoundingBox(0, 0, 100, 10)
    lines = col_lines(box, 5, overhang=0)
    assert len(lines) == 6
    assert [ln.x0 for ln in lines] == pytest.approx([100, 80, 60, 40, 20, 0])
    assert lines[0].y0 == 0 and lines[0].y1 == 10


def test_zero_size_box():
    box = BoundingBox(5, 5, 0, 0)
    assert row_rect(box, 5, 2) == Rect(0, 0, 0, 0)
    assert col_line(box, 5, 3) == Line(0, -10, 0, 10)
    assert len(row_rects(box, 5)) == 5
