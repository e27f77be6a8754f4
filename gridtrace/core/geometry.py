"""
Pure grid geometry.

Rows are indexed from the bottom of the bounding box upward, columns
from the right edge leftward, following the bottom-up, right-to-left
convention of knitting and cross-stitch charts. All results are in
coordinates local to the grid's origin (its top-left corner), so the
scene can move a grid by moving its group alone.
"""
from dataclasses import dataclass
from typing import NamedTuple, Tuple

# Column divider lines stick out this far above and below the box.
COLUMN_OVERHANG = 10.0


@dataclass
class BoundingBox:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float


class Line(NamedTuple):
    x0: float
    y0: float
    x1: float
    y1: float


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def span_box(
    start: Tuple[float, float], end: Tuple[float, float]
) -> BoundingBox:
    """
    Returns the axis-aligned box spanning two corner points, whichever
    direction the drag went in.
    """
    x = min(start[0], end[0])
    y = min(start[1], end[1])
    return BoundingBox(
        x=x,
        y=y,
        width=abs(end[0] - start[0]),
        height=abs(end[1] - start[1]),
    )


def row_height(bounds: BoundingBox, row_count: int) -> float:
    return bounds.height / max(row_count, 1)


def col_width(bounds: BoundingBox, col_count: int) -> float:
    return bounds.width / max(col_count, 1)


def row_rect(bounds: BoundingBox, row_count: int, i: int) -> Rect:
    """The horizontal band of row `i`, counted from the bottom."""
    h = row_height(bounds, row_count)
    return Rect(0.0, bounds.height - (i + 1) * h, bounds.width, h)


def col_line(
    bounds: BoundingBox,
    col_count: int,
    j: int,
    overhang: float = COLUMN_OVERHANG,
) -> Line:
    """
    The vertical divider `j` in 0..col_count, counted from the right
    edge. Divider 0 is the right border, divider col_count the left one.
    """
    x = bounds.width - j * col_width(bounds, col_count)
    return Line(x, -overhang, x, bounds.height + overhang)


def row_rects(bounds: BoundingBox, row_count: int) -> Tuple[Rect, ...]:
    return tuple(row_rect(bounds, row_count, i) for i in range(row_count))


def col_lines(
    bounds: BoundingBox, col_count: int, overhang: float = COLUMN_OVERHANG
) -> Tuple[Line, ...]:
    return tuple(
        col_line(bounds, col_count, j, overhang)
        for j in range(col_count + 1)
    )
