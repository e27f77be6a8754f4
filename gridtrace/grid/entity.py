from __future__ import annotations
import uuid
import logging
from enum import Enum
from typing import List, Optional, Tuple, Union
from blinker import Signal
from ..canvas.element import SceneElement
from ..canvas.shapes import LineShape, RectShape
from ..core import geometry
from ..core.geometry import BoundingBox
from ..core.settings import GridSettings

logger = logging.getLogger(__name__)

FRAME_DASH = (3.0, 3.0)


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class GridEntity:
    """
    One grid overlay: a bounding box subdivided into `row_count` row
    bands and `col_count + 1` column divider lines, plus a cursor
    (`selected_row`, `selected_col`) highlighting one row and one
    divider.

    The shapes live in a group element whose position is the top-left
    corner of the bounding box; dragging the group moves the grid.
    Rows count from the bottom, dividers from the right, so moving the
    cursor up increments `selected_row` and moving it left increments
    `selected_col`.

    Inputs are clamped rather than rejected. Once destroyed, every
    mutation is ignored.
    """

    def __init__(
        self,
        start_pos: Tuple[float, float],
        row_count: Optional[int] = None,
        col_count: Optional[int] = None,
        settings: Optional[GridSettings] = None,
        preview: bool = True,
    ):
        self.uid: str = str(uuid.uuid4())
        self.settings: GridSettings = settings or GridSettings()
        self.start_pos: Tuple[float, float] = (
            float(start_pos[0]),
            float(start_pos[1]),
        )
        if row_count is None:
            row_count = self.settings.default_rows
        if col_count is None:
            col_count = self.settings.default_cols
        self.row_count: int = geometry.clamp(
            int(row_count), 1, self.settings.max_rows
        )
        self.col_count: int = geometry.clamp(
            int(col_count), 1, self.settings.max_cols
        )
        self.selected_row: int = 0
        self.selected_col: int = min(1, self.col_count)
        self.is_preview: bool = preview
        self.selected: bool = False
        self.destroyed: bool = False

        self.group = SceneElement(
            self.start_pos[0],
            self.start_pos[1],
            hittable=False,
            name="grid",
            data=self,
        )
        self.frame = RectShape(
            name="grid-frame",
            stroke=self.settings.palette.grid_stroke,
            stroke_width=2.0,
            dash=FRAME_DASH,
        )
        self.group.add(self.frame)
        self.rows: List[RectShape] = []
        self.cols: List[LineShape] = []

        # Sent after any change to geometry, counts or cursor.
        self.changed = Signal()

        self._sync_shapes()
        self._layout()

    @classmethod
    def create(
        cls,
        start_pos: Tuple[float, float],
        row_count: int = 5,
        col_count: int = 5,
        settings: Optional[GridSettings] = None,
    ) -> "GridEntity":
        """Starts a preview grid with a zero-size box at `start_pos`."""
        grid = cls(start_pos, row_count, col_count, settings, preview=True)
        logger.debug(
            f"Created grid {grid.uid} at {grid.start_pos} "
            f"({grid.row_count}x{grid.col_count})"
        )
        return grid

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(
            self.group.x, self.group.y, self.frame.width, self.frame.height
        )

    @property
    def element(self) -> SceneElement:
        return self.group

    @property
    def draggable(self) -> bool:
        return self.group.draggable

    def _is_alive(self, action: str) -> bool:
        if self.destroyed:
            logger.debug(f"Ignoring {action} on destroyed grid {self.uid}")
            return False
        return True

    def resize_to(self, end_pos: Tuple[float, float]):
        """
        Spans the box between the start position and `end_pos`, so the
        user may drag in any direction.
        """
        if not self._is_alive("resize"):
            return
        box = geometry.span_box(self.start_pos, end_pos)
        self.group.set_pos(box.x, box.y)
        self.group.set_size(box.width, box.height)
        self.frame.set_size(box.width, box.height)
        self._layout()
        self.changed.send(self)

    def set_row_count(self, n: int):
        if not self._is_alive("set_row_count"):
            return
        n = geometry.clamp(int(n), 1, self.settings.max_rows)
        if n == self.row_count:
            return
        self.row_count = n
        self._sync_shapes()
        self._clamp_cursor()
        self._layout()
        self.changed.send(self)

    def set_col_count(self, n: int):
        if not self._is_alive("set_col_count"):
            return
        n = geometry.clamp(int(n), 1, self.settings.max_cols)
        if n == self.col_count:
            return
        self.col_count = n
        self._sync_shapes()
        self._clamp_cursor()
        self._layout()
        self.changed.send(self)

    def add_rows(self, n: int = 1):
        self.set_row_count(self.row_count + n)

    def remove_rows(self, n: int = 1):
        self.set_row_count(self.row_count - n)

    def add_cols(self, n: int = 1):
        self.set_col_count(self.col_count + n)

    def remove_cols(self, n: int = 1):
        self.set_col_count(self.col_count - n)

    def move_cursor(self, direction: Union[Direction, str]):
        if not self._is_alive("move_cursor"):
            return
        if not isinstance(direction, Direction):
            try:
                direction = Direction(str(direction).lower())
            except ValueError:
                logger.debug(f"Ignoring unknown direction {direction!r}")
                return

        row, col = self.selected_row, self.selected_col
        if direction is Direction.UP:
            row = min(row + 1, self.row_count - 1)
        elif direction is Direction.DOWN:
            row = max(row - 1, 0)
        elif direction is Direction.LEFT:
            col = min(col + 1, self.col_count)
        else:
            col = max(col - 1, 0)

        if (row, col) == (self.selected_row, self.selected_col):
            return
        self.selected_row, self.selected_col = row, col
        self._apply_style()
        self.changed.send(self)

    def select(self):
        if not self._is_alive("select"):
            return
        self.selected = True
        self._apply_style()

    def deselect(self):
        if not self._is_alive("deselect"):
            return
        self.selected = False
        self._apply_style()

    def commit(self):
        """Turns a preview into a regular grid."""
        if not self._is_alive("commit"):
            return
        self.is_preview = False
        self._apply_style()

    def set_draggable(self, draggable: bool):
        self.group.set_draggable(draggable)

    def destroy(self):
        if self.destroyed:
            return
        logger.debug(f"Destroying grid {self.uid}")
        self.group.destroy()
        self.rows = []
        self.cols = []
        self.destroyed = True

    def _clamp_cursor(self):
        self.selected_row = min(self.selected_row, self.row_count - 1)
        self.selected_col = min(self.selected_col, self.col_count)

    def _sync_shapes(self):
        """Adds or removes shapes to match the current counts."""
        while len(self.rows) < self.row_count:
            row = RectShape(name="grid-row", stroke_width=1.0)
            self.group.add(row)
            self.rows.append(row)
        for row in self.rows[self.row_count:]:
            row.destroy()
        del self.rows[self.row_count:]

        while len(self.cols) < self.col_count + 1:
            col = LineShape(name="grid-col", stroke_width=1.0)
            self.group.add(col)
            self.cols.append(col)
        for col in self.cols[self.col_count + 1:]:
            col.destroy()
        del self.cols[self.col_count + 1:]

    def _layout(self):
        box = self.bounds
        rects = geometry.row_rects(box, self.row_count)
        for row, rect in zip(self.rows, rects):
            row.set_pos(rect.x, rect.y)
            row.set_size(rect.width, rect.height)
        overhang = self.settings.column_overhang
        lines = geometry.col_lines(box, self.col_count, overhang)
        for col, line in zip(self.cols, lines):
            col.set_points(line)
        self._apply_style()

    def _apply_style(self):
        palette = self.settings.palette
        dimmed = not self.selected and not self.is_preview

        if self.selected:
            self.frame.set_style(
                stroke=palette.grid_stroke, stroke_width=4.0, dash=()
            )
        elif self.is_preview:
            self.frame.set_style(
                stroke=palette.grid_stroke, stroke_width=2.0, dash=FRAME_DASH
            )
        else:
            self.frame.set_style(
                stroke=palette.deselected_stroke, stroke_width=2.0, dash=()
            )

        for i, row in enumerate(self.rows):
            if i == self.selected_row:
                row.set_style(
                    fill=palette.selected_row_fill,
                    stroke=palette.selected_row_stroke,
                    stroke_width=2.0,
                )
            else:
                row.set_style(
                    fill=palette.row_fill,
                    stroke=(
                        palette.deselected_stroke
                        if dimmed
                        else palette.row_stroke
                    ),
                    stroke_width=1.0,
                )

        for j, col in enumerate(self.cols):
            if j == self.selected_col:
                col.set_style(
                    stroke=palette.selected_col_stroke, stroke_width=3.0
                )
            else:
                col.set_style(
                    stroke=(
                        palette.deselected_stroke
                        if dimmed
                        else palette.col_stroke
                    ),
                    stroke_width=1.0,
                )

    def __repr__(self) -> str:
        return (
            f"GridEntity(uid={self.uid!r}, bounds={self.bounds}, "
            f"rows={self.row_count}, cols={self.col_count}, "
            f"cursor=({self.selected_row}, {self.selected_col}))"
        )
