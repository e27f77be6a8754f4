from __future__ import annotations
import logging
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple
from blinker import Signal
from .canvas.element import SceneElement
from .canvas.events import PointerEvent
from .canvas.scene import Scene
from .canvas.shapes import ImageShape
from .core.settings import GridSettings, parse_count
from .grid.entity import Direction, GridEntity
from .grid.lock import LockController
from .grid.registry import SelectionRegistry
from .importer.image import ImageImporter, add_image_to_scene

logger = logging.getLogger(__name__)


class State(Enum):
    DESELECTED = auto()
    SELECTED = auto()
    AWAITING_GRID_START = auto()
    AWAITING_GRID_END = auto()


ARROW_KEYS: Dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "Up": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "Down": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "Left": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "Right": Direction.RIGHT,
}
COMMIT_KEYS = ("Enter", "Return")
CANCEL_KEYS = ("Escape", "Esc")


class InteractionController:
    """
    The state machine behind the canvas.

    It listens to presses that reach the scene (empty canvas) and to
    presses on committed grids, takes keyboard input and control
    commands, and turns them into grid, selection and lock mutations:

    - DESELECTED: a grid press selects that grid.
    - SELECTED: a press on another grid moves the selection, a press on
      empty canvas clears it, arrow keys move the grid's cursor, delete
      destroys the grid.
    - AWAITING_GRID_START: the next press starts a preview grid at the
      pointer and starts following pointer moves.
    - AWAITING_GRID_END: pointer moves resize the preview; a press or
      Enter commits and selects it; Escape or delete throws it away.

    Start-draw is accepted in every state. Anything else arriving in a
    state that does not expect it is ignored. The pointer-move
    subscription only exists while in AWAITING_GRID_END.
    """

    def __init__(
        self,
        scene: Scene,
        settings: Optional[GridSettings] = None,
        lock: Optional[LockController] = None,
        registry: Optional[SelectionRegistry] = None,
        importer: Optional[ImageImporter] = None,
    ):
        self.scene = scene
        self.settings = settings or GridSettings()
        self.scene.viewport.zoom_factor = self.settings.zoom_factor
        self.lock = lock or LockController()
        self.registry = registry or SelectionRegistry()
        self.importer = importer or ImageImporter()
        self.state: State = State.DESELECTED

        # Values currently held by the control surface's count fields.
        self._field_rows: int = self.settings.default_rows
        self._field_cols: int = self.settings.default_cols
        self._tracking_pointer: bool = False

        # --- Signals ---
        # (controller, state=State, previous=State)
        self.state_changed = Signal()
        # (controller, rows=int, cols=int)
        self.counts_changed = Signal()
        # (controller, cursor=str), a pointer cursor name
        self.cursor_changed = Signal()

        self.scene.pointer_pressed.connect(self._on_canvas_pressed)
        self.registry.selection_changed.connect(self._on_selection_changed)

    @property
    def selected_grid(self) -> Optional[GridEntity]:
        return self.registry.selected

    @property
    def preview_grid(self) -> Optional[GridEntity]:
        return self.registry.preview

    @property
    def grids(self) -> List[GridEntity]:
        return self.registry.grids

    @property
    def is_tracking_pointer(self) -> bool:
        return self._tracking_pointer

    def _set_state(self, state: State):
        if state == self.state:
            return
        previous, self.state = self.state, state
        logger.debug(f"State {previous.name} -> {state.name}")
        self.state_changed.send(self, state=state, previous=previous)

    # --- Control surface commands ---

    def start_draw(self):
        if self.state == State.SELECTED:
            self.registry.deselect()
        elif self.state == State.AWAITING_GRID_END:
            self._cancel_preview(destroy=True)
        self._set_state(State.AWAITING_GRID_START)
        self.cursor_changed.send(self, cursor="crosshair")

    def delete(self):
        if self.state == State.SELECTED:
            grid = self.registry.selected
            if grid is not None:
                self._destroy_grid(grid)
        elif self.state == State.AWAITING_GRID_END:
            self._cancel_preview(destroy=True)
        else:
            logger.debug(f"Nothing to delete in state {self.state.name}")
            return
        self._set_state(State.DESELECTED)
        self.scene.queue_draw()

    def toggle_lock(self) -> bool:
        return self.lock.toggle_lock()

    def add_row(self):
        self._update_selected(lambda grid: grid.add_rows(1))

    def remove_row(self):
        self._update_selected(lambda grid: grid.remove_rows(1))

    def add_col(self):
        self._update_selected(lambda grid: grid.add_cols(1))

    def remove_col(self):
        self._update_selected(lambda grid: grid.remove_cols(1))

    def set_row_count(self, n: Any):
        count = parse_count(n, self.settings.default_rows)
        self._update_selected(lambda grid: grid.set_row_count(count))

    def set_col_count(self, n: Any):
        count = parse_count(n, self.settings.default_cols)
        self._update_selected(lambda grid: grid.set_col_count(count))

    def set_field_counts(self, rows: Any, cols: Any):
        """
        Records the values typed into the count fields. They seed the
        next grid drawn; malformed text falls back to the defaults.
        """
        self._field_rows = parse_count(rows, self.settings.default_rows)
        self._field_cols = parse_count(cols, self.settings.default_cols)

    def apply_counts(self, rows: Any, cols: Any):
        """Submits the count fields to the selected grid, if any."""
        self.set_field_counts(rows, cols)

        def update(grid: GridEntity):
            grid.set_row_count(self._field_rows)
            grid.set_col_count(self._field_cols)

        self._update_selected(update)

    def current_counts(self) -> Tuple[int, int]:
        grid = self.registry.selected
        if grid is not None:
            return grid.row_count, grid.col_count
        return self._field_rows, self._field_cols

    def paste_image(self, data: Optional[bytes]) -> Optional[ImageShape]:
        """
        Adds a pasted image to the canvas. Data that is not an image is
        ignored; the grid state is never touched.
        """
        imported = self.importer.decode(data)
        if imported is None:
            return None
        shape = add_image_to_scene(
            self.scene, imported, self.lock, self.settings.image_padding
        )
        self.scene.queue_draw()
        return shape

    # --- Input events ---

    def key_pressed(self, key: str) -> bool:
        """Returns True if the key was handled."""
        direction = ARROW_KEYS.get(key)
        if direction is not None:
            grid = self.registry.selected
            if self.state == State.SELECTED and grid is not None:
                grid.move_cursor(direction)
                self.scene.queue_draw()
            return True
        if key in COMMIT_KEYS:
            if self.state == State.AWAITING_GRID_END:
                self._commit_preview()
            return True
        if key in CANCEL_KEYS:
            if self.state == State.AWAITING_GRID_END:
                self._cancel_preview(destroy=True)
                self._set_state(State.DESELECTED)
                self.scene.queue_draw()
            return True
        return False

    def click(
        self,
        grid: Optional[GridEntity] = None,
        event: Optional[PointerEvent] = None,
    ):
        """
        Handles a press, on `grid` or on empty canvas when it is None.
        While drawing, presses on grids count as canvas presses.
        """
        if self.state == State.DESELECTED:
            if grid is not None and self.registry.select(grid):
                self._set_state(State.SELECTED)
        elif self.state == State.SELECTED:
            if grid is not None:
                self.registry.select(grid)
            else:
                self.registry.deselect()
                self._set_state(State.DESELECTED)
        elif self.state == State.AWAITING_GRID_START:
            if event is None:
                logger.debug("Grid start needs a pointer position")
                return
            event.prevent_default()
            self._begin_preview(event.local)
        elif self.state == State.AWAITING_GRID_END:
            if event is not None:
                event.prevent_default()
            self._commit_preview()
        self.scene.queue_draw()

    def _on_canvas_pressed(self, sender: Scene, event: PointerEvent):
        self.click(None, event)

    def _on_grid_pressed(self, sender: SceneElement, event: PointerEvent):
        event.stop_propagation()
        grid = sender.data
        if isinstance(grid, GridEntity):
            self.click(grid, event)

    def _on_pointer_moved(self, sender: Scene, event: PointerEvent):
        grid = self.registry.preview
        if grid is not None:
            grid.resize_to(event.local)

    def _on_selection_changed(
        self, sender: SelectionRegistry, grid: Optional[GridEntity]
    ):
        if grid is not None:
            self._publish_counts()

    # --- Helpers ---

    def _update_selected(self, update):
        grid = self.registry.selected
        if grid is None:
            return
        update(grid)
        self._publish_counts()
        self.scene.queue_draw()

    def _publish_counts(self):
        rows, cols = self.current_counts()
        self.counts_changed.send(self, rows=rows, cols=cols)

    def _start_tracking(self):
        if not self._tracking_pointer:
            self.scene.pointer_moved.connect(self._on_pointer_moved)
            self._tracking_pointer = True

    def _stop_tracking(self):
        if self._tracking_pointer:
            self.scene.pointer_moved.disconnect(self._on_pointer_moved)
            self._tracking_pointer = False

    def _begin_preview(self, pos: Tuple[float, float]):
        grid = GridEntity.create(
            pos, self._field_rows, self._field_cols, self.settings
        )
        if not self.registry.begin_preview(grid):
            grid.destroy()
            return
        self.scene.add(grid.element)
        self.lock.register(grid.uid, grid.element)
        self._start_tracking()
        self._set_state(State.AWAITING_GRID_END)

    def _commit_preview(self):
        self._stop_tracking()
        grid = self.registry.commit_preview()
        self.cursor_changed.send(self, cursor="default")
        if grid is None:
            self._set_state(State.DESELECTED)
            return
        grid.element.pointer_pressed.connect(self._on_grid_pressed)
        logger.info(f"Committed grid {grid.uid} at {grid.bounds}")
        self._set_state(State.SELECTED)

    def _cancel_preview(self, destroy: bool):
        self._stop_tracking()
        grid = self.registry.discard_preview()
        self.cursor_changed.send(self, cursor="default")
        if grid is not None and destroy:
            self._destroy_grid(grid)

    def _destroy_grid(self, grid: GridEntity):
        grid.element.pointer_pressed.disconnect(self._on_grid_pressed)
        self.registry.remove(grid)
        self.lock.unregister(grid.uid)
        grid.destroy()
