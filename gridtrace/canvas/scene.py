from __future__ import annotations
import logging
from typing import Optional, Tuple
from blinker import Signal
from ..core.viewport import CoordinateSpace
from .element import SceneElement
from .events import PointerEvent

logger = logging.getLogger(__name__)


class Scene:
    """
    Owns the element tree and the view transform, and turns raw input
    (widget pixel coordinates) into scene events.

    A press is delivered to the element under the pointer, then to each
    of its ancestors, then to the scene's own `pointer_pressed` signal,
    unless a handler stops propagation on the way. Unless a handler
    prevented the default, the press also arms a drag: moving with the
    button held drags the nearest draggable ancestor of the hit element,
    or pans the canvas if there is none and the scene is draggable.
    """

    def __init__(
        self,
        width: float = 1280.0,
        height: float = 800.0,
        viewport: Optional[CoordinateSpace] = None,
    ):
        self.width = float(width)
        self.height = float(height)
        self.viewport = viewport or CoordinateSpace()
        self.root = SceneElement(
            0.0, 0.0, self.width, self.height, hittable=False, name="root"
        )
        self.root._set_scene(self)
        self.draggable: bool = True

        # --- Interaction State ---
        self._drag_elem: Optional[SceneElement] = None
        self._panning: bool = False
        self._button_down: bool = False
        self._last_raw: Optional[Tuple[float, float]] = None
        self._last_local: Optional[Tuple[float, float]] = None

        # --- Signals ---
        self.pointer_pressed = Signal()
        self.pointer_moved = Signal()
        self.redraw_requested = Signal()

        self.viewport.changed.connect(self._on_viewport_changed)

    def _on_viewport_changed(self, sender: CoordinateSpace):
        self.queue_draw()

    def queue_draw(self):
        self.redraw_requested.send(self)

    def add(self, elem: SceneElement) -> SceneElement:
        """Adds a top-level element."""
        return self.root.add(elem)

    def to_local(self, x: float, y: float) -> Tuple[float, float]:
        return self.viewport.to_local((x, y))

    def get_elem_hit(self, x: float, y: float) -> Optional[SceneElement]:
        """Hit-tests a canvas-local point; the root never counts."""
        hit = self.root.get_elem_hit(x, y)
        if hit is self.root:
            return None
        return hit

    def pointer_down(self, x: float, y: float, button: int = 1) -> PointerEvent:
        local = self.to_local(x, y)
        hit = self.get_elem_hit(*local)
        event = PointerEvent(raw=(x, y), local=local, button=button, target=hit)

        if hit is not None:
            for elem in hit.ancestors():
                if elem is self.root:
                    break
                event.current_target = elem
                elem.pointer_pressed.send(elem, event=event)
                if event.cancel_bubble:
                    break
        if not event.cancel_bubble:
            event.current_target = None
            self.pointer_pressed.send(self, event=event)

        self._button_down = True
        self._last_raw = (x, y)
        self._last_local = local
        self._drag_elem = None
        self._panning = False
        if not event.default_prevented and button == 1:
            draggable = hit.find_draggable() if hit else None
            if draggable is not None and draggable is not self.root:
                self._drag_elem = draggable
            elif self.draggable:
                self._panning = True
        return event

    def pointer_move(self, x: float, y: float) -> PointerEvent:
        local = self.to_local(x, y)
        if self._button_down and self._last_raw and self._last_local:
            if self._drag_elem is not None:
                dx = local[0] - self._last_local[0]
                dy = local[1] - self._last_local[1]
                elem = self._drag_elem
                elem.set_pos(elem.x + dx, elem.y + dy)
            elif self._panning:
                self.viewport.pan(x - self._last_raw[0], y - self._last_raw[1])
                # Panning moves the canvas under the pointer.
                local = self.to_local(x, y)
        self._last_raw = (x, y)
        self._last_local = local

        event = PointerEvent(raw=(x, y), local=local)
        self.pointer_moved.send(self, event=event)
        return event

    def pointer_up(self, x: float, y: float, button: int = 1) -> PointerEvent:
        local = self.to_local(x, y)
        if self._drag_elem is not None:
            logger.debug(f"Finished dragging {self._drag_elem}")
        self._button_down = False
        self._drag_elem = None
        self._panning = False
        return PointerEvent(raw=(x, y), local=local, button=button)

    def wheel(self, x: float, y: float, delta_y: float):
        """Scrolling down (delta_y > 0) zooms in around the pointer."""
        self.viewport.zoom((x, y), delta_y)

