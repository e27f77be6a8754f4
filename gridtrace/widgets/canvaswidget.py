import logging
import cairo
from gi.repository import Gtk, Gdk, Graphene  # type: ignore
from ..canvas.scene import Scene
from ..controller import InteractionController
from ..render.cairorenderer import render_scene

logger = logging.getLogger(__name__)


class CanvasWidget(Gtk.DrawingArea):
    """
    Feeds GTK input into the Scene and the InteractionController and
    paints the scene with cairo.

    Presses and releases come from a drag gesture so a release is seen
    even after the pointer moved; motion comes from a motion controller
    so the preview grid follows the pointer with no button held.
    """

    def __init__(
        self,
        scene: Scene,
        controller: InteractionController,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.scene = scene
        self.controller = controller
        self._last_x: float = 0.0
        self._last_y: float = 0.0

        self.set_hexpand(True)
        self.set_vexpand(True)
        self.set_focusable(True)
        self.connect("resize", self.on_resize)
        self._setup_interactions()

        self.scene.redraw_requested.connect(self._on_redraw_requested)
        self.controller.cursor_changed.connect(self._on_cursor_changed)

    def _setup_interactions(self):
        self._drag_gesture = Gtk.GestureDrag()
        self._drag_gesture.set_button(0)  # any button
        self._drag_gesture.connect("drag-begin", self.on_drag_begin)
        self._drag_gesture.connect("drag-end", self.on_drag_end)
        self.add_controller(self._drag_gesture)

        self._motion_controller = Gtk.EventControllerMotion()
        self._motion_controller.connect("motion", self.on_motion)
        self.add_controller(self._motion_controller)

        self._scroll_controller = Gtk.EventControllerScroll.new(
            Gtk.EventControllerScrollFlags.VERTICAL
        )
        self._scroll_controller.connect("scroll", self.on_scroll)
        self.add_controller(self._scroll_controller)

        self._key_controller = Gtk.EventControllerKey.new()
        self._key_controller.connect("key-pressed", self.on_key_pressed)
        self.add_controller(self._key_controller)

    def _on_redraw_requested(self, sender):
        self.queue_draw()

    def _on_cursor_changed(self, sender, cursor: str):
        self.set_cursor(Gdk.Cursor.new_from_name(cursor))

    def on_resize(self, area, width: int, height: int):
        """Scales the stage to the widget's width, as on window resize."""
        self.scene.viewport.fit_width(float(width), self.scene.width)

    def do_snapshot(self, snapshot):
        width, height = self.get_width(), self.get_height()
        bounds = Graphene.Rect().init(0, 0, width, height)
        ctx: cairo.Context = snapshot.append_cairo(bounds)
        render_scene(self.scene, ctx)

    def on_drag_begin(self, gesture, start_x: float, start_y: float):
        self.grab_focus()
        button = gesture.get_current_button()
        self._last_x, self._last_y = start_x, start_y
        self.scene.pointer_down(start_x, start_y, button)

    def on_drag_end(self, gesture, offset_x: float, offset_y: float):
        ok, start_x, start_y = gesture.get_start_point()
        if not ok:
            start_x, start_y = self._last_x - offset_x, self._last_y - offset_y
        self.scene.pointer_up(start_x + offset_x, start_y + offset_y)

    def on_motion(self, controller, x: float, y: float):
        self._last_x, self._last_y = x, y
        self.scene.pointer_move(x, y)

    def on_scroll(self, controller, dx: float, dy: float) -> bool:
        self.scene.wheel(self._last_x, self._last_y, dy)
        return True

    def on_key_pressed(
        self, controller, keyval: int, keycode: int, state: Gdk.ModifierType
    ) -> bool:
        name = Gdk.keyval_name(keyval) or ""
        if name == "KP_Enter":
            name = "Enter"
        if name == "Delete":
            self.controller.delete()
            return True
        return self.controller.key_pressed(name)
