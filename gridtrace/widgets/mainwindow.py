import logging
from gi.repository import Gtk, Gio, GLib, Gdk  # type: ignore
from ..canvas.scene import Scene
from ..controller import InteractionController, State
from ..core.settings import GridSettings
from .canvaswidget import CanvasWidget

logger = logging.getLogger(__name__)

INSTRUCTIONS = _(
    "Instructions:\n\n"
    "1. Copy a pattern image from some source\n"
    "2. Paste the image (Ctrl+V) onto this canvas\n"
    "3. Draw a grid over it using the controls above\n"
    "4. Use the arrow keys to move the row and column cursor"
)


class MainWindow(Gtk.ApplicationWindow):
    """
    The control surface: buttons and count fields in the header bar,
    the canvas below, and clipboard paste.
    """

    def __init__(self, settings: GridSettings, **kwargs):
        super().__init__(**kwargs)
        self.set_title(_("Grid Trace"))
        self.set_default_size(
            int(settings.stage_width), int(settings.stage_height)
        )
        self.settings = settings

        self.scene = Scene(settings.stage_width, settings.stage_height)
        self.controller = InteractionController(self.scene, settings)
        self.canvas = CanvasWidget(self.scene, self.controller)

        self._build_header()

        overlay = Gtk.Overlay()
        overlay.set_child(self.canvas)
        self.help_label = Gtk.Label(label=INSTRUCTIONS)
        self.help_label.set_halign(Gtk.Align.CENTER)
        self.help_label.set_valign(Gtk.Align.CENTER)
        self.help_label.set_can_target(False)
        self.help_label.add_css_class("card")
        overlay.add_overlay(self.help_label)
        self.set_child(overlay)

        paste_action = Gio.SimpleAction.new("paste", None)
        paste_action.connect("activate", self.on_paste)
        self.add_action(paste_action)

        self.controller.counts_changed.connect(self._on_counts_changed)
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.lock.lock_changed.connect(self._on_lock_changed)
        self._on_counts_changed(
            self.controller, *self.controller.current_counts()
        )
        self.canvas.grab_focus()

    def _build_header(self):
        header = Gtk.HeaderBar()
        self.set_titlebar(header)

        self.draw_button = Gtk.Button(label=_("Draw grid"))
        self.draw_button.connect("clicked", lambda b: self._command("draw"))
        header.pack_start(self.draw_button)

        self.delete_button = Gtk.Button(label=_("Delete grid"))
        self.delete_button.connect(
            "clicked", lambda b: self._command("delete")
        )
        header.pack_start(self.delete_button)

        self.lock_button = Gtk.ToggleButton()
        self.lock_button.set_icon_name("changes-allow-symbolic")
        self.lock_button.set_tooltip_text(_("Lock grids and images"))
        self.lock_button.connect("toggled", self.on_lock_toggled)
        header.pack_start(self.lock_button)

        self.rows_entry = self._count_box(
            header, _("Rows"), "remove_row", "add_row"
        )
        self.cols_entry = self._count_box(
            header, _("Columns"), "remove_col", "add_col"
        )

    def _count_box(
        self, header: Gtk.HeaderBar, label: str, sub: str, add: str
    ) -> Gtk.Entry:
        box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=2)
        box.append(Gtk.Label(label=label))

        sub_button = Gtk.Button(icon_name="list-remove-symbolic")
        sub_button.connect("clicked", lambda b: self._command(sub))
        box.append(sub_button)

        entry = Gtk.Entry()
        entry.set_width_chars(4)
        entry.set_input_purpose(Gtk.InputPurpose.DIGITS)
        entry.connect("activate", self.on_counts_submitted)
        entry.connect("changed", self.on_counts_edited)
        box.append(entry)

        add_button = Gtk.Button(icon_name="list-add-symbolic")
        add_button.connect("clicked", lambda b: self._command(add))
        box.append(add_button)

        header.pack_end(box)
        return entry

    def _command(self, name: str):
        commands = {
            "draw": self.controller.start_draw,
            "delete": self.controller.delete,
            "add_row": self.controller.add_row,
            "remove_row": self.controller.remove_row,
            "add_col": self.controller.add_col,
            "remove_col": self.controller.remove_col,
        }
        commands[name]()
        self.canvas.grab_focus()

    def on_counts_edited(self, entry: Gtk.Entry):
        self.controller.set_field_counts(
            self.rows_entry.get_text(), self.cols_entry.get_text()
        )

    def on_counts_submitted(self, entry: Gtk.Entry):
        self.controller.apply_counts(
            self.rows_entry.get_text(), self.cols_entry.get_text()
        )
        self.canvas.grab_focus()

    def on_lock_toggled(self, button: Gtk.ToggleButton):
        if button.get_active() != self.controller.lock.locked:
            self.controller.toggle_lock()

    def _on_lock_changed(self, sender, locked: bool):
        self.lock_button.set_icon_name(
            "changes-prevent-symbolic" if locked else "changes-allow-symbolic"
        )
        if self.lock_button.get_active() != locked:
            self.lock_button.set_active(locked)

    def _on_counts_changed(self, sender, rows: int, cols: int):
        if self.rows_entry.get_text() != str(rows):
            self.rows_entry.set_text(str(rows))
        if self.cols_entry.get_text() != str(cols):
            self.cols_entry.set_text(str(cols))

    def _on_state_changed(self, sender, state: State, previous: State):
        self.delete_button.set_sensitive(
            state in (State.SELECTED, State.AWAITING_GRID_END)
        )

    def on_paste(self, action, param):
        clipboard = self.get_clipboard()

        def on_texture_ready(clipboard: Gdk.Clipboard, result):
            try:
                texture = clipboard.read_texture_finish(result)
            except GLib.Error as e:
                logger.warning(f"Clipboard holds no image: {e.message}")
                return
            if texture is None:
                logger.warning("Clipboard holds no image")
                return
            data = texture.save_to_png_bytes().get_data()
            if self.controller.paste_image(data) is not None:
                self.help_label.set_visible(False)

        clipboard.read_texture_async(None, on_texture_ready)
