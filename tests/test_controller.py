import io
import pytest
from unittest.mock import Mock
from PIL import Image
from gridtrace.canvas.scene import Scene
from gridtrace.canvas.shapes import ImageShape
from gridtrace.controller import InteractionController, State
from gridtrace.core.geometry import BoundingBox
from gridtrace.core.settings import GridSettings


@pytest.fixture
def scene():
    return Scene(1280, 800)


@pytest.fixture
def controller(scene):
    return InteractionController(scene)


def press(scene, x, y):
    scene.pointer_down(x, y)
    scene.pointer_up(x, y)


def draw_grid(controller, start, end):
    scene = controller.scene
    controller.start_draw()
    press(scene, *start)
    scene.pointer_move(*end)
    press(scene, *end)
    return controller.selected_grid


def png_bytes(width=200, height=100):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


def test_initial_state(controller):
    assert controller.state == State.DESELECTED
    assert controller.selected_grid is None
    assert controller.current_counts() == (5, 5)


def test_draw_grid(controller, scene):
    controller.start_draw()
    assert controller.state == State.AWAITING_GRID_START

    press(scene, 100, 100)
    assert controller.state == State.AWAITING_GRID_END
    preview = controller.preview_grid
    assert preview is not None
    assert preview.bounds == BoundingBox(100, 100, 0, 0)
    assert controller.is_tracking_pointer

    scene.pointer_move(300, 250)
    assert preview.bounds == BoundingBox(100, 100, 200, 150)

    press(scene, 300, 250)
    assert controller.state == State.SELECTED
    assert controller.selected_grid is preview
    assert controller.preview_grid is None
    assert not preview.is_preview
    assert preview.bounds == BoundingBox(100, 100, 200, 150)
    assert not controller.is_tracking_pointer


def test_drawing_press_does_not_pan(controller, scene):
    controller.start_draw()
    scene.pointer_down(100, 100)
    scene.pointer_move(300, 250)
    scene.pointer_up(300, 250)
    assert scene.viewport.pan_x == 0
    assert controller.preview_grid.bounds.width == 200


def test_draw_in_zoomed_view(scene):
    scene.viewport.set_scale(2.0)
    controller = InteractionController(scene)
    grid = draw_grid(controller, (200, 200), (600, 500))
    assert grid.bounds == BoundingBox(100, 100, 200, 150)


def test_enter_commits(controller, scene):
    controller.start_draw()
    press(scene, 10, 10)
    scene.pointer_move(110, 60)
    assert controller.key_pressed("Enter")
    assert controller.state == State.SELECTED
    assert controller.selected_grid.bounds == BoundingBox(10, 10, 100, 50)


def test_escape_discards_preview(controller, scene):
    controller.start_draw()
    press(scene, 100, 100)
    preview = controller.preview_grid
    scene.pointer_move(200, 200)

    assert controller.key_pressed("Escape")

    assert controller.state == State.DESELECTED
    assert preview.destroyed
    assert controller.preview_grid is None
    assert not controller.is_tracking_pointer
    assert not scene.pointer_moved.receivers
    assert scene.root.children == []

    scene.pointer_move(400, 400)
    assert preview.bounds == BoundingBox(100, 100, 100, 100)


def test_click_moves_selection(controller, scene):
    a = draw_grid(controller, (100, 100), (300, 250))
    b = draw_grid(controller, (500, 100), (700, 250))
    assert controller.selected_grid is b

    press(scene, 150, 150)
    assert controller.selected_grid is a

    press(scene, 550, 150)
    assert not a.selected
    assert b.selected
    assert controller.selected_grid is b
    assert controller.state == State.SELECTED


def test_click_empty_canvas_deselects(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    press(scene, 900, 700)
    assert controller.state == State.DESELECTED
    assert not grid.selected


def test_click_grid_when_deselected(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    press(scene, 900, 700)
    press(scene, 150, 150)
    assert controller.state == State.SELECTED
    assert controller.selected_grid is grid


def test_press_on_grid_while_drawing_starts_preview(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.start_draw()
    press(scene, 150, 150)
    assert controller.state == State.AWAITING_GRID_END
    assert controller.preview_grid is not grid
    assert controller.preview_grid.bounds == BoundingBox(150, 150, 0, 0)


def test_start_draw_deselects(controller):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.start_draw()
    assert controller.selected_grid is None
    assert not grid.selected
    assert grid in controller.grids


def test_start_draw_restarts_preview(controller, scene):
    controller.start_draw()
    press(scene, 100, 100)
    preview = controller.preview_grid
    controller.start_draw()
    assert preview.destroyed
    assert controller.state == State.AWAITING_GRID_START
    assert not controller.is_tracking_pointer


def test_delete_selected(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.delete()
    assert controller.state == State.DESELECTED
    assert grid.destroyed
    assert controller.grids == []
    assert not controller.lock.is_draggable(grid.uid)
    assert scene.root.children == []


def test_delete_preview(controller, scene):
    controller.start_draw()
    press(scene, 100, 100)
    preview = controller.preview_grid
    controller.delete()
    assert preview.destroyed
    assert controller.state == State.DESELECTED


@pytest.mark.parametrize("setup", ["deselected", "awaiting_start"])
def test_delete_is_noop_without_target(controller, setup):
    if setup == "awaiting_start":
        controller.start_draw()
    state = controller.state
    controller.delete()
    assert controller.state == state


def test_deleted_grid_ignores_clicks(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.delete()
    press(scene, 150, 150)
    assert controller.state == State.DESELECTED
    assert grid.destroyed


def test_arrow_keys_move_cursor(controller):
    grid = draw_grid(controller, (100, 100), (300, 250))
    assert controller.key_pressed("ArrowUp")
    assert controller.key_pressed("Left")
    assert (grid.selected_row, grid.selected_col) == (1, 2)
    controller.key_pressed("ArrowDown")
    controller.key_pressed("ArrowRight")
    assert (grid.selected_row, grid.selected_col) == (0, 1)


def test_arrow_keys_ignored_without_selection(controller):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.scene.pointer_down(900, 700)
    assert controller.key_pressed("ArrowUp")
    assert grid.selected_row == 0


def test_unknown_key(controller):
    assert not controller.key_pressed("a")


def test_row_and_col_commands(controller):
    grid = draw_grid(controller, (100, 100), (300, 250))
    listener = Mock()
    controller.counts_changed.connect(listener)

    controller.add_row()
    controller.add_col()
    controller.remove_col()
    controller.remove_col()

    assert (grid.row_count, grid.col_count) == (6, 4)
    listener.assert_called_with(controller, rows=6, cols=4)
    assert controller.current_counts() == (6, 4)


def test_commands_without_selection_do_nothing(controller):
    controller.add_row()
    controller.set_row_count("9")
    assert controller.current_counts() == (5, 5)


def test_set_counts_parse_fields(controller):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.set_row_count("12")
    controller.set_col_count("oops")
    assert (grid.row_count, grid.col_count) == (12, 5)

    controller.set_row_count("9999")
    assert grid.row_count == 250


def test_field_counts_seed_next_grid(controller):
    controller.set_field_counts("3", "")
    grid = draw_grid(controller, (100, 100), (300, 250))
    assert (grid.row_count, grid.col_count) == (3, 5)


def test_apply_counts(controller):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.apply_counts("7", "8")
    assert (grid.row_count, grid.col_count) == (7, 8)


def test_toggle_lock(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    assert grid.draggable
    assert controller.toggle_lock()
    assert not grid.draggable
    assert not controller.toggle_lock()
    assert grid.draggable


def test_locked_grid_does_not_move(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    controller.toggle_lock()
    scene.pointer_down(150, 150)
    scene.pointer_move(250, 150)
    scene.pointer_up(250, 150)
    assert grid.bounds.x == 100
    assert controller.selected_grid is grid


def test_unlocked_grid_drags(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    scene.pointer_down(150, 150)
    scene.pointer_move(250, 160)
    scene.pointer_up(250, 160)
    assert grid.bounds == BoundingBox(200, 110, 200, 150)


def test_new_grid_follows_lock(controller):
    controller.toggle_lock()
    grid = draw_grid(controller, (100, 100), (300, 250))
    assert not grid.draggable


def test_state_and_cursor_signals(controller, scene):
    states = Mock()
    cursors = Mock()
    controller.state_changed.connect(states)
    controller.cursor_changed.connect(cursors)

    controller.start_draw()
    states.assert_called_once_with(
        controller,
        state=State.AWAITING_GRID_START,
        previous=State.DESELECTED,
    )
    cursors.assert_called_once_with(controller, cursor="crosshair")

    press(scene, 10, 10)
    press(scene, 20, 20)
    cursors.assert_called_with(controller, cursor="default")
    assert states.call_count == 3


def test_paste_image(controller, scene):
    grid = draw_grid(controller, (100, 100), (300, 250))
    shape = controller.paste_image(png_bytes())
    assert isinstance(shape, ImageShape)
    assert scene.root.children[0] is shape
    assert scene.root.children[1] is grid.element
    assert shape.draggable
    assert controller.selected_grid is grid


def test_paste_follows_lock(controller):
    controller.toggle_lock()
    shape = controller.paste_image(png_bytes())
    assert not shape.draggable


@pytest.mark.parametrize("data", [None, b"", b"plain text"])
def test_paste_ignores_non_images(controller, scene, data):
    assert controller.paste_image(data) is None
    assert scene.root.children == []
    assert controller.state == State.DESELECTED


def test_custom_settings(scene):
    settings = GridSettings(default_rows=2, default_cols=3, max_rows=4)
    controller = InteractionController(scene, settings)
    grid = draw_grid(controller, (0, 0), (100, 100))
    assert (grid.row_count, grid.col_count) == (2, 3)
    controller.set_row_count("10")
    assert grid.row_count == 4


def test_zoom_factor_comes_from_settings(scene):
    InteractionController(scene, GridSettings(zoom_factor=2.0))
    scene.wheel(0, 0, 1)
    assert scene.viewport.scale == pytest.approx(2.0)
    scene.wheel(0, 0, -1)
    assert scene.viewport.scale == pytest.approx(1.0)


def enter_state(controller, state):
    """Builds a committed grid, then drives the controller into `state`."""
    scene = controller.scene
    draw_grid(controller, (100, 100), (300, 250))
    if state == State.DESELECTED:
        press(scene, 900, 700)
    elif state == State.AWAITING_GRID_START:
        controller.start_draw()
    elif state == State.AWAITING_GRID_END:
        controller.start_draw()
        press(scene, 500, 500)
        scene.pointer_move(600, 600)
    assert controller.state == state


def snapshot(controller):
    grids = list(controller.grids)
    if controller.preview_grid is not None:
        grids.append(controller.preview_grid)
    return (
        controller.state,
        controller.selected_grid,
        controller.preview_grid,
        [
            (
                grid.uid,
                grid.bounds,
                grid.row_count,
                grid.col_count,
                grid.selected_row,
                grid.selected_col,
                grid.selected,
                grid.destroyed,
            )
            for grid in grids
        ],
    )


UNLISTED_EVENTS = {
    "enter": lambda c: c.key_pressed("Enter"),
    "escape": lambda c: c.key_pressed("Escape"),
    "arrows": lambda c: (c.key_pressed("ArrowUp"), c.key_pressed("Left")),
    "move": lambda c: c.scene.pointer_move(700, 650),
    "add_row": lambda c: c.add_row(),
    "remove_row": lambda c: c.remove_row(),
    "add_col": lambda c: c.add_col(),
    "remove_col": lambda c: c.remove_col(),
    "set_counts": lambda c: (c.set_row_count("9"), c.set_col_count("9")),
    "delete": lambda c: c.delete(),
}

UNLISTED_PAIRS = [
    (State.DESELECTED, name)
    for name in UNLISTED_EVENTS
] + [
    (State.SELECTED, "enter"),
    (State.SELECTED, "escape"),
    (State.SELECTED, "move"),
] + [
    (State.AWAITING_GRID_START, name)
    for name in UNLISTED_EVENTS
] + [
    (State.AWAITING_GRID_END, name)
    for name in (
        "arrows",
        "add_row",
        "remove_row",
        "add_col",
        "remove_col",
        "set_counts",
    )
]


@pytest.mark.parametrize(
    "state, event",
    UNLISTED_PAIRS,
    ids=[f"{state.name}-{event}" for state, event in UNLISTED_PAIRS],
)
def test_events_outside_transition_table_change_nothing(
    controller, state, event
):
    enter_state(controller, state)
    before = snapshot(controller)

    UNLISTED_EVENTS[event](controller)

    assert snapshot(controller) == before
