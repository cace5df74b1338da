import pytest
from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtTest import QTest

from bubble import STATE_FILLS, BubbleItem, bubble_label
from canvas import BubbleMenuScene, BubbleMenuView
from geometry import Position
from main_window import MainWindow
from toolbar import MenuToolbar


def test_scene_has_one_item_per_bubble(engine):
    scene = BubbleMenuScene(engine)
    assert sorted(item.bubble_id for item in scene.bubble_items()) == sorted(engine.ids())
    item = scene.bubble_item("center")
    rest = engine.rest_position("center")
    assert (item.pos().x(), item.pos().y()) == (rest.x, rest.y)
    assert item.rect().width() == engine.get_radius("center") * 2
    assert item.get_label() == "Menu"


def test_frames_move_items(engine):
    scene = BubbleMenuScene(engine)
    scene.apply_frame({"a1": Position(12, 34), "ghost": Position(0, 0)})
    item = scene.bubble_item("a1")
    assert (item.pos().x(), item.pos().y()) == (12, 34)

    engine.drag_start("a1")
    engine.drag_move("a1", 10, 10)
    engine.run_ui_tick()
    preview = engine.get_rendered_position("a1")
    assert (item.pos().x(), item.pos().y()) == (preview.x, preview.y)


def test_state_changes_tint_items(engine):
    scene = BubbleMenuScene(engine)
    item = scene.bubble_item("a2")
    engine.drag_start("a2")
    assert item.get_state() == "dragging"
    assert item.brush().color() == STATE_FILLS["dragging"]
    assert item.zValue() == 1


def test_rebuild_after_remount(engine):
    scene = BubbleMenuScene(engine)
    engine.set_items([{"id": "only"}])
    scene.rebuild()
    assert [item.bubble_id for item in scene.bubble_items()] == ["only"]


@pytest.fixture
def shown_view(engine):
    scene = BubbleMenuScene(engine)
    view = BubbleMenuView(scene)
    view.resize(820, 620)
    view.show()
    QTest.qWaitForWindowExposed(view)
    yield view
    view.close()


def bubble_point(view, bubble_id) -> QPoint:
    item = view.scene().bubble_item(bubble_id)
    return view.mapFromScene(item.sceneBoundingRect().center())


def test_mouse_drag_goes_through_engine(engine, shown_view):
    pressed = []
    shown_view.scene().bubble_pressed.connect(pressed.append)
    viewport = shown_view.viewport()
    start = bubble_point(shown_view, "a3")
    before = engine.get_position("a3")

    QTest.mousePress(viewport, Qt.MouseButton.LeftButton,
                     Qt.KeyboardModifier.NoModifier, start)
    assert engine.get_is_dragging("a3")
    QTest.mouseMove(viewport, start + QPoint(15, 5))
    QTest.mouseMove(viewport, start + QPoint(30, 10))
    QTest.mouseRelease(viewport, Qt.MouseButton.LeftButton,
                       Qt.KeyboardModifier.NoModifier, start + QPoint(30, 10))

    assert not engine.get_is_dragging("a3")
    after = engine.get_position("a3")
    assert after.x == pytest.approx(before.x + 30)
    assert after.y == pytest.approx(before.y + 10)
    assert pressed == []


def test_click_emits_bubble_pressed(engine, shown_view):
    pressed = []
    shown_view.scene().bubble_pressed.connect(pressed.append)
    viewport = shown_view.viewport()
    point = bubble_point(shown_view, "a4")
    before = engine.get_position("a4")

    QTest.mouseClick(viewport, Qt.MouseButton.LeftButton,
                     Qt.KeyboardModifier.NoModifier, point)

    assert pressed == ["a4"]
    assert not engine.get_is_dragging("a4")
    assert engine.get_position("a4") == before


def test_right_button_does_not_drag(engine, shown_view):
    viewport = shown_view.viewport()
    point = bubble_point(shown_view, "a2")

    QTest.mousePress(viewport, Qt.MouseButton.RightButton,
                     Qt.KeyboardModifier.NoModifier, point)
    assert not engine.get_is_dragging("a2")
    QTest.mouseRelease(viewport, Qt.MouseButton.RightButton,
                       Qt.KeyboardModifier.NoModifier, point)



def test_bubble_label():
    assert bubble_label("x", {"text": "Recipes"}) == "Recipes"
    assert bubble_label("x", {"name": "N"}) == "N"
    assert bubble_label("x", None) == "x"


def test_view_resize_updates_engine(engine):
    scene = BubbleMenuScene(engine)
    view = BubbleMenuView(scene)
    view.resize(500, 400)
    view.show()
    vp = view.viewport().size()
    assert engine.store.width == vp.width()
    assert engine.store.height == vp.height()
    assert scene.sceneRect().width() == vp.width()
    view.close()


def test_toolbar_export_enabled_by_frames():
    toolbar = MenuToolbar()
    assert not toolbar.act_export.isEnabled()
    toolbar.set_frames_recorded(4)
    assert toolbar.act_export.isEnabled()
    toolbar.set_frames_recorded(0)
    assert not toolbar.act_export.isEnabled()


def test_main_window_press_callback():
    calls = []
    items = [{"id": "home", "on_press": lambda: calls.append("home")},
             {"id": "other"}]
    window = MainWindow(items=items)
    window.show()
    try:
        window.scene.bubble_pressed.emit("home")
        window.scene.bubble_pressed.emit("other")
        assert calls == ["home"]
        assert isinstance(window.scene.bubble_item("home"), BubbleItem)
        assert window.engine.scheduler.is_running()
    finally:
        window.close()
    assert not window.engine.scheduler.is_running()
