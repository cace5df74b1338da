import logging

import pytest

from drag_adapter import DragAdapter
from geometry import Position
from position_store import BubbleRecord, PositionStore


@pytest.fixture
def store():
    s = PositionStore(800, 600)
    rest = Position(300, 200)
    s.add(BubbleRecord(id="a", radius=50, rest=rest, position=rest))
    return s


@pytest.fixture
def adapter(store):
    return DragAdapter(store)


def test_moves_are_coalesced_until_flush(store, adapter):
    assert adapter.drag_start("a")
    adapter.drag_move("a", 10, 0)
    adapter.drag_move("a", 20, 5)
    adapter.drag_move("a", 35, -15)

    assert store.get_position("a") == Position(300, 200)
    assert adapter.has_pending("a")

    assert adapter.flush() == {"a"}
    assert store.get_position("a") == Position(335, 185)
    assert not adapter.has_pending()
    assert adapter.flush() == set()


def test_flushed_position_is_rest_plus_delta_clamped(store, adapter):
    adapter.drag_start("a")
    adapter.drag_move("a", 1000, -1000)
    adapter.flush()
    assert store.get_position("a") == Position(700, 0)


def test_preview_tracks_pointer_before_flush(store, adapter):
    adapter.drag_start("a")
    assert adapter.preview_position("a") == Position(300, 200)
    adapter.drag_move("a", -400, 12)
    assert adapter.preview_position("a") == Position(0, 212)
    assert store.get_position("a") == Position(300, 200)


def test_drag_end_writes_last_move(store, adapter):
    adapter.drag_start("a")
    adapter.drag_move("a", 40, 40)

    assert adapter.drag_end("a")

    assert store.get_position("a") == Position(340, 240)
    assert not store.get_is_dragging("a")
    assert adapter.cumulative_delta("a") is None


def test_drag_start_from_displaced_position(store, adapter):
    store.set_position("a", Position(320, 230))
    adapter.drag_start("a")
    assert adapter.cumulative_delta("a") == (20, 30)


def test_invalid_calls_are_ignored(store, adapter, caplog):
    with caplog.at_level(logging.WARNING, logger="drag_adapter"):
        assert not adapter.drag_start("ghost")
        assert not adapter.drag_move("a", 10, 10)
        assert not adapter.drag_end("a")
        adapter.drag_start("a")
        assert not adapter.drag_start("a")

    assert "ghost" in caplog.text
    assert store.get_position("a") == Position(300, 200)
    assert store.get_is_dragging("a")


def test_cancel_all(store, adapter):
    adapter.drag_start("a")
    adapter.drag_move("a", 50, 50)
    adapter.cancel_all()

    assert not store.get_is_dragging("a")
    assert adapter.flush() == set()
    assert store.get_position("a") == Position(300, 200)


def test_pending_move_for_removed_bubble_is_dropped(store, adapter):
    adapter.drag_start("a")
    adapter.drag_move("a", 5, 5)
    store.remove("a")
    assert adapter.flush() == set()


def test_refresh_requeues_gestures_in_flight(store, adapter):
    adapter.drag_start("a")
    adapter.drag_move("a", 10, 10)
    adapter.flush()

    store.set_rest("a", Position(100, 100))
    assert store.get_position("a") == Position(310, 210)

    adapter.refresh()
    assert adapter.has_pending("a")
    adapter.flush()
    assert store.get_position("a") == Position(110, 110)


def test_refresh_without_gestures_is_a_no_op(store, adapter):
    adapter.refresh()
    assert not adapter.has_pending()
