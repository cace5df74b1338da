import pytest

from geometry import Position
from position_store import (
    BubbleDescriptor, BubbleMenuError, BubbleRecord, DuplicateBubbleError,
    PositionStore, UnknownBubbleError,
)


def record(bubble_id, x=0.0, y=0.0, radius=50.0):
    pos = Position(x, y)
    return BubbleRecord(id=bubble_id, radius=radius, rest=pos, position=pos)


@pytest.fixture
def store():
    s = PositionStore(800, 600)
    s.add(record("a", 100, 100))
    s.add(record("b", 300, 100))
    return s


def test_registry_keeps_insertion_order(store):
    store.add(record("c"))
    assert store.ids() == ["a", "b", "c"]
    assert len(store) == 3
    assert "b" in store and "z" not in store


def test_duplicate_id_rejected(store):
    with pytest.raises(DuplicateBubbleError):
        store.add(record("a"))


def test_unknown_id_raises(store):
    with pytest.raises(UnknownBubbleError) as info:
        store.get_position("ghost")
    assert info.value.bubble_id == "ghost"
    assert isinstance(info.value, KeyError)
    assert isinstance(info.value, BubbleMenuError)
    assert "ghost" in str(info.value)


def test_set_position_clamps(store):
    assert store.set_position("a", Position(-50, 9000)) == Position(0, 500)
    assert store.get_position("a") == Position(0, 500)


def test_add_clamps_rest_and_position():
    s = PositionStore(400, 400)
    s.add(record("x", 1000, -10))
    rec = s.get("x")
    assert rec.rest == Position(300, 0)
    assert rec.position == Position(300, 0)


def test_set_viewport_reclamps(store):
    store.set_viewport(300, 300)
    assert store.get_position("b") == Position(200, 100)
    assert (store.width, store.height) == (300, 300)


def test_active_ids(store):
    assert not store.any_active()
    store.set_dragging("a", True)
    store.set_position("b", Position(310, 100))
    assert store.active_ids() == {"a", "b"}
    assert store.is_out_of_position("b")
    assert not store.is_out_of_position("a")


def test_remove_and_snapshot(store):
    store.remove("a")
    assert store.snapshot() == {"b": Position(300, 100)}
    with pytest.raises(UnknownBubbleError):
        store.remove("a")


def test_descriptor_from_dict():
    desc = BubbleDescriptor.from_dict({"id": 7, "radius": "40", "text": "Seven"})
    assert desc.id == "7"
    assert desc.radius == 40.0
    assert desc.payload == {"text": "Seven"}
    assert BubbleDescriptor.from_dict({"id": "x"}).payload is None
    with pytest.raises(ValueError):
        BubbleDescriptor.from_dict({"text": "no id"})
