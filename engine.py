"""
engine.py — BubbleMenuEngine: one mounted bubble menu.

Owns the store, the drag adapter, the collision resolver, the
return-to-rest controller and the scheduler, and is the only object a
host (the Qt scene, a test, a script) needs to talk to.

    engine = BubbleMenuEngine(items, width=800, height=600)
    engine.scheduler.frame_ready.connect(on_frame)
    engine.start()
    ...
    engine.drag_start("tips"); engine.drag_move("tips", 40, -12)
    engine.drag_end("tips")
    ...
    engine.unmount()
"""

import logging
from typing import Callable, Iterable, Mapping

from collision import CollisionResolver
from config import MenuConfig
from drag_adapter import DragAdapter
from geometry import Position
from layout import compute_rest_positions
from position_store import (
    BubbleDescriptor, BubbleRecord, BubbleState, DuplicateBubbleError,
    PositionStore,
)
from return_to_rest import ReturnToRestController
from scheduler import DualRateScheduler

logger = logging.getLogger(__name__)


def normalize_items(items: Iterable) -> list[BubbleDescriptor]:
    """Accept descriptors or plain mappings; reject duplicate ids."""
    result: list[BubbleDescriptor] = []
    seen: set[str] = set()
    for item in items:
        desc = item if isinstance(item, BubbleDescriptor) else BubbleDescriptor.from_dict(item)
        if desc.id in seen:
            raise DuplicateBubbleError(desc.id)
        seen.add(desc.id)
        result.append(desc)
    return result


class BubbleMenuEngine:

    def __init__(self, items: Iterable[BubbleDescriptor | Mapping] = (),
                 width: float = 800, height: float = 600,
                 config: MenuConfig | None = None,
                 clock: Callable[[], float] | None = None, parent=None):
        self.config = (config or MenuConfig()).validate()
        self.store      = PositionStore(width, height)
        self.adapter    = DragAdapter(self.store)
        self.resolver   = CollisionResolver(self.config.collision)
        self.controller = ReturnToRestController(self.resolver, self.config.return_to_rest)
        self.scheduler  = DualRateScheduler(
            self.store, self.adapter, self.resolver, self.controller,
            self.config.scheduler, clock=clock, parent=parent)
        self._items: list[BubbleDescriptor] = []
        self.set_items(items)

    # ------------------------------------------------------------------
    # Mounting
    # ------------------------------------------------------------------

    @property
    def items(self) -> list[BubbleDescriptor]:
        return list(self._items)

    def ids(self) -> list[str]:
        return self.store.ids()

    def set_items(self, items: Iterable[BubbleDescriptor | Mapping]):
        """(Re)mount the menu with a new item list.

        Bubbles whose id survives keep their current position; new ids
        start at their rest position. Gestures in flight are cancelled.
        """
        descriptors = normalize_items(items)
        previous = self.store.snapshot()
        self.adapter.cancel_all()
        self.store.clear()
        self._items = descriptors

        rests = compute_rest_positions(descriptors, self.store.width,
                                       self.store.height, self.config.layout)
        default_r = self.config.layout.bubble_radius
        for desc in descriptors:
            rest = rests[desc.id]
            self.store.add(BubbleRecord(
                id=desc.id,
                radius=desc.radius if desc.radius is not None else default_r,
                rest=rest,
                position=previous.get(desc.id, rest),
                payload=desc.payload,
            ))
        self.scheduler.sync_rendered()
        self.scheduler.update_states()
        logger.info(f"Mounted bubble menu with {len(descriptors)} item(s)")

    def set_viewport(self, width: float, height: float):
        """Recompute rest positions for a new viewport size."""
        if (width, height) == (self.store.width, self.store.height):
            return
        self.store.set_viewport(width, height)
        rests = compute_rest_positions(self._items, width, height, self.config.layout)
        for bubble_id, rest in rests.items():
            self.store.set_rest(bubble_id, rest)
        self.adapter.refresh()
        self.scheduler.snap_rendered()
        self.scheduler.update_states()
        self.scheduler.frame_ready.emit(self.store.snapshot())
        logger.debug(f"Viewport set to {width}x{height}")

    def reset(self):
        """Cancel gestures and put every bubble straight back at rest."""
        self.adapter.cancel_all()
        for rec in self.store:
            self.store.set_position(rec.id, rec.rest)
        self.scheduler.update_states()
        self.scheduler.snap_rendered()
        self.scheduler.frame_ready.emit(self.store.snapshot())

    def unmount(self):
        self.scheduler.stop()
        self.adapter.cancel_all()
        self.store.clear()
        self.scheduler.sync_rendered()
        self._items = []

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self):
        self.scheduler.start()

    def stop(self):
        self.scheduler.stop()

    def run_logic_tick(self) -> bool:
        return self.scheduler.run_logic_tick()

    def run_ui_tick(self) -> dict[str, Position]:
        return self.scheduler.run_ui_tick()

    def tick(self, logic_ticks: int = 1):
        """Run logic ticks, each followed by a full period of UI ticks."""
        for _ in range(logic_ticks):
            self.run_logic_tick()
            for _ in range(self.scheduler.steps):
                self.run_ui_tick()

    # ------------------------------------------------------------------
    # Drag input
    # ------------------------------------------------------------------

    def drag_start(self, bubble_id: str) -> bool:
        started = self.adapter.drag_start(bubble_id)
        if started:
            self.scheduler.update_states()
        return started

    def drag_move(self, bubble_id: str, dx: float, dy: float) -> bool:
        return self.adapter.drag_move(bubble_id, dx, dy)

    def drag_end(self, bubble_id: str) -> bool:
        ended = self.adapter.drag_end(bubble_id)
        if ended:
            self.scheduler.update_states()
        return ended

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_position(self, bubble_id: str) -> Position:
        return self.store.get_position(bubble_id)

    def get_rendered_position(self, bubble_id: str) -> Position:
        self.store.get(bubble_id)
        return self.scheduler.rendered_position(bubble_id)

    def get_is_dragging(self, bubble_id: str) -> bool:
        return self.store.get_is_dragging(bubble_id)

    def get_state(self, bubble_id: str) -> BubbleState:
        return self.store.get(bubble_id).state

    def get_radius(self, bubble_id: str) -> float:
        return self.store.get(bubble_id).radius

    def rest_position(self, bubble_id: str) -> Position:
        return self.store.get(bubble_id).rest

    def is_colliding(self, bubble_id: str) -> bool:
        return self.resolver.find_collision(self.store, bubble_id) is not None

    def max_overlap(self) -> float:
        return self.resolver.max_overlap(self.store)

    def set_avoid_collision(self, bubble_id: str, value: bool):
        self.store.get(bubble_id).avoid_collision = bool(value)

    def get_avoid_collision(self, bubble_id: str) -> bool:
        return self.store.get(bubble_id).avoid_collision
