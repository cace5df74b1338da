"""
drag_adapter.py — DragAdapter: pointer input → candidate positions.

Deltas are relative to the bubble's rest position (the whole gesture so
far, not the last mouse step). Moves are only recorded; flush() writes the
latest one per bubble into the store, once per logic tick, so the store
sees at most one drag write per bubble per tick and the dragged bubble is
exactly at clamp(rest + delta) whenever a tick runs.
"""

import logging

from geometry import Position
from position_store import PositionStore

logger = logging.getLogger(__name__)


class DragAdapter:

    def __init__(self, store: PositionStore):
        self._store = store
        self._pending: dict[str, tuple[float, float]] = {}
        self._deltas:  dict[str, tuple[float, float]] = {}

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def drag_start(self, bubble_id: str) -> bool:
        if bubble_id not in self._store:
            logger.warning(f"drag_start for unknown bubble {bubble_id!r} ignored")
            return False
        rec = self._store.get(bubble_id)
        if rec.is_dragging:
            logger.warning(f"drag_start for {bubble_id!r} while already dragging ignored")
            return False
        rec.is_dragging = True
        self._pending.pop(bubble_id, None)
        rest, pos = rec.rest, rec.position
        self._deltas[bubble_id] = (pos.x - rest.x, pos.y - rest.y)
        return True

    def drag_move(self, bubble_id: str, dx: float, dy: float) -> bool:
        if bubble_id not in self._store:
            logger.warning(f"drag_move for unknown bubble {bubble_id!r} ignored")
            return False
        if not self._store.get_is_dragging(bubble_id):
            logger.warning(f"drag_move for {bubble_id!r} without drag_start ignored")
            return False
        self._pending[bubble_id] = (float(dx), float(dy))
        self._deltas[bubble_id]  = (float(dx), float(dy))
        return True

    def drag_end(self, bubble_id: str) -> bool:
        if bubble_id not in self._store:
            logger.warning(f"drag_end for unknown bubble {bubble_id!r} ignored")
            return False
        if not self._store.get_is_dragging(bubble_id):
            logger.warning(f"drag_end for {bubble_id!r} without drag_start ignored")
            return False
        self._write(bubble_id)
        self._store.set_dragging(bubble_id, False)
        self._deltas.pop(bubble_id, None)
        return True

    def refresh(self):
        """Re-queue every gesture in flight so the next flush re-derives its
        position from the current rest (after a viewport change)."""
        for bubble_id, delta in self._deltas.items():
            if bubble_id in self._store:
                self._pending.setdefault(bubble_id, delta)

    def cancel_all(self):
        """Drop every gesture in flight (used on remount/unmount)."""
        for bubble_id in list(self._deltas):
            if bubble_id in self._store:
                self._store.set_dragging(bubble_id, False)
        self._pending.clear()
        self._deltas.clear()

    # ------------------------------------------------------------------
    # Store writes
    # ------------------------------------------------------------------

    def flush(self) -> set[str]:
        """Write the latest pending delta of every dragged bubble."""
        written = set()
        for bubble_id in list(self._pending):
            if self._write(bubble_id):
                written.add(bubble_id)
        return written

    def _write(self, bubble_id: str) -> bool:
        delta = self._pending.pop(bubble_id, None)
        if delta is None:
            return False
        if bubble_id not in self._store:
            logger.warning(f"Pending drag for removed bubble {bubble_id!r} dropped")
            self._deltas.pop(bubble_id, None)
            return False
        rest = self._store.get(bubble_id).rest
        self._store.set_position(bubble_id, rest.offset(*delta))
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_pending(self, bubble_id: str | None = None) -> bool:
        if bubble_id is None:
            return bool(self._pending)
        return bubble_id in self._pending

    def cumulative_delta(self, bubble_id: str) -> tuple[float, float] | None:
        return self._deltas.get(bubble_id)

    def preview_position(self, bubble_id: str) -> Position:
        """Where the pointer has the bubble right now, before the next flush."""
        rec = self._store.get(bubble_id)
        delta = self._pending.get(bubble_id)
        if delta is None:
            return rec.position
        return self._store.clamp(rec, rec.rest.offset(*delta))
