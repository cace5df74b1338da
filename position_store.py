"""
position_store.py — PositionStore: the authoritative id → bubble registry.

Every write goes through the viewport clamp, so no caller can leave a
bubble outside the visible area. Records keep insertion order, which is
the menu's item order and therefore the collision pass order.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping

from geometry import Position, clamp_to_viewport

logger = logging.getLogger(__name__)


class BubbleMenuError(Exception):
    """Base class for errors raised by the bubble menu engine."""


class UnknownBubbleError(BubbleMenuError, KeyError):
    def __init__(self, bubble_id: str):
        super().__init__(bubble_id)
        self.bubble_id = bubble_id

    def __str__(self):
        return f"unknown bubble id {self.bubble_id!r}"


class DuplicateBubbleError(BubbleMenuError, ValueError):
    def __init__(self, bubble_id: str):
        super().__init__(f"duplicate bubble id {bubble_id!r}")
        self.bubble_id = bubble_id


class BubbleState(Enum):
    AT_REST   = "at_rest"
    DRAGGING  = "dragging"
    RETURNING = "returning"
    COLLIDING = "colliding"


# ---------------------------------------------------------------------------
# Descriptors and records
# ---------------------------------------------------------------------------

@dataclass
class BubbleDescriptor:
    """One menu entry as handed in by the host. The core reads id and radius."""
    id: str
    radius: float | None = None
    payload: Any = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "BubbleDescriptor":
        if "id" not in data:
            raise ValueError(f"bubble descriptor without id: {dict(data)!r}")
        extra = {k: v for k, v in data.items() if k not in ("id", "radius")}
        radius = data.get("radius")
        return cls(id=str(data["id"]),
                   radius=float(radius) if radius is not None else None,
                   payload=extra or None)


@dataclass
class BubbleRecord:
    id: str
    radius: float
    rest: Position
    position: Position
    is_dragging: bool = False
    avoid_collision: bool = True
    state: BubbleState = BubbleState.AT_REST
    payload: Any = field(default=None, repr=False)

    @property
    def is_out_of_position(self) -> bool:
        return self.position != self.rest


# ---------------------------------------------------------------------------
# PositionStore
# ---------------------------------------------------------------------------

class PositionStore:

    def __init__(self, width: float, height: float):
        self._width  = float(width)
        self._height = float(height)
        self._records: dict[str, BubbleRecord] = {}

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def set_viewport(self, width: float, height: float):
        """Resize the viewport and re-clamp every current position."""
        self._width  = float(width)
        self._height = float(height)
        for rec in self._records.values():
            rec.position = self.clamp(rec, rec.position)

    def clamp(self, rec: BubbleRecord, pos: Position) -> Position:
        return clamp_to_viewport(pos, rec.radius, self._width, self._height)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add(self, rec: BubbleRecord):
        if rec.id in self._records:
            raise DuplicateBubbleError(rec.id)
        rec.rest     = self.clamp(rec, rec.rest)
        rec.position = self.clamp(rec, rec.position)
        self._records[rec.id] = rec

    def remove(self, bubble_id: str) -> BubbleRecord:
        try:
            return self._records.pop(bubble_id)
        except KeyError:
            raise UnknownBubbleError(bubble_id) from None

    def clear(self):
        self._records.clear()

    def get(self, bubble_id: str) -> BubbleRecord:
        try:
            return self._records[bubble_id]
        except KeyError:
            raise UnknownBubbleError(bubble_id) from None

    def ids(self) -> list[str]:
        return list(self._records)

    def __contains__(self, bubble_id) -> bool:
        return bubble_id in self._records

    def __iter__(self) -> Iterator[BubbleRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Positions and flags
    # ------------------------------------------------------------------

    def get_position(self, bubble_id: str) -> Position:
        return self.get(bubble_id).position

    def set_position(self, bubble_id: str, pos: Position) -> Position:
        """Write a clamped position and return what was actually stored."""
        rec = self.get(bubble_id)
        rec.position = self.clamp(rec, Position(float(pos[0]), float(pos[1])))
        return rec.position

    def get_is_dragging(self, bubble_id: str) -> bool:
        return self.get(bubble_id).is_dragging

    def set_dragging(self, bubble_id: str, dragging: bool):
        self.get(bubble_id).is_dragging = bool(dragging)

    def set_rest(self, bubble_id: str, rest: Position):
        rec = self.get(bubble_id)
        rec.rest = self.clamp(rec, rest)

    def is_out_of_position(self, bubble_id: str) -> bool:
        return self.get(bubble_id).is_out_of_position

    def any_active(self) -> bool:
        """True if any bubble is being dragged or is away from rest."""
        return any(rec.is_dragging or rec.is_out_of_position
                   for rec in self._records.values())

    def active_ids(self) -> set[str]:
        return {rec.id for rec in self._records.values()
                if rec.is_dragging or rec.is_out_of_position}

    def snapshot(self) -> dict[str, Position]:
        return {rec.id: rec.position for rec in self._records.values()}
