"""
collision.py — CollisionResolver: pushes overlapping bubbles apart.

One pass per logic tick, pairs visited in item order. Each pair sees the
positions written by the pairs before it, so a chain of overlaps settles
over a few ticks rather than inside one.

Coincident centers have no direction to push along. The earlier bubble in
item order is nudged towards -x and the later one towards +x.
"""

import logging
from typing import Iterable

import numpy as np

from config import CollisionConfig
from geometry import Position, overlap_matrix, separation
from position_store import BubbleRecord, PositionStore

logger = logging.getLogger(__name__)


class CollisionResolver:

    def __init__(self, cfg: CollisionConfig | None = None):
        cfg = cfg or CollisionConfig()
        self.margin = cfg.margin
        self.nudge  = cfg.nudge

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def min_distance(self, a: BubbleRecord, b: BubbleRecord) -> float:
        return a.radius + b.radius + self.margin

    def collides(self, a: BubbleRecord, b: BubbleRecord,
                 at: Position | None = None) -> bool:
        if not (a.avoid_collision and b.avoid_collision):
            return False
        pos_a = a.position if at is None else at
        _, _, distance = separation(pos_a, a.radius, b.position, b.radius)
        return distance < self.min_distance(a, b)

    def find_collision(self, store: PositionStore, bubble_id: str,
                       at: Position | None = None) -> str | None:
        """Id of the first bubble overlapping ``bubble_id`` (optionally at ``at``)."""
        rec = store.get(bubble_id)
        for other in store:
            if other.id == bubble_id:
                continue
            if self.collides(rec, other, at):
                return other.id
        return None

    def overlap_matrix(self, store: PositionStore) -> np.ndarray:
        """Pairwise overlap in item order; pairs with an opted-out bubble are -inf."""
        records = list(store)
        overlap = overlap_matrix([r.position for r in records],
                                 [r.radius for r in records], self.margin)
        avoid = np.array([r.avoid_collision for r in records], dtype=bool)
        overlap[~(avoid[:, None] & avoid[None, :])] = -np.inf
        return overlap

    def colliding_ids(self, store: PositionStore) -> set[str]:
        records = list(store)
        if len(records) < 2:
            return set()
        hits = (self.overlap_matrix(store) > 0).any(axis=1)
        return {rec.id for rec, hit in zip(records, hits) if hit}

    def max_overlap(self, store: PositionStore) -> float:
        """Worst overlap between two non-dragged bubbles (<= 0 when clear)."""
        records = list(store)
        free = np.array([not r.is_dragging for r in records], dtype=bool)
        if free.sum() < 2:
            return 0.0
        overlap = self.overlap_matrix(store)[np.ix_(free, free)]
        return float(overlap.max())

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, store: PositionStore,
                ids: Iterable[str] | None = None) -> set[str]:
        """Run one corrective pass and return the ids that were moved.

        With ``ids`` only pairs that include at least one of those bubbles
        are examined; unknown ids are logged and ignored.
        """
        focus = None
        if ids is not None:
            focus = set()
            for bubble_id in ids:
                if bubble_id in store:
                    focus.add(bubble_id)
                else:
                    logger.warning(f"Collision check skipped for unknown bubble {bubble_id!r}")
            if not focus:
                return set()

        records = list(store)
        moved: set[str] = set()
        for i, a in enumerate(records):
            for b in records[i + 1:]:
                if focus is not None and a.id not in focus and b.id not in focus:
                    continue
                try:
                    moved |= self._resolve_pair(store, a, b)
                except Exception:
                    logger.exception(f"Collision between {a.id!r} and {b.id!r} not resolved")
        return moved

    def _resolve_pair(self, store: PositionStore,
                      a: BubbleRecord, b: BubbleRecord) -> set[str]:
        if not (a.avoid_collision and b.avoid_collision):
            return set()
        if a.is_dragging and b.is_dragging:
            return set()

        dx, dy, distance = separation(a.position, a.radius, b.position, b.radius)
        min_dist = self.min_distance(a, b)
        if distance >= min_dist:
            return set()

        if distance == 0:
            ux, uy = 1.0, 0.0
            share = full = self.nudge
        else:
            ux, uy = dx / distance, dy / distance
            full  = min_dist - distance
            share = full / 2

        moved = set()
        if a.is_dragging:
            store.set_position(b.id, b.position.offset(ux * full, uy * full))
            moved.add(b.id)
        elif b.is_dragging:
            store.set_position(a.id, a.position.offset(-ux * full, -uy * full))
            moved.add(a.id)
        else:
            store.set_position(a.id, a.position.offset(-ux * share, -uy * share))
            store.set_position(b.id, b.position.offset(ux * share, uy * share))
            moved.update((a.id, b.id))
        logger.debug(f"Separated {a.id!r} / {b.id!r}, overlap {min_dist - distance:.2f}")
        return moved
