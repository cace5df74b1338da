"""
geometry.py — Position type, bounds clamp, and circle-overlap helpers.

Positions are the top-left corner of a bubble's bounding box, exactly like
QGraphicsItem.pos() for an ellipse item whose rect starts at (0, 0).
Distances between bubbles are always measured between centers.
"""

import math
from typing import NamedTuple, Sequence

import numpy as np


class Position(NamedTuple):
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def lerp(self, target: "Position", t: float) -> "Position":
        return Position(self.x + (target.x - self.x) * t,
                        self.y + (target.y - self.y) * t)

    def distance_to(self, other: "Position") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


def center_of(pos: Position, radius: float) -> Position:
    return Position(pos.x + radius, pos.y + radius)


def clamp_to_viewport(pos: Position, radius: float,
                      width: float, height: float) -> Position:
    """Keep the bubble's bounding box inside the viewport.

    When the bubble is larger than the viewport the upper bound goes
    negative and the position collapses to 0 on that axis.
    """
    max_x = width  - radius * 2
    max_y = height - radius * 2
    return Position(max(0.0, min(max_x, pos.x)),
                    max(0.0, min(max_y, pos.y)))


def separation(pos_a: Position, radius_a: float,
               pos_b: Position, radius_b: float) -> tuple[float, float, float]:
    """Return (dx, dy, distance) from A's center to B's center."""
    ca = center_of(pos_a, radius_a)
    cb = center_of(pos_b, radius_b)
    dx = cb.x - ca.x
    dy = cb.y - ca.y
    return dx, dy, math.hypot(dx, dy)


def overlap_matrix(positions: Sequence[Position], radii: Sequence[float],
                   margin: float) -> np.ndarray:
    """Pairwise overlap (min_dist - distance) as an N×N array.

    Positive entries are collisions. The diagonal is -inf so a bubble never
    collides with itself.
    """
    n = len(positions)
    if n == 0:
        return np.zeros((0, 0))
    r = np.asarray(radii, dtype=float)
    centers = np.asarray(positions, dtype=float).reshape(n, 2) + r[:, None]
    diff = centers[None, :, :] - centers[:, None, :]
    dist = np.hypot(diff[..., 0], diff[..., 1])
    min_dist = r[:, None] + r[None, :] + margin
    overlap = min_dist - dist
    np.fill_diagonal(overlap, -np.inf)
    return overlap
