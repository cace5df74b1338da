"""
layout.py — Rest positions for the radial bubble menu.

Item 0 sits in the middle of the viewport; every other item sits on a ring
around it. Nothing here has side effects, so recomputing for the same items
and viewport always gives the same positions.
"""

import math
from typing import Sequence

from config import LayoutConfig
from geometry import Position, clamp_to_viewport


def ring_angle(index: int, count: int, rotation_divisor: float) -> float:
    if index == 0 or count < 2:
        return 0.0
    return index * (2 * math.pi) / (count - 1) - math.pi / rotation_divisor


def ring_distance(index: int, menu_distance: float, base_spacing: float) -> float:
    return 0.0 if index == 0 else menu_distance + base_spacing


def constrain_to_viewport(pos: Position, radius: float, width: float,
                          height: float, edge_margin: float) -> Position:
    """Bounds clamp plus a horizontal gap from the left and right edges.

    The plain bounds clamp is applied last so a viewport too narrow for
    the gap still yields an in-bounds position.
    """
    x = max(edge_margin, min(width - radius * 2 - edge_margin, pos.x))
    return clamp_to_viewport(Position(x, pos.y), radius, width, height)


def rest_position(index: int, count: int, radius: float, menu_distance: float,
                  center: Position, width: float, height: float,
                  cfg: LayoutConfig | None = None) -> Position:
    cfg = cfg or LayoutConfig()
    angle    = ring_angle(index, count, cfg.rotation_divisor)
    distance = ring_distance(index, menu_distance, cfg.base_spacing)
    x = center.x + math.cos(angle) * distance - radius
    y = center.y + math.sin(angle) * distance - radius
    return constrain_to_viewport(Position(x, y), radius, width, height,
                                 cfg.edge_margin)


def compute_rest_positions(items: Sequence, width: float, height: float,
                           cfg: LayoutConfig | None = None) -> dict[str, Position]:
    """Map each descriptor id to its rest position.

    ``items`` are BubbleDescriptor-like objects with ``id`` and an optional
    ``radius``; a missing radius falls back to ``cfg.bubble_radius``.
    """
    cfg = cfg or LayoutConfig()
    center = Position(width / 2, height / 2)
    count = len(items)
    positions: dict[str, Position] = {}
    for index, item in enumerate(items):
        radius = item.radius if item.radius is not None else cfg.bubble_radius
        positions[item.id] = rest_position(
            index, count, radius, cfg.menu_distance, center,
            width, height, cfg)
    return positions
