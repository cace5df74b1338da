"""
return_to_rest.py — ReturnToRestController and its easing strategies.

A bubble drifts back to its rest position only while it is free: not
dragged, not overlapping anything, and not about to overlap anything at the
next step. Blocked bubbles simply wait for a later tick.

Easings:
  FractionalEasing — covers a fixed fraction of the remaining distance
                     per tick (asymptotic; the threshold snap ends it)
  CurveEasing      — follows a named curve and lands on rest after a
                     fixed number of committed steps
"""

import logging
import math
from typing import Callable

from collision import CollisionResolver
from config import ReturnConfig
from geometry import Position
from position_store import PositionStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Curves
# ---------------------------------------------------------------------------

def linear(t: float) -> float:
    return t


def ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def ease_in_out_sine(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


CURVES: dict[str, Callable[[float], float]] = {
    "linear":           linear,
    "ease_out_quad":    ease_out_quad,
    "ease_out_cubic":   ease_out_cubic,
    "ease_in_out_sine": ease_in_out_sine,
}


# ---------------------------------------------------------------------------
# Easings
# ---------------------------------------------------------------------------

class FractionalEasing:
    """next = current + (rest - current) * factor."""

    def __init__(self, factor: float):
        self.factor = factor

    def step(self, bubble_id: str, current: Position, target: Position) -> Position:
        return current.lerp(target, self.factor)

    def advance(self, bubble_id: str):
        pass

    def reset(self, bubble_id: str):
        pass


class CurveEasing:
    """Ease along ``curve`` so the bubble arrives after ``duration_ticks`` steps.

    Each step covers the share of the *remaining* distance that the curve
    covers between step k and k+1, so the motion stays correct even when
    the rest position moves or a step is deferred.
    """

    def __init__(self, duration_ticks: int, curve: Callable[[float], float] = ease_out_cubic):
        self.duration_ticks = max(1, int(duration_ticks))
        self.curve = curve
        self._elapsed: dict[str, int] = {}

    def _fraction(self, k: int) -> float:
        n = self.duration_ticks
        if k + 1 >= n:
            return 1.0
        c0 = self.curve(k / n)
        c1 = self.curve((k + 1) / n)
        if c0 >= 1.0:
            return 1.0
        return min(1.0, max(0.0, (c1 - c0) / (1.0 - c0)))

    def step(self, bubble_id: str, current: Position, target: Position) -> Position:
        frac = self._fraction(self._elapsed.get(bubble_id, 0))
        if frac >= 1.0:
            return target
        return current.lerp(target, frac)

    def advance(self, bubble_id: str):
        self._elapsed[bubble_id] = self._elapsed.get(bubble_id, 0) + 1

    def reset(self, bubble_id: str):
        self._elapsed.pop(bubble_id, None)

    def progress(self, bubble_id: str) -> int:
        return self._elapsed.get(bubble_id, 0)


def make_easing(cfg: ReturnConfig):
    if cfg.easing == "curve":
        try:
            curve = CURVES[cfg.curve]
        except KeyError:
            raise ValueError(
                f"unknown easing curve {cfg.curve!r}, expected one of {sorted(CURVES)}"
            ) from None
        return CurveEasing(cfg.duration_ticks, curve)
    return FractionalEasing(cfg.easing_factor)


# ---------------------------------------------------------------------------
# ReturnToRestController
# ---------------------------------------------------------------------------

class ReturnToRestController:

    def __init__(self, resolver: CollisionResolver,
                 cfg: ReturnConfig | None = None, easing=None):
        cfg = cfg or ReturnConfig()
        self.resolver  = resolver
        self.threshold = cfg.threshold
        self.easing    = easing if easing is not None else make_easing(cfg)

    def next_position(self, bubble_id: str, current: Position,
                      rest: Position) -> Position:
        if current.distance_to(rest) < self.threshold:
            return rest
        return self.easing.step(bubble_id, current, rest)

    def return_to_rest(self, store: PositionStore) -> set[str]:
        """Move every free, out-of-place bubble one step toward rest."""
        moved: set[str] = set()
        for rec in store:
            try:
                if self._step_bubble(store, rec.id):
                    moved.add(rec.id)
            except Exception:
                logger.exception(f"Return to rest failed for bubble {rec.id!r}")
        return moved

    def _step_bubble(self, store: PositionStore, bubble_id: str) -> bool:
        rec = store.get(bubble_id)
        if rec.is_dragging or not rec.is_out_of_position:
            self.easing.reset(bubble_id)
            return False
        if self.resolver.find_collision(store, bubble_id) is not None:
            return False

        nxt = self.next_position(bubble_id, rec.position, rec.rest)
        blocker = self.resolver.find_collision(store, bubble_id, at=nxt)
        if blocker is not None:
            logger.debug(f"Return of {bubble_id!r} deferred, {blocker!r} in the way")
            return False

        stored = store.set_position(bubble_id, nxt)
        if stored == rec.rest:
            self.easing.reset(bubble_id)
        else:
            self.easing.advance(bubble_id)
        return True
