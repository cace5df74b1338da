"""
scheduler.py — DualRateScheduler: logic ticks and UI ticks at two rates.

Logic tick (slow): apply drag input, push overlapping bubbles apart, ease
free bubbles back to rest, refresh per-bubble states. Skipped entirely
while nothing is dragged and everything sits at rest.

UI tick (fast): move each bubble's rendered position a fixed step toward
the latest logic result. The step is fixed at the start of each logic
period, so the UI never chases a half-finished logic update.

Both run as PeriodicTask objects on the Qt event loop. A task re-arms a
single-shot QTimer against a monotonic deadline; when it falls behind it
skips the missed periods instead of running them back to back.

Signals (DualRateScheduler):
    logic_ticked(int)         — index of the logic tick that did work
    frame_ready(object)       — dict id → Position of rendered positions
    state_changed(str, str)   — bubble id, new BubbleState value
"""

import logging
from typing import Callable

from PyQt6.QtCore import QObject, QElapsedTimer, QTimer, Qt, pyqtSignal

from collision import CollisionResolver
from config import SchedulerConfig
from drag_adapter import DragAdapter
from geometry import Position
from position_store import BubbleState, PositionStore
from return_to_rest import ReturnToRestController

logger = logging.getLogger(__name__)


class MonotonicClock:
    """Milliseconds since construction, from QElapsedTimer."""

    def __init__(self):
        self._timer = QElapsedTimer()
        self._timer.start()

    def __call__(self) -> float:
        return self._timer.nsecsElapsed() / 1_000_000.0


# ---------------------------------------------------------------------------
# PeriodicTask
# ---------------------------------------------------------------------------

class PeriodicTask(QObject):

    def __init__(self, name: str, period_ms: float, callback: Callable[[], object],
                 clock: Callable[[], float], parent=None):
        super().__init__(parent)
        self.name      = name
        self.period_ms = float(period_ms)
        self._callback = callback
        self._clock    = clock
        self._deadline: float | None = None
        self._busy     = False

        self.runs    = 0
        self.dropped = 0   # whole periods lost to lateness
        self.skipped = 0   # fires refused because the previous run was active

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)

    def start(self):
        self._deadline = self._clock() + self.period_ms
        self._timer.start(int(round(self.period_ms)))

    def stop(self):
        self._timer.stop()
        self._deadline = None

    def is_active(self) -> bool:
        return self._deadline is not None

    def fire(self, now: float | None = None) -> bool:
        """Run the callback once if not already running; return whether it ran."""
        if self._busy:
            self.skipped += 1
            logger.debug(f"{self.name} tick skipped, previous run still active")
            return False
        now = self._clock() if now is None else now
        self._advance_deadline(now)

        self._busy = True
        try:
            self._callback()
        except Exception:
            logger.exception(f"{self.name} tick failed")
        finally:
            self._busy = False
        self.runs += 1
        return True

    def _advance_deadline(self, now: float):
        if self._deadline is None:
            return
        late = now - self._deadline
        if late >= self.period_ms:
            missed = int(late // self.period_ms)
            self.dropped += missed
            logger.debug(f"{self.name} tick {late:.1f} ms late, dropping {missed} period(s)")
            self._deadline += (missed + 1) * self.period_ms
        else:
            self._deadline += self.period_ms

    def _on_timeout(self):
        self.fire()
        if self._deadline is not None:
            delay = max(0.0, self._deadline - self._clock())
            self._timer.start(int(round(delay)))


# ---------------------------------------------------------------------------
# DualRateScheduler
# ---------------------------------------------------------------------------

class DualRateScheduler(QObject):

    logic_ticked  = pyqtSignal(int)
    frame_ready   = pyqtSignal(object)
    state_changed = pyqtSignal(str, str)

    def __init__(self, store: PositionStore, adapter: DragAdapter,
                 resolver: CollisionResolver, controller: ReturnToRestController,
                 cfg: SchedulerConfig | None = None,
                 clock: Callable[[], float] | None = None, parent=None):
        super().__init__(parent)
        cfg = cfg or SchedulerConfig()
        self.store      = store
        self.adapter    = adapter
        self.resolver   = resolver
        self.controller = controller
        self.steps      = cfg.ui_steps_per_logic_tick
        self.clock      = clock or MonotonicClock()

        self.logic_task = PeriodicTask("logic", cfg.logic_interval_ms,
                                       self.run_logic_tick, self.clock, self)
        self.ui_task    = PeriodicTask("ui", cfg.ui_interval_ms,
                                       self.run_ui_tick, self.clock, self)

        self.logic_ticks = 0
        self._rendered:  dict[str, Position] = {}
        self._target:    dict[str, Position] = {}
        self._step:      dict[str, tuple[float, float]] = {}
        self._remaining: dict[str, int] = {}
        self.sync_rendered()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self):
        self.logic_task.start()
        self.ui_task.start()

    def stop(self):
        self.logic_task.stop()
        self.ui_task.stop()

    def is_running(self) -> bool:
        return self.logic_task.is_active() or self.ui_task.is_active()

    def sync_rendered(self):
        """Match rendered positions to the store's ids, snapping new ones."""
        ids = set(self.store.ids())
        for stale in set(self._rendered) - ids:
            for table in (self._rendered, self._target, self._step, self._remaining):
                table.pop(stale, None)
        for rec in self.store:
            if rec.id not in self._rendered:
                self._rendered[rec.id] = rec.position
                self._target[rec.id]   = rec.position
                self._remaining[rec.id] = 0

    def snap_rendered(self):
        """Jump every rendered position straight to the store (no easing)."""
        for rec in self.store:
            self._rendered[rec.id]  = rec.position
            self._target[rec.id]    = rec.position
            self._remaining[rec.id] = 0

    # ------------------------------------------------------------------
    # Logic tick
    # ------------------------------------------------------------------

    def is_quiescent(self) -> bool:
        return not self.store.any_active()

    def run_logic_tick(self) -> bool:
        """One logic pass; returns False when skipped as quiescent."""
        self.adapter.flush()
        active = self.store.active_ids()
        if not active:
            return False

        self.resolver.resolve(self.store, active)
        self.controller.return_to_rest(self.store)
        self.update_states()
        self._begin_segments()

        self.logic_ticks += 1
        self.logic_ticked.emit(self.logic_ticks)
        return True

    def update_states(self):
        """Recompute every bubble's BubbleState, emitting state_changed on change."""
        colliding = self.resolver.colliding_ids(self.store)
        for rec in self.store:
            if rec.is_dragging:
                state = BubbleState.DRAGGING
            elif rec.id in colliding:
                state = BubbleState.COLLIDING
            elif rec.is_out_of_position:
                state = BubbleState.RETURNING
            else:
                state = BubbleState.AT_REST
            if state is not rec.state:
                rec.state = state
                self.state_changed.emit(rec.id, state.value)

    def _begin_segments(self):
        for rec in self.store:
            target = rec.position
            start = self._rendered.setdefault(rec.id, target)
            self._target[rec.id] = target
            if start == target:
                self._remaining[rec.id] = 0
                continue
            self._step[rec.id] = ((target.x - start.x) / self.steps,
                                  (target.y - start.y) / self.steps)
            self._remaining[rec.id] = self.steps

    # ------------------------------------------------------------------
    # UI tick
    # ------------------------------------------------------------------

    def run_ui_tick(self) -> dict[str, Position]:
        changed = False
        for rec in self.store:
            before = self._rendered.get(rec.id)
            if rec.is_dragging:
                after = self.adapter.preview_position(rec.id)
                self._remaining[rec.id] = 0
            elif self._remaining.get(rec.id, 0) > 0:
                self._remaining[rec.id] -= 1
                if self._remaining[rec.id] == 0:
                    after = self._target[rec.id]
                else:
                    after = before.offset(*self._step[rec.id])
            else:
                after = before if before is not None else rec.position
            self._rendered[rec.id] = after
            changed = changed or after != before

        frame = dict(self._rendered)
        if changed:
            self.frame_ready.emit(frame)
        return frame

    def rendered_position(self, bubble_id: str) -> Position:
        return self._rendered[bubble_id]
