"""
canvas.py — Bubble menu canvas using QGraphicsScene and QGraphicsView.

The scene mirrors the engine: one BubbleItem per bubble id, positions
taken from the scheduler's frame_ready signal, tints from state_changed.
The view keeps the scene rect equal to its viewport and reports resizes
to the engine so the ring is laid out for the visible area.
"""

import logging

from PyQt6.QtWidgets import QGraphicsScene, QGraphicsView
from PyQt6.QtCore import Qt, QRectF, pyqtSignal
from PyQt6.QtGui import QPainter, QColor

from bubble import BubbleItem

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# BubbleMenuScene
# ---------------------------------------------------------------------------

class BubbleMenuScene(QGraphicsScene):
    """
    Scene holding one BubbleItem per engine bubble.

    Signals:
        bubble_pressed(str)  — bubble clicked without being dragged
    """

    bubble_pressed = pyqtSignal(str)

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._items: dict[str, BubbleItem] = {}

        sch = engine.scheduler
        sch.frame_ready.connect(self.apply_frame)
        sch.state_changed.connect(self._on_state_changed)

        self.setSceneRect(QRectF(0, 0, engine.store.width, engine.store.height))
        self.rebuild()

    @property
    def engine(self):
        return self._engine

    def bubble_item(self, bubble_id: str) -> BubbleItem | None:
        return self._items.get(bubble_id)

    def bubble_items(self) -> list[BubbleItem]:
        return list(self._items.values())

    # ------------------------------------------------------------------
    # Engine → items
    # ------------------------------------------------------------------

    def rebuild(self):
        """Recreate items after the engine was (re)mounted."""
        for item in self._items.values():
            self.removeItem(item)
        self._items.clear()
        for bubble_id in self._engine.ids():
            item = BubbleItem(self._engine, bubble_id)
            self.addItem(item)
            self._items[bubble_id] = item

    def apply_frame(self, frame: dict):
        for bubble_id, pos in frame.items():
            item = self._items.get(bubble_id)
            if item is None:
                logger.warning(f"Frame for unknown bubble {bubble_id!r} ignored")
                continue
            item.setPos(pos.x, pos.y)

    def _on_state_changed(self, bubble_id: str, state: str):
        item = self._items.get(bubble_id)
        if item is not None:
            item.set_state(state)

    def set_viewport(self, width: float, height: float):
        self.setSceneRect(QRectF(0, 0, width, height))
        self._engine.set_viewport(width, height)


# ---------------------------------------------------------------------------
# BubbleMenuView
# ---------------------------------------------------------------------------

class BubbleMenuView(QGraphicsView):
    """View that shows the whole scene 1:1 and follows its own size."""

    def __init__(self, scene: BubbleMenuScene, parent=None):
        super().__init__(scene, parent)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setBackgroundBrush(QColor(45, 45, 45))
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.SmartViewportUpdate)
        self._menu_scene = scene

    def resizeEvent(self, event):
        super().resizeEvent(event)
        vp = self.viewport().size()
        if vp.width() > 0 and vp.height() > 0:
            self._menu_scene.set_viewport(vp.width(), vp.height())
