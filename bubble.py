"""
bubble.py — BubbleItem: one circular menu bubble on the canvas.

The item never moves itself. Mouse gestures are forwarded to the engine
as drag_start / drag_move / drag_end, and BubbleMenuScene moves the item
to whatever the engine's UI tick publishes.

States tint the fill:  at_rest | dragging | returning | colliding
"""

from PyQt6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsSceneMouseEvent,
    QStyleOptionGraphicsItem, QWidget,
)
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QCursor
from PyQt6.QtCore import Qt, QPointF, QRectF

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CLICK_SLOP   = 4.0      # pointer travel (px) still counted as a press
BORDER_WIDTH = 2.0

STATE_FILLS = {
    "at_rest":   QColor(255, 255, 255, 240),
    "dragging":  QColor(255, 236, 200, 250),
    "returning": QColor(228, 240, 255, 240),
    "colliding": QColor(255, 214, 214, 245),
}
BORDER_COLOR = QColor(20, 20, 20)
TEXT_COLOR   = QColor(15, 15, 15)


def bubble_label(bubble_id: str, payload) -> str:
    if isinstance(payload, dict):
        for key in ("text", "label", "name"):
            value = payload.get(key)
            if value:
                return str(value)
    return bubble_id


# ---------------------------------------------------------------------------
# BubbleItem
# ---------------------------------------------------------------------------

class BubbleItem(QGraphicsEllipseItem):
    """Circle of the bubble's radius with its label centred inside."""

    def __init__(self, engine, bubble_id: str, parent=None):
        r = engine.get_radius(bubble_id)
        super().__init__(0, 0, r * 2, r * 2, parent)
        self._engine    = engine
        self._bubble_id = bubble_id
        self._radius    = r
        self._state     = engine.get_state(bubble_id).value
        self._label     = bubble_label(bubble_id, engine.store.get(bubble_id).payload)

        # Drag tracking
        self._press_scene: QPointF | None = None
        self._press_offset = (0.0, 0.0)   # position - rest at press time
        self._travel       = 0.0

        self.setPen(QPen(BORDER_COLOR, BORDER_WIDTH))
        self.setBrush(QBrush(STATE_FILLS[self._state]))
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, False)
        self.setCursor(QCursor(Qt.CursorShape.OpenHandCursor))
        self.setToolTip(self._label)
        self.setPos(engine.get_rendered_position(bubble_id).x,
                    engine.get_rendered_position(bubble_id).y)

    # ------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------

    @property
    def bubble_id(self) -> str:
        return self._bubble_id

    @property
    def radius(self) -> float:
        return self._radius

    def get_state(self) -> str:
        return self._state

    def get_label(self) -> str:
        return self._label

    def is_dragging(self) -> bool:
        return self._press_scene is not None

    # ------------------------------------------------------------------
    # Setters (driven by the scene)
    # ------------------------------------------------------------------

    def set_state(self, state: str):
        if state == self._state:
            return
        self._state = state
        self.setBrush(QBrush(STATE_FILLS.get(state, STATE_FILLS["at_rest"])))
        self.setZValue(1 if state == "dragging" else 0)

    # ------------------------------------------------------------------
    # Mouse → engine
    # ------------------------------------------------------------------

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        if not self._engine.drag_start(self._bubble_id):
            event.ignore()
            return
        pos  = self._engine.get_position(self._bubble_id)
        rest = self._engine.rest_position(self._bubble_id)
        self._press_scene  = event.scenePos()
        self._press_offset = (pos.x - rest.x, pos.y - rest.y)
        self._travel       = 0.0
        self.setCursor(QCursor(Qt.CursorShape.ClosedHandCursor))
        event.accept()

    def mouseMoveEvent(self, event: QGraphicsSceneMouseEvent):
        if self._press_scene is None:
            event.ignore()
            return
        delta = event.scenePos() - self._press_scene
        self._travel = max(self._travel, abs(delta.x()) + abs(delta.y()))
        self._engine.drag_move(self._bubble_id,
                               self._press_offset[0] + delta.x(),
                               self._press_offset[1] + delta.y())
        event.accept()

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent):
        if self._press_scene is None or event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        self._press_scene = None
        self._engine.drag_end(self._bubble_id)
        self.setCursor(QCursor(Qt.CursorShape.OpenHandCursor))
        if self._travel <= CLICK_SLOP:
            scene = self.scene()
            if scene and hasattr(scene, 'bubble_pressed'):
                scene.bubble_pressed.emit(self._bubble_id)
        event.accept()

    # ------------------------------------------------------------------
    # QGraphicsItem overrides
    # ------------------------------------------------------------------

    def paint(self, painter: QPainter,
              option: QStyleOptionGraphicsItem,
              widget: QWidget | None = None):
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(self.pen())
        painter.setBrush(self.brush())
        r = self.rect().adjusted(BORDER_WIDTH / 2, BORDER_WIDTH / 2,
                                 -BORDER_WIDTH / 2, -BORDER_WIDTH / 2)
        painter.drawEllipse(r)

        font = QFont()
        font.setPixelSize(max(10, int(self._radius * 0.32)))
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QPen(TEXT_COLOR))
        inset = self._radius * 0.25   # keep text inside the circle
        painter.drawText(QRectF(r).adjusted(inset, inset, -inset, -inset),
                         Qt.AlignmentFlag.AlignCenter.value | Qt.TextFlag.TextWordWrap.value,
                         self._label)
