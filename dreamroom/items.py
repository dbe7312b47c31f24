from __future__ import annotations
from typing import TYPE_CHECKING, List
from PySide6.QtCore import Qt, QEvent, QPointF, QVariantAnimation, QEasingCurve
from PySide6.QtGui import QBrush, QColor, QEventPoint, QFont, QPen
from PySide6.QtWidgets import QGraphicsItem, QGraphicsSimpleTextItem, QGraphicsEllipseItem
from .models import PlacedItem, HitArea

if TYPE_CHECKING:
    from .controller import RoomController

ACTIVE_PEN = QPen(QColor("#FF69B4"), 2, Qt.DashLine)


class _Control(QGraphicsSimpleTextItem):
    """Small glyph button riding on a placed item (resize handle / remove)."""
    SIZE = 18.0

    def __init__(self, owner: "PlacedEmojiItem", glyph: str, hit: str):
        super().__init__(glyph, owner)
        self.owner = owner
        self.hit = hit
        f = QFont(); f.setPixelSize(12); f.setBold(True)
        self.setFont(f)
        self._bg = QGraphicsEllipseItem(-3, -3, self.SIZE, self.SIZE, self)
        self._bg.setBrush(QBrush(QColor(255, 255, 255, 230)))
        self._bg.setPen(QPen(QColor("#FF69B4"), 1))
        self._bg.setFlag(QGraphicsItem.ItemStacksBehindParent, True)
        self.setCursor(Qt.SizeFDiagCursor if hit == HitArea.RESIZE_HANDLE else Qt.PointingHandCursor)
        self.setVisible(False)

    def mousePressEvent(self, e):
        if self.hit == HitArea.REMOVE_BUTTON:
            e.accept()
            return
        if self.owner.controller.pointer_down(self.owner.model, e.scenePos().x(), e.scenePos().y(),
                                              self.hit, e.button() == Qt.LeftButton):
            e.accept()
        else:
            e.ignore()

    def mouseMoveEvent(self, e):
        self.owner.controller.pointer_move(e.scenePos().x(), e.scenePos().y())

    def mouseReleaseEvent(self, e):
        if self.hit == HitArea.REMOVE_BUTTON:
            if self.contains(e.pos()):
                self.owner.controller.remove_item(self.owner.model)
            return
        self.owner.controller.pointer_up()


class PlacedEmojiItem(QGraphicsSimpleTextItem):
    """Scene view of one PlacedItem; input goes to the controller, state comes back via sync()."""

    def __init__(self, model: PlacedItem, controller: "RoomController"):
        super().__init__(model.emoji)
        self.model = model
        self.controller = controller
        self._anim = None
        self.setAcceptHoverEvents(True)
        self.setAcceptTouchEvents(True)
        self.setCursor(Qt.OpenHandCursor)
        self.handle = _Control(self, "↔", HitArea.RESIZE_HANDLE)
        self.remove_btn = _Control(self, "✕", HitArea.REMOVE_BUTTON)
        self.sync()

    def sync(self):
        f = self.font()
        f.setPixelSize(max(1, int(round(self.model.size))))
        self.setFont(f)
        self.setPos(QPointF(self.model.left, self.model.top))
        self.setZValue(self.model.z_order)
        r = self.boundingRect()
        self.handle.setPos(r.right() - 6, r.bottom() - 6)
        self.remove_btn.setPos(r.right() - 6, r.top() - 12)

    def set_active(self, on: bool):
        self.handle.setVisible(on)
        self.remove_btn.setVisible(on)
        self.update()

    def pop_in(self):
        anim = QVariantAnimation()
        anim.setStartValue(0.3); anim.setKeyValueAt(0.6, 1.2); anim.setEndValue(1.0)
        anim.setDuration(350)
        anim.setEasingCurve(QEasingCurve.OutCubic)
        self.setTransformOriginPoint(self.boundingRect().center())
        anim.valueChanged.connect(lambda v: self.setScale(float(v)))
        anim.start()
        self._anim = anim

    def paint(self, painter, option, widget=None):
        super().paint(painter, option, widget)
        if self.handle.isVisible():
            painter.setPen(ACTIVE_PEN)
            painter.setBrush(Qt.NoBrush)
            painter.drawRoundedRect(self.boundingRect().adjusted(1, 1, -1, -1), 6, 6)

    # ---- pointer ----
    def hoverEnterEvent(self, e):
        self.controller.set_active(self.model)
        super().hoverEnterEvent(e)

    def mousePressEvent(self, e):
        if self.controller.pointer_down(self.model, e.scenePos().x(), e.scenePos().y(),
                                        HitArea.BODY, e.button() == Qt.LeftButton):
            self.setCursor(Qt.ClosedHandCursor)
            e.accept()
        else:
            e.ignore()

    def mouseMoveEvent(self, e):
        self.controller.pointer_move(e.scenePos().x(), e.scenePos().y())

    def mouseReleaseEvent(self, e):
        self.setCursor(Qt.OpenHandCursor)
        self.controller.pointer_up()

    # ---- touch ----
    @staticmethod
    def _live_points(event) -> List[QPointF]:
        return [p.scenePosition() for p in event.points() if p.state() != QEventPoint.State.Released]

    def sceneEvent(self, event):
        t = event.type()
        if t == QEvent.TouchBegin:
            self.controller.touch_start(self.model, self._live_points(event))
            event.accept()
            return True
        if t == QEvent.TouchUpdate:
            live = self._live_points(event)
            if len(live) < len(event.points()):
                self.controller.touch_end(len(live))
            else:
                self.controller.touch_move(live)
            event.accept()
            return True
        if t in (QEvent.TouchEnd, QEvent.TouchCancel):
            self.controller.touch_end(0)
            event.accept()
            return True
        return super().sceneEvent(event)
