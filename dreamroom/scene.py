from __future__ import annotations
from typing import Dict, Optional, Tuple
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView
from .controller import RoomController
from .hud import SlotsHUD
from .items import PlacedEmojiItem
from .models import PlacedItem
from .utils import MIME_EMOJI, WALL_SHARE

ROOM_MARGIN = 60.0
OUTSIDE_COLOR = QColor("#FFF0F5")
ROOM_BORDER = QColor("#FF69B4")
PLANK_LINE = QColor(0, 0, 0, 10)


class RoomScene(QGraphicsScene):
    def __init__(self, controller: RoomController, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.controller = controller
        self.setItemIndexMethod(QGraphicsScene.NoIndex)
        w, h = controller.room_size()
        # margin so items hanging past the edge stay reachable
        self.setSceneRect(-ROOM_MARGIN, -ROOM_MARGIN, w + 2 * ROOM_MARGIN, h + 2 * ROOM_MARGIN)
        self._views: Dict[int, PlacedEmojiItem] = {}
        self._drop_hover = False

        controller.set_size_provider(self.measure)
        controller.itemAdded.connect(self._on_item_added)
        controller.itemRemoved.connect(self._on_item_removed)
        controller.itemChanged.connect(self._on_item_changed)
        controller.itemActivated.connect(self._on_item_activated)
        controller.colorsChanged.connect(lambda *_: self.update())

    def room_rect(self) -> QRectF:
        w, h = self.controller.room_size()
        return QRectF(0, 0, w, h)

    def view_for(self, item: PlacedItem) -> Optional[PlacedEmojiItem]:
        return self._views.get(item.item_id)

    def measure(self, item: PlacedItem) -> Tuple[float, float]:
        gi = self._views.get(item.item_id)
        if gi is not None:
            r = gi.boundingRect()
            if r.width() > 0 and r.height() > 0:
                return r.width(), r.height()
        return float(item.size), float(item.size)

    # ---- controller -> scene ----
    def _on_item_added(self, item: PlacedItem, animate: bool):
        gi = PlacedEmojiItem(item, self.controller)
        self.addItem(gi)
        self._views[item.item_id] = gi
        if animate:
            gi.pop_in()

    def _on_item_removed(self, item: PlacedItem):
        gi = self._views.pop(item.item_id, None)
        if gi is not None:
            self.removeItem(gi)

    def _on_item_changed(self, item: PlacedItem):
        gi = self._views.get(item.item_id)
        if gi is not None:
            gi.sync()

    def _on_item_activated(self, item: Optional[PlacedItem]):
        for item_id, gi in self._views.items():
            gi.set_active(item is not None and item_id == item.item_id)

    # ---- painting ----
    def drawBackground(self, painter: QPainter, rect: QRectF):
        painter.fillRect(rect, OUTSIDE_COLOR)
        room = self.room_rect()
        wall_h = room.height() * WALL_SHARE
        store = self.controller.store
        painter.fillRect(QRectF(room.left(), room.top(), room.width(), wall_h), QColor(store.wall_color))
        floor = QRectF(room.left(), room.top() + wall_h, room.width(), room.height() - wall_h)
        painter.fillRect(floor, QColor(store.floor_color))
        painter.setPen(QPen(PLANK_LINE, 2))
        x = floor.left() + 60
        while x < floor.right():
            painter.drawLine(x, floor.top(), x, floor.bottom())
            x += 62
        pen = QPen(ROOM_BORDER, 4 if self._drop_hover else 2, Qt.DashLine if self._drop_hover else Qt.SolidLine)
        painter.setPen(pen); painter.setBrush(Qt.NoBrush)
        painter.drawRoundedRect(room, 12, 12)

    # ---- DnD from the tray ----
    @staticmethod
    def _emoji_from(mime) -> str:
        if mime.hasFormat(MIME_EMOJI):
            return bytes(mime.data(MIME_EMOJI).data()).decode("utf-8")
        if mime.hasText():
            return mime.text().strip()
        return ""

    def _set_hover(self, on: bool):
        if on != self._drop_hover:
            self._drop_hover = on
            self.update()

    def dragEnterEvent(self, event):
        if self._emoji_from(event.mimeData()):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if not self._emoji_from(event.mimeData()):
            event.ignore(); return
        self._set_hover(self.room_rect().contains(event.scenePos()))
        event.acceptProposedAction()

    def dragLeaveEvent(self, event):
        self._set_hover(False); event.accept()

    def dropEvent(self, event):
        self._set_hover(False)
        emoji = self._emoji_from(event.mimeData())
        pos = event.scenePos()
        if self.controller.drop(emoji, pos.x(), pos.y(), self.room_rect()) is None:
            event.ignore(); return
        event.acceptProposedAction()


class RoomView(QGraphicsView):
    def __init__(self, scene: RoomScene):
        super().__init__(scene)
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setRenderHint(QPainter.TextAntialiasing, True)
        self.setViewportUpdateMode(QGraphicsView.BoundingRectViewportUpdate)
        self.setAcceptDrops(True)
        self.viewport().setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setBackgroundBrush(Qt.NoBrush)

        self.hud = SlotsHUD(self, scene.controller)
        self.hud.reposition()
        self.hud.show()
        self.hud.raise_()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if hasattr(self, "hud") and self.hud:
            self.hud.reposition()

    def leaveEvent(self, event):
        self.scene().controller.clear_active()
        super().leaveEvent(event)
