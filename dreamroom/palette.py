from __future__ import annotations
from typing import Optional, Sequence
from PySide6.QtCore import Qt, QPoint, QRect, QSize, QMimeData, QByteArray, Signal
from PySide6.QtGui import QColor, QDrag, QFont, QPainter, QPen, QPixmap
from PySide6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
                               QScrollArea, QToolButton, QApplication)
from .utils import MIME_EMOJI, TRAY_EMOJIS, WALL_SWATCHES, FLOOR_SWATCHES


def make_emoji_pixmap(emoji: str, size: int = 48) -> QPixmap:
    pm = QPixmap(size, size); pm.fill(Qt.transparent)
    p = QPainter(pm); p.setRenderHint(QPainter.TextAntialiasing, True)
    f = QFont(); f.setPixelSize(int(size * 0.8))
    p.setFont(f)
    p.drawText(QRect(0, 0, size, size), Qt.AlignCenter, emoji)
    p.end()
    return pm


class TrayTile(QWidget):
    """One emoji in the tray; dragging it out starts a drop onto the room."""
    TILE = 56

    def __init__(self, emoji: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.emoji = emoji
        self._press_pos: Optional[QPoint] = None
        self.setObjectName("TrayTile")
        self.setToolTip(emoji)
        self.setCursor(Qt.OpenHandCursor)

    def sizeHint(self) -> QSize:
        return QSize(self.TILE, self.TILE)

    def paintEvent(self, ev):
        p = QPainter(self); p.setRenderHint(QPainter.Antialiasing)
        r = self.rect().adjusted(2, 2, -2, -2)
        p.setBrush(QColor("#FFF5FA")); p.setPen(QPen(QColor("#F3C1D7"), 1))
        p.drawRoundedRect(r, 10, 10)
        f = QFont(); f.setPixelSize(30)
        p.setFont(f)
        p.drawText(r, Qt.AlignCenter, self.emoji)

    def mousePressEvent(self, ev):
        self._press_pos = ev.pos() if ev.button() == Qt.LeftButton else None
        super().mousePressEvent(ev)

    def mouseMoveEvent(self, ev):
        if self._press_pos is None:
            return
        if (ev.pos() - self._press_pos).manhattanLength() < QApplication.startDragDistance():
            return
        drag = QDrag(self)
        mime = QMimeData()
        mime.setData(MIME_EMOJI, QByteArray(self.emoji.encode("utf-8")))
        mime.setText(self.emoji)
        drag.setMimeData(mime)
        pm = make_emoji_pixmap(self.emoji)
        drag.setPixmap(pm)
        drag.setHotSpot(QPoint(pm.width() // 2, pm.height() // 2))
        drag.exec(Qt.CopyAction)
        self._press_pos = None

    def mouseReleaseEvent(self, ev):
        self._press_pos = None
        super().mouseReleaseEvent(ev)


class SwatchRow(QWidget):
    colourPicked = Signal(str)

    def __init__(self, title: str, colours: Sequence[str], parent=None):
        super().__init__(parent)
        lay = QHBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0); lay.setSpacing(6)
        lay.addWidget(QLabel(title))
        self.buttons = []
        for c in colours:
            b = QToolButton(self)
            b.setCheckable(True); b.setAutoExclusive(True)
            b.setFixedSize(26, 26)
            b.setToolTip(c)
            b.setProperty("colour", c)
            b.setStyleSheet(f"QToolButton{{background:{c}; border:2px solid #ffffff; border-radius:13px;}}"
                            f"QToolButton:checked{{border:2px solid #FF69B4;}}")
            b.clicked.connect(lambda _=False, colour=c: self.colourPicked.emit(colour))
            lay.addWidget(b)
            self.buttons.append(b)
        lay.addStretch(1)

    def set_current(self, colour: str):
        for b in self.buttons:
            b.setChecked(str(b.property("colour")).lower() == str(colour).lower())


class TrayPanel(QWidget):
    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8); root.setSpacing(8)

        self.wall_row = SwatchRow("Wall", WALL_SWATCHES, self)
        self.floor_row = SwatchRow("Floor", FLOOR_SWATCHES, self)
        self.wall_row.colourPicked.connect(controller.set_wall_color)
        self.floor_row.colourPicked.connect(controller.set_floor_color)
        root.addWidget(self.wall_row)
        root.addWidget(self.floor_row)

        self.scroll = QScrollArea(self)
        self.scroll.setWidgetResizable(True)
        root.addWidget(self.scroll, 1)
        self.content = QWidget()
        self.content.setObjectName("TrayContent")
        self.scroll.setWidget(self.content)
        grid = QGridLayout(self.content)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setHorizontalSpacing(6); grid.setVerticalSpacing(6)
        for i, emoji in enumerate(TRAY_EMOJIS):
            grid.addWidget(TrayTile(emoji), i // 4, i % 4)
        grid.setRowStretch(len(TRAY_EMOJIS) // 4 + 1, 1)

        controller.colorsChanged.connect(self._sync_swatches)

    def _sync_swatches(self, wall: str, floor: str):
        self.wall_row.set_current(wall)
        self.floor_row.set_current(floor)
