from __future__ import annotations
from typing import List
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QWidget, QHBoxLayout, QToolButton
from .utils import MAX_SLOTS


class SlotsHUD(QWidget):
    """Overlay with one button per save slot plus a rename pencil next to each."""
    renameRequested = Signal(int)

    def __init__(self, view, controller):
        super().__init__(view.viewport())
        self.view = view
        self.controller = controller
        self.setObjectName("SlotsHUD")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet("""
            QWidget#SlotsHUD { background: rgba(255,255,255,0.95); border:1px solid #f3c1d7; border-radius:12px; }
            QToolButton.slot { border:none; padding:6px 10px; border-radius:10px; font-weight:600; }
            QToolButton.slot:hover { background:#fde7f1; }
            QToolButton.slot:checked { background:#ffc4dd; }
            QToolButton.edit { border:none; padding:2px; }
        """)

        lay = QHBoxLayout(self)
        lay.setContentsMargins(8, 8, 8, 8)
        lay.setSpacing(4)

        self.slot_buttons: List[QToolButton] = []
        for slot in range(1, MAX_SLOTS + 1):
            btn = QToolButton(self)
            btn.setProperty("class", "slot")
            btn.setCheckable(True)
            btn.setAutoExclusive(True)
            btn.clicked.connect(lambda _=False, n=slot: self.controller.switch_slot(n))
            edit = QToolButton(self)
            edit.setProperty("class", "edit")
            edit.setText("✎")
            edit.setToolTip(f"Rename Room {slot}")
            edit.clicked.connect(lambda _=False, n=slot: self.renameRequested.emit(n))
            lay.addWidget(btn)
            lay.addWidget(edit)
            self.slot_buttons.append(btn)

        controller.slotsChanged.connect(self.refresh)
        self.refresh()

    def refresh(self):
        for slot, btn in enumerate(self.slot_buttons, start=1):
            btn.setText(self.controller.slot_label(slot))
            btn.setChecked(slot == self.controller.active_slot)
        self.adjustSize()
        self.reposition()

    def reposition(self):
        margin = 12
        vw = self.view.viewport().width()
        vh = self.view.viewport().height()
        self.move(vw - self.width() - margin, vh - self.height() - margin)
