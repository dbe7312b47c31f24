#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import argparse
import logging
import sys
from PySide6.QtCore import Qt, QSizeF
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QToolBar, QStatusBar, QDockWidget, QStyle, QLabel,
    QInputDialog, QLineEdit
)
from dreamroom import RoomController, SettingsStorage
from dreamroom.palette import TrayPanel
from dreamroom.scene import RoomScene, RoomView
from dreamroom.utils import NAME_MAX_LEN, DEFAULT_PROJECT_NAME

log = logging.getLogger("dreamroom")

TOAST_MS = 2200


class MainWindow(QMainWindow):
    def __init__(self, controller: RoomController):
        super().__init__()
        self.controller = controller
        self.resize(1180, 760)

        # 1) scene / view
        self.scene = RoomScene(controller)
        self.view = RoomView(self.scene)
        self.setCentralWidget(self.view)

        # 2) tray with swatches
        self.tray = TrayPanel(controller)
        self.tray_dock = QDockWidget("Tray", self)
        self.tray_dock.setWidget(self.tray)
        self.tray_dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.tray_dock.setMinimumWidth(260)
        self.addDockWidget(Qt.LeftDockWidgetArea, self.tray_dock)

        # 3) toolbar / status
        self.setStatusBar(QStatusBar(self))
        self.save_label = QLabel("")
        self.statusBar().addPermanentWidget(self.save_label)
        self._build_toolbar()

        controller.statusChanged.connect(self.save_label.setText)
        controller.toastRequested.connect(self._toast)
        controller.projectNameChanged.connect(self._apply_project_name)
        self.view.hud.renameRequested.connect(self._rename_slot_dialog)
        self._apply_project_name(controller.project_name)

    def _build_toolbar(self):
        tb = QToolBar("Room", self)
        tb.setMovable(False)
        tb.setIconSize(QSizeF(18, 18).toSize())
        tb.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.TopToolBarArea, tb)
        style = self.style()

        self.act_undo = QAction(style.standardIcon(QStyle.SP_ArrowBack), "Undo", self)
        self.act_undo.setShortcut(QKeySequence("Ctrl+Z"))
        self.act_undo.triggered.connect(self.controller.undo_last)

        self.act_clear = QAction(style.standardIcon(QStyle.SP_TrashIcon), "Clear room", self)
        self.act_clear.triggered.connect(self.controller.clear_all)

        self.act_rename = QAction(style.standardIcon(QStyle.SP_FileDialogDetailedView), "Rename project…", self)
        self.act_rename.triggered.connect(self._rename_project_dialog)

        for a in (self.act_undo, self.act_clear):
            tb.addAction(a)
        tb.addSeparator()
        tb.addAction(self.act_rename)

    def _ask_name(self, title: str, help_text: str, initial: str) -> str | None:
        dlg = QInputDialog(self)
        dlg.setWindowTitle(title)
        dlg.setLabelText(help_text)
        dlg.setTextValue(initial[:NAME_MAX_LEN])
        dlg.setTextEchoMode(QLineEdit.Normal)
        line = dlg.findChild(QLineEdit)
        if line is not None:
            line.setMaxLength(NAME_MAX_LEN)
        if not dlg.exec():
            return None
        return dlg.textValue().strip()[:NAME_MAX_LEN]

    def _rename_slot_dialog(self, slot: int):
        default_label = f"Room {slot}"
        current = self.controller.persistence.custom_slot_name(slot)
        value = self._ask_name(f"Rename {default_label}", "Pick a fun name. Leave blank to reset.",
                               current or default_label)
        if value is not None:
            self.controller.rename_slot(slot, value)

    def _rename_project_dialog(self):
        value = self._ask_name("Rename your project", "This changes the big title at the top.",
                               self.controller.project_name)
        if value is not None:
            self.controller.rename_project(value)

    def _apply_project_name(self, name: str):
        self.setWindowTitle(name or DEFAULT_PROJECT_NAME)

    def _toast(self, text: str):
        self.statusBar().showMessage(text, TOAST_MS)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Drag emoji into a room and keep up to three saved rooms.")
    parser.add_argument("--settings", help="INI file to keep saves in instead of the user settings store")
    parser.add_argument("-v", "--verbose", action="store_true")
    args, qt_args = parser.parse_known_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication([sys.argv[0], *qt_args])
    storage = SettingsStorage.from_path(args.settings) if args.settings else SettingsStorage()
    controller = RoomController(storage)
    win = MainWindow(controller)
    controller.start()
    win.show()
    log.info("editing slot %d", controller.active_slot)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
