from __future__ import annotations

import pytest
from PySide6.QtCore import QMimeData

from dreamroom.scene import RoomScene, RoomView
from dreamroom.utils import MIME_EMOJI


@pytest.fixture
def scene(qapp, controller) -> RoomScene:
    return RoomScene(controller)


def test_placed_item_gets_a_graphics_view(scene, controller) -> None:
    item = controller.place_item("🌟", 150, 100, skip_animation=True)
    gi = scene.view_for(item)
    assert gi is not None
    assert gi.scene() is scene
    assert gi.zValue() == item.z_order
    w, h = scene.measure(item)
    assert w > 0 and h > 0


def test_undo_and_clear_remove_graphics_items(scene, controller) -> None:
    a = controller.place_item("A", 30, 30, skip_animation=True)
    b = controller.place_item("B", 60, 60, skip_animation=True)
    controller.undo_last()
    assert scene.view_for(b) is None
    assert scene.view_for(a) is not None
    controller.clear_all()
    assert scene.view_for(a) is None


def test_activation_toggles_controls(scene, controller) -> None:
    a = controller.place_item("A", 30, 30, skip_animation=True)
    b = controller.place_item("B", 60, 60, skip_animation=True)
    controller.set_active(a)
    assert scene.view_for(a).handle.isVisible()
    assert not scene.view_for(b).handle.isVisible()
    controller.clear_active()
    assert not scene.view_for(a).handle.isVisible()


def test_gesture_moves_graphics_item(scene, controller) -> None:
    item = controller.place_item("🌟", 150, 100, skip_animation=True)
    controller.pointer_down(item, 150, 100)
    controller.pointer_move(170, 110)
    controller.pointer_up()
    pos = scene.view_for(item).pos()
    assert (pos.x(), pos.y()) == (item.left, item.top)


def test_mime_payload_prefers_custom_format() -> None:
    mime = QMimeData()
    mime.setData(MIME_EMOJI, "🧸".encode("utf-8"))
    mime.setText("ignored")
    assert RoomScene._emoji_from(mime) == "🧸"
    plain = QMimeData()
    plain.setText("  🪴 ")
    assert RoomScene._emoji_from(plain) == "🪴"
    assert RoomScene._emoji_from(QMimeData()) == ""


def test_loaded_slot_is_rendered(qapp, settings_storage, controller) -> None:
    from dreamroom.controller import RoomController

    controller.place_item("🎀", 100, 100)
    fresh = RoomController(settings_storage, room_w=300, room_h=200)
    scene = RoomScene(fresh)
    fresh.start()
    assert len(scene.items()) > 0
    assert scene.view_for(fresh.store.items[0]) is not None


def test_view_hosts_slot_hud(qtbot, scene, controller) -> None:
    view = RoomView(scene)
    qtbot.addWidget(view)
    assert view.hud.parent() == view.viewport()
    controller.switch_slot(2)
    assert view.hud.slot_buttons[1].isChecked()
    assert view.hud.slot_buttons[1].text() == "Room 2"
