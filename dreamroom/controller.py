from __future__ import annotations
import logging
from typing import Callable, Dict, Optional, Sequence, Tuple
from PySide6.QtCore import QObject, QPointF, QRectF, Signal
from .factory import ItemFactory
from .gestures import GestureController, PointerCapture
from .models import PlacedItem, GestureMode, HitArea
from .persistence import SettingsStorage, SlotPersistence, valid_slot
from .store import SceneStore
from .utils import ROOM_W, ROOM_H, center_outside, clamp_inside_room, clamp_near_room, default_item_extent

log = logging.getLogger(__name__)


class RoomController(QObject):
    """Glue between drops, gestures, the scene store and slot persistence.

    Every mutating action ends in exactly one save of the active slot;
    moves and resize steps only write through to the item.
    """
    itemAdded = Signal(object, bool)      # item, animate
    itemRemoved = Signal(object)
    itemChanged = Signal(object)
    itemActivated = Signal(object)        # item or None
    sceneReset = Signal()
    colorsChanged = Signal(str, str)      # wall, floor
    slotsChanged = Signal()
    projectNameChanged = Signal(str)
    statusChanged = Signal(str)
    toastRequested = Signal(str)

    def __init__(self, storage: Optional[SettingsStorage] = None,
                 room_w: float = ROOM_W, room_h: float = ROOM_H, parent=None):
        super().__init__(parent)
        self.store = SceneStore()
        self.factory = ItemFactory()
        self.capture = PointerCapture()
        self.persistence = SlotPersistence(storage or SettingsStorage(), status_cb=self._status)
        self.active_slot = 1
        self.last_status = ""
        self._room_w = float(room_w)
        self._room_h = float(room_h)
        self._size_provider: Callable[[PlacedItem], Tuple[float, float]] = default_item_extent
        self._gestures: Dict[int, GestureController] = {}

    # ---- status ----
    def _status(self, text: str):
        self.last_status = text
        self.statusChanged.emit(text)

    def _toast(self, text: str):
        self.toastRequested.emit(text)

    # ---- room geometry ----
    def room_size(self) -> Tuple[float, float]:
        return self._room_w, self._room_h

    def set_room_size(self, w: float, h: float):
        self._room_w, self._room_h = float(w), float(h)

    def set_size_provider(self, provider: Optional[Callable[[PlacedItem], Tuple[float, float]]]):
        self._size_provider = provider or default_item_extent
        for g in self._gestures.values():
            g.size_provider = self._size_provider

    def item_extent(self, item: PlacedItem) -> Tuple[float, float]:
        return self._size_provider(item)

    def is_outside_room(self, item: PlacedItem) -> bool:
        w, h = self.item_extent(item)
        return center_outside(QRectF(item.left, item.top, w, h),
                              QRectF(0, 0, self._room_w, self._room_h))

    # ---- lifecycle ----
    def start(self):
        self.persistence.migrate_legacy()
        self.active_slot = self.persistence.read_active_slot()
        self.projectNameChanged.emit(self.persistence.project_name())
        self.load()

    @property
    def project_name(self) -> str:
        return self.persistence.project_name()

    def slot_label(self, slot: int) -> str:
        return self.persistence.slot_label(slot)

    # ---- items ----
    def gesture_for(self, item: PlacedItem) -> Optional[GestureController]:
        return self._gestures.get(item.item_id)

    def _attach(self, item: PlacedItem):
        self.store.append(item)
        self._gestures[item.item_id] = GestureController(
            item, self.room_size, self._size_provider, self.capture,
            on_activate=self.set_active,
            on_change=self.itemChanged.emit,
            on_finish=self._finish_gesture,
        )

    def _detach(self, item: PlacedItem):
        g = self._gestures.pop(item.item_id, None)
        if g is not None and g.active:
            # removed mid-gesture: drop the listeners without a second save
            g.on_finish = None
            g.cancel()
        self.itemRemoved.emit(item)

    def _materialize(self, item: PlacedItem, animate: bool, fresh: bool = False):
        w, h = self.item_extent(item)
        # fresh drops keep regular items fully inside; pictures may hang over the edge
        clamp_fn = clamp_inside_room if fresh and not item.is_picture else clamp_near_room
        p = clamp_fn(w, h, self._room_w, self._room_h, item.left, item.top)
        item.left, item.top = p.x(), p.y()
        self._attach(item)
        self.itemAdded.emit(item, animate)

    def place_item(self, emoji: str, x: float, y: float, size=None,
                   skip_save: bool = False, skip_animation: bool = False) -> Optional[PlacedItem]:
        item = self.factory.create(emoji, x, y, size)
        if item is None:
            return None
        self._materialize(item, not skip_animation, fresh=True)
        if not skip_save:
            self.save()
        return item

    def drop(self, emoji: str, client_x: float, client_y: float, room_rect: QRectF) -> Optional[PlacedItem]:
        if not emoji or not room_rect.contains(QPointF(client_x, client_y)):
            return None
        return self.place_item(emoji, client_x - room_rect.left(), client_y - room_rect.top())

    def remove_item(self, item: PlacedItem, save: bool = True) -> bool:
        if not self.store.remove(item):
            return False
        self._detach(item)
        if save:
            self.save()
        return True

    def undo_last(self) -> Optional[PlacedItem]:
        last = self.store.undo_last()
        if last is None:
            self._toast("Nothing to undo")
            return None
        self._detach(last)
        self.save()
        return last

    def clear_all(self) -> int:
        if not len(self.store):
            return 0
        removed = self.store.clear_all()
        for item in removed:
            self._detach(item)
        self.itemActivated.emit(None)
        self.save()
        return len(removed)

    def set_active(self, item: PlacedItem):
        if item not in self.store:
            return
        self.store.set_active(item)
        self.itemActivated.emit(item)
        self.itemChanged.emit(item)

    def clear_active(self):
        if self.store.clear_active() is not None:
            self.itemActivated.emit(None)

    # ---- colours ----
    def set_wall_color(self, color: str):
        if not color:
            return
        self.store.wall_color = color
        self.colorsChanged.emit(self.store.wall_color, self.store.floor_color)
        self.save()

    def set_floor_color(self, color: str):
        if not color:
            return
        self.store.floor_color = color
        self.colorsChanged.emit(self.store.wall_color, self.store.floor_color)
        self.save()

    # ---- gestures ----
    def pointer_down(self, item: PlacedItem, x: float, y: float,
                     hit: str = HitArea.BODY, primary: bool = True) -> bool:
        g = self.gesture_for(item)
        return g.pointer_down(x, y, hit, primary) if g else False

    def touch_start(self, item: PlacedItem, points: Sequence, hit: str = HitArea.BODY) -> bool:
        g = self.gesture_for(item)
        return g.touch_start(points, hit) if g else False

    def pointer_move(self, x: float, y: float):
        if self.capture.owner is not None:
            self.capture.owner.pointer_move(x, y)

    def touch_move(self, points: Sequence):
        if self.capture.owner is not None:
            self.capture.owner.touch_move(points)

    def pointer_up(self):
        if self.capture.owner is not None:
            self.capture.owner.pointer_up()

    def touch_end(self, remaining: int = 0):
        if self.capture.owner is not None:
            self.capture.owner.touch_end(remaining)

    def _finish_gesture(self, item: PlacedItem, mode: str):
        if (mode == GestureMode.DRAGGING and not item.is_picture
                and self.is_outside_room(item) and self.store.remove(item)):
            self._detach(item)
            self.save()
            self._toast("Poof! Deleted ✨")
            return
        self.save()

    # ---- persistence ----
    def save(self) -> bool:
        ok = self.persistence.save(self.store, self.active_slot)
        self.slotsChanged.emit()
        return ok

    def _reset_scene(self):
        for item in self.store.clear_all():
            self._detach(item)
        self.store.reset_look()
        self.sceneReset.emit()

    def load(self):
        self._reset_scene()
        record = self.persistence.load(self.active_slot)
        if record is not None:
            self.store.wall_color = record.wall_color
            self.store.floor_color = record.floor_color
            for item in self.persistence.state.replay(record, self.factory):
                self._materialize(item, animate=False)
            log.debug("loaded slot %d with %d items", self.active_slot, len(self.store))
        self.colorsChanged.emit(self.store.wall_color, self.store.floor_color)
        self.slotsChanged.emit()

    def switch_slot(self, slot: int) -> bool:
        if not valid_slot(slot) or slot == self.active_slot:
            return False
        self.save()
        self.active_slot = slot
        self.persistence.write_active_slot(slot)
        self.load()
        self._toast(f"Now editing {self.slot_label(slot)} ✨")
        return True

    def rename_slot(self, slot: int, name: str) -> bool:
        if not self.persistence.rename_slot(slot, name):
            return False
        self.slotsChanged.emit()
        if slot == self.active_slot:
            self._status(f"Saved {self.slot_label(slot)}")
        return True

    def rename_project(self, value: str) -> str:
        name = self.persistence.save_project_name(value)
        self.projectNameChanged.emit(name)
        self._toast("Project title updated ✨")
        return name
