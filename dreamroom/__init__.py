from .utils import MIN_ITEM_SIZE, MAX_ITEM_SIZE, PICTURE_EMOJI, MAX_SLOTS, ROOM_W, ROOM_H
from .models import PlacedItem, SceneRecord, GestureMode, HitArea
from .store import SceneStore
from .state import SceneState, MalformedRecord
from .persistence import SettingsStorage, SlotPersistence, StorageUnavailable
from .factory import ItemFactory
from .gestures import GestureController, GestureState, PointerCapture
from .controller import RoomController

__all__ = [
    "MIN_ITEM_SIZE", "MAX_ITEM_SIZE", "PICTURE_EMOJI", "MAX_SLOTS", "ROOM_W", "ROOM_H",
    "PlacedItem", "SceneRecord", "GestureMode", "HitArea", "SceneStore",
    "SceneState", "MalformedRecord", "SettingsStorage", "SlotPersistence", "StorageUnavailable",
    "ItemFactory", "GestureController", "GestureState", "PointerCapture", "RoomController",
]
