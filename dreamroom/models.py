from __future__ import annotations
import itertools
from dataclasses import dataclass, field
from typing import Dict, List
from .utils import (DEFAULT_ITEM_SIZE, DEFAULT_WALL_COLOR, DEFAULT_FLOOR_COLOR,
                    is_picture_emoji)

_ids = itertools.count(1)


def _colour(value, default: str) -> str:
    # only non-empty strings count; anything else keeps the default look
    return value if isinstance(value, str) and value.strip() else default


@dataclass(eq=False)
class PlacedItem:
    emoji: str
    left: float = 0.0
    top: float = 0.0
    size: float = DEFAULT_ITEM_SIZE
    z_order: int = 0
    item_id: int = field(default_factory=lambda: next(_ids))

    def __setattr__(self, name, value):
        if name == "emoji" and "emoji" in self.__dict__:
            raise AttributeError("emoji is fixed once the item exists")
        super().__setattr__(name, value)

    @property
    def is_picture(self) -> bool:
        return is_picture_emoji(self.emoji)

    def to_record(self) -> Dict:
        return {"emoji": self.emoji, "left": int(self.left), "top": int(self.top), "size": self.size}


@dataclass
class SceneRecord:
    slot: int
    room_name: str = ""
    wall_color: str = DEFAULT_WALL_COLOR
    floor_color: str = DEFAULT_FLOOR_COLOR
    items: List[Dict] = field(default_factory=list)
    saved_at: int = 0

    def to_dict(self) -> Dict:
        return {
            "slot": self.slot,
            "roomName": self.room_name,
            "wallColor": self.wall_color,
            "floorColor": self.floor_color,
            "items": list(self.items),
            "savedAt": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict, slot: int = 1) -> "SceneRecord":
        name = data.get("roomName")
        items = data.get("items")
        try:
            saved_at = int(data.get("savedAt") or 0)
        except (TypeError, ValueError):
            saved_at = 0
        try:
            rec_slot = int(data.get("slot") or slot)
        except (TypeError, ValueError):
            rec_slot = slot
        return cls(
            slot=rec_slot,
            room_name=name.strip() if isinstance(name, str) else "",
            wall_color=_colour(data.get("wallColor"), DEFAULT_WALL_COLOR),
            floor_color=_colour(data.get("floorColor"), DEFAULT_FLOOR_COLOR),
            items=[it for it in items if isinstance(it, dict)] if isinstance(items, list) else [],
            saved_at=saved_at,
        )


class GestureMode:
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"    # pointer on the resize handle
    PINCHING = "pinching"    # two-finger resize


class HitArea:
    BODY = "body"
    RESIZE_HANDLE = "resize_handle"
    REMOVE_BUTTON = "remove_button"
