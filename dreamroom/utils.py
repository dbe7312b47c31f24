from __future__ import annotations
from typing import Tuple
from PySide6.QtCore import QPointF, QRectF

# ===== Items =====
MIN_ITEM_SIZE = 26
MAX_ITEM_SIZE = 84
DEFAULT_ITEM_SIZE = 40
DROP_CENTER_OFFSET = 20      # half of the default footprint
RESIZE_FACTOR = 0.6

# ===== Pictures =====
PICTURE_EMOJI = "\U0001F5BC\ufe0f"
MIN_VISIBLE_PICTURE_PX = 18

# ===== Room =====
ROOM_W = 720.0
ROOM_H = 480.0
WALL_SHARE = 0.62
DEFAULT_PROJECT_NAME = "Isla's Dream Room"
DEFAULT_WALL_COLOR = "#A8D8EA"
DEFAULT_FLOOR_COLOR = "#D2A679"

# ===== Slots / storage =====
MAX_SLOTS = 3
NAME_MAX_LEN = 30
ORG_NAME = "DreamRoom"
APP_NAME = "Designer"
LEGACY_STORAGE_KEY = "isla_dream_room_state_v1"
SLOT_KEY_PREFIX = "slot-state:"
ACTIVE_SLOT_KEY = "active-slot"
PROJECT_NAME_KEY = "project-name"

# ===== Tray / swatches =====
TRAY_EMOJIS = [
    "🛏️", "🛋️", "🪑", "🚪", "🪟", "🖼️", "🪴", "🌸", "🧸", "🎀",
    "💡", "📚", "🎨", "🐱", "🐶", "🦄", "🌈", "⭐", "🎁", "🧁",
]
WALL_SWATCHES = ["#A8D8EA", "#FFB6C1", "#E6E6FA", "#FFFACD", "#C1FFC1", "#FFDAB9"]
FLOOR_SWATCHES = ["#D2A679", "#8B5A2B", "#F5DEB3", "#C0C0C0", "#FFE4E1", "#B0E0E6"]

MIME_EMOJI = "application/x-dreamroom"


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(v, hi))


def clamp_size(value) -> float:
    try:
        size = float(value)
    except (TypeError, ValueError):
        size = DEFAULT_ITEM_SIZE
    if size != size or size == 0:       # NaN or zero falls back like an unset size
        size = DEFAULT_ITEM_SIZE
    return clamp(size, MIN_ITEM_SIZE, MAX_ITEM_SIZE)


def normalize_emoji(value) -> str:
    return str(value or "").replace("\ufe0f", "")


def is_picture_emoji(value) -> bool:
    return normalize_emoji(value) == normalize_emoji(PICTURE_EMOJI)


def clamp_inside_room(item_w: float, item_h: float, room_w: float, room_h: float,
                      left: float, top: float) -> QPointF:
    max_left = max(0.0, room_w - item_w)
    max_top = max(0.0, room_h - item_h)
    return QPointF(clamp(left, 0.0, max_left), clamp(top, 0.0, max_top))


def clamp_near_room(item_w: float, item_h: float, room_w: float, room_h: float,
                    left: float, top: float) -> QPointF:
    """Keep at least MIN_VISIBLE_PICTURE_PX of the item over the room on each axis."""
    min_left = -item_w + MIN_VISIBLE_PICTURE_PX
    max_left = room_w - MIN_VISIBLE_PICTURE_PX
    min_top = -item_h + MIN_VISIBLE_PICTURE_PX
    max_top = room_h - MIN_VISIBLE_PICTURE_PX
    return QPointF(clamp(left, min_left, max_left), clamp(top, min_top, max_top))


def center_outside(item_rect: QRectF, room_rect: QRectF) -> bool:
    c = item_rect.center()
    return (c.x() < room_rect.left() or c.x() > room_rect.right() or
            c.y() < room_rect.top() or c.y() > room_rect.bottom())


def default_item_extent(item) -> Tuple[float, float]:
    # unmeasured items fall back to their font size
    return float(item.size), float(item.size)
