from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple
from PySide6.QtCore import QPointF
from .models import PlacedItem, GestureMode, HitArea
from .utils import (DEFAULT_ITEM_SIZE, RESIZE_FACTOR, MIN_ITEM_SIZE, MAX_ITEM_SIZE,
                    clamp, clamp_near_room, default_item_extent)

Extent = Tuple[float, float]


@dataclass
class GestureState:
    mode: str = GestureMode.IDLE
    start_x: float = 0.0
    start_y: float = 0.0
    origin_left: float = 0.0
    origin_top: float = 0.0
    origin_size: float = DEFAULT_ITEM_SIZE
    start_distance: float = 0.0


def _xy(p) -> Tuple[float, float]:
    if isinstance(p, QPointF):
        return p.x(), p.y()
    return float(p[0]), float(p[1])


def touch_distance(a, b) -> float:
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return math.hypot(ax - bx, ay - by)


class PointerCapture:
    """Owner of the move/release stream. At most one gesture listens at a time."""

    def __init__(self):
        self.owner: Optional["GestureController"] = None
        self.attached = 0
        self.detached = 0

    def grab(self, gesture: "GestureController"):
        if self.owner is gesture:
            return
        if self.owner is not None:
            # ending the old gesture detaches it
            self.owner.cancel()
        self.owner = gesture
        self.attached += 1

    def release(self, gesture: "GestureController"):
        if self.owner is gesture:
            self.owner = None
            self.detached += 1


class GestureController:
    """idle -> dragging | resizing | pinching -> idle, for a single item."""

    def __init__(self, item: PlacedItem,
                 room_size: Callable[[], Extent],
                 size_provider: Optional[Callable[[PlacedItem], Extent]] = None,
                 capture: Optional[PointerCapture] = None,
                 on_activate: Optional[Callable[[PlacedItem], None]] = None,
                 on_change: Optional[Callable[[PlacedItem], None]] = None,
                 on_finish: Optional[Callable[[PlacedItem, str], None]] = None):
        self.item = item
        self.room_size = room_size
        self.size_provider = size_provider or default_item_extent
        self.capture = capture
        self.on_activate = on_activate
        self.on_change = on_change
        self.on_finish = on_finish
        self.state = GestureState()

    @property
    def mode(self) -> str:
        return self.state.mode

    @property
    def active(self) -> bool:
        return self.state.mode != GestureMode.IDLE

    def _begin(self, state: GestureState):
        self.state = state
        if self.capture is not None:
            self.capture.grab(self)
        if self.on_activate:
            self.on_activate(self.item)

    def _end(self):
        mode = self.state.mode
        if mode == GestureMode.IDLE:
            return
        self.state = GestureState()
        if self.capture is not None:
            self.capture.release(self)
        if self.on_finish:
            self.on_finish(self.item, mode)

    # ---- starts ----
    def pointer_down(self, x: float, y: float, hit: str = HitArea.BODY, primary: bool = True) -> bool:
        if self.active or not primary or hit == HitArea.REMOVE_BUTTON:
            return False
        it = self.item
        if hit == HitArea.RESIZE_HANDLE:
            self._begin(GestureState(GestureMode.RESIZING, x, y, it.left, it.top, it.size))
        else:
            self._begin(GestureState(GestureMode.DRAGGING, x, y, it.left, it.top, it.size))
        return True

    def touch_start(self, points: Sequence, hit: str = HitArea.BODY) -> bool:
        if self.active or hit != HitArea.BODY:
            return False
        it = self.item
        if len(points) == 2:
            dist = touch_distance(points[0], points[1])
            if not dist:
                return False
            self._begin(GestureState(GestureMode.PINCHING, origin_left=it.left, origin_top=it.top,
                                     origin_size=it.size, start_distance=dist))
            return True
        if len(points) != 1:
            return False
        x, y = _xy(points[0])
        self._begin(GestureState(GestureMode.DRAGGING, x, y, it.left, it.top, it.size))
        return True

    # ---- moves ----
    def _drag_to(self, x: float, y: float):
        st = self.state
        w, h = self.size_provider(self.item)
        room_w, room_h = self.room_size()
        p = clamp_near_room(w, h, room_w, room_h,
                            st.origin_left + x - st.start_x,
                            st.origin_top + y - st.start_y)
        self.item.left, self.item.top = p.x(), p.y()
        if self.on_change:
            self.on_change(self.item)

    def _resize_to(self, size: float):
        self.item.size = clamp(size, MIN_ITEM_SIZE, MAX_ITEM_SIZE)
        if self.on_change:
            self.on_change(self.item)

    def pointer_move(self, x: float, y: float):
        st = self.state
        if st.mode == GestureMode.DRAGGING:
            self._drag_to(x, y)
        elif st.mode == GestureMode.RESIZING:
            dx, dy = x - st.start_x, y - st.start_y
            self._resize_to(st.origin_size + max(dx, dy) * RESIZE_FACTOR)

    def touch_move(self, points: Sequence):
        st = self.state
        if not points:
            return
        if st.mode == GestureMode.DRAGGING:
            self._drag_to(*_xy(points[0]))
        elif st.mode == GestureMode.PINCHING:
            if len(points) < 2:
                return
            dist = touch_distance(points[0], points[1])
            self._resize_to(st.origin_size * (dist / st.start_distance))

    # ---- ends ----
    def pointer_up(self):
        if self.state.mode in (GestureMode.DRAGGING, GestureMode.RESIZING):
            self._end()

    def touch_end(self, remaining: int = 0):
        if self.state.mode == GestureMode.PINCHING and remaining >= 2:
            return
        self._end()

    def cancel(self):
        self._end()
