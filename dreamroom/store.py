from __future__ import annotations
from typing import Iterator, List, Optional
from .models import PlacedItem
from .utils import DEFAULT_WALL_COLOR, DEFAULT_FLOOR_COLOR

BASE_Z = 20


class SceneStore:
    """Ordered items of the active slot plus its wall/floor look.

    Insertion order is the stacking order written on save; undo pops it.
    The active item is held by id only, the list stays the single owner.
    """

    def __init__(self):
        self._items: List[PlacedItem] = []
        self._top_z = BASE_Z
        self._active_id: Optional[int] = None
        self.wall_color = DEFAULT_WALL_COLOR
        self.floor_color = DEFAULT_FLOOR_COLOR

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PlacedItem]:
        return iter(list(self._items))

    def __contains__(self, item) -> bool:
        return any(it is item for it in self._items)

    @property
    def items(self) -> List[PlacedItem]:
        return list(self._items)

    @property
    def top_z(self) -> int:
        return self._top_z

    @property
    def active(self) -> Optional[PlacedItem]:
        if self._active_id is None:
            return None
        for it in self._items:
            if it.item_id == self._active_id:
                return it
        return None

    def _next_z(self) -> int:
        self._top_z += 1
        return self._top_z

    def append(self, item: PlacedItem) -> PlacedItem:
        item.z_order = self._next_z()
        self._items.append(item)
        return item

    def remove(self, item: PlacedItem) -> bool:
        for i, it in enumerate(self._items):
            if it is item:
                del self._items[i]
                if self._active_id == item.item_id:
                    self._active_id = None
                return True
        return False

    def undo_last(self) -> Optional[PlacedItem]:
        if not self._items:
            return None
        last = self._items.pop()
        if self._active_id == last.item_id:
            self._active_id = None
        return last

    def clear_all(self) -> List[PlacedItem]:
        removed, self._items = self._items, []
        self._active_id = None
        return removed

    def set_active(self, item: PlacedItem) -> Optional[PlacedItem]:
        """Make `item` the only highlighted one; returns the previous active item."""
        if item not in self:
            return None
        previous = self.active
        self._active_id = item.item_id
        item.z_order = self._next_z()
        return previous if previous is not item else None

    def clear_active(self) -> Optional[PlacedItem]:
        previous = self.active
        self._active_id = None
        return previous

    def reset_look(self):
        self.wall_color = DEFAULT_WALL_COLOR
        self.floor_color = DEFAULT_FLOOR_COLOR
