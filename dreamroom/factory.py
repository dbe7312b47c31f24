from __future__ import annotations
from typing import Dict, Optional
from .models import PlacedItem
from .utils import DROP_CENTER_OFFSET, clamp_size


class ItemFactory:
    """Builds PlacedItems so the drop point ends up as the item's visual centre."""

    def create(self, emoji: str, drop_x: float, drop_y: float, size=None) -> Optional[PlacedItem]:
        if not emoji:
            return None
        return PlacedItem(
            emoji=str(emoji),
            left=float(drop_x) - DROP_CENTER_OFFSET,
            top=float(drop_y) - DROP_CENTER_OFFSET,
            size=clamp_size(size),
        )

    def from_record(self, record: Dict) -> Optional[PlacedItem]:
        if not isinstance(record, dict) or not record.get("emoji"):
            return None
        try:
            left = float(record.get("left") or 0)
            top = float(record.get("top") or 0)
        except (TypeError, ValueError):
            return None
        # saved corners go back through the drop convention: +offset here, -offset in create()
        return self.create(record["emoji"], left + DROP_CENTER_OFFSET, top + DROP_CENTER_OFFSET,
                           record.get("size"))
