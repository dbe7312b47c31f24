from __future__ import annotations
import json
from typing import Dict, List, Optional, Union
from PySide6.QtCore import QDateTime
from .models import PlacedItem, SceneRecord
from .store import SceneStore


class MalformedRecord(ValueError):
    """Stored slot value is not JSON or not a JSON object."""


def now_ms() -> int:
    return int(QDateTime.currentMSecsSinceEpoch())


class SceneState:
    def serialize(self, store: SceneStore, slot: int, room_name: str = "",
                  saved_at: Optional[int] = None) -> SceneRecord:
        return SceneRecord(
            slot=slot,
            room_name=room_name,
            wall_color=store.wall_color,
            floor_color=store.floor_color,
            items=[it.to_record() for it in store],
            saved_at=now_ms() if saved_at is None else saved_at,
        )

    def dumps(self, record: SceneRecord) -> str:
        return json.dumps(record.to_dict(), ensure_ascii=False)

    def deserialize(self, raw: Union[str, bytes, Dict, None], slot: int = 1) -> Optional[SceneRecord]:
        if raw is None or raw == "" or raw == b"":
            return None
        if isinstance(raw, dict):
            data = raw
        else:
            try:
                data = json.loads(raw)
            except (TypeError, ValueError) as e:
                raise MalformedRecord(f"slot {slot}: not JSON") from e
        if not isinstance(data, dict):
            raise MalformedRecord(f"slot {slot}: expected an object, got {type(data).__name__}")
        return SceneRecord.from_dict(data, slot)

    def replay(self, record: SceneRecord, factory) -> List[PlacedItem]:
        out = []
        for r in record.items:
            item = factory.from_record(r)
            if item is not None:
                out.append(item)
        return out
