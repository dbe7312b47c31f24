from __future__ import annotations

import json

from dreamroom.models import SceneRecord
from dreamroom.persistence import SettingsStorage, SlotPersistence
from dreamroom.state import MalformedRecord, SceneState
from dreamroom.store import SceneStore
from dreamroom.models import PlacedItem
from dreamroom.utils import (
    ACTIVE_SLOT_KEY,
    DEFAULT_FLOOR_COLOR,
    DEFAULT_PROJECT_NAME,
    DEFAULT_WALL_COLOR,
    LEGACY_STORAGE_KEY,
    PROJECT_NAME_KEY,
)

import pytest

LEGACY_RECORD = json.dumps({
    "slot": 1, "roomName": "", "wallColor": "#FFB6C1", "floorColor": "#8B5A2B",
    "items": [{"emoji": "🧸", "left": 10, "top": 20, "size": 50}], "savedAt": 1,
})


def _persistence(storage, statuses=None):
    return SlotPersistence(storage, status_cb=statuses.append if statuses is not None else None)


def test_legacy_save_migrates_into_slot_one_once(settings_storage, ini_path) -> None:
    settings_storage.set(LEGACY_STORAGE_KEY, LEGACY_RECORD)
    p = _persistence(settings_storage)
    assert p.migrate_legacy()
    assert settings_storage.get("slot-state:1") == LEGACY_RECORD
    assert settings_storage.get(LEGACY_STORAGE_KEY) is None
    assert not p.migrate_legacy()

    reopened = SettingsStorage.from_path(ini_path)
    assert reopened.get("slot-state:1") == LEGACY_RECORD


def test_migration_never_overwrites_existing_slot_one(settings_storage) -> None:
    existing = json.dumps({"slot": 1, "items": [], "savedAt": 5})
    settings_storage.set(LEGACY_STORAGE_KEY, LEGACY_RECORD)
    settings_storage.set("slot-state:1", existing)
    p = _persistence(settings_storage)
    assert not p.migrate_legacy()
    assert settings_storage.get("slot-state:1") == existing
    assert settings_storage.get(LEGACY_STORAGE_KEY) == LEGACY_RECORD


@pytest.mark.parametrize("raw,expected", [(None, 1), ("2", 2), ("3", 3), ("7", 1), ("0", 1), ("abc", 1)])
def test_read_active_slot(settings_storage, raw, expected) -> None:
    if raw is not None:
        settings_storage.set(ACTIVE_SLOT_KEY, raw)
    assert _persistence(settings_storage).read_active_slot() == expected


def test_write_active_slot_rejects_out_of_range(settings_storage) -> None:
    p = _persistence(settings_storage)
    assert not p.write_active_slot(4)
    assert not p.write_active_slot(0)
    assert p.write_active_slot(3)
    assert settings_storage.get(ACTIVE_SLOT_KEY) == "3"


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", "42", '"text"'])
def test_malformed_slot_reads_as_empty(settings_storage, raw) -> None:
    settings_storage.set("slot-state:2", raw)
    statuses = []
    p = _persistence(settings_storage, statuses)
    assert p.read_slot(2) is None
    assert p.load(2) is None
    assert statuses[-1] == "Could not load saved room"


def test_deserialize_raises_for_non_objects() -> None:
    with pytest.raises(MalformedRecord):
        SceneState().deserialize("[]")
    assert SceneState().deserialize("") is None


def test_load_of_absent_slot_reports_empty(settings_storage) -> None:
    statuses = []
    assert _persistence(settings_storage, statuses).load(3) is None
    assert statuses == ["Room 3 is empty"]


def test_save_writes_full_record(settings_storage) -> None:
    store = SceneStore()
    store.append(PlacedItem("🌟", left=130.7, top=80.2, size=40))
    store.append(PlacedItem("🪴", left=-5, top=12, size=84))
    store.wall_color = "#E6E6FA"
    statuses = []
    p = _persistence(settings_storage, statuses)
    assert p.save(store, 2)
    data = json.loads(settings_storage.get("slot-state:2"))
    assert data["slot"] == 2
    assert data["roomName"] == ""
    assert data["wallColor"] == "#E6E6FA"
    assert data["items"] == [
        {"emoji": "🌟", "left": 130, "top": 80, "size": 40},
        {"emoji": "🪴", "left": -5, "top": 12, "size": 84},
    ]
    assert isinstance(data["savedAt"], int) and data["savedAt"] > 0
    assert statuses == ["Saved Room 2"]


def test_empty_items_is_a_valid_record(settings_storage) -> None:
    p = _persistence(settings_storage)
    assert p.save(SceneStore(), 1)
    record = p.load(1)
    assert isinstance(record, SceneRecord)
    assert record.items == []


def test_write_failure_is_reported_not_raised(broken_storage) -> None:
    statuses = []
    p = _persistence(broken_storage, statuses)
    store = SceneStore()
    store.append(PlacedItem("🌟"))
    assert not p.save(store, 1)
    assert statuses == ["Could not save on this device"]
    assert not p.rename_slot(1, "Den")
    assert statuses[-1] == "Could not rename this room"
    assert not p.write_active_slot(2)


def test_rename_inactive_slot_persists_immediately(settings_storage) -> None:
    p = _persistence(settings_storage)
    assert p.slot_label(2) == "Room 2"
    assert p.rename_slot(2, "   Unicorn Den   ")
    assert p.slot_label(2) == "Unicorn Den"
    record = p.read_slot(2)
    assert record.items == [] and record.slot == 2


def test_rename_keeps_existing_items(settings_storage) -> None:
    p = _persistence(settings_storage)
    store = SceneStore()
    store.append(PlacedItem("🧸", left=1, top=2, size=30))
    p.save(store, 1)
    p.rename_slot(1, "Nursery")
    assert p.read_slot(1).items == [{"emoji": "🧸", "left": 1, "top": 2, "size": 30}]
    # the custom name survives later saves
    p.save(store, 1)
    assert p.slot_label(1) == "Nursery"


@pytest.mark.parametrize("name", ["", "   ", "Room 3"])
def test_rename_to_blank_or_default_resets(settings_storage, name) -> None:
    p = _persistence(settings_storage)
    p.rename_slot(3, "Attic")
    p.rename_slot(3, name)
    assert p.custom_slot_name(3) == ""
    assert p.slot_label(3) == "Room 3"


def test_rename_truncates_to_thirty_chars(settings_storage) -> None:
    p = _persistence(settings_storage)
    p.rename_slot(1, "x" * 45)
    assert p.slot_label(1) == "x" * 30


def test_project_name_round_trip_and_reset(settings_storage) -> None:
    statuses = []
    p = _persistence(settings_storage, statuses)
    assert p.project_name() == DEFAULT_PROJECT_NAME
    assert p.save_project_name("  Castle Plans  ") == "Castle Plans"
    assert settings_storage.get(PROJECT_NAME_KEY) == "Castle Plans"
    assert p.project_name() == "Castle Plans"
    assert p.save_project_name(DEFAULT_PROJECT_NAME) == DEFAULT_PROJECT_NAME
    assert settings_storage.get(PROJECT_NAME_KEY) is None
    assert statuses == ["Project name updated", "Project name reset"]


@pytest.mark.parametrize("wall,floor", [(5, None), ("", "   "), (["#000"], {"c": 1})])
def test_record_ignores_invalid_colours(wall, floor) -> None:
    record = SceneRecord.from_dict({"wallColor": wall, "floorColor": floor, "items": []})
    assert (record.wall_color, record.floor_color) == (DEFAULT_WALL_COLOR, DEFAULT_FLOOR_COLOR)
    kept = SceneRecord.from_dict({"wallColor": "#FFB6C1", "floorColor": "#8B5A2B"})
    assert (kept.wall_color, kept.floor_color) == ("#FFB6C1", "#8B5A2B")
