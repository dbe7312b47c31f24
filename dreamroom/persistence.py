from __future__ import annotations
import logging
from typing import Callable, Optional
from PySide6.QtCore import QSettings
from .models import SceneRecord
from .state import SceneState, MalformedRecord, now_ms
from .store import SceneStore
from .utils import (ORG_NAME, APP_NAME, MAX_SLOTS, NAME_MAX_LEN, LEGACY_STORAGE_KEY,
                    SLOT_KEY_PREFIX, ACTIVE_SLOT_KEY, PROJECT_NAME_KEY, DEFAULT_PROJECT_NAME)

log = logging.getLogger(__name__)

__all__ = ["StorageUnavailable", "MalformedRecord", "SettingsStorage", "SlotPersistence",
           "valid_slot", "default_slot_label", "trim_name"]


class StorageUnavailable(Exception):
    """The durable store refused a read or write."""


def valid_slot(slot) -> bool:
    return isinstance(slot, int) and not isinstance(slot, bool) and 1 <= slot <= MAX_SLOTS


def default_slot_label(slot: int) -> str:
    return f"Room {slot}"


def trim_name(value) -> str:
    return str(value or "").strip()[:NAME_MAX_LEN]


class SettingsStorage:
    """String key-value view of a QSettings store."""

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else QSettings(ORG_NAME, APP_NAME)

    @classmethod
    def from_path(cls, path) -> "SettingsStorage":
        return cls(QSettings(str(path), QSettings.IniFormat))

    def _check(self, action: str, key: str):
        self._settings.sync()
        if self._settings.status() != QSettings.NoError:
            raise StorageUnavailable(f"{action} {key!r} failed: {self._settings.status()}")

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._settings.value(key)
        except Exception as e:
            raise StorageUnavailable(f"read {key!r} failed") from e
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            # an unquoted comma-separated INI value comes back split
            value = ",".join(str(v) for v in value)
        return str(value)

    def set(self, key: str, value: str):
        try:
            self._settings.setValue(key, value)
        except Exception as e:
            raise StorageUnavailable(f"write {key!r} failed") from e
        self._check("write", key)

    def remove(self, key: str):
        try:
            self._settings.remove(key)
        except Exception as e:
            raise StorageUnavailable(f"remove {key!r} failed") from e
        self._check("remove", key)

    def contains(self, key: str) -> bool:
        return self.get(key) not in (None, "")


class SlotPersistence:
    def __init__(self, storage: SettingsStorage, status_cb: Optional[Callable[[str], None]] = None):
        self.storage = storage
        self.state = SceneState()
        self._status_cb = status_cb

    def _status(self, text: str):
        if self._status_cb:
            self._status_cb(text)

    @staticmethod
    def slot_key(slot: int) -> str:
        return f"{SLOT_KEY_PREFIX}{slot}"

    def _safe_get(self, key: str) -> Optional[str]:
        try:
            return self.storage.get(key)
        except StorageUnavailable as e:
            log.warning("storage read failed: %s", e)
            return None

    def _safe_write(self, key: str, value: Optional[str]) -> bool:
        try:
            if value is None:
                self.storage.remove(key)
            else:
                self.storage.set(key, value)
            return True
        except StorageUnavailable as e:
            log.warning("storage write failed: %s", e)
            return False

    # ---- migration / active slot ----
    def migrate_legacy(self) -> bool:
        slot_one = self.slot_key(1)
        if self._safe_get(slot_one):
            return False
        legacy = self._safe_get(LEGACY_STORAGE_KEY)
        if not legacy:
            return False
        if not self._safe_write(slot_one, legacy):
            return False
        self._safe_write(LEGACY_STORAGE_KEY, None)
        log.info("migrated legacy single-slot save into slot 1")
        return True

    def read_active_slot(self) -> int:
        raw = self._safe_get(ACTIVE_SLOT_KEY)
        try:
            slot = int(raw) if raw is not None else 1
        except ValueError:
            slot = 1
        return slot if valid_slot(slot) else 1

    def write_active_slot(self, slot: int) -> bool:
        if not valid_slot(slot):
            return False
        return self._safe_write(ACTIVE_SLOT_KEY, str(slot))

    # ---- records ----
    def read_slot(self, slot: int) -> Optional[SceneRecord]:
        if not valid_slot(slot):
            return None
        try:
            return self.state.deserialize(self._safe_get(self.slot_key(slot)), slot)
        except MalformedRecord as e:
            log.debug("ignoring stored value: %s", e)
            return None

    def write_slot(self, record: SceneRecord) -> bool:
        if not valid_slot(record.slot):
            return False
        return self._safe_write(self.slot_key(record.slot), self.state.dumps(record))

    def save(self, store: SceneStore, slot: int) -> bool:
        record = self.state.serialize(store, slot, self.custom_slot_name(slot))
        if self.write_slot(record):
            log.debug("saved slot %d (%d items)", slot, len(record.items))
            self._status(f"Saved {self.slot_label(slot)}")
            return True
        self._status("Could not save on this device")
        return False

    def load(self, slot: int) -> Optional[SceneRecord]:
        raw = self._safe_get(self.slot_key(slot))
        if not raw:
            self._status(f"{self.slot_label(slot)} is empty")
            return None
        try:
            record = self.state.deserialize(raw, slot)
        except MalformedRecord as e:
            log.warning("slot %d holds an unreadable record: %s", slot, e)
            self._status("Could not load saved room")
            return None
        self._status(f"Loaded {self.slot_label(slot)}")
        return record

    # ---- names ----
    def custom_slot_name(self, slot: int) -> str:
        record = self.read_slot(slot)
        return trim_name(record.room_name) if record else ""

    def slot_label(self, slot: int) -> str:
        return self.custom_slot_name(slot) or default_slot_label(slot)

    def rename_slot(self, slot: int, name: str) -> bool:
        if not valid_slot(slot):
            return False
        trimmed = trim_name(name)
        record = self.read_slot(slot) or SceneRecord(slot=slot)
        record.slot = slot
        record.room_name = trimmed if trimmed != default_slot_label(slot) else ""
        record.saved_at = now_ms()
        if self.write_slot(record):
            return True
        self._status("Could not rename this room")
        return False

    def project_name(self) -> str:
        return trim_name(self._safe_get(PROJECT_NAME_KEY)) or DEFAULT_PROJECT_NAME

    def save_project_name(self, value: str) -> str:
        trimmed = trim_name(value)
        if not trimmed or trimmed == DEFAULT_PROJECT_NAME:
            self._safe_write(PROJECT_NAME_KEY, None)
            self._status("Project name reset")
            return DEFAULT_PROJECT_NAME
        if self._safe_write(PROJECT_NAME_KEY, trimmed):
            self._status("Project name updated")
        else:
            self._status("Could not save the project name")
        return trimmed
