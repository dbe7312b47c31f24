from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from dreamroom.controller import RoomController
from dreamroom.persistence import SettingsStorage, StorageUnavailable


class CountingStorage(SettingsStorage):
    """Real INI-backed storage that records every write."""

    def __init__(self, settings):
        super().__init__(settings)
        self.writes = []

    def set(self, key, value):
        self.writes.append(key)
        super().set(key, value)


class BrokenStorage(SettingsStorage):
    """Reads work, every write fails like a full quota."""

    def set(self, key, value):
        raise StorageUnavailable(f"quota exceeded writing {key!r}")

    def remove(self, key):
        raise StorageUnavailable(f"quota exceeded removing {key!r}")


@pytest.fixture
def ini_path(tmp_path):
    return tmp_path / "dreamroom.ini"


@pytest.fixture
def settings_storage(ini_path) -> CountingStorage:
    from PySide6.QtCore import QSettings

    return CountingStorage(QSettings(str(ini_path), QSettings.IniFormat))


@pytest.fixture
def broken_storage(ini_path) -> BrokenStorage:
    from PySide6.QtCore import QSettings

    return BrokenStorage(QSettings(str(ini_path), QSettings.IniFormat))


@pytest.fixture
def controller(settings_storage) -> RoomController:
    ctl = RoomController(settings_storage, room_w=300, room_h=200)
    ctl.start()
    return ctl
