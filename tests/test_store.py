from __future__ import annotations

import pytest

from dreamroom.models import PlacedItem
from dreamroom.store import SceneStore
from dreamroom.utils import DEFAULT_FLOOR_COLOR, DEFAULT_WALL_COLOR


def _items(*emojis):
    return [PlacedItem(e) for e in emojis]


def test_append_assigns_increasing_z() -> None:
    store = SceneStore()
    a, b, c = _items("🌟", "🪴", "🧸")
    for it in (a, b, c):
        store.append(it)
    assert a.z_order < b.z_order < c.z_order
    assert store.items == [a, b, c]


def test_undo_is_last_in_first_out_on_insertion_order() -> None:
    store = SceneStore()
    a, b = _items("A", "B")
    store.append(a)
    store.append(b)
    # promoting A leaves insertion order alone
    store.set_active(a)
    b.left, b.size = 200, 80
    assert store.undo_last() is b
    assert store.items == [a]
    assert store.undo_last() is a
    assert store.undo_last() is None


def test_remove_by_identity_clears_active() -> None:
    store = SceneStore()
    a, twin = PlacedItem("🌟"), PlacedItem("🌟")
    store.append(a)
    store.append(twin)
    store.set_active(twin)
    assert store.remove(twin)
    assert store.active is None
    assert store.items == [a]
    assert not store.remove(twin)


def test_set_active_is_exclusive_and_promotes_z() -> None:
    store = SceneStore()
    a, b = _items("A", "B")
    store.append(a)
    store.append(b)
    assert store.set_active(a) is None
    assert store.active is a
    assert a.z_order == store.top_z > b.z_order
    assert store.set_active(b) is a
    assert store.active is b


def test_set_active_ignores_foreign_item() -> None:
    store = SceneStore()
    assert store.set_active(PlacedItem("A")) is None
    assert store.active is None


def test_z_counter_never_resets() -> None:
    store = SceneStore()
    store.append(PlacedItem("A"))
    top = store.top_z
    store.clear_all()
    store.append(PlacedItem("B"))
    assert store.top_z > top


def test_clear_all_returns_removed_and_drops_active() -> None:
    store = SceneStore()
    a, b = _items("A", "B")
    store.append(a)
    store.append(b)
    store.set_active(b)
    assert store.clear_all() == [a, b]
    assert len(store) == 0
    assert store.active is None


def test_reset_look() -> None:
    store = SceneStore()
    store.wall_color, store.floor_color = "#000", "#fff"
    store.reset_look()
    assert (store.wall_color, store.floor_color) == (DEFAULT_WALL_COLOR, DEFAULT_FLOOR_COLOR)


def test_emoji_is_fixed_after_creation() -> None:
    item = PlacedItem("🌟")
    with pytest.raises(AttributeError):
        item.emoji = "🪴"
