"""Unit tests for SlotAllocator."""

from __future__ import annotations

import itertools

import pytest

from tabstash.collection import GroupStore
from tabstash.models import Group
from tabstash.slots import SlotAllocator, is_valid_slot


def _store(*slots: int | None) -> GroupStore:
    return GroupStore([Group(name=f"g{i}", slot=slot) for i, slot in enumerate(slots)])


def _assert_unique_slots(store: GroupStore) -> None:
    held = [g.slot for g in store if g.slot is not None]
    assert len(held) == len(set(held))


def test_find_free_slot_fills_gap() -> None:
    allocator = SlotAllocator(_store(1, 2, 3, 5))
    assert allocator.find_free_slot() == 4


def test_find_free_slot_empty_collection() -> None:
    assert SlotAllocator(GroupStore()).find_free_slot() == 1


def test_find_free_slot_all_taken() -> None:
    allocator = SlotAllocator(_store(*range(1, 10)))
    assert allocator.find_free_slot() is None


def test_find_free_slot_ignores_unslotted() -> None:
    allocator = SlotAllocator(_store(None, 1, None))
    assert allocator.find_free_slot() == 2


def test_assign_evicts_resident() -> None:
    store = _store(3, None)
    allocator = SlotAllocator(store)
    first, second = store.groups()

    allocator.assign(second, 3)

    assert second.slot == 3
    assert first.slot is None


@pytest.mark.parametrize("slot", [None, 0, 10, -1])
def test_assign_ignores_invalid_slot(slot: int | None) -> None:
    store = _store(2)
    allocator = SlotAllocator(store)
    group = store[0]

    allocator.assign(group, slot)
    assert group.slot == 2


def test_assign_same_slot_is_noop() -> None:
    store = _store(4)
    changes = []
    store.subscribe(changes.append)

    SlotAllocator(store).assign(store[0], 4)
    assert store[0].slot == 4
    assert changes == []


def test_assign_never_gives_builtin_a_slot() -> None:
    store = GroupStore([Group(name="<stash>")])
    SlotAllocator(store).assign(store[0], 1)
    assert store[0].slot is None


def test_assign_to_group_outside_store() -> None:
    """New groups get their slot before insertion; the resident is still evicted."""
    store = _store(1)
    fresh = Group(name="fresh")

    SlotAllocator(store).assign(fresh, 1)

    assert fresh.slot == 1
    assert store[0].slot is None


def test_slots_stay_unique_under_any_sequence() -> None:
    store = _store(None, None, None, None)
    allocator = SlotAllocator(store)
    groups = store.groups()

    for group, slot in itertools.product(groups, [1, 2, 1, 9, 2, 0, 9]):
        allocator.assign(group, slot)
        _assert_unique_slots(store)


def test_is_valid_slot_bounds() -> None:
    assert is_valid_slot(1)
    assert is_valid_slot(9)
    assert not is_valid_slot(0)
    assert not is_valid_slot(10)
    assert not is_valid_slot(None)
