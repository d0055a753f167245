"""Slot allocation: nine exclusive shortcut slots shared by a workspace's groups.

Assignment never fails or queues.  Taking a slot evicts whoever held it.
"""

from __future__ import annotations

from loguru import logger

from tabstash.collection import GroupStore
from tabstash.models import SLOT_MAX, SLOT_MIN, Group


def is_valid_slot(slot: int | None) -> bool:
    return slot is not None and SLOT_MIN <= slot <= SLOT_MAX


class SlotAllocator:
    def __init__(self, store: GroupStore) -> None:
        self._store = store

    def find_free_slot(self) -> int | None:
        """Lowest slot in 1..9 not held by any group, or ``None`` if all are taken."""
        occupied = {g.slot for g in self._store if g.slot is not None}
        for slot in range(SLOT_MIN, SLOT_MAX + 1):
            if slot not in occupied:
                return slot
        return None

    def assign(self, group: Group, slot: int | None) -> None:
        """Give *slot* to *group*, evicting the current holder.

        Ignored for ``None``, out-of-range slots, the group's current slot and
        built-in groups.
        """
        if not is_valid_slot(slot) or group.slot == slot or group.is_builtin:
            return

        resident = self._store.find_by_slot(slot)
        if resident is not None and resident is not group:
            logger.debug("Slot {} moves from {!r} to {!r}", slot, resident.name, group.name)
            self._store.update(resident, slot=None)

        if group in self._store:
            self._store.update(group, slot=slot)
        else:
            group.slot = slot
