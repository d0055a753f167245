"""Shared enumerations."""

from __future__ import annotations

from enum import StrEnum

# -- Groups ------------------------------------------------------------------


class BuiltIn(StrEnum):
    """Reserved group names.  At most one of each exists per collection."""

    STASH = "<stash>"
    UNDO = "<undo>"

    @classmethod
    def from_name(cls, name: str | None) -> BuiltIn | None:
        """Return the built-in matching *name* (case-insensitive), else ``None``."""
        if not name:
            return None
        folded = name.casefold()
        for member in cls:
            if member.value == folded:
                return member
        return None


# -- Persistence -------------------------------------------------------------


class BackendKind(StrEnum):
    """Where a workspace's collection is persisted."""

    SIDECAR = "sidecar"
    SETTINGS = "settings"


# -- Store events ------------------------------------------------------------


class ChangeKind(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    MOVED = "moved"
    REPLACED = "replaced"
    CLEARED = "cleared"
    ITEM_CHANGED = "item_changed"

    @property
    def is_structural(self) -> bool:
        return self is not ChangeKind.ITEM_CHANGED
