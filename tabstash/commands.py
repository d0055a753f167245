"""Toolbar commands acting on the selected group.

Each command has an ``can_*`` enablement check the UI polls before showing
the button, and an action that is a no-op when nothing is selected.
"""

from __future__ import annotations

from tabstash.ports import DocumentPort
from tabstash.registry import GroupRegistry


class GroupCommands:
    def __init__(self, registry: GroupRegistry, documents: DocumentPort) -> None:
        self._registry = registry
        self._documents = documents

    def _has_open_documents(self) -> bool:
        return bool(self._documents.open_documents())

    # -- Enablement ------------------------------------------------------------

    def can_save_to(self) -> bool:
        group = self._registry.get_selected_group()
        return group is not None and not group.is_undo and self._has_open_documents()

    def can_close(self) -> bool:
        return self._registry.get_selected_group() is not None and self._has_open_documents()

    def can_act_on_selection(self) -> bool:
        """Restore, open and delete only need a selection."""
        return self._registry.get_selected_group() is not None

    def can_export(self) -> bool:
        return self._registry.group_count > 0

    # -- Actions ---------------------------------------------------------------

    def save_to(self) -> None:
        group = self._registry.get_selected_group()
        if group is not None:
            self._registry.save_group(group.name, group.slot)

    def delete(self) -> None:
        group = self._registry.get_selected_group()
        if group is not None:
            self._registry.remove_group(group)

    def restore(self) -> None:
        self._registry.restore_group(self._registry.get_selected_group())

    def open(self) -> None:
        self._registry.open_group(self._registry.get_selected_group())

    def close(self) -> None:
        self._registry.close_group(self._registry.get_selected_group())

    def export(self, file_path: str) -> bool:
        return self._registry.export_groups(file_path)

    def import_(self, file_path: str) -> bool:
        return self._registry.import_groups(file_path)
