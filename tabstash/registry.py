"""Group registry: the public face of tabstash.

Owns the live ``GroupStore`` for the active workspace and composes the slot
allocator, codec, backend selector and path translator into the operations
the editor UI calls (save, restore, open, close, remove, move, reslot,
export, import).

Persistence wiring:

- Structural changes (add, remove, move, replace, clear) are written
  immediately.
- Edits to a group's name, files, layout or slot are coalesced by a
  ``DebouncedWriter``.  With a ``dispatch`` hook they are written after
  ``debounce_seconds`` of quiet, marshalled back onto the host's UI context.
  Without one they stay pending until ``flush()``, ``close()``, the next
  structural change or a workspace switch.

No operation raises across this boundary for ordinary misuse (unknown
group, bad slot, missing workspace).  Host and backend faults are logged
and the operation gives up; nothing is retried.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from tabstash.codec import CodecError, decode_envelope, encode_envelope
from tabstash.collection import DebouncedWriter, DuplicateGroupError, GroupStore, StoreChange
from tabstash.models import BackendKind, BuiltIn, ExportEnvelope, Group, unique_paths
from tabstash.paths import describe, order_by_file_name, translate_envelope
from tabstash.ports import DocumentPort, FilePort, LayoutError, LayoutPort, PromptPort, SettingsPort, StorageError
from tabstash.settings import TabStashSettings, get_settings
from tabstash.slots import SlotAllocator
from tabstash.store import BackendSelector

PERSISTED_FIELDS = frozenset({"name", "files", "positions", "slot"})
"""Per-group fields whose edits trigger a (debounced) write."""

_READ_ERRORS = (CodecError, StorageError, OSError, KeyError, UnicodeDecodeError)
_WRITE_ERRORS = (StorageError, OSError)


class GroupRegistry:
    """Manages the tab groups of one workspace at a time.

    Construct with the host ports; pass ``workspace_key`` (or call
    ``load_workspace`` later) to activate a workspace.  Without an active
    workspace the registry still works in memory but persists nothing.
    """

    def __init__(
        self,
        *,
        layout: LayoutPort,
        documents: DocumentPort,
        settings_store: SettingsPort,
        files: FilePort,
        prompt: PromptPort,
        settings: TabStashSettings | None = None,
        workspace_key: str | None = None,
        dispatch: Callable[[Callable[[], None]], None] | None = None,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ) -> None:
        self._settings = settings or get_settings()
        self._layout = layout
        self._documents = documents
        self._files = files
        self._prompt = prompt
        self._backends = BackendSelector(files, settings_store, self._settings)
        self._writer = DebouncedWriter(
            self._persist,
            self._settings.debounce_seconds,
            dispatch=dispatch,
            timer_factory=timer_factory,
        )

        self._workspace_key: str | None = None
        self._store = GroupStore()
        self._slots = SlotAllocator(self._store)
        self._unsubscribe: Callable[[], None] | None = None
        self._reset_callbacks: list[Callable[[], None]] = []

        self.load_workspace(workspace_key)

    # -- Lifecycle -------------------------------------------------------------

    @property
    def workspace_key(self) -> str | None:
        return self._workspace_key

    def load_workspace(self, workspace_key: str | None) -> None:
        """Make *workspace_key* the active workspace and load its groups.

        Pending edits for the previous workspace are written first.  The store
        is replaced wholesale, never merged.  Read failures leave the new
        workspace with an empty collection.
        """
        self._writer.flush()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        key = workspace_key if workspace_key and workspace_key.strip() else None
        self._workspace_key = key
        self._store = GroupStore(self._load_groups(key))
        self._slots = SlotAllocator(self._store)
        self._unsubscribe = self._store.subscribe(self._on_change)

        if key is not None:
            logger.info("Loaded {} group(s) for {}", len(self._store), key)
        for callback in list(self._reset_callbacks):
            callback()

    def on_reset(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call *callback* whenever the collection is replaced.  Returns an unsubscribe function."""
        self._reset_callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self._reset_callbacks:
                self._reset_callbacks.remove(callback)

        return _unsubscribe

    def flush(self) -> None:
        """Write any debounced edits now."""
        self._writer.flush()

    def close(self) -> None:
        self.flush()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # -- Query -----------------------------------------------------------------

    @property
    def groups(self) -> list[Group]:
        return self._store.groups()

    @property
    def group_count(self) -> int:
        return len(self._store)

    @property
    def has_slot_groups(self) -> bool:
        return any(g.slot is not None for g in self._store)

    @property
    def has_stash_group(self) -> bool:
        return self._store.find_by_name(BuiltIn.STASH.value) is not None

    @property
    def backend_kind(self) -> BackendKind | None:
        if self._workspace_key is None:
            return None
        return self._backends.resolve(self._workspace_key)

    def get_group(self, name: str) -> Group | None:
        return self._store.find_by_name(name)

    def get_group_by_slot(self, slot: int) -> Group | None:
        return self._store.find_by_slot(slot)

    def get_selected_group(self) -> Group | None:
        return self._store.selected()

    def select_group(self, group: Group | None) -> None:
        self._store.select(group)

    def find_free_slot(self) -> int | None:
        return self._slots.find_free_slot()

    # -- Save ------------------------------------------------------------------

    def save_group(self, name: str, slot: int | None = None) -> Group | None:
        """Save the open documents and window layout as group *name*.

        Creates the group if needed (built-ins at the head, others at the
        end).  Overwriting an ordinary group first copies its previous state
        into ``<undo>``.  Returns the saved group, or ``None`` if nothing was
        open or the layout could not be captured; in the latter case a stale
        group of that name is removed.
        """
        if not name or not name.strip():
            logger.warning("Refusing to save a group without a name")
            return None

        open_files = self._documents.open_documents()
        if not open_files:
            logger.debug("Nothing open, not saving {!r}", name)
            return None

        if BuiltIn.from_name(name) is not None:
            slot = None

        group = self._store.find_by_name(name)
        files = order_by_file_name(unique_paths(open_files))

        try:
            positions = self._layout.capture()
        except LayoutError as exc:
            logger.warning("Layout capture failed while saving {!r}: {}", name, exc)
            if group is not None:
                self._store.remove(group)
            return None

        description = describe(files)
        if group is None:
            group = Group(name=name, description=description, files=files, positions=positions)
            self._slots.assign(group, slot)
            if group.is_builtin:
                self._store.insert(0, group)
            else:
                self._store.append(group)
            logger.info("Saved new group {!r} ({} file(s), slot={})", name, len(files), group.slot)
        else:
            if not group.is_builtin:
                self._snapshot_undo(group)
            self._store.replace(group, description=description, files=files, positions=positions)
            self._slots.assign(group, slot)
            logger.info("Overwrote group {!r} ({} file(s))", group.name, len(files))
        return group

    def save_stash(self) -> Group | None:
        return self.save_group(BuiltIn.STASH.value)

    def _snapshot_undo(self, source: Group) -> None:
        """Copy *source*'s current state into the single ``<undo>`` group."""
        undo = self._store.find_by_name(BuiltIn.UNDO.value)
        if undo is None:
            undo = Group(
                name=BuiltIn.UNDO.value,
                description=source.description,
                files=list(source.files),
                positions=source.positions,
            )
            self._store.insert(0, undo)
        else:
            self._store.update(
                undo,
                description=source.description,
                files=list(source.files),
                positions=source.positions,
            )

    # -- Restore / open / close ------------------------------------------------

    def restore_group(self, group: Group | None) -> None:
        """Replace the open documents with *group*.

        The current state is saved into ``<undo>`` first (unless *group* is
        ``<undo>`` itself or nothing is open) so a restore can be reverted.
        """
        if group is None or group not in self._store:
            return
        if not group.is_undo and self._documents.open_documents():
            self.save_group(BuiltIn.UNDO.value)
        self._documents.close_all(lambda _path: True)
        self.open_group(group)

    def restore_slot(self, slot: int) -> None:
        self.restore_group(self._store.find_by_slot(slot))

    def restore_stash(self) -> None:
        self.restore_group(self._store.find_by_name(BuiltIn.STASH.value))

    def open_group(self, group: Group | None) -> None:
        """Replay *group*'s layout, then open each member file not already open.

        Each file is attempted independently; one failure does not stop the rest.
        """
        if group is None:
            return

        if group.positions is not None:
            try:
                self._layout.replay(group.positions)
            except LayoutError as exc:
                logger.warning("Layout replay failed for {!r}: {}", group.name, exc)

        already_open = {p.casefold() for p in self._documents.open_documents()}
        for path in group.files:
            if path.casefold() in already_open:
                continue
            try:
                self._documents.open(path)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Could not open {}: {}", path, exc)

    def open_slot(self, slot: int) -> None:
        self.open_group(self._store.find_by_slot(slot))

    def open_stash(self) -> None:
        self.open_group(self._store.find_by_name(BuiltIn.STASH.value))

    def close_group(self, group: Group | None) -> None:
        """Close every open document that belongs to *group*."""
        if group is None or not group.files:
            return
        self._documents.close_all(group.contains_file)

    # -- Edit ------------------------------------------------------------------

    def remove_group(self, group: Group | None, confirm: bool = True) -> bool:
        """Delete *group*, keeping a copy in ``<undo>``.  Returns whether it was removed."""
        if group is None or group not in self._store:
            return False
        if confirm and not self._prompt.confirm_delete(group.name):
            return False

        if not group.is_undo:
            self._snapshot_undo(group)
        self._store.remove(group)
        logger.info("Removed group {!r}", group.name)
        return True

    def move_group(self, group: Group | None, delta: int) -> bool:
        """Shift *group* by *delta* positions.

        Built-in groups stay pinned at the head: they cannot move, and no
        ordinary group can take a position a built-in occupies.
        """
        if group is None or group.is_builtin or group not in self._store:
            return False

        index = self._store.index(group)
        new_index = index + delta
        if delta == 0 or new_index < 0 or new_index >= len(self._store):
            return False
        if self._store[new_index].is_builtin:
            return False

        self._store.move(index, new_index)
        return True

    def set_group_slot(self, group: Group | None, slot: int) -> None:
        if group is None or group.slot == slot:
            return
        self._slots.assign(group, slot)

    def rename_group(self, group: Group | None, name: str) -> bool:
        """Rename an ordinary group.  Built-in names and duplicates are refused."""
        if group is None or group.is_builtin or group not in self._store:
            return False
        if not name or not name.strip() or BuiltIn.from_name(name) is not None:
            return False
        try:
            self._store.update(group, name=name)
        except DuplicateGroupError:
            logger.info("A group named {!r} already exists", name)
            return False
        return True

    def clear_groups(self) -> None:
        self._store.clear()

    # -- Import / export -------------------------------------------------------

    def export_groups(self, file_path: str) -> bool:
        """Write the collection with its workspace key to *file_path*."""
        if self._workspace_key is None:
            logger.warning("No active workspace, nothing to export")
            return False

        envelope = ExportEnvelope(workspace_key=self._workspace_key, groups=self._store.groups())
        try:
            self._files.write_text(file_path, encode_envelope(envelope))
        except OSError as exc:
            logger.error("Export to {} failed: {}", file_path, exc)
            return False
        logger.info("Exported {} group(s) to {}", len(envelope.groups), file_path)
        return True

    def import_groups(self, file_path: str) -> bool:
        """Import an export file.

        When the file comes from another workspace the user is asked whether
        to rewrite its paths for this one.  If so the groups are re-homed here,
        otherwise they are stored under their original workspace key.  When
        they land in the active workspace the collection is reloaded from the
        backend.
        """
        key = self._workspace_key
        if key is None:
            logger.warning("No active workspace, ignoring import of {}", file_path)
            return False

        try:
            envelope = decode_envelope(self._files.read_text(file_path))
        except (CodecError, OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot import {}: {}", file_path, exc)
            return False

        if envelope.workspace_key != key and self._prompt.confirm_translate(envelope.workspace_key, key):
            envelope = translate_envelope(envelope, key)

        target = envelope.workspace_key
        if target == key:
            # The import replaces the live collection; drop edits that would overwrite it.
            self._writer.cancel()

        groups = _sanitize(envelope.groups)
        if not self._write(target, groups):
            return False
        logger.info("Imported {} group(s) from {} into {}", len(groups), file_path, target)

        if target == key:
            self.load_workspace(key)
        return True

    # -- Backend ---------------------------------------------------------------

    def toggle_backend(self) -> BackendKind | None:
        """Move the active workspace to the other backend and persist into it."""
        key = self._workspace_key
        if key is None:
            return None
        self._writer.cancel()
        try:
            kind = self._backends.toggle(key)
        except OSError as exc:
            logger.error("Cannot switch backend for {}: {}", key, exc)
            return None
        self._persist()
        return kind

    # -- Persistence -----------------------------------------------------------

    def _on_change(self, change: StoreChange) -> None:
        if change.kind.is_structural:
            self._writer.cancel()
            self._persist()
        elif change.fields & PERSISTED_FIELDS:
            self._writer.schedule()

    def _persist(self) -> None:
        if self._workspace_key is None:
            return
        self._write(self._workspace_key, self._store.groups())

    def _write(self, workspace_key: str, groups: Sequence[Group]) -> bool:
        if not workspace_key.strip():
            logger.warning("Not saving {} group(s) under a blank workspace key", len(groups))
            return False
        try:
            self._backends.save(workspace_key, groups)
        except _WRITE_ERRORS as exc:
            logger.error("Saving groups for {} failed: {}", workspace_key, exc)
            return False
        return True

    def _load_groups(self, workspace_key: str | None) -> list[Group]:
        if workspace_key is None:
            return []
        try:
            self._backends.resolve(workspace_key, refresh=True)
            return _sanitize(self._backends.load(workspace_key))
        except _READ_ERRORS as exc:
            logger.warning("Could not load groups for {}, starting empty: {}", workspace_key, exc)
            return []


def _sanitize(groups: Sequence[Group]) -> list[Group]:
    """Drop repeated names and repeated slots from stored data; first occurrence wins."""
    names: set[str] = set()
    slots: set[int] = set()
    result: list[Group] = []
    for group in groups:
        folded = group.name.casefold()
        if folded in names:
            logger.warning("Dropping duplicate group {!r}", group.name)
            continue
        names.add(folded)
        if group.slot is not None:
            if group.slot in slots:
                group.slot = None
            else:
                slots.add(group.slot)
        result.append(group)
    return result
