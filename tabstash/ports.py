"""Interfaces to the host editor and to durable storage.

The registry never reaches into an ambient host object.  Everything it needs
is passed in at construction as one of these narrow protocols, so the engine
runs the same inside an editor, in the CLI (see ``tabstash.adapters``) and
under test fakes.

All calls are synchronous and expected on the host's single UI context.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


class LayoutError(RuntimeError):
    """Raised by a layout port when the host refuses to capture or replay."""


class StorageError(RuntimeError):
    """Raised by a settings port when a value cannot be read or written."""


@runtime_checkable
class LayoutPort(Protocol):
    """Window layout capture and replay.  Both calls are all-or-nothing."""

    def capture(self) -> bytes:
        """Return the current window layout.  Raises ``LayoutError`` on failure."""
        ...

    def replay(self, blob: bytes) -> None:
        """Reopen windows from a captured layout.  Raises ``LayoutError`` on failure."""
        ...


@runtime_checkable
class DocumentPort(Protocol):
    """Open document enumeration and best-effort open/close."""

    def open_documents(self) -> list[str]:
        """Full paths of currently open documents, in display order."""
        ...

    def open(self, path: str) -> None:
        """Open a single document.  May raise; callers isolate failures per path."""
        ...

    def close_all(self, predicate: Callable[[str], bool]) -> None:
        """Close every open document whose path satisfies *predicate*."""
        ...


@runtime_checkable
class SettingsPort(Protocol):
    """Size-limited string key/value store, organised into collections."""

    def ensure_collection(self, collection: str) -> None: ...

    def property_exists(self, collection: str, name: str) -> bool: ...

    def get_string(self, collection: str, name: str) -> str:
        """Return a stored value.  Raises ``KeyError`` if missing."""
        ...

    def set_string(self, collection: str, name: str, value: str) -> None:
        """Store a value.  Raises ``StorageError`` if it exceeds the store limit."""
        ...

    def delete_property(self, collection: str, name: str) -> None:
        """Delete a value.  No-op if missing."""
        ...


@runtime_checkable
class FilePort(Protocol):
    """Filesystem primitives for the sidecar file and export files."""

    def exists(self, path: str) -> bool: ...

    def read_text(self, path: str) -> str:
        """Read a file.  Raises ``FileNotFoundError`` if missing."""
        ...

    def write_text(self, path: str, text: str) -> None:
        """Write a file, creating parent directories as needed."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file.  No-op if missing."""
        ...


@runtime_checkable
class PromptPort(Protocol):
    """Yes/no interactions.  The core works for either answer."""

    def confirm_delete(self, group_name: str) -> bool: ...

    def confirm_translate(self, original_key: str, target_key: str) -> bool: ...
