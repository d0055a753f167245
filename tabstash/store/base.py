"""Persistence backend interface.

A backend checkpoints one workspace's whole collection and restores it.  It
never merges: ``save`` replaces whatever was stored for the key.

Two implementations exist and are chosen per workspace by
``BackendSelector``:

- ``SidecarBackend``: an indented export envelope in a JSON file beside the
  workspace.
- ``SettingsBackend``: a compact group array in the host settings store,
  split into chunks when it exceeds the per-value limit.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from tabstash.models import BackendKind, Group


@runtime_checkable
class GroupBackend(Protocol):
    kind: BackendKind

    def load(self, workspace_key: str) -> list[Group]:
        """Read the stored collection.  An absent entry reads as empty.

        Raises ``CodecError`` for unreadable payloads and ``OSError`` /
        ``StorageError`` for I/O failures.
        """
        ...

    def save(self, workspace_key: str, groups: Sequence[Group]) -> None:
        """Replace the stored collection with *groups*."""
        ...
