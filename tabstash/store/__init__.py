"""Persistence backends for group collections."""

from tabstash.store.base import GroupBackend
from tabstash.store.selector import BackendSelector
from tabstash.store.settings_store import SettingsBackend, join_chunks, split_chunks
from tabstash.store.sidecar import SidecarBackend

__all__ = [
    "BackendSelector",
    "GroupBackend",
    "SettingsBackend",
    "SidecarBackend",
    "join_chunks",
    "split_chunks",
]
