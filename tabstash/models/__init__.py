"""Data models for tab groups."""

from tabstash.models.enums import BackendKind, BuiltIn, ChangeKind
from tabstash.models.group import SLOT_MAX, SLOT_MIN, ExportEnvelope, Group, unique_paths

__all__ = [
    "SLOT_MAX",
    "SLOT_MIN",
    "BackendKind",
    "BuiltIn",
    "ChangeKind",
    "ExportEnvelope",
    "Group",
    "unique_paths",
]
