"""Group and export envelope models.

A group is a named snapshot of open documents plus the opaque window layout
blob captured by the host editor.  The JSON field names (``Name``,
``Files``, ``SolutionName`` ...) are the persisted wire format shared by the
sidecar file, the settings store and export files, so they are declared as
aliases and must not change.
"""

from __future__ import annotations

import base64
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer, field_validator

from tabstash.models.enums import BuiltIn

SLOT_MIN = 1
SLOT_MAX = 9


def unique_paths(paths: Iterable[str]) -> list[str]:
    """Drop case-insensitive repeats, keeping the first spelling and the order."""
    seen: set[str] = set()
    unique: list[str] = []
    for path in paths:
        key = path.casefold()
        if key not in seen:
            seen.add(key)
            unique.append(path)
    return unique


class Group(BaseModel):
    """A saved arrangement of documents for one workspace."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    name: str = Field(alias="Name", min_length=1)
    description: str = Field(default="", alias="Description", description="Member file names, regenerated on save")
    files: list[str] = Field(default_factory=list, alias="Files")
    positions: bytes | None = Field(default=None, alias="Positions", description="Opaque host layout blob")
    slot: int | None = Field(default=None, alias="Slot", ge=SLOT_MIN, le=SLOT_MAX)
    selected: bool = Field(default=False, exclude=True)

    _builtin: BuiltIn | None = PrivateAttr(default=None)

    def model_post_init(self, context: Any, /) -> None:
        self._builtin = BuiltIn.from_name(self.name)
        if self._builtin is not None and self.slot is not None:
            self.slot = None

    # -- Validation ------------------------------------------------------------

    @field_validator("files")
    @classmethod
    def _dedupe_files(cls, value: list[str]) -> list[str]:
        return unique_paths(value)

    @field_validator("positions", mode="before")
    @classmethod
    def _decode_positions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return base64.b64decode(value, validate=True)
        return value

    @field_serializer("positions")
    def _encode_positions(self, value: bytes | None) -> str | None:
        if value is None:
            return None
        return base64.b64encode(value).decode("ascii")

    # -- Identity --------------------------------------------------------------

    @property
    def builtin(self) -> BuiltIn | None:
        return self._builtin

    @property
    def is_builtin(self) -> bool:
        return self._builtin is not None

    @property
    def is_stash(self) -> bool:
        return self._builtin is BuiltIn.STASH

    @property
    def is_undo(self) -> bool:
        return self._builtin is BuiltIn.UNDO

    def rename(self, name: str) -> None:
        """Change the name and re-derive the built-in tag."""
        self.name = name
        self._builtin = BuiltIn.from_name(name)

    def contains_file(self, path: str) -> bool:
        folded = path.casefold()
        return any(f.casefold() == folded for f in self.files)


class ExportEnvelope(BaseModel):
    """Unit exchanged with export files and the sidecar file."""

    model_config = ConfigDict(populate_by_name=True)

    workspace_key: str = Field(alias="SolutionName")
    groups: list[Group] = Field(default_factory=list, alias="Groups")
