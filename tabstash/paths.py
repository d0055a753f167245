"""Path helpers and cross-workspace path translation.

Workspace keys and member files are full paths recorded by the host editor.
Exports travel between machines, so a key written on Windows
(``C:\\proj\\app.sln``) must be handled correctly when read on POSIX and
vice versa.  The path flavour is therefore chosen per path, not from the
running OS.
"""

from __future__ import annotations

import ntpath
import posixpath
import re
from collections.abc import Iterable
from types import ModuleType

from loguru import logger

from tabstash.models import ExportEnvelope, Group

_WINDOWS_PATH = re.compile(r"^(?:[A-Za-z]:[\\/]|\\\\)")
_SEPARATORS = re.compile(r"[\\/]+")


def path_module(path: str) -> ModuleType:
    """Return ``ntpath`` for Windows-looking paths, else ``posixpath``."""
    if _WINDOWS_PATH.match(path) or ("\\" in path and "/" not in path):
        return ntpath
    return posixpath


def file_name(path: str) -> str:
    return path_module(path).basename(path)


def directory_of(path: str) -> str:
    return path_module(path).dirname(path)


def sidecar_path(workspace_key: str, sidecar_dir: str, filename: str) -> str:
    """``<workspaceDir>/<sidecar_dir>/<workspaceBaseName>/<filename>``."""
    mod = path_module(workspace_key)
    stem = mod.splitext(mod.basename(workspace_key))[0]
    return mod.join(mod.dirname(workspace_key), sidecar_dir, stem, filename)


def order_by_file_name(files: Iterable[str]) -> list[str]:
    return sorted(files, key=lambda f: file_name(f).casefold())


def describe(files: Iterable[str]) -> str:
    """Display description of a group: its member file names, comma separated."""
    return ", ".join(file_name(f) for f in files)


def rebase(path: str, old_dir: str, new_dir: str) -> str:
    """Move *path* from under *old_dir* to under *new_dir*.

    The prefix match is case-insensitive and must end on a separator, so
    ``C:\\proj1`` does not capture ``C:\\proj10\\x.cs``.  Paths outside
    *old_dir* are returned unchanged, as is everything when *old_dir* is empty.
    """
    prefix = old_dir.rstrip("\\/")
    if not prefix:
        return path
    if len(path) <= len(prefix) or path[len(prefix)] not in "\\/":
        return path
    if not path.casefold().startswith(prefix.casefold()):
        return path

    relative = path[len(prefix) + 1 :]
    parts = [p for p in _SEPARATORS.split(relative) if p]
    return path_module(new_dir).join(new_dir, *parts)


def translate_envelope(envelope: ExportEnvelope, new_key: str) -> ExportEnvelope:
    """Return a copy of *envelope* re-homed to the workspace *new_key*.

    Member files under the original workspace directory are rebased, every
    layout blob is dropped (it describes windows of the other workspace) and
    descriptions are regenerated from the rewritten files.
    """
    old_dir = directory_of(envelope.workspace_key)
    new_dir = directory_of(new_key)

    groups: list[Group] = []
    rewritten = 0
    for group in envelope.groups:
        files = [rebase(f, old_dir, new_dir) for f in group.files]
        rewritten += sum(1 for old, new in zip(group.files, files, strict=True) if old != new)
        groups.append(Group(name=group.name, description=describe(files), files=files, slot=group.slot))

    logger.debug(
        "Translated {} group(s) from {} to {} ({} path(s) rewritten)",
        len(groups),
        envelope.workspace_key,
        new_key,
        rewritten,
    )
    return ExportEnvelope(workspace_key=new_key, groups=groups)
