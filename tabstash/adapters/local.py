"""Local filesystem implementation of the FilePort protocol.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path, so a crash mid-write never leaves a
truncated sidecar or settings file behind.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path


class LocalFileSystem:
    """FilePort backed by the local disk.  ``~`` is expanded in every path."""

    def exists(self, path: str) -> bool:
        return _resolve(path).is_file()

    def read_text(self, path: str) -> str:
        return _resolve(path).read_text(encoding="utf-8")

    def write_text(self, path: str, text: str) -> None:
        atomic_write(_resolve(path), text)

    def delete(self, path: str) -> None:
        with contextlib.suppress(FileNotFoundError):
            _resolve(path).unlink()


def _resolve(path: str) -> Path:
    return Path(path).expanduser()


def atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
