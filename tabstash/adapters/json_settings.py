"""Settings store kept in a single JSON document on disk.

Stands in for the editor's user settings store when running headless.  It
mirrors the host store's contract, including the per-value length limit, so
chunking behaves exactly as it does inside the editor::

    {"collections": {"TabStash": {"SavedTabs./src/app.sln": "[...]"}}}
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from tabstash.adapters.local import atomic_write
from tabstash.ports import StorageError
from tabstash.store.settings_store import DEFAULT_MAX_VALUE_LENGTH


class JsonSettingsStore:
    def __init__(self, path: str | Path, max_value_length: int = DEFAULT_MAX_VALUE_LENGTH) -> None:
        self._path = Path(path).expanduser()
        self._max_length = max_value_length
        self._collections: dict[str, dict[str, str]] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    # -- SettingsPort ----------------------------------------------------------

    def ensure_collection(self, collection: str) -> None:
        if collection not in self._collections:
            self._collections[collection] = {}
            self._write()

    def property_exists(self, collection: str, name: str) -> bool:
        return name in self._collections.get(collection, {})

    def get_string(self, collection: str, name: str) -> str:
        return self._collections[collection][name]

    def set_string(self, collection: str, name: str, value: str) -> None:
        if len(value) > self._max_length:
            msg = f"Value for {name!r} is {len(value)} characters, limit is {self._max_length}"
            raise StorageError(msg)
        self._collections.setdefault(collection, {})[name] = value
        self._write()

    def delete_property(self, collection: str, name: str) -> None:
        if self._collections.get(collection, {}).pop(name, None) is not None:
            self._write()

    # -- Helpers ---------------------------------------------------------------

    def property_names(self, collection: str) -> list[str]:
        return sorted(self._collections.get(collection, {}))

    def _read(self) -> dict[str, dict[str, str]]:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Unreadable settings file {self._path}: {exc}"
            raise StorageError(msg) from exc

        collections = raw.get("collections") if isinstance(raw, dict) else None
        if not isinstance(collections, dict):
            logger.warning("Settings file {} has no collections, starting empty", self._path)
            return {}
        return {name: dict(props) for name, props in collections.items() if isinstance(props, dict)}

    def _write(self) -> None:
        try:
            atomic_write(self._path, json.dumps({"collections": self._collections}, indent=2))
        except OSError as exc:
            msg = f"Cannot write settings file {self._path}: {exc}"
            raise StorageError(msg) from exc
