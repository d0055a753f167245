"""Settings store backend with chunking.

The host settings store caps every string value (512,000 characters by
default).  Collections that serialize longer than that are split across
numbered properties::

    {prefix}.{workspace_key}      single value, when it fits
    {prefix}.{workspace_key}.0    first chunk
    {prefix}.{workspace_key}.1    second chunk, and so on

Exactly one of the two layouts is present after any save.  Reads probe for
chunk ``.0`` first, so a stale single value never shadows newer chunks.  An
empty collection is stored as "nothing": both layouts are deleted.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from tabstash.codec import decode_groups, encode_groups
from tabstash.models import BackendKind, Group
from tabstash.ports import SettingsPort

DEFAULT_MAX_VALUE_LENGTH = 512_000


def split_chunks(text: str, size: int) -> list[str]:
    """Split *text* into pieces of *size*; the last piece holds the remainder."""
    if size <= 0:
        msg = f"Chunk size must be positive, got {size}"
        raise ValueError(msg)
    chunks: list[str] = []
    while len(text) > size:
        chunks.append(text[:size])
        text = text[size:]
    chunks.append(text)
    return chunks


def join_chunks(chunks: Sequence[str]) -> str:
    return "".join(chunks)


class SettingsBackend:
    kind = BackendKind.SETTINGS

    def __init__(
        self,
        settings: SettingsPort,
        collection: str = "TabStash",
        property_prefix: str = "SavedTabs",
        max_value_length: int = DEFAULT_MAX_VALUE_LENGTH,
    ) -> None:
        self._settings = settings
        self._collection = collection
        self._prefix = property_prefix
        self._max_length = max_value_length

    def property_name(self, workspace_key: str) -> str:
        return f"{self._prefix}.{workspace_key}"

    @staticmethod
    def chunk_name(property_name: str, index: int) -> str:
        return f"{property_name}.{index}"

    # -- Read ------------------------------------------------------------------

    def load(self, workspace_key: str) -> list[Group]:
        text = self.read_text(workspace_key)
        if text is None:
            return []
        return decode_groups(text)

    def read_text(self, workspace_key: str) -> str | None:
        """Return the stored payload (reassembled if chunked), or ``None``."""
        name = self.property_name(workspace_key)
        chunks = self._read_chunks(name)
        if chunks:
            return join_chunks(chunks)
        if self._settings.property_exists(self._collection, name):
            return self._settings.get_string(self._collection, name)
        return None

    def _read_chunks(self, name: str) -> list[str]:
        chunks: list[str] = []
        index = 0
        while self._settings.property_exists(self._collection, self.chunk_name(name, index)):
            chunks.append(self._settings.get_string(self._collection, self.chunk_name(name, index)))
            index += 1
        return chunks

    # -- Write -----------------------------------------------------------------

    def save(self, workspace_key: str, groups: Sequence[Group]) -> None:
        if not groups:
            self.write_text(workspace_key, None)
            return
        self.write_text(workspace_key, encode_groups(groups))

    def write_text(self, workspace_key: str, text: str | None) -> None:
        """Store *text*, chunking as needed.  ``None`` or ``""`` deletes everything."""
        self._settings.ensure_collection(self._collection)
        name = self.property_name(workspace_key)

        if not text:
            self._delete_single(name)
            self._delete_chunks(name)
            return

        if len(text) <= self._max_length:
            self._delete_chunks(name)
            self._settings.set_string(self._collection, name, text)
            return

        self._delete_single(name)
        self._delete_chunks(name)
        chunks = split_chunks(text, self._max_length)
        for index, chunk in enumerate(chunks):
            self._settings.set_string(self._collection, self.chunk_name(name, index), chunk)
        logger.debug("Stored {} characters for {} in {} chunks", len(text), workspace_key, len(chunks))

    def _delete_single(self, name: str) -> None:
        if self._settings.property_exists(self._collection, name):
            self._settings.delete_property(self._collection, name)

    def _delete_chunks(self, name: str) -> None:
        index = 0
        while self._settings.property_exists(self._collection, self.chunk_name(name, index)):
            self._settings.delete_property(self._collection, self.chunk_name(name, index))
            index += 1
