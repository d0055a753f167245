"""Sidecar file backend.

Stores the export envelope as indented JSON in a file beside the workspace::

    {workspace_dir}/.vs/{workspace_base_name}/TabStash.json

The file is written whole on every save; there is no size limit and no
chunking.  An empty file is valid and means "sidecar selected, nothing saved
yet" (that is how ``BackendSelector.toggle`` creates it).
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from tabstash.codec import decode_envelope, encode_envelope
from tabstash.models import BackendKind, ExportEnvelope, Group
from tabstash.paths import sidecar_path, translate_envelope
from tabstash.ports import FilePort


class SidecarBackend:
    kind = BackendKind.SIDECAR

    def __init__(self, files: FilePort, sidecar_dir: str = ".vs", filename: str = "TabStash.json") -> None:
        self._files = files
        self._sidecar_dir = sidecar_dir
        self._filename = filename

    def path_for(self, workspace_key: str) -> str:
        return sidecar_path(workspace_key, self._sidecar_dir, self._filename)

    def exists(self, workspace_key: str) -> bool:
        return self._files.exists(self.path_for(workspace_key))

    # -- Read ------------------------------------------------------------------

    def load(self, workspace_key: str) -> list[Group]:
        path = self.path_for(workspace_key)
        if not self._files.exists(path):
            return []
        text = self._files.read_text(path)
        if not text.strip():
            return []

        envelope = decode_envelope(text)
        if envelope.workspace_key != workspace_key:
            # The workspace was moved or copied along with its sidecar file.
            logger.info("Sidecar {} was written for {}, translating paths", path, envelope.workspace_key)
            envelope = translate_envelope(envelope, workspace_key)
        return envelope.groups

    # -- Write -----------------------------------------------------------------

    def save(self, workspace_key: str, groups: Sequence[Group]) -> None:
        envelope = ExportEnvelope(workspace_key=workspace_key, groups=list(groups))
        self._files.write_text(self.path_for(workspace_key), encode_envelope(envelope))
