"""Per-workspace backend selection.

The backend is decided by whether the workspace's sidecar file exists.  The
decision is made once per workspace and cached; ``refresh`` re-probes it
(the registry does so on every workspace load), and ``toggle`` is the only
way to change it deliberately.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from tabstash.models import BackendKind, Group
from tabstash.ports import FilePort, SettingsPort
from tabstash.settings import TabStashSettings
from tabstash.store.base import GroupBackend
from tabstash.store.settings_store import SettingsBackend
from tabstash.store.sidecar import SidecarBackend


class BackendSelector:
    def __init__(self, files: FilePort, settings_store: SettingsPort, settings: TabStashSettings) -> None:
        self._files = files
        self.sidecar = SidecarBackend(files, settings.sidecar_dir, settings.sidecar_filename)
        self.settings_store = SettingsBackend(
            settings_store,
            collection=settings.collection,
            property_prefix=settings.property_prefix,
            max_value_length=settings.max_value_length,
        )
        self._kinds: dict[str, BackendKind] = {}

    # -- Resolution ------------------------------------------------------------

    def resolve(self, workspace_key: str, *, refresh: bool = False) -> BackendKind:
        if refresh or workspace_key not in self._kinds:
            kind = BackendKind.SIDECAR if self.sidecar.exists(workspace_key) else BackendKind.SETTINGS
            self._kinds[workspace_key] = kind
            logger.debug("Backend for {}: {}", workspace_key, kind)
        return self._kinds[workspace_key]

    def backend_for(self, workspace_key: str) -> GroupBackend:
        if self.resolve(workspace_key) is BackendKind.SIDECAR:
            return self.sidecar
        return self.settings_store

    # -- Persistence -----------------------------------------------------------

    def load(self, workspace_key: str) -> list[Group]:
        return self.backend_for(workspace_key).load(workspace_key)

    def save(self, workspace_key: str, groups: Sequence[Group]) -> None:
        self.backend_for(workspace_key).save(workspace_key, groups)

    # -- Migration -------------------------------------------------------------

    def toggle(self, workspace_key: str) -> BackendKind:
        """Switch *workspace_key* to the other backend and return the new kind.

        Creates an empty sidecar file or deletes the existing one.  The caller
        is responsible for re-persisting the collection into the new backend.
        """
        path = self.sidecar.path_for(workspace_key)
        if self._files.exists(path):
            self._files.delete(path)
            kind = BackendKind.SETTINGS
        else:
            self._files.write_text(path, "")
            kind = BackendKind.SIDECAR
        self._kinds[workspace_key] = kind
        logger.info("Workspace {} now persists to {}", workspace_key, kind)
        return kind
