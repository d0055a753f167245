"""Configuration loaded from TABSTASH_* environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TabStashSettings(BaseSettings):
    """tabstash settings.

    All fields are read from environment variables with the ``TABSTASH_``
    prefix.  For example, ``TABSTASH_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TABSTASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Settings store --------------------------------------------------------
    settings_file: str = "~/.config/tabstash/settings.json"
    """JSON file backing the headless settings store used by the CLI."""

    collection: str = "TabStash"
    property_prefix: str = "SavedTabs"
    """Property name is ``{property_prefix}.{workspace_key}``, plus ``.N`` for chunks."""

    max_value_length: int = Field(default=512_000, gt=0)
    """Longest string the settings store accepts per property."""

    # -- Sidecar file ----------------------------------------------------------
    sidecar_dir: str = ".vs"
    sidecar_filename: str = "TabStash.json"

    # -- Persistence -----------------------------------------------------------
    debounce_seconds: float = Field(default=1.0, ge=0)
    """Quiet period after per-group edits before the collection is written."""


@lru_cache(maxsize=1)
def get_settings() -> TabStashSettings:
    """Return a cached settings instance.

    Call ``get_settings.cache_clear()`` in tests after overriding env vars.
    """
    return TabStashSettings()
