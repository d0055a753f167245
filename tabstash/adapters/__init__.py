"""Headless implementations of the host and storage ports."""

from tabstash.adapters.host import ConsolePrompt, DetachedHost
from tabstash.adapters.json_settings import JsonSettingsStore
from tabstash.adapters.local import LocalFileSystem

__all__ = ["ConsolePrompt", "DetachedHost", "JsonSettingsStore", "LocalFileSystem"]
