"""Shared fixtures wiring the in-memory fakes into a registry."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from fakes import WORKSPACE, FakeHost, FakePrompt, ManualTimers, MemoryFiles, MemorySettings, run_inline

from tabstash.registry import GroupRegistry
from tabstash.settings import TabStashSettings


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> TabStashSettings:
    return TabStashSettings(_env_file=None)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def settings_store() -> MemorySettings:
    return MemorySettings()


@pytest.fixture
def files() -> MemoryFiles:
    return MemoryFiles()


@pytest.fixture
def prompt() -> FakePrompt:
    return FakePrompt()


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def make_registry(host, settings_store, files, prompt, settings, timers) -> Callable[..., GroupRegistry]:
    def _make(workspace_key: str | None = WORKSPACE, dispatch=run_inline, file_port=None) -> GroupRegistry:
        return GroupRegistry(
            layout=host,
            documents=host,
            settings_store=settings_store,
            files=file_port or files,
            prompt=prompt,
            settings=settings,
            workspace_key=workspace_key,
            dispatch=dispatch,
            timer_factory=timers,
        )

    return _make


@pytest.fixture
def registry(make_registry) -> GroupRegistry:
    return make_registry()
