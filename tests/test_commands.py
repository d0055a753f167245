from __future__ import annotations

import pytest
from fakes import FakeHost, FakePrompt, MemoryFiles

from tabstash.commands import GroupCommands
from tabstash.registry import GroupRegistry


@pytest.fixture
def commands(registry: GroupRegistry, host: FakeHost) -> GroupCommands:
    return GroupCommands(registry, host)


def test_nothing_enabled_without_selection(commands: GroupCommands, host: FakeHost) -> None:
    host.open_files = ["/w/a.cs"]
    assert not commands.can_save_to()
    assert not commands.can_close()
    assert not commands.can_act_on_selection()
    assert not commands.can_export()

    commands.save_to()
    commands.delete()
    commands.restore()
    commands.open()
    commands.close()
    assert host.open_files == ["/w/a.cs"]


def test_enablement_follows_selection_and_documents(commands, registry, host) -> None:
    host.open_files = ["/w/a.cs"]
    a = registry.save_group("A")
    registry.select_group(a)

    assert commands.can_save_to()
    assert commands.can_close()
    assert commands.can_act_on_selection()
    assert commands.can_export()

    host.open_files = []
    assert not commands.can_save_to()
    assert not commands.can_close()
    assert commands.can_act_on_selection()


def test_undo_cannot_be_saved_into(commands, registry, host) -> None:
    host.open_files = ["/w/a.cs"]
    registry.select_group(registry.save_group("<undo>"))
    assert not commands.can_save_to()
    assert commands.can_act_on_selection()


def test_save_to_keeps_slot(commands, registry, host) -> None:
    host.open_files = ["/w/a.cs"]
    a = registry.save_group("A", 3)
    registry.select_group(a)

    host.open_files = ["/w/b.cs"]
    commands.save_to()

    assert a.files == ["/w/b.cs"]
    assert a.slot == 3


def test_delete_restore_open_close(commands, registry, host, prompt: FakePrompt) -> None:
    host.open_files = ["/w/a.cs", "/w/b.cs"]
    a = registry.save_group("A")
    registry.select_group(a)

    commands.close()
    assert host.open_files == []

    commands.open()
    assert host.open_files == ["/w/a.cs", "/w/b.cs"]

    host.open_files = ["/w/c.cs"]
    commands.restore()
    assert host.open_files == ["/w/a.cs", "/w/b.cs"]

    commands.delete()
    assert prompt.asked == [("delete", "A")]
    assert registry.get_group("A") is None


def test_export_and_import(commands, registry, host, files: MemoryFiles) -> None:
    host.open_files = ["/w/a.cs"]
    registry.save_group("A")

    assert commands.export("/out.json")
    registry.clear_groups()
    assert commands.import_("/out.json")
    assert [g.name for g in registry.groups] == ["A"]
