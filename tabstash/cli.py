from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from tabstash.settings import TabStashSettings

if TYPE_CHECKING:
    from tabstash.models import Group
    from tabstash.registry import GroupRegistry


@click.group()
@click.option("--settings-file", default=None, help="Settings store JSON file (default: from TABSTASH_SETTINGS_FILE).")
@click.option("--log-level", default=None, help="Log level (default: from TABSTASH_LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, settings_file: str | None, log_level: str | None) -> None:
    """tabstash - manage saved tab groups outside the editor."""
    from tabstash.log import setup_logging

    settings = TabStashSettings()
    updates = {k: v for k, v in {"settings_file": settings_file, "log_level": log_level}.items() if v is not None}
    if updates:
        settings = settings.model_copy(update=updates)
    setup_logging(settings.log_level)
    ctx.obj = settings


@contextmanager
def _open_registry(settings: TabStashSettings, workspace: str, answer: bool | None = None) -> Iterator[GroupRegistry]:
    """Registry for *workspace* wired to the headless adapters; flushed on exit."""
    from tabstash.adapters import ConsolePrompt, DetachedHost, JsonSettingsStore, LocalFileSystem
    from tabstash.ports import StorageError
    from tabstash.registry import GroupRegistry

    try:
        settings_store = JsonSettingsStore(settings.settings_file, settings.max_value_length)
    except StorageError as exc:
        raise click.ClickException(str(exc)) from None

    host = DetachedHost()
    registry = GroupRegistry(
        layout=host,
        documents=host,
        settings_store=settings_store,
        files=LocalFileSystem(),
        prompt=ConsolePrompt(answer),
        settings=settings,
        workspace_key=workspace,
    )
    try:
        yield registry
    finally:
        registry.close()


def _find(registry: GroupRegistry, name: str) -> Group:
    group = registry.get_group(name)
    if group is None:
        raise click.ClickException(f"No group named {name!r}")
    return group


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


@main.command("list")
@click.argument("workspace")
@click.pass_obj
def list_groups(settings: TabStashSettings, workspace: str) -> None:
    """List the groups saved for WORKSPACE."""
    with _open_registry(settings, workspace) as registry:
        if not registry.group_count:
            click.echo("No groups saved.")
            return
        for group in registry.groups:
            slot = str(group.slot) if group.slot is not None else "-"
            click.echo(f"{slot:>2}  {group.name}  ({len(group.files)} files)  {group.description}")


@main.command()
@click.argument("workspace")
@click.pass_obj
def backend(settings: TabStashSettings, workspace: str) -> None:
    """Show where WORKSPACE's groups are stored."""
    with _open_registry(settings, workspace) as registry:
        click.echo(str(registry.backend_kind))


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


@main.command("toggle-backend")
@click.argument("workspace")
@click.pass_obj
def toggle_backend(settings: TabStashSettings, workspace: str) -> None:
    """Move WORKSPACE's groups between the sidecar file and the settings store."""
    with _open_registry(settings, workspace) as registry:
        kind = registry.toggle_backend()
        if kind is None:
            raise click.ClickException("Backend switch failed, see log.")
        click.echo(f"Groups for {workspace} are now stored in: {kind}")


@main.command("set-slot")
@click.argument("workspace")
@click.argument("name")
@click.argument("slot", type=click.IntRange(1, 9))
@click.pass_obj
def set_slot(settings: TabStashSettings, workspace: str, name: str, slot: int) -> None:
    """Assign SLOT (1-9) to group NAME, taking it from any other group."""
    with _open_registry(settings, workspace) as registry:
        group = _find(registry, name)
        if group.is_builtin:
            raise click.ClickException(f"{group.name} cannot hold a slot")
        registry.set_group_slot(group, slot)
        click.echo(f"{group.name} -> slot {slot}")


@main.command()
@click.argument("workspace")
@click.argument("name")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_obj
def remove(settings: TabStashSettings, workspace: str, name: str, yes: bool) -> None:
    """Delete group NAME (a copy is kept in <undo>)."""
    with _open_registry(settings, workspace) as registry:
        group = _find(registry, name)
        if registry.remove_group(group, confirm=not yes):
            click.echo(f"Removed {group.name}")
        else:
            click.echo("Cancelled.")


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("workspace")
@click.argument("output", type=click.Path(dir_okay=False))
@click.pass_obj
def export_groups(settings: TabStashSettings, workspace: str, output: str) -> None:
    """Export WORKSPACE's groups to OUTPUT."""
    with _open_registry(settings, workspace) as registry:
        if not registry.export_groups(output):
            raise click.ClickException("Export failed, see log.")
        click.echo(f"Exported {registry.group_count} group(s) to {output}")


@main.command("import")
@click.argument("workspace")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--translate/--no-translate",
    default=None,
    help="Rewrite paths when SOURCE was exported from another workspace (default: ask).",
)
@click.pass_obj
def import_groups(settings: TabStashSettings, workspace: str, source: str, translate: bool | None) -> None:
    """Import groups from SOURCE into WORKSPACE."""
    with _open_registry(settings, workspace, answer=translate) as registry:
        if not registry.import_groups(source):
            raise click.ClickException("Import failed, see log.")
        click.echo(f"Imported groups from {source}")


if __name__ == "__main__":
    main()
