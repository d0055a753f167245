"""Unit tests for path helpers and cross-workspace translation."""

from __future__ import annotations

import ntpath
import posixpath

from tabstash.models import ExportEnvelope, Group
from tabstash.paths import describe, directory_of, file_name, order_by_file_name, path_module, rebase, translate_envelope


def test_path_flavour_detection() -> None:
    assert path_module("C:\\proj\\app.sln") is ntpath
    assert path_module("c:/proj/app.sln") is ntpath
    assert path_module("\\\\server\\share\\app.sln") is ntpath
    assert path_module("/home/me/app.sln") is posixpath


def test_file_name_and_directory_for_both_flavours() -> None:
    assert file_name("C:\\proj1\\src\\a.cs") == "a.cs"
    assert directory_of("C:\\proj1\\app.sln") == "C:\\proj1"
    assert file_name("/w/src/b.cs") == "b.cs"
    assert directory_of("/w/app.sln") == "/w"


def test_describe_and_ordering() -> None:
    files = order_by_file_name(["/w/zeta.cs", "/w/sub/Alpha.cs", "/w/beta.cs"])
    assert files == ["/w/sub/Alpha.cs", "/w/beta.cs", "/w/zeta.cs"]
    assert describe(files) == "Alpha.cs, beta.cs, zeta.cs"
    assert describe([]) == ""


def test_rebase_inside_and_outside() -> None:
    assert rebase("C:\\proj1\\src\\a.cs", "C:\\proj1", "C:\\proj2") == "C:\\proj2\\src\\a.cs"
    assert rebase("c:\\PROJ1\\src\\a.cs", "C:\\proj1", "D:\\x") == "D:\\x\\src\\a.cs"
    assert rebase("C:\\other\\b.cs", "C:\\proj1", "C:\\proj2") == "C:\\other\\b.cs"


def test_rebase_requires_separator_boundary() -> None:
    assert rebase("C:\\proj10\\a.cs", "C:\\proj1", "C:\\proj2") == "C:\\proj10\\a.cs"
    assert rebase("C:\\proj1", "C:\\proj1", "C:\\proj2") == "C:\\proj1"


def test_rebase_without_old_directory_keeps_paths() -> None:
    assert rebase("/home/me/a.cs", "", "/srv/new") == "/home/me/a.cs"
    assert rebase("C:\\x\\a.cs", "", "D:\\y") == "C:\\x\\a.cs"

    envelope = ExportEnvelope(workspace_key="app.sln", groups=[Group(name="A", files=["/abs/a.cs"])])
    assert translate_envelope(envelope, "/srv/new/app.sln").groups[0].files == ["/abs/a.cs"]


def test_rebase_across_flavours() -> None:
    assert rebase("C:\\proj1\\src\\a.cs", "C:\\proj1", "/home/me/proj") == "/home/me/proj/src/a.cs"
    assert rebase("/srv/app/lib/x.py", "/srv/app", "D:\\app") == "D:\\app\\lib\\x.py"


def test_translate_envelope_scenario() -> None:
    envelope = ExportEnvelope(
        workspace_key="C:\\proj1\\app.sln",
        groups=[
            Group(
                name="Feature",
                description="stale",
                files=["C:\\proj1\\src\\a.cs", "C:\\shared\\util.cs"],
                positions=b"layout",
                slot=2,
            ),
            Group(name="<stash>", files=["C:\\proj1\\b.cs"], positions=b"x"),
        ],
    )

    result = translate_envelope(envelope, "C:\\proj2\\app.sln")

    assert result.workspace_key == "C:\\proj2\\app.sln"
    feature, stash = result.groups
    assert feature.files == ["C:\\proj2\\src\\a.cs", "C:\\shared\\util.cs"]
    assert feature.positions is None
    assert feature.description == "a.cs, util.cs"
    assert feature.slot == 2
    assert stash.is_stash
    assert stash.files == ["C:\\proj2\\b.cs"]
    assert stash.positions is None


def test_translate_envelope_does_not_mutate_input() -> None:
    original = Group(name="A", files=["/old/a.cs"], positions=b"p")
    envelope = ExportEnvelope(workspace_key="/old/app.sln", groups=[original])

    translate_envelope(envelope, "/new/app.sln")

    assert original.files == ["/old/a.cs"]
    assert original.positions == b"p"
    assert envelope.workspace_key == "/old/app.sln"
