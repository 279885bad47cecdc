"""Regression tests for security boundary behaviors."""
from __future__ import annotations

from pathlib import Path

import pytest

from pydantic_ai_workspace_tools import ToolFailed, WorkspaceConfig, WorkspaceTools

ESCAPES = [
    "..",
    "../x.txt",
    "../../x.txt",
    "a/../../x.txt",
    "a/b/../../../x.txt",
    "./../x.txt",
]


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes() if p.is_file() else b"<dir>"
        for p in sorted(root.rglob("*"))
    }


@pytest.mark.parametrize("path", ESCAPES)
def test_escaping_paths_fail_without_mutation(tmp_path: Path, path: str, collect) -> None:
    """No operation touches the filesystem for a path that leaves the root."""
    root = tmp_path / "a" / "b" / "project"
    root.mkdir(parents=True)
    (tmp_path / "a" / "b" / "x.txt").write_text("outside", encoding="utf-8")
    (tmp_path / "a" / "x.txt").write_text("outside", encoding="utf-8")
    tools = WorkspaceTools(WorkspaceConfig(root=root))
    before = _snapshot(tmp_path)

    streams = [
        tools.read(path),
        tools.write(path, "pwned"),
        tools.edit(path, "outside", "pwned"),
        tools.list(path),
    ]
    for stream in streams:
        events = collect(stream)
        assert isinstance(events[-1], ToolFailed)
        assert "outside the allowed directory" in events[-1].message

    assert _snapshot(tmp_path) == before


def test_sibling_directory_with_root_prefix_is_outside(tmp_path: Path, collect) -> None:
    """'/root-evil' must not pass a prefix check against '/root'."""
    root = tmp_path / "root"
    evil = tmp_path / "root-evil"
    root.mkdir()
    evil.mkdir()
    tools = WorkspaceTools(WorkspaceConfig(root=root))

    _, done = collect(tools.write("../root-evil/owned.txt", "x"))

    assert isinstance(done, ToolFailed)
    assert not (evil / "owned.txt").exists()

    _, done = collect(tools.write(str(evil / "owned.txt"), "x"))

    assert isinstance(done, ToolFailed)
    assert not (evil / "owned.txt").exists()


def test_write_through_symlink_escape_blocked(tmp_path: Path, collect) -> None:
    root = tmp_path / "root"
    outside = tmp_path / "outside"
    root.mkdir()
    outside.mkdir()
    try:
        (root / "link").symlink_to(outside, target_is_directory=True)
    except OSError:
        pytest.skip("symlinks not supported")
    tools = WorkspaceTools(WorkspaceConfig(root=root))

    _, done = collect(tools.write("link/planted.txt", "x"))

    assert isinstance(done, ToolFailed)
    assert not (outside / "planted.txt").exists()


def test_confinement_error_does_not_leak_host_path(tmp_path: Path, collect) -> None:
    """Failure messages use the caller's path, not the resolved host path."""
    root = tmp_path / "root"
    root.mkdir()
    tools = WorkspaceTools(WorkspaceConfig(root=root))

    for stream in (tools.read("../secret"), tools.list("nowhere")):
        _, done = collect(stream)
        assert isinstance(done, ToolFailed)
        assert str(tmp_path) not in done.message
