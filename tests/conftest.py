"""Shared fixtures for workspace tool tests."""
from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from pydantic_ai_workspace_tools import WorkspaceConfig, WorkspaceTools


def _collect(stream):
    async def _drain():
        return [event async for event in stream]

    return asyncio.run(_drain())


@pytest.fixture
def collect():
    """Run an event stream to completion and return every event."""
    return _collect


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def tools(workspace: Path) -> WorkspaceTools:
    return WorkspaceTools(WorkspaceConfig(root=workspace))
