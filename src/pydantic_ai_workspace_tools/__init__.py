"""Workspace file tools for PydanticAI coding agents, with progress events.

This package provides the file tools a coding agent calls on behalf of a
language model, confined to a single working root:
- WorkspaceConfig / PathGuard: the working root and the confinement check
- WorkspaceTools: read, write, edit (literal replace-all) and list operations,
  each an async stream of progress events
- WorkspaceToolset: the same operations as a PydanticAI toolset
- LLM-friendly failure messages the model can act on

Architecture:
    PathGuard handles policy (is this path inside the root?).
    WorkspaceTools handles file I/O and reports progress.
    WorkspaceToolset adapts the event streams to PydanticAI tool calls.

The confinement check stops a well-behaved model from wandering outside the
project; it is not a hardened jail.

Usage (simple):
    from pydantic_ai_workspace_tools import WorkspaceToolset

    toolset = WorkspaceToolset.create_default("./project")
    agent = Agent(..., toolsets=[toolset])

Usage (progress streaming):
    from pydantic_ai_workspace_tools import WorkspaceConfig, WorkspaceTools

    tools = WorkspaceTools(WorkspaceConfig(root="./project"))
    async for event in tools.write("src/new.py", "print('hi')\\n"):
        ui.update(event.to_wire())
"""

from .guard import (
    # Configuration
    DEFAULT_MAX_READ_CHARS,
    WorkspaceConfig,
    # Guard
    PathGuard,
    ResolvedPath,
    Rejected,
    # Errors
    WorkspaceError,
    PathOutsideWorkspaceError,
    PathNotAFileError,
    PathNotADirectoryError,
    EmptyReplacementTargetError,
)

from .events import (
    ToolStarted,
    ReadCompleted,
    WriteCompleted,
    EditCompleted,
    ListCompleted,
    FileEntry,
    ToolFailed,
    ProgressEvent,
    is_terminal,
)

from .operations import (
    WorkspaceTools,
    ToolOperation,
    ToolRequest,
    ReadFileArgs,
    WriteFileArgs,
    EditFileArgs,
    ListFilesArgs,
)

from .toolset import WorkspaceToolset

from .log import configure_file_logging

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "DEFAULT_MAX_READ_CHARS",
    "WorkspaceConfig",
    # Guard (security boundary)
    "PathGuard",
    "ResolvedPath",
    "Rejected",
    # Operations
    "WorkspaceTools",
    "ToolOperation",
    "ToolRequest",
    "ReadFileArgs",
    "WriteFileArgs",
    "EditFileArgs",
    "ListFilesArgs",
    # Toolset (PydanticAI)
    "WorkspaceToolset",
    # Events
    "ToolStarted",
    "ReadCompleted",
    "WriteCompleted",
    "EditCompleted",
    "ListCompleted",
    "FileEntry",
    "ToolFailed",
    "ProgressEvent",
    "is_terminal",
    # Errors
    "WorkspaceError",
    "PathOutsideWorkspaceError",
    "PathNotAFileError",
    "PathNotADirectoryError",
    "EmptyReplacementTargetError",
    # Logging
    "configure_file_logging",
]
