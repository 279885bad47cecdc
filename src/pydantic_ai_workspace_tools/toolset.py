"""WorkspaceToolset: the workspace tools as a PydanticAI toolset.

This module wraps WorkspaceTools in a PydanticAI AbstractToolset so an Agent
can call read_file, write_file, edit_file and list_files. Each call drains
the operation's progress stream, forwards every event to an optional
callback (for streaming status to a UI), and returns the terminal event
to the model.

Example:
    from pydantic_ai_workspace_tools import WorkspaceToolset

    def show(event):
        print(event.to_wire())

    toolset = WorkspaceToolset.create_default("./project", on_event=show)
    agent = Agent(..., toolsets=[toolset])
"""
from __future__ import annotations

import inspect
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import TypeAdapter
from pydantic_ai.toolsets import AbstractToolset, ToolsetTool
from pydantic_ai.tools import RunContext, ToolDefinition

from .events import ProgressEvent, is_terminal
from .guard import WorkspaceConfig
from .operations import (
    EditFileArgs,
    ListFilesArgs,
    ReadFileArgs,
    ToolOperation,
    ToolRequest,
    WorkspaceTools,
    WriteFileArgs,
)

EventCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]

TOOL_OPERATIONS: dict[str, ToolOperation] = {
    "read_file": ToolOperation.READ,
    "write_file": ToolOperation.WRITE,
    "edit_file": ToolOperation.EDIT,
    "list_files": ToolOperation.LIST,
}


class WorkspaceToolset(AbstractToolset[Any]):
    """File tools for PydanticAI agents, confined to one working root.

    Failures are returned to the model rather than raised, so it can read
    the message and retry with corrected arguments.
    """

    def __init__(
        self,
        tools: WorkspaceTools,
        id: Optional[str] = None,
        max_retries: int = 1,
        on_event: Optional[EventCallback] = None,
    ):
        """Initialize the workspace toolset.

        Args:
            tools: WorkspaceTools performing the operations
            id: Optional toolset ID for durable execution
            max_retries: Maximum number of retries for tool calls (default: 1)
            on_event: Called with every progress event, sync or async
        """
        self._tools = tools
        self._toolset_id = id
        self._max_retries = max_retries
        self._on_event = on_event

    @classmethod
    def create_default(
        cls,
        root: str | Path | None = None,
        id: Optional[str] = None,
        on_event: Optional[EventCallback] = None,
    ) -> "WorkspaceToolset":
        """Create a toolset rooted at a directory (default: current directory)."""
        config = WorkspaceConfig() if root is None else WorkspaceConfig(root=Path(root))
        return cls(WorkspaceTools(config), id=id, on_event=on_event)

    @property
    def tools(self) -> WorkspaceTools:
        """Access the underlying operations."""
        return self._tools

    @property
    def id(self) -> str | None:
        """Unique identifier for this toolset."""
        return self._toolset_id

    # ---------------------------------------------------------------------------
    # AbstractToolset Implementation
    # ---------------------------------------------------------------------------

    async def get_tools(self, ctx: RunContext[Any]) -> dict[str, ToolsetTool[Any]]:
        """Return the tools provided by this toolset."""
        tools = {}

        tools["read_file"] = ToolsetTool(
            toolset=self,
            tool_def=ToolDefinition(
                name="read_file",
                description=(
                    "Reads the content of a specified file, limited to the first "
                    f"{self._tools.config.max_read_chars:,} characters. "
                    "Use this to understand existing code before changing it."
                ),
                parameters_json_schema=ReadFileArgs.model_json_schema(),
            ),
            max_retries=self._max_retries,
            args_validator=TypeAdapter(ReadFileArgs).validator,
        )

        tools["write_file"] = ToolsetTool(
            toolset=self,
            tool_def=ToolDefinition(
                name="write_file",
                description=(
                    "Writes content to a file. Creates parent directories if "
                    "needed and overwrites the file if it exists. Use this for "
                    "new files or complete rewrites."
                ),
                parameters_json_schema=WriteFileArgs.model_json_schema(),
            ),
            max_retries=self._max_retries,
            args_validator=TypeAdapter(WriteFileArgs).validator,
        )

        tools["edit_file"] = ToolsetTool(
            toolset=self,
            tool_def=ToolDefinition(
                name="edit_file",
                description=(
                    "Finds and replaces all occurrences of a specific string "
                    "within a file. The string is matched exactly. Prefer this "
                    "over write_file for targeted changes."
                ),
                parameters_json_schema=EditFileArgs.model_json_schema(),
            ),
            max_retries=self._max_retries,
            args_validator=TypeAdapter(EditFileArgs).validator,
        )

        tools["list_files"] = ToolsetTool(
            toolset=self,
            tool_def=ToolDefinition(
                name="list_files",
                description=(
                    "Lists files and directories at a given path, showing their "
                    "size and type. Use '.' for the working directory."
                ),
                parameters_json_schema=ListFilesArgs.model_json_schema(),
            ),
            max_retries=self._max_retries,
            args_validator=TypeAdapter(ListFilesArgs).validator,
        )

        return tools

    async def call_tool(
        self,
        name: str,
        tool_args: Any,
        ctx: RunContext[Any],
        tool: ToolsetTool[Any],
    ) -> Any:
        """Run a tool and return its terminal event as a camelCase dict.

        Args:
            name: Tool name
            tool_args: Either a validated args model or a dict
            ctx: PydanticAI run context
            tool: ToolsetTool instance
        """
        if name not in TOOL_OPERATIONS:
            raise ValueError(f"Unknown tool: {name}")

        if not isinstance(tool_args, dict):
            tool_args = tool_args.model_dump()
        request = ToolRequest(operation=TOOL_OPERATIONS[name], arguments=tool_args)
        return (await self.run(request)).to_wire()

    async def run(self, request: ToolRequest) -> ProgressEvent:
        """Drain a request's event stream and return the terminal event."""
        terminal = None
        async for event in self._tools.dispatch(request):
            if self._on_event is not None:
                result = self._on_event(event)
                if inspect.isawaitable(result):
                    await result
            if is_terminal(event):
                terminal = event
        if terminal is None:
            raise RuntimeError(f"{request.operation.value} ended without a terminal event")
        return terminal
