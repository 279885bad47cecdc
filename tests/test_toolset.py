"""Integration tests with PydanticAI Agent and TestModel for the workspace toolset."""
import asyncio
from unittest.mock import MagicMock

import pytest
from pydantic_ai import Agent
from pydantic_ai.models.test import TestModel
from pydantic_ai.tools import RunContext

from pydantic_ai_workspace_tools import (
    EditFileArgs,
    ReadFileArgs,
    ToolRequest,
    ToolStarted,
    WorkspaceConfig,
    WorkspaceTools,
    WorkspaceToolset,
)


@pytest.fixture
def toolset(workspace):
    return WorkspaceToolset(WorkspaceTools(WorkspaceConfig(root=workspace)))


class TestToolDefinitions:
    def test_toolset_provides_tools(self, toolset):
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        assert set(tools) == {"read_file", "write_file", "edit_file", "list_files"}

    def test_schemas_use_camel_case_fields(self, toolset):
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        edit_schema = tools["edit_file"].tool_def.parameters_json_schema
        assert set(edit_schema["properties"]) == {"filePath", "contentToReplace", "newContent"}
        assert set(edit_schema["required"]) == {"filePath", "contentToReplace", "newContent"}

        list_schema = tools["list_files"].tool_def.parameters_json_schema
        assert "directory" in list_schema["properties"]
        assert "required" not in list_schema

    def test_read_description_names_ceiling(self, toolset):
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        assert "10,000 characters" in tools["read_file"].tool_def.description

    def test_create_default_uses_cwd(self, workspace, monkeypatch):
        monkeypatch.chdir(workspace)
        toolset = WorkspaceToolset.create_default(id="ws")

        assert toolset.tools.config.root == workspace.resolve()
        assert toolset.id == "ws"


class TestCallTool:
    def test_call_tool_returns_completed_payload(self, toolset, workspace):
        (workspace / "a.txt").write_text("one two one", encoding="utf-8")
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        result = asyncio.run(
            toolset.call_tool(
                "edit_file",
                EditFileArgs(file_path="a.txt", content_to_replace="one", new_content="1"),
                ctx,
                tools["edit_file"],
            )
        )

        assert result == {
            "state": "completed",
            "operation": "edit",
            "filePath": "a.txt",
            "occurrences": 2,
            "message": "Successfully replaced 2 occurrence(s) in 'a.txt'.",
        }
        assert (workspace / "a.txt").read_text(encoding="utf-8") == "1 two 1"

    def test_call_tool_returns_failure_instead_of_raising(self, toolset):
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        result = asyncio.run(
            toolset.call_tool(
                "read_file", {"filePath": "../etc/passwd"}, ctx, tools["read_file"]
            )
        )

        assert result["state"] == "failed"
        assert "outside the allowed directory" in result["message"]

    def test_unknown_tool_raises(self, toolset):
        ctx = MagicMock(spec=RunContext)
        tool = MagicMock()

        with pytest.raises(ValueError, match="Unknown tool"):
            asyncio.run(toolset.call_tool("delete_file", {"path": "x"}, ctx, tool))

    def test_progress_events_forwarded_to_callback(self, workspace):
        seen = []
        toolset = WorkspaceToolset(
            WorkspaceTools(WorkspaceConfig(root=workspace)), on_event=seen.append
        )
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        asyncio.run(
            toolset.call_tool(
                "write_file",
                {"filePath": "x/y.txt", "content": "z"},
                ctx,
                tools["write_file"],
            )
        )

        assert [event.state for event in seen] == ["started", "completed"]
        assert seen[0] == ToolStarted(operation="write", file_path="x/y.txt")

    def test_async_callback_is_awaited(self, workspace):
        seen = []

        async def record(event):
            seen.append(event.state)

        toolset = WorkspaceToolset(
            WorkspaceTools(WorkspaceConfig(root=workspace)), on_event=record
        )
        ctx = MagicMock(spec=RunContext)
        tools = asyncio.run(toolset.get_tools(ctx))

        asyncio.run(
            toolset.call_tool(
                "read_file", ReadFileArgs(file_path="missing.txt"), ctx, tools["read_file"]
            )
        )

        assert seen == ["started", "failed"]


class TestAgentIntegration:
    def test_toolset_registers_with_agent(self, toolset):
        agent = Agent(model=TestModel(), toolsets=[toolset])

        assert agent is not None

    def test_agent_can_call_list_files(self, toolset, workspace):
        (workspace / "a.txt").write_text("a", encoding="utf-8")
        agent = Agent(model=TestModel(), toolsets=[toolset])

        result = asyncio.run(
            agent.run(
                "List all files",
                model=TestModel(call_tools=["list_files"]),
            )
        )

        assert result is not None


class _SilentTools(WorkspaceTools):
    """Emits a Started event and then stops without a terminal event."""

    def dispatch(self, request):
        async def _stream():
            yield ToolStarted(operation="read", file_path="a.txt")

        return _stream()


def test_run_without_terminal_event_raises(workspace):
    toolset = WorkspaceToolset(_SilentTools(WorkspaceConfig(root=workspace)))
    request = ToolRequest(operation="read", arguments={"filePath": "a.txt"})

    with pytest.raises(RuntimeError, match="read ended without a terminal event"):
        asyncio.run(toolset.run(request))
