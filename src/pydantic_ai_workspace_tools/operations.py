"""WorkspaceTools: read, write, edit and list files under a working root.

Each operation is an async generator of progress events. It yields a
ToolStarted, checks the path against the PathGuard, performs the filesystem
action, and finishes with exactly one Completed or ToolFailed event. Errors
never escape an operation; they become the ToolFailed message.

Example:
    tools = WorkspaceTools(WorkspaceConfig(root="./project"))

    async for event in tools.edit("src/app.py", "old_name", "new_name"):
        print(event.to_wire())

    # Or from a host tool call
    request = ToolRequest(operation="read", arguments={"filePath": "README.md"})
    async for event in tools.dispatch(request):
        ...
"""
from __future__ import annotations

import enum
import logging
import stat
from pathlib import Path
from typing import Any, AsyncIterator, Optional, Union

import aiofiles
import aiofiles.os
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .events import (
    Completed,
    EditCompleted,
    FileEntry,
    ListCompleted,
    ProgressEvent,
    ReadCompleted,
    ToolFailed,
    ToolStarted,
    WriteCompleted,
)
from .guard import (
    EmptyReplacementTargetError,
    PathGuard,
    PathNotADirectoryError,
    PathNotAFileError,
    Rejected,
    WorkspaceConfig,
    WorkspaceError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tool Argument Models
# ---------------------------------------------------------------------------


class _ArgsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class ReadFileArgs(_ArgsModel):
    """Arguments for read_file tool."""

    file_path: str = Field(description="The relative path to the file to be read.")


class WriteFileArgs(_ArgsModel):
    """Arguments for write_file tool."""

    file_path: str = Field(description="The relative path for the file to be written.")
    content: str = Field(description="The content to write into the file.")


class EditFileArgs(_ArgsModel):
    """Arguments for edit_file tool."""

    file_path: str = Field(description="The relative path to the file to be edited.")
    content_to_replace: str = Field(description="The exact string to find in the file.")
    new_content: str = Field(
        description="The string that will replace all occurrences of 'contentToReplace'."
    )


class ListFilesArgs(_ArgsModel):
    """Arguments for list_files tool."""

    directory: str = Field(
        default=".",
        description=(
            "The path to list, relative to the working directory. "
            "Defaults to the current directory."
        ),
    )


class ToolOperation(str, enum.Enum):
    READ = "read"
    WRITE = "write"
    EDIT = "edit"
    LIST = "list"


ARGS_MODELS: dict[ToolOperation, type[_ArgsModel]] = {
    ToolOperation.READ: ReadFileArgs,
    ToolOperation.WRITE: WriteFileArgs,
    ToolOperation.EDIT: EditFileArgs,
    ToolOperation.LIST: ListFilesArgs,
}


class ToolRequest(BaseModel):
    """A tool call from the host: operation name plus raw arguments."""

    operation: ToolOperation
    arguments: dict[str, Any] = Field(default_factory=dict)


def _describe(exc: BaseException) -> str:
    """Error text for a Failed message, without echoing resolved host paths."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc)


# ---------------------------------------------------------------------------
# WorkspaceTools Implementation
# ---------------------------------------------------------------------------


class WorkspaceTools:
    """Progress-reporting file operations confined to one working root.

    Operations share no state beyond the immutable config, so concurrent
    invocations are independent. Two concurrent writes to the same file
    race with last-write-wins semantics.
    """

    def __init__(self, config: Optional[WorkspaceConfig] = None):
        """Initialize the tools.

        Args:
            config: Workspace configuration (defaults to the current directory)
        """
        self.config = config or WorkspaceConfig.from_cwd()
        self._guard = PathGuard(self.config)

    # ---------------------------------------------------------------------------
    # Dispatch
    # ---------------------------------------------------------------------------

    def dispatch(
        self, request: Union[ToolRequest, dict[str, Any]]
    ) -> AsyncIterator[ProgressEvent]:
        """Validate a tool request and return its event stream.

        Raises:
            pydantic.ValidationError: If the operation or its arguments are
                invalid. Nothing has been emitted at that point.
        """
        if not isinstance(request, ToolRequest):
            request = ToolRequest.model_validate(request)
        args = ARGS_MODELS[request.operation].model_validate(request.arguments)

        if isinstance(args, ReadFileArgs):
            return self.read(args.file_path)
        if isinstance(args, WriteFileArgs):
            return self.write(args.file_path, args.content)
        if isinstance(args, EditFileArgs):
            return self.edit(args.file_path, args.content_to_replace, args.new_content)
        return self.list(args.directory)

    # ---------------------------------------------------------------------------
    # File Operations
    # ---------------------------------------------------------------------------

    async def read(self, file_path: str) -> AsyncIterator[ProgressEvent]:
        """Read a text file, truncated at the configured ceiling.

        Content is returned verbatim, without newline translation.
        """
        yield self._started("read", file_path=file_path)
        max_chars = self.config.max_read_chars

        try:
            resolved = self._guard.resolve(file_path)
            if isinstance(resolved, Rejected):
                raise resolved.to_error(
                    f"Cannot read file '{file_path}' outside the allowed directory."
                )

            await self._require_file(resolved.absolute, file_path)

            async with aiofiles.open(
                resolved.absolute, mode="r", encoding="utf-8", newline=""
            ) as f:
                content = await f.read()

            truncated = len(content) > max_chars
            if truncated:
                content = content[:max_chars]
        except WorkspaceError as exc:
            yield self._failed("read", exc.message)
            return
        except (OSError, ValueError) as exc:
            yield self._failed(
                "read", f"Error reading file '{file_path}': {_describe(exc)}"
            )
            return

        if truncated:
            message = f"Read first {max_chars} characters from '{file_path}'."
        else:
            message = f"Successfully read '{file_path}'."
        yield self._completed(
            ReadCompleted(
                file_path=file_path,
                content=content,
                truncated=truncated,
                message=message,
            )
        )

    async def write(self, file_path: str, content: str) -> AsyncIterator[ProgressEvent]:
        """Write a text file, replacing any previous content.

        Parent directories are created automatically if they don't exist.
        """
        yield self._started("write", file_path=file_path)

        try:
            resolved = self._guard.resolve(file_path)
            if isinstance(resolved, Rejected):
                raise resolved.to_error(
                    f"Cannot write file '{file_path}' outside the allowed directory."
                )

            await aiofiles.os.makedirs(resolved.absolute.parent, exist_ok=True)

            async with aiofiles.open(
                resolved.absolute, mode="w", encoding="utf-8", newline=""
            ) as f:
                await f.write(content)
        except WorkspaceError as exc:
            yield self._failed("write", exc.message)
            return
        except (OSError, ValueError) as exc:
            yield self._failed(
                "write", f"Error writing to file '{file_path}': {_describe(exc)}"
            )
            return

        yield self._completed(
            WriteCompleted(
                file_path=file_path,
                characters_written=len(content),
                message=f"Successfully wrote {len(content)} characters to '{file_path}'.",
            )
        )

    async def edit(
        self, file_path: str, content_to_replace: str, new_content: str
    ) -> AsyncIterator[ProgressEvent]:
        """Replace every literal occurrence of content_to_replace.

        Matching is plain substring matching, counted left to right without
        overlaps. Zero matches is a successful no-op and the file is left
        untouched.
        """
        yield self._started("edit", file_path=file_path)

        try:
            resolved = self._guard.resolve(file_path)
            if isinstance(resolved, Rejected):
                raise resolved.to_error(
                    f"Cannot edit file '{file_path}' outside the allowed directory."
                )
            if not content_to_replace:
                raise EmptyReplacementTargetError(file_path)

            await self._require_file(resolved.absolute, file_path)

            async with aiofiles.open(
                resolved.absolute, mode="r", encoding="utf-8", newline=""
            ) as f:
                original = await f.read()

            occurrences = original.count(content_to_replace)
            if occurrences:
                modified = original.replace(content_to_replace, new_content)
                async with aiofiles.open(
                    resolved.absolute, mode="w", encoding="utf-8", newline=""
                ) as f:
                    await f.write(modified)
        except WorkspaceError as exc:
            yield self._failed("edit", exc.message)
            return
        except (OSError, ValueError) as exc:
            yield self._failed(
                "edit", f"Error editing file '{file_path}': {_describe(exc)}"
            )
            return

        if occurrences == 0:
            message = (
                f"No changes made, as '{content_to_replace}' "
                f"was not found in '{file_path}'."
            )
        else:
            message = f"Successfully replaced {occurrences} occurrence(s) in '{file_path}'."
        yield self._completed(
            EditCompleted(file_path=file_path, occurrences=occurrences, message=message)
        )

    async def list(self, directory: str = ".") -> AsyncIterator[ProgressEvent]:
        """List the immediate entries of a directory with type and size.

        Entries come back in filesystem order and are stat'ed one at a time;
        a single failing entry fails the whole listing.
        """
        yield self._started("list", directory=directory)

        try:
            resolved = self._guard.resolve(directory)
            if isinstance(resolved, Rejected):
                raise resolved.to_error(
                    f"Cannot list contents of '{directory}' "
                    "as it is outside the allowed directory."
                )

            dir_stat = await aiofiles.os.stat(resolved.absolute)
            if not stat.S_ISDIR(dir_stat.st_mode):
                raise PathNotADirectoryError(directory)

            files = []
            for name in await aiofiles.os.listdir(resolved.absolute):
                entry_stat = await aiofiles.os.stat(resolved.absolute / name)
                files.append(
                    FileEntry(
                        name=name,
                        is_directory=stat.S_ISDIR(entry_stat.st_mode),
                        size_bytes=entry_stat.st_size,
                    )
                )
        except WorkspaceError as exc:
            yield self._failed("list", exc.message)
            return
        except (OSError, ValueError) as exc:
            yield self._failed(
                "list", f"Error listing files in '{directory}': {_describe(exc)}"
            )
            return

        yield self._completed(
            ListCompleted(
                directory=directory,
                files=files,
                message=f"Listed {len(files)} entries in '{directory}'.",
            )
        )

    # ---------------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------------

    async def _require_file(self, path: Path, requested: str) -> None:
        file_stat = await aiofiles.os.stat(path)
        if not stat.S_ISREG(file_stat.st_mode):
            raise PathNotAFileError(requested)

    def _started(self, operation: str, **context: str) -> ToolStarted:
        logger.debug("%s started: %s", operation, context)
        return ToolStarted(operation=operation, **context)

    def _completed(self, event: Completed) -> Completed:
        logger.info("%s completed: %s", event.operation, event.message)
        return event

    def _failed(self, operation: str, message: str) -> ToolFailed:
        logger.warning("%s failed: %s", operation, message)
        return ToolFailed(operation=operation, message=message)
