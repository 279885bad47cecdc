"""Progress events emitted by workspace tool operations.

Every operation yields exactly one ToolStarted followed by exactly one
terminal event: an operation-specific *Completed model or ToolFailed.
Field names serialize in camelCase (``filePath``, ``sizeBytes``, ...) for
the host; Python code uses the snake_case attributes.
"""
from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Operation = Literal["read", "write", "edit", "list"]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def to_wire(self) -> dict:
        """Dump with camelCase keys, omitting unset optional context."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Started
# ---------------------------------------------------------------------------


class ToolStarted(_WireModel):
    """First event of every invocation."""

    state: Literal["started"] = "started"
    operation: Operation
    file_path: Optional[str] = Field(default=None, description="Target file")
    directory: Optional[str] = Field(default=None, description="Target directory")


# ---------------------------------------------------------------------------
# Completed
# ---------------------------------------------------------------------------


class ReadCompleted(_WireModel):
    state: Literal["completed"] = "completed"
    operation: Literal["read"] = "read"
    file_path: str
    content: str = Field(description="File content, cut at the read ceiling")
    truncated: bool = Field(description="True if the file is longer than content")
    message: str


class WriteCompleted(_WireModel):
    state: Literal["completed"] = "completed"
    operation: Literal["write"] = "write"
    file_path: str
    characters_written: int
    message: str


class EditCompleted(_WireModel):
    state: Literal["completed"] = "completed"
    operation: Literal["edit"] = "edit"
    file_path: str
    occurrences: int = Field(description="Number of literal matches replaced")
    message: str


class FileEntry(_WireModel):
    """One immediate child of a listed directory.

    For directories ``size_bytes`` is the filesystem's own entry size,
    not the total size of the subtree.
    """

    name: str
    is_directory: bool
    size_bytes: int


class ListCompleted(_WireModel):
    state: Literal["completed"] = "completed"
    operation: Literal["list"] = "list"
    directory: str
    files: list[FileEntry]
    message: str


# ---------------------------------------------------------------------------
# Failed
# ---------------------------------------------------------------------------


class ToolFailed(_WireModel):
    """Terminal failure; ``message`` is shown to the model verbatim."""

    state: Literal["failed"] = "failed"
    operation: Operation
    message: str


Completed = Union[ReadCompleted, WriteCompleted, EditCompleted, ListCompleted]
ProgressEvent = Union[ToolStarted, Completed, ToolFailed]


def is_terminal(event: ProgressEvent) -> bool:
    """Return True if no further event follows this one."""
    return event.state != "started"
