"""Workspace guard: configuration, path confinement and LLM-friendly errors.

This module provides the security boundary for the workspace tools:
- WorkspaceConfig for the working root and read ceiling
- PathGuard for resolving caller paths against the root
- Error classes whose messages are surfaced to the model

The guard is a pure validation layer - it doesn't perform file I/O.
For file operations, use WorkspaceTools which wraps a PathGuard.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


DEFAULT_MAX_READ_CHARS = 10_000
"""Default maximum characters returned by a read."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class WorkspaceConfig(BaseModel):
    """Configuration for a workspace.

    The root is captured once and never changes for the life of the object.
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(
        default_factory=Path.cwd,
        validate_default=True,
        description="Working root all tool paths are confined to",
    )
    max_read_chars: int = Field(
        default=DEFAULT_MAX_READ_CHARS,
        gt=0,
        description="Maximum characters returned by a read before truncating",
    )

    @field_validator("root")
    @classmethod
    def _resolve_root(cls, value: Path) -> Path:
        root = value.expanduser().resolve()
        if not root.is_dir():
            raise ValueError(f"Workspace root is not a directory: {value}")
        return root

    @classmethod
    def from_cwd(cls, max_read_chars: int = DEFAULT_MAX_READ_CHARS) -> "WorkspaceConfig":
        """Capture the process's current working directory as the root."""
        return cls(root=Path.cwd(), max_read_chars=max_read_chars)


# ---------------------------------------------------------------------------
# LLM-Friendly Errors
# ---------------------------------------------------------------------------


class WorkspaceError(Exception):
    """Base class for workspace errors with LLM-friendly messages."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PathOutsideWorkspaceError(WorkspaceError):
    """Raised when a path resolves outside the working root."""

    def __init__(self, path: str, reason: str, message: str | None = None):
        self.path = path
        self.reason = reason
        super().__init__(message or f"Cannot access '{path}': {reason}.")


class PathNotAFileError(WorkspaceError):
    """Raised when a path exists but is not a regular file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"'{path}' is not a file.")


class PathNotADirectoryError(WorkspaceError):
    """Raised when a path exists but is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"'{path}' is not a directory.")


class EmptyReplacementTargetError(WorkspaceError):
    """Raised when an edit is asked to replace the empty string."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Cannot edit file '{path}': contentToReplace must not be empty."
        )


# ---------------------------------------------------------------------------
# Guard results
# ---------------------------------------------------------------------------


class ResolvedPath(BaseModel):
    """An absolute path that passed the confinement check."""

    model_config = ConfigDict(frozen=True)

    requested: str
    absolute: Path


class Rejected(BaseModel):
    """A caller path that failed the confinement check."""

    model_config = ConfigDict(frozen=True)

    requested: str
    reason: str
    escapes: bool = True

    def to_error(self, message: str | None = None) -> PathOutsideWorkspaceError:
        """Convert to an error; message replaces the default for escaping paths."""
        if not self.escapes:
            message = None
        return PathOutsideWorkspaceError(self.requested, self.reason, message)


Resolution = Union[ResolvedPath, Rejected]


# ---------------------------------------------------------------------------
# PathGuard Implementation
# ---------------------------------------------------------------------------


class PathGuard:
    """Confines caller-supplied paths to the workspace root.

    Example:
        guard = PathGuard(WorkspaceConfig(root="./project"))

        result = guard.resolve("src/main.py")
        if isinstance(result, Rejected):
            print(result.reason)
        else:
            print(result.absolute)
    """

    def __init__(self, config: WorkspaceConfig):
        self.config = config

    @property
    def root(self) -> Path:
        return self.config.root

    def resolve(self, path: str) -> Resolution:
        """Resolve path within the workspace root.

        The path is joined onto the root and normalized, following symlinks.
        The result must be the root itself or lie below it; an absolute
        path is accepted only when it lands inside the root.

        Args:
            path: Caller-supplied path, normally relative to the root

        Returns:
            ResolvedPath on success, Rejected otherwise
        """
        try:
            candidate = (self.root / path).resolve()
        except (OSError, RuntimeError, ValueError) as exc:
            # RuntimeError: symlink loop (non-strict resolve, Python < 3.13)
            logger.debug("Cannot resolve %r: %s", path, exc)
            return self._reject(path, "path cannot be resolved", escapes=False)

        try:
            candidate.relative_to(self.root)
        except ValueError:
            return self._reject(path, "path is outside the working directory")

        return ResolvedPath(requested=path, absolute=candidate)

    def contains(self, path: str) -> bool:
        """Check if path stays inside the workspace root.

        For hosts that want to vet a path before issuing a tool call.
        """
        return isinstance(self.resolve(path), ResolvedPath)

    def _reject(self, path: str, reason: str, escapes: bool = True) -> Rejected:
        logger.warning("Rejected path %r: %s", path, reason)
        return Rejected(requested=path, reason=reason, escapes=escapes)
