"""File logging for hosts embedding the workspace tools.

Every module logs through ``logging.getLogger(__name__)``; this attaches a
file handler to the package logger so tool activity lands in one
append-only file with ``[<ISO timestamp>] <message>`` lines.
"""
from __future__ import annotations

import logging
from pathlib import Path

PACKAGE_LOGGER = "pydantic_ai_workspace_tools"


def configure_file_logging(
    filename: str | Path = "app.log", level: str = "INFO"
) -> logging.Logger:
    """Append package log records to a file.

    Calling this again with the same file does not add a second handler.

    Args:
        filename: Log file path; missing parent directories are created
        level: Logging level name for the package logger (default "INFO")

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    path = Path(filename).resolve()
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == path:
            return logger  # already configured

    path.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(path, mode="a", encoding="utf-8")
    fh.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(fh)
    return logger
