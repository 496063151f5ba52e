"""Tool that creates directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from fsgate.paths import (
    AllowedPaths,
    OutsideAllowedPathsError,
    PathIOError,
    PathNotFoundError,
)
from fsgate.results import ToolResult, optional_bool, require_str

logger = logging.getLogger(__name__)


def schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Path to the directory to create (full path or relative to one of the allowed directories)",
            },
            "recursive": {
                "type": "boolean",
                "description": "Create parent directories if they don't exist",
                "default": True,
            },
        },
        "required": ["path"],
    }


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """Create the directory named by ``path``, with parents when ``recursive``."""
    path_str = require_str(args, "path")
    recursive = optional_bool(args, "recursive", True)
    logger.debug("Creating directory: '%s', recursive: %s", path_str, recursive)

    try:
        validated = allowed_paths.validate_path(path_str)
    except OutsideAllowedPathsError:
        return ToolResult.error("Path is outside of all allowed directories")
    except PathNotFoundError:
        validated = Path(path_str)
    except PathIOError as exc:
        return ToolResult.error(f"IO error: {exc.error}")

    if validated.exists():
        if validated.is_dir():
            relative = allowed_paths.closest_relative_path(validated)
            return ToolResult.ok(f"Directory already exists: '{relative}'")
        return ToolResult.error(f"Path exists but is not a directory: '{path_str}'")

    try:
        if recursive:
            validated.mkdir(parents=True, exist_ok=True)
        else:
            os.mkdir(validated)
    except OSError as exc:
        return ToolResult.error(f"Failed to create directory: {exc}")

    relative = allowed_paths.closest_relative_path(validated)
    return ToolResult.ok(f"Directory created: '{relative}'")