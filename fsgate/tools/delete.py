"""Tool that deletes files and directories."""

from __future__ import annotations

import logging
import os
import shutil
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
                "description": "Path to delete (full path or relative to one of the allowed directories)",
            },
            "recursive": {
                "type": "boolean",
                "description": "Whether to recursively delete directories",
                "default": False,
            },
            "force": {
                "type": "boolean",
                "description": "Force deletion even if errors occur",
                "default": False,
            },
        },
        "required": ["path"],
    }


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """Delete the file or directory named by ``path``."""
    path_str = require_str(args, "path")
    recursive = optional_bool(args, "recursive", False)
    force = optional_bool(args, "force", False)
    logger.debug(
        "Deleting path: '%s', recursive: %s, force: %s", path_str, recursive, force
    )

    try:
        validated = allowed_paths.validate_path(path_str)
    except OutsideAllowedPathsError:
        return ToolResult.error("Path is outside of all allowed directories")
    except PathNotFoundError:
        return ToolResult.error(f"Path not found: '{path_str}'")
    except PathIOError as exc:
        return ToolResult.error(f"IO error: {exc.error}")

    if not validated.exists():
        return ToolResult.error(f"Path does not exist: '{path_str}'")

    is_dir = validated.is_dir()
    relative = allowed_paths.closest_relative_path(validated)

    try:
        if is_dir:
            if recursive:
                shutil.rmtree(validated)
            else:
                os.rmdir(validated)
        else:
            os.remove(validated)
    except OSError as exc:
        if force:
            return ToolResult.ok(
                f"Deletion completed with warning: {exc} (path: '{relative}')"
            )
        return ToolResult.error(f"Failed to delete path: {exc}")

    item_type = "directory" if is_dir else "file"
    return ToolResult.ok(f"Deleted {item_type}: '{relative}'")