"""Tool that reports metadata about a file or directory."""

from __future__ import annotations

import json
import logging
import os
import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from fsgate.paths import (
    AllowedPaths,
    OutsideAllowedPathsError,
    PathIOError,
    PathNotFoundError,
)
from fsgate.results import ToolResult, require_str

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Path to get information for (full path or relative to one of the allowed directories)",
            }
        },
        "required": ["path"],
    }


def to_iso8601(timestamp: float) -> str:
    """Format a POSIX timestamp as RFC 3339 in UTC, trimming zero fractions."""
    moment = _EPOCH + timedelta(microseconds=round(timestamp * 1_000_000))
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    micro = moment.microsecond
    if micro == 0:
        fraction = ""
    elif micro % 1000 == 0:
        fraction = f".{micro // 1000:03d}"
    else:
        fraction = f".{micro:06d}"
    return f"{base}{fraction}+00:00"


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """Describe the file or directory named by the ``path`` argument as JSON."""
    path_str = require_str(args, "path")
    logger.debug("Getting info for path: '%s'", path_str)

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

    try:
        info = os.stat(validated)
    except OSError as exc:
        return ToolResult.error(f"Failed to get metadata: {exc}")

    is_dir = stat.S_ISDIR(info.st_mode)
    is_file = stat.S_ISREG(info.st_mode)
    if is_dir:
        file_type = "directory"
    elif is_file:
        file_type = "file"
    else:
        file_type = "unknown"

    name = _display_name(validated, path_str)

    birth = getattr(info, "st_birthtime", None)
    created = to_iso8601(birth) if birth is not None else None

    readonly = (info.st_mode & 0o222) == 0
    result = {
        "exists": True,
        "type": file_type,
        "name": name,
        "path": allowed_paths.closest_relative_path(validated),
        "size": info.st_size if is_file else 0,
        "created": created,
        "modified": to_iso8601(info.st_mtime),
        "accessed": to_iso8601(info.st_atime),
        "permissions": {
            "readable": readonly,
            "writable": not readonly,
            "executable": False,
        },
        "is_hidden": name.startswith("."),
    }
    text = json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return ToolResult.ok(text)


def _display_name(path: Path, path_str: str) -> str:
    if path.name and path.name != "..":
        return path.name
    text = str(path)
    if text.endswith("/") or text.endswith("\\"):
        return "."
    return path_str