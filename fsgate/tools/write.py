"""Tool that writes content to a file."""

from __future__ import annotations

import base64
import binascii
import enum
import json
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
from fsgate.results import ToolResult, optional_bool, optional_str, require_str
from fsgate.tools.info import to_iso8601

logger = logging.getLogger(__name__)


class WriteMode(enum.Enum):
    """How an existing file is treated when writing."""

    CREATE = "create"
    OVERWRITE = "overwrite"
    APPEND = "append"
    CREATE_NEW = "create_new"

    @property
    def open_mode(self) -> str:
        if self is WriteMode.APPEND:
            return "ab"
        if self is WriteMode.CREATE_NEW:
            return "xb"
        return "wb"


def schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Path to the file to write (full path or relative to one of the allowed directories)",
            },
            "content": {
                "type": "string",
                "description": "Content to write to the file",
            },
            "encoding": {
                "type": "string",
                "description": "Content encoding",
                "enum": ["utf8", "base64"],
                "default": "utf8",
            },
            "mode": {
                "type": "string",
                "description": "Write mode",
                "enum": ["create", "overwrite", "append", "create_new"],
                "default": "overwrite",
            },
            "make_dirs": {
                "type": "boolean",
                "description": "Create parent directories if they don't exist",
                "default": False,
            },
        },
        "required": ["path", "content"],
    }


def _decode(content: str, encoding: str) -> bytes | ToolResult:
    if encoding == "utf8":
        return content.encode("utf-8")
    if encoding == "base64":
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as exc:
            return ToolResult.error(f"Failed to decode base64 content: {exc}")
    return ToolResult.error(f"Unsupported encoding: '{encoding}'")


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """Write ``content`` to ``path`` and report the result as JSON."""
    path_str = require_str(args, "path")
    content = require_str(args, "content")
    encoding = optional_str(args, "encoding", "utf8")
    mode_name = optional_str(args, "mode", "overwrite")
    make_dirs = optional_bool(args, "make_dirs", False)
    logger.debug(
        "Writing to path: '%s', encoding: '%s', mode: '%s', make_dirs: %s",
        path_str,
        encoding,
        mode_name,
        make_dirs,
    )

    data = _decode(content, encoding)
    if isinstance(data, ToolResult):
        return data

    try:
        validated = allowed_paths.validate_path(path_str)
    except OutsideAllowedPathsError:
        return ToolResult.error("Path is outside of all allowed directories")
    except PathNotFoundError:
        if not make_dirs:
            return ToolResult.error(f"Path not found: '{path_str}'")
        validated = Path(path_str)
    except PathIOError as exc:
        return ToolResult.error(f"IO error: {exc.error}")

    if make_dirs:
        parent = validated.parent
        if not parent.exists():
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                return ToolResult.error(f"Failed to create parent directories: {exc}")
            logger.debug("Created parent directories: '%s'", parent)

    try:
        mode = WriteMode(mode_name)
    except ValueError:
        return ToolResult.error(f"Invalid mode: '{mode_name}'")

    try:
        handle = open(validated, mode.open_mode)
    except FileExistsError:
        return ToolResult.error(
            f"File already exists: '{validated}' and mode is create_new"
        )
    except OSError as exc:
        return ToolResult.error(f"Failed to open file: {exc}")

    with handle:
        try:
            handle.write(data)
            handle.flush()
        except OSError as exc:
            return ToolResult.error(f"Failed to write to file: {exc}")
        try:
            info = os.fstat(handle.fileno())
        except OSError as exc:
            logger.warning("Failed to get file metadata: %s", exc)
            return ToolResult.ok(
                f"Content written successfully to '{validated}' but failed to get metadata: {exc}"
            )

    response = {
        "success": True,
        "path": allowed_paths.closest_relative_path(validated),
        "bytes_written": len(data),
        "metadata": {
            "size": info.st_size,
            "modified": to_iso8601(info.st_mtime),
        },
    }
    return ToolResult.ok(
        json.dumps(response, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    )