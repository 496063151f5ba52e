"""Tool that reads file contents as text or base64."""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass
from typing import Any

from fsgate.paths import (
    AllowedPaths,
    OutsideAllowedPathsError,
    PathIOError,
    PathLike,
    PathNotFoundError,
    is_text_file,
)
from fsgate.results import ToolResult, optional_str, optional_uint, require_str
from fsgate.tools.info import to_iso8601

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1048576

_CONTENT_MARKER = "\n----- File Content -----\n\n"
_BASE64_MARKER = "\n----- Base64 Encoded Content -----\n\n"
_TRUNCATED_NOTE = "Note: File was truncated due to size limit\n"


@dataclass(frozen=True)
class FileMetadata:
    """What the read report says about the file before its content."""

    path: str
    size: int
    modified: str | None = None


def schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Path to the file to read (full path or relative to one of the allowed directories)",
            },
            "encoding": {
                "type": "string",
                "description": "File encoding",
                "enum": ["utf8", "base64", "binary"],
                "default": "utf8",
            },
            "start_line": {
                "type": "integer",
                "description": "Start line for partial read (0-indexed)",
            },
            "end_line": {
                "type": "integer",
                "description": "End line for partial read (inclusive)",
            },
            "max_size": {
                "type": "integer",
                "description": "Maximum number of bytes to read",
                "default": DEFAULT_MAX_SIZE,
            },
        },
        "required": ["path"],
    }


def _header(metadata: FileMetadata) -> list[str]:
    lines = [f"File: {metadata.path}\n"]
    if metadata.modified is not None:
        lines.append(f"Modified: {metadata.modified}\n")
    lines.append(f"Size: {metadata.size} bytes\n")
    return lines


def _strip_line_end(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    return raw


def _count_lines(text: str) -> int:
    if not text:
        return 0
    pieces = text.split("\n")
    return len(pieces) - 1 if pieces[-1] == "" else len(pieces)


def read_text_lines(
    path: PathLike,
    start_line: int | None,
    end_line: int | None,
    max_size: int,
    metadata: FileMetadata,
) -> ToolResult:
    """Read the lines from *start_line* to *end_line* (inclusive), within *max_size* bytes.

    Raises OSError if the file cannot be read and UnicodeDecodeError for non-UTF-8 lines.
    """
    start = start_line if start_line is not None else 0
    content: list[str] = []
    line_count = 0
    byte_count = 0
    truncated = False

    with open(path, "rb") as handle:
        for index, raw in enumerate(handle):
            line_count += 1
            if index < start:
                continue
            if end_line is not None and index > end_line:
                break
            line = _strip_line_end(raw)
            text = line.decode("utf-8")
            line_bytes = len(line) + 1
            if byte_count + line_bytes > max_size:
                truncated = True
                break
            content.append(f"{text}\n")
            byte_count += line_bytes

    parts = _header(metadata)
    if truncated:
        parts.append(_TRUNCATED_NOTE)
    if start_line is not None and end_line is not None:
        parts.append(f"Lines: {start_line}-{end_line} of {line_count}\n")
    elif start_line is not None:
        parts.append(f"Lines: {start_line} to end of {line_count} total\n")
    elif end_line is not None:
        parts.append(f"Lines: 0-{end_line} of {line_count}\n")
    else:
        parts.append(f"Total lines: {line_count}\n")
    parts.append(_CONTENT_MARKER)
    parts.extend(content)
    return ToolResult.ok("".join(parts))


def read_text_file(path: PathLike, max_size: int, metadata: FileMetadata) -> ToolResult:
    """Read a whole text file, up to *max_size* bytes.

    Raises OSError if the file cannot be read and UnicodeDecodeError if it is not UTF-8.
    """
    with open(path, "rb") as handle:
        content = handle.read(max_size).decode("utf-8")
    truncated = metadata.size > max_size

    parts = _header(metadata)
    parts.append(f"Total lines: {_count_lines(content)}\n")
    if truncated:
        parts.append(_TRUNCATED_NOTE)
    parts.append(_CONTENT_MARKER)
    parts.append(content)
    return ToolResult.ok("".join(parts))


def read_binary_file(path: PathLike, max_size: int, metadata: FileMetadata) -> ToolResult:
    """Read up to *max_size* bytes of a file and report them base64-encoded.

    Raises OSError if the file cannot be read.
    """
    with open(path, "rb") as handle:
        data = handle.read(min(metadata.size, max_size))
    truncated = metadata.size > max_size

    parts = _header(metadata)
    parts.append(f"Bytes read: {len(data)}\n")
    parts.append("Encoding: base64\n")
    if truncated:
        parts.append(_TRUNCATED_NOTE)
    parts.append(_BASE64_MARKER)
    parts.append(base64.b64encode(data).decode("ascii"))
    return ToolResult.ok("".join(parts))


def execute(args: Any, allowed_paths: AllowedPaths, max_file_size: int) -> ToolResult:
    """Read the file at ``path``, never more than the smaller of both size limits."""
    path_str = require_str(args, "path")
    encoding = optional_str(args, "encoding", "utf8")
    start_line = optional_uint(args, "start_line", None)
    end_line = optional_uint(args, "end_line", None)
    user_max_size = optional_uint(args, "max_size", DEFAULT_MAX_SIZE)
    max_size = min(user_max_size, max_file_size)
    logger.debug(
        "Reading file: '%s', encoding: '%s', start_line: %s, end_line: %s, max_size: %d",
        path_str,
        encoding,
        start_line,
        end_line,
        max_size,
    )

    try:
        validated = allowed_paths.validate_path(path_str)
    except OutsideAllowedPathsError:
        return ToolResult.error("Path is outside of all allowed directories")
    except PathNotFoundError:
        return ToolResult.error(f"File not found: '{path_str}'")
    except PathIOError as exc:
        return ToolResult.error(f"IO error: {exc.error}")

    if not validated.is_file():
        return ToolResult.error(f"Path is not a file: '{path_str}'")

    try:
        info = os.stat(validated)
    except OSError as exc:
        return ToolResult.error(f"Failed to get file metadata: {exc}")

    if info.st_size > max_size:
        logger.warning(
            "File size %d exceeds maximum allowed size %d", info.st_size, max_size
        )

    try:
        is_text = is_text_file(validated)
    except OSError as exc:
        return ToolResult.error(f"Failed to determine file type: {exc}")

    actual_encoding = encoding
    if not is_text and encoding == "utf8":
        logger.warning("Binary file detected, forcing base64 encoding")
        actual_encoding = "base64"

    metadata = FileMetadata(
        path=path_str, size=info.st_size, modified=to_iso8601(info.st_mtime)
    )

    if actual_encoding == "utf8":
        if start_line is not None or end_line is not None:
            return read_text_lines(validated, start_line, end_line, max_size, metadata)
        return read_text_file(validated, max_size, metadata)
    if actual_encoding in ("base64", "binary"):
        return read_binary_file(validated, max_size, metadata)
    return ToolResult.error(f"Unsupported encoding: '{actual_encoding}'")