"""Tool that lists the entries of a single directory."""

from __future__ import annotations

import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fsgate.paths import (
    AllowedPaths,
    OutsideAllowedPathsError,
    PathIOError,
    PathLike,
    PathNotFoundError,
)
from fsgate.results import ToolResult, optional_bool, optional_str, require_str
from fsgate.tools.info import to_iso8601

logger = logging.getLogger(__name__)

_TYPE_ORDER = {
    "directory": 0,
    "file": 1,
    "symlink": 2,
    "fifo": 3,
    "socket": 4,
    "block_device": 5,
    "char_device": 6,
    "unknown": 7,
}

_TYPE_LABELS = {
    "directory": "[DIR]",
    "file": "[FILE]",
    "symlink": "[LINK]",
    "fifo": "[FIFO]",
    "socket": "[SOCK]",
    "block_device": "[BLK]",
    "char_device": "[CHR]",
    "unknown": "[?]",
}


@dataclass
class Entry:
    """One listed directory entry."""

    name: str
    path: str
    entry_type: str
    size: int | None = None
    modified: str | None = None
    is_hidden: bool = False
    depth: int = 1
    rel_path: str = ""


def schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Full path to the directory to list files from",
            },
            "pattern": {
                "type": "string",
                "description": "Optional glob pattern to filter files",
                "default": "*",
            },
            "include_hidden": {
                "type": "boolean",
                "description": "Whether to include hidden files (starting with .)",
                "default": False,
            },
            "metadata": {
                "type": "boolean",
                "description": "Whether to include file metadata (size, type, modification time)",
                "default": True,
            },
        },
        "required": ["path"],
    }


def _char_class(body: str, negate: bool) -> str:
    items: list[str] = []
    k = 0
    while k < len(body):
        if k + 2 < len(body) and body[k + 1] == "-":
            items.append(f"{re.escape(body[k])}-{re.escape(body[k + 2])}")
            k += 3
        else:
            items.append(re.escape(body[k]))
            k += 1
    return "[" + ("^" if negate else "") + "".join(items) + "]"


def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a shell-style glob into a regular expression.

    Raises ValueError for malformed patterns.
    """
    parts: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "?":
            parts.append(".")
            i += 1
        elif char == "*":
            start = i
            while i < n and pattern[i] == "*":
                i += 1
            count = i - start
            if count > 2:
                raise ValueError(
                    f"Pattern syntax error near position {start + 2}: "
                    "wildcards are either regular `*` or recursive `**`"
                )
            if count == 2:
                before_ok = start == 0 or pattern[start - 1] == "/"
                after_ok = i == n or pattern[i] == "/"
                if not (before_ok and after_ok):
                    raise ValueError(
                        f"Pattern syntax error near position {i}: "
                        "recursive wildcards must form a single path component"
                    )
                if i < n:
                    i += 1
                    parts.append("(?:.*/)?")
                else:
                    parts.append(".*")
            else:
                parts.append(".*")
        elif char == "[":
            j = i + 1
            negate = j < n and pattern[j] == "!"
            if negate:
                j += 1
            close = pattern.find("]", j + 1) if j < n else -1
            if close == -1:
                raise ValueError(
                    f"Pattern syntax error near position {i}: invalid range pattern"
                )
            parts.append(_char_class(pattern[j:close], negate))
            i = close + 1
        else:
            parts.append(re.escape(char))
            i += 1
    try:
        return re.compile("".join(parts), re.DOTALL)
    except re.error as exc:
        raise ValueError(f"Pattern syntax error: {exc}") from exc


def entry_type_of(path: PathLike) -> str:
    """Classify a path without following symlinks."""
    try:
        mode = os.lstat(path).st_mode
    except OSError:
        return "unknown"
    if stat.S_ISDIR(mode):
        return "directory"
    if stat.S_ISREG(mode):
        return "file"
    if stat.S_ISLNK(mode):
        return "symlink"
    if stat.S_ISBLK(mode):
        return "block_device"
    if stat.S_ISCHR(mode):
        return "char_device"
    if stat.S_ISFIFO(mode):
        return "fifo"
    if stat.S_ISSOCK(mode):
        return "socket"
    return "unknown"


def type_order(entry_type: str) -> int:
    """Sort rank of an entry type: directories first, unrecognised types last."""
    return _TYPE_ORDER.get(entry_type, 8)


def read_gitignore_patterns(directory: PathLike) -> list[re.Pattern[str]]:
    """Compiled patterns from the directory's .gitignore, skipping blanks and comments."""
    gitignore = Path(directory) / ".gitignore"
    if not gitignore.exists():
        logger.debug("No .gitignore file found in: %s", directory)
        return []
    logger.debug("Found .gitignore file at: %s", gitignore)
    try:
        text = gitignore.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.warning("Failed to read .gitignore file at: %s", gitignore)
        return []
    patterns: list[re.Pattern[str]] = []
    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        try:
            patterns.append(_compile_glob(trimmed))
        except ValueError as exc:
            logger.warning("Invalid pattern in .gitignore: %s: %s", trimmed, exc)
    return patterns


def _format_entry(entry: Entry) -> str:
    line = f"{_TYPE_LABELS.get(entry.entry_type, '[?]')} {entry.name}"
    if entry.size is not None:
        line = f"{line} ({entry.size} bytes)"
    return line


def _collect(
    directory: Path,
    glob: re.Pattern[str],
    ignored: list[re.Pattern[str]],
    include_hidden: bool,
    include_metadata: bool,
) -> list[Entry]:
    try:
        with os.scandir(directory) as iterator:
            names = [item.name for item in iterator]
    except OSError as exc:
        logger.warning("Error walking directory: %s", exc)
        return []

    entries: list[Entry] = []
    for name in names:
        is_hidden = name.startswith(".") or any(p.fullmatch(name) for p in ignored)
        if is_hidden and not include_hidden:
            continue
        if not glob.fullmatch(name):
            continue
        full_path = directory / name
        entry = Entry(
            name=name,
            path=str(full_path),
            entry_type=entry_type_of(full_path),
            is_hidden=is_hidden,
            depth=1,
            rel_path=name,
        )
        if include_metadata and entry.entry_type == "file":
            try:
                info = os.lstat(full_path)
            except OSError:
                pass
            else:
                entry.size = info.st_size
                entry.modified = to_iso8601(info.st_mtime)
        entries.append(entry)
    entries.sort(key=lambda e: (type_order(e.entry_type), e.name))
    return entries


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """List the directory named by ``path``, directories first, then by name."""
    path_str = require_str(args, "path")
    pattern = optional_str(args, "pattern", "*")
    include_hidden = optional_bool(args, "include_hidden", False)
    include_metadata = optional_bool(args, "metadata", True)
    logger.debug(
        "Listing path: '%s', pattern: '%s', include_hidden: %s",
        path_str,
        pattern,
        include_hidden,
    )

    try:
        validated = allowed_paths.validate_path(path_str)
    except OutsideAllowedPathsError:
        return ToolResult.error("Path is outside of all allowed directories")
    except PathNotFoundError:
        return ToolResult.error(f"Path not found: '{path_str}'")
    except PathIOError as exc:
        return ToolResult.error(f"IO error: {exc.error}")

    if not validated.is_dir():
        return ToolResult.error(f"Path is not a directory: '{path_str}'")

    try:
        glob = _compile_glob(pattern)
    except ValueError as exc:
        return ToolResult.error(f"Invalid pattern: {exc}")

    ignored = read_gitignore_patterns(validated)
    entries = _collect(validated, glob, ignored, include_hidden, include_metadata)

    lines = [f"Directory: {path_str}\n\n"]
    lines.extend(f"{_format_entry(entry)}\n" for entry in entries)
    return ToolResult.ok("".join(lines))