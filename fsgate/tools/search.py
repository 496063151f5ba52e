"""Tool that searches file contents for a text or regular-expression pattern."""

from __future__ import annotations

import codecs
import logging
import os
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from fsgate.paths import (
    AllowedPaths,
    OutsideAllowedPathsError,
    PathIOError,
    PathLike,
    PathNotFoundError,
    is_text_file,
)
from fsgate.results import (
    ToolResult,
    optional_bool,
    optional_str,
    optional_uint,
    require_str,
)
from fsgate.tools.listing import _compile_glob

logger = logging.getLogger(__name__)

_DEFAULT_MAX_RESULTS = 100
_DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
_DEFAULT_TIMEOUT_SECS = 30


@dataclass(frozen=True)
class ContextLine:
    """A line shown around a match, numbered from 1."""

    line_number: int
    content: str


@dataclass
class Match:
    """A matching line, numbered from 1, with its surrounding context."""

    line_number: int
    line: str
    context: list[ContextLine] = field(default_factory=list)


@dataclass
class FileMatch:
    """All matches found in one file."""

    file: str
    matches: list[Match] = field(default_factory=list)


def schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "root_path": {
                "type": "string",
                "description": "Root directory to start the search from (full path or relative to one of the allowed directories)",
            },
            "pattern": {
                "type": "string",
                "description": "Text pattern to search for in files",
            },
            "regex": {
                "type": "boolean",
                "description": "Whether to treat pattern as regex",
                "default": False,
            },
            "file_pattern": {
                "type": "string",
                "description": "Optional glob pattern to filter which files to search",
                "default": "*",
            },
            "recursive": {
                "type": "boolean",
                "description": "Whether to search directories recursively",
                "default": True,
            },
            "case_sensitive": {
                "type": "boolean",
                "description": "Whether the search should be case-sensitive",
                "default": False,
            },
            "max_results": {
                "type": "integer",
                "description": "Maximum number of results to return",
                "default": _DEFAULT_MAX_RESULTS,
            },
            "max_file_size": {
                "type": "integer",
                "description": "Maximum file size to search (in bytes)",
                "default": _DEFAULT_MAX_FILE_SIZE,
            },
            "context_lines": {
                "type": "integer",
                "description": "Number of context lines to include before and after matches",
                "default": 0,
            },
            "timeout_secs": {
                "type": "integer",
                "description": "Maximum time to spend searching (in seconds)",
                "default": _DEFAULT_TIMEOUT_SECS,
            },
        },
        "required": ["root_path", "pattern"],
    }


def should_process(path: PathLike, is_dir: bool, pattern: re.Pattern[str]) -> bool:
    """Directories are always walked; files must be visible and match the glob."""
    if is_dir:
        return True
    name = Path(path).name
    if name.startswith("."):
        return False
    return pattern.fullmatch(name) is not None


def _decode(data: bytes) -> str:
    """Decode file bytes, honouring a byte-order mark and otherwise requiring UTF-8."""
    if data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8):].decode("utf-8")
    if data.startswith(codecs.BOM_UTF16_LE):
        return data[len(codecs.BOM_UTF16_LE):].decode("utf-16-le")
    if data.startswith(codecs.BOM_UTF16_BE):
        return data[len(codecs.BOM_UTF16_BE):].decode("utf-16-be")
    return data.decode("utf-8")


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def search_file(path: PathLike, regex: re.Pattern[str], context_lines: int) -> list[Match]:
    """Return every line of the file matching *regex*, with context lines around it.

    Raises OSError if the file cannot be read and UnicodeDecodeError if it is not text.
    """
    with open(path, "rb") as handle:
        lines = _split_lines(_decode(handle.read()))

    matches: list[Match] = []
    for index, line in enumerate(lines):
        if not regex.search(line):
            continue
        start = max(0, index - context_lines)
        end = min(index + context_lines + 1, len(lines))
        context = [
            ContextLine(number + 1, lines[number])
            for number in (*range(start, index), *range(index + 1, end))
        ]
        matches.append(Match(index + 1, line, context))
    return matches


def _walk_children(
    directory: str, depth: int, max_depth: int | None, pattern: re.Pattern[str]
) -> Iterator[tuple[str, bool, int | None]]:
    if max_depth is not None and depth > max_depth:
        return
    try:
        with os.scandir(directory) as iterator:
            children = sorted(iterator, key=lambda item: item.name)
    except OSError as exc:
        logger.warning("Error walking directory: %s", exc)
        return
    for child in children:
        try:
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if not should_process(child.path, is_dir, pattern):
            continue
        try:
            size: int | None = child.stat(follow_symlinks=False).st_size
        except OSError:
            size = None
        yield child.path, is_dir, size
        if is_dir:
            yield from _walk_children(child.path, depth + 1, max_depth, pattern)


def _walk(
    root: Path, recursive: bool, pattern: re.Pattern[str]
) -> Iterator[tuple[str, bool, int | None]]:
    """Yield (path, is_dir, size) depth-first, starting with the root itself."""
    yield str(root), True, None
    yield from _walk_children(str(root), 1, None if recursive else 1, pattern)


def _compile_search(pattern: str, is_regex: bool, case_sensitive: bool) -> re.Pattern[str]:
    flags = 0 if case_sensitive else re.IGNORECASE
    source = pattern if is_regex else re.escape(pattern)
    return re.compile(source, flags)


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """Search the files under ``root_path`` for ``pattern`` and report the matches."""
    root_str = require_str(args, "root_path")
    pattern = require_str(args, "pattern")
    is_regex = optional_bool(args, "regex", False)
    file_pattern = optional_str(args, "file_pattern", "*")
    recursive = optional_bool(args, "recursive", True)
    case_sensitive = optional_bool(args, "case_sensitive", False)
    max_results = optional_uint(args, "max_results", _DEFAULT_MAX_RESULTS)
    max_file_size = optional_uint(args, "max_file_size", _DEFAULT_MAX_FILE_SIZE)
    context_lines = optional_uint(args, "context_lines", 0)
    timeout_secs = optional_uint(args, "timeout_secs", _DEFAULT_TIMEOUT_SECS)
    logger.debug(
        "Searching for '%s' in path '%s', recursive: %s, pattern: %s",
        pattern,
        root_str,
        recursive,
        file_pattern,
    )

    try:
        validated = allowed_paths.validate_path(root_str)
    except OutsideAllowedPathsError:
        return ToolResult.error("Root path is outside of all allowed directories")
    except PathNotFoundError:
        return ToolResult.error(f"Root path not found: '{root_str}'")
    except PathIOError as exc:
        return ToolResult.error(f"IO error: {exc.error}")

    if not validated.is_dir():
        return ToolResult.error(f"Path is not a directory: '{root_str}'")

    try:
        glob = _compile_glob(file_pattern)
    except ValueError as exc:
        return ToolResult.error(f"Invalid file pattern: {exc}")

    try:
        regex = _compile_search(pattern, is_regex, case_sensitive)
    except re.error as exc:
        if is_regex:
            return ToolResult.error(f"Invalid regex pattern: {exc}")
        return ToolResult.error(f"Failed to create search pattern: {exc}")

    started = time.perf_counter()
    total_matches = 0
    files_searched = 0
    found: list[FileMatch] = []

    for entry_path, is_dir, size in _walk(validated, recursive, glob):
        if time.perf_counter() - started > timeout_secs:
            logger.debug("Search timed out after %d seconds", timeout_secs)
            break
        if is_dir:
            continue

        file_path = allowed_paths.closest_relative_path(entry_path)
        files_searched += 1

        if size is not None and size > max_file_size:
            logger.debug("Skipping large file: %s", file_path)
            continue

        try:
            text_like = is_text_file(entry_path)
        except OSError:
            logger.debug("Skipping file (failed to determine if text): %s", file_path)
            continue
        if not text_like:
            logger.debug("Skipping binary file: %s", file_path)
            continue

        try:
            matches = search_file(entry_path, regex, context_lines)
        except (OSError, ValueError) as exc:
            logger.warning("Error searching file %s: %s", file_path, exc)
            continue
        if not matches:
            continue

        total_matches += len(matches)
        found.append(FileMatch(file_path, matches))
        if total_matches >= max_results:
            logger.debug("Reached maximum number of results (%d)", max_results)
            break

    elapsed = time.perf_counter() - started
    files_matched = len(found)

    lines = [
        f"Search results for '{pattern}' in '{root_str}'\n",
        f"Results: {total_matches}/{files_matched} matches in "
        f"{files_matched}/{files_searched} files\n",
        f"Time: {elapsed:.2f} seconds\n",
    ]
    if total_matches > 0:
        lines.append("\nMatches:\n")
        for file_match in found:
            lines.append(f"\nFile: {file_match.file}\n")
            for match in file_match.matches:
                lines.append(f"  Line {match.line_number}: {match.line.strip()}\n")
                lines.extend(
                    f"    Line {ctx.line_number}: {ctx.content.strip()}\n"
                    for ctx in match.context
                    if ctx.line_number != match.line_number
                )
    else:
        lines.append("\nNo matches found.\n")

    if total_matches >= max_results:
        lines.append(f"\nNote: Maximum result limit reached ({max_results}).\n")
    if elapsed > timeout_secs:
        lines.append(f"\nNote: Search timed out after {timeout_secs} seconds.\n")

    return ToolResult.ok("".join(lines))