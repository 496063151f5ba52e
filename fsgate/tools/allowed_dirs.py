"""Tool that reports the directories the server may access."""

from __future__ import annotations

from typing import Any

from fsgate.paths import AllowedPaths
from fsgate.results import ToolResult


def schema() -> dict[str, Any]:
    return {"type": "object", "properties": {}, "required": []}


def execute(args: Any, allowed_paths: AllowedPaths) -> ToolResult:
    """List every allowed directory, numbered from 1."""
    dirs = allowed_paths.all_paths()
    lines = [f"Allowed directories ({len(dirs)})\n\n"]
    lines.extend(f"{number}. {directory}\n" for number, directory in enumerate(dirs, 1))
    lines.append(
        "\nNote: All file and directory paths in requests must be specified as full paths. "
    )
    lines.append(
        "Paths must be within one of these allowed directories to be accessible.\n"
    )
    return ToolResult.ok("".join(lines))