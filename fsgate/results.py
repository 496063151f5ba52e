"""Tool call results and helpers for reading tool arguments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


class ToolArgumentError(ValueError):
    """A required tool argument is missing or has the wrong type."""


@dataclass(frozen=True)
class ToolResult:
    """Text outcome of a tool call, flagged as an error or not."""

    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=False)

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        """The result in the wire shape of a tool call response."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


def _get(args: Any, name: str) -> Any:
    if isinstance(args, Mapping):
        return args.get(name)
    return None


def require_str(args: Any, name: str) -> str:
    """Return the string argument *name*, raising ToolArgumentError if absent."""
    value = _get(args, name)
    if not isinstance(value, str):
        raise ToolArgumentError(f"Missing {name} parameter")
    return value


def optional_bool(args: Any, name: str, default: bool) -> bool:
    """Return the boolean argument *name*, or *default* if absent or not a boolean."""
    value = _get(args, name)
    return value if isinstance(value, bool) else default


def optional_str(args: Any, name: str, default: str) -> str:
    """Return the string argument *name*, or *default* if absent or not a string."""
    value = _get(args, name)
    return value if isinstance(value, str) else default


def optional_uint(args: Any, name: str, default: int | None) -> int | None:
    """Return the non-negative integer argument *name*, or *default* otherwise."""
    value = _get(args, name)
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default