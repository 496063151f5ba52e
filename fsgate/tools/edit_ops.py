"""Edit operations applied to the text of a file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_VARIANTS = ("replace", "insert", "delete", "replace_lines")


class EditError(ValueError):
    """An edit operation is malformed or cannot be applied to the content."""


@dataclass(frozen=True)
class Replace:
    """Replace one occurrence (0-based) or every occurrence (-1) of a string."""

    find: str
    replace: str
    occurrence: int = 0
    case_sensitive: bool = True


@dataclass(frozen=True)
class Insert:
    """Insert text at a character position, clamped to the end of the content."""

    position: int
    content: str


@dataclass(frozen=True)
class Delete:
    """Delete the characters from ``start`` (inclusive) to ``end`` (exclusive)."""

    start: int
    end: int


@dataclass(frozen=True)
class ReplaceLines:
    """Replace lines ``start_line`` to ``end_line`` (0-based, inclusive)."""

    start_line: int
    end_line: int
    content: str


EditOperation = Union[Replace, Insert, Delete, ReplaceLines]


def _field(data: Mapping[str, Any], name: str) -> Any:
    if name not in data:
        raise EditError(f"missing field `{name}`")
    return data[name]


def _string(data: Mapping[str, Any], name: str) -> str:
    value = _field(data, name)
    if not isinstance(value, str):
        raise EditError(f"invalid type for field `{name}`: expected a string")
    return value


def _index(data: Mapping[str, Any], name: str) -> int:
    value = _field(data, name)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise EditError(
            f"invalid value for field `{name}`: expected a non-negative integer"
        )
    return value


def _occurrence(data: Mapping[str, Any]) -> int:
    value = data.get("occurrence", 0)
    if (
        not isinstance(value, int)
        or isinstance(value, bool)
        or not _I32_MIN <= value <= _I32_MAX
    ):
        raise EditError("invalid value for field `occurrence`: expected i32")
    return value


def _case_sensitive(data: Mapping[str, Any]) -> bool:
    value = data.get("case_sensitive", True)
    if not isinstance(value, bool):
        raise EditError("invalid type for field `case_sensitive`: expected a boolean")
    return value


def parse_operation(data: Any) -> EditOperation:
    """Build an operation from its JSON form, tagged by its ``type`` field."""
    if not isinstance(data, Mapping):
        raise EditError("invalid type: expected internally tagged enum EditOperation")
    kind = _field(data, "type")
    if kind == "replace":
        return Replace(
            find=_string(data, "find"),
            replace=_string(data, "replace"),
            occurrence=_occurrence(data),
            case_sensitive=_case_sensitive(data),
        )
    if kind == "insert":
        return Insert(position=_index(data, "position"), content=_string(data, "content"))
    if kind == "delete":
        return Delete(start=_index(data, "start"), end=_index(data, "end"))
    if kind == "replace_lines":
        return ReplaceLines(
            start_line=_index(data, "start_line"),
            end_line=_index(data, "end_line"),
            content=_string(data, "content"),
        )
    expected = ", ".join(f"`{name}`" for name in _VARIANTS)
    raise EditError(f"unknown variant `{kind}`, expected one of {expected}")


def _replace_insensitive(op: Replace, content: str) -> tuple[str, int]:
    width = len(op.find)
    target = op.find.lower()
    positions: list[int] = []
    i = 0
    while i + width <= len(content):
        if content[i : i + width].lower() == target:
            positions.append(i)
            i += width
        else:
            i += 1

    pieces: list[str] = []
    last_end = 0
    replaced = 0
    for index, position in enumerate(positions):
        if op.occurrence == -1 or index == op.occurrence:
            pieces.append(content[last_end:position])
            pieces.append(op.replace)
            last_end = position + width
            replaced += 1
            if op.occurrence != -1:
                break
    pieces.append(content[last_end:])
    return "".join(pieces), replaced


def _replace_sensitive(op: Replace, content: str) -> str:
    if op.occurrence == -1:
        if op.find not in content:
            raise EditError(f"Text '{op.find}' not found in file")
        return content.replace(op.find, op.replace)

    if op.occurrence >= 0:
        start = 0
        for _ in range(op.occurrence + 1):
            position = content.find(op.find, start)
            if position == -1:
                break
            if _ == op.occurrence:
                return content[:position] + op.replace + content[position + len(op.find) :]
            start = position + len(op.find)
    raise EditError(f"Occurrence {op.occurrence} of '{op.find}' not found")


def _apply_replace(op: Replace, content: str) -> str:
    if not op.find:
        raise EditError("Find string cannot be empty")
    if op.case_sensitive:
        return _replace_sensitive(op, content)
    result, replaced = _replace_insensitive(op, content)
    if replaced == 0:
        raise EditError(f"Text '{op.find}' not found in file")
    return result


def _apply_insert(op: Insert, content: str) -> str:
    position = min(op.position, len(content))
    return content[:position] + op.content + content[position:]


def _apply_delete(op: Delete, content: str) -> str:
    length = len(content)
    if op.start >= length:
        raise EditError(
            f"Delete start position {op.start} is beyond the end of the file (length: {length})"
        )
    end = min(op.end, length)
    if op.start >= end:
        raise EditError(
            f"Delete start position {op.start} must be less than end position {end}"
        )
    return content[: op.start] + content[end:]


def _split_lines(content: str) -> list[str]:
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _apply_replace_lines(op: ReplaceLines, content: str) -> str:
    if op.start_line > op.end_line:
        raise EditError(
            f"Start line {op.start_line} must be less than or equal to end line {op.end_line}"
        )
    lines = _split_lines(content)
    count = len(lines)
    if op.start_line >= count:
        raise EditError(
            f"Start line {op.start_line} is beyond the end of the file (line count: {count})"
        )
    end = min(op.end_line, count - 1)

    parts = [f"{line}\n" for line in lines[: op.start_line]]
    parts.append(op.content)
    if not op.content.endswith("\n") and end < count - 1:
        parts.append("\n")
    parts.append("\n".join(lines[end + 1 :]))
    result = "".join(parts)

    if not content.endswith("\n") and end == count - 1 and result.endswith("\n"):
        result = result[:-1]
    return result


def apply_operation(operation: EditOperation, content: str) -> str:
    """Return *content* with *operation* applied; raise EditError if it cannot be."""
    if isinstance(operation, Replace):
        return _apply_replace(operation, content)
    if isinstance(operation, Insert):
        return _apply_insert(operation, content)
    if isinstance(operation, Delete):
        return _apply_delete(operation, content)
    if isinstance(operation, ReplaceLines):
        return _apply_replace_lines(operation, content)
    raise EditError(f"Unknown edit operation: {operation!r}")