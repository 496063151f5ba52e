# fsgate

`fsgate` is a library of filesystem tools in the shape used by Model Context
Protocol (MCP) tool calls. Each tool takes a dictionary of arguments and an
`AllowedPaths` object, and returns a `ToolResult` holding text and an error
flag. Every path a caller passes is resolved and checked against the allowed
directories; anything that resolves outside them is refused.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Allowed directories

`fsgate.paths.AllowedPaths` takes a list of directories. Each must exist; it
is resolved to its canonical path, and an empty list or a missing directory
raises `PathIOError`.

- `validate_path(path)` returns the canonical path when it lies inside an
  allowed directory. A path that does not exist yet is returned unchanged when
  its parent exists and is allowed. Otherwise it raises
  `OutsideAllowedPathsError`, `PathNotFoundError` or `PathIOError`, all
  subclasses of `PathError`.
- `is_path_allowed(path)` tells whether a canonical path is inside an allowed
  directory.
- `closest_relative_path(path)` expresses a path relative to the allowed
  directory that gives the fewest components.
- `all_paths()` lists the canonical allowed directories.

`is_text_file(path)` guesses whether a file holds text, from its extension
(`is_likely_binary_by_extension`) and from its first 8 KiB.

## Tools

Each module in `fsgate.tools` has a `schema()` function returning the JSON
schema of its arguments and an `execute(...)` function:

| Module | `execute` | What it does |
| --- | --- | --- |
| `listing` | `execute(args, allowed_paths)` | List one directory, directories first then by name, with an optional glob `pattern`; hidden and `.gitignore`d entries are left out unless `include_hidden` is true |
| `read` | `execute(args, allowed_paths, max_file_size)` | Read a file as text (whole, or a `start_line`..`end_line` range) or as base64; binary files are always given as base64 |
| `write` | `execute(args, allowed_paths)` | Write `utf8` or `base64` content in `create`, `overwrite`, `append` or `create_new` mode, reporting the result as JSON |
| `mkdir` | `execute(args, allowed_paths)` | Create a directory, with its parents by default |
| `delete` | `execute(args, allowed_paths)` | Delete a file, an empty directory, or with `recursive` a directory tree |
| `info` | `execute(args, allowed_paths)` | Report type, size, timestamps and permissions as JSON |
| `search` | `execute(args, allowed_paths)` | Search file contents for a literal or a regular expression (case-insensitive by default), with context lines |
| `allowed_dirs` | `execute(args, allowed_paths)` | List the allowed directories |

Failures such as a path outside the allowed directories, a missing file or a
failed operation come back as a `ToolResult` with `is_error` set. A missing
required argument raises `fsgate.results.ToolArgumentError`.
`ToolResult.to_dict()` gives the result in the wire shape of a tool call
response: `{"content": [{"type": "text", "text": ...}], "isError": ...}`.

```python
import tempfile
from pathlib import Path

from fsgate.paths import AllowedPaths, OutsideAllowedPathsError
from fsgate.tools import read, write

scratch = Path(tempfile.mkdtemp())
allowed = AllowedPaths([scratch])

try:
    allowed.validate_path("/etc/passwd")
except OutsideAllowedPathsError:
    print("refused")

write.execute({"path": str(scratch / "notes.txt"), "content": "draft\n"}, allowed)
result = read.execute({"path": str(scratch / "notes.txt")}, allowed, 10485760)
print(result.to_dict())
```

## Text edits

`fsgate.tools.edit_ops` holds the edit operations as data classes:
`Replace`, `Insert`, `Delete` and `ReplaceLines`. `parse_operation(data)`
builds one from its JSON form, tagged by its `type` field, and
`apply_operation(operation, content)` returns the edited string. Both raise
`EditError` when an operation is malformed or cannot be applied.

```python
from fsgate.tools.edit_ops import Insert, apply_operation

print(apply_operation(Insert(position=5, content=", beautiful"), "Hello world!"))
# Hello, beautiful world!
```

## What is not included

- There is no server and no command: nothing here reads MCP messages from
  standard input or registers the tools under names. An application that wants
  to serve these tools calls their `schema()` and `execute(...)` functions from
  its own message loop.
- There is no tool that edits a file in place. The edit operations work on
  strings; reading the file, applying them and writing it back is left to the
  caller (the `read` and `write` tools can do the file side).
- There are no tools for copying or moving files.