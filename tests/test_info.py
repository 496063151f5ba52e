import json

import pytest

from fsgate.paths import AllowedPaths
from fsgate.results import ToolArgumentError
from fsgate.tools import info


@pytest.fixture
def root(tmp_path):
    base = tmp_path / "root"
    base.mkdir()
    return base.resolve()


def test_file_info(root):
    target = root / "hello.txt"
    target.write_text("Hello, world!")
    result = info.execute({"path": str(target)}, AllowedPaths([root]))
    assert result.is_error is False
    data = json.loads(result.text)
    assert data["type"] == "file"
    assert data["name"] == "hello.txt"
    assert data["path"] == "hello.txt"
    assert data["size"] == len("Hello, world!")
    assert data["exists"] is True
    assert data["is_hidden"] is False
    assert data["permissions"]["writable"] is True
    assert data["permissions"]["readable"] is False
    assert data["permissions"]["executable"] is False
    assert data["modified"].endswith("+00:00")


def test_directory_info(root):
    sub = root / "sub"
    sub.mkdir()
    (sub / "f.txt").write_text("abc")
    data = json.loads(info.execute({"path": str(sub)}, AllowedPaths([root])).text)
    assert data["type"] == "directory"
    assert data["size"] == 0


def test_hidden_file(root):
    target = root / ".secretive"
    target.write_text("x")
    data = json.loads(info.execute({"path": str(target)}, AllowedPaths([root])).text)
    assert data["is_hidden"] is True


def test_keys_sorted(root):
    target = root / "a.txt"
    target.write_text("x")
    text = info.execute({"path": str(target)}, AllowedPaths([root])).text
    keys = list(json.loads(text).keys())
    assert keys == sorted(keys)


def test_outside_path(root, tmp_path):
    other = tmp_path / "other.txt"
    other.write_text("x")
    result = info.execute({"path": str(other)}, AllowedPaths([root]))
    assert result.is_error is True
    assert result.text == "Path is outside of all allowed directories"


def test_missing_parent_not_found(root):
    path = str(root / "nope" / "x.txt")
    result = info.execute({"path": path}, AllowedPaths([root]))
    assert result.is_error is True
    assert result.text == f"Path not found: '{path}'"


def test_nonexistent_with_existing_parent(root):
    path = str(root / "x.txt")
    result = info.execute({"path": path}, AllowedPaths([root]))
    assert result.is_error is True
    assert result.text == f"Path does not exist: '{path}'"


def test_missing_argument(root):
    with pytest.raises(ToolArgumentError):
        info.execute({}, AllowedPaths([root]))


def test_to_iso8601_epoch():
    assert info.to_iso8601(0) == "1970-01-01T00:00:00+00:00"


def test_to_iso8601_fraction_trimmed():
    assert info.to_iso8601(1.5) == "1970-01-01T00:00:01.500+00:00"


def test_schema_requires_path():
    assert info.schema()["required"] == ["path"]