from pathlib import Path

import pytest

from fsgate.paths import AllowedPaths
from fsgate.results import ToolArgumentError
from fsgate.tools.mkdir import execute, schema


@pytest.fixture
def root(tmp_path: Path) -> Path:
    base = tmp_path.resolve() / "root"
    base.mkdir()
    return base


@pytest.fixture
def allowed(root: Path) -> AllowedPaths:
    return AllowedPaths([root])


def test_schema_recursive_default_true():
    assert schema()["properties"]["recursive"]["default"] is True


def test_creates_single_directory(root, allowed):
    result = execute({"path": str(root / "sub")}, allowed)
    assert result.is_error is False
    assert (root / "sub").is_dir()
    assert result.text == "Directory created: 'sub'"


def test_creates_nested_directories(root, allowed):
    result = execute({"path": str(root / "a" / "b" / "c")}, allowed)
    assert result.is_error is False
    assert (root / "a" / "b" / "c").is_dir()
    assert result.text == f"Directory created: '{Path('a', 'b', 'c')}'"


def test_non_recursive_missing_parent_fails(root, allowed):
    result = execute({"path": str(root / "x" / "y"), "recursive": False}, allowed)
    assert result.is_error is True
    assert result.text.startswith("Failed to create directory:")
    assert not (root / "x").exists()


def test_existing_directory_is_not_an_error(root, allowed):
    (root / "sub").mkdir()
    result = execute({"path": str(root / "sub")}, allowed)
    assert result.is_error is False
    assert result.text == "Directory already exists: 'sub'"


def test_existing_file_is_an_error(root, allowed):
    target = root / "file.txt"
    target.write_text("data")
    result = execute({"path": str(target)}, allowed)
    assert result.is_error is True
    assert result.text == f"Path exists but is not a directory: '{target}'"


def test_outside_allowed(tmp_path, allowed):
    outside = tmp_path.resolve() / "elsewhere"
    result = execute({"path": str(outside)}, allowed)
    assert result.is_error is True
    assert result.text == "Path is outside of all allowed directories"
    assert not outside.exists()


def test_missing_path_raises(allowed):
    with pytest.raises(ToolArgumentError):
        execute({}, allowed)