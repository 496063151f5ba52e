import pytest

from fsgate.results import (
    ToolArgumentError,
    ToolResult,
    optional_bool,
    optional_str,
    optional_uint,
    require_str,
)


def test_ok_and_error_flags():
    assert ToolResult.ok("fine").is_error is False
    assert ToolResult.error("bad").is_error is True
    assert ToolResult.ok("fine").text == "fine"


def test_to_dict_shape():
    result = ToolResult.error("oops")
    assert result.to_dict() == {
        "content": [{"type": "text", "text": "oops"}],
        "isError": True,
    }


def test_require_str_present():
    assert require_str({"path": "/tmp/x"}, "path") == "/tmp/x"


@pytest.mark.parametrize("args", [{}, {"path": 3}, {"path": None}, None, []])
def test_require_str_missing(args):
    with pytest.raises(ToolArgumentError) as info:
        require_str(args, "path")
    assert str(info.value) == "Missing path parameter"


def test_optional_bool():
    assert optional_bool({"recursive": True}, "recursive", False) is True
    assert optional_bool({"recursive": "yes"}, "recursive", False) is False
    assert optional_bool({}, "recursive", True) is True


def test_optional_str():
    assert optional_str({"encoding": "base64"}, "encoding", "utf8") == "base64"
    assert optional_str({"encoding": 5}, "encoding", "utf8") == "utf8"


@pytest.mark.parametrize(
    "value, expected",
    [(7, 7), (0, 0), (-1, 42), (True, 42), (2.0, 42), ("3", 42)],
)
def test_optional_uint(value, expected):
    assert optional_uint({"n": value}, "n", 42) == expected


def test_optional_uint_missing_default_none():
    assert optional_uint({}, "n", None) is None