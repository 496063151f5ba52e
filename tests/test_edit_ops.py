import pytest

from fsgate.tools.edit_ops import (
    Delete,
    EditError,
    Insert,
    Replace,
    ReplaceLines,
    apply_operation,
    parse_operation,
)


def test_replace_operation():
    content = "Hello, world! Hello, again!"
    content = apply_operation(
        Replace(find="Hello", replace="Hi", occurrence=0, case_sensitive=True), content
    )
    assert content == "Hi, world! Hello, again!"

    content = apply_operation(
        Replace(find="world", replace="planet", occurrence=-1, case_sensitive=True),
        content,
    )
    assert content == "Hi, planet! Hello, again!"


def test_insert_operation():
    result = apply_operation(Insert(position=5, content=", beautiful"), "Hello world!")
    assert result == "Hello, beautiful world!"


def test_delete_operation():
    result = apply_operation(Delete(start=5, end=16), "Hello, beautiful world!")
    assert result == "Hello world!"


def test_replace_lines_operation():
    result = apply_operation(
        ReplaceLines(start_line=1, end_line=2, content="New Line 2\nNew Line 3"),
        "Line 1\nLine 2\nLine 3\nLine 4",
    )
    assert result == "Line 1\nNew Line 2\nNew Line 3\nLine 4"


def test_replace_second_occurrence():
    result = apply_operation(Replace(find="a", replace="X", occurrence=1), "a a a")
    assert result == "a X a"


def test_replace_all_case_sensitive_replaces_every_match():
    result = apply_operation(Replace(find="ab", replace="-", occurrence=-1), "abcabcab")
    assert result == "-c-c-"


def test_replace_missing_occurrence_raises():
    with pytest.raises(EditError, match="Occurrence 3 of 'Hello' not found"):
        apply_operation(Replace(find="Hello", replace="Hi", occurrence=3), "Hello")


def test_replace_all_missing_text_raises():
    with pytest.raises(EditError, match="not found in file"):
        apply_operation(Replace(find="zzz", replace="y", occurrence=-1), "abc")


def test_replace_empty_find_raises():
    with pytest.raises(EditError, match="Find string cannot be empty"):
        apply_operation(Replace(find="", replace="y"), "abc")


def test_replace_case_insensitive_all():
    result = apply_operation(
        Replace(find="hello", replace="hi", occurrence=-1, case_sensitive=False),
        "Hello hello HELLO",
    )
    assert result == "hi hi hi"


def test_replace_case_insensitive_single():
    result = apply_operation(
        Replace(find="hello", replace="hi", occurrence=1, case_sensitive=False),
        "Hello hello HELLO",
    )
    assert result == "Hello hi HELLO"


def test_replace_case_insensitive_not_found():
    with pytest.raises(EditError, match="Text 'xyz' not found in file"):
        apply_operation(
            Replace(find="xyz", replace="a", occurrence=0, case_sensitive=False), "ab"
        )


def test_insert_clamps_to_end():
    assert apply_operation(Insert(position=9999, content="!"), "abc") == "abc!"


def test_insert_at_start():
    assert apply_operation(Insert(position=0, content=">"), "abc") == ">abc"


def test_delete_clamps_end():
    assert apply_operation(Delete(start=2, end=100), "abcdef") == "ab"


def test_delete_start_beyond_end_raises():
    with pytest.raises(EditError, match="beyond the end of the file"):
        apply_operation(Delete(start=10, end=12), "abc")


def test_delete_start_not_before_end_raises():
    with pytest.raises(EditError, match="must be less than end position"):
        apply_operation(Delete(start=2, end=2), "abcdef")


def test_replace_lines_start_after_end_raises():
    with pytest.raises(EditError, match="must be less than or equal to end line"):
        apply_operation(ReplaceLines(start_line=3, end_line=1, content="x"), "a\nb")


def test_replace_lines_start_beyond_file_raises():
    with pytest.raises(EditError, match="line count: 2"):
        apply_operation(ReplaceLines(start_line=5, end_line=6, content="x"), "a\nb")


def test_replace_lines_clamps_end_line():
    result = apply_operation(
        ReplaceLines(start_line=2, end_line=10, content="X"),
        "Line 1\nLine 2\nLine 3",
    )
    assert result == "Line 1\nLine 2\nX"


def test_parse_replace_with_defaults():
    op = parse_operation({"type": "replace", "find": "a", "replace": "b"})
    assert op == Replace(find="a", replace="b", occurrence=0, case_sensitive=True)


def test_parse_each_variant():
    assert parse_operation({"type": "insert", "position": 3, "content": "x"}) == Insert(3, "x")
    assert parse_operation({"type": "delete", "start": 1, "end": 4}) == Delete(1, 4)
    assert parse_operation(
        {"type": "replace_lines", "start_line": 0, "end_line": 1, "content": "c"}
    ) == ReplaceLines(0, 1, "c")


def test_parse_missing_field_raises():
    with pytest.raises(EditError, match="missing field `find`"):
        parse_operation({"type": "replace", "replace": "b"})


def test_parse_unknown_variant_raises():
    with pytest.raises(EditError, match="unknown variant `shuffle`"):
        parse_operation({"type": "shuffle"})


def test_parse_negative_position_raises():
    with pytest.raises(EditError, match="position"):
        parse_operation({"type": "insert", "position": -1, "content": "x"})


def test_parse_non_mapping_raises():
    with pytest.raises(EditError):
        parse_operation(["replace"])