"""Tests for the shared data helpers."""

import os

import pytest

from compscripts_cli.core.data import (
    dump_json_array, find_highest_free_value, find_lowest_free_value,
    load_json_array, parse_range_str, touch_read,
)
from compscripts_cli.core.errors import CompscriptsError, RangeParseError
from compscripts_cli.core.tmp import edit_text, folder_lock


def test_range_with_repeats():
    assert parse_range_str("1..10,4,5") == [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 4, 5]


def test_range_ignores_spaces():
    assert parse_range_str(" 3 , 1 .. 2 ") == [3, 1, 2]


def test_single_element_range():
    assert parse_range_str("7..7") == [7]


def test_reversed_range_is_an_error():
    with pytest.raises(RangeParseError, match="smaller than first number"):
        parse_range_str("5..2")


@pytest.mark.parametrize("junk", ["a", "1,,2", "1..", "-3", ""])
def test_junk_is_an_error(junk):
    with pytest.raises(RangeParseError, match="Could not parse"):
        parse_range_str(junk)


def test_lowest_free_value_fills_gaps():
    assert find_lowest_free_value(set()) == 0
    assert find_lowest_free_value({0, 1, 3}) == 2
    assert find_lowest_free_value({1, 2}) == 0


def test_highest_free_value():
    assert find_highest_free_value(set()) == 0
    assert find_highest_free_value({0, 1, 3}) == 4


def test_blank_file_is_an_empty_array():
    assert load_json_array("") == []
    assert load_json_array(" \n\t ") == []


def test_non_array_is_rejected():
    with pytest.raises(ValueError, match="JSON array"):
        load_json_array('{"id": 1}')


def test_compact_dump_has_no_whitespace():
    assert dump_json_array([{"a": 1, "b": [2]}], pretty=False) == '[{"a":1,"b":[2]}]'


def test_touch_read_creates_missing_file(tmp_path):
    path = tmp_path / "nested" / "dir" / "tool"

    assert touch_read(path) == ""
    assert path.is_file()


def test_touch_read_rejects_directory(tmp_path):
    with pytest.raises(CompscriptsError, match="path is a directory"):
        touch_read(tmp_path)


def test_touch_read_rejects_file_parent(tmp_path):
    parent = tmp_path / "file"
    parent.write_text("x")

    with pytest.raises(CompscriptsError, match="is not a directory"):
        touch_read(parent / "tool")


def test_folder_lock_is_exclusive(tmp_path):
    with folder_lock("tool", tmp_path) as lock_dir:
        assert lock_dir.is_dir()
        with pytest.raises(CompscriptsError, match="already held"):
            with folder_lock("tool", tmp_path):
                pass

    assert not (tmp_path / "tool.lock").exists()


@pytest.fixture
def editor_script(tmp_path, monkeypatch):
    """An $EDITOR that records its argument, rewrites 'draft' and exits 4."""
    script = tmp_path / "fake-editor"
    script.write_text(
        "#!/bin/sh\n"
        f'echo "$1" > {tmp_path / "edited-path"}\n'
        "sed 's/draft/final/' \"$1\" > \"$1.new\" && mv \"$1.new\" \"$1\"\n"
        "exit 4\n"
    )
    script.chmod(0o755)
    monkeypatch.setenv("EDITOR", str(script))
    return script


def test_edit_text_round_trip(editor_script, tmp_path):
    text, code = edit_text("a draft\n", extension="md")

    assert (text, code) == ("a final\n", 4)
    edited = (tmp_path / "edited-path").read_text().strip()
    assert edited.endswith(".md")
    assert edited.startswith(str(tmp_path / "locks"))
    assert not os.path.exists(edited)


def test_edit_text_missing_editor(tmp_path, monkeypatch):
    monkeypatch.setenv("EDITOR", str(tmp_path / "no-such-editor"))

    with pytest.raises(CompscriptsError, match="failed to start process"):
        edit_text("text")
    assert list((tmp_path / "locks").iterdir()) == []
