"""Tests for the default editor helper."""

import os

import pytest
from click.testing import CliRunner

from compscripts_cli.commands.defaultedit import defaultedit
from compscripts_cli.core import editor
from compscripts_cli.core.editor import (
    EDITOR_CANDIDATES, NoEditorFoundError, build_command, launch, select_editor,
)


def make_executables(directory, *names):
    directory.mkdir(exist_ok=True)
    for name in names:
        tool = directory / name
        tool.write_text("#!/bin/sh\nexit 0\n")
        tool.chmod(0o755)
    return str(directory)


@pytest.fixture
def exec_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(os, "execvp", lambda file, args: calls.append((file, args)))
    return calls


def test_preference_order_beats_path_order(tmp_path):
    first = make_executables(tmp_path / "first", "nano")
    second = make_executables(tmp_path / "second", "vim")

    assert select_editor(path=os.pathsep.join([first, second])) == "vim"


def test_only_nano_available(tmp_path):
    path = make_executables(tmp_path / "bin", "nano")

    assert select_editor(path=path) == "nano"


def test_nothing_available(tmp_path):
    path = make_executables(tmp_path / "bin", "emacs")

    assert select_editor(path=path) is None


def test_candidates_are_fixed():
    assert EDITOR_CANDIDATES == ("nvim", "vim", "vi", "nano")


def test_interactive_command_runs_editor_directly():
    assert build_command("vim", ["a.txt", "+3"], interactive=True) == ["vim", "a.txt", "+3"]


def test_non_interactive_command_uses_terminal_env(monkeypatch):
    monkeypatch.setenv("TERMINAL", "alacritty")

    assert build_command("nvim", ["notes"], interactive=False) == ["alacritty", "-e", "nvim", "notes"]


def test_non_interactive_command_falls_back_to_configured_terminal():
    assert build_command("vi", [], interactive=False) == ["x-terminal-emulator", "-e", "vi"]


def test_launch_execs_selected_editor(tmp_path, monkeypatch, exec_calls):
    path = make_executables(tmp_path / "bin", "vi", "nano")
    monkeypatch.setattr(editor, "has_interactive_output", lambda: True)

    launch(["file.md"], path=path)

    assert exec_calls == [("vi", ["vi", "file.md"])]


def test_launch_without_tty_wraps_in_terminal(tmp_path, monkeypatch, exec_calls):
    path = make_executables(tmp_path / "bin", "nano")
    monkeypatch.setattr(editor, "has_interactive_output", lambda: False)
    monkeypatch.setenv("TERMINAL", "st")

    launch(["x"], path=path)

    assert exec_calls == [("st", ["st", "-e", "nano", "x"])]


def test_launch_without_editor_execs_nothing(tmp_path, exec_calls):
    path = make_executables(tmp_path / "bin")

    with pytest.raises(NoEditorFoundError, match="no suitable editor found"):
        launch([], path=path)
    assert exec_calls == []


def test_cli_reports_missing_editor(tmp_path, monkeypatch, exec_calls):
    monkeypatch.setenv("PATH", make_executables(tmp_path / "bin"))

    result = CliRunner().invoke(defaultedit, ["notes.txt"])

    assert result.exit_code == 1
    assert "no suitable editor found" in result.output
    assert exec_calls == []


def test_cli_forwards_option_like_arguments(tmp_path, monkeypatch, exec_calls):
    monkeypatch.setenv("PATH", make_executables(tmp_path / "bin", "nvim"))
    monkeypatch.setattr(editor, "has_interactive_output", lambda: True)

    result = CliRunner().invoke(defaultedit, ["-R", "--help", "file"])

    assert result.exit_code == 0
    assert exec_calls == [("nvim", ["nvim", "-R", "--help", "file"])]
