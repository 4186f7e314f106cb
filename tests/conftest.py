"""Shared fixtures: every test runs with its own config, data and temp dirs."""

import tempfile

import pytest

from compscripts_cli.utils import console


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point configuration, data files and locks at the test's tmp_path."""
    monkeypatch.setenv("COMPSCRIPTS_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("COLUMNS", "400")
    for var in ("XDG_DATA_DIR", "BKMK_FILE", "ITMN_FILE", "TKMN_FILE",
                "EDITOR", "TERMINAL", "OPENER", "DESTDIR", "PROFILE"):
        monkeypatch.delenv(var, raising=False)

    lock_dir = tmp_path / "locks"
    lock_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(lock_dir))

    console._reset_console()
    yield tmp_path
    console._reset_console()


@pytest.fixture
def fake_editor(monkeypatch):
    """Replace the external editor round trip with a callable.

    The returned list collects every buffer handed to the editor. Set
    ``fake_editor.result`` to a function mapping the buffer to
    ``(edited_text, exit_code)``.
    """
    class FakeEditor(list):
        result = staticmethod(lambda text: (text, 0))

    editor = FakeEditor()

    def edit_text(text, extension=None):
        editor.append(text)
        return editor.result(text)

    monkeypatch.setattr("compscripts_cli.commands.itmn.edit_text", edit_text)
    monkeypatch.setattr("compscripts_cli.commands.bkmk.edit_text", edit_text)
    monkeypatch.setattr("compscripts_cli.commands.mass_rename.edit_text", edit_text)
    return editor
