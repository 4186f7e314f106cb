"""Tests for the bookmark manager and the bkmk CLI."""

import json

import pytest
import requests
from click.testing import CliRunner

from compscripts_cli.bookmarks import Bookmark, BookmarkManager
from compscripts_cli.bookmarks.title import TitleFetchError, fetch_title
from compscripts_cli.commands import bkmk as bkmk_module
from compscripts_cli.commands.bkmk import bkmk
from compscripts_cli.core.errors import CompscriptsError, RepeatedIdError


def no_fetch(url):
    raise AssertionError("title fetch not expected")


def manager_with(*urls):
    return BookmarkManager(
        [Bookmark(id=i, name=f"site {i}", url=url) for i, url in enumerate(urls)],
        title_fetcher=no_fetch,
    )


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


def test_duplicate_url_with_trailing_slash():
    manager = manager_with("https://example.com/")

    assert manager.already_has_url("https://example.com") == 0
    assert manager.already_has_url("https://example.com/") == 0
    assert manager.already_has_url("https://example.org") is None


def test_add_rejects_repeated_url():
    manager = manager_with("https://example.com")

    with pytest.raises(CompscriptsError, match="Repeated url with bookmark #0"):
        manager.add_bookmark("again", "https://example.com/")


def test_add_uses_lowest_free_id():
    manager = BookmarkManager(
        [Bookmark(id=0, name="a", url="a"), Bookmark(id=2, name="c", url="c")],
        title_fetcher=no_fetch,
    )

    assert manager.add_bookmark("b", "b").id == 1
    assert manager.modified


def test_repeated_ids_are_rejected():
    with pytest.raises(RepeatedIdError):
        BookmarkManager([Bookmark(id=3, url="a"), Bookmark(id=3, url="b")])


def test_title_is_fetched_and_cleaned():
    manager = BookmarkManager([], title_fetcher=lambda url: "  Example\n Domain ")

    bookmark = manager.add_bookmark_from_url("https://example.com", interactive=False)

    assert bookmark.name == "Example Domain"


def test_failed_fetch_without_prompt_is_an_error():
    def failing(url):
        raise TitleFetchError("got server error code 503")

    manager = BookmarkManager([], title_fetcher=failing)

    with pytest.raises(CompscriptsError, match="failed to get title"):
        manager.add_bookmark_from_url("https://example.com", interactive=False)
    assert not manager.modified


def test_archive_hides_bookmark():
    manager = manager_with("a", "b")

    manager.archive(0)

    assert [b.id for b in manager.unarchived()] == [1]


def test_round_trip_through_json():
    manager = manager_with("https://example.com")
    manager.data[0].tags = ["web"]

    reloaded = BookmarkManager.from_json(manager.to_json())

    assert reloaded.data == manager.data
    assert reloaded.data[0].tags == ["web"]


def test_fetch_title_reads_first_title():
    session = FakeSession(FakeResponse(200, "<html><head><title>Hello</title></head></html>"))

    assert fetch_title("https://example.com", session=session) == "Hello"
    assert session.calls[0][1]["allow_redirects"] is False


@pytest.mark.parametrize("status, message", [
    (301, "redirection code 301"),
    (404, "client error code 404"),
    (502, "server error code 502"),
])
def test_fetch_title_status_errors(status, message):
    with pytest.raises(TitleFetchError, match=message):
        fetch_title("https://example.com", session=FakeSession(FakeResponse(status)))


def test_fetch_title_without_title_tag():
    session = FakeSession(FakeResponse(200, "<html><body>hi</body></html>"))

    with pytest.raises(TitleFetchError, match="Couldn't find any <title> tags"):
        fetch_title("https://example.com", session=session)


def test_fetch_title_closes_its_own_session(monkeypatch):
    session = FakeSession(FakeResponse(200, "<title>Own</title>"))
    monkeypatch.setattr(requests, "Session", lambda: session)

    assert fetch_title("https://example.com") == "Own"
    assert session.closed


def test_fetch_title_transport_error():
    session = FakeSession(requests.ConnectionError("refused"))

    with pytest.raises(TitleFetchError, match="Failed to download page"):
        fetch_title("https://example.com", session=session)


def test_cli_add_with_title(tmp_path):
    data_file = tmp_path / "bookmarks.json"

    result = CliRunner().invoke(bkmk, ["-p", str(data_file), "add", "https://example.com", "-t", "Example"], obj={})

    assert result.exit_code == 0, result.output
    assert json.loads(data_file.read_text()) == [
        {"id": 0, "archived": False, "name": "Example", "url": "https://example.com", "tags": []}
    ]


def test_cli_add_duplicate_fails(tmp_path):
    data_file = tmp_path / "bookmarks.json"
    runner = CliRunner()
    runner.invoke(bkmk, ["-p", str(data_file), "add", "https://example.com/", "-t", "One"], obj={})

    result = runner.invoke(bkmk, ["-p", str(data_file), "add", "https://example.com", "-t", "Two"], obj={})

    assert result.exit_code == 1
    assert "Error: Repeated url with bookmark #0" in result.output
    assert len(json.loads(data_file.read_text())) == 1


def test_cli_uses_env_file(tmp_path, monkeypatch):
    data_file = tmp_path / "from-env"
    monkeypatch.setenv("BKMK_FILE", str(data_file))

    result = CliRunner().invoke(bkmk, ["add", "https://example.com", "-t", "Example"], obj={})

    assert result.exit_code == 0
    assert data_file.exists()


def test_cli_reports_parse_failure(tmp_path):
    data_file = tmp_path / "bookmarks.json"
    data_file.write_text("{not json")

    result = CliRunner().invoke(bkmk, ["-p", str(data_file), "list"], obj={})

    assert result.exit_code == 1
    assert "Failed to parse file" in result.output


def test_cli_list(tmp_path):
    data_file = tmp_path / "bookmarks.json"
    data_file.write_text(json.dumps([
        {"id": 0, "archived": False, "name": "Kept", "url": "https://a.example", "tags": []},
        {"id": 1, "archived": True, "name": "Old", "url": "https://b.example", "tags": []},
    ]))

    result = CliRunner().invoke(bkmk, ["-p", str(data_file), "list"], obj={})

    assert result.exit_code == 0
    assert "Kept" in result.output
    assert "Old" not in result.output


def test_menu_archives_chosen_bookmark(tmp_path, monkeypatch):
    data_file = tmp_path / "bookmarks.json"
    data_file.write_text(json.dumps([
        {"id": 0, "archived": False, "name": "First", "url": "https://a.example", "tags": []},
        {"id": 1, "archived": False, "name": "Second", "url": "https://b.example", "tags": []},
    ]))
    answers = iter(["  1 Second (https://b.example)\n", "1 archive\n"])
    monkeypatch.setattr(bkmk_module, "fzagnostic", lambda prompt, choices, height: next(answers))

    result = CliRunner().invoke(bkmk, ["-p", str(data_file), "menu"], obj={})

    assert result.exit_code == 0, result.output
    saved = json.loads(data_file.read_text())
    assert [b["archived"] for b in saved] == [False, True]


def test_menu_edits_title(tmp_path, monkeypatch, fake_editor):
    data_file = tmp_path / "bookmarks.json"
    data_file.write_text(json.dumps([
        {"id": 0, "archived": False, "name": "Typo", "url": "https://a.example", "tags": []},
    ]))
    answers = iter(["  0 Typo (https://a.example)\n", "4 edit title\n"])
    monkeypatch.setattr(bkmk_module, "fzagnostic", lambda prompt, choices, height: next(answers))
    fake_editor.result = lambda text: ("Fixed\n", 0)

    result = CliRunner().invoke(bkmk, ["-p", str(data_file), "menu"], obj={})

    assert result.exit_code == 0, result.output
    assert fake_editor == ["Typo"]
    assert json.loads(data_file.read_text())[0]["name"] == "Fixed"
