"""Tests for the task manager and the tkmn CLI."""

import json

import pytest
from click.testing import CliRunner

from compscripts_cli.commands.tkmn import tkmn
from compscripts_cli.core.errors import RepeatedIdError
from compscripts_cli.tasks import Task, TaskManager


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([
        {"id": 0, "name": "write report", "context": "work", "state": False, "children": [
            {"id": 2, "name": "outline", "context": None, "state": True, "children": []},
        ]},
        {"id": 1, "name": "ideas", "context": None, "state": None, "children": []},
        {"id": 3, "name": "laundry", "context": None, "state": True, "children": []},
    ]))
    return path


@pytest.fixture
def run(data_file):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(tkmn, ["-p", str(data_file), *args], obj={})
    return invoke


def test_report_lines():
    task = Task(0, "write report", "work", False, [Task(2, "outline", None, True)])

    assert task.lines() == ["(0) TODO write report (work)", "  (2) DONE outline"]
    assert Task(1, "ideas", state=None).lines() == ["(1) NOTE ideas"]


def test_repeated_ids_in_subtasks_are_rejected():
    with pytest.raises(RepeatedIdError):
        TaskManager([Task(0, "a", children=[Task(0, "b")])])


def test_ids_fill_gaps():
    manager = TaskManager([Task(0, "a"), Task(2, "c")])

    assert manager.add_task("b") == 1
    assert manager.modified


def test_notes_cannot_be_completed():
    manager = TaskManager([Task(0, "a", state=None)])

    assert manager.complete(0) is False
    assert not manager.modified


def test_next_hides_completed(run):
    result = run()

    assert result.exit_code == 0, result.output
    assert result.output.startswith("Report: Next up\n(0) TODO write report (work)\n")
    assert "(1) NOTE ideas" in result.output
    assert "laundry" not in result.output


def test_list_shows_everything_on_the_surface(run):
    result = run("list")

    assert "Report: Full surface listing" in result.output
    assert "(3) DONE laundry" in result.output


def test_add_saves_compact_json(run, data_file):
    result = run("add", "dishes", "-c", "home")

    assert result.exit_code == 0, result.output
    assert data_file.read_text().endswith('{"id":4,"name":"dishes","context":"home","state":false,"children":[]}]')


def test_selection_of_subtasks(run):
    result = run("sel", "2")

    assert result.exit_code == 0
    assert "Report: Selection Listing\n(2) DONE outline\n" in result.output


def test_unknown_ids(run):
    result = run("sel", "1,7,9", "list")

    assert result.exit_code == 1
    assert "Could not find task with IDs [7, 9]" in result.output


def test_done_stops_at_notes(run, data_file):
    result = run("sel", "0,1", "done")

    assert result.exit_code == 1
    assert "Item @[ID:1] is a note and cannot be completed." in result.output
    assert json.loads(data_file.read_text())[0]["state"] is True


def test_sub_needs_one_task(run):
    result = run("sel", "0,1", "sub", "x")

    assert result.exit_code == 1
    assert "Exactly one task" in result.output


def test_sub_adds_child(run, data_file):
    result = run("sel", "0", "sub", "sources", "--note")

    assert result.exit_code == 0, result.output
    children = json.loads(data_file.read_text())[0]["children"]
    assert children[-1] == {"id": 4, "name": "sources", "context": None, "state": None, "children": []}


def test_mod_changes_type(run, data_file):
    result = run("sel", "1", "mod", "brainstorm", "--task")

    assert result.exit_code == 0, result.output
    ideas = json.loads(data_file.read_text())[1]
    assert (ideas["name"], ideas["state"]) == ("brainstorm", False)


def test_listing_does_not_rewrite_file(run, data_file):
    before = data_file.read_text()

    run("list")

    assert data_file.read_text() == before
