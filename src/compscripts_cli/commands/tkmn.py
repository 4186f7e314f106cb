"""tkmn: a flat task manager."""

import sys

import click

from ..config import resolve_data_file
from ..core.data import parse_range_str
from ..core.errors import CompscriptsError, RangeParseError, RepeatedIdError
from ..tasks import TaskManager
from ..utils.console import _rich_error, _rich_success
from ._common import handle_cli_errors, parse_failure, read_data_file, version_option


def _open_manager(ctx) -> TaskManager:
    root = ctx.find_root()
    path = resolve_data_file("tkmn", "TKMN_FILE", root.obj.get('path'))
    root.obj['resolved_path'] = path
    contents = read_data_file(path)
    try:
        return TaskManager.from_json(contents)
    except RepeatedIdError:
        raise
    except (ValueError, TypeError) as e:
        raise parse_failure(e)


def _save(ctx, manager: TaskManager):
    try:
        manager.save_if_modified(ctx.find_root().obj['resolved_path'])
    except OSError as e:
        raise CompscriptsError(f"Failed to save to file: {e}")


def _selection(ctx, manager: TaskManager):
    try:
        ids = parse_range_str(ctx.obj['selection'])
    except RangeParseError as e:
        raise CompscriptsError(f"Failed to parse range: {e}")
    if not ids:
        raise CompscriptsError("No selection was specified.")

    invalid = manager.find_invalid_ids(ids)
    if invalid:
        raise CompscriptsError(f"Could not find task with IDs {invalid}")
    return ids


def _task_options(f):
    f = click.option('-n/-t', '--note/--task', 'note', default=None, help="If the task is a note")(f)
    f = click.option('-c', '--context', default=None, help="The context of the task")(f)
    return f


@click.group(invoke_without_command=True, help='Manage a list of tasks; defaults to "next"')
@version_option("tkmn")
@click.option('-p', '--path', default=None,
              help="The path to the tasks file (default: $TKMN_FILE -> ~/.local/share/tkmn)")
@click.pass_context
def tkmn(ctx, path):
    """Task manager entry point."""
    ctx.ensure_object(dict)
    ctx.obj['path'] = path
    if ctx.invoked_subcommand is None:
        ctx.invoke(next_tasks)


@tkmn.command(help="Add a task")
@click.argument('name')
@_task_options
@click.pass_context
def add(ctx, name, context, note):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        manager.add_task(name, context, bool(note))
        _rich_success("Task added.")
        _save(ctx, manager)


@tkmn.command(name="list", help="List all active tasks in a tree format")
@click.pass_context
def list_tasks(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        manager.report("Full surface listing", manager.surface_ids())


@tkmn.command(name="next", help="List next tasks")
@click.pass_context
def next_tasks(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        manager.report("Next up", manager.next_ids())


@tkmn.group(invoke_without_command=True, help="Select a task and do something with it; defaults to list")
@click.argument('selection')
@click.pass_context
def sel(ctx, selection):
    ctx.obj['selection'] = selection
    if ctx.invoked_subcommand is None:
        ctx.invoke(sel_list)


@sel.command(name="list", help="List all matches")
@click.pass_context
def sel_list(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        manager.report("Selection Listing", _selection(ctx, manager))


@sel.command(help="Add a subtask; only works if exactly one task is selected")
@click.argument('name')
@_task_options
@click.pass_context
def sub(ctx, name, context, note):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        if len(ids) != 1:
            raise CompscriptsError("Exactly one task has to be selected to add a subtask.")
        manager.add_subtask(ids[0], name, context, bool(note))
        _rich_success("Subtask added.")
        _save(ctx, manager)


@sel.command(help="Modify the selected tasks")
@click.argument('name', required=False)
@_task_options
@click.pass_context
def mod(ctx, name, context, note):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        if name is None and context is None and note is None:
            raise CompscriptsError("No changes were specified.")
        for task_id in ids:
            manager.modify(task_id, name, context, note)
        _save(ctx, manager)


@sel.command(help="Mark the selected tasks as completed")
@click.pass_context
def done(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        status = 0
        for task_id in ids:
            if not manager.complete(task_id):
                _rich_error(f"Item @[ID:{task_id}] is a note and cannot be completed.")
                status = 1
                break
        _save(ctx, manager)
        if status:
            sys.exit(status)


def main():
    tkmn(obj={})


if __name__ == "__main__":
    main()
