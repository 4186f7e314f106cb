"""itmn: a hierarchical item (task and note) manager."""

import sys
from typing import List

import click

from ..config import resolve_data_file
from ..core.data import parse_range_str
from ..core.errors import CompscriptsError, RangeParseError, RepeatedIdError
from ..core.prompt import confirm_with_default
from ..core.tmp import edit_text, folder_lock
from ..items import (
    BasicReport, FlatReport, ItemChanges, ItemManager, ItemState, NewOwner,
    OwnerKind, ProgramResult, ReportDepth, not_done,
)
from ..utils.console import _rich_echo, _rich_info, _rich_success, _rich_warning
from ._common import AliasedGroup, handle_cli_errors, parse_failure, read_data_file, version_option

LOCK_NAME = "itmn"

report = BasicReport()
flat_report = FlatReport()


def _open_manager(ctx) -> ItemManager:
    """Lock the database for the rest of the run and load it."""
    root = ctx.find_root()
    if 'manager' in root.obj:
        return root.obj['manager']

    root.with_resource(folder_lock(LOCK_NAME))

    path = resolve_data_file("itmn", "ITMN_FILE", root.obj.get('path'))
    contents = read_data_file(path)
    try:
        manager = ItemManager.from_json(contents)
    except RepeatedIdError:
        raise
    except (ValueError, TypeError) as e:
        raise parse_failure(e)

    root.obj['resolved_path'] = path
    root.obj['manager'] = manager
    return manager


def _finish(ctx, manager: ItemManager, result: ProgramResult):
    if result.should_save:
        try:
            manager.save(ctx.find_root().obj['resolved_path'])
        except OSError as e:
            raise CompscriptsError(f"failed to save to file: {e}")
    if result.exit_status != 0:
        sys.exit(result.exit_status)


def _state_for(note) -> ItemState:
    return ItemState.NOTE if note else ItemState.TODO


@click.group(cls=AliasedGroup, invoke_without_command=True,
             help="Manage a tree of tasks and notes (defaults to `list`)")
@version_option("itmn")
@click.option('-p', '--path', default=None,
              help="The path to the entries file (default: $ITMN_FILE => ~/.local/share/itmn)")
@click.pass_context
def itmn(ctx, path):
    """Item manager entry point."""
    ctx.ensure_object(dict)
    ctx.obj['path'] = path
    if ctx.invoked_subcommand is None:
        ctx.invoke(list_items)


@itmn.command(name="list", aliases=["ls"], help="Tree of all pending surface items")
@click.pass_context
def list_items(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        report.report("All items (surface)", manager.surface_items(), ReportDepth.TREE, not_done)
        _finish(ctx, manager, ProgramResult(should_save=False))


@itmn.command(name="next", help="Brief listing of pending surface items")
@click.pass_context
def next_items(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        report.report("Next", manager.surface_items(), ReportDepth.BRIEF, not_done)
        _finish(ctx, manager, ProgramResult(should_save=False))


@itmn.command(name="flat-list", aliases=["flatlist", "fl"], help="List all visible items, prepended by the ID")
@click.pass_context
def flat_list(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        flat_report.report("All items (flat report)", manager.surface_items(), ReportDepth.TREE, not_done)
        _finish(ctx, manager, ProgramResult(should_save=False))


@itmn.command(name="add", help="Add an item")
@click.argument('name')
@click.option('-c', '--context', default="", help="The context of the item")
@click.option('-n/-t', '--note/--task', 'note', default=False, help="Whether the item is a note")
@click.option('-d', '--description', default="", help="The description of the item")
@click.pass_context
def add_item(ctx, name, context, note, description):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ref_id = manager.add_item_on_root(name, context, _state_for(note), description)
        _rich_success(f"Item Added! | RefID: {ref_id}")
        _finish(ctx, manager, ProgramResult(should_save=True))


# --- selection -------------------------------------------------------------

def _selection(ctx, manager: ItemManager) -> List[int]:
    """Parse the selection range and make sure every id exists."""
    try:
        ids = parse_range_str(ctx.obj['selection'])
    except RangeParseError as e:
        raise CompscriptsError(f"failed to parse range: {e}")

    if not ids:
        raise CompscriptsError("no selection was specified")

    missing = manager.first_invalid_ref_id(ids)
    if missing is not None:
        raise CompscriptsError(f"there's at least one invalid ID (#{missing}) on the selection")
    return ids


def _declined() -> ProgramResult:
    return ProgramResult(should_save=False, exit_status=1)


def _require_single(ids: List[int]):
    if len(ids) != 1:
        raise CompscriptsError("The selection should have exactly one item.")


@itmn.group(name="sel-ref-id", cls=AliasedGroup, aliases=["s", "sel", "sri"], invoke_without_command=True,
            help="Select items by reference ID and do something with them (defaults to list-tree)")
@click.argument('selection')
@click.pass_context
def sel_ref_id(ctx, selection):
    """SELECTION is a comma separated list of ids and inclusive ranges, e.g. 1..4,7."""
    ctx.obj['selection'] = selection
    if ctx.invoked_subcommand is None:
        ctx.invoke(list_tree)


def _listing(title: str, depth: ReportDepth):
    @click.pass_context
    def listing(ctx):
        with handle_cli_errors():
            manager = _open_manager(ctx)
            ids = _selection(ctx, manager)
            report.report(title, [manager.get(i) for i in ids], depth)
            _finish(ctx, manager, ProgramResult(should_save=False))
    return listing


list_tree = sel_ref_id.command(name="list-tree", aliases=["tree"], help="List selection in a tree")(
    _listing("Tree listing", ReportDepth.TREE))
sel_ref_id.command(name="list-brief", aliases=["l", "ls", "list"],
                   help="List selection, showing only the first child of each, if any")(
    _listing("Brief listing", ReportDepth.BRIEF))
sel_ref_id.command(name="list-shallow", help="List selection without showing any children")(
    _listing("Shallow listing", ReportDepth.SHALLOW))


@sel_ref_id.command(name="modify", aliases=["mod"], help="Modify the matches")
@click.argument('name', required=False)
@click.option('-c', '--context', default=None, help="The new context; an empty string unsets it")
@click.option('-n/-t', '--note/--task', 'note', default=None, help="The item's new type")
@click.pass_context
def modify(ctx, name, context, note):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        changes = ItemChanges(name=name, context=context, note=note)

        report.report("Items to be modified", [manager.get(i) for i in ids], ReportDepth.SHALLOW)
        click.echo(err=True)

        descriptions = changes.describe()
        if not descriptions:
            _rich_info("No changes were specified")
            _finish(ctx, manager, ProgramResult(should_save=False))
            return

        _rich_echo("Changes to be made:")
        for description in descriptions:
            _rich_echo(f" * {description}")

        if not confirm_with_default(True):
            _finish(ctx, manager, _declined())
            return

        for i in ids:
            changes.apply(manager.get(i))
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="edit-name", aliases=["et", "en", "edit-title"],
                    help="Edit the matches' names (one per line)")
@click.pass_context
def edit_name(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        names = "\n".join(manager.get(i).name for i in ids)

        try:
            edited, code = edit_text(names, "txt")
        except CompscriptsError as e:
            raise CompscriptsError(f"failed to edit text: {e}")
        if code != 0:
            raise CompscriptsError(f"non-zero exit code: {code}")

        lines = [line for line in edited.split("\n") if line]
        if len(lines) != len(ids):
            raise CompscriptsError(
                f"Incompatible amount of lines: {len(ids)} (selection size) and {len(lines)} (amount after editing)"
            )

        for i, new_name in zip(ids, lines):
            manager.get(i).set_name(new_name)
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="add", aliases=["ac"], help="Add a child to each one of the matches")
@click.argument('name')
@click.option('-c', '--context', default="", help="The context of the item")
@click.option('-n/-t', '--note/--task', 'note', default=False, help="Whether the item is a note")
@click.option('-d', '--description', default="", help="The description of the item")
@click.pass_context
def add_child(ctx, name, context, note, description):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)

        if len(ids) > 1:
            _rich_warning("More than one item was selected. All of them will receive new identical children copies.")
            if not confirm_with_default(False):
                _finish(ctx, manager, _declined())
                return

        _rich_echo("Adding items:")
        for parent in ids:
            ref_id = manager.add_child(parent, name, context, _state_for(note), description)
            _rich_echo(f"* RefID: {ref_id}")
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="done", help="Mark the items on the selection as DONE, if their states are TODO")
@click.pass_context
def done(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        items = [manager.get(i) for i in ids]

        report.report("Items to be marked as done", items, ReportDepth.TREE)
        if not confirm_with_default(True):
            _finish(ctx, manager, _declined())
            return

        for i in ids:
            if manager.find(i) is not None:
                manager.change_state(i, lambda s: ItemState.DONE if s == ItemState.TODO else s)
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="delete", aliases=["del", "rm", "remove"], help="Delete selected items")
@click.option('-f', '--force', is_flag=True, help="Skip warning/confirmation messages (unsafe)")
@click.pass_context
def delete(ctx, force):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)

        if not force:
            report.report("Items to be deleted", [manager.get(i) for i in ids], ReportDepth.TREE)
            if not confirm_with_default(True):
                _finish(ctx, manager, _declined())
                return

        manager.delete(ids)
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="swap", help="Swap two items")
@click.option('-f', '--force', is_flag=True, help="Skip warning/confirmation messages (unsafe)")
@click.pass_context
def swap(ctx, force):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        if len(ids) != 2:
            raise CompscriptsError(f"the amount of arguments should be exactly two (instead of {len(ids)})")

        if not force:
            report.report("Items to be swapped", [manager.get(i) for i in ids], ReportDepth.BRIEF)
            _rich_echo("Each item will keep their children.")
            if not confirm_with_default(True):
                _finish(ctx, manager, _declined())
                return

        try:
            manager.swap(ids[0], ids[1])
        except CompscriptsError as e:
            raise CompscriptsError(f"item swap failed: {e}")
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="change-ownership", aliases=["chown"], help="Change ownership of the selected item(s)")
@click.argument('new_owner')
@click.pass_context
def change_ownership(ctx, new_owner):
    """NEW_OWNER is .ROOT, a reference ID, or an internal ID prefixed by i."""
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = list(dict.fromkeys(_selection(ctx, manager)))

        report.report("Items to be moved", [manager.get(i) for i in ids], ReportDepth.SHALLOW)

        try:
            owner = NewOwner.parse(new_owner)
        except CompscriptsError as e:
            raise CompscriptsError(f"failed to parse new-owner argument: {e}")

        click.echo(err=True)
        owner_item = manager.resolve_owner(owner)
        if owner_item is None:
            _rich_echo("New owner: ROOT")
        elif owner.kind == OwnerKind.INTERNAL:
            _rich_echo(f"New owner: {owner_item.name!r} (I#{owner_item.internal_id})")
        else:
            _rich_echo(f"New owner: {owner_item.name!r} (R#{owner_item.ref_id})")

        manager.validate_ownership_change(ids, owner_item)
        _rich_echo("Each item will keep its children.")

        if not confirm_with_default(True):
            _finish(ctx, manager, _declined())
            return

        manager.change_ownership(ids, owner)
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="edit-description", aliases=["ed", "edesc"], help="Edit the description of an item")
@click.pass_context
def edit_description(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        _require_single(ids)
        item = manager.get(ids[0])

        try:
            new_description, code = edit_text(item.description, "md")
        except CompscriptsError as e:
            raise CompscriptsError(f"failed to edit text: {e}")
        if code != 0:
            raise CompscriptsError(f"non-zero exit code: {code}")

        item.description = new_description
        _finish(ctx, manager, ProgramResult(should_save=True))


@sel_ref_id.command(name="print-description", aliases=["d", "desc"], help="Print the description of an item")
@click.pass_context
def print_description(ctx):
    with handle_cli_errors():
        manager = _open_manager(ctx)
        ids = _selection(ctx, manager)
        _require_single(ids)

        description = manager.get(ids[0]).description
        click.echo(description, nl=not description.endswith("\n"))
        _finish(ctx, manager, ProgramResult(should_save=False))


def main():
    itmn(obj={})


if __name__ == "__main__":
    main()
