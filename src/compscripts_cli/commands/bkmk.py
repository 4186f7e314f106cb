"""bkmk: a small bookmark manager."""

import subprocess
from pathlib import Path

import click

from ..bookmarks import BookmarkManager
from ..config import get_default_opener, resolve_data_file
from ..core.errors import CompscriptsError, RepeatedIdError, SilentError
from ..core.prompt import fzagnostic
from ..core.tmp import edit_text
from ..utils.console import _create_table, _print_table, _rich_info, _rich_success
from ._common import handle_cli_errors, parse_failure, read_data_file, version_option

MENU_HEIGHT = 30


def _open_manager(ctx) -> BookmarkManager:
    path = resolve_data_file("bkmk", "BKMK_FILE", ctx.obj.get('path'))
    ctx.obj['resolved_path'] = path
    contents = read_data_file(path)
    try:
        return BookmarkManager.from_json(contents)
    except RepeatedIdError:
        raise
    except (ValueError, TypeError) as e:
        raise parse_failure(e)


def _save(ctx, manager: BookmarkManager):
    try:
        manager.save_if_modified(ctx.obj['resolved_path'])
    except OSError as e:
        raise CompscriptsError(f"Failed to save changes to file: {e}")


@click.group(help="Manage a list of bookmarks")
@version_option("bkmk")
@click.option('-p', '--path', default=None,
              help="The path to the bookmarks file (default: $BKMK_FILE -> ~/.local/share/bkmk)")
@click.pass_context
def bkmk(ctx, path):
    """Bookmark manager entry point."""
    ctx.ensure_object(dict)
    ctx.obj['path'] = path


@bkmk.command(help="Adds an URL to the bookmarks list")
@click.argument('url')
@click.option('-t', '--title', default=None, help="The title of the bookmark")
@click.pass_context
def add(ctx, url, title):
    """Add one bookmark, fetching its title unless given."""
    with handle_cli_errors():
        manager = _open_manager(ctx)
        if title is not None:
            manager.add_bookmark(title, url, [])
        else:
            manager.add_bookmark_from_url(url, interactive=True)
        _save(ctx, manager)


@bkmk.command(name="add-from-file", help="Adds the URLs from a newline-delimited bookmarks list file")
@click.argument('file')
@click.pass_context
def add_from_file(ctx, file):
    """Add every URL listed in FILE, stopping at the first failure."""
    with handle_cli_errors():
        manager = _open_manager(ctx)
        try:
            contents = Path(file).read_text(encoding="utf-8")
        except OSError as e:
            raise CompscriptsError(f"failed to read file: {e}")

        for url in (line.strip() for line in contents.split("\n")):
            if url:
                manager.add_bookmark_from_url(url, interactive=True)
        _save(ctx, manager)


@bkmk.command(name="list", help="Lists bookmarks in a table")
@click.option('-a', '--all', 'show_all', is_flag=True, help="Include archived bookmarks")
@click.pass_context
def list_bookmarks(ctx, show_all):
    """Show bookmarks on standard output."""
    with handle_cli_errors():
        manager = _open_manager(ctx)
        bookmarks = sorted(manager.data if show_all else manager.unarchived())
        if not bookmarks:
            _rich_info("No bookmarks to show")
            return

        columns = [("ID", "cyan"), ("Name", "bold white"), ("URL", "blue"), ("Tags", "magenta")]
        if show_all:
            columns.append(("Archived", "yellow"))

        rows = []
        for b in bookmarks:
            row = [b.id, b.name, b.url, ", ".join(b.tags)]
            if show_all:
                row.append("yes" if b.archived else "")
            rows.append(row)

        _print_table(_create_table(f"Bookmarks ({len(bookmarks)})", columns, rows))


def _action_open(manager, bookmark):
    opener = get_default_opener()
    try:
        result = subprocess.run([opener, bookmark.url])
    except OSError as e:
        raise CompscriptsError(f"failed to start opener command: {e}")
    if result.returncode != 0:
        raise SilentError()


def _action_archive(manager, bookmark):
    manager.archive(bookmark.id)


def _action_copy(manager, bookmark):
    try:
        result = subprocess.run(["xclip", "-sel", "clipboard"], input=bookmark.url, text=True)
    except OSError as e:
        raise CompscriptsError(f"failed to start xclip command: {e}")
    if result.returncode != 0:
        raise CompscriptsError("failed to save to clipboard")


def _action_delete(manager, bookmark):
    manager.delete(bookmark.id)


def _action_edit_title(manager, bookmark):
    try:
        new_title, code = edit_text(bookmark.name, "txt")
    except CompscriptsError as e:
        raise CompscriptsError(f"Failed to edit title: {e}")
    if code != 0:
        raise SilentError()
    manager.rename(bookmark.id, new_title)


MENU_ACTIONS = [
    ("open (via $OPENER || xdg-open)", _action_open),
    ("archive", _action_archive),
    ("copy to clipboard (via xclip)", _action_copy),
    ("delete", _action_delete),
    ("edit title", _action_edit_title),
]


def _leading_index(choice: str, count: int, what: str) -> int:
    """Read the number at the start of a menu line."""
    head = choice.strip().split(" ")[0] if choice.strip() else ""
    try:
        index = int(head)
    except ValueError:
        raise CompscriptsError(f"Invalid {what}: {choice.strip()!r}")
    if not 0 <= index < count:
        raise CompscriptsError(f"Invalid {what}: {index}")
    return index


@bkmk.command(help="Opens an interactive menu for managing bookmarks using fzagnostic")
@click.pass_context
def menu(ctx):
    """Pick a bookmark, then an action to run on it."""
    with handle_cli_errors():
        manager = _open_manager(ctx)
        not_archived = manager.unarchived()
        if not not_archived:
            raise CompscriptsError("There are no unarchived bookmarks to select")

        choice = fzagnostic(
            f"Bookmark ({len(not_archived)}):",
            (f"{i:>3} {b.name:<95} ({b.url})" for i, b in enumerate(not_archived)),
            MENU_HEIGHT,
        )
        bookmark = not_archived[_leading_index(choice, len(not_archived), "bookmark choice")]

        action_choice = fzagnostic(
            "Action:",
            (f"{i} {label}" for i, (label, _) in enumerate(MENU_ACTIONS)),
            MENU_HEIGHT,
        )
        label, action = MENU_ACTIONS[_leading_index(action_choice, len(MENU_ACTIONS), "action ID")]

        action(manager, bookmark)
        _save(ctx, manager)
        if manager.modified:
            _rich_success(f"{label}: {bookmark.name}")


def main():
    bkmk(obj={})


if __name__ == "__main__":
    main()
