"""mass-rename: rename files by editing their names in a text editor."""

import sys

import click

from ..core.errors import CompscriptsError
from ..core.tmp import edit_text
from ..rename import apply_renames, build_buffer, display_name, parse_buffer, plan_renames, select_targets
from ..utils.console import _rich_info, _rich_warning
from ._common import handle_cli_errors, version_option

CANCELLED_EXIT_CODE = 130


@click.command(name="mass-rename", help="Rename files by editing their names in a text editor")
@version_option("mass-rename")
@click.argument('files', nargs=-1)
@click.option('-v/-q', '--verbose/--quiet', default=True, help="Show every operation done")
@click.option('-i/-s', '--ignore-errors/--stop-on-error', default=False,
              help="Keep going after a failed rename instead of stopping the entire process")
@click.option('-p/-P', '--prefix-numbers/--no-prefix-numbers', default=True,
              help="Show the prefix numbers and error if they are out of order after editing (recommended)")
@click.option('-a', '--as-file', is_flag=True, default=False,
              help="Treat FILES as a list of things to rename; only matters for a single directory")
@click.option('-f/-b', '--full-path/--base-name', default=False, help="Show each file's full path")
def mass_rename(files, verbose, ignore_errors, prefix_numbers, as_file, full_path):
    """FILES defaults to the current directory. A single directory means its
    contents, unless --as-file is given."""
    with handle_cli_errors():
        try:
            targets = select_targets(files, as_file)
        except OSError as e:
            raise CompscriptsError(f"failed to list files: {e}")

        if not targets:
            _rich_info("Nothing to rename")
            return

        names = [display_name(t, full_path) for t in targets]
        edited, code = edit_text(build_buffer(names, prefix_numbers), "txt")
        if code != 0:
            _rich_warning(f"Editor exited with code {code}; nothing was renamed")
            sys.exit(CANCELLED_EXIT_CODE)

        new_names = parse_buffer(edited, len(targets), prefix_numbers)
        plan = plan_renames(targets, new_names, full_path)
        if not plan:
            _rich_info("No names were changed")
            return

        failures = apply_renames(plan, ignore_errors=ignore_errors, verbose=verbose)
        if failures:
            _rich_warning(f"{failures} of {len(plan)} renames failed")
            sys.exit(1)


def main():
    mass_rename()


if __name__ == "__main__":
    main()
