"""compscripts-defaultedit: open the first available editor."""

import sys

import click

from ..core.editor import NoEditorFoundError, launch
from ..utils.console import _rich_error


@click.command(
    name="compscripts-defaultedit",
    context_settings=dict(
        ignore_unknown_options=True,
        allow_interspersed_args=False,
        help_option_names=[],
    ),
)
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
def defaultedit(args):
    """Open the preferred available editor, forwarding every argument."""
    try:
        launch(args)
    except NoEditorFoundError as e:
        _rich_error(f"Error: {e}")
        sys.exit(1)
    except OSError as e:
        _rich_error(f"Error: failed to exec editor: {e}")
        sys.exit(1)


def main():
    defaultedit()


if __name__ == "__main__":
    main()
