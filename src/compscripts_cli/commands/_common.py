"""Pieces shared by the tool commands."""

import sys
from contextlib import contextmanager

import click

from ..core.errors import CompscriptsError, RangeParseError, RepeatedIdError, SilentError
from ..core.data import touch_read
from ..utils.console import _get_console, _rich_error
from ..version import get_version


class AliasedGroup(click.Group):
    """A click group whose commands can be reached through short aliases."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.aliases = {}

    def _register_aliases(self, decorator, aliases):
        def wrap(f):
            cmd = decorator(f)
            for alias in aliases:
                self.aliases[alias] = cmd.name
            return cmd
        return wrap

    def command(self, *args, aliases=(), **kwargs):
        return self._register_aliases(super().command(*args, **kwargs), aliases)

    def group(self, *args, aliases=(), **kwargs):
        return self._register_aliases(super().group(*args, **kwargs), aliases)

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args

    def format_commands(self, ctx, formatter):
        by_command = {}
        for alias, name in self.aliases.items():
            by_command.setdefault(name, []).append(alias)

        rows = []
        for name in self.list_commands(ctx):
            cmd = self.get_command(ctx, name)
            if cmd is None or cmd.hidden:
                continue
            label = name
            if name in by_command:
                label = f"{name} ({', '.join(by_command[name])})"
            rows.append((label, cmd.get_short_help_str(limit=formatter.width)))

        if rows:
            with formatter.section("Commands"):
                formatter.write_dl(rows)


def version_option(prog_name: str):
    """A ``--version`` flag printing a small panel, like the main CLI."""
    def print_version(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return

        console = _get_console()
        if console:
            from rich.text import Text
            from rich.panel import Panel
            version_text = Text()
            version_text.append(prog_name, style="bold cyan")
            version_text.append(f" version {get_version()}", style="white")
            console.print(Panel(version_text, border_style="cyan", padding=(0, 1)))
        else:
            click.echo(f"{prog_name} version {get_version()}", err=True)
        ctx.exit()

    return click.option('--version', is_flag=True, callback=print_version,
                        expose_value=False, is_eager=True, help="Show version and exit.")


@contextmanager
def handle_cli_errors():
    """Turn tool errors into ``Error: ...`` on stderr and exit status 1."""
    try:
        yield
    except SilentError:
        sys.exit(1)
    except (CompscriptsError, RangeParseError, RepeatedIdError) as e:
        _rich_error(f"Error: {e}")
        sys.exit(1)


def read_data_file(path) -> str:
    """Read (creating if needed) a data file, reporting failures as tool errors."""
    try:
        return touch_read(path)
    except CompscriptsError as e:
        raise CompscriptsError(f"Failed to load file: {e}")


def parse_failure(error: Exception) -> CompscriptsError:
    """Wrap a data file parsing problem (bad JSON or a malformed record)."""
    return CompscriptsError(f"Failed to parse file: {error}")
