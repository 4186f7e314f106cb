"""Console utility functions for formatting and diagnostics.

Everything here writes to standard error: standard output is kept for data
(reports, listings) so the tools compose in pipelines.
"""

import click
from typing import Optional, Any

from rich.console import Console
from rich.table import Table
from colorama import Fore, Style, init

init(autoreset=True)


# Status symbols for consistent iconography
STATUS_SYMBOLS = {
    'success': '✓',
    'running': '•',
    'info': '•',
    'warning': '⚠',
    'error': '✗',
    'check': '✓',
    'list': '•',
    'folder': '•',
}

_console = None


def _get_console() -> Optional[Any]:
    """Get the shared stderr Rich console."""
    global _console
    if _console is None:
        try:
            _console = Console(stderr=True, highlight=False)
        except Exception:
            return None
    return _console


def _reset_console():
    """Forget the cached console (streams change under test runners)."""
    global _console
    _console = None


def _rich_echo(message: str, color: str = "white", style: str = None, bold: bool = False, symbol: str = None):
    """Echo message with Rich formatting or colorama fallback."""
    if style is not None:
        color = style

    if symbol and symbol in STATUS_SYMBOLS:
        message = f"{STATUS_SYMBOLS[symbol]} {message}"

    console = _get_console()
    if console:
        try:
            style_str = f"bold {color}" if bold else color
            console.print(message, style=style_str, markup=False)
            return
        except Exception:
            pass

    color_map = {
        'red': Fore.RED,
        'green': Fore.GREEN,
        'yellow': Fore.YELLOW,
        'blue': Fore.BLUE,
        'cyan': Fore.CYAN,
        'white': Fore.WHITE,
        'magenta': Fore.MAGENTA,
        'muted': Fore.WHITE,
    }
    color_code = color_map.get(color, Fore.WHITE)
    style_code = Style.BRIGHT if bold else ""
    click.echo(f"{color_code}{style_code}{message}{Style.RESET_ALL}", err=True)


def _rich_success(message: str, symbol: str = None):
    """Display success message with green color and bold styling."""
    _rich_echo(message, color="green", symbol=symbol, bold=True)


def _rich_error(message: str, symbol: str = None):
    """Display error message with red color."""
    _rich_echo(message, color="red", symbol=symbol)


def _rich_warning(message: str, symbol: str = None):
    """Display warning message with yellow color."""
    _rich_echo(message, color="yellow", symbol=symbol)


def _rich_info(message: str, symbol: str = None):
    """Display info message with blue color."""
    _rich_echo(message, color="blue", symbol=symbol)


def _create_table(title: str, columns: list, rows: list) -> Table:
    """Create a Rich table from column specs and row tuples.

    Args:
        title: Table title
        columns: List of (header, style) pairs
        rows: Iterable of row tuples, stringified on insertion
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header, style in columns:
        table.add_column(header, style=style)

    for row in rows:
        table.add_row(*(str(cell) for cell in row))

    return table


def _print_table(table: Table):
    """Print a table on standard output."""
    Console(highlight=False).print(table)
