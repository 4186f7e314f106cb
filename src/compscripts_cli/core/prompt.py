"""Interactive prompts: fzagnostic menus, confirmations and line input."""

import subprocess
import sys
from typing import Iterable

import click

from .errors import CompscriptsError, SilentError


def fzagnostic(prompt: str, choices: Iterable[str], height: int = 30) -> str:
    """Let the user pick one line through the ``fzagnostic`` menu program.

    Args:
        prompt: Prompt shown by the menu
        choices: Lines offered, one per stdin line
        height: Menu height in lines

    Returns:
        str: The chosen line, as printed by fzagnostic.

    Raises:
        SilentError: If the menu was cancelled (non-zero exit).
        CompscriptsError: If fzagnostic could not be started.
    """
    menu_input = "".join(f"{line}\n" for line in choices)

    try:
        result = subprocess.run(
            ["fzagnostic", "-h", str(height), "-p", prompt],
            input=menu_input,
            stdout=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise CompscriptsError(f"fzagnostic: failed to run command: {e}")

    if result.returncode != 0:
        raise SilentError()

    return result.stdout


def read_line(prompt: str) -> str:
    """Read a single stripped line, showing the prompt on stderr."""
    click.echo(prompt, nl=False, err=True)
    line = sys.stdin.readline()
    return line.strip()


def confirm_with_default(default: bool) -> bool:
    """Ask ``Confirm?`` until a recognised answer is given.

    An empty answer picks ``default``.
    """
    hint = "Y/n" if default else "y/N"
    while True:
        answer = read_line(f"Confirm? [{hint}] ").lower()
        if answer == "":
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
