"""Default editor selection and launch.

Picks the first available editor from a fixed preference list and replaces
the current process with it. When neither stdout nor stderr is attached to
a terminal (e.g. launched from a GUI), the editor is wrapped in a terminal
emulator instead.
"""

import os
from typing import List, Optional, Sequence

from ..config import get_default_terminal
from ..utils.helpers import has_interactive_output, is_tool_available

# Preference order, first match wins.
EDITOR_CANDIDATES = ("nvim", "vim", "vi", "nano")


class NoEditorFoundError(LookupError):
    """None of the candidate editors resolves on the search path."""

    def __init__(self, candidates: Sequence[str]):
        self.candidates = tuple(candidates)
        super().__init__(f"no suitable editor found (tried: {', '.join(self.candidates)})")


def select_editor(candidates: Sequence[str] = EDITOR_CANDIDATES, path: Optional[str] = None) -> Optional[str]:
    """Return the first candidate resolvable on the search path.

    Preference order decides, not search path order: the loop stops at the
    first candidate that resolves anywhere on the path.
    """
    for candidate in candidates:
        if is_tool_available(candidate, path=path):
            return candidate
    return None


def build_command(editor: str, args: Sequence[str], interactive: bool, terminal: Optional[str] = None) -> List[str]:
    """Build the argv that replaces the helper process.

    Args:
        editor: Selected editor command name
        args: Arguments forwarded verbatim to the editor
        interactive: Whether stdout or stderr is a terminal
        terminal: Terminal emulator used when not interactive

    Returns:
        List[str]: ``[editor, *args]`` or ``[terminal, "-e", editor, *args]``
    """
    if interactive:
        return [editor, *args]

    terminal = terminal or get_default_terminal()
    return [terminal, "-e", editor, *args]


def launch(args: Sequence[str], candidates: Sequence[str] = EDITOR_CANDIDATES, path: Optional[str] = None):
    """Select an editor and exec it (never returns on success).

    Raises:
        NoEditorFoundError: If no candidate resolves. Nothing is executed.
    """
    editor = select_editor(candidates, path=path)
    if editor is None:
        raise NoEditorFoundError(candidates)

    command = build_command(editor, list(args), has_interactive_output())
    os.execvp(command[0], command)
