"""Helper utility functions for compscripts."""

import os
import shutil
import sys


def find_executable(tool_name, path=None):
    """Resolve a bare command name on the executable search path.

    Args:
        tool_name (str): Name of the tool to look up.
        path (str, optional): Search path to use instead of $PATH.

    Returns:
        str: Full path to the executable, or None if it does not resolve.
    """
    return shutil.which(tool_name, path=path)


def is_tool_available(tool_name, path=None):
    """Check if a command-line tool is available.

    Args:
        tool_name (str): Name of the tool to check.
        path (str, optional): Search path to use instead of $PATH.

    Returns:
        bool: True if the tool is available, False otherwise.
    """
    return find_executable(tool_name, path=path) is not None


def stream_is_tty(stream):
    """Check whether a stream is attached to an interactive terminal."""
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, ValueError, OSError):
        return False


def has_interactive_output(stdout=None, stderr=None):
    """Check whether at least one of stdout/stderr is a terminal.

    Returns:
        bool: False only when both streams are detached from a terminal.
    """
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    return stream_is_tty(stdout) or stream_is_tty(stderr)
