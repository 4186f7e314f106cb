"""Rename many files at once through a text editor (mass-rename)."""

from .planner import (
    PREFIX_LINES, Rename, RenameError, apply_renames, build_buffer,
    display_name, parse_buffer, plan_renames, select_targets,
)

__all__ = [
    'PREFIX_LINES',
    'Rename',
    'RenameError',
    'apply_renames',
    'build_buffer',
    'display_name',
    'parse_buffer',
    'plan_renames',
    'select_targets',
]
