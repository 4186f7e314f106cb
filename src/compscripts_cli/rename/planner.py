"""Plan and apply renames edited as text, one name per line."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..core.errors import CompscriptsError
from ..utils.console import _rich_echo, _rich_error

PREFIX_LINES = (
    "# This is a comment.",
    "# Beware! Only lines what start with # are comments.",
    "# Lines with a # after the first character are not comments.",
)


class RenameError(CompscriptsError):
    """A rename plan or a single rename could not be carried out."""


@dataclass
class Rename:
    source: Path
    target: Path

    def describe(self) -> str:
        return f"{self.source.name!r} -> {self.target.name!r}"


def select_targets(files: Sequence[str], as_file: bool = False, cwd: Optional[Path] = None) -> List[Path]:
    """Decide what to rename.

    No files means the entries of the current directory, a single directory
    means its entries (unless ``as_file``), anything else is taken as is.
    Results are sorted by name.
    """
    if not files:
        base = Path(cwd) if cwd is not None else Path(".")
        return sorted(base.iterdir())

    if len(files) == 1 and not as_file:
        only = Path(files[0])
        if only.is_dir():
            return sorted(only.iterdir())

    return sorted(Path(f) for f in files)


def display_name(path: Path, full_path: bool = False) -> str:
    return str(path.absolute()) if full_path else path.name


def _prefix_width(count: int) -> int:
    return len(str(count))


def build_buffer(names: Sequence[str], prefix_numbers: bool = True) -> str:
    """The text handed to the editor: the comment header, then one name per line."""
    width = _prefix_width(len(names))
    lines = list(PREFIX_LINES)
    for number, name in enumerate(names, start=1):
        lines.append(f"{number:0{width}} {name}" if prefix_numbers else name)
    return "\n".join(lines) + "\n"


def parse_buffer(text: str, count: int, prefix_numbers: bool = True) -> List[str]:
    """Read the new names back from an edited buffer.

    Raises:
        RenameError: If the amount of lines changed, or a prefix number is
            missing or out of order.
    """
    lines = [line for line in text.split("\n") if line and not line.startswith("#")]
    if len(lines) != count:
        raise RenameError(
            f"Incompatible amount of lines: {count} (files to rename) and {len(lines)} (amount after editing)"
        )

    if not prefix_numbers:
        return lines

    width = _prefix_width(count)
    names = []
    for number, line in enumerate(lines, start=1):
        expected = f"{number:0{width}} "
        if not line.startswith(expected):
            raise RenameError(f"line {number} should start with {expected.strip()!r}: {line!r}")
        names.append(line[len(expected):])
    return names


def plan_renames(targets: Sequence[Path], new_names: Sequence[str], full_path: bool = False) -> List[Rename]:
    """Pair each target with its new path, skipping names left unchanged.

    Raises:
        RenameError: If a new name would move the file out of its directory.
    """
    plan = []
    for source, new_name in zip(targets, new_names):
        if full_path:
            edited = Path(new_name)
            if edited.parent != source.absolute().parent:
                raise RenameError(f"{new_name!r} is not in the directory of {str(source)!r}")
            new_name = edited.name

        if new_name == source.name:
            continue
        if not new_name or os.sep in new_name or (os.altsep and os.altsep in new_name):
            raise RenameError(f"invalid file name {new_name!r}")
        plan.append(Rename(source, source.with_name(new_name)))
    return plan


def apply_renames(plan: Iterable[Rename], ignore_errors: bool = False, verbose: bool = True) -> int:
    """Carry out the renames. Returns how many of them failed.

    Raises:
        RenameError: On the first failure, unless ``ignore_errors``.
    """
    failures = 0
    for rename in plan:
        try:
            if rename.target.exists():
                raise RenameError(f"{str(rename.target)!r} already exists")
            try:
                rename.source.rename(rename.target)
            except OSError as e:
                raise RenameError(f"failed to rename {str(rename.source)!r}: {e}")
        except RenameError as e:
            if not ignore_errors:
                raise
            failures += 1
            _rich_error(f"Error: {e}")
            continue

        if verbose:
            _rich_echo(rename.describe())
    return failures
