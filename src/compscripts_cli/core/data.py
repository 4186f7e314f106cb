"""Data helpers shared by the managers: id allocation, ranges and JSON files."""

import json
import re
from pathlib import Path
from typing import Any, Iterable, List, Set

from .errors import CompscriptsError, RangeParseError

_NUMBER_RE = re.compile(r'^\d+$')
_RANGE_RE = re.compile(r'^(\d+)\.\.(\d+)$')


def find_lowest_free_value(used: Set[int]) -> int:
    """Find the smallest non-negative integer not in ``used``."""
    free_value = 0
    while free_value in used:
        free_value += 1
    return free_value


def find_highest_free_value(used: Set[int]) -> int:
    """Find the first value above the highest one in ``used`` (0 when empty)."""
    if not used:
        return 0
    return max(used) + 1


def parse_range_str(string: str) -> List[int]:
    """Parse a selection such as ``"1..10,4,5"`` into a list of ids.

    Spaces are ignored. Order and duplicates are preserved. Ranges are
    inclusive on both ends.

    Raises:
        RangeParseError: On a reversed range or an unrecognised token.
    """
    result: List[int] = []
    compact = string.replace(" ", "")

    for token in compact.split(","):
        if _NUMBER_RE.match(token):
            result.append(int(token))
            continue

        match = _RANGE_RE.match(token)
        if not match:
            raise RangeParseError(f"Could not parse {token!r}")

        first, second = int(match.group(1)), int(match.group(2))
        if second < first:
            raise RangeParseError(
                f"Second number {second} is smaller than first number {first} in range {token}"
            )
        result.extend(range(first, second + 1))

    return result


def blank_to_empty_array(contents: str) -> str:
    """Treat a whitespace-only data file as an empty JSON array."""
    if contents.strip(" \t\r\n"):
        return contents
    return "[]"


def load_json_array(contents: str) -> List[Any]:
    """Parse the contents of a data file into a list of raw records."""
    data = json.loads(blank_to_empty_array(contents))
    if not isinstance(data, list):
        raise ValueError("expected a JSON array at the top level")
    return data


def dump_json_array(records: Iterable[Any], pretty: bool = True) -> str:
    """Serialise raw records into the data file format."""
    records = list(records)
    if pretty:
        return json.dumps(records, indent=2, ensure_ascii=False)
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False)


def touch_read(path: Path) -> str:
    """Read a data file, creating it (and its parent directories) if missing.

    Raises:
        CompscriptsError: If the path is a directory, or a parent is a file.
    """
    path = Path(path)

    if path.exists():
        if path.is_dir():
            raise CompscriptsError("path is a directory")
        return path.read_text(encoding="utf-8")

    parent = path.parent
    if parent.exists():
        if not parent.is_dir():
            raise CompscriptsError(f"parent path {parent} is not a directory")
    else:
        try:
            parent.mkdir(parents=True)
        except OSError as e:
            raise CompscriptsError(f"failed to create parent path {parent}: {e}")

    try:
        path.touch()
    except OSError as e:
        raise CompscriptsError(f"failed to create file: {e}")
    return ""


def write_text(path: Path, contents: str):
    """Write a data file."""
    Path(path).write_text(contents, encoding="utf-8")
