"""Temporary files: external-editor round trips and folder locks."""

import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Tuple

from .errors import CompscriptsError

DEFAULT_EDITOR = "compscripts-defaultedit"


def get_editor() -> str:
    """Get the editor used for text round trips ($EDITOR, then the helper)."""
    return os.environ.get("EDITOR") or DEFAULT_EDITOR


def edit_text(text: str, extension: Optional[str] = None) -> Tuple[str, int]:
    """Let the user edit ``text`` in an external editor.

    Args:
        text: Initial buffer contents
        extension: Optional file extension, so editors pick a filetype

    Returns:
        Tuple of (edited text, editor exit code). A process killed by a
        signal reports 130.

    Raises:
        CompscriptsError: If the temp file or the editor process fails.
    """
    suffix = f".{extension}" if extension else ""
    try:
        fd, tmp_path = tempfile.mkstemp(prefix="tmp.", suffix=suffix)
    except OSError as e:
        raise CompscriptsError(f"failed to create temp file: {e}")

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)

        try:
            result = subprocess.run([get_editor(), tmp_path])
        except OSError as e:
            raise CompscriptsError(f"failed to start process: {e}")

        code = result.returncode if result.returncode >= 0 else 130

        try:
            with open(tmp_path, "r", encoding="utf-8") as f:
                edited = f.read()
        except OSError as e:
            raise CompscriptsError(f"failed to read temp file: {e}")

        return edited, code
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


@contextmanager
def folder_lock(name: str, base_dir: Optional[Path] = None):
    """Hold an exclusive lock directory for the duration of the block.

    ``mkdir`` is atomic, so only one process can create the directory.

    Raises:
        CompscriptsError: If the lock is already held by another process.
    """
    base = Path(base_dir) if base_dir is not None else Path(tempfile.gettempdir())
    lock_dir = base / f"{name}.lock"

    try:
        lock_dir.mkdir(parents=False)
    except FileExistsError:
        raise CompscriptsError(f"lock {lock_dir} is already held (remove it if stale)")
    except OSError as e:
        raise CompscriptsError(f"failed to create lock {lock_dir}: {e}")

    try:
        yield lock_dir
    finally:
        shutil.rmtree(lock_dir, ignore_errors=True)
