"""Build coordination: package the tools as executables and install them.

Each binary is "compiled" into a self-contained zipapp holding the
``compscripts_cli`` package and a ``__main__`` that calls the binary's entry
point. The build profile selects the interpreter flags written on the
archive's shebang line.
"""

import re
import shutil
import subprocess
import sys
import tempfile
import zipapp
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .errors import CompscriptsError
from ..version import get_version

PACKAGE_NAME = "compscripts_cli"

# binary name -> (module, callable)
BINARIES: Dict[str, Tuple[str, str]] = {
    "bkmk": ("compscripts_cli.commands.bkmk", "main"),
    "itmn": ("compscripts_cli.commands.itmn", "main"),
    "tkmn": ("compscripts_cli.commands.tkmn", "main"),
    "mass-rename": ("compscripts_cli.commands.mass_rename", "main"),
}

HELPER_SCRIPT: Tuple[str, Tuple[str, str]] = (
    "compscripts-defaultedit",
    ("compscripts_cli.commands.defaultedit", "main"),
)

# Release runs optimised (asserts stripped), debug in development mode.
PROFILE_FLAGS = {
    "release": "-O",
    "debug": "-Xdev",
}

DEFAULT_DESTDIR = "~/.local/bin"

MANIFEST_NAME = "compscripts.yml"


class BuildError(CompscriptsError):
    """A build, check or install step failed."""


def parse_entry_point(spec: str) -> Tuple[str, str]:
    """Split a ``module:function`` entry point."""
    module, sep, func = spec.partition(":")
    if not sep or not module or not func:
        raise BuildError(f"invalid entry point {spec!r} (expected module:function)")
    return module, func


def load_manifest(manifest_path: Path) -> Dict[str, Any]:
    """Load an optional ``compscripts.yml`` build manifest.

    Recognised keys are ``profile``, ``destdir`` and ``binaries`` (a mapping
    of binary name to ``module:function``). A missing file is an empty
    manifest.

    Raises:
        BuildError: If the file is not valid YAML or has the wrong shape
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.exists():
        return {}

    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise BuildError(f"Invalid YAML format in {manifest_path}: {e}")
    except OSError as e:
        raise BuildError(f"failed to read {manifest_path}: {e}")

    if not isinstance(data, dict):
        raise BuildError(f"{manifest_path.name} must contain a YAML object, got {type(data).__name__}")

    manifest: Dict[str, Any] = {}
    for key in ("profile", "destdir"):
        if key in data:
            manifest[key] = str(data[key])

    if 'binaries' in data:
        if not isinstance(data['binaries'], dict):
            raise BuildError(f"'binaries' in {manifest_path.name} must be a mapping")
        manifest['binaries'] = {
            str(name): parse_entry_point(str(entry)) for name, entry in data['binaries'].items()
        }
    return manifest


def _default_source_dir() -> Path:
    return Path(__file__).resolve().parent.parent


@dataclass
class BuildConfig:
    """Settings for one build coordinator invocation."""
    profile: str = "release"
    destdir: Path = field(default_factory=lambda: Path(DEFAULT_DESTDIR).expanduser())
    target_dir: Path = Path("target")
    package_dir: Path = field(default_factory=_default_source_dir)
    tests_dir: Path = Path("tests")
    python: str = sys.executable

    def __post_init__(self):
        if self.profile not in PROFILE_FLAGS:
            raise BuildError(
                f"unknown build profile {self.profile!r} (expected one of: {', '.join(PROFILE_FLAGS)})"
            )
        self.destdir = Path(self.destdir).expanduser()
        self.target_dir = Path(self.target_dir)
        self.package_dir = Path(self.package_dir)
        self.tests_dir = Path(self.tests_dir)

    @property
    def output_dir(self) -> Path:
        return self.target_dir / self.profile

    @property
    def interpreter(self) -> str:
        return f"{self.python} {PROFILE_FLAGS[self.profile]}"


class BuildCoordinator:
    """Runs the output/check/test/install actions for the tool suite."""

    def __init__(self, config: BuildConfig, binaries: Optional[Dict[str, Tuple[str, str]]] = None,
                 helper: Tuple[str, Tuple[str, str]] = HELPER_SCRIPT):
        self.config = config
        self.binaries = dict(BINARIES if binaries is None else binaries)
        self.helper = helper

    def source_files(self) -> List[Path]:
        """List the Python sources of the package, sorted."""
        return sorted(
            p for p in self.config.package_dir.rglob("*.py")
            if "__pycache__" not in p.parts
        )

    def check(self) -> List[Path]:
        """Compile every source file in memory, writing no artifacts.

        Returns:
            List[Path]: The files that were checked

        Raises:
            BuildError: On the first file that fails to compile
        """
        files = self.source_files()
        for path in files:
            try:
                source = path.read_text(encoding="utf-8")
                compile(source, str(path), "exec")
            except SyntaxError as e:
                raise BuildError(f"{path}:{e.lineno}: {e.msg}")
            except (OSError, UnicodeDecodeError, ValueError) as e:
                raise BuildError(f"{path}: {e}")
        return files

    def output(self) -> List[Path]:
        """Build every binary plus the helper script into the output directory.

        Returns:
            List[Path]: Built artifacts, binaries first, helper last
        """
        out_dir = self.config.output_dir
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BuildError(f"failed to create output directory {out_dir}: {e}")

        artifacts = []
        for name, entry_point in self.binaries.items():
            artifacts.append(self._build_archive(name, entry_point))

        helper_name, helper_entry = self.helper
        artifacts.append(self._build_archive(helper_name, helper_entry))
        return artifacts

    def install(self) -> List[Path]:
        """Build, then copy the artifacts into the destination directory.

        Nothing is copied unless the whole build succeeded.

        Returns:
            List[Path]: Installed file paths
        """
        artifacts = self.output()

        destdir = self.config.destdir
        try:
            destdir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BuildError(f"failed to create {destdir}: {e}")

        installed = []
        for artifact in artifacts:
            target = destdir / artifact.name
            try:
                shutil.copy2(artifact, target)
            except OSError as e:
                raise BuildError(f"failed to copy {artifact} to {destdir}: {e}")
            installed.append(target)
        return installed

    def test(self, extra_args: Sequence[str] = ()) -> int:
        """Run the test suite with pytest.

        Returns:
            int: The pytest exit status
        """
        cmd = [self.config.python, "-m", "pytest", str(self.config.tests_dir), *extra_args]
        try:
            result = subprocess.run(cmd)
        except OSError as e:
            raise BuildError(f"failed to start test runner: {e}")
        return result.returncode

    def _build_archive(self, name: str, entry_point: Tuple[str, str]) -> Path:
        module, func = entry_point
        target = self.config.output_dir / name

        with tempfile.TemporaryDirectory(prefix="compscripts-build-") as staging:
            staging_dir = Path(staging)
            try:
                shutil.copytree(
                    self.config.package_dir,
                    staging_dir / PACKAGE_NAME,
                    ignore=shutil.ignore_patterns("__pycache__", "*.pyc"),
                )
            except OSError as e:
                raise BuildError(f"{name}: failed to stage sources: {e}")

            self._stamp_version(staging_dir / PACKAGE_NAME / "version.py")
            (staging_dir / "__main__.py").write_text(
                f"import sys\n"
                f"from {module} import {func}\n"
                f"sys.exit({func}())\n",
                encoding="utf-8",
            )

            try:
                zipapp.create_archive(staging_dir, target=target, interpreter=self.config.interpreter)
            except (OSError, zipapp.ZipAppError) as e:
                raise BuildError(f"{name}: failed to create archive: {e}")

        return target

    @staticmethod
    def _stamp_version(version_file: Path):
        if not version_file.exists():
            return
        content = version_file.read_text(encoding="utf-8")
        content = re.sub(
            r"^__BUILD_VERSION__ = None$",
            f"__BUILD_VERSION__ = {get_version()!r}",
            content,
            count=1,
            flags=re.MULTILINE,
        )
        version_file.write_text(content, encoding="utf-8")
