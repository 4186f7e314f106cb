"""Version management for compscripts."""

import re
from pathlib import Path

# Build-time version constant (injected into zipapp builds)
__BUILD_VERSION__ = None


def get_version() -> str:
    """
    Get the current version.

    Uses the build-time constant when present, otherwise reads it from
    pyproject.toml next to the source tree.

    Returns:
        str: Version string
    """
    if __BUILD_VERSION__:
        return __BUILD_VERSION__

    try:
        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"

        if pyproject_path.exists():
            with open(pyproject_path, 'r', encoding='utf-8') as f:
                content = f.read()

            match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
            if match:
                version = match.group(1)
                # x.y.z or x.y.z{a|b|rc}N
                if re.match(r'^\d+\.\d+\.\d+(a\d+|b\d+|rc\d+)?$', version):
                    return version
    except OSError:
        pass

    return "unknown"


__version__ = get_version()
