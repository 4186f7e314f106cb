"""compscripts: small command-line tools (bkmk, itmn, tkmn, mass-rename) and their build coordinator."""

from .version import get_version

__version__ = get_version()
