"""Core building blocks shared by the compscripts tools."""

from .errors import CompscriptsError, SilentError, RangeParseError, RepeatedIdError

__all__ = [
    'CompscriptsError',
    'SilentError',
    'RangeParseError',
    'RepeatedIdError',
]
