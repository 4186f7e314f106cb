"""Bookmark manager (bkmk)."""

from .models import Bookmark
from .manager import BookmarkManager
from .title import TitleFetchError, fetch_title

__all__ = [
    'Bookmark',
    'BookmarkManager',
    'TitleFetchError',
    'fetch_title',
]
