"""Bookmark storage and manipulation."""

from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..core.data import dump_json_array, find_lowest_free_value, load_json_array, write_text
from ..core.errors import CompscriptsError, RepeatedIdError
from ..core.prompt import read_line
from ..utils.console import _rich_echo, _rich_error, _rich_info
from .models import Bookmark, clean_title
from .title import TitleFetchError, fetch_title


class BookmarkManager:
    """Holds the bookmark list and tracks whether it needs saving."""

    def __init__(self, data: Iterable[Bookmark], title_fetcher: Callable[[str], str] = fetch_title):
        self.data: List[Bookmark] = []
        self.used_ids = set()
        self.modified = False
        self.title_fetcher = title_fetcher

        for bookmark in data:
            if bookmark.id in self.used_ids:
                raise RepeatedIdError(bookmark.id)
            self.used_ids.add(bookmark.id)
            self.data.append(bookmark)

    @classmethod
    def from_json(cls, contents: str, **kwargs) -> "BookmarkManager":
        return cls([Bookmark.from_dict(r) for r in load_json_array(contents)], **kwargs)

    def to_json(self) -> str:
        return dump_json_array(b.to_dict() for b in self.data)

    def find(self, bookmark_id: int) -> Optional[Bookmark]:
        return next((b for b in self.data if b.id == bookmark_id), None)

    def _get(self, bookmark_id: int) -> Bookmark:
        bookmark = self.find(bookmark_id)
        if bookmark is None:
            raise CompscriptsError(f"no bookmark with ID {bookmark_id}")
        return bookmark

    def unarchived(self) -> List[Bookmark]:
        return [b for b in self.data if not b.archived]

    def already_has_url(self, url: str) -> Optional[int]:
        """Find a bookmark with this URL, also trying it with the trailing slash toggled."""
        def check(candidate):
            for bookmark in self.data:
                if bookmark.url == candidate:
                    return bookmark.id
            return None

        found = check(url)
        if found is not None or not url:
            return found

        return check(url[:-1] if url.endswith("/") else f"{url}/")

    def _push(self, name: str, url: str, tags: List[str]) -> Bookmark:
        free_id = find_lowest_free_value(self.used_ids)
        bookmark = Bookmark(id=free_id, archived=False, name=name, url=url, tags=list(tags))
        self.data.append(bookmark)
        self.used_ids.add(free_id)
        self.modified = True
        return bookmark

    def add_bookmark(self, name: str, url: str, tags: Iterable[str] = ()) -> Bookmark:
        """Add a bookmark with a known title.

        Raises:
            CompscriptsError: If a bookmark with the same URL already exists.
        """
        existing = self.already_has_url(url)
        if existing is not None:
            raise CompscriptsError(f"Repeated url with bookmark #{existing}")
        return self._push(name, url, list(tags))

    def add_bookmark_from_url(self, url: str, interactive: bool = True) -> Bookmark:
        """Add a bookmark, taking its title from the page itself.

        If the title can't be fetched and ``interactive`` is set, the user is
        asked to type one; an empty answer cancels.

        Raises:
            CompscriptsError: On a repeated URL, a failed fetch, or a cancel.
        """
        existing = self.already_has_url(url)
        if existing is not None:
            raise CompscriptsError(f"Repeated url with bookmark #{existing} ({url})")

        try:
            title = self.title_fetcher(url)
        except TitleFetchError as e:
            if not interactive:
                raise CompscriptsError(f"failed to get title: {e}")

            _rich_error(f"Failed to get title: {e}")
            _rich_echo(f"  Url: {url!r}", style="muted")
            title = read_line("  Type a new title (type nothing to cancel): ")
            if not title.strip():
                raise CompscriptsError("empty title")

        title = clean_title(title)
        _rich_info(f"New bookmark: {title!r} ({url!r})")
        return self._push(title, url, [])

    def archive(self, bookmark_id: int):
        self._get(bookmark_id).archived = True
        self.modified = True

    def rename(self, bookmark_id: int, title: str):
        self._get(bookmark_id).name = clean_title(title)
        self.modified = True

    def delete(self, bookmark_id: int) -> Bookmark:
        bookmark = self._get(bookmark_id)
        self.data.remove(bookmark)
        self.used_ids.discard(bookmark_id)
        self.modified = True
        return bookmark

    def save_if_modified(self, path: Path) -> bool:
        """Write the data file when something changed.

        Returns:
            bool: True if the file was written
        """
        if not self.modified:
            return False
        write_text(path, self.to_json())
        return True
