"""Fetch a page's <title> for new bookmarks."""

import requests
from bs4 import BeautifulSoup

from ..core.errors import CompscriptsError

REQUEST_TIMEOUT = 15


class TitleFetchError(CompscriptsError):
    """The page title could not be obtained."""


def fetch_title(url: str, session=None, timeout: float = REQUEST_TIMEOUT) -> str:
    """Download ``url`` and return the text of its first <title> tag.

    Redirects are not followed; a 3xx response is reported as an error.

    Raises:
        TitleFetchError: On transport errors, error status codes, or pages
            without a usable title.
    """
    if session is None:
        with requests.Session() as own_session:
            return fetch_title(url, session=own_session, timeout=timeout)

    try:
        response = session.get(url, timeout=timeout, allow_redirects=False)
    except requests.RequestException as e:
        raise TitleFetchError(f"Failed to download page: {e}")

    code = response.status_code
    if 300 <= code <= 399:
        raise TitleFetchError(f"got redirection code {code}")
    if 400 <= code <= 499:
        raise TitleFetchError(f"got client error code {code}")
    if 500 <= code <= 599:
        raise TitleFetchError(f"got server error code {code}")

    soup = BeautifulSoup(response.text, 'html.parser')
    title_tag = soup.find('title')
    if title_tag is None:
        raise TitleFetchError("Couldn't find any <title> tags in page")

    # first text node only
    title = next(iter(title_tag.find_all(string=True, recursive=False)), None)
    if title is None or not title.strip():
        raise TitleFetchError("Empty <title> tag")

    return str(title)
