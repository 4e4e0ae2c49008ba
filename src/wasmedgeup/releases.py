"""Release enumeration sources for wasmedgeup.

Two interchangeable sources produce WasmEdge release versions newest first:

- GitTagReleases lists the tag references of the upstream git repository in
  a single round trip, then filters and sorts them.
- PagedReleases scrapes the GitHub releases listing one HTML page at a time
  and yields versions as they are found, in the order the page lists them.
  Pages are only requested when the consumer asks for more versions, so
  taking the first few items never downloads the whole release history.

Each source instance owns its own cursor; create a new instance to restart.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from enum import Enum, auto
from typing import Iterator, Optional, Protocol

from .common import (
    PEELED_REF_SUFFIX,
    RELEASE_TAG_REGEX,
    RELEASES_URL,
    TAG_REF_PREFIX,
    WASMEDGE_GIT_URL,
    GitClientProtocol,
    NetworkClientProtocol,
    ProcessResult,
)
from .exceptions import FetchError, VersionParseError
from .network import http_status
from .version import ReleaseFilter, Version

logger = logging.getLogger(__name__)


class ReleaseSource(Protocol):
    """An iterable of release versions, newest first."""

    filter: ReleaseFilter

    def __iter__(self) -> Iterator[Version]: ...


class GitTagReleases:
    """Release versions taken from the tag references of a git remote."""

    def __init__(
        self,
        git_client: GitClientProtocol,
        filter: ReleaseFilter = ReleaseFilter.ALL,
        url: str = WASMEDGE_GIT_URL,
    ) -> None:
        self.git_client = git_client
        self.filter = filter
        self.url = url

    def _tag_name(self, ref_name: str) -> Optional[str]:
        """Return the tag name of a tag reference, or None for other references.

        Peeled references ('refs/tags/X^{}') point at the tagged commit and
        duplicate the tag itself, so they are skipped.
        """
        if not ref_name.startswith(TAG_REF_PREFIX):
            return None
        if ref_name.endswith(PEELED_REF_SUFFIX):
            return None
        return ref_name[len(TAG_REF_PREFIX) :]

    def list_versions(self) -> list[Version]:
        """
        List every accepted release version, newest first.

        Returns:
            Versions accepted by the filter, sorted in descending order

        Raises:
            GitError: If the remote reference list cannot be retrieved
        """
        logger.debug(f"Listing tag references from {self.url}")
        ref_names = self.git_client.ls_remote(self.url)

        versions: list[Version] = []
        for ref_name in ref_names:
            tag = self._tag_name(ref_name)
            if tag is None:
                continue
            try:
                version = Version.parse(tag)
            except VersionParseError:
                logger.debug(f"Skipping non-version tag: {tag}")
                continue
            if self.filter.matches(version):
                versions.append(version)

        versions.sort(reverse=True)
        # Tags differing only in build metadata compare equal
        return list(dict.fromkeys(versions))

    def __iter__(self) -> Iterator[Version]:
        return iter(self.list_versions())


class _State(Enum):
    READY = auto()
    LOADING = auto()
    FETCHED = auto()
    TERMINATED = auto()


@dataclasses.dataclass
class PageCursor:
    page: int = 1
    offset: int = 0

    def next_page(self) -> None:
        self.page += 1
        self.offset = 0


class PagedReleases:
    """Release versions scraped page by page from the GitHub releases listing.

    The listing is trusted to present releases newest first; versions are
    yielded in page order without re-sorting.

    State transitions per call to __next__:

        READY      -> request the current page               -> LOADING
        LOADING    -> 404 ends the sequence                  -> TERMINATED
                      other failures raise FetchError        -> TERMINATED
                      success keeps the page text            -> FETCHED
        FETCHED    -> no match left on the page              -> READY (next page)
                      match rejected by the filter           -> FETCHED
                      repeat of the last yielded version     -> FETCHED
                      match accepted                         -> yield version
    """

    def __init__(
        self,
        network_client: NetworkClientProtocol,
        filter: ReleaseFilter = ReleaseFilter.ALL,
        url: str = RELEASES_URL,
        pattern: re.Pattern[str] = RELEASE_TAG_REGEX,
    ) -> None:
        self.network_client = network_client
        self.filter = filter
        self.url = url
        self.pattern = pattern
        self.cursor = PageCursor()

        self._state = _State.READY
        self._response: Optional[ProcessResult] = None
        self._page_text: Optional[str] = None
        self._last_yielded: Optional[Version] = None

    @property
    def state(self) -> str:
        return self._state.name

    def __iter__(self) -> Iterator[Version]:
        return self

    def __next__(self) -> Version:
        while True:
            match self._state:
                case _State.READY:
                    self._request_page()
                case _State.LOADING:
                    self._handle_response()
                case _State.FETCHED:
                    version = self._scan_page()
                    if version is not None:
                        return version
                case _State.TERMINATED:
                    raise StopIteration

    def _terminate(self) -> None:
        self._state = _State.TERMINATED
        self._response = None
        self._page_text = None

    def _request_page(self) -> None:
        page = self.cursor.page
        logger.debug(f"Fetching releases page {page}: {self.url}")
        try:
            self._response = self.network_client.get(self.url, params={"page": page})
        except OSError as e:
            self._terminate()
            raise FetchError(f"Failed to fetch releases page {page}: {e}") from e
        self._state = _State.LOADING

    def _handle_response(self) -> None:
        response = self._response
        self._response = None
        page = self.cursor.page

        if response is not None and response.returncode == 0:
            self._page_text = response.stdout
            self._state = _State.FETCHED
            return

        status = http_status(response) if response is not None else None
        if status == 404:
            logger.debug(f"Releases page {page} not found, no more releases")
            self._terminate()
            return

        stderr = response.stderr.strip() if response is not None else ""
        self._terminate()
        raise FetchError(f"Failed to fetch releases page {page}: {stderr}")

    def _scan_page(self) -> Optional[Version]:
        """Scan the current page for the next version from the cursor offset.

        Returns:
            The next accepted version, or None if the scan should continue

        Raises:
            VersionParseError: If a captured version is not valid semver
        """
        text = self._page_text or ""
        match = self.pattern.search(text, self.cursor.offset)
        if match is None:
            self._page_text = None
            self.cursor.next_page()
            self._state = _State.READY
            return None

        captured = match.group("version")
        try:
            version = Version.parse(captured)
        except VersionParseError:
            self._terminate()
            raise
        # Resume right after the captured span, not after the whole tag text
        self.cursor.offset = match.end("version")

        if not self.filter.matches(version):
            return None

        last = self._last_yielded
        if last is not None:
            # A release page links each tag several times
            if version == last:
                return None
            if version > last:
                logger.warning(
                    f"Releases listing is out of order: {version} listed after {last}"
                )
        self._last_yielded = version
        return version
