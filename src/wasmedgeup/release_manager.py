"""Release manager implementation for wasmedgeup."""

import itertools
import logging
from typing import Optional

from .common import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_SOURCE,
    GitClientProtocol,
    NetworkClientProtocol,
    ReleaseSourceKind,
)
from .exceptions import NoReleasesError
from .releases import GitTagReleases, PagedReleases, ReleaseSource
from .version import ReleaseFilter, Version

logger = logging.getLogger(__name__)

LATEST = "latest"


class ReleaseManager:
    """Manages release discovery and selection."""

    def __init__(
        self,
        network_client: NetworkClientProtocol,
        git_client: GitClientProtocol,
        source: ReleaseSourceKind = DEFAULT_SOURCE,
    ) -> None:
        self.network_client = network_client
        self.git_client = git_client
        self.source = source

    def open_releases(self, filter: ReleaseFilter) -> ReleaseSource:
        """Start a fresh release enumeration from the configured source."""
        match self.source:
            case ReleaseSourceKind.HTML:
                return PagedReleases(self.network_client, filter)
            case _:
                return GitTagReleases(self.git_client, filter)

    def releases(
        self,
        filter: ReleaseFilter = ReleaseFilter.STABLE,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[Version]:
        """Return up to `limit` releases accepted by the filter, newest first.

        Only as many pages as needed are fetched from paginated sources.

        Raises:
            GitError: If the git remote cannot be listed
            FetchError: If a releases page cannot be fetched
            VersionParseError: If a listed version cannot be parsed
        """
        logger.debug(f"Listing up to {limit} {filter} releases from {self.source}")
        return list(itertools.islice(self.open_releases(filter), limit))

    def latest_release(self) -> Version:
        """Return the newest stable release.

        Raises:
            NoReleasesError: If no stable release is available
        """
        latest: Optional[Version] = next(
            iter(self.open_releases(ReleaseFilter.STABLE)), None
        )
        if latest is None:
            raise NoReleasesError("No stable WasmEdge release is available")
        logger.info(f"Found latest release: {latest}")
        return latest

    def resolve_version(self, version_spec: str) -> Version:
        """Resolve 'latest' or an explicit version string to a Version.

        Raises:
            VersionParseError: If the explicit version is not valid semver
            NoReleasesError: If 'latest' was requested and none is available
        """
        if version_spec.strip().lower() == LATEST:
            return self.latest_release()
        return Version.parse(version_spec.strip())
