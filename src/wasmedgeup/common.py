"""Common types, protocols, and constants for wasmedgeup."""

from __future__ import annotations

import re
import subprocess
from enum import StrEnum
from pathlib import Path
from typing import Iterator, Optional, Protocol

# Type aliases for better readability
Headers = dict[str, str]
QueryParams = dict[str, str | int]
ProcessResult = subprocess.CompletedProcess[str]
RefNamesList = list[str]


class ReleaseSourceKind(StrEnum):
    GIT = "git"
    HTML = "html"


class NetworkClientProtocol(Protocol):
    """Protocol for HTTP operations with timeout support.

    Implementations return the completed curl process so that callers can
    inspect the exit status and the HTTP status reported on failure.

    Attributes:
        timeout: Maximum timeout in seconds for network operations
    """

    timeout: int

    def get(
        self,
        url: str,
        headers: Optional[Headers] = None,
        params: Optional[QueryParams] = None,
    ) -> ProcessResult:
        """Perform HTTP GET request.

        Args:
            url: URL to request
            headers: Optional request headers as key-value pairs
            params: Optional query parameters appended to the URL

        Returns:
            ProcessResult containing stdout, stderr, and returncode
        """
        ...

    def head(
        self,
        url: str,
        headers: Optional[Headers] = None,
        follow_redirects: bool = False,
    ) -> ProcessResult:
        """Perform HTTP HEAD request to retrieve headers only."""
        ...

    def download(
        self, url: str, output_path: Path, headers: Optional[Headers] = None
    ) -> ProcessResult:
        """Download file from URL to specified path."""
        ...


class GitClientProtocol(Protocol):
    """Protocol for listing references on a remote git repository."""

    timeout: int

    def ls_remote(self, url: str) -> RefNamesList:
        """List the reference names advertised by a remote.

        Args:
            url: Remote repository URL

        Returns:
            Reference names such as 'refs/tags/0.14.1' and 'refs/tags/0.14.1^{}'

        Raises:
            GitError: If the remote cannot be reached or listed
        """
        ...


class FileSystemClientProtocol(Protocol):
    """Protocol for the filesystem operations used while installing."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def mkdir(
        self, path: Path, parents: bool = False, exist_ok: bool = False
    ) -> None: ...

    def size(self, path: Path) -> int: ...

    def iterdir(self, path: Path) -> Iterator[Path]: ...

    def rmtree(self, path: Path) -> None: ...

    def copy_tree(self, from_dir: Path, to_dir: Path) -> int: ...


# Constants
DEFAULT_TIMEOUT = 30
DEFAULT_LIST_LIMIT = 10
DEFAULT_SOURCE: ReleaseSourceKind = ReleaseSourceKind.GIT

RUNTIME_NAME = "WasmEdge"
WASMEDGE_REPO = "WasmEdge/WasmEdge"
WASMEDGE_GIT_URL = f"https://github.com/{WASMEDGE_REPO}.git"
RELEASES_URL = f"https://github.com/{WASMEDGE_REPO}/releases"
DOWNLOAD_URL_TEMPLATE = (
    "https://github.com/" + WASMEDGE_REPO + "/releases/download/{version}/{asset}"
)

INSTALL_DIR_ENV = "WASMEDGE_INSTALL_DIR"
DEFAULT_INSTALL_DIR_NAME = ".wasmedge"

TAG_REF_PREFIX = "refs/tags/"
PEELED_REF_SUFFIX = "^{}"

# Only the leading well-formed span after 'releases/tag/' is captured; an
# optional prerelease is a single alphabetic identifier followed by a number.
RELEASE_TAG_REGEX: re.Pattern[str] = re.compile(
    r"releases/tag/(?P<version>[0-9]+\.[0-9]+\.[0-9]+(?:-[A-Za-z]+\.[0-9]+)?)"
)
