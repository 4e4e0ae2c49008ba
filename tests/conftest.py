"""
Shared pytest configuration and fixtures for wasmedgeup tests.
"""

import subprocess
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Optional

import pytest

# Add src to path for testing
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir / "src"))

from wasmedgeup.common import GitClientProtocol, NetworkClientProtocol  # noqa: E402

NOT_FOUND_STDERR = "curl: (22) The requested URL returned error: 404"


def make_result(
    returncode: int = 0, stdout: str = "", stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    """Build a completed curl/git process result."""
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr
    )


def render_release_page(tags: list[str], repeat: int = 1) -> str:
    """Render a minimal GitHub releases listing page linking each tag.

    Args:
        tags: Tag names in the order the page lists them
        repeat: How many links point at each release (GitHub uses several)
    """
    entries = []
    for tag in tags:
        links = "\n".join(
            f'    <a href="/WasmEdge/WasmEdge/releases/tag/{tag}">{tag}</a>'
            for _ in range(repeat)
        )
        entries.append(f'  <section class="release">\n{links}\n  </section>')
    body = "\n".join(entries)
    return f"<html>\n<body>\n{body}\n</body>\n</html>\n"


@pytest.fixture
def not_found_result():
    """A curl result for an HTTP 404 response."""
    return make_result(returncode=22, stderr=NOT_FOUND_STDERR)


@pytest.fixture
def mock_subprocess_success(mocker):
    """Mock successful subprocess.run calls."""
    return mocker.patch("subprocess.run", return_value=make_result())


@pytest.fixture
def mock_network_client(mocker):
    """Create a mocked NetworkClientProtocol instance."""
    mock = mocker.MagicMock(spec=NetworkClientProtocol)
    mock.timeout = 30
    return mock


@pytest.fixture
def mock_git_client(mocker):
    """Create a mocked GitClientProtocol instance."""
    mock = mocker.MagicMock(spec=GitClientProtocol)
    mock.timeout = 30
    return mock


@pytest.fixture
def paged_network_client(mock_network_client):
    """
    Configure the mocked network client to serve release listing pages.

    Returns a function taking the page bodies (page 1 first); any page past
    the last one answers with HTTP 404.
    """

    def _serve(pages: list[str]):
        def get(url, headers=None, params=None):
            page = (params or {}).get("page", 1)
            if 1 <= page <= len(pages):
                return make_result(stdout=pages[page - 1])
            return make_result(returncode=22, stderr=NOT_FOUND_STDERR)

        mock_network_client.get.side_effect = get
        return mock_network_client

    return _serve


@pytest.fixture
def tag_refs():
    """ls-remote reference names as advertised by the WasmEdge repository."""
    return [
        "HEAD",
        "refs/heads/master",
        "refs/tags/0.14.0",
        "refs/tags/0.14.0^{}",
        "refs/tags/0.14.1-rc.2",
        "refs/tags/0.14.1-rc.2^{}",
        "refs/tags/0.14.1",
        "refs/tags/0.14.1^{}",
        "refs/tags/0.15.0-alpha.1",
        "refs/tags/0.15.0-alpha.1^{}",
        "refs/tags/proposal/tail-call",
        "refs/tags/v0.1.0",
        "refs/pull/1/head",
    ]


@pytest.fixture
def create_test_archive() -> Callable[..., Path]:
    """Helper fixture to create real archive files for testing."""

    def _create_test_archive(
        archive_path: Path, files: Optional[dict[str, bytes]] = None
    ) -> Path:
        if files is None:
            files = {"test.txt": b"test content"}

        if archive_path.name.endswith(".zip"):
            with zipfile.ZipFile(archive_path, "w") as archive:
                for file_name, content in files.items():
                    archive.writestr(file_name, content)
        else:
            src_dir = archive_path.parent / f"{archive_path.name}.src"
            with tarfile.open(archive_path, "w:gz") as tar:
                for file_name, content in files.items():
                    file_path = src_dir / file_name
                    file_path.parent.mkdir(parents=True, exist_ok=True)
                    file_path.write_bytes(content)
                    tar.add(file_path, arcname=file_name)

        return archive_path

    return _create_test_archive
