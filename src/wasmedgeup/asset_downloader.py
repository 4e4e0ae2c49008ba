"""Asset downloader implementation for wasmedgeup."""

import logging
import re
import urllib.error
import urllib.request
from pathlib import Path
from typing import Optional

from .assets import get_download_url
from .common import (
    DEFAULT_TIMEOUT,
    FileSystemClientProtocol,
    Headers,
    NetworkClientProtocol,
)
from .exceptions import NetworkError
from .network import http_status
from .spinner import Spinner
from .version import Version

logger = logging.getLogger(__name__)

USER_AGENT = "wasmedgeup"
CHUNK_SIZE = 8192


class AssetDownloader:
    """Manages release asset downloads."""

    def __init__(
        self,
        network_client: NetworkClientProtocol,
        file_system_client: FileSystemClientProtocol,
        timeout: int = DEFAULT_TIMEOUT,
        show_progress: bool = True,
    ) -> None:
        self.network_client = network_client
        self.file_system_client = file_system_client
        self.timeout = timeout
        self.show_progress = show_progress

    def _extract_size_from_headers(self, response_text: str) -> Optional[int]:
        """Extract content-length from response headers.

        When redirects are followed curl prints one header block per hop, so
        the last positive content-length wins.
        """
        sizes = [
            int(value)
            for value in re.findall(r"(?im)^content-length:\s*(\d+)", response_text)
        ]
        sizes = [size for size in sizes if size > 0]
        return sizes[-1] if sizes else None

    def get_remote_asset_size(self, url: str, asset_name: str) -> int:
        """Get the size of a remote asset using a HEAD request.

        Raises:
            NetworkError: If the asset is missing or its size is unknown
        """
        result = self.network_client.head(url, follow_redirects=True)
        if result.returncode != 0:
            if http_status(result) == 404:
                raise NetworkError(f"Asset not found: {asset_name}")
            raise NetworkError(
                f"Failed to get remote asset size for {asset_name}: {result.stderr}"
            )

        size = self._extract_size_from_headers(result.stdout)
        if size is None:
            logger.debug(f"Response headers received: {result.stdout}")
            raise NetworkError(
                f"Could not determine size of remote asset: {asset_name}"
            )
        logger.debug(f"Remote asset size: {size} bytes")
        return size

    def download_with_spinner(
        self, url: str, output_path: Path, headers: Optional[Headers] = None
    ) -> None:
        """Stream a file to disk with a progress spinner using urllib."""
        req = urllib.request.Request(url, headers=headers or {})

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                total_size = int(response.headers.get("Content-Length", 0))

                with open(output_path, "wb") as f:
                    with Spinner(
                        desc=f"Downloading {output_path.name}",
                        total=total_size or None,
                        unit="B",
                        disable=not self.show_progress,
                        fps_limit=30.0,
                    ) as spinner:
                        while True:
                            chunk = response.read(CHUNK_SIZE)
                            if not chunk:
                                break
                            f.write(chunk)
                            spinner.update(len(chunk))
                        spinner.finish()
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise NetworkError(f"Asset not found: {output_path.name}") from e
            raise NetworkError(f"Failed to download {url}: {e}") from e
        except (urllib.error.URLError, OSError) as e:
            raise NetworkError(f"Failed to download {url}: {e}") from e

    def download_asset(self, version: Version, asset_name: str, out_path: Path) -> Path:
        """Download a release asset, skipping it if an identical copy exists.

        Args:
            version: Release version the asset belongs to
            asset_name: Archive filename to download
            out_path: Path where the asset will be saved

        Returns:
            Path to the downloaded file

        Raises:
            NetworkError: If the download fails or the asset does not exist
        """
        url = get_download_url(version, asset_name)
        logger.info(f"Downloading {asset_name} from {url}")

        if self.file_system_client.exists(out_path):
            local_size = self.file_system_client.size(out_path)
            remote_size = self.get_remote_asset_size(url, asset_name)
            if local_size == remote_size:
                logger.info(
                    f"Local asset {out_path} already exists with matching size "
                    f"({local_size} bytes), skipping download"
                )
                return out_path
            logger.info(
                f"Local size ({local_size} bytes) differs from remote size "
                f"({remote_size} bytes), downloading again"
            )

        self.file_system_client.mkdir(out_path.parent, parents=True, exist_ok=True)
        headers = {"User-Agent": USER_AGENT}

        try:
            self.download_with_spinner(url, out_path, headers)
        except NetworkError as e:
            if "not found" in str(e).lower():
                raise
            logger.warning(f"Streaming download failed: {e}, falling back to curl")
            result = self.network_client.download(url, out_path, headers)
            if result.returncode != 0:
                if http_status(result) == 404:
                    raise NetworkError(f"Asset not found: {asset_name}") from e
                raise NetworkError(
                    f"Failed to download {asset_name}: {result.stderr}"
                ) from e

        logger.info(f"Downloaded asset to: {out_path}")
        return out_path
