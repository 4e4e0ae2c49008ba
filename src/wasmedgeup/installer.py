"""WasmEdge runtime installer for wasmedgeup."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .archive_extractor import ArchiveExtractor
from .asset_downloader import AssetDownloader
from .assets import AssetDescriptor, resolve_asset
from .common import (
    DEFAULT_INSTALL_DIR_NAME,
    DEFAULT_SOURCE,
    DEFAULT_TIMEOUT,
    INSTALL_DIR_ENV,
    FileSystemClientProtocol,
    GitClientProtocol,
    NetworkClientProtocol,
    ReleaseSourceKind,
)
from .exceptions import WasmEdgeUpError
from .filesystem import FileSystemClient
from .git import GitClient
from .network import NetworkClient
from .release_manager import ReleaseManager
from .target import TargetArch, TargetOS, detect_arch, detect_os
from .utils import archive_stem

logger = logging.getLogger(__name__)


def default_install_dir() -> Path:
    """Return the install location, honouring WASMEDGE_INSTALL_DIR."""
    override = os.environ.get(INSTALL_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_INSTALL_DIR_NAME


def default_tmp_dir() -> Path:
    return Path(tempfile.gettempdir())


class WasmEdgeInstaller:
    """Resolves, downloads, unpacks and installs WasmEdge releases."""

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        source: ReleaseSourceKind = DEFAULT_SOURCE,
        network_client: Optional[NetworkClientProtocol] = None,
        git_client: Optional[GitClientProtocol] = None,
        file_system_client: Optional[FileSystemClientProtocol] = None,
        show_progress: bool = True,
    ) -> None:
        self.timeout = timeout
        self.network_client = network_client or NetworkClient(timeout=timeout)
        self.git_client = git_client or GitClient(timeout=timeout)
        self.file_system_client = file_system_client or FileSystemClient()

        self.release_manager = ReleaseManager(
            self.network_client, self.git_client, source
        )
        self.asset_downloader = AssetDownloader(
            self.network_client, self.file_system_client, timeout, show_progress
        )
        self.archive_extractor = ArchiveExtractor(
            self.file_system_client, show_progress
        )

    def _unpack(self, archive_path: Path, asset: AssetDescriptor) -> Path:
        """Extract the archive next to itself and return the unpacked release root."""
        extract_dir = archive_path.parent / archive_stem(archive_path)
        if self.file_system_client.exists(extract_dir):
            logger.debug(f"Removing stale extraction directory: {extract_dir}")
            self.file_system_client.rmtree(extract_dir)

        self.archive_extractor.extract_archive(archive_path, extract_dir)

        unpacked = extract_dir / asset.install_dir_name
        if self.file_system_client.is_dir(unpacked):
            return unpacked
        # Some archives unpack flatly without a top-level directory
        logger.debug(f"{asset.install_dir_name} not found, using {extract_dir}")
        return extract_dir

    def install(
        self,
        version_spec: str,
        path: Optional[Path] = None,
        tmpdir: Optional[Path] = None,
        target_os: Optional[TargetOS] = None,
        target_arch: Optional[TargetArch] = None,
    ) -> Path:
        """Install a WasmEdge release.

        Args:
            version_spec: 'latest' or an explicit version such as '0.14.1'
            path: Install location (default: ~/.wasmedge or $WASMEDGE_INSTALL_DIR)
            tmpdir: Staging directory for the downloaded archive
            target_os: Target OS (default: detected from the host)
            target_arch: Target architecture (default: detected from the host)

        Returns:
            Path to the install location

        Raises:
            WasmEdgeUpError: If any step of the installation fails
        """
        version = self.release_manager.resolve_version(version_spec)
        target_os = target_os or detect_os()
        target_arch = target_arch or detect_arch()
        install_dir = path or default_install_dir()
        staging_dir = tmpdir or default_tmp_dir()

        asset = resolve_asset(version, target_os, target_arch)
        logger.info(
            f"Installing WasmEdge {version} for {target_os}/{target_arch} "
            f"into {install_dir}"
        )

        archive_path = self.asset_downloader.download_asset(
            version, asset.archive_name, staging_dir / asset.archive_name
        )
        unpacked = self._unpack(archive_path, asset)

        try:
            self.file_system_client.mkdir(install_dir, parents=True, exist_ok=True)
        except OSError as e:
            raise WasmEdgeUpError(f"Failed to create {install_dir}: {e}") from e

        copied = self.file_system_client.copy_tree(unpacked, install_dir)
        logger.info(f"Installed {copied} files into {install_dir}")
        return install_dir
