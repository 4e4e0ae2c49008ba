"""Archive extractor implementation for wasmedgeup."""

import logging
import subprocess
import tarfile
import zipfile
from pathlib import Path

from .common import FileSystemClientProtocol
from .exceptions import ExtractionError
from .spinner import Spinner
from .utils import format_bytes

logger = logging.getLogger(__name__)


class ArchiveExtractor:
    """Handles release archive extraction."""

    def __init__(
        self,
        file_system_client: FileSystemClientProtocol,
        show_progress: bool = True,
    ) -> None:
        self.file_system_client = file_system_client
        self.show_progress = show_progress

    def extract_archive(self, archive_path: Path, target_dir: Path) -> Path:
        """Extract a .tar.gz or .zip release archive into target_dir.

        Tar archives are extracted with tarfile first, falling back to the
        system tar command if tarfile cannot read them.

        Returns:
            Path to the target directory where the archive was extracted

        Raises:
            ExtractionError: If extraction fails
        """
        self.file_system_client.mkdir(target_dir, parents=True, exist_ok=True)

        if archive_path.name.endswith(".zip"):
            return self.extract_with_zipfile(archive_path, target_dir)

        try:
            return self.extract_with_tarfile(archive_path, target_dir)
        except ExtractionError as e:
            logger.debug(f"tarfile extraction failed: {e}, falling back to system tar")
            return self._extract_with_system_tar(archive_path, target_dir)

    def extract_with_tarfile(self, archive_path: Path, target_dir: Path) -> Path:
        """Extract archive using the tarfile library."""
        try:
            with tarfile.open(archive_path, "r:*") as tar:
                members = tar.getmembers()
                total_size = sum(m.size for m in members)
                logger.info(
                    f"Archive contains {len(members)} files, "
                    f"total size: {format_bytes(total_size)}"
                )

                with Spinner(
                    desc=f"Extracting {archive_path.name}",
                    total=len(members),
                    disable=not self.show_progress,
                    fps_limit=30.0,
                ) as spinner:
                    for member in members:
                        tar.extract(member, path=target_dir, filter="data")
                        spinner.update(1)
                    spinner.finish()
        except (tarfile.TarError, OSError) as e:
            raise ExtractionError(f"Failed to extract archive {archive_path}: {e}")

        logger.info(f"Extracted {archive_path} to {target_dir}")
        return target_dir

    def extract_with_zipfile(self, archive_path: Path, target_dir: Path) -> Path:
        """Extract a zip archive using the zipfile library."""
        try:
            with zipfile.ZipFile(archive_path) as archive:
                members = archive.infolist()
                with Spinner(
                    desc=f"Extracting {archive_path.name}",
                    total=len(members),
                    disable=not self.show_progress,
                    fps_limit=30.0,
                ) as spinner:
                    for member in members:
                        archive.extract(member, path=target_dir)
                        spinner.update(1)
                    spinner.finish()
        except (zipfile.BadZipFile, OSError) as e:
            raise ExtractionError(f"Failed to extract archive {archive_path}: {e}")

        logger.info(f"Extracted {archive_path} to {target_dir}")
        return target_dir

    def _extract_with_system_tar(self, archive_path: Path, target_dir: Path) -> Path:
        """Extract archive using the system tar command."""
        cmd = ["tar", "-xf", str(archive_path), "-C", str(target_dir)]

        try:
            result = subprocess.run(
                cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
            )
        except FileNotFoundError as e:
            raise ExtractionError(f"Failed to extract archive {archive_path}: {e}")

        if result.returncode != 0:
            raise ExtractionError(
                f"Failed to extract archive {archive_path}: {result.stderr}"
            )
        return target_dir
