"""File system client implementation for wasmedgeup."""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class FileSystemClient:
    """Filesystem operations using standard pathlib and shutil calls."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def size(self, path: Path) -> int:
        return path.stat().st_size

    def iterdir(self, path: Path) -> Iterator[Path]:
        return path.iterdir()

    def rmtree(self, path: Path) -> None:
        shutil.rmtree(path)

    def copy_tree(self, from_dir: Path, to_dir: Path) -> int:
        """Copy every regular file under from_dir to its relative path under to_dir.

        Existing files are overwritten. A file that cannot be copied is logged
        and skipped so that one bad entry does not abort the whole install.

        Returns:
            Number of files copied
        """
        copied = 0
        for root, _dirs, files in os.walk(from_dir):
            for filename in files:
                source = Path(root) / filename
                if not source.is_file():
                    continue
                target = to_dir / source.relative_to(from_dir)
                logger.debug(f"Copying {source} -> {target}")

                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.warning(f"Failed to create directory {target.parent}: {e}")
                    continue

                try:
                    shutil.copy2(source, target)
                except OSError as e:
                    logger.warning(f"Failed to copy {source} to {target}: {e}")
                    continue
                copied += 1
        return copied
