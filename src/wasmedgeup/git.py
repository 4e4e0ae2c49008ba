"""Git remote client implementation for wasmedgeup."""

import logging
import subprocess

from .common import DEFAULT_TIMEOUT, RefNamesList
from .exceptions import GitError

logger = logging.getLogger(__name__)


class GitClient:
    """Lists remote references with the git command line client."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def ls_remote(self, url: str) -> RefNamesList:
        """List the tag references advertised by a remote repository.

        Args:
            url: Remote repository URL

        Returns:
            Reference names in the order the remote advertised them

        Raises:
            GitError: If git is missing, times out, or cannot list the remote
        """
        cmd = ["git", "ls-remote", "--tags", url]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise GitError("git is not available") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"Timed out after {self.timeout}s listing references for {url}"
            ) from e

        if result.returncode != 0:
            raise GitError(
                f"Unable to list references for {url}: {result.stderr.strip()}"
            )

        # Each line is '<sha>\t<refname>'
        ref_names: RefNamesList = []
        for line in result.stdout.splitlines():
            _, sep, ref_name = line.partition("\t")
            if sep:
                ref_names.append(ref_name.strip())
        return ref_names
