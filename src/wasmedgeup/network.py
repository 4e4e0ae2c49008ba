"""Network client implementation for wasmedgeup."""

import logging
import re
import subprocess
import urllib.parse
from pathlib import Path
from typing import Optional

from .common import DEFAULT_TIMEOUT, Headers, ProcessResult, QueryParams

logger = logging.getLogger(__name__)

# curl -f reports HTTP failures as "The requested URL returned error: 404"
_HTTP_ERROR_RE = re.compile(r"returned error:\s*(\d{3})")


def http_status(result: ProcessResult) -> Optional[int]:
    """Extract the HTTP error status curl reported for a failed request.

    Returns:
        The status code, or None if the failure was not an HTTP error
        (DNS, TLS, connection refused, timeout, ...)
    """
    stderr = result.stderr if isinstance(result.stderr, str) else ""
    match = _HTTP_ERROR_RE.search(stderr)
    if match:
        return int(match.group(1))
    return None


class NetworkClient:
    """Network operations implemented by shelling out to curl."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def _build_curl_cmd(self, base_cmd: list[str]) -> list[str]:
        """Build a curl command with common options."""
        cmd = ["curl"] + base_cmd
        cmd.extend(
            [
                "--compressed",
                "--max-time",
                str(self.timeout),
            ]
        )
        return cmd

    def _add_headers(self, base_cmd: list[str], headers: Optional[Headers]) -> None:
        if headers:
            for key, value in headers.items():
                base_cmd.extend(["-H", f"{key}: {value}"])

    def _run(self, cmd: list[str]) -> ProcessResult:
        logger.debug(f"Running: {' '.join(cmd)}")
        return subprocess.run(cmd, capture_output=True, text=True)

    def get(
        self,
        url: str,
        headers: Optional[Headers] = None,
        params: Optional[QueryParams] = None,
    ) -> ProcessResult:
        base_cmd = [
            "-L",  # Follow redirects
            "-s",  # Silent mode
            "-S",  # Show errors
            "-f",  # Fail on HTTP error
        ]
        self._add_headers(base_cmd, headers)

        if params:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urllib.parse.urlencode(params)}"

        base_cmd.append(url)
        return self._run(self._build_curl_cmd(base_cmd))

    def head(
        self,
        url: str,
        headers: Optional[Headers] = None,
        follow_redirects: bool = False,
    ) -> ProcessResult:
        base_cmd = [
            "-I",  # Header only
            "-s",
            "-S",
            "-f",
        ]
        if follow_redirects:
            base_cmd.insert(0, "-L")
        self._add_headers(base_cmd, headers)

        base_cmd.append(url)
        return self._run(self._build_curl_cmd(base_cmd))

    def download(
        self, url: str, output_path: Path, headers: Optional[Headers] = None
    ) -> ProcessResult:
        base_cmd = [
            "-L",
            "-s",
            "-S",
            "-f",
            "-o",
            str(output_path),
        ]
        self._add_headers(base_cmd, headers)

        base_cmd.append(url)
        return self._run(self._build_curl_cmd(base_cmd))
