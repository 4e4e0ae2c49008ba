"""
Tests for the wasmedgeup exception hierarchy.
"""

import pytest

from wasmedgeup.exceptions import (
    ExtractionError,
    FetchError,
    GitError,
    NetworkError,
    NoReleasesError,
    UnsupportedPlatformError,
    VersionParseError,
    WasmEdgeUpError,
)


class TestExceptionHierarchy:
    """Every error the CLI reports derives from WasmEdgeUpError."""

    @pytest.mark.parametrize(
        "error_cls",
        [
            NetworkError,
            FetchError,
            GitError,
            VersionParseError,
            NoReleasesError,
            UnsupportedPlatformError,
            ExtractionError,
        ],
    )
    def test_derives_from_base(self, error_cls):
        assert issubclass(error_cls, WasmEdgeUpError)

    def test_fetch_error_is_network_error(self):
        with pytest.raises(NetworkError, match="page 3"):
            raise FetchError("Failed to fetch releases page 3: 502")

    def test_version_parse_error_is_value_error(self):
        assert issubclass(VersionParseError, ValueError)

    def test_message_preserved(self):
        error = GitError("git is not available")
        assert str(error) == "git is not available"
