"""Exception classes for wasmedgeup."""


class WasmEdgeUpError(Exception):
    """Base exception for wasmedgeup operations."""


class NetworkError(WasmEdgeUpError):
    """Raised when network operations fail."""


class FetchError(NetworkError):
    """Raised when a releases listing page cannot be fetched."""


class GitError(WasmEdgeUpError):
    """Raised when the remote reference list cannot be retrieved."""


class VersionParseError(WasmEdgeUpError, ValueError):
    """Raised when text is not a valid semantic version."""


class NoReleasesError(WasmEdgeUpError):
    """Raised when no release matches the request."""


class UnsupportedPlatformError(WasmEdgeUpError):
    """Raised when the host OS or architecture has no WasmEdge build."""


class ExtractionError(WasmEdgeUpError):
    """Raised when archive extraction fails."""
