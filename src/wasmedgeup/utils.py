"""Utility functions for wasmedgeup."""

from pathlib import Path

ARCHIVE_SUFFIXES = (".tar.gz", ".tar.xz", ".tgz", ".zip")


def format_bytes(bytes_value: int) -> str:
    """Format bytes into a human-readable string."""
    if bytes_value < 1024:
        return f"{bytes_value} B"
    elif bytes_value < 1024 * 1024:
        return f"{bytes_value / 1024:.2f} KB"
    elif bytes_value < 1024 * 1024 * 1024:
        return f"{bytes_value / (1024 * 1024):.2f} MB"
    else:
        return f"{bytes_value / (1024 * 1024 * 1024):.2f} GB"


def archive_stem(archive_path: Path) -> str:
    """Return the archive filename without its archive suffix.

    e.g. 'WasmEdge-0.14.1-darwin_arm64.tar.gz' -> 'WasmEdge-0.14.1-darwin_arm64'
    """
    name = archive_path.name
    for suffix in ARCHIVE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return archive_path.stem
