"""Release asset name resolution for wasmedgeup."""

from __future__ import annotations

import dataclasses

from .common import DOWNLOAD_URL_TEMPLATE, RUNTIME_NAME
from .target import TargetArch, TargetOS
from .version import Version

# First release with Ubuntu aarch64 archives
UBUNTU_AARCH64_SINCE = Version(0, 13, 5)
# Last minor release built against manylinux2014 (any patch)
MANYLINUX2014_UNTIL = (0, 14)


@dataclasses.dataclass(frozen=True)
class AssetDescriptor:
    archive_name: str
    install_dir_name: str


def _manylinux_tag(version: Version) -> str:
    if (version.major, version.minor) <= MANYLINUX2014_UNTIL:
        return "manylinux2014"
    return "manylinux_2_28"


def get_archive_name(
    version: Version,
    target_os: TargetOS,
    target_arch: TargetArch,
    name: str = RUNTIME_NAME,
) -> str:
    """
    Get the release archive filename for a platform.

    Args:
        version: Release version
        target_os: Target operating system
        target_arch: Target CPU architecture
        name: Runtime name used as the filename prefix

    Returns:
        The archive filename (e.g., 'WasmEdge-0.14.1-manylinux2014_x86_64.tar.gz')
    """
    prefix = f"{name}-{version}"
    match (target_os, target_arch):
        case (TargetOS.UBUNTU, TargetArch.X86_64):
            return f"{prefix}-ubuntu20.04_x86_64.tar.gz"
        case (TargetOS.UBUNTU, TargetArch.AARCH64) if version >= UBUNTU_AARCH64_SINCE:
            return f"{prefix}-ubuntu20.04_aarch64.tar.gz"
        case (TargetOS.LINUX | TargetOS.UBUNTU, _):
            return f"{prefix}-{_manylinux_tag(version)}_{target_arch.value}.tar.gz"
        case (TargetOS.DARWIN, TargetArch.X86_64):
            return f"{prefix}-darwin_x86_64.tar.gz"
        case (TargetOS.DARWIN, TargetArch.AARCH64):
            return f"{prefix}-darwin_arm64.tar.gz"
        case (TargetOS.WINDOWS, _):
            return f"{prefix}-windows.zip"
    raise ValueError(f"No archive naming rule for {target_os}/{target_arch}")


def get_install_dir_name(
    version: Version, target_os: TargetOS, name: str = RUNTIME_NAME
) -> str:
    """Get the top-level directory name the release archive unpacks into."""
    match target_os:
        case TargetOS.LINUX | TargetOS.UBUNTU:
            suffix = "Linux"
        case TargetOS.DARWIN:
            suffix = "Darwin"
        case TargetOS.WINDOWS:
            suffix = "Windows"
        case _:
            raise ValueError(f"No install directory rule for {target_os}")
    return f"{name}-{version}-{suffix}"


def resolve_asset(
    version: Version,
    target_os: TargetOS,
    target_arch: TargetArch,
    name: str = RUNTIME_NAME,
) -> AssetDescriptor:
    """Resolve the archive and extracted directory names for a release."""
    return AssetDescriptor(
        archive_name=get_archive_name(version, target_os, target_arch, name),
        install_dir_name=get_install_dir_name(version, target_os, name),
    )


def get_download_url(version: Version, archive_name: str) -> str:
    """Get the GitHub release download URL for an archive."""
    return DOWNLOAD_URL_TEMPLATE.format(version=version, asset=archive_name)
