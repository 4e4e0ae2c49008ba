"""Target platform detection for wasmedgeup."""

from __future__ import annotations

import logging
import platform
from enum import StrEnum
from pathlib import Path

from .exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


class TargetOS(StrEnum):
    LINUX = "linux"
    UBUNTU = "ubuntu"
    DARWIN = "darwin"
    WINDOWS = "windows"

    @classmethod
    def from_string(cls, value: str) -> TargetOS:
        """Convert a user supplied OS name or alias to TargetOS.

        Raises:
            ValueError: If the name is not a known OS or alias
        """
        name = value.strip().lower()
        name = _OS_ALIASES.get(name, name)
        return cls(name)


class TargetArch(StrEnum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"

    @classmethod
    def from_string(cls, value: str) -> TargetArch:
        """Convert a user supplied architecture name or alias to TargetArch.

        Raises:
            ValueError: If the name is not a known architecture or alias
        """
        name = value.strip().lower()
        name = _ARCH_ALIASES.get(name, name)
        return cls(name)


_OS_ALIASES: dict[str, str] = {
    "macos": TargetOS.DARWIN,
    "mac": TargetOS.DARWIN,
    "osx": TargetOS.DARWIN,
    "win": TargetOS.WINDOWS,
    "win32": TargetOS.WINDOWS,
}

_ARCH_ALIASES: dict[str, str] = {
    "amd64": TargetArch.X86_64,
    "x64": TargetArch.X86_64,
    "x86-64": TargetArch.X86_64,
    "arm64": TargetArch.AARCH64,
}


def _read_os_release(path: Path = OS_RELEASE_PATH) -> dict[str, str]:
    """Parse os-release KEY=value lines into a dictionary."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return {}

    fields: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        fields[key] = value.strip().strip("\"'")
    return fields


def _is_ubuntu(os_release: dict[str, str]) -> bool:
    if os_release.get("ID", "").lower() == "ubuntu":
        return True
    return "ubuntu" in os_release.get("ID_LIKE", "").lower().split()


def detect_os(os_release_path: Path = OS_RELEASE_PATH) -> TargetOS:
    """Detect the host operating system.

    Linux hosts that identify as Ubuntu (or an Ubuntu derivative) are reported
    as TargetOS.UBUNTU so that Ubuntu specific builds can be selected.

    Raises:
        UnsupportedPlatformError: If the host OS has no WasmEdge build
    """
    system = platform.system()
    match system:
        case "Linux":
            if _is_ubuntu(_read_os_release(os_release_path)):
                return TargetOS.UBUNTU
            return TargetOS.LINUX
        case "Darwin":
            return TargetOS.DARWIN
        case "Windows":
            return TargetOS.WINDOWS
        case _:
            raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def detect_arch() -> TargetArch:
    """Detect the host CPU architecture.

    Raises:
        UnsupportedPlatformError: If the machine type has no WasmEdge build
    """
    machine = platform.machine()
    try:
        return TargetArch.from_string(machine)
    except ValueError:
        raise UnsupportedPlatformError(
            f"Unsupported architecture: {machine or 'unknown'}"
        ) from None
