"""CLI implementation for wasmedgeup."""

import argparse
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from .__version__ import __version__
from .common import DEFAULT_LIST_LIMIT, DEFAULT_SOURCE, ReleaseSourceKind
from .exceptions import WasmEdgeUpError
from .installer import WasmEdgeInstaller
from .target import TargetArch, TargetOS
from .version import ReleaseFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _enum_arg(convert: Callable[[str], T], kind: str) -> Callable[[str], T]:
    """Wrap an alias-aware enum converter as an argparse type."""

    def parse(value: str) -> T:
        try:
            return convert(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid {kind}: '{value}'") from None

    parse.__name__ = kind
    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wasmedgeup",
        description=(
            "WasmEdge runtime installer capable of OS/architecture detection"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Enable verbose output (repeat for more detail)",
    )
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Disable progress output",
    )
    parser.add_argument(
        "--source",
        choices=[kind.value for kind in ReleaseSourceKind],
        default=DEFAULT_SOURCE.value,
        help=(
            "Where to discover releases: git tag references or the GitHub "
            f"releases page (default: {DEFAULT_SOURCE.value})"
        ),
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    install = subparsers.add_parser(
        "install", help="Install a specified WasmEdge runtime version"
    )
    install.add_argument(
        "version",
        help="WasmEdge version to install, e.g. 'latest', '0.14.1', '0.14.1-rc.1'",
    )
    install.add_argument(
        "--path",
        "-p",
        type=Path,
        help="Install location (default: ~/.wasmedge, or $WASMEDGE_INSTALL_DIR)",
    )
    install.add_argument(
        "--tmpdir",
        "-t",
        type=Path,
        help="Directory for staging downloaded assets (default: system temp dir)",
    )
    install.add_argument(
        "--os",
        "-o",
        dest="target_os",
        type=_enum_arg(TargetOS.from_string, "os"),
        help="Target OS: linux, ubuntu, darwin (macos), windows (default: detected)",
    )
    install.add_argument(
        "--arch",
        "-a",
        dest="target_arch",
        type=_enum_arg(TargetArch.from_string, "arch"),
        help="Target architecture: x86_64 (amd64, x64), aarch64 (arm64) "
        "(default: detected)",
    )

    list_parser = subparsers.add_parser(
        "list", help="List available WasmEdge releases"
    )
    list_parser.add_argument(
        "--all",
        "-a",
        action="store_true",
        help="Include pre-release versions (alpha, beta, rc)",
    )
    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments, printing help when no command is given."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        raise SystemExit(2)
    return args


def setup_logging(verbose: int = 0, quiet: bool = False) -> None:
    """Set up logging based on verbosity flags."""
    if quiet:
        log_level = logging.WARNING
    elif verbose >= 1:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(level=log_level, format="%(message)s")
    logging.getLogger().setLevel(log_level)

    if verbose:
        logger.debug("Debug logging enabled")


def _handle_list_operation(installer: WasmEdgeInstaller, include_all: bool) -> None:
    """Print up to ten releases, marking the latest stable one."""
    release_filter = ReleaseFilter.ALL if include_all else ReleaseFilter.STABLE
    manager = installer.release_manager

    releases = manager.releases(release_filter, DEFAULT_LIST_LIMIT)
    if release_filter is ReleaseFilter.STABLE and releases:
        latest = releases[0]
    else:
        latest = manager.latest_release()

    for release in releases:
        if release == latest:
            print(f"{release} <- latest")
        else:
            print(release)


def _handle_install_operation(
    installer: WasmEdgeInstaller, args: argparse.Namespace
) -> None:
    install_dir = installer.install(
        args.version,
        path=args.path.expanduser() if args.path else None,
        tmpdir=args.tmpdir.expanduser() if args.tmpdir else None,
        target_os=args.target_os,
        target_arch=args.target_arch,
    )
    print(f"WasmEdge installed to {install_dir}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        installer = WasmEdgeInstaller(
            source=ReleaseSourceKind(args.source),
            show_progress=not args.quiet,
        )

        match args.command:
            case "list":
                _handle_list_operation(installer, args.all)
            case "install":
                _handle_install_operation(installer, args)

    except WasmEdgeUpError as e:
        print(f"Error: {e}")
        raise SystemExit(1) from e
